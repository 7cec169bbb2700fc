"""Pruebas del dashboard."""

from services import supabase_service
from services.cache_service import build_cache_key


def test_stats(fake_supabase, api_client, empleado, pedido):
    fake_supabase.seed('pago', {'id_pago': 'p1', 'monto': 10.5}, {'id_pago': 'p2', 'monto': '4.5'})
    fake_supabase.seed('asignacion', {'id_asignacion': 'a1'})

    response = api_client.get('/api/dashboard/stats/')

    assert response.status_code == 200
    assert response.data == {
        'totalPedidos': 1,
        'totalUsuarios': 2,
        'totalAsignaciones': 1,
        'totalPagos': 2,
        'totalRegistrosTrabajo': 0,
        'montoTotalPagos': 15,
    }


def test_stats_error(fake_supabase, api_client):
    fake_supabase.fail('pago', 'select')

    response = api_client.get('/api/dashboard/stats/')

    assert response.status_code == 500


def test_graficos(fake_supabase, api_client, empleado):
    fake_supabase.seed('usuario', {'id_usuario': 'x', 'rol': None})
    fake_supabase.seed('pedido', *[
        {'id_pedido': f'p{day}', 'fecha': f'2026-01-{day:02d}T10:00:00-05:00'} for day in range(1, 10)
    ])
    fake_supabase.seed('pedido', {'id_pedido': 'p9b', 'fecha': '2026-01-09T18:00:00-05:00'})
    fake_supabase.seed('pago', *[
        {'id_pago': f'g{day}', 'monto': day, 'fecha_pago': f'2026-02-{day:02d}'} for day in range(12, 0, -1)
    ])

    response = api_client.get('/api/dashboard/graficos/')
    data = response.data

    assert [row['fecha'] for row in data['pedidos_por_dia']] == [f'2026-01-{d:02d}' for d in range(3, 10)]
    assert data['pedidos_por_dia'][-1]['pedidos'] == 2
    assert {row['rol']: row['total'] for row in data['usuarios_por_rol']} == {
        'admin': 1, 'empleado': 1, 'Sin Rol': 1
    }
    assert len(data['pagos_por_dia']) == 10
    assert data['pagos_por_dia'][0] == {'fecha': '2026-02-03', 'monto': 3}
    assert data['pagos_por_dia'][-1] == {'fecha': '2026-02-12', 'monto': 12}


def test_clear_cache_by_table(fake_supabase, api_client):
    cache = supabase_service.get_cache()
    cache.set(build_cache_key('pedido', {}), [])
    cache.set(build_cache_key('pago', {}), [])

    response = api_client.post('/api/dashboard/cache/clear/', {'table': 'pedido'}, format='json')

    assert response.data['cleared'] == 1
    assert len(cache) == 1

    response = api_client.post('/api/dashboard/cache/clear/', {}, format='json')

    assert response.data['cleared'] == 1
    assert len(cache) == 0
