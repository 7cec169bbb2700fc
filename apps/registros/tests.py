"""Pruebas de registros de trabajo."""

import pytest


@pytest.fixture
def asignacion(fake_supabase, empleado, operacion):
    row = {
        'id_asignacion': 'a1',
        'id_usuario': empleado['id_usuario'],
        'id_operacion_pedido': 'OPP001',
        'id_pedido': 'ped-1',
        'cantidad_asignada': 20,
    }
    fake_supabase.seed('asignacion', row)
    return row


class TestRegistros:

    def test_create(self, fake_supabase, api_client, asignacion):
        response = api_client.post('/api/registros/', {
            'id_asignacion': 'a1',
            'cantidad_trabajada': 5,
            'pago': '7.50',
        }, format='json')

        assert response.status_code == 201
        assert response.data['pago'] == 7.5
        assert response.data['id_registro']
        assert response.data['fecha_registro']

    def test_cannot_exceed_assigned(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1', 'cantidad_trabajada': 15})

        response = api_client.post('/api/registros/', {
            'id_asignacion': 'a1',
            'cantidad_trabajada': 6,
        }, format='json')

        assert response.status_code == 400
        assert response.data['errors']['cantidad_trabajada'] == ['Excede la cantidad asignada. Pendiente: 5']

    def test_update_excludes_itself(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1', 'cantidad_trabajada': 15})

        response = api_client.patch('/api/registros/r1/', {'cantidad_trabajada': 20}, format='json')

        assert response.status_code == 200

    @pytest.mark.parametrize('body', [
        {'id_asignacion': 'a1', 'cantidad_trabajada': 0},
        {'id_asignacion': 'a1', 'cantidad_trabajada': 1, 'pago': -1},
        {'id_asignacion': 'no-existe', 'cantidad_trabajada': 1},
    ])
    def test_invalid(self, api_client, asignacion, body):
        response = api_client.post('/api/registros/', body, format='json')

        assert response.status_code == 400


class TestAgrupados:

    def test_groups_by_assignment(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed(
            'registro_trabajo',
            {'id_registro': 'r1', 'id_asignacion': 'a1', 'cantidad_trabajada': 5, 'pago': 10,
             'fecha_registro': '2026-01-12T08:00:00-05:00'},
            {'id_registro': 'r2', 'id_asignacion': 'a1', 'cantidad_trabajada': 3, 'pago': 6.5,
             'fecha_registro': '2026-01-14T08:00:00-05:00'},
            {'id_registro': 'r3', 'id_asignacion': 'huérfana', 'cantidad_trabajada': 1, 'pago': 0,
             'fecha_registro': '2026-01-13T08:00:00-05:00'},
        )

        response = api_client.get('/api/registros/agrupados/')
        rows = {row['id_asignacion']: row for row in response.data}

        assert rows['a1']['cantidad_trabajada'] == 8
        assert rows['a1']['pago'] == 16.5
        assert rows['a1']['fecha_registro'] == '2026-01-14T08:00:00-05:00'
        assert rows['a1']['nombre_usuario'] == 'Juan Perez'
        assert rows['a1']['codigo_pedido'] == 'P-100-3'
        assert rows['a1']['nombre_operacion'] == 'Costura'
        assert rows['a1']['cantidad_asignada'] == 20

        assert rows['huérfana']['nombre_usuario'] == '-'
        assert rows['huérfana']['codigo_pedido'] == '-'
        assert rows['huérfana']['cantidad_asignada'] == 0

    def test_missing_user(self, fake_supabase, api_client, operacion):
        fake_supabase.seed('asignacion', {'id_asignacion': 'a9', 'id_usuario': 'borrado',
                                          'id_operacion_pedido': 'OPP001', 'id_pedido': 'ped-1',
                                          'cantidad_asignada': 4})
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a9',
                                                'cantidad_trabajada': 1, 'fecha_registro': '2026-01-12'})

        response = api_client.get('/api/registros/agrupados/')

        assert response.data[0]['nombre_usuario'] == 'Usuario No Encontrado'

    def test_filter_by_pedido(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1',
                                                'cantidad_trabajada': 1, 'fecha_registro': '2026-01-12'})

        assert len(api_client.get('/api/registros/agrupados/', {'id_pedido': 'ped-1'}).data) == 1
        assert api_client.get('/api/registros/agrupados/', {'id_pedido': 'otro'}).data == []

    def test_lookup_failure_is_error(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1',
                                                'cantidad_trabajada': 1, 'fecha_registro': '2026-01-12'})
        fake_supabase.fail('pedido', 'select')

        response = api_client.get('/api/registros/agrupados/', {'id_pedido': 'ped-1'})

        assert response.status_code == 500

    def test_pedido_without_codigo(self, fake_supabase, api_client, asignacion):
        fake_supabase.rows('pedido')[0]['codigo'] = None
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1',
                                                'cantidad_trabajada': 1, 'fecha_registro': '2026-01-12'})

        response = api_client.get('/api/registros/agrupados/')

        assert response.data[0]['codigo_pedido'] == '-3'
