"""Pruebas de pedidos y de la cantidad disponible."""

import pytest

from apps.pedidos import services


def asignacion(id_asignacion, cantidad, id_operacion='OPP001', id_usuario='u1', id_pedido='ped-1'):
    return {
        'id_asignacion': id_asignacion,
        'id_usuario': id_usuario,
        'id_operacion_pedido': id_operacion,
        'id_pedido': id_pedido,
        'cantidad_asignada': cantidad,
        'fecha_asignacion': '2026-01-11T10:00:00-05:00',
    }


class TestCantidadDisponible:

    def test_available_quantity(self, fake_supabase, pedido, operacion):
        fake_supabase.seed('operaciones_pedido', {'id_operacion_pedido': 'OPP002', 'id_pedido': 'ped-1'})
        fake_supabase.seed('operaciones_pedido', {'id_operacion_pedido': 'OPP009', 'id_pedido': 'otro'})
        fake_supabase.seed(
            'asignacion',
            asignacion('a1', 30),
            asignacion('a2', 25, id_operacion='OPP002'),
            asignacion('a3', 500, id_operacion='OPP009', id_pedido='otro'),
        )

        assert services.compute_available_quantity(pedido) == 45
        assert services.compute_available_quantity(pedido, exclude_assignment_id='a1') == 75
        assert services.assigned_total_by_operation('ped-1') == {'OPP001': 30, 'OPP002': 25}

    def test_never_negative(self, fake_supabase, pedido, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 150))

        assert services.compute_available_quantity(pedido) == 0

    def test_non_numeric_quantities_count_as_zero(self, fake_supabase, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 'abc'), asignacion('a2', None))

        assert services.compute_available_quantity({'id_pedido': 'ped-1', 'cantidad_total': None}) == 0
        assert services.compute_available_quantity({'id_pedido': 'ped-1', 'cantidad_total': '40'}) == 40

    def test_check_assignment_fits(self, fake_supabase, pedido, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 60))

        assert services.check_assignment_fits(pedido, 40) is None
        assert services.check_assignment_fits(pedido, 41) == 'Excede el total disponible del pedido. Disponible: 40'
        assert services.check_assignment_fits(pedido, 100, exclude_assignment_id='a1') is None

    def test_reads_bypass_cache(self, fake_supabase, pedido, operacion):
        assert services.compute_available_quantity(pedido) == 100
        fake_supabase.seed('asignacion', asignacion('a1', 10))

        assert services.compute_available_quantity(pedido) == 90

    def test_read_error_is_raised(self, fake_supabase, pedido):
        fake_supabase.fail('operaciones_pedido', 'select')

        with pytest.raises(RuntimeError):
            services.compute_available_quantity(pedido)


class TestPedidoViews:

    def test_list_adds_codigo_secuencia(self, api_client, pedido):
        response = api_client.get('/api/pedidos/')

        assert response.status_code == 200
        assert response.data[0]['codigo_secuencia'] == 'P-100 - 3'

    def test_search(self, fake_supabase, api_client, pedido):
        fake_supabase.seed('pedido', {**pedido, 'id_pedido': 'ped-2', 'codigo': 'Z-1', 'descripcion': 'Casacas'})

        response = api_client.get('/api/pedidos/', {'search': 'casa'})

        assert [row['id_pedido'] for row in response.data] == ['ped-2']

    def test_create_sanitizes_and_generates_id(self, fake_supabase, api_client):
        response = api_client.post('/api/pedidos/', {
            'codigo': "<P-1>'",
            'descripcion': 'Polo (rojo) & azul',
            'minutos_total': '15',
            'secuencia': 2,
            'cantidad_total': 50,
        }, format='json')

        assert response.status_code == 201
        assert response.data['codigo'] == 'P-1'
        assert response.data['descripcion'] == 'Polo rojo  azul'
        assert response.data['minutos_total'] == 15
        assert response.data['id_pedido']
        assert response.data['fecha']
        assert len(fake_supabase.rows('pedido')) == 1

    @pytest.mark.parametrize('field, value', [
        ('minutos_total', -1),
        ('minutos_total', 100000),
        ('secuencia', 1.5),
        ('secuencia', 10000),
        ('cantidad_total', -5),
        ('cantidad_total', 1000000),
        ('cantidad_total', None),
    ])
    def test_create_rejects_out_of_range(self, api_client, field, value):
        body = {'minutos_total': 10, 'secuencia': 1, 'cantidad_total': 5, field: value}

        response = api_client.post('/api/pedidos/', body, format='json')

        assert response.status_code == 400
        assert response.data['error'] == 'Corrige los errores del formulario'
        assert field in response.data['errors']

    def test_cannot_reduce_below_assigned(self, fake_supabase, api_client, pedido, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 70))

        response = api_client.patch('/api/pedidos/ped-1/', {'cantidad_total': 60}, format='json')

        assert response.status_code == 400
        assert response.data['errors']['cantidad_total'] == [
            'No puedes reducir la cantidad a menos de lo ya asignado (70)'
        ]

        response = api_client.patch('/api/pedidos/ped-1/', {'cantidad_total': 70}, format='json')
        assert response.status_code == 200
        assert response.data['cantidad_total'] == 70

    def test_disponible(self, fake_supabase, api_client, pedido, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 35))

        response = api_client.get('/api/pedidos/ped-1/disponible/')

        assert response.data == {
            'id_pedido': 'ped-1',
            'cantidad_total': 100,
            'cantidad_asignada': 35,
            'cantidad_disponible': 65,
        }

    def test_nested_asignaciones(self, fake_supabase, api_client, empleado, pedido, operacion):
        fake_supabase.seed('asignacion', asignacion('a1', 5, id_usuario=empleado['id_usuario']))

        response = api_client.get('/api/pedidos/ped-1/asignaciones/')

        assert response.data[0]['empleado_nombre_completo'] == 'Juan Perez'
        assert response.data[0]['operacion_desc'] == 'Costura'

    def test_nested_operaciones(self, api_client, operacion):
        response = api_client.get('/api/pedidos/ped-1/operaciones/')

        assert [row['id_operacion_pedido'] for row in response.data] == ['OPP001']

    def test_not_found(self, api_client):
        response = api_client.get('/api/pedidos/no-existe/')

        assert response.status_code == 404
        assert response.data == {'error': 'Pedido no encontrado'}

    def test_delete_with_operations_is_warning(self, api_client, operacion):
        response = api_client.delete('/api/pedidos/ped-1/')

        assert response.status_code == 409
        assert response.data['severity'] == 'warning'

    def test_delete(self, fake_supabase, api_client, pedido):
        response = api_client.delete('/api/pedidos/ped-1/')

        assert response.status_code == 204
        assert fake_supabase.rows('pedido') == []
