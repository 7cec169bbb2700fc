"""Pruebas de asignaciones y del tope por pedido."""

import pytest


@pytest.fixture
def asignacion(fake_supabase, empleado, operacion):
    row = {
        'id_asignacion': 'a1',
        'id_usuario': empleado['id_usuario'],
        'id_operacion_pedido': 'OPP001',
        'id_pedido': 'ped-1',
        'cantidad_asignada': 60,
        'fecha_asignacion': '2026-01-11T10:00:00-05:00',
    }
    fake_supabase.seed('asignacion', row)
    return row


def total_asignado(fake_supabase):
    return sum(row['cantidad_asignada'] for row in fake_supabase.rows('asignacion'))


class TestCrearAsignacion:

    def test_create_copies_pedido(self, fake_supabase, api_client, empleado, operacion):
        response = api_client.post('/api/asignaciones/', {
            'id_usuario': empleado['id_usuario'],
            'id_operacion_pedido': 'OPP001',
            'cantidad_asignada': 100,
        }, format='json')

        assert response.status_code == 201
        assert response.data['id_pedido'] == 'ped-1'
        assert response.data['id_asignacion']
        assert response.data['fecha_asignacion']

    def test_exceeding_total_is_rejected(self, fake_supabase, api_client, empleado, asignacion):
        response = api_client.post('/api/asignaciones/', {
            'id_usuario': empleado['id_usuario'],
            'id_operacion_pedido': 'OPP001',
            'cantidad_asignada': 41,
        }, format='json')

        assert response.status_code == 400
        assert response.data['errors']['cantidad_asignada'] == [
            'Excede el total disponible del pedido. Disponible: 40'
        ]
        assert total_asignado(fake_supabase) == 60

    def test_cap_across_operations(self, fake_supabase, api_client, empleado, asignacion):
        fake_supabase.seed('operaciones_pedido', {
            'id_operacion_pedido': 'OPP002', 'id_pedido': 'ped-1', 'nombre_operacion': 'Bordado'
        })

        response = api_client.post('/api/asignaciones/', {
            'id_usuario': empleado['id_usuario'],
            'id_operacion_pedido': 'OPP002',
            'cantidad_asignada': 40,
        }, format='json')

        assert response.status_code == 201
        assert total_asignado(fake_supabase) == 100

    @pytest.mark.parametrize('cantidad', [0, -3, 2.5, 'x'])
    def test_quantity_must_be_positive_integer(self, api_client, empleado, operacion, cantidad):
        response = api_client.post('/api/asignaciones/', {
            'id_usuario': empleado['id_usuario'],
            'id_operacion_pedido': 'OPP001',
            'cantidad_asignada': cantidad,
        }, format='json')

        assert response.status_code == 400
        assert 'cantidad_asignada' in response.data['errors']

    def test_unknown_references(self, api_client):
        response = api_client.post('/api/asignaciones/', {
            'id_usuario': 'nadie',
            'id_operacion_pedido': 'OPP404',
            'cantidad_asignada': 1,
        }, format='json')

        assert response.status_code == 400
        assert set(response.data['errors']) == {'id_usuario', 'id_operacion_pedido'}


class TestEditarAsignacion:

    def test_update_excludes_itself(self, fake_supabase, api_client, asignacion):
        response = api_client.patch('/api/asignaciones/a1/', {'cantidad_asignada': 100}, format='json')

        assert response.status_code == 200
        assert total_asignado(fake_supabase) == 100

    def test_update_over_total(self, fake_supabase, api_client, asignacion):
        response = api_client.patch('/api/asignaciones/a1/', {'cantidad_asignada': 101}, format='json')

        assert response.status_code == 400
        assert response.data['errors']['cantidad_asignada'] == [
            'Excede el total disponible del pedido. Disponible: 100'
        ]


class TestListarAsignaciones:

    def test_derived_columns(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('asignacion', {**asignacion, 'id_asignacion': 'a2', 'id_operacion_pedido': 'OPP999',
                                          'cantidad_asignada': 1})

        response = api_client.get('/api/asignaciones/', {'id_pedido': 'ped-1'})
        rows = {row['id_asignacion']: row for row in response.data}

        assert rows['a1']['empleado_nombre_completo'] == 'Juan Perez'
        assert rows['a1']['pedido_codigo_sec'] == 'P-100 - 3'
        assert rows['a1']['operacion_desc'] == 'Costura'
        assert rows['a2']['operacion_desc'] == '---'

    def test_filter_by_usuario(self, api_client, asignacion):
        response = api_client.get('/api/asignaciones/', {'id_usuario': 'otro'})

        assert response.data == []


class TestEliminarAsignacion:

    def test_delete_with_work_records_is_warning(self, fake_supabase, api_client, asignacion):
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1'})

        response = api_client.delete('/api/asignaciones/a1/')

        assert response.status_code == 409
        assert response.data == {
            'error': 'No se puede eliminar: Hay registros de trabajo asociados a esta asignación.',
            'severity': 'warning',
        }
        assert len(fake_supabase.rows('asignacion')) == 1

    def test_delete(self, fake_supabase, api_client, asignacion):
        response = api_client.delete('/api/asignaciones/a1/')

        assert response.status_code == 204
        assert fake_supabase.rows('asignacion') == []

    def test_delete_missing(self, api_client):
        response = api_client.delete('/api/asignaciones/no-existe/')

        assert response.status_code == 404

    def test_lookup_failure_is_error(self, fake_supabase, api_client, asignacion):
        fake_supabase.fail('pedido', 'select')

        assert api_client.get('/api/asignaciones/').status_code == 500
        assert api_client.get('/api/asignaciones/a1/').status_code == 500
