"""Pruebas de operaciones de pedido."""

import pytest


class TestOperaciones:

    def test_first_id_is_opp001(self, fake_supabase, api_client, pedido):
        response = api_client.post('/api/operaciones/', {
            'id_pedido': 'ped-1',
            'nombre_operacion': 'Corte',
            'minutos_unidad': '',
        }, format='json')

        assert response.status_code == 201
        assert response.data['id_operacion_pedido'] == 'OPP001'
        assert response.data['minutos_unidad'] == 0

    def test_id_follows_highest_suffix(self, fake_supabase, api_client, pedido):
        fake_supabase.seed(
            'operaciones_pedido',
            {'id_operacion_pedido': 'OPP002', 'id_pedido': 'ped-1'},
            {'id_operacion_pedido': 'OPP017', 'id_pedido': 'ped-1'},
        )

        response = api_client.post('/api/operaciones/', {
            'id_pedido': 'ped-1',
            'nombre_operacion': 'Planchado',
            'minutos_unidad': 1.5,
        }, format='json')

        assert response.data['id_operacion_pedido'] == 'OPP018'
        assert response.data['minutos_unidad'] == 1.5

    def test_unknown_pedido(self, api_client):
        response = api_client.post('/api/operaciones/', {
            'id_pedido': 'no-existe',
            'nombre_operacion': 'Corte',
        }, format='json')

        assert response.status_code == 400
        assert response.data['errors'] == {'id_pedido': ['El pedido no existe']}

    @pytest.mark.parametrize('nombre', ['Corte <b>', 'a{b}', 'x|y', 'tilde~', 'a' * 101, ''])
    def test_invalid_name(self, api_client, pedido, nombre):
        response = api_client.post('/api/operaciones/', {
            'id_pedido': 'ped-1',
            'nombre_operacion': nombre,
        }, format='json')

        assert response.status_code == 400
        assert 'nombre_operacion' in response.data['errors']

    def test_negative_minutes(self, api_client, pedido):
        response = api_client.post('/api/operaciones/', {
            'id_pedido': 'ped-1',
            'nombre_operacion': 'Corte',
            'minutos_unidad': -1,
        }, format='json')

        assert response.status_code == 400

    def test_list_by_pedido_with_codigo(self, fake_supabase, api_client, operacion):
        fake_supabase.seed('operaciones_pedido', {'id_operacion_pedido': 'OPP005', 'id_pedido': 'otro'})

        response = api_client.get('/api/operaciones/', {'id_pedido': 'ped-1'})

        assert [row['id_operacion_pedido'] for row in response.data] == ['OPP001']
        assert response.data[0]['pedido_codigo'] == 'P-100'

    def test_delete_blocked_by_assignments(self, fake_supabase, api_client, operacion):
        fake_supabase.seed('asignacion', {'id_asignacion': 'a1', 'id_operacion_pedido': 'OPP001'})

        response = api_client.delete('/api/operaciones/OPP001/')

        assert response.status_code == 409
        assert response.data == {
            'error': 'No se puede eliminar: Hay asignaciones asociadas a esta operación.',
            'severity': 'warning',
        }

    def test_list_lookup_failure_is_error(self, fake_supabase, api_client, operacion):
        fake_supabase.fail('pedido', 'select')

        response = api_client.get('/api/operaciones/')

        assert response.status_code == 500
        assert response.data == {'error': 'Error al obtener operaciones_pedido'}
