"""Pruebas de pagos a empleados."""

import pytest


class TestPagos:

    def test_create(self, fake_supabase, api_client, empleado):
        response = api_client.post('/api/pagos/', {
            'id_usuario': empleado['id_usuario'],
            'monto': '150.50',
            'concepto': 'Semana 2 (costura)',
        }, format='json')

        assert response.status_code == 201
        assert response.data['monto'] == 150.5
        assert response.data['concepto'] == 'Semana 2 costura'
        assert response.data['id_pago']
        assert response.data['fecha_pago']

    def test_keeps_given_date(self, api_client, empleado):
        response = api_client.post('/api/pagos/', {
            'id_usuario': empleado['id_usuario'],
            'monto': 10,
            'fecha_pago': '2026-02-01T12:00:00-05:00',
        }, format='json')

        assert response.status_code == 201
        assert response.data['fecha_pago'].startswith('2026-02-01')

    @pytest.mark.parametrize('monto', [0, -1, '1.234', 1000000])
    def test_invalid_amount(self, api_client, empleado, monto):
        response = api_client.post('/api/pagos/', {
            'id_usuario': empleado['id_usuario'],
            'monto': monto,
        }, format='json')

        assert response.status_code == 400
        assert 'monto' in response.data['errors']

    def test_unknown_employee(self, api_client):
        response = api_client.post('/api/pagos/', {'id_usuario': 'nadie', 'monto': 5}, format='json')

        assert response.status_code == 400
        assert response.data['errors'] == {'id_usuario': ['El empleado no existe']}

    def test_list_newest_first_with_name(self, fake_supabase, api_client, empleado):
        fake_supabase.seed(
            'pago',
            {'id_pago': 'p1', 'id_usuario': empleado['id_usuario'], 'monto': 10, 'fecha_pago': '2026-01-01'},
            {'id_pago': 'p2', 'id_usuario': empleado['id_usuario'], 'monto': 20, 'fecha_pago': '2026-01-05'},
            {'id_pago': 'p3', 'id_usuario': 'otro', 'monto': 30, 'fecha_pago': '2026-01-09'},
        )

        response = api_client.get('/api/pagos/', {'id_usuario': empleado['id_usuario']})

        assert [row['id_pago'] for row in response.data] == ['p2', 'p1']
        assert response.data[0]['empleado_nombre_completo'] == 'Juan Perez'

    def test_update_amount(self, fake_supabase, api_client, empleado):
        fake_supabase.seed('pago', {'id_pago': 'p1', 'id_usuario': empleado['id_usuario'], 'monto': 10,
                                    'concepto': '', 'fecha_pago': '2026-01-01'})

        response = api_client.patch('/api/pagos/p1/', {'monto': '12.75'}, format='json')

        assert response.status_code == 200
        assert fake_supabase.rows('pago')[0]['monto'] == 12.75
