"""Pruebas de usuarios y del comando crear_admin."""

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError


def nuevo_usuario(**overrides):
    body = {
        'nombre': 'Ana',
        'apellidos': 'Quispe',
        'dni': '44556677',
        'celular': '987654321',
        'password': 'clave123',
    }
    body.update(overrides)
    return body


class TestCrearUsuario:

    def test_creates_auth_account_and_profile(self, fake_supabase, api_client):
        response = api_client.post('/api/usuarios/', nuevo_usuario(), format='json')

        assert response.status_code == 201
        assert response.data['rol'] == 'empleado'
        assert response.data['email'] == '44556677@taller.com'
        assert 'password' not in response.data

        auth_user = fake_supabase.auth.find(response.data['id_usuario'])
        assert auth_user['email'] == '44556677@taller.com'
        assert auth_user['metadata'] == {'rol': 'empleado'}

    @pytest.mark.parametrize('field, value', [
        ('dni', '1234567'),
        ('dni', '123456789'),
        ('dni', '1234567a'),
        ('celular', '12345678'),
        ('celular', '9876543210'),
        ('rol', 'jefe'),
        ('password', '12345'),
        ('nombre', ''),
        ('apellidos', 'x' * 101),
    ])
    def test_validation(self, fake_supabase, api_client, field, value):
        response = api_client.post('/api/usuarios/', nuevo_usuario(**{field: value}), format='json')

        assert response.status_code == 400
        assert field in response.data['errors']
        assert len(fake_supabase.auth.users) == 1

    def test_celular_is_optional(self, api_client):
        response = api_client.post('/api/usuarios/', nuevo_usuario(celular=''), format='json')

        assert response.status_code == 201
        assert response.data['celular'] is None

    def test_profile_failure_removes_auth_account(self, fake_supabase, api_client):
        fake_supabase.fail('usuario', 'insert')

        response = api_client.post('/api/usuarios/', nuevo_usuario(), format='json')

        assert response.status_code == 500
        assert len(fake_supabase.auth.users) == 1

    def test_duplicate_dni(self, api_client, empleado):
        response = api_client.post('/api/usuarios/', nuevo_usuario(dni='22222222'), format='json')

        assert response.status_code == 400


class TestListarUsuarios:

    def test_filter_by_rol(self, api_client, empleado):
        response = api_client.get('/api/usuarios/', {'rol': 'empleado'})

        assert [row['dni'] for row in response.data] == ['22222222']
        assert response.data[0]['email'] == '22222222@taller.com'

    def test_search(self, api_client, empleado):
        response = api_client.get('/api/usuarios/', {'search': 'perez'})

        assert [row['dni'] for row in response.data] == ['22222222']

    def test_empleados(self, api_client, empleado):
        response = api_client.get('/api/usuarios/empleados/')

        assert [row['rol'] for row in response.data] == ['empleado']


class TestEditarUsuario:

    def test_dni_change_moves_auth_email(self, fake_supabase, api_client, empleado):
        url = f"/api/usuarios/{empleado['id_usuario']}/"

        response = api_client.patch(url, {'dni': '55555555', 'nombre': 'Juan Carlos'}, format='json')

        assert response.status_code == 200
        assert response.data['dni'] == '55555555'
        assert fake_supabase.auth.find(empleado['id_usuario'])['email'] == '55555555@taller.com'

    def test_edit_keeps_rol_when_omitted(self, fake_supabase, api_client, admin_user):
        url = f"/api/usuarios/{admin_user['id_usuario']}/"

        response = api_client.put(url, {'nombre': 'Rosa', 'apellidos': 'Lopez'}, format='json')

        assert response.status_code == 200
        assert response.data['rol'] == 'admin'

    def test_password(self, fake_supabase, api_client, empleado):
        url = f"/api/usuarios/{empleado['id_usuario']}/password/"

        assert api_client.post(url, {'password': '123'}, format='json').status_code == 400
        assert api_client.post(url, {'password': 'nueva123'}, format='json').status_code == 200
        assert fake_supabase.auth.find(empleado['id_usuario'])['password'] == 'nueva123'

    def test_auth_email_failure_keeps_profile(self, fake_supabase, api_client, empleado, monkeypatch):
        def rechazar(uid, attributes):
            raise Exception('A user with this email address has already been registered')

        monkeypatch.setattr(fake_supabase.auth.admin, 'update_user_by_id', rechazar)

        response = api_client.patch(f"/api/usuarios/{empleado['id_usuario']}/", {'dni': '33333333'}, format='json')

        assert response.status_code == 400
        assert 'dni' in response.data['errors']
        profile = next(row for row in fake_supabase.rows('usuario') if row['id_usuario'] == empleado['id_usuario'])
        assert profile['dni'] == '22222222'
        assert fake_supabase.auth.find(empleado['id_usuario'])['email'] == '22222222@taller.com'

    def test_dni_in_use(self, fake_supabase, api_client, admin_user, empleado):
        response = api_client.patch(f"/api/usuarios/{empleado['id_usuario']}/", {'dni': '11111111'}, format='json')

        assert response.status_code == 400
        assert response.data['errors'] == {'dni': ['Ya existe un usuario con este DNI']}
        assert fake_supabase.auth.find(empleado['id_usuario'])['email'] == '22222222@taller.com'

    def test_profile_failure_restores_auth_email(self, fake_supabase, api_client, empleado):
        fake_supabase.fail('usuario', 'update')

        response = api_client.patch(f"/api/usuarios/{empleado['id_usuario']}/", {'dni': '33333333'}, format='json')

        assert response.status_code == 500
        assert fake_supabase.auth.find(empleado['id_usuario'])['email'] == '22222222@taller.com'


class TestEliminarUsuario:

    def test_delete_uses_rpc(self, fake_supabase, api_client, empleado):
        response = api_client.delete(f"/api/usuarios/{empleado['id_usuario']}/")

        assert response.status_code == 204
        assert ('rpc', 'eliminar_usuario_completo') in fake_supabase.calls
        assert fake_supabase.auth.find(empleado['id_usuario']) is None

    def test_cannot_delete_self(self, api_client, admin_user):
        response = api_client.delete(f"/api/usuarios/{admin_user['id_usuario']}/")

        assert response.status_code == 400


class TestCrearAdmin:

    def test_promotes_existing_account(self, fake_supabase):
        user = fake_supabase.auth.add_user('dueno@taller.com', 'clave123')

        call_command(
            'crear_admin',
            email='dueno@taller.com', password='clave123',
            nombre='Luis', apellidos='Rojas', dni='87654321'
        )

        profile = next(row for row in fake_supabase.rows('usuario') if row['id_usuario'] == user['id'])
        assert profile['rol'] == 'admin'
        assert profile['dni'] == '87654321'

    def test_rejects_bad_dni(self, fake_supabase):
        fake_supabase.auth.add_user('dueno@taller.com', 'clave123')

        with pytest.raises(CommandError):
            call_command(
                'crear_admin',
                email='dueno@taller.com', password='clave123',
                nombre='Luis', apellidos='Rojas', dni='876'
            )
