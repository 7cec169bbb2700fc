"""Pruebas de login, logout, sesión y permisos."""

from django.conf import settings
from rest_framework.test import APIClient

from services.auth_service import RESTRICTED_ACCESS


class TestLogin:

    def test_admin_login(self, fake_supabase, admin_user):
        client = APIClient()

        response = client.post('/api/auth/login/', {'dni': '11111111', 'password': 'secreto1'}, format='json')

        assert response.status_code == 200
        assert response.data['user']['id_usuario'] == admin_user['id_usuario']
        assert response.data['token']
        assert client.session[settings.AUTH_SESSION_KEY]['token'] == response.data['token']

    def test_session_restores_user(self, fake_supabase, admin_user):
        client = APIClient()
        client.post('/api/auth/login/', {'dni': '11111111', 'password': 'secreto1'}, format='json')

        response = client.get('/api/auth/me/')

        assert response.status_code == 200
        assert response.data['user']['dni'] == '11111111'
        assert 'token' not in response.data['user']

    def test_empleado_is_rejected(self, fake_supabase, empleado):
        client = APIClient()

        response = client.post('/api/auth/login/', {'dni': '22222222', 'password': 'secreto1'}, format='json')

        assert response.status_code == 403
        assert response.data == {'error': RESTRICTED_ACCESS, 'restricted': True}
        assert settings.AUTH_SESSION_KEY not in client.session

    def test_invalid_credentials(self, admin_user):
        response = APIClient().post('/api/auth/login/', {'dni': '11111111', 'password': 'malaclave'}, format='json')

        assert response.status_code == 401

    def test_dni_format(self):
        response = APIClient().post('/api/auth/login/', {'dni': '1234', 'password': 'secreto1'}, format='json')

        assert response.status_code == 400
        assert 'dni' in response.data['errors']


class TestLogout:

    def test_logout_revokes_token(self, fake_supabase, api_client):
        assert len(fake_supabase.auth.tokens) == 1

        response = api_client.post('/api/auth/logout/')

        assert response.status_code == 200
        assert fake_supabase.auth.tokens == {}

    def test_logout_without_session(self):
        response = APIClient().post('/api/auth/logout/')

        assert response.status_code == 200


class TestAccess:

    def test_anonymous_is_forbidden(self):
        response = APIClient().get('/api/pedidos/')

        assert response.status_code == 403

    def test_invalid_token(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION='Bearer vencido')

        response = client.get('/api/pedidos/')

        assert response.status_code == 401

    def test_empleado_token_is_forbidden(self, fake_supabase, empleado):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {fake_supabase.auth.issue_token(empleado['id_usuario'])}")

        response = client.get('/api/pedidos/')

        assert response.status_code == 403
        assert response.data['detail'] == RESTRICTED_ACCESS

    def test_me_requires_admin(self, fake_supabase, empleado):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {fake_supabase.auth.issue_token(empleado['id_usuario'])}")

        response = client.get('/api/auth/me/')

        assert response.status_code == 403

    def test_writes_are_throttled(self, settings, api_client):
        settings.WRITE_RATE_LIMIT = '1/minute'
        body = {'minutos_total': 10, 'secuencia': 1, 'cantidad_total': 5}

        assert api_client.post('/api/pedidos/', body, format='json').status_code == 201
        assert api_client.post('/api/pedidos/', body, format='json').status_code == 429
        assert api_client.get('/api/pedidos/').status_code == 200
