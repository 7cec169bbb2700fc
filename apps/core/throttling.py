"""Throttling de acciones de escritura."""

from django.conf import settings
from rest_framework import permissions
from rest_framework.throttling import SimpleRateThrottle


class WriteRateThrottle(SimpleRateThrottle):
    """
    Limita las escrituras (POST, PUT, PATCH, DELETE) por usuario.

    La tasa se lee de ``settings.WRITE_RATE_LIMIT`` (por defecto '1/second');
    None desactiva el límite. Las lecturas nunca se limitan.
    """

    scope = 'escritura'

    def get_rate(self):
        return getattr(settings, 'WRITE_RATE_LIMIT', '1/second')

    def allow_request(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        return super().allow_request(request, view)

    def get_cache_key(self, request, view):
        user = getattr(request, 'supabase_user', None)
        if user and user.get('id_usuario'):
            ident = user['id_usuario']
        else:
            ident = self.get_ident(request)

        return self.cache_format % {
            'scope': self.scope,
            'ident': ident
        }
