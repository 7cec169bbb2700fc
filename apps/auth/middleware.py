"""
Supabase Authentication Middleware

Este middleware intercepta todas las requests y valida el token de Supabase.
Si el token es válido, agrega el perfil del usuario al request.

Flujo:
1. Extrae el token del header Authorization (o de la sesión persistida)
2. Valida el token con Supabase Auth
3. Obtiene el id del usuario de Auth
4. Busca el perfil en la tabla usuario
5. Agrega el perfil a request.supabase_user
"""

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin
from django.http import JsonResponse
from services import auth_service
import logging

logger = logging.getLogger(__name__)


class SupabaseAuthMiddleware(MiddlewareMixin):
    """
    Middleware para autenticación con Supabase.

    Valida el access token en cada request y carga el perfil del usuario
    desde la tabla usuario.
    """

    # Rutas que no requieren autenticación
    EXEMPT_URLS = [
        '/api/auth/login/',
        '/api/auth/logout/',
    ]
    EXEMPT_EXACT = ['/', '/api/']

    def is_exempt(self, path):
        return path in self.EXEMPT_EXACT or any(path.startswith(url) for url in self.EXEMPT_URLS)

    def get_token(self, request):
        auth_header = request.META.get('HTTP_AUTHORIZATION', '')
        if auth_header.startswith('Bearer '):
            return auth_header.split('Bearer ', 1)[1].strip()

        # Sesión restaurada desde la cookie
        stored = request.session.get(settings.AUTH_SESSION_KEY) if hasattr(request, 'session') else None
        if stored:
            return stored.get('token')

        return None

    def process_request(self, request):
        """
        Procesa cada request para validar autenticación.

        Returns:
            None si la autenticación es exitosa o la ruta está exenta
            JsonResponse con error si falla
        """
        request.supabase_user = None
        is_exempt = self.is_exempt(request.path)

        token = self.get_token(request)
        if not token:
            # Sin token: los permisos de DRF deciden
            return None

        user_id = auth_service.get_user_from_token(token)
        if not user_id:
            logger.warning("Token de Supabase inválido o expirado")
            if is_exempt:
                return None
            return JsonResponse({
                'error': 'Token inválido o expirado'
            }, status=401)

        profile = auth_service.get_profile(user_id)
        if not profile:
            logger.warning(f"Usuario con id {user_id} no encontrado en base de datos")
            if is_exempt:
                return None
            return JsonResponse({
                'error': 'Usuario no encontrado en el sistema'
            }, status=404)

        request.supabase_user = {
            'id_usuario': profile['id_usuario'],
            'nombre': profile.get('nombre'),
            'apellidos': profile.get('apellidos'),
            'dni': profile.get('dni'),
            'rol': profile.get('rol'),
            'token': token,
        }

        logger.debug(f"Usuario autenticado: {profile.get('dni')} ({profile.get('rol')})")
        return None
