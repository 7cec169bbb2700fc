"""
Vistas de Autenticación

Endpoints para iniciar y cerrar sesión con DNI y contraseña, y para obtener
la información del usuario actual.
"""

from django.conf import settings
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from services import auth_service
from apps.auth.serializers import LoginSerializer
from apps.core.viewsets import validation_response
import logging

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """
    Inicia sesión con DNI y contraseña.

    POST /api/auth/login/

    Body:
        {"dni": "12345678", "password": "secreto"}

    Response:
        {"user": {...perfil...}, "token": "...", "refresh_token": "..."}

    Errors:
        400: DNI o contraseña con formato inválido
        401: Credenciales inválidas o perfil faltante
        403: El usuario no es admin (sesión cerrada de inmediato)
    """
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_response(serializer.errors)

    result = auth_service.login(
        serializer.validated_data['dni'],
        serializer.validated_data['password']
    )

    if result['restricted']:
        request.session.pop(settings.AUTH_SESSION_KEY, None)
        return Response({
            'error': result['error'],
            'restricted': True
        }, status=status.HTTP_403_FORBIDDEN)

    if not result['success']:
        return Response({
            'error': result['error']
        }, status=status.HTTP_401_UNAUTHORIZED)

    data = result['data']
    request.session[settings.AUTH_SESSION_KEY] = {
        'user': data['user'],
        'token': data['token'],
    }

    return Response(data, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    """
    Cierra la sesión.

    POST /api/auth/logout/

    La sesión local se limpia primero; el cierre en Supabase es best-effort.
    """
    token = None
    user = getattr(request, 'supabase_user', None)
    if user:
        token = user.get('token')
    else:
        stored = request.session.get(settings.AUTH_SESSION_KEY) or {}
        token = stored.get('token')

    request.session.pop(settings.AUTH_SESSION_KEY, None)

    auth_service.logout(token)

    return Response({'success': True}, status=status.HTTP_200_OK)


@api_view(['GET'])
def get_current_user(request):
    """
    Obtiene información del usuario actualmente autenticado.

    GET /api/auth/me/

    Response:
        {
            "user": {
                "id_usuario": "uuid",
                "nombre": "Rosa",
                "apellidos": "Lopez",
                "dni": "12345678",
                "rol": "admin"
            }
        }
    """
    user = {k: v for k, v in request.supabase_user.items() if k != 'token'}
    return Response({
        'user': user
    }, status=status.HTTP_200_OK)
