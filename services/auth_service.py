"""
Auth Service

Interacciones con Supabase Auth.

El DNI es el identificador de ingreso: se traduce a un correo sintético
``{dni}@{TALLER_EMAIL_DOMAIN}`` para el subsistema de Auth. Solo los
usuarios cuyo perfil tiene rol 'admin' pueden ingresar al panel.

Funciones principales:
- dni_to_email(): Traduce DNI a correo de Auth
- login(): Inicia sesión y carga el perfil público
- logout(): Revoca la sesión en Supabase
- get_user_from_token(): Valida un access token
- register_auth_user(): Registra un usuario en Auth
- set_password() / update_email() / delete_auth_user(): API admin de Auth
"""

import logging
from typing import Dict, Optional

from django.conf import settings

from services import supabase_service

logger = logging.getLogger(__name__)

ROL_ADMIN = 'admin'
ROL_EMPLEADO = 'empleado'
ROLES = [ROL_EMPLEADO, ROL_ADMIN]

INVALID_CREDENTIALS = 'Credenciales inválidas o error de conexión'
MISSING_PROFILE = 'Usuario no encontrado en la base de datos (Perfil faltante)'
RESTRICTED_ACCESS = 'Acceso restringido: solo administradores pueden ingresar al panel'


def dni_to_email(dni: str) -> str:
    """
    Example:
        >>> dni_to_email('12345678')
        '12345678@taller.com'
    """
    return f"{str(dni).strip()}@{settings.TALLER_EMAIL_DOMAIN}"


def get_profile(id_usuario: str) -> Optional[Dict]:
    """Obtiene el perfil público (tabla usuario) de un usuario de Auth."""
    return supabase_service.fetch_one('usuario', 'id_usuario', id_usuario)


def login(dni: str, password: str) -> Dict:
    """
    Inicia sesión con DNI y contraseña.

    Los usuarios que no son admin se desconectan de inmediato y el resultado
    lo indica con ``restricted=True``.

    Returns:
        Dict con:
            - success: bool
            - data: {'user', 'token', 'refresh_token'} si tuvo éxito
            - error: mensaje de error
            - restricted: True si el rol no tiene acceso
    """
    email = dni_to_email(dni)

    try:
        client = supabase_service.create_auth_client()
        auth_response = client.auth.sign_in_with_password({
            'email': email,
            'password': password
        })
        auth_user = auth_response.user
        session = auth_response.session

        if auth_user is None or session is None:
            raise ValueError('Respuesta de Auth sin usuario o sesión')

    except Exception as e:
        logger.warning(f"Login fallido para {email}: {str(e)}")
        return {'success': False, 'data': None, 'error': INVALID_CREDENTIALS, 'restricted': False}

    profile = get_profile(auth_user.id)
    if not profile:
        logger.warning(f"Usuario {auth_user.id} autenticado sin perfil público")
        _sign_out_quietly(client)
        return {'success': False, 'data': None, 'error': MISSING_PROFILE, 'restricted': False}

    if profile.get('rol') != ROL_ADMIN:
        logger.warning(f"Acceso restringido para {email} (rol {profile.get('rol')})")
        _sign_out_quietly(client)
        return {'success': False, 'data': None, 'error': RESTRICTED_ACCESS, 'restricted': True}

    logger.info(f"Login exitoso: {email}")
    return {
        'success': True,
        'data': {
            'user': profile,
            'token': session.access_token,
            'refresh_token': session.refresh_token,
        },
        'error': None,
        'restricted': False
    }


def _sign_out_quietly(client) -> None:
    try:
        client.auth.sign_out()
    except Exception as e:
        logger.error(f"Error al cerrar sesión en Supabase: {str(e)}")


def logout(token: Optional[str]) -> bool:
    """
    Revoca la sesión del token en Supabase.

    Un error remoto se registra pero no se propaga: la sesión local ya fue
    limpiada por quien llama.

    Returns:
        bool: True si Supabase confirmó el cierre
    """
    if not token:
        return False

    try:
        client = supabase_service.get_supabase_client(use_service_key=True)
        client.auth.admin.sign_out(token)
        return True
    except Exception as e:
        logger.error(f"Error al cerrar sesión en Supabase: {str(e)}")
        return False


def get_user_from_token(token: str) -> Optional[str]:
    """
    Valida un access token de Supabase.

    Returns:
        str: ID del usuario de Auth, o None si el token no es válido
    """
    try:
        client = supabase_service.get_supabase_client()
        response = client.auth.get_user(token)
        if response is None or response.user is None:
            return None
        return response.user.id
    except Exception as e:
        logger.warning(f"Token de Supabase inválido: {str(e)}")
        return None


def register_auth_user(email: str, password: str, rol: str) -> Dict:
    """
    Registra un usuario en Supabase Auth.

    Usa un cliente aislado para no alterar ninguna sesión existente.

    Returns:
        Dict con 'data' = ID del nuevo usuario de Auth
    """
    try:
        client = supabase_service.create_auth_client()
        auth_response = client.auth.sign_up({
            'email': email,
            'password': password,
            'options': {
                'data': {'rol': rol}
            }
        })

        if auth_response.user is None:
            raise ValueError('No se pudo crear el usuario en Auth')

        logger.info(f"Usuario creado en Supabase Auth: {auth_response.user.id}")
        return {'success': True, 'data': auth_response.user.id, 'error': None}

    except Exception as e:
        logger.error(f"Error al crear usuario en Auth ({email}): {str(e)}")
        return {'success': False, 'data': None, 'error': str(e)}


def _admin_update(user_id: str, attributes: Dict) -> Dict:
    try:
        client = supabase_service.get_supabase_client(use_service_key=True)
        client.auth.admin.update_user_by_id(user_id, attributes)
        return {'success': True, 'data': user_id, 'error': None}
    except Exception as e:
        logger.error(f"Error al actualizar usuario {user_id} en Auth: {str(e)}")
        return {'success': False, 'data': None, 'error': str(e)}


def set_password(user_id: str, password: str) -> Dict:
    """Cambia la contraseña de otro usuario (requiere service_key)."""
    return _admin_update(user_id, {'password': password})


def update_email(user_id: str, email: str) -> Dict:
    """Cambia el correo de Auth de un usuario (requiere service_key)."""
    return _admin_update(user_id, {'email': email})


def delete_auth_user(user_id: str) -> bool:
    """Elimina un usuario de Auth; se usa para revertir un alta incompleta."""
    try:
        client = supabase_service.get_supabase_client(use_service_key=True)
        client.auth.admin.delete_user(user_id)
        logger.info(f"Usuario eliminado de Supabase Auth: {user_id}")
        return True
    except Exception as e:
        logger.error(f"Error al eliminar usuario {user_id} de Auth: {str(e)}")
        return False
