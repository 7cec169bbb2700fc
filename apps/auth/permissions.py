"""
Permisos personalizados para R&L Taller

Define los permisos basados en roles:
- admin: Acceso total al panel
- empleado: Sin acceso al panel
"""

from rest_framework import permissions

from services.auth_service import ROL_ADMIN, RESTRICTED_ACCESS


class IsAdmin(permissions.BasePermission):
    """
    Permiso que solo permite acceso a usuarios con rol admin.
    """

    message = RESTRICTED_ACCESS

    def has_permission(self, request, view):
        user = getattr(request, 'supabase_user', None)
        if user is None:
            return False

        return user.get('rol') == ROL_ADMIN
