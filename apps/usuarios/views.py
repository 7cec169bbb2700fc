"""Vistas de Usuarios - CRUD con permisos de ADMIN"""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.viewsets import TablaViewSet, error_response, validation_response
from apps.core.validators import now_iso
from services import auth_service
from services.supabase_service import fetch_data, create_data, call_rpc
from .serializers import UsuarioSerializer, PasswordSerializer
import logging

logger = logging.getLogger(__name__)

DNI_EN_USO = 'Ya existe un usuario con este DNI'


class UsuarioViewSet(TablaViewSet):
    """
    ViewSet para gestionar usuarios desde Supabase - Solo ADMIN

    Endpoints:
        GET /api/usuarios/ - Lista usuarios (?rol=, ?search=)
        POST /api/usuarios/ - Crea usuario en Auth y su perfil
        GET /api/usuarios/{id}/ - Obtiene un usuario
        PUT/PATCH /api/usuarios/{id}/ - Actualiza un usuario
        DELETE /api/usuarios/{id}/ - Elimina perfil y cuenta de Auth
        GET /api/usuarios/empleados/ - Lista solo empleados
        POST /api/usuarios/{id}/password/ - Cambia la contraseña
    """

    table = 'usuario'
    id_field = 'id_usuario'
    order_by = 'fecha_creacion'
    serializer_class = UsuarioSerializer
    filter_params = ('rol',)
    label = 'usuario'
    not_found_message = 'Usuario no encontrado'
    previous_dni = None

    def enrich_rows(self, rows):
        return [
            {**row, 'email': auth_service.dni_to_email(row['dni']) if row.get('dni') else None}
            for row in rows
        ]

    def build_update_payload(self, data, current):
        payload = {
            field: data[field]
            for field in ('nombre', 'apellidos', 'celular', 'rol')
            if field in data
        }
        if data.get('dni'):
            payload['dni'] = data['dni']
        if 'celular' in payload:
            payload['celular'] = payload['celular'] or None
        return payload

    def dni_taken(self, dni, exclude_id=None):
        result = fetch_data(self.table, select='id_usuario,dni', filters={'dni': dni})
        if not result['success']:
            raise RuntimeError('No se pudo verificar el DNI')
        return any(row['id_usuario'] != exclude_id for row in result['data'])

    def validate_business(self, payload, current):
        """
        Un cambio de DNI mueve primero el correo de Auth; si falla, el perfil
        no se toca.
        """
        dni = payload.get('dni')
        if current is None or not dni or dni == current.get('dni'):
            return None

        if self.dni_taken(dni, current['id_usuario']):
            return {'dni': [DNI_EN_USO]}

        result = auth_service.update_email(current['id_usuario'], auth_service.dni_to_email(dni))
        if not result['success']:
            return {'dni': [f"No se pudo actualizar el acceso del usuario: {result['error']}"]}

        self.previous_dni = current.get('dni')
        return None

    def update(self, request, pk=None, partial=False):
        self.previous_dni = None
        response = super().update(request, pk=pk, partial=partial)

        # El perfil no se guardó: el correo de Auth vuelve al DNI anterior
        if self.previous_dni and response.status_code >= 400:
            logger.warning(f"Revirtiendo correo de Auth de {pk}")
            auth_service.update_email(pk, auth_service.dni_to_email(self.previous_dni))

        return response

    def create(self, request):
        """
        Crea un usuario: primero la cuenta de Auth y luego el perfil público.

        Si el perfil no se puede guardar, la cuenta de Auth se elimina.
        """
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        data = serializer.validated_data
        rol = data.get('rol') or auth_service.ROL_EMPLEADO

        try:
            if self.dni_taken(data['dni']):
                return validation_response({'dni': [DNI_EN_USO]})
        except RuntimeError as e:
            logger.error(str(e))
            return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        auth_result = auth_service.register_auth_user(
            auth_service.dni_to_email(data['dni']),
            data['password'],
            rol
        )
        if not auth_result['success']:
            return error_response(
                f"Error al crear usuario: {auth_result['error']}",
                status.HTTP_400_BAD_REQUEST
            )

        user_id = auth_result['data']
        profile = {
            'id_usuario': user_id,
            'nombre': data['nombre'],
            'apellidos': data['apellidos'],
            'dni': data['dni'],
            'celular': data.get('celular') or None,
            'rol': rol,
            'fecha_creacion': now_iso(),
        }

        result = create_data(self.table, profile)
        if not result['success']:
            auth_service.delete_auth_user(user_id)
            return error_response(
                f"Error al guardar perfil: {result['error']}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        created = result['data'][0] if result['data'] else profile
        logger.info(f"Usuario creado: {data['dni']} ({rol})")
        return Response(self.enrich_rows([created])[0], status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        """Elimina el perfil y la cuenta de Auth con eliminar_usuario_completo."""
        if request.supabase_user and request.supabase_user.get('id_usuario') == pk:
            return error_response('No puedes eliminar tu propio usuario', status.HTTP_400_BAD_REQUEST)

        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        result = call_rpc('eliminar_usuario_completo', {'p_id_usuario': pk}, table=self.table)
        if not result['success']:
            return error_response(
                f"Error al eliminar usuario: {result['error']}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        logger.info(f"Usuario eliminado: {current.get('dni')}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'])
    def empleados(self, request):
        """Lista de empleados para los selectores de asignaciones y pagos"""
        result = fetch_data(
            self.table,
            order_by='nombre',
            ascending=True,
            filters={'rol': auth_service.ROL_EMPLEADO},
            use_cache=True
        )
        if not result['success']:
            return error_response('Error al obtener empleados', status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(self.enrich_rows(result['data']))

    @action(detail=True, methods=['post'])
    def password(self, request, pk=None):
        """Cambia la contraseña de Auth del usuario"""
        serializer = PasswordSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        result = auth_service.set_password(pk, serializer.validated_data['password'])
        if not result['success']:
            return error_response(
                f"Error al cambiar contraseña: {result['error']}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        return Response({'success': True})
