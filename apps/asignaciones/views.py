"""
Vistas de Asignaciones

Asignación de cantidades de una operación de pedido a un empleado. La suma
asignada de un pedido no puede superar su cantidad_total.
"""

from apps.core.viewsets import TablaViewSet
from apps.core.validators import new_id, now_iso
from apps.pedidos import services as pedido_services
from apps.core.lookups import index_by, nombre_completo, codigo_secuencia
from services.supabase_service import fetch_one
from .serializers import AsignacionSerializer
import logging

logger = logging.getLogger(__name__)


class AsignacionViewSet(TablaViewSet):
    """
    ViewSet para gestionar asignaciones.

    Endpoints:
        GET /api/asignaciones/ - Lista (?id_usuario=, ?id_pedido=, ?search=)
        POST /api/asignaciones/ - Crea una asignación
        GET/PUT/PATCH/DELETE /api/asignaciones/{id}/
    """

    table = 'asignacion'
    id_field = 'id_asignacion'
    order_by = 'fecha_asignacion'
    serializer_class = AsignacionSerializer
    filter_params = ('id_usuario', 'id_pedido')
    label = 'asignación'
    not_found_message = 'Asignación no encontrada'
    fk_message = 'No se puede eliminar: Hay registros de trabajo asociados a esta asignación.'

    def enrich_rows(self, rows):
        usuarios = index_by('usuario', 'id_usuario', [row.get('id_usuario') for row in rows])
        operaciones = index_by('operaciones_pedido', 'id_operacion_pedido',
                               [row.get('id_operacion_pedido') for row in rows])
        pedidos = index_by('pedido', 'id_pedido', [row.get('id_pedido') for row in rows])

        enriched = []
        for row in rows:
            operacion = operaciones.get(row.get('id_operacion_pedido'))
            enriched.append({
                **row,
                'empleado_nombre_completo': nombre_completo(usuarios.get(row.get('id_usuario'))),
                'pedido_codigo_sec': codigo_secuencia(pedidos.get(row.get('id_pedido'))),
                'operacion_desc': operacion['nombre_operacion'] if operacion else '---',
            })
        return enriched

    def build_create_payload(self, data):
        return {
            'id_asignacion': new_id(),
            'id_usuario': data['id_usuario'],
            'id_operacion_pedido': data['id_operacion_pedido'],
            'cantidad_asignada': data['cantidad_asignada'],
            'fecha_asignacion': now_iso(),
        }

    def validate_business(self, payload, current):
        """
        Verifica que empleado y operación existan y que la cantidad quepa en
        el pedido. Completa id_pedido a partir de la operación.
        """
        errors = {}
        current = current or {}

        if 'id_usuario' in payload and not fetch_one('usuario', 'id_usuario', payload['id_usuario']):
            errors['id_usuario'] = ['El empleado no existe']

        id_operacion = payload.get('id_operacion_pedido', current.get('id_operacion_pedido'))
        operacion = fetch_one('operaciones_pedido', 'id_operacion_pedido', id_operacion)
        if not operacion:
            errors['id_operacion_pedido'] = ['La operación no existe']
        if errors:
            return errors

        pedido = fetch_one('pedido', 'id_pedido', operacion.get('id_pedido'))
        if not pedido:
            return {'id_operacion_pedido': ['El pedido de la operación no existe']}

        payload['id_pedido'] = pedido['id_pedido']

        cantidad = payload.get('cantidad_asignada', current.get('cantidad_asignada'))
        message = pedido_services.check_assignment_fits(pedido, cantidad, current.get('id_asignacion'))
        if message:
            return {'cantidad_asignada': [message]}

        return None
