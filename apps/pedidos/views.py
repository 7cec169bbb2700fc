"""
Vistas de Pedidos

CRUD de pedidos y consultas anidadas: operaciones, asignaciones y cantidad
disponible de cada pedido.
"""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.viewsets import TablaViewSet, error_response
from apps.core.lookups import index_by, nombre_completo, codigo_secuencia
from apps.core.validators import new_id, now_iso
from services.supabase_service import fetch_data
from .serializers import PedidoSerializer
from . import services
import logging

logger = logging.getLogger(__name__)


class PedidoViewSet(TablaViewSet):
    """
    ViewSet para gestionar pedidos desde Supabase.

    Endpoints:
        GET /api/pedidos/ - Lista pedidos (?search=)
        POST /api/pedidos/ - Crea un pedido
        GET /api/pedidos/{id}/ - Obtiene un pedido
        PUT/PATCH /api/pedidos/{id}/ - Actualiza un pedido
        DELETE /api/pedidos/{id}/ - Elimina un pedido
        GET /api/pedidos/{id}/operaciones/ - Operaciones del pedido
        GET /api/pedidos/{id}/asignaciones/ - Asignaciones del pedido
        GET /api/pedidos/{id}/disponible/ - Cantidad disponible
    """

    table = 'pedido'
    id_field = 'id_pedido'
    order_by = 'fecha'
    serializer_class = PedidoSerializer
    label = 'pedido'
    not_found_message = 'Pedido no encontrado'
    fk_message = 'No se puede eliminar: el pedido tiene operaciones o asignaciones asociadas.'

    def enrich_rows(self, rows):
        return [{**row, 'codigo_secuencia': codigo_secuencia(row)} for row in rows]

    def build_create_payload(self, data):
        return {
            'id_pedido': new_id(),
            'codigo': data.get('codigo', ''),
            'descripcion': data.get('descripcion', ''),
            'minutos_total': data['minutos_total'],
            'secuencia': data['secuencia'],
            'cantidad_total': data['cantidad_total'],
            'fecha': now_iso(),
        }

    def validate_business(self, payload, current):
        if current is None or 'cantidad_total' not in payload:
            return None

        assigned = services.assigned_total(current['id_pedido'])

        if payload['cantidad_total'] < assigned:
            return {
                'cantidad_total': [f"No puedes reducir la cantidad a menos de lo ya asignado ({assigned})"]
            }
        return None

    @action(detail=True, methods=['get'])
    def operaciones(self, request, pk=None):
        """Operaciones del pedido"""
        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        result = fetch_data('operaciones_pedido', order_by='id_operacion_pedido',
                            ascending=True, filters={'id_pedido': pk})
        if not result['success']:
            return error_response('Error al obtener operaciones', status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response(result['data'])

    @action(detail=True, methods=['get'])
    def asignaciones(self, request, pk=None):
        """Asignaciones del pedido con nombre de empleado y operación"""
        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        try:
            rows = services.get_order_assignments(pk)
            operations = {op['id_operacion_pedido']: op for op in services.get_order_operations(pk)}
            users_by_id = index_by('usuario', 'id_usuario', [row.get('id_usuario') for row in rows])
        except RuntimeError as e:
            logger.error(str(e))
            return error_response('Error al obtener asignaciones', status.HTTP_500_INTERNAL_SERVER_ERROR)

        data = []
        for row in rows:
            user = users_by_id.get(row.get('id_usuario'))
            operation = operations.get(row.get('id_operacion_pedido'))
            data.append({
                **row,
                'empleado_nombre_completo': nombre_completo(user),
                'operacion_desc': operation['nombre_operacion'] if operation else '---',
            })

        return Response(data)

    @action(detail=True, methods=['get'])
    def disponible(self, request, pk=None):
        """Cantidad asignada y disponible del pedido"""
        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        try:
            assigned = services.assigned_total(pk)
        except RuntimeError as e:
            logger.error(str(e))
            return error_response('Error al calcular la cantidad disponible',
                                  status.HTTP_500_INTERNAL_SERVER_ERROR)

        total = services.to_number(current.get('cantidad_total'))
        return Response({
            'id_pedido': pk,
            'cantidad_total': total,
            'cantidad_asignada': assigned,
            'cantidad_disponible': max(0, total - assigned),
        })
