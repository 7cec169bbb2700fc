"""Vistas de Operaciones de pedido"""

from apps.core.lookups import index_by
from apps.core.viewsets import TablaViewSet
from apps.core.validators import next_sequential_id
from services.supabase_service import fetch_data, fetch_one
from .serializers import OperacionSerializer
import logging

logger = logging.getLogger(__name__)

ID_PREFIX = 'OPP'


class OperacionViewSet(TablaViewSet):
    """
    ViewSet para gestionar las operaciones de cada pedido.

    Endpoints:
        GET /api/operaciones/ - Lista operaciones (?id_pedido=, ?search=)
        POST /api/operaciones/ - Crea una operación (ID OPP###)
        GET/PUT/PATCH/DELETE /api/operaciones/{id}/
    """

    table = 'operaciones_pedido'
    id_field = 'id_operacion_pedido'
    order_by = 'id_operacion_pedido'
    ascending = True
    serializer_class = OperacionSerializer
    filter_params = ('id_pedido',)
    label = 'operación'
    not_found_message = 'Operación no encontrada'
    fk_message = 'No se puede eliminar: Hay asignaciones asociadas a esta operación.'

    def enrich_rows(self, rows):
        pedidos = index_by('pedido', 'id_pedido', [row.get('id_pedido') for row in rows])
        return [
            {**row, 'pedido_codigo': (pedidos.get(row.get('id_pedido')) or {}).get('codigo')}
            for row in rows
        ]

    def build_create_payload(self, data):
        existing = fetch_data(self.table, select=self.id_field)
        if not existing['success']:
            raise RuntimeError('No se pudo generar el ID de la operación')

        return {
            'id_operacion_pedido': next_sequential_id(
                [row[self.id_field] for row in existing['data']],
                ID_PREFIX
            ),
            'id_pedido': data['id_pedido'],
            'nombre_operacion': data['nombre_operacion'],
            'minutos_unidad': data.get('minutos_unidad', 0),
        }

    def validate_business(self, payload, current):
        if 'id_pedido' in payload and not fetch_one('pedido', 'id_pedido', payload['id_pedido']):
            return {'id_pedido': ['El pedido no existe']}
        return None
