"""Vistas de Pagos a empleados"""

from apps.core.lookups import index_by, nombre_completo
from apps.core.viewsets import TablaViewSet
from apps.core.validators import new_id, now_iso
from services.supabase_service import fetch_one
from .serializers import PagoSerializer
import logging

logger = logging.getLogger(__name__)


class PagoViewSet(TablaViewSet):
    """
    ViewSet para gestionar pagos.

    Endpoints:
        GET /api/pagos/ - Lista (?id_usuario=, ?search=)
        POST /api/pagos/ - Registra un pago
        GET/PUT/PATCH/DELETE /api/pagos/{id}/
    """

    table = 'pago'
    id_field = 'id_pago'
    order_by = 'fecha_pago'
    serializer_class = PagoSerializer
    filter_params = ('id_usuario',)
    label = 'pago'
    not_found_message = 'Pago no encontrado'

    def enrich_rows(self, rows):
        usuarios = index_by('usuario', 'id_usuario', [row.get('id_usuario') for row in rows])
        return [
            {**row, 'empleado_nombre_completo': nombre_completo(usuarios.get(row.get('id_usuario')))}
            for row in rows
        ]

    def build_create_payload(self, data):
        fecha_pago = data.get('fecha_pago')
        return {
            'id_pago': new_id(),
            'id_usuario': data['id_usuario'],
            'monto': data['monto'],
            'concepto': data.get('concepto') or '',
            'fecha_pago': fecha_pago.isoformat() if fecha_pago else now_iso(),
        }

    def build_update_payload(self, data, current):
        payload = dict(data)
        if 'fecha_pago' in payload:
            if payload['fecha_pago']:
                payload['fecha_pago'] = payload['fecha_pago'].isoformat()
            else:
                del payload['fecha_pago']
        if 'concepto' in payload:
            payload['concepto'] = payload['concepto'] or ''
        return payload

    def validate_business(self, payload, current):
        if 'id_usuario' in payload and not fetch_one('usuario', 'id_usuario', payload['id_usuario']):
            return {'id_usuario': ['El empleado no existe']}
        return None
