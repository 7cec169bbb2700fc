"""
Vistas de Registros de trabajo

Cada registro anota una cantidad trabajada sobre una asignación. La suma de
lo trabajado no puede superar la cantidad asignada.
"""

from datetime import datetime

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.core.lookups import index_by, nombre_completo
from apps.core.search import filter_rows
from apps.core.viewsets import TablaViewSet, error_response
from apps.core.validators import new_id, now_iso
from apps.pedidos.services import to_number
from services.supabase_service import fetch_data, fetch_one
from .serializers import RegistroSerializer
import logging

logger = logging.getLogger(__name__)

USUARIO_NO_ENCONTRADO = 'Usuario No Encontrado'
SIN_DATO = '-'


def _parse_fecha(value):
    try:
        return datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except (TypeError, ValueError):
        return None


def group_by_assignment(registros):
    """
    Agrupa registros por asignación sumando cantidad_trabajada y pago.

    Conserva la fecha_registro más reciente de cada grupo.
    """
    groups = {}
    for registro in registros:
        key = registro.get('id_asignacion')
        group = groups.get(key)
        if group is None:
            group = groups[key] = {**registro, 'cantidad_trabajada': 0, 'pago': 0}

        group['cantidad_trabajada'] += to_number(registro.get('cantidad_trabajada'))
        group['pago'] += to_number(registro.get('pago'))

        fecha = _parse_fecha(registro.get('fecha_registro'))
        latest = _parse_fecha(group.get('fecha_registro'))
        if fecha and (latest is None or fecha > latest):
            group['fecha_registro'] = registro['fecha_registro']

    return list(groups.values())


class RegistroViewSet(TablaViewSet):
    """
    ViewSet para gestionar registros de trabajo.

    Endpoints:
        GET /api/registros/ - Lista (?id_asignacion=, ?search=)
        POST /api/registros/ - Crea un registro
        GET/PUT/PATCH/DELETE /api/registros/{id}/
        GET /api/registros/agrupados/ - Totales por asignación (?id_pedido=, ?search=)
    """

    table = 'registro_trabajo'
    id_field = 'id_registro'
    order_by = 'fecha_registro'
    serializer_class = RegistroSerializer
    filter_params = ('id_asignacion',)
    label = 'registro'
    not_found_message = 'Registro no encontrado'

    def build_create_payload(self, data):
        return {
            'id_registro': new_id(),
            'id_asignacion': data['id_asignacion'],
            'cantidad_trabajada': data['cantidad_trabajada'],
            'pago': data.get('pago', 0),
            'fecha_registro': now_iso(),
        }

    def validate_business(self, payload, current):
        current = current or {}
        id_asignacion = payload.get('id_asignacion', current.get('id_asignacion'))

        asignacion = fetch_one('asignacion', 'id_asignacion', id_asignacion)
        if not asignacion:
            return {'id_asignacion': ['La asignación no existe']}

        if 'cantidad_trabajada' not in payload and 'id_asignacion' not in payload:
            return None

        result = fetch_data(self.table, filters={'id_asignacion': id_asignacion})
        if not result['success']:
            raise RuntimeError('No se pudo verificar la cantidad trabajada')

        trabajado = sum(
            to_number(row.get('cantidad_trabajada'))
            for row in result['data']
            if row.get('id_registro') != current.get('id_registro')
        )
        cantidad = payload.get('cantidad_trabajada', current.get('cantidad_trabajada'))
        asignada = to_number(asignacion.get('cantidad_asignada'))

        if trabajado + to_number(cantidad) > asignada:
            return {
                'cantidad_trabajada': [
                    f"Excede la cantidad asignada. Pendiente: {max(0, asignada - trabajado)}"
                ]
            }
        return None

    @action(detail=False, methods=['get'])
    def agrupados(self, request):
        """Registros agrupados por asignación con datos de empleado, pedido y operación"""
        result = fetch_data(self.table, order_by=self.order_by)
        if not result['success']:
            return error_response('Error al obtener registros', status.HTTP_500_INTERNAL_SERVER_ERROR)

        groups = group_by_assignment(result['data'])

        try:
            asignaciones = index_by('asignacion', 'id_asignacion', [g.get('id_asignacion') for g in groups])
            usuarios = index_by('usuario', 'id_usuario', [a.get('id_usuario') for a in asignaciones.values()])
            pedidos = index_by('pedido', 'id_pedido', [a.get('id_pedido') for a in asignaciones.values()])
            operaciones = index_by('operaciones_pedido', 'id_operacion_pedido',
                                   [a.get('id_operacion_pedido') for a in asignaciones.values()])
        except RuntimeError as e:
            logger.error(str(e))
            return error_response('Error al obtener registros', status.HTTP_500_INTERNAL_SERVER_ERROR)

        rows = []
        for group in groups:
            asignacion = asignaciones.get(group.get('id_asignacion'))
            usuario = pedido = operacion = None
            if asignacion:
                usuario = usuarios.get(asignacion.get('id_usuario'))
                pedido = pedidos.get(asignacion.get('id_pedido'))
                operacion = operaciones.get(asignacion.get('id_operacion_pedido'))

            if usuario:
                nombre_usuario = nombre_completo(usuario)
            else:
                nombre_usuario = USUARIO_NO_ENCONTRADO if asignacion else SIN_DATO

            if pedido:
                secuencia = f"-{pedido['secuencia']}" if pedido.get('secuencia') else ''
                codigo_pedido = f"{pedido.get('codigo') or ''}{secuencia}"
            else:
                codigo_pedido = SIN_DATO

            rows.append({
                **group,
                'nombre_usuario': nombre_usuario,
                'codigo_pedido': codigo_pedido,
                'nombre_operacion': operacion['nombre_operacion'] if operacion else SIN_DATO,
                'cantidad_asignada': asignacion.get('cantidad_asignada') if asignacion else 0,
                'id_pedido': pedido['id_pedido'] if pedido else None,
            })

        id_pedido = request.query_params.get('id_pedido')
        if id_pedido:
            rows = [row for row in rows if row['id_pedido'] == id_pedido]

        rows = filter_rows(rows, request.query_params.get('search'))
        return Response(rows)
