"""
Vistas de Dashboard

Proporciona KPIs y datos para los gráficos del dashboard principal.
Las lecturas usan el cache de corta duración de supabase_service.
"""

from collections import Counter, OrderedDict

from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from services.supabase_service import fetch_data, get_cache
from apps.pedidos.services import to_number
import logging

logger = logging.getLogger(__name__)

SIN_ROL = 'Sin Rol'


def _read(table, select='*'):
    result = fetch_data(table, select=select, use_cache=True)
    if not result['success']:
        raise RuntimeError(f"Error al obtener {table}: {result['error']}")
    return result['data']


def _por_dia(rows, field, value=None):
    """Agrupa filas por día (YYYY-MM-DD) en orden cronológico."""
    totals = OrderedDict()
    for row in sorted((r for r in rows if r.get(field)), key=lambda r: str(r[field])):
        day = str(row[field])[:10]
        totals[day] = totals.get(day, 0) + (value(row) if value else 1)
    return totals


@api_view(['GET'])
def get_stats(request):
    """
    Obtiene los totales del dashboard desde Supabase.

    GET /api/dashboard/stats/

    Returns:
        {
            "totalPedidos": 12,
            "totalUsuarios": 8,
            "totalAsignaciones": 30,
            "totalPagos": 5,
            "totalRegistrosTrabajo": 41,
            "montoTotalPagos": 1250.5
        }
    """
    try:
        pagos = _read('pago', 'id_pago,monto')

        return Response({
            'totalPedidos': len(_read('pedido', 'id_pedido')),
            'totalUsuarios': len(_read('usuario', 'id_usuario')),
            'totalAsignaciones': len(_read('asignacion', 'id_asignacion')),
            'totalPagos': len(pagos),
            'totalRegistrosTrabajo': len(_read('registro_trabajo', 'id_registro')),
            'montoTotalPagos': sum(to_number(pago.get('monto')) for pago in pagos),
        })

    except RuntimeError as e:
        logger.error(f"Error al obtener estadísticas: {str(e)}")
        return Response(
            {'error': 'Error al obtener estadísticas'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
def get_graficos(request):
    """
    Datos de los gráficos del dashboard.

    GET /api/dashboard/graficos/

    Returns:
        {
            "pedidos_por_dia": [{"fecha": "2026-01-05", "pedidos": 3}, ...],  # últimos 7 días con pedidos
            "usuarios_por_rol": [{"rol": "admin", "total": 1}, ...],
            "pagos_por_dia": [{"fecha": "2026-01-05", "monto": 150.0}, ...]  # últimos 10 días con pagos
        }
    """
    try:
        pedidos = _read('pedido', 'id_pedido,fecha')
        usuarios = _read('usuario', 'id_usuario,rol')
        pagos = _read('pago', 'id_pago,monto,fecha_pago')
    except RuntimeError as e:
        logger.error(f"Error al obtener datos de gráficos: {str(e)}")
        return Response(
            {'error': 'Error al obtener datos de gráficos'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    pedidos_por_dia = _por_dia(pedidos, 'fecha')
    pagos_por_dia = _por_dia(pagos, 'fecha_pago', lambda pago: to_number(pago.get('monto')))
    roles = Counter(usuario.get('rol') or SIN_ROL for usuario in usuarios)

    return Response({
        'pedidos_por_dia': [
            {'fecha': fecha, 'pedidos': total}
            for fecha, total in list(pedidos_por_dia.items())[-7:]
        ],
        'usuarios_por_rol': [
            {'rol': rol, 'total': total}
            for rol, total in roles.items()
        ],
        'pagos_por_dia': [
            {'fecha': fecha, 'monto': monto}
            for fecha, monto in list(pagos_por_dia.items())[-10:]
        ],
    })


@api_view(['POST'])
def clear_cache(request):
    """
    Limpia el cache de lecturas.

    POST /api/dashboard/cache/clear/

    Body (opcional):
        {"table": "pedido"}
    """
    table = request.data.get('table') if hasattr(request.data, 'get') else None
    removed = get_cache().clear(table or None)

    logger.info(f"🗑️ Cache limpiado ({table or 'todo'}): {removed} entradas")
    return Response({'success': True, 'table': table or None, 'cleared': removed})
