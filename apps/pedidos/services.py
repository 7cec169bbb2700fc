"""
Cantidad disponible de un pedido.

La suma de cantidad_asignada de todas las asignaciones de las operaciones de
un pedido no debe superar su cantidad_total. El cálculo se hace en cada
solicitud, siempre sin cache, y nunca se guarda.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Optional

from services.supabase_service import fetch_data

logger = logging.getLogger(__name__)


def to_number(value) -> float:
    """Convierte a número; lo no numérico cuenta como 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if number != number:  # NaN
        return 0
    return int(number) if number.is_integer() else number


def get_order_operations(id_pedido: str) -> List[Dict]:
    result = fetch_data('operaciones_pedido', filters={'id_pedido': id_pedido})
    if not result['success']:
        raise RuntimeError(f"No se pudieron leer las operaciones del pedido {id_pedido}")
    return result['data']


def get_order_assignments(id_pedido: str) -> List[Dict]:
    """Asignaciones cuya operación pertenece al pedido."""
    operation_ids = [op['id_operacion_pedido'] for op in get_order_operations(id_pedido)]

    result = fetch_data('asignacion', in_filters={'id_operacion_pedido': operation_ids})
    if not result['success']:
        raise RuntimeError(f"No se pudieron leer las asignaciones del pedido {id_pedido}")
    return result['data']


def assigned_total(id_pedido: str, exclude_assignment_id: Optional[str] = None):
    return sum(
        to_number(row.get('cantidad_asignada'))
        for row in get_order_assignments(id_pedido)
        if exclude_assignment_id is None or row.get('id_asignacion') != exclude_assignment_id
    )


def assigned_total_by_operation(id_pedido: str) -> Dict[str, float]:
    totals = defaultdict(int)
    for row in get_order_assignments(id_pedido):
        totals[row.get('id_operacion_pedido')] += to_number(row.get('cantidad_asignada'))
    return dict(totals)


def compute_available_quantity(pedido: Dict, exclude_assignment_id: Optional[str] = None):
    """
    Cantidad aún asignable del pedido.

    Args:
        pedido: Fila de pedido (id_pedido, cantidad_total)
        exclude_assignment_id: Asignación a ignorar (la que se está editando)

    Returns:
        max(0, cantidad_total - suma asignada)
    """
    total = to_number(pedido.get('cantidad_total'))
    used = assigned_total(pedido['id_pedido'], exclude_assignment_id)
    return max(0, total - used)


def check_assignment_fits(pedido: Dict, cantidad, exclude_assignment_id: Optional[str] = None) -> Optional[str]:
    """
    Returns:
        Mensaje de error si la cantidad excede lo disponible, o None
    """
    total = to_number(pedido.get('cantidad_total'))
    others = assigned_total(pedido['id_pedido'], exclude_assignment_id)

    if to_number(cantidad) + others > total:
        available = max(0, total - others)
        logger.info(f"Asignación rechazada en pedido {pedido['id_pedido']}: disponible {available}")
        return f"Excede el total disponible del pedido. Disponible: {available}"

    return None
