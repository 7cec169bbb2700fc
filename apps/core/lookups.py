"""Búsquedas por lote para agregar columnas derivadas a los listados."""

from services.supabase_service import fetch_data


def index_by(table, id_field, ids):
    """
    Lee en una sola consulta las filas cuyos IDs se piden y las indexa.

    Example:
        >>> usuarios = index_by('usuario', 'id_usuario', ['u1', 'u2'])
        >>> usuarios['u1']['nombre']
        'Rosa'

    Raises:
        RuntimeError: Si la lectura falla
    """
    result = fetch_data(table, in_filters={id_field: [value for value in ids if value]})
    if not result['success']:
        raise RuntimeError(f"No se pudo leer {table}: {result['error']}")
    return {row[id_field]: row for row in result['data']}


def nombre_completo(usuario):
    if not usuario:
        return None
    return f"{usuario.get('nombre') or ''} {usuario.get('apellidos') or ''}".strip()


def codigo_secuencia(pedido, separator=' - '):
    if not pedido:
        return None
    return f"{pedido.get('codigo') or ''}{separator}{pedido.get('secuencia')}"
