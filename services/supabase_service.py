"""
Supabase Service

Este módulo centraliza todas las interacciones con las tablas de Supabase.
Proporciona operaciones CRUD genéricas con un cache de lectura de corta
duración que se invalida en cada escritura sobre la misma tabla.

Funciones principales:
- get_supabase_client(): Obtiene cliente de Supabase
- create_auth_client(): Crea un cliente aislado para sesiones de Auth
- fetch_data(): Lectura genérica (filtros por igualdad, orden, límite)
- create_data() / update_data() / delete_data(): Escrituras genéricas
- call_rpc(): Ejecuta un procedimiento remoto
- is_foreign_key_violation(): Detecta errores de llave foránea

Todas las operaciones devuelven un diccionario
``{'success': bool, 'data': ..., 'error': str | None, 'code': str | None}``.
"""

from supabase import create_client, Client
from django.conf import settings
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from services.cache_service import CacheManager, build_cache_key

logger = logging.getLogger(__name__)

FOREIGN_KEY_VIOLATION = '23503'

# Variable global para mantener el cliente de Supabase
_supabase_client: Optional[Client] = None
_cache: Optional[CacheManager] = None


def get_supabase_client(use_service_key: bool = False) -> Client:
    """
    Obtiene o crea el cliente de Supabase.

    Esta función mantiene una única instancia del cliente con anon_key para
    reutilizar la conexión en múltiples llamadas.

    Args:
        use_service_key: Si True, usa la service_key en lugar de anon_key
                        (necesario para bypass RLS y para la API admin de Auth)

    Returns:
        Client: Cliente de Supabase inicializado

    Raises:
        ValueError: Si faltan credenciales de Supabase
    """
    global _supabase_client

    # Si se solicita service_key, crear un nuevo cliente cada vez
    if use_service_key:
        try:
            config = settings.SUPABASE_CONFIG

            if not config.get('url') or not config.get('service_key'):
                raise ValueError("Service key de Supabase no configurada")

            service_client = create_client(
                supabase_url=config['url'],
                supabase_key=config['service_key']
            )

            logger.debug("Cliente de Supabase con service_key creado")
            return service_client

        except Exception as e:
            logger.error(f"Error al crear cliente con service_key: {str(e)}")
            raise

    # Cliente normal con anon_key (cacheado)
    if _supabase_client is not None:
        return _supabase_client

    try:
        _supabase_client = create_auth_client()
        logger.info("Cliente de Supabase inicializado correctamente")
        return _supabase_client

    except Exception as e:
        logger.error(f"Error al inicializar cliente de Supabase: {str(e)}")
        raise


def create_auth_client() -> Client:
    """
    Crea un cliente con anon_key y sesión propia en memoria.

    Se usa para iniciar sesión o registrar usuarios sin que la sesión del
    usuario quede en el cliente compartido.

    Raises:
        ValueError: Si faltan credenciales de Supabase
    """
    config = settings.SUPABASE_CONFIG

    if not config.get('url') or not config.get('anon_key'):
        raise ValueError("Credenciales de Supabase no configuradas")

    return create_client(
        supabase_url=config['url'],
        supabase_key=config['anon_key']
    )


def get_cache() -> CacheManager:
    """Devuelve el cache de lecturas del proceso."""
    global _cache

    if _cache is None:
        duration = settings.SUPABASE_CONFIG.get('cache_seconds', 20)
        _cache = CacheManager(duration_seconds=duration)

    return _cache


def _ok(data: Any = None) -> Dict:
    return {'success': True, 'data': data, 'error': None, 'code': None}


def _failure(error: Exception, data: Any = None) -> Dict:
    message = getattr(error, 'message', None) or str(error)
    code = getattr(error, 'code', None)
    return {
        'success': False,
        'data': data,
        'error': message,
        'code': str(code) if code is not None else None
    }


def fetch_data(
    table: str,
    select: str = '*',
    order_by: Optional[str] = None,
    ascending: bool = False,
    limit: Optional[int] = None,
    filters: Optional[Dict[str, Any]] = None,
    in_filters: Optional[Dict[str, Iterable]] = None,
    use_cache: bool = False
) -> Dict:
    """
    Operación genérica de lectura.

    Args:
        table: Nombre de la tabla
        select: Columnas a seleccionar
        order_by: Columna de ordenamiento
        ascending: Orden ascendente (por defecto descendente)
        limit: Cantidad máxima de filas
        filters: Filtros de igualdad; los valores None se ignoran
        in_filters: Filtros de pertenencia (columna -> valores)
        use_cache: Si True, usa el cache de lecturas

    Returns:
        Dict con 'data' como lista de filas (lista vacía si hubo error)

    Example:
        >>> result = fetch_data('pedido', order_by='fecha', limit=10)
        >>> if result['success']:
        >>>     print(len(result['data']))
    """
    filters = {k: v for k, v in (filters or {}).items() if v is not None}
    in_filters = {k: sorted(set(v), key=str) for k, v in (in_filters or {}).items()}

    # Un filtro de pertenencia vacío no puede devolver filas
    if any(len(values) == 0 for values in in_filters.values()):
        return _ok([])

    options = {
        'select': select,
        'order_by': order_by,
        'ascending': ascending,
        'limit': limit,
        'filters': filters,
        'in_filters': in_filters,
    }
    cache_key = build_cache_key(table, options)

    if use_cache:
        cached = get_cache().get(cache_key)
        if cached is not None:
            logger.debug(f"📦 Cache hit: {table}")
            return _ok(cached)

    try:
        client = get_supabase_client(use_service_key=True)

        query = client.table(table).select(select)

        for column, value in filters.items():
            query = query.eq(column, value)

        for column, values in in_filters.items():
            query = query.in_(column, values)

        if order_by:
            query = query.order(order_by, desc=not ascending)

        if limit:
            query = query.limit(limit)

        response = query.execute()
        data = response.data or []

        if use_cache:
            get_cache().set(cache_key, data)

        return _ok(data)

    except Exception as e:
        logger.error(f"Error al consultar {table}: {str(e)}")
        return _failure(e, [])


def fetch_one(table: str, id_field: str, value: Any) -> Optional[Dict]:
    """
    Obtiene una fila por su identificador.

    Returns:
        Dict con la fila o None si no existe o hubo error
    """
    if value is None:
        return None

    result = fetch_data(table, filters={id_field: value}, limit=1)
    if result['success'] and result['data']:
        return result['data'][0]
    return None


def create_data(table: str, data: Union[Dict, List[Dict]]) -> Dict:
    """
    Operación genérica de creación.

    Args:
        table: Nombre de la tabla
        data: Fila o lista de filas a insertar

    Returns:
        Dict con 'data' como lista de filas insertadas
    """
    rows = data if isinstance(data, list) else [data]

    try:
        client = get_supabase_client(use_service_key=True)

        response = client.table(table).insert(rows).execute()

        get_cache().clear(table)

        logger.info(f"Insertadas {len(response.data or [])} filas en {table}")
        return _ok(response.data or [])

    except Exception as e:
        logger.error(f"Error al insertar en {table}: {str(e)}")
        return _failure(e)


def upsert_data(table: str, data: Union[Dict, List[Dict]], on_conflict: str) -> Dict:
    """Inserta o actualiza filas según la columna ``on_conflict``."""
    rows = data if isinstance(data, list) else [data]

    try:
        client = get_supabase_client(use_service_key=True)

        response = client.table(table).upsert(rows, on_conflict=on_conflict).execute()

        get_cache().clear(table)

        return _ok(response.data or [])

    except Exception as e:
        logger.error(f"Error al guardar en {table}: {str(e)}")
        return _failure(e)


def update_data(table: str, id_field: str, id_value: Any, data: Dict) -> Dict:
    """
    Operación genérica de actualización.

    Args:
        table: Nombre de la tabla
        id_field: Campo ID de la tabla
        id_value: ID del registro
        data: Columnas a actualizar

    Returns:
        Dict con 'data' como lista de filas actualizadas
    """
    try:
        client = get_supabase_client(use_service_key=True)

        response = client.table(table)\
            .update(data)\
            .eq(id_field, id_value)\
            .execute()

        get_cache().clear(table)

        logger.info(f"Registro {id_value} actualizado en {table}")
        return _ok(response.data or [])

    except Exception as e:
        logger.error(f"Error al actualizar {table} {id_value}: {str(e)}")
        return _failure(e)


def delete_data(table: str, id_field: str, id_value: Any) -> Dict:
    """
    Operación genérica de eliminación.

    Returns:
        Dict con 'data' como lista de filas eliminadas (puede ser vacía)
    """
    try:
        client = get_supabase_client(use_service_key=True)

        response = client.table(table)\
            .delete()\
            .eq(id_field, id_value)\
            .execute()

        get_cache().clear(table)

        logger.info(f"Registro {id_value} eliminado de {table}")
        return _ok(response.data or [])

    except Exception as e:
        logger.error(f"Error al eliminar {table} {id_value}: {str(e)}")
        return _failure(e)


def call_rpc(function: str, params: Dict, table: Optional[str] = None) -> Dict:
    """
    Ejecuta un procedimiento remoto de Postgres.

    Args:
        function: Nombre de la función
        params: Parámetros nombrados
        table: Tabla afectada, para invalidar su cache
    """
    try:
        client = get_supabase_client(use_service_key=True)

        response = client.rpc(function, params).execute()

        if table:
            get_cache().clear(table)

        return _ok(response.data)

    except Exception as e:
        logger.error(f"Error al ejecutar rpc {function}: {str(e)}")
        return _failure(e)


def is_foreign_key_violation(value: Union[Dict, Exception, str, None]) -> bool:
    """
    Indica si un resultado o error corresponde a una violación de llave foránea.

    Acepta el diccionario devuelto por las operaciones de este módulo, una
    excepción o el texto del error.

    Example:
        >>> result = delete_data('asignacion', 'id_asignacion', 'a1')
        >>> if not result['success'] and is_foreign_key_violation(result):
        >>>     print('Tiene registros dependientes')
    """
    if value is None:
        return False

    if isinstance(value, dict):
        code = value.get('code')
        text = str(value.get('error') or '')
    elif isinstance(value, Exception):
        code = getattr(value, 'code', None)
        text = str(value)
    else:
        code = None
        text = str(value)

    if code is not None and str(code) == FOREIGN_KEY_VIOLATION:
        return True

    return FOREIGN_KEY_VIOLATION in text or 'foreign key' in text.lower()
