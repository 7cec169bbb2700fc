"""
Cache Service

Cache en memoria con expiración fija para lecturas genéricas de tablas.

Cada entrada guarda los datos y el instante en que se guardaron. Una
escritura sobre una tabla limpia todas las claves que contienen su nombre.
"""

import json
import logging
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SECONDS = 20


def build_cache_key(table: str, options: Dict) -> str:
    """
    Genera la clave de cache para una tabla y sus opciones de consulta.

    Example:
        >>> build_cache_key('pedido', {'limit': 1})
        'pedido_{"limit": 1}'
    """
    return f"{table}_{json.dumps(options, sort_keys=True, default=str)}"


class CacheManager:
    """
    Mapa clave -> {data, timestamp} con expiración de ``duration_seconds``.
    """

    def __init__(self, duration_seconds: float = DEFAULT_CACHE_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.duration_seconds = duration_seconds
        self._clock = clock
        self._entries: Dict[str, Dict[str, Any]] = {}

    def set(self, key: str, data: Any) -> None:
        self._entries[key] = {
            'data': data,
            'timestamp': self._clock()
        }

    def get(self, key: str) -> Optional[Any]:
        cached = self._entries.get(key)
        if cached is None:
            return None

        if self._clock() - cached['timestamp'] > self.duration_seconds:
            del self._entries[key]
            return None

        return cached['data']

    def clear(self, pattern: Optional[str] = None) -> int:
        """
        Limpia las entradas cuya clave contiene ``pattern``.

        Sin patrón limpia todo el cache.

        Returns:
            int: Cantidad de entradas eliminadas
        """
        if pattern:
            keys = [key for key in self._entries if pattern in key]
            for key in keys:
                del self._entries[key]
            removed = len(keys)
        else:
            removed = len(self._entries)
            self._entries.clear()

        logger.debug(f"Cache limpiado ({pattern or 'todo'}): {removed} entradas")
        return removed

    def __len__(self):
        return len(self._entries)
