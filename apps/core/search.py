"""Búsqueda de texto sobre filas ya obtenidas."""


def filter_rows(rows, term):
    """
    Filtra las filas donde algún valor contiene el término buscado.

    La comparación no distingue mayúsculas; los valores None se ignoran.

    Example:
        >>> filter_rows([{'codigo': 'P-01'}, {'codigo': 'X'}], 'p-0')
        [{'codigo': 'P-01'}]
    """
    if not term:
        return list(rows)

    needle = str(term).strip().lower()
    if not needle:
        return list(rows)

    return [
        row for row in rows
        if any(value is not None and needle in str(value).lower() for value in row.values())
    ]
