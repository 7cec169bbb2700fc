"""Utilidades de validación y generación de valores en el servidor."""

import re
import uuid

from django.utils import timezone
from rest_framework import serializers

# Caracteres retirados de los campos de texto libre
UNSAFE_TEXT_CHARS = re.compile(r'[<>"\'%;()&+]')


def sanitize_text(text, max_length):
    """
    Trunca a ``max_length`` y retira caracteres de control de markup/SQL.

    Example:
        >>> sanitize_text('Polo <rojo>', 50)
        'Polo rojo'
    """
    if not text:
        return ''
    return UNSAFE_TEXT_CHARS.sub('', str(text)[:max_length])


def new_id():
    """Identificador UUID4 como texto."""
    return str(uuid.uuid4())


def now_iso():
    """Fecha y hora local actual en ISO 8601."""
    return timezone.localtime().isoformat()


def next_sequential_id(existing_ids, prefix, width=3):
    """
    Siguiente identificador ``prefix`` + número, a partir del mayor sufijo
    numérico existente.

    Example:
        >>> next_sequential_id(['OPP001', 'OPP007'], 'OPP')
        'OPP008'
        >>> next_sequential_id([], 'OPP')
        'OPP001'
    """
    numbers = []
    for value in existing_ids:
        match = re.search(r'\d+$', str(value or ''))
        numbers.append(int(match.group()) if match else 0)

    return f"{prefix}{str(max(numbers, default=0) + 1).zfill(width)}"


class SanitizedCharField(serializers.CharField):
    """CharField que aplica sanitize_text con su max_length."""

    def __init__(self, **kwargs):
        kwargs.setdefault('allow_blank', True)
        kwargs.setdefault('trim_whitespace', True)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        return sanitize_text(value, self.max_length or len(value))
