"""Validadores de identificadores peruanos: DNI y celular."""

import re

from rest_framework import serializers

DNI_PATTERN = re.compile(r'^\d{8}$')
CELULAR_PATTERN = re.compile(r'^\d{9}$')


def validate_dni(value):
    if not DNI_PATTERN.match(str(value or '')):
        raise serializers.ValidationError('DNI debe tener exactamente 8 dígitos')
    return value


def validate_celular(value):
    # Vacío es válido: el celular es opcional
    if value and not CELULAR_PATTERN.match(str(value)):
        raise serializers.ValidationError('Celular debe tener exactamente 9 dígitos')
    return value
