"""Serializers de Operaciones de pedido"""

import re

from rest_framework import serializers

# Caracteres no permitidos en el nombre de la operación
FORBIDDEN_NAME_CHARS = re.compile(r'[<>{}\[\]\\^`|~]')


class OperacionSerializer(serializers.Serializer):
    id_pedido = serializers.CharField(
        error_messages={'required': 'Pedido es requerido', 'blank': 'Pedido es requerido'}
    )
    nombre_operacion = serializers.CharField(
        max_length=100,
        error_messages={
            'required': 'Nombre de operación es requerido',
            'blank': 'Nombre de operación es requerido',
            'max_length': 'Nombre de operación no puede superar 100 caracteres',
        }
    )
    minutos_unidad = serializers.FloatField(
        required=False,
        allow_null=True,
        min_value=0,
        error_messages={
            'invalid': 'Minutos por unidad debe ser un número',
            'min_value': 'Minutos por unidad no puede ser negativo',
        }
    )

    def validate_nombre_operacion(self, value):
        if FORBIDDEN_NAME_CHARS.search(value):
            raise serializers.ValidationError('Nombre de operación contiene caracteres no permitidos')
        return value

    def to_internal_value(self, data):
        # Un minutos_unidad vacío se guarda como 0
        if hasattr(data, 'get') and data.get('minutos_unidad') == '':
            data = {**data, 'minutos_unidad': None}
        return super().to_internal_value(data)

    def validate_minutos_unidad(self, value):
        if value is None:
            return 0
        return int(value) if float(value).is_integer() else value
