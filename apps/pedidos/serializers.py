"""Serializers de Pedidos"""

from rest_framework import serializers

from apps.core.validators import SanitizedCharField


class PedidoSerializer(serializers.Serializer):
    codigo = SanitizedCharField(max_length=50, required=False)
    descripcion = SanitizedCharField(max_length=200, required=False)
    minutos_total = serializers.FloatField(
        min_value=0,
        max_value=99999,
        error_messages={
            'required': 'Minutos total es requerido',
            'null': 'Minutos total es requerido',
            'invalid': 'Minutos total debe ser un número',
            'min_value': 'Minutos total no puede ser negativo',
            'max_value': 'Minutos total no puede superar 99999',
        }
    )
    secuencia = serializers.IntegerField(
        min_value=0,
        max_value=9999,
        error_messages={
            'required': 'Secuencia es requerida',
            'null': 'Secuencia es requerida',
            'invalid': 'Secuencia debe ser un número entero',
            'min_value': 'Secuencia no puede ser negativa',
            'max_value': 'Secuencia no puede superar 9999',
        }
    )
    cantidad_total = serializers.IntegerField(
        min_value=0,
        max_value=999999,
        error_messages={
            'required': 'Cantidad total es requerida',
            'null': 'Cantidad total es requerida',
            'invalid': 'Cantidad total debe ser un número entero',
            'min_value': 'Cantidad total no puede ser negativa',
            'max_value': 'Cantidad total no puede superar 999999',
        }
    )

    def validate_minutos_total(self, value):
        return int(value) if float(value).is_integer() else value
