"""Serializers de Registros de trabajo"""

from decimal import Decimal

from rest_framework import serializers


class RegistroSerializer(serializers.Serializer):
    id_asignacion = serializers.CharField(
        error_messages={'required': 'Asignación es requerida', 'blank': 'Asignación es requerida'}
    )
    cantidad_trabajada = serializers.IntegerField(
        min_value=1,
        error_messages={
            'required': 'Cantidad trabajada es requerida',
            'null': 'Cantidad trabajada es requerida',
            'invalid': 'Cantidad trabajada debe ser un número entero',
            'min_value': 'Cantidad trabajada debe ser mayor a 0',
        }
    )
    pago = serializers.DecimalField(
        max_digits=10,
        decimal_places=2,
        min_value=Decimal('0'),
        required=False,
        error_messages={
            'invalid': 'Pago debe ser un número',
            'min_value': 'Pago no puede ser negativo',
        }
    )

    def validate_pago(self, value):
        return float(value)
