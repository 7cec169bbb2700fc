"""Serializers de Pagos"""

from decimal import Decimal

from rest_framework import serializers

from apps.core.validators import SanitizedCharField


class PagoSerializer(serializers.Serializer):
    id_usuario = serializers.CharField(
        error_messages={'required': 'Empleado es requerido', 'blank': 'Empleado es requerido'}
    )
    monto = serializers.DecimalField(
        max_digits=8,
        decimal_places=2,
        min_value=Decimal('0.01'),
        max_value=Decimal('999999.99'),
        error_messages={
            'required': 'Monto es requerido',
            'null': 'Monto es requerido',
            'invalid': 'Monto debe ser un número',
            'min_value': 'Monto debe ser mayor a 0',
            'max_value': 'Monto no puede superar 999999.99',
            'max_decimal_places': 'Monto admite como máximo 2 decimales',
            'max_digits': 'Monto no puede superar 999999.99',
        }
    )
    concepto = SanitizedCharField(max_length=200, required=False, allow_null=True)
    fecha_pago = serializers.DateTimeField(required=False, allow_null=True)

    def validate_monto(self, value):
        # Supabase recibe JSON; el Decimal se envía como número
        return float(value)
