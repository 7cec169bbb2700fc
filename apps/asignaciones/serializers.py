"""Serializers de Asignaciones"""

from rest_framework import serializers


class AsignacionSerializer(serializers.Serializer):
    id_usuario = serializers.CharField(
        error_messages={'required': 'Empleado es requerido', 'blank': 'Empleado es requerido'}
    )
    id_operacion_pedido = serializers.CharField(
        error_messages={'required': 'Operación es requerida', 'blank': 'Operación es requerida'}
    )
    cantidad_asignada = serializers.IntegerField(
        min_value=1,
        error_messages={
            'required': 'Cantidad es requerida',
            'null': 'Cantidad es requerida',
            'invalid': 'Cantidad debe ser un número entero',
            'min_value': 'Cantidad debe ser mayor a 0',
        }
    )
