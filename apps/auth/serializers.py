"""Serializers de Autenticación"""

from rest_framework import serializers

from apps.usuarios.validators import validate_dni


class LoginSerializer(serializers.Serializer):
    """El DNI de 8 dígitos hace de usuario."""

    dni = serializers.CharField(
        error_messages={'blank': 'Por favor ingresa tu DNI', 'required': 'Por favor ingresa tu DNI'},
        validators=[validate_dni]
    )
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={'blank': 'Por favor ingresa tu contraseña', 'required': 'Por favor ingresa tu contraseña'}
    )
