"""Serializers de Usuarios"""

from rest_framework import serializers

from services.auth_service import ROLES
from .validators import validate_dni, validate_celular


class UsuarioSerializer(serializers.Serializer):
    """
    Valida los datos de un usuario del taller.

    El DNI es obligatorio al crear y opcional al editar; la contraseña solo
    se acepta al crear. El correo se deriva del DNI y no se guarda en la
    tabla usuario.
    """

    nombre = serializers.CharField(
        max_length=100,
        error_messages={'blank': 'Nombre es requerido', 'required': 'Nombre es requerido'}
    )
    apellidos = serializers.CharField(
        max_length=100,
        error_messages={'blank': 'Apellidos son requeridos', 'required': 'Apellidos son requeridos'}
    )
    dni = serializers.CharField(required=False, allow_blank=True, validators=[validate_dni])
    celular = serializers.CharField(required=False, allow_blank=True, allow_null=True,
                                    validators=[validate_celular])
    rol = serializers.ChoiceField(
        choices=ROLES,
        required=False,
        error_messages={'invalid_choice': 'Rol inválido'}
    )
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False,
                                     write_only=True)

    @property
    def is_creating(self):
        return 'current' not in self.context

    def validate(self, attrs):
        if self.is_creating:
            errors = {}
            if not attrs.get('dni'):
                errors['dni'] = ['DNI es requerido']
            if len(attrs.get('password') or '') < 6:
                errors['password'] = ['Contraseña debe tener al menos 6 caracteres']
            if errors:
                raise serializers.ValidationError(errors)
        return attrs


class PasswordSerializer(serializers.Serializer):
    password = serializers.CharField(
        min_length=6,
        trim_whitespace=False,
        error_messages={'min_length': 'Contraseña debe tener al menos 6 caracteres'}
    )
