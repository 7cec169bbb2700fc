"""
Comando para dar de alta o promover un administrador del taller.

La cuenta debe existir en Supabase Auth; el comando inicia sesión con ella
y guarda (o actualiza) su perfil con rol admin.
"""

from django.core.management.base import BaseCommand, CommandError

from rest_framework import serializers

from services import auth_service, supabase_service
from apps.usuarios.validators import validate_dni, validate_celular
import logging

logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = 'Crea o actualiza el perfil admin de una cuenta existente de Supabase Auth'

    def add_arguments(self, parser):
        parser.add_argument('--email', required=True, help='Correo de la cuenta de Auth')
        parser.add_argument('--password', required=True, help='Contraseña de la cuenta')
        parser.add_argument('--nombre', required=True)
        parser.add_argument('--apellidos', required=True)
        parser.add_argument('--dni', required=True, help='DNI de 8 dígitos')
        parser.add_argument('--celular', default=None, help='Celular de 9 dígitos (opcional)')

    def handle(self, *args, **options):
        try:
            validate_dni(options['dni'])
            validate_celular(options['celular'])
        except serializers.ValidationError as e:
            raise CommandError(' '.join(str(detail) for detail in e.detail))

        self.stdout.write(f"🔐 Iniciando sesión como {options['email']}...")

        try:
            client = supabase_service.create_auth_client()
            response = client.auth.sign_in_with_password({
                'email': options['email'],
                'password': options['password']
            })
        except Exception as e:
            raise CommandError(f"No se pudo iniciar sesión: {str(e)}")

        if response.user is None:
            raise CommandError('No se pudo iniciar sesión: respuesta sin usuario')

        profile = {
            'id_usuario': response.user.id,
            'nombre': options['nombre'],
            'apellidos': options['apellidos'],
            'dni': options['dni'],
            'celular': options['celular'] or None,
            'rol': auth_service.ROL_ADMIN,
        }

        result = supabase_service.upsert_data('usuario', profile, on_conflict='id_usuario')
        if not result['success']:
            raise CommandError(f"Error al guardar perfil: {result['error']}")

        self.stdout.write(
            self.style.SUCCESS(f"✅ Administrador listo: {options['nombre']} {options['apellidos']}")
        )
