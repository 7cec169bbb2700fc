"""
ViewSet genérico sobre una tabla de Supabase.

Cada app define la tabla, su campo ID, el orden de listado, el serializer
de validación y los ganchos de negocio; el ViewSet resuelve el CRUD con
las operaciones de services.supabase_service.
"""

import logging

from rest_framework import viewsets, status
from rest_framework.response import Response

from apps.core.search import filter_rows
from services.supabase_service import (
    fetch_data,
    create_data,
    update_data,
    delete_data,
    is_foreign_key_violation,
)

logger = logging.getLogger(__name__)

FORM_ERRORS = 'Corrige los errores del formulario'


def error_response(message, status_code, **extra):
    body = {'error': message}
    body.update(extra)
    return Response(body, status=status_code)


def validation_response(errors):
    return error_response(FORM_ERRORS, status.HTTP_400_BAD_REQUEST, errors=errors)


class TablaViewSet(viewsets.ViewSet):
    """
    CRUD de una tabla de Supabase.

    Atributos a definir:
        table: Nombre de la tabla
        id_field: Columna ID
        order_by / ascending: Orden del listado
        serializer_class: Serializer de validación de entrada
        filter_params: Query params que se aplican como filtros de igualdad
        label: Nombre en mensajes ('pedido', 'asignación', ...)
        not_found_message: Mensaje 404
        fk_message: Mensaje cuando el borrado viola una llave foránea

    Ganchos:
        enrich_rows(rows): Agrega columnas derivadas al listado
        build_create_payload(data): Fila a insertar
        build_update_payload(data, current): Columnas a actualizar
        validate_business(payload, current): Dict de errores o None
    """

    table = None
    id_field = None
    order_by = None
    ascending = False
    serializer_class = None
    filter_params = ()
    label = 'registro'
    not_found_message = 'Registro no encontrado'
    fk_message = 'No se puede eliminar: hay registros asociados.'

    # -- ganchos ---------------------------------------------------------

    def enrich_rows(self, rows):
        return rows

    def build_create_payload(self, data):
        return dict(data)

    def build_update_payload(self, data, current):
        return dict(data)

    def validate_business(self, payload, current):
        return None

    def get_serializer(self, *args, **kwargs):
        return self.serializer_class(*args, **kwargs)

    # -- utilidades ------------------------------------------------------

    def not_found(self):
        return error_response(self.not_found_message, status.HTTP_404_NOT_FOUND)

    def fetch_current(self, pk):
        """
        Returns:
            (fila, None) si existe; (None, Response) si no existe o hubo error
        """
        result = fetch_data(self.table, filters={self.id_field: pk}, limit=1)
        if not result['success']:
            return None, error_response(
                f"Error al obtener {self.label}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        if not result['data']:
            return None, self.not_found()
        return result['data'][0], None

    # -- acciones --------------------------------------------------------

    def list(self, request):
        filters = {param: request.query_params.get(param) for param in self.filter_params}

        result = fetch_data(
            self.table,
            order_by=self.order_by,
            ascending=self.ascending,
            filters=filters
        )

        if not result['success']:
            return error_response(
                f"Error al obtener {self.table}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        try:
            rows = self.enrich_rows(result['data'])
        except RuntimeError as e:
            logger.error(str(e))
            return error_response(
                f"Error al obtener {self.table}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

        rows = filter_rows(rows, request.query_params.get('search'))

        logger.info(f"{self.table} obtenidos: {len(rows)}")
        return Response(rows)

    def retrieve(self, request, pk=None):
        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        try:
            return Response(self.enrich_rows([current])[0])
        except RuntimeError as e:
            logger.error(str(e))
            return error_response(
                f"Error al obtener {self.label}",
                status.HTTP_500_INTERNAL_SERVER_ERROR
            )

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            payload = self.build_create_payload(serializer.validated_data)
            errors = self.validate_business(payload, None)
        except RuntimeError as e:
            logger.error(str(e))
            return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        if errors:
            return validation_response(errors)

        result = create_data(self.table, payload)
        if not result['success']:
            return error_response(result['error'], status.HTTP_500_INTERNAL_SERVER_ERROR)

        created = result['data'][0] if result['data'] else payload
        logger.info(f"Creado en {self.table}: {created.get(self.id_field)}")
        return Response(created, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None, partial=False):
        current, failure = self.fetch_current(pk)
        if failure:
            return failure

        serializer = self.get_serializer(data=request.data, partial=partial, context={'current': current})
        if not serializer.is_valid():
            return validation_response(serializer.errors)

        try:
            payload = self.build_update_payload(serializer.validated_data, current)
            errors = self.validate_business(payload, current)
        except RuntimeError as e:
            logger.error(str(e))
            return error_response(str(e), status.HTTP_500_INTERNAL_SERVER_ERROR)

        if errors:
            return validation_response(errors)

        if not payload:
            return Response(current)

        result = update_data(self.table, self.id_field, pk, payload)
        if not result['success']:
            return error_response(result['error'], status.HTTP_500_INTERNAL_SERVER_ERROR)

        if not result['data']:
            return self.not_found()

        return Response(result['data'][0])

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    def destroy(self, request, pk=None):
        result = delete_data(self.table, self.id_field, pk)

        if not result['success']:
            if is_foreign_key_violation(result):
                logger.warning(f"Borrado de {self.table} {pk} bloqueado por llave foránea")
                return error_response(self.fk_message, status.HTTP_409_CONFLICT, severity='warning')
            return error_response(result['error'], status.HTTP_500_INTERNAL_SERVER_ERROR)

        if not result['data']:
            return self.not_found()

        return Response(status=status.HTTP_204_NO_CONTENT)
