"""
Fixtures de pruebas.

Las pruebas no se conectan a Supabase: un cliente en memoria reemplaza a
get_supabase_client() y create_auth_client() y reproduce las partes del
API de supabase-py que usa el proyecto (tablas, filtros, rpc y Auth).
"""

import uuid
from types import SimpleNamespace

import pytest
from django.core.cache import cache as django_cache
from postgrest.exceptions import APIError
from rest_framework.test import APIClient

from services import supabase_service

# (tabla hija, columna, tabla padre, columna padre)
FOREIGN_KEYS = [
    ('operaciones_pedido', 'id_pedido', 'pedido', 'id_pedido'),
    ('asignacion', 'id_pedido', 'pedido', 'id_pedido'),
    ('asignacion', 'id_operacion_pedido', 'operaciones_pedido', 'id_operacion_pedido'),
    ('asignacion', 'id_usuario', 'usuario', 'id_usuario'),
    ('pago', 'id_usuario', 'usuario', 'id_usuario'),
    ('registro_trabajo', 'id_asignacion', 'asignacion', 'id_asignacion'),
]


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.operation = 'select'
        self.columns = '*'
        self.payload = None
        self.on_conflict = None
        self.conditions = []
        self.ordering = None
        self.max_rows = None

    def select(self, columns='*'):
        self.operation = 'select'
        self.columns = columns
        return self

    def insert(self, rows):
        self.operation = 'insert'
        self.payload = rows if isinstance(rows, list) else [rows]
        return self

    def upsert(self, rows, on_conflict=None):
        self.operation = 'upsert'
        self.payload = rows if isinstance(rows, list) else [rows]
        self.on_conflict = on_conflict
        return self

    def update(self, data):
        self.operation = 'update'
        self.payload = data
        return self

    def delete(self):
        self.operation = 'delete'
        return self

    def eq(self, column, value):
        self.conditions.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.conditions.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self, row):
        return all(condition(row) for condition in self.conditions)

    def _project(self, row):
        if self.columns == '*':
            return dict(row)
        return {column.strip(): row.get(column.strip()) for column in self.columns.split(',')}

    def execute(self):
        self.db.calls.append((self.table, self.operation))

        error = self.db.errors.get((self.table, self.operation))
        if error is not None:
            raise error

        rows = self.db.tables.setdefault(self.table, [])

        if self.operation == 'select':
            result = [row for row in rows if self._matches(row)]
            if self.ordering:
                column, desc = self.ordering
                result.sort(
                    key=lambda row: (row.get(column) is None, row.get(column) if row.get(column) is not None else ''),
                    reverse=desc
                )
            if self.max_rows:
                result = result[:self.max_rows]
            return SimpleNamespace(data=[self._project(row) for row in result])

        if self.operation == 'insert':
            inserted = [dict(row) for row in self.payload]
            rows.extend(inserted)
            return SimpleNamespace(data=[dict(row) for row in inserted])

        if self.operation == 'upsert':
            saved = []
            for new_row in self.payload:
                existing = next(
                    (row for row in rows if row.get(self.on_conflict) == new_row.get(self.on_conflict)),
                    None
                )
                if existing is None:
                    existing = {}
                    rows.append(existing)
                existing.update(new_row)
                saved.append(dict(existing))
            return SimpleNamespace(data=saved)

        if self.operation == 'update':
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return SimpleNamespace(data=updated)

        if self.operation == 'delete':
            doomed = [row for row in rows if self._matches(row)]
            for row in doomed:
                self.db.check_references(self.table, row)
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=[dict(row) for row in doomed])

        raise AssertionError(f"Operación no soportada: {self.operation}")


class FakeRpc:
    def __init__(self, db, function, params):
        self.db = db
        self.function = function
        self.params = params

    def execute(self):
        self.db.calls.append(('rpc', self.function))
        error = self.db.errors.get(('rpc', self.function))
        if error is not None:
            raise error
        handler = self.db.rpc_handlers[self.function]
        return SimpleNamespace(data=handler(self.params))


class FakeAdminAuth:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt):
        self.auth.tokens.pop(jwt, None)

    def update_user_by_id(self, uid, attributes):
        user = self.auth.find(uid)
        if user is None:
            raise Exception('User not found')
        user.update(attributes)
        return SimpleNamespace(user=SimpleNamespace(id=uid))

    def delete_user(self, uid):
        self.auth.users = [user for user in self.auth.users if user['id'] != uid]
        self.auth.tokens = {token: user_id for token, user_id in self.auth.tokens.items() if user_id != uid}


class FakeAuth:
    def __init__(self):
        self.users = []
        self.tokens = {}
        self.sign_outs = 0
        self.admin = FakeAdminAuth(self)

    def find(self, uid):
        return next((user for user in self.users if user['id'] == uid), None)

    def add_user(self, email, password, uid=None):
        user = {'id': uid or str(uuid.uuid4()), 'email': email, 'password': password}
        self.users.append(user)
        return user

    def issue_token(self, uid):
        token = f"token-{uid}"
        self.tokens[token] = uid
        return token

    def sign_in_with_password(self, credentials):
        user = next((u for u in self.users if u['email'] == credentials['email']), None)
        if user is None or user['password'] != credentials['password']:
            raise Exception('Invalid login credentials')
        return SimpleNamespace(
            user=SimpleNamespace(id=user['id']),
            session=SimpleNamespace(access_token=self.issue_token(user['id']), refresh_token='refresh')
        )

    def sign_up(self, credentials):
        if any(user['email'] == credentials['email'] for user in self.users):
            raise Exception('User already registered')
        user = self.add_user(credentials['email'], credentials['password'])
        user['metadata'] = credentials.get('options', {}).get('data', {})
        return SimpleNamespace(user=SimpleNamespace(id=user['id']), session=None)

    def sign_out(self):
        self.sign_outs += 1

    def get_user(self, jwt):
        uid = self.tokens.get(jwt)
        if uid is None:
            raise Exception('invalid JWT')
        return SimpleNamespace(user=SimpleNamespace(id=uid))


class FakeSupabase:
    """Cliente de Supabase en memoria."""

    def __init__(self):
        self.tables = {}
        self.errors = {}
        self.calls = []
        self.auth = FakeAuth()
        self.rpc_handlers = {'eliminar_usuario_completo': self._eliminar_usuario_completo}

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, function, params):
        return FakeRpc(self, function, params)

    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(dict(row) for row in rows)

    def rows(self, table):
        return self.tables.get(table, [])

    def fail(self, table, operation, message='Error de prueba', code=None):
        self.errors[(table, operation)] = APIError({
            'message': message,
            'code': code,
            'hint': None,
            'details': None,
        })

    def check_references(self, table, row):
        for child, column, parent, parent_column in FOREIGN_KEYS:
            if parent != table:
                continue
            if any(child_row.get(column) == row.get(parent_column) for child_row in self.rows(child)):
                raise APIError({
                    'message': f'update or delete on table "{table}" violates foreign key constraint on table "{child}"',
                    'code': '23503',
                    'hint': None,
                    'details': None,
                })

    def _eliminar_usuario_completo(self, params):
        uid = params['p_id_usuario']
        for child in ('pago', 'asignacion'):
            self.tables[child] = [row for row in self.rows(child) if row.get('id_usuario') != uid]
        self.tables['usuario'] = [row for row in self.rows('usuario') if row.get('id_usuario') != uid]
        self.auth.admin.delete_user(uid)
        return None


@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch, settings):
    fake = FakeSupabase()

    monkeypatch.setattr(supabase_service, 'get_supabase_client', lambda use_service_key=False: fake)
    monkeypatch.setattr(supabase_service, 'create_auth_client', lambda: fake)
    monkeypatch.setattr(supabase_service, '_cache', None)

    settings.WRITE_RATE_LIMIT = None
    settings.TALLER_EMAIL_DOMAIN = 'taller.com'
    django_cache.clear()

    return fake


def make_user(fake, dni, rol, password='secreto1', nombre='Rosa', apellidos='Lopez', celular=None):
    user = fake.auth.add_user(f"{dni}@taller.com", password)
    profile = {
        'id_usuario': user['id'],
        'nombre': nombre,
        'apellidos': apellidos,
        'dni': dni,
        'celular': celular,
        'rol': rol,
        'fecha_creacion': '2026-01-01T08:00:00-05:00',
    }
    fake.seed('usuario', profile)
    return profile


@pytest.fixture
def admin_user(fake_supabase):
    return make_user(fake_supabase, '11111111', 'admin')


@pytest.fixture
def empleado(fake_supabase):
    return make_user(fake_supabase, '22222222', 'empleado', nombre='Juan', apellidos='Perez')


@pytest.fixture
def api_client(fake_supabase, admin_user):
    client = APIClient()
    token = fake_supabase.auth.issue_token(admin_user['id_usuario'])
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


@pytest.fixture
def pedido(fake_supabase):
    row = {
        'id_pedido': 'ped-1',
        'codigo': 'P-100',
        'descripcion': 'Polos',
        'minutos_total': 120,
        'secuencia': 3,
        'cantidad_total': 100,
        'fecha': '2026-01-10T09:00:00-05:00',
    }
    fake_supabase.seed('pedido', row)
    return row


@pytest.fixture
def operacion(fake_supabase, pedido):
    row = {
        'id_operacion_pedido': 'OPP001',
        'id_pedido': pedido['id_pedido'],
        'nombre_operacion': 'Costura',
        'minutos_unidad': 2,
    }
    fake_supabase.seed('operaciones_pedido', row)
    return row
