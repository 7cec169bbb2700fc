"""Pruebas de cache_service, supabase_service y auth_service."""

import pytest
from postgrest.exceptions import APIError

from services import auth_service, supabase_service
from services.cache_service import CacheManager, build_cache_key


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestCacheManager:

    def test_entry_expires_after_duration(self):
        clock = FakeClock()
        cache = CacheManager(duration_seconds=20, clock=clock)
        cache.set('pedido_{}', [1])

        clock.now += 20
        assert cache.get('pedido_{}') == [1]

        clock.now += 0.5
        assert cache.get('pedido_{}') is None
        assert len(cache) == 0

    def test_clear_by_substring(self):
        cache = CacheManager()
        cache.set(build_cache_key('pedido', {'limit': 1}), [])
        cache.set(build_cache_key('operaciones_pedido', {}), [])
        cache.set(build_cache_key('pago', {}), [])

        # 'pedido' también coincide con 'operaciones_pedido'
        assert cache.clear('pedido') == 2
        assert len(cache) == 1

        assert cache.clear() == 1
        assert len(cache) == 0

    def test_key_is_stable(self):
        assert build_cache_key('pago', {'b': 1, 'a': 2}) == build_cache_key('pago', {'a': 2, 'b': 1})


class TestSupabaseService:

    def test_fetch_data_filters_and_order(self, fake_supabase):
        fake_supabase.seed(
            'pago',
            {'id_pago': 'a', 'id_usuario': 'u1', 'fecha_pago': '2026-01-01'},
            {'id_pago': 'b', 'id_usuario': 'u1', 'fecha_pago': '2026-01-03'},
            {'id_pago': 'c', 'id_usuario': 'u2', 'fecha_pago': '2026-01-02'},
        )

        result = supabase_service.fetch_data(
            'pago', order_by='fecha_pago', filters={'id_usuario': 'u1', 'concepto': None}
        )

        assert result['success'] is True
        assert [row['id_pago'] for row in result['data']] == ['b', 'a']

    def test_empty_in_filter_skips_query(self, fake_supabase):
        result = supabase_service.fetch_data('asignacion', in_filters={'id_operacion_pedido': []})

        assert result == {'success': True, 'data': [], 'error': None, 'code': None}
        assert fake_supabase.calls == []

    def test_cached_read_is_invalidated_by_write(self, fake_supabase):
        fake_supabase.seed('pedido', {'id_pedido': 'p1'})

        assert len(supabase_service.fetch_data('pedido', use_cache=True)['data']) == 1
        fake_supabase.seed('pedido', {'id_pedido': 'p2'})
        assert len(supabase_service.fetch_data('pedido', use_cache=True)['data']) == 1

        supabase_service.create_data('pedido', {'id_pedido': 'p3'})
        assert len(supabase_service.fetch_data('pedido', use_cache=True)['data']) == 3

    def test_failure_carries_postgres_code(self, fake_supabase):
        fake_supabase.fail('pedido', 'insert', message='duplicate key', code='23505')

        result = supabase_service.create_data('pedido', {'id_pedido': 'p1'})

        assert result['success'] is False
        assert result['error'] == 'duplicate key'
        assert result['code'] == '23505'

    def test_delete_with_dependents_is_foreign_key_violation(self, fake_supabase):
        fake_supabase.seed('asignacion', {'id_asignacion': 'a1'})
        fake_supabase.seed('registro_trabajo', {'id_registro': 'r1', 'id_asignacion': 'a1'})

        result = supabase_service.delete_data('asignacion', 'id_asignacion', 'a1')

        assert result['success'] is False
        assert supabase_service.is_foreign_key_violation(result)
        assert len(fake_supabase.rows('asignacion')) == 1

    @pytest.mark.parametrize('value, expected', [
        ({'success': False, 'error': 'boom', 'code': '23503'}, True),
        ({'success': False, 'error': 'violates foreign key constraint', 'code': None}, True),
        ('error 23503 en asignacion', True),
        (APIError({'message': 'x', 'code': '23503'}), True),
        ({'success': False, 'error': 'timeout', 'code': '57014'}, False),
        (None, False),
    ])
    def test_is_foreign_key_violation(self, value, expected):
        assert supabase_service.is_foreign_key_violation(value) is expected

    def test_call_rpc_clears_table_cache(self, fake_supabase):
        fake_supabase.rpc_handlers['contar'] = lambda params: params['n']
        supabase_service.get_cache().set(build_cache_key('usuario', {}), [])

        result = supabase_service.call_rpc('contar', {'n': 3}, table='usuario')

        assert result['data'] == 3
        assert len(supabase_service.get_cache()) == 0


class TestAuthService:

    def test_dni_to_email(self):
        assert auth_service.dni_to_email(' 12345678 ') == '12345678@taller.com'

    def test_login_admin(self, fake_supabase, admin_user):
        result = auth_service.login('11111111', 'secreto1')

        assert result['success'] is True
        assert result['data']['user']['rol'] == 'admin'
        assert result['data']['token'] in fake_supabase.auth.tokens

    def test_login_empleado_is_restricted_and_signed_out(self, fake_supabase, empleado):
        result = auth_service.login('22222222', 'secreto1')

        assert result['success'] is False
        assert result['restricted'] is True
        assert result['error'] == auth_service.RESTRICTED_ACCESS
        assert fake_supabase.auth.sign_outs == 1

    def test_login_wrong_password(self, admin_user):
        result = auth_service.login('11111111', 'otra-clave')

        assert result['success'] is False
        assert result['restricted'] is False
        assert result['error'] == auth_service.INVALID_CREDENTIALS

    def test_login_without_profile(self, fake_supabase):
        fake_supabase.auth.add_user('33333333@taller.com', 'secreto1')

        result = auth_service.login('33333333', 'secreto1')

        assert result['error'] == auth_service.MISSING_PROFILE
        assert fake_supabase.auth.sign_outs == 1

    def test_get_user_from_invalid_token(self):
        assert auth_service.get_user_from_token('no-existe') is None
