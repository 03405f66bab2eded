"""
Tests for the optional Redis response cache.
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import redis
from django.test import override_settings

from apps.core.cache import CacheMixin, NullCache, RedisCache, get_default_cache


@pytest.fixture
def redis_client():
    return MagicMock()


class TestRedisCache:

    def test_get_decodes_json(self, redis_client):
        redis_client.get.return_value = json.dumps({'id': 1}).encode()

        assert RedisCache(client=redis_client).get('k') == {'id': 1}

    def test_get_miss(self, redis_client):
        redis_client.get.return_value = None

        assert RedisCache(client=redis_client).get('k') is None

    def test_set_uses_ttl(self, redis_client):
        RedisCache(client=redis_client, default_ttl=60).set('k', [1, 2], ttl=5)

        redis_client.setex.assert_called_once_with('k', 5, '[1, 2]')

    def test_set_falls_back_to_default_ttl(self, redis_client):
        RedisCache(client=redis_client, default_ttl=60).set('k', 'v')

        redis_client.setex.assert_called_once_with('k', 60, '"v"')

    @pytest.mark.parametrize('operation,call', [
        ('get', lambda cache: cache.get('k')),
        ('set', lambda cache: cache.set('k', 1)),
        ('delete', lambda cache: cache.delete('k')),
        ('delete_pattern', lambda cache: cache.delete_pattern('medicines:*')),
    ])
    def test_backend_errors_never_raise(self, redis_client, operation, call):
        for method in ('get', 'setex', 'delete', 'scan_iter'):
            getattr(redis_client, method).side_effect = redis.ConnectionError('down')

        assert call(RedisCache(client=redis_client)) is None

    def test_corrupt_value_is_a_miss(self, redis_client):
        redis_client.get.return_value = b'{not json'

        assert RedisCache(client=redis_client).get('k') is None

    def test_delete_pattern(self, redis_client):
        redis_client.scan_iter.return_value = iter([b'medicines:search:a', b'medicines:detail:1'])

        RedisCache(client=redis_client).delete_pattern('medicines:*')

        redis_client.scan_iter.assert_called_once_with(match='medicines:*')
        redis_client.delete.assert_called_once_with(b'medicines:search:a', b'medicines:detail:1')

    def test_ping_failure(self, redis_client):
        redis_client.ping.side_effect = redis.TimeoutError()

        assert RedisCache(client=redis_client).ping() is False


class TestDefaultCache:

    def test_disabled_without_redis_url(self):
        cache = get_default_cache()

        assert isinstance(cache, NullCache)
        assert cache.enabled is False
        assert cache.get('anything') is None

    @override_settings(REDIS_URL='redis://cache.invalid:6379/0')
    def test_redis_when_configured(self):
        get_default_cache.cache_clear()
        with patch('apps.core.cache.redis.Redis.from_url') as from_url:
            cache = get_default_cache()

        assert isinstance(cache, RedisCache)
        assert from_url.call_args[0][0] == 'redis://cache.invalid:6379/0'


class TestCacheMixin:

    def test_injected_cache_wins(self):
        injected = NullCache()
        holder = CacheMixin()
        holder.cache = injected

        assert holder.get_cache() is injected

    def test_producer_runs_on_miss_only(self):
        store = {}
        cache = MagicMock()
        cache.get.side_effect = store.get
        cache.set.side_effect = lambda key, value, ttl=None: store.__setitem__(key, value)
        holder = CacheMixin()
        holder.cache = cache
        producer = MagicMock(return_value=[{'id': 1}])

        assert holder.cached('ns', 'key', producer) == [{'id': 1}]
        assert holder.cached('ns', 'key', producer) == [{'id': 1}]
        producer.assert_called_once()
