"""
Optional response cache.

Views receive a cache object as an injectable attribute
(``SomeView.as_view(cache=...)``). When REDIS_URL is unset the default is a
NullCache, so every lookup is a miss and the primary data path runs.

Any backend failure is logged, counted and treated as a miss: the cache
never fails the surrounding request.
"""
import json
import logging
from functools import lru_cache

import redis
from django.conf import settings

from apps.core.observability import metrics

logger = logging.getLogger(__name__)


def get_redis_client(url=None):
    """redis-py client for REDIS_URL with short socket timeouts."""
    timeout = getattr(settings, 'REDIS_SOCKET_TIMEOUT', 0.5)
    return redis.Redis.from_url(
        url or settings.REDIS_URL,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )


class NullCache:
    """No-op cache used when Redis is not configured."""

    enabled = False

    def get(self, key):
        return None

    def set(self, key, value, ttl=None):
        return None

    def delete(self, key):
        return None

    def delete_pattern(self, pattern):
        return None

    def ping(self):
        return False


class RedisCache:
    """
    JSON-valued cache on top of redis-py.

    Args:
        url: Redis connection URL (ignored when ``client`` is given)
        client: pre-built redis client, mainly for tests
        default_ttl: seconds used when ``set`` is called without ttl
    """

    enabled = True

    def __init__(self, url=None, client=None, default_ttl=None):
        self._client = client if client is not None else get_redis_client(url)
        self.default_ttl = default_ttl or getattr(settings, 'CACHE_DEFAULT_TTL', 300)

    def get(self, key):
        try:
            raw = self._client.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception as e:
            self._record_failure('get', key, e)
            return None

    def set(self, key, value, ttl=None):
        try:
            self._client.setex(key, ttl or self.default_ttl, json.dumps(value, default=str))
        except Exception as e:
            self._record_failure('set', key, e)

    def delete(self, key):
        try:
            self._client.delete(key)
        except Exception as e:
            self._record_failure('delete', key, e)

    def delete_pattern(self, pattern):
        try:
            keys = list(self._client.scan_iter(match=pattern))
            if keys:
                self._client.delete(*keys)
        except Exception as e:
            self._record_failure('delete_pattern', pattern, e)

    def ping(self):
        try:
            return bool(self._client.ping())
        except Exception as e:
            self._record_failure('ping', '-', e)
            return False

    def _record_failure(self, operation, key, error):
        metrics.cache_errors_total.labels(operation=operation).inc()
        logger.warning(
            'Cache operation failed, treating as miss',
            extra={
                'event': 'cache_error',
                'operation': operation,
                'cache_key': key,
                'error_type': error.__class__.__name__,
            }
        )


@lru_cache(maxsize=1)
def get_default_cache():
    """
    Build the process-wide default cache from settings.

    Call ``get_default_cache.cache_clear()`` after changing REDIS_URL.
    """
    url = getattr(settings, 'REDIS_URL', '')
    if not url:
        return NullCache()
    return RedisCache(url=url)


class CacheMixin:
    """
    Gives a view an injectable ``cache`` attribute.

    ``as_view(cache=...)`` overrides it per route; otherwise the default
    cache from settings is used.
    """

    cache = None

    def get_cache(self):
        if self.cache is None:
            return get_default_cache()
        return self.cache

    def cached(self, namespace, key, producer, ttl=None):
        """
        Return ``producer()`` through the cache.

        ``producer`` must return JSON-serializable data. Empty results
        (None, empty list) are never stored.
        """
        cache = self.get_cache()
        value = cache.get(key)
        if value is not None:
            metrics.cache_requests_total.labels(namespace=namespace, result='hit').inc()
            return value

        metrics.cache_requests_total.labels(namespace=namespace, result='miss').inc()
        value = producer()
        if value:
            cache.set(key, value, ttl)
        return value
