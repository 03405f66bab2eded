"""
Liveness and readiness probes.

/healthz answers as long as the process serves requests. /readyz also
checks PostgreSQL (required) and reports Redis (optional: an unreachable
cache degrades to uncached responses, so it never fails readiness).
"""
import logging

from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.views import View

from apps.core.cache import get_default_cache

logger = logging.getLogger(__name__)


def build_info():
    info = {'version': getattr(settings, 'VERSION', 'unknown')}
    if getattr(settings, 'COMMIT_HASH', None):
        info['commit'] = settings.COMMIT_HASH
    return info


class HealthzView(View):
    """Liveness: no dependency is touched."""

    def get(self, request):
        return JsonResponse({'status': 'ok', **build_info()})


class ReadyzView(View):
    """Readiness: 503 when the database does not answer."""

    def get(self, request):
        database_ok = self._check_database()
        body = {
            'status': 'ready' if database_ok else 'not_ready',
            'checks': {
                'database': database_ok,
                'cache': self._check_cache(),
            },
        }
        return JsonResponse(body, status=200 if database_ok else 503)

    def _check_database(self):
        try:
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
        except Exception as e:
            logger.error(
                'Readiness probe: database unreachable',
                extra={
                    'event': 'readiness_check_failed',
                    'dependency': 'database',
                    'error_type': e.__class__.__name__,
                }
            )
            return False
        return True

    def _check_cache(self):
        """'disabled' without REDIS_URL, else 'ok' or 'unavailable'."""
        cache = get_default_cache()
        if not cache.enabled:
            return 'disabled'
        return 'ok' if cache.ping() else 'unavailable'
