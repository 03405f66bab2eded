"""
Request correlation middleware.

Generates/propagates X-Request-ID and injects it into logs.
"""
import uuid
import time
import logging
from django.utils.deprecation import MiddlewareMixin
from threading import local

from .metrics import metrics

# Thread-local storage for request context
_request_context = local()

logger = logging.getLogger(__name__)


def get_request_id():
    """Get current request ID from thread-local storage."""
    return getattr(_request_context, 'request_id', None)


def get_user_id():
    """Get current user ID from thread-local storage."""
    return getattr(_request_context, 'user_id', None)


def get_user_role():
    """Get current user role from thread-local storage."""
    return getattr(_request_context, 'user_role', None)


def bind_user(user):
    """
    Attach the authenticated user to the correlation context.

    JWT authentication runs inside DRF (after Django middleware), so views
    call this once ``request.user`` is resolved.
    """
    if user is not None and user.is_authenticated:
        _request_context.user_id = str(user.pk)
        _request_context.user_role = getattr(user, 'role', None)


class RequestCorrelationMiddleware(MiddlewareMixin):
    """
    Middleware to handle request correlation.

    - Generates/propagates X-Request-ID
    - Stores context in thread-local for logging
    - Adds correlation header to response
    - Tracks request duration and HTTP metrics
    """

    REQUEST_ID_HEADER = 'HTTP_X_REQUEST_ID'

    def process_request(self, request):
        request_id = request.META.get(self.REQUEST_ID_HEADER)
        if not request_id:
            request_id = str(uuid.uuid4())

        request.request_id = request_id
        request.start_time = time.time()

        _request_context.request_id = request_id
        _request_context.user_id = None
        _request_context.user_role = None

        # Session-authenticated users (Django admin); API users are bound by bind_user()
        if hasattr(request, 'user') and request.user.is_authenticated:
            bind_user(request.user)

    def process_response(self, request, response):
        if hasattr(request, 'request_id'):
            response['X-Request-ID'] = request.request_id

        if hasattr(request, 'start_time'):
            duration = time.time() - request.start_time
            route = _route_name(request)

            metrics.http_requests_total.labels(
                route=route,
                method=request.method,
                status=str(response.status_code),
            ).inc()
            metrics.http_request_duration_seconds.labels(
                route=route,
                method=request.method,
            ).observe(duration)

            logger.info(
                'Request completed',
                extra={
                    'event': 'http_request_completed',
                    'path': request.path,
                    'method': request.method,
                    'status_code': response.status_code,
                    'duration_ms': round(duration * 1000, 2),
                    'request_id': getattr(request, 'request_id', None),
                    'user_id': get_user_id(),
                    'user_role': get_user_role(),
                }
            )

        return response

    def process_exception(self, request, exception):
        """Non-DRF views only; API errors are handled by api_exception_handler."""
        name = exception.__class__.__name__
        elapsed = time.time() - getattr(request, 'start_time', time.time())

        metrics.exceptions_total.labels(exception_type=name, location='middleware').inc()
        logger.error(
            'Unhandled exception outside the API layer',
            exc_info=True,
            extra={
                'event': 'http_request_exception',
                'route': _route_name(request),
                'method': request.method,
                'exception_type': name,
                'duration_ms': round(elapsed * 1000, 2),
            }
        )


def _route_name(request):
    """Use the resolved URL name as metric label to keep cardinality bounded."""
    match = getattr(request, 'resolver_match', None)
    if match is not None and match.view_name:
        return match.view_name
    return 'unmatched'


def clear_request_context():
    """Clear thread-local request context (useful for testing)."""
    for attr in ['request_id', 'user_id', 'user_role']:
        if hasattr(_request_context, attr):
            delattr(_request_context, attr)
