"""
API error envelope.

Every failure leaves the API as ``{"success": false, "message": ...}``.
Validation failures also carry ``errors`` with per-field detail and
unavailable optional subsystems carry a machine-readable ``code``.
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from apps.core.observability import metrics

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = 'Server error'


class ServiceUnavailable(APIException):
    """An optional subsystem is not configured."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Service is not configured'
    default_code = 'service_unavailable'


class UploadNotConfigured(ServiceUnavailable):
    default_detail = 'File upload service is not configured'
    default_code = 'upload_not_configured'


class OAuthNotConfigured(ServiceUnavailable):
    default_detail = 'Google OAuth is not configured'
    default_code = 'oauth_not_configured'


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Resource already exists'
    default_code = 'conflict'


def _flatten_detail(detail, field=None):
    """Turn DRF error detail (str, list or dict) into readable messages."""
    if isinstance(detail, dict):
        messages = []
        for key, value in detail.items():
            name = None if key == 'non_field_errors' else key
            if field and name:
                name = f'{field}.{name}'
            messages.extend(_flatten_detail(value, name or field))
        return messages
    if isinstance(detail, list):
        messages = []
        for item in detail:
            messages.extend(_flatten_detail(item, field))
        return messages
    text = str(detail)
    return [f'{field}: {text}' if field else text]


def api_exception_handler(exc, context):
    """
    DRF exception handler producing the success/message envelope.

    Unknown exceptions become a generic 500; the traceback goes to the log,
    never to the client.
    """
    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        metrics.exceptions_total.labels(
            exception_type=exc.__class__.__name__,
            location='api',
        ).inc()
        logger.error(
            'Unhandled API exception',
            exc_info=(type(exc), exc, exc.__traceback__),
            extra={
                'event': 'api_unhandled_exception',
                'exception_type': exc.__class__.__name__,
                'view': view.__class__.__name__ if view else None,
            }
        )
        return Response(
            {'success': False, 'message': GENERIC_SERVER_ERROR},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    body = {'success': False}

    if isinstance(exc, ValidationError):
        body['message'] = '; '.join(_flatten_detail(exc.detail)) or 'Invalid input'
        body['errors'] = response.data
    else:
        detail = getattr(exc, 'detail', str(exc))
        # SimpleJWT token errors: {'detail': ..., 'code': ..., 'messages': [...]}
        if isinstance(detail, dict) and 'detail' in detail:
            detail = detail['detail']
        body['message'] = '; '.join(_flatten_detail(detail))

    if isinstance(exc, ServiceUnavailable):
        body['code'] = exc.default_code

    response.data = body
    return response
