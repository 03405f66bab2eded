"""
Audit log writer.

``log_audit`` never raises: a failed write is logged and counted, and the
caller's transaction is protected by a savepoint.
"""
import logging

from django.db import transaction

from apps.core.observability import metrics
from apps.core.utils import get_client_ip, get_user_agent
from .models import AuditLog

logger = logging.getLogger(__name__)


def log_audit(action, user=None, resource_type='', resource_id=None, details=None, request=None):
    """
    Append an audit entry.

    Args:
        action: AuditActionChoices value
        user: acting user (None for anonymous events such as failed logins)
        resource_type: ResourceTypeChoices value
        resource_id: id of the affected resource
        details: JSON-serializable context
        request: request used to capture IP address and user agent

    Returns:
        The created AuditLog, or None if the write failed.
    """
    if user is not None and not getattr(user, 'is_authenticated', False):
        user = None

    try:
        with transaction.atomic():
            entry = AuditLog.objects.create(
                action=action,
                user=user,
                resource_type=resource_type or '',
                resource_id=str(resource_id) if resource_id is not None else '',
                details=details or {},
                ip_address=(get_client_ip(request) or '') if request is not None else '',
                user_agent=get_user_agent(request) if request is not None else '',
            )
    except Exception as e:
        metrics.audit_log_writes_total.labels(action=action, result='failure').inc()
        logger.error(
            'Audit log write failed',
            extra={
                'event': 'audit_log_write_failed',
                'action': action,
                'error_type': e.__class__.__name__,
            }
        )
        return None

    metrics.audit_log_writes_total.labels(action=action, result='success').inc()
    return entry
