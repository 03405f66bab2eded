"""
Celery tasks for audit log retention.
"""
import logging

from celery import shared_task
from django.utils import timezone

logger = logging.getLogger(__name__)


@shared_task(name='apps.audit.tasks.purge_expired_audit_logs')
def purge_expired_audit_logs():
    """Delete audit rows past their expires_at. Scheduled daily by Celery beat."""
    from .models import AuditLog

    deleted, _ = AuditLog.objects.filter(expires_at__lte=timezone.now()).delete()
    logger.info(
        'Expired audit logs purged',
        extra={'event': 'audit_logs_purged', 'deleted': deleted}
    )
    return deleted
