"""
Notification services.

Notifications are persisted in the caller's transaction; the real-time push
is queued only after that transaction commits and is never awaited.
"""
import logging

from django.db import transaction

from apps.core.observability import metrics
from .models import Notification, NotificationTypeChoices

logger = logging.getLogger(__name__)


def dispatch_push(notification_id):
    """Queue the push task; broker failures are logged, never raised."""
    from .tasks import push_notification

    try:
        push_notification.delay(notification_id)
    except Exception as e:
        metrics.notification_push_total.labels(result='failure').inc()
        logger.warning(
            'Notification push dispatch failed',
            extra={
                'event': 'notification_push_dispatch_failed',
                'notification_id': notification_id,
                'error_type': e.__class__.__name__,
            }
        )


def create_notification(user, title, message='', type=NotificationTypeChoices.SYSTEM):
    notification = Notification.objects.create(
        user=user,
        type=type,
        title=title,
        message=message,
    )
    metrics.notifications_created_total.labels(type=type).inc()
    transaction.on_commit(lambda: dispatch_push(notification.pk))
    return notification


def notify_prescription_created(prescription):
    """Inbox entry for the prescribing doctor."""
    if prescription.doctor is None:
        return None
    return create_notification(
        prescription.doctor,
        title='Prescription created',
        message=f'Prescription for {prescription.patient_name} has been created.',
        type=NotificationTypeChoices.PRESCRIPTION_CREATED,
    )


def mark_read(user, notification_id):
    """Mark one of ``user``'s notifications read. Returns None if not theirs or missing."""
    notification = Notification.objects.filter(pk=notification_id, user=user).first()
    if notification is None:
        return None
    if not notification.read:
        notification.read = True
        notification.save(update_fields=['read'])
    return notification


def mark_all_read(user):
    return Notification.objects.filter(user=user, read=False).update(read=True)


def unread_count(user):
    return Notification.objects.filter(user=user, read=False).count()
