"""
Celery tasks for real-time notification delivery.

The websocket gateway subscribes to ``notifications:<user_id>`` on Redis;
this task publishes the serialized notification there.
"""
import json
import logging

from celery import shared_task
from django.conf import settings

from apps.core.cache import get_redis_client
from apps.core.observability import metrics

logger = logging.getLogger(__name__)


def channel_for(user_id):
    prefix = getattr(settings, 'NOTIFICATION_CHANNEL_PREFIX', 'notifications')
    return f'{prefix}:{user_id}'


@shared_task(name='apps.notifications.tasks.push_notification')
def push_notification(notification_id):
    """
    Publish a notification to its owner's channel.

    Args:
        notification_id: Notification primary key

    Delivery errors are logged and reported in the return value, never
    raised; there is no retry.
    """
    from .models import Notification
    from .serializers import NotificationSerializer

    if not settings.REDIS_URL:
        metrics.notification_push_total.labels(result='skipped').inc()
        return f'Push skipped for notification {notification_id}: Redis not configured'

    try:
        notification = Notification.objects.get(pk=notification_id)
        payload = json.dumps(NotificationSerializer(notification).data, default=str)
        get_redis_client().publish(channel_for(notification.user_id), payload)
    except Exception as e:
        metrics.notification_push_total.labels(result='failure').inc()
        logger.warning(
            'Notification push failed',
            extra={
                'event': 'notification_push_failed',
                'notification_id': notification_id,
                'error_type': e.__class__.__name__,
            }
        )
        return f'Error pushing notification {notification_id}: {e.__class__.__name__}'

    metrics.notification_push_total.labels(result='success').inc()
    return f'Notification {notification_id} pushed'
