from django.conf import settings
from django.db import models
from django.utils import timezone


class NotificationTypeChoices(models.TextChoices):
    PRESCRIPTION_CREATED = 'prescription_created', 'Prescription created'
    SYSTEM = 'system', 'System'


class Notification(models.Model):
    """
    Per-user inbox entry.

    Created as a side effect of other operations, flipped to read by its
    owner, never deleted.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    type = models.CharField(
        max_length=40,
        choices=NotificationTypeChoices.choices,
        default=NotificationTypeChoices.SYSTEM,
    )
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default='')
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'notification'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        indexes = [
            models.Index(fields=['user', 'read'], name='idx_notification_user_read'),
        ]

    def __str__(self):
        return f'{self.type} -> {self.user_id}'
