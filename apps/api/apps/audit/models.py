"""
Audit models: append-only audit_log with 90-day retention.
"""
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone


class AuditActionChoices(models.TextChoices):
    USER_SIGNUP = 'USER_SIGNUP', 'User signup'
    USER_LOGIN = 'USER_LOGIN', 'User login'
    USER_LOGIN_FAILED = 'USER_LOGIN_FAILED', 'User login failed'
    PRESCRIPTION_CREATED = 'PRESCRIPTION_CREATED', 'Prescription created'
    PRESCRIPTION_UPDATED = 'PRESCRIPTION_UPDATED', 'Prescription updated'
    PRESCRIPTION_DELETED = 'PRESCRIPTION_DELETED', 'Prescription deleted'
    PRESCRIPTION_EMAILED = 'PRESCRIPTION_EMAILED', 'Prescription emailed'
    PROFILE_UPDATED = 'PROFILE_UPDATED', 'Profile updated'
    PROFILE_PICTURE_UPLOADED = 'PROFILE_PICTURE_UPLOADED', 'Profile picture uploaded'
    USER_ROLE_CHANGED = 'USER_ROLE_CHANGED', 'User role changed'
    USER_DELETED = 'USER_DELETED', 'User deleted'
    MEDICINE_SEARCHED = 'MEDICINE_SEARCHED', 'Medicine searched'


class ResourceTypeChoices(models.TextChoices):
    USER = 'User', 'User'
    PRESCRIPTION = 'Prescription', 'Prescription'
    MEDICINE = 'Medicine', 'Medicine'
    SYSTEM = 'System', 'System'


def default_expires_at():
    days = getattr(settings, 'AUDIT_LOG_RETENTION_DAYS', 90)
    return timezone.now() + timedelta(days=days)


class AuditLog(models.Model):
    """
    Append-only audit trail.

    Rows are never updated. ``expires_at`` drives the periodic purge task.
    ``user`` is kept nullable so deleting a user does not erase the trail.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    action = models.CharField(max_length=40, choices=AuditActionChoices.choices)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_logs',
    )
    resource_type = models.CharField(
        max_length=20,
        choices=ResourceTypeChoices.choices,
        blank=True,
        default='',
    )
    resource_id = models.CharField(max_length=64, blank=True, default='')
    details = models.JSONField(
        default=dict,
        blank=True,
        help_text='Free-form context; must not contain credentials',
    )
    ip_address = models.CharField(max_length=64, blank=True, default='')
    user_agent = models.CharField(max_length=500, blank=True, default='')
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    expires_at = models.DateTimeField(default=default_expires_at, db_index=True)

    class Meta:
        db_table = 'audit_log'
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        indexes = [
            models.Index(fields=['action'], name='idx_audit_action'),
            models.Index(fields=['user', 'created_at'], name='idx_audit_user_created'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f'{self.action} {self.resource_type}:{self.resource_id}'
