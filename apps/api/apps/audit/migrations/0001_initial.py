import uuid

import apps.audit.models
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('action', models.CharField(choices=[('USER_SIGNUP', 'User signup'), ('USER_LOGIN', 'User login'), ('USER_LOGIN_FAILED', 'User login failed'), ('PRESCRIPTION_CREATED', 'Prescription created'), ('PRESCRIPTION_UPDATED', 'Prescription updated'), ('PRESCRIPTION_DELETED', 'Prescription deleted'), ('PRESCRIPTION_EMAILED', 'Prescription emailed'), ('PROFILE_UPDATED', 'Profile updated'), ('PROFILE_PICTURE_UPLOADED', 'Profile picture uploaded'), ('USER_ROLE_CHANGED', 'User role changed'), ('USER_DELETED', 'User deleted'), ('MEDICINE_SEARCHED', 'Medicine searched')], max_length=40)),
                ('resource_type', models.CharField(blank=True, choices=[('User', 'User'), ('Prescription', 'Prescription'), ('Medicine', 'Medicine'), ('System', 'System')], default='', max_length=20)),
                ('resource_id', models.CharField(blank=True, default='', max_length=64)),
                ('details', models.JSONField(blank=True, default=dict, help_text='Free-form context; must not contain credentials')),
                ('ip_address', models.CharField(blank=True, default='', max_length=64)),
                ('user_agent', models.CharField(blank=True, default='', max_length=500)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('expires_at', models.DateTimeField(db_index=True, default=apps.audit.models.default_expires_at)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Audit Log',
                'verbose_name_plural': 'Audit Logs',
                'db_table': 'audit_log',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['action'], name='idx_audit_action'),
                    models.Index(fields=['user', 'created_at'], name='idx_audit_user_created'),
                ],
            },
        ),
    ]
