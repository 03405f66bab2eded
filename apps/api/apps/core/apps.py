"""Core app configuration."""
from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Shared infrastructure: cache, errors, pagination, observability."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    verbose_name = 'Core'
