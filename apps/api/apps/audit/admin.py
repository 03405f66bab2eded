from django.contrib import admin
from .models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'action', 'user', 'resource_type', 'resource_id']
    list_filter = ['action', 'resource_type', 'created_at']
    search_fields = ['user__email', 'resource_id']
    readonly_fields = [
        'id', 'created_at', 'expires_at', 'user', 'action', 'resource_type',
        'resource_id', 'details', 'ip_address', 'user_agent',
    ]

    def has_add_permission(self, request):
        # Audit logs should not be manually created
        return False

    def has_change_permission(self, request, obj=None):
        return False
