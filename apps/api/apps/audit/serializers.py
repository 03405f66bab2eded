from rest_framework import serializers

from apps.authz.serializers import UserSummarySerializer
from .models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id',
            'action',
            'user_id',
            'user',
            'resource_type',
            'resource_id',
            'details',
            'ip_address',
            'user_agent',
            'created_at',
        ]
        read_only_fields = fields
