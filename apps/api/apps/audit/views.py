"""
Audit log browsing (admin only).
"""
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.permissions import IsAdmin
from apps.core.pagination import page_info, parse_limit, parse_positive_int
from .models import AuditLog
from .serializers import AuditLogSerializer


class AuditLogListView(APIView):
    """
    GET /api/admin/audit-logs/ - Paginated audit logs, newest first.

    Query parameters:
    - ?page=1 (default 1)
    - ?limit=25 (default 25, max 100)
    - ?action=PRESCRIPTION_CREATED
    - ?userId=<uuid>
    - ?from=<date>&to=<date> - range on created_at

    Malformed userId/from/to values are rejected with 400.
    """
    permission_classes = [IsAdmin]

    def get(self, request):
        params = request.query_params
        page = parse_positive_int(params.get('page'), 1)
        limit = parse_limit(params.get('limit'), 25, 100)

        try:
            queryset = self.filter_queryset(AuditLog.objects.select_related('user'), params)
        except DjangoValidationError as e:
            raise ValidationError(e.messages)

        total = queryset.count()
        offset = (page - 1) * limit
        logs = queryset.order_by('-created_at')[offset:offset + limit]

        return Response({
            'success': True,
            'data': AuditLogSerializer(logs, many=True).data,
            'pagination': page_info(page, limit, total),
        })

    def filter_queryset(self, queryset, params):
        action = params.get('action')
        if action:
            queryset = queryset.filter(action=action)

        user_id = params.get('userId')
        if user_id:
            queryset = queryset.filter(user_id=user_id)

        if params.get('from'):
            queryset = queryset.filter(created_at__gte=params['from'])
        if params.get('to'):
            queryset = queryset.filter(created_at__lte=params['to'])

        return queryset


class AuditActionListView(APIView):
    """GET /api/admin/audit-logs/actions/ - distinct recorded actions."""
    permission_classes = [IsAdmin]

    def get(self, request):
        actions = (
            AuditLog.objects.order_by('action')
            .values_list('action', flat=True)
            .distinct()
        )
        return Response({'success': True, 'data': list(actions)})
