"""
Notification inbox (own notifications only).
"""
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.pagination import cursor_paginate, parse_cursor, parse_limit
from .models import Notification
from .serializers import NotificationSerializer
from .services import mark_all_read, mark_read, unread_count

DEFAULT_LIMIT = 20
MAX_LIMIT = 50


class NotificationListView(APIView):
    """GET /api/notifications/?limit=20&cursor=<id> - newest first."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        page = cursor_paginate(
            Notification.objects.filter(user=request.user),
            parse_cursor(request.query_params.get('cursor')),
            parse_limit(request.query_params.get('limit'), DEFAULT_LIMIT, MAX_LIMIT),
        )
        return Response({
            'success': True,
            'data': NotificationSerializer(page.items, many=True).data,
            'pagination': page.pagination(),
        })


class UnreadCountView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'success': True, 'count': unread_count(request.user)})


class MarkReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        notification = mark_read(request.user, pk)
        if notification is None:
            raise NotFound('Notification not found')
        return Response({'success': True, 'data': NotificationSerializer(notification).data})


class MarkAllReadView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request):
        updated = mark_all_read(request.user)
        return Response({
            'success': True,
            'message': 'All notifications marked as read',
            'updated': updated,
        })
