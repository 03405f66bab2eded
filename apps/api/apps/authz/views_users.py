"""
User administration (admin only).
"""
from django.db import transaction
from django.db.models import Q
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.authz.models import User
from apps.authz.permissions import IsAdmin
from apps.authz.serializers import AdminUserSerializer, RoleUpdateSerializer
from apps.core.pagination import page_info, parse_limit, parse_positive_int


def get_user_or_404(pk):
    try:
        return User.objects.get(pk=pk)
    except User.DoesNotExist:
        raise NotFound('User not found')


class UserListView(APIView):
    """
    GET /api/admin/users/ - List users.

    Query parameters:
    - ?page=1&limit=20 (limit capped at 100)
    - ?search=term - name or email, case-insensitive
    - ?role=doctor|pharmacist|admin
    """
    permission_classes = [IsAdmin]

    def get(self, request):
        params = request.query_params
        page = parse_positive_int(params.get('page'), 1)
        limit = parse_limit(params.get('limit'), 20, 100)

        queryset = User.objects.all()

        search = (params.get('search') or '').strip()
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(email__icontains=search))

        role = params.get('role')
        if role:
            queryset = queryset.filter(role=role)

        total = queryset.count()
        offset = (page - 1) * limit
        users = queryset.order_by('-created_at')[offset:offset + limit]

        return Response({
            'success': True,
            'data': AdminUserSerializer(users, many=True).data,
            'pagination': page_info(page, limit, total),
        })


class UserRoleView(APIView):
    """PATCH /api/admin/users/<id>/role/ - change another user's role."""
    permission_classes = [IsAdmin]

    def patch(self, request, pk):
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_role = serializer.validated_data['role']

        if str(pk) == str(request.user.pk):
            raise ValidationError('You cannot change your own role')

        with transaction.atomic():
            user = get_user_or_404(pk)
            old_role = user.role
            user.role = new_role
            user.save(update_fields=['role', 'updated_at'])

        log_audit(
            AuditActionChoices.USER_ROLE_CHANGED,
            user=request.user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user.pk,
            details={'oldRole': old_role, 'newRole': new_role},
            request=request,
        )
        return Response({
            'success': True,
            'message': f'Role updated to {new_role}',
            'user': AdminUserSerializer(user).data,
        })


class UserDeleteView(APIView):
    """DELETE /api/admin/users/<id>/"""
    permission_classes = [IsAdmin]

    def delete(self, request, pk):
        if str(pk) == str(request.user.pk):
            raise ValidationError('You cannot delete yourself')

        user = get_user_or_404(pk)
        details = {'role': user.role}
        user_id = user.pk
        user.delete()

        log_audit(
            AuditActionChoices.USER_DELETED,
            user=request.user,
            resource_type=ResourceTypeChoices.USER,
            resource_id=user_id,
            details=details,
            request=request,
        )
        return Response({'success': True, 'message': 'User deleted'})
