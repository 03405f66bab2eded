"""
Admin URLs - /api/admin/
"""
from django.urls import include, path

from .views_users import UserDeleteView, UserListView, UserRoleView

urlpatterns = [
    path('users/', UserListView.as_view(), name='admin-user-list'),
    path('users/<uuid:pk>/', UserDeleteView.as_view(), name='admin-user-delete'),
    path('users/<uuid:pk>/role/', UserRoleView.as_view(), name='admin-user-role'),
    path('audit-logs/', include('apps.audit.urls')),
]
