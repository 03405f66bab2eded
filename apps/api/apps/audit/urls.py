from django.urls import path

from .views import AuditActionListView, AuditLogListView

urlpatterns = [
    path('', AuditLogListView.as_view(), name='audit-log-list'),
    path('actions/', AuditActionListView.as_view(), name='audit-log-actions'),
]
