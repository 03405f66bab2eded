"""
URL configuration for the E-Prescription API project.
"""
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)
from apps.core.observability.health import HealthzView, ReadyzView

handler404 = 'apps.core.views.not_found'
handler500 = 'apps.core.views.server_error'

urlpatterns = [
    # Health checks (no auth required)
    path('healthz', HealthzView.as_view(), name='healthz'),
    path('readyz', ReadyzView.as_view(), name='readyz'),

    # Django admin
    path('django-admin/', admin.site.urls),

    # Public catalog
    path('api/medicines/', include('apps.medicines.urls')),

    # Authentication, profile, uploads
    path('api/auth/', include('apps.authz.urls')),
    path('api/uploads/', include('apps.authz.urls_uploads')),

    # Prescriptions and dashboard
    path('api/prescriptions/', include('apps.prescriptions.urls')),
    path('api/dashboard/', include('apps.prescriptions.urls_dashboard')),

    # Inbox
    path('api/notifications/', include('apps.notifications.urls')),

    # Admin API (users, audit logs)
    path('api/admin/', include('apps.authz.urls_admin')),

    # Metrics
    path('api/', include('apps.core.urls')),

    # API Schema
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/schema/swagger-ui/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/schema/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),
]
