from django.urls import path

from .views import (
    PrescriptionDetailView,
    PrescriptionEmailView,
    PrescriptionListCreateView,
    PrescriptionStatusView,
)

urlpatterns = [
    path('', PrescriptionListCreateView.as_view(), name='prescription-list'),
    path('<int:pk>/', PrescriptionDetailView.as_view(), name='prescription-detail'),
    path('<int:pk>/status/', PrescriptionStatusView.as_view(), name='prescription-status'),
    path('<int:pk>/email/', PrescriptionEmailView.as_view(), name='prescription-email'),
]
