"""
Core API views: Prometheus exposition and JSON error pages.
"""
from django.http import HttpResponse, JsonResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from .exceptions import GENERIC_SERVER_ERROR


class MetricsView(APIView):
    """
    GET /api/metrics - Prometheus text exposition of the default registry.

    Unauthenticated; expected to be scraped from inside the cluster.
    """
    permission_classes = [AllowAny]
    authentication_classes = []
    schema = None

    def get(self, request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)


def not_found(request, exception=None):
    """handler404: unmatched routes get the same envelope as API errors."""
    return JsonResponse({'success': False, 'message': 'Not found'}, status=404)


def server_error(request):
    """handler500: unhandled errors outside DRF views."""
    return JsonResponse({'success': False, 'message': GENERIC_SERVER_ERROR}, status=500)
