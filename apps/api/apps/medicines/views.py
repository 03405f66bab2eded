"""
Medicine catalog views (public).

Search and detail responses go through the injectable response cache;
``as_view(cache=...)`` swaps the backend.
"""
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.core.cache import CacheMixin
from apps.core.pagination import parse_non_negative_int, parse_positive_int
from .models import Medicine
from .serializers import MedicineSerializer
from .services import MIN_QUERY_LENGTH, QUERY_TOO_SHORT, normalize_query, search_medicines

SEARCH_CACHE_TTL = 300
DETAIL_CACHE_TTL = 3600


def search_cache_key(query):
    return f'medicines:search:{query.lower()}'


def detail_cache_key(medicine_id):
    return f'medicines:detail:{medicine_id}'


class MedicineListView(APIView):
    """
    GET /api/medicines/?limit=50&skip=0 - offset-paginated catalog.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        limit = parse_positive_int(request.query_params.get('limit'), 50)
        skip = parse_non_negative_int(request.query_params.get('skip'), 0)

        queryset = Medicine.objects.order_by('id')
        medicines = queryset[skip:skip + limit]

        return Response({
            'success': True,
            'data': MedicineSerializer(medicines, many=True).data,
            'total': queryset.count(),
            'limit': limit,
            'skip': skip,
        })


class MedicineSearchView(CacheMixin, APIView):
    """
    GET /api/medicines/search/?q=<text> - up to 20 matches, no pagination.

    Queries shorter than two characters return an empty list with a notice.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        raw = request.query_params.get('q', '')
        query = normalize_query(raw)

        if len(query) < MIN_QUERY_LENGTH:
            return Response({'success': True, 'data': [], 'message': QUERY_TOO_SHORT})

        data = self.cached(
            'medicine_search',
            search_cache_key(raw),
            lambda: MedicineSerializer(search_medicines(raw).items, many=True).data,
            SEARCH_CACHE_TTL,
        )

        if request.user.is_authenticated:
            log_audit(
                AuditActionChoices.MEDICINE_SEARCHED,
                user=request.user,
                resource_type=ResourceTypeChoices.MEDICINE,
                details={'query': query, 'results': len(data)},
                request=request,
            )

        return Response({'success': True, 'data': data})


class MedicineDetailView(CacheMixin, APIView):
    """GET /api/medicines/<id>/"""
    permission_classes = [AllowAny]

    def get(self, request, pk):
        data = self.cached('medicine_detail', detail_cache_key(pk), lambda: self._load(pk), DETAIL_CACHE_TTL)
        if data is None:
            raise NotFound('Medicine not found')
        return Response({'success': True, 'data': data})

    def _load(self, pk):
        medicine = Medicine.objects.filter(pk=pk).first()
        if medicine is None:
            return None
        return MedicineSerializer(medicine).data
