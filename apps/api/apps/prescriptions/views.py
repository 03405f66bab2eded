"""
Prescription views.

Endpoints:
- GET    /api/prescriptions/             - cursor-paginated list (role-scoped)
- POST   /api/prescriptions/             - create (doctor, admin)
- GET    /api/prescriptions/<id>/        - detail (owner, admin)
- DELETE /api/prescriptions/<id>/        - soft delete (status -> cancelled)
- PATCH  /api/prescriptions/<id>/status/ - status transition (owner, admin)
- POST   /api/prescriptions/<id>/email/  - email to patient (owner, admin)
- GET    /api/dashboard/stats/           - dashboard aggregates
"""
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.authz.permissions import IsDoctorOrAdmin
from apps.core.pagination import parse_cursor, parse_limit, parse_sort
from .emails import send_prescription_email
from .serializers import (
    PrescriptionCreateSerializer,
    PrescriptionEmailSerializer,
    PrescriptionSerializer,
    PrescriptionStatusSerializer,
)
from .services import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    cancel_prescription,
    create_prescription,
    dashboard_stats,
    get_owned_prescription,
    list_prescriptions,
    set_status,
)


class PrescriptionListCreateView(APIView):
    """
    GET  ?limit&cursor&search&status&from&to&sort
    POST create

    RBAC:
    - Admin: sees every prescription
    - Others: only prescriptions where they are the doctor
    - Create: doctor or admin
    """

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsDoctorOrAdmin()]
        return [IsAuthenticated()]

    def get(self, request):
        params = request.query_params
        page = list_prescriptions(
            request.user,
            filters={
                'search': params.get('search', ''),
                'status': params.get('status', ''),
                'from': params.get('from'),
                'to': params.get('to'),
            },
            cursor=parse_cursor(params.get('cursor')),
            limit=parse_limit(params.get('limit'), DEFAULT_LIMIT, MAX_LIMIT),
            sort_direction=parse_sort(params.get('sort')),
        )
        return Response({
            'success': True,
            'data': PrescriptionSerializer(page.items, many=True).data,
            'pagination': page.pagination(),
        })

    def post(self, request):
        serializer = PrescriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        prescription = create_prescription(request.user, serializer.validated_data, request=request)

        return Response(
            {
                'success': True,
                'message': 'Prescription created',
                'data': PrescriptionSerializer(prescription).data,
            },
            status=status.HTTP_201_CREATED,
        )


class PrescriptionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        prescription = get_owned_prescription(request.user, pk)
        return Response({'success': True, 'data': PrescriptionSerializer(prescription).data})

    def delete(self, request, pk):
        prescription = cancel_prescription(request.user, pk, request=request)
        return Response({
            'success': True,
            'message': 'Prescription cancelled',
            'data': PrescriptionSerializer(prescription).data,
        })


class PrescriptionStatusView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        serializer = PrescriptionStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        prescription = set_status(request.user, pk, serializer.validated_data['status'], request=request)
        return Response({
            'success': True,
            'message': f'Status updated to {prescription.status}',
            'data': PrescriptionSerializer(prescription).data,
        })


class PrescriptionEmailView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        prescription = get_owned_prescription(request.user, pk)

        serializer = PrescriptionEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        recipient = serializer.validated_data['patient_email'] or prescription.patient_email
        if not recipient:
            raise ValidationError({'patient_email': ['Patient email is required']})

        send_prescription_email(prescription, recipient)

        log_audit(
            AuditActionChoices.PRESCRIPTION_EMAILED,
            user=request.user,
            resource_type=ResourceTypeChoices.PRESCRIPTION,
            resource_id=prescription.pk,
            details={'prescriptionId': prescription.pk},
            request=request,
        )
        return Response({'success': True, 'message': 'Email sent successfully'})


class DashboardStatsView(APIView):
    """GET /api/dashboard/stats/ - non-admins see stats for their own prescriptions."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        stats = dashboard_stats(request.user)
        stats['recentPrescriptions'] = PrescriptionSerializer(
            stats['recentPrescriptions'], many=True
        ).data
        return Response({'success': True, 'data': stats})
