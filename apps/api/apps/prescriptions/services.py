"""
Prescription services: listing, status transitions, creation, dashboard.
"""
import logging
from datetime import timedelta

from django.db import transaction
from django.db.models import Count, Q
from django.db.models.functions import TruncDate
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from apps.audit.models import AuditActionChoices, ResourceTypeChoices
from apps.audit.services import log_audit
from apps.authz.models import RoleChoices
from apps.authz.permissions import can_mutate_prescription
from apps.core.observability import metrics
from apps.core.observability.events import log_domain_event, log_prescription_transition
from apps.core.pagination import NEWEST, cursor_paginate
from .models import Prescription, PrescriptionStatusChoices

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


class PrescriptionNotFound(NotFound):
    default_detail = 'Prescription not found'


class PrescriptionAccessDenied(PermissionDenied):
    default_detail = (
        'Access denied. Required role(s): admin or the prescribing doctor'
    )


class InvalidPrescriptionStatus(ValidationError):
    default_detail = (
        f'Invalid status. Allowed: {", ".join(PrescriptionStatusChoices.values)}'
    )


# ============================================================================
# Listing
# ============================================================================

def filter_prescriptions(requester, search='', status='', date_from=None, date_to=None):
    """
    Queryset of prescriptions visible to ``requester`` matching the filters.

    Non-admins only ever see their own prescriptions; the ownership filter
    is ANDed with every other filter. Malformed dates raise Django's
    ValidationError, which the API maps to a generic 500.
    """
    queryset = Prescription.objects.select_related('doctor')

    if requester.role != RoleChoices.ADMIN:
        queryset = queryset.filter(doctor=requester)

    if search:
        queryset = queryset.filter(
            Q(patient_name__icontains=search) | Q(diagnosis__icontains=search)
        )

    if status:
        if status not in PrescriptionStatusChoices.values:
            raise InvalidPrescriptionStatus()
        queryset = queryset.filter(status=status)

    if date_from:
        queryset = queryset.filter(created_at__gte=date_from)
    if date_to:
        queryset = queryset.filter(created_at__lte=date_to)

    return queryset


def list_prescriptions(requester, filters=None, cursor=None, limit=DEFAULT_LIMIT, sort_direction=NEWEST):
    """
    One cursor page of prescriptions.

    Args:
        requester: authenticated User
        filters: dict with optional search, status, from, to
        cursor: id of the last row of the previous page, or None
        limit: page size (already clamped by the caller)
        sort_direction: 'newest' (id < cursor) or 'oldest' (id > cursor)

    Returns:
        CursorPage of Prescription instances.
    """
    filters = filters or {}
    queryset = filter_prescriptions(
        requester,
        search=(filters.get('search') or '').strip(),
        status=filters.get('status') or '',
        date_from=filters.get('from') or None,
        date_to=filters.get('to') or None,
    )
    return cursor_paginate(queryset, cursor, limit, sort_direction)


# ============================================================================
# Status transitions
# ============================================================================

def get_owned_prescription(requester, prescription_id):
    """Load a prescription the requester may act on (404, then 403)."""
    try:
        prescription = Prescription.objects.select_related('doctor').get(pk=prescription_id)
    except (Prescription.DoesNotExist, ValueError, TypeError):
        raise PrescriptionNotFound()

    is_owner = prescription.doctor_id is not None and prescription.doctor_id == requester.pk
    if not can_mutate_prescription(requester.role, is_owner):
        raise PrescriptionAccessDenied()
    return prescription


def set_status(requester, prescription_id, new_status, request=None,
               audit_action=AuditActionChoices.PRESCRIPTION_UPDATED):
    """
    Move a prescription to ``new_status``.

    Checks run in order: existence (404), authorization (403), then status
    validity (400). Any status is reachable from any other, and repeating
    the same call leaves the same persisted state.
    """
    try:
        prescription = get_owned_prescription(requester, prescription_id)
    except PrescriptionNotFound:
        metrics.prescription_status_transition_total.labels(
            to_status=str(new_status), result='not_found'
        ).inc()
        raise
    except PrescriptionAccessDenied:
        metrics.prescription_status_transition_total.labels(
            to_status=str(new_status), result='denied'
        ).inc()
        log_domain_event(
            'prescription_status_denied',
            entity_type='Prescription',
            entity_id=str(prescription_id),
            result='denied',
            requester_role=requester.role,
        )
        raise

    if new_status not in PrescriptionStatusChoices.values:
        metrics.prescription_status_transition_total.labels(
            to_status='invalid', result='invalid'
        ).inc()
        raise InvalidPrescriptionStatus()

    from_status = prescription.status
    prescription.status = new_status
    prescription.save(update_fields=['status', 'updated_at'])

    metrics.prescription_status_transition_total.labels(
        to_status=new_status, result='success'
    ).inc()
    log_prescription_transition(prescription, from_status, new_status)
    log_audit(
        audit_action,
        user=requester,
        resource_type=ResourceTypeChoices.PRESCRIPTION,
        resource_id=prescription.pk,
        details={
            'prescriptionId': prescription.pk,
            'newStatus': new_status,
            'actingUser': str(requester.pk),
        },
        request=request,
    )
    return prescription


def cancel_prescription(requester, prescription_id, request=None):
    """Soft delete: transition to cancelled. Rows are never removed."""
    return set_status(
        requester,
        prescription_id,
        PrescriptionStatusChoices.CANCELLED,
        request=request,
        audit_action=AuditActionChoices.PRESCRIPTION_DELETED,
    )


# ============================================================================
# Creation
# ============================================================================

def create_prescription(doctor, data, request=None):
    """
    Persist a prescription for ``doctor`` from validated ``data``.

    The creation notification (and its real-time push) is dispatched only
    after the transaction commits.
    """
    from apps.notifications.services import notify_prescription_created

    with transaction.atomic():
        prescription = Prescription.objects.create(
            doctor=doctor,
            patient_name=data['patient_name'],
            patient_age=data['patient_age'],
            patient_email=data.get('patient_email') or '',
            diagnosis=data['diagnosis'],
            doctor_notes=data.get('doctor_notes') or '',
            medicines=data['medicines'],
        )
        log_audit(
            AuditActionChoices.PRESCRIPTION_CREATED,
            user=doctor,
            resource_type=ResourceTypeChoices.PRESCRIPTION,
            resource_id=prescription.pk,
            details={'medicineCount': len(prescription.medicines)},
            request=request,
        )
        notify_prescription_created(prescription)

    metrics.prescriptions_created_total.inc()
    log_domain_event(
        'prescription_created',
        entity_type='Prescription',
        entity_id=str(prescription.pk),
        entity_ids={'doctor_id': str(doctor.pk)},
        medicine_count=len(prescription.medicines),
    )
    return prescription


# ============================================================================
# Dashboard
# ============================================================================

def dashboard_stats(requester, now=None):
    """
    Dashboard aggregates over the prescriptions visible to ``requester``.

    Returns:
        {
            'treatedStats': [{'date': 'YYYY-MM-DD', 'count': n}, ...],  # last 7 days, ascending
            'diagnosisStats': [{'diagnosis': str, 'count': n}, ...],    # top 5
            'recentPrescriptions': [Prescription, ...],                 # newest 5
        }
    """
    now = now or timezone.now()
    queryset = filter_prescriptions(requester)

    since = (now - timedelta(days=7)).replace(hour=0, minute=0, second=0, microsecond=0)
    treated = (
        queryset.filter(created_at__gte=since)
        .annotate(day=TruncDate('created_at'))
        .values('day')
        .annotate(count=Count('id'))
        .order_by('day')
    )

    diagnoses = (
        queryset.exclude(diagnosis='')
        .values('diagnosis')
        .annotate(count=Count('id'))
        .order_by('-count', 'diagnosis')[:5]
    )

    return {
        'treatedStats': [
            {'date': row['day'].isoformat(), 'count': row['count']} for row in treated
        ],
        'diagnosisStats': [
            {'diagnosis': row['diagnosis'], 'count': row['count']} for row in diagnoses
        ],
        'recentPrescriptions': list(queryset.order_by('-id')[:5]),
    }
