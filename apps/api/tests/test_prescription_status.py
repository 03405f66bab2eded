"""
Tests for prescription status transitions and soft delete.
"""
import pytest

from apps.audit.models import AuditLog
from apps.authz.models import RoleChoices
from apps.authz.permissions import can_mutate_prescription
from apps.prescriptions.models import Prescription


def status_url(pk):
    return f'/api/prescriptions/{pk}/status/'


def detail_url(pk):
    return f'/api/prescriptions/{pk}/'


@pytest.mark.parametrize('role,is_owner,allowed', [
    (RoleChoices.ADMIN, False, True),
    (RoleChoices.ADMIN, True, True),
    (RoleChoices.DOCTOR, True, True),
    (RoleChoices.DOCTOR, False, False),
    (RoleChoices.PHARMACIST, True, True),
    (RoleChoices.PHARMACIST, False, False),
])
def test_can_mutate_prescription(role, is_owner, allowed):
    assert can_mutate_prescription(role, is_owner) is allowed


@pytest.mark.django_db
class TestStatusTransition:

    def test_owner_can_complete(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        assert response.status_code == 200
        assert response.data['message'] == 'Status updated to completed'
        assert response.data['data']['status'] == 'completed'
        prescription.refresh_from_db()
        assert prescription.status == 'completed'

    def test_transition_is_audited(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        entry = AuditLog.objects.get(action='PRESCRIPTION_UPDATED')
        assert entry.user == doctor_user
        assert entry.resource_type == 'Prescription'
        assert entry.resource_id == str(prescription.id)
        assert entry.details == {
            'prescriptionId': prescription.id,
            'newStatus': 'completed',
            'actingUser': str(doctor_user.id),
        }

    def test_repeating_a_transition_is_idempotent(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        first = doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')
        second = doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        assert first.status_code == second.status_code == 200
        prescription.refresh_from_db()
        assert prescription.status == 'completed'

    def test_any_status_is_reachable(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user, status='cancelled')

        response = doctor_client.patch(status_url(prescription.id), {'status': 'active'}, format='json')

        assert response.status_code == 200
        assert response.data['data']['status'] == 'active'

    def test_admin_can_update_any(self, admin_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = admin_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        assert response.status_code == 200

    def test_other_doctor_is_denied_and_state_unchanged(
        self, other_doctor_client, doctor_user, prescription_factory,
    ):
        prescription = prescription_factory(doctor_user)

        response = other_doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        assert response.status_code == 403
        assert response.data['success'] is False
        assert 'Access denied' in response.data['message']
        prescription.refresh_from_db()
        assert prescription.status == 'active'
        assert not AuditLog.objects.filter(action='PRESCRIPTION_UPDATED').exists()

    def test_pharmacist_is_denied(self, pharmacist_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = pharmacist_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json')

        assert response.status_code == 403

    def test_missing_prescription(self, doctor_client):
        response = doctor_client.patch(status_url(999999), {'status': 'completed'}, format='json')

        assert response.status_code == 404
        assert response.data == {'success': False, 'message': 'Prescription not found'}

    def test_invalid_status(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = doctor_client.patch(status_url(prescription.id), {'status': 'dispensed'}, format='json')

        assert response.status_code == 400
        assert response.data['message'] == 'Invalid status. Allowed: active, completed, cancelled'
        prescription.refresh_from_db()
        assert prescription.status == 'active'

    def test_missing_status_is_invalid(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = doctor_client.patch(status_url(prescription.id), {}, format='json')

        assert response.status_code == 400

    def test_existence_is_checked_before_status(self, doctor_client):
        response = doctor_client.patch(status_url(999999), {'status': 'bogus'}, format='json')

        assert response.status_code == 404

    def test_ownership_is_checked_before_status(self, other_doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = other_doctor_client.patch(status_url(prescription.id), {'status': 'bogus'}, format='json')

        assert response.status_code == 403

    def test_orphaned_prescription_only_admin(
        self, doctor_client, admin_client, other_doctor_user, prescription_factory,
    ):
        prescription = prescription_factory(other_doctor_user)
        other_doctor_user.delete()

        assert Prescription.objects.get(id=prescription.id).doctor_id is not None
        assert doctor_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json').status_code == 403
        assert admin_client.patch(status_url(prescription.id), {'status': 'completed'}, format='json').status_code == 200


@pytest.mark.django_db
class TestSoftDelete:

    def test_delete_cancels_and_keeps_row(self, doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = doctor_client.delete(detail_url(prescription.id))

        assert response.status_code == 200
        assert response.data['message'] == 'Prescription cancelled'
        assert Prescription.objects.get(id=prescription.id).status == 'cancelled'
        entry = AuditLog.objects.get(action='PRESCRIPTION_DELETED')
        assert entry.details['newStatus'] == 'cancelled'

    def test_delete_other_doctors_prescription(self, other_doctor_client, doctor_user, prescription_factory):
        prescription = prescription_factory(doctor_user)

        response = other_doctor_client.delete(detail_url(prescription.id))

        assert response.status_code == 403
        assert Prescription.objects.get(id=prescription.id).status == 'active'

    def test_delete_missing(self, admin_client):
        assert admin_client.delete(detail_url(424242)).status_code == 404
