"""
Tests for the audit trail: writer, admin browsing and retention purge.
"""
from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import RequestFactory
from django.utils import timezone

from apps.audit.models import AuditLog
from apps.audit.services import log_audit
from apps.audit.tasks import purge_expired_audit_logs

URL = '/api/admin/audit-logs/'


@pytest.mark.django_db
class TestLogAudit:

    def test_records_request_context(self, doctor_user):
        request = RequestFactory().get(
            '/',
            HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1',
            HTTP_USER_AGENT='pytest-agent',
        )

        entry = log_audit(
            'PRESCRIPTION_CREATED',
            user=doctor_user,
            resource_type='Prescription',
            resource_id=12,
            details={'medicineCount': 2},
            request=request,
        )

        entry.refresh_from_db()
        assert entry.ip_address == '203.0.113.7'
        assert entry.user_agent == 'pytest-agent'
        assert entry.resource_id == '12'
        assert entry.details == {'medicineCount': 2}

    def test_expires_after_retention(self):
        entry = log_audit('USER_LOGIN_FAILED')

        delta = entry.expires_at - entry.created_at
        assert timedelta(days=89) < delta <= timedelta(days=90, seconds=5)
        assert entry.user is None

    def test_write_failure_is_swallowed(self, doctor_user):
        with patch.object(AuditLog.objects, 'create', side_effect=DatabaseError('disk full')):
            result = log_audit('USER_LOGIN', user=doctor_user)

        assert result is None

    def test_failure_does_not_break_callers_transaction(self, doctor_user):
        with patch.object(AuditLog.objects, 'create', side_effect=DatabaseError('disk full')):
            log_audit('USER_LOGIN', user=doctor_user)

        assert log_audit('USER_LOGIN', user=doctor_user) is not None


@pytest.mark.django_db
class TestAuditLogEndpoints:

    def test_admin_lists_newest_first(self, admin_client, doctor_user):
        old = log_audit('USER_LOGIN', user=doctor_user)
        AuditLog.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(hours=1))
        new = log_audit('USER_SIGNUP', user=doctor_user)

        response = admin_client.get(URL)

        assert response.status_code == 200
        assert [row['id'] for row in response.data['data']] == [str(new.id), str(old.id)]
        assert response.data['data'][0]['user'] == {
            'name': 'Dr. A', 'email': 'doctor.a@test.com', 'role': 'doctor',
        }
        assert response.data['pagination'] == {'page': 1, 'limit': 25, 'total': 2, 'pages': 1}

    def test_filters(self, admin_client, doctor_user, other_doctor_user):
        log_audit('USER_LOGIN', user=doctor_user)
        log_audit('USER_LOGIN', user=other_doctor_user)
        log_audit('USER_SIGNUP', user=doctor_user)

        by_action = admin_client.get(URL, {'action': 'USER_LOGIN'})
        by_user = admin_client.get(URL, {'userId': str(doctor_user.id)})
        both = admin_client.get(URL, {'action': 'USER_LOGIN', 'userId': str(other_doctor_user.id)})

        assert by_action.data['pagination']['total'] == 2
        assert by_user.data['pagination']['total'] == 2
        assert both.data['pagination']['total'] == 1

    def test_date_range(self, admin_client):
        entry = log_audit('USER_LOGIN')
        AuditLog.objects.filter(pk=entry.pk).update(created_at=timezone.now() - timedelta(days=10))
        log_audit('USER_LOGIN')

        response = admin_client.get(URL, {'from': (timezone.now() - timedelta(days=1)).isoformat()})

        assert response.data['pagination']['total'] == 1

    @pytest.mark.parametrize('params', [{'userId': 'not-a-uuid'}, {'from': 'last tuesday'}])
    def test_malformed_filters_are_rejected(self, admin_client, params):
        response = admin_client.get(URL, params)

        assert response.status_code == 400
        assert response.data['success'] is False

    def test_paging(self, admin_client):
        for _ in range(5):
            log_audit('USER_LOGIN')

        response = admin_client.get(URL, {'page': 2, 'limit': 2})

        assert len(response.data['data']) == 2
        assert response.data['pagination'] == {'page': 2, 'limit': 2, 'total': 5, 'pages': 3}

    def test_distinct_actions(self, admin_client):
        log_audit('USER_LOGIN')
        log_audit('USER_LOGIN')
        log_audit('PRESCRIPTION_CREATED')

        response = admin_client.get(URL + 'actions/')

        assert response.data == {'success': True, 'data': ['PRESCRIPTION_CREATED', 'USER_LOGIN']}

    @pytest.mark.parametrize('client_fixture', ['doctor_client', 'pharmacist_client'])
    def test_non_admin_is_denied(self, request, client_fixture):
        client = request.getfixturevalue(client_fixture)

        response = client.get(URL)

        assert response.status_code == 403
        assert response.data['message'].startswith('Access denied. Required role(s): admin.')


@pytest.mark.django_db
def test_purge_deletes_only_expired():
    expired = log_audit('USER_LOGIN')
    AuditLog.objects.filter(pk=expired.pk).update(expires_at=timezone.now() - timedelta(seconds=1))
    kept = log_audit('USER_LOGIN')

    assert purge_expired_audit_logs() == 1
    assert list(AuditLog.objects.values_list('id', flat=True)) == [kept.id]
