"""
Tests for prescription listing: cursor pagination, role scoping, filters.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from apps.prescriptions.models import Prescription

LIST_URL = '/api/prescriptions/'


def _ids(response):
    return [row['id'] for row in response.data['data']]


@pytest.mark.django_db
class TestCursorPagination:

    def test_eleven_records_limit_ten(self, doctor_client, doctor_user, prescription_factory):
        created = [prescription_factory(doctor_user) for _ in range(11)]
        newest_first = [p.id for p in reversed(created)]

        response = doctor_client.get(LIST_URL, {'limit': 10})

        assert response.status_code == 200
        assert response.data['success'] is True
        assert _ids(response) == newest_first[:10]
        assert response.data['pagination'] == {
            'hasMore': True,
            'nextCursor': newest_first[9],
            'limit': 10,
        }

        response = doctor_client.get(LIST_URL, {'limit': 10, 'cursor': newest_first[9]})

        assert _ids(response) == newest_first[10:]
        assert response.data['pagination']['hasMore'] is False
        assert response.data['pagination']['nextCursor'] is None

    @pytest.mark.parametrize('sort', ['newest', 'oldest'])
    def test_traversal_visits_each_record_once(self, doctor_client, doctor_user, prescription_factory, sort):
        created = [prescription_factory(doctor_user).id for _ in range(8)]

        seen = []
        cursor = None
        while True:
            params = {'limit': 3, 'sort': sort}
            if cursor:
                params['cursor'] = cursor
            response = doctor_client.get(LIST_URL, params)
            seen.extend(_ids(response))
            cursor = response.data['pagination']['nextCursor']
            if not response.data['pagination']['hasMore']:
                break

        expected = created if sort == 'oldest' else list(reversed(created))
        assert seen == expected

    def test_inserts_during_traversal_do_not_duplicate(self, doctor_client, doctor_user, prescription_factory):
        created = [prescription_factory(doctor_user).id for _ in range(6)]

        first = doctor_client.get(LIST_URL, {'limit': 3})
        prescription_factory(doctor_user, patient_name='Late arrival')
        second = doctor_client.get(LIST_URL, {'limit': 3, 'cursor': first.data['pagination']['nextCursor']})

        seen = _ids(first) + _ids(second)
        assert len(seen) == len(set(seen))
        assert sorted(seen) == sorted(created)

    def test_cursor_of_deleted_record_is_still_a_boundary(self, doctor_client, doctor_user, prescription_factory):
        created = [prescription_factory(doctor_user).id for _ in range(5)]
        Prescription.objects.filter(id=created[2]).delete()

        response = doctor_client.get(LIST_URL, {'cursor': created[2]})

        assert _ids(response) == [created[1], created[0]]

    @pytest.mark.parametrize('raw_limit,expected', [
        ('abc', 10),
        ('0', 10),
        ('-5', 10),
        ('500', 50),
        ('7', 7),
    ])
    def test_malformed_or_large_limit(self, doctor_client, raw_limit, expected):
        response = doctor_client.get(LIST_URL, {'limit': raw_limit})

        assert response.status_code == 200
        assert response.data['pagination']['limit'] == expected

    def test_malformed_cursor_returns_first_page(self, doctor_client, doctor_user, prescription_factory):
        created = [prescription_factory(doctor_user).id for _ in range(3)]

        response = doctor_client.get(LIST_URL, {'cursor': 'not-a-number'})

        assert response.status_code == 200
        assert _ids(response) == list(reversed(created))

    def test_empty_result(self, doctor_client):
        response = doctor_client.get(LIST_URL)

        assert response.status_code == 200
        assert response.data['data'] == []
        assert response.data['pagination'] == {'hasMore': False, 'nextCursor': None, 'limit': 10}


@pytest.mark.django_db
class TestRoleScoping:

    def test_doctors_see_only_their_own(
        self, doctor_client, other_doctor_client, admin_client,
        doctor_user, other_doctor_user, prescription_factory,
    ):
        mine = prescription_factory(doctor_user, patient_name='Alpha')
        theirs = prescription_factory(other_doctor_user, patient_name='Beta')

        assert _ids(doctor_client.get(LIST_URL)) == [mine.id]
        assert _ids(other_doctor_client.get(LIST_URL)) == [theirs.id]
        assert _ids(admin_client.get(LIST_URL)) == [theirs.id, mine.id]

    def test_pharmacist_sees_nothing_they_did_not_write(self, pharmacist_client, doctor_user, prescription_factory):
        prescription_factory(doctor_user)

        response = pharmacist_client.get(LIST_URL)

        assert response.status_code == 200
        assert response.data['data'] == []

    def test_doctor_is_joined(self, doctor_client, doctor_user, prescription_factory):
        prescription_factory(doctor_user)

        row = doctor_client.get(LIST_URL).data['data'][0]

        assert row['doctor'] == {'name': 'Dr. A', 'email': 'doctor.a@test.com', 'role': 'doctor'}
        assert row['doctor_id'] == str(doctor_user.id)

    def test_unauthenticated_is_rejected(self, api_client):
        response = api_client.get(LIST_URL)

        assert response.status_code == 401
        assert response.data['success'] is False


@pytest.mark.django_db
class TestFilters:

    def test_search_matches_patient_name_or_diagnosis(self, doctor_client, doctor_user, prescription_factory):
        by_name = prescription_factory(doctor_user, patient_name='Maria Lopez', diagnosis='Cold')
        by_diagnosis = prescription_factory(doctor_user, patient_name='Tom', diagnosis='Chronic MIGRAINE')
        prescription_factory(doctor_user, patient_name='Other', diagnosis='Flu')

        assert _ids(doctor_client.get(LIST_URL, {'search': 'lopez'})) == [by_name.id]
        assert _ids(doctor_client.get(LIST_URL, {'search': 'migraine'})) == [by_diagnosis.id]

    def test_search_is_anded_with_ownership(
        self, doctor_client, doctor_user, other_doctor_user, prescription_factory,
    ):
        prescription_factory(other_doctor_user, patient_name='Shared Name')

        assert _ids(doctor_client.get(LIST_URL, {'search': 'shared'})) == []

    def test_status_filter(self, doctor_client, doctor_user, prescription_factory):
        prescription_factory(doctor_user)
        completed = prescription_factory(doctor_user, status='completed')

        assert _ids(doctor_client.get(LIST_URL, {'status': 'completed'})) == [completed.id]

    def test_unknown_status_filter_is_rejected(self, doctor_client):
        response = doctor_client.get(LIST_URL, {'status': 'archived'})

        assert response.status_code == 400
        assert response.data['message'] == 'Invalid status. Allowed: active, completed, cancelled'

    def test_date_range(self, doctor_client, doctor_user, prescription_factory):
        now = timezone.now()
        prescription_factory(doctor_user, created_at=now - timedelta(days=30))
        recent = prescription_factory(doctor_user, created_at=now - timedelta(days=2))

        response = doctor_client.get(LIST_URL, {
            'from': (now - timedelta(days=7)).date().isoformat(),
            'to': (now + timedelta(days=1)).date().isoformat(),
        })

        assert _ids(response) == [recent.id]

    def test_malformed_date_is_a_generic_server_error(self, doctor_client):
        response = doctor_client.get(LIST_URL, {'from': 'yesterday-ish'})

        assert response.status_code == 500
        assert response.data == {'success': False, 'message': 'Server error'}
