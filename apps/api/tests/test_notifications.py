"""
Tests for the notification inbox and real-time push task.
"""
import json
from unittest.mock import MagicMock, patch

import pytest
import redis
from django.test import override_settings

from apps.notifications.models import Notification
from apps.notifications.services import create_notification, dispatch_push
from apps.notifications.tasks import channel_for, push_notification


@pytest.mark.django_db
class TestInbox:

    def test_lists_only_own_newest_first(
        self, doctor_client, doctor_user, other_doctor_user, notification_factory,
    ):
        first = notification_factory(doctor_user, title='first')
        second = notification_factory(doctor_user, title='second')
        notification_factory(other_doctor_user, title='not mine')

        response = doctor_client.get('/api/notifications/')

        assert response.status_code == 200
        assert [n['id'] for n in response.data['data']] == [second.id, first.id]
        assert response.data['pagination'] == {'hasMore': False, 'nextCursor': None, 'limit': 20}

    def test_cursor_pages(self, doctor_client, doctor_user, notification_factory):
        created = [notification_factory(doctor_user).id for _ in range(5)]

        first = doctor_client.get('/api/notifications/', {'limit': 2})
        second = doctor_client.get(
            '/api/notifications/',
            {'limit': 2, 'cursor': first.data['pagination']['nextCursor']},
        )

        assert [n['id'] for n in first.data['data']] == [created[4], created[3]]
        assert [n['id'] for n in second.data['data']] == [created[2], created[1]]
        assert second.data['pagination']['hasMore'] is True

    def test_limit_is_capped(self, doctor_client):
        response = doctor_client.get('/api/notifications/', {'limit': 1000})

        assert response.data['pagination']['limit'] == 50

    def test_unread_count(self, doctor_client, doctor_user, notification_factory):
        notification_factory(doctor_user)
        notification_factory(doctor_user)
        notification_factory(doctor_user, read=True)

        response = doctor_client.get('/api/notifications/unread-count/')

        assert response.data == {'success': True, 'count': 2}

    def test_mark_read(self, doctor_client, doctor_user, notification_factory):
        notification = notification_factory(doctor_user)

        response = doctor_client.patch(f'/api/notifications/{notification.id}/read/')

        assert response.status_code == 200
        assert response.data['data']['read'] is True
        notification.refresh_from_db()
        assert notification.read is True

    def test_cannot_mark_someone_elses(self, doctor_client, other_doctor_user, notification_factory):
        notification = notification_factory(other_doctor_user)

        response = doctor_client.patch(f'/api/notifications/{notification.id}/read/')

        assert response.status_code == 404
        assert response.data['message'] == 'Notification not found'
        notification.refresh_from_db()
        assert notification.read is False

    def test_mark_all_read(self, doctor_client, doctor_user, other_doctor_user, notification_factory):
        notification_factory(doctor_user)
        notification_factory(doctor_user)
        theirs = notification_factory(other_doctor_user)

        response = doctor_client.patch('/api/notifications/read-all/')

        assert response.data['message'] == 'All notifications marked as read'
        assert response.data['updated'] == 2
        assert not Notification.objects.filter(user=doctor_user, read=False).exists()
        theirs.refresh_from_db()
        assert theirs.read is False

    def test_requires_authentication(self, api_client):
        assert api_client.get('/api/notifications/').status_code == 401


@pytest.mark.django_db
class TestPushTask:

    def test_skipped_without_redis(self, doctor_user, notification_factory):
        notification = notification_factory(doctor_user)

        result = push_notification(notification.id)

        assert 'skipped' in result

    @override_settings(REDIS_URL='redis://redis.invalid:6379/0')
    def test_publishes_to_user_channel(self, doctor_user, notification_factory):
        notification = notification_factory(doctor_user, title='Prescription created')
        client = MagicMock()

        with patch('apps.notifications.tasks.get_redis_client', return_value=client):
            result = push_notification(notification.id)

        assert result == f'Notification {notification.id} pushed'
        channel, payload = client.publish.call_args[0]
        assert channel == f'notifications:{doctor_user.id}'
        assert json.loads(payload)['title'] == 'Prescription created'

    @override_settings(REDIS_URL='redis://redis.invalid:6379/0')
    def test_publish_failure_is_reported_not_raised(self, doctor_user, notification_factory):
        notification = notification_factory(doctor_user)
        client = MagicMock()
        client.publish.side_effect = redis.ConnectionError('refused')

        with patch('apps.notifications.tasks.get_redis_client', return_value=client):
            result = push_notification(notification.id)

        assert result.startswith(f'Error pushing notification {notification.id}')

    def test_channel_name(self):
        assert channel_for('abc') == 'notifications:abc'

    def test_dispatch_swallows_broker_errors(self):
        with patch('apps.notifications.tasks.push_notification') as task:
            task.delay.side_effect = ConnectionError('broker down')
            dispatch_push(1)

        task.delay.assert_called_once_with(1)

    def test_push_waits_for_commit(self, doctor_user, django_capture_on_commit_callbacks):
        with patch('apps.notifications.tasks.push_notification') as task:
            with django_capture_on_commit_callbacks(execute=False) as callbacks:
                notification = create_notification(doctor_user, 'Hello')
            task.delay.assert_not_called()

            callbacks[0]()

        task.delay.assert_called_once_with(notification.id)
