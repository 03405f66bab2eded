"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Authenticated API clients by role
- Factories for users, medicines, prescriptions and notifications
"""
import pytest
from rest_framework.test import APIClient

from apps.authz.models import User, RoleChoices
from apps.core.cache import get_default_cache
from apps.core.observability.correlation import clear_request_context
from apps.medicines.models import Medicine
from apps.notifications.models import Notification
from apps.prescriptions.models import Prescription


@pytest.fixture(autouse=True)
def _reset_process_state():
    """Default cache and correlation context are process-wide; reset around each test."""
    get_default_cache.cache_clear()
    clear_request_context()
    yield
    get_default_cache.cache_clear()
    clear_request_context()


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def user_factory(db):
    """Create users with a role; emails are unique per call."""
    counter = {'n': 0}

    def create(role=RoleChoices.DOCTOR, **kwargs):
        counter['n'] += 1
        defaults = {
            'email': f'{role}{counter["n"]}@test.com',
            'name': f'{role.capitalize()} {counter["n"]}',
            'password': 'testpass123',
            'role': role,
        }
        defaults.update(kwargs)
        return User.objects.create_user(**defaults)

    return create


@pytest.fixture
def doctor_user(user_factory):
    return user_factory(RoleChoices.DOCTOR, email='doctor.a@test.com', name='Dr. A')


@pytest.fixture
def other_doctor_user(user_factory):
    return user_factory(RoleChoices.DOCTOR, email='doctor.b@test.com', name='Dr. B')


@pytest.fixture
def pharmacist_user(user_factory):
    return user_factory(RoleChoices.PHARMACIST, email='pharmacist@test.com', name='Pharm')


@pytest.fixture
def admin_user(user_factory):
    return user_factory(
        RoleChoices.ADMIN,
        email='admin@test.com',
        name='Admin',
        is_staff=True,
    )


# ============================================================================
# API Clients
# ============================================================================

def _client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def doctor_client(doctor_user):
    """Authenticated API client for doctor A."""
    return _client_for(doctor_user)


@pytest.fixture
def other_doctor_client(other_doctor_user):
    """Authenticated API client for doctor B."""
    return _client_for(other_doctor_user)


@pytest.fixture
def pharmacist_client(pharmacist_user):
    return _client_for(pharmacist_user)


@pytest.fixture
def admin_client(admin_user):
    """Authenticated API client with Admin role (full access)."""
    return _client_for(admin_user)


# ============================================================================
# Domain objects
# ============================================================================

@pytest.fixture
def medicine_factory(db):
    def create(name='Paracetamol 500mg', **kwargs):
        defaults = {
            'name': name,
            'composition': 'Paracetamol (500mg)',
            'manufacturer': 'Acme Pharma',
            'description': 'Pain reliever and fever reducer',
            'price': '12.50',
        }
        defaults.update(kwargs)
        return Medicine.objects.create(**defaults)

    return create


@pytest.fixture
def prescription_factory(db):
    def create(doctor, **kwargs):
        defaults = {
            'patient_name': 'Jane Doe',
            'patient_age': 34,
            'patient_email': 'jane@example.com',
            'diagnosis': 'Flu',
            'medicines': [
                {'name': 'Paracetamol 500mg', 'dosage': '1 tablet', 'frequency': '', 'quantity': 2},
            ],
        }
        defaults.update(kwargs)
        return Prescription.objects.create(doctor=doctor, **defaults)

    return create


@pytest.fixture
def notification_factory(db):
    def create(user, **kwargs):
        defaults = {'title': 'Prescription created', 'message': 'hello'}
        defaults.update(kwargs)
        return Notification.objects.create(user=user, **defaults)

    return create
