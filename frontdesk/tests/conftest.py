import datetime

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from frontdesk.models import Patient, PreRegistration, User


@pytest.fixture(autouse=True)
def _clear_cache():
    # throttle counters and the cached settings row live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='desk1', password='P@ssw0rd1', role=User.Role.STAFF)


@pytest.fixture
def staff_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def make_patient(db):
    def _make(full_name='Juan Dela Cruz', **extra):
        fields = {
            'full_name': full_name,
            'date_of_birth': datetime.date(1990, 5, 17),
            'gender': 'male',
            'address': '12 Rizal St, Quezon City',
            'contact_number': '09171234567',
        }
        fields.update(extra)
        return Patient.objects.create(**fields)
    return _make


@pytest.fixture
def make_pre_registration(db):
    def _make(**extra):
        fields = {
            'full_name': 'Maria Santos',
            'date_of_birth': datetime.date(1985, 1, 30),
            'gender': 'female',
            'address': '45 Mabini Ave, Manila',
            'contact_number': '09181112222',
            'civil_status': 'married',
            'religion': 'Catholic',
            'philhealth_id': '12-345678901-2',
            'reason_for_visit': 'checkup',
        }
        fields.update(extra)
        return PreRegistration.objects.create(**fields)
    return _make
