"""
Shared pytest fixtures: users by role, an open period with one assigned
section, and an in-memory event publisher.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from core.realtime import InMemoryEventPublisher

User = get_user_model()


@pytest.fixture
def publisher():
    """Publisher that keeps delivered events for assertions."""
    return InMemoryEventPublisher()


@pytest.fixture
def director(db):
    return User.objects.create_user(
        username='director',
        password='testpass123',
        first_name='Dilnoza',
        last_name='Karimova',
        role=User.UserRole.DIRECTOR,
    )


@pytest.fixture
def manager(db):
    return User.objects.create_user(
        username='manager',
        password='testpass123',
        role=User.UserRole.MANAGER,
    )


@pytest.fixture
def worker(db):
    return User.objects.create_user(
        username='worker',
        password='testpass123',
        first_name='Aziz',
        last_name='Tursunov',
        role=User.UserRole.WORKER,
    )


@pytest.fixture
def period(db, director, publisher):
    from periods.services import PeriodService

    return PeriodService(publisher=publisher).create_period(
        name='Spring 2026',
        start_date=timezone.localdate() - timedelta(days=60),
        created_by=director,
    )


@pytest.fixture
def section(db, period, publisher):
    """Section 1, assigned to the open period, no batch yet."""
    from sections.services import SectionService

    service = SectionService(publisher=publisher)
    section = service.create_section('Section 1')
    return service.assign_period(section, period)


@pytest.fixture
def batch(db, section, director, publisher):
    """Open batch of 10,000 chicks placed 30 days ago."""
    from sections.services import BatchService

    return BatchService(publisher=publisher).create_batch(
        section,
        total_chicks_in=10000,
        started_at=timezone.now() - timedelta(days=30),
        created_by=director,
    )


@pytest.fixture
def api_client():
    """API client for making requests."""
    return APIClient()


@pytest.fixture
def director_client(director):
    client = APIClient()
    client.force_authenticate(user=director)
    return client


@pytest.fixture
def manager_client(manager):
    client = APIClient()
    client.force_authenticate(user=manager)
    return client


@pytest.fixture
def worker_client(worker):
    client = APIClient()
    client.force_authenticate(user=worker)
    return client
