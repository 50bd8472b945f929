"""
Accounting Period Tests
"""

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from core.exceptions import InvalidState, Reason, ValidationError
from periods.models import Period, PeriodStatus
from periods.services import PeriodService

pytestmark = pytest.mark.django_db


class TestPeriodService:

    def test_period_starts_active_today_by_default(self, publisher, director):
        period = PeriodService(publisher=publisher).create_period('Summer 2026', created_by=director)
        assert period.status == PeriodStatus.ACTIVE
        assert period.start_date == timezone.localdate()
        assert period.created_by == director

    def test_blank_name_rejected(self, publisher):
        with pytest.raises(ValidationError):
            PeriodService(publisher=publisher).create_period('   ')

    def test_several_periods_may_be_active(self, publisher, period):
        PeriodService(publisher=publisher).create_period('Summer 2026')
        assert Period.objects.filter(status=PeriodStatus.ACTIVE).count() == 2

    def test_update_editable_fields(self, publisher, period):
        updated = PeriodService(publisher=publisher).update_period(period, name=' Spring 2026 (A) ', notes='Two houses')
        assert updated.name == 'Spring 2026 (A)'
        assert updated.notes == 'Two houses'

    def test_status_is_not_editable(self, publisher, period):
        with pytest.raises(ValidationError):
            PeriodService(publisher=publisher).update_period(period, status=PeriodStatus.CLOSED)

    def test_closed_period_is_read_only(self, publisher, period):
        period.status = PeriodStatus.CLOSED
        period.save(update_fields=['status'])
        with pytest.raises(InvalidState) as exc_info:
            PeriodService(publisher=publisher).update_period(period, notes='late edit')
        assert exc_info.value.reason == Reason.PERIOD_CLOSED

    def test_period_created_event(self, publisher, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            PeriodService(publisher=publisher).create_period('Autumn 2026')
        assert publisher.events[0]['topic'] == 'system:periods'
        assert publisher.events[0]['event'] == 'period_created'
        assert publisher.events[0]['payload']['name'] == 'Autumn 2026'


class TestPeriodAPI:

    def test_director_creates_period(self, director_client):
        response = director_client.post(
            reverse('periods:period-list'), {'name': 'Autumn 2026', 'start_date': '2026-09-01'}, format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == PeriodStatus.ACTIVE

    def test_manager_cannot_create_period(self, manager_client):
        response = manager_client.post(reverse('periods:period-list'), {'name': 'Autumn 2026'}, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_filters_by_status(self, worker_client, period, publisher):
        closed = PeriodService(publisher=publisher).create_period('Old')
        closed.status = PeriodStatus.CLOSED
        closed.save(update_fields=['status'])

        response = worker_client.get(reverse('periods:period-list'), {'status': PeriodStatus.ACTIVE})
        assert response.status_code == status.HTTP_200_OK
        assert [row['name'] for row in response.data] == ['Spring 2026']
