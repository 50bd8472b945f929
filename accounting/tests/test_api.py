"""
Accounting API Tests

Covers the HTTP surface of report filing, closing and period reports,
including how ledger errors are rendered.
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from core.exceptions import Reason
from expenses.models import ExpenseSource, PeriodExpense
from periods.models import Period, PeriodStatus
from sections.models import SectionDailyReport

pytestmark = pytest.mark.django_db


class TestDailyReportAPI:

    @pytest.fixture(autouse=True)
    def tariffs(self, settings):
        settings.WATER_TARIFF_PER_LITRE = Decimal('5')
        settings.ELECTRICITY_TARIFF_PER_KWH = Decimal('800')

    def test_worker_files_report_with_utilities(self, worker_client, batch, section):
        response = worker_client.post(reverse('accounting:section-reports', args=[section.id]), {
            'deaths': 12,
            'avg_weight_kg': '1.450',
            'water_litres': '2000',
            'electricity_kwh': '150',
            'medicines': [{'name': 'Vitamin AD3E', 'dose': '1ml/2l'}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        report = SectionDailyReport.objects.get(batch=batch)
        utilities = PeriodExpense.objects.filter(daily_report=report, source=ExpenseSource.DAILY_REPORT)
        assert {expense.category: expense.amount for expense in utilities} == {
            'WATER': Decimal('10000.00'),
            'ELECTRICITY': Decimal('120000.00'),
        }
        assert len(response.data['utility_expenses']) == 2

    def test_report_without_readings_posts_nothing(self, worker_client, batch, section):
        response = worker_client.post(
            reverse('accounting:section-reports', args=[section.id]), {'deaths': 3}, format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['utility_expenses'] == []
        assert not PeriodExpense.objects.exists()

    def test_duplicate_report_is_conflict(self, worker_client, batch, section):
        url = reverse('accounting:section-reports', args=[section.id])
        worker_client.post(url, {'deaths': 3}, format='json')
        response = worker_client.post(url, {'deaths': 4}, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == Reason.DUPLICATE_REPORT

    def test_list_reports(self, worker_client, batch, section):
        url = reverse('accounting:section-reports', args=[section.id])
        worker_client.post(url, {'deaths': 3}, format='json')
        response = worker_client.get(url)
        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1


class TestClosingAPI:

    def test_batch_close_blocked_is_conflict(self, manager_client, small_batch):
        response = manager_client.post(reverse('accounting:batch-close', args=[small_batch.id]))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == Reason.NO_COMPLETED_CHICK_OUTS

    def test_manager_cannot_close_period(self, manager_client, period):
        response = manager_client.post(reverse('accounting:period-close', args=[period.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_director_closes_period(self, director_client, period, sold_batch):
        response = director_client.post(reverse('accounting:period-close', args=[period.id]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == PeriodStatus.CLOSED
        assert Period.objects.get(pk=period.pk).status == PeriodStatus.CLOSED

    def test_period_close_url_is_served_under_periods(self, period):
        assert reverse('accounting:period-close', args=[period.id]) == f'/api/periods/{period.id}/close/'

    def test_unfinished_operations(self, worker_client, period, final_chick_out):
        response = worker_client.get(reverse('accounting:period-unfinished', args=[period.id]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['incomplete_chick_outs'] == 1


class TestReportAPI:

    def test_kpi_endpoint(self, manager_client, period, sold_batch):
        response = manager_client.get(reverse('accounting:period-kpi', args=[period.id]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['totals']['final_chicks_out'] == 800

    def test_unknown_period_is_not_found(self, manager_client):
        response = manager_client.get(
            reverse('accounting:period-pl', args=['00000000-0000-0000-0000-000000000000'])
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == Reason.NOT_FOUND

    def test_worker_cannot_read_reports(self, worker_client, period):
        response = worker_client.get(reverse('accounting:period-cost-breakdown', args=[period.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_anonymous_is_rejected(self, api_client, period):
        response = api_client.get(reverse('accounting:period-revenue', args=[period.id]))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
