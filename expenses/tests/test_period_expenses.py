"""
Period Expense Ledger Tests

SCENARIO:
=========
During the Spring period the manager posts a transport bill, the section
meters water and electricity, and a director later tries to post to a
closed period.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status

from core.exceptions import InvalidState, Reason, ValidationError
from expenses.models import ExpenseCategory, ExpenseSource, PeriodExpense
from expenses.services import PeriodExpenseService, UtilityExpenseService
from periods.models import PeriodStatus

pytestmark = pytest.mark.django_db


@pytest.fixture
def expenses(publisher):
    return PeriodExpenseService(publisher=publisher)


# =============================================================================
# SERVICE
# =============================================================================

class TestAddExpense:

    def test_expense_is_posted(self, expenses, period, section, manager):
        expense = expenses.add_expense(
            period, ExpenseCategory.TRANSPORT, '450000', description='Feed truck',
            section=section, created_by=manager,
        )
        assert expense.amount == Decimal('450000')
        assert expense.source == ExpenseSource.MANUAL
        assert expense.expense_date == timezone.localdate()

    def test_closed_period_rejected(self, expenses, period):
        period.status = PeriodStatus.CLOSED
        period.save(update_fields=['status'])
        with pytest.raises(InvalidState) as exc_info:
            expenses.add_expense(period, ExpenseCategory.OTHER, 100)
        assert exc_info.value.reason == Reason.PERIOD_CLOSED
        assert PeriodExpense.objects.count() == 0

    @pytest.mark.parametrize('amount', [0, -10])
    def test_non_positive_amount_rejected(self, expenses, period, amount):
        with pytest.raises(ValidationError):
            expenses.add_expense(period, ExpenseCategory.OTHER, amount)

    def test_unknown_category_rejected(self, expenses, period):
        with pytest.raises(ValidationError):
            expenses.add_expense(period, 'FUEL', 100)

    def test_date_before_period_start_rejected(self, expenses, period):
        with pytest.raises(ValidationError):
            expenses.add_expense(
                period, ExpenseCategory.OTHER, 100,
                expense_date=period.start_date - timedelta(days=1),
            )

    def test_expense_event_is_published(self, expenses, period, section, publisher,
                                        django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            expenses.add_expense(period, ExpenseCategory.OTHER, 100, section=section)

        topics = [item['topic'] for item in publisher.events if item['event'] == 'expense_created']
        assert topics == ['system:periods', f'system:section:{section.id}']


class TestTotals:

    def test_totals_by_category_and_section(self, expenses, period, section):
        expenses.add_expense(period, ExpenseCategory.FEED, '1000.50', section=section)
        expenses.add_expense(period, ExpenseCategory.FEED, '999.50', section=section)
        expenses.add_expense(period, ExpenseCategory.OTHER, '500')

        assert expenses.get_total_expenses(period) == Decimal('2500.00')
        assert expenses.get_total_expenses(period, section=section) == Decimal('2000.00')
        assert expenses.get_total_by_category(period) == {
            'FEED': Decimal('2000.00'),
            'OTHER': Decimal('500.00'),
        }
        by_section = expenses.get_total_by_section(period)
        assert by_section[section.id] == Decimal('2000.00')
        assert by_section[None] == Decimal('500.00')

    def test_empty_period_totals_zero(self, expenses, period):
        assert expenses.get_total_expenses(period) == Decimal('0.00')
        assert expenses.get_total_by_category(period) == {}


class TestUtilities:

    @pytest.fixture(autouse=True)
    def tariffs(self, settings):
        settings.WATER_TARIFF_PER_LITRE = Decimal('10')
        settings.ELECTRICITY_TARIFF_PER_KWH = Decimal('800')

    def test_water_usage_is_priced_at_tariff(self, expenses, section):
        expense = UtilityExpenseService(expenses).record_water(section, '250')
        assert expense.category == ExpenseCategory.WATER
        assert expense.amount == Decimal('2500.00')
        assert expense.unit_cost == Decimal('10')

    def test_electricity_needs_active_period(self, expenses, section, publisher):
        from sections.services import SectionService

        SectionService(publisher=publisher).unassign_period(section)
        section.refresh_from_db()
        with pytest.raises(InvalidState) as exc_info:
            UtilityExpenseService(expenses).record_electricity(section, '12')
        assert exc_info.value.reason == Reason.NO_ACTIVE_PERIOD


# =============================================================================
# API
# =============================================================================

class TestExpenseAPI:

    def test_manager_posts_expense(self, manager_client, period, section):
        response = manager_client.post(reverse('expenses:expense-list'), {
            'period': str(period.id),
            'section': str(section.id),
            'category': ExpenseCategory.MEDICINE,
            'amount': '125000.00',
            'description': 'Vitamins',
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['category'] == ExpenseCategory.MEDICINE
        assert PeriodExpense.objects.filter(section=section).count() == 1

    def test_worker_cannot_post_expense(self, worker_client, period):
        response = worker_client.post(reverse('expenses:expense-list'), {
            'period': str(period.id),
            'category': ExpenseCategory.OTHER,
            'amount': '10.00',
        }, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_list_filters_by_category(self, worker_client, period, expenses):
        expenses.add_expense(period, ExpenseCategory.FEED, 100)
        expenses.add_expense(period, ExpenseCategory.OTHER, 200)

        response = worker_client.get(
            reverse('expenses:expense-list'), {'period': str(period.id), 'category': 'FEED'}
        )
        assert response.status_code == status.HTTP_200_OK
        results = response.data['results'] if isinstance(response.data, dict) else response.data
        assert [row['category'] for row in results] == ['FEED']

    def test_closed_period_returns_conflict(self, manager_client, period):
        period.status = PeriodStatus.CLOSED
        period.save(update_fields=['status'])
        response = manager_client.post(reverse('expenses:expense-list'), {
            'period': str(period.id),
            'category': ExpenseCategory.OTHER,
            'amount': '10.00',
        }, format='json')

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == Reason.PERIOD_CLOSED
