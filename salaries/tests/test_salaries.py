"""
Salary Ledger Tests

SCENARIO:
=========
Aziz earns 3,000,000 for the Spring period. He takes a 1,000,000 advance
mid-season and earns a 500,000 bonus for a clean batch. When the period
closes, the remaining 2,000,000 is posted as LABOR_FIXED.

Total LABOR_FIXED for the period: 1,000,000 + 500,000 + 2,000,000 = 3,500,000
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from core.exceptions import InvalidState, Reason, ValidationError
from expenses.models import ExpenseCategory, PeriodExpense
from expenses.services import PeriodExpenseService
from salaries.models import EmployeeSalary
from salaries.services import SalaryService

pytestmark = pytest.mark.django_db


@pytest.fixture
def salaries(publisher):
    return SalaryService(publisher=publisher)


@pytest.fixture
def salary(salaries, worker, period, section):
    return salaries.create_salary(worker, period, '3000000', section=section)


class TestSalaryRecords:

    def test_one_salary_per_employee_and_period(self, salaries, salary, worker, period):
        with pytest.raises(InvalidState) as exc_info:
            salaries.create_salary(worker, period, '1')
        assert exc_info.value.reason == Reason.DUPLICATE_SALARY

    def test_negative_salary_rejected(self, salaries, manager, period):
        with pytest.raises(ValidationError):
            salaries.create_salary(manager, period, '-1')


class TestPayments:

    def test_advance_posts_labor_expense(self, salaries, salary, worker, period, director):
        advance = salaries.give_advance(worker, period, '1000000', description='School fees', given_by=director)

        assert advance.expense.category == ExpenseCategory.LABOR_FIXED
        assert advance.expense.amount == Decimal('1000000')
        assert 'School fees' in advance.expense.description

    def test_bonus_needs_reason(self, salaries, salary, worker, period):
        with pytest.raises(ValidationError):
            salaries.give_bonus(worker, period, '500000', reason='')
        assert PeriodExpense.objects.count() == 0

    def test_employee_summary(self, salaries, salary, worker, period):
        salaries.give_advance(worker, period, '1000000')
        salaries.give_bonus(worker, period, '500000', reason='Clean batch')

        summary = salaries.get_employee_summary(worker, period)
        assert summary['base_salary'] == Decimal('3000000.00')
        assert summary['total_advances'] == Decimal('1000000.00')
        assert summary['total_bonuses'] == Decimal('500000.00')
        assert summary['remaining_salary'] == Decimal('2000000.00')

    def test_period_summary(self, salaries, salary, worker, manager, period):
        salaries.create_salary(manager, period, '5000000')
        salaries.give_advance(worker, period, '1000000')

        summary = salaries.get_period_summary(period)
        assert summary['total_salaries'] == Decimal('8000000.00')
        assert summary['total_liability'] == Decimal('7000000.00')


class TestFinalization:

    def test_remaining_salary_is_posted_once(self, salaries, salary, worker, period):
        salaries.give_advance(worker, period, '1000000')
        salaries.give_bonus(worker, period, '500000', reason='Clean batch')

        result = salaries.finalize_salary_expenses(period)
        assert result == {'count': 1, 'total_amount': Decimal('2000000.00')}

        labor = PeriodExpenseService().get_total_expenses(period, category=ExpenseCategory.LABOR_FIXED)
        assert labor == Decimal('3500000.00')

        again = salaries.finalize_salary_expenses(period)
        assert again['count'] == 0
        assert EmployeeSalary.objects.get(pk=salary.pk).finalized_at is not None

    def test_fully_advanced_salary_posts_nothing_more(self, salaries, salary, worker, period):
        salaries.give_advance(worker, period, '3000000')
        result = salaries.finalize_salary_expenses(period)
        assert result['count'] == 0
        assert PeriodExpense.objects.filter(category=ExpenseCategory.LABOR_FIXED).count() == 1


class TestSalaryAPI:

    def test_director_gives_advance(self, director_client, salary, worker, period):
        response = director_client.post(reverse('salaries:salary-advance'), {
            'employee': str(worker.id),
            'period': str(period.id),
            'amount': '250000.00',
        }, format='json')
        assert response.status_code == status.HTTP_201_CREATED

    def test_manager_cannot_give_advance(self, manager_client, worker, period):
        response = manager_client.post(reverse('salaries:salary-advance'), {
            'employee': str(worker.id),
            'period': str(period.id),
            'amount': '250000.00',
        }, format='json')
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_worker_sees_only_own_summary(self, worker_client, salary, worker, manager):
        own = worker_client.get(reverse('salaries:employee-summary', args=[worker.id]))
        other = worker_client.get(reverse('salaries:employee-summary', args=[manager.id]))

        assert own.status_code == status.HTTP_200_OK
        assert Decimal(own.data['base_salary']) == Decimal('3000000.00')
        assert other.status_code == status.HTTP_403_FORBIDDEN
