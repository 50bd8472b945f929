"""
Salary Service

    remaining salary = base salary - advances

Bonuses are a separate reward: they are expensed when given and never
reduce what is still owed.
"""

from decimal import Decimal
from typing import Any, Dict
import logging

from django.db import IntegrityError, models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService
from periods.models import Period
from salaries.models import EmployeeSalary, SalaryAdvance, SalaryBonus

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def _total(queryset):
    return queryset.aggregate(
        total=Coalesce(
            Sum('amount'),
            models.Value(ZERO),
            output_field=models.DecimalField(max_digits=18, decimal_places=2),
        )
    )['total']


def _positive_amount(amount):
    amount = Decimal(str(amount))
    if amount <= 0:
        raise ValidationError("Amount must be greater than zero", details={'amount': str(amount)})
    return amount


def _employee_name(employee):
    return employee.get_full_name() or employee.username


class SalaryService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.expenses = PeriodExpenseService(publisher=self.publisher)

    def create_salary(self, employee, period, base_salary, section=None):
        period = get_or_not_found(Period, period)
        base_salary = Decimal(str(base_salary))
        if base_salary < 0:
            raise ValidationError("base_salary cannot be negative")
        if EmployeeSalary.objects.filter(employee=employee, period=period).exists():
            raise InvalidState(
                "Salary already exists for this employee in this period",
                reason=Reason.DUPLICATE_SALARY,
                details={'employee_id': str(employee.pk), 'period_id': str(period.id)},
            )
        try:
            with transaction.atomic():
                return EmployeeSalary.objects.create(
                    employee=employee, period=period, base_salary=base_salary, section=section,
                )
        except IntegrityError:
            raise InvalidState(
                "Salary already exists for this employee in this period",
                reason=Reason.DUPLICATE_SALARY,
            )

    @transaction.atomic
    def give_advance(self, employee, period, amount, description='', section=None, given_by=None):
        """Pay part of the salary early. Posts LABOR_FIXED immediately."""
        amount = _positive_amount(amount)
        text = f"Advance: {_employee_name(employee)}"
        if description:
            text = f"{text} - {description}"
        expense = self.expenses.add_expense(
            period=period,
            category=ExpenseCategory.LABOR_FIXED,
            amount=amount,
            description=text,
            section=section,
            created_by=given_by,
        )
        advance = SalaryAdvance.objects.create(
            employee=employee,
            period=expense.period,
            section=section,
            amount=amount,
            description=description or '',
            expense=expense,
            given_by=given_by,
        )
        logger.info(f"Salary advance {amount} given to {employee.username}")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'salary_advance_given', {
            'employee_id': employee.pk,
            'period_id': expense.period_id,
            'amount': amount,
        })
        return advance

    @transaction.atomic
    def give_bonus(self, employee, period, amount, reason, section=None, given_by=None):
        amount = _positive_amount(amount)
        if not reason:
            raise ValidationError("A bonus needs a reason")
        expense = self.expenses.add_expense(
            period=period,
            category=ExpenseCategory.LABOR_FIXED,
            amount=amount,
            description=f"Bonus: {_employee_name(employee)} - {reason}",
            section=section,
            created_by=given_by,
        )
        bonus = SalaryBonus.objects.create(
            employee=employee,
            period=expense.period,
            section=section,
            amount=amount,
            reason=reason,
            expense=expense,
            given_by=given_by,
        )
        logger.info(f"Salary bonus {amount} given to {employee.username}")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'salary_bonus_given', {
            'employee_id': employee.pk,
            'period_id': expense.period_id,
            'amount': amount,
        })
        return bonus

    def get_employee_summary(self, employee, period=None) -> Dict[str, Any]:
        filters = {'employee': employee}
        if period is not None:
            filters['period'] = period
        base = EmployeeSalary.objects.filter(**filters).aggregate(
            total=Coalesce(
                Sum('base_salary'),
                models.Value(ZERO),
                output_field=models.DecimalField(max_digits=18, decimal_places=2),
            )
        )['total']
        advances = _total(SalaryAdvance.objects.filter(**filters))
        bonuses = _total(SalaryBonus.objects.filter(**filters))
        return {
            'employee_id': employee.pk,
            'base_salary': base,
            'total_advances': advances,
            'total_bonuses': bonuses,
            'remaining_salary': base - advances,
        }

    def get_period_summary(self, period) -> Dict[str, Any]:
        period = get_or_not_found(Period, period)
        salaries = EmployeeSalary.objects.filter(period=period).aggregate(
            total=Coalesce(
                Sum('base_salary'),
                models.Value(ZERO),
                output_field=models.DecimalField(max_digits=18, decimal_places=2),
            )
        )['total']
        advances = _total(SalaryAdvance.objects.filter(period=period))
        bonuses = _total(SalaryBonus.objects.filter(period=period))
        return {
            'period_id': period.id,
            'total_salaries': salaries,
            'total_advances': advances,
            'total_bonuses': bonuses,
            'total_liability': salaries - advances,
        }

    @transaction.atomic
    def finalize_salary_expenses(self, period, finalized_by=None) -> Dict[str, Any]:
        """
        Post every employee's remaining salary (base - advances) as
        LABOR_FIXED. Runs while the period is still ACTIVE, just before it
        closes. Salaries already finalized are skipped.

        Returns:
            {'count': expenses posted, 'total_amount': sum posted}
        """
        period = get_or_not_found(Period, period)
        count = 0
        total_amount = ZERO

        salaries = (
            EmployeeSalary.objects
            .select_for_update()
            .select_related('employee')
            .filter(period=period, finalized_at__isnull=True)
        )
        for salary in salaries:
            advances = _total(SalaryAdvance.objects.filter(employee=salary.employee, period=period))
            remaining = salary.base_salary - advances
            if remaining > 0:
                self.expenses.add_expense(
                    period=period,
                    category=ExpenseCategory.LABOR_FIXED,
                    amount=remaining,
                    description=f"Salary (final): {_employee_name(salary.employee)}",
                    section=salary.section,
                    created_by=finalized_by,
                )
                count += 1
                total_amount += remaining
            salary.finalized_at = timezone.now()
            salary.save(update_fields=['finalized_at', 'updated_at'])

        logger.info(f"Salary expenses finalized for {period.name}: {count} posted, {total_amount} total")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'salary_expense_finalized', {
            'period_id': period.id,
            'count': count,
            'total_amount': total_amount,
        })
        return {'count': count, 'total_amount': total_amount}
