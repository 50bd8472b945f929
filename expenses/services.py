"""
Expense Services

The period expense ledger is a deliberately permissive sink: it checks
that the period is still open and that the line item is well formed, and
leaves the meaning of each cost to the workflow that posts it (feed
delivery, salary, repair, utility usage).

All totals are computed with a single grouped SUM in the database.
"""

from decimal import Decimal
from datetime import date, datetime
from typing import Dict, Optional
import logging

from django.conf import settings
from django.db import models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher, system_section_topic
from expenses.models import ExpenseCategory, ExpenseSource, PeriodExpense
from periods.models import Period, PeriodStatus

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


def money_sum(field='amount'):
    return Coalesce(
        Sum(field),
        models.Value(ZERO),
        output_field=models.DecimalField(max_digits=18, decimal_places=2),
    )


class PeriodExpenseService:
    """Append expenses to a period and total them."""

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()

    @transaction.atomic
    def add_expense(
        self,
        period,
        category: str,
        amount,
        description: str = '',
        expense_date: Optional[date] = None,
        section=None,
        batch=None,
        quantity=None,
        unit_cost=None,
        source: str = ExpenseSource.MANUAL,
        daily_report=None,
        incident=None,
        asset=None,
        created_by=None,
        event: str = 'expense_created',
    ) -> PeriodExpense:
        """
        Append one expense to a period.

        Args:
            period: Period instance or id
            category: ExpenseCategory value
            amount: Positive amount
            expense_date: Defaults to today; may not precede the period start
            event: Realtime event kind announced after commit

        Raises:
            NotFound: period does not exist
            InvalidState: period is CLOSED
            ValidationError: unknown category, amount <= 0, or date before
                the period start
        """
        period = get_or_not_found(Period, period)
        period = Period.objects.select_for_update().get(pk=period.pk)

        if period.status == PeriodStatus.CLOSED:
            raise InvalidState(
                f"Cannot add expense to closed period {period.name}",
                reason=Reason.PERIOD_CLOSED,
                details={'period_id': str(period.id)},
            )
        if category not in ExpenseCategory.values:
            raise ValidationError(f"Unknown expense category: {category}", details={'category': category})

        try:
            amount = Decimal(str(amount))
        except ArithmeticError:
            raise ValidationError("amount must be a number", details={'amount': str(amount)})
        if amount <= 0:
            raise ValidationError("amount must be greater than zero", details={'amount': str(amount)})

        expense_date = expense_date or timezone.localdate()
        if isinstance(expense_date, datetime):
            expense_date = expense_date.date()
        if expense_date < period.start_date:
            raise ValidationError(
                "Expense date cannot be before the period start",
                details={'expense_date': expense_date.isoformat(), 'start_date': period.start_date.isoformat()},
            )

        expense = PeriodExpense.objects.create(
            period=period,
            category=category,
            amount=amount,
            description=description or '',
            expense_date=expense_date,
            section=section,
            batch=batch,
            quantity=quantity,
            unit_cost=unit_cost,
            source=source,
            daily_report=daily_report,
            incident=incident,
            asset=asset,
            created_by=created_by,
        )

        logger.info(f"Expense posted to {period.name}: {category} {amount}")
        payload = {
            'expense_id': expense.id,
            'period_id': period.id,
            'section_id': expense.section_id,
            'category': category,
            'amount': amount,
            'source': source,
        }
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, event, payload)
        if expense.section_id:
            self.publisher.publish(system_section_topic(expense.section_id), event, payload)
        return expense

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @staticmethod
    def _filtered(period, section=None, category=None):
        queryset = PeriodExpense.objects.filter(period=period)
        if section is not None:
            queryset = queryset.filter(section=section)
        if category is not None:
            queryset = queryset.filter(category=category)
        return queryset

    def get_expenses_by_period(self, period, section=None, category=None):
        return self._filtered(period, section, category).order_by('-expense_date', '-created_at')

    def get_total_expenses(self, period, section=None, category=None) -> Decimal:
        return self._filtered(period, section, category).aggregate(total=money_sum())['total']

    def get_total_by_category(self, period, section=None) -> Dict[str, Decimal]:
        rows = (
            self._filtered(period, section)
            .values('category')
            .annotate(total=money_sum())
            .order_by('category')
        )
        return {row['category']: row['total'] for row in rows}

    def get_total_by_section(self, period) -> Dict[Optional[str], Decimal]:
        rows = (
            self._filtered(period)
            .values('section')
            .annotate(total=money_sum())
            .order_by('section')
        )
        return {row['section']: row['total'] for row in rows}


class UtilityExpenseService:
    """
    Turns metered water and electricity usage into expenses at the
    configured tariffs.
    """

    def __init__(self, expenses: Optional[PeriodExpenseService] = None):
        self.expenses = expenses or PeriodExpenseService()

    @property
    def water_tariff(self) -> Decimal:
        return Decimal(str(settings.WATER_TARIFF_PER_LITRE))

    @property
    def electricity_tariff(self) -> Decimal:
        return Decimal(str(settings.ELECTRICITY_TARIFF_PER_KWH))

    def record_water(self, section, litres, expense_date=None, daily_report=None, created_by=None):
        return self._record(
            section, ExpenseCategory.WATER, litres, self.water_tariff, 'litres',
            expense_date, daily_report, created_by,
        )

    def record_electricity(self, section, kwh, expense_date=None, daily_report=None, created_by=None):
        return self._record(
            section, ExpenseCategory.ELECTRICITY, kwh, self.electricity_tariff, 'kWh',
            expense_date, daily_report, created_by,
        )

    @transaction.atomic
    def record_report_utilities(self, report, created_by=None):
        """Post the water and electricity readings carried by a daily report."""
        section = report.batch.section
        posted = []
        if report.water_litres:
            posted.append(self.record_water(
                section, report.water_litres, report.date, report, created_by
            ))
        if report.electricity_kwh:
            posted.append(self.record_electricity(
                section, report.electricity_kwh, report.date, report, created_by
            ))
        return posted

    def _record(self, section, category, quantity, tariff, unit, expense_date, daily_report, created_by):
        quantity = Decimal(str(quantity))
        if quantity <= 0:
            raise ValidationError(f"{unit} must be greater than zero", details={'quantity': str(quantity)})

        period = section.active_period
        if period is None:
            raise InvalidState(
                f"Section {section.name} is not assigned to an active period",
                reason=Reason.NO_ACTIVE_PERIOD,
                details={'section_id': str(section.id)},
            )

        return self.expenses.add_expense(
            period=period,
            category=category,
            amount=quantity * tariff,
            description=f"{quantity} {unit} @ {tariff}",
            expense_date=expense_date,
            section=section,
            batch=section.active_batch,
            quantity=quantity,
            unit_cost=tariff,
            source=ExpenseSource.DAILY_REPORT,
            daily_report=daily_report,
            created_by=created_by,
            event='utility_cost_recorded',
        )
