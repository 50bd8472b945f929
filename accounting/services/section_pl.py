"""
Section Profit & Loss

    revenue  = COMPLETE chick-outs of the section's batches
    expenses = period expenses tagged to the section
    profit   = revenue - expenses

With a period, both sides are restricted to that period. Per-chick
metrics are None when their denominator is 0.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Optional
import logging

from django.db.models import Sum
from django.db.models.functions import Coalesce

from accounting.services import guards
from core.exceptions import InvalidState, get_or_not_found
from expenses.models import PeriodExpense
from expenses.services import money_sum
from periods.models import Period
from sections.models import Batch, ChickOut, ChickOutStatus, Section, SectionDailyReport

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def _per(numerator, denominator) -> Optional[Decimal]:
    if not denominator:
        return None
    return (Decimal(numerator) / Decimal(denominator)).quantize(CENT, rounding=ROUND_HALF_UP)


class SectionPLService:

    def get_section_pl(self, section, period=None) -> Dict[str, Any]:
        section = get_or_not_found(Section, section)
        if period is not None:
            period = get_or_not_found(Period, period)

        batches = Batch.objects.filter(section=section)
        expenses = PeriodExpense.objects.filter(section=section)
        if period is not None:
            batches = batches.filter(period=period)
            expenses = expenses.filter(period=period)

        guards.ensure_chick_outs_complete(batches)
        guards.ensure_incidents_resolved([section])

        sales = ChickOut.objects.filter(batch__in=batches, status=ChickOutStatus.COMPLETE).aggregate(
            revenue=money_sum('total_revenue'),
            sold=Coalesce(Sum('count'), 0),
        )
        total_expenses = expenses.aggregate(total=money_sum())['total']
        chicks_in = batches.aggregate(total=Coalesce(Sum('total_chicks_in'), 0))['total']
        dead = SectionDailyReport.objects.filter(batch__in=batches).aggregate(
            total=Coalesce(Sum('deaths'), 0)
        )['total']

        revenue = sales['revenue']
        sold = sales['sold']
        profit = revenue - total_expenses

        return {
            'section_id': section.id,
            'section_name': section.name,
            'period_id': period.id if period is not None else None,
            'total_revenue': revenue,
            'total_expenses': total_expenses,
            'profit': profit,
            'is_profitable': profit > 0,
            'metrics': {
                'cost_per_alive_chick': _per(total_expenses, chicks_in),
                'revenue_per_sold_chick': _per(revenue, sold),
                'profit_per_sold_chick': _per(profit, sold),
                'alive_chicks': max(0, chicks_in - sold - dead),
                'sold_chicks': sold,
                'dead_chicks': dead,
            },
        }

    def get_all_sections_pl(self, period) -> Dict[str, Any]:
        """
        P&L for every section that ran a batch in the period. A section
        whose P&L is blocked is reported under 'errors' instead.
        """
        period = get_or_not_found(Period, period)
        sections = (
            Section.objects
            .filter(batches__period=period)
            .order_by('name')
            .distinct()
        )

        results = []
        errors = []
        for section in sections:
            try:
                results.append(self.get_section_pl(section, period))
            except InvalidState as exc:
                logger.warning(f"Section {section.name} P&L blocked: {exc.reason}")
                errors.append({
                    'section_id': section.id,
                    'section_name': section.name,
                    **exc.as_dict(),
                })

        return {'period_id': period.id, 'sections': results, 'errors': errors}
