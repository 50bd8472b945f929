"""
Period KPI Service

    profit_margin_percent = profit / total_revenue x 100
    cost_per_chick        = total_expenses / total_chicks_in
    revenue_per_chick     = total_revenue / final_chicks_out
    profit_per_chick      = profit / final_chicks_out

A zero denominator yields 0. final_chicks_out counts COMPLETE chick-outs
only, unlike Batch.total_chicks_out which counts every chick that left.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict

from django.db.models import Sum
from django.db.models.functions import Coalesce

from accounting.services.profit_loss import ProfitLossService
from core.exceptions import get_or_not_found
from periods.models import Period
from sections.models import Batch, ChickOut, ChickOutStatus

CENT = Decimal('0.01')


def safe_divide(numerator, denominator) -> Decimal:
    """numerator / denominator to 2 dp, or 0 when the denominator is 0."""
    if not denominator:
        return Decimal('0.00')
    return (Decimal(numerator) / Decimal(denominator)).quantize(CENT, rounding=ROUND_HALF_UP)


class KPIService:

    def __init__(self, profit_loss=None):
        self.profit_loss = profit_loss or ProfitLossService()

    def get_period_kpi(self, period) -> Dict[str, Any]:
        period = get_or_not_found(Period, period)
        pl = self.profit_loss.get_period_pl(period)

        total_chicks_in = Batch.objects.filter(period=period).aggregate(
            total=Coalesce(Sum('total_chicks_in'), 0)
        )['total']
        final_chicks_out = ChickOut.objects.filter(
            batch__period=period,
            status=ChickOutStatus.COMPLETE,
        ).aggregate(total=Coalesce(Sum('count'), 0))['total']

        revenue = pl['total_revenue']
        expenses = pl['total_expenses']
        profit = pl['profit']

        return {
            'period_id': period.id,
            'totals': {
                'total_chicks_in': total_chicks_in,
                'final_chicks_out': final_chicks_out,
                'total_revenue': revenue,
                'total_expenses': expenses,
                'profit': profit,
            },
            'kpis': {
                'profit_margin_percent': safe_divide(profit * 100, revenue),
                'cost_per_chick': safe_divide(expenses, total_chicks_in),
                'revenue_per_chick': safe_divide(revenue, final_chicks_out),
                'profit_per_chick': safe_divide(profit, final_chicks_out),
            },
        }
