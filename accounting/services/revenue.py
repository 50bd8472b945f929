"""
Period revenue.

Revenue exists only once a chick-out is COMPLETE; an INCOMPLETE
chick-out contributes nothing.
"""

from typing import Any, Dict

from django.db.models import Count

from core.exceptions import get_or_not_found
from expenses.services import money_sum
from periods.models import Period
from sections.models import ChickOut, ChickOutStatus


class RevenueService:

    def get_revenue_aggregation(self, period) -> Dict[str, Any]:
        period = get_or_not_found(Period, period)
        totals = ChickOut.objects.filter(
            batch__period=period,
            status=ChickOutStatus.COMPLETE,
        ).aggregate(
            total_revenue=money_sum('total_revenue'),
            completed_chick_outs=Count('id'),
            batches_with_revenue=Count('batch', distinct=True),
        )
        return {
            'period_id': period.id,
            'total_revenue': totals['total_revenue'],
            'completed_chick_out_count': totals['completed_chick_outs'],
            'batch_count_with_revenue': totals['batches_with_revenue'],
        }

    def get_period_revenue(self, period):
        return self.get_revenue_aggregation(period)['total_revenue']
