"""
Batch Summary Service

Read-only views over the daily balance ledger: the running (or final)
totals of a batch, its day-by-day timeline, and a cross-check of the
ledger against the chick-out records it is supposed to mirror.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List

from django.db.models import Count, Sum
from django.db.models.functions import Coalesce

from core.exceptions import get_or_not_found
from sections.models import Batch, BatchStatus, ChickOut, DailyBalance, Section


class BatchSummaryService:

    def get_batch_summary(self, batch) -> Dict[str, Any]:
        """
        Totals for a batch. Final when the batch is CLOSED, current
        otherwise.

        Returns:
            Dictionary with:
                - start_chick_count: chicks placed
                - total_deaths / total_chick_out: sums over daily balances
                - total_days: number of daily balance rows
                - final_chick_count: latest end-of-day count (or chicks placed)
                - average_daily_mortality: total_deaths / total_days, 2 dp
                - status, start_date, end_date, is_final
        """
        batch = get_or_not_found(Batch, batch)
        totals = DailyBalance.objects.filter(batch=batch).aggregate(
            total_deaths=Coalesce(Sum('deaths'), 0),
            total_chick_out=Coalesce(Sum('chick_out'), 0),
            total_days=Count('id'),
        )
        latest = DailyBalance.objects.filter(batch=batch).order_by('-date').first()
        final_count = latest.end_of_day_chicks if latest else batch.total_chicks_in

        total_days = totals['total_days']
        if total_days:
            average = (Decimal(totals['total_deaths']) / Decimal(total_days)).quantize(
                Decimal('0.01'), rounding=ROUND_HALF_UP
            )
        else:
            average = Decimal('0.00')

        return {
            'batch_id': batch.id,
            'section_id': batch.section_id,
            'section_name': batch.section.name,
            'start_chick_count': batch.total_chicks_in,
            'total_deaths': totals['total_deaths'],
            'total_chick_out': totals['total_chick_out'],
            'total_days': total_days,
            'final_chick_count': final_count,
            'average_daily_mortality': average,
            'status': batch.status,
            'start_date': batch.started_at,
            'end_date': batch.ended_at,
            'is_final': batch.status == BatchStatus.CLOSED,
        }

    def get_batch_timeline(self, batch) -> List[Dict[str, Any]]:
        batch = get_or_not_found(Batch, batch)
        balances = DailyBalance.objects.filter(batch=batch).order_by('date')
        return [
            {
                'date': balance.date,
                'day_number': index,
                'start_of_day_chicks': balance.start_of_day_chicks,
                'deaths': balance.deaths,
                'chick_out': balance.chick_out,
                'end_of_day_chicks': balance.end_of_day_chicks,
            }
            for index, balance in enumerate(balances, start=1)
        ]

    def get_batch_summaries_by_section(self, section) -> List[Dict[str, Any]]:
        section = get_or_not_found(Section, section)
        batches = Batch.objects.filter(section=section).order_by('-started_at')
        return [self.get_batch_summary(batch) for batch in batches]

    def verify_totals(self, batch) -> Dict[str, Any]:
        """
        Compare chick-outs recorded in the daily balance ledger with the
        chick-out records themselves.
        """
        batch = get_or_not_found(Batch, batch)
        ledger_total = DailyBalance.objects.filter(batch=batch).aggregate(
            total=Coalesce(Sum('chick_out'), 0)
        )['total']
        chick_out_total = ChickOut.objects.filter(batch=batch).aggregate(
            total=Coalesce(Sum('count'), 0)
        )['total']
        discrepancy = abs(ledger_total - chick_out_total)
        return {
            'is_valid': discrepancy == 0,
            'daily_balance_total': ledger_total,
            'chick_out_total': chick_out_total,
            'discrepancy': discrepancy,
        }
