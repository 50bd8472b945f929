"""
Batch and period closing.

Closing is where the ledgers must agree. A batch closes only when every
sale is priced and the section owes no repair expense; a period closes
only when all of its batches have closed, then posts the remaining
salaries and becomes read-only for expenses.
"""

from typing import Any, Dict
import logging

from django.db import transaction
from django.utils import timezone

from accounting.services import guards
from core.exceptions import InvalidState, Reason, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher
from periods.models import Period, PeriodStatus
from salaries.services import SalaryService
from sections.models import Batch, BatchStatus
from sections.services import BatchService

logger = logging.getLogger(__name__)


class BatchClosingService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.batches = BatchService(publisher=self.publisher)

    @transaction.atomic
    def close_batch(self, batch, ended_at=None):
        """
        Close a batch after checking, in order:
            1. no INCOMPLETE chick-out
            2. at least one COMPLETE chick-out when chicks were placed
            3. no unresolved cost-bearing incident in the section

        Raises:
            InvalidState: batch already closed, or a guard failed
        """
        batch = get_or_not_found(Batch, batch)
        batch = Batch.objects.select_for_update().select_related('section').get(pk=batch.pk)
        if batch.status == BatchStatus.CLOSED:
            raise InvalidState(
                f"Batch {batch} is already closed",
                reason=Reason.BATCH_CLOSED,
                details={'batch_id': str(batch.id)},
            )

        try:
            guards.ensure_chick_outs_complete([batch])
            guards.ensure_has_completed_sale(batch)
            guards.ensure_incidents_resolved([batch.section])
        except InvalidState as exc:
            logger.warning(f"Batch {batch.id} close blocked: {exc.reason}")
            raise

        return self.batches.mark_closed(batch, ended_at=ended_at)


class PeriodClosingService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.salaries = SalaryService(publisher=self.publisher)

    @transaction.atomic
    def close_period(self, period, closed_by=None) -> Period:
        """
        Close a period after checking, in order:
            1. every batch of the period is CLOSED
            2. no INCOMPLETE chick-out
            3. no unresolved cost-bearing incident in its sections

        Remaining salaries are posted as LABOR_FIXED before the period
        flips to CLOSED.
        """
        period = get_or_not_found(Period, period)
        period = Period.objects.select_for_update().get(pk=period.pk)
        if period.status == PeriodStatus.CLOSED:
            raise InvalidState(
                f"Period {period.name} is already closed",
                reason=Reason.ALREADY_CLOSED,
                details={'period_id': str(period.id)},
            )

        try:
            guards.ensure_no_open_batches(period)
            guards.ensure_chick_outs_complete(Batch.objects.filter(period=period))
            guards.ensure_incidents_resolved(guards.assigned_sections(period))
        except InvalidState as exc:
            logger.warning(f"Period {period.name} close blocked: {exc.reason} {exc.details}")
            raise

        salaries = self.salaries.finalize_salary_expenses(period, finalized_by=closed_by)

        now = timezone.now()
        period.status = PeriodStatus.CLOSED
        period.end_date = timezone.localdate(now)
        period.closed_at = now
        period.closed_by = closed_by
        period.save(update_fields=['status', 'end_date', 'closed_at', 'closed_by', 'updated_at'])

        logger.info(f"Period {period.name} closed; {salaries['count']} salary expense(s) posted")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'period_closed', {
            'period_id': period.id,
            'name': period.name,
            'end_date': period.end_date,
            'salary_expenses': salaries,
        })
        return period

    @staticmethod
    def has_unfinished_operations(period) -> Dict[str, Any]:
        period = get_or_not_found(Period, period)
        blockers = guards.count_blockers(period)
        return {
            'has_unfinished': any(blockers.values()),
            **blockers,
        }
