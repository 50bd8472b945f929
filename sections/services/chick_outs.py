"""
ChickOut Two-Phase Service

Phase 1 (loading dock): ``create_chick_out`` records count and vehicle. The
batch counter and the day's balance move immediately; a final load closes
the batch and sends the section to CLEANING right away, even though the
sale is not yet priced.

Phase 2 (weighbridge / invoice): ``complete`` records weight, waste and
price and derives net weight and revenue. It is the only way financial
fields are ever written.
"""

from decimal import Decimal, ROUND_HALF_UP
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import get_event_publisher, section_topic, system_section_topic
from periods.models import PeriodStatus
from sections.models import (
    OPEN_BATCH_STATUSES, ChickOut, ChickOutStatus, Section,
)
from sections.services.batches import BatchService
from sections.services.daily_balance import DailyBalanceService
from sections.signals import chick_out_completed

logger = logging.getLogger(__name__)

WEIGHT_QUANT = Decimal('0.001')
MONEY_QUANT = Decimal('0.01')


def calculate_sale(total_weight_kg, waste_percent, price_per_kg):
    """
    Returns (net_weight_kg, total_revenue):

        net_weight_kg = total_weight_kg * (1 - waste_percent / 100)
        total_revenue = net_weight_kg * price_per_kg
    """
    net_weight = Decimal(total_weight_kg) * (Decimal('1') - Decimal(waste_percent) / Decimal('100'))
    revenue = net_weight * Decimal(price_per_kg)
    return (
        net_weight.quantize(WEIGHT_QUANT, rounding=ROUND_HALF_UP),
        revenue.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP),
    )


class ChickOutService:
    """Record chick-outs and finalize their sale."""

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.batches = BatchService(publisher=self.publisher)
        self.balances = DailyBalanceService()

    @transaction.atomic
    def create_chick_out(self, section, count, vehicle_number, machine_number='',
                         is_final=False, created_by=None, date=None):
        """
        Record chicks leaving a section.

        Returns:
            ChickOut instance (status INCOMPLETE)

        Raises:
            NotFound: section does not exist
            InvalidState: section has no open batch
            ValidationError: count below 1
        """
        section = get_or_not_found(Section, section)
        section = Section.objects.select_for_update().get(pk=section.pk)

        if count is None or int(count) < 1:
            raise ValidationError("count must be at least 1", details={'count': count})
        count = int(count)

        batch = section.active_batch
        if batch is None or batch.status not in OPEN_BATCH_STATUSES:
            raise InvalidState(
                f"Section {section.name} has no active batch",
                reason=Reason.NO_ACTIVE_BATCH,
                details={'section_id': str(section.id)},
            )

        date = date or timezone.now()
        chick_out = ChickOut.objects.create(
            section=section,
            batch=batch,
            date=date,
            count=count,
            vehicle_number=vehicle_number,
            machine_number=machine_number or '',
            is_final=bool(is_final),
            status=ChickOutStatus.INCOMPLETE,
            created_by=created_by,
        )

        self.batches.update_chicks_out(batch, count)
        self.balances.update_chick_out(batch, date, count)

        if is_final:
            self.batches.mark_closed(batch, ended_at=date)
        else:
            self.batches.mark_partial_out(batch)

        logger.info(
            f"Chick-out {chick_out.id}: {count} chicks from section {section.name} "
            f"(final={chick_out.is_final})"
        )
        payload = {
            'chick_out_id': chick_out.id,
            'section_id': section.id,
            'batch_id': batch.id,
            'count': count,
            'is_final': chick_out.is_final,
            'date': date,
        }
        self.publisher.publish(section_topic(section.id), 'chick_out_created', payload)
        self.publisher.publish(system_section_topic(section.id), 'chick_out_created', payload)
        return chick_out

    @transaction.atomic
    def complete(self, chick_out, total_weight_kg, waste_percent, price_per_kg, completed_by=None):
        """
        Finalize the sale of a chick-out.

        Raises:
            NotFound: chick-out does not exist
            InvalidState: already COMPLETE, or the batch's period is not ACTIVE
            ValidationError: waste outside [0, 100], negative weight or price
        """
        chick_out = get_or_not_found(ChickOut, chick_out)
        chick_out = (
            ChickOut.objects
            .select_for_update()
            .select_related('batch__period', 'section')
            .get(pk=chick_out.pk)
        )

        if chick_out.status == ChickOutStatus.COMPLETE:
            raise InvalidState(
                f"Chick-out {chick_out.id} is already complete",
                reason=Reason.ALREADY_COMPLETE,
                details={'chick_out_id': str(chick_out.id)},
            )

        period = chick_out.batch.period
        # Legacy batches without a period can still be settled
        if period is not None and period.status != PeriodStatus.ACTIVE:
            raise InvalidState(
                "Cannot complete a chick-out outside an active period",
                reason=Reason.PERIOD_CLOSED,
                details={
                    'chick_out_id': str(chick_out.id),
                    'period_id': str(period.id),
                },
            )

        total_weight_kg = self._decimal(total_weight_kg, 'total_weight_kg')
        waste_percent = self._decimal(waste_percent, 'waste_percent')
        price_per_kg = self._decimal(price_per_kg, 'price_per_kg')
        if waste_percent < 0 or waste_percent > 100:
            raise ValidationError(
                "waste_percent must be between 0 and 100",
                details={'waste_percent': str(waste_percent)},
            )
        if total_weight_kg < 0 or price_per_kg < 0:
            raise ValidationError(
                "total_weight_kg and price_per_kg cannot be negative",
                details={'total_weight_kg': str(total_weight_kg), 'price_per_kg': str(price_per_kg)},
            )

        net_weight, revenue = calculate_sale(total_weight_kg, waste_percent, price_per_kg)

        chick_out.total_weight_kg = total_weight_kg
        chick_out.waste_percent = waste_percent
        chick_out.price_per_kg = price_per_kg
        chick_out.net_weight_kg = net_weight
        chick_out.total_revenue = revenue
        chick_out.status = ChickOutStatus.COMPLETE
        chick_out.completed_at = timezone.now()
        chick_out.completed_by = completed_by
        chick_out.save()

        chick_out_completed.send(sender=ChickOut, chick_out=chick_out, actor=completed_by)

        logger.info(
            f"Chick-out {chick_out.id} completed: {net_weight} kg net, revenue {revenue}"
        )
        payload = {
            'chick_out_id': chick_out.id,
            'section_id': chick_out.section_id,
            'batch_id': chick_out.batch_id,
            'period_id': chick_out.batch.period_id,
            'net_weight_kg': net_weight,
            'total_revenue': revenue,
        }
        self.publisher.publish(section_topic(chick_out.section_id), 'chick_out_completed', payload)
        self.publisher.publish(system_section_topic(chick_out.section_id), 'chick_out_completed', payload)
        return chick_out

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def has_incomplete_chick_outs(batch):
        return ChickOut.objects.filter(batch=batch, status=ChickOutStatus.INCOMPLETE).exists()

    @staticmethod
    def count_incomplete_for_period(period):
        return ChickOut.objects.filter(
            batch__period=period,
            status=ChickOutStatus.INCOMPLETE,
        ).count()

    @staticmethod
    def _decimal(value, field):
        if value is None:
            raise ValidationError(f"{field} is required", details={field: None})
        try:
            return Decimal(str(value))
        except ArithmeticError:
            raise ValidationError(f"{field} must be a number", details={field: str(value)})
