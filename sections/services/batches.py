"""
Batch Lifecycle Service

State machine:

    ACTIVE -> PARTIAL_OUT -> CLOSED
    ACTIVE ----------------> CLOSED

Creating a batch is one unit of work: batch row, section status and links,
and the day-one daily balance are written in a single transaction. The
guarded close (incomplete chick-outs, unsold batches, unresolved incidents)
lives in accounting.services.closing; this module only performs the state
change once those checks have passed.
"""

from datetime import timedelta
import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import get_event_publisher, section_topic, system_section_topic
from periods.models import Period, PeriodStatus
from sections.models import (
    OPEN_BATCH_STATUSES, Batch, BatchStatus, Section, SectionStatus,
)
from sections.services.daily_balance import DailyBalanceService

logger = logging.getLogger(__name__)

# Broiler cycle used when no expected end date is given
DEFAULT_GROW_OUT_DAYS = 42

BATCH_STATUS_TRANSITIONS = {
    BatchStatus.ACTIVE: [BatchStatus.PARTIAL_OUT, BatchStatus.CLOSED],
    BatchStatus.PARTIAL_OUT: [BatchStatus.CLOSED],
    BatchStatus.CLOSED: [],  # Terminal state
}


def validate_batch_transition(batch, new_status):
    if batch.status == new_status:
        return
    if new_status not in BATCH_STATUS_TRANSITIONS.get(batch.status, []):
        raise InvalidState(
            f"Invalid batch status transition: {batch.status} -> {new_status}",
            reason=Reason.BATCH_CLOSED if batch.status == BatchStatus.CLOSED else Reason.INVALID_TRANSITION,
            details={'batch_id': str(batch.id), 'status': batch.status},
        )


class BatchService:
    """Create batches and move them through their lifecycle."""

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.balances = DailyBalanceService()

    def get_open_batch(self, section):
        return Batch.objects.filter(section=section, status__in=OPEN_BATCH_STATUSES).first()

    @transaction.atomic
    def create_batch(self, section, total_chicks_in, expected_end_at=None, created_by=None,
                     name='', started_at=None):
        """
        Place a new cohort of chicks in a section.

        Args:
            section: Section instance or id
            total_chicks_in: Number of chicks placed
            expected_end_at: Planned end of the grow-out
            created_by: User placing the batch
            name: Optional batch label
            started_at: Arrival time, defaults to now

        Returns:
            Batch instance (status ACTIVE)

        Raises:
            NotFound: section does not exist
            InvalidState: section already has an open batch, or has no
                ACTIVE period
            ValidationError: negative chick count
        """
        section = get_or_not_found(Section, section)
        section = Section.objects.select_for_update().get(pk=section.pk)

        if total_chicks_in is None or int(total_chicks_in) < 0:
            raise ValidationError(
                "total_chicks_in must be zero or more",
                details={'total_chicks_in': total_chicks_in},
            )

        open_batch = self.get_open_batch(section)
        if open_batch:
            raise InvalidState(
                f"Section {section.name} already has an open batch",
                reason=Reason.OPEN_BATCH_EXISTS,
                details={'section_id': str(section.id), 'batch_id': str(open_batch.id)},
            )

        if section.active_period_id is None:
            raise InvalidState(
                f"Section {section.name} is not assigned to an active period",
                reason=Reason.NO_ACTIVE_PERIOD,
                details={'section_id': str(section.id)},
            )
        # Row lock serializes with period closing, which checks for open
        # batches under the same lock
        period = Period.objects.select_for_update().get(pk=section.active_period_id)
        if period.status != PeriodStatus.ACTIVE:
            raise InvalidState(
                f"Cannot create batch in closed period {period.name}",
                reason=Reason.PERIOD_CLOSED,
                details={'period_id': str(period.id)},
            )

        started_at = started_at or timezone.now()
        expected_end_at = expected_end_at or started_at + timedelta(days=DEFAULT_GROW_OUT_DAYS)
        previous_status = section.status

        try:
            with transaction.atomic():
                batch = Batch.objects.create(
                    name=name or f"{section.name} {started_at:%Y-%m-%d}",
                    section=section,
                    period=period,
                    started_at=started_at,
                    expected_end_at=expected_end_at,
                    total_chicks_in=int(total_chicks_in),
                    status=BatchStatus.ACTIVE,
                    created_by=created_by,
                )
        except IntegrityError:
            raise InvalidState(
                f"Section {section.name} already has an open batch",
                reason=Reason.OPEN_BATCH_EXISTS,
                details={'section_id': str(section.id)},
            )

        section.status = SectionStatus.ACTIVE
        section.active_batch = batch
        section.chick_arrival_date = started_at
        section.expected_end_date = expected_end_at
        section.closed_at = None
        section.save(update_fields=[
            'status', 'active_batch', 'chick_arrival_date',
            'expected_end_date', 'closed_at', 'updated_at',
        ])

        self.balances.get_or_create_for_date(batch, started_at)

        logger.info(
            f"Batch {batch.id} started in section {section.name} "
            f"with {batch.total_chicks_in} chicks (period {period.name})"
        )
        payload = {
            'batch_id': batch.id,
            'section_id': section.id,
            'period_id': period.id,
            'total_chicks_in': batch.total_chicks_in,
            'started_at': started_at,
        }
        self.publisher.publish(section_topic(section.id), 'batch_started', payload)
        self.publisher.publish(system_section_topic(section.id), 'batch_started', payload)
        self._announce_section_status(section, previous_status)
        return batch

    def update_chicks_out(self, batch, count):
        """Atomic increment of the operational chick-out counter."""
        Batch.objects.filter(pk=batch.pk).update(
            total_chicks_out=F('total_chicks_out') + int(count),
            updated_at=timezone.now(),
        )
        batch.refresh_from_db(fields=['total_chicks_out', 'updated_at'])
        return batch

    @transaction.atomic
    def mark_partial_out(self, batch):
        if batch.status == BatchStatus.ACTIVE:
            validate_batch_transition(batch, BatchStatus.PARTIAL_OUT)
            batch.status = BatchStatus.PARTIAL_OUT
            batch.save(update_fields=['status', 'updated_at'])

        section = Section.objects.select_for_update().get(pk=batch.section_id)
        if section.status != SectionStatus.PARTIAL_OUT:
            previous_status = section.status
            section.status = SectionStatus.PARTIAL_OUT
            section.save(update_fields=['status', 'updated_at'])
            self._announce_section_status(section, previous_status)
        return batch

    @transaction.atomic
    def mark_closed(self, batch, ended_at=None):
        """
        Close a batch and send its section to CLEANING. Callers are
        responsible for any closing guards.
        """
        batch = Batch.objects.select_for_update().get(pk=batch.pk)
        validate_batch_transition(batch, BatchStatus.CLOSED)

        ended_at = ended_at or timezone.now()
        batch.status = BatchStatus.CLOSED
        batch.ended_at = ended_at
        batch.save(update_fields=['status', 'ended_at', 'updated_at'])

        section = Section.objects.select_for_update().get(pk=batch.section_id)
        previous_status = section.status
        section.status = SectionStatus.CLEANING
        if section.active_batch_id == batch.id:
            section.active_batch = None
        section.closed_at = ended_at
        section.save(update_fields=['status', 'active_batch', 'closed_at', 'updated_at'])

        logger.info(f"Batch {batch.id} closed in section {section.name}")
        payload = {
            'batch_id': batch.id,
            'section_id': section.id,
            'ended_at': ended_at,
            'total_chicks_in': batch.total_chicks_in,
            'total_chicks_out': batch.total_chicks_out,
        }
        self.publisher.publish(section_topic(section.id), 'batch_closed', payload)
        self.publisher.publish(system_section_topic(section.id), 'batch_closed', payload)
        self._announce_section_status(section, previous_status)
        return batch

    def _announce_section_status(self, section, previous_status):
        if previous_status == section.status:
            return
        payload = {
            'section_id': section.id,
            'previous_status': previous_status,
            'status': section.status,
        }
        self.publisher.publish(section_topic(section.id), 'section_status_changed', payload)
        self.publisher.publish(system_section_topic(section.id), 'section_status_changed', payload)
