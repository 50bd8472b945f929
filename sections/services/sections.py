"""
Section Service

Sections are linked to at most one active period at a time and never
become ACTIVE without one. Day-to-day status is driven by batch and
chick-out transitions; managers only move a cleaned section back to
EMPTY or PREPARING.
"""

import logging

from django.db import transaction

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import get_event_publisher, section_topic, system_section_topic
from periods.models import Period, PeriodStatus
from sections.models import OPEN_BATCH_STATUSES, Batch, Section, SectionStatus

logger = logging.getLogger(__name__)


class SectionService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()

    def create_section(self, name, assigned_workers=None):
        if not name or not name.strip():
            raise ValidationError("Section name is required")
        section = Section.objects.create(name=name.strip())
        if assigned_workers:
            section.assigned_workers.set(assigned_workers)
        logger.info(f"Section created: {section.name}")
        return section

    @transaction.atomic
    def assign_period(self, section, period):
        """Link a section to an ACTIVE period."""
        section = get_or_not_found(Section, section)
        period = get_or_not_found(Period, period)

        if period.status != PeriodStatus.ACTIVE:
            raise InvalidState(
                f"Cannot assign section to closed period {period.name}",
                reason=Reason.PERIOD_CLOSED,
                details={'period_id': str(period.id)},
            )

        section.active_period = period
        section.save(update_fields=['active_period', 'updated_at'])
        section.periods.add(period)

        logger.info(f"Section {section.name} assigned to period {period.name}")
        self._announce_update(section, {'active_period_id': period.id})
        return section

    @transaction.atomic
    def unassign_period(self, section):
        section = get_or_not_found(Section, section)
        if Batch.objects.filter(section=section, status__in=OPEN_BATCH_STATUSES).exists():
            raise InvalidState(
                f"Section {section.name} still has an open batch",
                reason=Reason.OPEN_BATCH_EXISTS,
                details={'section_id': str(section.id)},
            )
        section.active_period = None
        section.save(update_fields=['active_period', 'updated_at'])
        self._announce_update(section, {'active_period_id': None})
        return section

    @transaction.atomic
    def update_section(self, section, name=None, status=None, is_archived=None):
        """
        Rename, archive or move a section's status by hand.

        Raises:
            InvalidState: ACTIVE without an ACTIVE period, or leaving an
                operational status while a batch is still open
        """
        section = get_or_not_found(Section, section)
        section = Section.objects.select_for_update().select_related('active_period').get(pk=section.pk)
        changes = {}
        previous_status = section.status

        if status is not None and status != section.status:
            if status not in SectionStatus.values:
                raise ValidationError(f"Unknown section status: {status}", details={'status': status})
            if status == SectionStatus.ACTIVE and (
                section.active_period is None or section.active_period.status != PeriodStatus.ACTIVE
            ):
                raise InvalidState(
                    "A section can only be ACTIVE inside an active period",
                    reason=Reason.NO_ACTIVE_PERIOD,
                    details={'section_id': str(section.id)},
                )
            has_open_batch = Batch.objects.filter(
                section=section, status__in=OPEN_BATCH_STATUSES
            ).exists()
            if has_open_batch and status not in (SectionStatus.ACTIVE, SectionStatus.PARTIAL_OUT):
                raise InvalidState(
                    f"Section {section.name} still has an open batch",
                    reason=Reason.OPEN_BATCH_EXISTS,
                    details={'section_id': str(section.id)},
                )
            section.status = status
            changes['status'] = status

        if name is not None and name.strip() and name.strip() != section.name:
            section.name = name.strip()
            changes['name'] = section.name

        if is_archived is not None and is_archived != section.is_archived:
            section.is_archived = is_archived
            changes['is_archived'] = is_archived

        if not changes:
            return section

        section.save()
        self._announce_update(section, changes)
        if 'status' in changes:
            payload = {
                'section_id': section.id,
                'previous_status': previous_status,
                'status': section.status,
            }
            self.publisher.publish(system_section_topic(section.id), 'section_status_changed', payload)
        return section

    def _announce_update(self, section, changes):
        payload = {'section_id': section.id, 'changes': changes}
        self.publisher.publish(section_topic(section.id), 'section_updated', payload)
        self.publisher.publish(system_section_topic(section.id), 'section_updated', payload)
