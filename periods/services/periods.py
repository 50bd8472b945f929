"""
Period Service

Creating and editing accounting periods. Closing lives in the accounting
app because it has to look at every other ledger first.
"""

from datetime import date
from typing import Optional
import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher
from periods.models import Period, PeriodStatus

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'start_date', 'notes')


class PeriodService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()

    @transaction.atomic
    def create_period(self, name: str, start_date: Optional[date] = None, created_by=None, notes: str = '') -> Period:
        name = (name or '').strip()
        if not name:
            raise ValidationError("Period name is required")

        period = Period.objects.create(
            name=name,
            start_date=start_date or timezone.localdate(),
            notes=notes or '',
            created_by=created_by,
        )
        logger.info(f"Period {period.name} created starting {period.start_date}")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'period_created', {
            'period_id': period.id,
            'name': period.name,
            'start_date': period.start_date,
        })
        return period

    @transaction.atomic
    def update_period(self, period, **changes) -> Period:
        """Edit name, start_date or notes of an ACTIVE period."""
        period = get_or_not_found(Period, period)
        period = Period.objects.select_for_update().get(pk=period.pk)
        if period.status != PeriodStatus.ACTIVE:
            raise InvalidState(
                f"Period {period.name} is closed and cannot be edited",
                reason=Reason.PERIOD_CLOSED,
                details={'period_id': str(period.id)},
            )

        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}",
                details={'fields': sorted(unknown)},
            )
        if 'name' in changes:
            changes['name'] = (changes['name'] or '').strip()
            if not changes['name']:
                raise ValidationError("Period name is required")

        for field, value in changes.items():
            setattr(period, field, value)
        if changes:
            period.save(update_fields=[*changes, 'updated_at'])
        return period

    @staticmethod
    def get_period(period) -> Period:
        return get_or_not_found(Period, period)

    @staticmethod
    def list_periods(status=None):
        queryset = Period.objects.all()
        if status:
            queryset = queryset.filter(status=status)
        return queryset.order_by('-start_date', '-created_at')
