"""
Daily Balance Ledger

One snapshot per batch per UTC calendar day:

    start_of_day_chicks  = previous day's end_of_day_chicks
                           (or the batch's total_chicks_in on the first day)
    end_of_day_chicks    = max(0, start - deaths - chick_out)

Deaths and chick-outs accumulate. Every write is a single UPDATE with F()
expressions so concurrent reports for the same day never lose an increment.
"""

from datetime import date, datetime, timezone as dt_timezone
import logging

from django.db import IntegrityError, models, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from sections.models import Batch, BatchStatus, DailyBalance, SectionStatus

logger = logging.getLogger(__name__)


def normalize_day(value=None):
    """
    Reduce a date, datetime or ISO string to its UTC calendar day.
    """
    if value is None:
        return timezone.now().astimezone(dt_timezone.utc).date()
    if isinstance(value, str):
        parsed = parse_datetime(value)
        if parsed is None:
            parsed = parse_date(value)
        if parsed is None:
            raise ValidationError(f"Invalid date: {value}", details={'date': value})
        value = parsed
    if isinstance(value, datetime):
        if timezone.is_naive(value):
            value = timezone.make_aware(value, dt_timezone.utc)
        return value.astimezone(dt_timezone.utc).date()
    if isinstance(value, date):
        return value
    raise ValidationError(f"Invalid date: {value!r}")


class DailyBalanceService:
    """Get-or-create and accumulate per-day chick balances."""

    BLOCKED_SECTION_STATUSES = (SectionStatus.CLEANING, SectionStatus.PREPARING)

    def can_create_balance(self, batch):
        """Return (allowed, reason) without raising."""
        batch = get_or_not_found(Batch, batch)
        if batch.status == BatchStatus.CLOSED:
            return False, Reason.BATCH_CLOSED
        if batch.section.status in self.BLOCKED_SECTION_STATUSES:
            return False, Reason.SECTION_NOT_READY
        return True, None

    @transaction.atomic
    def get_or_create_for_date(self, batch, day=None):
        batch = get_or_not_found(Batch, batch)
        normalized = normalize_day(day)

        existing = DailyBalance.objects.filter(batch=batch, date=normalized).first()
        if existing:
            return existing

        allowed, reason = self.can_create_balance(batch)
        if not allowed:
            raise InvalidState(
                f"Cannot open a daily balance for batch {batch.id} on {normalized}: "
                f"batch is {batch.status}, section is {batch.section.status}",
                reason=reason,
                details={'batch_id': str(batch.id), 'date': normalized.isoformat()},
            )

        start = self._start_of_day(batch, normalized)
        try:
            with transaction.atomic():
                balance = DailyBalance.objects.create(
                    batch=batch,
                    date=normalized,
                    start_of_day_chicks=start,
                    end_of_day_chicks=start,
                )
        except IntegrityError:
            # Another request opened the same day first
            return DailyBalance.objects.get(batch=batch, date=normalized)

        logger.debug(f"Daily balance opened for batch {batch.id} on {normalized} with {start} chicks")
        return balance

    def update_deaths(self, batch, day, count):
        return self._accumulate(batch, day, 'deaths', self._positive(count, 'deaths'))

    def update_chick_out(self, batch, day, count):
        return self._accumulate(batch, day, 'chick_out', self._positive(count, 'chick_out'))

    def adjust_deaths(self, batch, day, delta):
        """
        Apply a signed correction to a day's deaths (report edits). Never
        drives the accumulator below zero.
        """
        if not delta:
            return self.get_or_create_for_date(batch, day)
        return self._accumulate(batch, day, 'deaths', int(delta))

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_balance_for_date(self, batch, day):
        return DailyBalance.objects.filter(batch=batch, date=normalize_day(day)).first()

    def get_balances_by_batch(self, batch):
        return DailyBalance.objects.filter(batch=batch).order_by('date')

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _positive(count, field):
        try:
            count = int(count)
        except (TypeError, ValueError):
            raise ValidationError(f"{field} must be a whole number", details={field: count})
        if count < 0:
            raise ValidationError(f"{field} cannot be negative", details={field: count})
        return count

    @staticmethod
    def _start_of_day(batch, normalized):
        previous = (
            DailyBalance.objects
            .filter(batch=batch, date__lt=normalized)
            .order_by('-date')
            .first()
        )
        if previous:
            return previous.end_of_day_chicks
        return batch.total_chicks_in

    @transaction.atomic
    def _accumulate(self, batch, day, field, amount):
        balance = self.get_or_create_for_date(batch, day)

        if amount >= 0:
            new_value = F(field) + amount
        else:
            new_value = Greatest(F(field) + amount, Value(0), output_field=models.IntegerField())

        other = 'chick_out' if field == 'deaths' else 'deaths'
        DailyBalance.objects.filter(pk=balance.pk).update(**{
            field: new_value,
            'end_of_day_chicks': Greatest(
                F('start_of_day_chicks') - F(other) - new_value,
                Value(0),
                output_field=models.IntegerField(),
            ),
            'updated_at': timezone.now(),
        })
        balance.refresh_from_db()
        self._rechain_after(balance)
        return balance

    @staticmethod
    def _rechain_after(balance):
        """
        Carry a changed end-of-day count forward into later days so every
        day still starts where the previous one ended.
        """
        previous_end = balance.end_of_day_chicks
        later_days = (
            DailyBalance.objects
            .select_for_update()
            .filter(batch_id=balance.batch_id, date__gt=balance.date)
            .order_by('date')
        )
        for later in later_days:
            if later.start_of_day_chicks == previous_end:
                break
            later.start_of_day_chicks = previous_end
            later.end_of_day_chicks = later.compute_end_of_day()
            later.save(update_fields=['start_of_day_chicks', 'end_of_day_chicks', 'updated_at'])
            previous_end = later.end_of_day_chicks
