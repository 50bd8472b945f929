"""
Daily Balance Ledger Tests

SCENARIO:
=========
10,000 chicks are placed. On day one 100 die and 50 are loaded out, so the
day ends with 9,850. Day two must open with 9,850, and a later correction
to day one must carry forward into day two.
"""

from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest

from core.exceptions import InvalidState, Reason, ValidationError
from sections.models import BatchStatus, DailyBalance
from sections.services import DailyBalanceService, normalize_day

pytestmark = pytest.mark.django_db


@pytest.fixture
def balances():
    return DailyBalanceService()


@pytest.fixture
def day_one(batch):
    return normalize_day(batch.started_at)


# =============================================================================
# DAY NORMALIZATION
# =============================================================================

class TestNormalizeDay:

    def test_datetime_is_reduced_to_utc_day(self):
        value = datetime(2026, 3, 1, 23, 30, tzinfo=dt_timezone(timedelta(hours=-5)))
        assert normalize_day(value) == date(2026, 3, 2)

    def test_iso_strings_are_accepted(self):
        assert normalize_day('2026-03-01') == date(2026, 3, 1)
        assert normalize_day('2026-03-01T10:00:00+00:00') == date(2026, 3, 1)

    def test_garbage_is_rejected(self):
        with pytest.raises(ValidationError):
            normalize_day('not-a-date')


# =============================================================================
# ACCUMULATION
# =============================================================================

class TestAccumulation:

    def test_batch_creation_opens_day_one(self, batch, day_one):
        balance = DailyBalance.objects.get(batch=batch, date=day_one)
        assert balance.start_of_day_chicks == 10000
        assert balance.end_of_day_chicks == 10000

    def test_deaths_and_chick_outs_reduce_end_of_day(self, batch, balances, day_one):
        balances.update_deaths(batch, day_one, 100)
        balance = balances.update_chick_out(batch, day_one, 50)

        assert balance.deaths == 100
        assert balance.chick_out == 50
        assert balance.end_of_day_chicks == 9850

    def test_next_day_starts_where_previous_ended(self, batch, balances, day_one):
        balances.update_deaths(batch, day_one, 100)
        balances.update_chick_out(batch, day_one, 50)

        day_two = balances.get_or_create_for_date(batch, day_one + timedelta(days=1))
        assert day_two.start_of_day_chicks == 9850
        assert day_two.end_of_day_chicks == 9850

    def test_repeated_reports_accumulate(self, batch, balances, day_one):
        balances.update_deaths(batch, day_one, 10)
        balance = balances.update_deaths(batch, day_one, 15)
        assert balance.deaths == 25
        assert balance.end_of_day_chicks == 9975

    def test_end_of_day_never_goes_negative(self, batch, balances, day_one):
        balance = balances.update_deaths(batch, day_one, 12000)
        assert balance.end_of_day_chicks == 0

    def test_negative_count_rejected(self, batch, balances, day_one):
        with pytest.raises(ValidationError):
            balances.update_deaths(batch, day_one, -5)

    def test_get_or_create_is_idempotent(self, batch, balances, day_one):
        first = balances.get_or_create_for_date(batch, day_one)
        second = balances.get_or_create_for_date(batch, day_one)
        assert first.pk == second.pk
        assert DailyBalance.objects.filter(batch=batch, date=day_one).count() == 1


class TestCorrections:

    def test_correction_is_carried_forward(self, batch, balances, day_one):
        balances.update_deaths(batch, day_one, 100)
        day_two = day_one + timedelta(days=1)
        balances.update_deaths(batch, day_two, 20)

        balances.adjust_deaths(batch, day_one, -40)

        first = balances.get_balance_for_date(batch, day_one)
        second = balances.get_balance_for_date(batch, day_two)
        assert first.deaths == 60
        assert first.end_of_day_chicks == 9940
        assert second.start_of_day_chicks == 9940
        assert second.end_of_day_chicks == 9920

    def test_correction_never_drives_deaths_below_zero(self, batch, balances, day_one):
        balances.update_deaths(batch, day_one, 5)
        balance = balances.adjust_deaths(batch, day_one, -50)
        assert balance.deaths == 0
        assert balance.end_of_day_chicks == 10000


class TestGuards:

    def test_closed_batch_cannot_open_new_day(self, batch, balances, day_one):
        batch.status = BatchStatus.CLOSED
        batch.save(update_fields=['status'])

        allowed, reason = balances.can_create_balance(batch)
        assert allowed is False
        assert reason == Reason.BATCH_CLOSED

        with pytest.raises(InvalidState) as exc_info:
            balances.get_or_create_for_date(batch, day_one + timedelta(days=2))
        assert exc_info.value.reason == Reason.BATCH_CLOSED

    def test_existing_day_is_still_readable_after_close(self, batch, balances, day_one):
        batch.status = BatchStatus.CLOSED
        batch.save(update_fields=['status'])
        assert balances.get_or_create_for_date(batch, day_one).start_of_day_chicks == 10000
