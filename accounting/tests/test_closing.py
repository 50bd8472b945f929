"""
Batch & Period Closing Tests

Closing is refused while anything that affects the money is unfinished:
an unpriced chick-out, a batch without any completed sale, or a broken
motor without a repair bill. Closing a period posts the remaining
salaries before it locks the ledger.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from accounting.services import BatchClosingService, PeriodClosingService
from assets.services import IncidentService, RepairExpenseService
from core.exceptions import InvalidState, Reason
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService
from periods.models import PeriodStatus
from salaries.services import SalaryService
from sections.models import BatchStatus, SectionStatus
from sections.services import BatchService, ChickOutService

pytestmark = pytest.mark.django_db


@pytest.fixture
def batch_closing(publisher):
    return BatchClosingService(publisher=publisher)


@pytest.fixture
def period_closing(publisher):
    return PeriodClosingService(publisher=publisher)


# =============================================================================
# BATCH CLOSE
# =============================================================================

class TestBatchClose:

    def test_incomplete_chick_out_blocks_close(self, batch_closing, small_batch, section, publisher):
        ChickOutService(publisher=publisher).create_chick_out(section, count=300, vehicle_number='01A')

        with pytest.raises(InvalidState) as exc_info:
            batch_closing.close_batch(small_batch)
        assert exc_info.value.reason == Reason.INCOMPLETE_CHICK_OUTS
        assert exc_info.value.details['count'] == 1

    def test_batch_without_sale_blocks_close(self, batch_closing, small_batch):
        with pytest.raises(InvalidState) as exc_info:
            batch_closing.close_batch(small_batch)
        assert exc_info.value.reason == Reason.NO_COMPLETED_CHICK_OUTS

    def test_empty_batch_closes_without_sale(self, batch_closing, section, publisher):
        empty = BatchService(publisher=publisher).create_batch(section, total_chicks_in=0)
        closed = batch_closing.close_batch(empty)
        assert closed.status == BatchStatus.CLOSED

    def test_unresolved_incident_blocks_close(self, batch_closing, small_batch, section, publisher):
        chick_outs = ChickOutService(publisher=publisher)
        chick_out = chick_outs.create_chick_out(section, count=300, vehicle_number='01A')
        chick_outs.complete(chick_out, 700, 0, 15000)
        IncidentService(publisher=publisher).create_incident(
            'Heater broke down', section=section, requires_expense=True,
        )

        with pytest.raises(InvalidState) as exc_info:
            batch_closing.close_batch(small_batch)
        assert exc_info.value.reason == Reason.UNRESOLVED_INCIDENTS

    def test_close_sends_section_to_cleaning(self, batch_closing, small_batch, section, publisher):
        chick_outs = ChickOutService(publisher=publisher)
        chick_out = chick_outs.create_chick_out(section, count=300, vehicle_number='01A')
        chick_outs.complete(chick_out, 700, 0, 15000)

        batch = batch_closing.close_batch(small_batch)

        section.refresh_from_db()
        assert batch.status == BatchStatus.CLOSED
        assert section.status == SectionStatus.CLEANING
        assert section.active_batch is None

    def test_closed_batch_cannot_close_again(self, batch_closing, sold_batch):
        with pytest.raises(InvalidState) as exc_info:
            batch_closing.close_batch(sold_batch)
        assert exc_info.value.reason == Reason.BATCH_CLOSED


# =============================================================================
# PERIOD CLOSE
# =============================================================================

class TestPeriodClose:

    def test_open_batch_blocks_close(self, period_closing, period, small_batch):
        with pytest.raises(InvalidState) as exc_info:
            period_closing.close_period(period)
        assert exc_info.value.reason == Reason.ACTIVE_BATCHES
        assert exc_info.value.details['batch_ids'] == [str(small_batch.id)]

    def test_unpriced_final_load_blocks_close(self, period_closing, period, final_chick_out):
        with pytest.raises(InvalidState) as exc_info:
            period_closing.close_period(period)
        assert exc_info.value.reason == Reason.INCOMPLETE_CHICK_OUTS

    def test_unresolved_incident_blocks_close(self, period_closing, period, section, sold_batch, publisher):
        IncidentService(publisher=publisher).create_incident(
            'Water pump leaking', section=section, requires_expense=True,
        )
        with pytest.raises(InvalidState) as exc_info:
            period_closing.close_period(period)
        assert exc_info.value.reason == Reason.UNRESOLVED_INCIDENTS

    def test_repaired_incident_no_longer_blocks(self, period_closing, period, section, sold_batch, publisher):
        incident = IncidentService(publisher=publisher).create_incident(
            'Water pump leaking', section=section, requires_expense=True,
        )
        RepairExpenseService(publisher=publisher).create_repair_expense(incident, '200000', 'New pump seal')

        closed = period_closing.close_period(period)
        assert closed.status == PeriodStatus.CLOSED

    def test_close_posts_salaries_and_locks_period(self, period_closing, period, sold_batch, worker,
                                                   director, publisher, django_capture_on_commit_callbacks):
        salaries = SalaryService(publisher=publisher)
        salaries.create_salary(worker, period, '3000000')
        salaries.give_advance(worker, period, '1000000')

        with django_capture_on_commit_callbacks(execute=True):
            closed = period_closing.close_period(period, closed_by=director)

        expenses = PeriodExpenseService(publisher=publisher)
        assert closed.status == PeriodStatus.CLOSED
        assert closed.end_date == timezone.localdate()
        assert closed.closed_by == director
        assert expenses.get_total_expenses(period, category=ExpenseCategory.LABOR_FIXED) == Decimal('3000000.00')
        assert 'period_closed' in publisher.kinds()
        assert 'salary_expense_finalized' in publisher.kinds()

        with pytest.raises(InvalidState) as exc_info:
            expenses.add_expense(period, ExpenseCategory.OTHER, 100)
        assert exc_info.value.reason == Reason.PERIOD_CLOSED

    def test_closed_period_cannot_close_again(self, period_closing, period, sold_batch):
        period_closing.close_period(period)
        with pytest.raises(InvalidState) as exc_info:
            period_closing.close_period(period)
        assert exc_info.value.reason == Reason.ALREADY_CLOSED

    def test_unfinished_operations_report(self, period, small_batch, final_chick_out):
        result = PeriodClosingService.has_unfinished_operations(period)
        assert result == {
            'has_unfinished': True,
            'open_batches': 0,
            'incomplete_chick_outs': 1,
            'unresolved_incidents': 0,
        }

    def test_empty_period_closes(self, period_closing, director, publisher):
        from periods.services import PeriodService

        quiet = PeriodService(publisher=publisher).create_period(
            'Quiet winter', start_date=timezone.localdate() - timedelta(days=10),
        )
        assert period_closing.close_period(quiet).status == PeriodStatus.CLOSED
