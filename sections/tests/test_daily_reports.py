"""
Daily Report Tests

Workers file one report per batch per day. Reported deaths flow into the
daily balance, and every edit leaves an audit row with old and new values.
"""

from decimal import Decimal

import pytest

from core.exceptions import InvalidState, Reason, ValidationError
from sections.models import SectionReportAudit, SectionStatus
from sections.services import DailyBalanceService, DailyReportService, SectionService

pytestmark = pytest.mark.django_db


@pytest.fixture
def reports(publisher):
    return DailyReportService(publisher=publisher)


class TestCreateReport:

    def test_report_deaths_reach_daily_balance(self, batch, section, reports, worker):
        report = reports.create_report(
            section.id, deaths=150, avg_weight_kg='1.850',
            medicines=[{'name': 'Enrofloxacin', 'dose': '1ml/l'}],
            created_by=worker,
        )

        balance = DailyBalanceService().get_balance_for_date(batch, report.date)
        assert report.batch == batch
        assert report.medicines[0]['name'] == 'Enrofloxacin'
        assert balance.deaths == 150
        assert balance.end_of_day_chicks == 10000 - 150

    def test_one_report_per_day(self, batch, section, reports):
        reports.create_report(section.id, deaths=1)
        with pytest.raises(InvalidState) as exc_info:
            reports.create_report(section.id, deaths=2)
        assert exc_info.value.reason == Reason.DUPLICATE_REPORT

    def test_section_without_batch_rejected(self, section, reports):
        with pytest.raises(InvalidState) as exc_info:
            reports.create_report(section.id, deaths=1)
        assert exc_info.value.reason == Reason.SECTION_NOT_READY

    def test_negative_weight_rejected(self, batch, section, reports):
        with pytest.raises(ValidationError):
            reports.create_report(section.id, avg_weight_kg='-0.5')


class TestUpdateReport:

    def test_deaths_edit_is_audited_and_rebalanced(self, batch, section, reports, manager):
        report = reports.create_report(section.id, deaths=150)
        reports.update_report(report, changed_by=manager, deaths=120, notes='Recount')

        balance = DailyBalanceService().get_balance_for_date(batch, report.date)
        audit = SectionReportAudit.objects.get(report=report)
        assert balance.deaths == 120
        assert audit.changed_by == manager
        assert audit.previous_values == {'deaths': 150, 'notes': ''}
        assert audit.new_values == {'deaths': 120, 'notes': 'Recount'}

    def test_unchanged_values_leave_no_audit(self, batch, section, reports):
        report = reports.create_report(section.id, deaths=5, avg_weight_kg='1.200')
        reports.update_report(report, deaths=5, avg_weight_kg=Decimal('1.200'))
        assert not SectionReportAudit.objects.filter(report=report).exists()

    def test_cleaning_section_blocks_edits(self, batch, section, reports, publisher):
        report = reports.create_report(section.id, deaths=5)
        section.refresh_from_db()
        section.status = SectionStatus.CLEANING
        section.save(update_fields=['status'])

        with pytest.raises(InvalidState) as exc_info:
            reports.update_report(report, deaths=7)
        assert exc_info.value.reason == Reason.SECTION_NOT_READY


class TestSectionStatus:

    def test_active_requires_active_period(self, publisher):
        service = SectionService(publisher=publisher)
        section = service.create_section('Section 7')
        with pytest.raises(InvalidState) as exc_info:
            service.update_section(section, status=SectionStatus.ACTIVE)
        assert exc_info.value.reason == Reason.NO_ACTIVE_PERIOD

    def test_cannot_leave_operational_status_with_open_batch(self, batch, section, publisher):
        with pytest.raises(InvalidState) as exc_info:
            SectionService(publisher=publisher).update_section(section, status=SectionStatus.EMPTY)
        assert exc_info.value.reason == Reason.OPEN_BATCH_EXISTS
