"""
Section Daily Report Service

Workers file one report per batch per day. Reported deaths feed the daily
balance ledger; edits are audited with the previous and new values.
"""

from decimal import Decimal
import logging

from django.db import transaction

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import get_event_publisher, section_topic, system_section_topic
from sections.models import (
    OPEN_BATCH_STATUSES, Section, SectionDailyReport, SectionReportAudit, SectionStatus,
)
from sections.services.daily_balance import DailyBalanceService, normalize_day

logger = logging.getLogger(__name__)

REPORTABLE_SECTION_STATUSES = (SectionStatus.ACTIVE, SectionStatus.PARTIAL_OUT)
AUDITED_FIELDS = ('deaths', 'avg_weight_kg', 'medicines', 'notes', 'water_litres', 'electricity_kwh')


class DailyReportService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.balances = DailyBalanceService()

    @transaction.atomic
    def create_report(self, section, date=None, deaths=0, avg_weight_kg=None, medicines=None,
                      notes='', water_litres=None, electricity_kwh=None, created_by=None):
        """
        File the daily report for a section's open batch.

        Raises:
            InvalidState: section not ACTIVE/PARTIAL_OUT, no open batch, or a
                report already exists for that day
            ValidationError: negative deaths or weight
        """
        section = get_or_not_found(Section, section)
        if section.status not in REPORTABLE_SECTION_STATUSES:
            raise InvalidState(
                "Reports can only be created for ACTIVE or PARTIAL_OUT sections",
                reason=Reason.SECTION_NOT_READY,
                details={'section_id': str(section.id), 'status': section.status},
            )
        batch = section.active_batch
        if batch is None or batch.status not in OPEN_BATCH_STATUSES:
            raise InvalidState(
                f"Section {section.name} does not have an active batch",
                reason=Reason.NO_ACTIVE_BATCH,
                details={'section_id': str(section.id)},
            )

        deaths = int(deaths or 0)
        if deaths < 0:
            raise ValidationError("deaths cannot be negative", details={'deaths': deaths})
        if avg_weight_kg is not None and Decimal(str(avg_weight_kg)) < 0:
            raise ValidationError("avg_weight_kg cannot be negative")

        day = normalize_day(date)
        if SectionDailyReport.objects.filter(batch=batch, date=day).exists():
            raise InvalidState(
                f"Report for {day} already exists",
                reason=Reason.DUPLICATE_REPORT,
                details={'batch_id': str(batch.id), 'date': day.isoformat()},
            )

        report = SectionDailyReport.objects.create(
            batch=batch,
            date=day,
            deaths=deaths,
            avg_weight_kg=avg_weight_kg,
            medicines=medicines or [],
            notes=notes or '',
            water_litres=water_litres,
            electricity_kwh=electricity_kwh,
            created_by=created_by,
        )

        if deaths > 0:
            self.balances.update_deaths(batch, day, deaths)

        logger.info(f"Daily report {day} filed for section {section.name}: {deaths} deaths")
        self._announce(section, report, 'daily_report_created')
        return report

    @transaction.atomic
    def update_report(self, report, changed_by=None, **changes):
        """
        Edit a report. Deaths corrections are carried into the daily balance.

        Raises:
            InvalidState: the section is being cleaned
        """
        report = get_or_not_found(SectionDailyReport, report)
        report = SectionDailyReport.objects.select_for_update().select_related('batch__section').get(pk=report.pk)
        section = report.batch.section

        if section.status == SectionStatus.CLEANING:
            raise InvalidState(
                "Cannot update report for a CLEANING section",
                reason=Reason.SECTION_NOT_READY,
                details={'section_id': str(section.id)},
            )

        previous_values = {}
        new_values = {}
        for field in AUDITED_FIELDS:
            if field not in changes or changes[field] is None:
                continue
            value = changes[field]
            current = getattr(report, field)
            if field == 'deaths':
                value = int(value)
            elif field in ('avg_weight_kg', 'water_litres', 'electricity_kwh'):
                value = Decimal(str(value))
            if value != current:
                previous_values[field] = current
                new_values[field] = value
                setattr(report, field, value)

        if not new_values:
            return report

        if 'deaths' in new_values:
            if int(new_values['deaths']) < 0:
                raise ValidationError("deaths cannot be negative")
            delta = int(new_values['deaths']) - int(previous_values['deaths'])
            self.balances.adjust_deaths(report.batch, report.date, delta)

        report.save()
        SectionReportAudit.objects.create(
            report=report,
            changed_by=changed_by,
            previous_values=_json_safe(previous_values),
            new_values=_json_safe(new_values),
        )

        logger.info(f"Daily report {report.id} updated: {sorted(new_values)}")
        self._announce(section, report, 'daily_report_updated')
        return report

    def get_reports_by_section(self, section):
        return SectionDailyReport.objects.filter(batch__section=section).order_by('-date')

    def get_reports_by_batch(self, batch):
        return SectionDailyReport.objects.filter(batch=batch).order_by('-date')

    def _announce(self, section, report, event):
        payload = {
            'report_id': report.id,
            'section_id': section.id,
            'batch_id': report.batch_id,
            'date': report.date,
            'deaths': report.deaths,
            'avg_weight_kg': report.avg_weight_kg,
        }
        self.publisher.publish(section_topic(section.id), event, payload)
        self.publisher.publish(system_section_topic(section.id), event, payload)


def _json_safe(values):
    return {key: str(value) if isinstance(value, Decimal) else value for key, value in values.items()}
