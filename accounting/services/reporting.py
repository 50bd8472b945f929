"""
Daily report filing.

A report that carries water or electricity readings posts the matching
utility expenses. The report and its expenses commit together.
"""

import logging

from django.db import transaction

from core.realtime import get_event_publisher
from expenses.services import PeriodExpenseService, UtilityExpenseService
from sections.services import DailyReportService

logger = logging.getLogger(__name__)


class DailyReportWorkflow:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.reports = DailyReportService(publisher=self.publisher)
        self.utilities = UtilityExpenseService(PeriodExpenseService(publisher=self.publisher))

    @transaction.atomic
    def file_report(self, section, created_by=None, **fields):
        report = self.reports.create_report(section, created_by=created_by, **fields)
        posted = self.utilities.record_report_utilities(report, created_by=created_by)
        if posted:
            logger.info(f"Report {report.id} posted {len(posted)} utility expense(s)")
        return report, posted
