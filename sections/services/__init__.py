from sections.services.batch_summary import BatchSummaryService
from sections.services.batches import BatchService
from sections.services.chick_outs import ChickOutService, calculate_sale
from sections.services.daily_balance import DailyBalanceService, normalize_day
from sections.services.daily_reports import DailyReportService
from sections.services.sections import SectionService

__all__ = [
    'BatchService',
    'BatchSummaryService',
    'ChickOutService',
    'DailyBalanceService',
    'DailyReportService',
    'SectionService',
    'calculate_sale',
    'normalize_day',
]
