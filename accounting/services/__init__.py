from accounting.services.closing import BatchClosingService, PeriodClosingService
from accounting.services.cost_breakdown import CostBreakdownService
from accounting.services.kpi import KPIService, safe_divide
from accounting.services.profit_loss import ProfitLossService
from accounting.services.reporting import DailyReportWorkflow
from accounting.services.revenue import RevenueService
from accounting.services.section_pl import SectionPLService

__all__ = [
    'BatchClosingService',
    'CostBreakdownService',
    'DailyReportWorkflow',
    'KPIService',
    'PeriodClosingService',
    'ProfitLossService',
    'RevenueService',
    'SectionPLService',
    'safe_divide',
]
