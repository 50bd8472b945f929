"""
Period Profit & Loss

    profit = total revenue - total expenses

Refuses to report while the period still has unpriced chick-outs or
uncosted incidents: the numbers would be wrong, not just early.
"""

from typing import Any, Dict

from accounting.services import guards
from accounting.services.revenue import RevenueService
from core.exceptions import get_or_not_found
from expenses.services import PeriodExpenseService
from periods.models import Period


class ProfitLossService:

    def __init__(self, revenue=None, expenses=None):
        self.revenue = revenue or RevenueService()
        self.expenses = expenses or PeriodExpenseService()

    def get_period_pl(self, period) -> Dict[str, Any]:
        period = get_or_not_found(Period, period)
        guards.ensure_financials_final(period)

        total_revenue = self.revenue.get_period_revenue(period)
        total_expenses = self.expenses.get_total_expenses(period)
        profit = total_revenue - total_expenses

        return {
            'period_id': period.id,
            'total_revenue': total_revenue,
            'total_expenses': total_expenses,
            'profit': profit,
            'is_profitable': profit > 0,
        }
