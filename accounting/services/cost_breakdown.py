"""Where the money went: period expenses by category."""

from decimal import Decimal
from typing import Any, Dict, List

from accounting.services.kpi import safe_divide
from core.exceptions import get_or_not_found
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService
from periods.models import Period

ZERO = Decimal('0.00')


class CostBreakdownService:

    def __init__(self, expenses=None):
        self.expenses = expenses or PeriodExpenseService()

    def get_cost_breakdown(self, period) -> Dict[str, Any]:
        """
        Every category with its amount and share of the total, largest
        first. Categories without expenses are listed with 0.
        """
        period = get_or_not_found(Period, period)
        totals = self.expenses.get_total_by_category(period)
        total_expenses = sum(totals.values(), ZERO)

        breakdown = [
            {
                'category': category,
                'amount': totals.get(category, ZERO),
                'percentage': safe_divide(totals.get(category, ZERO) * 100, total_expenses),
            }
            for category in ExpenseCategory.values
        ]
        breakdown.sort(key=lambda item: item['amount'], reverse=True)

        return {
            'period_id': period.id,
            'total_expenses': total_expenses,
            'breakdown': breakdown,
        }

    def get_top_categories(self, period, limit=3) -> List[Dict[str, Any]]:
        return self.get_cost_breakdown(period)['breakdown'][:limit]
