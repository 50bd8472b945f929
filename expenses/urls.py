"""
URL configuration for the expense ledger.

All endpoints are prefixed with /api/expenses/
"""

from django.urls import path

from .models import ExpenseCategory
from .views import (
    ExpenseCategoryListView,
    ExpenseListCreateView,
    PeriodExpenseTotalsView,
    UtilityUsageView,
)

app_name = 'expenses'

urlpatterns = [
    path('', ExpenseListCreateView.as_view(), name='expense-list'),
    path('categories/', ExpenseCategoryListView.as_view(), name='expense-categories'),
    path('water/', UtilityUsageView.as_view(utility=ExpenseCategory.WATER), name='expense-water'),
    path('electricity/', UtilityUsageView.as_view(utility=ExpenseCategory.ELECTRICITY), name='expense-electricity'),
    path('periods/<uuid:pk>/totals/', PeriodExpenseTotalsView.as_view(), name='expense-period-totals'),
]
