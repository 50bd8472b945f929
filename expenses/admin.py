"""
Admin configuration for the period expense ledger.

Expenses are append-only: the admin shows them but never edits or
deletes them.
"""

from django.contrib import admin

from .models import PeriodExpense


@admin.register(PeriodExpense)
class PeriodExpenseAdmin(admin.ModelAdmin):
    list_display = ['expense_date', 'period', 'section', 'category', 'amount', 'source']
    list_filter = ['category', 'source', 'period']
    search_fields = ['description', 'section__name']
    date_hierarchy = 'expense_date'
    list_per_page = 50

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
