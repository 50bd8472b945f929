from django.contrib import admin

from .models import EmployeeSalary, SalaryAdvance, SalaryBonus


@admin.register(EmployeeSalary)
class EmployeeSalaryAdmin(admin.ModelAdmin):
    list_display = ['employee', 'period', 'base_salary', 'finalized_at']
    list_filter = ['period']
    search_fields = ['employee__username', 'employee__first_name', 'employee__last_name']
    readonly_fields = ['finalized_at']


@admin.register(SalaryAdvance)
class SalaryAdvanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'period', 'amount', 'given_by', 'created_at']
    list_filter = ['period']
    readonly_fields = ['expense']


@admin.register(SalaryBonus)
class SalaryBonusAdmin(admin.ModelAdmin):
    list_display = ['employee', 'period', 'amount', 'reason', 'given_by', 'created_at']
    list_filter = ['period']
    readonly_fields = ['expense']
