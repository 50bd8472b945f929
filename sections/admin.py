from django.contrib import admin

from .models import Batch, ChickOut, DailyBalance, Section, SectionDailyReport, SectionReportAudit


class DailyBalanceInline(admin.TabularInline):
    model = DailyBalance
    extra = 0
    readonly_fields = ['date', 'start_of_day_chicks', 'deaths', 'chick_out', 'end_of_day_chicks', 'is_closed']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Section)
class SectionAdmin(admin.ModelAdmin):
    list_display = ['name', 'status', 'active_period', 'active_batch', 'is_archived']
    list_filter = ['status', 'is_archived']
    search_fields = ['name']
    filter_horizontal = ['assigned_workers']
    readonly_fields = ['status', 'active_batch', 'active_period', 'closed_at']


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'section', 'period', 'status', 'total_chicks_in', 'total_chicks_out', 'started_at']
    list_filter = ['status', 'period']
    search_fields = ['name', 'section__name']
    readonly_fields = ['status', 'total_chicks_out', 'ended_at']
    inlines = [DailyBalanceInline]


@admin.register(ChickOut)
class ChickOutAdmin(admin.ModelAdmin):
    list_display = ['section', 'batch', 'date', 'count', 'status', 'total_revenue']
    list_filter = ['status', 'is_final']
    search_fields = ['vehicle_number', 'section__name']
    # Financial fields change only through the completion workflow
    readonly_fields = [
        'status', 'total_weight_kg', 'waste_percent', 'net_weight_kg',
        'price_per_kg', 'total_revenue', 'completed_at', 'completed_by',
    ]


@admin.register(SectionDailyReport)
class SectionDailyReportAdmin(admin.ModelAdmin):
    list_display = ['batch', 'date', 'deaths', 'avg_weight_kg']
    list_filter = ['date']
    readonly_fields = ['deaths']


@admin.register(SectionReportAudit)
class SectionReportAuditAdmin(admin.ModelAdmin):
    list_display = ['report', 'changed_by', 'changed_at']
    readonly_fields = ['report', 'changed_by', 'previous_values', 'new_values', 'changed_at']
