from django.contrib import admin

from .models import Period


@admin.register(Period)
class PeriodAdmin(admin.ModelAdmin):
    list_display = ('name', 'status', 'start_date', 'end_date', 'created_by')
    list_filter = ('status',)
    search_fields = ('name',)
    readonly_fields = ('status', 'end_date', 'closed_at', 'closed_by')
