from django.contrib import admin

from .models import Asset, AssetHistory, TechnicalIncident


class AssetHistoryInline(admin.TabularInline):
    model = AssetHistory
    extra = 0
    readonly_fields = ['old_status', 'new_status', 'changed_by', 'changed_at']
    can_delete = False


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'section', 'status', 'purchase_cost']
    list_filter = ['category', 'status']
    search_fields = ['name', 'section__name']
    inlines = [AssetHistoryInline]


@admin.register(TechnicalIncident)
class TechnicalIncidentAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'section', 'requires_expense', 'resolved', 'created_at']
    list_filter = ['requires_expense', 'resolved']
    search_fields = ['description', 'section__name', 'asset__name']
