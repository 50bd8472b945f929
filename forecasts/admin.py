from django.contrib import admin

from .models import ForecastPrice


@admin.register(ForecastPrice)
class ForecastPriceAdmin(admin.ModelAdmin):
    list_display = ['period', 'section', 'price_per_kg', 'source', 'is_active', 'created_at']
    list_filter = ['source', 'is_active', 'period']
