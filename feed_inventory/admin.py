"""
Feed Inventory Admin Configuration
"""

from django.contrib import admin

from .models import FeedDelivery


@admin.register(FeedDelivery)
class FeedDeliveryAdmin(admin.ModelAdmin):
    list_display = ['section', 'period', 'feed_type', 'quantity_kg', 'unit_price', 'total_cost', 'delivered_at']
    list_filter = ['feed_type', 'period']
    search_fields = ['section__name', 'supplier']
    date_hierarchy = 'delivered_at'
    readonly_fields = ['total_cost', 'expense']
