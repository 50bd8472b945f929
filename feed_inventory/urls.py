"""
Feed Inventory URL Configuration

All endpoints are prefixed with /api/feed/
"""

from django.urls import path

from .views import FeedDeliveryView, PeriodFeedTotalView

app_name = 'feed_inventory'

urlpatterns = [
    path('deliveries/', FeedDeliveryView.as_view(), name='feed-deliveries'),
    path('periods/<uuid:pk>/total/', PeriodFeedTotalView.as_view(), name='feed-period-total'),
]
