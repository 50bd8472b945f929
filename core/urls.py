"""
URL configuration for core project.

Every API route requires a bearer token from /api/auth/token/.
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/auth/', include('accounts.urls')),
    path('api/periods/', include('periods.urls')),
    path('api/', include('sections.urls')),  # Sections, batches, chick-outs, daily reports
    path('api/expenses/', include('expenses.urls')),
    path('api/assets/', include('assets.urls')),
    path('api/salaries/', include('salaries.urls')),
    path('api/feed/', include('feed_inventory.urls')),
    path('api/forecast/', include('forecasts.urls')),
    path('api/', include('accounting.urls')),  # Closing and financial reports
]
