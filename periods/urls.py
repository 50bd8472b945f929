from django.urls import path

from .views import PeriodDetailView, PeriodListCreateView

app_name = 'periods'

urlpatterns = [
    path('', PeriodListCreateView.as_view(), name='period-list'),
    path('<uuid:pk>/', PeriodDetailView.as_view(), name='period-detail'),
]
