from django.urls import path

from . import views

app_name = 'forecasts'

urlpatterns = [
    path('prices/', views.ForecastPriceCreateView.as_view(), name='forecast-price'),
    path('periods/<uuid:pk>/price/', views.ActivePriceView.as_view(), name='forecast-active-price'),
    path('periods/<uuid:pk>/', views.PeriodForecastView.as_view(), name='forecast-period'),
    path('sections/<uuid:pk>/', views.SectionForecastView.as_view(), name='forecast-section'),
    path('batches/<uuid:pk>/simulate/', views.PartialSaleSimulationView.as_view(), name='forecast-simulate'),
]
