from django.urls import path

from . import views

app_name = 'assets'

urlpatterns = [
    path('', views.AssetListCreateView.as_view(), name='asset-list'),
    path('<uuid:pk>/status/', views.AssetStatusView.as_view(), name='asset-status'),
    path('incidents/', views.IncidentListCreateView.as_view(), name='incident-list'),
    path('incidents/<uuid:pk>/resolve/', views.IncidentResolveView.as_view(), name='incident-resolve'),
    path('incidents/<uuid:pk>/repair-expense/', views.RepairExpenseView.as_view(), name='incident-repair-expense'),
]
