from django.urls import path

from . import views

app_name = 'accounting'

urlpatterns = [
    path('sections/<uuid:pk>/reports/', views.SectionReportView.as_view(), name='section-reports'),

    # Closing
    path('batches/<uuid:pk>/close/', views.BatchCloseView.as_view(), name='batch-close'),
    path('periods/<uuid:pk>/close/', views.PeriodCloseView.as_view(), name='period-close'),
    path('periods/<uuid:pk>/unfinished/', views.PeriodUnfinishedView.as_view(), name='period-unfinished'),

    # Reports
    path('reports/periods/<uuid:pk>/revenue/', views.PeriodRevenueView.as_view(), name='period-revenue'),
    path('reports/periods/<uuid:pk>/pl/', views.PeriodProfitLossView.as_view(), name='period-pl'),
    path('reports/periods/<uuid:pk>/kpi/', views.PeriodKPIView.as_view(), name='period-kpi'),
    path('reports/periods/<uuid:pk>/cost-breakdown/', views.PeriodCostBreakdownView.as_view(),
         name='period-cost-breakdown'),
    path('reports/periods/<uuid:pk>/sections-pl/', views.PeriodSectionsPLView.as_view(), name='period-sections-pl'),
    path('reports/sections/<uuid:pk>/pl/', views.SectionPLView.as_view(), name='section-pl'),
]
