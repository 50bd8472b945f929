from django.urls import path

from . import views

app_name = 'sections'

urlpatterns = [
    # Sections
    path('sections/', views.SectionListCreateView.as_view(), name='section-list'),
    path('sections/<uuid:pk>/', views.SectionDetailView.as_view(), name='section-detail'),
    path('sections/<uuid:pk>/period/', views.SectionPeriodView.as_view(), name='section-period'),
    path('sections/<uuid:pk>/batches/summary/', views.SectionBatchSummariesView.as_view(),
         name='section-batch-summaries'),
    path('sections/reports/<uuid:pk>/', views.DailyReportUpdateView.as_view(), name='report-update'),

    # Batches
    path('batches/', views.BatchListCreateView.as_view(), name='batch-list'),
    path('batches/<uuid:pk>/', views.BatchDetailView.as_view(), name='batch-detail'),
    path('batches/<uuid:pk>/summary/', views.BatchSummaryView.as_view(), name='batch-summary'),
    path('batches/<uuid:pk>/timeline/', views.BatchTimelineView.as_view(), name='batch-timeline'),
    path('batches/<uuid:pk>/verify/', views.BatchVerifyView.as_view(), name='batch-verify'),
    path('batches/<uuid:pk>/balances/', views.BatchBalancesView.as_view(), name='batch-balances'),

    # Chick-outs
    path('chick-outs/', views.ChickOutListCreateView.as_view(), name='chickout-list'),
    path('chick-outs/<uuid:pk>/complete/', views.ChickOutCompleteView.as_view(), name='chickout-complete'),
]
