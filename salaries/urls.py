from django.urls import path

from . import views

app_name = 'salaries'

urlpatterns = [
    path('', views.SalaryListCreateView.as_view(), name='salary-list'),
    path('advances/', views.SalaryAdvanceView.as_view(), name='salary-advance'),
    path('bonuses/', views.SalaryBonusView.as_view(), name='salary-bonus'),
    path('employees/<uuid:pk>/summary/', views.EmployeeSalarySummaryView.as_view(), name='employee-summary'),
    path('periods/<uuid:pk>/summary/', views.PeriodSalarySummaryView.as_view(), name='period-summary'),
]
