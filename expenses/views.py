"""
Views for the period expense ledger.

API Endpoints:
- /api/expenses/ - List (filterable) / create expenses
- /api/expenses/categories/ - Expense categories (constants)
- /api/expenses/water/ - Post metered water usage
- /api/expenses/electricity/ - Post metered electricity usage
- /api/expenses/periods/{id}/totals/ - Totals by category and section
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.filters import OrderingFilter
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsManagerOrDirector, ReadOnlyOrManager
from core.exceptions import get_or_not_found
from periods.models import Period
from sections.models import Section
from .models import ExpenseCategory, PeriodExpense
from .serializers import ExpenseCreateSerializer, PeriodExpenseSerializer, UtilityUsageSerializer
from .services import PeriodExpenseService, UtilityExpenseService


class ExpenseCategoryListView(APIView):
    """
    GET /api/expenses/categories/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response([
            {'value': value, 'label': label}
            for value, label in ExpenseCategory.choices
        ])


class ExpenseListCreateView(generics.ListCreateAPIView):
    """
    GET /api/expenses/?period=&section=&category=&source=
    POST /api/expenses/
    """
    permission_classes = [ReadOnlyOrManager]
    serializer_class = PeriodExpenseSerializer
    queryset = PeriodExpense.objects.select_related('section')
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_fields = ['period', 'section', 'batch', 'category', 'source']
    ordering_fields = ['expense_date', 'amount', 'created_at']
    ordering = ['-expense_date', '-created_at']

    def create(self, request, *args, **kwargs):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        section_id = data.pop('section', None)
        section = get_or_not_found(Section, section_id) if section_id else None
        expense = PeriodExpenseService().add_expense(
            period=data.pop('period'),
            section=section,
            created_by=request.user,
            **data,
        )
        return Response(PeriodExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class UtilityUsageView(APIView):
    """
    POST /api/expenses/water/
    POST /api/expenses/electricity/
    """
    permission_classes = [IsAuthenticated, IsManagerOrDirector]
    utility = None

    def post(self, request):
        serializer = UtilityUsageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        section = get_or_not_found(Section, data['section'])

        service = UtilityExpenseService()
        record = service.record_water if self.utility == ExpenseCategory.WATER else service.record_electricity
        expense = record(
            section,
            data['quantity'],
            expense_date=data.get('expense_date'),
            created_by=request.user,
        )
        return Response(PeriodExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class PeriodExpenseTotalsView(APIView):
    """
    GET /api/expenses/periods/{id}/totals/
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        period = get_or_not_found(Period, pk)
        service = PeriodExpenseService()
        by_section = service.get_total_by_section(period)
        return Response({
            'period_id': period.id,
            'total': service.get_total_expenses(period),
            'by_category': service.get_total_by_category(period),
            'by_section': {str(key) if key else 'unassigned': value for key, value in by_section.items()},
        })
