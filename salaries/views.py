"""
Salary endpoints.

API Endpoints:
- /api/salaries/ - List (?period=) / create fixed salaries
- /api/salaries/advances/ - Give an advance
- /api/salaries/bonuses/ - Give a bonus
- /api/salaries/employees/{id}/summary/ - Base, advances, bonuses, remaining
- /api/salaries/periods/{id}/summary/ - Period salary liability
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.models import User
from accounts.permissions import IsDirector
from core.exceptions import ValidationError, get_or_not_found
from sections.models import Section
from .models import EmployeeSalary
from .serializers import (
    EmployeeSalarySerializer,
    SalaryAdvanceSerializer,
    SalaryBonusSerializer,
    SalaryCreateSerializer,
    SalaryPaymentSerializer,
)
from .services import SalaryService


def _resolve(data):
    section_id = data.get('section')
    return (
        get_or_not_found(User, data['employee'], label='Employee'),
        get_or_not_found(Section, section_id) if section_id else None,
    )


class SalaryListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def get(self, request):
        salaries = EmployeeSalary.objects.select_related('employee')
        period_id = request.query_params.get('period')
        if period_id:
            salaries = salaries.filter(period_id=period_id)
        return Response(EmployeeSalarySerializer(salaries, many=True).data)

    def post(self, request):
        serializer = SalaryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        employee, section = _resolve(data)
        salary = SalaryService().create_salary(employee, data['period'], data['base_salary'], section=section)
        return Response(EmployeeSalarySerializer(salary).data, status=status.HTTP_201_CREATED)


class SalaryAdvanceView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def post(self, request):
        serializer = SalaryPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        employee, section = _resolve(data)
        advance = SalaryService().give_advance(
            employee, data['period'], data['amount'],
            description=data['description'], section=section, given_by=request.user,
        )
        return Response(SalaryAdvanceSerializer(advance).data, status=status.HTTP_201_CREATED)


class SalaryBonusView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def post(self, request):
        serializer = SalaryPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if not data['reason']:
            raise ValidationError("A bonus needs a reason")
        employee, section = _resolve(data)
        bonus = SalaryService().give_bonus(
            employee, data['period'], data['amount'], data['reason'],
            section=section, given_by=request.user,
        )
        return Response(SalaryBonusSerializer(bonus).data, status=status.HTTP_201_CREATED)


class EmployeeSalarySummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        if not request.user.is_director and str(request.user.pk) != str(pk):
            return Response({'error': 'You can only view your own salary'}, status=status.HTTP_403_FORBIDDEN)
        employee = get_or_not_found(User, pk, label='Employee')
        return Response(SalaryService().get_employee_summary(employee, period=request.query_params.get('period')))


class PeriodSalarySummaryView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def get(self, request, pk):
        return Response(SalaryService().get_period_summary(pk))
