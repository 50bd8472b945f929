from decimal import Decimal
from rest_framework import serializers

from .models import EmployeeSalary, SalaryAdvance, SalaryBonus


class EmployeeSalarySerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.get_full_name', read_only=True)

    class Meta:
        model = EmployeeSalary
        fields = ['id', 'employee', 'employee_name', 'period', 'section', 'base_salary', 'finalized_at', 'created_at']
        read_only_fields = fields


class SalaryAdvanceSerializer(serializers.ModelSerializer):

    class Meta:
        model = SalaryAdvance
        fields = ['id', 'employee', 'period', 'section', 'amount', 'description', 'expense', 'given_by', 'created_at']
        read_only_fields = fields


class SalaryBonusSerializer(serializers.ModelSerializer):

    class Meta:
        model = SalaryBonus
        fields = ['id', 'employee', 'period', 'section', 'amount', 'reason', 'expense', 'given_by', 'created_at']
        read_only_fields = fields


class SalaryCreateSerializer(serializers.Serializer):
    employee = serializers.UUIDField()
    period = serializers.UUIDField()
    base_salary = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))
    section = serializers.UUIDField(required=False, allow_null=True)


class SalaryPaymentSerializer(serializers.Serializer):
    employee = serializers.UUIDField()
    period = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    section = serializers.UUIDField(required=False, allow_null=True)
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    reason = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
