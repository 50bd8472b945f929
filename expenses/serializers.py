"""
Serializers for the period expense ledger.
"""

from decimal import Decimal
from rest_framework import serializers

from .models import ExpenseCategory, PeriodExpense


class PeriodExpenseSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    section_name = serializers.CharField(source='section.name', read_only=True, allow_null=True)

    class Meta:
        model = PeriodExpense
        fields = [
            'id', 'period', 'section', 'section_name', 'batch', 'category', 'category_display',
            'amount', 'quantity', 'unit_cost', 'description', 'expense_date', 'source',
            'daily_report', 'incident', 'asset', 'created_by', 'created_at',
        ]
        read_only_fields = fields


class ExpenseCreateSerializer(serializers.Serializer):
    period = serializers.UUIDField()
    category = serializers.ChoiceField(choices=ExpenseCategory.choices)
    amount = serializers.DecimalField(max_digits=16, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    expense_date = serializers.DateField(required=False)
    section = serializers.UUIDField(required=False, allow_null=True)
    quantity = serializers.DecimalField(max_digits=12, decimal_places=3, required=False, allow_null=True)
    unit_cost = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)


class UtilityUsageSerializer(serializers.Serializer):
    section = serializers.UUIDField()
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    expense_date = serializers.DateField(required=False)
