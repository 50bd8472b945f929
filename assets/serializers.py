from decimal import Decimal
from rest_framework import serializers

from .models import Asset, AssetCategory, AssetStatus, TechnicalIncident


class AssetSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    section_name = serializers.CharField(source='section.name', read_only=True, allow_null=True)

    class Meta:
        model = Asset
        fields = [
            'id', 'name', 'category', 'category_display', 'section', 'section_name', 'status',
            'is_new_purchase', 'purchase_cost', 'purchase_period', 'created_by', 'created_at',
        ]
        read_only_fields = fields


class AssetCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    category = serializers.ChoiceField(choices=AssetCategory.choices, default=AssetCategory.OTHER)
    section = serializers.UUIDField(required=False, allow_null=True)
    is_new_purchase = serializers.BooleanField(default=False)
    purchase_cost = serializers.DecimalField(max_digits=16, decimal_places=2, required=False, allow_null=True)
    period = serializers.UUIDField(required=False, allow_null=True)


class AssetStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AssetStatus.choices)


class IncidentSerializer(serializers.ModelSerializer):
    is_unresolved = serializers.SerializerMethodField()

    class Meta:
        model = TechnicalIncident
        fields = [
            'id', 'asset', 'section', 'reported_by', 'description', 'requires_expense',
            'resolved', 'is_unresolved', 'linked_period', 'created_at',
        ]
        read_only_fields = fields

    def get_is_unresolved(self, obj):
        return obj.requires_expense and not obj.expenses.exists()


class IncidentCreateSerializer(serializers.Serializer):
    description = serializers.CharField(min_length=5)
    asset = serializers.UUIDField(required=False, allow_null=True)
    section = serializers.UUIDField(required=False, allow_null=True)
    requires_expense = serializers.BooleanField(default=False)


class RepairExpenseSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=16, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(min_length=5)
    period = serializers.UUIDField(required=False, allow_null=True)
