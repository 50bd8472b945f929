from decimal import Decimal
from rest_framework import serializers

from .models import ForecastPrice


class ForecastPriceSerializer(serializers.ModelSerializer):

    class Meta:
        model = ForecastPrice
        fields = [
            'id', 'period', 'section', 'price_per_kg', 'source', 'linked_chick_out',
            'is_active', 'created_by', 'created_at',
        ]
        read_only_fields = fields


class ForecastPriceCreateSerializer(serializers.Serializer):
    period = serializers.UUIDField()
    section = serializers.UUIDField(required=False, allow_null=True)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))


class SimulationSerializer(serializers.Serializer):
    sold_chicks = serializers.IntegerField(min_value=0)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
