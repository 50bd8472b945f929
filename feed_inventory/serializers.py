from decimal import Decimal
from rest_framework import serializers

from .models import FeedCategory, FeedDelivery


class FeedDeliverySerializer(serializers.ModelSerializer):
    feed_type_display = serializers.CharField(source='get_feed_type_display', read_only=True)
    section_name = serializers.CharField(source='section.name', read_only=True)

    class Meta:
        model = FeedDelivery
        fields = [
            'id', 'section', 'section_name', 'batch', 'period', 'feed_type', 'feed_type_display',
            'quantity_kg', 'unit_price', 'total_cost', 'supplier', 'delivered_at',
            'delivered_by', 'expense', 'notes', 'created_at',
        ]
        read_only_fields = fields


class FeedDeliveryCreateSerializer(serializers.Serializer):
    section = serializers.UUIDField()
    quantity_kg = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.10'))
    unit_price = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))
    feed_type = serializers.ChoiceField(choices=FeedCategory.choices, default=FeedCategory.OTHER)
    supplier = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    delivered_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
