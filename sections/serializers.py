"""
Serializers for sections, batches, chick-outs and daily reports.

Input serializers only validate shape; lifecycle rules live in the
services they feed.
"""

from decimal import Decimal
from rest_framework import serializers

from .models import Batch, ChickOut, DailyBalance, Section, SectionDailyReport, SectionStatus


# =============================================================================
# SECTION SERIALIZERS
# =============================================================================

class SectionSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    active_period_name = serializers.CharField(source='active_period.name', read_only=True, allow_null=True)

    class Meta:
        model = Section
        fields = [
            'id', 'name', 'status', 'status_display', 'active_batch', 'active_period',
            'active_period_name', 'chick_arrival_date', 'expected_end_date', 'closed_at',
            'assigned_workers', 'is_archived', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class SectionCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)


class SectionUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    status = serializers.ChoiceField(choices=SectionStatus.choices, required=False)
    is_archived = serializers.BooleanField(required=False)


class AssignPeriodSerializer(serializers.Serializer):
    period = serializers.UUIDField()


# =============================================================================
# BATCH SERIALIZERS
# =============================================================================

class BatchSerializer(serializers.ModelSerializer):
    section_name = serializers.CharField(source='section.name', read_only=True)

    class Meta:
        model = Batch
        fields = [
            'id', 'name', 'section', 'section_name', 'period', 'started_at',
            'expected_end_at', 'ended_at', 'total_chicks_in', 'total_chicks_out',
            'status', 'created_by', 'created_at',
        ]
        read_only_fields = fields


class BatchCreateSerializer(serializers.Serializer):
    section = serializers.UUIDField()
    total_chicks_in = serializers.IntegerField(min_value=1)
    expected_end_at = serializers.DateTimeField(required=False)
    started_at = serializers.DateTimeField(required=False)
    name = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class DailyBalanceSerializer(serializers.ModelSerializer):

    class Meta:
        model = DailyBalance
        fields = [
            'id', 'batch', 'date', 'start_of_day_chicks', 'deaths',
            'chick_out', 'end_of_day_chicks', 'is_closed',
        ]
        read_only_fields = fields


# =============================================================================
# CHICK-OUT SERIALIZERS
# =============================================================================

class ChickOutSerializer(serializers.ModelSerializer):
    section_name = serializers.CharField(source='section.name', read_only=True)

    class Meta:
        model = ChickOut
        fields = [
            'id', 'section', 'section_name', 'batch', 'date', 'count', 'vehicle_number',
            'machine_number', 'is_final', 'status', 'total_weight_kg', 'waste_percent',
            'net_weight_kg', 'price_per_kg', 'total_revenue', 'created_by',
            'completed_at', 'completed_by', 'created_at',
        ]
        read_only_fields = fields


class ChickOutCreateSerializer(serializers.Serializer):
    section = serializers.UUIDField()
    count = serializers.IntegerField(min_value=1)
    vehicle_number = serializers.CharField(max_length=50)
    machine_number = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    is_final = serializers.BooleanField(required=False, default=False)
    date = serializers.DateTimeField(required=False)


class ChickOutCompleteSerializer(serializers.Serializer):
    total_weight_kg = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0'))
    waste_percent = serializers.DecimalField(max_digits=5, decimal_places=2)
    price_per_kg = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))


# =============================================================================
# DAILY REPORT SERIALIZERS
# =============================================================================

class MedicineSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    dose = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class SectionDailyReportSerializer(serializers.ModelSerializer):

    class Meta:
        model = SectionDailyReport
        fields = [
            'id', 'batch', 'date', 'deaths', 'avg_weight_kg', 'medicines',
            'water_litres', 'electricity_kwh', 'notes', 'created_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class DailyReportCreateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    deaths = serializers.IntegerField(min_value=0, required=False, default=0)
    avg_weight_kg = serializers.DecimalField(max_digits=6, decimal_places=3, min_value=Decimal('0'), required=False)
    medicines = MedicineSerializer(many=True, required=False, default=list)
    water_litres = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    electricity_kwh = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class DailyReportUpdateSerializer(serializers.Serializer):
    deaths = serializers.IntegerField(min_value=0, required=False)
    avg_weight_kg = serializers.DecimalField(max_digits=6, decimal_places=3, min_value=Decimal('0'), required=False)
    medicines = MedicineSerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
