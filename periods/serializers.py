from rest_framework import serializers

from .models import Period


class PeriodSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    section_count = serializers.SerializerMethodField()

    class Meta:
        model = Period
        fields = [
            'id', 'name', 'status', 'status_display', 'start_date', 'end_date',
            'notes', 'section_count', 'created_by', 'closed_at', 'closed_by',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_section_count(self, obj):
        return obj.sections.count()


class PeriodCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    start_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class PeriodUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, required=False)
    start_date = serializers.DateField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
