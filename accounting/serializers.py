from rest_framework import serializers


class BatchCloseSerializer(serializers.Serializer):
    ended_at = serializers.DateTimeField(required=False)
