"""
Feed delivery endpoints.

- GET/POST /api/feed/deliveries/ (?period=&section=)
- GET /api/feed/periods/{id}/total/
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import ReadOnlyOrManager
from core.exceptions import get_or_not_found
from periods.models import Period
from .serializers import FeedDeliveryCreateSerializer, FeedDeliverySerializer
from .services import FeedService


class FeedDeliveryView(APIView):
    permission_classes = [ReadOnlyOrManager]

    def get(self, request):
        deliveries = FeedService.get_deliveries(
            period=request.query_params.get('period') or None,
            section=request.query_params.get('section') or None,
        )
        return Response(FeedDeliverySerializer(deliveries, many=True).data)

    def post(self, request):
        serializer = FeedDeliveryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        delivery = FeedService().record_delivery(
            data.pop('section'),
            delivered_by=request.user,
            **data,
        )
        return Response(FeedDeliverySerializer(delivery).data, status=status.HTTP_201_CREATED)


class PeriodFeedTotalView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        period = get_or_not_found(Period, pk)
        return Response({'period_id': period.id, **FeedService.get_period_feed_total(period)})
