"""
Period endpoints.

- GET/POST /api/periods/
- GET/PATCH /api/periods/{id}/

Closing a period is served by the accounting app under
/api/periods/{id}/close/.
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsDirector
from .serializers import PeriodCreateSerializer, PeriodSerializer, PeriodUpdateSerializer
from .services import PeriodService


class PeriodListCreateView(APIView):

    def get_permissions(self):
        if self.request.method == 'POST':
            return [IsAuthenticated(), IsDirector()]
        return [IsAuthenticated()]

    def get(self, request):
        periods = PeriodService.list_periods(status=request.query_params.get('status'))
        return Response(PeriodSerializer(periods, many=True).data)

    def post(self, request):
        serializer = PeriodCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        period = PeriodService().create_period(created_by=request.user, **serializer.validated_data)
        return Response(PeriodSerializer(period).data, status=status.HTTP_201_CREATED)


class PeriodDetailView(APIView):

    def get_permissions(self):
        if self.request.method == 'PATCH':
            return [IsAuthenticated(), IsDirector()]
        return [IsAuthenticated()]

    def get(self, request, pk):
        return Response(PeriodSerializer(PeriodService.get_period(pk)).data)

    def patch(self, request, pk):
        serializer = PeriodUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        period = PeriodService().update_period(pk, **serializer.validated_data)
        return Response(PeriodSerializer(period).data)
