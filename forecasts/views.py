"""
Forecast endpoints. Estimates only; nothing here changes real figures.

API Endpoints:
- /api/forecast/prices/ - Set (POST, director) a forecast price
- /api/forecast/periods/{id}/price/ - Active period price (?section=)
- /api/forecast/sections/{id}/ - Section forecast
- /api/forecast/periods/{id}/ - Period forecast
- /api/forecast/batches/{id}/simulate/ - Partial sale what-if
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsDirector, IsManagerOrDirector
from core.exceptions import get_or_not_found
from periods.models import Period
from sections.models import Section
from .serializers import ForecastPriceCreateSerializer, ForecastPriceSerializer, SimulationSerializer
from .services import ForecastPriceService, ForecastService


class ForecastPriceCreateView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def post(self, request):
        serializer = ForecastPriceCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        section = get_or_not_found(Section, data['section']) if data.get('section') else None
        price = ForecastPriceService().set_initial_price(
            data['period'], data['price_per_kg'], section=section, created_by=request.user,
        )
        return Response(ForecastPriceSerializer(price).data, status=status.HTTP_201_CREATED)


class ActivePriceView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        period = get_or_not_found(Period, pk)
        section_id = request.query_params.get('section')
        section = get_or_not_found(Section, section_id) if section_id else None
        return Response({
            'period_id': period.id,
            'section_id': section.id if section else None,
            'price_per_kg': ForecastPriceService.get_active_price(period, section),
            'has_price_set': ForecastPriceService.has_price_set(period),
        })


class SectionForecastView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(ForecastService().get_section_forecast(pk))


class PeriodForecastView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(ForecastService().get_period_forecast(pk))


class PartialSaleSimulationView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = SimulationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response(ForecastService().simulate_partial_sale(pk, **serializer.validated_data))
