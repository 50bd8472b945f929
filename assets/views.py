"""
Asset and incident endpoints.

API Endpoints:
- /api/assets/ - List/register assets
- /api/assets/{id}/status/ - Change an asset's status
- /api/assets/incidents/ - List/report incidents (?section=&unresolved=true)
- /api/assets/incidents/{id}/resolve/ - Resolve an incident that needs no expense
- /api/assets/incidents/{id}/repair-expense/ - Post the repair cost of an incident
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsManagerOrDirector, ReadOnlyOrManager
from core.exceptions import get_or_not_found
from expenses.serializers import PeriodExpenseSerializer
from sections.models import Section
from .models import Asset, TechnicalIncident
from .serializers import (
    AssetCreateSerializer,
    AssetSerializer,
    AssetStatusSerializer,
    IncidentCreateSerializer,
    IncidentSerializer,
    RepairExpenseSerializer,
)
from .services import AssetService, IncidentService, RepairExpenseService


def _optional_section(section_id):
    return get_or_not_found(Section, section_id) if section_id else None


class AssetListCreateView(APIView):
    permission_classes = [ReadOnlyOrManager]

    def get(self, request):
        assets = Asset.objects.select_related('section')
        section_id = request.query_params.get('section')
        if section_id:
            assets = assets.filter(section_id=section_id)
        return Response(AssetSerializer(assets, many=True).data)

    def post(self, request):
        serializer = AssetCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        asset = AssetService().create_asset(
            name=data['name'],
            category=data['category'],
            section=_optional_section(data.get('section')),
            is_new_purchase=data['is_new_purchase'],
            purchase_cost=data.get('purchase_cost'),
            period=data.get('period'),
            created_by=request.user,
        )
        return Response(AssetSerializer(asset).data, status=status.HTTP_201_CREATED)


class AssetStatusView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = AssetStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        asset = AssetService().update_status(pk, serializer.validated_data['status'], changed_by=request.user)
        return Response(AssetSerializer(asset).data)


class IncidentListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        incidents = TechnicalIncident.objects.all()
        section_id = request.query_params.get('section')
        if section_id:
            incidents = incidents.filter(section_id=section_id)
        if request.query_params.get('unresolved') == 'true':
            incidents = incidents.unresolved()
        return Response(IncidentSerializer(incidents, many=True).data)

    def post(self, request):
        serializer = IncidentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        incident = IncidentService().create_incident(
            description=data['description'],
            asset=data.get('asset'),
            section=_optional_section(data.get('section')),
            requires_expense=data['requires_expense'],
            reported_by=request.user,
        )
        return Response(IncidentSerializer(incident).data, status=status.HTTP_201_CREATED)


class IncidentResolveView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        incident = IncidentService().resolve_incident(pk)
        return Response(IncidentSerializer(incident).data)


class RepairExpenseView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = RepairExpenseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        expense, incident = RepairExpenseService().create_repair_expense(
            pk, created_by=request.user, **serializer.validated_data
        )
        return Response({
            'expense': PeriodExpenseSerializer(expense).data,
            'incident': IncidentSerializer(incident).data,
        }, status=status.HTTP_201_CREATED)
