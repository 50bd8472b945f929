"""
Accounting endpoints: daily report filing, closing and period reports.

API Endpoints:
- /api/sections/{id}/reports/ - List (GET) or file (POST) daily reports
- /api/batches/{id}/close/ - Close a batch
- /api/periods/{id}/close/ - Close a period (director)
- /api/periods/{id}/unfinished/ - What still blocks closing
- /api/reports/periods/{id}/revenue/ | pl/ | kpi/ | cost-breakdown/ | sections-pl/
- /api/reports/sections/{id}/pl/ (?period=)
"""

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsDirector, IsManagerOrDirector
from core.exceptions import get_or_not_found
from expenses.serializers import PeriodExpenseSerializer
from periods.serializers import PeriodSerializer
from sections.models import Section
from sections.serializers import BatchSerializer, DailyReportCreateSerializer, SectionDailyReportSerializer
from sections.services import DailyReportService
from .serializers import BatchCloseSerializer
from .services import (
    BatchClosingService,
    CostBreakdownService,
    DailyReportWorkflow,
    KPIService,
    PeriodClosingService,
    ProfitLossService,
    RevenueService,
    SectionPLService,
)


# =============================================================================
# DAILY REPORTS
# =============================================================================

class SectionReportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        section = get_or_not_found(Section, pk)
        reports = DailyReportService().get_reports_by_section(section)
        return Response(SectionDailyReportSerializer(reports, many=True).data)

    def post(self, request, pk):
        serializer = DailyReportCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report, posted = DailyReportWorkflow().file_report(
            pk, created_by=request.user, **serializer.validated_data
        )
        data = SectionDailyReportSerializer(report).data
        data['utility_expenses'] = PeriodExpenseSerializer(posted, many=True).data
        return Response(data, status=status.HTTP_201_CREATED)


# =============================================================================
# CLOSING
# =============================================================================

class BatchCloseView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = BatchCloseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        batch = BatchClosingService().close_batch(pk, **serializer.validated_data)
        return Response(BatchSerializer(batch).data)


class PeriodCloseView(APIView):
    permission_classes = [IsAuthenticated, IsDirector]

    def post(self, request, pk):
        period = PeriodClosingService().close_period(pk, closed_by=request.user)
        return Response(PeriodSerializer(period).data)


class PeriodUnfinishedView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(PeriodClosingService.has_unfinished_operations(pk))


# =============================================================================
# REPORTS
# =============================================================================

class PeriodRevenueView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(RevenueService().get_revenue_aggregation(pk))


class PeriodProfitLossView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(ProfitLossService().get_period_pl(pk))


class PeriodKPIView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(KPIService().get_period_kpi(pk))


class PeriodCostBreakdownView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(CostBreakdownService().get_cost_breakdown(pk))


class PeriodSectionsPLView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        return Response(SectionPLService().get_all_sections_pl(pk))


class SectionPLView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def get(self, request, pk):
        period = request.query_params.get('period') or None
        return Response(SectionPLService().get_section_pl(pk, period=period))
