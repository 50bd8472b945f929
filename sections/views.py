"""
Section ledger endpoints.

API Endpoints:
- /api/sections/ - List/create sections
- /api/sections/{id}/ - Retrieve/update a section
- /api/sections/{id}/period/ - Assign (POST) or unassign (DELETE) the active period
- /api/sections/{id}/batches/summary/ - Summaries of the section's batches
- /api/sections/reports/{id}/ - Update a daily report
- /api/batches/ - List/create batches
- /api/batches/{id}/ - Batch detail
- /api/batches/{id}/summary/ | timeline/ | verify/ | balances/
- /api/chick-outs/ - List/create chick-outs
- /api/chick-outs/{id}/complete/ - Weighbridge completion

Daily reports (/api/sections/{id}/reports/) and batch closing also post
expenses or check other ledgers, so they are served by the accounting app.
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsManagerOrDirector, ReadOnlyOrManager
from core.exceptions import get_or_not_found
from .filters import BatchFilter, ChickOutFilter
from .models import Batch, ChickOut, Section
from .serializers import (
    AssignPeriodSerializer,
    BatchCreateSerializer,
    BatchSerializer,
    ChickOutCompleteSerializer,
    ChickOutCreateSerializer,
    ChickOutSerializer,
    DailyBalanceSerializer,
    DailyReportUpdateSerializer,
    SectionCreateSerializer,
    SectionDailyReportSerializer,
    SectionSerializer,
    SectionUpdateSerializer,
)
from .services import (
    BatchService,
    BatchSummaryService,
    ChickOutService,
    DailyBalanceService,
    DailyReportService,
    SectionService,
)


# =============================================================================
# SECTION VIEWS
# =============================================================================

class SectionListCreateView(APIView):
    permission_classes = [ReadOnlyOrManager]

    def get(self, request):
        sections = Section.objects.select_related('active_period')
        if request.query_params.get('include_archived') != 'true':
            sections = sections.filter(is_archived=False)
        status_filter = request.query_params.get('status')
        if status_filter:
            sections = sections.filter(status=status_filter)
        return Response(SectionSerializer(sections.order_by('name'), many=True).data)

    def post(self, request):
        serializer = SectionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        section = SectionService().create_section(serializer.validated_data['name'])
        return Response(SectionSerializer(section).data, status=status.HTTP_201_CREATED)


class SectionDetailView(APIView):
    permission_classes = [ReadOnlyOrManager]

    def get(self, request, pk):
        return Response(SectionSerializer(get_or_not_found(Section, pk)).data)

    def patch(self, request, pk):
        serializer = SectionUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        section = SectionService().update_section(pk, **serializer.validated_data)
        return Response(SectionSerializer(section).data)


class SectionPeriodView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = AssignPeriodSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        section = SectionService().assign_period(pk, serializer.validated_data['period'])
        return Response(SectionSerializer(section).data)

    def delete(self, request, pk):
        section = SectionService().unassign_period(pk)
        return Response(SectionSerializer(section).data)


class DailyReportUpdateView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        serializer = DailyReportUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        report = DailyReportService().update_report(pk, changed_by=request.user, **serializer.validated_data)
        return Response(SectionDailyReportSerializer(report).data)


class SectionBatchSummariesView(APIView):
    """
    GET /api/sections/{id}/batches/summary/

    Summary of every batch the section has run, newest first.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BatchSummaryService().get_batch_summaries_by_section(pk))


# =============================================================================
# BATCH VIEWS
# =============================================================================

class BatchListCreateView(APIView):
    permission_classes = [ReadOnlyOrManager]
    filterset_class = BatchFilter

    def get(self, request):
        batches = DjangoFilterBackend().filter_queryset(
            request, Batch.objects.select_related('section'), self
        )
        return Response(BatchSerializer(batches.order_by('-started_at'), many=True).data)

    def post(self, request):
        serializer = BatchCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        section = get_or_not_found(Section, data.pop('section'))
        batch = BatchService().create_batch(section, created_by=request.user, **data)
        return Response(BatchSerializer(batch).data, status=status.HTTP_201_CREATED)


class BatchDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BatchSerializer(get_or_not_found(Batch, pk)).data)


class BatchSummaryView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BatchSummaryService().get_batch_summary(pk))


class BatchTimelineView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BatchSummaryService().get_batch_timeline(pk))


class BatchVerifyView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        return Response(BatchSummaryService().verify_totals(pk))


class BatchBalancesView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        batch = get_or_not_found(Batch, pk)
        balances = DailyBalanceService().get_balances_by_batch(batch)
        return Response(DailyBalanceSerializer(balances, many=True).data)


# =============================================================================
# CHICK-OUT VIEWS
# =============================================================================

class ChickOutListCreateView(APIView):
    permission_classes = [ReadOnlyOrManager]
    filterset_class = ChickOutFilter

    def get(self, request):
        chick_outs = DjangoFilterBackend().filter_queryset(
            request, ChickOut.objects.select_related('section'), self
        )
        return Response(ChickOutSerializer(chick_outs.order_by('-date'), many=True).data)

    def post(self, request):
        serializer = ChickOutCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        section = get_or_not_found(Section, data.pop('section'))
        chick_out = ChickOutService().create_chick_out(section, created_by=request.user, **data)
        return Response(ChickOutSerializer(chick_out).data, status=status.HTTP_201_CREATED)


class ChickOutCompleteView(APIView):
    permission_classes = [IsAuthenticated, IsManagerOrDirector]

    def post(self, request, pk):
        serializer = ChickOutCompleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        chick_out = get_or_not_found(ChickOut, pk)
        chick_out = ChickOutService().complete(
            chick_out, completed_by=request.user, **serializer.validated_data
        )
        return Response(ChickOutSerializer(chick_out).data)
