"""
Section, Batch & Chick Ledger Models

Handles:
- Sections (houses) and their operational status
- Batches (chick cohorts) from arrival to final sale
- Chick-outs: two-phase sale records (loading dock, then weighbridge/invoice)
- Daily balances: per-batch, per-day chick count snapshots
- Daily reports filed by section workers, with an audit trail of edits
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Q
import uuid


# =============================================================================
# STATUS CHOICES
# =============================================================================

class SectionStatus(models.TextChoices):
    EMPTY = 'EMPTY', 'Empty'
    PREPARING = 'PREPARING', 'Preparing'
    ACTIVE = 'ACTIVE', 'Active'
    PARTIAL_OUT = 'PARTIAL_OUT', 'Partially Sold'
    CLEANING = 'CLEANING', 'Cleaning'


class BatchStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    PARTIAL_OUT = 'PARTIAL_OUT', 'Partially Sold'
    CLOSED = 'CLOSED', 'Closed'


OPEN_BATCH_STATUSES = (BatchStatus.ACTIVE, BatchStatus.PARTIAL_OUT)


class ChickOutStatus(models.TextChoices):
    INCOMPLETE = 'INCOMPLETE', 'Incomplete'
    COMPLETE = 'COMPLETE', 'Complete'


# =============================================================================
# SECTION MODEL
# =============================================================================

class Section(models.Model):
    """
    A poultry house. Outlives the batches it hosts.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, unique=True)
    status = models.CharField(
        max_length=20,
        choices=SectionStatus.choices,
        default=SectionStatus.EMPTY,
        db_index=True
    )

    active_batch = models.ForeignKey(
        'sections.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Open batch currently housed here"
    )
    active_period = models.ForeignKey(
        'periods.Period',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='active_sections',
        help_text="Period new batches and costs are booked against"
    )
    periods = models.ManyToManyField(
        'periods.Period',
        blank=True,
        related_name='sections',
        help_text="Every period this section has been assigned to"
    )

    chick_arrival_date = models.DateTimeField(null=True, blank=True)
    expected_end_date = models.DateTimeField(null=True, blank=True)
    closed_at = models.DateTimeField(null=True, blank=True)

    assigned_workers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        blank=True,
        related_name='assigned_sections'
    )
    is_archived = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'sections'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.status})"


# =============================================================================
# BATCH MODEL
# =============================================================================

class Batch(models.Model):
    """
    A cohort of chicks occupying one section from arrival to full sale.

    ``total_chicks_out`` is the operational counter: it grows with every
    chick-out as soon as it is loaded, whether or not the sale has been
    completed financially. Financial reports count only COMPLETE chick-outs.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=100, blank=True)
    section = models.ForeignKey(
        Section,
        on_delete=models.PROTECT,
        related_name='batches'
    )
    period = models.ForeignKey(
        'periods.Period',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='batches',
        help_text="Copied from the section's active period at creation"
    )

    started_at = models.DateTimeField()
    expected_end_at = models.DateTimeField()
    ended_at = models.DateTimeField(null=True, blank=True)

    total_chicks_in = models.PositiveIntegerField(help_text="Chicks placed on arrival")
    total_chicks_out = models.PositiveIntegerField(
        default=0,
        help_text="Chicks loaded out by any chick-out, complete or not"
    )

    status = models.CharField(
        max_length=20,
        choices=BatchStatus.choices,
        default=BatchStatus.ACTIVE,
        db_index=True
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='created_batches',
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'batches'
        ordering = ['-started_at']
        constraints = [
            models.UniqueConstraint(
                fields=['section'],
                condition=Q(status__in=['ACTIVE', 'PARTIAL_OUT']),
                name='one_open_batch_per_section',
            ),
        ]
        indexes = [
            models.Index(fields=['period', 'status'], name='batch_period_status_idx'),
        ]

    def __str__(self):
        return f"{self.name or self.id} in {self.section.name} ({self.status})"

    @property
    def is_open(self):
        return self.status in OPEN_BATCH_STATUSES


# =============================================================================
# CHICK-OUT MODEL
# =============================================================================

class ChickOut(models.Model):
    """
    Chicks physically removed from a section.

    Created INCOMPLETE with operational fields only (count, vehicle). The
    financial fields stay null until ``ChickOutService.complete`` fills them:
        net_weight_kg = total_weight_kg * (1 - waste_percent / 100)
        total_revenue = net_weight_kg * price_per_kg
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    section = models.ForeignKey(Section, on_delete=models.PROTECT, related_name='chick_outs')
    batch = models.ForeignKey(Batch, on_delete=models.PROTECT, related_name='chick_outs')

    date = models.DateTimeField()
    count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    vehicle_number = models.CharField(max_length=50)
    machine_number = models.CharField(max_length=50, blank=True)
    is_final = models.BooleanField(default=False)

    status = models.CharField(
        max_length=20,
        choices=ChickOutStatus.choices,
        default=ChickOutStatus.INCOMPLETE,
        db_index=True
    )

    # Financial phase
    total_weight_kg = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))]
    )
    waste_percent = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]
    )
    net_weight_kg = models.DecimalField(max_digits=12, decimal_places=3, null=True, blank=True)
    price_per_kg = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    total_revenue = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='created_chick_outs',
        null=True,
        blank=True
    )
    completed_at = models.DateTimeField(null=True, blank=True)
    completed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='completed_chick_outs',
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'chick_outs'
        ordering = ['-date']
        indexes = [
            models.Index(fields=['batch', 'status'], name='chickout_batch_status_idx'),
            models.Index(fields=['section', 'date'], name='chickout_section_date_idx'),
        ]

    def __str__(self):
        return f"{self.count} chicks out of {self.section.name} ({self.status})"

    @property
    def is_complete(self):
        return self.status == ChickOutStatus.COMPLETE


# =============================================================================
# DAILY BALANCE MODEL
# =============================================================================

class DailyBalance(models.Model):
    """
    Per-day chick count snapshot for a batch.

    end_of_day_chicks = max(0, start_of_day_chicks - deaths - chick_out)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='daily_balances')
    date = models.DateField(help_text="UTC calendar day")

    start_of_day_chicks = models.PositiveIntegerField()
    deaths = models.PositiveIntegerField(default=0)
    chick_out = models.PositiveIntegerField(default=0)
    end_of_day_chicks = models.PositiveIntegerField()
    is_closed = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'daily_balances'
        ordering = ['date']
        constraints = [
            models.UniqueConstraint(fields=['batch', 'date'], name='one_balance_per_batch_day'),
        ]

    def __str__(self):
        return f"{self.batch_id} {self.date}: {self.start_of_day_chicks} -> {self.end_of_day_chicks}"

    def compute_end_of_day(self):
        return max(0, self.start_of_day_chicks - self.deaths - self.chick_out)


# =============================================================================
# DAILY REPORTS
# =============================================================================

class SectionDailyReport(models.Model):
    """
    Daily report filed by section workers: mortality, average live weight,
    medicines given and utility readings.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    batch = models.ForeignKey(Batch, on_delete=models.CASCADE, related_name='daily_reports')
    date = models.DateField()

    deaths = models.PositiveIntegerField(default=0)
    avg_weight_kg = models.DecimalField(
        max_digits=6,
        decimal_places=3,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0'))],
        help_text="Average live weight per bird (kg)"
    )
    medicines = models.JSONField(
        default=list,
        blank=True,
        help_text="List of {'name': ..., 'dose': ...}"
    )
    water_litres = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    electricity_kwh = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='daily_reports',
        null=True,
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'section_daily_reports'
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['batch', 'date'], name='one_report_per_batch_day'),
        ]

    def __str__(self):
        return f"Report {self.date} for batch {self.batch_id}"


class SectionReportAudit(models.Model):
    """Previous and new values of every edit to a daily report."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    report = models.ForeignKey(SectionDailyReport, on_delete=models.CASCADE, related_name='audits')
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='report_audits',
        null=True,
        blank=True
    )
    previous_values = models.JSONField(default=dict)
    new_values = models.JSONField(default=dict)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'section_report_audits'
        ordering = ['-changed_at']
