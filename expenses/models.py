"""
Period Expense Ledger Models

Every cost on the farm lands in one flat, append-only ledger:

TRACKED EXPENSE CATEGORIES:
===========================
1. ELECTRICITY / WATER - Utility usage from daily reports
2. FEED - Feed deliveries
3. MEDICINE - Medication and vaccines
4. LABOR_FIXED - Salaries, advances and bonuses
5. LABOR_DAILY - Casual day labour
6. MAINTENANCE - Building and equipment upkeep
7. TRANSPORT - Deliveries and market trips
8. ASSET_PURCHASE / ASSET_REPAIR - Equipment bought or repaired
9. OTHER - Anything else

Each expense belongs to a period and may be tagged to a section, batch,
daily report, incident or asset. Rows are only ever created; reports
aggregate them with grouped sums.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.db import models
from django.core.validators import MinValueValidator


class ExpenseCategory(models.TextChoices):
    """Expense categories used by every cost-producing workflow."""
    ELECTRICITY = 'ELECTRICITY', 'Electricity'
    WATER = 'WATER', 'Water'
    FEED = 'FEED', 'Feed'
    MEDICINE = 'MEDICINE', 'Medicine'
    LABOR_FIXED = 'LABOR_FIXED', 'Labor (Fixed Salary)'
    LABOR_DAILY = 'LABOR_DAILY', 'Labor (Daily)'
    MAINTENANCE = 'MAINTENANCE', 'Maintenance'
    TRANSPORT = 'TRANSPORT', 'Transport'
    ASSET_PURCHASE = 'ASSET_PURCHASE', 'Asset Purchase'
    ASSET_REPAIR = 'ASSET_REPAIR', 'Asset Repair'
    OTHER = 'OTHER', 'Other'


class ExpenseSource(models.TextChoices):
    MANUAL = 'MANUAL', 'Manual Entry'
    DAILY_REPORT = 'DAILY_REPORT', 'Daily Report'


class PeriodExpense(models.Model):
    """
    Single costed line item attributed to a period.

    Examples:
    - Feed delivery: FEED, section-tagged
    - Salary advance: LABOR_FIXED, period-level
    - Generator repair: ASSET_REPAIR, linked to the incident it resolves
    - Water usage: WATER, source DAILY_REPORT, quantity in litres
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    period = models.ForeignKey(
        'periods.Period',
        on_delete=models.PROTECT,
        related_name='expenses'
    )
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses'
    )
    batch = models.ForeignKey(
        'sections.Batch',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses'
    )

    category = models.CharField(
        max_length=20,
        choices=ExpenseCategory.choices,
        db_index=True
    )
    amount = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        null=True,
        blank=True,
        help_text="Units consumed (kg, litres, kWh...)"
    )
    unit_cost = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        null=True,
        blank=True
    )
    description = models.CharField(max_length=500, blank=True)
    expense_date = models.DateField()

    source = models.CharField(
        max_length=20,
        choices=ExpenseSource.choices,
        default=ExpenseSource.MANUAL
    )
    daily_report = models.ForeignKey(
        'sections.SectionDailyReport',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses'
    )
    incident = models.ForeignKey(
        'assets.TechnicalIncident',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses'
    )
    asset = models.ForeignKey(
        'assets.Asset',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='expenses'
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='period_expenses'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'period_expenses'
        ordering = ['-expense_date', '-created_at']
        indexes = [
            models.Index(fields=['period', 'category'], name='expense_period_category_idx'),
            models.Index(fields=['period', 'section'], name='expense_period_section_idx'),
        ]

    def __str__(self):
        return f"{self.get_category_display()} {self.amount} ({self.expense_date})"
