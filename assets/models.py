"""
Asset & Technical Incident Models

Equipment on the farm (motors, meters, generators) and the breakdowns
reported against it. An incident flagged as cost-bearing stays
*unresolved* until a repair expense is posted for it, and unresolved
incidents block batch and period closing.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models


class AssetCategory(models.TextChoices):
    MOTOR = 'MOTOR', 'Motor'
    COUNTER = 'COUNTER', 'Electricity Meter'
    ENGINE = 'ENGINE', 'Engine / Generator'
    OTHER = 'OTHER', 'Other'


class AssetStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    BROKEN = 'BROKEN', 'Broken'
    REPAIRED = 'REPAIRED', 'Repaired'
    DECOMMISSIONED = 'DECOMMISSIONED', 'Decommissioned'


class Asset(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=AssetCategory.choices, default=AssetCategory.OTHER)
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assets'
    )
    status = models.CharField(
        max_length=20,
        choices=AssetStatus.choices,
        default=AssetStatus.ACTIVE,
        db_index=True
    )

    is_new_purchase = models.BooleanField(
        default=False,
        help_text="Bought during a period (posts an ASSET_PURCHASE expense)"
    )
    purchase_cost = models.DecimalField(
        max_digits=16,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    purchase_period = models.ForeignKey(
        'periods.Period',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='purchased_assets'
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='created_assets'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'assets'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.status})"


class AssetHistory(models.Model):
    """Status changes of an asset."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='history')
    old_status = models.CharField(max_length=20, choices=AssetStatus.choices)
    new_status = models.CharField(max_length=20, choices=AssetStatus.choices)
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='asset_changes'
    )
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'asset_history'
        ordering = ['-changed_at']


class TechnicalIncidentQuerySet(models.QuerySet):

    def unresolved(self):
        """Cost-bearing incidents that have no repair expense yet."""
        return self.filter(requires_expense=True, expenses__isnull=True).distinct()


class TechnicalIncident(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    asset = models.ForeignKey(
        Asset,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='incidents'
    )
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='incidents'
    )
    reported_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='reported_incidents'
    )
    description = models.TextField(validators=[MinLengthValidator(5)])
    requires_expense = models.BooleanField(default=False)
    resolved = models.BooleanField(default=False, db_index=True)
    linked_period = models.ForeignKey(
        'periods.Period',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='incidents'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TechnicalIncidentQuerySet.as_manager()

    class Meta:
        db_table = 'technical_incidents'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['section', 'resolved'], name='incident_section_resolved_idx'),
        ]

    def __str__(self):
        return f"Incident on {self.asset or self.section}: {self.description[:40]}"

    @property
    def repair_expense(self):
        return self.expenses.filter(category='ASSET_REPAIR').first()
