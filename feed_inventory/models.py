"""
Feed Inventory Models

Feed is expensed when it arrives at a section, not when it is eaten.
Each delivery carries the FEED expense it posted to the period ledger.

Models:
    - FeedDelivery: one delivery of feed to a section
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class FeedCategory(models.TextChoices):
    BROILER_STARTER = 'BROILER_STARTER', 'Broiler Starter (0-3 weeks)'
    BROILER_GROWER = 'BROILER_GROWER', 'Broiler Grower'
    BROILER_FINISHER = 'BROILER_FINISHER', 'Broiler Finisher (4+ weeks)'
    SUPPLEMENT = 'SUPPLEMENT', 'Supplement/Premix'
    OTHER = 'OTHER', 'Other'


class FeedDelivery(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    section = models.ForeignKey('sections.Section', on_delete=models.PROTECT, related_name='feed_deliveries')
    batch = models.ForeignKey(
        'sections.Batch',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='feed_deliveries'
    )
    period = models.ForeignKey('periods.Period', on_delete=models.PROTECT, related_name='feed_deliveries')

    feed_type = models.CharField(max_length=20, choices=FeedCategory.choices, default=FeedCategory.OTHER)
    quantity_kg = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.10'))]
    )
    unit_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Price per kg"
    )
    total_cost = models.DecimalField(max_digits=18, decimal_places=2)
    supplier = models.CharField(max_length=200, blank=True)
    delivered_at = models.DateTimeField(default=timezone.now)
    delivered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    expense = models.OneToOneField(
        'expenses.PeriodExpense',
        on_delete=models.PROTECT,
        related_name='feed_delivery'
    )
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'feed_deliveries'
        ordering = ['-delivered_at']
        verbose_name_plural = 'Feed deliveries'
        indexes = [
            models.Index(fields=['section', '-delivered_at'], name='feed_section_delivered_idx'),
            models.Index(fields=['period'], name='feed_period_idx'),
        ]

    def __str__(self):
        return f"{self.quantity_kg} kg {self.get_feed_type_display()} -> {self.section}"
