"""
Forecast Models

Forecast prices feed the what-if estimates only. They never change the
price recorded on a real chick-out.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q


class ForecastPriceSource(models.TextChoices):
    MANUAL_INITIAL = 'MANUAL_INITIAL', 'Set by director'
    LAST_REAL_SALE = 'LAST_REAL_SALE', 'Last completed chick-out'


class ForecastStatus(models.TextChoices):
    SUCCESS = 'SUCCESS', 'Success'
    BLOCKED = 'BLOCKED', 'Blocked'


class BlockedReason(models.TextChoices):
    NO_ACTIVE_PERIOD = 'NO_ACTIVE_PERIOD', 'Section is not assigned to an active period'
    NO_BATCH = 'NO_BATCH', 'No open batch'
    PRICE_NOT_SET = 'PRICE_NOT_SET', 'Forecast price not set'
    INSUFFICIENT_DATA = 'INSUFFICIENT_DATA', 'Not enough data'


class ForecastPrice(models.Model):
    """
    Price per kg used by the forecast.

    section=None is the period-wide default. At most one price is active
    per (period, section) and one period-wide default is active per period.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    period = models.ForeignKey('periods.Period', on_delete=models.CASCADE, related_name='forecast_prices')
    section = models.ForeignKey(
        'sections.Section',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='forecast_prices'
    )
    price_per_kg = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    source = models.CharField(max_length=20, choices=ForecastPriceSource.choices)
    linked_chick_out = models.ForeignKey(
        'sections.ChickOut',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'forecast_prices'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['period', 'section', 'is_active'], name='forecast_price_scope_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['period', 'section'],
                condition=Q(is_active=True),
                name='one_active_price_per_section',
            ),
            models.UniqueConstraint(
                fields=['period'],
                condition=Q(is_active=True, section__isnull=True),
                name='one_active_default_price_per_period',
            ),
        ]

    def __str__(self):
        scope = self.section.name if self.section_id else 'default'
        return f"{self.period} / {scope}: {self.price_per_kg}"
