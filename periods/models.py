"""
Accounting Period Models

A Period is the accounting window (usually one growing season) inside which
batches run and costs and revenues are tallied. Periods move from ACTIVE to
CLOSED exactly once. Several periods may be ACTIVE at the same time.
"""

from django.conf import settings
from django.db import models
import uuid


class PeriodStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    CLOSED = 'CLOSED', 'Closed'


class Period(models.Model):
    """
    Accounting window that owns batches and expenses by reference.

    Sections are linked through ``Section.periods`` (reverse name
    ``sections``).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    name = models.CharField(max_length=200)
    status = models.CharField(
        max_length=10,
        choices=PeriodStatus.choices,
        default=PeriodStatus.ACTIVE,
        db_index=True
    )
    start_date = models.DateField(help_text="First day costs may be posted to")
    end_date = models.DateField(
        null=True,
        blank=True,
        help_text="Set when the period is closed"
    )
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='created_periods',
        null=True,
        blank=True
    )
    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='closed_periods',
        null=True,
        blank=True
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'periods'
        ordering = ['-start_date', '-created_at']
        indexes = [
            models.Index(fields=['status', 'start_date'], name='period_status_start_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"

    @property
    def is_active(self):
        return self.status == PeriodStatus.ACTIVE
