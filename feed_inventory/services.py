"""
Feed delivery service.

A delivery and its FEED expense are written in one transaction: a
delivery never exists without the cost it posted.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict
import logging

from django.db import models, transaction
from django.db.models import Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher, system_section_topic
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService, money_sum
from feed_inventory.models import FeedCategory, FeedDelivery
from sections.models import Section

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


class FeedService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()
        self.expenses = PeriodExpenseService(publisher=self.publisher)

    @transaction.atomic
    def record_delivery(
        self,
        section,
        quantity_kg,
        unit_price,
        feed_type=FeedCategory.OTHER,
        supplier='',
        delivered_at=None,
        delivered_by=None,
        notes='',
    ) -> FeedDelivery:
        """
        Record feed arriving at a section and post its FEED expense.

        The period is the section's active period; the batch is whatever
        batch the section is currently running, if any.

        Raises:
            ValidationError: quantity or price out of range
            InvalidState: section has no active period, or it is CLOSED
        """
        section = get_or_not_found(Section, section)
        quantity_kg = Decimal(str(quantity_kg))
        unit_price = Decimal(str(unit_price))
        if quantity_kg <= 0:
            raise ValidationError("quantity_kg must be greater than zero")
        if unit_price < 0:
            raise ValidationError("unit_price cannot be negative")

        if section.active_period_id is None:
            raise InvalidState(
                f"Section {section.name} has no active period",
                reason=Reason.NO_ACTIVE_PERIOD,
                details={'section_id': str(section.id)},
            )

        delivered_at = delivered_at or timezone.now()
        total_cost = (quantity_kg * unit_price).quantize(CENT, rounding=ROUND_HALF_UP)

        expense = self.expenses.add_expense(
            period=section.active_period,
            category=ExpenseCategory.FEED,
            amount=total_cost,
            description=f"Feed delivery: {quantity_kg} kg x {unit_price}",
            expense_date=timezone.localdate(delivered_at) if timezone.is_aware(delivered_at) else delivered_at.date(),
            section=section,
            batch=section.active_batch,
            quantity=quantity_kg,
            unit_cost=unit_price,
            created_by=delivered_by,
        )
        delivery = FeedDelivery.objects.create(
            section=section,
            batch=section.active_batch,
            period=section.active_period,
            feed_type=feed_type,
            quantity_kg=quantity_kg,
            unit_price=unit_price,
            total_cost=total_cost,
            supplier=supplier or '',
            delivered_at=delivered_at,
            delivered_by=delivered_by,
            expense=expense,
            notes=notes or '',
        )

        logger.info(f"Feed delivery recorded for {section.name}: {quantity_kg} kg, {total_cost}")
        payload = {
            'delivery_id': delivery.id,
            'section_id': section.id,
            'period_id': delivery.period_id,
            'quantity_kg': quantity_kg,
            'total_cost': total_cost,
            'delivered_at': delivered_at,
        }
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'feed_delivery_recorded', payload)
        self.publisher.publish(system_section_topic(section.id), 'feed_delivery_recorded', payload)
        return delivery

    @staticmethod
    def get_deliveries(period=None, section=None):
        queryset = FeedDelivery.objects.select_related('section', 'delivered_by')
        if period is not None:
            queryset = queryset.filter(period=period)
        if section is not None:
            queryset = queryset.filter(section=section)
        return queryset.order_by('-delivered_at')

    @staticmethod
    def get_period_feed_total(period) -> Dict[str, Any]:
        totals = FeedDelivery.objects.filter(period=period).aggregate(
            total_kg=Coalesce(
                Sum('quantity_kg'),
                models.Value(Decimal('0.00')),
                output_field=models.DecimalField(max_digits=18, decimal_places=2),
            ),
            total_cost=money_sum('total_cost'),
        )
        return {'total_kg': totals['total_kg'], 'total_cost': totals['total_cost']}
