"""
Forecast price management.

Lookup order for a section: its own active price, then the period-wide
default.
"""

from decimal import Decimal
from typing import Optional
import logging

from django.db import transaction

from core.exceptions import InvalidState, Reason, ValidationError, get_or_not_found
from core.realtime import SYSTEM_PERIODS_TOPIC, get_event_publisher
from forecasts.models import ForecastPrice, ForecastPriceSource
from periods.models import Period, PeriodStatus
from sections.models import ChickOutStatus

logger = logging.getLogger(__name__)


class ForecastPriceService:

    def __init__(self, publisher=None):
        self.publisher = publisher or get_event_publisher()

    @transaction.atomic
    def set_initial_price(self, period, price_per_kg, section=None, created_by=None) -> ForecastPrice:
        """Replace the active price for the period (or one of its sections)."""
        period = get_or_not_found(Period, period)
        price_per_kg = Decimal(str(price_per_kg))
        if price_per_kg <= 0:
            raise ValidationError("price_per_kg must be greater than zero")
        if period.status == PeriodStatus.CLOSED:
            raise InvalidState(
                f"Period {period.name} is closed",
                reason=Reason.PERIOD_CLOSED,
                details={'period_id': str(period.id)},
            )
        return self._replace(
            period, section, price_per_kg, ForecastPriceSource.MANUAL_INITIAL, created_by=created_by,
        )

    @transaction.atomic
    def update_from_chick_out(self, chick_out) -> Optional[ForecastPrice]:
        """
        Adopt a completed sale's price for its section. Returns None when
        the chick-out carries no usable price or its batch has no period.
        """
        if chick_out.status != ChickOutStatus.COMPLETE or not chick_out.price_per_kg:
            return None
        batch = chick_out.batch
        if batch.period_id is None:
            return None
        return self._replace(
            batch.period,
            chick_out.section,
            chick_out.price_per_kg,
            ForecastPriceSource.LAST_REAL_SALE,
            created_by=chick_out.completed_by,
            linked_chick_out=chick_out,
        )

    def _replace(self, period, section, price_per_kg, source, created_by=None, linked_chick_out=None):
        ForecastPrice.objects.filter(
            period=period,
            section=section,
            is_active=True,
        ).update(is_active=False)

        price = ForecastPrice.objects.create(
            period=period,
            section=section,
            price_per_kg=price_per_kg,
            source=source,
            linked_chick_out=linked_chick_out,
            is_active=True,
            created_by=created_by,
        )

        scope = section.name if section is not None else 'period default'
        logger.info(f"Forecast price for {period.name} ({scope}) set to {price_per_kg} from {source}")
        self.publisher.publish(SYSTEM_PERIODS_TOPIC, 'forecast_price_set', {
            'period_id': period.id,
            'section_id': section.id if section is not None else None,
            'price_per_kg': price_per_kg,
            'source': source,
        })
        return price

    @staticmethod
    def get_active_price(period, section=None) -> Optional[Decimal]:
        if section is not None:
            price = (
                ForecastPrice.objects
                .filter(period=period, section=section, is_active=True)
                .order_by('-created_at')
                .first()
            )
            if price is not None:
                return price.price_per_kg

        price = (
            ForecastPrice.objects
            .filter(period=period, section__isnull=True, is_active=True)
            .order_by('-created_at')
            .first()
        )
        return price.price_per_kg if price is not None else None

    @staticmethod
    def has_price_set(period) -> bool:
        return ForecastPrice.objects.filter(period=period, is_active=True).exists()
