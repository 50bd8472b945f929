"""
Forecast Signals

Keeps the section forecast price in step with real sales: every completed
chick-out becomes the section's LAST_REAL_SALE price.
"""

from django.dispatch import receiver
import logging

from sections.models import ChickOut
from sections.signals import chick_out_completed

logger = logging.getLogger(__name__)


@receiver(chick_out_completed, sender=ChickOut)
def refresh_price_from_sale(sender, chick_out, actor=None, **kwargs):
    from forecasts.services import ForecastPriceService

    price = ForecastPriceService().update_from_chick_out(chick_out)
    if price is not None:
        logger.debug(f"Forecast price for section {chick_out.section_id} set to {price.price_per_kg}")
