"""
Forecast P&L Service

What-if profit estimates for the chicks still in the sheds. Nothing here
writes to the database and nothing here affects the real P&L.

    alive             = initial - deaths - sold
    estimated revenue = alive x latest average weight x forecast price
    remaining costs   = section costs x (1 - sold / initial)
    estimated profit  = estimated revenue - remaining costs

A forecast that cannot be computed is not an error: it comes back with
status BLOCKED and a reason code.
"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Any, Dict, Optional
import logging

from django.conf import settings
from django.db.models import Sum
from django.db.models.functions import Coalesce

from core.exceptions import ValidationError, get_or_not_found
from expenses.models import PeriodExpense
from expenses.services import money_sum
from forecasts.models import BlockedReason, ForecastStatus
from forecasts.services.prices import ForecastPriceService
from periods.models import Period
from sections.models import OPEN_BATCH_STATUSES, Batch, ChickOut, Section, SectionDailyReport

logger = logging.getLogger(__name__)

UNIT = Decimal('1')
CENT = Decimal('0.01')
ZERO = Decimal('0')


def _round(value: Decimal) -> Decimal:
    return value.quantize(UNIT, rounding=ROUND_HALF_UP)


def blocked(reason, message, missing=None, **extra) -> Dict[str, Any]:
    result = {
        'status': ForecastStatus.BLOCKED,
        'reason': reason,
        'message': message,
    }
    if missing:
        result['missing'] = missing
    result.update(extra)
    return result


class ForecastService:

    def __init__(self, prices: Optional[ForecastPriceService] = None):
        self.prices = prices or ForecastPriceService()

    @property
    def daily_weight_gain(self) -> Decimal:
        return Decimal(str(settings.FORECAST_DAILY_WEIGHT_GAIN_KG))

    # -------------------------------------------------------------------------
    # Building blocks
    # -------------------------------------------------------------------------

    @staticmethod
    def _latest_weighed_report(batch):
        return (
            SectionDailyReport.objects
            .filter(batch=batch, avg_weight_kg__isnull=False, avg_weight_kg__gt=0)
            .order_by('-date')
            .first()
        )

    @staticmethod
    def _chick_counts(batch):
        deaths = SectionDailyReport.objects.filter(batch=batch).aggregate(
            total=Coalesce(Sum('deaths'), 0)
        )['total']
        sold = ChickOut.objects.filter(batch=batch).aggregate(
            total=Coalesce(Sum('count'), 0)
        )['total']
        alive = max(batch.total_chicks_in - deaths - sold, 0)
        return deaths, sold, alive

    @staticmethod
    def _section_costs(section, period) -> Decimal:
        queryset = PeriodExpense.objects.filter(section=section)
        if period is not None:
            queryset = queryset.filter(period=period)
        return queryset.aggregate(total=money_sum())['total']

    @staticmethod
    def _remaining_costs(total_costs, sold, initial) -> Decimal:
        """Sold chicks take their share of the costs with them."""
        if sold > 0 and initial > 0:
            return total_costs - Decimal(sold) * (total_costs / Decimal(initial))
        return total_costs

    # -------------------------------------------------------------------------
    # Forecasts
    # -------------------------------------------------------------------------

    def get_section_forecast(self, section) -> Dict[str, Any]:
        section = get_or_not_found(Section, section)

        period = section.active_period
        if period is None:
            return blocked(BlockedReason.NO_ACTIVE_PERIOD, "Section is not assigned to an active period")

        batch = (
            Batch.objects
            .filter(section=section, status__in=OPEN_BATCH_STATUSES)
            .order_by('-started_at')
            .first()
        )
        if batch is None:
            return blocked(BlockedReason.NO_BATCH, "No open batch in this section")

        price = self.prices.get_active_price(period, section)
        if not price:
            return blocked(
                BlockedReason.PRICE_NOT_SET,
                "Set an initial sale price to compute the forecast",
                missing=['price_per_kg'],
            )

        report = self._latest_weighed_report(batch)
        if report is None:
            return blocked(
                BlockedReason.INSUFFICIENT_DATA,
                "A daily report with an average weight is required",
                missing=['avg_weight_kg'],
            )

        initial = batch.total_chicks_in
        deaths, sold, alive = self._chick_counts(batch)

        total_costs = self._section_costs(section, period)
        remaining_costs = self._remaining_costs(total_costs, sold, initial)

        avg_weight = report.avg_weight_kg
        total_weight = Decimal(alive) * avg_weight
        revenue = total_weight * price
        profit = revenue - remaining_costs

        if alive > 0:
            profit_per_chick = (profit / Decimal(alive)).quantize(CENT, rounding=ROUND_HALF_UP)
        else:
            profit_per_chick = Decimal('0.00')

        break_even_days = None
        if profit < 0 and alive > 0:
            needed_weight = abs(profit) / price / Decimal(alive)
            break_even_days = int((needed_weight / self.daily_weight_gain).to_integral_value(rounding=ROUND_CEILING))

        return {
            'status': ForecastStatus.SUCCESS,
            'section_id': section.id,
            'section_name': section.name,
            'period_id': period.id,
            'batch_id': batch.id,
            'estimated_revenue': _round(revenue),
            'estimated_costs': _round(remaining_costs),
            'estimated_profit': _round(profit),
            'profit_per_chick': profit_per_chick,
            'break_even_days': break_even_days,
            'alive_chicks': alive,
            'sold_chicks': sold,
            'dead_chicks': deaths,
            'initial_chicks': initial,
            'avg_weight_kg': avg_weight,
            'forecast_price_per_kg': price,
            'total_weight_kg': total_weight.quantize(CENT, rounding=ROUND_HALF_UP),
        }

    def get_period_forecast(self, period) -> Dict[str, Any]:
        """
        Sum the successful section forecasts of every section currently
        assigned to the period. Blocked sections are listed, not counted.
        """
        period = get_or_not_found(Period, period)
        sections = list(Section.objects.filter(active_period=period).order_by('name'))

        if not sections:
            return blocked(
                BlockedReason.INSUFFICIENT_DATA,
                "No sections are assigned to this period",
                period_id=period.id,
                period_name=period.name,
                blocked_sections=[],
            )

        forecasts = []
        blocked_sections = []
        total_revenue = total_costs = total_profit = ZERO

        for section in sections:
            forecast = self.get_section_forecast(section)
            if forecast['status'] == ForecastStatus.SUCCESS:
                forecasts.append(forecast)
                total_revenue += forecast['estimated_revenue']
                total_costs += forecast['estimated_costs']
                total_profit += forecast['estimated_profit']
            else:
                blocked_sections.append({
                    'section_id': section.id,
                    'section_name': section.name,
                    'reason': forecast['reason'],
                    'message': forecast['message'],
                })

        logger.debug(
            f"Period forecast {period.name}: {len(forecasts)} section(s) ready, "
            f"{len(blocked_sections)} blocked"
        )
        if not forecasts:
            return blocked(
                BlockedReason.INSUFFICIENT_DATA,
                "Every section in this period is missing forecast data",
                period_id=period.id,
                period_name=period.name,
                blocked_sections=blocked_sections,
            )

        return {
            'status': ForecastStatus.SUCCESS,
            'period_id': period.id,
            'period_name': period.name,
            'total_estimated_revenue': total_revenue,
            'total_estimated_costs': total_costs,
            'total_estimated_profit': total_profit,
            'sections': forecasts,
            'blocked_sections': blocked_sections,
        }

    def simulate_partial_sale(self, batch, sold_chicks, price_per_kg) -> Dict[str, Any]:
        """
        What if sold_chicks were sold now at price_per_kg and the rest later
        at the same price. Read-only.

        Raises:
            ValidationError: sold_chicks is negative or the price is not
                positive. Selling more than are alive is BLOCKED, not raised.
        """
        batch = get_or_not_found(Batch, batch)
        sold_chicks = int(sold_chicks)
        price_per_kg = Decimal(str(price_per_kg))
        if sold_chicks < 0:
            raise ValidationError("sold_chicks cannot be negative")
        if price_per_kg <= 0:
            raise ValidationError("price_per_kg must be greater than zero")

        report = self._latest_weighed_report(batch)
        if report is None:
            return blocked(
                BlockedReason.INSUFFICIENT_DATA,
                "No average weight recorded for this batch",
                missing=['avg_weight_kg'],
            )

        initial = batch.total_chicks_in
        deaths, sold, alive = self._chick_counts(batch)
        if sold_chicks > alive:
            return blocked(
                BlockedReason.INSUFFICIENT_DATA,
                f"Only {alive} chicks are available to sell",
                sold_chicks=sold_chicks,
                alive_chicks=alive,
            )

        total_costs = self._section_costs(batch.section, batch.period)
        remaining_costs = self._remaining_costs(total_costs, sold_chicks, initial)

        avg_weight = report.avg_weight_kg
        sale_revenue = Decimal(sold_chicks) * avg_weight * price_per_kg
        remaining_chicks = alive - sold_chicks
        remaining_revenue = Decimal(remaining_chicks) * avg_weight * price_per_kg
        total_revenue = sale_revenue + remaining_revenue

        return {
            'status': ForecastStatus.SUCCESS,
            'section_id': batch.section_id,
            'section_name': batch.section.name,
            'batch_id': batch.id,
            'sale_revenue': _round(sale_revenue),
            'estimated_revenue': _round(total_revenue),
            'estimated_costs': _round(remaining_costs),
            'estimated_profit': _round(total_revenue - total_costs),
            'alive_chicks': remaining_chicks,
            'sold_chicks': sold_chicks,
            'dead_chicks': deaths,
            'initial_chicks': initial,
            'avg_weight_kg': avg_weight,
            'forecast_price_per_kg': price_per_kg,
        }
