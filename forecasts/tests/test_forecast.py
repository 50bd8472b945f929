"""
Forecast P&L Tests

SCENARIO:
=========
Section 1 holds 10,000 chicks. Today's report shows 200 deaths and an
average weight of 2 kg. Feed so far cost 20,000,000 and the director
expects to sell at 15,000 per kg.

    alive     = 10,000 - 200          = 9,800
    weight    = 9,800 x 2             = 19,600 kg
    revenue   = 19,600 x 15,000       = 294,000,000
    profit    = 294,000,000 - 20,000,000 = 274,000,000
"""

from decimal import Decimal

import pytest
from django.urls import reverse
from rest_framework import status

from core.exceptions import InvalidState, Reason, ValidationError
from expenses.models import ExpenseCategory
from expenses.services import PeriodExpenseService
from forecasts.models import BlockedReason, ForecastPrice, ForecastPriceSource, ForecastStatus
from forecasts.services import ForecastPriceService, ForecastService
from periods.models import PeriodStatus
from sections.services import ChickOutService, DailyReportService, SectionService

pytestmark = pytest.mark.django_db


@pytest.fixture(autouse=True)
def weight_gain(settings):
    settings.FORECAST_DAILY_WEIGHT_GAIN_KG = Decimal('0.05')


@pytest.fixture
def prices(publisher):
    return ForecastPriceService(publisher=publisher)


@pytest.fixture
def forecasts(prices):
    return ForecastService(prices=prices)


@pytest.fixture
def weighed_batch(batch, section, period, publisher):
    """Batch with one weighed report and 20,000,000 of section costs."""
    DailyReportService(publisher=publisher).create_report(section.id, deaths=200, avg_weight_kg='2.000')
    PeriodExpenseService(publisher=publisher).add_expense(
        period, ExpenseCategory.FEED, '20000000', section=section,
    )
    return batch


# =============================================================================
# PRICES
# =============================================================================

class TestForecastPrices:

    def test_new_price_replaces_active_one(self, prices, period):
        prices.set_initial_price(period, '14000')
        prices.set_initial_price(period, '15000')

        assert ForecastPrice.objects.filter(period=period, is_active=True).count() == 1
        assert prices.get_active_price(period) == Decimal('15000.00')

    def test_section_price_overrides_period_default(self, prices, period, section):
        prices.set_initial_price(period, '15000')
        prices.set_initial_price(period, '16500', section=section)

        assert prices.get_active_price(period, section) == Decimal('16500.00')
        assert prices.get_active_price(period) == Decimal('15000.00')

    def test_non_positive_price_rejected(self, prices, period):
        with pytest.raises(ValidationError):
            prices.set_initial_price(period, '0')

    def test_closed_period_rejected(self, prices, period):
        period.status = PeriodStatus.CLOSED
        period.save(update_fields=['status'])
        with pytest.raises(InvalidState) as exc_info:
            prices.set_initial_price(period, '15000')
        assert exc_info.value.reason == Reason.PERIOD_CLOSED

    def test_completed_sale_becomes_section_price(self, prices, batch, section, period, publisher):
        prices.set_initial_price(period, '15000')
        chick_outs = ChickOutService(publisher=publisher)
        chick_out = chick_outs.create_chick_out(section, count=1000, vehicle_number='01A123BC')
        chick_outs.complete(chick_out, 2100, 1, '17250')

        price = ForecastPrice.objects.get(period=period, section=section, is_active=True)
        assert price.source == ForecastPriceSource.LAST_REAL_SALE
        assert price.linked_chick_out_id == chick_out.id
        assert prices.get_active_price(period, section) == Decimal('17250.00')


# =============================================================================
# SECTION FORECAST
# =============================================================================

class TestSectionForecast:

    def test_no_active_period_blocks(self, forecasts, publisher):
        section = SectionService(publisher=publisher).create_section('Section 5')
        result = forecasts.get_section_forecast(section)
        assert result['status'] == ForecastStatus.BLOCKED
        assert result['reason'] == BlockedReason.NO_ACTIVE_PERIOD

    def test_no_batch_blocks(self, forecasts, section):
        result = forecasts.get_section_forecast(section)
        assert result['reason'] == BlockedReason.NO_BATCH

    def test_missing_price_blocks(self, forecasts, batch, section):
        result = forecasts.get_section_forecast(section)
        assert result['reason'] == BlockedReason.PRICE_NOT_SET
        assert result['missing'] == ['price_per_kg']

    def test_missing_weight_blocks(self, forecasts, prices, batch, section, period):
        prices.set_initial_price(period, '15000')
        result = forecasts.get_section_forecast(section)
        assert result['reason'] == BlockedReason.INSUFFICIENT_DATA
        assert result['missing'] == ['avg_weight_kg']

    def test_profitable_forecast(self, forecasts, prices, weighed_batch, section, period):
        prices.set_initial_price(period, '15000')
        result = forecasts.get_section_forecast(section)

        assert result['status'] == ForecastStatus.SUCCESS
        assert result['alive_chicks'] == 9800
        assert result['dead_chicks'] == 200
        assert result['total_weight_kg'] == Decimal('19600.00')
        assert result['estimated_revenue'] == Decimal('294000000')
        assert result['estimated_costs'] == Decimal('20000000')
        assert result['estimated_profit'] == Decimal('274000000')
        assert result['profit_per_chick'] == Decimal('27959.18')
        assert result['break_even_days'] is None

    def test_loss_reports_break_even_days(self, forecasts, prices, weighed_batch, section, period):
        # 19,600 kg x 1,000 = 19,600,000 against 20,000,000 of costs
        prices.set_initial_price(period, '1000')
        result = forecasts.get_section_forecast(section)

        assert result['estimated_profit'] == Decimal('-400000')
        assert result['break_even_days'] == 1

    def test_sold_chicks_take_their_share_of_costs(self, forecasts, prices, weighed_batch, section,
                                                   period, publisher):
        prices.set_initial_price(period, '15000')
        ChickOutService(publisher=publisher).create_chick_out(section, count=2500, vehicle_number='01A')

        result = forecasts.get_section_forecast(section)
        assert result['sold_chicks'] == 2500
        assert result['alive_chicks'] == 7300
        assert result['estimated_costs'] == Decimal('15000000')


# =============================================================================
# PERIOD FORECAST & SIMULATION
# =============================================================================

class TestPeriodForecast:

    def test_blocked_sections_are_listed_not_counted(self, forecasts, prices, weighed_batch, section,
                                                     period, publisher):
        service = SectionService(publisher=publisher)
        service.assign_period(service.create_section('Section 2'), period)
        prices.set_initial_price(period, '15000')

        result = forecasts.get_period_forecast(period)
        assert result['status'] == ForecastStatus.SUCCESS
        assert result['total_estimated_profit'] == Decimal('274000000')
        assert [row['section_name'] for row in result['sections']] == ['Section 1']
        assert result['blocked_sections'][0]['reason'] == BlockedReason.NO_BATCH

    def test_all_blocked_period(self, forecasts, section, period):
        result = forecasts.get_period_forecast(period)
        assert result['status'] == ForecastStatus.BLOCKED
        assert len(result['blocked_sections']) == 1


class TestSimulation:

    def test_partial_sale_what_if(self, forecasts, weighed_batch):
        before = ForecastPrice.objects.count()
        result = forecasts.simulate_partial_sale(weighed_batch, 3000, '18000')

        assert result['sale_revenue'] == Decimal('108000000')
        assert result['estimated_revenue'] == Decimal('352800000')
        assert result['estimated_costs'] == Decimal('14000000')
        assert result['alive_chicks'] == 6800
        assert ForecastPrice.objects.count() == before

    def test_selling_more_than_alive_is_blocked(self, forecasts, weighed_batch):
        before = ForecastPrice.objects.count()

        result = forecasts.simulate_partial_sale(weighed_batch, 9801, '18000')

        assert result['status'] == ForecastStatus.BLOCKED
        assert result['reason'] == BlockedReason.INSUFFICIENT_DATA
        assert result['alive_chicks'] == 9800
        assert result['sold_chicks'] == 9801
        assert ForecastPrice.objects.count() == before

    def test_simulation_api(self, manager_client, weighed_batch):
        response = manager_client.post(
            reverse('forecasts:forecast-simulate', args=[weighed_batch.id]),
            {'sold_chicks': 3000, 'price_per_kg': '18000.00'},
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == ForecastStatus.SUCCESS

    def test_worker_cannot_see_forecast(self, worker_client, section):
        response = worker_client.get(reverse('forecasts:forecast-section', args=[section.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN
