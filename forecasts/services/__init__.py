from forecasts.services.forecast import ForecastService
from forecasts.services.prices import ForecastPriceService

__all__ = ['ForecastPriceService', 'ForecastService']
