from periods.services.periods import PeriodService

__all__ = ['PeriodService']
