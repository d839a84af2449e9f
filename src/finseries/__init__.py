"""
finseries — financial time-series engine

Ordered samples of (date, value), calendar-period alignment, re-gridding,
returns, drawdowns, robust statistics, bond valuation and seeded random
series for testing.
"""

from finseries.core.calendar import DEFAULT_CALENDAR, DatePeriod, HolidayCalendar, WeekdayCalendar
from finseries.core.domain import (
    Portfolio,
    RawSeriesRecord,
    SyncMethod,
    TimeSeries,
    TimeSeriesItem,
    TimestampFormatError,
    generate_random_time_series,
)
from finseries.core.logging import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CALENDAR",
    "DatePeriod",
    "HolidayCalendar",
    "WeekdayCalendar",
    "Portfolio",
    "RawSeriesRecord",
    "SyncMethod",
    "TimeSeries",
    "TimeSeriesItem",
    "TimestampFormatError",
    "generate_random_time_series",
    "configure_logging",
    "get_logger",
]
