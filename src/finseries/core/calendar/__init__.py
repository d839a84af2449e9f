"""
Calendar arithmetic: business days and period ordinals.
"""

from finseries.core.calendar.business_days import (
    DEFAULT_CALENDAR,
    EPOCH,
    CalendarError,
    CalendarProvider,
    HolidayCalendar,
    WeekdayCalendar,
    date_from_epoch_days,
    date_from_month_number,
    days_since_epoch,
    month_number,
)
from finseries.core.calendar.period import SUPPORTED_PERIODICITIES, DatePeriod

__all__ = [
    "DEFAULT_CALENDAR",
    "EPOCH",
    "CalendarError",
    "CalendarProvider",
    "HolidayCalendar",
    "WeekdayCalendar",
    "date_from_epoch_days",
    "date_from_month_number",
    "days_since_epoch",
    "month_number",
    "SUPPORTED_PERIODICITIES",
    "DatePeriod",
]
