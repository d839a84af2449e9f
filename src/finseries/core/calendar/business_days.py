"""
Business-Day Calendar Provider

Explicit calendar interface consumed by DatePeriod, TimeSeries.synchronize and
the random series generator. Nothing here augments the date type globally:
every operation that needs calendar knowledge receives a provider.

Providers:
- WeekdayCalendar: Monday–Friday business days (configurable weekend)
- HolidayCalendar: WeekdayCalendar plus a fixed set of non-business dates

Month numbers count continuously from January 1970:
    month_number(d) = (d.year - 1970) * 12 + (d.month - 1)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Final, Iterable, Protocol, runtime_checkable

# Day 0 of all day counts
EPOCH: Final[date] = date(1970, 1, 1)

# Upper bound on consecutive non-business days before a search gives up
MAX_NON_BUSINESS_RUN: Final[int] = 366


class CalendarError(ValueError):
    """Invalid calendar configuration or an unbounded business-day search."""


# =============================================================================
# DAY COUNTS
# =============================================================================


def days_since_epoch(d: date) -> int:
    """
    Days between 1970-01-01 and d (negative before the epoch).

    Examples:
        >>> days_since_epoch(date(1970, 1, 2))
        1
    """
    return (d - EPOCH).days


def date_from_epoch_days(days: int) -> date:
    """Inverse of days_since_epoch."""
    return EPOCH + timedelta(days=days)


def month_number(d: date) -> int:
    """
    Continuous month index from January 1970.

    Examples:
        >>> month_number(date(1971, 2, 15))
        13
    """
    return (d.year - EPOCH.year) * 12 + (d.month - 1)


def date_from_month_number(m: int, day: int = 1) -> date:
    """First (or given) day of the month with continuous index m."""
    year, month0 = divmod(m, 12)
    return date(EPOCH.year + year, month0 + 1, day)


# =============================================================================
# PROVIDER INTERFACE
# =============================================================================


@runtime_checkable
class CalendarProvider(Protocol):
    """Calendar surface required by the series engine."""

    def truncate(self, value: date | datetime) -> date: ...

    def add_days(self, d: date, n: int) -> date: ...

    def is_business_day(self, d: date) -> bool: ...

    def next_business_day(self, d: date) -> date: ...

    def previous_business_day(self, d: date) -> date: ...

    def add_months(self, d: date, n: int) -> date: ...

    def month_number(self, d: date) -> int: ...

    def format_iso(self, d: date) -> str: ...


# =============================================================================
# IMPLEMENTATIONS
# =============================================================================


@dataclass(frozen=True)
class WeekdayCalendar:
    """
    Calendar whose business days are all weekdays outside `weekend`.

    Weekdays use date.weekday() numbering (Monday = 0, Sunday = 6).

    Examples:
        >>> cal = WeekdayCalendar()
        >>> cal.next_business_day(date(2016, 9, 30))  # Friday
        datetime.date(2016, 10, 3)
    """

    weekend: frozenset[int] = field(default=frozenset({5, 6}))

    def __post_init__(self) -> None:
        if not self.weekend.issubset(range(7)):
            raise CalendarError(f"weekend days must be in 0..6, got {sorted(self.weekend)}")
        if len(self.weekend) >= 7:
            raise CalendarError("weekend cannot cover every day of the week")

    def truncate(self, value: date | datetime) -> date:
        """Drop the time-of-day part."""
        if isinstance(value, datetime):
            return value.date()
        return value

    def add_days(self, d: date, n: int) -> date:
        return d + timedelta(days=n)

    def is_business_day(self, d: date) -> bool:
        return d.weekday() not in self.weekend

    def next_business_day(self, d: date) -> date:
        """First business day strictly after d."""
        return self._step(d, 1)

    def previous_business_day(self, d: date) -> date:
        """Last business day strictly before d."""
        return self._step(d, -1)

    def adjust_next_business_day(self, d: date) -> date:
        """d itself if it is a business day, else the next one."""
        return d if self.is_business_day(d) else self.next_business_day(d)

    def add_months(self, d: date, n: int) -> date:
        """
        Shift by n calendar months, clamping the day to the target month end.

        Examples:
            >>> WeekdayCalendar().add_months(date(2016, 1, 31), 1)
            datetime.date(2016, 2, 29)
        """
        target = date_from_month_number(month_number(d) + n)
        last_day = (date_from_month_number(month_number(target) + 1) - timedelta(days=1)).day
        return target.replace(day=min(d.day, last_day))

    def month_number(self, d: date) -> int:
        return month_number(d)

    def format_iso(self, d: date) -> str:
        return d.isoformat()

    def _step(self, d: date, direction: int) -> date:
        current = d
        for _ in range(MAX_NON_BUSINESS_RUN):
            current = current + timedelta(days=direction)
            if self.is_business_day(current):
                return current
        raise CalendarError(
            f"no business day within {MAX_NON_BUSINESS_RUN} days of {d.isoformat()}"
        )


@dataclass(frozen=True)
class HolidayCalendar(WeekdayCalendar):
    """
    Weekday calendar with additional non-business dates.

    Examples:
        >>> cal = HolidayCalendar(holidays=frozenset({date(2016, 12, 26)}))
        >>> cal.next_business_day(date(2016, 12, 23))
        datetime.date(2016, 12, 27)
    """

    holidays: frozenset[date] = field(default_factory=frozenset)

    @classmethod
    def from_dates(cls, holidays: Iterable[date], weekend: Iterable[int] = (5, 6)) -> "HolidayCalendar":
        return cls(weekend=frozenset(weekend), holidays=frozenset(holidays))

    def is_business_day(self, d: date) -> bool:
        return super().is_business_day(d) and d not in self.holidays


DEFAULT_CALENDAR: Final[WeekdayCalendar] = WeekdayCalendar()
