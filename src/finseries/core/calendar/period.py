"""
DatePeriod — calendar date ↔ orderable period ordinal

Periodicity codes:
    1, 2, 3, 4, 6, 12   month buckets of 12/periodicity months
    52                  Monday–Sunday weeks
    252                 business days (ordinal is a DAY count, not a
                        business-day count)
    365                 calendar days

FORMULAS (days = days since 1970-01-01, m = months since 1970-01):
    periodicity <= 12:  value = floor(m / (12 / periodicity))
    52:                 value = floor((days + 3) / 7)
    252:                value = days(d snapped forward to a business day)
    365:                value = days

INVARIANTS:
1. Ordinals are globally comparable across years (no per-year reset)
2. to_date() of a month bucket is the LAST calendar day of the bucket
3. Unsupported periodicity → value is NaN, to_date() is the epoch
4. For 252 add_period walks the business-day calendar; integer addition
   would be wrong because the ordinal is a day count
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Final, Union

from finseries.core.calendar.business_days import (
    DEFAULT_CALENDAR,
    EPOCH,
    CalendarProvider,
    date_from_epoch_days,
    date_from_month_number,
    days_since_epoch,
)
from finseries.core.logging import get_logger
from finseries.core.math.numerical_safeguards import NAN

logger = get_logger(__name__)

MONTHS_PER_YEAR: Final[int] = 12
WEEKLY: Final[int] = 52
BUSINESS_DAILY: Final[int] = 252
DAILY: Final[int] = 365

# Shift aligning week boundaries to Monday (1970-01-01 is a Thursday)
WEEK_ALIGNMENT_DAYS: Final[int] = 3

SUPPORTED_PERIODICITIES: Final[frozenset[int]] = frozenset(
    {1, 2, 3, 4, 6, 12, WEEKLY, BUSINESS_DAILY, DAILY}
)

Ordinal = Union[int, float]


def _normalize_periodicity(periodicity: float) -> int | None:
    if not math.isfinite(periodicity) or not float(periodicity).is_integer():
        return None
    p = int(periodicity)
    return p if p in SUPPORTED_PERIODICITIES else None


@dataclass(frozen=True, order=True)
class DatePeriod:
    """
    A period ordinal for a given periodicity.

    Examples:
        >>> DatePeriod.from_date(date(2016, 2, 15), 12).to_date()
        datetime.date(2016, 2, 29)
        >>> DatePeriod.from_date(date(2016, 2, 15), 4).to_date()
        datetime.date(2016, 3, 31)
    """

    value: Ordinal
    periodicity: int

    # -------------------------------------------------------------------------
    # date → ordinal
    # -------------------------------------------------------------------------

    @staticmethod
    def calc_value(
        d: date | datetime,
        periodicity: float,
        calendar: CalendarProvider = DEFAULT_CALENDAR,
    ) -> Ordinal:
        """
        Period ordinal of date d.

        Args:
            d: Date (time of day is ignored)
            periodicity: Periodicity code
            calendar: Business-day calendar (used for 252 only)

        Returns:
            Integer ordinal, or NAN for an unsupported periodicity
        """
        p = _normalize_periodicity(periodicity)
        if p is None:
            logger.debug("unsupported_periodicity", periodicity=periodicity)
            return NAN

        d = calendar.truncate(d)
        if p <= MONTHS_PER_YEAR:
            return calendar.month_number(d) // (MONTHS_PER_YEAR // p)
        if p == WEEKLY:
            return (days_since_epoch(d) + WEEK_ALIGNMENT_DAYS) // 7
        if p == BUSINESS_DAILY:
            if not calendar.is_business_day(d):
                d = calendar.next_business_day(d)
            return days_since_epoch(d)
        return days_since_epoch(d)

    @classmethod
    def from_date(
        cls,
        d: date | datetime,
        periodicity: float,
        calendar: CalendarProvider = DEFAULT_CALENDAR,
    ) -> "DatePeriod":
        value = cls.calc_value(d, periodicity, calendar)
        p = _normalize_periodicity(periodicity)
        if p is None:
            p = int(periodicity) if math.isfinite(periodicity) else 0
        return cls(value=value, periodicity=p)

    # -------------------------------------------------------------------------
    # ordinal → date
    # -------------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        """True if the ordinal is finite and the periodicity supported."""
        return (
            isinstance(self.value, int) or math.isfinite(self.value)
        ) and _normalize_periodicity(self.periodicity) is not None

    def to_date(self) -> date:
        """
        Representative date of the period.

        Returns:
            Last calendar day of a month bucket, the Sunday ending a week,
            the day itself for 252/365; the epoch for an invalid period
        """
        if not self.is_valid:
            return EPOCH
        value = int(self.value)
        if self.periodicity <= MONTHS_PER_YEAR:
            months = MONTHS_PER_YEAR // self.periodicity
            return date_from_month_number(months * (value + 1)) - timedelta(days=1)
        if self.periodicity == WEEKLY:
            return date_from_epoch_days(value * 7 + WEEK_ALIGNMENT_DAYS)
        return date_from_epoch_days(value)

    # -------------------------------------------------------------------------
    # arithmetic
    # -------------------------------------------------------------------------

    def add_period(self, n: int, calendar: CalendarProvider = DEFAULT_CALENDAR) -> "DatePeriod":
        """
        Period n steps away (n may be negative).

        Examples:
            >>> p = DatePeriod.from_date(date(2016, 9, 30), 252)  # Friday
            >>> p.add_period(1).to_date()
            datetime.date(2016, 10, 3)
        """
        if not self.is_valid:
            return self
        if self.periodicity != BUSINESS_DAILY:
            return DatePeriod(value=int(self.value) + n, periodicity=self.periodicity)

        d = self.to_date()
        while n > 0:
            d = calendar.next_business_day(d)
            n -= 1
        while n < 0:
            d = calendar.previous_business_day(d)
            n += 1
        return DatePeriod.from_date(d, self.periodicity, calendar)

    @classmethod
    def range(
        cls,
        start: date | datetime,
        end: date | datetime,
        periodicity: float,
        calendar: CalendarProvider = DEFAULT_CALENDAR,
    ) -> list[date]:
        """
        Period-end dates from start's period through end's period inclusive.

        Examples:
            >>> DatePeriod.range(date(2016, 1, 10), date(2016, 3, 5), 12)
            [datetime.date(2016, 1, 31), datetime.date(2016, 2, 29), datetime.date(2016, 3, 31)]
        """
        period = cls.from_date(start, periodicity, calendar)
        last = cls.from_date(end, periodicity, calendar)
        if not (period.is_valid and last.is_valid):
            return []

        dates: list[date] = []
        while period.value <= last.value:
            dates.append(period.to_date())
            period = period.add_period(1, calendar)
        return dates
