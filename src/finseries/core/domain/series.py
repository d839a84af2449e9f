"""
TimeSeries — ordered container of samples with transforms and statistics

The container keeps samples in caller order and never sorts on its own;
index_of and synchronize require strictly ascending timestamps, so call
sort() after any reordering mutation.

Two operation families:
- In place, return self for chaining:
    log, exp, add, mult, neg, inverse, diff, returns, log_returns,
    cum_sum, cum_prod, sort, assign
- Copy-producing, return a new TimeSeries:
    clone, range, end_of_month, smoother, max_drawdown, synchronize,
    bond_total_return, weighted_time_series

CRITICAL INVARIANTS:
1. Missing data is the NaN sentinel and is propagated, never raised
2. diff/returns/log_returns drop the first sample; fewer than 2 samples
   leaves the series untouched
3. mult/inverse leave non-finite (and, for inverse, zero) values unchanged,
   while log maps them to NaN
4. Copies are deep: new samples, shared formatting functions
"""

import json
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, NamedTuple, Sequence

from finseries.core.calendar.business_days import DEFAULT_CALENDAR, CalendarProvider
from finseries.core.contracts.validators import validate_raw_series
from finseries.core.domain.records import RawSeriesRecord
from finseries.core.domain.sample import TimeSeriesItem
from finseries.core.domain.synchronization import SyncMethod, synchronize_values
from finseries.core.logging import get_logger
from finseries.core.math import compounding, statistics
from finseries.core.math.drawdown import compute_drawdown
from finseries.core.math.numerical_safeguards import (
    NAN,
    guarded_difference,
    guarded_log_return,
    guarded_return,
    is_valid_float,
    safe_log,
)
from finseries.core.settings import DEFAULT_SERIES_SETTINGS, SeriesSettings

logger = get_logger(__name__)

TimestampFormatter = Callable[[date], str]
ValueFormatter = Callable[[float], str]

MONTHS_PER_YEAR = 12


def iso_date_format(d: date) -> str:
    """Default timestamp formatter: plain ISO date."""
    return d.isoformat()


def fixed_value_format(decimals: int) -> ValueFormatter:
    """
    Fixed-decimals value formatter.

    Examples:
        >>> fixed_value_format(2)(1.235)
        '1.24'
    """

    def _format(v: float) -> str:
        return f"{v:.{decimals}f}"

    return _format


# =============================================================================
# EXPORT TYPES
# =============================================================================


class SeriesPoint(NamedTuple):
    """One exported sample with its formatted text."""

    timestamp: date
    value: float
    timestamp_text: str
    value_text: str


class MonthRow(NamedTuple):
    """One calendar year of monthly values (NaN where a month has no data)."""

    year: int
    values: list[float]


# =============================================================================
# TIME SERIES
# =============================================================================


class TimeSeries:
    """
    Ordered sequence of TimeSeriesItem samples.

    Examples:
        >>> ts = TimeSeries([TimeSeriesItem(date(2016, 8, 31), 1.23),
        ...                  TimeSeriesItem(date(2016, 9, 30), 1.27)])
        >>> ts.count
        2
        >>> ts.clone().returns().values[0] == 1.27 / 1.23 - 1.0
        True
    """

    def __init__(
        self,
        items: Iterable[TimeSeriesItem] | None = None,
        name: str | None = None,
        timestamp_format: TimestampFormatter | None = None,
        value_format: ValueFormatter | None = None,
        settings: SeriesSettings = DEFAULT_SERIES_SETTINGS,
    ) -> None:
        self.items: list[TimeSeriesItem] = list(items) if items is not None else []
        self.name = name
        self.settings = settings
        self.timestamp_format = timestamp_format or iso_date_format
        self.value_format = value_format or fixed_value_format(settings.value_decimals)

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def from_record(
        cls,
        record: RawSeriesRecord,
        settings: SeriesSettings = DEFAULT_SERIES_SETTINGS,
    ) -> "TimeSeries":
        """
        Build a series from a validated raw record.

        Raises:
            TimestampFormatError: If a timestamp is not ISO-8601 text
        """
        items = [
            TimeSeriesItem.from_iso(text, value)
            for text, value in zip(record.timestamps, record.values)
        ]
        return cls(items, name=record.key, settings=settings)

    @classmethod
    def from_json(
        cls,
        text: str,
        settings: SeriesSettings = DEFAULT_SERIES_SETTINGS,
    ) -> "TimeSeries":
        """
        Parse a JSON raw record, check it against the contract and build a series.

        Raises:
            json.JSONDecodeError: If text is not JSON
            jsonschema.ValidationError: If the document violates the contract
            pydantic.ValidationError: If the record cannot be built
            TimestampFormatError: If a timestamp is not ISO-8601 text
        """
        data = json.loads(text)
        validate_raw_series(data)
        return cls.from_record(RawSeriesRecord.model_validate(data), settings)

    def assign(
        self,
        name: str | None,
        items: list[TimeSeriesItem],
        timestamp_format: TimestampFormatter,
        value_format: ValueFormatter,
    ) -> "TimeSeries":
        """Replace all properties. Returns self."""
        self.name = name
        self.items = items
        self.timestamp_format = timestamp_format
        self.value_format = value_format
        return self

    def clone_items(self) -> list[TimeSeriesItem]:
        return [item.clone() for item in self.items]

    def clone(self) -> "TimeSeries":
        """Deep copy: new samples, shared formatters and settings."""
        return self._derive(self.clone_items())

    def _derive(self, items: list[TimeSeriesItem]) -> "TimeSeries":
        return TimeSeries(
            items,
            name=self.name,
            timestamp_format=self.timestamp_format,
            value_format=self.value_format,
            settings=self.settings,
        )

    def range(
        self,
        start: date | datetime,
        end: date | datetime,
        calendar: CalendarProvider = DEFAULT_CALENDAR,
    ) -> "TimeSeries":
        """Copy of the samples with start <= timestamp <= end (time of day ignored)."""
        start = calendar.truncate(start)
        end = calendar.truncate(end)
        return self._derive(
            [item.clone() for item in self.items if start <= item.timestamp <= end]
        )

    def sort(self) -> "TimeSeries":
        """Sort ascending by timestamp (stable). Returns self."""
        self.items.sort(key=lambda item: item.timestamp)
        return self

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def count(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def values(self) -> list[float]:
        return [item.value for item in self.items]

    @property
    def timestamps(self) -> list[date]:
        return [item.timestamp for item in self.items]

    @property
    def start(self) -> date | None:
        return self.items[0].timestamp if self.items else None

    @property
    def end(self) -> date | None:
        return self.items[-1].timestamp if self.items else None

    @property
    def start_value(self) -> float:
        return self.items[0].value if self.items else NAN

    @property
    def end_value(self) -> float:
        return self.items[-1].value if self.items else NAN

    # -------------------------------------------------------------------------
    # Search and inference
    # -------------------------------------------------------------------------

    def index_of(self, t: date | datetime, calendar: CalendarProvider = DEFAULT_CALENDAR) -> int:
        """
        Index of the last sample with timestamp <= t.

        Linear scan from index 1 for small series, binary search above
        settings.binary_search_threshold samples.

        Returns:
            -1 if the series is empty or t precedes the first sample,
            count - 1 if t is at or after the last sample

        Examples:
            >>> ts = TimeSeries([TimeSeriesItem(date(2016, 1, d), 0.0) for d in (1, 5, 9)])
            >>> ts.index_of(date(2016, 1, 6)), ts.index_of(date(2015, 12, 31))
            (1, -1)
        """
        t = calendar.truncate(t)
        items = self.items
        n = len(items)
        if n == 0 or t < items[0].timestamp:
            return -1
        if t >= items[n - 1].timestamp:
            return n - 1

        if n > self.settings.binary_search_threshold:
            low = 0
            high = n - 1
            while high > low + 1:
                mid = (high + low) // 2
                if t >= items[mid].timestamp:
                    low = mid
                else:
                    high = mid
            return low

        i = 1
        while t >= items[i].timestamp and i < n - 1:
            i += 1
        return i - 1

    def latest_value(self, t: date | datetime, calendar: CalendarProvider = DEFAULT_CALENDAR) -> float:
        """Value of the sample found by index_of(t), NaN if none."""
        index = self.index_of(t, calendar)
        if index == -1:
            return NAN
        return self.items[index].value

    @property
    def periodicity(self) -> int:
        """Standard periodicity (252, 52, 12, 4, 2, 1) of the sampling; 0 if undefined."""
        if self.count < 2:
            return 0
        span_days = (self.items[-1].timestamp - self.items[0].timestamp).days
        return statistics.classify_periodicity(span_days, self.count, self.settings.days_per_year)

    # -------------------------------------------------------------------------
    # Value transforms (in place)
    # -------------------------------------------------------------------------

    def log(self) -> "TimeSeries":
        """Natural log; NaN for non-finite or non-positive values."""
        for item in self.items:
            item.value = safe_log(item.value)
        return self

    def exp(self) -> "TimeSeries":
        for item in self.items:
            try:
                item.value = math.exp(item.value)
            except OverflowError:
                item.value = math.inf
        return self

    def add(self, v: float) -> "TimeSeries":
        for item in self.items:
            item.value += v
        return self

    def mult(self, v: float) -> "TimeSeries":
        """Multiply finite values by v; non-finite values are left as they are."""
        for item in self.items:
            if is_valid_float(item.value):
                item.value *= v
        return self

    def neg(self) -> "TimeSeries":
        return self.mult(-1.0)

    def inverse(self) -> "TimeSeries":
        """1/x of finite non-zero values; other values are left unchanged."""
        for item in self.items:
            if is_valid_float(item.value) and item.value != 0.0:
                item.value = 1.0 / item.value
        return self

    def _pairwise(self, operator: compounding.BinaryOperator) -> "TimeSeries":
        if self.count < 2:
            logger.debug("series_empty_noop", name=self.name, count=self.count)
            return self
        results = compounding.pairwise(self.values, operator)
        del self.items[0]
        for item, value in zip(self.items, results):
            item.value = value
        return self

    def diff(self) -> "TimeSeries":
        """Sample-to-sample differences; one sample shorter."""
        return self._pairwise(guarded_difference)

    def returns(self) -> "TimeSeries":
        """Simple returns v1/v0 - 1; one sample shorter."""
        return self._pairwise(guarded_return)

    def log_returns(self) -> "TimeSeries":
        """Log returns ln(v1/v0); one sample shorter."""
        return self._pairwise(guarded_log_return)

    def _overwrite(self, values: Sequence[float]) -> "TimeSeries":
        for item, value in zip(self.items, values):
            item.value = value
        return self

    def cum_sum(self) -> "TimeSeries":
        return self._overwrite(compounding.cum_sum(self.values))

    def cum_prod(self) -> "TimeSeries":
        return self._overwrite(compounding.cum_prod(self.values))

    # -------------------------------------------------------------------------
    # Copy-producing transforms
    # -------------------------------------------------------------------------

    def end_of_month(self) -> "TimeSeries":
        """
        Last sample of every calendar month, plus the very first sample.

        Examples:
            >>> ts = TimeSeries([TimeSeriesItem(date(2016, 1, d), float(d)) for d in (4, 15, 29)])
            >>> [item.timestamp.day for item in ts.end_of_month().items]
            [4, 29]
        """
        last_in_month: dict[tuple[int, int], TimeSeriesItem] = {}
        for item in self.items:
            last_in_month[(item.timestamp.year, item.timestamp.month)] = item.clone()

        items = list(last_in_month.values())
        if self.items:
            first = self.items[0]
            key = (first.timestamp.year, first.timestamp.month)
            if last_in_month[key].timestamp != first.timestamp:
                items.append(first.clone())

        return self._derive(items).sort()

    def smoother(self, period: int = 1) -> "TimeSeries":
        """
        Smoothed copy: `period` passes of value[i-1] = (value[i-2] + value[i]) / 2
        for i = 3 .. count-1.

        Raises:
            ValueError: If period is negative
        """
        if period < 0:
            raise ValueError(f"period must be non-negative, got {period}")
        result = self.clone()
        items = result.items
        for _ in range(period):
            for i in range(3, len(items)):
                items[i - 1].value = (items[i - 2].value + items[i].value) / 2.0
        return result

    def max_drawdown(self, full_series: bool = False) -> "TimeSeries":
        """
        Maximum drawdown of the series.

        Args:
            full_series: If True, return the drawdown of every sample;
                otherwise return copies of the peak and trough samples
                (the first sample twice when there is no decline)

        Returns:
            New TimeSeries carrying this series' name
        """
        result = TimeSeries(name=self.name, settings=self.settings)
        if not self.items:
            return result

        drawdown = compute_drawdown(self.values)
        if full_series:
            result.items = [
                TimeSeriesItem(item.timestamp, value)
                for item, value in zip(self.items, drawdown.curve)
            ]
        else:
            result.items = [
                self.items[drawdown.peak_index].clone(),
                self.items[drawdown.trough_index].clone(),
            ]
        return result

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def average_annual_return(self) -> float:
        """Geometric average annual return; 0.0 for fewer than 2 samples."""
        return statistics.average_annual_return(
            self.start_value, self.end_value, self.count, self.periodicity
        )

    def central_weighted_stdev(self) -> float:
        """Tail-robust standard deviation of the values (NaN if empty)."""
        return statistics.central_weighted_stdev(self.values)

    # -------------------------------------------------------------------------
    # Valuation and combination
    # -------------------------------------------------------------------------

    @staticmethod
    def bond_total_return(
        par_rates: "TimeSeries",
        maturity: float,
        yearly_coupons: bool,
    ) -> "TimeSeries":
        """
        Total-return index (starting at 1.0) of a bond revalued along par rates.

        Raises:
            ValueError: If maturity is negative
        """
        index = compounding.bond_total_return_index(
            par_rates.timestamps,
            par_rates.values,
            maturity,
            yearly_coupons,
            par_rates.settings.days_per_year,
        )
        items = par_rates.clone_items()
        for item, value in zip(items, index):
            item.value = value
        return par_rates._derive(items)

    @staticmethod
    def weighted_time_series(
        weights: Sequence[float],
        series: Sequence["TimeSeries"],
    ) -> "TimeSeries":
        """
        Point-wise weighted sum of equally long series on the first series' timestamps.

        Raises:
            ValueError: If the weight and series counts differ, or the series
                differ in length
        """
        if len(weights) != len(series):
            raise ValueError(
                f"weights and series must have equal length, got {len(weights)} and {len(series)}"
            )
        if not series:
            return TimeSeries()

        n = series[0].count
        for ts in series:
            if ts.count != n:
                raise ValueError(f"series must have equal length, got {ts.count} and {n}")

        items = []
        for i, first in enumerate(series[0].items):
            value = sum(w * ts.items[i].value for w, ts in zip(weights, series))
            items.append(TimeSeriesItem(first.timestamp, value))
        return TimeSeries(items)

    # -------------------------------------------------------------------------
    # Re-gridding
    # -------------------------------------------------------------------------

    def synchronize(
        self,
        master_timestamps: Iterable[date | datetime],
        method: SyncMethod | str = SyncMethod.LATEST,
        calendar: CalendarProvider = DEFAULT_CALENDAR,
    ) -> "TimeSeries":
        """
        Re-grid onto master timestamps (ascending) with the given policy.

        Returns:
            New TimeSeries with one sample per master timestamp, sharing this
            series' name and formatters
        """
        masters = [calendar.truncate(t) for t in master_timestamps]
        values = synchronize_values(
            self.timestamps,
            self.values,
            masters,
            SyncMethod(method),
            self.settings.max_date,
        )
        logger.debug(
            "series_synchronized",
            name=self.name,
            method=SyncMethod(method).value,
            source_count=self.count,
            master_count=len(masters),
        )
        return self._derive([TimeSeriesItem(t, v) for t, v in zip(masters, values)])

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_points(self) -> list[SeriesPoint]:
        return [
            SeriesPoint(
                timestamp=item.timestamp,
                value=item.value,
                timestamp_text=self.timestamp_format(item.timestamp),
                value_text=self.value_format(item.value),
            )
            for item in self.items
        ]

    def month_table(self) -> list[MonthRow]:
        """
        Values laid out by year and month.

        A new row starts whenever the year changes; within a month the last
        sample wins.
        """
        rows: list[MonthRow] = []
        for item in self.items:
            year = item.timestamp.year
            if not rows or rows[-1].year != year:
                rows.append(MonthRow(year, [NAN] * MONTHS_PER_YEAR))
            rows[-1].values[item.timestamp.month - 1] = item.value
        return rows

    def __str__(self) -> str:
        lines = [f"{self.timestamp_format(p.timestamp)} = {self.value_format(p.value)}" for p in self.items]
        if self.name:
            lines.insert(0, self.name)
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"TimeSeries(name={self.name!r}, count={self.count})"


# =============================================================================
# PORTFOLIO
# =============================================================================


@dataclass(frozen=True)
class Portfolio:
    """A series together with its benchmark and risk-free series."""

    time_series: TimeSeries
    benchmark_time_series: TimeSeries
    risk_free_time_series: TimeSeries
