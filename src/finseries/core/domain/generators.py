"""
Random series generator — deterministic seeded geometric random walk

FORMULAS (n = 252 for business days, 365 otherwise):
    sigma = yearly_volatility / sqrt(n)
    r     = (1 + yearly_return)^(1/n) - 1 - sigma^2 / 2     (variance-bias correction)
    z     = sqrt(-2 ln u) * cos(2 pi v),  u = 1 - U1, v = 1 - U2   (Box–Muller)
    c     = sigma * z
    V_k+1 = V_k * (1 + r + c + autocorrelation * c_prev)

INVARIANTS:
1. Same seed + same random source → bit-identical values
2. Emitted values are rounded to 2 decimals; the walk itself is not rounded
3. Dates advance by one business day (business-days mode) or one calendar
   day until they pass `end`
"""

import math
import random
from datetime import date, datetime
from typing import Callable, Hashable, Protocol

from finseries.core.calendar.business_days import DEFAULT_CALENDAR, CalendarProvider
from finseries.core.domain.sample import TimeSeriesItem
from finseries.core.domain.series import TimeSeries
from finseries.core.logging import get_logger
from finseries.core.settings import DEFAULT_RANDOM_WALK_CONFIG, RandomWalkConfig

logger = get_logger(__name__)


class UniformSource(Protocol):
    """Pseudo-random source of uniform draws in [0, 1)."""

    def random(self) -> float: ...


RandomSourceFactory = Callable[[Hashable], UniformSource]


def standard_normal(source: UniformSource) -> float:
    """One standard normal draw via Box–Muller from two uniform draws."""
    u = 1.0 - source.random()
    v = 1.0 - source.random()
    return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


def round_half_up(value: float, decimals: int) -> float:
    """
    Round half up (toward +inf) at the given number of decimals.

    Examples:
        >>> round_half_up(100.125, 2)
        100.13
    """
    factor = 10.0 ** decimals
    return math.floor(factor * value + 0.5) / factor


def generate_random_time_series(
    name: str | None,
    start: date | datetime,
    end: date | datetime,
    only_business_days: bool,
    yearly_return: float,
    yearly_volatility: float,
    autocorrelation: float = 0.0,
    seed: Hashable = None,
    calendar: CalendarProvider = DEFAULT_CALENDAR,
    random_source_factory: RandomSourceFactory = random.Random,
    config: RandomWalkConfig = DEFAULT_RANDOM_WALK_CONFIG,
) -> TimeSeries:
    """
    Generate a random price-like series between start and end.

    Args:
        name: Series name
        start: First date (snapped forward to a business day if required)
        end: Last date (inclusive)
        only_business_days: Step over business days instead of calendar days
        yearly_return: Expected yearly return (e.g. 0.07)
        yearly_volatility: Yearly volatility (e.g. 0.15)
        autocorrelation: Weight of the previous shock in each step
        seed: Seed passed to random_source_factory
        calendar: Business-day calendar
        random_source_factory: Builds the uniform source from the seed
            (default: random.Random)
        config: Walk configuration (start value, days per year, rounding)

    Returns:
        TimeSeries with one sample per step (empty if start > end)

    Examples:
        >>> ts = generate_random_time_series("x", date(2016, 1, 1), date(2016, 1, 10),
        ...                                  False, 0.05, 0.2, 0.0, seed=1)
        >>> ts.count
        10
        >>> ts.start_value
        100.0
    """
    source = random_source_factory(seed)

    d = calendar.truncate(start)
    end = calendar.truncate(end)
    n = float(config.calendar_days_per_year)
    if only_business_days:
        n = float(config.business_days_per_year)
        if not calendar.is_business_day(d):
            d = calendar.next_business_day(d)

    sigma = yearly_volatility / math.sqrt(n)
    r = (1.0 + yearly_return) ** (1.0 / n) - 1.0 - sigma * sigma / 2.0

    items: list[TimeSeriesItem] = []
    v = config.start_value
    c_prev = 0.0
    while d <= end:
        items.append(TimeSeriesItem(d, round_half_up(v, config.round_decimals)))
        c = sigma * standard_normal(source)
        v *= 1.0 + r + c + autocorrelation * c_prev
        c_prev = c
        d = calendar.next_business_day(d) if only_business_days else calendar.add_days(d, 1)

    logger.debug(
        "random_series_generated",
        name=name,
        count=len(items),
        only_business_days=only_business_days,
    )
    return TimeSeries(items, name=name)
