"""
Settings — configuration for series operations and generators.

Frozen dataclasses with defaults. Instances are passed explicitly into the
constructors and functions that need them; there is no global mutable state.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Final

# Calendar days per year used for year fractions (Julian year)
DAYS_PER_YEAR: Final[float] = 365.25


@dataclass(frozen=True)
class SeriesSettings:
    """Configuration of a TimeSeries.

    - binary_search_threshold: index_of uses binary search above this count,
      a linear scan otherwise
    - days_per_year: divisor for year fractions (periodicity, bond returns)
    - value_decimals: decimals of the default value formatter
    - max_date: sentinel date used by synchronize past the last source sample
    """

    binary_search_threshold: int = 20
    days_per_year: float = DAYS_PER_YEAR
    value_decimals: int = 2
    max_date: date = field(default=date.max)


@dataclass(frozen=True)
class RandomWalkConfig:
    """Configuration of generate_random_time_series."""

    start_value: float = 100.0
    business_days_per_year: int = 252
    calendar_days_per_year: int = 365
    round_decimals: int = 2


DEFAULT_SERIES_SETTINGS: Final[SeriesSettings] = SeriesSettings()
DEFAULT_RANDOM_WALK_CONFIG: Final[RandomWalkConfig] = RandomWalkConfig()
