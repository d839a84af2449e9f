"""
Domain models: samples, raw records, series, re-gridding and generators.
"""

from finseries.core.domain.records import RawSeriesRecord
from finseries.core.domain.sample import (
    TimeSeriesItem,
    TimestampFormatError,
    parse_iso_date,
)
from finseries.core.domain.synchronization import SyncMethod, synchronize_values
from finseries.core.domain.series import (
    MonthRow,
    Portfolio,
    SeriesPoint,
    TimeSeries,
)
from finseries.core.domain.generators import generate_random_time_series

__all__ = [
    "RawSeriesRecord",
    "TimeSeriesItem",
    "TimestampFormatError",
    "parse_iso_date",
    "SyncMethod",
    "synchronize_values",
    "MonthRow",
    "Portfolio",
    "SeriesPoint",
    "TimeSeries",
    "generate_random_time_series",
]
