"""
TimeSeriesItem — one (timestamp, value) observation

Timestamps have day resolution (datetime.date). Values are floats, with NaN
as the sentinel for missing data.

Construction boundary (no runtime type sniffing):
- TimeSeriesItem(timestamp, value)           already typed values
- TimeSeriesItem.from_record(record)         any object with .timestamp/.value
- TimeSeriesItem.from_iso(text, value)       ISO-8601 date or date-time text

Malformed timestamp text raises TimestampFormatError instead of producing an
item whose timestamp is not a calendar date.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Final, Protocol

from finseries.core.math.numerical_safeguards import sanitize_float

# YYYY-MM-DD, optionally followed by a time part (Thh:mm[:ss[.fff]][Z|±hh:mm])
ISO_TIMESTAMP_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^(\d{4})-([01]\d)-([0-3]\d)"
    r"(?:[T ][0-2]\d:[0-5]\d(?::[0-5]\d(?:\.\d+)?)?(?:Z|[+-][0-2]\d:?[0-5]\d)?)?$"
)


class TimestampFormatError(ValueError):
    """Timestamp text is not an ISO-8601 date or date-time."""


class SampleRecord(Protocol):
    """Anything exposing a timestamp and a value."""

    @property
    def timestamp(self) -> date: ...

    @property
    def value(self) -> float: ...


def parse_iso_date(text: str) -> date:
    """
    Parse ISO-8601 date or date-time text to a calendar date.

    The time of day (and offset) is dropped; the date part is taken as written.

    Raises:
        TimestampFormatError: If text does not match the ISO pattern or is not
            a real calendar date

    Examples:
        >>> parse_iso_date("2016-08-31")
        datetime.date(2016, 8, 31)
        >>> parse_iso_date("2016-08-31T12:00:00.000Z")
        datetime.date(2016, 8, 31)
    """
    match = ISO_TIMESTAMP_PATTERN.match(text.strip())
    if match is None:
        raise TimestampFormatError(f"Timestamp is not ISO-8601: {text!r}")
    year, month, day = (int(g) for g in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise TimestampFormatError(f"Timestamp is not a calendar date: {text!r}") from e


@dataclass
class TimeSeriesItem:
    """
    Mutable sample; series operators rewrite `value` in place.

    Examples:
        >>> item = TimeSeriesItem(date(2016, 8, 31), 1.23)
        >>> copy = item.clone()
        >>> copy.value = 2.0
        >>> item.value
        1.23
    """

    timestamp: date
    value: float

    def __post_init__(self) -> None:
        if isinstance(self.timestamp, datetime):
            self.timestamp = self.timestamp.date()

    @classmethod
    def from_record(cls, record: SampleRecord) -> "TimeSeriesItem":
        """Copy timestamp and value from a record-like object."""
        return cls(record.timestamp, record.value)

    @classmethod
    def from_iso(cls, text: str, value: float | None) -> "TimeSeriesItem":
        """Build from ISO text; None values become NaN."""
        return cls(parse_iso_date(text), sanitize_float(value))

    def clone(self) -> "TimeSeriesItem":
        return TimeSeriesItem(self.timestamp, self.value)
