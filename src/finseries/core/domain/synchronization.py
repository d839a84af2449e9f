"""
Synchronization — re-gridding a series onto master timestamps

Two-pointer forward merge over two ascending date sequences. The source
cursor j keeps the bracket st = t_j, stn = t_{j+1} (or the max-date sentinel
past the last sample) so that st <= t < stn for every master date t.

Policies (SyncMethod):
    exact                        value at j if st == t, else NaN
    latest                       value at j if st <= t, else NaN
    latestOnlyWithinRange        as latest, NaN after the last source date
    latestStartValueBeforeRange  as latest, but master dates before the
                                 first source date take the first value

INVARIANTS:
1. Output length == number of master dates, in master order
2. Both sequences are walked once: O(n + m)
3. Empty source → every output value is NaN
"""

from datetime import date
from enum import Enum
from typing import Sequence

from finseries.core.logging import get_logger
from finseries.core.math.numerical_safeguards import NAN

logger = get_logger(__name__)


class SyncMethod(str, Enum):
    """Value selection policy of synchronize."""

    EXACT = "exact"
    LATEST = "latest"
    LATEST_ONLY_WITHIN_RANGE = "latestOnlyWithinRange"
    LATEST_START_VALUE_BEFORE_RANGE = "latestStartValueBeforeRange"


def synchronize_values(
    source_dates: Sequence[date],
    source_values: Sequence[float],
    master_dates: Sequence[date],
    method: SyncMethod = SyncMethod.LATEST,
    max_date: date = date.max,
) -> list[float]:
    """
    Select one source value per master date.

    Args:
        source_dates: Source timestamps, strictly ascending
        source_values: Source values, same length as source_dates
        master_dates: Target timestamps, ascending
        method: Selection policy
        max_date: Sentinel bracket end past the last source date

    Returns:
        List of values aligned with master_dates

    Examples:
        >>> src = [date(2016, 1, 1), date(2016, 1, 3)]
        >>> synchronize_values(src, [1.0, 3.0], [date(2016, 1, 2)], SyncMethod.LATEST)
        [1.0]
    """
    method = SyncMethod(method)
    n = len(source_dates)
    if n == 0:
        logger.debug("sync_source_empty", masters=len(master_dates))
        return [NAN] * len(master_dates)

    j = 0
    st = source_dates[0]
    stn = source_dates[1] if n > 1 else max_date

    result: list[float] = []
    for t in master_dates:
        while stn <= t and j + 1 < n:
            st = stn
            j += 1
            stn = source_dates[j + 1] if j + 1 < n else max_date

        v = source_values[j]
        sv = NAN
        if st > t and method is SyncMethod.LATEST_START_VALUE_BEFORE_RANGE:
            sv = v
        elif st == t or (method is not SyncMethod.EXACT and st < t):
            sv = v
        if method is SyncMethod.LATEST_ONLY_WITHIN_RANGE and st < t and stn == max_date:
            sv = NAN
        result.append(sv)

    return result
