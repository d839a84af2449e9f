"""
Statistics — periodicity inference, annualized return, robust stdev

Pure functions over plain values. TimeSeries delegates to them.

FORMULAS:
    per_year = days_per_year / (span_days / (count - 1))
    average_annual_return = exp(ln(end / start) / ((count - 1) / periodicity)) - 1

    central weighted stdev (rank i of n, sorted values y_i):
        u_i = (i + 0.5) / n
        x_i = normal_inv(u_i, 0, 1)
        w_i = (1 + cos(2*pi*(u_i - 0.5))) / 2
        stdev = (Swy*Swx - Swxy*Sw) / (Swx*Swx - Swx2*Sw)
"""

import math
from typing import Final, Sequence

from finseries.core.logging import get_logger
from finseries.core.math.numerical_safeguards import NAN, safe_divide, safe_log
from finseries.core.math.special_functions import normal_inv
from finseries.core.settings import DAYS_PER_YEAR

logger = get_logger(__name__)

# =============================================================================
# PERIODICITY THRESHOLDS
# =============================================================================

# (min samples per year, periodicity) checked in order; below all → 1
PERIODICITY_THRESHOLDS: Final[tuple[tuple[float, int], ...]] = (
    (200.0, 252),
    (40.0, 52),
    (10.0, 12),
    (3.0, 4),
    (1.5, 2),
)


def classify_periodicity(
    span_days: float,
    count: int,
    days_per_year: float = DAYS_PER_YEAR,
) -> int:
    """
    Classify the average sampling frequency into a standard periodicity.

    Args:
        span_days: Days between the first and the last sample
        count: Number of samples
        days_per_year: Days per year (default: 365.25)

    Returns:
        One of 252, 52, 12, 4, 2, 1; 0 if count < 2 or span is zero

    Examples:
        >>> classify_periodicity(91.0, 4)  # monthly
        12
        >>> classify_periodicity(0.0, 5)
        0
    """
    if count < 2:
        return 0
    dt = span_days / (count - 1)
    if dt == 0.0:
        return 0
    per_year = days_per_year / dt
    for threshold, periodicity in PERIODICITY_THRESHOLDS:
        if per_year > threshold:
            return periodicity
    return 1


def average_annual_return(
    start_value: float,
    end_value: float,
    count: int,
    periodicity: float,
) -> float:
    """
    Geometric average annual return from start/end values.

    Returns:
        exp(ln(end/start) / ((count-1)/periodicity)) - 1; 0.0 if count < 2

    Examples:
        >>> round(average_annual_return(100.0, 121.0, 3, 1), 12)
        0.1
    """
    if count < 2:
        return 0.0
    years = (count - 1) / periodicity if periodicity else math.inf
    log_ratio = safe_log(safe_divide(end_value, start_value))
    if math.isnan(log_ratio):
        return NAN
    return math.exp(log_ratio / years) - 1.0


def central_weighted_stdev(values: Sequence[float]) -> float:
    """
    Robust standard deviation: weighted least-squares slope of the sorted
    values against standard normal quantiles.

    The raised-cosine weight down-weights both tails, so a few outliers move
    the estimate much less than they move the sample stdev.

    Args:
        values: Sample values (order irrelevant)

    Returns:
        Estimated standard deviation; NAN if the regression is degenerate
        (empty input)
    """
    ys = sorted(values)
    n = len(ys)

    swx = 0.0
    swx2 = 0.0
    sw = 0.0
    swy = 0.0
    swxy = 0.0
    for i, y in enumerate(ys):
        u = (i + 0.5) / n
        x = normal_inv(u, 0.0, 1.0)
        w = (1.0 + math.cos(2.0 * math.pi * (u - 0.5))) / 2.0
        xw = x * w
        swx += xw
        swx2 += xw * x
        sw += w
        swy += w * y
        swxy += xw * y

    denominator = swx * swx - swx2 * sw
    if denominator == 0.0:
        logger.debug("weighted_stdev_degenerate", count=n)
    return safe_divide(swy * swx - swxy * sw, denominator, fallback=NAN)
