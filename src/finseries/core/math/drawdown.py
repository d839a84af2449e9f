"""
Drawdown — relative decline from the running maximum

Single forward pass over the values:
    max_t      = running maximum (advances only on a strict new high)
    drawdown_t = value_t / max_t - 1
    max drawdown = most negative drawdown_t (first occurrence wins on ties)

INVARIANTS:
1. The peak index is the index of the running maximum at the trough
2. With no decline the peak and trough indices stay at 0 and the max
   drawdown stays 0.0
3. NaN values never advance the maximum; a NaN drawdown (NaN value or
   0/0) never becomes the minimum
4. A negative value below a zero maximum is a -inf drawdown, so the
   decline is recorded
"""

import math
from typing import Final, NamedTuple, Sequence

from finseries.core.math.numerical_safeguards import NAN

# Initial running maximum
DRAWDOWN_INITIAL_MAX: Final[float] = -9e9


def relative_drawdown(value: float, running_max: float) -> float:
    """
    value / running_max - 1 with IEEE semantics for a zero maximum.

    Examples:
        >>> relative_drawdown(-1.0, 0.0)
        -inf
        >>> math.isnan(relative_drawdown(0.0, 0.0))
        True
    """
    if running_max == 0.0:
        if value < 0.0:
            return -math.inf
        if value > 0.0:
            return math.inf
        return NAN
    return value / running_max - 1.0


class DrawdownResult(NamedTuple):
    """Result of a drawdown pass."""

    curve: list[float]  # drawdown per input point
    max_drawdown: float  # most negative drawdown (<= 0)
    peak_index: int  # index of the peak preceding the max drawdown
    trough_index: int  # index of the trough of the max drawdown


def compute_drawdown(values: Sequence[float]) -> DrawdownResult:
    """
    Compute the drawdown curve and the maximum drawdown.

    Args:
        values: Values in chronological order

    Returns:
        DrawdownResult with the full curve and peak/trough indices

    Examples:
        >>> r = compute_drawdown([1.23, 1.27, 1.24, 1.31])
        >>> (r.peak_index, r.trough_index)
        (1, 2)
        >>> round(r.max_drawdown, 4)
        -0.0236
    """
    running_max = DRAWDOWN_INITIAL_MAX
    max_index = 0
    max_drawdown = 0.0
    peak_index = 0
    trough_index = 0
    curve: list[float] = []

    for i, value in enumerate(values):
        if value > running_max:
            running_max = value
            max_index = i
        drawdown = relative_drawdown(value, running_max)
        if drawdown < max_drawdown:
            max_drawdown = drawdown
            peak_index = max_index
            trough_index = i
        curve.append(drawdown)

    return DrawdownResult(
        curve=curve,
        max_drawdown=max_drawdown,
        peak_index=peak_index,
        trough_index=trough_index,
    )
