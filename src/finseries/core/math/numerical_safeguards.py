"""
Numerical Safeguards — NaN Sentinel Primitives

Every series operation represents missing or undefined data with a single
not-a-number sentinel. The module collects the guards that decide when an
arithmetic step is allowed and when it yields the sentinel:
- Finiteness predicate (rejects NaN, ±Inf and non-numeric values like None)
- Safe log (NaN for non-positive or non-finite input)
- Guarded binary operators for difference, return and log-return
- Guarded accumulators for running sums and products
- Division with an explicit fallback for a zero denominator
- Real power without complex results

CRITICAL INVARIANTS:
1. Missing data is never raised, only propagated as NAN
2. A non-finite operand always produces NAN (except where a transform is
   defined to leave the value unchanged)
3. All operations are deterministic and side-effect free
"""

import math
from typing import Final

# =============================================================================
# SENTINEL
# =============================================================================

# Sentinel for "missing/undefined" values throughout arithmetic
NAN: Final[float] = float("nan")


# =============================================================================
# FINITENESS
# =============================================================================


def is_valid_float(value: object) -> bool:
    """
    Check that a value is a finite number.

    Booleans and non-numeric objects (None, strings) are not valid.

    Args:
        value: Value to check

    Returns:
        True if value is an int/float and finite, False otherwise

    Examples:
        >>> is_valid_float(1.5)
        True
        >>> is_valid_float(float('nan'))
        False
        >>> is_valid_float(None)
        False
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def sanitize_float(value: object, fallback: float = NAN) -> float:
    """
    Coerce a raw input value to float, mapping missing input to fallback.

    Used at the construction boundary where raw records may carry None.

    Examples:
        >>> sanitize_float(2)
        2.0
        >>> math.isnan(sanitize_float(None))
        True
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return float(value)
    return fallback


# =============================================================================
# SAFE FUNCTIONS
# =============================================================================


def safe_log(value: float) -> float:
    """
    Natural log that returns NAN instead of raising.

    Returns:
        log(value) if value is finite and > 0, else NAN

    Examples:
        >>> safe_log(1.0)
        0.0
        >>> math.isnan(safe_log(0.0))
        True
        >>> math.isnan(safe_log(-2.0))
        True
    """
    if not is_valid_float(value):
        return NAN
    if value <= 0.0:
        return NAN
    return math.log(value)


def safe_divide(numerator: float, denominator: float, fallback: float = NAN) -> float:
    """
    Division with a fallback for a zero or non-finite denominator.

    Unlike epsilon clamping, a tiny but non-zero denominator is divided as is.

    Args:
        numerator: Numerator
        denominator: Denominator
        fallback: Value returned when the denominator is 0 or not finite

    Examples:
        >>> safe_divide(10.0, 4.0)
        2.5
        >>> safe_divide(1.0, 0.0, fallback=0.0)
        0.0
    """
    if not is_valid_float(denominator) or denominator == 0.0:
        return fallback
    return numerator / denominator


# =============================================================================
# GUARDED BINARY OPERATORS (v0 = previous, v1 = current)
# =============================================================================


def guarded_difference(v0: float, v1: float) -> float:
    """v1 - v0 if both finite, else NAN."""
    if is_valid_float(v0) and is_valid_float(v1):
        return v1 - v0
    return NAN


def guarded_return(v0: float, v1: float) -> float:
    """Simple return v1 / v0 - 1 if both finite and v0 != 0, else NAN."""
    if is_valid_float(v0) and is_valid_float(v1) and v0 != 0.0:
        return v1 / v0 - 1.0
    return NAN


def guarded_log_return(v0: float, v1: float) -> float:
    """Log return ln(v1 / v0) under the same guard as guarded_return."""
    if is_valid_float(v0) and is_valid_float(v1) and v0 != 0.0:
        return safe_log(v1 / v0)
    return NAN


def guarded_sum(acc: float, value: float) -> float:
    """Running-sum step; a non-finite accumulator or value poisons the result."""
    if is_valid_float(acc) and is_valid_float(value):
        return acc + value
    return NAN


def guarded_product(acc: float, value: float) -> float:
    """Running-product step; a non-finite accumulator or value poisons the result."""
    if is_valid_float(acc) and is_valid_float(value):
        return acc * value
    return NAN


def safe_pow(base: float, exponent: float) -> float:
    """
    Real power that returns NAN instead of a complex result or an exception.

    Examples:
        >>> safe_pow(2.0, 3.0)
        8.0
        >>> math.isnan(safe_pow(-0.5, 0.5))
        True
    """
    if base < 0.0 and not float(exponent).is_integer():
        return NAN
    try:
        return math.pow(base, exponent)
    except (ValueError, OverflowError):
        return NAN
