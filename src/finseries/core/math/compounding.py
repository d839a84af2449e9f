"""
Compounding — pairwise, cumulative and bond total-return folds

Pure list-level algorithms behind the TimeSeries value transforms:
- Pairwise operators (difference, return, log-return) over consecutive values
- Running folds (sum, product) with NaN poisoning
- Bond return between two par-rate observations and the compounded
  total-return index

CRITICAL INVARIANTS:
1. Pairwise operators see the previous RAW value, never the previous result
2. Once a running fold meets a non-finite value, every later result is NaN
3. All operations are deterministic and reproducible

FORMULAS:
    dt = (t1 - t0) / days_per_year
    maturity <= dt:        R = (1 + y0)^dt
    no yearly coupons:     R = (1 + y0)^M * (1 + y1)^(dt - M)
    yearly coupons:        R = sum_{i=1..M} (c_i + y0) * (1 + y1)^(dt - i),
                           c_i = 1 if i == M else 0
    total return index:    TR_0 = 1,  TR_k = TR_{k-1} * R(k-1, k)
"""

from datetime import date
from typing import Callable, Sequence

from finseries.core.math.numerical_safeguards import guarded_product, guarded_sum, safe_pow
from finseries.core.settings import DAYS_PER_YEAR

BinaryOperator = Callable[[float, float], float]


# =============================================================================
# PAIRWISE / CUMULATIVE FOLDS
# =============================================================================


def pairwise(values: Sequence[float], operator: BinaryOperator) -> list[float]:
    """
    Apply operator(previous, current) to each consecutive pair.

    Returns:
        List one element shorter than values (empty for fewer than 2 values)

    Examples:
        >>> pairwise([1.0, 3.0, 6.0], lambda v0, v1: v1 - v0)
        [2.0, 3.0]
    """
    return [operator(v0, v1) for v0, v1 in zip(values, values[1:])]


def cumulative(values: Sequence[float], seed: float, operator: BinaryOperator) -> list[float]:
    """
    Running fold acc = operator(acc, value), starting from seed.

    Examples:
        >>> cumulative([1.0, 2.0, 3.0], 0.0, lambda a, v: a + v)
        [1.0, 3.0, 6.0]
    """
    result: list[float] = []
    acc = seed
    for value in values:
        acc = operator(acc, value)
        result.append(acc)
    return result


def cum_sum(values: Sequence[float]) -> list[float]:
    """Running sum from 0 with NaN poisoning."""
    return cumulative(values, 0.0, guarded_sum)


def cum_prod(values: Sequence[float]) -> list[float]:
    """Running product from 1 with NaN poisoning."""
    return cumulative(values, 1.0, guarded_product)


# =============================================================================
# BOND RETURNS
# =============================================================================


def year_fraction(d0: date, d1: date, days_per_year: float = DAYS_PER_YEAR) -> float:
    """
    Years between two dates.

    Examples:
        >>> round(year_fraction(date(2020, 1, 1), date(2021, 1, 1)), 6)
        1.002053
    """
    return (d1 - d0).days / days_per_year


def bond_return(
    rate0: float,
    rate1: float,
    dt: float,
    maturity: float,
    yearly_coupons: bool,
) -> float:
    """
    Gross return of a par bond bought at rate0 and revalued at rate1 after dt years.

    Args:
        rate0: Par yield at purchase (e.g. 0.02 for 2%)
        rate1: Par yield at revaluation
        dt: Holding period in years
        maturity: Bond maturity in years
        yearly_coupons: True for a yearly coupon bond, False for a zero-coupon
            bond compounding at rate0

    Returns:
        Gross holding-period return (1.0 = unchanged)

    Raises:
        ValueError: If maturity is negative
    """
    if maturity < 0:
        raise ValueError(f"maturity must be non-negative, got {maturity}")

    if maturity <= dt:
        return safe_pow(1.0 + rate0, dt)

    if not yearly_coupons:
        return safe_pow(1.0 + rate0, maturity) * safe_pow(1.0 + rate1, dt - maturity)

    value = 0.0
    i = 1
    while i <= maturity:
        coupon = 1.0 if i == maturity else 0.0
        value += (coupon + rate0) * safe_pow(1.0 + rate1, dt - i)
        i += 1
    return value


def bond_total_return_index(
    timestamps: Sequence[date],
    rates: Sequence[float],
    maturity: float,
    yearly_coupons: bool,
    days_per_year: float = DAYS_PER_YEAR,
) -> list[float]:
    """
    Compound bond_return across consecutive par-rate observations.

    Args:
        timestamps: Observation dates (ascending)
        rates: Par yields, same length as timestamps
        maturity: Bond maturity in years
        yearly_coupons: Coupon convention (see bond_return)
        days_per_year: Days per year for the holding period

    Returns:
        Total-return index starting at 1.0 (empty for empty input)

    Raises:
        ValueError: If timestamps and rates differ in length
    """
    if len(timestamps) != len(rates):
        raise ValueError(
            f"timestamps and rates must have equal length, got {len(timestamps)} and {len(rates)}"
        )
    if not rates:
        return []

    index = [1.0]
    value = 1.0
    for k in range(1, len(rates)):
        dt = year_fraction(timestamps[k - 1], timestamps[k], days_per_year)
        value *= bond_return(rates[k - 1], rates[k], dt, maturity, yearly_coupons)
        index.append(value)
    return index
