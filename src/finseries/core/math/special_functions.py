"""
Special Functions — Error Function and Normal Quantile

Fixed-coefficient approximations used by the central weighted stdev statistic:
- erf / erfc via a 28-term Chebyshev expansion (double precision over the
  practical range)
- erfcinv via an asymptotic initial guess refined by two Halley steps
- normal_inv: quantile of N(mean, std) for a probability p

FORMULAS:
    t = 2 / (2 + |x|),  ty = 4t - 2
    erfc(|x|) = t * exp(-x^2 + (c_0 + ty * d) / 2 - dd)   (Clenshaw recurrence)
    normal_inv(p) = -sqrt(2) * std * erfcinv(2p) + mean
"""

import math
from typing import Final

# =============================================================================
# COEFFICIENTS
# =============================================================================

ERF_COEFFICIENTS: Final[tuple[float, ...]] = (
    -1.3026537197817094, 6.4196979235649026e-1, 1.9476473204185836e-2,
    -9.561514786808631e-3, -9.46595344482036e-4, 3.66839497852761e-4,
    4.2523324806907e-5, -2.0278578112534e-5, -1.624290004647e-6,
    1.303655835580e-6, 1.5626441722e-8, -8.5238095915e-8,
    6.529054439e-9, 5.059343495e-9, -9.91364156e-10,
    -2.27365122e-10, 9.6467911e-11, 2.394038e-12,
    -6.886027e-12, 8.94487e-13, 3.13092e-13,
    -1.12708e-13, 3.81e-16, 7.106e-15,
    -1.523e-15, -9.4e-17, 1.21e-16,
    -2.8e-17,
)

# 2 / sqrt(pi)
TWO_OVER_SQRT_PI: Final[float] = 1.12837916709551257

SQRT_2: Final[float] = 1.41421356237309505

# Saturation values of erfcinv outside (0, 2)
ERFCINV_SATURATION: Final[float] = 100.0

ERFCINV_REFINEMENT_STEPS: Final[int] = 2


# =============================================================================
# ERROR FUNCTION
# =============================================================================


def erf(x: float) -> float:
    """
    Error function.

    Examples:
        >>> abs(erf(0.0)) < 1e-15
        True
        >>> abs(erf(1.0) - 0.8427007929497149) < 1e-12
        True
    """
    is_negative = x < 0
    if is_negative:
        x = -x

    t = 2.0 / (2.0 + x)
    ty = 4.0 * t - 2.0
    d = 0.0
    dd = 0.0
    for j in range(len(ERF_COEFFICIENTS) - 1, 0, -1):
        tmp = d
        d = ty * d - dd + ERF_COEFFICIENTS[j]
        dd = tmp

    res = t * math.exp(-x * x + 0.5 * (ERF_COEFFICIENTS[0] + ty * d) - dd)
    return res - 1.0 if is_negative else 1.0 - res


def erfc(x: float) -> float:
    """Complementary error function 1 - erf(x)."""
    return 1.0 - erf(x)


def erfcinv(p: float) -> float:
    """
    Inverse complementary error function.

    Args:
        p: Argument in (0, 2)

    Returns:
        x with erfc(x) == p; -100 for p >= 2 and +100 for p <= 0

    Examples:
        >>> abs(erfcinv(1.0)) < 1e-12
        True
        >>> erfcinv(0.0)
        100.0
    """
    if p >= 2.0:
        return -ERFCINV_SATURATION
    if p <= 0.0:
        return ERFCINV_SATURATION

    pp = p if p < 1.0 else 2.0 - p
    t = math.sqrt(-2.0 * math.log(pp / 2.0))
    x = -0.70711 * ((2.30753 + t * 0.27061) / (1.0 + t * (0.99229 + t * 0.04481)) - t)

    for _ in range(ERFCINV_REFINEMENT_STEPS):
        err = erfc(x) - pp
        x += err / (TWO_OVER_SQRT_PI * math.exp(-x * x) - x * err)

    return x if p < 1.0 else -x


def normal_inv(p: float, mean: float = 0.0, std: float = 1.0) -> float:
    """
    Quantile of the normal distribution N(mean, std).

    Examples:
        >>> abs(normal_inv(0.5)) < 1e-12
        True
        >>> abs(normal_inv(0.975) - 1.959963984540054) < 1e-8
        True
    """
    return -SQRT_2 * std * erfcinv(2.0 * p) + mean
