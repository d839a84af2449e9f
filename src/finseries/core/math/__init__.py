"""
Core math modules

Numerical primitives and list-level series algorithms. All functions are
pure and represent missing data with the NaN sentinel.
"""

# Numerical Safeguards
from finseries.core.math.numerical_safeguards import (
    NAN,
    guarded_difference,
    guarded_log_return,
    guarded_product,
    guarded_return,
    guarded_sum,
    is_valid_float,
    safe_divide,
    safe_log,
    safe_pow,
    sanitize_float,
)

# Special functions
from finseries.core.math.special_functions import erf, erfc, erfcinv, normal_inv

# Statistics
from finseries.core.math.statistics import (
    PERIODICITY_THRESHOLDS,
    average_annual_return,
    central_weighted_stdev,
    classify_periodicity,
)

# Drawdown
from finseries.core.math.drawdown import DRAWDOWN_INITIAL_MAX, DrawdownResult, compute_drawdown

# Compounding
from finseries.core.math.compounding import (
    bond_return,
    bond_total_return_index,
    cum_prod,
    cum_sum,
    cumulative,
    pairwise,
    year_fraction,
)

__all__ = [
    # Numerical Safeguards
    "NAN",
    "guarded_difference",
    "guarded_log_return",
    "guarded_product",
    "guarded_return",
    "guarded_sum",
    "is_valid_float",
    "safe_divide",
    "safe_log",
    "safe_pow",
    "sanitize_float",
    # Special functions
    "erf",
    "erfc",
    "erfcinv",
    "normal_inv",
    # Statistics
    "PERIODICITY_THRESHOLDS",
    "average_annual_return",
    "central_weighted_stdev",
    "classify_periodicity",
    # Drawdown
    "DRAWDOWN_INITIAL_MAX",
    "DrawdownResult",
    "compute_drawdown",
    # Compounding
    "bond_return",
    "bond_total_return_index",
    "cum_prod",
    "cum_sum",
    "cumulative",
    "pairwise",
    "year_fraction",
]
