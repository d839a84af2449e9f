"""
Tests for Special Functions — erf, erfc, erfcinv, normal_inv

Reference values from the standard normal distribution.
"""

import math

import pytest

from finseries.core.math.special_functions import (
    ERF_COEFFICIENTS,
    ERFCINV_SATURATION,
    erf,
    erfc,
    erfcinv,
    normal_inv,
)


class TestErf:
    def test_coefficient_count(self):
        assert len(ERF_COEFFICIENTS) == 28

    @pytest.mark.parametrize("x", [0.0, 0.1, 0.5, 1.0, 1.5, 2.0, 3.0, 5.0])
    def test_matches_math_erf(self, x):
        assert erf(x) == pytest.approx(math.erf(x), abs=1e-12)

    @pytest.mark.parametrize("x", [0.3, 1.0, 2.5])
    def test_odd_function(self, x):
        assert erf(-x) == pytest.approx(-erf(x), abs=1e-15)

    def test_saturates(self):
        assert erf(10.0) == pytest.approx(1.0, abs=1e-15)

    @pytest.mark.parametrize("x", [-1.0, 0.0, 0.7, 2.0])
    def test_erfc_complements(self, x):
        assert erfc(x) == pytest.approx(1.0 - erf(x), abs=1e-15)


class TestErfcinv:
    @pytest.mark.parametrize("x", [-2.0, -0.5, 0.0, 0.25, 1.0, 2.0])
    def test_inverts_erfc(self, x):
        assert erfcinv(erfc(x)) == pytest.approx(x, abs=1e-8)

    def test_saturation_high(self):
        assert erfcinv(2.0) == -ERFCINV_SATURATION
        assert erfcinv(3.0) == -100.0

    def test_saturation_low(self):
        assert erfcinv(0.0) == ERFCINV_SATURATION
        assert erfcinv(-1.0) == 100.0


class TestNormalInv:
    @pytest.mark.parametrize(
        "p, expected",
        [
            (0.5, 0.0),
            (0.975, 1.959963984540054),
            (0.025, -1.959963984540054),
            (0.8413447460685429, 1.0),
            (0.001, -3.090232306167813),
        ],
    )
    def test_standard_quantiles(self, p, expected):
        assert normal_inv(p) == pytest.approx(expected, abs=1e-8)

    def test_mean_and_std(self):
        assert normal_inv(0.975, mean=3.0, std=2.0) == pytest.approx(
            3.0 + 2.0 * 1.959963984540054, abs=1e-7
        )

    def test_monotonic(self):
        ps = [0.01 * k for k in range(1, 100)]
        qs = [normal_inv(p) for p in ps]
        assert all(a < b for a, b in zip(qs, qs[1:]))
