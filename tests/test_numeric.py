"""
Tests for parsing, rendering and IEEE helpers.
"""

import math

import pytest

from quantum_calc import numeric
from quantum_calc.errors import InvalidNumberError
from quantum_calc.models import FallbackPolicy


class TestParsing:
    """Test lenient and strict number parsing."""

    def test_parses_decimal(self):
        assert numeric.parse_number("-3.25") == -3.25

    def test_parses_rendered_infinity(self):
        assert numeric.parse_number("Infinity") == math.inf

    def test_lenient_failure_is_zero(self):
        assert numeric.parse_number("1.2.3") == 0.0

    def test_empty_is_zero(self):
        assert numeric.parse_number("") == 0.0

    def test_rejects_digit_separators(self):
        assert numeric.try_parse_number("1_000") is None

    def test_rejects_padding(self):
        assert numeric.try_parse_number(" 5") is None

    def test_strict_failure_raises(self):
        with pytest.raises(InvalidNumberError):
            numeric.parse_number("(", FallbackPolicy.STRICT)


class TestRendering:
    """Test how doubles appear on the display."""

    def test_whole_number_keeps_fraction(self):
        assert numeric.format_number(12.0) == "12.0"

    def test_non_finite_values(self):
        assert numeric.format_number(math.inf) == "Infinity"
        assert numeric.format_number(-math.inf) == "-Infinity"
        assert numeric.format_number(math.nan) == "NaN"

    def test_truncation(self):
        assert numeric.truncate_for_display(math.pi, 4) == "3.14"


class TestIEEE:
    """Test IEEE-754 results where Python would raise."""

    def test_divide_by_zero(self):
        assert numeric.ieee_divide(3.0, 0.0) == math.inf
        assert numeric.ieee_divide(-3.0, 0.0) == -math.inf
        assert math.isnan(numeric.ieee_divide(0.0, 0.0))

    def test_remainder(self):
        assert numeric.ieee_remainder(-7.0, 3.0) == -1.0
        assert math.isnan(numeric.ieee_remainder(1.0, 0.0))
        assert math.isnan(numeric.ieee_remainder(math.inf, 2.0))

    def test_logs(self):
        assert numeric.log10(0.0) == -math.inf
        assert math.isnan(numeric.ln(-1.0))

    def test_trig_of_infinity_is_nan(self):
        assert math.isnan(numeric.sin_degrees(math.inf))
