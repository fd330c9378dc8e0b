"""
Decimal renderer tests
"""
import os
import re
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

from fibcalc.engine import fibonacci
from fibcalc.render import (
    DEFAULT_THRESHOLD,
    decimal_digit_count,
    render,
    to_decimal_string,
    to_scientific_notation,
    use_scientific_notation,
)

SCIENTIFIC_PATTERN = re.compile(r"^\d\.\d{4}e\+[\d,]+$")


def expected_scientific(value):
    """Truncated reference built from the full decimal string"""
    digits = str(value)
    return f"{digits[0]}.{digits[1:5]}e+{len(digits) - 1:,}"


class TestExactRendering:
    """Values at or below the threshold"""

    def test_zero(self):
        assert render(0) == "0"

    def test_small_values(self):
        for value in (1, 9, 10, 55, 6765, 123456789):
            assert render(value) == str(value)

    def test_hundredth_fibonacci(self):
        assert render(fibonacci(100)) == "354224848179261915075"

    def test_threshold_is_exclusive(self):
        assert render(DEFAULT_THRESHOLD) == "1" + "0" * 35
        assert render(10**35 + 1) == "1.0000e+35"

    def test_below_threshold_has_no_leading_zeros(self):
        value = 10**35 - 1
        assert render(value) == "9" * 35

    def test_custom_threshold(self):
        assert render(123456, threshold=1000) == "1.2345e+5"
        assert render(123456, threshold=None) == "123456"

    def test_use_scientific_notation(self):
        assert use_scientific_notation(10**35 + 1)
        assert not use_scientific_notation(10**35)
        assert not use_scientific_notation(10**100, threshold=None)

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            render(-1)

    def test_exact_beyond_str_digit_limit(self):
        limit = sys.get_int_max_str_digits() if hasattr(sys, "get_int_max_str_digits") else None
        assert render(10**5000 - 1, threshold=None) == "9" * 5000
        assert render(10**5000, threshold=10**6000) == "1" + "0" * 5000
        if limit is not None:
            assert sys.get_int_max_str_digits() == limit

    def test_decimal_string(self):
        assert to_decimal_string(0) == "0"
        assert to_decimal_string(6765) == "6765"
        with pytest.raises(ValueError):
            to_decimal_string(-5)


class TestScientificNotation:
    """Digit count and leading digits of large values"""

    def test_thousandth_fibonacci(self):
        assert render(fibonacci(1000)) == "4.3466e+208"
        assert decimal_digit_count(fibonacci(1000)) == 209

    def test_zero(self):
        assert to_scientific_notation(0) == "0.0e0"

    def test_truncates_instead_of_rounding(self):
        assert to_scientific_notation(123456789 * 10**40) == "1.2345e+48"
        assert to_scientific_notation(999999 * 10**40) == "9.9999e+45"

    def test_fibonacci_values_match_reference(self):
        for n in range(170, 5000, 37):
            value = fibonacci(n)
            rendered = to_scientific_notation(value)
            assert SCIENTIFIC_PATTERN.match(rendered), rendered
            assert rendered == expected_scientific(value), n

    def test_exponent_grouping(self):
        value = fibonacci(9000)
        rendered = render(value)
        assert rendered == expected_scientific(value)
        assert rendered.endswith("e+1,880")

    def test_powers_of_ten(self):
        for exponent in range(5, 400):
            assert to_scientific_notation(10**exponent) == f"1.0000e+{exponent:,}"
            assert to_scientific_notation(10**exponent - 1) == f"9.9999e+{exponent - 1:,}"

    def test_powers_of_two(self):
        for exponent in range(17, 1200, 13):
            value = 2**exponent
            assert to_scientific_notation(value) == expected_scientific(value)
            assert to_scientific_notation(value - 1) == expected_scientific(value - 1)

    def test_fewer_digits_than_requested(self):
        assert to_scientific_notation(7) == "7.0000e+0"
        assert to_scientific_notation(123) == "1.2300e+2"

    def test_significant_digits(self):
        value = fibonacci(1000)
        assert to_scientific_notation(value, 3) == "4.34e+208"
        assert to_scientific_notation(value, 8) == "4.3466557e+208"
        assert to_scientific_notation(value, 1) == "4e+208"
        with pytest.raises(ValueError):
            to_scientific_notation(value, 0)

    def test_idempotent(self):
        value = fibonacci(4321)
        assert render(value) == render(value)


class TestDigitCount:
    """Exact decimal digit count from the bit length"""

    def test_small(self):
        assert decimal_digit_count(0) == 1
        assert decimal_digit_count(9) == 1
        assert decimal_digit_count(10) == 2
        assert decimal_digit_count(1023) == 4
        assert decimal_digit_count(1024) == 4

    def test_around_powers_of_ten(self):
        for exponent in range(1, 500):
            assert decimal_digit_count(10**exponent) == exponent + 1
            assert decimal_digit_count(10**exponent - 1) == exponent

    def test_large_value_without_string_conversion(self):
        assert decimal_digit_count(10**100000) == 100001
        assert to_scientific_notation(10**100000 + 12345 * 10**99990) == "1.0000e+100,000"
