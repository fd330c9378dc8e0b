"""Decimal rendering of large non-negative integers.

Small values are shown exactly.  Values above the threshold are shown in
scientific notation, ``D.DDDDe+E``, where the leading digits are *truncated*
rather than rounded and ``E`` is the number of decimal digits minus one,
grouped with ``,`` separators.  Neither the digit count nor the leading digits
require converting the whole value to a decimal string, which for results
with millions of digits would dominate the running time.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from .formatting import thousands_separator

__all__ = [
    "DEFAULT_THRESHOLD",
    "DEFAULT_SIGNIFICANT_DIGITS",
    "decimal_digit_count",
    "render",
    "to_decimal_string",
    "to_scientific_notation",
    "use_scientific_notation",
]

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 10**35
DEFAULT_SIGNIFICANT_DIGITS = 5

LOG10_2 = 0.30102999566398114


def _check_value(value: int) -> None:
    if value < 0:
        raise ValueError("value must be non-negative")


def _decimal_exponent(value: int) -> int:
    """Return ``e`` such that ``10**e <= value < 10**(e + 1)`` for ``value > 0``."""
    # bit_length * log10(2) lands on the exponent or one above it
    exponent = int(value.bit_length() * LOG10_2)
    power = 10**exponent
    if value < power:
        exponent -= 1
    elif value >= power * 10:
        exponent += 1
    return exponent


def decimal_digit_count(value: int) -> int:
    """Return the number of decimal digits of *value* (``1`` for zero)."""
    _check_value(value)
    if value == 0:
        return 1
    return _decimal_exponent(value) + 1


def to_scientific_notation(value: int, significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS) -> str:
    """Return *value* in scientific notation with *significant_digits* digits.

    The leading digits are obtained by integer division and therefore
    truncated: ``123456789`` becomes ``"1.2345e+8"``, not ``"1.2346e+8"``.
    Zero is rendered as ``"0.0e0"``.  With a single significant digit the
    fraction is omitted (``"1e+8"``).

    Raises
    ------
    ValueError
        If *value* is negative or *significant_digits* is less than one.
    """
    _check_value(value)
    if significant_digits < 1:
        raise ValueError("significant_digits must be at least 1")
    if value == 0:
        return "0.0e0"

    exponent = _decimal_exponent(value)

    shift = exponent - (significant_digits - 1)
    if shift >= 0:
        leading = value // 10**shift
    else:
        leading = value * 10**-shift

    upper_bound = 10**significant_digits
    lower_bound = 10**(significant_digits - 1)
    while leading >= upper_bound:
        leading //= 10
        exponent += 1
    while leading < lower_bound:
        leading *= 10
        exponent -= 1

    integer_part, fraction = divmod(leading, lower_bound)
    if significant_digits == 1:
        return f"{integer_part}e+{thousands_separator(exponent)}"
    return f"{integer_part}.{fraction:0{significant_digits - 1}d}e+{thousands_separator(exponent)}"


def to_decimal_string(value: int) -> str:
    """Return the exact decimal digits of *value*.

    CPython refuses to convert integers longer than
    ``sys.get_int_max_str_digits()`` digits; the limit is lifted for the
    duration of the conversion and restored afterwards.
    """
    _check_value(value)
    get_limit = getattr(sys, "get_int_max_str_digits", None)
    if get_limit is None:
        return str(value)

    limit = get_limit()
    if limit == 0 or value == 0 or _decimal_exponent(value) < limit:
        return str(value)

    sys.set_int_max_str_digits(0)
    try:
        return str(value)
    finally:
        sys.set_int_max_str_digits(limit)


def use_scientific_notation(value: int, threshold: Optional[int] = DEFAULT_THRESHOLD) -> bool:
    """Return True when *value* is strictly greater than *threshold*.

    A threshold of ``None`` always selects the exact decimal string.
    """
    return threshold is not None and value > threshold


def render(
    value: int,
    threshold: Optional[int] = DEFAULT_THRESHOLD,
    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS,
) -> str:
    """Render *value* exactly, or in scientific notation above *threshold*.

    >>> render(354224848179261915075)
    '354224848179261915075'
    >>> render(10**35 + 1)
    '1.0000e+35'
    """
    _check_value(value)
    if use_scientific_notation(value, threshold):
        logger.debug({"event": "render", "mode": "scientific", "bit_length": value.bit_length()})
        return to_scientific_notation(value, significant_digits)
    logger.debug({"event": "render", "mode": "exact", "bit_length": value.bit_length()})
    return to_decimal_string(value)
