"""Display helpers: digit grouping and human-readable durations."""

from __future__ import annotations

import math

__all__ = ["thousands_separator", "format_duration"]


def thousands_separator(number: int) -> str:
    """Return *number* with a ``,`` inserted every three digits from the right.

    >>> thousands_separator(1234567)
    '1,234,567'
    """
    if number < 0:
        raise ValueError("number must be non-negative")
    return f"{number:,}"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(seconds: float) -> str:
    """Format a duration in seconds using the most fitting unit.

    Below one millisecond the value is shown in whole microseconds, below one
    second in whole milliseconds, otherwise in seconds with three decimals.

    >>> format_duration(0.000042)
    '42μs'
    >>> format_duration(0.25)
    '250ms'
    >>> format_duration(3.14159)
    '3.142s'
    """
    if seconds < 1e-3:
        return f"{_round_half_up(seconds * 1e6)}μs"
    if seconds < 1.0:
        return f"{_round_half_up(seconds * 1e3)}ms"
    return f"{seconds:.3f}s"
