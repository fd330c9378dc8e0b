"""
Exception types raised by fibcalc.
"""

__all__ = ["FibonacciError", "InvalidIndexFormat", "IndexOutOfRange", "ConfigurationError"]


class FibonacciError(Exception):
    """Base exception class for Fibonacci calculation errors."""
    pass


class InvalidIndexFormat(FibonacciError, ValueError):
    """Raised when textual input is not a well-formed non-negative integer."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Not a valid Fibonacci index: {text!r}")


class IndexOutOfRange(FibonacciError, ValueError):
    """Raised when an index falls outside the supported 64-bit range."""

    def __init__(self, index, maximum: int):
        self.index = index
        self.maximum = maximum
        super().__init__(f"Index {index} is outside the supported range 0..{maximum}")


class ConfigurationError(FibonacciError, ValueError):
    """Raised when a setting has an unusable value."""

    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for {key}: {value!r} ({reason})")
