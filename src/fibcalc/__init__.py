"""Arbitrary-size Fibonacci numbers with fast doubling and compact rendering."""

from .config import ConfigManager, get_config, reset_config
from .engine import EXECUTOR_KINDS, MAX_INDEX, create_executor, fibonacci, fibonacci_pair
from .errors import ConfigurationError, FibonacciError, IndexOutOfRange, InvalidIndexFormat
from .formatting import format_duration, thousands_separator
from .log import JsonFormatter, setup_logging
from .render import (
    DEFAULT_SIGNIFICANT_DIGITS,
    DEFAULT_THRESHOLD,
    decimal_digit_count,
    render,
    to_decimal_string,
    to_scientific_notation,
    use_scientific_notation,
)
from .repl import RunSettings, parse_index, report, run_repl

__version__ = "0.1.0"

__all__ = [
    "ConfigManager",
    "get_config",
    "reset_config",
    "EXECUTOR_KINDS",
    "MAX_INDEX",
    "create_executor",
    "fibonacci",
    "fibonacci_pair",
    "ConfigurationError",
    "FibonacciError",
    "IndexOutOfRange",
    "InvalidIndexFormat",
    "format_duration",
    "thousands_separator",
    "JsonFormatter",
    "setup_logging",
    "DEFAULT_SIGNIFICANT_DIGITS",
    "DEFAULT_THRESHOLD",
    "decimal_digit_count",
    "render",
    "to_decimal_string",
    "to_scientific_notation",
    "use_scientific_notation",
    "RunSettings",
    "parse_index",
    "report",
    "run_repl",
]
