"""Interactive read loop.

Reads an index per line, computes the Fibonacci number, and prints the
result together with how long the calculation and the rendering took::

    Enter Fibonacci number index (or 'q' to quit): 1000

    Calculated the 1,000th Fibonacci number
    Fibonacci calculation duration: 21μs
    Result to Scientific notation duration: 6μs
    Result:
    4.3466e+208

Malformed lines are reported and discarded; ``q`` or end of input ends the
loop.
"""

from __future__ import annotations

import logging
import re
import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from .config import ConfigManager
from .engine import DEFAULT_PARALLEL_MIN_BITS, EXECUTOR_KINDS, MAX_INDEX, fibonacci
from .errors import ConfigurationError, FibonacciError, IndexOutOfRange, InvalidIndexFormat
from .formatting import format_duration, thousands_separator
from .render import DEFAULT_SIGNIFICANT_DIGITS, DEFAULT_THRESHOLD, render, use_scientific_notation
from .timing import Stopwatch

__all__ = [
    "PROMPT",
    "QUIT_COMMAND",
    "INVALID_INPUT_MESSAGE",
    "RunSettings",
    "parse_index",
    "report",
    "run_repl",
]

logger = logging.getLogger(__name__)

PROMPT = "Enter Fibonacci number index (or 'q' to quit): "
QUIT_COMMAND = "q"
INVALID_INPUT_MESSAGE = "Please enter a valid number"

_INDEX_PATTERN = re.compile(r"\+?[0-9]+")
_MAX_INDEX_DIGITS = len(str(MAX_INDEX))


def parse_index(text: str) -> int:
    """Parse a textual Fibonacci index.

    Surrounding whitespace is ignored and a single leading ``+`` is accepted.

    Raises
    ------
    InvalidIndexFormat
        If *text* is not a non-negative decimal integer.
    IndexOutOfRange
        If the value exceeds :data:`~fibcalc.engine.MAX_INDEX`.
    """
    stripped = text.strip()
    if not _INDEX_PATTERN.fullmatch(stripped):
        raise InvalidIndexFormat(text)

    digits = stripped.lstrip("+").lstrip("0") or "0"
    if len(digits) > _MAX_INDEX_DIGITS:
        raise IndexOutOfRange(f"{digits[:_MAX_INDEX_DIGITS]}...", MAX_INDEX)

    index = int(digits)
    if index > MAX_INDEX:
        raise IndexOutOfRange(index, MAX_INDEX)
    return index


def _setting_int(key: str, value, minimum: int, allow_none: bool = False) -> Optional[int]:
    if value is None and allow_none:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(key, value, "expected an integer")
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationError(key, value, "expected an integer") from None
    if number < minimum:
        raise ConfigurationError(key, value, f"must be at least {minimum}")
    return number


def _setting_section(name: str, section) -> dict:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(name, section, "expected a mapping")
    return section


@dataclass
class RunSettings:
    """Engine and rendering options for one session.

    Values are validated on construction; an unusable value raises
    :class:`~fibcalc.errors.ConfigurationError` naming the setting.
    """

    executor_kind: str = "process"
    max_workers: Optional[int] = None
    parallel_min_bits: int = DEFAULT_PARALLEL_MIN_BITS
    threshold: Optional[int] = DEFAULT_THRESHOLD
    significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS

    def __post_init__(self) -> None:
        if self.executor_kind not in EXECUTOR_KINDS:
            raise ConfigurationError(
                "engine.executor", self.executor_kind, f"expected one of {', '.join(EXECUTOR_KINDS)}"
            )
        self.max_workers = _setting_int("engine.max_workers", self.max_workers, 1, allow_none=True)
        self.parallel_min_bits = _setting_int("engine.parallel_min_bits", self.parallel_min_bits, 0)
        self.threshold = _setting_int("render.threshold", self.threshold, 0, allow_none=True)
        self.significant_digits = _setting_int("render.significant_digits", self.significant_digits, 1)

    @classmethod
    def from_config(cls, config: ConfigManager) -> "RunSettings":
        engine = _setting_section("engine", config.get_engine_config())
        rendering = _setting_section("render", config.get_render_config())
        exponent = _setting_int("render.threshold_exponent", rendering.get("threshold_exponent", 35), 0)
        return cls(
            executor_kind=engine.get("executor", "process"),
            max_workers=engine.get("max_workers"),
            parallel_min_bits=engine.get("parallel_min_bits", DEFAULT_PARALLEL_MIN_BITS),
            threshold=10**exponent,
            significant_digits=rendering.get("significant_digits", DEFAULT_SIGNIFICANT_DIGITS),
        )


def report(index: int, settings: RunSettings, out: TextIO) -> str:
    """Compute F(*index*), print the timing report to *out*, return the rendered value."""
    with Stopwatch() as calculation:
        value = fibonacci(
            index,
            parallel_min_bits=settings.parallel_min_bits,
            executor_kind=settings.executor_kind,
            max_workers=settings.max_workers,
        )

    print(f"\nCalculated the {thousands_separator(index)}th Fibonacci number", file=out)
    print(f"Fibonacci calculation duration: {format_duration(calculation.elapsed)}", file=out)

    scientific = use_scientific_notation(value, settings.threshold)
    with Stopwatch() as conversion:
        result = render(value, settings.threshold, settings.significant_digits)

    if scientific:
        print(f"Result to Scientific notation duration: {format_duration(conversion.elapsed)}", file=out)
    else:
        print(f"Result to String duration: {format_duration(conversion.elapsed)}", file=out)
    print(f"Result:\n{result}", file=out)

    logger.info({
        "event": "calculation",
        "index": index,
        "scientific": scientific,
        "calculation_seconds": round(calculation.elapsed, 6),
        "conversion_seconds": round(conversion.elapsed, 6),
    })
    return result


def run_repl(
    settings: Optional[RunSettings] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> None:
    """Prompt for indices until ``q`` or end of input."""
    settings = settings or RunSettings()
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    while True:
        stdout.write(PROMPT)
        stdout.flush()

        line = stdin.readline()
        if not line:
            stdout.write("\n")
            break

        text = line.strip()
        if text.lower() == QUIT_COMMAND:
            break

        try:
            index = parse_index(text)
        except InvalidIndexFormat:
            logger.info({"event": "invalid_input", "input": text[:64]})
            print(INVALID_INPUT_MESSAGE, file=stdout)
            continue
        except IndexOutOfRange as e:
            logger.info({"event": "index_out_of_range", "error": str(e)})
            print(f"Error: {e}", file=stdout)
            print("\n", file=stdout)
            continue

        try:
            report(index, settings, stdout)
        except FibonacciError as e:
            logger.error({"event": "calculation_failed", "index": index, "error": str(e)})
            print(f"Error: {e}", file=stdout)
        print("\n", file=stdout)
