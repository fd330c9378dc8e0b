"""Fibonacci engine based on the fast doubling identities.

The sequence is defined as::

    F(0) = 0
    F(1) = 1
    F(n) = F(n-1) + F(n-2) for n >= 2

Instead of ``n`` sequential additions the engine walks the bits of ``n``
from the most significant end, using::

    F(2k)   = F(k) * (2*F(k+1) - F(k))
    F(2k+1) = F(k)^2 + F(k+1)^2

which needs ``O(log n)`` levels.  At each level the two products only read
the pair computed one level below, so they are submitted to a
:mod:`concurrent.futures` executor as two independent tasks and joined
before the pair for the next level is assembled.

Example
-------
>>> fibonacci(10)
55
>>> fibonacci(100)
354224848179261915075
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Optional, Tuple

from .errors import IndexOutOfRange

__all__ = [
    "MAX_INDEX",
    "DEFAULT_PARALLEL_MIN_BITS",
    "EXECUTOR_KINDS",
    "check_index",
    "create_executor",
    "fibonacci",
    "fibonacci_pair",
]

logger = logging.getLogger(__name__)

MAX_INDEX = 2**64 - 1
DEFAULT_PARALLEL_MIN_BITS = 65536
DEFAULT_MAX_WORKERS = 2
EXECUTOR_KINDS = ("process", "thread")

# log2 of the golden ratio: F(n) has roughly n * LOG2_PHI bits.
LOG2_PHI = 0.6942419136306174


def _double_even(a: int, b: int) -> int:
    """F(2k) from (F(k), F(k+1))."""
    return a * (b * 2 - a)


def _double_odd(a: int, b: int) -> int:
    """F(2k+1) from (F(k), F(k+1))."""
    return a * a + b * b


def _fork_join(executor: Executor, a: int, b: int) -> Tuple[int, int]:
    even = executor.submit(_double_even, a, b)
    odd = executor.submit(_double_odd, a, b)
    return even.result(), odd.result()


def _fib_pair(k: int, executor: Optional[Executor], parallel_min_bits: int) -> Tuple[int, int]:
    if k == 0:
        return 0, 1

    a, b = _fib_pair(k >> 1, executor, parallel_min_bits)

    if executor is not None and b.bit_length() >= parallel_min_bits:
        c, d = _fork_join(executor, a, b)
    else:
        c, d = _double_even(a, b), _double_odd(a, b)

    if k & 1 == 0:
        return c, d
    return d, c + d


def check_index(n: int) -> int:
    """Validate *n* as a Fibonacci index and return it.

    Raises
    ------
    TypeError
        If ``n`` is not an ``int`` (``bool`` is rejected as well).
    IndexOutOfRange
        If ``n`` is negative or larger than :data:`MAX_INDEX`.
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"Fibonacci index must be an int, not {type(n).__name__}")
    if n < 0 or n > MAX_INDEX:
        raise IndexOutOfRange(n, MAX_INDEX)
    return n


def create_executor(kind: str = "process", max_workers: Optional[int] = None) -> Executor:
    """Create the pool used for the per-level fan-out.

    ``"process"`` gives real parallelism for CPython integer arithmetic,
    ``"thread"`` avoids pickling the operands.
    """
    workers = max_workers or DEFAULT_MAX_WORKERS
    if kind == "process":
        return ProcessPoolExecutor(max_workers=workers)
    if kind == "thread":
        return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fibcalc")
    raise ValueError(f"Unknown executor kind: {kind!r} (expected one of {', '.join(EXECUTOR_KINDS)})")


def fibonacci_pair(
    n: int,
    *,
    executor: Optional[Executor] = None,
    parallel_min_bits: int = DEFAULT_PARALLEL_MIN_BITS,
    executor_kind: str = "process",
    max_workers: Optional[int] = None,
) -> Tuple[int, int]:
    """Return ``(F(n), F(n+1))``.

    Parameters
    ----------
    n : int
        Index in ``0..MAX_INDEX``.
    executor : Executor, optional
        Pool to submit the products to.  It is left running.  When omitted a
        pool of ``executor_kind`` is created for this call, but only if the
        result is expected to reach ``parallel_min_bits``.
    parallel_min_bits : int
        Products whose larger operand has fewer bits than this are computed
        inline.  ``0`` fans out at every level.
    executor_kind, max_workers
        Passed to :func:`create_executor` when a pool has to be created.
    """
    check_index(n)
    if parallel_min_bits < 0:
        raise ValueError("parallel_min_bits must be non-negative")

    if executor is not None:
        return _fib_pair(n, executor, parallel_min_bits)

    if n * LOG2_PHI < parallel_min_bits:
        return _fib_pair(n, None, parallel_min_bits)

    with create_executor(executor_kind, max_workers) as pool:
        return _fib_pair(n, pool, parallel_min_bits)


def fibonacci(
    n: int,
    *,
    executor: Optional[Executor] = None,
    parallel_min_bits: int = DEFAULT_PARALLEL_MIN_BITS,
    executor_kind: str = "process",
    max_workers: Optional[int] = None,
) -> int:
    """Return the ``n``-th Fibonacci number.

    Keyword arguments are those of :func:`fibonacci_pair`.

    Raises
    ------
    TypeError
        If ``n`` is not an ``int``.
    IndexOutOfRange
        If ``n`` is outside ``0..MAX_INDEX``.
    """
    check_index(n)
    if n == 0:
        return 0

    logger.debug({
        "event": "fibonacci_start",
        "index": n,
        "executor": "caller" if executor is not None else executor_kind,
        "parallel_min_bits": parallel_min_bits,
    })
    result, _ = fibonacci_pair(
        n,
        executor=executor,
        parallel_min_bits=parallel_min_bits,
        executor_kind=executor_kind,
        max_workers=max_workers,
    )
    logger.debug({"event": "fibonacci_end", "index": n, "bit_length": result.bit_length()})
    return result
