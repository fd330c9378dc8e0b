"""Wall-clock measurement helpers.

Usage:

```python
from fibcalc.timing import Stopwatch

with Stopwatch() as watch:
    value = fibonacci(1000)
print(watch.elapsed)
```

It uses :func:`time.perf_counter` for high-resolution timing.
"""

from __future__ import annotations

import time
from typing import Optional

__all__ = ["Stopwatch"]


class Stopwatch:
    """Context manager recording the time spent inside its block."""

    def __init__(self) -> None:
        self._start: Optional[float] = None
        self._end: Optional[float] = None

    def __enter__(self) -> "Stopwatch":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    @property
    def elapsed(self) -> float:
        """Seconds elapsed; while still running, the time so far."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.perf_counter()
        return end - self._start
