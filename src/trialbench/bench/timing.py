"""Timing capture for benchmark trials.

Three layers:

- ``Timer``: a stopwatch over a monotonic clock.
- ``run_timed``: wall time and exit status of an external command whose
  output is discarded.
- ``time_callable``: aggregate time of N in-process calls inside a single
  timed interval, with every return value folded into a ``Sink`` that is
  handed back to the caller.
"""

from __future__ import annotations

import logging
import math
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Sequence

from trialbench.bench.errors import CallableFault

log = logging.getLogger("trialbench")


# ---------------------------------------------------------------------------
# Timer
# ---------------------------------------------------------------------------


class Timer:
    """Stopwatch started on construction.

    Uses ``time.perf_counter``, which is monotonic and unaffected by
    system clock adjustments.
    """

    def __init__(self) -> None:
        self._start = time.perf_counter()

    def start(self) -> None:
        """Restart the stopwatch."""
        self._start = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Milliseconds since the last start."""
        return (time.perf_counter() - self._start) * 1000.0


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


@dataclass
class TimedResult:
    """Result of a timed subprocess execution."""

    elapsed_ms: float
    exit_code: int
    launch_error: str = ""


def run_timed(
    command: Sequence[str],
    *,
    cwd: str | Path | None = None,
    env: dict[str, str] | None = None,
) -> TimedResult:
    """Execute a command and capture its wall time and exit status.

    Standard output and standard error are discarded.  The call waits
    for the process without a timeout.

    Args:
        command: Argument list; the first element is the executable.
        cwd: Working directory for the subprocess.
        env: Full environment for the subprocess (inherited if None).

    Returns:
        TimedResult.  A process that could not be launched is reported
        with ``exit_code=-1`` and ``launch_error`` set rather than raised.
    """
    timer = Timer()
    try:
        proc = subprocess.run(
            list(command),
            cwd=str(cwd) if cwd else None,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError as exc:
        elapsed = timer.elapsed_ms()
        log.debug("Failed to launch %s: %s", command[0] if command else "?", exc)
        return TimedResult(elapsed_ms=elapsed, exit_code=-1, launch_error=str(exc))
    elapsed = timer.elapsed_ms()

    return TimedResult(elapsed_ms=elapsed, exit_code=proc.returncode)


# ---------------------------------------------------------------------------
# In-process callables
# ---------------------------------------------------------------------------


class Sink:
    """Observable destination for values computed inside a timed loop.

    Numeric results are summed into ``total``; every result bumps
    ``count`` and replaces ``last``.  Reading the sink after the loop
    keeps the measured work from being dead code.
    """

    __slots__ = ("total", "count", "last")

    def __init__(self) -> None:
        self.total: float = 0
        self.count = 0
        self.last: Any = None

    def consume(self, value: Any) -> None:
        self.count += 1
        self.last = value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            self.total += value

    def __repr__(self) -> str:
        return f"Sink(total={self.total!r}, count={self.count})"


@dataclass
class CallableTiming:
    """Aggregate timing of repeated in-process calls."""

    name: str
    elapsed_ms: float
    iterations: int
    sink: Sink

    @property
    def ops_per_ms(self) -> float:
        """Calls per millisecond, or NaN if the loop took no measurable time."""
        if self.elapsed_ms <= 0:
            return math.nan
        return self.iterations / self.elapsed_ms


def time_callable(
    fn: Callable[[], Any],
    iterations: int,
    *,
    name: str = "",
) -> CallableTiming:
    """Invoke *fn* ``iterations`` times inside one timed interval.

    Args:
        fn: Zero-argument callable under test.
        iterations: Number of calls; must be at least 1.
        name: Label used in the timing and in error messages.

    Returns:
        CallableTiming whose ``sink`` holds every return value.

    Raises:
        ValueError: If *iterations* is less than 1.
        CallableFault: If *fn* raises.  No partial timing is returned.
    """
    if iterations < 1:
        raise ValueError(f"iterations must be at least 1 (got {iterations})")

    label = name or getattr(fn, "__name__", "callable")
    sink = Sink()
    consume = sink.consume

    i = 0
    timer = Timer()
    try:
        for i in range(iterations):
            consume(fn())
    except Exception as exc:
        raise CallableFault(label, i + 1, exc) from exc
    elapsed = timer.elapsed_ms()

    return CallableTiming(name=label, elapsed_ms=elapsed, iterations=iterations, sink=sink)
