"""In-process micro benchmarks: an old and a new routine, side by side.

Each case times the baseline ("old") and the optimized ("new") routine
with ``time_callable`` over the same seeded test data and reports the
relative improvement.  Both routines return a value on every call, and
the sinks are compared afterwards so a broken rewrite is caught.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from trialbench.bench.results import ComparisonResult
from trialbench.bench.stats import compare_timings
from trialbench.bench.timing import CallableTiming, time_callable
from trialbench.bench.workload import DEFAULT_SEED, WorkloadGenerator

log = logging.getLogger("trialbench")

DEFAULT_ITERATIONS = 100_000
NEG_INF = -999999


# ---------------------------------------------------------------------------
# Routines under comparison
# ---------------------------------------------------------------------------


def old_min2(a: int, b: int) -> int:
    return a if a < b else b


def old_max2(a: int, b: int) -> int:
    return a if a > b else b


def old_matrix_size(length: int, window: int) -> int:
    """Number of cells in a banded matrix, one diagonal at a time."""
    size = 0
    for i in range(1, window + 1):
        size += length - (i - 1)
    return size


def new_matrix_size(length: int, window: int) -> int:
    """Closed form of ``old_matrix_size``."""
    if window <= length:
        return window * length - (window * (window - 1)) // 2
    return (length * (length + 1)) // 2


def old_clear(values: list[int]) -> int:
    for i in range(len(values)):
        values[i] = NEG_INF
    return len(values)


def new_clear(values: list[int]) -> int:
    values[:] = [NEG_INF] * len(values)
    return len(values)


# ---------------------------------------------------------------------------
# Cases
# ---------------------------------------------------------------------------


@dataclass
class MicroCase:
    """A pair of zero-argument callables to compare."""

    name: str
    title: str
    old: Callable[[], Any]
    new: Callable[[], Any]
    iterations: int = DEFAULT_ITERATIONS
    old_label: str = "OLD"
    new_label: str = "NEW"


@dataclass
class MicroComparison:
    """Timings of both variants of one case and their comparison."""

    case: MicroCase
    old: CallableTiming
    new: CallableTiming
    comparison: ComparisonResult

    @property
    def results_match(self) -> bool:
        """True if both variants produced the same accumulated values."""
        return (
            self.old.sink.total == self.new.sink.total
            and self.old.sink.last == self.new.sink.last
        )


def default_cases(
    *,
    seed: int = DEFAULT_SEED,
    iterations: int | None = None,
) -> list[MicroCase]:
    """The stock cases, built from seeded test data."""
    gen = WorkloadGenerator(seed=seed)
    pairs = gen.generate_int_pairs(1000, 1, 1000)
    params = [(100, 50), (200, 100), (500, 250), (1000, 500), (2000, 1000)]
    old_buffer = [0] * 10_000
    new_buffer = [0] * 10_000
    as_list = list(range(100))
    as_tuple = tuple(range(100))

    def minmax_old() -> int:
        total = 0
        for a, b in pairs:
            total += old_min2(a, b)
            total += old_max2(a, b)
        return total

    def minmax_new() -> int:
        total = 0
        for a, b in pairs:
            total += min(a, b)
            total += max(a, b)
        return total

    def matrix_old() -> int:
        return sum(old_matrix_size(n, w) for n, w in params)

    def matrix_new() -> int:
        return sum(new_matrix_size(n, w) for n, w in params)

    def access_old() -> int:
        total = 0
        for i in range(100):
            total += as_list[i]
        return total

    def access_new() -> int:
        total = 0
        for v in as_tuple:
            total += v
        return total

    def n(default: int) -> int:
        return iterations if iterations is not None else default

    return [
        MicroCase(
            "minmax",
            "MIN/MAX Function Benchmark",
            minmax_old,
            minmax_new,
            n(1_000),
            "OLD: Conditional MIN/MAX",
            "NEW: Builtin min/max",
        ),
        MicroCase(
            "matrix_size",
            "Matrix Size Calculation Benchmark",
            matrix_old,
            matrix_new,
            n(1_000),
            "OLD: Loop-based",
            "NEW: Formula-based",
        ),
        MicroCase(
            "array_clear",
            "Array Clearing Benchmark",
            lambda: old_clear(old_buffer),
            lambda: new_clear(new_buffer),
            n(1_000),
            "OLD: Manual loop",
            "NEW: Slice assignment",
        ),
        MicroCase(
            "data_access",
            "Data Structure Access Benchmark",
            access_old,
            access_new,
            n(DEFAULT_ITERATIONS),
            "OLD: Indexed list",
            "NEW: Tuple iteration",
        ),
    ]


def run_micro_case(case: MicroCase) -> MicroComparison:
    """Time both variants of *case*, old first.

    Raises:
        CallableFault: If either variant raises.
    """
    log.debug("Micro case %s: %d iterations per variant", case.name, case.iterations)
    old = time_callable(case.old, case.iterations, name=case.old_label)
    new = time_callable(case.new, case.iterations, name=case.new_label)
    comparison = compare_timings(
        old.elapsed_ms,
        new.elapsed_ms,
        baseline=case.old_label,
        candidate=case.new_label,
    )
    result = MicroComparison(case=case, old=old, new=new, comparison=comparison)
    if not result.results_match:
        log.warning(
            "Micro case %s: old and new variants disagree (%r vs %r)",
            case.name,
            old.sink,
            new.sink,
        )
    return result


def run_micro_suite(cases: Sequence[MicroCase]) -> list[MicroComparison]:
    """Run cases in order, one at a time."""
    return [run_micro_case(case) for case in cases]


def select_cases(cases: Sequence[MicroCase], names: Sequence[str]) -> list[MicroCase]:
    """Keep only the cases named in *names* (all cases if empty).

    Raises:
        ValueError: If a name does not match any case.
    """
    if not names:
        return list(cases)
    by_name = {c.name: c for c in cases}
    unknown = [n for n in names if n not in by_name]
    if unknown:
        raise ValueError(
            f"Unknown micro case(s): {', '.join(unknown)}. "
            f"Available: {', '.join(by_name)}"
        )
    return [by_name[n] for n in names]
