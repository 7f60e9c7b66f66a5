"""Aggregation and comparison of benchmark measurements.

Only mean, min, max and count are reported.  Failed trials never enter
an aggregate, and a configuration with no successful trial has no
aggregate at all rather than a zero-valued one.

Improvement of a candidate over a baseline::

    improvement_pct = (baseline_mean - candidate_mean) / baseline_mean * 100

The value is signed; a slower candidate gives a negative improvement.
"""

from __future__ import annotations

import math
import statistics
from typing import Iterable, Mapping

from trialbench.bench.results import AggregateStat, ComparisonResult, Measurement


def aggregate(
    groups: Mapping[str, Iterable[Measurement]],
) -> dict[str, AggregateStat]:
    """Reduce grouped measurements to one AggregateStat per configuration.

    *groups* is normally ``SuiteResult.by_configuration()``, so each run
    is aggregated from its own measurements only.  Keys keep their order;
    configurations with no successful measurement are omitted.
    """
    stats: dict[str, AggregateStat] = {}
    for name, measurements in groups.items():
        times = [m.elapsed_ms for m in measurements if m.succeeded]
        if times:
            stats[name] = summarize(times)
    return stats


def summarize(times: list[float]) -> AggregateStat:
    """AggregateStat for a non-empty list of elapsed times."""
    if not times:
        raise ValueError("Cannot summarize an empty sample.")
    return AggregateStat(
        count=len(times),
        mean=statistics.fmean(times),
        min=min(times),
        max=max(times),
    )


def compare(
    stats: Mapping[str, AggregateStat],
    baseline: str,
    candidate: str,
) -> ComparisonResult:
    """Relative improvement of *candidate* over *baseline*.

    Not computable when either configuration has no AggregateStat or
    the baseline mean is not positive.
    """
    base = stats.get(baseline)
    cand = stats.get(candidate)
    if base is None:
        return ComparisonResult(
            baseline, candidate, None, f"no successful trials for '{baseline}'"
        )
    if cand is None:
        return ComparisonResult(
            baseline, candidate, None, f"no successful trials for '{candidate}'"
        )
    return compare_timings(base.mean, cand.mean, baseline=baseline, candidate=candidate)


def compare_timings(
    baseline_ms: float,
    candidate_ms: float,
    *,
    baseline: str = "baseline",
    candidate: str = "candidate",
) -> ComparisonResult:
    """Relative improvement between two single timings."""
    if not (math.isfinite(baseline_ms) and math.isfinite(candidate_ms)):
        return ComparisonResult(baseline, candidate, None, "non-finite timing")
    if baseline_ms <= 0:
        return ComparisonResult(
            baseline, candidate, None, f"baseline time is {baseline_ms:g} ms"
        )
    improvement = (baseline_ms - candidate_ms) / baseline_ms * 100
    return ComparisonResult(baseline, candidate, improvement)


def compare_all(
    stats: Mapping[str, AggregateStat],
    baseline: str,
    names: Iterable[str] | None = None,
) -> list[ComparisonResult]:
    """Compare *baseline* against every other configuration.

    Args:
        stats: Aggregates by configuration name.
        baseline: Name of the baseline configuration.
        names: Candidate names in display order (default: keys of *stats*).
    """
    candidates = list(names) if names is not None else list(stats)
    return [compare(stats, baseline, n) for n in candidates if n != baseline]


def throughput(size: int, elapsed_ms: float) -> float | None:
    """Symbols processed per second, or None for a non-positive time."""
    if elapsed_ms <= 0 or not math.isfinite(elapsed_ms):
        return None
    return size * 1000.0 / elapsed_ms
