"""Terminal display formatting for benchmark results.

Produces fixed-width tables and summaries for suite and micro benchmark
results.  Failed trials are always listed, marked FAILED.
"""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from trialbench.bench.micro import MicroComparison
from trialbench.bench.results import AggregateStat, ComparisonResult, SuiteResult
from trialbench.bench.stats import throughput
from trialbench.bench.timing import CallableTiming

_TABLE_WIDTH = 80
_SECTION_WIDTH = 60


def _banner(title: str, width: int = _SECTION_WIDTH) -> list[str]:
    return ["=" * width, title, "=" * width]


def _format_throughput(size: int, elapsed_ms: float, succeeded: bool) -> str:
    rate = throughput(size, elapsed_ms) if succeeded else None
    if rate is None:
        return "N/A"
    return f"{int(rate)} aa/s"


def format_pct(value: float | None, precision: int = 1) -> str:
    """Format a signed percentage, or N/A."""
    if value is None or math.isnan(value):
        return "N/A"
    return f"{value:.{precision}f}%"


# ---------------------------------------------------------------------------
# Suite display
# ---------------------------------------------------------------------------


def format_trial_table(result: SuiteResult) -> str:
    """One row per measurement, with a rule after each workload."""
    lines: list[str] = []
    lines.extend(_banner("Performance Benchmark Suite", _TABLE_WIDTH))
    lines.append(
        f"{'Test File':>15s}{'Config':>16s}{'Time (ms)':>12s}{'Throughput':>15s}{'Status':>10s}"
    )
    lines.append("-" * _TABLE_WIDTH)

    names = {w.id: w.fixture_name for w in result.workloads}
    for workload_id, measurements in result.by_workload().items():
        for m in measurements:
            lines.append(
                f"{names.get(workload_id, workload_id):>15s}"
                f"{m.config_name:>16s}"
                f"{m.elapsed_ms:>12.2f}"
                f"{_format_throughput(m.workload_size, m.elapsed_ms, m.succeeded):>15s}"
                f"{m.status:>10s}"
            )
        lines.append("-" * _TABLE_WIDTH)

    return "\n".join(lines)


def format_summary(
    stats: Mapping[str, AggregateStat],
    order: Sequence[str] | None = None,
) -> str:
    """Per-configuration average, min, max and trial count.

    Args:
        stats: Aggregates by configuration name.
        order: Configuration names to list, in order.  Names without an
            aggregate are shown as having no successful trials.
    """
    names = list(order) if order is not None else list(stats)
    lines = _banner("Performance Analysis Summary")

    for name in names:
        stat = stats.get(name)
        lines.append(f"Configuration: {name}")
        if stat is None:
            lines.append("  No successful trials")
        else:
            lines.append(f"  Average time: {stat.mean:.2f} ms")
            lines.append(f"  Min time:     {stat.min:.2f} ms")
            lines.append(f"  Max time:     {stat.max:.2f} ms")
            lines.append(f"  Tests run:    {stat.count}")
        lines.append("")

    return "\n".join(lines).rstrip("\n")


def format_comparison(comparison: ComparisonResult) -> str:
    """``Improvement: x.x%`` for the pair, or why it is not computable."""
    head = f"{comparison.baseline_name} -> {comparison.candidate_name}"
    if not comparison.computable:
        return f"{head}: Improvement: not computable ({comparison.reason})"
    return f"{head}: Improvement: {format_pct(comparison.improvement_pct)}"


def format_suite_report(
    result: SuiteResult,
    stats: Mapping[str, AggregateStat],
    comparisons: Sequence[ComparisonResult],
) -> str:
    """Trial table, per-configuration summary and comparisons."""
    parts = [
        format_trial_table(result),
        "",
        format_summary(stats, result.config_names),
    ]
    if comparisons:
        parts.append("")
        parts.extend(_banner("Relative Improvement"))
        parts.extend(format_comparison(c) for c in comparisons)
    failed = result.failed
    if failed:
        parts.append("")
        parts.append(f"{len(failed)} of {len(result.measurements)} trials FAILED")
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# Micro benchmark display
# ---------------------------------------------------------------------------


def _format_timing(timing: CallableTiming) -> str:
    rate = timing.ops_per_ms
    rate_str = "N/A" if math.isnan(rate) else f"{rate:8.1f}"
    return f"{timing.name:>25s}: {timing.elapsed_ms:8.3f} ms ({rate_str} ops/ms)"


def format_micro_comparison(result: MicroComparison) -> str:
    lines = [""]
    lines.extend(_banner(result.case.title))
    lines.append(_format_timing(result.old))
    lines.append(_format_timing(result.new))
    lines.append("-" * _SECTION_WIDTH)
    if result.comparison.computable:
        lines.append(f"Improvement: {format_pct(result.comparison.improvement_pct)}")
    else:
        lines.append(f"Improvement: not computable ({result.comparison.reason})")
    if not result.results_match:
        lines.append("Warning: old and new variants produced different results")
    return "\n".join(lines)


def format_micro_report(results: Sequence[MicroComparison]) -> str:
    """All micro comparisons, in the order they ran."""
    return "\n".join(format_micro_comparison(r) for r in results)
