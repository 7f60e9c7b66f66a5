"""Export suite results to CSV and Markdown formats.

CSV format: one row per measurement (long format for pandas/R),
failed trials included.

Markdown format: a summary table suitable for reports, README files,
and GitHub issues.
"""

from __future__ import annotations

import csv
import io
from typing import Mapping, Sequence

from trialbench.bench.results import AggregateStat, ComparisonResult, SuiteResult
from trialbench.bench.stats import throughput


# ---------------------------------------------------------------------------
# CSV export
# ---------------------------------------------------------------------------


def export_csv(result: SuiteResult) -> str:
    """Export measurements as CSV, in execution order.

    Columns:
        workload, size, configuration, elapsed_ms, throughput, status
    """
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(
        ["workload", "size", "configuration", "elapsed_ms", "throughput", "status"]
    )

    for m in result.measurements:
        rate = throughput(m.workload_size, m.elapsed_ms) if m.succeeded else None
        writer.writerow(
            [
                m.workload_id,
                m.workload_size,
                m.config_name,
                f"{m.elapsed_ms:.3f}",
                f"{rate:.1f}" if rate is not None else "",
                m.status,
            ]
        )

    return output.getvalue()


# ---------------------------------------------------------------------------
# Markdown export
# ---------------------------------------------------------------------------


def export_markdown(
    result: SuiteResult,
    stats: Mapping[str, AggregateStat],
    comparisons: Sequence[ComparisonResult] = (),
    *,
    title: str = "Benchmark Results",
) -> str:
    """Export a Markdown report: summary table, comparisons, failures."""
    lines: list[str] = [f"# {title}", ""]

    if result.start_time:
        lines.append(f"**Started:** {result.start_time}  ")
    if result.end_time:
        lines.append(f"**Finished:** {result.end_time}  ")
    lines.append(
        f"**Workloads:** {', '.join(str(w.size) for w in result.workloads) or 'none'}  "
    )
    lines.append(f"**Trials:** {len(result.measurements)}")
    lines.append("")

    lines.append("## Summary")
    lines.append("")
    lines.append("| Configuration | Average (ms) | Min (ms) | Max (ms) | Trials |")
    lines.append("|---|---:|---:|---:|---:|")
    for name in result.config_names:
        stat = stats.get(name)
        if stat is None:
            lines.append(f"| {name} | N/A | N/A | N/A | 0 |")
        else:
            lines.append(
                f"| {name} | {stat.mean:.2f} | {stat.min:.2f} | {stat.max:.2f} | {stat.count} |"
            )

    if comparisons:
        lines.append("")
        lines.append("## Improvement")
        lines.append("")
        lines.append("| Baseline | Candidate | Improvement |")
        lines.append("|---|---|---:|")
        for c in comparisons:
            value = f"{c.improvement_pct:.1f}%" if c.computable else "not computable"
            lines.append(f"| {c.baseline_name} | {c.candidate_name} | {value} |")

    failed = result.failed
    if failed:
        lines.append("")
        lines.append("## Failed trials")
        lines.append("")
        for m in failed:
            detail = f" ({m.detail})" if m.detail else ""
            lines.append(f"- {m.workload_id} / {m.config_name}{detail}")

    return "\n".join(lines) + "\n"
