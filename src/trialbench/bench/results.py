"""Benchmark result data structures.

Hierarchy::

    SuiteResult (one suite execution)
      → workloads: list[Workload]
      → configurations: list[Configuration]
      → measurements: list[Measurement]   (workload-major, configuration-minor)

    AggregateStat (per configuration, successful measurements only)
    ComparisonResult (baseline vs candidate)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from trialbench.bench.config import Configuration
from trialbench.bench.workload import Workload


# ---------------------------------------------------------------------------
# Trial-level result
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Measurement:
    """Outcome of one trial.

    When ``succeeded`` is False, ``elapsed_ms`` is not meaningful and is
    excluded from aggregation.
    """

    workload_id: str
    config_name: str
    elapsed_ms: float
    succeeded: bool
    workload_size: int = 0
    detail: str = ""

    @property
    def status(self) -> str:
        return "OK" if self.succeeded else "FAILED"


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AggregateStat:
    """Reduction of one configuration's successful measurements."""

    count: int
    mean: float
    min: float
    max: float


@dataclass(frozen=True)
class ComparisonResult:
    """Relative improvement of a candidate over a baseline.

    ``improvement_pct`` is signed: negative means the candidate is
    slower.  It is None when the comparison is not computable, in which
    case ``reason`` says why.
    """

    baseline_name: str
    candidate_name: str
    improvement_pct: float | None
    reason: str = ""

    @property
    def computable(self) -> bool:
        return self.improvement_pct is not None


# ---------------------------------------------------------------------------
# Suite-level result
# ---------------------------------------------------------------------------


@dataclass
class SuiteResult:
    """Everything one suite run produced, in execution order."""

    workloads: list[Workload] = field(default_factory=list)
    configurations: list[Configuration] = field(default_factory=list)
    measurements: list[Measurement] = field(default_factory=list)
    start_time: str = ""
    end_time: str = ""

    @property
    def config_names(self) -> list[str]:
        return [c.name for c in self.configurations]

    @property
    def failed(self) -> list[Measurement]:
        return [m for m in self.measurements if not m.succeeded]

    def by_configuration(self) -> dict[str, list[Measurement]]:
        """Measurements grouped by configuration, in declaration order."""
        groups: dict[str, list[Measurement]] = {name: [] for name in self.config_names}
        for m in self.measurements:
            groups.setdefault(m.config_name, []).append(m)
        return groups

    def by_workload(self) -> dict[str, list[Measurement]]:
        """Measurements grouped by workload, in execution order."""
        groups: dict[str, list[Measurement]] = {}
        for m in self.measurements:
            groups.setdefault(m.workload_id, []).append(m)
        return groups
