"""Benchmark suite orchestration.

A suite owns a matrix of workloads × configurations and walks it in a
fixed order: workloads by ascending size (outer), configurations in
declaration order (inner).  Each cell is one trial and yields exactly
one Measurement.  Trials run strictly one after another.

Lifecycle::

    IDLE --run()--> RUNNING --all cells done--> COMPLETE

A failed trial is recorded and the suite moves on; it is never retried.
A PreconditionError from the subject keeps the suite IDLE.  A
CallableFault aborts the run.
"""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence

from trialbench.bench.config import Configuration
from trialbench.bench.results import Measurement, SuiteResult
from trialbench.bench.stats import throughput
from trialbench.bench.subject import Subject
from trialbench.bench.workload import Workload

log = logging.getLogger("trialbench")


class SuiteState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Progress callback
# ---------------------------------------------------------------------------


@dataclass
class SuiteProgress:
    """Progress info passed to the callback after each trial."""

    workload_id: str
    workload_size: int
    config_name: str
    trial: int  # 1-based
    total_trials: int
    elapsed_ms: float
    succeeded: bool


ProgressCallback = Callable[[SuiteProgress], None]


# ---------------------------------------------------------------------------
# BenchmarkSuite
# ---------------------------------------------------------------------------


class BenchmarkSuite:
    """Runs every (workload, configuration) cell against one subject.

    Usage::

        suite = BenchmarkSuite(subject, workloads, configurations, fixtures=paths)
        result = suite.run()
    """

    def __init__(
        self,
        subject: Subject,
        workloads: Sequence[Workload],
        configurations: Sequence[Configuration],
        *,
        fixtures: Mapping[str, Path] | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> None:
        names = [c.name for c in configurations]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate configuration names: {', '.join(duplicates)}")

        self.subject = subject
        # sorted() is stable, so equal sizes keep their given order.
        self.workloads: list[Workload] = sorted(workloads, key=lambda w: w.size)
        self.configurations: list[Configuration] = list(configurations)
        self.fixtures: dict[str, Path] = dict(fixtures or {})
        self.progress: ProgressCallback = progress_callback or self._default_progress
        self.state = SuiteState.IDLE
        self._result: SuiteResult | None = None

    @property
    def total_trials(self) -> int:
        return len(self.workloads) * len(self.configurations)

    @property
    def result(self) -> SuiteResult | None:
        """The result once the suite is COMPLETE, else None."""
        return self._result if self.state is SuiteState.COMPLETE else None

    def run(self) -> SuiteResult:
        """Execute every cell of the matrix once.

        Returns:
            SuiteResult with measurements ordered workload-major,
            configuration-minor.

        Raises:
            RuntimeError: If the suite has already been started.
            PreconditionError: If the subject cannot run; no trial runs.
            CallableFault: If an in-process subject raises mid-trial.
        """
        if self.state is not SuiteState.IDLE:
            raise RuntimeError(f"Suite cannot be run from state {self.state.value!r}")

        self.subject.check()

        self.state = SuiteState.RUNNING
        result = SuiteResult(
            workloads=list(self.workloads),
            configurations=list(self.configurations),
            start_time=time.strftime("%Y-%m-%dT%H:%M:%S%z"),
        )
        log.info(
            "Running %d trials (%d workloads x %d configurations) against %s",
            self.total_trials,
            len(self.workloads),
            len(self.configurations),
            self.subject.name,
        )

        trial = 0
        for workload in self.workloads:
            fixture = self.fixtures.get(workload.id)
            for configuration in self.configurations:
                trial += 1
                outcome = self.subject.run_trial(workload, configuration, fixture)
                measurement = Measurement(
                    workload_id=workload.id,
                    config_name=configuration.name,
                    elapsed_ms=outcome.elapsed_ms,
                    succeeded=outcome.succeeded,
                    workload_size=workload.size,
                    detail=outcome.detail,
                )
                result.measurements.append(measurement)
                self.progress(
                    SuiteProgress(
                        workload_id=workload.id,
                        workload_size=workload.size,
                        config_name=configuration.name,
                        trial=trial,
                        total_trials=self.total_trials,
                        elapsed_ms=outcome.elapsed_ms,
                        succeeded=outcome.succeeded,
                    )
                )

        result.end_time = time.strftime("%Y-%m-%dT%H:%M:%S%z")
        failed = len(result.failed)
        if failed:
            log.warning("%d of %d trials failed", failed, self.total_trials)
        self._result = result
        self.state = SuiteState.COMPLETE
        return result

    @staticmethod
    def _default_progress(progress: SuiteProgress) -> None:
        """Default progress callback: one log line per trial."""
        status = "OK" if progress.succeeded else "FAILED"
        rate = throughput(progress.workload_size, progress.elapsed_ms)
        line = (
            f"  [{progress.trial}/{progress.total_trials}] "
            f"{progress.workload_id:15s} {progress.config_name:15s} "
            f"{progress.elapsed_ms:10.2f}ms "
        )
        if progress.succeeded and rate is not None:
            line += f"{int(rate):>10d} aa/s "
        line += f"[{status}]"
        log.info(line)
