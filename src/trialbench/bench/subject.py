"""Subjects under test.

A subject is anything the suite can time against a (workload,
configuration) pair.  Two kinds ship here:

- ``ExternalProcessSubject``: a black-box executable invoked as
  ``<executable> <flags> <fixture-file>``; only exit status and wall
  time are observed.
- ``CallableSubject``: an in-process function called N times inside a
  single timed interval.

New kinds only need to satisfy the ``Subject`` protocol.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Protocol

from trialbench.bench.config import Configuration
from trialbench.bench.errors import PreconditionError
from trialbench.bench.timing import Sink, run_timed, time_callable
from trialbench.bench.workload import Workload

log = logging.getLogger("trialbench")


@dataclass(frozen=True)
class TrialOutcome:
    """What a subject reports for one trial."""

    elapsed_ms: float
    succeeded: bool
    detail: str = ""


class Subject(Protocol):
    """Interface the suite drives."""

    name: str

    def check(self) -> None:
        """Raise PreconditionError if the subject cannot run at all."""
        ...

    def run_trial(
        self,
        workload: Workload,
        configuration: Configuration,
        fixture: Path | None,
    ) -> TrialOutcome:
        """Run one timed trial."""
        ...


# ---------------------------------------------------------------------------
# External process
# ---------------------------------------------------------------------------


class ExternalProcessSubject:
    """An executable run once per trial against a fixture file."""

    def __init__(self, executable: str | Path, *, cwd: Path | None = None) -> None:
        self.executable = str(executable)
        self.name = Path(self.executable).name
        self.cwd = cwd
        self._resolved: str | None = None

    def resolve(self) -> str | None:
        """Path to the executable, or None if it cannot be run.

        Names without a directory component are looked up on ``PATH``.
        """
        if self._is_bare_name():
            return shutil.which(self.executable)
        path = Path(self.executable)
        if path.is_file() and os.access(path, os.X_OK):
            return str(path)
        return None

    def _is_bare_name(self) -> bool:
        return os.sep not in self.executable and "/" not in self.executable

    def check(self) -> None:
        resolved = self.resolve()
        if resolved is None:
            path = Path(self.executable)
            if self._is_bare_name():
                reason = "was not found on PATH"
                if path.is_file():
                    reason += f" (to run the local file, use ./{self.executable})"
            elif path.exists() and not path.is_file():
                reason = "is not a file"
            elif path.exists():
                reason = "is not executable"
            else:
                reason = "was not found"
            raise PreconditionError(f"Subject executable {self.executable} {reason}.")
        self._resolved = resolved

    def build_command(self, configuration: Configuration, fixture: Path | None) -> list[str]:
        """Argument list for one trial: executable, flags, then input file."""
        command = [self._resolved or self.executable]
        command.extend(configuration.argv())
        if fixture is not None:
            command.append(str(fixture))
        return command

    def run_trial(
        self,
        workload: Workload,
        configuration: Configuration,
        fixture: Path | None,
    ) -> TrialOutcome:
        try:
            command = self.build_command(configuration, fixture)
        except ValueError as exc:
            log.warning("Execution failed for %s [%s]: %s", workload.id, configuration.name, exc)
            return TrialOutcome(0.0, False, str(exc))
        log.debug("Running: %s", shlex.join(command))
        timed = run_timed(command, cwd=self.cwd)

        if timed.launch_error:
            log.warning(
                "Execution failed for %s [%s]: %s",
                workload.id,
                configuration.name,
                timed.launch_error,
            )
            return TrialOutcome(timed.elapsed_ms, False, timed.launch_error)
        if timed.exit_code != 0:
            log.warning(
                "Execution failed for %s [%s] (exit %d)",
                workload.id,
                configuration.name,
                timed.exit_code,
            )
            return TrialOutcome(timed.elapsed_ms, False, f"exit {timed.exit_code}")
        return TrialOutcome(timed.elapsed_ms, True)


# ---------------------------------------------------------------------------
# In-process callable
# ---------------------------------------------------------------------------


class CallableSubject:
    """An in-process function timed over many calls per trial.

    ``fn(workload, configuration)`` is called ``iterations`` times inside
    one timed interval; its return values go to a sink that is kept as
    ``last_sink`` after each trial.  An exception from ``fn`` propagates
    as CallableFault.
    """

    def __init__(
        self,
        fn: Callable[[Workload, Configuration], Any],
        iterations: int = 1,
        *,
        name: str = "",
    ) -> None:
        if iterations < 1:
            raise ValueError(f"iterations must be at least 1 (got {iterations})")
        self.fn = fn
        self.iterations = iterations
        self.name = name or getattr(fn, "__name__", "callable")
        self.last_sink: Sink | None = None

    def check(self) -> None:
        if not callable(self.fn):
            raise PreconditionError(f"Subject {self.name!r} is not callable.")

    def run_trial(
        self,
        workload: Workload,
        configuration: Configuration,
        fixture: Path | None,
    ) -> TrialOutcome:
        fn = self.fn
        timing = time_callable(
            lambda: fn(workload, configuration),
            self.iterations,
            name=f"{self.name}[{configuration.name}]",
        )
        self.last_sink = timing.sink
        return TrialOutcome(timing.elapsed_ms, True)
