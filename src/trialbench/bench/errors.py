"""Exceptions raised by the benchmark harness.

Trial-level failures of an external subject are not exceptions: they are
recorded as failed measurements and the suite moves on.  Only conditions
that make the whole run meaningless are raised.
"""

from __future__ import annotations


class PreconditionError(Exception):
    """The subject cannot be run at all (e.g. missing executable).

    Raised before any trial executes; the suite never starts.
    """


class CallableFault(RuntimeError):
    """An in-process callable raised while being timed.

    The timed loop was interrupted, so its elapsed time is meaningless
    and the run cannot continue.
    """

    def __init__(self, name: str, iteration: int, cause: BaseException) -> None:
        self.name = name
        self.iteration = iteration
        self.cause = cause
        super().__init__(
            f"{name} raised {type(cause).__name__} on iteration {iteration}: {cause}"
        )
