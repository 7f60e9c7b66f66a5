"""Tests for trialbench.bench.subject — external process and callable subjects."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from bench_test_helpers import make_stub_executable
from trialbench.bench.config import Configuration
from trialbench.bench.errors import CallableFault, PreconditionError
from trialbench.bench.subject import CallableSubject, ExternalProcessSubject
from trialbench.bench.workload import WorkloadGenerator


class TestExternalProcessCheck(unittest.TestCase):
    """Tests for the executable precondition check."""

    def test_missing_executable(self) -> None:
        subject = ExternalProcessSubject("/nonexistent/CDSfold")
        with self.assertRaises(PreconditionError) as ctx:
            subject.check()
        self.assertIn("not found", str(ctx.exception))

    def test_directory_is_not_executable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            with self.assertRaises(PreconditionError) as ctx:
                ExternalProcessSubject(tmpdir).check()
        self.assertIn("not a file", str(ctx.exception))

    def test_file_without_exec_bit(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "subject"
            path.write_text("#!/bin/sh\nexit 0\n")
            path.chmod(0o644)
            with self.assertRaises(PreconditionError) as ctx:
                ExternalProcessSubject(path).check()
        self.assertIn("not executable", str(ctx.exception))

    def test_existing_executable(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            stub = make_stub_executable(Path(tmpdir))
            subject = ExternalProcessSubject(stub)
            subject.check()
            self.assertEqual(subject.resolve(), str(stub))

    def test_bare_name_resolved_on_path(self) -> None:
        self.assertIsNone(ExternalProcessSubject("trialbench-no-such-tool").resolve())

    def test_bare_name_in_current_directory_is_not_on_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            stub = make_stub_executable(Path(tmpdir), name="trialbench-local-subject")
            cwd = os.getcwd()
            os.chdir(tmpdir)
            try:
                with self.assertRaises(PreconditionError) as ctx:
                    ExternalProcessSubject(stub.name).check()
            finally:
                os.chdir(cwd)
        message = str(ctx.exception)
        self.assertIn("not found on PATH", message)
        self.assertIn("./trialbench-local-subject", message)
        self.assertNotIn("not executable", message)


class TestExternalProcessRun(unittest.TestCase):
    """Tests for running trials through an external executable."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.workload = WorkloadGenerator().generate(10)
        self.fixture = self.tmpdir / self.workload.fixture_name
        self.fixture.write_text(self.workload.to_fixture_text())

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_build_command(self) -> None:
        subject = ExternalProcessSubject("./src/CDSfold")
        cmd = subject.build_command(Configuration("excl", "-e GUA,GUC,CUG -r"), self.fixture)
        self.assertEqual(cmd, ["./src/CDSfold", "-e", "GUA,GUC,CUG", "-r", str(self.fixture)])

    def test_build_command_no_args(self) -> None:
        subject = ExternalProcessSubject("./src/CDSfold")
        cmd = subject.build_command(Configuration("default"), self.fixture)
        self.assertEqual(cmd, ["./src/CDSfold", str(self.fixture)])

    def test_successful_trial(self) -> None:
        subject = ExternalProcessSubject(make_stub_executable(self.tmpdir, sleep_ms=5))
        subject.check()
        outcome = subject.run_trial(self.workload, Configuration("default"), self.fixture)
        self.assertTrue(outcome.succeeded)
        self.assertGreaterEqual(outcome.elapsed_ms, 5.0)

    def test_failing_trial_is_not_raised(self) -> None:
        stub = make_stub_executable(self.tmpdir, fail_sizes=[10])
        subject = ExternalProcessSubject(stub)
        with self.assertLogs("trialbench", level="WARNING") as logs:
            outcome = subject.run_trial(self.workload, Configuration("w", "-w 20"), self.fixture)
        self.assertFalse(outcome.succeeded)
        self.assertEqual(outcome.detail, "exit 1")
        self.assertIn("Execution failed", logs.output[0])

    def test_unparsable_args_are_a_failed_trial(self) -> None:
        subject = ExternalProcessSubject(make_stub_executable(self.tmpdir))
        subject.check()
        with self.assertLogs("trialbench", level="WARNING"):
            outcome = subject.run_trial(
                self.workload, Configuration("bad", "-e 'GUA"), self.fixture
            )
        self.assertFalse(outcome.succeeded)
        self.assertIn("No closing quotation", outcome.detail)

    def test_launch_failure_is_a_failed_trial(self) -> None:
        stub = make_stub_executable(self.tmpdir)
        subject = ExternalProcessSubject(stub)
        stub.unlink()
        with self.assertLogs("trialbench", level="WARNING"):
            outcome = subject.run_trial(self.workload, Configuration("default"), self.fixture)
        self.assertFalse(outcome.succeeded)
        self.assertTrue(outcome.detail)


class TestCallableSubject(unittest.TestCase):
    """Tests for in-process callable subjects."""

    def test_iterations_and_sink(self) -> None:
        seen: list[tuple[int, str]] = []

        def fn(workload, configuration):  # type: ignore[no-untyped-def]
            seen.append((workload.size, configuration.name))
            return workload.size

        subject = CallableSubject(fn, iterations=4)
        workload = WorkloadGenerator().generate(7)
        outcome = subject.run_trial(workload, Configuration("c"), None)
        self.assertTrue(outcome.succeeded)
        self.assertEqual(seen, [(7, "c")] * 4)
        self.assertIsNotNone(subject.last_sink)
        assert subject.last_sink is not None
        self.assertEqual(subject.last_sink.total, 28)
        self.assertEqual(subject.name, "fn")

    def test_fault_propagates(self) -> None:
        def broken(workload, configuration):  # type: ignore[no-untyped-def]
            raise KeyError("missing")

        subject = CallableSubject(broken, iterations=3, name="broken")
        with self.assertRaises(CallableFault) as ctx:
            subject.run_trial(WorkloadGenerator().generate(1), Configuration("c"), None)
        self.assertEqual(ctx.exception.iteration, 1)
        self.assertIn("broken[c]", str(ctx.exception))

    def test_invalid_iterations(self) -> None:
        with self.assertRaises(ValueError):
            CallableSubject(lambda w, c: 0, iterations=0)

    def test_check_requires_callable(self) -> None:
        subject = CallableSubject(lambda w, c: 0)
        subject.check()
        subject.fn = None  # type: ignore[assignment]
        with self.assertRaises(PreconditionError):
            subject.check()


if __name__ == "__main__":
    unittest.main()
