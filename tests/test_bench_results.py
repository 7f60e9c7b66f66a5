"""Tests for trialbench.bench.results — result data structures."""

from __future__ import annotations

import unittest

from bench_test_helpers import make_measurement, make_suite_result
from trialbench.bench.results import ComparisonResult


class TestMeasurement(unittest.TestCase):
    def test_status(self) -> None:
        self.assertEqual(make_measurement("a", 1.0).status, "OK")
        self.assertEqual(make_measurement("a", 1.0, succeeded=False).status, "FAILED")

    def test_frozen(self) -> None:
        m = make_measurement("a", 1.0)
        with self.assertRaises(AttributeError):
            m.elapsed_ms = 2.0  # type: ignore[misc]


class TestComparisonResult(unittest.TestCase):
    def test_computable(self) -> None:
        self.assertTrue(ComparisonResult("a", "b", -12.5).computable)
        c = ComparisonResult("a", "b", None, "baseline time is 0 ms")
        self.assertFalse(c.computable)


class TestSuiteResult(unittest.TestCase):
    def setUp(self) -> None:
        self.result = make_suite_result(
            [
                (10, "a", 1.0, True),
                (10, "b", 2.0, False),
                (25, "a", 3.0, True),
                (25, "b", 4.0, True),
            ],
            config_names=["a", "b", "unused"],
        )

    def test_by_configuration_keeps_declared_order(self) -> None:
        groups = self.result.by_configuration()
        self.assertEqual(list(groups), ["a", "b", "unused"])
        self.assertEqual([m.elapsed_ms for m in groups["a"]], [1.0, 3.0])
        self.assertEqual(groups["unused"], [])

    def test_by_configuration_is_a_fresh_mapping(self) -> None:
        self.result.by_configuration()["a"].clear()
        self.assertEqual(len(self.result.by_configuration()["a"]), 2)

    def test_by_workload(self) -> None:
        groups = self.result.by_workload()
        self.assertEqual(list(groups), ["test_10", "test_25"])
        self.assertEqual([m.config_name for m in groups["test_10"]], ["a", "b"])

    def test_failed(self) -> None:
        self.assertEqual(
            [(m.workload_id, m.config_name) for m in self.result.failed],
            [("test_10", "b")],
        )

    def test_config_names(self) -> None:
        self.assertEqual(self.result.config_names, ["a", "b", "unused"])


if __name__ == "__main__":
    unittest.main()
