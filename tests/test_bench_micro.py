"""Tests for trialbench.bench.micro — old-vs-new micro benchmarks."""

from __future__ import annotations

import unittest

from trialbench.bench.errors import CallableFault
from trialbench.bench.micro import (
    NEG_INF,
    MicroCase,
    default_cases,
    new_clear,
    new_matrix_size,
    old_clear,
    old_matrix_size,
    old_max2,
    old_min2,
    run_micro_case,
    run_micro_suite,
    select_cases,
)


class TestRoutines(unittest.TestCase):
    """The old and new routines must agree."""

    def test_min_max(self) -> None:
        for a, b in [(1, 2), (2, 1), (5, 5), (-3, 7)]:
            self.assertEqual(old_min2(a, b), min(a, b))
            self.assertEqual(old_max2(a, b), max(a, b))

    def test_matrix_size(self) -> None:
        for length, window in [(100, 50), (200, 100), (10, 10), (5, 1), (1, 1)]:
            self.assertEqual(old_matrix_size(length, window), new_matrix_size(length, window))
        self.assertEqual(new_matrix_size(100, 50), 50 * 100 - (50 * 49) // 2)

    def test_clear(self) -> None:
        a = [1, 2, 3]
        b = [1, 2, 3]
        self.assertEqual(old_clear(a), new_clear(b))
        self.assertEqual(a, [NEG_INF] * 3)
        self.assertEqual(a, b)


class TestMicroCases(unittest.TestCase):
    """Tests for building, selecting and running cases."""

    def test_default_case_names(self) -> None:
        names = [c.name for c in default_cases()]
        self.assertEqual(names, ["minmax", "matrix_size", "array_clear", "data_access"])

    def test_iterations_override(self) -> None:
        self.assertTrue(all(c.iterations == 3 for c in default_cases(iterations=3)))

    def test_run_all_results_match(self) -> None:
        results = run_micro_suite(default_cases(iterations=5))
        self.assertEqual(len(results), 4)
        for r in results:
            self.assertTrue(r.results_match, r.case.name)
            self.assertEqual(r.old.iterations, 5)
            self.assertEqual(r.new.iterations, 5)
            self.assertGreater(r.old.sink.count, 0)

    def test_mismatch_warns(self) -> None:
        case = MicroCase("bad", "Bad", lambda: 1, lambda: 2, iterations=3)
        with self.assertLogs("trialbench", level="WARNING"):
            result = run_micro_case(case)
        self.assertFalse(result.results_match)

    def test_fault_propagates(self) -> None:
        case = MicroCase("boom", "Boom", lambda: 1, lambda: 1 // 0, iterations=2)
        with self.assertRaises(CallableFault):
            run_micro_case(case)

    def test_select_cases(self) -> None:
        cases = default_cases(iterations=1)
        self.assertEqual(len(select_cases(cases, [])), 4)
        picked = select_cases(cases, ["array_clear", "minmax"])
        self.assertEqual([c.name for c in picked], ["array_clear", "minmax"])
        with self.assertRaises(ValueError):
            select_cases(cases, ["nope"])

    def test_seed_changes_minmax_data(self) -> None:
        a = run_micro_case(select_cases(default_cases(seed=1, iterations=1), ["minmax"])[0])
        b = run_micro_case(select_cases(default_cases(seed=2, iterations=1), ["minmax"])[0])
        self.assertNotEqual(a.old.sink.total, b.old.sink.total)


if __name__ == "__main__":
    unittest.main()
