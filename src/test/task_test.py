import os
import unittest
from unittest import mock

from solving.search import solve_then_exclude
from solving.task import AttemptStatus, SynthesisTask

import sft_fixtures
from sft_fixtures import create_instance


def _exit_without_result(result_queue, *args):
    os._exit(3)


class SynthesisTaskTest(unittest.TestCase):

    def testSatisfiableAttempt(self):
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        result = SynthesisTask(instance, timeout=120).run()

        self.assertEqual(result.status, AttemptStatus.SAT)
        self.assertTrue(result.is_satisfiable)
        self.assertFalse(result.sft.is_empty_solution)
        self.assertIsNotNone(result.solving_time)
        self.assertIsNotNone(result.runtime)
        self.assertIsNone(result.description)

    def testUnsatisfiableAttempt(self):
        instance = create_instance(sft_fixtures.splitter_problem(), 1, 1)
        result = SynthesisTask(instance, timeout=120).run()
        self.assertEqual(result.status, AttemptStatus.UNSAT)
        self.assertFalse(result.is_satisfiable)

    def testTimeout(self):
        instance = create_instance(sft_fixtures.get_tags_problem(), 40, 4)
        result = SynthesisTask(instance, timeout=0.5).run()

        self.assertEqual(result.status, AttemptStatus.TIMEOUT)
        self.assertIsNone(result.sft)
        self.assertIsNotNone(result.description)
        self.assertLess(result.runtime, 30000)

    def testAttemptAfterTimeout(self):
        slow = create_instance(sft_fixtures.get_tags_problem(), 40, 4)
        self.assertEqual(SynthesisTask(slow, timeout=0.5).run().status,
                         AttemptStatus.TIMEOUT)
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        self.assertEqual(SynthesisTask(instance, timeout=120).run().status,
                         AttemptStatus.SAT)

    def testProcessExitWithoutResult(self):
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        with mock.patch("solving.task._execute_attempt",
                        _exit_without_result):
            result = SynthesisTask(instance, timeout=120).run()

        self.assertEqual(result.status, AttemptStatus.ERROR)
        self.assertEqual(result.description, "Exit code: 3")
        self.assertLess(result.runtime, 30000)

    def testErrorInAttempt(self):
        instance = create_instance(sft_fixtures.get_tags_problem(), 3, 2)
        result = SynthesisTask(instance, backend_type="bv",
                               backend_options={'width': 3},
                               timeout=120).run()

        self.assertEqual(result.status, AttemptStatus.ERROR)
        self.assertIn("EncodingWidthException", result.description)


class SolveThenExcludeTest(unittest.TestCase):

    def testUniqueSolution(self):
        instance = create_instance(sft_fixtures.swap_problem(), 1, 1)
        results = solve_then_exclude(instance, timeout=120)

        self.assertEqual([r.status for r in results],
                         [AttemptStatus.SAT, AttemptStatus.UNSAT])

    def testStopsAfterFirstFailure(self):
        instance = create_instance(sft_fixtures.splitter_problem(), 1, 1)
        results = solve_then_exclude(instance, max_solutions=3, timeout=120)
        self.assertEqual([r.status for r in results], [AttemptStatus.UNSAT])

    def testSingleSolution(self):
        instance = create_instance(sft_fixtures.get_tags_problem(), 3, 2)
        results = solve_then_exclude(instance, max_solutions=1, timeout=120)
        self.assertEqual([r.status for r in results], [AttemptStatus.SAT])


if __name__ == "__main__":
    unittest.main()
