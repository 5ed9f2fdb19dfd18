import os
import shutil
import tempfile
import unittest

from automata.charpred import CharPred
from automata.functions import CharConstant
from automata.operations import finitize, finitize_string
from automata.sft import SFT, SFTInputMove
from automata.sft_operations import minterm_expansion, mk_all_states_final
from datastructures.exceptions import InvalidExampleException
from helpers.report import SynthesisReport
from sft_synthesis import SynthesisResult, TransducerSynthesis
from solving.task import AttemptResult, AttemptStatus

import sft_fixtures


class TransducerSynthesisTest(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()
        self.report_path = os.path.join(self.directory, "report.txt")

    def tearDown(self):
        shutil.rmtree(self.directory)

    def _read_report(self):
        with open(self.report_path) as fh:
            return fh.read()

    def _synthesis(self, problem, **kwargs):
        source, target, examples = problem
        kwargs.setdefault('timeout', 120)
        return TransducerSynthesis(source, target, examples, **kwargs)

    def testPrepare(self):
        synthesis = self._synthesis(sft_fixtures.get_tags_problem())
        synthesis.prepare()

        self.assertEqual(synthesis.alphabet_map, {'!': 0, '<': 1, '>': 2})
        self.assertEqual(synthesis.examples_finite, [("<<!>", "<!>")])
        self.assertEqual(synthesis.target_total.state_count,
                         synthesis.target_finite.state_count + 1)

    def testInvalidExampleInput(self):
        source, target, _ = sft_fixtures.swap_problem()
        synthesis = self._synthesis((source, target, [("ac", "ba")]))
        with self.assertRaises(InvalidExampleException):
            synthesis.prepare()

    def testInvalidExampleOutput(self):
        source, target, _ = sft_fixtures.duplicate_problem()
        synthesis = self._synthesis((source, target, [("a", "a")]))
        with self.assertRaises(InvalidExampleException):
            synthesis.solve()

    def testSolveBasicWidensOutputBound(self):
        synthesis = self._synthesis(sft_fixtures.duplicate_problem())
        sft = synthesis.solve_basic()

        self.assertIsNotNone(sft)
        self.assertEqual((synthesis.num_states, synthesis.output_bound),
                         (1, 2))
        self.assertEqual(mk_all_states_final(sft).output_string("aa"),
                         "abab")

    def testSolveBasicWithBitVectors(self):
        synthesis = self._synthesis(sft_fixtures.swap_problem(),
                                    backend_type="bv",
                                    backend_options={'width': 8})
        sft = synthesis.solve_basic()

        self.assertIsNotNone(sft)
        self.assertEqual((synthesis.num_states, synthesis.output_bound),
                         (1, 1))
        self.assertEqual(mk_all_states_final(sft).output_string("abba"),
                         "baab")

    def testSolveBasicWithoutSolution(self):
        synthesis = self._synthesis(sft_fixtures.splitter_problem())
        self.assertIsNone(synthesis.solve_basic())

    def testSolveBasicExpandsMinterms(self):
        synthesis = self._synthesis(sft_fixtures.get_tags_problem())
        sft = synthesis.solve_basic()

        self.assertIsNotNone(sft)
        for move in sft.transitions:
            self.assertIn(move.guard, [m.predicate for m in
                                       synthesis.minterm_map.minterms])

    def testUniqueSolution(self):
        synthesis = self._synthesis(sft_fixtures.swap_problem(),
                                    report_path=self.report_path,
                                    name="swap")
        result = synthesis.solve()

        self.assertTrue(result.is_satisfiable)
        self.assertEqual(result.second.status, AttemptStatus.UNSAT)
        self.assertIsNone(result.witness)
        self.assertIsNone(result.are_equivalent)
        self.assertEqual(result.first_restricted.output_string("abba"),
                         "baab")

        report = self._read_report()
        self.assertTrue(report.startswith("swap statistics:\n"))
        self.assertIn("States in source: 1\n", report)
        self.assertIn("Transitions in source: 2\n", report)
        self.assertIn("Size of alphabet: 2\n", report)
        self.assertIn("Number of examples: 1\n", report)
        self.assertIn("SFT1 solving time: ", report)
        self.assertNotIn("SFT2 solving time: ", report)
        self.assertIn("First SFT:\n", report)
        self.assertIn("First SFT restricted:\n", report)
        self.assertIn("No other solution\n", report)
        self.assertNotIn("Assertion failed", report)
        self.assertTrue(report.endswith("\n\n"))

    def testDualSolve(self):
        synthesis = self._synthesis(sft_fixtures.get_tags_problem(),
                                    num_states=3, output_bound=2,
                                    report_path=self.report_path)
        result = synthesis.solve()

        self.assertTrue(result.is_satisfiable)
        self.assertEqual(result.first_restricted.output_string("<<!>"),
                         "<!>")
        if result.witness is not None:
            self.assertEqual(result.are_equivalent, False)
            self.assertNotEqual(result.witness_outputs[0],
                                result.witness_outputs[1])
            self.assertIn("Input on which SFTs differ: %s\n" %
                          result.witness, self._read_report())
        elif result.second_restricted is not None:
            self.assertTrue(result.are_equivalent)
            self.assertIn("Equivalent results", self._read_report())

    def testTagExtractionOnOriginalCharacters(self):
        synthesis = self._synthesis(sft_fixtures.get_tags_problem(),
                                    num_states=3, output_bound=2,
                                    report_path=self.report_path)
        result = synthesis.solve()
        output = result.first_restricted.output_string("<<s>")

        # a character of [^<>] is only reproduced if it is copied on the
        # move that reads it
        self.assertEqual(finitize_string(output, synthesis.minterm_map),
                         "<!>")
        if output == "<s>":
            self.assertNotIn("Assertion failed", self._read_report())
        else:
            self.assertIn("Assertion failed: %s, <s>\n" % output,
                          self._read_report())

    def testUnsatisfiableReport(self):
        synthesis = self._synthesis(sft_fixtures.splitter_problem(),
                                    report_path=self.report_path)
        result = synthesis.solve()

        self.assertFalse(result.is_satisfiable)
        self.assertIsNone(result.sft)
        self.assertIsNone(result.second)
        report = self._read_report()
        self.assertIn("UNSAT\n", report)
        self.assertIn("No other solution\n", report)

    def testFailedAttemptIsReported(self):
        synthesis = self._synthesis(sft_fixtures.get_tags_problem(),
                                    num_states=3, output_bound=2,
                                    backend_type="bv",
                                    backend_options={'width': 3},
                                    report_path=self.report_path,
                                    name="tags")
        result = synthesis.solve()

        self.assertEqual(result.first.status, AttemptStatus.ERROR)
        self.assertIn("tags failed because of exception: ",
                      self._read_report())

    def testLocalizedBadTransitions(self):
        sft = sft_fixtures.shift_sft(1, sft_fixtures.LT)
        synthesis = self._synthesis(
            sft_fixtures.swap_problem(), report_path=self.report_path,
            transducer_template=(sft, sft.transitions))
        synthesis.solve()
        self.assertIn("Number of bad transitions localized: 1\n",
                      self._read_report())

    def testReportFailureIsLogged(self):
        blocker = os.path.join(self.directory, "file")
        with open(blocker, 'w') as fh:
            fh.write("")
        synthesis = self._synthesis(
            sft_fixtures.swap_problem(),
            report_path=os.path.join(blocker, "report.txt"))
        with self.assertLogs("report", level="ERROR"):
            result = synthesis.solve()
        self.assertTrue(result.is_satisfiable)


class SynthesisReportTest(unittest.TestCase):

    def setUp(self):
        self.directory = tempfile.mkdtemp()
        self.report = SynthesisReport(
            os.path.join(self.directory, "report.txt"), name="tags")
        source, target, _ = sft_fixtures.get_tags_problem()
        self.minterm_map = finitize(source, target)[3]

    def tearDown(self):
        shutil.rmtree(self.directory)

    def _read_report(self):
        with open(self.report.path) as fh:
            return fh.read()

    def testDelayedWitnessIsReported(self):
        # '!' is read in state 1 but only emitted together with '>'
        finite = SFT([SFTInputMove(0, 1, CharPred.atom('<'), []),
                      SFTInputMove(1, 1, CharPred.atom('<'),
                                   [CharConstant('<')]),
                      SFTInputMove(1, 1, CharPred.atom('!'), []),
                      SFTInputMove(1, 0, CharPred.atom('>'),
                                   [CharConstant('!'), CharConstant('>')])],
                     0, [])
        result = SynthesisResult(3, 2)
        result.first = AttemptResult(AttemptStatus.SAT, finite, 5, 7)
        result.first_expanded = minterm_expansion(finite, self.minterm_map)
        result.first_restricted = mk_all_states_final(result.first_expanded)

        self.assertEqual(mk_all_states_final(finite).output_string("<<!>"),
                         "<!>")
        with self.assertLogs("report", level="WARNING"):
            self.assertTrue(self.report.write_result(result,
                                                     [("<<s>", "<s>")]))

        report = self._read_report()
        self.assertIn("Assertion failed: <!>, <s>\n", report)
        self.assertIn("First SFT restricted:\n", report)
        self.assertIn("No other solution\n", report)

    def testReproducedExampleIsNotReported(self):
        finite = SFT([SFTInputMove(0, 0, CharPred.atom('!'),
                                   [CharConstant('!')])], 0, [])
        result = SynthesisResult(1, 1)
        result.first = AttemptResult(AttemptStatus.SAT, finite, 1, 2)
        result.first_expanded = minterm_expansion(finite, self.minterm_map)
        result.first_restricted = mk_all_states_final(result.first_expanded)

        self.report.write_result(result, [("abc", "abc")])
        self.assertNotIn("Assertion failed", self._read_report())


if __name__ == "__main__":
    unittest.main()
