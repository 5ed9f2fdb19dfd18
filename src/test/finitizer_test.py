import unittest

from automata.charpred import CharPred
from automata.functions import CharConstant, IDENTITY
from automata.operations import alphabet_set, finitize, finitize_examples, \
    finitize_string, get_minterms, construct_minterm_map, is_accepted_by, \
    mk_alphabet_map, mk_finite, mk_total_finite, unnormalize, \
    get_state_in_fa, Minterm
from automata.sfa import SFA, SFAInputMove
from automata.sft import SFT, SFTInputMove
from automata.sft_operations import minterm_expansion
from datastructures.exceptions import MintermException

import sft_fixtures


class FinitizerTest(unittest.TestCase):

    def setUp(self):
        self.source, self.target, self.examples = \
            sft_fixtures.get_tags_problem()
        self.source_finite, self.target_finite, _, self.minterm_map = \
            finitize(self.source, self.target)

    def testTagMinterms(self):
        self.assertEqual(self.minterm_map.witnesses, ['!', '<', '>'])
        self.assertEqual(self.minterm_map.predicate_of('!'),
                         ~CharPred.of_chars('<>'))

    def testWitnessesIdentifyMinterms(self):
        for witness in self.minterm_map.witnesses:
            minterm = self.minterm_map.minterm_of(witness)
            self.assertTrue(minterm.predicate.is_satisfied_by(witness))
            self.assertEqual(self.minterm_map.witness_of(minterm), witness)

    def testFiniteGuardsAreMintermIds(self):
        for aut in [self.source_finite, self.target_finite]:
            for move in aut.transitions:
                self.assertTrue(move.guard.is_atom())
                self.assertIn(move.guard.witness(), self.minterm_map)

    def testFinitizedAutomataAgreeOnWitnessWords(self):
        for word in ["<<s>", "a<b>c", "<<", "<a"]:
            finite_word = finitize_string(word, self.minterm_map)
            self.assertEqual(self.source.accepts(word),
                             is_accepted_by(finite_word, self.source_finite),
                             word)

    def testUnnormalizeRestoresBehavior(self):
        restored = unnormalize(self.source_finite,
                               self.minterm_map.minterms)
        for word in ["<<s>", "abc", "<x>y", "<", "<y"]:
            self.assertEqual(restored.accepts(word), self.source.accepts(word),
                             word)

    def testFinitizeExamples(self):
        self.assertEqual(finitize_examples(self.examples, self.minterm_map),
                         [("<<!>", "<!>")])

    def testFinitizeStringRejectsAmbiguousCharacters(self):
        # overlapping "minterms" violate the contract
        broken = construct_minterm_map(
            [Minterm(CharPred.true(), ()),
             Minterm(CharPred.of_range('a', 'z'), (0,))])
        with self.assertRaises(MintermException):
            finitize_string("b", broken)

    def testMintermsWithSharedWitnessAreRejected(self):
        with self.assertRaises(MintermException):
            construct_minterm_map(
                [Minterm(CharPred.of_range('a', 'z'), (0,)),
                 Minterm(CharPred.atom('a'), (1,))])

    def testFinitizeStringRejectsUncoveredCharacters(self):
        partial = construct_minterm_map(
            [Minterm(CharPred.of_range('a', 'z'), (0,))])
        self.assertEqual(finitize_string("xy", partial), "aa")
        with self.assertRaises(MintermException):
            finitize_string("<", partial)

    def testAlphabetMap(self):
        alphabet = alphabet_set(self.source_finite, self.target_finite)
        self.assertEqual(alphabet, {'!', '<', '>'})
        self.assertEqual(mk_alphabet_map(alphabet),
                         {'!': 0, '<': 1, '>': 2})

    def testTotalTarget(self):
        alphabet = alphabet_set(self.source_finite, self.target_finite)
        total = mk_total_finite(self.target_finite, alphabet)
        sink = self.target_finite.max_state_id + 1

        for state in total.states:
            for symbol in alphabet:
                self.assertIsNotNone(total.get_successor_state(state, symbol))
        self.assertFalse(total.is_final_state(sink))
        self.assertEqual(get_state_in_fa(total, total.initial_state, "!"),
                         sink)
        self.assertEqual(total.final_states, self.target_finite.final_states)

    def testFiniteTransducer(self):
        sft = SFT([SFTInputMove(0, 0, CharPred.of_range('a', 'z'),
                                [IDENTITY])], 0, [0])
        minterms = get_minterms([sft, sft_fixtures.letters_sfa('q')])
        minterm_map = construct_minterm_map(minterms)
        finite = mk_finite(sft, minterm_map)

        self.assertEqual(
            sorted((move.guard.witness(), move.outputs)
                   for move in finite.transitions),
            [('a', (CharConstant('a'),)), ('q', (CharConstant('q'),))])

    def testMintermExpansionPassesWitnessThrough(self):
        sfa = SFA([SFAInputMove(0, 0, CharPred.of_range('a', 'z')),
                   SFAInputMove(0, 0, CharPred.atom('<'))], 0, [0])
        minterm_map = construct_minterm_map(get_minterms([sfa]))
        finite = SFT([SFTInputMove(0, 0, CharPred.atom('a'),
                                   [CharConstant('<'), CharConstant('a')]),
                      SFTInputMove(0, 0, CharPred.atom('<'),
                                   [CharConstant('<')])], 0, [0])
        expanded = minterm_expansion(finite, minterm_map)

        self.assertEqual(expanded.output_string("k<"), "<k<")


if __name__ == "__main__":
    unittest.main()
