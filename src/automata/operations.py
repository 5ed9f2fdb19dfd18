'''
Finitization of symbolic automata over minterms

The guards of all automata of a synthesis instance are refined into
minterms. Every minterm is represented by one witness character (its
*minterm id*), so that the finitized automata only carry atomic guards and
the alphabet becomes finite.
'''
from collections import namedtuple

from automata import charpred
from automata.charpred import CharPred
from automata.functions import CharConstant
from automata.sfa import SFA, SFAInputMove
from automata.sft import SFT, SFTInputMove
from datastructures.exceptions import MintermException

Minterm = namedtuple('Minterm', ['predicate', 'indices'])


class MintermMap(object):
    '''
    Bijection between minterms and their witness characters
    '''
    def __init__(self, minterms):
        self._id_to_minterm = {}
        self._minterm_to_id = {}
        for minterm in minterms:
            witness = minterm.predicate.witness()
            if witness in self._id_to_minterm:
                raise MintermException(
                    "Minterms %s and %s share the witness %r" %
                    (self._id_to_minterm[witness].predicate,
                     minterm.predicate, witness))
            self._id_to_minterm[witness] = minterm
            self._minterm_to_id[minterm] = witness

    @property
    def minterms(self):
        return [self._id_to_minterm[w] for w in self.witnesses]

    @property
    def witnesses(self):
        return sorted(self._id_to_minterm)

    def witness_of(self, minterm):
        return self._minterm_to_id[minterm]

    def minterm_of(self, witness):
        return self._id_to_minterm[witness]

    def predicate_of(self, witness):
        return self._id_to_minterm[witness].predicate

    def find_witness(self, char):
        '''
        Returns the witness of the unique minterm containing char

        :raises MintermException: if no or more than one minterm contains char
        '''
        matches = [witness for witness, minterm in self._id_to_minterm.items()
                   if minterm.predicate.is_satisfied_by(char)]
        if len(matches) != 1:
            raise MintermException(
                "%d minterms contain character %r" % (len(matches), char))
        return matches[0]

    def __len__(self):
        return len(self._id_to_minterm)

    def __contains__(self, witness):
        return witness in self._id_to_minterm

    def __repr__(self):
        return "MintermMap(%s)" % ', '.join(
            "%r: %s" % (w, self._id_to_minterm[w].predicate)
            for w in self.witnesses)


def _input_guards(aut):
    if isinstance(aut, SFT):
        return [t.guard for t in aut.transitions]
    return [t.guard for t in aut.input_moves]


def get_minterms(automata):
    '''
    Computes the minterms of all guards of the given automata

    :param automata: list of SFA or SFT instances (None entries are skipped)
    '''
    predicates = []
    for aut in automata:
        if aut is not None:
            predicates.extend(_input_guards(aut))
    return [Minterm(predicate, tuple(indices))
            for predicate, indices in charpred.get_minterms(predicates)]


def construct_minterm_map(minterms):
    return MintermMap(minterms)


def _split_guard(guard, minterm_map):
    for witness in minterm_map.witnesses:
        if (guard & minterm_map.predicate_of(witness)).is_satisfiable():
            yield witness


def _finitize_outputs(outputs, guard, minterm_map):
    '''
    Maps every output character to the minterm id it belongs to

    Output functions are evaluated on the witness of the guard.
    '''
    witness = guard.witness()
    return tuple(CharConstant(minterm_map.find_witness(func.apply(witness)))
                 for func in outputs)


def mk_finite_transitions(moves, minterm_map):
    '''
    Splits transducer moves into one move per minterm of their guard
    '''
    transitions = []
    for move in moves:
        for witness in _split_guard(move.guard, minterm_map):
            minterm_guard = move.guard & minterm_map.predicate_of(witness)
            outputs = _finitize_outputs(move.outputs, minterm_guard,
                                        minterm_map)
            transitions.append(SFTInputMove(move.from_state, move.to_state,
                                            CharPred.atom(witness), outputs))
    return transitions


def mk_finite(aut, minterm_map):
    '''
    Replaces every guard by the minterm ids of the minterms it intersects

    Works for SFA (epsilon moves are kept) and SFT.
    '''
    if isinstance(aut, SFT):
        return SFT(mk_finite_transitions(aut.transitions, minterm_map),
                   aut.initial_state, aut.final_states)

    transitions = []
    for move in aut.transitions:
        if move.is_epsilon:
            transitions.append(move)
            continue
        for witness in _split_guard(move.guard, minterm_map):
            transitions.append(SFAInputMove(move.from_state, move.to_state,
                                            CharPred.atom(witness)))
    return SFA(transitions, aut.initial_state, aut.final_states)


def finitize(source, target, template=None):
    '''
    Finitizes source, target and (optionally) template over their common
    minterms

    :return: (source_finite, target_finite, template_finite, minterm_map)
    '''
    minterm_map = construct_minterm_map(
        get_minterms([source, target, template]))
    template_finite = None
    if template is not None:
        template_finite = mk_finite(template, minterm_map)
    return (mk_finite(source, minterm_map), mk_finite(target, minterm_map),
            template_finite, minterm_map)


def finitize_string(string, minterm_map):
    return ''.join(minterm_map.find_witness(char) for char in string)


def finitize_examples(examples, minterm_map):
    return [(finitize_string(example_input, minterm_map),
             finitize_string(example_output, minterm_map))
            for example_input, example_output in examples]


def unnormalize(aut, minterms=None):
    '''
    Rewrites the guards of aut to the minterm predicates they intersect

    Applied to a finitized automaton this restores the original predicates.
    If no minterms are given, the minterms of aut itself are used.
    '''
    if minterms is None:
        minterms = get_minterms([aut])

    transitions = []
    for move in aut.transitions:
        if move.is_epsilon:
            transitions.append(move)
            continue
        for minterm in minterms:
            if (move.guard & minterm.predicate).is_satisfiable():
                transitions.append(SFAInputMove(move.from_state, move.to_state,
                                                minterm.predicate))
    return SFA(transitions, aut.initial_state, aut.final_states)


def alphabet_set(*automata):
    '''
    Returns the witnesses of all guards (the alphabet of finitized automata)
    '''
    alphabet = set()
    for aut in automata:
        alphabet.update(guard.witness() for guard in _input_guards(aut))
    return alphabet


def mk_alphabet_map(alphabet):
    return {symbol: index for index, symbol in enumerate(sorted(alphabet))}


def get_successor_state(aut, state, char):
    '''
    Returns the successor of state on char, None if there is no move

    Assumes a deterministic automaton.
    '''
    return aut.get_successor_state(state, char)


def has_transition(aut, state, char):
    return get_successor_state(aut, state, char) is not None


def get_state_in_fa(aut, state, string):
    '''
    Returns the state reached from state after reading string, None if the
    run gets stuck
    '''
    for char in string:
        state = get_successor_state(aut, state, char)
        if state is None:
            return None
    return state


def is_accepted_by(string, aut):
    state = get_state_in_fa(aut, aut.initial_state, string)
    return state is not None and aut.is_final_state(state)


def mk_total_finite(aut, alphabet):
    '''
    Adds a sink state (max_state_id + 1) and routes all missing moves to it
    '''
    sink = aut.max_state_id + 1
    symbols = sorted(alphabet)
    transitions = aut.transitions

    for state in aut.states:
        for symbol in symbols:
            if not has_transition(aut, state, symbol):
                transitions.append(SFAInputMove(state, sink,
                                                CharPred.atom(symbol)))

    for symbol in symbols:
        transitions.append(SFAInputMove(sink, sink, CharPred.atom(symbol)))

    return SFA(transitions, aut.initial_state, aut.final_states)
