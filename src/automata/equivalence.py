'''
Equivalence of deterministic symbolic transducers

Both transducers are explored in lock step. Every product pair remembers
the input that reached it first and the output *delay*, i.e. the output
suffix one side has produced but the other has not (yet). Two transducers
are equal iff they accept the same inputs, every product pair is reached
with a single delay, and the delay is empty whenever both sides accept.

Inputs are enumerated per minterm of the guards leaving a product pair.
Since output functions are constants or offsets, two representatives per
minterm are enough to tell distinct output functions apart.
'''
from collections import defaultdict, deque

from automata.charpred import CharPred, get_minterms

NO_DELAY = ('', '')


def _live_states(sft):
    '''
    Returns the states from which a final state can be reached
    '''
    predecessors = defaultdict(set)
    for move in sft.transitions:
        if move.guard.is_satisfiable():
            predecessors[move.to_state].add(move.from_state)

    live = set(sft.final_states)
    pending = list(live)
    while pending:
        state = pending.pop()
        for predecessor in predecessors[state]:
            if predecessor not in live:
                live.add(predecessor)
                pending.append(predecessor)
    return live


def _representatives(minterm):
    witness = minterm.witness()
    chars = [witness]
    if minterm.size() > 1:
        chars.append((minterm - CharPred.atom(witness)).witness())
    return chars


def _advance(delay, outputs):
    '''
    Appends the new outputs to the delay and cancels the common prefix

    :return: the new delay, None if both sides produced different output
    '''
    pending = (delay[0] + outputs[0], delay[1] + outputs[1])
    common = min(len(pending[0]), len(pending[1]))
    if pending[0][:common] != pending[1][:common]:
        return None
    return (pending[0][common:], pending[1][common:])


def _differs(first, second, word):
    return first.output_string(word) != second.output_string(word)


class _Product(object):
    '''
    Lock step product of two transducers, dead states are None
    '''
    def __init__(self, first, second):
        self.sides = (first, second)
        self.live = (_live_states(first), _live_states(second))

    def normalize(self, index, state):
        if state in self.live[index]:
            return state
        return None

    def initial(self):
        return tuple(self.normalize(index, sft.initial_state)
                     for index, sft in enumerate(self.sides))

    def accepting(self, pair):
        return tuple(state is not None and sft.is_final_state(state)
                     for sft, state in zip(self.sides, pair))

    def successors(self, pair):
        '''
        Yields (char, successor pair, outputs) for every representative
        '''
        moves = []
        for sft, state in zip(self.sides, pair):
            if state is not None:
                moves.extend(sft.get_transitions_from(state))

        for minterm, indices in get_minterms([m.guard for m in moves]):
            if not indices:
                continue
            for char in _representatives(minterm):
                successor = []
                outputs = []
                for index, state in enumerate(pair):
                    move = None
                    if state is not None:
                        move = self.sides[index].get_move(state, char)
                    if move is None:
                        successor.append(None)
                        outputs.append('')
                    else:
                        successor.append(self.normalize(index, move.to_state))
                        outputs.append(move.output_for(char))
                yield char, tuple(successor), tuple(outputs)

    def accepting_suffix(self, pair):
        '''
        Returns a shortest input leading from pair to a pair where at least
        one side accepts
        '''
        suffixes = {pair: ''}
        pending = deque([pair])
        while pending:
            current = pending.popleft()
            if any(self.accepting(current)):
                return suffixes[current]
            for char, successor, _ in self.successors(current):
                if successor not in suffixes and successor != (None, None):
                    suffixes[successor] = suffixes[current] + char
                    pending.append(successor)
        return None


def find_witness(first, second):
    '''
    Searches an input on which two deterministic transducers differ

    An input differs if only one of both accepts it or if both accept it
    with different outputs.

    :return: the input string, None if both transducers are equal
    '''
    product = _Product(first, second)
    start = product.initial()
    if start == (None, None):
        return None

    visited = {start: ('', NO_DELAY)}
    pending = deque([start])
    while pending:
        pair = pending.popleft()
        prefix, delay = visited[pair]

        accepting = product.accepting(pair)
        if accepting[0] != accepting[1] or \
                (accepting[0] and delay != NO_DELAY):
            if _differs(first, second, prefix):
                return prefix

        for char, successor, outputs in product.successors(pair):
            if successor == (None, None):
                continue
            word = prefix + char

            if None in successor:
                next_delay = NO_DELAY
            else:
                next_delay = _advance(delay, outputs)
                if next_delay is None:
                    suffix = product.accepting_suffix(successor)
                    if suffix is not None and \
                            _differs(first, second, word + suffix):
                        return word + suffix
                    continue

            if successor not in visited:
                visited[successor] = (word, next_delay)
                pending.append(successor)
            elif visited[successor][1] != next_delay:
                suffix = product.accepting_suffix(successor)
                if suffix is None:
                    continue
                for candidate in (visited[successor][0] + suffix,
                                  word + suffix):
                    if _differs(first, second, candidate):
                        return candidate
    return None
