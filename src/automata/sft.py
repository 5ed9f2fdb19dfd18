'''
Symbolic finite transducers

Every move reads one character satisfying its guard and emits one output
character per output function.
'''
from collections import defaultdict, deque

from automata.equivalence import find_witness
from automata.sfa import SFA, SFAInputMove, SFAEpsilon


class SFTInputMove(object):
    def __init__(self, from_state, to_state, guard, outputs=()):
        self.from_state = from_state
        self.to_state = to_state
        self.guard = guard
        self.outputs = tuple(outputs)

    def has_model(self, char):
        return self.guard.is_satisfied_by(char)

    def output_for(self, char):
        return ''.join(func.apply(char) for func in self.outputs)

    def __eq__(self, other):
        if not isinstance(other, SFTInputMove):
            return False
        return (self.from_state, self.to_state, self.guard, self.outputs) == \
            (other.from_state, other.to_state, other.guard, other.outputs)

    def __hash__(self):
        return hash((self.from_state, self.to_state, self.guard,
                     self.outputs))

    def __repr__(self):
        return "%s -%s/[%s]-> %s" % (self.from_state, self.guard,
                                     ', '.join(repr(f) for f in self.outputs),
                                     self.to_state)


class SFT(object):
    '''
    Symbolic finite transducer without epsilon moves
    '''
    def __init__(self, transitions, initial_state, final_states):
        self._initial_state = initial_state
        self._final_states = frozenset(final_states)
        self._transitions = []
        self._moves_from = defaultdict(list)

        states = {initial_state} | set(self._final_states)
        seen = set()
        for move in transitions:
            if move in seen:
                continue
            seen.add(move)
            self._transitions.append(move)
            self._moves_from[move.from_state].append(move)
            states.add(move.from_state)
            states.add(move.to_state)
        self._states = sorted(states)

    @property
    def initial_state(self):
        return self._initial_state

    @property
    def final_states(self):
        return self._final_states

    @property
    def states(self):
        return list(self._states)

    @property
    def transitions(self):
        return list(self._transitions)

    @property
    def state_count(self):
        return len(self._states)

    @property
    def transition_count(self):
        return len(self._transitions)

    @property
    def max_state_id(self):
        return max(self._states)

    @property
    def is_empty_solution(self):
        return not self._transitions

    def is_final_state(self, state):
        return state in self._final_states

    def get_transitions_from(self, state):
        return list(self._moves_from.get(state, ()))

    @property
    def is_deterministic(self):
        for state in self._states:
            moves = self.get_transitions_from(state)
            for i, move in enumerate(moves):
                for other in moves[i + 1:]:
                    if (move.guard & other.guard).is_satisfiable():
                        return False
        return True

    def get_move(self, state, char):
        for move in self.get_transitions_from(state):
            if move.has_model(char):
                return move
        return None

    def output_string(self, string):
        '''
        Runs the (deterministic) transducer on string

        :return: the produced output, None if the input is rejected
        '''
        state = self._initial_state
        output = []
        for char in string:
            move = self.get_move(state, char)
            if move is None:
                return None
            output.append(move.output_for(char))
            state = move.to_state
        if not self.is_final_state(state):
            return None
        return ''.join(output)

    def get_domain(self):
        transitions = [SFAInputMove(t.from_state, t.to_state, t.guard)
                       for t in self._transitions]
        return SFA(transitions, self._initial_state, self._final_states)

    def get_overapprox_output_sfa(self):
        '''
        Returns an automaton accepting a superset of the outputs

        A move emitting n > 1 characters becomes a chain through n - 1 fresh
        states, a move without output becomes an epsilon move.
        '''
        next_state = self.max_state_id + 1
        transitions = []
        for move in self._transitions:
            if not move.outputs:
                transitions.append(SFAEpsilon(move.from_state, move.to_state))
                continue
            current = move.from_state
            for index, func in enumerate(move.outputs):
                if index == len(move.outputs) - 1:
                    successor = move.to_state
                else:
                    successor = next_state
                    next_state += 1
                transitions.append(SFAInputMove(current, successor,
                                                func.output_pred(move.guard)))
                current = successor
        return SFA(transitions, self._initial_state, self._final_states)

    def make_all_states_final(self):
        return SFT(self._transitions, self._initial_state, self._states)

    def domain_restriction(self, sfa):
        '''
        Restricts the transducer to the inputs accepted by sfa

        Builds the reachable part of the product with a deterministic
        version of sfa. States of the result are numbered from 0.
        '''
        if not sfa.is_deterministic:
            sfa = sfa.determinize()

        initial = (self._initial_state, sfa.initial_state)
        state_ids = {initial: 0}
        pending = deque([initial])
        transitions = []
        final_states = set()

        while pending:
            pair = pending.popleft()
            state, sfa_state = pair
            if self.is_final_state(state) and sfa.is_final_state(sfa_state):
                final_states.add(state_ids[pair])
            for move in self.get_transitions_from(state):
                for sfa_move in sfa.get_transitions_from(sfa_state):
                    guard = move.guard & sfa_move.guard
                    if not guard.is_satisfiable():
                        continue
                    successor = (move.to_state, sfa_move.to_state)
                    if successor not in state_ids:
                        state_ids[successor] = len(state_ids)
                        pending.append(successor)
                    transitions.append(SFTInputMove(state_ids[pair],
                                                    state_ids[successor],
                                                    guard, move.outputs))

        return SFT(transitions, 0, final_states)

    def witness_disequality(self, other):
        '''
        Returns an input on which both transducers differ, None if equal
        '''
        return find_witness(self, other)

    def decide_equality(self, other):
        return self.witness_disequality(other) is None

    def __repr__(self):
        return "SFT(initial=%s, final=%s, transitions=%s)" % \
            (self._initial_state, sorted(self._final_states),
             self._transitions)
