'''
Symbolic finite automata over character predicates
'''
from collections import defaultdict, deque

from automata.charpred import get_minterms


class SFAMove(object):
    def __init__(self, from_state, to_state):
        self.from_state = from_state
        self.to_state = to_state

    @property
    def is_epsilon(self):
        return False


class SFAInputMove(SFAMove):
    def __init__(self, from_state, to_state, guard):
        super().__init__(from_state, to_state)
        self.guard = guard

    def has_model(self, char):
        return self.guard.is_satisfied_by(char)

    def witness(self):
        return self.guard.witness()

    def __eq__(self, other):
        if not isinstance(other, SFAInputMove):
            return False
        return (self.from_state, self.to_state, self.guard) == \
            (other.from_state, other.to_state, other.guard)

    def __hash__(self):
        return hash((self.from_state, self.to_state, self.guard))

    def __repr__(self):
        return "%s -%s-> %s" % (self.from_state, self.guard, self.to_state)


class SFAEpsilon(SFAMove):
    @property
    def is_epsilon(self):
        return True

    def __eq__(self, other):
        if not isinstance(other, SFAEpsilon):
            return False
        return (self.from_state, self.to_state) == \
            (other.from_state, other.to_state)

    def __hash__(self):
        return hash((self.from_state, self.to_state, 'eps'))

    def __repr__(self):
        return "%s -eps-> %s" % (self.from_state, self.to_state)


class SFA(object):
    '''
    Symbolic finite automaton

    States are integers. Transitions are input moves guarded by character
    predicates and (optionally) epsilon moves.
    '''
    def __init__(self, transitions, initial_state, final_states):
        self._initial_state = initial_state
        self._final_states = frozenset(final_states)
        self._transitions = []
        self._input_moves_from = defaultdict(list)
        self._epsilon_moves_from = defaultdict(list)

        states = {initial_state} | set(self._final_states)
        seen = set()
        for move in transitions:
            if move in seen:
                continue
            seen.add(move)
            self._transitions.append(move)
            states.add(move.from_state)
            states.add(move.to_state)
            if move.is_epsilon:
                self._epsilon_moves_from[move.from_state].append(move)
            else:
                self._input_moves_from[move.from_state].append(move)
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
    def input_moves(self):
        return [t for t in self._transitions if not t.is_epsilon]

    @property
    def state_count(self):
        return len(self._states)

    @property
    def transition_count(self):
        return len(self._transitions)

    @property
    def max_state_id(self):
        return max(self._states)

    def is_final_state(self, state):
        return state in self._final_states

    def get_transitions_from(self, state):
        return list(self._input_moves_from.get(state, ()))

    def get_epsilon_moves_from(self, state):
        return list(self._epsilon_moves_from.get(state, ()))

    @property
    def is_epsilon_free(self):
        return not any(t.is_epsilon for t in self._transitions)

    @property
    def is_deterministic(self):
        if not self.is_epsilon_free:
            return False
        for state in self._states:
            moves = self.get_transitions_from(state)
            for i, move in enumerate(moves):
                for other in moves[i + 1:]:
                    if (move.guard & other.guard).is_satisfiable():
                        return False
        return True

    def get_successor_state(self, state, char):
        '''
        Returns the successor of state on char, None if there is no move

        Assumes a deterministic automaton.
        '''
        for move in self.get_transitions_from(state):
            if move.has_model(char):
                return move.to_state
        return None

    def epsilon_closure(self, states):
        closure = set(states)
        pending = list(states)
        while pending:
            state = pending.pop()
            for move in self.get_epsilon_moves_from(state):
                if move.to_state not in closure:
                    closure.add(move.to_state)
                    pending.append(move.to_state)
        return frozenset(closure)

    def accepts(self, string):
        current = self.epsilon_closure([self._initial_state])
        for char in string:
            successors = [move.to_state for state in current
                          for move in self.get_transitions_from(state)
                          if move.has_model(char)]
            current = self.epsilon_closure(successors)
            if not current:
                return False
        return any(state in self._final_states for state in current)

    def remove_epsilon_moves(self):
        '''
        Returns an equivalent automaton without epsilon moves (same states)
        '''
        if self.is_epsilon_free:
            return self

        transitions = []
        final_states = set()
        for state in self._states:
            closure = self.epsilon_closure([state])
            if any(s in self._final_states for s in closure):
                final_states.add(state)
            for reached in closure:
                for move in self.get_transitions_from(reached):
                    transitions.append(SFAInputMove(state, move.to_state,
                                                    move.guard))
        return SFA(transitions, self._initial_state, final_states)

    def determinize(self):
        '''
        Subset construction over the local minterms of each state set

        The result has states 0..n-1 with initial state 0.
        '''
        aut = self.remove_epsilon_moves()
        initial = frozenset([aut.initial_state])
        state_ids = {initial: 0}
        pending = deque([initial])
        transitions = []
        final_states = set()

        while pending:
            subset = pending.popleft()
            subset_id = state_ids[subset]
            if any(aut.is_final_state(s) for s in subset):
                final_states.add(subset_id)

            moves = [move for state in sorted(subset)
                     for move in aut.get_transitions_from(state)]
            if not moves:
                continue

            guards_to_subsets = {}
            for minterm, indices in get_minterms([m.guard for m in moves]):
                if not indices:
                    continue
                target = frozenset(moves[i].to_state for i in indices)
                if target in guards_to_subsets:
                    guards_to_subsets[target] = \
                        guards_to_subsets[target] | minterm
                else:
                    guards_to_subsets[target] = minterm

            for target, guard in guards_to_subsets.items():
                if target not in state_ids:
                    state_ids[target] = len(state_ids)
                    pending.append(target)
                transitions.append(SFAInputMove(subset_id, state_ids[target],
                                                guard))

        return SFA(transitions, 0, final_states)

    def __repr__(self):
        return "SFA(initial=%s, final=%s, transitions=%s)" % \
            (self._initial_state, sorted(self._final_states),
             self._transitions)
