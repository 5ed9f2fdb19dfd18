'''
Bounded encoding of symbolic finite transducer synthesis

For a fixed state bound k and output bound L, the encoding is satisfiable
iff there is a transducer with k states that emits at most L symbols per
move, maps every input accepted by the source to an output accepted by the
target (up to the tolerated edit energy) and reproduces all examples.

Declared functions (over the numeral sort of the backend):

* d1(q, a, i) -- i-th output symbol on reading a in state q
* out_len(q, a) -- number of output symbols on reading a in state q
* d2(q, a) -- successor state on reading a in state q
* dR(qR, a), dT(qT, a) -- transition functions of source and target
* f_R(qR), f_T(qT) -- final states of source and target
* x(qR, q, qT) -- reachability of a (source, transducer, target) triple
* ed_dist(q, a) -- edit cost of the move on a in state q
* C(qR, q, qT) -- energy of a reachable triple
* e_k(i) -- (output position, state) after reading i symbols of example k
'''
import logging
import os

from z3 import And, Implies, Not, Or

from helpers.io import mkdir_p

LOG = logging.getLogger("encoder")


class BoundedEncoder(object):
    '''
    Encodes one :class:`smt.instance.SynthesisInstance` into a constraint
    backend
    '''
    def __init__(self, instance, backend):
        self.instance = instance
        self.backend = backend

        self.d1 = None
        self.out_len = None
        self.d2 = None
        self.d_r = None
        self.d_t = None
        self.f_r = None
        self.f_t = None
        self.x = None
        self.ed_dist = None
        self.energy = None
        self.example_functions = []

    def encode(self):
        '''
        Adds all constraints of the instance to the backend

        :return: the backend (owned by the caller)
        '''
        self.backend.check_width(self.instance.max_constant)

        LOG.debug("Encode %s", self.instance)
        self._declare_functions()
        self._encode_ranges()
        self._encode_automata()
        self._encode_initial_triple()
        self._encode_edit_distance()
        self._encode_steps()
        self._encode_acceptance()
        self._encode_examples()
        self._encode_template()
        self._encode_exclusions()
        return self.backend

    def dump(self, path):
        '''
        Writes the constraints in SMT-LIB 2 format to path

        Write failures are logged, not raised.
        '''
        try:
            directory = os.path.dirname(path)
            if directory:
                mkdir_p(directory)
            with open(path, 'w') as fh:
                fh.write(self.backend.to_smt2())
            LOG.info("Wrote SMT constraints to %s", path)
        except (IOError, OSError) as e:
            LOG.error("Could not write SMT constraints to %s: %s", path, e)

    def _val(self, number):
        return self.backend.value(number)

    def _symbol(self, move):
        '''
        Index of the minterm id that labels a finite move
        '''
        return self.instance.index_of(move.guard.witness())

    def _declare_functions(self):
        backend = self.backend
        self.d1 = backend.declare_function('d1', 3)
        self.out_len = backend.declare_function('out_len', 2)
        self.d2 = backend.declare_function('d2', 2)
        self.d_r = backend.declare_function('dR', 2)
        self.d_t = backend.declare_function('dT', 2)
        self.f_r = backend.declare_function('f_R', 1, backend.bool_sort)
        self.f_t = backend.declare_function('f_T', 1, backend.bool_sort)
        self.x = backend.declare_function('x', 3, backend.bool_sort)
        self.ed_dist = backend.declare_function('ed_dist', 2)
        self.energy = backend.declare_function('C', 3)

    def _encode_ranges(self):
        '''
        0 <= out_len(q, a) <= L, 0 <= d2(q, a) < k, 0 <= d1(q, a, i) < |alphabet|
        '''
        backend = self.backend
        zero = self._val(0)
        bound = self._val(self.instance.output_bound)
        num_states = self._val(self.instance.num_states)
        alphabet_size = self._val(self.instance.alphabet_size)

        for q in range(self.instance.num_states):
            for a in range(self.instance.alphabet_size):
                out_len = self.out_len(self._val(q), self._val(a))
                backend.add(backend.le(zero, out_len))
                backend.add(backend.le(out_len, bound))

                successor = self.d2(self._val(q), self._val(a))
                backend.add(backend.le(zero, successor))
                backend.add(backend.lt(successor, num_states))

                for i in range(self.instance.output_bound):
                    output = self.d1(self._val(q), self._val(a), self._val(i))
                    backend.add(backend.le(zero, output))
                    backend.add(backend.lt(output, alphabet_size))

    def _encode_automata(self):
        '''
        Pins dR, dT, f_R and f_T to the given automata
        '''
        for function, aut in [(self.d_r, self.instance.source),
                              (self.d_t, self.instance.target)]:
            for move in aut.transitions:
                self.backend.add(
                    function(self._val(move.from_state),
                             self._val(self._symbol(move))) ==
                    self._val(move.to_state))

        for function, aut in [(self.f_r, self.instance.source),
                              (self.f_t, self.instance.target)]:
            for state in aut.states:
                expr = function(self._val(state))
                self.backend.add(expr if aut.is_final_state(state)
                                 else Not(expr))

    def _encode_initial_triple(self):
        source_initial = self._val(self.instance.source.initial_state)
        target_initial = self._val(self.instance.target.initial_state)
        self.backend.add(self.x(source_initial, self._val(0), target_initial))
        self.backend.add(self.energy(source_initial, self._val(0),
                                     target_initial) == self._val(0))

    def _outputs(self, q, a):
        return [self.d1(q, a, self._val(i))
                for i in range(self.instance.output_bound)]

    def _target_chain(self, target_state, outputs):
        '''
        Target states reached after emitting the first 1..L outputs
        '''
        chain = []
        current = target_state
        for output in outputs:
            current = self.d_t(current, output)
            chain.append(current)
        return chain

    def _tolerance(self, q, a):
        '''
        m - n * ed_dist(q, a)
        '''
        m, n = self.instance.fraction
        return self.backend.sub(self._val(m),
                                self.backend.mul(self._val(n),
                                                 self.ed_dist(q, a)))

    def _source_moves(self):
        '''
        Yields (qR, a, qR') numerals for every source move
        '''
        for move in self.instance.source.transitions:
            q_r = self._val(move.from_state)
            a = self._val(self._symbol(move))
            yield q_r, a, self.d_r(q_r, a)

    def _encode_edit_distance(self):
        '''
        If a is among the emitted symbols, ed_dist(q, a) = out_len(q, a) - 1,
        otherwise ed_dist(q, a) = out_len(q, a). A move without output
        costs 1.
        '''
        backend = self.backend
        zero = self._val(0)
        one = self._val(1)

        for q_index in range(self.instance.num_states):
            q = self._val(q_index)
            for _, a, _ in self._source_moves():
                out_len = self.out_len(q, a)
                ed_dist = self.ed_dist(q, a)

                passes_through = [And(backend.lt(self._val(i), out_len),
                                      a == output)
                                  for i, output in enumerate(self._outputs(q, a))]
                contains_input = Or([backend.false()] + passes_through)

                no_output = Implies(out_len == zero, ed_dist == one)
                backend.add(Implies(
                    contains_input,
                    And(no_output,
                        Implies(Not(out_len == zero),
                                ed_dist == backend.sub(out_len, one)))))
                backend.add(Implies(
                    Not(contains_input),
                    And(no_output,
                        Implies(Not(out_len == zero), ed_dist == out_len))))

    def _step(self, q_r, q, q_t, q_r_next, q_next, q_t_next, tolerance):
        '''
        x(qR', q', qT') and C(qR, q, qT) >= C(qR', q', qT') - tolerance
        '''
        return And(self.x(q_r_next, q_next, q_t_next),
                   self.backend.ge(self.energy(q_r, q, q_t),
                                   self.backend.sub(
                                       self.energy(q_r_next, q_next, q_t_next),
                                       tolerance)))

    def _encode_steps(self):
        '''
        Every reachable triple steps along each source move, for each
        possible output length separately
        '''
        for q_index in range(self.instance.num_states):
            q = self._val(q_index)
            for q_r, a, q_r_next in self._source_moves():
                out_len = self.out_len(q, a)
                q_next = self.d2(q, a)
                tolerance = self._tolerance(q, a)
                outputs = self._outputs(q, a)

                for target_state in self.instance.target.states:
                    q_t = self._val(target_state)
                    chain = [q_t] + self._target_chain(q_t, outputs)
                    consequent = [
                        Implies(out_len == self._val(length),
                                self._step(q_r, q, q_t, q_r_next, q_next,
                                           chain[length], tolerance))
                        for length in range(self.instance.output_bound + 1)]
                    self.backend.add(Implies(self.x(q_r, q, q_t),
                                             And(consequent)))

    def _encode_acceptance(self):
        '''
        x(qR, q, qT) and f_R(qR) imply f_T(qT) and C(qR, q, qT) >= 0
        '''
        zero = self._val(0)
        for q_index in range(self.instance.num_states):
            q = self._val(q_index)
            for source_state in self.instance.source.states:
                q_r = self._val(source_state)
                for target_state in self.instance.target.states:
                    q_t = self._val(target_state)
                    self.backend.add(Implies(
                        And(self.x(q_r, q, q_t), self.f_r(q_r)),
                        And(self.f_t(q_t),
                            self.backend.ge(self.energy(q_r, q, q_t), zero))))

    def _encode_examples(self):
        self.example_functions = []
        for index, example in enumerate(self.instance.examples):
            function = self.backend.declare_function(
                'e_%d' % index, 1, self.backend.pair_sort)
            self.example_functions.append(function)
            self._encode_example(function, example)

    def _encode_example(self, function, example):
        '''
        Threads the example through the transducer: e_k(i) = (j, q) means
        that after reading i input symbols in state q, the first j output
        symbols have been emitted
        '''
        backend = self.backend
        zero = self._val(0)
        input_symbols = self.instance.to_indices(example[0])
        output_symbols = self.instance.to_indices(example[1])
        input_length = len(input_symbols)
        output_length = len(output_symbols)

        def position(i):
            return function(self._val(i))

        backend.add(position(0) == backend.mk_pair(zero, zero))
        for i in range(input_length + 1):
            output_position = backend.first(position(i))
            state = backend.second(position(i))
            backend.add(backend.le(zero, output_position))
            backend.add(backend.le(output_position,
                                   self._val(output_length)))
            backend.add(backend.le(zero, state))
            backend.add(backend.lt(state,
                                   self._val(self.instance.num_states)))
        backend.add(backend.first(position(input_length)) ==
                    self._val(output_length))

        for q_index in range(self.instance.num_states):
            q = self._val(q_index)
            for move in self.instance.source.transitions:
                symbol = self._symbol(move)
                q_r = self._val(move.from_state)
                a = self._val(symbol)
                q_r_next = self.d_r(q_r, a)
                out_len = self.out_len(q, a)
                q_next = self.d2(q, a)
                tolerance = self._tolerance(q, a)
                outputs = self._outputs(q, a)

                for target_state in self.instance.target.states:
                    q_t = self._val(target_state)
                    chain = [q_t] + self._target_chain(q_t, outputs)

                    for i in range(input_length):
                        # input[i] = a folds to a constant
                        if input_symbols[i] != symbol:
                            continue
                        for j in range(output_length + 1):
                            possible = min(output_length - j,
                                           self.instance.output_bound)
                            consequent = [backend.le(out_len,
                                                     self._val(possible))]
                            for length in range(possible + 1):
                                emitted = [outputs[t] ==
                                           self._val(output_symbols[j + t])
                                           for t in range(length)]
                                consequent.append(Implies(
                                    out_len == self._val(length),
                                    And([backend.true()] + emitted + [
                                        position(i + 1) == backend.mk_pair(
                                            self._val(j + length), q_next),
                                        self._step(q_r, q, q_t, q_r_next,
                                                   q_next, chain[length],
                                                   tolerance)])))
                            antecedent = And(
                                position(i) == backend.mk_pair(self._val(j),
                                                               q),
                                self.x(q_r, q, q_t))
                            backend.add(Implies(antecedent, And(consequent)))

    def _encode_template(self):
        '''
        Imposes the successor function of the template skeleton on d2
        '''
        if self.instance.template is None:
            return
        for move in self.instance.template.transitions:
            self.backend.add(
                self.d2(self._val(move.from_state),
                        self._val(self._symbol(move))) ==
                self._val(move.to_state))

    def _encode_exclusions(self):
        '''
        Excludes the (d2, out_len, d1) assignment of every given solution
        '''
        for solution in self.instance.excluded_solutions:
            assignment = [self.backend.true()]
            for move in solution.transitions:
                q = self._val(move.from_state)
                a = self._val(self._symbol(move))
                assignment.append(self.d2(q, a) == self._val(move.to_state))
                assignment.append(self.out_len(q, a) ==
                                  self._val(len(move.outputs)))
                for i, output in enumerate(move.outputs):
                    assignment.append(
                        self.d1(q, a, self._val(i)) ==
                        self._val(self.instance.index_of(output.char)))
            LOG.debug("Exclude solution with %d moves",
                      len(solution.transitions))
            self.backend.add(Not(And(assignment)))
