'''
Input of one encode-solve-decode attempt
'''
from automata.operations import is_accepted_by
from datastructures.exceptions import InvalidExampleException
import config


class SynthesisInstance(object):
    '''
    Finitized synthesis problem for fixed bounds

    :param source: finite, deterministic source automaton
    :param target: finite, deterministic and total target automaton
    :param alphabet_map: dict mapping minterm ids to indices 0..n-1
    :param num_states: state bound k of the synthesized transducer
    :param output_bound: maximum number L of output symbols per move
    :param fraction: tolerance fraction (m, n)
    :param examples: list of finitized (input, output) tuples
    :param template: optional finite SFA whose successor function is
                     imposed on the synthesized transducer
    :param excluded_solutions: finite transducers the model must differ from
    '''
    def __init__(self, source, target, alphabet_map, num_states, output_bound,
                 fraction=config.DEFAULT_FRACTION, examples=(),
                 template=None, excluded_solutions=()):
        if num_states < 1:
            raise ValueError("state bound must be positive: %d" % num_states)
        if output_bound < 0:
            raise ValueError("output bound must not be negative: %d" %
                             output_bound)
        if fraction[1] < 0:
            raise ValueError("tolerance denominator must not be negative: %d"
                             % fraction[1])

        self.source = source
        self.target = target
        self.alphabet_map = dict(alphabet_map)
        self.num_states = num_states
        self.output_bound = output_bound
        self.fraction = tuple(fraction)
        self.examples = list(examples)
        self.template = template
        self.excluded_solutions = tuple(excluded_solutions)

        for example in self.examples:
            for symbol in example[0] + example[1]:
                if symbol not in self.alphabet_map:
                    raise InvalidExampleException(
                        "Example %r uses symbol %r outside of the alphabet" %
                        (example, symbol), example)

    @property
    def alphabet_size(self):
        return len(self.alphabet_map)

    @property
    def symbols(self):
        '''
        Alphabet symbols ordered by their index
        '''
        return sorted(self.alphabet_map, key=self.alphabet_map.get)

    def index_of(self, symbol):
        return self.alphabet_map[symbol]

    def symbol_of(self, index):
        return self.symbols[index]

    def to_indices(self, string):
        return [self.alphabet_map[symbol] for symbol in string]

    @property
    def max_constant(self):
        '''
        Largest value that occurs in the encoding of this instance

        Besides the constants this covers the magnitude of the tolerance
        term m - n * ed_dist, where ed_dist is at most max(L, 1).
        '''
        m, n = self.fraction
        tolerance = abs(m) + n * max(self.output_bound, 1)
        example_lengths = [len(s) for example in self.examples
                           for s in example]
        return max([self.num_states, self.alphabet_size, self.output_bound,
                    self.source.max_state_id, self.target.max_state_id,
                    tolerance] + example_lengths)

    def validate_examples(self):
        '''
        :raises InvalidExampleException: if an example input is rejected by
            the source or an example output is rejected by the target
        '''
        for example in self.examples:
            if not is_accepted_by(example[0], self.source):
                raise InvalidExampleException(
                    "Example input %r is not accepted by the source" %
                    example[0], example)
            if not is_accepted_by(example[1], self.target):
                raise InvalidExampleException(
                    "Example output %r is not accepted by the target" %
                    example[1], example)

    def with_exclusion(self, solution):
        '''
        Returns a copy of this instance that additionally excludes solution
        '''
        return SynthesisInstance(self.source, self.target, self.alphabet_map,
                                 self.num_states, self.output_bound,
                                 self.fraction, self.examples, self.template,
                                 self.excluded_solutions + (solution,))

    def __repr__(self):
        return ("SynthesisInstance(k=%d, L=%d, fraction=%s, |alphabet|=%d, "
                "examples=%d, template=%s, excluded=%d)" %
                (self.num_states, self.output_bound, self.fraction,
                 self.alphabet_size, len(self.examples),
                 self.template is not None, len(self.excluded_solutions)))
