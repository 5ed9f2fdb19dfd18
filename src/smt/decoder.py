'''
Extraction of synthesized transducers from solver models
'''
import logging

from automata.charpred import CharPred
from automata.functions import CharConstant
from automata.sft import SFT, SFTInputMove

LOG = logging.getLogger("decoder")


class TransducerModel(object):
    '''
    Encapsulates the transducer encoded by a satisfying model and provides
    functionality to extract it from a checked backend

    :param encoder: :class:`smt.encoder.BoundedEncoder` whose backend has
                    been checked successfully
    '''
    def __init__(self, encoder):
        self.transitions = None
        self.edit_distances = None

        self._encoder = encoder
        self._instance = encoder.instance
        self._backend = encoder.backend

        self._init_transitions()
        if LOG.isEnabledFor(logging.DEBUG):
            self.log_model()

    def _eval(self, expr):
        return self._backend.evaluate(expr)

    def _val(self, number):
        return self._backend.value(number)

    def _decode_move(self, state, symbol, successor=None):
        q = self._val(state)
        a = self._val(self._instance.index_of(symbol))
        if successor is None:
            successor = self._eval(self._encoder.d2(q, a))
        output_length = self._eval(self._encoder.out_len(q, a))
        outputs = [CharConstant(self._instance.symbol_of(
            self._eval(self._encoder.d1(q, a, self._val(i)))))
                   for i in range(output_length)]
        return SFTInputMove(state, successor, CharPred.atom(symbol), outputs)

    def _init_transitions(self):
        '''
        Evaluates d2, out_len and d1 for every (state, symbol) pair, only
        for the template moves if a template is given
        '''
        template = self._instance.template
        if template is not None:
            self.transitions = [
                self._decode_move(move.from_state, move.guard.witness(),
                                  move.to_state)
                for move in template.transitions]
        else:
            self.transitions = [
                self._decode_move(state, symbol)
                for state in range(self._instance.num_states)
                for symbol in self._instance.symbols]

    @property
    def sft(self):
        '''
        The synthesized transducer (initial state 0, no final states)
        '''
        return SFT(self.transitions, 0, [])

    def log_model(self):
        '''
        Logs moves, edit distances, reachable triples and example traces
        '''
        encoder = self._encoder
        instance = self._instance

        for move in self.transitions:
            symbol = move.guard.witness()
            q = self._val(move.from_state)
            a = self._val(instance.index_of(symbol))
            LOG.debug("d(%d, %r) = (%r, %d), ed_dist = %d",
                      move.from_state, symbol,
                      ''.join(f.char for f in move.outputs), move.to_state,
                      self._eval(encoder.ed_dist(q, a)))

        for q in range(instance.num_states):
            for source_state in instance.source.states:
                for target_state in instance.target.states:
                    args = (self._val(source_state), self._val(q),
                            self._val(target_state))
                    if self._eval(encoder.x(*args)):
                        LOG.debug("x(%d, %d, %d), C = %d", source_state, q,
                                  target_state,
                                  self._eval(encoder.energy(*args)))

        for function, example in zip(encoder.example_functions,
                                     instance.examples):
            LOG.debug("%r --> %r", example[0], example[1])
            for i in range(len(example[0]) + 1):
                position = function(self._val(i))
                j = self._eval(self._backend.first(position))
                state = self._eval(self._backend.second(position))
                LOG.debug("e(%r, %r, %d)", example[0][:i], example[1][:j],
                          state)

    def __repr__(self):
        return '\n'.join("\t%s" % move for move in self.transitions)
    __str__ = __repr__


def decode(encoder, satisfiable):
    '''
    Returns the synthesized transducer, a transducer without transitions if
    the encoding is unsatisfiable
    '''
    if not satisfiable:
        return SFT([], 0, [])
    return TransducerModel(encoder).sft
