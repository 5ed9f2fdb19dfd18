'''
Transducer templates with localized faulty transitions
'''
from automata.operations import mk_finite
from automata.sft_operations import mk_finite_transitions


class TransducerTemplate(object):
    '''
    Finitized transducer skeleton whose transitions are split into good and
    bad (localized faulty) ones

    :param sft: transducer the template is derived from
    :param bad_transitions: moves of sft that are considered faulty
    :param minterm_map: minterm map of the synthesis instance
    '''
    def __init__(self, sft, bad_transitions, minterm_map):
        self.aut = mk_finite(sft, minterm_map)
        self.bad_transitions = mk_finite_transitions(bad_transitions,
                                                     minterm_map)
        bad = set(self.bad_transitions)
        self.good_transitions = [move for move in self.aut.transitions
                                 if move not in bad]

    def __repr__(self):
        return "TransducerTemplate(good=%d, bad=%d)" % \
            (len(self.good_transitions), len(self.bad_transitions))
