'''
Operations on transducers over minterm ids
'''
from automata.functions import CharConstant, IDENTITY
from automata.operations import mk_finite_transitions  # @UnusedImport
from automata.sft import SFT, SFTInputMove


def minterm_expansion(sft, minterm_map):
    '''
    Replaces the minterm ids of sft by their minterm predicates

    An output symbol that equals the id of the move's own guard passes the
    input character through; all other outputs stay constant.
    '''
    transitions = []
    for move in sft.transitions:
        witness = move.guard.witness()
        predicate = minterm_map.predicate_of(witness)
        outputs = []
        for func in move.outputs:
            if isinstance(func, CharConstant) and func.char == witness and \
                    not predicate.is_atom():
                outputs.append(IDENTITY)
            else:
                outputs.append(func)
        transitions.append(SFTInputMove(move.from_state, move.to_state,
                                        predicate, outputs))
    return SFT(transitions, sft.initial_state, sft.final_states)


def mk_all_states_final(sft):
    return sft.make_all_states_final()


def get_output_string(sft, string):
    return sft.output_string(string)
