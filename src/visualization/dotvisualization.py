'''
Provides functionality for visualizing automata and synthesized transducers
'''
import os

import pydot

import helpers.io


def _quote(text):
    return '"%s"' % text.replace('\\', '\\\\').replace('"', '\\"')


def _build_graph(aut, name, edges):
    graph = pydot.Dot(_quote(name), graph_type='digraph', rankdir='LR')
    graph.add_node(pydot.Node('init', shape='point'))
    for state in aut.states:
        graph.add_node(pydot.Node(
            str(state), label=_quote(str(state)),
            shape='doublecircle' if aut.is_final_state(state) else 'circle'))
    graph.add_edge(pydot.Edge('init', str(aut.initial_state)))
    for src_state, dst_state, label in edges:
        graph.add_edge(pydot.Edge(str(src_state), str(dst_state),
                                  label=_quote(label)))
    return graph


def _format_transition_label(move):
    '''
    Returns a transition label string "guard/outputs"
    '''
    return '%s/%s' % (move.guard, ''.join(repr(f) for f in move.outputs))


def sfa_to_dot(sfa, name="sfa"):
    '''
    Returns the dot representation of an automaton
    '''
    edges = [(t.from_state, t.to_state,
              'eps' if t.is_epsilon else str(t.guard))
             for t in sfa.transitions]
    return _build_graph(sfa, name, edges).to_string()


def sft_to_dot(sft, name="sft"):
    '''
    Returns the dot representation of a transducer
    '''
    edges = [(t.from_state, t.to_state, _format_transition_label(t))
             for t in sft.transitions]
    return _build_graph(sft, name, edges).to_string()


def write_dot(sft, target_path, name=None):
    '''
    Generates a dot file for the given transducer

    :param sft: synthesized transducer
    :param target_path: solution file path
    :param name: optional graph name (default: file name without extension)
    '''
    if name is None:
        name = os.path.splitext(os.path.basename(target_path))[0]

    directory = os.path.dirname(target_path)
    if directory:
        helpers.io.mkdir_p(directory)
    with open(target_path, 'w') as fh:
        fh.write(sft_to_dot(sft, name))
