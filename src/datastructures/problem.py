import os

from automata.sfa import SFA, SFAInputMove
from datastructures.exceptions import ProblemException
from parsing import problem_lexer
from parsing.problem_parser import parse_problem


def _build_automaton(section, statements):
    initial_states = [s[1] for s in statements if s[0] == 'initial']
    if len(initial_states) != 1:
        raise ProblemException("Section [%s] needs exactly one initial "
                               "state" % section)
    final_states = [state for s in statements if s[0] == 'final'
                    for state in s[1]]
    transitions = [SFAInputMove(s[1], s[2], s[3]) for s in statements
                   if s[0] == 'move']
    if any(s[0] == 'example' for s in statements):
        raise ProblemException("Examples are not allowed in section [%s]" %
                               section)
    return SFA(transitions, initial_states[0], final_states)


class SynthesisProblem(object):
    '''
    Encapsulates source, target, template and examples of a synthesis
    problem and provides functionality to read a given problem file
    '''

    def __init__(self, filename=None, content=None):
        self.filename = filename
        self.source = None
        self.target = None
        self.template = None
        self.examples = []
        try:
            # read content
            if filename is not None:
                with open(filename, 'r') as fh:
                    content = fh.read()
            if content is None:
                raise ProblemException("No problem given")

            sections = {}
            for section, statements in parse_problem(content):
                if section in sections:
                    raise ProblemException("Duplicate section [%s]" %
                                           section)
                sections[section] = statements

            for section in (problem_lexer.SECTION_SOURCE,
                            problem_lexer.SECTION_TARGET):
                if section not in sections:
                    raise ProblemException("Missing section [%s]" % section)

            self.source = _build_automaton(
                problem_lexer.SECTION_SOURCE,
                sections[problem_lexer.SECTION_SOURCE])
            self.target = _build_automaton(
                problem_lexer.SECTION_TARGET,
                sections[problem_lexer.SECTION_TARGET])
            if problem_lexer.SECTION_TEMPLATE in sections:
                self.template = _build_automaton(
                    problem_lexer.SECTION_TEMPLATE,
                    sections[problem_lexer.SECTION_TEMPLATE])

            for statement in sections.get(problem_lexer.SECTION_EXAMPLES,
                                          []):
                if statement[0] != 'example':
                    raise ProblemException("Only examples are allowed in "
                                           "section [%s]" %
                                           problem_lexer.SECTION_EXAMPLES)
                self.examples.append(statement[1:])
        except ProblemException:
            raise
        except Exception as e:
            raise ProblemException("Error while reading problem: %s" % e)

    @property
    def name(self):
        if self.filename is None:
            return None
        return os.path.splitext(os.path.basename(self.filename))[0]
