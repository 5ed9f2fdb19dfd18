'''
Main program logic of bounded synthesis of symbolic finite transducers
'''
import logging

from automata.operations import alphabet_set, finitize, finitize_examples, \
    mk_alphabet_map, mk_total_finite
from automata.sfa import SFA
from automata.sft_operations import minterm_expansion, mk_all_states_final, \
    get_output_string
from automata.template import TransducerTemplate
from datastructures.exceptions import InvalidExampleException
from helpers.logging_helper import log_entrance
from helpers.report import SynthesisReport
from smt.instance import SynthesisInstance
from solving.search import solve_then_exclude
from solving.task import SynthesisTask
from visualization.dotvisualization import sfa_to_dot
import config

LOG = logging.getLogger("sft_synthesis")


class SynthesisResult(object):
    '''
    Outcome of a dual solve

    * first, second -- :class:`solving.task.AttemptResult` of both attempts
      (second is None if the first one did not return SAT)
    * first_expanded, second_expanded -- candidates over the original
      predicates
    * first_restricted, second_restricted -- candidates with all states
      final, restricted to the domain of the source automaton
    * witness -- input on which both candidates differ (None if equivalent)
    * witness_outputs -- outputs of both candidates on the witness
    '''
    def __init__(self, num_states, output_bound):
        self.num_states = num_states
        self.output_bound = output_bound

        self.first = None
        self.second = None
        self.first_expanded = None
        self.first_restricted = None
        self.second_expanded = None
        self.second_restricted = None
        self.witness = None
        self.witness_outputs = None

    @property
    def is_satisfiable(self):
        return self.first is not None and self.first.is_satisfiable

    @property
    def sft(self):
        return self.first_expanded

    @property
    def are_equivalent(self):
        '''
        True if both candidates are equivalent, None without a second one
        '''
        if self.second_restricted is None:
            return None
        return self.witness is None

    def __repr__(self):
        return "SynthesisResult(k=%d, L=%d, first=%s, second=%s, " \
            "witness=%r)" % (self.num_states, self.output_bound, self.first,
                             self.second, self.witness)


def _prepare_automaton(aut):
    aut = aut.remove_epsilon_moves()
    if not aut.is_deterministic:
        aut = aut.determinize()
    return aut


class TransducerSynthesis:

    def __init__(self, source, target, examples=(),
                 num_states=config.DEFAULT_NUM_STATES,
                 output_bound=config.DEFAULT_OUTPUT_BOUND,
                 fraction=config.DEFAULT_FRACTION, template=None,
                 transducer_template=None,
                 backend_type=config.DEFAULT_ENCODING, backend_options=None,
                 timeout=config.DEFAULT_TIMEOUT, report_path=None,
                 smt_dump_path=None, name=None):
        """
        :param source: SFA of admissible inputs
        :param target: SFA of admissible outputs
        :param examples: list of (input, output) string tuples
        :param num_states: state bound k of the fixed bound search
        :param output_bound: output bound L of the fixed bound search
        :param fraction: tolerance fraction (m, n)
        :param template: optional SFA whose successor function the
                         synthesized transducer must follow
        :param transducer_template: optional tuple (sft, bad_transitions)
                                    with localized faulty transitions
        :param backend_type: constraint backend type ("int" or "bv")
        :param report_path: report file the run is appended to
        """
        self.source = source
        self.target = target
        self.examples = list(examples)
        self.num_states = num_states
        self.output_bound = output_bound
        self.fraction = tuple(fraction)
        self.template = template
        self.transducer_template = transducer_template
        self.backend_type = backend_type
        self.backend_options = backend_options or {}
        self.timeout = timeout
        self.smt_dump_path = smt_dump_path

        self.report = None
        if report_path is not None:
            self.report = SynthesisReport(report_path, name)

        self.source_finite = None
        self.target_finite = None
        self.target_total = None
        self.template_finite = None
        self.ft_template = None
        self.minterm_map = None
        self.alphabet_map = None
        self.examples_finite = None

    @property
    def is_prepared(self):
        return self.minterm_map is not None

    @log_entrance(LOG)
    def prepare(self):
        '''
        Finitizes automata and examples

        :raises InvalidExampleException: if an example input is rejected by
            the source or an example output is rejected by the target
        '''
        self.source = _prepare_automaton(self.source)
        self.target = _prepare_automaton(self.target)
        if LOG.isEnabledFor(logging.DEBUG):
            LOG.debug("Source:\n%s", sfa_to_dot(self.source, "source"))
            LOG.debug("Target:\n%s", sfa_to_dot(self.target, "target"))
        if self.template is not None:
            self.template = self.template.remove_epsilon_moves()

        for example in self.examples:
            if not self.source.accepts(example[0]):
                raise InvalidExampleException(
                    "Example input %r is not accepted by the source" %
                    example[0], example)
            if not self.target.accepts(example[1]):
                raise InvalidExampleException(
                    "Example output %r is not accepted by the target" %
                    example[1], example)

        self.source_finite, self.target_finite, template_finite, \
            self.minterm_map = finitize(self.source, self.target,
                                        self.template)
        LOG.info("Minterms: %s", self.minterm_map)

        alphabet = alphabet_set(self.source_finite, self.target_finite)
        self.alphabet_map = mk_alphabet_map(alphabet)
        self.target_total = mk_total_finite(self.target_finite, alphabet)

        if template_finite is not None:
            # moves on symbols outside of the alphabet are never taken
            self.template_finite = SFA(
                [move for move in template_finite.input_moves
                 if move.guard.witness() in alphabet],
                template_finite.initial_state, template_finite.final_states)

        if self.transducer_template is not None:
            sft, bad_transitions = self.transducer_template
            self.ft_template = TransducerTemplate(sft, bad_transitions,
                                                  self.minterm_map)
            LOG.info("Transducer template: %s", self.ft_template)

        self.examples_finite = finitize_examples(self.examples,
                                                 self.minterm_map)
        LOG.debug("Finite examples: %s", self.examples_finite)

    def create_instance(self, num_states, output_bound):
        if not self.is_prepared:
            self.prepare()
        return SynthesisInstance(self.source_finite, self.target_total,
                                 self.alphabet_map, num_states, output_bound,
                                 self.fraction, self.examples_finite,
                                 self.template_finite)

    def _task_options(self):
        return {'backend_type': self.backend_type,
                'backend_options': self.backend_options,
                'smt_dump_path': self.smt_dump_path}

    def _write_statistics(self):
        if self.report is None:
            return
        bad_transitions = None
        if self.ft_template is not None:
            bad_transitions = len(self.ft_template.bad_transitions)
        self.report.write_statistics(self.source, self.target,
                                     self.source_finite, self.target_finite,
                                     len(self.alphabet_map),
                                     len(self.examples), bad_transitions)

    def restrict(self, sft):
        '''
        Expands a finite candidate to the original predicates and restricts
        it (with all states final) to the domain of the source

        :return: tuple (expanded, restricted)
        '''
        expanded = minterm_expansion(sft, self.minterm_map)
        restricted = mk_all_states_final(expanded).domain_restriction(
            self.source)
        return expanded, restricted

    @log_entrance(LOG)
    def solve_basic(self):
        '''
        Bounded synthesis with widening bounds

        Starts with one state and one output symbol per move. On UNSAT the
        state bound is increased up to the number of states of the finite
        source, then the output bound up to config.MAX_OUTPUT_BOUND.

        :return: the synthesized SFT over the original predicates or None
                 if no bound admits a solution
        '''
        if not self.is_prepared:
            self.prepare()

        num_states = 1
        output_bound = 1
        while True:
            LOG.info("Set bound to (%d, %d)", num_states, output_bound)
            instance = self.create_instance(num_states, output_bound)
            result = SynthesisTask(instance, timeout=self.timeout,
                                   **self._task_options()).run()
            LOG.info("Status: %s", result)

            if result.is_satisfiable:
                self.num_states = num_states
                self.output_bound = output_bound
                return minterm_expansion(result.sft, self.minterm_map)

            if num_states < self.source_finite.state_count:
                num_states += 1
            elif output_bound < config.MAX_OUTPUT_BOUND:
                output_bound += 1
            else:
                return None

    @log_entrance(LOG)
    def solve(self):
        '''
        Dual solve for the fixed bounds

        Passes the following steps:

        * Solve the instance
        * Solve it again with the first solution excluded
        * Expand both candidates, make all states final and restrict them
          to the domain of the source
        * Decide equality and extract a distinguishing input

        :return: :class:`SynthesisResult`
        '''
        if not self.is_prepared:
            self.prepare()
        self._write_statistics()

        instance = self.create_instance(self.num_states, self.output_bound)
        LOG.info("Solve %s", instance)
        attempts = solve_then_exclude(instance, config.MAX_SOLUTIONS,
                                      self.timeout, **self._task_options())

        result = SynthesisResult(self.num_states, self.output_bound)
        result.first = attempts[0]
        if len(attempts) > 1:
            result.second = attempts[1]

        failed = [attempt for attempt in attempts
                  if attempt.description is not None]
        if failed:
            LOG.error("Attempt failed: %s", failed[0].description)
            if self.report is not None:
                self.report.write_failure(failed[0].description)
            return result

        if result.first.is_satisfiable:
            result.first_expanded, result.first_restricted = \
                self.restrict(result.first.sft)
            LOG.info("First SFT:\n%s", result.first_expanded)

        if result.second is not None and result.second.is_satisfiable:
            result.second_expanded, result.second_restricted = \
                self.restrict(result.second.sft)
            LOG.info("Second SFT:\n%s", result.second_expanded)

            result.witness = result.first_restricted.witness_disequality(
                result.second_restricted)
            if result.witness is not None:
                result.witness_outputs = (
                    get_output_string(result.first_restricted,
                                      result.witness),
                    get_output_string(result.second_restricted,
                                      result.witness))
                LOG.info("Candidates differ on %r: %r vs. %r",
                         result.witness, *result.witness_outputs)
            else:
                LOG.info("Candidates are equivalent")

        if self.report is not None:
            self.report.write_result(result, self.examples)
        return result
