'''
Append-mode text report of synthesis runs
'''
import logging

from visualization.dotvisualization import sft_to_dot
import helpers.io

LOG = logging.getLogger("report")


class SynthesisReport(object):
    '''
    Collects report lines of one synthesis run and appends them to a file

    Write failures are logged and never abort the synthesis.

    :param path: report file path (appended to)
    :param name: optional benchmark name
    '''
    def __init__(self, path, name=None):
        self.path = path
        self.name = name

    def _write(self, lines):
        text = ''.join(line + '\n' for line in lines)
        try:
            helpers.io.append_text(self.path, text)
            return True
        except (IOError, OSError) as ex:
            LOG.error("Could not write report to '%s': %s", self.path, ex)
            return False

    def write_statistics(self, source, target, source_finite, target_finite,
                         alphabet_size, example_count, bad_transitions=None):
        lines = []
        if self.name is not None:
            lines.append("%s statistics:" % self.name)
        lines += ["States in source: %d" % source.state_count,
                  "States in target: %d" % target.state_count,
                  "Transitions in source: %d" % source.transition_count,
                  "Transitions in target: %d" % target.transition_count,
                  "Transitions in sourceFinite: %d" %
                  source_finite.transition_count,
                  "Transitions in targetFinite: %d" %
                  target_finite.transition_count,
                  "Size of alphabet: %d" % alphabet_size,
                  "Number of examples: %d" % example_count]
        if bad_transitions is not None:
            lines.append("Number of bad transitions localized: %d" %
                         bad_transitions)
        return self._write(lines)

    def write_failure(self, description):
        name = self.name if self.name is not None else "synthesis"
        return self._write(["%s failed because of exception: %s" %
                            (name, description)])

    def write_result(self, result, examples):
        '''
        Appends solving times, candidate transducers, example checks and
        the equivalence verdict of a :class:`sft_synthesis.SynthesisResult`

        :param examples: original (not finitized) examples
        '''
        lines = ["SFT1 solving time: %s" % result.first.solving_time]
        if result.second is not None and result.second.is_satisfiable:
            lines.append("SFT2 solving time: %s" %
                         result.second.solving_time)

        if result.first_restricted is not None:
            for example_input, example_output in examples:
                output = result.first_restricted.output_string(example_input)
                if output != example_output:
                    LOG.warning("Example %r produces %r instead of %r",
                                example_input, output, example_output)
                    lines.append("Assertion failed: %s, %s" %
                                 (output, example_output))

            lines += ["First SFT:",
                      sft_to_dot(result.first_expanded, "first"),
                      "First SFT restricted:",
                      sft_to_dot(result.first_restricted, "first_restricted"),
                      "Synthesis time: %s" % result.first.runtime]
        else:
            lines.append("UNSAT")

        if result.witness is not None:
            lines += ["Second SFT:",
                      sft_to_dot(result.second_expanded, "second"),
                      "Second SFT restricted:",
                      sft_to_dot(result.second_restricted,
                                 "second_restricted"),
                      "Synthesis time: %s" % result.second.runtime,
                      "Input on which SFTs differ: %s" % result.witness,
                      "Output1: %s" % result.witness_outputs[0],
                      "Output2: %s" % result.witness_outputs[1]]
        elif result.second_restricted is not None:
            lines.append("Equivalent results")
        else:
            lines.append("No other solution")

        lines.append("\n")
        return self._write(lines)
