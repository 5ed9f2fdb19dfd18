#!/bin/env python3
# encoding: utf-8
'''
sft_bosy -- Bounded Synthesis of Symbolic Finite Transducers

sft_bosy synthesizes a transducer that maps every input accepted by a source
automaton to an output accepted by a target automaton (up to a tolerated
edit distance) and that is consistent with a set of input/output examples.
'''

import sys
import os
import logging
import time

from argparse import ArgumentParser
from argparse import RawDescriptionHelpFormatter

from datastructures.exceptions import ProblemException, \
    InvalidExampleException
from datastructures.problem import SynthesisProblem
from helpers.logging_helper import configure_logging
from sft_synthesis import TransducerSynthesis
from smt.backend import ConstraintBackendFactory
from visualization.dotvisualization import write_dot
import config

__all__ = []
__version__ = 0.1
__date__ = '2016-09-01'
__updated__ = '2016-09-01'

DEBUG = 0

LOG = logging.getLogger("sft_bosy")


class CLIError(Exception):
    '''Generic exception to raise and log different fatal errors.'''
    def __init__(self, msg):
        super().__init__(msg)
        self.msg = "E: %s" % msg

    def __str__(self):
        return self.msg


def _dot_filepath(dot_path, problem_filepath):
    # extend by directory of problem file if relative
    if not os.path.isabs(dot_path):
        dot_path = os.path.join(os.path.dirname(problem_filepath), dot_path)
    # if directory, we need to specify the filename
    if not os.path.basename(dot_path):
        problem_name = os.path.splitext(
            os.path.basename(problem_filepath))[0]
        filename = config.DEFAULT_DOT_FILENAME.format(
            problem_name=problem_name)
        dot_path = os.path.join(dot_path, filename)
    return dot_path


def _create_parser(program_version_message):
    program_shortdesc = __doc__.split("\n")[1]
    program_license = '''%s

  Created on %s.

  Distributed on an "AS IS" basis without warranties
  or conditions of any kind, either express or implied.

USAGE
''' % (program_shortdesc, str(__date__))

    parser = ArgumentParser(description=program_license,
                            formatter_class=RawDescriptionHelpFormatter)
    parser.add_argument("problem_filepath", type=str,
                        help="path of synthesis problem file")
    parser.add_argument("-v", "--verbose", dest="verbose", action="count",
                        help="set verbosity level [default: %(default)s]")
    parser.add_argument("--states", dest="num_states", type=int,
                        default=config.DEFAULT_NUM_STATES,
                        help="Number of transducer states "
                        "[default: %(default)s]")
    parser.add_argument("--output-bound", dest="output_bound", type=int,
                        default=config.DEFAULT_OUTPUT_BOUND,
                        help="Maximal number of output symbols per move "
                        "[default: %(default)s]")
    parser.add_argument("--fraction", dest="fraction", type=int, nargs=2,
                        metavar=("M", "N"),
                        default=list(config.DEFAULT_FRACTION),
                        help="Tolerated edit distance M/N per move "
                        "[default: %(default)s]")
    parser.add_argument("--encoding", dest="encoding",
                        choices=ConstraintBackendFactory().backend_types,
                        default=config.DEFAULT_ENCODING,
                        help="Constraint encoding [default: %(default)s]")
    parser.add_argument("--bv-width", dest="bv_width", type=int,
                        default=config.DEFAULT_BV_WIDTH,
                        help="Bit-vector width of the bv encoding "
                        "[default: %(default)s]")
    parser.add_argument("--timeout", dest="timeout", type=float,
                        default=config.DEFAULT_TIMEOUT,
                        help="Timeout of every solver attempt in seconds "
                        "[default: %(default)s]")
    parser.add_argument("--basic", action="store_true", default=False,
                        help="Increase bounds until a solution is found "
                        "instead of searching two solutions for the given "
                        "bounds [default: %(default)s]")
    parser.add_argument("--report", dest="report_path", type=str,
                        help="Append statistics to this report file")
    parser.add_argument("--smt-dump", dest="smt_dump_path", type=str,
                        help="Write the SMT constraints to this file")
    parser.add_argument("--dot-path", dest="dot_path", type=str,
                        default=config.DEFAULT_TARGET_FOLDER,
                        help="Default dot file path, relative to problem "
                        "file or absolute [default: %(default)s]")
    parser.add_argument('-V', '--version', action='version',
                        version=program_version_message)
    return parser


def main(argv=None):
    '''Command line options.'''

    program_name = os.path.basename(sys.argv[0])
    program_version = "v%s" % __version__
    program_build_date = str(__updated__)
    program_version_message = '%%(prog)s %s (%s)' % (program_version,
                                                     program_build_date)

    parser = _create_parser(program_version_message)
    args = parser.parse_args(argv)

    try:
        configure_logging(args.verbose)
        print("Log level: %s" % logging.getLevelName(
            logging.getLogger().getEffectiveLevel()))

        if args.num_states < 1:
            raise CLIError("Invalid number of states: %d" % args.num_states)
        if args.output_bound < 0:
            raise CLIError("Invalid output bound: %d" % args.output_bound)

        backend_options = {}
        if args.encoding == "bv":
            backend_options['width'] = args.bv_width

        problem = SynthesisProblem(filename=args.problem_filepath)
        synthesis = TransducerSynthesis(
            problem.source, problem.target, problem.examples,
            num_states=args.num_states, output_bound=args.output_bound,
            fraction=tuple(args.fraction), template=problem.template,
            backend_type=args.encoding, backend_options=backend_options,
            timeout=args.timeout, report_path=args.report_path,
            smt_dump_path=args.smt_dump_path, name=problem.name)

        print("Start finding a solution for problem \'%s\'" %
              args.problem_filepath)
        print("Number of examples:  %d" % len(problem.examples))
        print("Encoding:            %s" % args.encoding)

        t = time.perf_counter()

        if args.basic:
            sft = synthesis.solve_basic()
            second = None
        else:
            result = synthesis.solve()
            sft = result.sft
            second = result

        elapsed_time = time.perf_counter() - t

        print("==============================================================")
        print("Bound: (%d, %d)" % (synthesis.num_states,
                                   synthesis.output_bound))
        print("Status: " + ["model found", "no model found"][sft is None])
        if sft is not None:
            print(sft)
        if second is not None:
            if second.witness is not None:
                print("Input on which SFTs differ: %r" % second.witness)
                print("Output1: %r" % (second.witness_outputs[0],))
                print("Output2: %r" % (second.witness_outputs[1],))
            elif second.are_equivalent:
                print("Equivalent results")
            elif sft is not None:
                print("No other solution")
        print("Elapsed time: %ss" % elapsed_time)
        print("==============================================================")

        if sft is not None and args.dot_path is not None:
            dot_path = _dot_filepath(args.dot_path, args.problem_filepath)
            try:
                write_dot(sft, dot_path)
                LOG.debug("Wrote dot file to '%s'", dot_path)
            except (IOError, OSError) as ex:
                LOG.critical("Could not write transducer graph: %s", ex)

        return 0
    except (CLIError, ProblemException, InvalidExampleException) as ex:
        if DEBUG:
            raise ex
        indent = len(program_name) * " "
        sys.stderr.write(program_name + ": " + str(ex) + "\n")
        sys.stderr.write(indent + "  for help use --help\n")
        return 2

if __name__ == "__main__":
    sys.exit(main())
