'''
Encode-solve-decode attempts with a wall-clock deadline

Every attempt runs in its own process, which owns the constraint backend
(and thereby the Z3 context). On expiry of the deadline the process is
terminated, the caller receives a TIMEOUT result instead of an exception.
'''
import logging
import queue
import sys
import time
from enum import Enum
from multiprocessing import Process, Queue

from smt.backend import ConstraintBackendFactory
from smt.decoder import decode
from smt.encoder import BoundedEncoder
import config

LOG = logging.getLogger("task")


class AttemptStatus(Enum):  # pylint: disable=too-few-public-methods
    SAT = 1
    UNSAT = 2
    TIMEOUT = 3
    ERROR = 4


class AttemptResult(object):
    '''
    Outcome of one attempt

    * sft -- synthesized finite transducer (SAT only)
    * solving_time -- time spent in the solver check in ms
    * runtime -- wall-clock time of the attempt in ms
    * description -- exception description (ERROR, TIMEOUT)
    '''
    def __init__(self, status, sft=None, solving_time=None, runtime=None,
                 description=None):
        self.status = status
        self.sft = sft
        self.solving_time = solving_time
        self.runtime = runtime
        self.description = description

    @property
    def is_satisfiable(self):
        return self.status == AttemptStatus.SAT

    def __repr__(self):
        return "AttemptResult(%s, solving time: %s ms, runtime: %s ms%s)" % \
            (self.status.name, self.solving_time, self.runtime,
             "" if self.description is None else ", " + self.description)


def _millis(seconds):
    return int(round(seconds * 1000))


def encode_solve_decode(instance, backend_type=config.DEFAULT_ENCODING,
                        backend_options=None, smt_dump_path=None):
    '''
    Runs one attempt in the current process

    :return: (sft, solving time in ms), the sft has no transitions if the
             instance is unsatisfiable
    '''
    backend_options = backend_options or {}
    factory = ConstraintBackendFactory()
    with factory.create(backend_type, **backend_options) as backend:
        encoder = BoundedEncoder(instance, backend)
        encoder.encode()
        if smt_dump_path is not None:
            encoder.dump(smt_dump_path)

        start = time.perf_counter()
        satisfiable = backend.check()
        solving_time = _millis(time.perf_counter() - start)
        LOG.info("Solver returned %s after %d ms",
                 ["UNSAT", "SAT"][satisfiable], solving_time)

        return decode(encoder, satisfiable), solving_time


def _execute_attempt(result_queue, instance, backend_type, backend_options,
                     smt_dump_path):
    try:
        result = encode_solve_decode(instance, backend_type, backend_options,
                                     smt_dump_path)
        result_queue.put((True, result))
    except Exception as ex:  # pylint: disable=broad-except
        result_queue.put((False, repr(ex)))
        sys.exit(1)


class SynthesisTask(object):
    '''
    Cancellable unit of work: encode, solve and decode one instance
    '''
    def __init__(self, instance, backend_type=config.DEFAULT_ENCODING,
                 backend_options=None, timeout=config.DEFAULT_TIMEOUT,
                 smt_dump_path=None):
        self.instance = instance
        self.backend_type = backend_type
        self.backend_options = backend_options or {}
        self.timeout = timeout
        self.smt_dump_path = smt_dump_path

    def run(self):
        '''
        Runs the attempt in a separate process

        :return: :class:`AttemptResult`, never raises for failed attempts
        '''
        result_queue = Queue()
        proc = Process(target=_execute_attempt,
                       args=(result_queue, self.instance, self.backend_type,
                             self.backend_options, self.smt_dump_path))

        start = time.perf_counter()
        deadline = start + self.timeout
        proc.start()
        while True:
            try:
                success, payload = result_queue.get(
                    timeout=max(0, min(config.POLL_INTERVAL,
                                       deadline - time.perf_counter())))
                break
            except queue.Empty:
                pass

            if not proc.is_alive():
                # the result may arrive after the process has exited
                try:
                    success, payload = result_queue.get(
                        timeout=config.POLL_INTERVAL)
                    break
                except queue.Empty:
                    pass
                proc.join()
                runtime = _millis(time.perf_counter() - start)
                LOG.error("Attempt exited without result (exit code %s)",
                          proc.exitcode)
                return AttemptResult(AttemptStatus.ERROR, runtime=runtime,
                                     description="Exit code: %s" %
                                     proc.exitcode)

            if time.perf_counter() >= deadline:
                proc.terminate()
                proc.join()
                runtime = _millis(time.perf_counter() - start)
                LOG.warning("Attempt timed out after %d ms", runtime)
                return AttemptResult(AttemptStatus.TIMEOUT, runtime=runtime,
                                     description="Timeout after %s s" %
                                     self.timeout)
        proc.join()
        runtime = _millis(time.perf_counter() - start)

        if not success:
            LOG.error("Attempt failed: %s", payload)
            return AttemptResult(AttemptStatus.ERROR, runtime=runtime,
                                 description=payload)

        sft, solving_time = payload
        status = AttemptStatus.UNSAT if sft.is_empty_solution \
            else AttemptStatus.SAT
        return AttemptResult(status, sft, solving_time, runtime)
