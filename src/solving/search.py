'''
Iterative search for syntactically distinct solutions
'''
import logging

from solving.task import SynthesisTask
import config

LOG = logging.getLogger("search")


def solve_then_exclude(instance, max_solutions=config.MAX_SOLUTIONS,
                       timeout=config.DEFAULT_TIMEOUT, **task_options):
    '''
    Solves the instance repeatedly, excluding every solution found so far

    Attempts run sequentially since every attempt depends on the models of
    its predecessors. The loop stops after max_solutions solutions or on the
    first attempt that does not return SAT.

    :param task_options: further keyword arguments of
                         :class:`solving.task.SynthesisTask`
    :return: list of :class:`solving.task.AttemptResult`, the last entry is
             the non-SAT attempt (if any)
    '''
    results = []
    current = instance
    while len(results) < max_solutions:
        LOG.info("Attempt %d: %s", len(results) + 1, current)
        result = SynthesisTask(current, timeout=timeout, **task_options).run()
        results.append(result)
        LOG.info("Attempt %d: %s", len(results), result)
        if not result.is_satisfiable:
            break
        current = current.with_exclusion(result.sft)
    return results
