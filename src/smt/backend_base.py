'''
Constraint backends

A backend owns one private Z3 context and solver and provides the term
construction, assertion, checking and model evaluation primitives the
bounded encoder is written against. Integer and bit-vector encodings are
two interchangeable backends.
'''
import logging
from abc import ABCMeta, abstractmethod

from z3 import Context, Solver, Function, BoolSort, BoolVal, Datatype, \
    is_true, is_bool, sat

LOG = logging.getLogger("backend")


class ConstraintBackend(metaclass=ABCMeta):
    '''
    Base class for constraint backends

    Backends are context managers, :meth:`close` is called on every exit
    path of a ``with`` block.
    '''

    def __init__(self):
        self.context = Context()
        self.solver = Solver(ctx=self.context)
        self._model = None
        self._pair_sort = None

    @classmethod
    def get_backend_type(cls):
        '''
        Returns the backend type (None for abstract backends)
        '''
        return None

    @property
    @abstractmethod
    def sort(self):
        '''
        Sort of states, symbols, lengths and energy values
        '''
        pass

    @abstractmethod
    def value(self, number):
        '''
        Returns the numeral of the backend sort for the given integer
        '''
        pass

    @abstractmethod
    def _as_int(self, numeral):
        pass

    def check_width(self, max_value):
        '''
        Checks that all constants up to max_value can be represented
        '''
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def close(self):
        if self.solver is not None:
            self.solver.reset()
        self.solver = None
        self._model = None
        self._pair_sort = None
        self.context = None

    @property
    def bool_sort(self):
        return BoolSort(ctx=self.context)

    def true(self):
        return BoolVal(True, ctx=self.context)

    def false(self):
        return BoolVal(False, ctx=self.context)

    def declare_function(self, name, domain_arity, range_sort=None):
        '''
        Declares an uninterpreted function over the backend sort

        :param domain_arity: number of arguments
        :param range_sort: result sort, the backend sort if None
        '''
        if range_sort is None:
            range_sort = self.sort
        return Function(name, *([self.sort] * domain_arity + [range_sort]))

    @property
    def pair_sort(self):
        '''
        Datatype of (first, second) pairs over the backend sort
        '''
        if self._pair_sort is None:
            pair = Datatype('Pair', ctx=self.context)
            pair.declare('mkPair', ('first', self.sort), ('second', self.sort))
            self._pair_sort = pair.create()
        return self._pair_sort

    def mk_pair(self, first, second):
        return self.pair_sort.mkPair(first, second)

    def first(self, pair):
        return self.pair_sort.first(pair)

    def second(self, pair):
        return self.pair_sort.second(pair)

    # comparisons and arithmetic are signed for both numeral sorts
    def le(self, left, right):
        return left <= right

    def lt(self, left, right):
        return left < right

    def ge(self, left, right):
        return left >= right

    def sub(self, left, right):
        return left - right

    def mul(self, left, right):
        return left * right

    def add(self, expr):
        self.solver.add(expr)

    def check(self):
        '''
        Checks the asserted constraints

        :return: True if the constraints are satisfiable
        '''
        status = self.solver.check()
        LOG.debug("Solver status: %s", status)
        self._model = self.solver.model() if status == sat else None
        return self._model is not None

    def evaluate(self, expr):
        '''
        Evaluates expr in the model of the last successful :meth:`check`

        :return: bool for Boolean expressions, int otherwise
        '''
        assert self._model is not None, "no model available"
        result = self._model.evaluate(expr, model_completion=True)
        if is_bool(result):
            return is_true(result)
        return self._as_int(result)

    def to_smt2(self):
        '''
        Returns the asserted constraints in SMT-LIB 2 format
        '''
        return self.solver.sexpr() + "(check-sat)\n"
