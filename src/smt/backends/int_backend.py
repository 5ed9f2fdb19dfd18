'''
Backend over unbounded integers
'''
from z3 import IntSort, IntVal

from smt.backend_base import ConstraintBackend


class IntBackend(ConstraintBackend):
    INT_BACKEND = "int"

    @classmethod
    def get_backend_type(cls):
        return cls.INT_BACKEND

    @property
    def sort(self):
        return IntSort(ctx=self.context)

    def value(self, number):
        return IntVal(number, ctx=self.context)

    def _as_int(self, numeral):
        return numeral.as_long()
