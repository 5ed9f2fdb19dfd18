'''
Backend over signed fixed-width bit-vectors
'''
import logging

from z3 import BitVecSort, BitVecVal

import config
from datastructures.exceptions import EncodingWidthException
from smt.backend_base import ConstraintBackend

LOG = logging.getLogger("backend")


class BitVecBackend(ConstraintBackend):
    '''
    Bit-vector backend

    Numerals are interpreted as two's complement numbers, so the largest
    representable constant is 2^(width-1) - 1.
    '''
    BV_BACKEND = "bv"

    def __init__(self, width=config.DEFAULT_BV_WIDTH):
        super().__init__()
        if width < 2:
            raise ValueError("bit-vector width must be at least 2: %d" %
                             width)
        self.width = width
        self.solver.set("smt.relevancy", 0)
        self.solver.set("smt.phase_caching_on", 80000)

    @classmethod
    def get_backend_type(cls):
        return cls.BV_BACKEND

    @property
    def sort(self):
        return BitVecSort(self.width, ctx=self.context)

    @property
    def max_value(self):
        return 2 ** (self.width - 1) - 1

    def value(self, number):
        return BitVecVal(number, self.width, ctx=self.context)

    def _as_int(self, numeral):
        return numeral.as_signed_long()

    def check_width(self, max_value):
        '''
        :raises EncodingWidthException: if max_value exceeds the signed range
        '''
        if max_value > self.max_value:
            raise EncodingWidthException(
                "Constant %d does not fit into %d bit signed bit-vectors "
                "(maximum %d)" % (max_value, self.width, self.max_value))
        LOG.debug("Width %d suffices for maximum constant %d",
                  self.width, max_value)
