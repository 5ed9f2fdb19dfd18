'''
Character predicates (unary interval theory over Unicode code points)

A predicate is a normalized set of closed code point intervals. The
functions in this module form the Boolean algebra that the automata
operate on: conjunction, disjunction, negation, satisfiability, witness
generation and minterm computation.
'''
from bisect import bisect_right

MIN_CHAR = 0
MAX_CHAR = 0x10FFFF

# printable ASCII range preferred when generating witnesses
_PRINTABLE = (0x21, 0x7E)


def _code(value):
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError("single character expected: %r" % value)
        return ord(value)
    return int(value)


def _normalize(intervals):
    '''
    Sorts the given intervals and merges overlapping or adjacent ones

    :param intervals: iterable of (lo, hi) tuples (characters or code points)
    '''
    ranges = sorted((max(MIN_CHAR, _code(lo)), min(MAX_CHAR, _code(hi)))
                    for lo, hi in intervals)
    merged = []
    for lo, hi in ranges:
        if lo > hi:
            continue
        if merged and lo <= merged[-1][1] + 1:
            if hi > merged[-1][1]:
                merged[-1] = (merged[-1][0], hi)
        else:
            merged.append((lo, hi))
    return tuple(merged)


class CharPred(object):
    '''
    Immutable predicate over characters
    '''
    def __init__(self, intervals=()):
        self.intervals = _normalize(intervals)
        self._starts = [lo for lo, _ in self.intervals]
        self.__hash_value = hash(self.intervals)

    @classmethod
    def atom(cls, char):
        return cls([(char, char)])

    @classmethod
    def of_range(cls, lo, hi):
        return cls([(lo, hi)])

    @classmethod
    def of_chars(cls, chars):
        return cls([(c, c) for c in chars])

    @classmethod
    def true(cls):
        return cls([(MIN_CHAR, MAX_CHAR)])

    @classmethod
    def false(cls):
        return cls()

    def is_satisfiable(self):
        return len(self.intervals) > 0

    def is_true(self):
        return self.intervals == ((MIN_CHAR, MAX_CHAR),)

    def is_atom(self):
        return len(self.intervals) == 1 and \
            self.intervals[0][0] == self.intervals[0][1]

    def is_satisfied_by(self, char):
        code = _code(char)
        index = bisect_right(self._starts, code) - 1
        return index >= 0 and self.intervals[index][1] >= code

    def witness(self):
        '''
        Returns one character satisfying the predicate, None if there is none

        The smallest printable ASCII character is preferred, otherwise the
        smallest character of the predicate is returned.
        '''
        if not self.intervals:
            return None
        for lo, hi in self.intervals:
            if hi >= _PRINTABLE[0] and lo <= _PRINTABLE[1]:
                return chr(max(lo, _PRINTABLE[0]))
        return chr(self.intervals[0][0])

    def size(self):
        return sum(hi - lo + 1 for lo, hi in self.intervals)

    def __and__(self, other):
        result = []
        i = j = 0
        while i < len(self.intervals) and j < len(other.intervals):
            lo = max(self.intervals[i][0], other.intervals[j][0])
            hi = min(self.intervals[i][1], other.intervals[j][1])
            if lo <= hi:
                result.append((lo, hi))
            if self.intervals[i][1] < other.intervals[j][1]:
                i += 1
            else:
                j += 1
        return CharPred(result)

    def __or__(self, other):
        return CharPred(self.intervals + other.intervals)

    def __invert__(self):
        result = []
        start = MIN_CHAR
        for lo, hi in self.intervals:
            if lo > start:
                result.append((start, lo - 1))
            start = hi + 1
        if start <= MAX_CHAR:
            result.append((start, MAX_CHAR))
        return CharPred(result)

    def __sub__(self, other):
        return self & ~other

    def __eq__(self, other):
        if not isinstance(other, CharPred):
            return False
        return self.intervals == other.intervals

    def __ne__(self, other):
        return not self.__eq__(other)

    def __lt__(self, other):
        return self.intervals < other.intervals

    def __hash__(self):
        return self.__hash_value

    def __getstate__(self):
        return {'intervals': self.intervals}

    def __setstate__(self, state):
        self.__init__(state['intervals'])

    def __repr__(self):
        if self.is_true():
            return '.'
        if not self.intervals:
            return '[]'
        complement = ~self
        if len(complement.intervals) < len(self.intervals):
            return '[^%s]' % _format_intervals(complement.intervals)
        return '[%s]' % _format_intervals(self.intervals)

    __str__ = __repr__


def _format_char(code):
    char = chr(code)
    if char in '\\]-^[':
        return '\\' + char
    if 0x20 < code < 0x7F:
        return char
    if code <= 0xFF:
        return '\\x%02x' % code
    return '\\u%04x' % code


def _format_intervals(intervals):
    parts = []
    for lo, hi in intervals:
        if lo == hi:
            parts.append(_format_char(lo))
        elif hi == lo + 1:
            parts.append(_format_char(lo) + _format_char(hi))
        else:
            parts.append('%s-%s' % (_format_char(lo), _format_char(hi)))
    return ''.join(parts)


def get_minterms(predicates):
    '''
    Computes the minterms of the given predicates

    Each minterm is a tuple (predicate, indices) where indices lists the
    positions of all given predicates that contain the minterm. Minterms
    are pairwise disjoint, satisfiable, and together cover the whole
    character domain.

    :param predicates: list of CharPred
    '''
    minterms = [(CharPred.true(), [])]
    for index, predicate in enumerate(predicates):
        refined = []
        for minterm, indices in minterms:
            inside = minterm & predicate
            if inside.is_satisfiable():
                refined.append((inside, indices + [index]))
            outside = minterm - predicate
            if outside.is_satisfiable():
                refined.append((outside, indices))
        minterms = refined
    return sorted(minterms, key=lambda minterm: minterm[0].intervals)
