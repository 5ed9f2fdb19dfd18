'''
Output functions of symbolic transducer moves
'''
from abc import ABCMeta, abstractmethod

from automata.charpred import CharPred, MIN_CHAR, MAX_CHAR


class CharFunc(metaclass=ABCMeta):
    '''
    Function from an input character to one output character
    '''

    @abstractmethod
    def apply(self, char):
        pass

    @abstractmethod
    def output_pred(self, guard):
        '''
        Returns the predicate of all outputs for inputs satisfying guard
        '''
        pass


class CharConstant(CharFunc):
    def __init__(self, char):
        self.char = char

    def apply(self, char):
        return self.char

    def output_pred(self, guard):
        return CharPred.atom(self.char)

    def __eq__(self, other):
        if not isinstance(other, CharConstant):
            return False
        return self.char == other.char

    def __hash__(self):
        return hash(('const', self.char))

    def __repr__(self):
        return repr(self.char)


class CharOffset(CharFunc):
    '''
    Shifts the input character by a fixed offset (identity for offset 0)
    '''
    def __init__(self, offset):
        self.offset = offset

    def apply(self, char):
        return chr(ord(char) + self.offset)

    def output_pred(self, guard):
        return CharPred([(lo + self.offset, hi + self.offset)
                         for lo, hi in guard.intervals
                         if hi + self.offset >= MIN_CHAR and
                         lo + self.offset <= MAX_CHAR])

    def __eq__(self, other):
        if not isinstance(other, CharOffset):
            return False
        return self.offset == other.offset

    def __hash__(self):
        return hash(('offset', self.offset))

    def __repr__(self):
        if self.offset == 0:
            return 'x'
        return 'x%+d' % self.offset


IDENTITY = CharOffset(0)
