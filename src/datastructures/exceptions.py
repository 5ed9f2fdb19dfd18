'''
Exceptions raised while reading problems and building synthesis instances
'''


class ProblemException(Exception):
    '''
    The problem file cannot be read or is malformed
    '''
    def __init__(self, message):
        super().__init__(message)


class InvalidExampleException(Exception):
    '''
    An example input is rejected by the source or an example output is
    rejected by the target automaton
    '''
    def __init__(self, message, example=None):
        super().__init__(message)
        self.example = example


class MintermException(Exception):
    def __init__(self, message):
        super().__init__(message)


class EncodingWidthException(Exception):
    '''
    A constant of the synthesis instance does not fit the bit-vector width
    '''
    def __init__(self, message):
        super().__init__(message)
