'''
Helpers for reading character literals and character classes
'''
from automata.charpred import CharPred

_ESCAPES = {'n': '\n', 't': '\t', 'r': '\r', '0': '\0'}


def _read_char(text, index):
    '''
    Reads one (possibly escaped) character

    :return: tuple (character, index of the next character)
    '''
    char = text[index]
    if char != '\\':
        return char, index + 1
    if index + 1 >= len(text):
        raise ValueError("Dangling escape in %r" % text)

    escaped = text[index + 1]
    if escaped == 'u':
        code = text[index + 2:index + 6]
        if len(code) != 4:
            raise ValueError("Invalid unicode escape in %r" % text)
        return chr(int(code, 16)), index + 6
    if escaped == 'x':
        code = text[index + 2:index + 4]
        if len(code) != 2:
            raise ValueError("Invalid hex escape in %r" % text)
        return chr(int(code, 16)), index + 4
    return _ESCAPES.get(escaped, escaped), index + 2


def unescape(text):
    '''
    Resolves the escape sequences of a string or character literal body
    '''
    chars = []
    index = 0
    while index < len(text):
        char, index = _read_char(text, index)
        chars.append(char)
    return ''.join(chars)


def parse_char_class(text):
    '''
    Returns the predicate of a character class such as [a-z_] or [^<>]

    A '-' at the start or end of the class is a literal character.
    '''
    assert text.startswith('[') and text.endswith(']'), text
    body = text[1:-1]
    negated = body.startswith('^')
    if negated:
        body = body[1:]

    intervals = []
    index = 0
    while index < len(body):
        lo, index = _read_char(body, index)
        if index + 1 < len(body) and body[index] == '-':
            hi, index = _read_char(body, index + 1)
            if lo > hi:
                raise ValueError("Invalid range %r-%r in %s" % (lo, hi, text))
            intervals.append((lo, hi))
        else:
            intervals.append((lo, lo))

    predicate = CharPred(intervals)
    return ~predicate if negated else predicate


def parse_char_literal(text):
    '''
    Returns the atom of a quoted character such as '<'
    '''
    char = unescape(text[1:-1])
    if len(char) != 1:
        raise ValueError("Single character expected: %s" % text)
    return CharPred.atom(char)
