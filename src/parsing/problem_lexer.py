'''
Lexer of synthesis problem files

A problem file consists of the sections [SOURCE], [TARGET], [TEMPLATE]
(optional) and [EXAMPLES]:

    [SOURCE]
    initial: 0;
    final: 0;
    0 -> 0 : [a-z];

    [EXAMPLES]
    "ab" -> "AB";
'''
import ply.lex as lex

from datastructures.exceptions import ProblemException

SECTION_SOURCE = 'SOURCE'
SECTION_TARGET = 'TARGET'
SECTION_TEMPLATE = 'TEMPLATE'
SECTION_EXAMPLES = 'EXAMPLES'

AUTOMATON_SECTIONS = (SECTION_SOURCE, SECTION_TARGET, SECTION_TEMPLATE)

reserved = {
    'initial': 'INITIAL',
    'final': 'FINAL',
}

tokens = ['SECTION', 'NUMBER', 'ARROW', 'COLON', 'SEMI', 'COMMA', 'DOT',
          'CHARCLASS', 'CHAR', 'STRING', 'ID'] + list(reserved.values())

t_ARROW = r'->'
t_COLON = r':'
t_SEMI = r';'
t_COMMA = r','
t_DOT = r'\.'

t_ignore = ' \t\r'
t_ignore_COMMENT = r'\#.*'


def t_SECTION(t):
    r'\[(SOURCE|TARGET|TEMPLATE|EXAMPLES)\]'
    t.value = t.value[1:-1]
    return t


def t_CHARCLASS(t):
    r'\[\^?([^\]\\\n]|\\.)+\]'
    return t


def t_CHAR(t):
    r"'([^'\\\n]|\\(u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|.))'"
    return t


def t_STRING(t):
    r'"([^"\\\n]|\\.)*"'
    return t


def t_NUMBER(t):
    r'\d+'
    t.value = int(t.value)
    return t


def t_ID(t):
    r'[a-zA-Z_][a-zA-Z_0-9]*'
    t.type = reserved.get(t.value, 'ID')
    return t


def t_newline(t):
    r'\n+'
    t.lexer.lineno += len(t.value)


def t_error(t):
    raise ProblemException("Illegal character %r in line %d" %
                           (t.value[0], t.lexer.lineno))


def build():
    '''
    Returns a new lexer instance
    '''
    return lex.lex()
