'''
Parser of synthesis problem files

parse_problem returns a list of (section name, statements) tuples, where
every statement is one of

* ('initial', state)
* ('final', [states])
* ('move', from_state, to_state, predicate)
* ('example', input, output)
'''
import ply.yacc as yacc

from automata.charpred import CharPred
from datastructures.exceptions import ProblemException
from parsing import problem_lexer
from parsing.helpers import parse_char_class, parse_char_literal, unescape

tokens = problem_lexer.tokens


def p_problem(p):
    '''problem : section_list'''
    p[0] = p[1]


def p_section_list(p):
    '''section_list : section
                    | section_list section'''
    if len(p) > 2:
        p[0] = p[1]
        p[0].append(p[2])
    else:
        p[0] = [p[1]]


def p_section(p):
    '''section : SECTION statement_list
               | SECTION'''
    p[0] = (p[1], p[2] if len(p) > 2 else [])


def p_statement_list(p):
    '''statement_list : statement
                      | statement_list statement'''
    if len(p) > 2:
        p[0] = p[1]
        p[0].append(p[2])
    else:
        p[0] = [p[1]]


def p_statement_initial(p):
    '''statement : INITIAL COLON NUMBER SEMI'''
    p[0] = ('initial', p[3])


def p_statement_final(p):
    '''statement : FINAL COLON number_list SEMI
                 | FINAL COLON SEMI'''
    p[0] = ('final', p[3] if len(p) > 4 else [])


def p_statement_move(p):
    '''statement : NUMBER ARROW NUMBER COLON predicate SEMI'''
    p[0] = ('move', p[1], p[3], p[5])


def p_statement_example(p):
    '''statement : STRING ARROW STRING SEMI'''
    p[0] = ('example', unescape(p[1][1:-1]), unescape(p[3][1:-1]))


def p_number_list(p):
    '''number_list : NUMBER
                   | number_list COMMA NUMBER'''
    if len(p) > 2:
        p[0] = p[1]
        p[0].append(p[3])
    else:
        p[0] = [p[1]]


def p_predicate_class(p):
    '''predicate : CHARCLASS'''
    p[0] = parse_char_class(p[1])


def p_predicate_char(p):
    '''predicate : CHAR'''
    p[0] = parse_char_literal(p[1])


def p_predicate_any(p):
    '''predicate : DOT'''
    p[0] = CharPred.true()


def p_error(p):
    if p:
        raise ProblemException("Syntax error at %r in line %d" %
                               (p.value, p.lineno))
    raise ProblemException("Syntax error at end of file")


_parser = yacc.yacc(debug=False, write_tables=False,
                    errorlog=yacc.NullLogger())


def parse_problem(text, logger=None):
    """ Return [(section, statements)] in order of appearance """
    if logger is not None:
        logger.info('parsing problem..')
    return _parser.parse(text, lexer=problem_lexer.build())
