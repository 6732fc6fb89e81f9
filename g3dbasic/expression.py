#!/usr/bin/python3
# Copyright (C) 2024 Dr. Ralf Schlatterbeck Open Source Consulting.
# Reichergasse 131, A-3411 Weidling.
# Web: http://www.runtux.com Email: office@runtux.com
# All rights reserved
# ****************************************************************************
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
#   The above copyright notice and this permission notice shall be included in
#   all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
# ****************************************************************************

from collections import ChainMap
from types import MappingProxyType
from ply import yacc
import numpy as np
from . import tokenizer
from .errors import Syntax_Error, Unsafe_Expression, Evaluation_Error
from .errors import Undefined_Function

# Name of the externally driven scalar visible in every expression
MORPH       = 'N'
MAX_DISPLAY = 60
MAX_STRING  = 10000
MAX_CALLS   = 100000

allowed_punctuation = set ('+-*/^<>=()[]"\',._:!?%#$')

denied_tokens = \
    ( 'window'
    , 'document'
    , 'globalthis'
    , 'self.'
    , 'process'
    , 'require'
    , 'import'
    , 'globals'
    , 'builtins'
    , '__'
    , 'constructor'
    , 'prototype'
    , 'getattr'
    , 'eval'
    , 'exec'
    , 'compile'
    , 'function'
    , 'lambda'
    , '=>'
    , ';'
    , '{'
    , '}'
    , '`'
    , '${'
    )

def display (text):
    """ Shorten expression text for error messages
    >>> display ('1+2')
    '1+2'
    >>> len (display ('X+' * 40))
    60
    >>> display ('X+' * 40) [-5:]
    '+X...'
    """
    if len (text) > MAX_DISPLAY:
        return text [:MAX_DISPLAY - 3] + '...'
    return text
# end def display

def check_expression (text):
    """ Reject expressions using characters outside the allow-list or
        containing a denied token.
    >>> check_expression ('SIN(X)^2 + "a"')
    >>> check_expression ('Window')
    Traceback (most recent call last):
    ...
    g3dbasic.errors.Unsafe_Expression: Unsafe expression "Window": forbidden token "window"
    >>> check_expression ('X & 1')
    Traceback (most recent call last):
    ...
    g3dbasic.errors.Unsafe_Expression: Unsafe expression "X & 1": illegal character "&"
    """
    for ch in text:
        if ch.isalnum () or ch.isspace () or ch in allowed_punctuation:
            continue
        raise Unsafe_Expression \
            ( 'Unsafe expression "%s": illegal character "%s"'
            % (display (text), ch)
            )
    lower = text.lower ()
    for token in denied_tokens:
        if token in lower:
            raise Unsafe_Expression \
                ( 'Unsafe expression "%s": forbidden token "%s"'
                % (display (text), token)
                )
# end def check_expression

def finite (value):
    """ Numeric value suitable for a scene command, anything that is
        not a finite number becomes 0.
    >>> finite (2)
    2.0
    >>> finite (float ('inf'))
    0.0
    >>> finite (float ('nan'))
    0.0
    >>> finite ('abc')
    0.0
    """
    if isinstance (value, str):
        return 0.0
    try:
        value = float (value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite (value):
        return 0.0
    return value
# end def finite

def fun_str (value):
    """ Render a value as text
    >>> fun_str (3.0)
    '3'
    >>> fun_str (-2.5)
    '-2.5'
    >>> fun_str (0.1 + 0.2)
    '0.3'
    >>> fun_str ('x')
    'x'
    """
    if isinstance (value, str):
        return value
    value = finite (value)
    if value == int (value) and abs (value) < 1e15:
        return '%d' % value
    return '%.10g' % value
# end def fun_str

def fun_len (value):
    if not isinstance (value, str):
        raise TypeError ('LEN needs a string')
    return float (len (value))
# end def fun_len

BUILTINS = MappingProxyType \
    ( { 'ABS'  : np.abs
      , 'ATN'  : np.arctan
      , 'COS'  : np.cos
      , 'EXP'  : np.exp
      , 'INT'  : np.trunc
      , 'LEN'  : fun_len
      , 'LOG'  : np.log
      , 'PI'   : np.pi
      , 'SGN'  : np.sign
      , 'SIN'  : np.sin
      , 'SQR'  : np.sqrt
      , 'STR'  : fun_str
      , 'STR$' : fun_str
      , 'TAN'  : np.tan
      }
    )

class Name_Error (Exception):

    def __init__ (self, name):
        super ().__init__ ('%s is not defined' % name)
        self.name = name
    # end def __init__

# end class Name_Error

class Budget:
    """ Function calls left, shared by all evaluations of one parse
    >>> b = Budget (1)
    >>> b.spend ()
    >>> b.spend ()
    Traceback (most recent call last):
    ...
    g3dbasic.errors.Evaluation_Error: Evaluation budget of 1 function calls exhausted
    """

    def __init__ (self, calls = MAX_CALLS):
        self.limit = calls
        self.calls = calls
    # end def __init__

    def spend (self):
        if self.calls <= 0:
            raise Evaluation_Error \
                ( 'Evaluation budget of %d function calls exhausted'
                % self.limit
                )
        self.calls -= 1
    # end def spend

# end class Budget

class Environment:
    """ Name resolution for one evaluation: explicit bindings first,
        the morph parameter is the fallback for its name.
        Every call of a function is charged to the budget.
    """

    def __init__ (self, names, morph = 0.0, budget = None):
        self.names  = names
        self.morph  = morph
        self.budget = budget
        if budget is None:
            self.budget = Budget ()
    # end def __init__

    def lookup (self, name):
        try:
            return self.names [name]
        except KeyError:
            pass
        if name == MORPH:
            return self.morph
        raise Name_Error (name)
    # end def lookup

# end class Environment

def _number (value, op):
    if isinstance (value, str):
        raise TypeError ('Type mismatch for operator %s' % op)
    return np.float64 (value)
# end def _number

def _compare (op, left, right):
    if isinstance (left, str) != isinstance (right, str):
        if op == '=':
            return 0.0
        if op == '<>':
            return 1.0
        raise TypeError ('Type mismatch for operator %s' % op)
    if op == '=':
        r = left == right
    elif op == '<>':
        r = left != right
    elif op == '<':
        r = left < right
    elif op == '>':
        r = left > right
    elif op == '<=':
        r = left <= right
    else:
        r = left >= right
    return 1.0 if r else 0.0
# end def _compare

class Node:
    """ Expression tree node """

    def children (self):
        return []
    # end def children

# end class Node

class Literal (Node):

    def __init__ (self, value):
        self.value = value
    # end def __init__

    def eval (self, env):
        return self.value
    # end def eval

# end class Literal

class Identifier (Node):

    def __init__ (self, name):
        self.name = name
    # end def __init__

    def eval (self, env):
        value = env.lookup (self.name)
        if callable (value) or hasattr (value, 'invoke'):
            raise TypeError ('%s is a function, not a value' % self.name)
        return value
    # end def eval

# end class Identifier

class Unary_Op (Node):

    def __init__ (self, op, operand):
        self.op      = op
        self.operand = operand
    # end def __init__

    def children (self):
        return [self.operand]
    # end def children

    def eval (self, env):
        value = self.operand.eval (env)
        if self.op == 'NOT':
            return 0.0 if value else 1.0
        value = _number (value, self.op)
        if self.op == '-':
            return -value
        return value
    # end def eval

# end class Unary_Op

class Binary_Op (Node):

    arithmetic = \
        { '-'   : np.subtract
        , '*'   : np.multiply
        , '/'   : np.divide
        , '^'   : np.power
        , 'MOD' : np.mod
        }

    def __init__ (self, op, left, right):
        self.op    = op
        self.left  = left
        self.right = right
    # end def __init__

    def children (self):
        return [self.left, self.right]
    # end def children

    def eval (self, env):
        if self.op == 'AND':
            return self.left.eval (env) and self.right.eval (env)
        if self.op == 'OR':
            return self.left.eval (env) or self.right.eval (env)
        left  = self.left.eval  (env)
        right = self.right.eval (env)
        if self.op == '+':
            if isinstance (left, str) or isinstance (right, str):
                left, right = fun_str (left), fun_str (right)
                if len (left) + len (right) > MAX_STRING:
                    raise ValueError \
                        ('String longer than %d characters' % MAX_STRING)
                return left + right
            return np.add (_number (left, '+'), _number (right, '+'))
        if self.op in self.arithmetic:
            f = self.arithmetic [self.op]
            return f (_number (left, self.op), _number (right, self.op))
        return _compare (self.op, left, right)
    # end def eval

# end class Binary_Op

class Call (Node):

    def __init__ (self, name, args):
        self.name = name
        self.args = args
    # end def __init__

    def children (self):
        return list (self.args)
    # end def children

    def eval (self, env):
        try:
            fun = env.names [self.name]
        except KeyError:
            raise Undefined_Function ('Function %s is not defined' % self.name)
        env.budget.spend ()
        args = [a.eval (env) for a in self.args]
        if hasattr (fun, 'invoke'):
            return fun.invoke (args, env.morph, env.budget)
        if not callable (fun):
            raise TypeError ('%s is not a function' % self.name)
        return fun (*args)
    # end def eval

# end class Call

def referenced_names (node):
    """ All identifiers and called names used in the tree """
    result = set ()
    stack  = [node]
    while stack:
        n = stack.pop ()
        if isinstance (n, (Identifier, Call)):
            result.add (n.name)
        stack.extend (n.children ())
    return result
# end def referenced_names

def split_args (text):
    """ Split at top-level commas, honoring parentheses and quotes
    >>> split_args ('FNX(T), FNY(T,1), "a,b"')
    ['FNX(T)', 'FNY(T,1)', '"a,b"']
    >>> split_args ('1')
    ['1']
    """
    parts = []
    depth = 0
    quote = None
    start = 0
    for i, ch in enumerate (text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in '"\'':
            quote = ch
        elif ch in '([':
            depth += 1
        elif ch in ')]':
            depth -= 1
        elif ch == ',' and depth == 0:
            parts.append (text [start:i].strip ())
            start = i + 1
    parts.append (text [start:].strip ())
    return parts
# end def split_args

class Expression_Parser:
    """ Grammar for the expression language, builds a Node tree """

    tokens = tokenizer.Tokenizer.tokens
    start  = 'expr'

    precedence = \
        ( ('left',  'OR')
        , ('left',  'AND')
        , ('right', 'NOT')
        , ('left',  'LT', 'GT', 'LE', 'GE', 'NE', 'EQ')
        , ('left',  'PLUS', 'MINUS')
        , ('left',  'TIMES', 'DIVIDE', 'MOD')
        , ('right', 'UMINUS')
        , ('right', 'EXPO')
        )

    def __init__ (self, debug = False):
        self.tokenizer = tokenizer.Tokenizer ()
        self.parser    = yacc.yacc \
            ( module       = self
            , debug        = debug
            , write_tables = False
            , errorlog     = yacc.NullLogger ()
            )
    # end def __init__

    def parse (self, text):
        self.tokenizer.feed (text)
        return self.parser.parse (lexer = self.tokenizer)
    # end def parse

    # PRODUCTIONS OF PARSER

    def p_error (self, p):
        if p is None:
            raise Syntax_Error ('unexpected end of expression')
        raise Syntax_Error ('unexpected "%s"' % p.value)
    # end def p_error

    def p_expression_twoop (self, p):
        """
            expr : expr PLUS   expr
                 | expr MINUS  expr
                 | expr TIMES  expr
                 | expr DIVIDE expr
                 | expr MOD    expr
                 | expr GT     expr
                 | expr GE     expr
                 | expr LT     expr
                 | expr LE     expr
                 | expr NE     expr
                 | expr EQ     expr
                 | expr AND    expr
                 | expr OR     expr
                 | expr EXPO   expr
        """
        op = p [2]
        if p.slice [2].type == 'NE':
            op = '<>'
        p [0] = Binary_Op (op, p [1], p [3])
    # end def p_expression_twoop

    def p_expression_uminus (self, p):
        """
            expr : MINUS expr %prec UMINUS
                 | PLUS  expr %prec UMINUS
        """
        p [0] = Unary_Op (p [1], p [2])
    # end def p_expression_uminus

    def p_expression_not (self, p):
        """
            expr : NOT expr
        """
        p [0] = Unary_Op ('NOT', p [2])
    # end def p_expression_not

    def p_expression_paren (self, p):
        """
            expr : LPAREN expr RPAREN
                 | LBRACKET expr RBRACKET
        """
        p [0] = p [2]
    # end def p_expression_paren

    def p_expression_literal (self, p):
        """
            expr : NUMBER
                 | STRING
        """
        p [0] = Literal (p [1])
    # end def p_expression_literal

    def p_expression_var (self, p):
        """
            expr : IDENT
        """
        p [0] = Identifier (p [1])
    # end def p_expression_var

    def p_expression_call (self, p):
        """
            expr : IDENT LPAREN exprlist RPAREN
                 | IDENT LPAREN RPAREN
        """
        args = []
        if len (p) == 5:
            args = p [3]
        p [0] = Call (p [1], args)
    # end def p_expression_call

    def p_exprlist (self, p):
        """
            exprlist : expr
                     | exprlist COMMA expr
        """
        if len (p) == 2:
            p [0] = [p [1]]
        else:
            p [0] = p [1] + [p [3]]
    # end def p_exprlist

# end class Expression_Parser

class Expression:
    """ An expression parsed once into a tree, evaluated many times.
        The text is checked against the allow- and deny-lists before
        it is parsed.
    """

    parser = None

    def __init__ (self, text, node = None):
        self.text = text.strip ()
        if node is None:
            check_expression (self.text)
            try:
                node = self.get_parser ().parse (self.text)
            except Syntax_Error as err:
                raise Syntax_Error \
                    ( 'Invalid expression "%s": %s'
                    % (display (self.text), err.message)
                    )
        self.node = node
    # end def __init__

    @classmethod
    def get_parser (cls):
        if cls.parser is None:
            cls.parser = Expression_Parser ()
        return cls.parser
    # end def get_parser

    def failure (self, err):
        return \
            ( 'Failed to evaluate expression "%s": %s'
            % (display (self.text), err)
            )
    # end def failure

    def evaluate (self, env):
        try:
            with np.errstate (all = 'ignore'):
                return self.node.eval (env)
        except Name_Error as err:
            raise Evaluation_Error (self.failure (err))
        except RecursionError:
            raise Evaluation_Error (self.failure ('nested too deeply'))
        except MemoryError:
            raise Evaluation_Error (self.failure ('out of memory'))
        except (ArithmeticError, TypeError, ValueError) as err:
            raise Evaluation_Error (self.failure (err))
    # end def evaluate

    def names (self):
        return referenced_names (self.node)
    # end def names

    def number (self, env):
        return finite (self.evaluate (env))
    # end def number

    def string (self, env):
        return fun_str (self.evaluate (env))
    # end def string

# end class Expression

def evaluate (text, variables = None, morph = 0.0, builtins = BUILTINS):
    """ Evaluate a single expression, numbers are coerced to finite
        values.
    >>> evaluate ('1+2*3')
    7.0
    >>> evaluate ('2^3')
    8.0
    >>> evaluate ('5/0')
    0.0
    >>> evaluate ('x <> 2 AND x = 3', dict (x = 3))
    1.0
    >>> evaluate ('-2^2')
    -4.0
    >>> evaluate ('"G=" + STR(INT(7.9))')
    'G=7'
    >>> evaluate ('N * 2', morph = 0.25)
    0.5
    """
    variables = dict ((k.upper (), v) for k, v in (variables or {}).items ())
    env   = Environment (ChainMap (variables, builtins), morph)
    value = Expression (text).evaluate (env)
    if isinstance (value, str):
        return value
    return finite (value)
# end def evaluate
