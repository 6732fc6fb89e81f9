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

import re
from ply import lex
from .errors import Syntax_Error

class Tokenizer:
    """ Tokenizer for G3D-BASIC expressions.
        Keywords and identifiers are case-insensitive, identifiers are
        returned uppercased.
    """

    reserved = \
        [ 'AND'
        , 'MOD'
        , 'NOT'
        , 'OR'
        ]
    reserved = dict ((k, k) for k in reserved)

    tokens = \
        [ 'COMMA'
        , 'DIVIDE'
        , 'EQ'
        , 'EXPO'
        , 'GE'
        , 'GT'
        , 'IDENT'
        , 'LBRACKET'
        , 'LE'
        , 'LPAREN'
        , 'LT'
        , 'MINUS'
        , 'NE'
        , 'NUMBER'
        , 'PLUS'
        , 'RBRACKET'
        , 'RPAREN'
        , 'STRING'
        , 'TIMES'
        ] + list (reserved)

    t_COMMA    = r','
    t_DIVIDE   = r'/'
    t_EXPO     = r'\^'
    t_GE       = r'>='
    t_GT       = r'>'
    t_LBRACKET = r'\['
    t_LE       = r'<='
    t_LPAREN   = r'[(]'
    t_LT       = r'<'
    t_MINUS    = r'-'
    t_NE       = r'(<>)|(><)|(!=)'
    t_PLUS     = r'\+'
    t_RBRACKET = r'\]'
    t_RPAREN   = r'[)]'
    t_TIMES    = r'\*'

    t_ignore   = '\n\t '

    def t_EQ (self, t):
        r'==?'
        t.value = '='
        return t
    # end def t_EQ

    def t_NUMBER (self, t):
        r'([0-9]+([.][0-9]*)?|[.][0-9]+)([eE][+-]?[0-9]+)?'
        t.value = float (t.value)
        return t
    # end def t_NUMBER

    def t_STRING (self, t):
        r'("[^"]*")|(\'[^\']*\')'
        t.value = t.value [1:-1]
        return t
    # end def t_STRING

    def t_IDENT (self, t):
        r'[A-Za-z_][A-Za-z0-9_]*[$]?'
        t.value = t.value.upper ()
        if t.value in self.reserved:
            t.type = self.reserved [t.value]
        return t
    # end def t_IDENT

    def t_error (self, t):
        raise Syntax_Error ("Illegal character '%s'" % t.value [0])
    # end def t_error

    # END TOKEN DEFINITION

    def __init__ (self, **kw):
        kw.setdefault ('reflags', int (re.VERBOSE | re.IGNORECASE))
        kw.setdefault ('errorlog', lex.NullLogger ())
        self.lexer = lex.lex (module = self, **kw)
    # end def __init__

    def feed (self, s):
        self.lexer.input (s)
    # end def feed

    def token (self):
        return self.lexer.token ()
    # end def token

    def scan (self, s):
        """ Return list of (type, value) for the given text.
        >>> t = Tokenizer ()
        >>> t.scan ('2^x <> 3')
        [('NUMBER', 2.0), ('EXPO', '^'), ('IDENT', 'X'), ('NE', '<>'), ('NUMBER', 3.0)]
        >>> t.scan ('a = "Hi" and not b')
        [('IDENT', 'A'), ('EQ', '='), ('STRING', 'Hi'), ('AND', 'AND'), ('NOT', 'NOT'), ('IDENT', 'B')]
        """
        self.feed (s)
        return [(t.type, t.value) for t in iter (self.token, None)]
    # end def scan

# end class Tokenizer
