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
import logging
from collections import ChainMap
from types import MappingProxyType
from .expression import Expression, Environment, Binary_Op, MORPH, finite
from .expression import Budget, MAX_CALLS
from .errors import G3D_Error, Syntax_Error, Evaluation_Error
from .errors import Undefined_Function
from .errors import Undefined_Continuation

log = logging.getLogger (__name__)

arg_name = re.compile (r'[A-Z_][A-Z0-9_]*$', re.IGNORECASE)

class User_Function:
    """ A function defined with DEF FN.
        The function sees its arguments, the morph parameter and the
        resolution table as it was when the function was defined, so a
        function can never call itself.
    """

    def __init__ (self, name, args, expression, table):
        self.name       = name
        self.args       = args
        self.expression = expression
        self.table      = table
        names           = expression.names ()
        self.uses_morph = MORPH in names and MORPH not in args
        for n in names:
            f = table.get (n)
            if getattr (f, 'uses_morph', False):
                self.uses_morph = True
    # end def __init__

    def __repr__ (self):
        return 'User_Function (%s (%s) = %s)' \
            % (self.name, ','.join (self.args), self.body)
    # end def __repr__

    @property
    def body (self):
        return self.expression.text
    # end def body

    def invoke (self, values, morph = 0.0, budget = None):
        if len (values) != len (self.args):
            raise TypeError \
                ( '%s expects %d argument(s), got %d'
                % (self.name, len (self.args), len (values))
                )
        scope = dict (zip (self.args, values))
        env   = Environment (ChainMap (scope, self.table), morph, budget)
        return self.expression.evaluate (env)
    # end def invoke

# end class User_Function

class Function_Registry:
    """ User-defined functions of one parse, keyed by uppercase name.
        The built-in table is injected and never modified.
    """

    def __init__ (self, builtins):
        self.builtins  = builtins
        self.functions = {}
    # end def __init__

    def table (self):
        """ Snapshot of everything a new function may call """
        t = dict (self.builtins)
        t.update (self.functions)
        return MappingProxyType (t)
    # end def table

    def names (self, scope):
        """ Resolution table for a statement evaluated in scope """
        return ChainMap (scope, self.functions, self.builtins)
    # end def names

    def define (self, name, args, body):
        name = name.upper ()
        args = [a.strip ().upper () for a in args]
        for a in args:
            if not arg_name.match (a):
                raise Syntax_Error ('Invalid argument name "%s"' % a)
        if len (set (args)) != len (args):
            raise Syntax_Error ('Duplicate argument name in %s' % name)
        if not isinstance (body, Expression):
            body = Expression (body)
        fun = User_Function (name, args, body, self.table ())
        if name in self.functions:
            log.debug ('Redefining %s', name)
        self.functions [name] = fun
        log.debug ('Defined %r', fun)
        return fun
    # end def define

    def extend (self, name, extra):
        """ Continuation: append extra to the body of an existing
            function, the new body is (old body) + (extra).
        """
        name = name.upper ()
        if name not in self.functions:
            raise Undefined_Continuation \
                ('Function %s not defined before continuation' % name)
        old   = self.functions [name]
        extra = Expression (extra)
        text  = '(%s) + (%s)' % (old.body, extra.text)
        node  = Binary_Op ('+', old.expression.node, extra.node)
        return self.define (name, old.args, Expression (text, node))
    # end def extend

    def get (self, name):
        name = name.upper ()
        try:
            return self.functions [name]
        except KeyError:
            raise Undefined_Function ('Function %s is not defined' % name)
    # end def get

# end class Function_Registry

def surface (fun, max_calls = MAX_CALLS):
    """ Callable (x, y, n) for a two-argument function, the result is
        always a finite number. Each call gets its own evaluation budget,
        a point that fails to evaluate is 0.
    """
    if len (fun.args) != 2:
        raise Evaluation_Error \
            ( 'Function %s takes %d argument(s), PLOT3D needs 2'
            % (fun.name, len (fun.args))
            )
    def f (x, y, n = 0.0):
        try:
            return finite (fun.invoke ((x, y), n, Budget (max_calls)))
        except G3D_Error as err:
            log.debug ('%s (%s, %s): %s', fun.name, x, y, err.message)
            return 0.0
    return f
# end def surface
