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

from argparse import ArgumentParser
from collections import namedtuple
import json
import logging
import re
import sys
from .commands import Parse_Result, Error_Record, color
from .commands import Plot3D, Circle3D, Text, Plot_Point3D
from .commands import Set_View, Set_Grid, Set_Axes
from .errors import G3D_Error, Size_Limit_Exceeded, Syntax_Error
from .errors import Evaluation_Error, Loop_Overflow, Missing_Terminator
from .expression import BUILTINS, Expression, Environment, split_args
from .expression import Budget, MAX_CALLS
from .expression import fun_str
from .functions import Function_Registry, surface

log = logging.getLogger (__name__)

Line = namedtuple ('Line', 'number text')

class Limits:
    """ Bounds that keep one parse call short """

    max_script_size      = 100000
    max_iterations       = 10000
    max_total_iterations = 100000
    max_calls            = MAX_CALLS

    def __init__ (self, **kw):
        for k, v in kw.items ():
            if not hasattr (self, k):
                raise TypeError ('Unknown limit: %s' % k)
            setattr (self, k, v)
    # end def __init__

# end class Limits

def strip_comment (text):
    """ Remove everything after a ';' that is not inside quotes
    >>> strip_comment ('CIRCLE3D 0,0,0 WITH RADIUS 1 COLOR 1,2,3 ; loop')
    'CIRCLE3D 0,0,0 WITH RADIUS 1 COLOR 1,2,3 '
    >>> strip_comment ('TEXT AT 0,0,0 "a;b" ; c')
    'TEXT AT 0,0,0 "a;b" '
    """
    quote = None
    for i, ch in enumerate (text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in '"\'':
            quote = ch
        elif ch == ';':
            return text [:i]
    return text
# end def strip_comment

label_re   = re.compile (r'\d+(\s+|$)')
comment_re = re.compile (r"(REM|')", re.IGNORECASE)

def preprocess (script, limits = None):
    """ Normalized lines with their original (1-based) line numbers,
        blank lines and REM comments are dropped.
    >>> preprocess ('10 REM x\\n\\n20 SET GRID ON ; show\\n  SET AXES OFF')
    [Line(number=3, text='SET GRID ON'), Line(number=4, text='SET AXES OFF')]
    """
    limits = limits or Limits ()
    if len (script) > limits.max_script_size:
        raise Size_Limit_Exceeded \
            ( 'Script too large: %d characters, maximum is %d'
            % (len (script), limits.max_script_size)
            )
    lines = []
    for n, text in enumerate (script.split ('\n')):
        text = strip_comment (text).strip ()
        m    = label_re.match (text)
        if m:
            text = text [m.end ():].strip ()
        if not text or comment_re.match (text):
            continue
        lines.append (Line (n + 1, text))
    return lines
# end def preprocess

class Statement_Node:

    def __init__ (self, line):
        self.line = line
    # end def __init__

    def execute (self, interpreter, scope):
        cmd = interpreter.dispatch (self.line.text, scope)
        if cmd is not None:
            interpreter.commands.append (cmd)
    # end def execute

# end class Statement_Node

class Loop_Node:
    """ FOR ... NEXT block, body is a list of nodes """

    def __init__ (self, line, var, body):
        self.line = line
        self.var  = var
        self.body = body
    # end def __init__

    def execute (self, interpreter, scope):
        interpreter.run_loop (self, scope)
    # end def execute

# end class Loop_Node

class Unterminated_Loop:

    def __init__ (self, line, var):
        self.line = line
        self.var  = var
    # end def __init__

    def execute (self, interpreter, scope):
        raise Missing_Terminator ('Missing NEXT %s' % self.var)
    # end def execute

# end class Unterminated_Loop

for_var_re  = re.compile (r'FOR\s+([A-Z_][A-Z0-9_]*)', re.IGNORECASE)
next_var_re = re.compile (r'NEXT\s+([A-Z_][A-Z0-9_]*)\s*$', re.IGNORECASE)

def structure (lines):
    """ Build the statement tree: a FOR is closed by the first following
        NEXT with the same variable. Without one the rest of the block
        is dropped.
    """
    nodes = []
    idx   = 0
    while idx < len (lines):
        line = lines [idx]
        m    = for_var_re.match (line.text)
        if not m:
            nodes.append (Statement_Node (line))
            idx += 1
            continue
        var = m.group (1).upper ()
        for end in range (idx + 1, len (lines)):
            n = next_var_re.match (lines [end].text)
            if n and n.group (1).upper () == var:
                break
        else:
            nodes.append (Unterminated_Loop (line, var))
            break
        nodes.append (Loop_Node (line, var, structure (lines [idx + 1:end])))
        idx = end + 1
    return nodes
# end def structure

literal_re   = re.compile (r'"([^"]*)"$|\'([^\']*)\'$')
text_kw_re   = re.compile (r'TEXT\b\s*', re.IGNORECASE)

def parses (text):
    try:
        Expression.get_parser ().parse (text)
    except Syntax_Error:
        return False
    return True
# end def parses

def split_label (text):
    """ Split the z coordinate of TEXT AT from the label behind it.
        The label follows after blanks, an optional TEXT keyword or an
        opening quote. The first split where both parts are valid
        wins.
    >>> split_label ('43 "a b"')
    ('43', '"a b"')
    >>> split_label ('T*2 TEXT "T="+STR(T)')
    ('T*2', '"T="+STR(T)')
    >>> split_label ('T * 2 STR(T)')
    ('T * 2', 'STR(T)')
    """
    depth = 0
    quote = None
    for i, ch in enumerate (text):
        if quote:
            if ch == quote:
                quote = None
            continue
        if i and not depth and (ch.isspace () or ch in '"\''):
            left  = text [:i].strip ()
            right = text [i:].strip ()
            m     = text_kw_re.match (right)
            if m and right [m.end ():]:
                right = right [m.end ():]
            if  (   parses (left)
                and (literal_re.match (right) or parses (right))
                ):
                return left, right
        if ch in '"\'':
            quote = ch
        elif ch in '([':
            depth += 1
        elif ch in ')]':
            depth -= 1
    return None
# end def split_label

def _re (pattern):
    return re.compile (pattern, re.IGNORECASE)
# end def _re

class Interpreter:
    """ State of one parse call: registered functions, the commands and
        errors produced so far.
    """

    dispatch_table = \
        { 'CIRCLE3D' : 'cmd_circle3d'
        , 'DEF'      : 'cmd_def'
        , 'END'      : 'cmd_end'
        , 'FOR'      : 'cmd_for'
        , 'LABEL'    : 'cmd_text'
        , 'NEXT'     : 'cmd_next'
        , 'PLOT'     : 'cmd_plot'
        , 'PLOT3D'   : 'cmd_plot3d'
        , 'SET'      : 'cmd_set'
        , 'TEXT'     : 'cmd_text'
        }

    keyword_re  = _re (r'[A-Z][A-Z0-9_]*')
    def_re      = _re (r'DEF\s+(FN[A-Z0-9_]+)\s*\(([^)]*)\)\s*=\s*(.+)$')
    cont_re     = _re \
        (r'(FN[A-Z0-9_]+)\s*=\s*(FN[A-Z0-9_]+)\s*\+\s*(.+)$')
    plot3d_re   = _re (r'PLOT3D\s+([A-Z][A-Z0-9_]*)\s*\(\s*X\s*,\s*Y\s*\)\s*$')
    circle_re   = _re \
        ( r'CIRCLE3D\s+(.+?)\s+WITH\s+RADIUS\s+(.+?)'
          r'\s+COLOR\s+(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*$'
        )
    text_re     = _re (r'(?:TEXT|LABEL)\s+AT\s+(.+)$')
    point_re    = _re \
        ( r'PLOT\s+POINT3D\s+(.+?)'
          r'\s+COLOR\s+(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s+SIZE\s+(.+)$'
        )
    for_re      = _re \
        ( r'FOR\s+([A-Z_][A-Z0-9_]*)\s*=\s*(.+?)\s+TO\s+(.+?)'
          r'(?:\s+STEP\s+(.+))?$'
        )
    set_re      = _re (r'SET\s+([A-Z]+)\s*(.*)$')
    view_re     = _re (r'ANGLE\s+(.+)$')
    onoff_re    = _re (r'(ON|OFF)$')

    syntax = dict \
        ( circle3d = 'CIRCLE3D cx,cy,cz WITH RADIUS r COLOR r,g,b'
        , deffn    = 'DEF FNname(arg1,...) = expression'
        , cont     = 'FNname = FNname + expression'
        , plot3d   = 'PLOT3D FNname(X,Y)'
        , text     = 'TEXT AT x,y,z "text"'
        , point    = 'PLOT POINT3D x,y,z COLOR r,g,b SIZE s'
        , forloop  = 'FOR var = start TO end STEP step'
        , view     = 'SET VIEW ANGLE azimuth,elevation'
        , grid     = 'SET GRID ON|OFF'
        , axes     = 'SET AXES ON|OFF'
        )

    def __init__ (self, morph = 0.0, builtins = BUILTINS, limits = None):
        self.morph      = morph
        self.limits     = limits or Limits ()
        self.registry   = Function_Registry (builtins)
        self.commands   = []
        self.errors     = []
        self.ended      = False
        self.lineno     = 0
        self.iterations = 0
        self.cache      = {}
        self.budget     = Budget (self.limits.max_calls)
    # end def __init__

    def add_error (self, lineno, err):
        log.debug ('Error in line %s: %s', lineno, err.message)
        self.errors.append (Error_Record (lineno, err.message, err.kind))
    # end def add_error

    def compile (self, text):
        """ Expressions are parsed once per parse call """
        text = text.strip ()
        if text not in self.cache:
            self.cache [text] = Expression (text)
        return self.cache [text]
    # end def compile

    def environment (self, scope):
        return Environment \
            (self.registry.names (scope), self.morph, self.budget)
    # end def environment

    def execute (self, nodes, scope):
        for node in nodes:
            if self.ended:
                break
            self.lineno = node.line.number
            try:
                node.execute (self, scope)
            except G3D_Error as err:
                self.add_error (node.line.number, err)
    # end def execute

    def expected (self, name):
        return Syntax_Error \
            ('Invalid syntax, expected: %s' % self.syntax [name])
    # end def expected

    def dispatch (self, text, scope):
        m = self.keyword_re.match (text)
        if not m:
            raise Syntax_Error ('Unknown statement "%s"' % text [:20])
        keyword = m.group (0).upper ()
        if keyword.startswith ('FN') and '=' in text:
            method = 'cmd_continuation'
        elif keyword in self.dispatch_table:
            method = self.dispatch_table [keyword]
        else:
            raise Syntax_Error ('Unknown statement %s' % keyword)
        log.debug ('%s: %s', method, text)
        return getattr (self, method) (text, scope)
    # end def dispatch

    def numbers (self, text, count, scope, what):
        parts = split_args (text)
        if len (parts) != count:
            raise Syntax_Error \
                ('%s requires %d values, got %d' % (what, count, len (parts)))
        env = self.environment (scope)
        return [self.compile (p).number (env) for p in parts]
    # end def numbers

    def color (self, channels):
        values = [int (c) for c in channels]
        for v in values:
            if v > 255:
                raise Syntax_Error ('Color channel %d out of range 0-255' % v)
        return color (*values)
    # end def color

    def run_loop (self, node, scope):
        m = self.for_re.match (node.line.text)
        if not m:
            raise self.expected ('forloop')
        var  = m.group (1).upper ()
        env  = self.environment (scope)
        frm  = self.compile (m.group (2)).number (env)
        to   = self.compile (m.group (3)).number (env)
        step = 1.0
        if m.group (4):
            step = self.compile (m.group (4)).number (env)
        if step == 0:
            raise Evaluation_Error ('FOR %s: STEP must not be zero' % var)
        log.debug ('FOR %s = %s TO %s STEP %s', var, frm, to, step)
        k = 0
        while not self.ended:
            value = frm + k * step
            if step > 0 and value > to or step < 0 and value < to:
                break
            if  (  k >= self.limits.max_iterations
                or self.iterations >= self.limits.max_total_iterations
                ):
                raise Loop_Overflow \
                    ( 'Loop overflow: FOR %s stopped at %s=%s after %d '
                      'iterations (FOR %s = %s TO %s STEP %s)'
                    % ( var, var, fun_str (value), k
                      , var, fun_str (frm), fun_str (to), fun_str (step)
                      )
                    )
            inner = dict (scope)
            inner [var] = value
            self.execute (node.body, inner)
            k += 1
            self.iterations += 1
    # end def run_loop

    # COMMANDS

    def cmd_circle3d (self, text, scope):
        m = self.circle_re.match (text)
        if not m:
            raise self.expected ('circle3d')
        center = self.numbers (m.group (1), 3, scope, 'CIRCLE3D center')
        radius = self.compile (m.group (2)).number (self.environment (scope))
        return Circle3D \
            (center, radius, self.color (m.group (3, 4, 5)), self.lineno)
    # end def cmd_circle3d

    def cmd_continuation (self, text, scope):
        m = self.cont_re.match (text)
        if not m:
            raise self.expected ('cont')
        if m.group (1).upper () != m.group (2).upper ():
            raise Syntax_Error \
                ( 'Continuation must extend the same function: %s'
                % self.syntax ['cont']
                )
        self.registry.extend (m.group (1), m.group (3))
    # end def cmd_continuation

    def cmd_def (self, text, scope):
        m = self.def_re.match (text)
        if not m:
            raise self.expected ('deffn')
        args = [a for a in m.group (2).split (',') if a.strip ()]
        self.registry.define (m.group (1), args, m.group (3))
    # end def cmd_def

    def cmd_end (self, text, scope):
        """ Stop processing the rest of the script """
        self.ended = True
    # end def cmd_end

    def cmd_for (self, text, scope):
        # Only reached when the line has no loop variable
        raise self.expected ('forloop')
    # end def cmd_for

    def cmd_next (self, text, scope):
        raise Syntax_Error ('NEXT without FOR')
    # end def cmd_next

    def cmd_plot (self, text, scope):
        m = self.point_re.match (text)
        if not m:
            raise self.expected ('point')
        pos  = self.numbers (m.group (1), 3, scope, 'PLOT POINT3D')
        size = self.compile (m.group (5)).number (self.environment (scope))
        return Plot_Point3D \
            (pos, self.color (m.group (2, 3, 4)), size, self.lineno)
    # end def cmd_plot

    def cmd_plot3d (self, text, scope):
        m = self.plot3d_re.match (text)
        if not m:
            raise self.expected ('plot3d')
        fun  = self.registry.get (m.group (1))
        func = surface (fun, self.limits.max_calls)
        # Evaluate once so that undefined names are reported here
        fun.invoke ((0.0, 0.0), self.morph, self.budget)
        return Plot3D (fun, func, self.lineno)
    # end def cmd_plot3d

    def cmd_set (self, text, scope):
        m = self.set_re.match (text)
        if not m:
            raise Syntax_Error ('Invalid SET syntax')
        option = m.group (1).upper ()
        rest   = m.group (2).strip ()
        if option == 'VIEW':
            v = self.view_re.match (rest)
            if not v:
                raise self.expected ('view')
            az, el = self.numbers (v.group (1), 2, scope, 'SET VIEW ANGLE')
            return Set_View (az, el, self.lineno)
        if option in ('GRID', 'AXES'):
            v = self.onoff_re.match (rest)
            if not v:
                raise self.expected (option.lower ())
            visible = v.group (1).upper () == 'ON'
            if option == 'GRID':
                return Set_Grid (visible, self.lineno)
            return Set_Axes (visible, self.lineno)
        raise Syntax_Error ('Unknown SET option %s' % option)
    # end def cmd_set

    def cmd_text (self, text, scope):
        m = self.text_re.match (text)
        if not m:
            raise self.expected ('text')
        parts = split_args (m.group (1))
        if len (parts) == 3:
            split = split_label (parts [2])
            if not split:
                raise self.expected ('text')
            parts [2:] = split
        if len (parts) != 4:
            raise self.expected ('text')
        pos     = self.numbers (', '.join (parts [:3]), 3, scope, 'TEXT AT')
        label   = parts [3]
        literal = literal_re.match (label)
        if literal:
            label = literal.group (1)
            if label is None:
                label = literal.group (2)
        else:
            label = self.compile (label).string (self.environment (scope))
        return Text (pos, label, self.lineno)
    # end def cmd_text

# end class Interpreter

def parse (script, morph = 0.0, builtins = None, limits = None):
    """ Compile a script into scene commands.
        Only a script over the size limit aborts the parse, all other
        errors are collected per line.
    """
    if builtins is None:
        builtins = BUILTINS
    try:
        lines = preprocess (script, limits)
    except Size_Limit_Exceeded as err:
        log.warning (err.message)
        return Parse_Result ([], [Error_Record (0, err.message, err.kind)])
    interpreter = Interpreter (morph, builtins, limits)
    interpreter.execute (structure (lines), {})
    log.info \
        ( 'Parsed %d lines: %d commands, %d errors'
        , len (lines), len (interpreter.commands), len (interpreter.errors)
        )
    return Parse_Result (interpreter.commands, interpreter.errors)
# end def parse

def options (argv):
    cmd = ArgumentParser ()
    cmd.add_argument \
        ( 'program'
        , help = 'G3D-BASIC script to compile'
        )
    cmd.add_argument \
        ( '-n', '--morph'
        , help    = 'Value of the morph parameter N, default %(default)s'
        , type    = float
        , default = 0.0
        )
    cmd.add_argument \
        ( '-o', '--output-file'
        , help = 'Write JSON result to given file instead of stdout'
        )
    cmd.add_argument \
        ( '--max-size'
        , help    = 'Maximum script size in characters, default %(default)s'
        , type    = int
        , default = Limits.max_script_size
        )
    cmd.add_argument \
        ( '--max-iterations'
        , help    = 'Maximum iterations of one loop, default %(default)s'
        , type    = int
        , default = Limits.max_iterations
        )
    cmd.add_argument \
        ( '--max-calls'
        , help    = 'Maximum number of function calls evaluated in one'
                    ' parse, default %(default)s'
        , type    = int
        , default = Limits.max_calls
        )
    cmd.add_argument \
        ( '--strict'
        , help   = 'Exit with status 1 if any error was reported'
        , action = 'store_true'
        )
    cmd.add_argument \
        ( '-v', '--verbose'
        , help    = 'Increase logging, may be given twice'
        , action  = 'count'
        , default = 0
        )
    args = cmd.parse_args (argv)
    return args
# end def options

def main (argv = sys.argv [1:]):
    args  = options (argv)
    level = logging.WARNING
    if args.verbose > 1:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    logging.basicConfig \
        ( level  = level
        , format = '%(filename)10s: %(lineno)5d: %(message)s'
        )
    limits = Limits \
        ( max_script_size = args.max_size
        , max_iterations  = args.max_iterations
        , max_calls       = args.max_calls
        )
    with open (args.program, 'r') as f:
        script = f.read ()
    result = parse (script, morph = args.morph, limits = limits)
    for err in result.errors:
        print (err, file = sys.stderr)
    output = json.dumps (result.as_dict (), indent = 2)
    if args.output_file:
        with open (args.output_file, 'w') as f:
            print (output, file = f)
    else:
        print (output)
    if any (e.kind == Size_Limit_Exceeded.kind for e in result.errors):
        return 2
    if args.strict and result.errors:
        return 1
    return 0
# end def main

if __name__ == '__main__':
    sys.exit (main ())
