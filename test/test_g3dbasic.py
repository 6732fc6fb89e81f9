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

import os
import json
import pytest
import inspect
import doctest
from textwrap import dedent
import g3dbasic.commands
import g3dbasic.expression
import g3dbasic.g3d
import g3dbasic.tokenizer
from g3dbasic.g3d import parse, main, Limits
from g3dbasic.expression import evaluate, MAX_DISPLAY
from g3dbasic.commands import Point, Color
from g3dbasic.errors import Unsafe_Expression, Syntax_Error

class _Test_Common:

    def run_test (self, morph = 0.0, limits = None):
        """ Determine caller, get docstring from caller and parse it as
            a script. The first script line is line 1.
        """
        caller = getattr (self, inspect.stack () [1][3])
        prg    = dedent (caller.__doc__).lstrip ('\n')
        self.result = parse (prg, morph = morph, limits = limits)
        return self.result
    # end def run_test

    def kinds (self):
        return [e.kind for e in self.result.errors]
    # end def kinds

    def lines (self):
        return [e.line for e in self.result.errors]
    # end def lines

    def points (self):
        return self.result.by_kind ('PLOT_POINT3D')
    # end def points

# end class _Test_Common

class Test_Expression:

    def test_arithmetic (self):
        assert evaluate ('1+2*3') == 7
        assert evaluate ('2^3') == 8
        assert evaluate ('2^3^2') == 512
        assert evaluate ('[1+2]*3') == 9
        assert evaluate ('7 MOD 4') == 3
    # end def test_arithmetic

    def test_non_finite (self):
        assert evaluate ('5/0') == 0
        assert evaluate ('10^400') == 0
        assert evaluate ('SQR(-1)') == 0
        assert evaluate ('1 + 5/0') == 0
    # end def test_non_finite

    def test_logic (self):
        assert evaluate ('3 = 3') == 1
        assert evaluate ('3 <> 3') == 0
        assert evaluate ('1 < 2 and 2 < 1') == 0
        assert evaluate ('1 < 2 OR 2 < 1') == 1
        assert evaluate ('NOT 0') == 1
    # end def test_logic

    def test_strings (self):
        assert evaluate ('"T=" + STR(0.5)') == 'T=0.5'
        assert evaluate ("'a' + 'b'") == 'ab'
        assert evaluate ('LEN("abc")') == 3
        assert evaluate ('"a" = 1') == 0
    # end def test_strings

    def test_variables_case_insensitive (self):
        assert evaluate ('x * X', dict (x = 3)) == 9
        assert evaluate ('sin(0) + Pi') == pytest.approx (3.141592653589793)
    # end def test_variables_case_insensitive

    @pytest.mark.parametrize \
        ( 'expr'
        , [ 'window'
          , 'WINDOW.location'
          , '1 + WiNdOw'
          , 'X__class__'
          , 'constructor'
          , 'DOCUMENT'
          , 'lambda'
          ]
        )
    def test_deny_list (self, expr):
        with pytest.raises (Unsafe_Expression):
            evaluate (expr)
    # end def test_deny_list

    @pytest.mark.parametrize ('expr', ['1 & 2', '{1}', 'a;b', '`x`', '1 | 2'])
    def test_allow_list (self, expr):
        with pytest.raises (Unsafe_Expression):
            evaluate (expr)
    # end def test_allow_list

    def test_syntax (self):
        with pytest.raises (Syntax_Error):
            evaluate ('1 +')
        with pytest.raises (Syntax_Error):
            evaluate ('(1')
    # end def test_syntax

# end class Test_Expression

class Test_Base (_Test_Common):

    def test_circle (self):
        """
            CIRCLE3D 1,2,3 WITH RADIUS 0.5 COLOR 255,0,0
        """
        self.run_test ()
        assert self.result.ok
        c = self.result.commands [0]
        assert c.kind   == 'CIRCLE3D'
        assert c.center == Point (1, 2, 3)
        assert c.radius == 0.5
        assert c.color  == Color (1.0, 0.0, 0.0)
        assert c.line   == 1
    # end def test_circle

    def test_circle_bad_color (self):
        """
            CIRCLE3D 1,2,3 WITH RADIUS 0.5 COLOR 256,0,0
            CIRCLE3D 1,2,3 WITH RADIUS 0.5
        """
        self.run_test ()
        assert not self.result.commands
        assert self.kinds () == ['SyntaxError', 'SyntaxError']
        assert 'out of range' in self.result.errors [0].message
        assert 'CIRCLE3D cx,cy,cz' in self.result.errors [1].message
    # end def test_circle_bad_color

    def test_continuation (self):
        """
            10 DEF FNZ(X,Y) = X+Y
            20 FNZ = FNZ + 1
            30 PLOT3D FNZ(X,Y)
        """
        self.run_test ()
        assert self.result.ok
        cmd = self.result.commands [0]
        assert cmd.kind == 'PLOT3D'
        assert cmd.name == 'FNZ'
        assert cmd.body == '(X+Y) + (1)'
        assert cmd.line == 3
        for x, y in ((0, 0), (1.5, -2), (3, 4.25), (-7, 0.125)):
            assert cmd (x, y) == (x + y) + 1
    # end def test_continuation

    def test_continuation_undefined (self):
        """
            FNQ = FNQ + 1
            FNA = FNB + 1
            FNA = 2
        """
        self.run_test ()
        assert self.kinds () == \
            ['UndefinedContinuation', 'SyntaxError', 'SyntaxError']
    # end def test_continuation_undefined

    def test_default_scene (self):
        """
            80 DEF FNZ(X,Y) = 1.5/((X-0.9)^2+(Y-0.3)^2+0.05)
            90 FNZ = FNZ + 2/((X-0.3)^2+(Y-0.9)^2+0.05)
            100 FNZ = FNZ + 1.2/((X+0.6)^2+(Y-0.7)^2+0.05)
            140 PLOT3D FNZ(X,Y)
            230 CIRCLE3D 0.9,0.3,5 WITH RADIUS 0.3 COLOR 255,255,0  ; Yellow
            270 DEF FNX(T) = 1.2*SIN(2*PI*T)  ; JT parameter 1
            280 DEF FNY(T) = 1.2*COS(2*PI*T)  ; JT parameter 2
            290 DEF FNZT(T) = FNZ(FNX(T),FNY(T)) + 0.5
            300 FOR T = 0 TO 1 STEP 0.01
            310   PLOT POINT3D FNX(T), FNY(T), FNZT(T) COLOR 255,0,255 SIZE 8
            320   LABEL AT FNX(T), FNY(T), FNZT(T)+2 TEXT "JT="+STR(T)
            330 NEXT T
            480 SET VIEW ANGLE 45, 30
            600 END
            610 BOGUS
        """
        self.run_test ()
        assert self.result.ok
        kinds = [c.kind for c in self.result.commands]
        assert kinds [:2] == ['PLOT3D', 'CIRCLE3D']
        assert kinds [2:4] == ['PLOT_POINT3D', 'TEXT']
        assert kinds [-1] == 'SET_VIEW'
        points = self.points ()
        texts  = self.result.by_kind ('TEXT')
        assert len (points) == 101
        assert len (texts)  == 101
        assert texts [0].text  == 'JT=0'
        assert texts [-1].text == 'JT=1'
        assert points [0].position.x == pytest.approx (0)
        assert points [0].position.y == pytest.approx (1.2)
        assert points [0].color == Color (1.0, 0.0, 1.0)
        assert texts [0].position.z == pytest.approx (points [0].position.z + 2)
        surface = self.result.commands [0]
        expect  = 1.5 / (0.81 + 0.09 + 0.05) + 2 / (0.09 + 0.81 + 0.05) \
                + 1.2 / (0.36 + 0.49 + 0.05)
        assert surface (0, 0) == pytest.approx (expect)
    # end def test_default_scene

    def test_descending_loop (self):
        """
            FOR T = 3 TO 1 STEP -1
              PLOT POINT3D T,0,0 COLOR 0,0,255 SIZE 1
            NEXT T
            FOR S = 1 TO 2 STEP 0
              PLOT POINT3D S,0,0 COLOR 0,0,255 SIZE 1
            NEXT S
        """
        self.run_test ()
        assert [p.position.x for p in self.points ()] == [3, 2, 1]
        assert self.kinds () == ['EvaluationError']
        assert self.lines () == [4]
    # end def test_descending_loop

    def test_end (self):
        """
            SET GRID ON
            END
            SET AXES ON
            NONSENSE
        """
        self.run_test ()
        assert self.result.ok
        assert [c.kind for c in self.result.commands] == ['SET_GRID']
    # end def test_end

    def test_evaluation_error (self):
        """
            PLOT POINT3D Q,0,0 COLOR 1,1,1 SIZE 1
            PLOT POINT3D Q+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1+1,0,0 COLOR 1,1,1 SIZE 1
            PLOT POINT3D "a" * 2,0,0 COLOR 1,1,1 SIZE 1
        """
        self.run_test ()
        assert not self.result.commands
        assert self.kinds () == ['EvaluationError'] * 3
        msg = self.result.errors [0].message
        assert msg == 'Failed to evaluate expression "Q": Q is not defined'
        msg = self.result.errors [1].message
        shown = msg.split ('"') [1]
        assert len (shown) == MAX_DISPLAY
        assert shown.endswith ('...')
        assert msg.endswith ('Q is not defined')
    # end def test_evaluation_error

    def test_function_case_and_redefinition (self):
        """
            def fna(x) = x*2
            DEF FNB(X) = FNA(X)+1
            DEF FNa(X) = X*10
            PLOT POINT3D FNB(1), fnA(1), 0 COLOR 255,255,255 SIZE 1
        """
        self.run_test ()
        assert self.result.ok
        assert self.points () [0].position == Point (3, 10, 0)
    # end def test_function_case_and_redefinition

    def test_idempotent (self):
        """
            DEF FNZ(X,Y) = SIN(X)*COS(Y)
            PLOT3D FNZ(X,Y)
            FOR I = 1 TO 5
              PLOT POINT3D I, I^2, FNZ(I,I) COLOR 10,20,30 SIZE 2
              TEXT AT I,0,0 "P"+STR(I)
            NEXT I
            FOO
            SET GRID OFF
        """
        first  = self.run_test ()
        second = self.run_test ()
        assert first == second
        assert first.as_dict () == second.as_dict ()
        assert json.dumps (first.as_dict ())
    # end def test_idempotent

    def test_line_numbers (self):
        """
            10 REM comment
            20 SET GRID ON ; show the grid

            30 BOGUS
               SET AXES ON
            ' another comment
            40 SET VIEW ANGLE 1,2,3
        """
        self.run_test ()
        assert [c.line for c in self.result.commands] == [2, 5]
        assert self.lines () == [4, 7]
        assert self.kinds () == ['SyntaxError', 'SyntaxError']
    # end def test_line_numbers

    def test_loop_overflow (self):
        """
            FOR T=0 TO 1 STEP 0.0001
              PLOT POINT3D T, 2*T, 3 COLOR 255,0,255 SIZE 8
            NEXT T
            SET AXES ON
        """
        self.run_test ()
        assert self.kinds () == ['LoopOverflow']
        assert self.lines () == [1]
        assert 'T=1' in self.result.errors [0].message
        assert len (self.points ()) == 10000
        assert self.result.commands [-1].kind == 'SET_AXES'
    # end def test_loop_overflow

    def test_loop_overflow_limits (self):
        """
            FOR I = 1 TO 10
              FOR J = 1 TO 10
                PLOT POINT3D I,J,0 COLOR 0,0,0 SIZE 1
              NEXT J
            NEXT I
        """
        self.run_test (limits = Limits (max_total_iterations = 20))
        assert len (self.points ()) == 19
        assert self.kinds () == ['LoopOverflow', 'LoopOverflow']
        assert self.lines () == [2, 1]
        self.run_test (limits = Limits (max_iterations = 5))
        assert len (self.points ()) == 25
        assert self.kinds () == ['LoopOverflow'] * 6
    # end def test_loop_overflow_limits

    def test_missing_next (self):
        """
            SET GRID ON
            FOR T = 0 TO 1 STEP 0.1
              PLOT POINT3D T,T,T COLOR 255,0,0 SIZE 2
            NEXT S
            SET AXES ON
        """
        self.run_test ()
        assert self.kinds () == ['MissingTerminator']
        assert self.lines () == [2]
        assert [c.kind for c in self.result.commands] == ['SET_GRID']
    # end def test_missing_next

    def test_morph (self):
        """
            DEF FNZ(X,Y) = X*N
            DEF FNW(X,Y) = X+Y
            DEF FNA(X,Y) = FNZ(X,Y) + 1
            DEF FNN(X,N) = X*N
            PLOT3D FNZ(X,Y)
            PLOT3D FNW(X,Y)
            PLOT3D FNA(X,Y)
            PLOT3D FNN(X,Y)
            PLOT POINT3D N, 0, 0 COLOR 0,0,0 SIZE 1
        """
        self.run_test (morph = 0.25)
        assert self.result.ok
        z, w, a, n = self.result.by_kind ('PLOT3D')
        assert [c.uses_morph for c in (z, w, a, n)] == \
            [True, False, True, False]
        assert z (2, 0, 0.5) == 1.0
        assert a (2, 0, 0.5) == 2.0
        assert n (2, 3, 0.5) == 6.0
        assert self.points () [0].position.x == 0.25
    # end def test_morph

    def test_nested_loops (self):
        """
            FOR I = 1 TO 2
              FOR J = 1 TO 3
                PLOT POINT3D I,J,0 COLOR 0,255,0 SIZE 1
              NEXT J
            NEXT I
            NEXT I
        """
        self.run_test ()
        pos = [(p.position.x, p.position.y) for p in self.points ()]
        assert pos == [(1, 1), (1, 2), (1, 3), (2, 1), (2, 2), (2, 3)]
        assert self.kinds () == ['SyntaxError']
        assert self.result.errors [0].message == 'NEXT without FOR'
    # end def test_nested_loops

    def test_plot3d_errors (self):
        """
            PLOT3D FNQ(X,Y)
            DEF FNX(T) = T
            PLOT3D FNX(X,Y)
            DEF FNU(X,Y) = X + UNKNOWN
            PLOT3D FNU(X,Y)
            PLOT3D FNX(A,B)
            PLOT POINT3D FNNONE(1),0,0 COLOR 1,1,1 SIZE 1
            PLOT POINT3D FNX(1,2),0,0 COLOR 1,1,1 SIZE 1
        """
        self.run_test ()
        assert not self.result.commands
        assert self.kinds () == \
            [ 'UndefinedFunction', 'EvaluationError', 'EvaluationError'
            , 'SyntaxError', 'UndefinedFunction', 'EvaluationError'
            ]
        assert self.lines () == [1, 3, 5, 6, 7, 8]
        msg = self.result.errors [-1].message
        assert msg.endswith ('FNX expects 1 argument(s), got 2')
    # end def test_plot3d_errors

    def test_plot3d_every_point (self):
        """
            DEF FNZ(X,Y) = X AND Q
            DEF FNT(X,Y) = (X > 0 AND "a") * 2
            DEF FNOK(X,Y) = X * Y
            PLOT3D FNZ(X,Y)
            PLOT3D FNT(X,Y)
            PLOT3D FNOK(X,Y)
        """
        self.run_test ()
        assert self.result.ok
        z, t, ok = self.result.commands
        for x, y in ((0, 0), (1, 1), (-2, 3), (0.5, 0.5)):
            assert z (x, y) == 0.0
            assert t (x, y) == 0.0
            assert ok (x, y) == x * y
    # end def test_plot3d_every_point

    def test_plot3d_func_hash (self):
        """
            DEF FNZ(X,Y) = X+Y
            PLOT3D FNZ(X,Y)
            PLOT3D FNZ(X,Y)
            FNZ = FNZ + 1
            PLOT3D FNZ(X,Y)
        """
        self.run_test ()
        a, b, c = self.result.commands
        assert len (a.func_hash) == 16
        assert a.func_hash == b.func_hash
        assert a.func_hash != c.func_hash
        assert a.as_dict () ['func_hash'] == a.func_hash
        first = self.result
        assert self.run_test ().commands [2].func_hash == c.func_hash
        assert first == self.result
    # end def test_plot3d_func_hash

    def test_set (self):
        """
            SET VIEW ANGLE 45, 30
            SET GRID ON
            SET AXES off
            SET RANGE X -1.5 TO 1.5
            SET GRID MAYBE
        """
        self.run_test ()
        view, grid, axes = self.result.commands
        assert (view.azimuth, view.elevation) == (45, 30)
        assert grid.visible is True
        assert axes.visible is False
        assert self.kinds () == ['SyntaxError', 'SyntaxError']
        assert 'SET GRID ON|OFF' in self.result.errors [1].message
    # end def test_set

    def test_size_limit (self):
        cap    = Limits.max_script_size
        script = 'SET GRID ON' + ' ' * (cap - len ('SET GRID ON'))
        result = parse (script)
        assert result.ok
        assert len (result.commands) == 1
        result = parse (script + ' ')
        assert result.commands == []
        assert [e.kind for e in result.errors] == ['SizeLimitExceeded']
    # end def test_size_limit

    def test_text (self):
        """
            TEXT AT -1.4, -1.3, 43 "Theorem B.5: Φ(λ) = Σ|R_α|/|λ-λ_α|²"
            TEXT AT 0,0,0 "semi;colon" ; comment
            FOR T = 0 TO 1 STEP 0.5
              LABEL AT T, 0, T*2 TEXT "T="+STR(T)
            NEXT T
            TEXT AT 1,2 "too few"
            TEXT AT 0,0,0 "x" + window
        """
        self.run_test ()
        texts = self.result.by_kind ('TEXT')
        assert texts [0].text == 'Theorem B.5: Φ(λ) = Σ|R_α|/|λ-λ_α|²'
        assert texts [0].position == Point (-1.4, -1.3, 43)
        assert texts [1].text == 'semi;colon'
        assert [t.text for t in texts [2:]] == ['T=0', 'T=0.5', 'T=1']
        assert texts [-1].position == Point (1, 0, 2)
        assert self.kinds () == ['SyntaxError', 'UnsafeExpression']
    # end def test_text

    def test_text_expression (self):
        """
            FOR T = 1 TO 2
              TEXT AT 0,0,0 STR(T)
              TEXT AT T, 0, T * 2 STR(T*10)
              LABEL AT 1,2,3,"four"
            NEXT T
            TEXT AT 0,0,0 *
        """
        self.run_test ()
        texts = self.result.by_kind ('TEXT')
        assert [t.text for t in texts] == \
            ['1', '10', 'four', '2', '20', 'four']
        assert texts [1].position == Point (1, 0, 2)
        assert texts [2].position == Point (1, 2, 3)
        assert self.kinds () == ['SyntaxError']
    # end def test_text_expression

    def chain (self, levels, base, statement):
        lines = ['DEF FN0(X) = %s' % base]
        for k in range (1, levels + 1):
            lines.append \
                ('DEF FN%d(X) = FN%d(X) + FN%d(X)' % (k, k - 1, k - 1))
        lines.append (statement % levels)
        lines.append ('SET GRID ON')
        return '\n'.join (lines)
    # end def chain

    def test_call_budget (self):
        script = self.chain \
            (30, 'X+1', 'PLOT POINT3D FN%d(1),0,0 COLOR 1,1,1 SIZE 1')
        self.result = parse (script)
        assert self.kinds () == ['EvaluationError']
        assert self.lines () == [32]
        assert 'budget' in self.result.errors [0].message
        assert [c.kind for c in self.result.commands] == ['SET_GRID']
        self.result = parse (script, limits = Limits (max_calls = 50))
        assert 'budget of 50 ' in self.result.errors [0].message
    # end def test_call_budget

    def test_call_budget_surface (self):
        script = self.chain (30, 'X', 'DEF FNS(X,Y) = FN%d(X) + Y') \
            + '\nPLOT3D FNS(X,Y)'
        self.result = parse (script, limits = Limits (max_calls = 100))
        assert self.kinds () == ['EvaluationError']
        assert self.lines () == [34]
        script = self.chain (3, 'X', 'DEF FNS(X,Y) = FN%d(X) + Y') \
            + '\nPLOT3D FNS(X,Y)'
        self.result = parse (script, limits = Limits (max_calls = 100))
        assert self.result.ok
        surface = self.result.by_kind ('PLOT3D') [0]
        assert surface (1, 2) == 10
    # end def test_call_budget_surface

    def test_string_growth (self):
        script = self.chain (20, '"ab"', 'TEXT AT 0,0,0 FN%d(1)')
        self.result = parse (script)
        assert self.kinds () == ['EvaluationError']
        msg = self.result.errors [0].message
        assert msg.endswith ('String longer than 10000 characters')
        assert [c.kind for c in self.result.commands] == ['SET_GRID']
    # end def test_string_growth

    def test_unknown_statement (self):
        """
            FOO 1,2
            G_VALUE = 3
            = 4
            SET AXES ON
        """
        self.run_test ()
        assert self.kinds () == ['SyntaxError'] * 3
        assert [c.kind for c in self.result.commands] == ['SET_AXES']
    # end def test_unknown_statement

    def test_unsafe_in_statements (self):
        """
            DEF FNZ(X,Y) = X + window
            PLOT POINT3D WINDOW,0,0 COLOR 1,1,1 SIZE 1
            CIRCLE3D 0,0,0 WITH RADIUS Document COLOR 1,1,1
            DEF FNA(X) = X
            FNA = FNA + constructor
        """
        self.run_test ()
        assert not self.result.commands
        assert self.kinds () == ['UnsafeExpression'] * 4
        assert self.lines () == [1, 2, 3, 5]
    # end def test_unsafe_in_statements

# end class Test_Base

class Test_Command_Line:

    def test_main (self, tmp_path, capsys):
        prg = tmp_path / 'scene.g3d'
        out = tmp_path / 'scene.json'
        prg.write_text ('10 SET GRID ON\n20 CIRCLE3D 0,0,1 WITH RADIUS 2 COLOR 0,255,0\n')
        assert main ([str (prg), '-o', str (out)]) == 0
        with open (out) as f:
            result = json.load (f)
        assert result ['errors'] == []
        assert result ['commands'][0] == dict (type = 'SET_GRID', line = 1, visible = True)
        circle = result ['commands'][1]
        assert circle ['center'] == dict (x = 0, y = 0, z = 1)
        assert circle ['color']  == dict (r = 0, g = 1, b = 0)
    # end def test_main

    def test_strict_and_size (self, tmp_path, capsys):
        prg = tmp_path / 'bad.g3d'
        prg.write_text ('BOGUS\n')
        assert main ([str (prg)]) == 0
        assert main ([str (prg), '--strict']) == 1
        err = capsys.readouterr ().err
        assert 'Error: Unknown statement BOGUS in line 1' in err
        assert main ([str (prg), '--max-size', '3']) == 2
    # end def test_strict_and_size

# end class Test_Command_Line

class Test_Doctest:

    flags = doctest.NORMALIZE_WHITESPACE

    def run_test (self, module, n):
        f, t  = doctest.testmod \
            (module, verbose = False, optionflags = self.flags)
        fn = os.path.basename (module.__file__)
        format_ok  = '%(fn)s passes all of %(t)s doc-tests'
        format_nok = '%(fn)s fails %(f)s of %(t)s doc-tests'
        if f:
            msg = format_nok % locals ()
        else:
            msg = format_ok % locals ()
        exp = '%s passes all of %d doc-tests' % (fn, n)
        assert exp == msg
    # end def run_test

    def test_commands (self):
        num_tests = 5
        self.run_test (g3dbasic.commands, num_tests)
    # end def test_commands

    def test_expression (self):
        num_tests = 26
        self.run_test (g3dbasic.expression, num_tests)
    # end def test_expression

    def test_g3d (self):
        num_tests = 6
        self.run_test (g3dbasic.g3d, num_tests)
    # end def test_g3d

    def test_tokenizer (self):
        num_tests = 3
        self.run_test (g3dbasic.tokenizer, num_tests)
    # end def test_tokenizer

# end class Test_Doctest
