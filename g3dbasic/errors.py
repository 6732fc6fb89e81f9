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

class G3D_Error (Exception):
    """ Base of all errors reported while compiling a script.
        The kind is what ends up in the error record, the message is the
        human-readable part.
    """

    kind = 'Error'

    def __init__ (self, message):
        super ().__init__ (message)
        self.message = message
    # end def __init__

# end class G3D_Error

class Size_Limit_Exceeded (G3D_Error):
    """ Script too large, the whole parse is rejected """
    kind = 'SizeLimitExceeded'
# end class Size_Limit_Exceeded

class Syntax_Error (G3D_Error):
    kind = 'SyntaxError'
# end class Syntax_Error

class Undefined_Function (G3D_Error):
    kind = 'UndefinedFunction'
# end class Undefined_Function

class Undefined_Continuation (G3D_Error):
    kind = 'UndefinedContinuation'
# end class Undefined_Continuation

class Unsafe_Expression (G3D_Error):
    kind = 'UnsafeExpression'
# end class Unsafe_Expression

class Evaluation_Error (G3D_Error):
    kind = 'EvaluationError'
# end class Evaluation_Error

class Loop_Overflow (G3D_Error):
    kind = 'LoopOverflow'
# end class Loop_Overflow

class Missing_Terminator (G3D_Error):
    kind = 'MissingTerminator'
# end class Missing_Terminator
