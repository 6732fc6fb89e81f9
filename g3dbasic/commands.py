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

from collections import namedtuple
import hashlib

Point = namedtuple ('Point', 'x y z')
Color = namedtuple ('Color', 'r g b')

def color (r, g, b):
    """ Color from 0-255 channels
    >>> color (255, 0, 51)
    Color(r=1.0, g=0.0, b=0.2)
    """
    return Color (r / 255.0, g / 255.0, b / 255.0)
# end def color

def func_hash (name, args, body):
    """ Stable identity of a function definition
    >>> h = func_hash ('FNZ', ('X', 'Y'), 'X+Y')
    >>> h == func_hash ('FNZ', ('X', 'Y'), 'X+Y')
    True
    >>> h == func_hash ('FNZ', ('X', 'Y'), 'X-Y')
    False
    >>> len (h)
    16
    """
    text = '%s(%s)=%s' % (name, ','.join (args), body)
    return hashlib.sha1 (text.encode ('utf-8')).hexdigest () [:16]
# end def func_hash

class Command:
    """ One declarative scene instruction, fields are compared for
        equality and exported by as_dict.
    """

    kind   = None
    fields = ()

    def __eq__ (self, other):
        return type (self) is type (other) and self.key () == other.key ()
    # end def __eq__

    def __repr__ (self):
        f = ', '.join ('%s=%r' % (k, getattr (self, k)) for k in self.fields)
        return '%s (%s, line=%d)' % (self.__class__.__name__, f, self.line)
    # end def __repr__

    def as_dict (self):
        d = dict (type = self.kind, line = self.line)
        for k in self.fields:
            v = getattr (self, k)
            if isinstance (v, (Point, Color)):
                v = v._asdict ()
            d [k] = v
        return d
    # end def as_dict

    def key (self):
        return tuple (getattr (self, k) for k in self.fields) + (self.line,)
    # end def key

# end class Command

class Plot3D (Command):
    """ Surface z = f (x, y), f also receives the morph parameter.
        The func_hash identifies the function definition, renderers use
        it to cache sampled surfaces.
    """

    kind   = 'PLOT3D'
    fields = ('name', 'args', 'body', 'uses_morph', 'func_hash')

    def __init__ (self, function, func, line):
        self.function   = function
        self.func       = func
        self.name       = function.name
        self.args       = tuple (function.args)
        self.body       = function.body
        self.uses_morph = function.uses_morph
        self.func_hash  = func_hash (self.name, self.args, self.body)
        self.line       = line
    # end def __init__

    def __call__ (self, x, y, n = 0.0):
        return self.func (x, y, n)
    # end def __call__

# end class Plot3D

class Circle3D (Command):

    kind   = 'CIRCLE3D'
    fields = ('center', 'radius', 'color')

    def __init__ (self, center, radius, color, line):
        self.center = Point (*center)
        self.radius = radius
        self.color  = color
        self.line   = line
    # end def __init__

# end class Circle3D

class Text (Command):

    kind   = 'TEXT'
    fields = ('position', 'text')

    def __init__ (self, position, text, line):
        self.position = Point (*position)
        self.text     = text
        self.line     = line
    # end def __init__

# end class Text

class Plot_Point3D (Command):

    kind   = 'PLOT_POINT3D'
    fields = ('position', 'color', 'size')

    def __init__ (self, position, color, size, line):
        self.position = Point (*position)
        self.color    = color
        self.size     = size
        self.line     = line
    # end def __init__

# end class Plot_Point3D

class Set_View (Command):
    """ Camera azimuth (around the vertical axis) and elevation """

    kind   = 'SET_VIEW'
    fields = ('azimuth', 'elevation')

    def __init__ (self, azimuth, elevation, line):
        self.azimuth   = azimuth
        self.elevation = elevation
        self.line      = line
    # end def __init__

# end class Set_View

class Set_Grid (Command):

    kind   = 'SET_GRID'
    fields = ('visible',)

    def __init__ (self, visible, line):
        self.visible = visible
        self.line    = line
    # end def __init__

# end class Set_Grid

class Set_Axes (Command):

    kind   = 'SET_AXES'
    fields = ('visible',)

    def __init__ (self, visible, line):
        self.visible = visible
        self.line    = line
    # end def __init__

# end class Set_Axes

class Error_Record:

    def __init__ (self, line, message, kind = 'Error'):
        self.line    = line
        self.message = message
        self.kind    = kind
    # end def __init__

    def __eq__ (self, other):
        return \
            (   isinstance (other, Error_Record)
            and self.line    == other.line
            and self.message == other.message
            and self.kind    == other.kind
            )
    # end def __eq__

    def __str__ (self):
        return 'Error: %s in line %s' % (self.message, self.line)
    # end def __str__

    def __repr__ (self):
        return 'Error_Record (%r, %r, %r)' % (self.line, self.message, self.kind)
    # end def __repr__

    def as_dict (self):
        return dict (line = self.line, message = self.message, kind = self.kind)
    # end def as_dict

# end class Error_Record

class Parse_Result:
    """ Commands in emission order and the errors seen on the way.
        Whether errors block rendering is up to the caller.
    """

    def __init__ (self, commands = None, errors = None):
        self.commands = commands or []
        self.errors   = errors   or []
    # end def __init__

    def __eq__ (self, other):
        return \
            (   isinstance (other, Parse_Result)
            and self.commands == other.commands
            and self.errors   == other.errors
            )
    # end def __eq__

    def __repr__ (self):
        return 'Parse_Result (%r, %r)' % (self.commands, self.errors)
    # end def __repr__

    @property
    def ok (self):
        return not self.errors
    # end def ok

    def as_dict (self):
        return dict \
            ( commands = [c.as_dict () for c in self.commands]
            , errors   = [e.as_dict () for e in self.errors]
            )
    # end def as_dict

    def by_kind (self, kind):
        return [c for c in self.commands if c.kind == kind]
    # end def by_kind

# end class Parse_Result
