"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid various circular-import
scenarios. Every phrase knows the line it came from, because
that is what a traceback reports.
"""

class Phrase:
	line: int
	def __repr__(self): return "<%s @%s>" % (type(self).__name__, self.line)

class Nom(Phrase):
	""" Representing the occurrence of a name anywhere. """
	def __init__(self, text:str, line:int):
		assert isinstance(text, str)
		assert isinstance(line, int), type(line)
		self.text, self.line = text, line
	def __repr__(self): return "<Name %r>" % self.text

class ValueExpression(Phrase): pass

class Statement(Phrase): pass

# Words the run-time treats specially.
SELF = "self"
SUPER = "super"
INIT = "__init__"
ITER = "__iter__"
NEXT = "__next__"
