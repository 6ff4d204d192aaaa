"""
Two tiers of trouble live here.

Compile-time issues are collected into a Report before anything runs.
Run-time errors are exceptions: they abort the current statement and
gather a traceback on their way out through each active call frame.
"""
import sys
from typing import Any, Optional, Sequence
from boozetools.support.failureprone import illustration

from .ontology import Phrase
from . import syntax

class TooManyIssues(Exception):
	pass

###############################################################################

class QuillRuntimeError(Exception):
	""" Anything that goes wrong while a program runs. """
	kind = "RuntimeError"

	def __init__(self, message:str):
		super().__init__(message)
		self.message = message
		self.trace = []

	def unwind(self, frame):
		""" Called once by each frame the error passes through, innermost first. """
		self.trace.append(frame.describe())

	def headline(self): return "%s: %s" % (self.kind, self.message)

	def as_text(self):
		return '\n'.join([self.headline(), *self.trace])

class QuillNameError(QuillRuntimeError):
	kind = "NameError"
	def __init__(self, name:str):
		super().__init__("Undefined variable '%s'." % name)
		self.name = name

class QuillAttributeError(QuillRuntimeError):
	kind = "AttributeError"
	def __init__(self, name:str, pattern="Undefined property '%s'."):
		super().__init__(pattern % name)
		self.name = name

class ArityError(QuillRuntimeError):
	kind = "ArityError"
	def __init__(self, expected:int, got:int):
		super().__init__("Expected %d arguments but found %d." % (expected, got))
		self.expected, self.got = expected, got

class QuillTypeError(QuillRuntimeError):
	kind = "TypeError"

###############################################################################

class Report:
	""" Collects compile-time issues, and knows how to complain about them. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._module = None

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> Sequence["Pic"]: return tuple(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def attach(self, module:syntax.Module):
		""" Source text, if the module has any, makes for friendlier complaints. """
		self._module = module

	def error(self, guilty: Sequence[Phrase], msg: str):
		""" Actually make an entry of an issue """
		for g in guilty: assert isinstance(g, Phrase), g
		problem = [Annotation(g, "", self._module) for g in guilty]
		self.issue(Pic(msg, problem))

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	# Methods the static check calls:

	def return_outside_function(self, site:syntax.Return):
		self.error([site], "Can't return from top-level code.")

	def self_outside_class(self, site:syntax.SelfReference):
		self.error([site], "Can't use 'self' outside of a class.")

	def super_outside_class(self, site:syntax.SuperReference):
		self.error([site], "Can't use 'super' outside of a class.")

	def super_without_superclass(self, site:syntax.SuperReference):
		self.error([site], "Can't use 'super' in a class with no superclass.")

	def inherits_from_itself(self, decl:syntax.ClassDecl):
		self.error([decl.superclass], "A class can't inherit from itself.")

	def duplicate_parameter(self, first, again):
		intro = "Parameter '%s' appears more than once." % again.text
		self.issue(Pic(intro, [Annotation(first, "First", self._module), Annotation(again, "Again", self._module)]))

	def redefined_method(self, first, again):
		intro = "Method '%s' is defined more than once in the same class." % again.nom.text
		self.issue(Pic(intro, [Annotation(first, "Earliest definition", self._module), Annotation(again, "", self._module)]))

	# The executive calls this when a run-time error reaches the top.

	@staticmethod
	def runtime_error(ex:QuillRuntimeError):
		print(ex.as_text(), file=sys.stderr)
		sys.stderr.flush()

class Annotation:
	line: int
	caption: str
	def __init__(self, node:Phrase, caption:str="", module:Optional[syntax.Module]=None):
		self.line = node.line
		self.caption = caption
		self.path = getattr(module, "path", None)
		self._text = None if module is None else module.source_line(node.line)
	def illustrate(self):
		if self._text is None:
			return '% 6d | %s' % (self.line, self.caption)
		return illustration(self._text, 0, len(self._text), prefix='% 6d |' % self.line, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	@property
	def intro(self): return self._intro
	def as_text(self):
		lines = [self._intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues:Sequence[Any]):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		plural = '' if len(issues) == 1 else 's'
		print("Found %d problem%s before running anything." % (len(issues), plural), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
