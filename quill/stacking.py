"""
Activation records for the run-time.

A frame only records what a traceback needs: the display name of the callable
and the line where control currently sits within it. Scoping is the business
of environments, not of frames.
"""
import sys
from contextlib import contextmanager
from typing import Iterator
from .diagnostics import QuillRuntimeError

SCRIPT = "script"
FRAMES_MAX = 64
# Python frames to allow per call: room for deeply nested blocks and expressions.
HOST_FRAMES_PER_CALL = 50

class Frame:
	__slots__ = ("name", "line")
	def __init__(self, name:str, line:int):
		self.name, self.line = name, line
	def __repr__(self): return "<Frame %s @%d>" % (self.name, self.line)
	def describe(self):
		where = self.name if self.name == SCRIPT else self.name + "()"
		return "[line %d] in %s" % (self.line, where)

class CallStack:
	def __init__(self):
		self._frames : list[Frame] = []

	def __len__(self): return len(self._frames)

	def reset(self): self._frames.clear()

	def advance(self, line:int):
		if self._frames: self._frames[-1].line = line

	@contextmanager
	def activation(self, name:str, line:int) -> Iterator[Frame]:
		"""
		Push a frame for the duration of a call. The frame pops on every way out;
		an error passing through first records where this frame was.
		"""
		if len(self._frames) >= FRAMES_MAX:
			raise QuillRuntimeError("Stack overflow.")
		frame = Frame(name, line)
		self._frames.append(frame)
		try:
			yield frame
		except QuillRuntimeError as ex:
			ex.unwind(frame)
			raise
		except RecursionError:
			# The host ran out of stack before FRAMES_MAX did.
			ex = QuillRuntimeError("Stack overflow.")
			ex.unwind(frame)
			raise ex from None
		finally:
			self._frames.pop()

@contextmanager
def host_stack_room():
	""" Let Python's own stack hold FRAMES_MAX calls, and put the old limit back afterward. """
	limit = sys.getrecursionlimit()
	sys.setrecursionlimit(max(limit, FRAMES_MAX * HOST_FRAMES_PER_CALL))
	try: yield
	finally: sys.setrecursionlimit(limit)
