"""
Simplest possible environment concept.

This is the canonical list-structured search: each environment maps names
to cells and links outward to the environment that encloses it. The global
environment is the one whose parent is None.

Closures hold environments, not copies, so a write through one closure's
cell is seen at once by every other holder of the same environment.
"""
from typing import Any, Optional
from .diagnostics import QuillNameError

class Cell:
	""" A mutable storage slot. """
	__slots__ = ("value",)
	def __init__(self, value:Any): self.value = value
	def __repr__(self): return "<Cell %r>" % (self.value,)

class Environment:
	def __init__(self, parent:Optional["Environment"]=None):
		self._cells : dict[str, Cell] = {}
		self.parent = parent

	def __repr__(self):
		return "<Environment depth=%d %s>" % (self.depth(), sorted(self._cells))

	def depth(self) -> int:
		""" The global environment sits at depth zero. """
		n, env = 0, self.parent
		while env is not None:
			n, env = n+1, env.parent
		return n

	def holds(self, name:str) -> bool: return name in self._cells

	def define(self, name:str, value:Any):
		""" Create or replace a binding right here, regardless of what encloses. """
		self._cells[name] = Cell(value)
		return value

	def resolve(self, name:str) -> Cell:
		env = self
		while env is not None:
			try: return env._cells[name]
			except KeyError: env = env.parent
		raise QuillNameError(name)

	def fetch(self, name:str) -> Any:
		return self.resolve(name).value

	def assign(self, name:str, value:Any):
		""" Mutate the nearest existing cell in place; never creates a binding. """
		self.resolve(name).value = value
		return value
