"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but closures, classes and instances need more help.

Nothing here owns anything exclusively. Environments, closures and instances refer to
one another freely, and the cycles that result (say, a closure stored on an instance it
also closes over) are left to Python's collector.
"""
from abc import abstractmethod
from typing import Callable, Optional
from .. import syntax
from ..ontology import SELF, SUPER, INIT
from ..environment import Environment
from ..diagnostics import ArityError, QuillTypeError
from .types import QuillValue, VALUE, ARGS
from .evaluator import STACK, execute_block

class Sentinel(QuillValue):
	""" Marks the end of an iteration. There is only ever the one. """
	_the_one = None
	def __new__(cls):
		if cls._the_one is None:
			cls._the_one = super().__new__(cls)
		return cls._the_one
	def __repr__(self): return "<sentinel>"

SENTINEL = Sentinel()

def check_arity(expected:int, args:ARGS):
	if len(args) != expected:
		raise ArityError(expected, len(args))

###############################################################################

class Function(QuillValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def apply(self, args: ARGS) -> VALUE: pass

class Method(QuillValue):
	""" Whatever may sit in a method table, waiting to be bound to a receiver. """
	name: str
	@abstractmethod
	def invoke(self, receiver:VALUE, owner:"Class", args:ARGS) -> VALUE: pass

class Closure(Function, Method):
	"""
	The run-time manifestation of a function literal: a callable value tied to its natal environment.
	Two closures over the same literal are different closures if they captured different environments.
	"""
	def __init__(self, fn: syntax.FunctionLiteral, captures: Environment):
		self._fn = fn
		self._captures = captures

	def __repr__(self): return "<fn %s>" % self.name

	@property
	def name(self) -> str: return self._fn.name()
	@property
	def arity(self) -> int: return self._fn.arity()
	@property
	def captures(self) -> Environment: return self._captures

	def apply(self, args: ARGS) -> VALUE:
		check_arity(self.arity, args)
		return self._run(Environment(self._captures), args)

	def invoke(self, receiver:VALUE, owner:"Class", args:ARGS) -> VALUE:
		"""
		Methods see `self` as the receiver, and `super` as the class just above
		the one that declared them, whatever class the receiver happens to have.
		"""
		check_arity(self.arity, args)
		inner = Environment(self._captures)
		inner.define(SELF, receiver)
		if owner.superclass is not None:
			inner.define(SUPER, owner.superclass)
		return self._run(inner, args)

	def _run(self, inner:Environment, args:ARGS) -> VALUE:
		for param, arg in zip(self._fn.params, args):
			inner.define(param.text, arg)
		with STACK.activation(self.name, self._fn.line):
			signal = execute_block(self._fn.body, inner)
		return None if signal is None else signal.value

class Primitive(Function):
	""" A function supplied by the host. Parameters are counted, never named. """
	def __init__(self, name:str, arity:int, fn: Callable):
		self.name, self.arity = name, arity
		self._fn = fn
	def __repr__(self): return "<native fn %s>" % self.name
	def apply(self, args: ARGS) -> VALUE:
		check_arity(self.arity, args)
		return self._fn(*args)

class NativeMethod(Method):
	def __init__(self, name:str, arity:int, fn: Callable):
		self.name, self.arity = name, arity
		self._fn = fn
	def __repr__(self): return "<native method %s>" % self.name
	def invoke(self, receiver:VALUE, owner:"Class", args:ARGS) -> VALUE:
		check_arity(self.arity, args)
		return self._fn(receiver, *args)

###############################################################################

class Class(Function):
	"""
	The superclass is whatever class object was in hand when the declaration ran.
	It is never looked up again by name, so the chain cannot change or loop afterward.
	"""
	def __init__(self, name:str, superclass:Optional["Class"], methods:dict[str, Method]):
		assert superclass is None or isinstance(superclass, Class), superclass
		self.name = name
		self.superclass = superclass
		self._methods = dict(methods)

	def __repr__(self): return "<class %s>" % self.name

	def declares(self, name:str) -> bool: return name in self._methods

	def find_method(self, name:str) -> Optional[tuple[Method, "Class"]]:
		""" The one method-resolution algorithm: this class's table, then on up the chain. """
		cls = self
		while cls is not None:
			try: return cls._methods[name], cls
			except KeyError: cls = cls.superclass

	def instantiate(self) -> "Instance":
		return Instance(self)

	def apply(self, args: ARGS) -> VALUE:
		instance = self.instantiate()
		found = self.find_method(INIT)
		if found is None:
			check_arity(0, args)
		else:
			method, owner = found
			method.invoke(instance, owner, args)
		return instance

class NativeClass(Class):
	""" A built-in class whose instances are host data rather than field-bags. """
	def __init__(self, name:str, superclass:Optional[Class], methods:dict[str, Method], construct:Callable=None, arity:int=0):
		super().__init__(name, superclass, methods)
		self._construct = construct
		self._arity = arity

	def apply(self, args: ARGS) -> VALUE:
		if self._construct is None:
			raise QuillTypeError("Cannot construct %s directly." % self.name)
		check_arity(self._arity, args)
		return self._construct(*args)

class Instance(QuillValue):
	def __init__(self, cls: Class):
		self.cls = cls
		self.fields : dict[str, VALUE] = {}
	def __repr__(self): return "<%s instance>" % self.cls.name

class BoundMethod(Function):
	"""
	A method, the receiver it applies to, and the class where lookup for any `super`
	inside it must start from. Once made, it needs nothing from the expression that made it.
	"""
	def __init__(self, method: Method, receiver: VALUE, search_class: Class):
		self.method, self.receiver, self.search_class = method, receiver, search_class
	def __repr__(self): return "<bound method %s.%s>" % (self.search_class.name, self.method.name)
	def apply(self, args: ARGS) -> VALUE:
		return self.method.invoke(self.receiver, self.search_class, args)

###############################################################################

class Vec(QuillValue):
	""" The growable sequence behind list literals. """
	def __init__(self, items:list):
		self.items = items
	def __repr__(self): return "<Vec of %d>" % len(self.items)
