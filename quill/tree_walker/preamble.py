"""
The names every program starts out with.

Iteration is duck-typed. Anything whose class answers __iter__ and __next__ takes part,
and __next__ signals the end by returning the sentinel. The classes here supply the
common cases, plus the `map` and `collect` that any subclass of Iter inherits.
"""
import math
import time
from typing import Callable
from ..ontology import ITER, NEXT
from ..environment import Environment
from ..diagnostics import QuillTypeError, QuillRuntimeError
from .types import VALUE
from .values import Class, NativeClass, NativeMethod, Primitive, Vec, SENTINEL
from .runtime import NATIVE_CLASSES, invoke, call_value, is_number

def show(value:VALUE) -> str:
	""" The display form of a value, as `print` writes it. """
	if value is None: return "nil"
	if value is True: return "true"
	if value is False: return "false"
	if isinstance(value, float) and value.is_integer(): return str(int(value))
	if isinstance(value, Vec): return "[%s]" % ", ".join(map(show, value.items))
	return str(value)

def _methods(*specs:tuple[str, int, Callable]) -> dict[str, NativeMethod]:
	return {name: NativeMethod(name, arity, fn) for name, arity, fn in specs}

def _receiver(receiver, typ:type, what:str):
	if not isinstance(receiver, typ):
		raise QuillTypeError("Expected %s receiver." % what)
	return receiver

def _is_integral(x:VALUE) -> bool:
	if isinstance(x, float): return math.isfinite(x) and x.is_integer()
	return is_number(x)

def _index(i:VALUE, size:int, what:str) -> int:
	if not _is_integral(i):
		raise QuillTypeError("Expected an integer index.")
	i = int(i)
	if not -size <= i < size:
		raise QuillRuntimeError("%s index out of bounds." % what)
	return i

def _span(span:"RangeValue", size:int, what:str) -> slice:
	""" Negative bounds count from the end, as indices do. """
	begin = span.begin + size if span.begin < 0 else span.begin
	end = span.end + size if span.end < 0 else span.end
	if not 0 <= begin <= end <= size:
		raise QuillRuntimeError("%s slice out of bounds." % what)
	return slice(begin, end)

def _text(value:VALUE) -> str:
	if not isinstance(value, str):
		raise QuillTypeError("Expected a string but found '%s'." % show(value))
	return value

###############################################################################

class _Exhaustible:
	""" Once an iterator has said it is done, it stays done. """
	done = False
	def __str__(self): return "<%s>" % type(self).__name__
	def step(self) -> VALUE:
		if self.done: return SENTINEL
		item = self.produce()
		if item is SENTINEL: self.done = True
		return item
	def produce(self) -> VALUE: raise NotImplementedError(type(self))

class MapIter(_Exhaustible):
	def __init__(self, source:VALUE, fn:VALUE):
		self._source, self._fn = source, fn
	def produce(self):
		item = invoke(self._source, NEXT, ())
		return item if item is SENTINEL else call_value(self._fn, (item,))

class VecIter(_Exhaustible):
	def __init__(self, vec:Vec):
		self._vec, self._at = vec, 0
	def produce(self):
		if self._at >= len(self._vec.items): return SENTINEL
		self._at += 1
		return self._vec.items[self._at - 1]

class RangeValue:
	def __init__(self, begin:int, end:int):
		self.begin, self.end = begin, end
	def __str__(self): return "Range(%d, %d)" % (self.begin, self.end)

class RangeIter(_Exhaustible):
	def __init__(self, span:RangeValue):
		self._at, self._end = span.begin, span.end
	def produce(self):
		if self._at >= self._end: return SENTINEL
		self._at += 1
		return self._at - 1

class StringIter(_Exhaustible):
	def __init__(self, text:str):
		self._chars = iter(text)
	def produce(self):
		return next(self._chars, SENTINEL)

###############################################################################

def _iter_self(receiver): return receiver

def _iter_map(receiver, fn): return MapIter(invoke(receiver, ITER, ()), fn)

def _iter_collect(receiver):
	iterator = invoke(receiver, ITER, ())
	items = []
	while True:
		item = invoke(iterator, NEXT, ())
		if item is SENTINEL: return Vec(items)
		items.append(item)

def _step(receiver): return _receiver(receiver, _Exhaustible, "an iterator").step()

def _vec_push(receiver, item):
	_receiver(receiver, Vec, "a Vec").items.append(item)
	return receiver

def _vec_pop(receiver):
	items = _receiver(receiver, Vec, "a Vec").items
	if not items: raise QuillRuntimeError("Cannot pop from an empty Vec.")
	return items.pop()

def _vec_get(receiver, i):
	items = _receiver(receiver, Vec, "a Vec").items
	if isinstance(i, RangeValue):
		return Vec(items[_span(i, len(items), "Vec")])
	return items[_index(i, len(items), "Vec")]

def _vec_set(receiver, i, value):
	items = _receiver(receiver, Vec, "a Vec").items
	items[_index(i, len(items), "Vec")] = value
	return value

def _vec_len(receiver): return len(_receiver(receiver, Vec, "a Vec").items)

def _vec_iter(receiver): return VecIter(_receiver(receiver, Vec, "a Vec"))

def _make_range(begin, end):
	for bound in begin, end:
		if not _is_integral(bound):
			raise QuillTypeError("Range bounds must be integers.")
	return RangeValue(int(begin), int(end))

def _range_iter(receiver): return RangeIter(_receiver(receiver, RangeValue, "a Range"))

# Strings index by character, so `len` and `count_chars` agree.

def _string_len(receiver): return len(_receiver(receiver, str, "a String"))

def _string_iter(receiver): return StringIter(_receiver(receiver, str, "a String"))

def _string_get(receiver, i):
	text = _receiver(receiver, str, "a String")
	if isinstance(i, RangeValue):
		return text[_span(i, len(text), "String")]
	return text[_index(i, len(text), "String")]

def _string_find(receiver, sub, start):
	text, sub = _receiver(receiver, str, "a String"), _text(sub)
	if not sub: raise QuillRuntimeError("Cannot find empty string.")
	at = text.find(sub, _index(start, len(text), "String"))
	return None if at < 0 else at

def _string_replace(receiver, old, new):
	text, old = _receiver(receiver, str, "a String"), _text(old)
	if not old: raise QuillRuntimeError("Cannot replace empty string.")
	return text.replace(old, _text(new))

def _string_split(receiver, delimiter):
	text, delimiter = _receiver(receiver, str, "a String"), _text(delimiter)
	if not delimiter: raise QuillRuntimeError("Cannot split using an empty string.")
	return Vec(text.split(delimiter))

def _string_starts_with(receiver, prefix):
	return _receiver(receiver, str, "a String").startswith(_text(prefix))

def _string_ends_with(receiver, suffix):
	return _receiver(receiver, str, "a String").endswith(_text(suffix))

def _string_as_num(receiver):
	text = _receiver(receiver, str, "a String")
	try: return float(text)
	except ValueError: raise QuillRuntimeError("Unable to parse number from '%s'." % text) from None

###############################################################################

def install(env:Environment, printer:Callable[[str], None]):
	"""
	Define the built-in names in a fresh global environment,
	and point host types at their classes.
	"""
	iter_class = Class("Iter", None, _methods(
		(ITER, 0, _iter_self),
		("map", 1, _iter_map),
		("collect", 0, _iter_collect),
	))
	stepping = _methods((NEXT, 0, _step))
	vec_class = NativeClass("Vec", iter_class, _methods(
		("push", 1, _vec_push),
		("pop", 0, _vec_pop),
		("len", 0, _vec_len),
		("__getitem__", 1, _vec_get),
		("__setitem__", 2, _vec_set),
		(ITER, 0, _vec_iter),
	), construct=lambda: Vec([]))
	range_class = NativeClass("Range", iter_class, _methods((ITER, 0, _range_iter)), construct=_make_range, arity=2)
	string_class = NativeClass("String", None, _methods(
		("len", 0, _string_len),
		("count_chars", 0, _string_len),
		("__getitem__", 1, _string_get),
		(ITER, 0, _string_iter),
		("find", 2, _string_find),
		("replace", 2, _string_replace),
		("split", 1, _string_split),
		("starts_with", 1, _string_starts_with),
		("ends_with", 1, _string_ends_with),
		("as_num", 0, _string_as_num),
	))

	NATIVE_CLASSES.clear()
	NATIVE_CLASSES.update({
		Vec: vec_class,
		RangeValue: range_class,
		str: string_class,
		MapIter: NativeClass("Map", iter_class, stepping),
		VecIter: NativeClass("VecIter", iter_class, stepping),
		RangeIter: NativeClass("RangeIter", iter_class, stepping),
		StringIter: NativeClass("StringIter", iter_class, stepping),
	})

	for cls in iter_class, vec_class, range_class, string_class:
		env.define(cls.name, cls)

	def _print(value):
		printer(show(value))

	for primitive in [
		Primitive("print", 1, _print),
		Primitive("clock", 0, time.time),
		Primitive("sentinel", 0, lambda: SENTINEL),
	]:
		env.define(primitive.name, primitive)
