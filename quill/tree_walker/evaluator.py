"""
The generic machinery that everything needs,
without the specific methods corresponding to particular syntax.
"""

from typing import Optional, Sequence
from ..ontology import ValueExpression, Statement
from ..stacking import CallStack
from .types import VALUE, ENV

STACK = CallStack()

class Return:
	""" What a `return` statement sends up through the blocks and loops around it. """
	__slots__ = ("value",)
	def __init__(self, value: VALUE): self.value = value
	def __repr__(self): return "<Return %r>" % (self.value,)

CONTROL_SIGNAL = Optional[Return]

def evaluate(expr:ValueExpression, env:ENV) -> VALUE:
	assert isinstance(env, ENV), env
	try: fn = EVALUATE[type(expr)]
	except KeyError: raise NotImplementedError(type(expr), expr)
	return fn(expr, env)

def execute(stmt:Statement, env:ENV) -> CONTROL_SIGNAL:
	assert isinstance(env, ENV), env
	try: fn = EXECUTE[type(stmt)]
	except KeyError: raise NotImplementedError(type(stmt), stmt)
	STACK.advance(stmt.line)
	return fn(stmt, env)

def execute_block(statements:Sequence[Statement], env:ENV) -> CONTROL_SIGNAL:
	for stmt in statements:
		signal = execute(stmt, env)
		if signal is not None: return signal

EVALUATE = {}
EXECUTE = {}

def attach_evaluation_methods(python_scope):
	for _k, _v in list(python_scope.items()):
		if _k.startswith("_eval_"):
			_t = _v.__annotations__["expr"]
			assert isinstance(_t, type) and issubclass(_t, ValueExpression), (_k, _t)
			EVALUATE[_t] = _v
		elif _k.startswith("_exec_"):
			_t = _v.__annotations__["stmt"]
			assert isinstance(_t, type) and issubclass(_t, Statement), (_k, _t)
			EXECUTE[_t] = _v
