import operator
from typing import Optional
from .. import syntax
from ..ontology import SELF, SUPER, ITER, NEXT
from ..environment import Environment
from ..diagnostics import QuillRuntimeError, QuillAttributeError, QuillTypeError
from .types import ENV, VALUE, ARGS
from .evaluator import STACK, Return, CONTROL_SIGNAL, evaluate, execute, execute_block, attach_evaluation_methods
from .values import Function, Method, Closure, Class, Instance, BoundMethod, Vec, SENTINEL

# Host types (Vec, str, and the built-in iterators) map to the classes
# that carry their methods. The preamble fills this in.
NATIVE_CLASSES : dict[type, Class] = {}

###############################################################################
#  The object model, as the evaluator and the preamble both use it.

def make_closure(fn:syntax.FunctionLiteral, env:ENV) -> Closure:
	return Closure(fn, env)

def make_class(name:str, superclass:Optional[VALUE], methods:dict[str, Method]) -> Class:
	if superclass is not None and not isinstance(superclass, Class):
		raise QuillTypeError("Superclass must be a class.")
	return Class(name, superclass, methods)

def make_instance(cls:Class) -> Instance:
	return cls.instantiate()

def class_of(value:VALUE) -> Optional[Class]:
	if isinstance(value, Instance): return value.cls
	return NATIVE_CLASSES.get(type(value))

def find_method(cls:Class, name:str):
	return cls.find_method(name)

def get_attribute(value:VALUE, name:str) -> VALUE:
	""" Fields shadow methods. A method comes back bound to the value it was read from. """
	if isinstance(value, Instance):
		try: return value.fields[name]
		except KeyError: pass
	cls = class_of(value)
	found = None if cls is None else cls.find_method(name)
	if found is None:
		raise QuillAttributeError(name)
	method, owner = found
	return BoundMethod(method, value, owner)

def set_attribute(value:VALUE, name:str, new_value:VALUE) -> VALUE:
	if not isinstance(value, Instance):
		raise QuillTypeError("Only instances have fields.")
	value.fields[name] = new_value
	return new_value

def super_method(env:ENV, name:str) -> BoundMethod:
	"""
	The superclass was bound into the method's environment when the method was invoked,
	so this finds the class above the one that lexically holds the `super` expression.
	"""
	superclass = env.fetch(SUPER)
	receiver = env.fetch(SELF)
	found = superclass.find_method(name)
	if found is None:
		raise QuillAttributeError(name)
	method, owner = found
	return BoundMethod(method, receiver, owner)

def call_value(callee:VALUE, args:ARGS) -> VALUE:
	if not isinstance(callee, Function):
		raise QuillTypeError("Can only call functions and classes.")
	return callee.apply(args)

def invoke(receiver:VALUE, name:str, args:ARGS) -> VALUE:
	return call_value(get_attribute(receiver, name), args)

###############################################################################
#  Primitive operations: borrowed from the host, guarded against the wrong kinds of operand.

PRIMITIVE_BINARY = {
	"*"  : operator.mul,
	"/"  : operator.truediv,
	"+"  : operator.add,
	"-"  : operator.sub,
	"<=" : operator.le,
	"<"  : operator.lt,
	">=" : operator.ge,
	">"  : operator.gt,
}
SHORTCUT = {
	"and":False,
	"or":True,
}

def is_number(x:VALUE) -> bool:
	return isinstance(x, (int, float)) and not isinstance(x, bool)

def is_truthy(x:VALUE) -> bool:
	return not (x is None or x is False)

def values_equal(a:VALUE, b:VALUE) -> bool:
	if is_number(a) and is_number(b): return a == b
	if type(a) is not type(b): return False
	if a is None or isinstance(a, (bool, str)): return a == b
	return a is b

###############################################################################

def _eval_literal(expr:syntax.Literal, env:ENV):
	return expr.value

def _eval_lookup(expr:syntax.Lookup, env:ENV):
	return env.fetch(expr.nom.text)

def _eval_assign(expr:syntax.Assign, env:ENV):
	return env.assign(expr.nom.text, evaluate(expr.expr, env))

def _eval_bin_exp(expr:syntax.BinExp, env:ENV):
	a = evaluate(expr.lhs, env)
	b = evaluate(expr.rhs, env)
	op = expr.op.text
	if op == "==": return values_equal(a, b)
	if op == "!=": return not values_equal(a, b)
	if op == "+" and isinstance(a, str) and isinstance(b, str): return a + b
	if not (is_number(a) and is_number(b)):
		if op == "+": raise QuillTypeError("Operands must be two numbers or two strings.")
		raise QuillTypeError("Operands must be numbers.")
	try:
		return PRIMITIVE_BINARY[op](a, b)
	except ZeroDivisionError:
		raise QuillRuntimeError("Division by zero.") from None

def _eval_shortcut_exp(expr:syntax.ShortCutExp, env:ENV):
	lhs = evaluate(expr.lhs, env)
	return lhs if is_truthy(lhs) == SHORTCUT[expr.op.text] else evaluate(expr.rhs, env)

def _eval_unary_exp(expr:syntax.UnaryExp, env:ENV):
	arg = evaluate(expr.arg, env)
	if expr.op.text == "!": return not is_truthy(arg)
	if not is_number(arg): raise QuillTypeError("Operand must be a number.")
	return -arg

def _eval_call(expr:syntax.Call, env:ENV):
	callee = evaluate(expr.fn_exp, env)
	args = [evaluate(a, env) for a in expr.args]
	STACK.advance(expr.line)
	return call_value(callee, args)

def _eval_field_ref(expr:syntax.FieldReference, env:ENV):
	return get_attribute(evaluate(expr.lhs, env), expr.field_name.text)

def _eval_assign_field(expr:syntax.AssignField, env:ENV):
	target = evaluate(expr.lhs, env)
	return set_attribute(target, expr.field_name.text, evaluate(expr.expr, env))

def _eval_self_reference(expr:syntax.SelfReference, env:ENV):
	return env.fetch(SELF)

def _eval_super_reference(expr:syntax.SuperReference, env:ENV):
	return super_method(env, expr.method_name.text)

def _eval_function_literal(expr:syntax.FunctionLiteral, env:ENV):
	return make_closure(expr, env)

def _eval_explicit_list(expr:syntax.ExplicitList, env:ENV):
	return Vec([evaluate(e, env) for e in expr.elts])

def _eval_subscript(expr:syntax.Subscript, env:ENV):
	target = evaluate(expr.lhs, env)
	return invoke(target, "__getitem__", (evaluate(expr.index, env),))

def _eval_assign_subscript(expr:syntax.AssignSubscript, env:ENV):
	target = evaluate(expr.lhs, env)
	index = evaluate(expr.index, env)
	value = evaluate(expr.expr, env)
	invoke(target, "__setitem__", (index, value))
	return value

###############################################################################

def _exec_expression_statement(stmt:syntax.ExpressionStatement, env:ENV) -> CONTROL_SIGNAL:
	evaluate(stmt.expr, env)

def _exec_var_decl(stmt:syntax.VarDecl, env:ENV) -> CONTROL_SIGNAL:
	value = None if stmt.expr is None else evaluate(stmt.expr, env)
	env.define(stmt.nom.text, value)

def _exec_fun_decl(stmt:syntax.FunDecl, env:ENV) -> CONTROL_SIGNAL:
	env.define(stmt.nom.text, make_closure(stmt.function, env))

def _exec_class_decl(stmt:syntax.ClassDecl, env:ENV) -> CONTROL_SIGNAL:
	# The superclass expression is evaluated exactly once, here.
	superclass = None if stmt.superclass is None else evaluate(stmt.superclass, env)
	methods = {m.nom.text: make_closure(m, env) for m in stmt.methods}
	env.define(stmt.nom.text, make_class(stmt.nom.text, superclass, methods))

def _exec_return(stmt:syntax.Return, env:ENV) -> CONTROL_SIGNAL:
	return Return(None if stmt.expr is None else evaluate(stmt.expr, env))

def _exec_block(stmt:syntax.Block, env:ENV) -> CONTROL_SIGNAL:
	return execute_block(stmt.statements, Environment(env))

def _exec_if_statement(stmt:syntax.IfStatement, env:ENV) -> CONTROL_SIGNAL:
	if is_truthy(evaluate(stmt.cond, env)):
		return execute(stmt.then_part, env)
	elif stmt.else_part is not None:
		return execute(stmt.else_part, env)

def _exec_while_loop(stmt:syntax.WhileLoop, env:ENV) -> CONTROL_SIGNAL:
	while is_truthy(evaluate(stmt.cond, env)):
		signal = execute(stmt.body, env)
		if signal is not None: return signal

def _exec_for_loop(stmt:syntax.ForLoop, env:ENV) -> CONTROL_SIGNAL:
	iterator = invoke(evaluate(stmt.iterable, env), ITER, ())
	while True:
		STACK.advance(stmt.line)
		item = invoke(iterator, NEXT, ())
		if item is SENTINEL: return
		inner = Environment(env)
		inner.define(stmt.nom.text, item)
		signal = execute(stmt.body, inner)
		if signal is not None: return signal

attach_evaluation_methods(globals())
