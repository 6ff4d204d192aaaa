"""
The set of tree-nodes in simple form.
A front-end calls these constructors with subordinate nodes in a bottom-up tree transduction.
Names arrive as Nom objects, and every node can say what line it came from.
Class-level type annotations make peace with pycharm wherever later passes add fields.
"""
from pathlib import Path
from typing import Any, Optional, Sequence
from .ontology import Nom, ValueExpression, Statement

class Literal(ValueExpression):
	def __init__(self, value: Any, line: int):
		self.value, self.line = value, line
	def __str__(self): return "<Literal %r>" % self.value

class Lookup(ValueExpression):
	def __init__(self, nom: Nom): self.nom = nom
	def __str__(self): return self.nom.text
	@property
	def line(self): return self.nom.line

class Assign(ValueExpression):
	def __init__(self, nom: Nom, expr: ValueExpression):
		self.nom, self.expr = nom, expr
	def __str__(self): return "(%s = %s)" % (self.nom.text, self.expr)
	@property
	def line(self): return self.nom.line

class Binary(ValueExpression):
	def __init__(self, lhs: ValueExpression, op:Nom, rhs: ValueExpression):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def __str__(self): return "(%s %s %s)" % (self.lhs, self.op.text, self.rhs)
	@property
	def line(self): return self.op.line

class BinExp(Binary): pass
class ShortCutExp(Binary): pass

class UnaryExp(ValueExpression):
	def __init__(self, op:Nom, arg: ValueExpression):
		self.op, self.arg = op, arg
	@property
	def line(self): return self.op.line

class Call(ValueExpression):
	def __init__(self, fn_exp: ValueExpression, args: Sequence[ValueExpression], line:Optional[int]=None):
		self.fn_exp, self.args = fn_exp, tuple(args)
		self.line = fn_exp.line if line is None else line

	def __str__(self):
		return "%s(%s)" % (self.fn_exp, ', '.join(map(str, self.args)))

class FieldReference(ValueExpression):
	def __init__(self, lhs: ValueExpression, field_name: Nom):
		self.lhs, self.field_name = lhs, field_name
	def __str__(self): return "(%s.%s)" % (self.lhs, self.field_name.text)
	@property
	def line(self): return self.field_name.line

class AssignField(ValueExpression):
	def __init__(self, lhs: ValueExpression, field_name: Nom, expr: ValueExpression):
		self.lhs, self.field_name, self.expr = lhs, field_name, expr
	@property
	def line(self): return self.field_name.line

class SelfReference(ValueExpression):
	def __init__(self, keyword: Nom): self.keyword = keyword
	def __str__(self): return "self"
	@property
	def line(self): return self.keyword.line

class SuperReference(ValueExpression):
	def __init__(self, keyword: Nom, method_name: Nom):
		self.keyword, self.method_name = keyword, method_name
	def __str__(self): return "super.%s" % self.method_name.text
	@property
	def line(self): return self.keyword.line

class FunctionLiteral(ValueExpression):
	"""
	Both named declarations and anonymous function expressions end up here.
	The same node also serves as a method in a class body.
	"""
	def __init__(self, nom: Optional[Nom], params: Sequence[Nom], body: Sequence[Statement], line:Optional[int]=None):
		assert all(isinstance(p, Nom) for p in params), params
		self.nom, self.params, self.body = nom, tuple(params), tuple(body)
		if line is None:
			assert nom is not None, "An anonymous function needs an explicit line."
			line = nom.line
		self.line = line

	def name(self) -> str: return "<lambda>" if self.nom is None else self.nom.text
	def arity(self) -> int: return len(self.params)
	def __str__(self): return "fn %s(%s)" % (self.name(), ', '.join(p.text for p in self.params))

class ExplicitList(ValueExpression):
	def __init__(self, elts: Sequence[ValueExpression], line:int):
		for e in elts:
			assert isinstance(e, ValueExpression), e
		self.elts, self.line = tuple(elts), line

class Subscript(ValueExpression):
	def __init__(self, lhs: ValueExpression, index: ValueExpression):
		self.lhs, self.index = lhs, index
	@property
	def line(self): return self.lhs.line

class AssignSubscript(ValueExpression):
	def __init__(self, lhs: ValueExpression, index: ValueExpression, expr: ValueExpression):
		self.lhs, self.index, self.expr = lhs, index, expr
	@property
	def line(self): return self.lhs.line

###############################################################################

class ExpressionStatement(Statement):
	def __init__(self, expr: ValueExpression): self.expr = expr
	@property
	def line(self): return self.expr.line

class VarDecl(Statement):
	def __init__(self, nom: Nom, expr: Optional[ValueExpression] = None):
		self.nom, self.expr = nom, expr
	@property
	def line(self): return self.nom.line

class FunDecl(Statement):
	def __init__(self, function: FunctionLiteral):
		assert function.nom is not None
		self.function = function
	@property
	def nom(self): return self.function.nom
	@property
	def line(self): return self.function.line

class ClassDecl(Statement):
	def __init__(self, nom: Nom, superclass: Optional[Lookup], methods: Sequence[FunctionLiteral]):
		for m in methods: assert m.nom is not None, m
		self.nom, self.superclass, self.methods = nom, superclass, tuple(methods)
	@property
	def line(self): return self.nom.line

class Return(Statement):
	def __init__(self, keyword: Nom, expr: Optional[ValueExpression] = None):
		self.keyword, self.expr = keyword, expr
	@property
	def line(self): return self.keyword.line

class Block(Statement):
	def __init__(self, statements: Sequence[Statement], line: int):
		self.statements, self.line = tuple(statements), line

class IfStatement(Statement):
	def __init__(self, cond: ValueExpression, then_part: Statement, else_part: Optional[Statement] = None):
		self.cond, self.then_part, self.else_part = cond, then_part, else_part
	@property
	def line(self): return self.cond.line

class WhileLoop(Statement):
	def __init__(self, cond: ValueExpression, body: Statement):
		self.cond, self.body = cond, body
	@property
	def line(self): return self.cond.line

class ForLoop(Statement):
	def __init__(self, nom: Nom, iterable: ValueExpression, body: Statement):
		self.nom, self.iterable, self.body = nom, iterable, body
	@property
	def line(self): return self.nom.line

class Module:
	def __init__(self, statements: Sequence[Statement], path: Optional[Path] = None, source: Optional[str] = None):
		self.statements = tuple(statements)
		self.path = path
		self.source = source

	def source_line(self, line: int) -> Optional[str]:
		""" Lines count from one, the way people count them. """
		if self.source is None: return None
		lines = self.source.splitlines()
		if 0 < line <= len(lines): return lines[line-1]
