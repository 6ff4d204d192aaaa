"""
The compile-time tier: things wrong with a program that can be seen without running it.

Nothing here resolves names to definitions; the run-time environment does that.
This pass only tracks where in the program it is (inside a function? a class? a subclass?)
and complains about `return`, `self` and `super` used where they cannot mean anything.
"""
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report

NOT_IN_FUNCTION = "script"
IN_FUNCTION = "function"
IN_METHOD = "method"

NOT_IN_CLASS = None
IN_CLASS = "class"
IN_SUBCLASS = "subclass"

class StaticCheck(Visitor):
	def __init__(self, report:Report):
		self._report = report
		self._function = NOT_IN_FUNCTION
		self._class = NOT_IN_CLASS

	def check_module(self, module:syntax.Module):
		for stmt in module.statements:
			self.visit(stmt)

	def _function_body(self, fn:syntax.FunctionLiteral, kind):
		seen = {}
		for p in fn.params:
			if p.text in seen: self._report.duplicate_parameter(seen[p.text], p)
			else: seen[p.text] = p
		enclosing = self._function
		self._function = kind
		for stmt in fn.body:
			self.visit(stmt)
		self._function = enclosing

	# Statements:

	def visit_ExpressionStatement(self, it:syntax.ExpressionStatement):
		self.visit(it.expr)

	def visit_VarDecl(self, it:syntax.VarDecl):
		if it.expr is not None: self.visit(it.expr)

	def visit_FunDecl(self, it:syntax.FunDecl):
		self._function_body(it.function, IN_FUNCTION)

	def visit_ClassDecl(self, it:syntax.ClassDecl):
		if it.superclass is not None:
			if it.superclass.nom.text == it.nom.text:
				self._report.inherits_from_itself(it)
			self.visit(it.superclass)
		enclosing = self._class
		self._class = IN_CLASS if it.superclass is None else IN_SUBCLASS
		seen = {}
		for method in it.methods:
			name = method.nom.text
			if name in seen: self._report.redefined_method(seen[name], method)
			else: seen[name] = method
			self._function_body(method, IN_METHOD)
		self._class = enclosing

	def visit_Return(self, it:syntax.Return):
		if self._function == NOT_IN_FUNCTION:
			self._report.return_outside_function(it)
		if it.expr is not None: self.visit(it.expr)

	def visit_Block(self, it:syntax.Block):
		for stmt in it.statements:
			self.visit(stmt)

	def visit_IfStatement(self, it:syntax.IfStatement):
		self.visit(it.cond)
		self.visit(it.then_part)
		if it.else_part is not None: self.visit(it.else_part)

	def visit_WhileLoop(self, it:syntax.WhileLoop):
		self.visit(it.cond)
		self.visit(it.body)

	def visit_ForLoop(self, it:syntax.ForLoop):
		self.visit(it.iterable)
		self.visit(it.body)

	# Expressions:

	def visit_Literal(self, it:syntax.Literal): pass
	def visit_Lookup(self, it:syntax.Lookup): pass

	def visit_Assign(self, it:syntax.Assign):
		self.visit(it.expr)

	def visit_BinExp(self, it:syntax.BinExp):
		self.visit(it.lhs)
		self.visit(it.rhs)

	def visit_ShortCutExp(self, it:syntax.ShortCutExp):
		self.visit(it.lhs)
		self.visit(it.rhs)

	def visit_UnaryExp(self, it:syntax.UnaryExp):
		self.visit(it.arg)

	def visit_Call(self, it:syntax.Call):
		self.visit(it.fn_exp)
		for a in it.args:
			self.visit(a)

	def visit_FieldReference(self, it:syntax.FieldReference):
		self.visit(it.lhs)

	def visit_AssignField(self, it:syntax.AssignField):
		self.visit(it.lhs)
		self.visit(it.expr)

	def visit_SelfReference(self, it:syntax.SelfReference):
		if self._class is NOT_IN_CLASS:
			self._report.self_outside_class(it)

	def visit_SuperReference(self, it:syntax.SuperReference):
		if self._class is NOT_IN_CLASS:
			self._report.super_outside_class(it)
		elif self._class != IN_SUBCLASS:
			self._report.super_without_superclass(it)

	def visit_FunctionLiteral(self, it:syntax.FunctionLiteral):
		self._function_body(it, IN_FUNCTION)

	def visit_ExplicitList(self, it:syntax.ExplicitList):
		for e in it.elts:
			self.visit(e)

	def visit_Subscript(self, it:syntax.Subscript):
		self.visit(it.lhs)
		self.visit(it.index)

	def visit_AssignSubscript(self, it:syntax.AssignSubscript):
		self.visit(it.lhs)
		self.visit(it.index)
		self.visit(it.expr)

def check_module(module:syntax.Module, report:Report):
	report.attach(module)
	StaticCheck(report).check_module(module)
