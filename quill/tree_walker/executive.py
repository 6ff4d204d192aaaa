"""
I decided to factor out the run-time from the executive.
This is the overall control for the run-time: check a module, set up
the global environment, run the statements, and account for how it went.
"""
from typing import Callable, Optional
from .. import syntax
from ..environment import Environment
from ..diagnostics import Report, TooManyIssues, QuillRuntimeError
from ..resolution import check_module
from ..stacking import SCRIPT, host_stack_room
from .evaluator import STACK, execute_block
from .preamble import install

EXIT_OK = 0
EXIT_COMPILE_ERROR = 65
EXIT_RUNTIME_ERROR = 70

def reset_runtime(printer:Optional[Callable[[str], None]] = None) -> Environment:
	""" A fresh global environment, with the preamble in place and no frames active. """
	STACK.reset()
	env = Environment()
	install(env, printer or print)
	return env

def interpret(module:syntax.Module, env:Environment):
	"""
	Run the statements under the script frame. Errors propagate;
	once one does, no later statement runs.
	"""
	first_line = module.statements[0].line if module.statements else 0
	with host_stack_room(), STACK.activation(SCRIPT, first_line):
		execute_block(module.statements, env)

def run_program(module:syntax.Module, *, printer=None, report:Optional[Report]=None) -> int:
	report = report or Report(verbose=False)
	try:
		check_module(module, report)
	except TooManyIssues:
		pass
	if report.sick():
		report.complain_to_console()
		return EXIT_COMPILE_ERROR
	env = reset_runtime(printer)
	report.info("Running %d top-level statement(s)." % len(module.statements))
	try:
		interpret(module, env)
	except QuillRuntimeError as ex:
		report.runtime_error(ex)
		return EXIT_RUNTIME_ERROR
	return EXIT_OK

