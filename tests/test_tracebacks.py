import sys
import unittest
from quill.diagnostics import QuillRuntimeError
from quill.stacking import FRAMES_MAX, HOST_FRAMES_PER_CALL, CallStack, host_stack_room
from quill.tree_walker.evaluator import STACK
from quill.tree_walker.executive import EXIT_OK, EXIT_COMPILE_ERROR, EXIT_RUNTIME_ERROR
from scaffold import (
	lit, ref, binary, call, get, me, send,
	fn, lam, fun, klass, var, ret, do, say, block, when,
	run,
)

class Tracebacks(unittest.TestCase):

	def test_arity_error_names_the_caller(self):
		status, printed, err = run(
			fun("two", ["a", "b"], say(lit("ran"), line=1), line=1),
			fun("outer", [], do(call(ref("two", line=3), lit(1), line=3)), line=2),
			do(call(ref("outer", line=5), line=5)),
			say(lit("after"), line=6),
		)
		self.assertEqual(EXIT_RUNTIME_ERROR, status)
		self.assertEqual([], printed)
		self.assertEqual("ArityError: Expected 2 arguments but found 1.\n[line 3] in outer()\n[line 5] in script\n", err)

	def test_innermost_frame_first(self):
		status, printed, err = run(
			fun("inner", [], ret(ref("missing", line=3), line=3), line=1),
			fun("outer", [], do(call(ref("inner", line=6), line=6)), line=5),
			say(lit("start"), line=7),
			do(call(ref("outer", line=8), line=8)),
			say(lit("never"), line=9),
		)
		self.assertEqual(EXIT_RUNTIME_ERROR, status)
		self.assertEqual(["start"], printed)
		self.assertEqual(
			"NameError: Undefined variable 'missing'.\n"
			"[line 3] in inner()\n"
			"[line 6] in outer()\n"
			"[line 8] in script\n",
			err,
		)

	def test_methods_and_lambdas_have_frames_too(self):
		status, printed, err = run(
			klass("P", None, fn("boom", [], ret(get(me(line=3), "nope", line=3), line=3), line=2), line=1),
			var("p", call(ref("P", line=4), line=4), line=4),
			var("later", lam([], do(send(ref("p", line=6), "boom", line=6)), line=5), line=5),
			do(call(ref("later", line=7), line=7)),
		)
		self.assertEqual(EXIT_RUNTIME_ERROR, status)
		self.assertEqual(
			"AttributeError: Undefined property 'nope'.\n"
			"[line 3] in boom()\n"
			"[line 6] in <lambda>()\n"
			"[line 7] in script\n",
			err,
		)

	def test_stack_overflow(self):
		status, printed, err = run(
			fun("f", [], do(call(ref("f", line=2), line=2)), line=1),
			do(call(ref("f", line=3), line=3)),
		)
		self.assertEqual(EXIT_RUNTIME_ERROR, status)
		lines = err.splitlines()
		self.assertEqual("RuntimeError: Stack overflow.", lines[0])
		self.assertEqual(["[line 2] in f()"] * (FRAMES_MAX - 1), lines[1:-1])
		self.assertEqual("[line 3] in script", lines[-1])

	def test_deep_but_bounded_recursion_is_fine(self):
		n = ref("n")
		status, printed, _ = run(
			fun("down", ["n"], when(binary(n, ">", lit(0)), ret(call(ref("down"), binary(n, "-", lit(1))))), ret(lit("bottom"))),
			say(call(ref("down"), lit(FRAMES_MAX - 2))),
		)
		self.assertEqual(EXIT_OK, status)
		self.assertEqual(["bottom"], printed)

	def test_frames_are_gone_afterward(self):
		run(fun("f", [], do(call(ref("f")))), do(call(ref("f"))))
		self.assertEqual(0, len(STACK))
		run(say(lit("fine")))
		self.assertEqual(0, len(STACK))

def _nested(stmt, depth):
	for _ in range(depth):
		stmt = block(stmt)
	return stmt

class HostStack(unittest.TestCase):
	""" Python's own stack must not give out before FRAMES_MAX does, nor leak out when it does. """

	def test_bulky_calls_reach_nearly_the_frame_limit(self):
		n = ref("n")
		recur = call(ref("f"), binary(n, "-", lit(1)))
		total = binary(lit(1), "+", binary(lit(0), "+", binary(lit(0), "+", recur)))
		status, printed, err = run(
			fun("f", ["n"], when(binary(n, ">", lit(0)), _nested(ret(total), 3)), ret(lit(0))),
			say(call(ref("f"), lit(60))),
		)
		self.assertEqual(EXIT_OK, status, err)
		self.assertEqual(["60"], printed)

	def test_exhausting_the_host_stack_is_a_stack_overflow(self):
		n = ref("n")
		recur = call(ref("f"), binary(n, "-", lit(1)))
		status, printed, err = run(
			fun("f", ["n"], when(binary(n, ">", lit(0)), _nested(ret(recur), 120)), ret(lit(0))),
			say(call(ref("f"), lit(60))),
			say(lit("never")),
		)
		self.assertEqual(EXIT_RUNTIME_ERROR, status)
		self.assertEqual([], printed)
		lines = err.splitlines()
		self.assertEqual("RuntimeError: Stack overflow.", lines[0])
		self.assertEqual("[line 1] in script", lines[-1])
		self.assertEqual(0, len(STACK))

	def test_recursion_error_inside_a_frame(self):
		stack = CallStack()
		with self.assertRaises(QuillRuntimeError) as cm:
			with stack.activation("deep", 4):
				raise RecursionError()
		self.assertEqual("RuntimeError: Stack overflow.\n[line 4] in deep()", cm.exception.as_text())
		self.assertEqual(0, len(stack))

	def test_limit_is_raised_only_while_running(self):
		before = sys.getrecursionlimit()
		with host_stack_room():
			self.assertGreaterEqual(sys.getrecursionlimit(), FRAMES_MAX * HOST_FRAMES_PER_CALL)
		self.assertEqual(before, sys.getrecursionlimit())

class ExitStatus(unittest.TestCase):

	def test_clean_run(self):
		status, printed, err = run(say(lit("hello")))
		self.assertEqual((EXIT_OK, ["hello"], ""), (status, printed, err))

	def test_compile_error_runs_nothing(self):
		status, printed, err = run(say(lit("too soon")), ret(lit(1)))
		self.assertEqual(EXIT_COMPILE_ERROR, status)
		self.assertEqual([], printed)
		self.assertIn("Can't return from top-level code.", err)

	def test_compile_error_quotes_the_source(self):
		status, printed, err = run(ret(lit(1)), source="return 1;")
		self.assertEqual(EXIT_COMPILE_ERROR, status)
		self.assertIn("return 1;", err)

	def test_too_many_issues_still_stops_cleanly(self):
		status, printed, err = run(*[ret(lit(i), line=i+1) for i in range(5)])
		self.assertEqual(EXIT_COMPILE_ERROR, status)
		self.assertIn("Found 3 problems", err)

if __name__ == '__main__':
	unittest.main()
