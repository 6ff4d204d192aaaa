import unittest
from quill.tree_walker.executive import EXIT_OK, EXIT_RUNTIME_ERROR
from scaffold import lit, ref, call, send, vec, item, say, run

def _span(begin, end): return call(ref("Range"), lit(begin), lit(end))

def _shown(expr):
	status, printed, err = run(say(expr))
	assert status == EXIT_OK, err
	return printed[0]

def _fails(expr):
	status, printed, err = run(say(expr))
	assert status == EXIT_RUNTIME_ERROR, printed
	return err.splitlines()[0]

class Indexing(unittest.TestCase):

	def test_characters(self):
		self.assertEqual("e", _shown(item(lit("hello"), lit(1))))
		self.assertEqual("o", _shown(item(lit("hello"), lit(-1))))
		self.assertEqual("RuntimeError: String index out of bounds.", _fails(item(lit("hello"), lit(5))))

	def test_string_slices(self):
		self.assertEqual("el", _shown(item(lit("hello"), _span(1, 3))))
		self.assertEqual("ell", _shown(item(lit("hello"), _span(1, -1))))
		self.assertEqual("", _shown(item(lit("hello"), _span(2, 2))))
		self.assertEqual("RuntimeError: String slice out of bounds.", _fails(item(lit("hello"), _span(3, 9))))

	def test_vec_slices_are_new_vecs(self):
		status, printed, _ = run(
			say(item(vec(lit(1), lit(2), lit(3), lit(4)), _span(1, -1))),
			say(item(vec(lit(1), lit(2)), _span(0, 0))),
		)
		self.assertEqual(EXIT_OK, status)
		self.assertEqual(["[2, 3]", "[]"], printed)
		self.assertEqual("RuntimeError: Vec slice out of bounds.", _fails(item(vec(lit(1), lit(2)), _span(2, 1))))

class Methods(unittest.TestCase):

	def test_find(self):
		self.assertEqual("1", _shown(send(lit("banana"), "find", lit("an"), lit(0))))
		self.assertEqual("3", _shown(send(lit("banana"), "find", lit("an"), lit(2))))
		self.assertEqual("4", _shown(send(lit("banana"), "find", lit("na"), lit(-2))))
		self.assertEqual("nil", _shown(send(lit("banana"), "find", lit("x"), lit(0))))
		self.assertEqual("RuntimeError: Cannot find empty string.", _fails(send(lit("banana"), "find", lit(""), lit(0))))
		self.assertEqual("RuntimeError: String index out of bounds.", _fails(send(lit("banana"), "find", lit("a"), lit(6))))

	def test_replace_and_split(self):
		self.assertEqual("a+b+c", _shown(send(lit("a-b-c"), "replace", lit("-"), lit("+"))))
		self.assertEqual("[a, b, , c]", _shown(send(lit("a,b,,c"), "split", lit(","))))
		self.assertEqual("RuntimeError: Cannot split using an empty string.", _fails(send(lit("abc"), "split", lit(""))))
		self.assertEqual("RuntimeError: Cannot replace empty string.", _fails(send(lit("abc"), "replace", lit(""), lit("x"))))

	def test_affixes(self):
		self.assertEqual("true", _shown(send(lit("banana"), "starts_with", lit("ba"))))
		self.assertEqual("false", _shown(send(lit("banana"), "ends_with", lit("ba"))))
		self.assertEqual("TypeError: Expected a string but found '1'.", _fails(send(lit("banana"), "ends_with", lit(1))))

	def test_numbers_and_counts(self):
		self.assertEqual("42", _shown(send(lit("42"), "as_num")))
		self.assertEqual("2.5", _shown(send(lit("2.5"), "as_num")))
		self.assertEqual("RuntimeError: Unable to parse number from 'x'.", _fails(send(lit("x"), "as_num")))
		self.assertEqual("5", _shown(send(lit("héllo"), "count_chars")))
		self.assertEqual("5", _shown(send(lit("héllo"), "len")))

if __name__ == '__main__':
	unittest.main()
