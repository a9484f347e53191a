import io
import os
import re
import tempfile
import unittest
from contextlib import redirect_stdout

from arith.lang.error import ArithmeticOverflow, ErrorHandler, GenericException, ParseError, UnboundVariable
from arith.lang.session import Session
from arith.pure.numerical import MAX, FixedWidth


def plain(text):
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


class SessionTestCase(unittest.TestCase):

    def setUp(self):
        self.sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True)

    def test_command_line_is_non_fatal(self):
        self.assertFalse(self.sess.error_handler.fatal)

    def test_execute(self):
        self.assertIsNone(self.sess.execute("x = 7", 1))
        self.assertEqual(8, self.sess.execute("x+1", 2))
        self.assertEqual(14, self.sess.execute("2 + 3 * 4", 3))
        self.assertEqual({"x": 7}, self.sess.env)

    def test_errors_keep_bindings(self):
        self.sess.execute("x = 5")

        should_fail = {"": ParseError, "4+": ParseError, "y + 1": UnboundVariable, "x = y": UnboundVariable}
        for case, error in should_fail.items():
            self.assertRaises(error, self.sess.execute, case)
            self.assertEqual({"x": 5}, self.sess.env, case)

    def test_traceback(self):
        self.assertRaises(UnboundVariable, self.sess.execute, "y", 4)
        self.assertEqual(("y", 4), self.sess.error_handler.traceback[Session.SH_FILE])

        self.sess.execute("1", 5)
        self.assertEqual((None, None), self.sess.error_handler.traceback[Session.SH_FILE])

    def test_verbose(self):
        self.sess.error_handler.verbose = True
        out = io.StringIO()
        with redirect_stdout(out):
            self.sess.execute("x = 1 + 2")
            self.sess.execute("x * 2")

        output = plain(out.getvalue())
        self.assertIn("tokens: Identifier(name='x') Equals() Number(value=1) Plus() Number(value=2) EndOfInput()",
                      output)
        self.assertIn("tree: x = (1 + 2)", output)
        self.assertIn("value: 6", output)

    def test_overflow_policies(self):
        self.assertRaises(ArithmeticOverflow, self.sess.execute, f"{MAX} + 1")

        for policy, expected in [(FixedWidth.WRAP, 0), (FixedWidth.SATURATE, MAX)]:
            sess = Session(ErrorHandler(), Session.SH_FILE, cmd_line=True, overflow=policy)
            out = io.StringIO()
            with redirect_stdout(out):
                self.assertEqual(expected, sess.execute(f"{MAX} + 1", 1))
            self.assertIn(f"warning: '{MAX} + 1' overflowed", plain(out.getvalue()))

    def test_unknown_policy(self):
        self.assertRaises(ValueError, Session, ErrorHandler(), Session.SH_FILE, True, "explode")


class FileSessionTestCase(unittest.TestCase):

    def setUp(self):
        self.dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.dir.cleanup()

    def write(self, text):
        path = os.path.join(self.dir.name, "script.ar")
        with open(path, "w") as file:
            file.write(text)
        return path

    def test_run(self):
        path = self.write("x = 2\n\nx * 3\ny = x + 1\n  \n(x + y) * 2\n")
        sess = Session(ErrorHandler(), path, cmd_line=False)

        self.assertEqual([6, 10], list(sess.run()))
        self.assertEqual({"x": 2, "y": 3}, sess.env)
        self.assertTrue(sess.error_handler.fatal)

    def test_run_error(self):
        path = self.write("x = 2\nx + z\n")
        sess = Session(ErrorHandler(), path, cmd_line=False)

        self.assertRaises(UnboundVariable, list, sess.run())
        self.assertEqual(("x + z", 2), sess.error_handler.traceback[path])

    def test_run_error_is_fatal(self):
        path = self.write("1 +\n")
        out = io.StringIO()
        with redirect_stdout(out):
            with self.assertRaises(SystemExit):
                with ErrorHandler() as error_handler:
                    list(Session(error_handler, path, cmd_line=False).run())

        output = plain(out.getvalue())
        self.assertIn(f"File '{path}', line 1:", output)
        self.assertIn("error: expected a number, variable or '(', found end of input", output)

    def test_missing_file(self):
        sess = Session(ErrorHandler(), os.path.join(self.dir.name, "missing.ar"), cmd_line=False)
        self.assertRaises(GenericException, list, sess.run())

    def test_reserved_filename(self):
        self.assertRaises(GenericException, Session, ErrorHandler(), Session.SH_FILE, False)


if __name__ == '__main__':
    unittest.main()
