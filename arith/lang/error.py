"""Error handling for the arith language. Only GenericExceptions should be encountered during running: if another type
of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every error is terminal for the line that raised it. Nothing is retried, and bindings made by earlier lines survive.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be displayed with a caret diagnosis under the offending part
    of expr. Each '{}' in msg is filled with one of args, emphasised when displayed.
    """

    def __init__(self, msg, args=(), expr="", start=0, end=-1, diagnosis=True, internal=False):
        if not isinstance(args, (list, tuple)):
            args = (args,)

        super().__init__(msg.format(*args))
        self.msg = msg.format(*(colored(str(arg), attrs=["bold"]) for arg in args))  # color snippets

        self.expr = expr  # the offending line
        self.start = start
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.diagnosis = diagnosis
        self.internal = internal


def _span(token):
    """Column range covered by token. EndOfInput covers the column just past the line."""
    return token.start, token.start + max(len(token.text), 1)


class LexError(GenericException):
    """Raised while scanning characters into tokens."""


class UnexpectedCharacter(LexError):

    def __init__(self, char, expr="", start=0):
        self.char = char
        super().__init__("unexpected character '{}'", char, expr, start=start, end=start + 1)


class NumberTooLarge(LexError):

    def __init__(self, text, limit, expr="", start=0):
        self.text = text
        self.limit = limit
        msg = "number '{}' does not fit in an unsigned integer (max {})"
        super().__init__(msg, (text, limit), expr, start=start, end=start + len(text))


class ParseError(GenericException):
    """Raised while building a statement from tokens. found is the offending token, if there is one."""
    found = None


class UnexpectedEndOfInput(ParseError):

    def __init__(self, expr=""):
        super().__init__("unexpected end of input", expr=expr, start=len(expr), end=len(expr) + 1)


class ExpectedButFound(ParseError):

    def __init__(self, expected, found, expr=""):
        self.expected = expected
        self.found = found
        start, end = _span(found)
        super().__init__("expected {}, found {}", (expected, found), expr, start=start, end=end)


class ExpectedAtomOrParen(ParseError):

    def __init__(self, found, expr=""):
        self.found = found
        start, end = _span(found)
        msg = "expected a number, variable or '(', found {}"
        super().__init__(msg, found, expr, start=start, end=end)


class NotAVariable(ParseError):

    def __init__(self, found, expr=""):
        self.found = found
        start, end = _span(found)
        super().__init__("expected a variable, found {}", found, expr, start=start, end=end)


class NestingTooDeep(ParseError):

    def __init__(self, limit, found, expr=""):
        self.limit = limit
        self.found = found
        start, end = _span(found)
        super().__init__("expression nested deeper than {} levels", limit, expr, start=start, end=end)


class EvalError(GenericException):
    """Raised while evaluating a statement. The environment is never left half-updated."""


class UnboundVariable(EvalError):

    def __init__(self, name, expr=""):
        self.name = name
        super().__init__("variable not bound: '{}'", name, expr, diagnosis=False)


class ArithmeticOverflow(EvalError):

    def __init__(self, operator, left, right, limit, expr=""):
        self.operator = operator
        self.left = left
        self.right = right
        msg = "'{}' overflows an unsigned integer (max {})"
        super().__init__(msg, (f"{left} {operator} {right}", limit), expr, diagnosis=False)


class RecursionDepthExceeded(EvalError):

    def __init__(self, limit, expr=""):
        self.limit = limit
        super().__init__("expression nested deeper than {} levels", limit, expr, diagnosis=False)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print arith errors/warnings instead."""
    ERROR = "red"
    WARNING = "magenta"
    STEP = "cyan"

    def __init__(self, fatal=True, verbose=False):
        self.fatal = fatal
        self.verbose = verbose
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called before a line is executed."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after a line executed successfully."""
        self.traceback[path] = (None, None)

    def register_step(self, step, expr):
        """Prints an intermediate result of the pipeline (tokens, tree, value) if verbose."""
        if self.verbose:
            print(colored(f"{step}: ", ErrorHandler.STEP, attrs=["bold"]) + colored(str(expr), attrs=["dark"]))

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        error_msg = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                error_msg += colored(f"{file}:{line_num}: ", attrs=["bold"])
                break

        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Prints error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)

        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, exc_val), internal=True))
            do_exit = True

        return not do_exit
