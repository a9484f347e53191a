"""Session control for arith. Runs lines through the lexer, parser and evaluator against one environment, either from
the command line (one line at a time) or from a file.
"""

from arith.lang.error import GenericException
from arith.pure.evaluator import Evaluator
from arith.pure.lexical import tokenize
from arith.pure.numerical import FixedWidth
from arith.pure.syntax import Parser


class Session:
    """Governs an arith session, with its own variable bindings."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, overflow=FixedWidth.ERROR):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = {}  # name: value of every variable assigned so far
        self.evaluator = Evaluator(overflow, warn=self._warn_overflow)

        if self.cmd_line:
            self.error_handler.fatal = False
        elif path == Session.SH_FILE:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    def execute(self, line, line_num=None):
        """Tokenizes, parses and evaluates line. Returns the value of an evaluated expression, or None after an
        assignment. Any error is raised as is and leaves self.env as it was.
        """
        self.error_handler.register_line(self.path, line, line_num)  # in case error is raised

        tokens = tokenize(line)
        self.error_handler.register_step("tokens", " ".join(repr(token) for token in tokens))

        stmt = Parser(tokens, line).parse()
        self.error_handler.register_step("tree", stmt)

        result = self.evaluator.execute(stmt, self.env, line)
        if result is not None:
            self.error_handler.register_step("value", result)

        self.error_handler.remove_line(self.path)  # error was not raised
        return result

    def run(self):
        """Executes every non-blank line of self.path in order, yielding each value as soon as its line has run."""
        try:
            with open(self.path, "r") as file:
                lines = file.read().splitlines()
        except OSError:
            raise GenericException("'{}' could not be opened", self.path, diagnosis=False)

        for line_num, line in enumerate(lines, start=1):
            if not line.strip():
                continue

            result = self.execute(line, line_num)
            if result is not None:
                yield result

    def _warn_overflow(self, symbol, left, right, result):
        """Reports a wrapped or clamped operation through the error handler."""
        verb = "wrapped" if self.evaluator.arithmetic.overflow == FixedWidth.WRAP else "saturated"
        self.error_handler.warn("'{}' overflowed, {} to {}", (f"{left} {symbol} {right}", verb, result),
                                diagnosis=False)
