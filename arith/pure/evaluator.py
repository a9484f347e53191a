"""Evaluation of parsed arith statements against an environment, a mutable mapping of variable name to value.

The environment belongs to whoever passes it in: nothing here keeps global state, so independent environments can be
evaluated side by side. Assignment is the only operation that writes to it, and it only ever adds or overwrites.
"""

from arith.lang.error import RecursionDepthExceeded, UnboundVariable
from arith.pure.numerical import FixedWidth
from arith.pure.syntax import Assign, BinaryOp, Evaluate, Literal, Operator, Variable


class Evaluator:
    """Walks expression trees using one FixedWidth arithmetic policy."""
    MAX_DEPTH = 512

    def __init__(self, overflow=FixedWidth.ERROR, warn=None):
        self.arithmetic = FixedWidth(overflow, warn)

    def execute(self, stmt, env, original_expr=""):
        """Runs stmt. Returns its value for an Evaluate and None for an Assign, whose value is bound in env instead.
        original_expr is the line stmt was parsed from, used for error messages.
        """
        if isinstance(stmt, Evaluate):
            return self.evaluate(stmt.expression, env, original_expr)
        elif isinstance(stmt, Assign):
            value = self.evaluate(stmt.expression, env, original_expr)  # env untouched if this raises
            env[stmt.name] = value
            return None
        raise TypeError(f"expected a Statement, got '{type(stmt).__name__}'")

    def evaluate(self, expr, env, original_expr="", depth=0):
        """Returns the value of expr. env is only read."""
        if depth >= Evaluator.MAX_DEPTH:
            raise RecursionDepthExceeded(Evaluator.MAX_DEPTH, original_expr)

        if isinstance(expr, Literal):
            return expr.value

        elif isinstance(expr, Variable):
            try:
                return env[expr.name]
            except KeyError:
                raise UnboundVariable(expr.name, original_expr) from None

        elif isinstance(expr, BinaryOp):
            left = self.evaluate(expr.left, env, original_expr, depth + 1)
            right = self.evaluate(expr.right, env, original_expr, depth + 1)
            if expr.operator == Operator.ADD:
                return self.arithmetic.add(left, right, original_expr)
            elif expr.operator == Operator.MULTIPLY:
                return self.arithmetic.mul(left, right, original_expr)
            raise ValueError(f"unknown operator '{expr.operator}'")

        raise TypeError(f"expected an Expression, got '{type(expr).__name__}'")


def evaluate_statement(env, stmt):
    """Runs stmt against env with the default (error on overflow) arithmetic. See Evaluator.execute."""
    return Evaluator().execute(stmt, env)
