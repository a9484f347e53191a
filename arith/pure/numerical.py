"""Natural numbers as fixed-width unsigned integers. Python ints are unbounded, so the width is imposed here, together
with an explicit policy for results that do not fit:

- error: the operation fails with ArithmeticOverflow (default)
- wrap: the result is taken modulo 2 ** BITS
- saturate: the result is clamped to the largest representable value
"""

import operator

from arith.lang.error import ArithmeticOverflow

BITS = 32
MAX = (1 << BITS) - 1


class FixedWidth:
    """Unsigned arithmetic on BITS-wide integers under one overflow policy."""
    ERROR = "error"
    WRAP = "wrap"
    SATURATE = "saturate"
    POLICIES = (ERROR, WRAP, SATURATE)

    OPERATORS = {"+": operator.add, "*": operator.mul}

    def __init__(self, overflow=ERROR, warn=None):
        """warn, if given, is called with (operator, left, right, result) whenever a result is wrapped or clamped."""
        if overflow not in FixedWidth.POLICIES:
            raise ValueError(f"unknown overflow policy '{overflow}', expected one of {', '.join(FixedWidth.POLICIES)}")

        self.overflow = overflow
        self.warn = warn

    @staticmethod
    def fits(num):
        """Whether or not num is representable."""
        return 0 <= num <= MAX

    def apply(self, symbol, left, right, expr=""):
        """Returns left <symbol> right under this policy. expr is the line being evaluated, used for errors."""
        result = FixedWidth.OPERATORS[symbol](left, right)
        if FixedWidth.fits(result):
            return result

        if self.overflow == FixedWidth.ERROR:
            raise ArithmeticOverflow(symbol, left, right, MAX, expr)
        elif self.overflow == FixedWidth.WRAP:
            fixed = result & MAX
        else:
            fixed = MAX

        if self.warn is not None:
            self.warn(symbol, left, right, fixed)
        return fixed

    def add(self, left, right, expr=""):
        return self.apply("+", left, right, expr)

    def mul(self, left, right, expr=""):
        return self.apply("*", left, right, expr)

    def __repr__(self):
        return f"{type(self).__name__}(bits={BITS}, overflow='{self.overflow}')"
