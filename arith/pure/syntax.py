"""Abstract syntax tree and recursive-descent parser for arith.

Formally, a line of arith is

```
<statement>  ::= <assignment> | <evaluate>   ; assignment is tried first, evaluate on any failure
<assignment> ::= <identifier> "=" <expression>
<evaluate>   ::= <expression>
<expression> ::= <factor> ("+" <expression>)?   ; right-associative: a+b+c = a+(b+c)
<factor>     ::= <atom> ("*" <factor>)?         ; right-associative: a*b*c = a*(b*c)
<atom>       ::= <number> | <identifier> | "(" <expression> ")"
```

followed by the end of the line. Multiplication binds tighter than addition. The statement rule is the only point that
backtracks: the parser saves its cursor, tries an assignment, and on failure rewinds and parses an expression. Every
other rule decides with a single token of lookahead, pushing the token back if it doesn't match.

Nodes own their children outright, so a tree can't share or cycle. Whether a variable is bound is not checked here.
"""

from contextlib import contextmanager
from dataclasses import dataclass

from arith.lang.error import (ExpectedAtomOrParen, ExpectedButFound, NestingTooDeep, NotAVariable, ParseError,
                              UnexpectedEndOfInput)
from arith.pure.lexical import EndOfInput, Equals, Identifier, LeftParen, Number, Plus, RightParen, Star, tokenize


class Operator:
    ADD = "+"
    MULTIPLY = "*"


class Expression:
    """Superclass for expression nodes."""


@dataclass(frozen=True)
class Literal(Expression):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class BinaryOp(Expression):
    operator: str
    left: Expression
    right: Expression

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


class Statement:
    """Superclass for statements, the result of parsing a whole line."""


@dataclass(frozen=True)
class Evaluate(Statement):
    """Computes and reports a value. The environment is left unchanged."""
    expression: Expression

    def __str__(self):
        return str(self.expression)


@dataclass(frozen=True)
class Assign(Statement):
    """Computes a value and binds it to name. Reports nothing."""
    name: str
    expression: Expression

    def __str__(self):
        return f"{self.name} = {self.expression}"


class Parser:
    """Parses a list of tokens ending in EndOfInput. The tokens are read through a single cursor (an index into the
    list), so a checkpoint is just the cursor's value.
    """
    MAX_DEPTH = 256

    def __init__(self, tokens, original_expr=""):
        """original_expr is the line tokens were scanned from, used for error messages."""
        self.tokens = list(tokens)
        self.original_expr = original_expr
        self.pos = 0
        self.depth = 0

    def next(self):
        """Consumes and returns the token under the cursor."""
        if self.pos >= len(self.tokens):
            raise UnexpectedEndOfInput(self.original_expr)
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def push_back(self):
        """Un-consumes the last token."""
        self.pos -= 1

    def expect(self, expected):
        """Consumes the next token, which must equal expected."""
        token = self.next()
        if token != expected:
            raise ExpectedButFound(expected, token, self.original_expr)

    def checkpoint(self):
        return self.pos

    def restore(self, checkpoint):
        self.pos = checkpoint

    @contextmanager
    def _nested(self):
        """Counts rule nesting, failing before the Python stack would."""
        if self.depth >= Parser.MAX_DEPTH:
            raise NestingTooDeep(Parser.MAX_DEPTH, self.tokens[min(self.pos, len(self.tokens) - 1)],
                                 self.original_expr)
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def parse(self):
        """Parses one statement that must span all of the tokens, including the trailing EndOfInput."""
        stmt = self.statement()
        self.expect(EndOfInput())
        return stmt

    def statement(self):
        checkpoint = self.checkpoint()
        try:
            return self.assignment()
        except NestingTooDeep:
            raise
        except ParseError:
            self.restore(checkpoint)
        return self.evaluate()

    def assignment(self):
        name = self.variable()
        self.expect(Equals())
        return Assign(name, self.expression())

    def evaluate(self):
        return Evaluate(self.expression())

    def variable(self):
        token = self.next()
        if not isinstance(token, Identifier):
            raise NotAVariable(token, self.original_expr)
        return token.name

    def expression(self):
        with self._nested():
            lhs = self.factor()
            if isinstance(self.next(), Plus):
                return BinaryOp(Operator.ADD, lhs, self.expression())
            self.push_back()
            return lhs

    def factor(self):
        with self._nested():
            lhs = self.atom()
            if isinstance(self.next(), Star):
                return BinaryOp(Operator.MULTIPLY, lhs, self.factor())
            self.push_back()
            return lhs

    def atom(self):
        token = self.next()
        if isinstance(token, Number):
            return Literal(token.value)
        elif isinstance(token, Identifier):
            return Variable(token.name)
        elif isinstance(token, LeftParen):
            expr = self.expression()
            self.expect(RightParen())
            return expr
        raise ExpectedAtomOrParen(token, self.original_expr)


def parse(source):
    """Returns the Statement in source, which is either a line of text or a list of tokens from tokenize. Raises a
    LexError or ParseError if source isn't a single well-formed statement.
    """
    if isinstance(source, str):
        return Parser(tokenize(source), source).parse()
    return Parser(source).parse()
