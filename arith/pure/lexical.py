"""Lexical analysis for arith: turns one line of text into a flat list of tokens.

Tokens are scanned left to right:

```
<number>     ::= <digit>+      ; decimal, unsigned, must fit in numerical.BITS bits
<identifier> ::= <letter>+     ; ASCII letters only
<fixed>      ::= "(" | ")" | "+" | "*" | "="
```

Spaces and newlines separate tokens and produce nothing. A run of digits or letters ends at the first character of
another kind, so `x2` is an Identifier followed by a Number. Every token list ends with EndOfInput, which lets the
parser look one token ahead without checking for the end of the list.
"""

import string
from dataclasses import dataclass, field

from arith.lang.error import NumberTooLarge, UnexpectedCharacter
from arith.pure import numerical

DIGITS = frozenset(string.digits)
LETTERS = frozenset(string.ascii_letters)
WHITESPACE = frozenset(" \n")


class Token:
    """Superclass for all tokens. start is the token's column in the line it was scanned from; it is used for error
    messages only and never takes part in equality.
    """

    @property
    def text(self):
        """Source text of this token."""
        raise NotImplementedError

    def __str__(self):
        return f"'{self.text}'"


@dataclass(frozen=True)
class Number(Token):
    value: int
    start: int = field(default=0, compare=False, repr=False)

    @property
    def text(self):
        return str(self.value)


@dataclass(frozen=True)
class Identifier(Token):
    name: str
    start: int = field(default=0, compare=False, repr=False)

    @property
    def text(self):
        return self.name


@dataclass(frozen=True)
class Fixed(Token):
    """Token spelled by a single fixed character. Subclasses set char."""
    start: int = field(default=0, compare=False, repr=False)
    char = ""

    @property
    def text(self):
        return self.char

    @classmethod
    def infer(cls, char, start=0):
        """Returns the fixed token spelled by char, or None if there isn't one."""
        for subclass in cls.__subclasses__():
            if subclass.char and subclass.char == char:
                return subclass(start)
        return None


@dataclass(frozen=True)
class LeftParen(Fixed):
    char = "("


@dataclass(frozen=True)
class RightParen(Fixed):
    char = ")"


@dataclass(frozen=True)
class Plus(Fixed):
    char = "+"


@dataclass(frozen=True)
class Star(Fixed):
    char = "*"


@dataclass(frozen=True)
class Equals(Fixed):
    char = "="


@dataclass(frozen=True)
class EndOfInput(Fixed):
    """Marks the end of every token list. Not spelled by any character."""

    def __str__(self):
        return "end of input"


def tokenize(line):
    """Returns the list of tokens in line, terminated by EndOfInput. Raises a LexError on any character outside the
    alphabet or on a number too large to represent.
    """
    tokens = []

    idx = 0
    while idx < len(line):
        char = line[idx]

        if char in DIGITS:
            start, value = idx, 0
            while idx < len(line) and line[idx] in DIGITS:
                value = value * 10 + int(line[idx])  # leading zeros are absorbed
                idx += 1
                if not numerical.FixedWidth.fits(value):
                    while idx < len(line) and line[idx] in DIGITS:  # report the whole literal
                        idx += 1
                    raise NumberTooLarge(line[start:idx], numerical.MAX, line, start)
            tokens.append(Number(value, start))
            continue

        if char in LETTERS:
            start = idx
            while idx < len(line) and line[idx] in LETTERS:
                idx += 1
            tokens.append(Identifier(line[start:idx], start))
            continue

        if char not in WHITESPACE:
            token = Fixed.infer(char, idx)
            if token is None:
                raise UnexpectedCharacter(char, line, idx)
            tokens.append(token)
        idx += 1

    tokens.append(EndOfInput(len(line)))
    return tokens
