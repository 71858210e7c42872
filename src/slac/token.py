"""Tokens and operator precedence for the SLAC expression language.

Token types:
- Punctuation: LPAREN, RPAREN, LBRACKET, RBRACKET, COMMA
- Arithmetic: PLUS, MINUS, STAR, SLASH, DIV, MOD
- Comparison: EQUAL, NOT_EQUAL, GREATER, GREATER_EQUAL, LESS, LESS_EQUAL
- Logical: AND, OR, XOR, NOT
- LITERAL (carries a Value) and IDENTIFIER (carries the name)
"""

from dataclasses import dataclass
from enum import Enum, IntEnum, auto

from slac.value import Value


class TokenType(Enum):
    """Types of tokens in the expression language."""

    # Punctuation
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    LBRACKET = auto()       # [
    RBRACKET = auto()       # ]
    COMMA = auto()          # ,

    # Arithmetic operators
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    DIV = auto()            # div
    MOD = auto()            # mod

    # Comparison operators
    EQUAL = auto()          # =
    NOT_EQUAL = auto()      # <>
    GREATER = auto()        # >
    GREATER_EQUAL = auto()  # >=
    LESS = auto()           # <
    LESS_EQUAL = auto()     # <=

    # Logical operators
    AND = auto()            # and
    OR = auto()             # or
    XOR = auto()            # xor
    NOT = auto()            # not

    # Values
    LITERAL = auto()
    IDENTIFIER = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the lexer.

    Attributes:
        type: The token type
        value: A Value for LITERAL tokens, the name for IDENTIFIER tokens
    """

    type: TokenType
    value: Value | str | None = None

    def __repr__(self) -> str:
        if self.value is None:
            return f"Token({self.type.name})"
        return f"Token({self.type.name}, {self.value!r})"

    def describe(self) -> str:
        """Short description used in error messages."""
        if self.type == TokenType.LITERAL:
            return f"literal {self.value}"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        return f"'{SYMBOLS[self.type]}'"


SYMBOLS: dict[TokenType, str] = {
    TokenType.LPAREN: "(",
    TokenType.RPAREN: ")",
    TokenType.LBRACKET: "[",
    TokenType.RBRACKET: "]",
    TokenType.COMMA: ",",
    TokenType.PLUS: "+",
    TokenType.MINUS: "-",
    TokenType.STAR: "*",
    TokenType.SLASH: "/",
    TokenType.DIV: "div",
    TokenType.MOD: "mod",
    TokenType.EQUAL: "=",
    TokenType.NOT_EQUAL: "<>",
    TokenType.GREATER: ">",
    TokenType.GREATER_EQUAL: ">=",
    TokenType.LESS: "<",
    TokenType.LESS_EQUAL: "<=",
    TokenType.AND: "and",
    TokenType.OR: "or",
    TokenType.XOR: "xor",
    TokenType.NOT: "not",
}


class Precedence(IntEnum):
    """Binding power of operators, lowest to highest."""

    NONE = 0
    OR = 1          # or xor
    AND = 2         # and
    EQUALITY = 3    # = <>
    COMPARISON = 4  # < > <= >=
    TERM = 5        # + -
    FACTOR = 6      # * / div mod
    UNARY = 7       # not -
    CALL = 8        # ()
    PRIMARY = 9

    def next(self) -> "Precedence":
        """The next higher level, used for the right operand of binaries."""
        if self == Precedence.PRIMARY:
            return Precedence.PRIMARY
        return Precedence(self + 1)


_PRECEDENCES: dict[TokenType, Precedence] = {
    TokenType.PLUS: Precedence.TERM,
    TokenType.MINUS: Precedence.TERM,
    TokenType.STAR: Precedence.FACTOR,
    TokenType.SLASH: Precedence.FACTOR,
    TokenType.DIV: Precedence.FACTOR,
    TokenType.MOD: Precedence.FACTOR,
    TokenType.EQUAL: Precedence.EQUALITY,
    TokenType.NOT_EQUAL: Precedence.EQUALITY,
    TokenType.GREATER: Precedence.COMPARISON,
    TokenType.GREATER_EQUAL: Precedence.COMPARISON,
    TokenType.LESS: Precedence.COMPARISON,
    TokenType.LESS_EQUAL: Precedence.COMPARISON,
    TokenType.AND: Precedence.AND,
    TokenType.OR: Precedence.OR,
    TokenType.XOR: Precedence.OR,
    TokenType.LPAREN: Precedence.CALL,
}


def precedence_of(token: Token) -> Precedence:
    """Return the infix binding power of a token (NONE if not infix)."""
    return _PRECEDENCES.get(token.type, Precedence.NONE)
