"""Abstract syntax tree for the SLAC expression language.

Every node is an immutable dataclass that exclusively owns its children:

- Literal: a constant Value
- Variable: a named reference resolved by the Environment
- Call: a named function call with ordered parameters
- Unary: not x, -x
- Binary: x op y
- Array: [a, b, c]
- Ternary: the lazy conditional produced by the optimizer
"""

from dataclasses import dataclass
from enum import Enum

from slac.token import TokenType
from slac.value import Value


class Operator(Enum):
    """Operators, valued by their surface syntax."""

    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    DIV = "div"
    MOD = "mod"
    EQUAL = "="
    NOT_EQUAL = "<>"
    GREATER = ">"
    GREATER_EQUAL = ">="
    LESS = "<"
    LESS_EQUAL = "<="
    AND = "and"
    OR = "or"
    XOR = "xor"
    NOT = "not"
    TERNARY_CONDITION = "?:"

    @classmethod
    def from_token(cls, token_type: TokenType) -> "Operator":
        """Map an operator token to its Operator."""
        return _TOKEN_OPERATORS[token_type]


_TOKEN_OPERATORS: dict[TokenType, Operator] = {
    TokenType.PLUS: Operator.PLUS,
    TokenType.MINUS: Operator.MINUS,
    TokenType.STAR: Operator.MULTIPLY,
    TokenType.SLASH: Operator.DIVIDE,
    TokenType.DIV: Operator.DIV,
    TokenType.MOD: Operator.MOD,
    TokenType.EQUAL: Operator.EQUAL,
    TokenType.NOT_EQUAL: Operator.NOT_EQUAL,
    TokenType.GREATER: Operator.GREATER,
    TokenType.GREATER_EQUAL: Operator.GREATER_EQUAL,
    TokenType.LESS: Operator.LESS,
    TokenType.LESS_EQUAL: Operator.LESS_EQUAL,
    TokenType.AND: Operator.AND,
    TokenType.OR: Operator.OR,
    TokenType.XOR: Operator.XOR,
    TokenType.NOT: Operator.NOT,
}


@dataclass(frozen=True)
class Expression:
    """Base class for AST nodes."""


@dataclass(frozen=True)
class Literal(Expression):
    """A literal value (number, string, boolean, array)."""

    value: Value


@dataclass(frozen=True)
class Variable(Expression):
    """A variable reference."""

    name: str


@dataclass(frozen=True)
class Call(Expression):
    """Function call (e.g., max(a, b))."""

    name: str
    params: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class Unary(Expression):
    """Unary operation (e.g., not x, -y)."""

    operator: Operator
    operand: Expression


@dataclass(frozen=True)
class Binary(Expression):
    """Binary operation (e.g., a + b, x = y)."""

    operator: Operator
    left: Expression
    right: Expression


@dataclass(frozen=True)
class Array(Expression):
    """Array expression (e.g., [1, 2, x])."""

    elements: tuple[Expression, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))


@dataclass(frozen=True)
class Ternary(Expression):
    """Conditional with lazy branches: only the selected branch is evaluated."""

    operator: Operator
    condition: Expression
    then_branch: Expression
    else_branch: Expression
