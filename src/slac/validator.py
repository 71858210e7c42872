"""Static validation of an expression tree against an environment.

Walks the tree depth-first, left to right, and reports the first missing
variable, missing function or parameter count mismatch. Validation is
advisory: the interpreter detects the same problems at runtime.
"""

from dataclasses import dataclass

from slac.ast import (
    Array,
    Binary,
    Call,
    Expression,
    Literal,
    Operator,
    Ternary,
    Unary,
    Variable,
)
from slac.environment import Environment
from slac.functions import Arity
from slac.optimizer import TERNARY_IF_THEN
from slac.value import Boolean


@dataclass(frozen=True)
class ValidationResult:
    """Base class for validation outcomes."""

    @property
    def is_valid(self) -> bool:
        return False

    @property
    def message(self) -> str:
        return ""


@dataclass(frozen=True)
class Valid(ValidationResult):
    @property
    def is_valid(self) -> bool:
        return True

    @property
    def message(self) -> str:
        return "valid"


@dataclass(frozen=True)
class MissingVariable(ValidationResult):
    name: str

    @property
    def message(self) -> str:
        return f"missing variable '{self.name}'"


@dataclass(frozen=True)
class MissingFunction(ValidationResult):
    name: str

    @property
    def message(self) -> str:
        return f"missing function '{self.name}'"


@dataclass(frozen=True)
class ParamCountMismatch(ValidationResult):
    name: str
    expected: Arity
    found: int

    @property
    def message(self) -> str:
        return (
            f"function '{self.name}' expects {self.expected} parameter(s), "
            f"found {self.found}"
        )


VALID = Valid()


def validate(environment: Environment, expression: Expression) -> ValidationResult:
    """Check variable and function references of an expression tree.

    A Ternary node is checked like the if_then call it was rewritten from,
    so validation gives the same answer before and after optimization.

    Returns:
        VALID, or the first MissingVariable, MissingFunction or
        ParamCountMismatch found
    """
    if isinstance(expression, Literal):
        return VALID

    if isinstance(expression, Variable):
        if environment.variable(expression.name) is None:
            return MissingVariable(expression.name)
        return VALID

    if isinstance(expression, Call):
        return _validate_call(environment, expression.name, expression.params)

    if isinstance(expression, Ternary):
        return _validate_call(
            environment,
            TERNARY_IF_THEN,
            (expression.condition, expression.then_branch, expression.else_branch),
        )

    if isinstance(expression, Unary):
        return validate(environment, expression.operand)

    if isinstance(expression, Binary):
        return _validate_all(environment, (expression.left, expression.right))

    if isinstance(expression, Array):
        return _validate_all(environment, expression.elements)

    raise TypeError(f"Unknown node type: {type(expression).__name__}")


def _validate_call(
    environment: Environment, name: str, params: tuple[Expression, ...]
) -> ValidationResult:
    definition = environment.function(name)
    if definition is None:
        return MissingFunction(name)
    if not definition.arity.accepts(len(params)):
        return ParamCountMismatch(name, definition.arity, len(params))
    return _validate_all(environment, params)


def _validate_all(
    environment: Environment, expressions: tuple[Expression, ...]
) -> ValidationResult:
    for expression in expressions:
        result = validate(environment, expression)
        if not result.is_valid:
            return result
    return VALID


_BOOLEAN_OPERATORS = frozenset(
    {
        Operator.GREATER,
        Operator.GREATER_EQUAL,
        Operator.LESS,
        Operator.LESS_EQUAL,
        Operator.EQUAL,
        Operator.NOT_EQUAL,
        Operator.AND,
        Operator.OR,
        Operator.XOR,
    }
)


def check_boolean_result(expression: Expression) -> bool:
    """Check whether the top level of an expression can produce a Boolean.

    Variables and calls are accepted since their type is only known at runtime.
    """
    if isinstance(expression, Unary):
        return expression.operator == Operator.NOT
    if isinstance(expression, Binary):
        return expression.operator in _BOOLEAN_OPERATORS
    if isinstance(expression, Ternary):
        return check_boolean_result(expression.then_branch) and check_boolean_result(
            expression.else_branch
        )
    if isinstance(expression, Literal):
        return isinstance(expression.value, Boolean)
    if isinstance(expression, Array):
        return False
    return True
