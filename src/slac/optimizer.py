"""Rewrites that optimize an expression tree.

- transform_ternary: three parameter `if_then(...)` calls become Ternary
  nodes, which only evaluate the selected branch. As an ordinary call,
  if_then evaluates all of its parameters eagerly.
- fold_constants: subtrees made only of literals are replaced by their
  evaluated result.

Both rewrites build new trees and leave the input untouched.
"""

import logging

from slac.ast import (
    Array,
    Binary,
    Call,
    Expression,
    Literal,
    Operator,
    Ternary,
    Unary,
)
from slac.environment import Environment
from slac.errors import EvaluationError
from slac.interpreter import Interpreter
from slac.value import Boolean

logger = logging.getLogger(__name__)

TERNARY_IF_THEN = "if_then"


def transform_ternary(expression: Expression) -> Expression:
    """Recursively rewrite three parameter if_then calls into Ternary nodes."""
    if isinstance(expression, Unary):
        return Unary(expression.operator, transform_ternary(expression.operand))

    if isinstance(expression, Binary):
        return Binary(
            expression.operator,
            transform_ternary(expression.left),
            transform_ternary(expression.right),
        )

    if isinstance(expression, Ternary):
        return Ternary(
            expression.operator,
            transform_ternary(expression.condition),
            transform_ternary(expression.then_branch),
            transform_ternary(expression.else_branch),
        )

    if isinstance(expression, Array):
        return Array(tuple(transform_ternary(e) for e in expression.elements))

    if isinstance(expression, Call):
        params = tuple(transform_ternary(p) for p in expression.params)
        if expression.name.lower() == TERNARY_IF_THEN and len(params) == 3:
            logger.debug("Rewriting %s call into a ternary", expression.name)
            return Ternary(Operator.TERNARY_CONDITION, *params)
        return Call(expression.name, params)

    # Literal, Variable
    return expression


class ConstantFolder:
    """Evaluates literal-only subtrees ahead of time.

    Calls are only folded for pure functions. A subtree whose evaluation
    fails is kept as it is, so the error is reported at evaluation time.
    """

    def __init__(self, environment: Environment):
        self.environment = environment
        self.interpreter = Interpreter(environment)
        self.changed = False

    def fold(self, expression: Expression) -> Expression:
        if isinstance(expression, Unary):
            operand = self.fold(expression.operand)
            return self._try_literal(Unary(expression.operator, operand), operand)

        if isinstance(expression, Binary):
            left = self.fold(expression.left)
            right = self.fold(expression.right)
            return self._try_literal(
                Binary(expression.operator, left, right), left, right
            )

        if isinstance(expression, Ternary):
            condition = self.fold(expression.condition)
            then_branch = self.fold(expression.then_branch)
            else_branch = self.fold(expression.else_branch)
            if isinstance(condition, Literal) and isinstance(condition.value, Boolean):
                self.changed = True
                return then_branch if condition.value.value else else_branch
            return Ternary(expression.operator, condition, then_branch, else_branch)

        if isinstance(expression, Array):
            elements = tuple(self.fold(e) for e in expression.elements)
            return self._try_literal(Array(elements), *elements)

        if isinstance(expression, Call):
            params = tuple(self.fold(p) for p in expression.params)
            folded = Call(expression.name, params)
            definition = self.environment.function(expression.name)
            if (
                definition is None
                or not definition.pure
                or not definition.arity.accepts(len(params))
            ):
                return folded
            return self._try_literal(folded, *params)

        return expression

    def _try_literal(self, expression: Expression, *operands: Expression) -> Expression:
        if not all(isinstance(operand, Literal) for operand in operands):
            return expression
        try:
            value = self.interpreter.evaluate(expression)
        except EvaluationError as e:
            logger.debug("Not folding constant expression: %s", e)
            return expression
        self.changed = True
        return Literal(value)


def fold_constants(environment: Environment, expression: Expression) -> Expression:
    """Replace literal-only subtrees by their evaluated Literal."""
    return ConstantFolder(environment).fold(expression)


def optimize(expression: Expression, environment: Environment | None = None) -> Expression:
    """Optimize an expression tree.

    Without an environment only the ternary rewrite is applied. With an
    environment, ternary rewriting and constant folding are repeated until
    no further change is possible. Never raises.
    """
    expression = transform_ternary(expression)
    if environment is None:
        return expression

    while True:
        folder = ConstantFolder(environment)
        expression = transform_ternary(folder.fold(expression))
        if not folder.changed:
            return expression
