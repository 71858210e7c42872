"""Tree walking interpreter for the SLAC expression language.

Walks the AST and computes a single Value against an Environment holding
variables and native functions. The interpreter keeps no state between
calls; the same tree and environment can be evaluated repeatedly.
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
    Variable,
)
from slac.environment import Environment
from slac.errors import EvaluationError, RuntimeErrorKind
from slac.value import Array as ArrayValue
from slac.value import Boolean, Value

logger = logging.getLogger(__name__)


class _Undefined:
    """Marker for a variable the environment does not know."""

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

_ARITHMETIC = {
    Operator.PLUS: Value.add,
    Operator.MINUS: Value.subtract,
    Operator.MULTIPLY: Value.multiply,
    Operator.DIVIDE: Value.divide,
    Operator.DIV: Value.int_divide,
    Operator.MOD: Value.modulo,
    Operator.XOR: Value.xor,
}

_COMPARISON = {
    Operator.GREATER: Value.greater,
    Operator.GREATER_EQUAL: Value.greater_equal,
    Operator.LESS: Value.less,
    Operator.LESS_EQUAL: Value.less_equal,
}


class Interpreter:
    """Evaluates an expression AST against an environment.

    Usage:
        interpreter = Interpreter(env)
        result = interpreter.evaluate(ast)
    """

    def __init__(self, environment: Environment):
        self.environment = environment

    def evaluate(self, node: Expression) -> Value:
        """Evaluate an AST node and return the result."""
        try:
            return self._evaluate(node)
        except RecursionError:
            raise EvaluationError(
                RuntimeErrorKind.NESTING_TOO_DEEP, "Expression is nested too deeply"
            ) from None

    def _evaluate(self, node: Expression) -> Value:
        result = self._dispatch(node)

        if result is UNDEFINED:
            raise EvaluationError(
                RuntimeErrorKind.UNDEFINED_VARIABLE, f"Undefined variable: {node.name}"
            )

        return result

    def _dispatch(self, node: Expression) -> Value | _Undefined:
        method_name = f"_eval_{type(node).__name__.lower()}"
        method = getattr(self, method_name, None)

        if method is None:
            raise TypeError(f"Unknown node type: {type(node).__name__}")

        return method(node)

    # -------------------------------------------------------------------------
    # Node type evaluators
    # -------------------------------------------------------------------------

    def _eval_literal(self, node: Literal) -> Value:
        return node.value

    def _eval_variable(self, node: Variable) -> Value | _Undefined:
        value = self.environment.variable(node.name)
        if value is None:
            return UNDEFINED
        return value

    def _eval_unary(self, node: Unary) -> Value:
        operand = self._evaluate(node.operand)

        if node.operator == Operator.NOT:
            return operand.logical_not()
        if node.operator == Operator.MINUS:
            return operand.negate()

        raise EvaluationError(
            RuntimeErrorKind.TYPE_MISMATCH, f"Unknown unary operator: {node.operator.value}"
        )

    def _eval_binary(self, node: Binary) -> Value:
        op = node.operator

        # Short-circuit evaluation for logical operators
        if op == Operator.AND:
            left = self._boolean(node.left, op)
            if not left.value:
                return Boolean(False)
            return self._boolean(node.right, op)

        if op == Operator.OR:
            left = self._boolean(node.left, op)
            if left.value:
                return Boolean(True)
            return self._boolean(node.right, op)

        # Equality tolerates undefined variables: they equal any empty value
        if op in (Operator.EQUAL, Operator.NOT_EQUAL):
            left = self._dispatch(node.left)
            right = self._dispatch(node.right)
            equal = self._equals(left, right)
            return Boolean(equal if op == Operator.EQUAL else not equal)

        left = self._evaluate(node.left)
        right = self._evaluate(node.right)

        if op in _ARITHMETIC:
            return _ARITHMETIC[op](left, right)
        if op in _COMPARISON:
            return Boolean(_COMPARISON[op](left, right))

        raise EvaluationError(
            RuntimeErrorKind.TYPE_MISMATCH, f"Unknown binary operator: {op.value}"
        )

    def _eval_ternary(self, node: Ternary) -> Value:
        if node.operator != Operator.TERNARY_CONDITION:
            raise EvaluationError(
                RuntimeErrorKind.TYPE_MISMATCH,
                f"Unknown ternary operator: {node.operator.value}",
            )

        condition = self._boolean(node.condition, node.operator)
        if condition.value:
            return self._evaluate(node.then_branch)
        return self._evaluate(node.else_branch)

    def _eval_array(self, node: Array) -> ArrayValue:
        return ArrayValue(tuple(self._evaluate(element) for element in node.elements))

    def _eval_call(self, node: Call) -> Value:
        definition = self.environment.function(node.name)
        if definition is None:
            raise EvaluationError(
                RuntimeErrorKind.MISSING_FUNCTION, f"Unknown function: {node.name}"
            )

        count = len(node.params)
        if not definition.arity.accepts(count):
            raise EvaluationError(
                RuntimeErrorKind.PARAM_COUNT_MISMATCH,
                f"Function '{node.name}' expects {definition.arity} parameter(s), got {count}",
            )

        args = [self._evaluate(param) for param in node.params]
        logger.debug("Calling %s with %d parameter(s)", definition.name, count)

        try:
            result = definition.implementation(*args)
            return Value.from_python(result)
        except Exception as e:
            raise EvaluationError(
                RuntimeErrorKind.NATIVE_FUNCTION_ERROR, f"Error calling {node.name}: {e}"
            ) from e

    # -------------------------------------------------------------------------
    # Helper methods
    # -------------------------------------------------------------------------

    def _boolean(self, node: Expression, operator: Operator) -> Boolean:
        """Evaluate an operand that must produce a Boolean."""
        value = self._evaluate(node)
        if not isinstance(value, Boolean):
            raise EvaluationError(
                RuntimeErrorKind.TYPE_MISMATCH,
                f"Operator '{operator.value}' requires Boolean, got {value.type_name}",
            )
        return value

    @staticmethod
    def _equals(left: Value | _Undefined, right: Value | _Undefined) -> bool:
        if left is UNDEFINED or right is UNDEFINED:
            return all(side is UNDEFINED or side.is_empty() for side in (left, right))
        return left.equals(right)


# -----------------------------------------------------------------------------
# Convenience functions
# -----------------------------------------------------------------------------


def evaluate(environment: Environment, expression: Expression) -> Value:
    """Evaluate an expression tree against an environment.

    Raises:
        EvaluationError: On type mismatches, missing functions, arity
            mismatches, undefined variables outside of equality, and
            errors raised by native functions
    """
    return Interpreter(environment).evaluate(expression)
