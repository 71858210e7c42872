"""JSON wire form for compiled expression trees.

Each node is a dict tagged by "type":

    {"type": "binary", "operator": "+",
     "left": {"type": "literal", "value": {"number": 1.0}},
     "right": {"type": "variable", "name": "x"}}

Values are single-key dicts naming their variant ("number", "boolean",
"string", "array"); operators use their surface syntax.
"""

import json
from typing import Any

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
from slac.value import Array as ArrayValue
from slac.value import Boolean, Number, String, Value


class SerializationError(ValueError):
    """Raised when a wire form document cannot be turned into a tree."""


# -----------------------------------------------------------------------------
# Values
# -----------------------------------------------------------------------------


def value_to_dict(value: Value) -> dict[str, Any]:
    if isinstance(value, Boolean):
        return {"boolean": value.value}
    if isinstance(value, Number):
        return {"number": value.value}
    if isinstance(value, String):
        return {"string": value.value}
    if isinstance(value, ArrayValue):
        return {"array": [value_to_dict(item) for item in value.values]}
    raise SerializationError(f"Unknown value type: {type(value).__name__}")


def value_from_dict(data: Any) -> Value:
    if not isinstance(data, dict) or len(data) != 1:
        raise SerializationError(f"Expected a single-key value object, got {data!r}")

    ((kind, raw),) = data.items()

    if kind == "boolean" and isinstance(raw, bool):
        return Boolean(raw)
    if kind == "number" and isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return Number(raw)
    if kind == "string" and isinstance(raw, str):
        return String(raw)
    if kind == "array" and isinstance(raw, list):
        return ArrayValue(tuple(value_from_dict(item) for item in raw))

    raise SerializationError(f"Invalid value object: {data!r}")


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


def to_dict(expression: Expression) -> dict[str, Any]:
    """Convert an expression tree into its wire form."""
    if isinstance(expression, Literal):
        return {"type": "literal", "value": value_to_dict(expression.value)}

    if isinstance(expression, Variable):
        return {"type": "variable", "name": expression.name}

    if isinstance(expression, Call):
        return {
            "type": "call",
            "name": expression.name,
            "params": [to_dict(p) for p in expression.params],
        }

    if isinstance(expression, Unary):
        return {
            "type": "unary",
            "operator": expression.operator.value,
            "operand": to_dict(expression.operand),
        }

    if isinstance(expression, Binary):
        return {
            "type": "binary",
            "operator": expression.operator.value,
            "left": to_dict(expression.left),
            "right": to_dict(expression.right),
        }

    if isinstance(expression, Array):
        return {
            "type": "array",
            "elements": [to_dict(e) for e in expression.elements],
        }

    if isinstance(expression, Ternary):
        return {
            "type": "ternary",
            "operator": expression.operator.value,
            "condition": to_dict(expression.condition),
            "then": to_dict(expression.then_branch),
            "else": to_dict(expression.else_branch),
        }

    raise SerializationError(f"Unknown node type: {type(expression).__name__}")


def from_dict(data: Any) -> Expression:
    """Rebuild an expression tree from its wire form.

    Raises:
        SerializationError: If the document is malformed
    """
    if not isinstance(data, dict):
        raise SerializationError(f"Expected an object, got {type(data).__name__}")

    node_type = data.get("type")
    try:
        if node_type == "literal":
            return Literal(value_from_dict(data["value"]))

        if node_type == "variable":
            return Variable(_string(data["name"]))

        if node_type == "call":
            return Call(
                _string(data["name"]), tuple(from_dict(p) for p in _list(data["params"]))
            )

        if node_type == "unary":
            return Unary(_operator(data["operator"]), from_dict(data["operand"]))

        if node_type == "binary":
            return Binary(
                _operator(data["operator"]),
                from_dict(data["left"]),
                from_dict(data["right"]),
            )

        if node_type == "array":
            return Array(tuple(from_dict(e) for e in _list(data["elements"])))

        if node_type == "ternary":
            return Ternary(
                _operator(data["operator"]),
                from_dict(data["condition"]),
                from_dict(data["then"]),
                from_dict(data["else"]),
            )
    except KeyError as e:
        raise SerializationError(f"Missing field {e} in {node_type} node") from e

    raise SerializationError(f"Unknown node type: {node_type!r}")


def dumps(expression: Expression, **kwargs: Any) -> str:
    """Serialize an expression tree to JSON text."""
    return json.dumps(to_dict(expression), **kwargs)


def loads(text: str) -> Expression:
    """Deserialize an expression tree from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SerializationError(f"Invalid JSON: {e}") from e
    return from_dict(data)


def _operator(symbol: Any) -> Operator:
    try:
        return Operator(symbol)
    except ValueError:
        raise SerializationError(f"Unknown operator: {symbol!r}") from None


def _string(raw: Any) -> str:
    if not isinstance(raw, str):
        raise SerializationError(f"Expected a string, got {raw!r}")
    return raw


def _list(raw: Any) -> list[Any]:
    if not isinstance(raw, list):
        raise SerializationError(f"Expected a list, got {raw!r}")
    return raw
