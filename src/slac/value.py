"""Runtime values for the SLAC expression engine.

A Value is one of four immutable variants:
- Boolean: true / false
- Number: a 64-bit float
- String: text
- Array: an ordered tuple of Values

Operators are defined per variant pair. Unsupported pairs raise an
EvaluationError of kind TYPE_MISMATCH instead of coercing.
"""

import math
from dataclasses import dataclass
from typing import Any

from slac.errors import EvaluationError, RuntimeErrorKind


class Value:
    """Base class for the runtime value variants."""

    __slots__ = ()

    @property
    def type_name(self) -> str:
        return type(self).__name__

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    @staticmethod
    def from_python(obj: Any) -> "Value":
        """Convert a plain Python object into a Value.

        Args:
            obj: bool, int, float, str, list/tuple of those, or a Value

        Returns:
            The matching Value variant

        Raises:
            TypeError: If the object has no Value representation (including None)
        """
        if isinstance(obj, Value):
            return obj
        if isinstance(obj, bool):
            return Boolean(obj)
        if isinstance(obj, (int, float)):
            return Number(float(obj))
        if isinstance(obj, str):
            return String(obj)
        if isinstance(obj, (list, tuple)):
            return Array(tuple(Value.from_python(item) for item in obj))
        raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")

    def to_python(self) -> Any:
        raise NotImplementedError

    # -------------------------------------------------------------------------
    # Emptiness
    # -------------------------------------------------------------------------

    def empty_like(self) -> "Value":
        """Return the empty value of the same variant."""
        raise NotImplementedError

    def is_empty(self) -> bool:
        """Return True for '', [] and 0. Booleans are never empty."""
        return False

    def length(self) -> int:
        """Character count for strings, element count for arrays, else 0."""
        return 0

    def as_bool(self) -> bool:
        """Booleans as-is; other variants are true when not empty."""
        return not self.is_empty()

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def equals(self, other: "Value") -> bool:
        return self == other

    def compare(self, other: "Value") -> int | None:
        """Compare two values of the same variant.

        Returns:
            -1, 0 or 1, or None when the values are not comparable
            (different variants, or NaN involved)
        """
        return None

    def less(self, other: "Value") -> bool:
        result = self.compare(other)
        return result is not None and result < 0

    def less_equal(self, other: "Value") -> bool:
        result = self.compare(other)
        return result is not None and result <= 0

    def greater(self, other: "Value") -> bool:
        result = self.compare(other)
        return result is not None and result > 0

    def greater_equal(self, other: "Value") -> bool:
        result = self.compare(other)
        return result is not None and result >= 0

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    def add(self, other: "Value") -> "Value":
        if isinstance(self, Number) and isinstance(other, Number):
            return Number(self.value + other.value)
        if isinstance(self, String) and isinstance(other, String):
            return String(self.value + other.value)
        if isinstance(self, Array) and isinstance(other, Array):
            return Array(self.values + other.values)
        raise _mismatch("add", self, other)

    def subtract(self, other: "Value") -> "Value":
        left, right = _numbers("subtract", self, other)
        return Number(left - right)

    def multiply(self, other: "Value") -> "Value":
        left, right = _numbers("multiply", self, other)
        return Number(left * right)

    def divide(self, other: "Value") -> "Value":
        left, right = _numbers("divide", self, other)
        return Number(_float_divide(left, right))

    def int_divide(self, other: "Value") -> "Value":
        """Truncating integer division (div)."""
        left, right = _numbers("div", self, other)
        quotient = _float_divide(left, right)
        if math.isfinite(quotient):
            quotient = float(math.trunc(quotient))
        return Number(quotient)

    def modulo(self, other: "Value") -> "Value":
        """Truncating remainder (mod), the sign follows the dividend."""
        left, right = _numbers("mod", self, other)
        if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
            return Number(math.nan)
        return Number(math.fmod(left, right))

    def xor(self, other: "Value") -> "Value":
        if isinstance(self, Boolean) and isinstance(other, Boolean):
            return Boolean(self.value != other.value)
        raise _mismatch("xor", self, other)

    def negate(self) -> "Value":
        if isinstance(self, Number):
            return Number(-self.value)
        raise EvaluationError(
            RuntimeErrorKind.TYPE_MISMATCH, f"Cannot negate {self.type_name}"
        )

    def logical_not(self) -> "Value":
        if isinstance(self, Boolean):
            return Boolean(not self.value)
        raise EvaluationError(
            RuntimeErrorKind.TYPE_MISMATCH, f"Cannot apply 'not' to {self.type_name}"
        )


@dataclass(frozen=True)
class Boolean(Value):
    value: bool

    def to_python(self) -> bool:
        return self.value

    def empty_like(self) -> "Boolean":
        return Boolean(False)

    def as_bool(self) -> bool:
        return self.value

    def compare(self, other: Value) -> int | None:
        if isinstance(other, Boolean):
            return _cmp(int(self.value), int(other.value))
        return None

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Number(Value):
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", float(self.value))

    def to_python(self) -> float:
        return self.value

    def empty_like(self) -> "Number":
        return Number(0.0)

    def is_empty(self) -> bool:
        return self.value == 0.0

    def equals(self, other: Value) -> bool:
        """IEEE equality, so NaN never equals anything."""
        return isinstance(other, Number) and self.value == other.value

    def compare(self, other: Value) -> int | None:
        if isinstance(other, Number):
            if math.isnan(self.value) or math.isnan(other.value):
                return None
            return _cmp(self.value, other.value)
        return None

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class String(Value):
    value: str

    def to_python(self) -> str:
        return self.value

    def empty_like(self) -> "String":
        return String("")

    def is_empty(self) -> bool:
        return self.value == ""

    def length(self) -> int:
        return len(self.value)

    def compare(self, other: Value) -> int | None:
        if isinstance(other, String):
            return _cmp(self.value, other.value)
        return None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Array(Value):
    values: tuple[Value, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(self.values))

    def to_python(self) -> list[Any]:
        return [item.to_python() for item in self.values]

    def empty_like(self) -> "Array":
        return Array(())

    def is_empty(self) -> bool:
        return len(self.values) == 0

    def length(self) -> int:
        return len(self.values)

    def equals(self, other: Value) -> bool:
        if not isinstance(other, Array) or len(self.values) != len(other.values):
            return False
        return all(left.equals(right) for left, right in zip(self.values, other.values))

    def compare(self, other: Value) -> int | None:
        """Arrays order by length first, then element by element."""
        if not isinstance(other, Array):
            return None
        if len(self.values) != len(other.values):
            return _cmp(len(self.values), len(other.values))
        for left, right in zip(self.values, other.values):
            result = left.compare(right)
            if result is None or result != 0:
                return result
        return 0

    def __str__(self) -> str:
        return "[" + ", ".join(_display_item(item) for item in self.values) + "]"


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------


def format_number(number: float) -> str:
    """Format a float without a trailing '.0' for integral values."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def _display_item(item: Value) -> str:
    if isinstance(item, String):
        return f"'{item.value}'"
    return str(item)


def _cmp(left: Any, right: Any) -> int:
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


def _float_divide(left: float, right: float) -> float:
    """IEEE-754 division, returning inf/nan instead of raising."""
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def _mismatch(operation: str, left: Value, right: Value) -> EvaluationError:
    return EvaluationError(
        RuntimeErrorKind.TYPE_MISMATCH,
        f"Cannot {operation} {left.type_name} and {right.type_name}",
    )


def _numbers(operation: str, left: Value, right: Value) -> tuple[float, float]:
    if isinstance(left, Number) and isinstance(right, Number):
        return left.value, right.value
    raise _mismatch(operation, left, right)
