"""Parameter helpers shared by the standard library functions."""

import math

from slac.errors import NativeError
from slac.value import Array, Number, String, Value


def number(value: Value) -> float:
    """Unwrap a Number parameter or raise a wrong type error."""
    if isinstance(value, Number):
        return value.value
    raise NativeError.wrong_type()


def string(value: Value) -> str:
    """Unwrap a String parameter or raise a wrong type error."""
    if isinstance(value, String):
        return value.value
    raise NativeError.wrong_type()


def default_number(value: Value | None, default: float) -> float:
    if value is None:
        return default
    return number(value)


def default_string(value: Value | None, default: str) -> str:
    if value is None:
        return default
    return string(value)


def truncate(value: float) -> float:
    """Truncate towards zero, leaving inf and nan as they are."""
    if math.isfinite(value):
        return float(math.trunc(value))
    return value


def get_index(value: float) -> int:
    """Convert a Number parameter into a non-negative index."""
    if math.isnan(value) or value < 0:
        raise NativeError.negative_index()
    if math.isinf(value):
        raise NativeError.out_of_bounds(0)
    return int(value)


def get_string_index(value: float, offset: int) -> int:
    """Convert a user-facing string position into a Python index."""
    index = get_index(value) - offset
    if index < 0:
        raise NativeError.negative_index()
    return index


def smart_values(params: tuple[Value, ...]) -> tuple[Value, ...]:
    """Return the items of a single Array parameter, or all parameters."""
    if len(params) == 1 and isinstance(params[0], Array):
        return params[0].values
    return params
