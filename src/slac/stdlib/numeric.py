"""Math functions operating on Numbers.

Domain errors follow IEEE-754 and produce NaN rather than raising.
"""

import math
import random

from slac.config import EngineConfig
from slac.errors import NativeError
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.stdlib.params import default_number, number, smart_values, truncate
from slac.value import Boolean, Number, String, Value


def _unary(func):
    """Wrap a float -> float function, mapping domain errors to NaN."""

    def wrapper(value: Value) -> Number:
        try:
            return Number(func(number(value)))
        except ValueError:
            return Number(math.nan)
        except OverflowError:
            return Number(math.inf)

    wrapper.__name__ = func.__name__
    return wrapper


def _round(value: float) -> float:
    """Round half away from zero."""
    if not math.isfinite(value):
        return value
    return math.copysign(math.floor(abs(value) + 0.5), value)


def _frac(value: float) -> float:
    return value - truncate(value)


def _ln(value: float) -> float:
    if value == 0:
        return -math.inf
    return math.log(value)


def _int_to_hex(value: Value) -> String:
    whole = truncate(number(value))
    if not math.isfinite(whole):
        raise NativeError.wrong_type()
    whole = int(whole)
    sign = "-" if whole < 0 else ""
    return String(f"{sign}{abs(whole):X}")


def _whole(value: Value) -> int:
    whole = truncate(number(value))
    if not math.isfinite(whole):
        raise NativeError.wrong_type()
    return abs(int(whole))


def _even(value: Value) -> Boolean:
    return Boolean(_whole(value) % 2 == 0)


def _odd(value: Value) -> Boolean:
    return Boolean(_whole(value) % 2 != 0)


def _pow(base: Value, exponent: Value | None = None) -> Number:
    """Raise to a power, squaring when no exponent is given."""
    try:
        return Number(math.pow(number(base), default_number(exponent, 2.0)))
    except ValueError:
        return Number(math.nan)
    except OverflowError:
        return Number(math.inf)


def _random(limit: Value | None = None) -> Number:
    """Random Number in [0, limit), limit defaults to 1."""
    upper = default_number(limit, 1.0)
    if upper == 0:
        return Number(0.0)
    return Number(random.random() * upper)


def _choice(*params: Value) -> Value:
    choices = smart_values(params)
    if not choices:
        raise NativeError.wrong_type()
    return random.choice(choices)


def _pi() -> Number:
    return Number(math.pi)


def functions(config: EngineConfig) -> list[FunctionDefinition]:
    """Return all math function definitions."""

    def numeric(declaration, implementation, arity, description, pure=True):
        return FunctionDefinition.declare(
            declaration,
            implementation,
            arity,
            description=description,
            category=FunctionCategory.MATH,
            pure=pure,
        )

    one = Arity.exact(1)
    return [
        numeric("abs(value: Number): Number", _unary(abs), one, "Absolute value"),
        numeric("arc_tan(value: Number): Number", _unary(math.atan), one, "Arc tangent in radians"),
        numeric("cos(value: Number): Number", _unary(math.cos), one, "Cosine of radians"),
        numeric("exp(value: Number): Number", _unary(math.exp), one, "e raised to the value"),
        numeric("frac(value: Number): Number", _unary(_frac), one, "Fractional part"),
        numeric("ln(value: Number): Number", _unary(_ln), one, "Natural logarithm"),
        numeric("round(value: Number): Number", _unary(_round), one,
                "Rounds half away from zero"),
        numeric("sin(value: Number): Number", _unary(math.sin), one, "Sine of radians"),
        numeric("sqrt(value: Number): Number", _unary(math.sqrt), one, "Square root"),
        numeric("trunc(value: Number): Number", _unary(truncate), one, "Whole part"),
        numeric("int_to_hex(value: Number): String", _int_to_hex, one,
                "Hexadecimal representation of the whole part"),
        numeric("even(value: Number): Boolean", _even, one, "True for even numbers"),
        numeric("odd(value: Number): Boolean", _odd, one, "True for odd numbers"),
        numeric("pow(value: Number, exponent: Number = 2): Number", _pow,
                Arity.with_optional(1, 1), "Power of a number"),
        numeric("pi(): Number", _pi, Arity.none(), "The constant pi"),
        numeric("random(range: Number = 1): Number", _random, Arity.with_optional(0, 1),
                "Random number in [0, range)", pure=False),
        numeric("choice(...): Any", _choice, Arity.any(),
                "Random item of the values", pure=False),
    ]
