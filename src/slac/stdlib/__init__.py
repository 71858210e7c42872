"""Standard library of native functions for SLAC expressions.

Categories:
- common: all, any, at, between, bool, contains, compare, copy, empty, find,
  float, if_then, insert, int, length, max, min, replace, remove, reverse, str
- math: abs, arc_tan, cos, exp, frac, ln, round, sin, sqrt, trunc, int_to_hex,
  even, odd, pow, pi, random, choice
- string: chr, ord, lowercase, uppercase, same_text, split, split_csv, trim,
  trim_left, trim_right
- regex: re_is_match, re_find, re_capture, re_replace
- time: now, date, time, encode_date, encode_time, year .. millisecond,
  day_of_week, is_leap_year, inc_month and string / RFC conversions
"""

from slac.config import EngineConfig
from slac.environment import StaticEnvironment
from slac.functions import FunctionDefinition
from slac.stdlib import common, dates, numeric, regex, text


def builtins(config: EngineConfig | None = None) -> list[FunctionDefinition]:
    """Return every standard library function definition."""
    config = config or EngineConfig()
    return [
        *common.functions(config),
        *numeric.functions(config),
        *text.functions(config),
        *regex.functions(config),
        *dates.functions(config),
    ]


def extend_environment(
    environment: StaticEnvironment, config: EngineConfig | None = None
) -> StaticEnvironment:
    """Register all standard library functions and return the environment."""
    environment.add_functions(builtins(config))
    return environment


__all__ = ["builtins", "extend_environment"]
