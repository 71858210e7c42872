"""Regular expression functions built on Python's `re` module.

Replacement strings use Python's template syntax (\\1, \\g<name>).
"""

import re

from slac.config import EngineConfig
from slac.errors import NativeError
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.stdlib.params import default_number, default_string, get_index, string
from slac.value import Array, Boolean, String, Value


def _compile(pattern: Value) -> re.Pattern[str]:
    try:
        return re.compile(string(pattern))
    except re.error as e:
        raise NativeError(f"invalid pattern: {e}") from e


def _is_match(haystack: Value, pattern: Value) -> Boolean:
    return Boolean(_compile(pattern).search(string(haystack)) is not None)


def _find(haystack: Value, pattern: Value) -> Array:
    """All non-overlapping matches."""
    matches = _compile(pattern).finditer(string(haystack))
    return Array(tuple(String(m.group(0)) for m in matches))


def _capture(haystack: Value, pattern: Value) -> Array:
    """The whole first match followed by its groups; empty strings if no match."""
    regex = _compile(pattern)
    match = regex.search(string(haystack))
    if match is None:
        return Array(tuple(String("") for _ in range(regex.groups + 1)))
    groups = (match.group(0),) + match.groups(default="")
    return Array(tuple(String(g) for g in groups))


def _replace(
    haystack: Value,
    pattern: Value,
    replacement: Value | None = None,
    limit: Value | None = None,
) -> String:
    """Replace matches; a limit of 0 replaces all of them."""
    regex = _compile(pattern)
    count = get_index(default_number(limit, 0.0))
    try:
        return String(regex.sub(default_string(replacement, ""), string(haystack), count=count))
    except re.error as e:
        raise NativeError(f"invalid replacement: {e}") from e


def functions(config: EngineConfig) -> list[FunctionDefinition]:
    """Return all regex function definitions."""

    def regex(declaration, implementation, arity, description):
        return FunctionDefinition.declare(
            declaration,
            implementation,
            arity,
            description=description,
            category=FunctionCategory.REGEX,
        )

    two = Arity.exact(2)
    return [
        regex("re_is_match(haystack: String, pattern: String): Boolean", _is_match, two,
              "True if the pattern matches anywhere"),
        regex("re_find(haystack: String, pattern: String): Array<String>", _find, two,
              "All matches of the pattern"),
        regex("re_capture(haystack: String, pattern: String): Array<String>", _capture, two,
              "First match and its capture groups"),
        regex("re_replace(haystack: String, pattern: String, replacement: String = '', limit = 0): String",
              _replace, Arity.with_optional(2, 2), "Replaces matches of the pattern"),
    ]
