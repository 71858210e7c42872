"""String functions."""

from slac.config import EngineConfig
from slac.errors import NativeError
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.stdlib.params import number, string
from slac.value import Array, Boolean, Number, String, Value


def _chr(ordinal: Value) -> String:
    code = number(ordinal)
    if not 0 <= code < 127:
        raise NativeError("number is out of ASCII range")
    return String(chr(int(code)))


def _ord(char: Value) -> Number:
    text = string(char)
    if len(text) != 1:
        raise NativeError("string is too long")
    if not text.isascii():
        raise NativeError("character is out of ASCII range")
    return Number(ord(text))


def _lowercase(text: Value) -> String:
    return String(string(text).lower())


def _uppercase(text: Value) -> String:
    return String(string(text).upper())


def _same_text(left: Value, right: Value) -> Boolean:
    """Case-insensitive comparison."""
    return Boolean(string(left).lower() == string(right).lower())


def _split(line: Value, separator: Value) -> Array:
    sep = string(separator)
    if sep == "":
        raise NativeError("separator must not be empty")
    return Array(tuple(String(part) for part in string(line).split(sep)))


def parse_csv(line: str, separator: str) -> list[str]:
    """Split a CSV line. Double quotes toggle quoting and are dropped."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == separator and not in_quotes:
            fields.append("".join(current))
            current = []
        elif char == '"':
            in_quotes = not in_quotes
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def _split_csv(line: Value, separator: Value | None = None) -> Array:
    sep = ";"
    # Anything but a single character keeps the default separator
    if isinstance(separator, String) and len(separator.value) == 1:
        sep = separator.value
    return Array(tuple(String(field) for field in parse_csv(string(line), sep)))


def _trim(text: Value) -> String:
    return String(string(text).strip())


def _trim_left(text: Value) -> String:
    return String(string(text).lstrip())


def _trim_right(text: Value) -> String:
    return String(string(text).rstrip())


def functions(config: EngineConfig) -> list[FunctionDefinition]:
    """Return all string function definitions."""

    def text(declaration, implementation, arity, description):
        return FunctionDefinition.declare(
            declaration,
            implementation,
            arity,
            description=description,
            category=FunctionCategory.STRING,
        )

    one = Arity.exact(1)
    return [
        text("chr(ord: Number): String", _chr, one, "ASCII character of a code"),
        text("ord(char: String): Number", _ord, one, "ASCII code of a character"),
        text("lowercase(text: String): String", _lowercase, one, "Converts to lowercase"),
        text("uppercase(text: String): String", _uppercase, one, "Converts to uppercase"),
        text("same_text(left: String, right: String): Boolean", _same_text, Arity.exact(2),
             "Case-insensitive equality"),
        text("split(line: String, separator: String): Array<String>", _split, Arity.exact(2),
             "Splits a string at every separator"),
        text("split_csv(line: String, separator: String = ';'): Array<String>", _split_csv,
             Arity.with_optional(1, 1), "Splits a CSV line honoring double quotes"),
        text("trim(text: String): String", _trim, one, "Removes surrounding whitespace"),
        text("trim_left(text: String): String", _trim_left, one, "Removes leading whitespace"),
        text("trim_right(text: String): String", _trim_right, one,
             "Removes trailing whitespace"),
    ]
