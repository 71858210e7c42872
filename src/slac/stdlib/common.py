"""Common functions: conversion, comparison and String/Array handling."""

from functools import partial

from slac.config import EngineConfig
from slac.errors import NativeError
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.stdlib.params import (
    default_string,
    get_index,
    get_string_index,
    number,
    smart_values,
    truncate,
)
from slac.value import Array, Boolean, Number, String, Value

_TRUE = Boolean(True)


def _all(*params: Value) -> Boolean:
    """True if every item is Boolean true. Accepts one Array or many values."""
    return Boolean(all(v == _TRUE for v in smart_values(params)))


def _any(*params: Value) -> Boolean:
    """True if any item is Boolean true. Accepts one Array or many values."""
    return Boolean(any(v == _TRUE for v in smart_values(params)))


def _at(values: Value, index: Value, *, offset: int) -> Value:
    """Return the character or item at a position."""
    if isinstance(values, String):
        position = get_string_index(number(index), offset)
        if position >= len(values.value):
            raise NativeError.out_of_bounds(position)
        return String(values.value[position])
    if isinstance(values, Array):
        position = get_index(number(index))
        if position >= len(values.values):
            raise NativeError.out_of_bounds(position)
        return values.values[position]
    raise NativeError.wrong_type()


def _between(value: Value, lower: Value, upper: Value) -> Boolean:
    """Inclusive range check."""
    return Boolean(value.greater_equal(lower) and value.less_equal(upper))


def _bool(value: Value) -> Boolean:
    # 'true' (any case) => true, 1 => true, non-empty array => true
    if isinstance(value, String):
        return Boolean(value.value.lower() == "true")
    if isinstance(value, Number):
        return Boolean(value.value == 1.0)
    if isinstance(value, Array):
        return Boolean(not value.is_empty())
    return value


def _contains(haystack: Value, needle: Value) -> Boolean:
    if isinstance(haystack, String) and isinstance(needle, String):
        return Boolean(needle.value in haystack.value)
    if isinstance(haystack, Array):
        return Boolean(any(item.equals(needle) for item in haystack.values))
    raise NativeError.wrong_type()


def _compare(left: Value, right: Value) -> Number:
    result = left.compare(right)
    if result is None:
        raise NativeError("values not comparable")
    return Number(result)


def _copy(source: Value, start: Value, count: Value, *, offset: int) -> Value:
    """Copy `count` characters or items beginning at `start`."""
    length = max(int(truncate(number(count))), 0)
    if isinstance(source, String):
        begin = get_string_index(number(start), offset)
        return String(source.value[begin:begin + length])
    if isinstance(source, Array):
        begin = get_index(number(start))
        return Array(source.values[begin:begin + length])
    raise NativeError.wrong_type()


def _empty(value: Value) -> Boolean:
    return Boolean(value.is_empty())


def _find(haystack: Value, needle: Value, *, offset: int) -> Number:
    """Position of a substring or index of an item; not found gives offset - 1."""
    if isinstance(haystack, String) and isinstance(needle, String):
        return Number(haystack.value.find(needle.value) + offset)
    if isinstance(haystack, Array):
        for index, item in enumerate(haystack.values):
            if item.equals(needle):
                return Number(index)
        return Number(-1)
    raise NativeError.wrong_type()


def _float(value: Value) -> Number:
    if isinstance(value, Boolean):
        return Number(1.0 if value.value else 0.0)
    if isinstance(value, String):
        try:
            return Number(float(value.value))
        except ValueError as e:
            raise NativeError(str(e)) from e
    if isinstance(value, Number):
        return value
    raise NativeError.wrong_type()


def _if_then(condition: Value, first: Value, second: Value | None = None) -> Value:
    """Eager conditional. Without `second`, a false condition gives an empty value."""
    if not isinstance(condition, Boolean):
        raise NativeError.wrong_type()
    if condition.value:
        return first
    if second is None:
        return first.empty_like()
    return second


def _insert(target: Value, source: Value, index: Value, *, offset: int) -> Value:
    if isinstance(target, String) and isinstance(source, String):
        position = get_string_index(number(index), offset)
        if position > len(target.value):
            raise NativeError.out_of_bounds(position)
        text = target.value
        return String(text[:position] + source.value + text[position:])
    if isinstance(target, Array):
        position = get_index(number(index))
        if position > len(target.values):
            raise NativeError.out_of_bounds(position)
        items = target.values
        return Array(items[:position] + (source,) + items[position:])
    raise NativeError.wrong_type()


def _int(value: Value) -> Number:
    return Number(truncate(_float(value).value))


def _length(value: Value) -> Number:
    return Number(value.length())


def _max(*params: Value) -> Value:
    values = smart_values(params)
    if not values:
        raise NativeError.wrong_count(1)
    result = values[0]
    for value in values[1:]:
        if value.greater(result):
            result = value
    return result


def _min(*params: Value) -> Value:
    values = smart_values(params)
    if not values:
        raise NativeError.wrong_count(1)
    result = values[0]
    for value in values[1:]:
        if value.less(result):
            result = value
    return result


def _replace(value: Value, old: Value, new: Value | None = None) -> Value:
    """Replace all occurrences. Without `new` the occurrences are removed."""
    if isinstance(value, String) and isinstance(old, String):
        return String(value.value.replace(old.value, default_string(new, "")))
    if isinstance(value, Array):
        items: list[Value] = []
        for item in value.values:
            if not item.equals(old):
                items.append(item)
            elif new is not None:
                items.append(new)
        return Array(tuple(items))
    raise NativeError.wrong_type()


def _reverse(value: Value) -> Value:
    if isinstance(value, Array):
        return Array(value.values[::-1])
    if isinstance(value, String):
        return String(value.value[::-1])
    raise NativeError.wrong_type()


def _str(value: Value) -> String:
    return String(str(value))


def functions(config: EngineConfig) -> list[FunctionDefinition]:
    """Return all common function definitions."""
    offset = config.string_offset

    def common(declaration, implementation, arity, description):
        return FunctionDefinition.declare(
            declaration,
            implementation,
            arity,
            description=description,
            category=FunctionCategory.COMMON,
        )

    return [
        common("all(...): Boolean", _all, Arity.any(),
               "True if all values are true"),
        common("any(...): Boolean", _any, Arity.any(),
               "True if any value is true"),
        common("at(values: [String|Array], index: Number): Any",
               partial(_at, offset=offset), Arity.exact(2),
               "Character or item at a position"),
        common("between(value: Any, lower: Any, upper: Any): Boolean", _between, Arity.exact(3),
               "True if lower <= value <= upper"),
        common("bool(value: Any): Boolean", _bool, Arity.exact(1),
               "Converts a value to a Boolean"),
        common("contains(haystack: [String|Array], needle: [String|Any]): Boolean",
               _contains, Arity.exact(2),
               "True if the needle is part of the haystack"),
        common("compare(left: Any, right: Any): Number", _compare, Arity.exact(2),
               "Ordering of two values as -1, 0 or 1"),
        common("copy(source: [String|Array], start: Number, count: Number): [String|Array]",
               partial(_copy, offset=offset), Arity.exact(3),
               "Copies a range of characters or items"),
        common("empty(value: Any): Boolean", _empty, Arity.exact(1),
               "True for '', [] and 0"),
        common("find(haystack: [String|Array], needle: [String|Any]): Number",
               partial(_find, offset=offset), Arity.exact(2),
               "Position of a substring or index of an item"),
        common("float(value: Any): Number", _float, Arity.exact(1),
               "Converts a value to a Number"),
        common("if_then(condition: Boolean, first: Any, second: Any): Any",
               _if_then, Arity.with_optional(2, 1),
               "Returns first if the condition is true, else second"),
        common("insert(target: [String|Array], source: [String|Any], index: Number): Any",
               partial(_insert, offset=offset), Arity.exact(3),
               "Inserts a string or item at a position"),
        common("int(value: Any): Number", _int, Arity.exact(1),
               "Converts a value to a whole Number"),
        common("length(value: [String|Array]): Number", _length, Arity.exact(1),
               "Number of characters or items"),
        common("max(...): Any", _max, Arity.any(),
               "Largest of the values"),
        common("min(...): Any", _min, Arity.any(),
               "Smallest of the values"),
        common("replace(value: [String|Array], from: [String|Any], to: [String|Any]): [String|Array]",
               _replace, Arity.with_optional(2, 1),
               "Replaces all occurrences"),
        common("remove(value: [String|Array], from: [String|Any]): [String|Array]",
               _replace, Arity.exact(2),
               "Removes all occurrences"),
        common("reverse(value: [Array|String]): [Array|String]", _reverse, Arity.exact(1),
               "Reverses characters or items"),
        common("str(value: Any): String", _str, Arity.exact(1),
               "Converts a value to a String"),
    ]
