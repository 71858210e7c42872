"""Date and time functions on Numbers.

A date-time is a Number of days since midnight, January 1, 1970 in local
time. The fractional part is the time of day as a fraction of 24 hours
(0.25 = 06:00, 0.75 = 18:00), so date offsets are plain additions:

    encode_date(2023, 12, 24) + 7 = new_years_eve

The RFC functions convert between the given offset and the local timezone.
"""

import calendar
from datetime import datetime, time, timedelta
from email.utils import format_datetime, parsedate_to_datetime

from slac.config import EngineConfig
from slac.errors import NativeError
from slac.functions import Arity, FunctionCategory, FunctionDefinition
from slac.stdlib.params import default_number, default_string, number, string, truncate
from slac.value import Boolean, Number, String, Value

EPOCH = datetime(1970, 1, 1)
MILLISECONDS_PER_DAY = 24 * 60 * 60 * 1000
_MILLISECOND = timedelta(milliseconds=1)


def to_datetime(value: Value) -> datetime:
    """Convert a Number parameter into a naive local datetime."""
    days = number(value)
    try:
        return EPOCH + timedelta(milliseconds=round(days * MILLISECONDS_PER_DAY))
    except (OverflowError, ValueError) as e:
        raise NativeError("datetime out of range") from e


def from_datetime(moment: datetime) -> Number:
    """Convert a naive local datetime into a Number of days."""
    milliseconds = (moment - EPOCH) // _MILLISECOND
    return Number(milliseconds / MILLISECONDS_PER_DAY)


def _parse(text: str, fmt: str) -> datetime:
    try:
        return datetime.strptime(text, fmt)
    except ValueError as e:
        raise NativeError(str(e)) from e


def _whole(value: Value) -> int:
    return int(truncate(number(value)))


def _now() -> Number:
    return from_datetime(datetime.now())


def _date(value: Value) -> Number:
    return Number(truncate(number(value)))


def _time(value: Value) -> Number:
    days = number(value)
    return Number(days - truncate(days))


def _encode_date(year: Value, month: Value, day: Value) -> Number:
    try:
        moment = datetime(_whole(year), _whole(month), _whole(day))
    except (OverflowError, ValueError) as e:
        raise NativeError("invalid date parameters") from e
    return from_datetime(moment)


def _encode_time(
    hour: Value, minute: Value, second: Value, millisecond: Value | None = None
) -> Number:
    milli = int(truncate(default_number(millisecond, 0.0)))
    try:
        clock = time(_whole(hour), _whole(minute), _whole(second), milli * 1000)
    except (OverflowError, ValueError) as e:
        raise NativeError("invalid time parameters") from e
    return from_datetime(datetime.combine(EPOCH.date(), clock))


def _part(attribute: str):
    def extract(value: Value) -> Number:
        return Number(getattr(to_datetime(value), attribute))

    extract.__name__ = attribute
    return extract


def _millisecond(value: Value) -> Number:
    return Number(to_datetime(value).microsecond // 1000)


def _day_of_week(value: Value) -> Number:
    """Monday is 0, Sunday is 6."""
    return Number(to_datetime(value).weekday())


def _is_leap_year(value: Value) -> Boolean:
    return Boolean(calendar.isleap(to_datetime(value).year))


def _inc_month(value: Value, increment: Value | None = None) -> Number:
    """Shift by whole months, clamping the day to the target month's length."""
    moment = to_datetime(value)
    months = moment.month - 1 + int(truncate(default_number(increment, 1.0)))
    year = moment.year + months // 12
    month = months % 12 + 1
    if not 1 <= year <= 9999:
        raise NativeError("inc_month out of range")
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return from_datetime(moment.replace(year=year, month=month, day=day))


def _date_to_string(fmt: Value, value: Value) -> String:
    return String(to_datetime(value).strftime(string(fmt)))


def _string_to_date(text: Value, fmt: Value | None = None) -> Number:
    parsed = _parse(string(text), default_string(fmt, "%Y-%m-%d"))
    return from_datetime(datetime.combine(parsed.date(), time()))


def _string_to_time(text: Value, fmt: Value | None = None) -> Number:
    parsed = _parse(string(text), default_string(fmt, "%H:%M:%S"))
    return from_datetime(datetime.combine(EPOCH.date(), parsed.time()))


def _string_to_datetime(text: Value, fmt: Value | None = None) -> Number:
    return from_datetime(_parse(string(text), default_string(fmt, "%Y-%m-%d %H:%M:%S")))


def _to_local(moment: datetime) -> Number:
    return from_datetime(moment.astimezone().replace(tzinfo=None))


def _date_to_rfc2822(value: Value) -> String:
    return String(format_datetime(to_datetime(value).astimezone()))


def _date_from_rfc2822(text: Value) -> Number:
    try:
        moment = parsedate_to_datetime(string(text))
    except (TypeError, ValueError) as e:
        raise NativeError(f"invalid RFC 2822 date: {string(text)}") from e
    if moment.tzinfo is None:
        return from_datetime(moment)
    return _to_local(moment)


def _date_to_rfc3339(value: Value) -> String:
    return String(to_datetime(value).astimezone().isoformat())


def _date_from_rfc3339(text: Value) -> Number:
    raw = string(text)
    try:
        moment = datetime.fromisoformat(raw)
    except ValueError as e:
        raise NativeError(f"invalid RFC 3339 date: {raw}") from e
    if moment.tzinfo is None:
        raise NativeError(f"missing offset in RFC 3339 date: {raw}")
    return _to_local(moment)


def functions(config: EngineConfig) -> list[FunctionDefinition]:
    """Return all date and time function definitions."""

    def dates(declaration, implementation, arity, description, pure=True):
        return FunctionDefinition.declare(
            declaration,
            implementation,
            arity,
            description=description,
            category=FunctionCategory.TIME,
            pure=pure,
        )

    one = Arity.exact(1)
    return [
        dates("now(): Number", _now, Arity.none(), "Current local date-time", pure=False),
        dates("date(datetime: Number): Number", _date, one, "Date part of a date-time"),
        dates("time(datetime: Number): Number", _time, one, "Time part of a date-time"),
        dates("encode_date(year: Number, month: Number, day: Number): Number", _encode_date,
              Arity.exact(3), "Date-time at midnight of a day"),
        dates("encode_time(hour: Number, minute: Number, second: Number, millisecond: Number = 0): Number",
              _encode_time, Arity.with_optional(3, 1), "Time of day as a fraction"),
        dates("year(datetime: Number): Number", _part("year"), one, "Year of a date-time"),
        dates("month(datetime: Number): Number", _part("month"), one, "Month of a date-time"),
        dates("day(datetime: Number): Number", _part("day"), one, "Day of month"),
        dates("hour(datetime: Number): Number", _part("hour"), one, "Hour of a date-time"),
        dates("minute(datetime: Number): Number", _part("minute"), one, "Minute of a date-time"),
        dates("second(datetime: Number): Number", _part("second"), one, "Second of a date-time"),
        dates("millisecond(datetime: Number): Number", _millisecond, one,
              "Millisecond of a date-time"),
        dates("day_of_week(datetime: Number): Number", _day_of_week, one,
              "Weekday, Monday = 0"),
        dates("is_leap_year(datetime: Number): Boolean", _is_leap_year, one,
              "True if the year has 366 days"),
        dates("inc_month(datetime: Number, increment: Number = 1): Number", _inc_month,
              Arity.with_optional(1, 1), "Adds whole months"),
        dates("date_to_string(fmt: String, datetime: Number): String", _date_to_string,
              Arity.exact(2), "Formats with strftime directives"),
        dates("time_to_string(fmt: String, datetime: Number): String", _date_to_string,
              Arity.exact(2), "Formats with strftime directives"),
        dates("string_to_date(date: String, format: String = '%Y-%m-%d'): Number",
              _string_to_date, Arity.with_optional(1, 1), "Parses a date"),
        dates("string_to_time(time: String, format: String = '%H:%M:%S'): Number",
              _string_to_time, Arity.with_optional(1, 1), "Parses a time of day"),
        dates("string_to_datetime(datetime: String, format: String = '%Y-%m-%d %H:%M:%S'): Number",
              _string_to_datetime, Arity.with_optional(1, 1), "Parses a date-time"),
        dates("date_to_rfc2822(datetime: Number): String", _date_to_rfc2822, one,
              "RFC 2822 text with the local offset"),
        dates("date_from_rfc2822(datetime: String): Number", _date_from_rfc2822, one,
              "Parses RFC 2822 text into local time"),
        dates("date_to_rfc3339(datetime: Number): String", _date_to_rfc3339, one,
              "RFC 3339 text with the local offset"),
        dates("date_from_rfc3339(datetime: String): Number", _date_from_rfc3339, one,
              "Parses RFC 3339 text into local time"),
    ]
