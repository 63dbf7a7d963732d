"""Value constraints: comparisons, equality, length, strings, nil and zero checks."""

from __future__ import annotations

import dataclasses
import operator
import re
from collections.abc import Sized
from datetime import datetime
from typing import Any, Callable

from gomer.constraint.base import Constraint, and_, configuration_error
from gomer.errors import ConfigurationError, NotSatisfiedError, UnprocessableError

EQ = "EQ"
NEQ = "NEQ"
GT = "GT"
GTE = "GTE"
LT = "LT"
LTE = "LTE"

_COMPARATORS: dict[str, Callable[[Any, Any], bool]] = {
    EQ: operator.eq,
    NEQ: operator.ne,
    GT: operator.gt,
    GTE: operator.ge,
    LT: operator.lt,
    LTE: operator.le,
}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_uint(value: Any) -> bool:
    return _is_int(value) and value >= 0


def _is_float(value: Any) -> bool:
    return isinstance(value, float)


def _is_time(value: Any) -> bool:
    return isinstance(value, datetime)


def _compare(
    prefix: str,
    comparison_type: str,
    compare_to: Any,
    accepts: Callable[[Any], bool],
    description: str,
) -> Constraint:
    key = comparison_type.upper()
    comparator = _COMPARATORS.get(key)
    if comparator is None:
        raise ValueError("Unrecognized comparison type: " + key)

    def _test(to_test: Any) -> None:
        if compare_to is None or to_test is None:
            return
        if not accepts(to_test):
            raise UnprocessableError(f"toTest is not {description}", to_test)
        try:
            satisfied = comparator(to_test, compare_to)
        except TypeError as err:
            raise UnprocessableError(f"toTest is not {description}", to_test) from err
        if not satisfied:
            raise NotSatisfiedError(to_test)

    return Constraint(prefix + key, compare_to, _test)


def _between(name: str, builder: Callable[[str, Any], Constraint], lower: Any, upper: Any) -> Constraint:
    c = and_(builder(GTE, lower), builder(LTE, upper))
    c.type = name
    return c


def int_compare(comparison_type: str, compare_to: int | None) -> Constraint:
    """Compare an integer value with compare_to; non-integers are unprocessable."""
    return _compare("Int", comparison_type, compare_to, _is_int, "an int")


def int_between(lower: int | None, upper: int | None) -> Constraint:
    """Satisfied when lower <= value <= upper."""
    return _between("IntBetween", int_compare, lower, upper)


def uint_compare(comparison_type: str, compare_to: int | None) -> Constraint:
    """Compare a non-negative integer value with compare_to."""
    return _compare("Uint", comparison_type, compare_to, _is_uint, "a uint")


def uint_between(lower: int | None, upper: int | None) -> Constraint:
    """Satisfied when lower <= value <= upper for a non-negative integer."""
    return _between("UintBetween", uint_compare, lower, upper)


def float_compare(comparison_type: str, compare_to: float | None) -> Constraint:
    """Compare a float value with compare_to; other types are unprocessable."""
    return _compare("Float", comparison_type, compare_to, _is_float, "a float")


def float_between(lower: float | None, upper: float | None) -> Constraint:
    """Satisfied when lower <= value <= upper for a float."""
    return _between("FloatBetween", float_compare, lower, upper)


def time_compare(comparison_type: str, compare_to: datetime | None) -> Constraint:
    """Compare a datetime value with compare_to."""
    return _compare("Time", comparison_type, compare_to, _is_time, "a datetime")


def time_between(lower: datetime | None, upper: datetime | None) -> Constraint:
    """Satisfied when lower <= value <= upper for a datetime."""
    return _between("TimeBetween", time_compare, lower, upper)


def equals(value: Any) -> Constraint:
    """Satisfied when the tested value equals value."""

    def _test(to_test: Any) -> None:
        if to_test is None or to_test != value:
            raise NotSatisfiedError(to_test)

    return Constraint("Equals", value, _test)


def not_equals(value: Any) -> Constraint:
    """Satisfied when the tested value is present and differs from value."""

    def _test(to_test: Any) -> None:
        if to_test is None or to_test == value:
            raise NotSatisfiedError(to_test)

    return Constraint("NotEquals", value, _test)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def one_of(*values: Any) -> Constraint:
    """Satisfied when the tested value, converted to the type of the first value, is among values."""
    if not values:
        raise ConfigurationError("OneOf constraint defined without values")
    values_type = type(values[0])

    def _convert(to_test: Any) -> Any:
        if isinstance(to_test, values_type):
            return to_test
        if _is_number(to_test) and _is_number(values[0]):
            return values_type(to_test)
        raise NotSatisfiedError(to_test)

    def _test(to_test: Any) -> None:
        if to_test is None:
            raise NotSatisfiedError(to_test)
        converted = _convert(to_test)
        if converted not in values:
            raise NotSatisfiedError(to_test)

    return Constraint("OneOf", list(values), _test)


def _length(length_type: str, params: Any, min_len: int | None, max_len: int | None) -> Constraint:
    def _test(to_test: Any) -> None:
        measured = [] if to_test is None else to_test
        if not isinstance(measured, Sized):
            raise UnprocessableError(
                "Test value must be one of Array, Chan, Map, Slice, or String (or pointer to one of these)",
                to_test,
            )
        size = len(measured)
        if (min_len is not None and size < min_len) or (max_len is not None and size > max_len):
            raise NotSatisfiedError(to_test)

    return Constraint(length_type, params, _test)


def length(*values: int | None) -> Constraint:
    """Exact length for one value, an inclusive range for two; anything else is a configuration error."""
    if len(values) == 1 and values[0] is not None:
        return _length("LengthEquals", values[0], values[0], values[0])
    if len(values) == 2:
        low, high = values
        if low is not None and high is not None:
            return _length("LengthBetween", [low, high], low, high)
        if low is not None:
            return min_length(low)
        if high is not None:
            return max_length(high)
    return configuration_error(
        f"'Length' constraint requires 1 or 2 non-nil input values, received {len(values)}"
    )


def min_length(min_len: int | None) -> Constraint:
    """Satisfied when min_len <= len(value)."""
    return _length("LengthMin", min_len, min_len, None)


def max_length(max_len: int | None) -> Constraint:
    """Satisfied when len(value) <= max_len."""
    return _length("LengthMax", max_len, None, max_len)


EMPTY = _length("Empty", None, None, 0)
NON_EMPTY = _length("NonEmpty", None, 1, None)


def _string_test(name: str, params: Any, check: Callable[[str], bool]) -> Constraint:
    def _test(to_test: Any) -> None:
        if to_test is None:
            raise NotSatisfiedError(to_test)
        if not isinstance(to_test, str):
            raise UnprocessableError(name + " requires a string test value", to_test)
        if not check(to_test):
            raise NotSatisfiedError(to_test)

    return Constraint(name, params, _test)


def starts_with(prefix: str | None) -> Constraint:
    """Satisfied when the string starts with prefix; always when prefix is None."""
    return _string_test("StartsWith", prefix, lambda s: prefix is None or s.startswith(prefix))


def ends_with(suffix: str | None) -> Constraint:
    """Satisfied when the string ends with suffix; always when suffix is None."""
    return _string_test("EndsWith", suffix, lambda s: suffix is None or s.endswith(suffix))


def regexp(pattern: str) -> Constraint:
    """Satisfied when the pattern matches somewhere in the string; a bad pattern never matches."""

    def _check(s: str) -> bool:
        try:
            compiled = re.compile(pattern)
        except re.error:
            return False
        return compiled.search(s) is not None

    return _string_test("Regexp", pattern, _check)


def regexp_match(pattern: re.Pattern[str] | None) -> Constraint:
    """Satisfied when a compiled pattern matches somewhere in the string."""
    if pattern is None:
        return configuration_error("regexp is nil")
    return _string_test("Regexp", pattern.pattern, lambda s: pattern.search(s) is not None)


def _valid_regexp(s: str) -> bool:
    try:
        re.compile(s)
    except re.error:
        return False
    return True


IS_REGEXP = _string_test("IsRegexp", None, _valid_regexp)


def _nil_constraint(name: str, error_if_nil: bool) -> Constraint:
    def _test(to_test: Any) -> None:
        if (to_test is None) == error_if_nil:
            raise NotSatisfiedError(to_test)

    return Constraint(name, None, _test)


IS_NIL = _nil_constraint("IsNil", False)
IS_NOT_NIL = _nil_constraint("IsNotNil", True)


def nil_(value: Any) -> Constraint:
    """Satisfied when the given value (not the tested one) is None."""
    return Constraint("Nil", value, lambda _: IS_NIL.test(value))


def not_nil(value: Any) -> Constraint:
    """Satisfied when the given value (not the tested one) is not None."""
    return Constraint("NotNil", value, lambda _: IS_NOT_NIL.test(value))


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, str, bytes)):
        return not value
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return all(_is_zero(getattr(value, f.name)) for f in dataclasses.fields(value))
    return False


def _zero_constraint(name: str, error_if_zero: bool) -> Constraint:
    def _test(to_test: Any) -> None:
        if _is_zero(to_test) == error_if_zero:
            raise NotSatisfiedError(to_test)

    return Constraint(name, None, _test)


IS_ZERO = _zero_constraint("IsZero", False)
IS_NOT_ZERO = _zero_constraint("IsNotZero", True)


def zero(value: Any) -> Constraint:
    """Satisfied when the given value is its type's zero value."""
    return Constraint("Zero", value, lambda _: IS_ZERO.test(value))


def not_zero(value: Any) -> Constraint:
    """Satisfied when the given value is not its type's zero value."""
    return Constraint("NotZero", value, lambda _: IS_NOT_ZERO.test(value))


def _required(to_test: Any) -> None:
    if to_test is None or _is_zero(to_test):
        raise NotSatisfiedError(to_test)


REQUIRED = Constraint("Required", None, _required)