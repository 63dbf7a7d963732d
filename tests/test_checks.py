import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from gomer.constraint import checks
from gomer.constraint.base import or_
from gomer.errors import ConfigurationError, NotSatisfiedError, UnprocessableError


def test_starts_with_nil_succeeds():
    assert checks.starts_with(None).validate("field", "abc") is None


@pytest.mark.parametrize(
    "prefix,to_test,should_succeed",
    [
        ("", "", True),
        ("hello", "", False),
        ("hello", "hello world", True),
        ("hello", "Hello world", False),
    ],
)
def test_starts_with(prefix, to_test, should_succeed):
    c = checks.starts_with(prefix)
    if should_succeed:
        assert c.validate("field", to_test) is None
    else:
        with pytest.raises(NotSatisfiedError) as info:
            c.validate("field", to_test)
        assert info.value.target == "field"


def test_ends_with_nil_succeeds():
    assert checks.ends_with(None).validate("field", "abc") is None


@pytest.mark.parametrize(
    "suffix,to_test,should_succeed",
    [
        ("", "", True),
        ("world", "", False),
        ("world", "hello world", True),
        ("world", "Hello World", False),
    ],
)
def test_ends_with(suffix, to_test, should_succeed):
    c = checks.ends_with(suffix)
    if should_succeed:
        assert c.validate("field", to_test) is None
    else:
        with pytest.raises(NotSatisfiedError):
            c.validate("field", to_test)


@pytest.mark.parametrize(
    "pattern,to_test,should_succeed",
    [
        ("", "", True),
        (".", "", False),
        (".*", "", True),
        (".*", "abc", True),
        ("bad[", "abc", False),
    ],
)
def test_regexp(pattern, to_test, should_succeed):
    c = checks.regexp(pattern)
    if should_succeed:
        assert c.validate("field", to_test) is None
    else:
        with pytest.raises(NotSatisfiedError):
            c.validate("field", to_test)


def test_string_constraint_rejects_non_string():
    with pytest.raises(UnprocessableError):
        checks.starts_with("a").test(5)


def test_string_constraint_none_not_satisfied():
    with pytest.raises(NotSatisfiedError):
        checks.starts_with(None).test(None)


def test_regexp_match():
    c = checks.regexp_match(re.compile(r"\d+"))
    assert c.test("abc123") is None
    assert str(c) == r"Regexp(\d+)"
    with pytest.raises(NotSatisfiedError):
        c.test("abc")


def test_regexp_match_none_is_configuration_error():
    with pytest.raises(ConfigurationError):
        checks.regexp_match(None).test("abc")


def test_is_regexp():
    assert checks.IS_REGEXP.test("a+b") is None
    with pytest.raises(NotSatisfiedError):
        checks.IS_REGEXP.test("bad[")


def test_int_compare():
    c = checks.int_compare("gte", 5)
    assert c.type == "IntGTE"
    assert str(c) == "IntGTE(5)"
    assert c.test(5) is None
    with pytest.raises(NotSatisfiedError) as info:
        c.test(4)
    assert info.value.constraint is c


def test_int_compare_unknown_type():
    with pytest.raises(ValueError):
        checks.int_compare("between", 1)


def test_int_compare_none_parameter_and_value_pass():
    assert checks.int_compare(checks.EQ, None).test(3) is None
    assert checks.int_compare(checks.EQ, 3).test(None) is None


@pytest.mark.parametrize("bad", [True, 1.5, "1"])
def test_int_compare_rejects_non_int(bad):
    with pytest.raises(UnprocessableError):
        checks.int_compare(checks.EQ, 1).test(bad)


def test_int_between():
    c = checks.int_between(1, 3)
    assert c.type == "IntBetween"
    assert str(c) == "IntBetween(IntGTE(1), IntLTE(3))"
    assert c.test(2) is None
    with pytest.raises(NotSatisfiedError) as info:
        c.test(4)
    assert info.value.constraint.type == "IntLTE"


def test_uint_compare_rejects_negative():
    c = checks.uint_compare(checks.LT, 10)
    assert c.test(3) is None
    with pytest.raises(UnprocessableError):
        c.test(-1)


def test_uint_between():
    c = checks.uint_between(2, 4)
    assert c.test(4) is None
    with pytest.raises(NotSatisfiedError):
        c.test(1)


def test_float_compare_and_between():
    assert checks.float_compare(checks.NEQ, 1.0).test(2.0) is None
    with pytest.raises(UnprocessableError):
        checks.float_compare(checks.GT, 1.0).test(2)
    c = checks.float_between(0.5, 1.5)
    assert c.type == "FloatBetween"
    with pytest.raises(NotSatisfiedError):
        c.test(1.6)


def test_time_compare_and_between():
    base = datetime(2021, 1, 1, tzinfo=timezone.utc)
    assert checks.time_compare(checks.GT, base).test(base + timedelta(seconds=1)) is None
    with pytest.raises(NotSatisfiedError):
        checks.time_compare(checks.LT, base).test(base)
    with pytest.raises(UnprocessableError):
        checks.time_compare(checks.EQ, base).test("2021-01-01")
    c = checks.time_between(base, base + timedelta(days=1))
    assert c.test(base + timedelta(hours=1)) is None
    with pytest.raises(NotSatisfiedError):
        c.test(base - timedelta(hours=1))


def test_equals_and_not_equals():
    assert checks.equals("a").test("a") is None
    with pytest.raises(NotSatisfiedError):
        checks.equals("a").test("b")
    with pytest.raises(NotSatisfiedError):
        checks.equals("a").test(None)
    assert checks.not_equals("a").test("b") is None
    with pytest.raises(NotSatisfiedError):
        checks.not_equals("a").test("a")
    with pytest.raises(NotSatisfiedError):
        checks.not_equals("a").test(None)


def test_one_of():
    c = checks.one_of("red", "green")
    assert str(c) == "OneOf(red, green)"
    assert c.test("green") is None
    with pytest.raises(NotSatisfiedError):
        c.test("blue")
    with pytest.raises(NotSatisfiedError):
        c.test(3)
    with pytest.raises(NotSatisfiedError):
        c.test(None)


def test_one_of_converts_numbers():
    assert checks.one_of(1, 2).test(2.0) is None


def test_one_of_without_values():
    with pytest.raises(ConfigurationError):
        checks.one_of()


def test_length_single():
    c = checks.length(3)
    assert c.type == "LengthEquals"
    assert c.test("abc") is None
    with pytest.raises(NotSatisfiedError):
        c.test([1, 2])


def test_length_between():
    c = checks.length(1, 3)
    assert str(c) == "LengthBetween(1, 3)"
    assert c.test({"a": 1}) is None
    with pytest.raises(NotSatisfiedError):
        c.test("abcd")


def test_length_one_sided():
    assert checks.length(2, None).type == "LengthMin"
    assert checks.length(None, 2).type == "LengthMax"


@pytest.mark.parametrize("args", [(), (None, None), (1, 2, 3)])
def test_length_bad_arguments(args):
    with pytest.raises(ConfigurationError):
        checks.length(*args).test("a")


def test_min_max_length():
    assert checks.min_length(2).test("ab") is None
    with pytest.raises(NotSatisfiedError):
        checks.min_length(2).test(None)
    assert checks.max_length(1).test(None) is None
    with pytest.raises(NotSatisfiedError):
        checks.max_length(1).test("ab")


def test_length_rejects_unsized():
    with pytest.raises(UnprocessableError):
        checks.min_length(1).test(5)


def test_empty_and_non_empty():
    assert checks.EMPTY.test([]) is None
    assert checks.EMPTY.test(None) is None
    with pytest.raises(NotSatisfiedError):
        checks.EMPTY.test("x")
    assert checks.NON_EMPTY.test("x") is None
    with pytest.raises(NotSatisfiedError):
        checks.NON_EMPTY.test("")


def test_is_nil_and_not_nil():
    assert checks.IS_NIL.test(None) is None
    with pytest.raises(NotSatisfiedError):
        checks.IS_NIL.test(0)
    assert checks.IS_NOT_NIL.test(0) is None
    with pytest.raises(NotSatisfiedError):
        checks.IS_NOT_NIL.test(None)


def test_nil_and_not_nil_use_given_value():
    assert checks.nil_(None).test("ignored") is None
    with pytest.raises(NotSatisfiedError):
        checks.nil_(1).test(None)
    assert checks.not_nil(1).test(None) is None


@dataclass
class _Point:
    x: int = 0
    y: int = 0


@pytest.mark.parametrize("value", [None, 0, 0.0, "", b"", False, _Point()])
def test_is_zero(value):
    assert checks.IS_ZERO.test(value) is None
    with pytest.raises(NotSatisfiedError):
        checks.IS_NOT_ZERO.test(value)


@pytest.mark.parametrize("value", [1, "a", True, _Point(1, 0), []])
def test_is_not_zero(value):
    assert checks.IS_NOT_ZERO.test(value) is None
    with pytest.raises(NotSatisfiedError):
        checks.IS_ZERO.test(value)


def test_zero_and_not_zero_use_given_value():
    assert checks.zero(0).test("ignored") is None
    with pytest.raises(NotSatisfiedError):
        checks.not_zero(0).test(5)


def test_required():
    assert checks.REQUIRED.test("x") is None
    for value in (None, "", 0):
        with pytest.raises(NotSatisfiedError):
            checks.REQUIRED.test(value)


def test_or_with_nil_skips_optional_failure():
    c = or_(checks.IS_NIL, checks.min_length(3))
    assert c.test(None) is None
    with pytest.raises(NotSatisfiedError) as info:
        c.test("ab")
    assert info.value.constraint.type == "LengthMin"