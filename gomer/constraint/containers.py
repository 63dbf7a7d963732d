"""Constraints over maps, sequences and value types."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from gomer.constraint.base import Constraint, dynamic_if_needed
from gomer.errors import GomerError, NotSatisfiedError, UnprocessableError, batcher

# When True, contained targets render as "Foo.S[3]" / "Foo.M[cat]"; otherwise "Foo.S.3" / "Foo.M.cat".
USE_BRACKETS_FOR_CONTAINED_TARGETS = False


@dataclass(frozen=True)
class Entry:
    """A single key/value pair of a mapping, as handed to an entries constraint."""

    key: Any
    value: Any


def _format_key(key: Any) -> str:
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _contained(target: str) -> str:
    return f"[{target}]" if USE_BRACKETS_FOR_CONTAINED_TARGETS else target


def _raise_collected(errors: list[GomerError]) -> None:
    error = batcher(errors)
    if error is not None:
        raise error


def map_(key_constraint: Constraint | None, value_constraint: Constraint | None) -> Constraint:
    """Apply key_constraint to every key and value_constraint to every value of a mapping."""

    def _test(to_test: Any) -> None:
        if to_test is None:
            return
        if not isinstance(to_test, Mapping):
            raise UnprocessableError("Test value is not a map", to_test)

        errors: list[GomerError] = []
        for key, value in to_test.items():
            target = _format_key(key)
            if key_constraint is not None:
                try:
                    key_constraint.validate(target, key)
                except GomerError as ge:
                    errors.append(ge)
            if value_constraint is not None:
                try:
                    value_constraint.validate(_contained(target), value)
                except GomerError as ge:
                    errors.append(ge)
        _raise_collected(errors)

    return dynamic_if_needed(Constraint("Map", None, _test), key_constraint, value_constraint)


def map_keys(key_constraint: Constraint) -> Constraint:
    """Apply key_constraint to every key of a mapping."""
    return map_(key_constraint, None)


def map_values(value_constraint: Constraint) -> Constraint:
    """Apply value_constraint to every value of a mapping."""
    return map_(None, value_constraint)


def entries(entry_constraint: Constraint) -> Constraint:
    """Apply entry_constraint to an Entry built from each key/value pair of a mapping."""

    def _test(to_test: Any) -> None:
        if to_test is None:
            return
        if not isinstance(to_test, Mapping):
            raise UnprocessableError("Test value is not a map", to_test)

        errors: list[GomerError] = []
        for key, value in to_test.items():
            try:
                entry_constraint.validate(_contained(_format_key(key)), Entry(key, value))
            except GomerError as ge:
                errors.append(ge)
        _raise_collected(errors)

    return dynamic_if_needed(Constraint("Entries", None, _test), entry_constraint)


def elements(constraint: Constraint) -> Constraint:
    """Apply constraint to every element of a sequence."""

    def _test(to_test: Any) -> None:
        if to_test is None:
            return
        if not isinstance(to_test, Sequence) or isinstance(to_test, str):
            raise UnprocessableError("Input is not a slice or array", to_test)

        errors: list[GomerError] = []
        for index, element in enumerate(to_test):
            try:
                constraint.validate(_contained(str(index)), element)
            except GomerError as ge:
                errors.append(ge)
        _raise_collected(errors)

    return dynamic_if_needed(Constraint("Elements", None, _test), constraint)


def type_of(value: Any) -> Constraint:
    """Satisfied when the tested value has exactly the given type (or the type of the given value)."""
    expected = value if isinstance(value, type) else type(value)

    def _test(to_test: Any) -> None:
        if type(to_test) is not expected:
            raise NotSatisfiedError(to_test)

    return Constraint("TypeOf", expected.__name__, _test)