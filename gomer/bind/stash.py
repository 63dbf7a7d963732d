"""Stashing values that have no field of their own, and restoring them into nested mappings."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable

from gomer.errors import UnprocessableError

InclusionPredicate = Callable[[str, Any, Any], bool]
UnstashConflictResolver = Callable[[Any, Any], Any]


def _title(key: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in key.split(" "))


def _field_names(obj: Any) -> set[str]:
    if dataclasses.is_dataclass(obj):
        return {f.name for f in dataclasses.fields(obj)}
    return set(getattr(obj, "__dict__", {}))


def is_field(key: str, value: Any, obj: Any) -> bool:
    """Whether obj has a field named key, or key with its words capitalised."""
    names = _field_names(obj)
    return key in names or _title(key) in names


def is_not_field(key: str, value: Any, obj: Any) -> bool:
    """The negation of is_field."""
    return not is_field(key, value, obj)


def all_(key: str, value: Any, obj: Any) -> bool:
    """Include everything."""
    return True


def name_matches(*names: str) -> InclusionPredicate:
    """Include only the given keys."""
    wanted = frozenset(names)
    return lambda key, _value, _obj: key in wanted


def if_all(*predicates: InclusionPredicate) -> InclusionPredicate:
    """Include when every predicate includes."""
    return lambda key, value, obj: all(p(key, value, obj) for p in predicates)


def if_any(*predicates: InclusionPredicate) -> InclusionPredicate:
    """Include when any predicate includes."""
    return lambda key, value, obj: any(p(key, value, obj) for p in predicates)


def use_stashed(stashed: Any, destination: Any) -> Any:
    """Conflict resolution that keeps the stashed value."""
    return stashed


def stash(data: Any, obj: Any, include: InclusionPredicate) -> dict[str, Any] | None:
    """The entries of data that include accepts (given obj), or None when there is no data."""
    if data is None:
        return None
    if not isinstance(data, Mapping):
        raise UnprocessableError("Expected data map", type(data).__name__)
    return {str(key): value for key, value in data.items() if include(str(key), value, obj)}


def _descend(
    destination: MutableMapping[str, Any], path: str, create_intermediates: bool
) -> MutableMapping[str, Any] | None:
    current = destination
    for part in path.split(".") if path else []:
        nxt = current.get(part)
        if nxt is None:
            if not create_intermediates:
                return None
            nxt = current[part] = {}
        elif not isinstance(nxt, MutableMapping):
            return None
        current = nxt
    return current


def _items(value: Any) -> list[tuple[str, Any]] | None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return [(f.name, getattr(value, f.name)) for f in dataclasses.fields(value)]
    if isinstance(value, Mapping):
        return [(str(k), v) for k, v in value.items()]
    return None


def unstash(
    values: Mapping[str, Any] | None,
    destination: MutableMapping[str, Any],
    path: str,
    include: InclusionPredicate,
    create_intermediates: bool,
) -> None:
    """Write values into destination at the dotted path.

    Dataclass and mapping values are written as nested mappings holding only the members
    that include accepts; other values are written as they are.
    """
    if values is None:
        return
    if not isinstance(values, Mapping):
        raise UnprocessableError("Expected data map", type(values).__name__)

    target = _descend(destination, path, create_intermediates)
    if target is None:
        return

    for key, value in values.items():
        key = str(key)
        members = _items(value)
        if members is None:
            target[key] = value
            continue
        item_target = _descend(target, key, create_intermediates)
        if item_target is None:
            continue
        for name, member in members:
            if include(name, member, value):
                item_target[name] = member