"""Error types shared across the package."""

from __future__ import annotations

from typing import Any, Iterable


class GomerError(Exception):
    """Base error carrying a message and a set of named attributes."""

    def __init__(self, message: str = "", **attributes: Any) -> None:
        super().__init__(message)
        self.message = message
        self.attributes: dict[str, Any] = dict(attributes)

    def add_attribute(self, key: str, value: Any) -> "GomerError":
        """Add an attribute; if the key is taken, the value goes under a numbered key."""
        name = key
        suffix = 2
        while name in self.attributes:
            name = f"{key}_{suffix}"
            suffix += 1
        self.attributes[name] = value
        return self

    def replace_attribute(self, key: str, value: Any) -> "GomerError":
        """Set an attribute, overwriting any existing value."""
        self.attributes[key] = value
        return self

    def attribute(self, key: str) -> Any:
        """Return the attribute's value, or None when it is absent."""
        return self.attributes.get(key)

    def __str__(self) -> str:
        text = self.message or type(self).__name__
        if self.attributes:
            details = ", ".join(f"{k}={v!r}" for k, v in self.attributes.items())
            text = f"{text} ({details})"
        return text


class ConfigurationError(GomerError):
    """The application is configured incorrectly."""


class UnprocessableError(GomerError):
    """A value cannot be processed."""

    def __init__(self, reason: str, value: Any = None) -> None:
        super().__init__(reason)
        self.value = value


class BadValueError(GomerError):
    """A named value is not acceptable."""

    def __init__(self, name: str, value: Any, *, expected: Any = None, kind: str = "Invalid") -> None:
        super().__init__(f"{kind} value for {name}")
        self.name = name
        self.value = value
        self.expected = expected
        self.kind = kind


class NotFoundError(GomerError):
    """A referenced item does not exist."""

    def __init__(self, type_: str, id_: Any) -> None:
        super().__init__(f"{type_} not found: {id_}")
        self.type = type_
        self.id = id_


class InternalError(GomerError):
    """An unexpected internal failure."""


class DependencyError(GomerError):
    """A call to an external service failed."""

    def __init__(self, service: str, request: Any = None) -> None:
        super().__init__(f"Dependency failure: {service}")
        self.service = service
        self.request = request


class MarshalError(GomerError):
    """A value cannot be serialised."""

    def __init__(self, name: str, value: Any = None) -> None:
        super().__init__(name)
        self.name = name
        self.value = value


class UnmarshalError(GomerError):
    """Data cannot be deserialised."""

    def __init__(self, name: str, data: Any = None, target: Any = None) -> None:
        super().__init__(name)
        self.name = name
        self.data = data
        self.target = target


class BatchError(GomerError):
    """Several errors reported together."""

    def __init__(self, errors: Iterable[GomerError]) -> None:
        self.errors: list[GomerError] = list(errors)
        super().__init__(f"{len(self.errors)} errors")

    def __str__(self) -> str:
        return "; ".join(str(e) for e in self.errors)


class NotSatisfiedError(GomerError):
    """A tested value does not satisfy a constraint."""

    def __init__(self, to_test: Any, target: str = "", constraint: Any = None) -> None:
        super().__init__("Constraint not satisfied")
        self.to_test = to_test
        self.target = target
        self.constraint = constraint

    def __str__(self) -> str:
        what = str(self.constraint) if self.constraint is not None else "constraint"
        where = f" at {self.target}" if self.target else ""
        return f"{what} not satisfied{where} by {self.to_test!r}"


def batcher(errors: Iterable[GomerError]) -> GomerError | None:
    """Combine errors: None for none, the error itself for one, a BatchError otherwise."""
    collected = list(errors)
    if not collected:
        return None
    if len(collected) == 1:
        return collected[0]
    return BatchError(collected)