"""Core constraint type and logical combinators."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable

from gomer.errors import BatchError, ConfigurationError, GomerError, NotSatisfiedError, batcher

TestFunction = Callable[[Any], None]

AND_OP = "And"
OR_OP = "Or"
NOT_OP = "Not"


class Constraint:
    """A named test applied to a value; failures are raised as GomerError."""

    def __init__(self, type_: str, params: Any, test_fn: TestFunction) -> None:
        self.type = type_
        self.params = params
        self._test_fn = test_fn

    def test(self, to_test: Any) -> None:
        """Raise if to_test does not satisfy the constraint."""
        try:
            self._test_fn(to_test)
        except NotSatisfiedError as nse:
            if nse.constraint is None:  # keep the most specific constraint
                nse.constraint = self
            raise

    def validate(self, target: str, to_test: Any) -> None:
        """Like test, but errors are labelled with the target's name."""
        try:
            self.test(to_test)
        except BatchError as be:
            _batch_update_target(target, be)
            raise
        except GomerError as ge:
            _update_target(target, ge)
            raise

    def __str__(self) -> str:
        if self.params is None:
            return self.type
        return f"{self.type}({_parameters_to_string(self.params)})"

    def __repr__(self) -> str:
        return f"<Constraint {self}>"


class DynamicConstraint(Constraint):
    """A constraint whose parameters are filled in from the validated object."""

    def __init__(self, constraint: Constraint, dynamic_values: dict[str, Any]) -> None:
        super().__init__(constraint.type, constraint.params, constraint.test)
        self.constraint = constraint
        self.dynamic_values = dict(dynamic_values)

    def __str__(self) -> str:
        return str(self.constraint)


def _batch_update_target(target: str, be: BatchError) -> None:
    for ge in be.errors:
        if isinstance(ge, BatchError):
            _batch_update_target(target, ge)
        else:
            _update_target(target, ge)


def _update_target(validation_target: str, ge: GomerError) -> None:
    if isinstance(ge, NotSatisfiedError):
        target = ge.target or ""
    else:
        target = ge.attribute("Target") or ""

    if validation_target == "":
        validation_target = '""'

    if target == "":
        target = validation_target
    elif target.startswith("["):
        target = validation_target + target
    else:
        target = validation_target + "." + target

    if isinstance(ge, NotSatisfiedError):
        ge.target = target
    else:
        ge.replace_attribute("Target", target)


def _rfc3339(value: datetime) -> str:
    text = value.replace(microsecond=0).isoformat()
    if value.tzinfo is None:
        return text + "Z"
    if value.utcoffset() == timezone.utc.utcoffset(None):
        return text[: -len("+00:00")] + "Z"
    return text


def _parameters_to_string(value: Any) -> str:
    if value is None:
        return "<nil>"
    if isinstance(value, (list, tuple)):
        return ", ".join(_parameters_to_string(v) for v in value)
    if isinstance(value, datetime):
        return _rfc3339(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def dynamic_if_needed(new_constraint: Constraint, *constraints: Constraint | None) -> Constraint:
    """Wrap new_constraint as dynamic if any of the given constraints is dynamic."""
    collected: dict[str, Any] = {}
    for c in constraints:
        if isinstance(c, DynamicConstraint):
            for key, value in c.dynamic_values.items():
                if key in collected and collected[key] is not value:
                    raise ValueError("duplicate key for dynamic attributes: " + key)
                collected[key] = value
    if collected:
        return DynamicConstraint(new_constraint, collected)
    return new_constraint


def and_(*constraints: Constraint) -> Constraint:
    """Satisfied when every operand is satisfied; stops at the first failure."""
    if not constraints:
        raise ValueError("'And' requires at least one constraint")
    if len(constraints) == 1:
        return constraints[0]

    def _test(to_test: Any) -> None:
        for operand in constraints:
            try:
                operand.test(to_test)
            except NotSatisfiedError as nse:
                if nse.constraint is None:
                    nse.constraint = operand
                raise
            except GomerError as ge:
                if "Constraint" not in ge.attributes:
                    ge.add_attribute("Constraint", operand)
                raise

    return dynamic_if_needed(Constraint(AND_OP, tuple(constraints), _test), *constraints)


def or_(*constraints: Constraint) -> Constraint:
    """Satisfied when any operand is satisfied."""
    if not constraints:
        raise ValueError("'Or' requires at least one constraint")
    if len(constraints) == 1:
        return constraints[0]

    def _test(to_test: Any) -> None:
        errors: list[GomerError] = []
        for operand in constraints:
            try:
                operand.test(to_test)
            except NotSatisfiedError as nse:
                if nse.constraint is None:
                    nse.constraint = operand
                elif nse.constraint.type in ("IsNil", "IsZero"):
                    # "or(nil,...)" marks an optional value; its failure is not worth reporting.
                    continue
                elif isinstance(operand, DynamicConstraint):
                    nse.constraint = operand
                errors.append(nse)
            except GomerError as ge:
                if "Constraint" not in ge.attributes:
                    ge.add_attribute("Constraint", operand)
                errors.append(ge)
            else:
                return
        error = batcher(errors)
        if error is not None:
            raise error

    return dynamic_if_needed(Constraint(OR_OP, tuple(constraints), _test), *constraints)


def not_(constraint: Constraint) -> Constraint:
    """Satisfied when the operand fails."""

    def _test(to_test: Any) -> None:
        try:
            constraint.test(to_test)
        except GomerError:
            return
        raise NotSatisfiedError(to_test)

    return dynamic_if_needed(Constraint(NOT_OP, constraint, _test), constraint)


def success(msg: str) -> Constraint:
    """A constraint that always passes."""
    return Constraint("Success: " + msg, None, lambda _: None)


def fail(msg: str) -> Constraint:
    """A constraint that never passes."""

    def _test(to_test: Any) -> None:
        raise NotSatisfiedError(to_test)

    return Constraint(msg, None, _test)


def configuration_error(problem: str) -> Constraint:
    """A constraint that reports a configuration problem whenever tested."""

    def _test(_: Any) -> None:
        raise ConfigurationError(problem)

    return Constraint(problem, None, _test)