"""Binding configuration shared by the input and output tools."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable

IN_KEY = "$_gomer_bind_in"
OUT_KEY = "$_gomer_bind_out"

SKIP_FIELD = "-"
INCLUDE_FIELD = "+"

OMIT_EMPTY = "omitempty"
INCLUDE_EMPTY = "includeempty"


def pascal_case(field_name: str) -> str:
    """Field names are already in PascalCase."""
    return field_name


def camel_case(field_name: str) -> str:
    """Lower-case an initial ASCII capital letter."""
    if not field_name:
        return field_name
    first = field_name[0]
    if "A" <= first <= "Z":
        first = first.lower()
    return first + field_name[1:]


@dataclass
class Configuration:
    """How directives and empty values are handled, and how names are cased."""

    empty_directive: str = SKIP_FIELD
    empty_value: str = OMIT_EMPTY
    to_case: Callable[[str], str] = pascal_case
    extension: Any = None

    def _apply(self, options: tuple[Callable[["Configuration"], None], ...]) -> "Configuration":
        for option in options:
            option(self)
        return self


Option = Callable[[Configuration], None]


def new_configuration(*options: Option) -> Configuration:
    """A default configuration with the given options applied."""
    return Configuration()._apply(options)


def copy_configuration_with_options(config: Configuration, *options: Option) -> Configuration:
    """A copy of config with the given options applied; config is unchanged."""
    return dataclasses.replace(config)._apply(options)


def empty_directive_skips_field(config: Configuration) -> None:
    config.empty_directive = SKIP_FIELD


def empty_directive_includes_field(config: Configuration) -> None:
    config.empty_directive = INCLUDE_FIELD


def omit_empty(config: Configuration) -> None:
    config.empty_value = OMIT_EMPTY


def include_empty(config: Configuration) -> None:
    config.empty_value = INCLUDE_EMPTY


def pascal_case_data(config: Configuration) -> None:
    config.to_case = pascal_case


def camel_case_data(config: Configuration) -> None:
    config.to_case = camel_case


def extends_with(extension: Any) -> Option:
    """An option installing an extension; fails if one is already configured."""

    def _option(config: Configuration) -> None:
        if config.extension is not None:
            raise ValueError(
                "Configuration already has an extension configured. Consider chaining if more than one is needed."
            )
        config.extension = extension

    return _option