"""Base64 tool functions and the registry of named tool functions."""

from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import Any, Callable

from gomer.errors import ConfigurationError, UnprocessableError

ToolFunction = Callable[..., Any]

_tool_functions: dict[str, ToolFunction] = {}


class Encoding(Enum):
    """Base64 variants: standard or URL alphabet, padded or raw."""

    STD = "std"
    RAW_STD = "raw_std"
    URL = "url"
    RAW_URL = "raw_url"

    @property
    def url_safe(self) -> bool:
        return self in (Encoding.URL, Encoding.RAW_URL)

    @property
    def padded(self) -> bool:
        return self in (Encoding.STD, Encoding.URL)


def register_tool_function(name: str, function: ToolFunction) -> None:
    """Register a tool function under a '$'-prefixed name."""
    if len(name) < 2 or not name.startswith("$"):
        raise ConfigurationError("Tool function names must start with a '$' and have at least 2 characters: " + name)
    if name in _tool_functions:
        raise ConfigurationError("Tool function already registered: " + name)
    _tool_functions[name] = function


def get_tool_function(name: str) -> ToolFunction | None:
    """The registered tool function, or None."""
    return _tool_functions.get(name)


def _encode(encoding: Encoding, data: bytes) -> str:
    encoded = base64.urlsafe_b64encode(data) if encoding.url_safe else base64.b64encode(data)
    if not encoding.padded:
        encoded = encoded.rstrip(b"=")
    return encoded.decode("ascii")


def _decode(encoding: Encoding, data: bytes) -> bytes:
    data = bytes(data).replace(b"\r", b"").replace(b"\n", b"")
    foreign = b"+/" if encoding.url_safe else b"-_"
    if any(c in foreign for c in data):
        raise binascii.Error("character outside the alphabet")
    if not encoding.padded:
        if b"=" in data:
            raise binascii.Error("unexpected padding")
        data += b"=" * (-len(data) % 4)
    if encoding.url_safe:
        data = data.translate(bytes.maketrans(b"-_", b"+/"))
    return base64.b64decode(data, validate=True)


def b64_decoder(encoding: Encoding) -> ToolFunction:
    """A tool function decoding a bytes field value."""

    def _decoder(obj: Any, value: Any, context: Any = None) -> bytes:
        if not isinstance(value, (bytes, bytearray)):
            raise ConfigurationError(
                "b64Decode requires input value to already be bytes, not " + type(value).__name__
            )
        try:
            return _decode(encoding, value)
        except (binascii.Error, ValueError) as err:
            raise UnprocessableError("Unable to base64 decode the given data", value) from err

    return _decoder


def b64_encoder(encoding: Encoding) -> ToolFunction:
    """A tool function encoding a bytes field value to text."""

    def _encoder(obj: Any, value: Any, context: Any = None) -> str:
        if not isinstance(value, (bytes, bytearray)):
            raise UnprocessableError("Field type must be 'bytes'", type(value).__name__)
        return _encode(encoding, bytes(value))

    return _encoder


for _name, _encoding in {
    "B64": Encoding.STD,
    "B64Raw": Encoding.RAW_STD,
    "B64Url": Encoding.URL,
    "B64RawUrl": Encoding.RAW_URL,
}.items():
    _suffix = _name[len("B64"):]
    register_tool_function(f"$_b64{_suffix}Decode", b64_decoder(_encoding))
    register_tool_function(f"$_b64{_suffix}Encode", b64_encoder(_encoding))