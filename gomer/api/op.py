"""HTTP operations encoded as a single byte: method, resource category and creator."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Protocol

STATUS_LIMIT_EXCEEDED = 402


class StatusCoder(Protocol):
    """Anything that can report an HTTP status code."""

    def status_code(self) -> int: ...


class Category(str, Enum):
    """The kind of resource an operation applies to."""

    COLLECTION = "Collection"
    INSTANCE = "Instance"
    NONE = ""


class Method(IntEnum):
    """Built-in HTTP methods (the low five bits of an Op)."""

    NO_METHOD = 0
    PUT = 1
    POST = 2
    GET = 3
    PATCH = 4
    DELETE = 5
    HEAD = 6
    OPTIONS = 7


METHOD_BITS_COUNT = 5
METHOD_MASK = (1 << METHOD_BITS_COUNT) - 1

_METHOD_NAMES = ("", "PUT", "POST", "GET", "PATCH", "DELETE", "HEAD", "OPTIONS") + ("",) * (
    (1 << METHOD_BITS_COUNT) - 8
)

CATEGORY_BITS_COUNT = 2
_NO_RESOURCE = 0 << METHOD_BITS_COUNT
_COLLECTION = 1 << METHOD_BITS_COUNT
_INSTANCE = 2 << METHOD_BITS_COUNT
CATEGORY_MASK = ((1 << CATEGORY_BITS_COUNT) - 1) << METHOD_BITS_COUNT

BUILT_IN = 0 << (METHOD_BITS_COUNT + CATEGORY_BITS_COUNT)
CUSTOMER = 1 << (METHOD_BITS_COUNT + CATEGORY_BITS_COUNT)
CREATOR_TYPE_MASK = 1 << (METHOD_BITS_COUNT + CATEGORY_BITS_COUNT)

INVALID_HTTP_OP = 0

_CATEGORY_BITS = {Category.COLLECTION: _COLLECTION, Category.INSTANCE: _INSTANCE}
_BITS_CATEGORY = {_COLLECTION: Category.COLLECTION, _INSTANCE: Category.INSTANCE}


class Op(int):
    """An operation: method bits, category bits and a built-in/customer flag."""

    def is_valid(self) -> bool:
        return int(self) != INVALID_HTTP_OP

    def method_name(self) -> str:
        return _METHOD_NAMES[self & METHOD_MASK]

    def category(self) -> Category:
        return _BITS_CATEGORY.get(self & CATEGORY_MASK, Category.NONE)

    def is_built_in(self) -> bool:
        return self & CREATOR_TYPE_MASK == BUILT_IN

    def __repr__(self) -> str:
        return f"Op({int(self):#010b})"


def new_op(method: int, category: Category) -> Op:
    """Build a customer-defined operation; an invalid Op if the bits do not fit."""
    rt_bits = _CATEGORY_BITS.get(category, _NO_RESOURCE)
    if int(method) & ~METHOD_MASK or rt_bits & ~CATEGORY_MASK:
        return Op(INVALID_HTTP_OP)
    return Op(CUSTOMER | rt_bits | int(method))


PUT_COLLECTION = Op(Method.PUT + _COLLECTION)
POST_COLLECTION = Op(Method.POST + _COLLECTION)
GET_COLLECTION = Op(Method.GET + _COLLECTION)
PATCH_COLLECTION = Op(Method.PATCH + _COLLECTION)
DELETE_COLLECTION = Op(Method.DELETE + _COLLECTION)
HEAD_COLLECTION = Op(Method.HEAD + _COLLECTION)
OPTIONS_COLLECTION = Op(Method.OPTIONS + _COLLECTION)

PUT_INSTANCE = Op(Method.PUT + _INSTANCE)
POST_INSTANCE = Op(Method.POST + _INSTANCE)
GET_INSTANCE = Op(Method.GET + _INSTANCE)
PATCH_INSTANCE = Op(Method.PATCH + _INSTANCE)
DELETE_INSTANCE = Op(Method.DELETE + _INSTANCE)
HEAD_INSTANCE = Op(Method.HEAD + _INSTANCE)
OPTIONS_INSTANCE = Op(Method.OPTIONS + _INSTANCE)