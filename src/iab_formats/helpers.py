"""Helpers shared by the VAST and VMAP mappers.

Accessors for the attributed tree, value coercions applied to attribute
strings, and the post-mapping pruning of absent fields.
"""

import re
from enum import Enum
from typing import Any, TypeVar

from .exceptions import StructuralError
from .xml import TEXT_KEY


E = TypeVar("E", bound=Enum)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class Malformed:
    """Placeholder for a value whose raw text could not be coerced.

    The mappers never reject bad attribute values themselves; they leave a
    ``Malformed`` in the tree and the validators report it.
    """

    __slots__ = ("raw",)

    def __init__(self, raw: Any):
        self.raw = raw

    def __repr__(self) -> str:
        return f"Malformed({self.raw!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Malformed) and other.raw == self.raw

    def __hash__(self) -> int:
        return hash((Malformed, self.raw))


# Attributed tree accessors


def nodes(node: dict[str, Any] | None, key: str) -> list[Any]:
    """Return the child node list stored under ``key`` (empty if absent)."""
    if not isinstance(node, dict):
        return []
    value = node.get(key)
    return value if isinstance(value, list) else []


def first(node: dict[str, Any] | None, key: str) -> dict[str, Any] | None:
    """Return the first child node stored under ``key``."""
    children = nodes(node, key)
    return children[0] if children else None


def single(node: dict[str, Any] | None, key: str, path: str) -> dict[str, Any] | None:
    """Return the only child node stored under ``key``.

    Raises:
        StructuralError: If the element occurs more than once
    """
    children = nodes(node, key)
    if len(children) > 1:
        raise StructuralError(f"<{key}> can occur only once", path=path)
    return children[0] if children else None


def text(node: dict[str, Any] | None) -> str | None:
    """Return the text content of a node."""
    if not isinstance(node, dict):
        return None
    value = node.get(TEXT_KEY)
    return value if isinstance(value, str) else None


def child_text(node: dict[str, Any] | None, key: str) -> str | None:
    """Return the text content of the first child stored under ``key``."""
    return text(first(node, key))


def attr(node: dict[str, Any] | None, name: str) -> str | None:
    """Return a string attribute of a node."""
    if not isinstance(node, dict):
        return None
    value = node.get(name)
    return value if isinstance(value, str) else None


def has_payload(node: dict[str, Any], ignored: tuple[str, ...]) -> bool:
    """Whether a node carries anything besides its text and ``ignored`` keys."""
    return any(key not in ignored and key != TEXT_KEY for key in node)


# Coercions


def parse_int(value: str | None) -> int | Malformed | None:
    """Parse the leading base-10 integer of an attribute value.

    ``"640px"`` gives 640; text without leading digits gives ``Malformed``.
    """
    if value is None:
        return None
    match = _INT_PREFIX.match(value)
    if match is None:
        return Malformed(value)
    return int(match.group(1))


def parse_float(value: str | None) -> float | Malformed | None:
    """Parse the leading decimal number of a text value."""
    if value is None:
        return None
    match = _FLOAT_PREFIX.match(value)
    if match is None:
        return Malformed(value)
    return float(match.group(1))


def parse_flag(value: str | None) -> bool | None:
    """Permissive boolean: only the literal ``"false"`` is falsy.

    Any other string, garbage included, is ``True``.
    """
    if value is None:
        return None
    return value != "false"


def parse_tristate(value: str | None) -> bool | Malformed | None:
    """Strict boolean: ``"true"``/``"false"``, absent, or ``Malformed``."""
    if value is None:
        return None
    if value == "true":
        return True
    if value == "false":
        return False
    return Malformed(value)


def lookup_enum(enum_cls: type[E], token: str | None) -> E | Malformed | None:
    """Map an XML enumeration token to its enum member.

    Unknown tokens are kept as ``Malformed`` for the validators to reject.
    """
    if token is None:
        return None
    try:
        return enum_cls(token)
    except ValueError:
        return Malformed(token)


# Post-processing


def prune(value: Any) -> Any:
    """Recursively drop ``None`` values from mappings.

    Idempotent: pruning a pruned tree returns an equal tree.
    """
    if isinstance(value, dict):
        return {key: prune(item) for key, item in value.items() if item is not None}
    if isinstance(value, list):
        return [prune(item) for item in value]
    return value


__all__ = [
    "Malformed",
    "nodes",
    "first",
    "single",
    "text",
    "child_text",
    "attr",
    "has_payload",
    "parse_int",
    "parse_float",
    "parse_flag",
    "parse_tristate",
    "lookup_enum",
    "prune",
]
