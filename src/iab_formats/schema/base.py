"""Shared pydantic plumbing for the VAST and VMAP schemas.

Schemas are closed: every model forbids unknown fields unless it opts out.
Field names are snake_case in Python and camelCase in documents.
"""

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake

from ..exceptions import ValidationError, ValidationIssue


M = TypeVar("M", bound=BaseModel)


class SchemaModel(BaseModel):
    """Base class of every document model."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        frozen=True,
    )


def discriminator(field: str) -> Callable[[Any], str | None]:
    """Build a callable discriminator reading the tag stored under ``field``.

    Tags are the string values of the enum members, so error locations read
    ``ads[0].inline.adTitle`` whatever form the tag was given in. Typed models,
    as met when dumping, are read through their attribute.
    """
    attribute = to_snake(field)

    def get_tag(value: Any) -> str | None:
        if isinstance(value, BaseModel):
            tag = getattr(value, attribute, None)
        elif isinstance(value, dict):
            tag = value.get(field)
        else:
            tag = None
        if isinstance(tag, Enum):
            return tag.value
        return tag if isinstance(tag, str) else None

    return get_tag


def format_loc(loc: tuple[int | str, ...]) -> str:
    """Format a pydantic error location as a document path.

    >>> format_loc(("ads", 0, "inline", "impressions", 1, "uri"))
    'ads[0].inline.impressions[1].uri'
    """
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def validate_document(model_cls: type[M], document: Any, kind: str) -> M:
    """Validate a mapped document against a schema model.

    Args:
        model_cls: Root model of the schema
        document: Mapped (pruned) document tree
        kind: Document kind, for error context

    Returns:
        The typed document

    Raises:
        ValidationError: With every violation found
    """
    try:
        return model_cls.model_validate(document)
    except pydantic.ValidationError as e:
        details = [
            ValidationIssue(path=format_loc(error["loc"]), message=error["msg"])
            for error in e.errors(include_url=False)
        ]
        raise ValidationError(details, context={"document_kind": kind}) from e


def to_document(model: BaseModel) -> dict[str, Any]:
    """Dump a typed document back to its value tree, absent fields omitted."""
    return model.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "SchemaModel",
    "discriminator",
    "format_loc",
    "validate_document",
    "to_document",
]
