"""VMAP 1.0 schema.

The ad source is a tagged union on ``dataType``. Inline VAST payloads are
checked by the VAST schema itself: ``VASTAdData`` is a ``VastDocument``.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Discriminator, Field, Tag

from ..definitions.vmap import (
    AdBreakType,
    AdSourceType,
    AdTagTemplate,
    BreakTrackingEvent,
    CustomAdDataTemplate,
)
from ..patterns import TIME_OFFSET_PATTERN, TIME_PATTERN, URI_PATTERN, VMAP_VERSION_PATTERN
from .base import SchemaModel, discriminator, validate_document
from .vast import VastDocument


Uri = Annotated[str, Field(pattern=URI_PATTERN)]
Payload = Union[str, dict[str, Any]]


class BreakTracking(SchemaModel):
    uri: Uri
    level: BreakTrackingEvent


class BreakExtension(SchemaModel):
    """Extension of an ad break, typed by its ``type`` attribute (usually a URI)."""

    extension_type: str = Field(min_length=1)
    value: Payload


class _AdSource(SchemaModel):
    id: str | None = Field(default=None, min_length=1)
    allow_multiple_ads: bool = True
    follow_redirects: bool | None = None


class VastAdSource(_AdSource):
    data_type: Literal[AdSourceType.VAST3]
    vast_ad_data: VastDocument = Field(alias="VASTAdData")


class CustomAdSource(_AdSource):
    data_type: Literal[AdSourceType.CUSTOM]
    custom_ad_data: Payload
    ad_data_type: CustomAdDataTemplate


class AdTagUriAdSource(_AdSource):
    data_type: Literal[AdSourceType.AD_TAG_URI]
    ad_tag_uri: Uri = Field(alias="adTagURI")
    ad_data_type: AdTagTemplate


AdSource = Annotated[
    Union[
        Annotated[VastAdSource, Tag(AdSourceType.VAST3.value)],
        Annotated[CustomAdSource, Tag(AdSourceType.CUSTOM.value)],
        Annotated[AdTagUriAdSource, Tag(AdSourceType.AD_TAG_URI.value)],
    ],
    Discriminator(discriminator("dataType")),
]


class AdBreak(SchemaModel):
    """Placement opportunity of the playlist."""

    time_offset: str = Field(pattern=TIME_OFFSET_PATTERN)
    break_types: list[AdBreakType] = Field(min_length=1)
    source: AdSource | None = None
    trackings: list[BreakTracking] | None = None
    extensions: list[BreakExtension] | None = None
    id: str | None = None
    repeat_after: str | None = Field(default=None, pattern=TIME_PATTERN)


class VmapDocument(SchemaModel):
    """Validated VMAP document."""

    version: str = Field(pattern=VMAP_VERSION_PATTERN)
    breaks: list[AdBreak]


def validate_vmap(document: Any) -> VmapDocument:
    """Validate a mapped VMAP document, embedded VAST documents included.

    Raises:
        ValidationError: With every violation found in the document
    """
    return validate_document(VmapDocument, document, "VMAP")


__all__ = [
    "BreakTracking",
    "BreakExtension",
    "VastAdSource",
    "CustomAdSource",
    "AdTagUriAdSource",
    "AdSource",
    "AdBreak",
    "VmapDocument",
    "validate_vmap",
]
