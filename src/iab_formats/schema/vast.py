"""VAST 3 schema.

Closed pydantic models checked against a mapped VAST document. Fields that
are legal for one ad type only live on the matching variant (``InlineAd`` or
``WrapperAd``), so any field of the other variant is rejected as unknown.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Discriminator, Field, Tag, model_validator

from ..definitions.vast import (
    AdPricingModel,
    AdType,
    CreativeType,
    DeliveryType,
    TrackingEventType,
)
from ..patterns import (
    CURRENCY_PATTERN,
    TIME_OR_PERCENT_PATTERN,
    TIME_PATTERN,
    VAST_URI_PATTERN,
    VAST_VERSION_PATTERN,
)
from .base import SchemaModel, discriminator, validate_document


Uri = Annotated[str, Field(pattern=VAST_URI_PATTERN)]
Extension = dict[str, Any]


class AdSystem(SchemaModel):
    """Ad server that returned the ad."""

    name: str
    version: str | None = None


class Impression(SchemaModel):
    uri: Uri
    id: str | None = None


class Pricing(SchemaModel):
    """Price of the ad, inline ads only."""

    value: float = Field(ge=0)
    model: AdPricingModel
    currency: str = Field(pattern=CURRENCY_PATTERN)


class AdParameters(SchemaModel):
    """Data passed to the video ad.

    XML-encoded parameters are the raw parameters node, others are a string.
    """

    xml_encoded: bool
    value: Any = None

    @model_validator(mode="before")
    @classmethod
    def default_value(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("value") is None:
            data = {**data, "value": {} if data.get("xmlEncoded") is True else ""}
        return data

    @model_validator(mode="after")
    def check_value_type(self) -> "AdParameters":
        if self.xml_encoded and not isinstance(self.value, dict):
            raise ValueError("XML-encoded parameters must be an object")
        if not self.xml_encoded and not isinstance(self.value, str):
            raise ValueError("parameters must be a string")
        return self


class TrackingEvent(SchemaModel):
    event: TrackingEventType
    uri: Uri
    offset: str | None = Field(default=None, pattern=TIME_OR_PERCENT_PATTERN)

    @model_validator(mode="after")
    def check_offset(self) -> "TrackingEvent":
        """Offset is required for progress events and forbidden otherwise."""
        if self.event is TrackingEventType.PROGRESS and self.offset is None:
            raise ValueError("offset is required for progress events")
        if self.event is not TrackingEventType.PROGRESS and self.offset is not None:
            raise ValueError(f"offset is not allowed for {self.event.value} events")
        return self


class ClickTracking(SchemaModel):
    """Click-through, click-tracking or custom-click URI."""

    uri: Uri
    id: str | None = None


class VideoClicks(SchemaModel):
    click_through: ClickTracking | None = None
    click_trackings: list[ClickTracking] | None = None
    custom_clicks: list[ClickTracking] | None = None


class MediaFile(SchemaModel):
    """Video file of a linear creative.

    Carries either a fixed ``bitrate`` or a ``minBitrate``/``maxBitrate``
    range, never both and never half a range.
    """

    uri: str = Field(min_length=1)
    delivery: DeliveryType
    mimetype: str
    width: int
    height: int
    id: str | None = None
    bitrate: int | None = Field(default=None, gt=0)
    min_bitrate: int | None = Field(default=None, gt=0)
    max_bitrate: int | None = Field(default=None, gt=0)
    codec: str | None = None
    scalable: bool | None = None
    maintain_aspect_ratio: bool | None = None
    api_framework: str | None = None

    @model_validator(mode="after")
    def check_bitrates(self) -> "MediaFile":
        has_range = self.min_bitrate is not None or self.max_bitrate is not None
        if self.bitrate is not None and has_range:
            raise ValueError("bitrate cannot be combined with minBitrate/maxBitrate")
        if (self.min_bitrate is None) != (self.max_bitrate is None):
            raise ValueError("minBitrate and maxBitrate must be given together")
        return self


class _Creative(SchemaModel):
    creative_type: CreativeType
    extensions: list[Extension] | None = None
    trackings: list[TrackingEvent] | None = None
    video_clicks: VideoClicks | None = None
    id: str | None = None
    sequence: int | None = None
    ad_id: str | None = Field(default=None, alias="adID")


class InlineCreative(_Creative):
    duration: str = Field(pattern=TIME_PATTERN)
    ad_parameters: AdParameters | None = None
    media_files: list[MediaFile] | None = Field(default=None, min_length=1)
    skipoffset: str | None = Field(default=None, pattern=TIME_OR_PERCENT_PATTERN)


class WrapperCreative(_Creative):
    """Creative of a wrapper ad.

    Unknown fields are kept as-is: wrapped ad servers may return creatives
    richer than what is modelled here.
    """

    model_config = ConfigDict(extra="allow")


class _BaseAd(SchemaModel):
    ad_system: AdSystem
    impressions: list[Impression] = Field(min_length=1)
    id: str | None = None
    sequence: int | None = None
    error: Uri | None = None
    extensions: list[Extension] | None = None


class InlineAd(_BaseAd):
    ad_type: Literal[AdType.INLINE]
    # TODO: require at least one creative once companion and non-linear creatives are mapped
    creatives: list[InlineCreative]
    ad_title: str
    description: str | None = None
    advertiser: str | None = None
    pricing: Pricing | None = None
    survey: Uri | None = None


class WrapperAd(_BaseAd):
    ad_type: Literal[AdType.WRAPPER]
    creatives: list[WrapperCreative]
    vast_ad_tag_uri: Uri = Field(alias="VASTAdTagURI")


Ad = Annotated[
    Union[
        Annotated[InlineAd, Tag(AdType.INLINE.value)],
        Annotated[WrapperAd, Tag(AdType.WRAPPER.value)],
    ],
    Discriminator(discriminator("adType")),
]


class VastDocument(SchemaModel):
    """Validated VAST document."""

    version: str = Field(pattern=VAST_VERSION_PATTERN)
    ads: list[Ad]


def validate_vast(document: Any) -> VastDocument:
    """Validate a mapped VAST document.

    Args:
        document: Mapped (pruned) VAST document

    Returns:
        Typed VAST document

    Raises:
        ValidationError: With every violation found in the document
    """
    return validate_document(VastDocument, document, "VAST")


__all__ = [
    "AdSystem",
    "Impression",
    "Pricing",
    "AdParameters",
    "TrackingEvent",
    "ClickTracking",
    "VideoClicks",
    "MediaFile",
    "InlineCreative",
    "WrapperCreative",
    "InlineAd",
    "WrapperAd",
    "Ad",
    "VastDocument",
    "validate_vast",
]
