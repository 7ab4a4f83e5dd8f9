"""VAST 3 enumerations.

Member values are the tokens used in VAST documents, so XML attribute values
map to members by value lookup.
"""

from enum import Enum


class AdType(str, Enum):
    """Ad variant, decided by the <InLine>/<Wrapper> child of <Ad>."""

    INLINE = "inline"
    WRAPPER = "wrapper"


class AdPricingModel(str, Enum):
    """Ad pricing models."""

    CPC = "cpc"  # Cost per click
    CPM = "cpm"  # Cost per mille
    CPE = "cpe"  # Cost per engagement
    CPV = "cpv"  # Cost per view


class CreativeType(str, Enum):
    """Creative types (only linear creatives are mapped)."""

    LINEAR = "linear"


class TrackingEventType(str, Enum):
    """Creative tracking events."""

    CREATIVE_VIEW = "creativeView"
    START = "start"
    FIRST_QUARTILE = "firstQuartile"
    MIDPOINT = "midpoint"
    THIRD_QUARTILE = "thirdQuartile"
    COMPLETE = "complete"
    MUTE = "mute"
    UNMUTE = "unmute"
    PAUSE = "pause"
    REWIND = "rewind"
    RESUME = "resume"
    FULLSCREEN = "fullscreen"
    EXIT_FULLSCREEN = "exitFullscreen"
    EXPAND = "expand"
    COLLAPSE = "collapse"
    ACCEPT_INVITATION = "acceptInvitation"
    CLOSE = "close"
    SKIP = "skip"
    PROGRESS = "progress"


class DeliveryType(str, Enum):
    """Media file delivery methods."""

    STREAMING = "streaming"
    PROGRESSIVE = "progressive"


__all__ = [
    "AdType",
    "AdPricingModel",
    "CreativeType",
    "TrackingEventType",
    "DeliveryType",
]
