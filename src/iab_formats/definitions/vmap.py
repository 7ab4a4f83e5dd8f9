"""VMAP 1.0 enumerations."""

from enum import Enum


class AdBreakType(str, Enum):
    """Types of ads allowed by an ad break."""

    LINEAR = "linear"
    NONLINEAR = "nonlinear"
    DISPLAY = "display"


class BreakTrackingEvent(str, Enum):
    """Ad break level events."""

    BREAK_START = "breakStart"
    BREAK_END = "breakEnd"
    ERROR = "error"


class AdSourceType(str, Enum):
    """Ad source payload kind, decided by which payload element is present."""

    VAST3 = "VAST3"
    CUSTOM = "custom"
    AD_TAG_URI = "adTagURI"


class CustomAdDataTemplate(str, Enum):
    """templateType values of <CustomAdData>."""

    VAST1 = "vast1"
    VAST2 = "vast2"
    PROPRIETARY = "proprietary"


class AdTagTemplate(str, Enum):
    """templateType values of <AdTagURI>."""

    VAST1 = "vast1"
    VAST2 = "vast2"
    VAST3 = "vast3"
    PROPRIETARY = "proprietary"


__all__ = [
    "AdBreakType",
    "BreakTrackingEvent",
    "AdSourceType",
    "CustomAdDataTemplate",
    "AdTagTemplate",
]
