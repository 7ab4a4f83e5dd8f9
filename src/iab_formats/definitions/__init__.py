"""VAST and VMAP enumerations."""

from .vast import AdPricingModel, AdType, CreativeType, DeliveryType, TrackingEventType
from .vmap import (
    AdBreakType,
    AdSourceType,
    AdTagTemplate,
    BreakTrackingEvent,
    CustomAdDataTemplate,
)


__all__ = [
    "AdType",
    "AdPricingModel",
    "CreativeType",
    "TrackingEventType",
    "DeliveryType",
    "AdBreakType",
    "BreakTrackingEvent",
    "AdSourceType",
    "CustomAdDataTemplate",
    "AdTagTemplate",
]
