"""Parser event type constants."""

from enum import Enum


class ParserEvents(str, Enum):
    """Event type constants for structured logging."""

    # Document handle events
    PARSE_STARTED = "iab.parse.started"
    PARSE_COMPLETED = "iab.parse.completed"
    PARSE_FAILED = "iab.parse.failed"
    PARSE_MEMOIZED = "iab.parse.memoized"

    # Mapping events
    XML_CONVERTED = "iab.xml.converted"
    STRUCTURE_INVALID = "iab.mapping.structure_invalid"
    CREATIVE_SKIPPED = "iab.mapping.creative_skipped"
    EMBEDDED_VAST = "iab.mapping.embedded_vast"

    # Validation events
    VALIDATION_STARTED = "iab.validation.started"
    VALIDATION_SUCCESS = "iab.validation.success"
    VALIDATION_FAILED = "iab.validation.failed"


__all__ = ["ParserEvents"]
