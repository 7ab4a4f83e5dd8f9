"""VAST 3 document handle."""

from ..mappers.vast import VastMapper
from ..schema.vast import validate_vast
from .base import BaseParser


class VastParser(BaseParser):
    """Parses and validates a VAST 2/3 document.

    Example:
        >>> parser = VastParser(xml)
        >>> ads = parser.parse()["ads"]
    """

    kind = "VAST"
    schema = staticmethod(validate_vast)

    def create_mapper(self) -> VastMapper:
        return VastMapper()


__all__ = ["VastParser"]
