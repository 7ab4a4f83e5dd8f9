"""VMAP 1.0 document handle."""

from ..mappers.vmap import VmapMapper
from ..schema.vmap import validate_vmap
from .base import BaseParser


class VmapParser(BaseParser):
    """Parses and validates a VMAP 1.x document.

    Inline VAST payloads are mapped by their own VAST handle and validated
    together with the playlist.
    """

    kind = "VMAP"
    schema = staticmethod(validate_vmap)

    def create_mapper(self) -> VmapMapper:
        return VmapMapper(self.config)


__all__ = ["VmapParser"]
