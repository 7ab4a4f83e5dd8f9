"""Validation schemas of VAST and VMAP documents."""

from .base import discriminator, format_loc, to_document
from .vast import VastDocument, validate_vast
from .vmap import VmapDocument, validate_vmap


__all__ = [
    "VastDocument",
    "VmapDocument",
    "validate_vast",
    "validate_vmap",
    "discriminator",
    "format_loc",
    "to_document",
]
