"""Mappers turning attributed trees into VAST and VMAP documents."""

from .vast import VastMapper
from .vmap import VmapMapper


__all__ = ["VastMapper", "VmapMapper"]
