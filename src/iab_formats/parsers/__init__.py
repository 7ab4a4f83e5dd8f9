"""Document handles."""

from .base import BaseParser, ParserState
from .vast import VastParser
from .vmap import VmapParser


__all__ = ["BaseParser", "ParserState", "VastParser", "VmapParser"]
