"""
IAB Formats Package

Parsing and validation of IAB video advertising documents:
VAST 2/3 (Video Ad Serving Template) and VMAP 1.x (Video Multiple Ad Playlist).

This package provides:
- VastParser / VmapParser: document handles (parse, validate, typed model)
- VastMapper / VmapMapper: attributed tree to document mapping
- validate_vast / validate_vmap: schema validation of mapped documents
- ParsingError / ValidationError: document failures, with every violation

Usage:
    from iab_formats import VastParser, VmapParser

    parser = VastParser(xml)
    document = parser.parse()
    document["ads"][0]["adType"]

    # Map only, validate later
    playlist = VmapParser.from_file("playlist.xml")
    playlist.parse(skip_validation=True)
    playlist.validate()
"""

# Parsers first: the VMAP mapper depends on the VAST document handle
from .parsers import BaseParser, ParserState, VastParser, VmapParser
from .mappers import VastMapper, VmapMapper
from .config import ParserConfig, Settings, get_settings, reload_settings
from .events import ParserEvents
from .exceptions import (
    IABFormatError,
    InvalidUsageError,
    ParsingError,
    StructuralError,
    ValidationError,
    ValidationIssue,
)
from .log_config import DocumentContext, configure_logging, get_context_logger
from .schema import VastDocument, VmapDocument, validate_vast, validate_vmap
from .xml import tree_to_xml, xml_to_tree

__version__ = "1.0.0"

__all__ = [
    # Document handles
    "BaseParser",
    "ParserState",
    "VastParser",
    "VmapParser",
    # Mapping and validation
    "VastMapper",
    "VmapMapper",
    "VastDocument",
    "VmapDocument",
    "validate_vast",
    "validate_vmap",
    "xml_to_tree",
    "tree_to_xml",
    # Errors
    "IABFormatError",
    "ParsingError",
    "StructuralError",
    "ValidationError",
    "ValidationIssue",
    "InvalidUsageError",
    # Configuration and logging
    "ParserConfig",
    "Settings",
    "get_settings",
    "reload_settings",
    "ParserEvents",
    "configure_logging",
    "get_context_logger",
    "DocumentContext",
    # Convenience functions
    "configure_from_settings",
    "create_vast_parser",
    "create_vmap_parser",
    # Package metadata
    "__version__",
]


# Package-level convenience functions
def configure_from_settings(settings=None) -> ParserConfig:
    """Apply logging settings and return the matching parser configuration.

    Args:
        settings: Settings instance (default: cached settings)

    Returns:
        ParserConfig: Configuration built from the ``parser`` section
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    return ParserConfig.from_settings(settings)


def create_vast_parser(source, config=None):
    """Create a VastParser instance.

    Args:
        source: Raw XML document or attributed tree
        config: Parser configuration (default: built from settings)

    Returns:
        VastParser: Document handle
    """
    return VastParser(source, config=config or ParserConfig.from_settings())


def create_vmap_parser(source, config=None):
    """Create a VmapParser instance.

    Args:
        source: Raw XML document or attributed tree
        config: Parser configuration (default: built from settings)

    Returns:
        VmapParser: Document handle
    """
    return VmapParser(source, config=config or ParserConfig.from_settings())
