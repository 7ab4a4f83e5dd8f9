"""VMAP 1.0 document mapper.

Ad breaks are independent from one another, so they can be mapped by a pool
of worker threads; the resulting list always follows document order. Inline
VAST payloads are handed to a VAST document handle of their own.
"""

import contextvars
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from ..config import ParserConfig
from ..definitions.vmap import (
    AdBreakType,
    AdSourceType,
    AdTagTemplate,
    BreakTrackingEvent,
    CustomAdDataTemplate,
)
from ..events import ParserEvents
from ..exceptions import ParsingError, StructuralError
from ..helpers import attr, has_payload, lookup_enum, nodes, parse_tristate, single, text
from ..log_config import get_context_logger
from ..parsers import vast as vast_parsers


BREAK_TYPE_SEPARATOR = re.compile(r"\s*,\s*")

# Payload element of each ad source kind
AD_SOURCE_PAYLOADS = (
    (AdSourceType.VAST3, "vmap:VASTAdData"),
    (AdSourceType.CUSTOM, "vmap:CustomAdData"),
    (AdSourceType.AD_TAG_URI, "vmap:AdTagURI"),
)


class VmapMapper:
    """Maps an attributed tree rooted at ``<vmap:VMAP>`` into a VMAP document."""

    ROOT = "vmap:VMAP"

    def __init__(self, config: ParserConfig | None = None):
        self.config = config or ParserConfig()
        self.logger = get_context_logger("vmap_mapper")

    def map(self, tree: dict[str, Any]) -> dict[str, Any]:
        """Map the attributed tree into a VMAP document.

        Args:
            tree: Attributed tree of the whole document

        Returns:
            VMAP document (``version`` and ``breaks``), absent fields as None

        Raises:
            StructuralError: If the tree does not have a VMAP shape
        """
        roots = nodes(tree, self.ROOT)
        if not roots:
            raise StructuralError("No <vmap:VMAP> root tag", path="/")
        if len(roots) > 1:
            raise StructuralError("Only one <vmap:VMAP> tag is allowed", path="/")
        root = roots[0]

        breaks = self._map_breaks(nodes(root, "vmap:AdBreak"))
        self.logger.debug("VMAP document mapped", breaks_count=len(breaks))
        return {
            "version": attr(root, "version"),
            "breaks": breaks,
        }

    def _map_breaks(self, break_nodes: list[dict[str, Any]]) -> list[dict[str, Any]]:
        jobs = [
            (node, f"vmap:VMAP/vmap:AdBreak[{index}]") for index, node in enumerate(break_nodes)
        ]
        if self.config.break_workers <= 1 or len(jobs) <= 1:
            return [self._map_break(node, path) for node, path in jobs]

        # One context copy per job so worker threads log with the caller's bindings
        contexts = [contextvars.copy_context() for _ in jobs]
        with ThreadPoolExecutor(max_workers=self.config.break_workers) as executor:
            return list(
                executor.map(
                    lambda context, job: context.run(self._map_break, *job), contexts, jobs
                )
            )

    def _map_break(self, node: dict[str, Any], path: str) -> dict[str, Any]:
        if not isinstance(node, dict):
            raise StructuralError("<vmap:AdBreak> is not an element", path=path)
        return {
            "timeOffset": attr(node, "timeOffset"),
            "breakTypes": self._map_break_types(node, path),
            "source": self._map_source(node, path),
            "trackings": self._map_trackings(node, path),
            "extensions": self._map_extensions(node, path),
            "id": attr(node, "breakId"),
            "repeatAfter": attr(node, "repeatAfter"),
        }

    def _map_break_types(self, node: dict[str, Any], path: str) -> list[Any] | None:
        value = node.get("breakType")
        if not value:
            return None
        if not isinstance(value, str):
            raise StructuralError("Invalid breakType", path=path)
        # Unknown tokens are kept as-is for the schema to reject
        members = {member.value: member for member in AdBreakType}
        return [members.get(token, token) for token in BREAK_TYPE_SEPARATOR.split(value.strip())]

    def _map_source(self, node: dict[str, Any], path: str) -> dict[str, Any] | None:
        sources = nodes(node, "vmap:AdSource")
        if not sources:
            return None
        if len(sources) > 1:
            raise StructuralError(
                "There can be only one <vmap:AdSource> per <vmap:AdBreak>", path=path
            )
        return self._map_source_node(sources[0], f"{path}/vmap:AdSource")

    def _map_source_node(self, node: dict[str, Any], path: str) -> dict[str, Any]:
        payloads = [
            (data_type, tag, payload)
            for data_type, tag in AD_SOURCE_PAYLOADS
            for payload in nodes(node, tag)
        ]
        if len(payloads) != 1:
            raise StructuralError(
                "There should be exactly one of <vmap:VASTAdData>, <vmap:CustomAdData> "
                "or <vmap:AdTagURI> ad data",
                path=path,
            )
        data_type, tag, payload = payloads[0]

        source = {
            "dataType": data_type,
            "id": attr(node, "id"),
            "allowMultipleAds": parse_tristate(attr(node, "allowMultipleAds")),
            "followRedirects": parse_tristate(attr(node, "followRedirects")),
        }
        if data_type is AdSourceType.VAST3:
            source["VASTAdData"] = self._map_vast_payload(payload, f"{path}/{tag}")
        elif data_type is AdSourceType.CUSTOM:
            source["adDataType"] = lookup_enum(CustomAdDataTemplate, attr(payload, "templateType"))
            source["customAdData"] = (
                payload if has_payload(payload, ("templateType",)) else text(payload)
            )
        elif data_type is AdSourceType.AD_TAG_URI:
            source["adDataType"] = lookup_enum(AdTagTemplate, attr(payload, "templateType"))
            source["adTagURI"] = text(payload)
        else:
            raise AssertionError(f"Unhandled ad source type: {data_type}")
        return source

    def _map_vast_payload(self, payload: dict[str, Any], path: str) -> dict[str, Any]:
        if not isinstance(payload, dict):
            raise StructuralError("<vmap:VASTAdData> is not an element", path=path)
        self.logger.debug(ParserEvents.EMBEDDED_VAST, path=path)
        try:
            # Validated along with the enclosing VMAP document
            return vast_parsers.VastParser(payload, config=self.config).parse(skip_validation=True)
        except ParsingError as e:
            raise StructuralError(
                f"Embedded VAST document could not be parsed: {e.parsing_error}", path=path
            ) from e

    def _map_trackings(self, node: dict[str, Any], path: str) -> list[dict[str, Any]] | None:
        container = single(node, "vmap:TrackingEvents", path)
        trackings = [
            {
                "level": lookup_enum(BreakTrackingEvent, attr(tracking, "event")),
                "uri": text(tracking),
            }
            for tracking in nodes(container, "vmap:Tracking")
        ]
        return trackings or None

    def _map_extensions(self, node: dict[str, Any], path: str) -> list[dict[str, Any]] | None:
        container = single(node, "vmap:Extensions", path)
        extensions = [
            {
                "extensionType": attr(extension, "type"),
                "value": (
                    extension if has_payload(extension, ("type",)) else (text(extension) or "")
                ),
            }
            for extension in nodes(container, "vmap:Extension")
        ]
        return extensions or None


__all__ = ["VmapMapper"]
