"""VAST 3 document mapper.

Walks the attributed tree of a ``<VAST>`` document and builds the VAST value
tree. Only the shape of the document is enforced here; values that cannot be
coerced are left as ``Malformed`` for the schema to report.
"""

from typing import Any

from ..definitions.vast import (
    AdPricingModel,
    AdType,
    CreativeType,
    DeliveryType,
    TrackingEventType,
)
from ..events import ParserEvents
from ..exceptions import StructuralError
from ..helpers import (
    attr,
    child_text,
    first,
    lookup_enum,
    nodes,
    parse_flag,
    parse_float,
    parse_int,
    single,
    text,
)
from ..log_config import get_context_logger
from ..xml import namespace_scope, tree_to_xml


MEDIA_FILE_REQUIRED_ATTRIBUTES = ("delivery", "type", "width", "height")
MEDIA_FILE_INTEGER_ATTRIBUTES = ("width", "height", "bitrate", "minBitrate", "maxBitrate")
MEDIA_FILE_FLAG_ATTRIBUTES = ("scalable", "maintainAspectRatio")


class VastMapper:
    """Maps an attributed tree rooted at ``<VAST>`` into a VAST document."""

    ROOT = "VAST"

    def __init__(self):
        self.logger = get_context_logger("vast_mapper")

    def map(self, tree: dict[str, Any]) -> dict[str, Any]:
        """Map the attributed tree into a VAST document.

        Args:
            tree: Attributed tree of the whole document

        Returns:
            VAST document (``version`` and ``ads``), absent fields as None

        Raises:
            StructuralError: If the tree does not have a VAST shape
        """
        roots = nodes(tree, self.ROOT)
        if not roots:
            raise StructuralError("No <VAST> root tag", path="/")
        if len(roots) > 1:
            raise StructuralError("Only one <VAST> tag is allowed", path="/")
        root = roots[0]

        scope = namespace_scope(root)
        ads = [
            self._map_ad(ad_node, f"VAST/Ad[{index}]", scope)
            for index, ad_node in enumerate(nodes(root, "Ad"))
        ]
        self.logger.debug("VAST document mapped", ads_count=len(ads))
        return {
            "version": attr(root, "version"),
            "ads": ads,
        }

    def _map_ad(self, container: dict[str, Any], path: str, scope: dict) -> dict[str, Any]:
        # The ad type is structural: exactly one of <InLine>/<Wrapper>
        inline = nodes(container, "InLine")
        wrapper = nodes(container, "Wrapper")
        if inline and wrapper:
            raise StructuralError(
                "<Ad> cannot contain a <InLine> AND a <Wrapper> element", path=path
            )
        if inline:
            ad_type, body, body_path = AdType.INLINE, inline[0], f"{path}/InLine"
        elif wrapper:
            ad_type, body, body_path = AdType.WRAPPER, wrapper[0], f"{path}/Wrapper"
        else:
            raise StructuralError(
                "<Ad> element does not contain an <InLine> or <Wrapper> element", path=path
            )

        sequence = parse_int(attr(container, "sequence"))
        ad_system = first(body, "AdSystem")
        ad = {
            "adType": ad_type,
            "adSystem": {
                "name": text(ad_system),
                "version": attr(ad_system, "version"),
            },
            "impressions": self._map_impressions(body),
            "creatives": self._map_creatives(
                body, body_path, namespace_scope(body, namespace_scope(container, scope))
            ),
            "id": attr(container, "id"),
            # Only positive sequences are kept
            "sequence": sequence if isinstance(sequence, int) and sequence > 0 else None,
            "error": child_text(body, "Error"),
            "extensions": nodes(first(body, "Extensions"), "Extension") or None,
        }
        if ad_type is AdType.INLINE:
            ad.update(
                adTitle=child_text(body, "AdTitle") or "",
                description=child_text(body, "Description"),
                advertiser=child_text(body, "Advertiser"),
                pricing=self._map_pricing(body, body_path),
                survey=child_text(body, "Survey"),
            )
        else:
            ad["VASTAdTagURI"] = child_text(body, "VASTAdTagURI")
        return ad

    def _map_pricing(self, body: dict[str, Any], path: str) -> dict[str, Any] | None:
        pricing = single(body, "Pricing", path)
        if pricing is None:
            return None
        return {
            "value": parse_float(text(pricing)),
            "model": lookup_enum(AdPricingModel, attr(pricing, "model")),
            "currency": attr(pricing, "currency"),
        }

    def _map_impressions(self, body: dict[str, Any]) -> list[dict[str, Any]] | None:
        impressions = [
            {"uri": text(node), "id": attr(node, "id")} for node in nodes(body, "Impression")
        ]
        return impressions or None

    def _map_creatives(
        self, body: dict[str, Any], path: str, scope: dict
    ) -> list[dict[str, Any]] | None:
        containers = nodes(body, "Creatives")
        if not containers:
            return None
        creatives = []
        scope = namespace_scope(containers[0], scope)
        for index, container in enumerate(nodes(containers[0], "Creative")):
            creative = self._map_creative(
                container, f"{path}/Creatives/Creative[{index}]", namespace_scope(container, scope)
            )
            if creative is not None:
                creatives.append(creative)
        return creatives

    def _map_creative(
        self, container: dict[str, Any], path: str, scope: dict
    ) -> dict[str, Any] | None:
        linears = nodes(container, "Linear")
        if not linears:
            if not nodes(container, "CompanionAds") and not nodes(container, "NonLinearAds"):
                raise StructuralError(
                    "<Creative> should contain one <Linear>, <CompanionAds> or <NonLinearAds>",
                    path=path,
                )
            # TODO: map CompanionAds and NonLinearAds creatives
            self.logger.debug(ParserEvents.CREATIVE_SKIPPED, path=path)
            return None
        if len(linears) > 1:
            raise StructuralError("<Creative> can contain only one <Linear>", path=path)

        linear = linears[0]
        linear_path = f"{path}/Linear"
        return {
            "creativeType": CreativeType.LINEAR,
            "duration": child_text(linear, "Duration"),
            "adParameters": self._map_ad_parameters(
                linear, linear_path, namespace_scope(linear, scope)
            ),
            "skipoffset": attr(linear, "skipoffset"),
            "id": attr(container, "id"),
            "adID": attr(container, "AdID"),
            "sequence": parse_int(attr(container, "sequence")),
            "extensions": self._map_creative_extensions(container, linear, path),
            "trackings": self._map_trackings(linear, linear_path),
            "videoClicks": self._map_clicks(linear, linear_path),
            "mediaFiles": self._map_media_files(linear),
        }

    def _map_creative_extensions(
        self, container: dict[str, Any], linear: dict[str, Any], path: str
    ) -> list[Any] | None:
        # Accepted under <Creative> (VAST 3) as well as under <Linear>
        extensions = nodes(container, "CreativeExtensions") + nodes(linear, "CreativeExtensions")
        if len(extensions) > 1:
            raise StructuralError("<Creative> can contain only one <CreativeExtensions>", path=path)
        if not extensions:
            return None
        return nodes(extensions[0], "CreativeExtension") or None

    def _map_ad_parameters(
        self, linear: dict[str, Any], path: str, scope: dict
    ) -> dict[str, Any] | None:
        parameters = single(linear, "AdParameters", path)
        if parameters is None:
            return None
        xml_encoded = attr(parameters, "xmlEncoded") == "true"
        if xml_encoded:
            value = parameters
        elif text(parameters) is not None:
            value = text(parameters)
        else:
            # Parameters given as nested markup rather than text
            value = tree_to_xml(parameters, scope)
        return {"xmlEncoded": xml_encoded, "value": value}

    def _map_trackings(self, linear: dict[str, Any], path: str) -> list[dict[str, Any]] | None:
        container = single(linear, "TrackingEvents", path)
        trackings = [
            {
                "event": lookup_enum(TrackingEventType, attr(node, "event")),
                "uri": text(node),
                "offset": attr(node, "offset"),
            }
            for node in nodes(container, "Tracking")
        ]
        return trackings or None

    def _map_clicks(self, linear: dict[str, Any], path: str) -> dict[str, Any] | None:
        video_clicks = single(linear, "VideoClicks", path)
        if video_clicks is None:
            return None
        click_through = single(video_clicks, "ClickThrough", f"{path}/VideoClicks")

        clicks = {}
        if text(click_through):
            clicks["clickThrough"] = {"uri": text(click_through), "id": attr(click_through, "id")}
        for key, tag in (("clickTrackings", "ClickTracking"), ("customClicks", "CustomClick")):
            entries = [
                {"uri": text(node), "id": attr(node, "id")}
                for node in nodes(video_clicks, tag)
                if text(node)
            ]
            if entries:
                clicks[key] = entries
        return clicks or None

    def _map_media_files(self, linear: dict[str, Any]) -> list[dict[str, Any]] | None:
        media_files = []
        for node in nodes(first(linear, "MediaFiles"), "MediaFile"):
            media_file = self._map_media_file(node)
            if media_file is not None:
                media_files.append(media_file)
        return media_files or None

    def _map_media_file(self, node: dict[str, Any]) -> dict[str, Any] | None:
        if not text(node) or not all(attr(node, name) for name in MEDIA_FILE_REQUIRED_ATTRIBUTES):
            return None
        media_file = {
            "uri": text(node),
            "delivery": lookup_enum(DeliveryType, attr(node, "delivery")),
            "mimetype": attr(node, "type"),
            "id": attr(node, "id"),
            "apiFramework": attr(node, "apiFramework"),
            "codec": attr(node, "codec"),
        }
        for name in MEDIA_FILE_INTEGER_ATTRIBUTES:
            media_file[name] = parse_int(attr(node, name))
        for name in MEDIA_FILE_FLAG_ATTRIBUTES:
            media_file[name] = parse_flag(attr(node, name))
        return media_file


__all__ = ["VastMapper"]
