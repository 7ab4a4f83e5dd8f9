"""Unit tests for the VAST document mapper."""

import pytest

from iab_formats.definitions import (
    AdPricingModel,
    AdType,
    CreativeType,
    DeliveryType,
    TrackingEventType,
)
from iab_formats.exceptions import StructuralError
from iab_formats.helpers import Malformed, prune
from iab_formats.mappers import VastMapper
from iab_formats.xml import xml_to_tree


def map_vast(xml: str) -> dict:
    return prune(VastMapper().map(xml_to_tree(xml)))


def inline_ad(body: str = "", linear: str = "", ad_attributes: str = "") -> str:
    """Build a VAST document with one inline ad around the given markup."""
    return f"""<VAST version="3.0">
  <Ad{ad_attributes}>
    <InLine>
      <AdSystem>Acme</AdSystem>
      <AdTitle>Title</AdTitle>
      <Impression>http://x/imp</Impression>
      {body}
      <Creatives>
        <Creative>
          <Linear>
            <Duration>00:00:30</Duration>
            {linear}
          </Linear>
        </Creative>
      </Creatives>
    </InLine>
  </Ad>
</VAST>"""


class TestVastMapperStructure:
    """Test structural errors raised by the mapper."""

    def test_missing_root(self):
        """Test that a document without <VAST> root is rejected."""
        with pytest.raises(StructuralError, match="No <VAST> root tag"):
            VastMapper().map({"VMAP": [{}]})

    def test_repeated_root(self):
        """Test that a tree holding two <VAST> roots is rejected."""
        with pytest.raises(StructuralError, match="Only one <VAST> tag"):
            VastMapper().map({"VAST": [{"version": "3.0"}, {"version": "3.0"}]})

    def test_inline_and_wrapper(self):
        """Test that an ad with both <InLine> and <Wrapper> is rejected."""
        tree = {"VAST": [{"version": "3.0", "Ad": [{"InLine": [{}], "Wrapper": [{}]}]}]}

        with pytest.raises(StructuralError) as exc_info:
            VastMapper().map(tree)

        assert exc_info.value.path == "VAST/Ad[0]"

    def test_neither_inline_nor_wrapper(self):
        """Test that an ad with neither <InLine> nor <Wrapper> is rejected."""
        tree = {"VAST": [{"version": "3.0", "Ad": [{"id": "1"}]}]}

        with pytest.raises(StructuralError, match="does not contain"):
            VastMapper().map(tree)

    def test_two_linears(self):
        """Test that a creative with two <Linear> is rejected."""
        xml = inline_ad().replace("</Linear>", "</Linear><Linear/>")

        with pytest.raises(StructuralError, match="only one <Linear>"):
            map_vast(xml)

    def test_empty_creative(self):
        """Test that a creative with no known child is rejected."""
        xml = inline_ad().replace(
            "<Creative>", "<Creative><Unknown/></Creative><Creative>", 1
        )

        with pytest.raises(StructuralError, match="should contain one <Linear>"):
            map_vast(xml)

    @pytest.mark.parametrize(
        "body,linear",
        [
            ('<Pricing model="cpm" currency="USD">1</Pricing>' * 2, ""),
            ("", "<AdParameters>a</AdParameters><AdParameters>b</AdParameters>"),
            ("", "<TrackingEvents/><TrackingEvents/>"),
            ("", "<VideoClicks/><VideoClicks/>"),
            ("", "<CreativeExtensions/><CreativeExtensions/>"),
            (
                "",
                "<VideoClicks><ClickThrough>http://x/a</ClickThrough>"
                "<ClickThrough>http://x/b</ClickThrough></VideoClicks>",
            ),
        ],
    )
    def test_repeated_containers(self, body, linear):
        """Test that containers allowed once are rejected when repeated."""
        with pytest.raises(StructuralError):
            map_vast(inline_ad(body=body, linear=linear))


class TestVastMapperMapping:
    """Test the mapped VAST document."""

    def test_minimal_inline(self, minimal_vast_xml):
        """Test the mapped tree of a minimal inline ad."""
        document = map_vast(minimal_vast_xml)

        assert document == {
            "version": "3.0",
            "ads": [
                {
                    "adType": AdType.INLINE,
                    "adSystem": {"name": "Test Ad System"},
                    "adTitle": "Test Ad Title",
                    "impressions": [{"uri": "http://x/imp"}],
                    "creatives": [
                        {
                            "creativeType": CreativeType.LINEAR,
                            "duration": "00:00:30",
                            "mediaFiles": [
                                {
                                    "uri": "http://x/video.mp4",
                                    "delivery": DeliveryType.PROGRESSIVE,
                                    "mimetype": "video/mp4",
                                    "width": 640,
                                    "height": 480,
                                }
                            ],
                        }
                    ],
                }
            ],
        }

    def test_wrapper(self, wrapper_vast_xml):
        """Test wrapper specific fields."""
        ad = map_vast(wrapper_vast_xml)["ads"][0]

        assert ad["adType"] is AdType.WRAPPER
        assert ad["VASTAdTagURI"] == "http://secondary.example.com/vast"
        assert ad["adSystem"] == {"name": "Reseller", "version": "1.0"}
        assert "adTitle" not in ad
        assert ad["creatives"][0]["trackings"] == [
            {"event": TrackingEventType.START, "uri": "http://reseller.example.com/start"}
        ]

    def test_missing_ad_title_is_empty_string(self):
        """Test that an inline ad without <AdTitle> gets an empty title."""
        xml = inline_ad().replace("<AdTitle>Title</AdTitle>", "")

        assert map_vast(xml)["ads"][0]["adTitle"] == ""

    @pytest.mark.parametrize(
        "sequence,expected",
        [
            (' sequence="2"', 2),
            (' sequence="0"', None),
            (' sequence="-1"', None),
            (' sequence="first"', None),
            ("", None),
        ],
    )
    def test_ad_sequence(self, sequence, expected):
        """Test that only positive ad sequences are kept."""
        ad = map_vast(inline_ad(ad_attributes=sequence))["ads"][0]

        assert ad.get("sequence") == expected

    def test_pricing(self):
        """Test pricing value and model coercion."""
        xml = inline_ad(body='<Pricing model="cpc" currency="EUR">0.75</Pricing>')

        ad = map_vast(xml)["ads"][0]

        assert ad["pricing"] == {"value": 0.75, "model": AdPricingModel.CPC, "currency": "EUR"}

    def test_unknown_enum_tokens_are_kept_malformed(self):
        """Test that unknown tokens are left for the validator to reject."""
        ad = map_vast(
            inline_ad(
                body='<Pricing model="flat" currency="EUR">1</Pricing>',
                linear=(
                    "<TrackingEvents>"
                    '<Tracking event="halfway">http://x/h</Tracking>'
                    "</TrackingEvents>"
                ),
            )
        )["ads"][0]

        assert ad["pricing"]["model"] == Malformed("flat")
        assert ad["creatives"][0]["trackings"][0]["event"] == Malformed("halfway")

    def test_companion_only_creative_is_dropped(self):
        """Test that companion and non-linear creatives yield no creative."""
        xml = inline_ad().replace(
            "<Creatives>",
            "<Creatives><Creative><CompanionAds/></Creative><Creative><NonLinearAds/></Creative>",
        )

        creatives = map_vast(xml)["ads"][0]["creatives"]

        assert len(creatives) == 1
        assert creatives[0]["duration"] == "00:00:30"

    def test_creatives_absent_or_empty(self):
        """Test missing and empty <Creatives> containers."""
        without = inline_ad().split("<Creatives>")[0] + "</InLine></Ad></VAST>"
        empty = without.replace("</InLine>", "<Creatives/></InLine>")

        assert "creatives" not in map_vast(without)["ads"][0]
        assert map_vast(empty)["ads"][0]["creatives"] == []

    def test_creative_attributes(self):
        """Test creative identifiers and linear attributes."""
        xml = inline_ad().replace(
            "<Creative>", '<Creative id="c1" sequence="2" AdID="ISCI">'
        ).replace("<Linear>", '<Linear skipoffset="10%">')

        creative = map_vast(xml)["ads"][0]["creatives"][0]

        assert creative["id"] == "c1"
        assert creative["sequence"] == 2
        assert creative["adID"] == "ISCI"
        assert creative["skipoffset"] == "10%"

    def test_extensions_are_opaque(self):
        """Test that ad and creative extensions are passed through untouched."""
        xml = inline_ad(
            body='<Extensions><Extension type="geo"><Country>FR</Country></Extension></Extensions>',
            linear=(
                "<CreativeExtensions>"
                '<CreativeExtension type="x">data</CreativeExtension>'
                "</CreativeExtensions>"
            ),
        )

        ad = map_vast(xml)["ads"][0]

        assert ad["extensions"] == [{"type": "geo", "Country": [{"$t": "FR"}]}]
        assert ad["creatives"][0]["extensions"] == [{"type": "x", "$t": "data"}]

    def test_creative_extensions_under_creative(self):
        """Test that <CreativeExtensions> are also read from <Creative>."""
        xml = inline_ad().replace(
            "</Linear>",
            "</Linear>"
            "<CreativeExtensions><CreativeExtension>data</CreativeExtension></CreativeExtensions>",
        )

        creative = map_vast(xml)["ads"][0]["creatives"][0]

        assert creative["extensions"] == [{"$t": "data"}]


class TestVastMapperLinear:
    """Test the mapping of linear creative children."""

    def creative(self, linear: str) -> dict:
        return map_vast(inline_ad(linear=linear))["ads"][0]["creatives"][0]

    def test_ad_parameters_text(self):
        """Test plain text parameters."""
        creative = self.creative('<AdParameters><![CDATA[{"a": 1}]]></AdParameters>')

        assert creative["adParameters"] == {"xmlEncoded": False, "value": '{"a": 1}'}

    def test_ad_parameters_markup(self):
        """Test parameters given as nested markup are re-serialized."""
        creative = self.creative("<AdParameters><vpaid><skin>dark</skin></vpaid></AdParameters>")

        assert creative["adParameters"] == {
            "xmlEncoded": False,
            "value": "<vpaid><skin>dark</skin></vpaid>",
        }

    def test_ad_parameters_markup_with_root_namespace(self):
        """Test nested markup using a prefix declared on the <VAST> root."""
        xml = inline_ad(linear='<AdParameters><p:cfg a="1"/></AdParameters>').replace(
            '<VAST version="3.0">',
            '<VAST version="3.0" xmlns:p="urn:p" '
            'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">',
        )

        creative = map_vast(xml)["ads"][0]["creatives"][0]

        assert creative["adParameters"] == {
            "xmlEncoded": False,
            "value": '<p:cfg xmlns:p="urn:p" a="1"/>',
        }

    def test_ad_parameters_xml_encoded(self):
        """Test that XML-encoded parameters keep the raw node."""
        creative = self.creative('<AdParameters xmlEncoded="true">&lt;a/&gt;</AdParameters>')

        assert creative["adParameters"] == {
            "xmlEncoded": True,
            "value": {"xmlEncoded": "true", "$t": "<a/>"},
        }

    def test_ad_parameters_empty(self):
        """Test that empty parameters map to an empty string."""
        creative = self.creative("<AdParameters/>")

        assert creative["adParameters"] == {"xmlEncoded": False, "value": ""}

    def test_trackings(self):
        """Test tracking events with and without offset."""
        creative = self.creative(
            "<TrackingEvents>"
            '<Tracking event="progress" offset="00:00:05">http://x/p</Tracking>'
            '<Tracking event="skip">http://x/s</Tracking>'
            "</TrackingEvents>"
        )

        assert creative["trackings"] == [
            {"event": TrackingEventType.PROGRESS, "uri": "http://x/p", "offset": "00:00:05"},
            {"event": TrackingEventType.SKIP, "uri": "http://x/s"},
        ]

    def test_video_clicks(self):
        """Test click-through, click-trackings and custom clicks."""
        creative = self.creative(
            "<VideoClicks>"
            '<ClickThrough id="ct">http://x/landing</ClickThrough>'
            "<ClickTracking>http://x/t1</ClickTracking>"
            "<ClickTracking/>"
            '<CustomClick id="cc">http://x/c</CustomClick>'
            "</VideoClicks>"
        )

        assert creative["videoClicks"] == {
            "clickThrough": {"uri": "http://x/landing", "id": "ct"},
            "clickTrackings": [{"uri": "http://x/t1"}],
            "customClicks": [{"uri": "http://x/c", "id": "cc"}],
        }

    def test_empty_video_clicks_are_dropped(self):
        """Test that clicks without any URI are dropped altogether."""
        creative = self.creative("<VideoClicks><ClickThrough/><ClickTracking/></VideoClicks>")

        assert "videoClicks" not in creative

    def test_media_file_coercions(self):
        """Test integer and flag coercion of media file attributes."""
        creative = self.creative(
            "<MediaFiles>"
            '<MediaFile id="m1" delivery="streaming" type="video/webm" width="1280px" height="720" '
            'minBitrate="300" maxBitrate="900" scalable="garbage" maintainAspectRatio="false" '
            'codec="vp9" apiFramework="VPAID">http://x/v.webm</MediaFile>'
            "</MediaFiles>"
        )

        assert creative["mediaFiles"] == [
            {
                "uri": "http://x/v.webm",
                "id": "m1",
                "delivery": DeliveryType.STREAMING,
                "mimetype": "video/webm",
                "width": 1280,
                "height": 720,
                "minBitrate": 300,
                "maxBitrate": 900,
                "scalable": True,
                "maintainAspectRatio": False,
                "codec": "vp9",
                "apiFramework": "VPAID",
            }
        ]

    @pytest.mark.parametrize(
        "media_file",
        [
            '<MediaFile type="video/mp4" width="1" height="1">http://x/v</MediaFile>',
            '<MediaFile delivery="progressive" width="1" height="1">http://x/v</MediaFile>',
            '<MediaFile delivery="progressive" type="video/mp4" height="1">http://x/v</MediaFile>',
            '<MediaFile delivery="progressive" type="video/mp4" width="1">http://x/v</MediaFile>',
            '<MediaFile delivery="progressive" type="video/mp4" width="1" height="1"/>',
        ],
    )
    def test_incomplete_media_files_are_dropped(self, media_file):
        """Test that media files missing a required attribute or URI are dropped."""
        creative = self.creative(f"<MediaFiles>{media_file}</MediaFiles>")

        assert "mediaFiles" not in creative
