"""Pytest configuration and shared fixtures for IAB formats tests."""

import sys
from pathlib import Path

import pytest


sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from iab_formats.config import ParserConfig
from iab_formats.definitions import AdType, CreativeType, DeliveryType


# ==================== Path Fixtures ====================


@pytest.fixture(scope="session")
def tests_dir() -> Path:
    """Get tests directory path."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def documents_dir(tests_dir) -> Path:
    """Get fixture documents directory path."""
    return tests_dir / "documents"


# ==================== Configuration Fixtures ====================


@pytest.fixture
def parser_config() -> ParserConfig:
    """Create default parser configuration."""
    return ParserConfig()


@pytest.fixture
def threaded_config() -> ParserConfig:
    """Create a configuration mapping VMAP ad breaks on worker threads."""
    return ParserConfig(break_workers=4)


# ==================== VAST XML Fixtures ====================


@pytest.fixture
def minimal_vast_xml() -> str:
    """VAST 3.0 document with one inline ad and one progressive media file."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad>
    <InLine>
      <AdSystem>Test Ad System</AdSystem>
      <AdTitle>Test Ad Title</AdTitle>
      <Impression>http://x/imp</Impression>
      <Creatives>
        <Creative>
          <Linear>
            <Duration>00:00:30</Duration>
            <MediaFiles>
              <MediaFile delivery="progressive" type="video/mp4" width="640" height="480">
                <![CDATA[http://x/video.mp4]]>
              </MediaFile>
            </MediaFiles>
          </Linear>
        </Creative>
      </Creatives>
    </InLine>
  </Ad>
</VAST>"""


@pytest.fixture
def wrapper_vast_xml() -> str:
    """VAST 3.0 document with one wrapper ad."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="3.0">
  <Ad id="wrapper">
    <Wrapper>
      <AdSystem version="1.0">Reseller</AdSystem>
      <VASTAdTagURI><![CDATA[http://secondary.example.com/vast]]></VASTAdTagURI>
      <Impression>http://reseller.example.com/imp</Impression>
      <Creatives>
        <Creative>
          <Linear>
            <TrackingEvents>
              <Tracking event="start">http://reseller.example.com/start</Tracking>
            </TrackingEvents>
          </Linear>
        </Creative>
      </Creatives>
    </Wrapper>
  </Ad>
</VAST>"""


@pytest.fixture
def vast_document():
    """Build a mapped (pruned) inline VAST document to tweak in schema tests."""

    def build(**ad_overrides):
        ad = {
            "adType": AdType.INLINE,
            "adSystem": {"name": "Test Ad System"},
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
            "adTitle": "Test Ad Title",
        }
        ad.update(ad_overrides)
        return {"version": "3.0", "ads": [ad]}

    return build


# ==================== VMAP XML Fixtures ====================


VMAP_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<vmap:VMAP xmlns:vmap="http://www.iab.net/videosuite/vmap" version="1.0">
{breaks}
</vmap:VMAP>"""


@pytest.fixture
def vmap_xml():
    """Build a VMAP document around the given ad break markup."""

    def build(*breaks: str) -> str:
        return VMAP_TEMPLATE.format(breaks="\n".join(breaks))

    return build


@pytest.fixture
def vast_in_vmap_xml(vmap_xml, minimal_vast_xml) -> str:
    """VMAP document whose single ad break embeds the minimal VAST document."""
    vast = minimal_vast_xml.split("?>", 1)[1]
    return vmap_xml(
        f"""<vmap:AdBreak timeOffset="start" breakType="linear" breakId="preroll">
  <vmap:AdSource id="preroll-ad" followRedirects="true">
    <vmap:VASTAdData>{vast}</vmap:VASTAdData>
  </vmap:AdSource>
</vmap:AdBreak>"""
    )
