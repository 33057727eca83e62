"""Tests for tile URL templates and attribution."""

import pytest

from weather_overlay.core.config import LAYERS
from weather_overlay.core.tile_urls import TileUrlResolver
from weather_overlay.models.enums import LayerType
from weather_overlay.models.frame import Frame


def test_radar_animated_url():
    """Test radar template embeds timestamp and tile size."""
    url = TileUrlResolver.animated_url(LayerType.RADAR, 1700000000, 256)

    assert url == "https://tilecache.rainviewer.com/v2/radar/1700000000/256/{z}/{x}/{y}/2/1_1.png"


def test_radar_animated_url_512():
    """Test 512px tiles change only the size segment."""
    url = TileUrlResolver.animated_url(LayerType.RADAR, Frame(token=300, timestamp=300), 512)

    assert "/v2/radar/300/512/{z}/{x}/{y}/" in url


def test_satellite_animated_url_uses_path():
    """Test satellite frames use their opaque path."""
    url = TileUrlResolver.animated_url(LayerType.CLOUDS, "/v2/satellite/abc123/", 256)

    assert url.startswith("https://tilecache.rainviewer.com/v2/satellite/abc123/256/{z}/{x}/{y}/")
    assert "//v2" not in url


def test_invalid_tile_size():
    """Test unsupported tile sizes are rejected."""
    with pytest.raises(ValueError):
        TileUrlResolver.animated_url(LayerType.RADAR, 1, 128)


def test_static_urls():
    """Test static templates exist for every layer and only use z/x/y."""
    assert TileUrlResolver.static_url(LayerType.RADAR) == (
        "https://mesonet.agron.iastate.edu/cache/tile.py/1.0.0/ridge::USCOMP-N0Q-0/{z}/{x}/{y}.png"
    )
    for layer_type in LayerType:
        url = TileUrlResolver.static_url(layer_type)
        assert url.endswith("/{z}/{x}/{y}.png")


def test_attribution():
    """Test attribution names both the animated and static sources."""
    attribution = TileUrlResolver.attribution(LayerType.RADAR)

    assert "RainViewer" in attribution
    assert LAYERS[LayerType.RADAR].static_source in attribution
