"""Tests for settings loading and validation."""

import pytest
import yaml

from weather_overlay.core.config import DEFAULT_MAP_CENTER, WEATHER_MAPS_URL
from weather_overlay.models.engine_settings import EngineSettings, load_settings, save_settings
from weather_overlay.models.enums import DisplayMode, LayerType


def test_defaults_from_empty_mapping():
    """Test an empty file gives the default settings."""
    settings = EngineSettings.from_dict(None)

    assert settings.layer_type is LayerType.RADAR
    assert settings.display_mode is DisplayMode.AUTO
    assert settings.tile_size == 256
    assert settings.weather_maps_url == WEATHER_MAPS_URL
    assert settings.map_center == DEFAULT_MAP_CENTER


def test_from_dict_reads_values():
    """Test every supported key is read."""
    settings = EngineSettings.from_dict(
        {
            "layer": "clouds",
            "mode": "static",
            "tile_size": 512,
            "opacity": 0.8,
            "frame_interval_ms": 300,
            "max_frames": 12,
            "autoplay": True,
            "refresh_minutes": 5,
            "feeds": {"weather_maps_url": "http://localhost/maps.json"},
            "map": {"lat": 40.0, "lon": -75.0, "zoom": 6},
        }
    )

    assert settings.layer_type is LayerType.CLOUDS
    assert settings.display_mode is DisplayMode.STATIC
    assert settings.tile_size == 512
    assert settings.autoplay is True
    assert settings.weather_maps_url == "http://localhost/maps.json"
    assert settings.map_center == [40.0, -75.0]
    assert settings.map_zoom == 6


@pytest.mark.parametrize(
    "data",
    [
        {"layer": "lightning"},
        {"mode": "sometimes"},
        {"tile_size": 300},
        {"unknown_key": 1},
        {"feeds": {"radar_url": "http://x"}},
    ],
)
def test_structural_errors_raise(data):
    """Test invalid structure is reported as a ValueError."""
    with pytest.raises(ValueError, match="Configuration validation failed"):
        EngineSettings.from_dict(data)


def test_out_of_range_values_are_clamped():
    """Test numeric settings are clamped, not rejected."""
    settings = EngineSettings.from_dict({"opacity": 0.05, "frame_interval_ms": 5000, "max_frames": 3})

    state = settings.to_animation_state(recommended_max_frames=36)

    assert state.opacity == 0.2
    assert state.frame_interval_ms == 800
    assert state.max_frames == 6


def test_unset_values_use_device_and_size_defaults():
    """Test unset interval and frame cap follow tile size and device."""
    state = EngineSettings(tile_size=512).to_animation_state(recommended_max_frames=48)

    assert state.frame_interval_ms == 650
    assert state.max_frames == 48


def test_save_and_load(tmp_path):
    """Test settings survive a save/load cycle."""
    path = tmp_path / "settings.yaml"
    settings = EngineSettings(layer_type=LayerType.SATELLITE, max_frames=20, map_zoom=7)

    save_settings(settings, path)
    data = yaml.safe_load(path.read_text())

    assert "feeds" not in data
    assert data["layer"] == "satellite"
    assert load_settings(path) == settings


def test_load_missing_file(tmp_path):
    """Test a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")


def test_load_non_mapping(tmp_path):
    """Test a YAML list is rejected."""
    path = tmp_path / "settings.yaml"
    path.write_text("- radar\n- satellite\n")

    with pytest.raises(ValueError, match="mapping"):
        load_settings(path)
