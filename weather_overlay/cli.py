"""CLI mode: fetch frames headlessly and print what the overlay would show."""

import logging
from typing import Optional

import yaml

from weather_overlay.core.config import LAYERS
from weather_overlay.core.feed_client import refresh_frame_sets
from weather_overlay.core.resource_budget import DeviceProfile, recommended_max_frames
from weather_overlay.core.tile_urls import TileUrlResolver
from weather_overlay.models.engine_settings import EngineSettings, load_settings
from weather_overlay.models.enums import LayerType

logger = logging.getLogger(__name__)


def run_frames(config_path: Optional[str] = None, layer: Optional[str] = None) -> int:
    """
    Fetch the frame feeds and print each layer's frames.

    Args:
        config_path: Optional YAML settings file (feeds, max_frames)
        layer: Restrict output to one layer name

    Returns:
        Exit code (0 if any requested layer has frames, 1 otherwise)
    """
    try:
        if config_path:
            logger.info(f"Loading settings from: {config_path}")
            settings = load_settings(config_path)
        else:
            settings = EngineSettings()

        layer_types = [LayerType.from_name(layer)] if layer else list(LayerType)
    except (OSError, yaml.YAMLError, ValueError) as e:
        logger.error(f"Invalid settings: {e}")
        return 1

    recommended = recommended_max_frames(DeviceProfile.detect())
    max_frames = settings.to_animation_state(recommended).max_frames
    logger.info(f"Recommended max frames: {recommended} • Using: {max_frames}")

    result = refresh_frame_sets(
        max_frames,
        settings.weather_maps_url,
        settings.satellite_url,
        layer_types,
    )

    for layer_type in layer_types:
        layer_config = LAYERS[layer_type]
        frame_set = result.frame_sets[layer_type]

        print(f"{layer_config.display_name}: {len(frame_set)} frames")
        if layer_type in result.errors:
            print(f"  unavailable ({result.errors[layer_type]}); static: {TileUrlResolver.static_url(layer_type)}")
            continue

        for frame in frame_set.frames:
            frame_time = frame.as_datetime()
            label = frame_time.strftime("%Y-%m-%d %H:%M UTC") if frame_time else "unknown time"
            print(f"  {label}  {frame.token}")
        latest = frame_set.frames[-1]
        print(f"  latest: {TileUrlResolver.animated_url(layer_type, latest, settings.tile_size)}")

    return 1 if result.failed else 0
