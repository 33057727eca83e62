"""User settings for the animation engine, loaded from YAML."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from weather_overlay.core.config import (
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_ZOOM,
    DEFAULT_OPACITY,
    DEFAULT_REFRESH_MINUTES,
    DEFAULT_TILE_SIZE,
    FRAME_INTERVAL_BY_TILE_SIZE,
    MAX_FRAME_INTERVAL,
    MAX_OPACITY,
    MIN_FRAME_INTERVAL,
    MIN_OPACITY,
    SATELLITE_FEED_URL,
    WEATHER_MAPS_URL,
)
from weather_overlay.core.resource_budget import clamp_max_frames
from weather_overlay.models.animation_state import AnimationState
from weather_overlay.models.enums import DisplayMode, LayerType


class FeedsSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    weather_maps_url: Optional[str] = None
    satellite_url: Optional[str] = None


class MapSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lat: Optional[float] = None
    lon: Optional[float] = None
    zoom: Optional[int] = None


class SettingsSchema(BaseModel):
    """Structural schema for the settings file."""

    model_config = ConfigDict(extra="forbid")

    layer: Literal["radar", "satellite", "clouds", "temperature"] = "radar"
    mode: Literal["auto", "animated", "static", "off"] = "auto"
    tile_size: Literal[256, 512] = DEFAULT_TILE_SIZE
    opacity: Optional[float] = None
    frame_interval_ms: Optional[int] = None
    max_frames: Optional[int] = None
    autoplay: bool = False
    refresh_minutes: Optional[int] = None
    feeds: Optional[FeedsSchema] = None
    map: Optional[MapSchema] = None


def validate_settings(data: dict) -> None:
    """
    Validate a settings dictionary against the schema.

    Raises:
        ValueError: If the structure is invalid
    """
    try:
        SettingsSchema.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Configuration validation failed:\n{e}") from e


@dataclass
class EngineSettings:
    """Persisted engine and window settings.

    Numeric ranges are not validated here; the engine clamps them.
    """

    layer_type: LayerType = LayerType.RADAR
    display_mode: DisplayMode = DisplayMode.AUTO
    tile_size: int = DEFAULT_TILE_SIZE
    opacity: float = DEFAULT_OPACITY
    frame_interval_ms: Optional[int] = None  # None: size-dependent default
    max_frames: Optional[int] = None  # None: device recommendation
    autoplay: bool = False
    refresh_minutes: int = DEFAULT_REFRESH_MINUTES
    weather_maps_url: str = WEATHER_MAPS_URL
    satellite_url: str = SATELLITE_FEED_URL
    map_center: list[float] = field(default_factory=lambda: list(DEFAULT_MAP_CENTER))
    map_zoom: int = DEFAULT_MAP_ZOOM

    def to_animation_state(self, recommended_max_frames: int) -> AnimationState:
        """
        Build the initial AnimationState, clamping numeric settings.

        Args:
            recommended_max_frames: Device recommendation used when max_frames is unset

        Returns:
            AnimationState
        """
        interval = self.frame_interval_ms or FRAME_INTERVAL_BY_TILE_SIZE[self.tile_size]
        max_frames = self.max_frames if self.max_frames is not None else recommended_max_frames

        return AnimationState(
            layer_type=self.layer_type,
            display_mode=self.display_mode,
            tile_size=self.tile_size,
            opacity=max(MIN_OPACITY, min(MAX_OPACITY, self.opacity)),
            frame_interval_ms=max(MIN_FRAME_INTERVAL, min(MAX_FRAME_INTERVAL, interval)),
            max_frames=clamp_max_frames(max_frames, recommended_max_frames),
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert settings to dictionary for YAML serialization.

        Returns:
            Dictionary with optional keys only included when set
        """
        result: dict[str, Any] = {
            "layer": self.layer_type.value,
            "mode": self.display_mode.value,
            "tile_size": self.tile_size,
            "opacity": self.opacity,
            "autoplay": self.autoplay,
            "refresh_minutes": self.refresh_minutes,
        }

        if self.frame_interval_ms is not None:
            result["frame_interval_ms"] = self.frame_interval_ms
        if self.max_frames is not None:
            result["max_frames"] = self.max_frames

        # Only include feeds if not default
        feeds = {}
        if self.weather_maps_url != WEATHER_MAPS_URL:
            feeds["weather_maps_url"] = self.weather_maps_url
        if self.satellite_url != SATELLITE_FEED_URL:
            feeds["satellite_url"] = self.satellite_url
        if feeds:
            result["feeds"] = feeds

        result["map"] = {"lat": self.map_center[0], "lon": self.map_center[1], "zoom": self.map_zoom}
        return result

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "EngineSettings":
        """
        Create settings from a dictionary (loaded from YAML).

        Args:
            data: Settings dictionary (None or empty for defaults)

        Returns:
            EngineSettings instance

        Raises:
            ValueError: If the structure is invalid
        """
        data = data or {}
        validate_settings(data)

        feeds = data.get("feeds") or {}
        map_data = data.get("map") or {}
        tile_size = data.get("tile_size", DEFAULT_TILE_SIZE)

        return cls(
            layer_type=LayerType.from_name(data.get("layer", "radar")),
            display_mode=DisplayMode.from_name(data.get("mode", "auto")),
            tile_size=tile_size,
            opacity=data.get("opacity") if data.get("opacity") is not None else DEFAULT_OPACITY,
            frame_interval_ms=data.get("frame_interval_ms"),
            max_frames=data.get("max_frames"),
            autoplay=data.get("autoplay", False),
            refresh_minutes=data.get("refresh_minutes") or DEFAULT_REFRESH_MINUTES,
            weather_maps_url=feeds.get("weather_maps_url") or WEATHER_MAPS_URL,
            satellite_url=feeds.get("satellite_url") or SATELLITE_FEED_URL,
            map_center=[
                map_data.get("lat") if map_data.get("lat") is not None else DEFAULT_MAP_CENTER[0],
                map_data.get("lon") if map_data.get("lon") is not None else DEFAULT_MAP_CENTER[1],
            ],
            map_zoom=map_data.get("zoom") or DEFAULT_MAP_ZOOM,
        )


def load_settings(config_path: str | Path) -> EngineSettings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to YAML settings file

    Returns:
        EngineSettings

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the settings are structurally invalid
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file) as f:
        data = yaml.safe_load(f)

    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

    return EngineSettings.from_dict(data)


def save_settings(settings: EngineSettings, config_path: str | Path) -> None:
    """Write settings to a YAML file."""
    with open(config_path, "w") as f:
        yaml.dump(settings.to_dict(), f, default_flow_style=False, sort_keys=False)
