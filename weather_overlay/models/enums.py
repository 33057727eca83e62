"""Enumerations shared across the animation engine."""

from enum import Enum


class LayerType(Enum):
    """Weather data category shown on the map."""

    RADAR = "radar"
    SATELLITE = "satellite"
    CLOUDS = "clouds"
    TEMPERATURE = "temperature"

    @property
    def is_satellite_family(self) -> bool:
        """True for layers built from the satellite feed."""
        return self is not LayerType.RADAR

    @classmethod
    def from_name(cls, name: str) -> "LayerType":
        """
        Look up a layer type by its config name.

        Args:
            name: Case-insensitive layer name (e.g. "radar")

        Returns:
            Matching LayerType

        Raises:
            ValueError: If the name is unknown
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown layer: {name}. Valid layers: {valid}") from None


class DisplayMode(Enum):
    """User-selected overlay policy."""

    AUTO = "auto"
    ANIMATED = "animated"
    STATIC = "static"
    OFF = "off"

    @classmethod
    def from_name(cls, name: str) -> "DisplayMode":
        """Look up a display mode by its config name."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown mode: {name}. Valid modes: {valid}") from None


class RenderState(Enum):
    """Overlay actually rendered, derived from DisplayMode and frame availability."""

    OFF = "off"
    STATIC = "static"
    ANIMATED = "animated"


def resolve_render_state(mode: DisplayMode, has_frames: bool) -> RenderState:
    """
    Resolve the effective render state for a display mode.

    Auto and Animated both fall back to the static overlay when no animation
    frames are available, so the map never goes blank because of a feed error.

    Args:
        mode: User-selected display mode
        has_frames: Whether the active layer's FrameSet is non-empty

    Returns:
        RenderState to apply
    """
    if mode is DisplayMode.OFF:
        return RenderState.OFF
    if mode is DisplayMode.STATIC:
        return RenderState.STATIC
    return RenderState.ANIMATED if has_frames else RenderState.STATIC
