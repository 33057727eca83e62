"""Animation state model."""

from dataclasses import dataclass

from weather_overlay.core.config import (
    DEFAULT_OPACITY,
    DEFAULT_TILE_SIZE,
    FRAME_INTERVAL_BY_TILE_SIZE,
    MAX_FRAME_INTERVAL,
    MAX_MAX_FRAMES,
    MAX_OPACITY,
    MIN_FRAME_INTERVAL,
    MIN_MAX_FRAMES,
    MIN_OPACITY,
    TILE_SIZES,
)
from weather_overlay.models.enums import DisplayMode, LayerType


@dataclass
class AnimationState:
    """The single mutable aggregate owned by the animation engine."""

    layer_type: LayerType = LayerType.RADAR
    display_mode: DisplayMode = DisplayMode.AUTO
    frame_index: int | None = None  # None while the active FrameSet is empty
    is_playing: bool = False
    tile_size: int = DEFAULT_TILE_SIZE
    opacity: float = DEFAULT_OPACITY
    frame_interval_ms: int = FRAME_INTERVAL_BY_TILE_SIZE[DEFAULT_TILE_SIZE]
    max_frames: int = 36

    def __post_init__(self):
        """Validate state bounds."""
        if self.tile_size not in TILE_SIZES:
            raise ValueError(f"Tile size must be one of {TILE_SIZES}, got {self.tile_size}")

        if not MIN_OPACITY <= self.opacity <= MAX_OPACITY:
            raise ValueError(f"Opacity must be between {MIN_OPACITY} and {MAX_OPACITY}, got {self.opacity}")

        if not MIN_FRAME_INTERVAL <= self.frame_interval_ms <= MAX_FRAME_INTERVAL:
            raise ValueError(
                f"Frame interval must be between {MIN_FRAME_INTERVAL} and {MAX_FRAME_INTERVAL} ms, "
                f"got {self.frame_interval_ms}"
            )

        if not MIN_MAX_FRAMES <= self.max_frames <= MAX_MAX_FRAMES:
            raise ValueError(f"Max frames must be between {MIN_MAX_FRAMES} and {MAX_MAX_FRAMES}, got {self.max_frames}")
