"""Frame and FrameSet models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from weather_overlay.models.enums import LayerType


@dataclass(frozen=True)
class Frame:
    """One renderable instant of animated imagery.

    Radar frames use the epoch-seconds timestamp as their token. Satellite
    frames use the provider's opaque path as token and may carry a timestamp.
    """

    token: int | str
    timestamp: int | None = None

    @property
    def sort_time(self) -> int:
        """Timestamp used for ordering (frames without one sort as 0)."""
        return self.timestamp if self.timestamp is not None else 0

    def as_datetime(self) -> datetime | None:
        """Frame time as an aware UTC datetime, or None if unknown."""
        if self.timestamp is None:
            return None
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc)


@dataclass(frozen=True)
class FrameSet:
    """Ordered, deduplicated, capped frames for one layer type.

    Rebuilt wholesale on each refresh and never mutated afterwards.
    """

    layer_type: LayerType
    frames: tuple[Frame, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.frames)

    def __bool__(self) -> bool:
        return bool(self.frames)

    def __getitem__(self, index: int) -> Frame:
        return self.frames[index]

    @property
    def tokens(self) -> list[int | str]:
        """Frame tokens in display order."""
        return [frame.token for frame in self.frames]

    @property
    def last_index(self) -> int | None:
        """Index of the most recent frame, or None when empty."""
        return len(self.frames) - 1 if self.frames else None

    @classmethod
    def empty(cls, layer_type: LayerType) -> "FrameSet":
        """Create an empty FrameSet for a layer."""
        return cls(layer_type=layer_type, frames=())
