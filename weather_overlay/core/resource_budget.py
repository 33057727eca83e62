"""Frame-count budgeting from device constraints."""

import logging
import math
import sys
from dataclasses import dataclass
from typing import Any

import psutil

from weather_overlay.core.config import MAX_MAX_FRAMES, MIN_MAX_FRAMES

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_GB = 4  # mid-tier when the device does not report memory
MOBILE_PLATFORMS = ("android", "ios")


@dataclass(frozen=True)
class DeviceProfile:
    """Approximate device constraints used to size the animation."""

    memory_gb: float | None = None
    is_mobile: bool = False

    @classmethod
    def detect(cls) -> "DeviceProfile":
        """
        Detect the current device's memory tier and platform class.

        Returns:
            DeviceProfile (memory_gb is None if it cannot be determined)
        """
        try:
            memory_gb = psutil.virtual_memory().total / (1024**3)
        except (OSError, RuntimeError) as e:
            logger.debug(f"Could not read device memory: {e}")
            memory_gb = None

        return cls(memory_gb=memory_gb, is_mobile=sys.platform in MOBILE_PLATFORMS)


def recommended_max_frames(profile: DeviceProfile | None = None) -> int:
    """
    Compute the recommended frame ceiling for a device.

    24 frames on mobile; on desktop 48 for >= 8 GB, 36 for >= 4 GB and 24
    below that. Never above the global cap.

    Args:
        profile: Device profile (defaults to an unknown mid-tier desktop)

    Returns:
        Recommended max frames
    """
    profile = profile or DeviceProfile()
    memory = profile.memory_gb if profile.memory_gb is not None else DEFAULT_MEMORY_GB

    if profile.is_mobile:
        frames = 24
    elif memory >= 8:
        frames = 48
    elif memory >= 4:
        frames = 36
    else:
        frames = 24

    return min(MAX_MAX_FRAMES, frames)


def clamp_max_frames(value: Any, recommended: int) -> int:
    """
    Clamp a user override into the allowed frame range.

    Non-numeric and NaN input falls back to the recommended value. Any
    other number, infinities included, is clamped silently and truncated
    to an integer.

    Args:
        value: User-provided frame count (int, float or numeric string)
        recommended: Value used when input cannot be parsed

    Returns:
        Frame count within [MIN_MAX_FRAMES, MAX_MAX_FRAMES]
    """
    try:
        frames = float(value)
    except (TypeError, ValueError):
        frames = float(recommended)
    if math.isnan(frames):
        frames = float(recommended)

    return int(max(MIN_MAX_FRAMES, min(MAX_MAX_FRAMES, frames)))
