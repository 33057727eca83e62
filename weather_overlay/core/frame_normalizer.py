"""Normalize raw provider payloads into FrameSets.

Radar payloads carry explicit ``past`` and ``nowcast`` timestamp lists (or, in
the legacy API shape, a bare list of timestamps). Satellite payloads have no
fixed schema, so frames are found by walking the whole structure and picking
up every object that exposes a ``path`` identifier.
"""

import math
from typing import Any

from weather_overlay.core.config import MAX_WALK_DEPTH
from weather_overlay.core.errors import FeedMalformed
from weather_overlay.models.enums import LayerType
from weather_overlay.models.frame import Frame, FrameSet

# Preferred band subtree inside the satellite section, per layer type
SATELLITE_BANDS: dict[LayerType, str] = {
    LayerType.SATELLITE: "visible",
    LayerType.CLOUDS: "infrared",
    LayerType.TEMPERATURE: "infrared",
}


def coerce_timestamp(value: Any) -> int | None:
    """
    Coerce a raw frame entry to epoch seconds.

    Accepts numbers, numeric strings and ``{"time": ...}`` objects.

    Args:
        value: Raw entry from a provider payload

    Returns:
        Integer epoch seconds, or None for missing/non-finite values
    """
    if isinstance(value, dict):
        value = value.get("time")
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def cap_frames(frames: list[Frame], max_frames: int) -> tuple[Frame, ...]:
    """Keep the most recent ``max_frames`` frames (oldest dropped first)."""
    if max_frames <= 0:
        return ()
    return tuple(frames[-max_frames:])


def extract_radar_timestamps(payload: Any) -> list[int]:
    """
    Extract past + nowcast radar timestamps from a metadata payload.

    Args:
        payload: Decoded JSON (dict with a ``radar`` section, or legacy list)

    Returns:
        Timestamps in payload order (past first, then nowcast)

    Raises:
        FeedMalformed: If the payload is neither a mapping nor a list
    """
    if isinstance(payload, list):
        entries = payload
    elif isinstance(payload, dict):
        radar = payload.get("radar")
        if not isinstance(radar, dict):
            return []
        past = radar.get("past") if isinstance(radar.get("past"), list) else []
        nowcast = radar.get("nowcast") if isinstance(radar.get("nowcast"), list) else []
        entries = past + nowcast
    else:
        raise FeedMalformed(f"Unexpected radar payload type: {type(payload).__name__}")

    timestamps = []
    for entry in entries:
        timestamp = coerce_timestamp(entry)
        if timestamp is not None:
            timestamps.append(timestamp)
    return timestamps


def normalize_radar(payload: Any, max_frames: int) -> FrameSet:
    """
    Build the radar FrameSet from a metadata payload.

    Raises:
        FeedMalformed: If the payload shape is unrecognized
    """
    timestamps = sorted(set(extract_radar_timestamps(payload)))
    frames = [Frame(token=t, timestamp=t) for t in timestamps]
    return FrameSet(layer_type=LayerType.RADAR, frames=cap_frames(frames, max_frames))


def satellite_section(payload: Any) -> Any | None:
    """
    Return the satellite part of a bulk metadata payload.

    Returns:
        The ``satellite`` subtree, or None when the payload omits satellite data
    """
    if not isinstance(payload, dict):
        return None
    section = payload.get("satellite")
    if not section:
        return None
    return section


def _walk(node: Any, depth: int, found: list[Frame], seen: set[str]) -> None:
    """Depth-bounded visit collecting objects that expose a path identifier."""
    if depth > MAX_WALK_DEPTH:
        return

    if isinstance(node, dict):
        path = node.get("path")
        if isinstance(path, str) and path and path not in seen:
            seen.add(path)
            found.append(Frame(token=path, timestamp=coerce_timestamp(node.get("time"))))
        children = node.values()
    elif isinstance(node, (list, tuple)):
        children = node
    else:
        return

    for child in children:
        _walk(child, depth + 1, found, seen)


def collect_path_frames(node: Any) -> list[Frame]:
    """
    Collect satellite frames from an arbitrarily nested structure.

    Frames are deduplicated by path (first occurrence wins) and sorted by
    time, with frames lacking a time sorted as time 0.
    """
    found: list[Frame] = []
    _walk(node, 0, found, set())
    return sorted(found, key=lambda frame: frame.sort_time)


def normalize_satellite(section: Any, layer_type: LayerType, max_frames: int) -> FrameSet:
    """
    Build a satellite-family FrameSet from a satellite section.

    Uses the layer's band subtree (``visible`` / ``infrared``) when present,
    otherwise walks the whole section.

    Args:
        section: Satellite section of a payload (any shape)
        layer_type: Satellite, Clouds or Temperature
        max_frames: Frame cap
    """
    node = section
    band = SATELLITE_BANDS.get(layer_type)
    if isinstance(section, dict) and band and section.get(band):
        node = section[band]

    frames = collect_path_frames(node)
    return FrameSet(layer_type=layer_type, frames=cap_frames(frames, max_frames))
