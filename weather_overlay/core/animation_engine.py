"""Layer animation engine: display-mode policy and frame playback."""

import logging
import math
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from weather_overlay.core.config import (
    DEFAULT_OPACITY,
    FRAME_INTERVAL_BY_TILE_SIZE,
    LAYERS,
    MAX_FRAME_INTERVAL,
    MAX_OPACITY,
    MIN_FRAME_INTERVAL,
    MIN_OPACITY,
    TILE_SIZES,
)
from weather_overlay.core.errors import FeedError, FeedMalformed, FeedUnavailable
from weather_overlay.core.resource_budget import DeviceProfile, clamp_max_frames, recommended_max_frames
from weather_overlay.core.tile_urls import TileUrlResolver
from weather_overlay.models.animation_state import AnimationState
from weather_overlay.models.enums import DisplayMode, LayerType, RenderState, resolve_render_state
from weather_overlay.models.frame import FrameSet
from weather_overlay.models.overlay_binding import OverlayBinding, PlaybackScheduler

logger = logging.getLogger(__name__)


class AnimationEngine:
    """Owns the AnimationState and sequences every transition.

    All commands run to completion on the caller's thread (the UI event
    loop). The engine decides which overlay is attached; the binding holds
    the overlay objects, and the scheduler drives playback.

    Usage:
        engine = AnimationEngine(map_widget, QtPlaybackTimer())
        engine.on_frame_data_refreshed(result.frame_sets, result.errors)
        engine.select_mode(DisplayMode.AUTO)
        engine.play()
    """

    def __init__(
        self,
        binding: OverlayBinding,
        scheduler: PlaybackScheduler,
        state: Optional[AnimationState] = None,
        device_profile: Optional[DeviceProfile] = None,
    ):
        """
        Initialize animation engine.

        Args:
            binding: Map overlay adapter
            scheduler: Recurring playback clock
            state: Initial state (default: fresh state sized for the device)
            device_profile: Device constraints for the frame budget
        """
        self.binding = binding
        self.scheduler = scheduler
        self._recommended_max_frames = recommended_max_frames(device_profile)
        self._state = state or AnimationState(max_frames=self._recommended_max_frames)
        self._frame_sets: dict[LayerType, FrameSet] = {
            layer_type: FrameSet.empty(layer_type) for layer_type in LayerType
        }
        self._feed_errors: dict[LayerType, FeedError] = {}
        self._listeners: list[Callable[["AnimationEngine"], None]] = []

        # Start with playback stopped regardless of the initial state
        self._state.is_playing = False
        self._state.frame_index = None

    # ============================================================
    # Read-only projections
    # ============================================================

    @property
    def state(self) -> AnimationState:
        """Current state (mutate only through engine commands)."""
        return self._state

    @property
    def max_frames(self) -> int:
        """Frame cap to use for the next refresh."""
        return self._state.max_frames

    @property
    def recommended_max_frames(self) -> int:
        """Frame cap recommended for this device."""
        return self._recommended_max_frames

    @property
    def active_frames(self) -> FrameSet:
        """FrameSet of the active layer type."""
        return self._frame_sets[self._state.layer_type]

    def frame_set(self, layer_type: LayerType) -> FrameSet:
        """Cached FrameSet for any layer type."""
        return self._frame_sets[layer_type]

    def render_state(self) -> RenderState:
        """Effective overlay for the current mode and frame availability."""
        return resolve_render_state(self._state.display_mode, bool(self.active_frames))

    def frame_count(self) -> int:
        """Number of frames in the active FrameSet."""
        return len(self.active_frames)

    def is_playing(self) -> bool:
        """Whether playback is running."""
        return self._state.is_playing

    def current_frame_timestamp(self) -> int | None:
        """Epoch seconds of the displayed frame, or None."""
        frames = self.active_frames
        if not frames or self._state.frame_index is None:
            return None
        return frames[self._state.frame_index].timestamp

    def current_frame_time(self) -> datetime | None:
        """Displayed frame time as a UTC datetime, or None."""
        frames = self.active_frames
        if not frames or self._state.frame_index is None:
            return None
        return frames[self._state.frame_index].as_datetime()

    def diagnostic_summary(self) -> str:
        """Human-readable status line for the UI."""
        layer = LAYERS[self._state.layer_type]
        render = self.render_state()

        if render is RenderState.OFF:
            status = "Overlay off"
        elif render is RenderState.ANIMATED:
            status = (
                f"Animated {layer.animated_source} • {self.frame_count()} frames "
                f"@ {self._state.frame_interval_ms}ms"
            )
        elif self._state.display_mode is DisplayMode.STATIC:
            status = f"Static {layer.static_source} tiles"
        else:
            error = self._feed_errors.get(self._state.layer_type)
            if isinstance(error, (FeedUnavailable, FeedMalformed)):
                status = f"Animated {layer.display_name.lower()} failed; showing static {layer.static_source}."
            else:
                status = f"{layer.display_name} frames unavailable; showing static {layer.static_source}."

        return (
            f"{status} • Recommended max frames: {self._recommended_max_frames} "
            f"• Using: {self._state.max_frames}"
        )

    def add_listener(self, callback: Callable[["AnimationEngine"], None]) -> None:
        """Register a callback run after every transition."""
        self._listeners.append(callback)

    # ============================================================
    # Commands
    # ============================================================

    def select_layer_type(self, layer_type: LayerType) -> None:
        """
        Switch the displayed layer type.

        Playback is paused for the switch and resumed afterwards if it was
        running and the new FrameSet has frames.

        Args:
            layer_type: Layer to display
        """
        was_playing = self._state.is_playing
        self._stop_playback()

        self._state.layer_type = layer_type
        frames = self.active_frames
        self._state.frame_index = frames.last_index

        # Templates and attribution differ per layer
        self.binding.discard_animated()
        if frames:
            self._display_frame(frames.last_index)
        self._apply_render_state()

        if was_playing and frames:
            self._start_playback()

        logger.info(f"Layer type: {layer_type.value} ({len(frames)} frames)")
        self._notify()

    def select_mode(self, mode: DisplayMode) -> None:
        """
        Set the display mode and attach the matching overlay.

        Args:
            mode: Display mode policy
        """
        self._state.display_mode = mode
        self._apply_render_state()
        logger.info(f"Display mode: {mode.value} -> {self.render_state().value}")
        self._notify()

    def set_resolution(self, tile_size: int) -> None:
        """
        Change the tile size and the size-dependent frame interval.

        The animated overlay is re-created because its template differs by
        size; the frame index is kept.

        Args:
            tile_size: 256 or 512

        Raises:
            ValueError: If tile_size is unsupported
        """
        if tile_size not in TILE_SIZES:
            raise ValueError(f"Tile size must be one of {TILE_SIZES}, got {tile_size}")

        was_playing = self._state.is_playing
        self._stop_playback()

        self._state.tile_size = tile_size
        self._state.frame_interval_ms = FRAME_INTERVAL_BY_TILE_SIZE[tile_size]

        self.binding.discard_animated()
        if self.active_frames:
            self._display_frame(self._current_or_last_index())
        self._apply_render_state()

        if was_playing:
            self._start_playback()

        logger.info(f"Resolution: {tile_size}px @ {self._state.frame_interval_ms}ms")
        self._notify()

    def set_opacity(self, value: Any) -> float:
        """
        Set overlay opacity, clamped to [0.20, 1.00].

        Args:
            value: Requested opacity

        Returns:
            Applied opacity
        """
        try:
            opacity = float(value)
        except (TypeError, ValueError):
            opacity = DEFAULT_OPACITY
        if math.isnan(opacity):
            opacity = DEFAULT_OPACITY

        opacity = max(MIN_OPACITY, min(MAX_OPACITY, opacity))
        self._state.opacity = opacity
        self.binding.set_opacity(opacity)
        self._notify()
        return opacity

    def set_frame_interval(self, value: Any) -> int:
        """
        Set the playback interval, clamped to [120, 800] ms.

        A running timer is restarted at the new rate.

        Args:
            value: Requested interval in milliseconds

        Returns:
            Applied interval
        """
        default = FRAME_INTERVAL_BY_TILE_SIZE[self._state.tile_size]
        try:
            interval = float(value)
        except (TypeError, ValueError):
            interval = default
        if math.isnan(interval):
            interval = default

        interval = int(max(MIN_FRAME_INTERVAL, min(MAX_FRAME_INTERVAL, interval)))
        self._state.frame_interval_ms = interval

        if self._state.is_playing:
            self._stop_playback()
            self._start_playback()

        self._notify()
        return interval

    def set_max_frames(self, value: Any) -> int:
        """
        Set the frame cap for the next refresh, clamped to [6, 60].

        Current FrameSets are left untouched.

        Args:
            value: Requested frame count

        Returns:
            Applied frame cap
        """
        self._state.max_frames = clamp_max_frames(value, self._recommended_max_frames)
        self._notify()
        return self._state.max_frames

    def play(self) -> None:
        """Start playback (no-op if already playing or no frames)."""
        if self._state.is_playing or not self.active_frames:
            return
        self._start_playback()
        self._notify()

    def pause(self) -> None:
        """Stop playback (idempotent)."""
        self._stop_playback()
        self._notify()

    def toggle_playback(self) -> None:
        """Play if paused, pause if playing."""
        if self._state.is_playing:
            self.pause()
        else:
            self.play()

    def scrub_to(self, frame_index: int) -> None:
        """
        Pause and display a specific frame.

        Args:
            frame_index: Frame to show (taken modulo the frame count);
                non-numeric input keeps the current frame
        """
        self._stop_playback()
        try:
            index = int(frame_index)
        except (TypeError, ValueError, OverflowError):
            logger.warning(f"Ignoring invalid frame index: {frame_index!r}")
            index = None

        if self.active_frames and index is not None:
            self._display_frame(index)
        self._notify()

    def advance_frame(self, direction: int = 1) -> None:
        """
        Step the animation by ``direction`` frames, wrapping around.

        Args:
            direction: +1 for next, -1 for previous
        """
        if not self.active_frames:
            return
        self._display_frame(self._current_or_last_index() + direction)
        self._notify()

    # ============================================================
    # Refresh results
    # ============================================================

    def on_frame_data_refreshed(
        self,
        frame_sets: Mapping[LayerType, FrameSet],
        errors: Optional[Mapping[LayerType, FeedError]] = None,
    ) -> None:
        """
        Apply freshly normalized FrameSets.

        Every delivered FrameSet replaces the cached one. Overlays are only
        touched when the delivery includes the currently active layer, so a
        response for a layer the user has since switched away from never
        renders over the newer selection.

        Args:
            frame_sets: New FrameSets keyed by layer type
            errors: Feed errors for the delivered layers
        """
        errors = errors or {}
        active = self._state.layer_type
        previous = self.active_frames

        for layer_type, frame_set in frame_sets.items():
            self._frame_sets[layer_type] = frame_set
            if layer_type in errors:
                self._feed_errors[layer_type] = errors[layer_type]
            else:
                self._feed_errors.pop(layer_type, None)

        if active not in frame_sets:
            logger.debug(f"Refresh for inactive layers {[lt.value for lt in frame_sets]}; cached only")
            self._notify()
            return

        self._rebind_active(previous, self.active_frames)
        logger.info(f"Frames refreshed for {active.value}: {len(previous)} -> {self.frame_count()}")
        self._notify()

    def on_refresh_failed(self, error: FeedError) -> None:
        """
        Degrade every layer to empty after a whole-refresh failure.

        Args:
            error: Failure that aborted the refresh
        """
        logger.warning(f"Frame refresh failed: {error}")
        self.on_frame_data_refreshed(
            {layer_type: FrameSet.empty(layer_type) for layer_type in LayerType},
            {layer_type: error for layer_type in LayerType},
        )

    # ============================================================
    # Internals
    # ============================================================

    def _rebind_active(self, previous: FrameSet, current: FrameSet) -> None:
        """Re-point the active layer after its FrameSet was replaced."""
        if not current:
            self._stop_playback()
            self._state.frame_index = None
            self.binding.discard_animated()
        elif not previous or self._state.frame_index is None:
            self._display_frame(current.last_index)
        else:
            # Keep position, clamped into the new bounds
            self._display_frame(min(self._state.frame_index, len(current) - 1))

        self._apply_render_state()

    def _current_or_last_index(self) -> int:
        if self._state.frame_index is None:
            return self.active_frames.last_index
        return self._state.frame_index

    def _display_frame(self, index: int) -> None:
        """Show frame ``index`` (modulo frame count) on the animated overlay."""
        frames = self.active_frames
        if not frames:
            return

        self._state.frame_index = index % len(frames)
        layer_type = self._state.layer_type
        url = TileUrlResolver.animated_url(layer_type, frames[self._state.frame_index], self._state.tile_size)

        if self.binding.has_animated:
            self.binding.set_animated_url(url)
            return

        self.binding.create_animated(
            url,
            self._state.tile_size,
            self._state.opacity,
            TileUrlResolver.attribution(layer_type),
        )
        if self.render_state() is RenderState.ANIMATED:
            # Static must be gone before the animated overlay goes on
            self.binding.hide_static()
            self.binding.show_animated()

    def _apply_render_state(self) -> None:
        """Attach the overlay the current mode calls for and detach the other."""
        render = self.render_state()
        layer_type = self._state.layer_type

        if render is RenderState.OFF:
            self.binding.hide_animated()
            self.binding.hide_static()
        elif render is RenderState.STATIC:
            self.binding.hide_animated()
            self.binding.show_static(
                TileUrlResolver.static_url(layer_type),
                TileUrlResolver.attribution(layer_type),
                self._state.opacity,
            )
        else:
            self.binding.hide_static()
            if not self.binding.has_animated:
                self._display_frame(self._current_or_last_index())
            self.binding.show_animated()

    def _start_playback(self) -> None:
        self.scheduler.start(self._state.frame_interval_ms, self._on_tick)
        self._state.is_playing = True

    def _stop_playback(self) -> None:
        self.scheduler.stop()
        self._state.is_playing = False

    def _on_tick(self) -> None:
        self.advance_frame(1)

    def _notify(self) -> None:
        for callback in self._listeners:
            callback(self)
