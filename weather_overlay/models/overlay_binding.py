"""Protocols for the map overlay seam and the playback clock."""

from typing import Callable, Protocol


class OverlayBinding(Protocol):
    """Protocol for the thin adapter that owns the rendered map overlays.

    At most one static and one animated overlay exist at any time. The
    animation engine decides which one is attached; the binding holds the
    overlay objects and talks to the map library.
    """

    @property
    def static_attached(self) -> bool:
        """Whether the static overlay is currently on the map."""
        ...

    @property
    def animated_attached(self) -> bool:
        """Whether the animated overlay is currently on the map."""
        ...

    @property
    def has_animated(self) -> bool:
        """Whether an animated overlay object exists (attached or not)."""
        ...

    def show_static(self, url_template: str, attribution: str, opacity: float) -> None:
        """Attach the static overlay, or re-point it if already attached.

        Args:
            url_template: Static tile template with {z}/{x}/{y} placeholders
            attribution: Attribution text for the layer
            opacity: Overlay opacity (0.2-1.0)
        """
        ...

    def hide_static(self) -> None:
        """Detach the static overlay if attached."""
        ...

    def create_animated(self, url_template: str, tile_size: int, opacity: float, attribution: str) -> None:
        """Create the animated overlay object without attaching it.

        Args:
            url_template: Tile template of the frame to show first
            tile_size: 256 or 512 (512 needs a zoom offset of -1)
            opacity: Overlay opacity
            attribution: Attribution text for the layer
        """
        ...

    def set_animated_url(self, url_template: str) -> None:
        """Swap the animated overlay's URL in place (no re-creation)."""
        ...

    def show_animated(self) -> None:
        """Attach the existing animated overlay."""
        ...

    def hide_animated(self) -> None:
        """Detach the animated overlay if attached."""
        ...

    def discard_animated(self) -> None:
        """Detach and drop the animated overlay object."""
        ...

    def set_opacity(self, opacity: float) -> None:
        """Apply opacity to both overlay kinds."""
        ...


class PlaybackScheduler(Protocol):
    """Protocol for the recurring playback clock."""

    @property
    def is_active(self) -> bool:
        """Whether a timer is currently running."""
        ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Start calling ``callback`` every ``interval_ms``.

        Raises:
            ScheduleAlreadyRunning: If a timer is already active
        """
        ...

    def stop(self) -> None:
        """Cancel the running timer (no-op if none)."""
        ...
