"""QTimer-backed playback clock."""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from weather_overlay.core.errors import ScheduleAlreadyRunning

logger = logging.getLogger(__name__)


class QtPlaybackTimer(QObject):
    """Recurring timer on the Qt event loop driving frame advances."""

    def __init__(self, parent: Optional[QObject] = None):
        """Initialize playback timer."""
        super().__init__(parent)
        self._timer = QTimer(self)
        self._callback: Optional[Callable[[], None]] = None
        self._timer.timeout.connect(self._on_timeout)

    @property
    def is_active(self) -> bool:
        """Whether the timer is running."""
        return self._timer.isActive()

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """
        Start the recurring timer.

        Args:
            interval_ms: Interval between ticks
            callback: Called on every tick

        Raises:
            ScheduleAlreadyRunning: If the timer is already running
        """
        if self._timer.isActive():
            raise ScheduleAlreadyRunning("Playback timer is already running; stop it first")

        self._callback = callback
        self._timer.start(interval_ms)
        logger.debug(f"Playback timer started @ {interval_ms}ms")

    def stop(self) -> None:
        """Stop the timer (no-op if stopped)."""
        if self._timer.isActive():
            self._timer.stop()
            logger.debug("Playback timer stopped")
        self._callback = None

    def _on_timeout(self):
        if self._callback:
            self._callback()
