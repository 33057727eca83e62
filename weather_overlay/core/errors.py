"""Error taxonomy for frame feeds and playback scheduling."""

from weather_overlay.models.enums import LayerType


class FeedError(Exception):
    """Base class for recoverable frame feed errors."""


class FeedUnavailable(FeedError):
    """Network or HTTP failure while fetching a feed."""


class FeedMalformed(FeedError):
    """Feed body is not JSON or does not match the expected shape."""


class NoFramesForLayer(FeedError):
    """Feed succeeded but yielded zero usable frames for a layer."""

    def __init__(self, layer_type: LayerType):
        self.layer_type = layer_type
        super().__init__(f"No usable frames for layer: {layer_type.value}")


class ScheduleAlreadyRunning(RuntimeError):
    """Playback timer started while another one is still active."""
