"""Frame feed client for the radar/satellite metadata endpoints."""

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

import aiohttp

from weather_overlay.core.config import (
    FEED_TIMEOUT,
    MAX_RETRIES,
    RETRY_DELAY,
    SATELLITE_FEED_URL,
    WEATHER_MAPS_URL,
)
from weather_overlay.core.errors import FeedError, FeedMalformed, FeedUnavailable, NoFramesForLayer
from weather_overlay.core.frame_normalizer import normalize_radar, normalize_satellite, satellite_section
from weather_overlay.models.enums import LayerType
from weather_overlay.models.frame import FrameSet

logger = logging.getLogger(__name__)


@dataclass
class FeedRefreshResult:
    """Outcome of one refresh: a FrameSet per requested layer plus per-layer errors."""

    frame_sets: dict[LayerType, FrameSet]
    errors: dict[LayerType, FeedError] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        """True when no requested layer produced any frame."""
        return not any(self.frame_sets.values())


class FrameFeedClient:
    """Client for the bulk weather-maps feed and the satellite fallback feed."""

    def __init__(
        self,
        weather_maps_url: str = WEATHER_MAPS_URL,
        satellite_url: str = SATELLITE_FEED_URL,
        retry_delay: float = RETRY_DELAY,
    ):
        """
        Initialize feed client.

        Args:
            weather_maps_url: Bulk metadata endpoint (radar + satellite)
            satellite_url: Satellite-only endpoint used when the bulk feed omits satellite data
            retry_delay: Base delay between retries in seconds
        """
        self.weather_maps_url = weather_maps_url
        self.satellite_url = satellite_url
        self.retry_delay = retry_delay
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Async context manager entry."""
        self.session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=FEED_TIMEOUT)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self.session:
            await self.session.close()

    async def fetch_json(self, url: str) -> Any:
        """
        Fetch and decode a JSON document.

        Args:
            url: Endpoint URL

        Returns:
            Decoded JSON value

        Raises:
            FeedUnavailable: On HTTP 4xx or when retries are exhausted
            FeedMalformed: If the body is not valid JSON
        """
        for attempt in range(MAX_RETRIES):
            try:
                async with self.session.get(url) as response:
                    if response.status == 200:
                        body = await response.text()
                        try:
                            return json.loads(body)
                        except json.JSONDecodeError as e:
                            raise FeedMalformed(f"Invalid JSON from {url}: {e}") from e
                    elif 400 <= response.status < 500:
                        raise FeedUnavailable(f"HTTP {response.status} for {url}")
                    else:
                        logger.warning(
                            f"HTTP {response.status} for {url} (attempt {attempt + 1}/{MAX_RETRIES})"
                        )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(
                    f"Error fetching {url}: {e} (attempt {attempt + 1}/{MAX_RETRIES})"
                )

            if attempt < MAX_RETRIES - 1:
                await asyncio.sleep(self.retry_delay * (attempt + 1))

        logger.error(f"Failed to fetch feed after {MAX_RETRIES} attempts: {url}")
        raise FeedUnavailable(f"Failed to fetch {url} after {MAX_RETRIES} attempts")

    async def fetch_frame_sets(
        self,
        max_frames: int,
        layer_types: Optional[Iterable[LayerType]] = None,
    ) -> FeedRefreshResult:
        """
        Fetch feeds and build a FrameSet for each requested layer.

        Never raises: every feed error is recorded against the affected
        layers and their FrameSets are left empty.

        Args:
            max_frames: Frame cap applied to every FrameSet
            layer_types: Layers to refresh (default: all)

        Returns:
            FeedRefreshResult
        """
        wanted = list(layer_types) if layer_types else list(LayerType)
        frame_sets = {layer_type: FrameSet.empty(layer_type) for layer_type in wanted}
        errors: dict[LayerType, FeedError] = {}

        payload = None
        try:
            payload = await self.fetch_json(self.weather_maps_url)
        except FeedError as e:
            logger.error(f"Weather maps feed failed: {e}")
            errors = {layer_type: e for layer_type in wanted}

        if LayerType.RADAR in wanted and payload is not None:
            try:
                frame_sets[LayerType.RADAR] = normalize_radar(payload, max_frames)
            except FeedMalformed as e:
                logger.error(f"Radar frames unusable: {e}")
                errors[LayerType.RADAR] = e

        satellite_layers = [layer_type for layer_type in wanted if layer_type.is_satellite_family]
        if satellite_layers:
            section = satellite_section(payload)
            if section is None:
                logger.info("Primary feed omitted satellite data, trying satellite feed")
                try:
                    fallback = await self.fetch_json(self.satellite_url)
                    section = satellite_section(fallback)
                    if section is None:
                        section = fallback
                except FeedError as e:
                    logger.error(f"Satellite feed failed: {e}")
                    for layer_type in satellite_layers:
                        errors[layer_type] = e

            if section is not None:
                for layer_type in satellite_layers:
                    errors.pop(layer_type, None)
                    frame_sets[layer_type] = normalize_satellite(section, layer_type, max_frames)

        for layer_type, frame_set in frame_sets.items():
            if not frame_set and layer_type not in errors:
                errors[layer_type] = NoFramesForLayer(layer_type)
            logger.debug(f"{layer_type.value}: {len(frame_set)} frames")

        return FeedRefreshResult(frame_sets=frame_sets, errors=errors)


def refresh_frame_sets(
    max_frames: int,
    weather_maps_url: str = WEATHER_MAPS_URL,
    satellite_url: str = SATELLITE_FEED_URL,
    layer_types: Optional[Iterable[LayerType]] = None,
) -> FeedRefreshResult:
    """
    Run a complete refresh synchronously.

    Intended for worker threads and the CLI; it owns its event loop.

    Args:
        max_frames: Frame cap applied to every FrameSet
        weather_maps_url: Bulk metadata endpoint
        satellite_url: Satellite fallback endpoint
        layer_types: Layers to refresh (default: all)

    Returns:
        FeedRefreshResult
    """

    async def _run() -> FeedRefreshResult:
        async with FrameFeedClient(weather_maps_url, satellite_url) as client:
            return await client.fetch_frame_sets(max_frames, layer_types)

    return asyncio.run(_run())
