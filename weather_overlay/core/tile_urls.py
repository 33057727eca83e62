"""Tile URL templates for animated and static weather layers."""

from weather_overlay.core.config import LAYERS, RAINVIEWER_TILE_HOST, TILE_SIZES
from weather_overlay.models.enums import LayerType
from weather_overlay.models.frame import Frame
from weather_overlay.utils.attribution import attribution_for


class TileUrlResolver:
    """Pure mapping from (layer, frame token, tile size) to tile templates.

    Every template keeps the ``{z}/{x}/{y}`` placeholders for the map library
    to fill in per visible tile.
    """

    @staticmethod
    def animated_url(layer_type: LayerType, token: int | str | Frame, tile_size: int = 256) -> str:
        """
        Build the animated tile template for one frame.

        Args:
            layer_type: Layer being displayed
            token: Frame token (radar timestamp or satellite path), or a Frame
            tile_size: 256 or 512

        Returns:
            Tile URL template

        Raises:
            ValueError: If tile_size is unsupported
        """
        if tile_size not in TILE_SIZES:
            raise ValueError(f"Tile size must be one of {TILE_SIZES}, got {tile_size}")

        if isinstance(token, Frame):
            token = token.token

        suffix = LAYERS[layer_type].animated_suffix
        if layer_type is LayerType.RADAR:
            return f"{RAINVIEWER_TILE_HOST}/v2/radar/{token}/{tile_size}/{{z}}/{{x}}/{{y}}/{suffix}"

        path = "/" + str(token).strip("/")
        return f"{RAINVIEWER_TILE_HOST}{path}/{tile_size}/{{z}}/{{x}}/{{y}}/{suffix}"

    @staticmethod
    def static_url(layer_type: LayerType) -> str:
        """Static fallback template for a layer."""
        return LAYERS[layer_type].static_url_template

    @staticmethod
    def attribution(layer_type: LayerType) -> str:
        """Attribution text for a layer."""
        return attribution_for(layer_type)
