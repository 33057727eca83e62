"""Attribution utilities for weather overlay layers."""

from weather_overlay.core.config import LAYERS
from weather_overlay.models.enums import LayerType


def attribution_for(layer_type: LayerType) -> str:
    """Attribution text for a single layer (animated source / static source)."""
    return LAYERS[layer_type].attribution
