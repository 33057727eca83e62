"""Configuration for weather overlay layers and application settings."""

from dataclasses import dataclass

from weather_overlay.models.enums import LayerType

RAINVIEWER_TILE_HOST = "https://tilecache.rainviewer.com"
MESONET_TILE_HOST = "https://mesonet.agron.iastate.edu/cache/tile.py/1.0.0"


@dataclass(frozen=True)
class LayerConfig:
    """Configuration for one weather layer type.

    Each layer has a single static fallback template and one family of
    animated templates (selected by frame token and tile size).
    """

    layer_type: LayerType
    display_name: str
    description: str
    static_layer: str
    static_source: str
    animated_source: str
    animated_suffix: str

    @property
    def static_url_template(self) -> str:
        """Static fallback tile template (only {z}/{x}/{y} placeholders)."""
        return f"{MESONET_TILE_HOST}/{self.static_layer}/{{z}}/{{x}}/{{y}}.png"

    @property
    def attribution(self) -> str:
        """Attribution text combining the animated and static sources."""
        return f"{self.animated_source} / {self.static_source}"


# Radar tiles: color scheme 2, smoothing on, snow mask on
RADAR_SUFFIX = "2/1_1.png"
# Satellite tiles: color scheme 0; the trailing option selects the band
SATELLITE_VISIBLE_SUFFIX = "0/0_1.png"
SATELLITE_INFRARED_SUFFIX = "0/0_0.png"

LAYERS: dict[LayerType, LayerConfig] = {
    LayerType.RADAR: LayerConfig(
        layer_type=LayerType.RADAR,
        display_name="Radar",
        description="Precipitation radar mosaic (past + nowcast)",
        static_layer="ridge::USCOMP-N0Q-0",
        static_source="Iowa State Mesonet / NWS NEXRAD",
        animated_source="RainViewer",
        animated_suffix=RADAR_SUFFIX,
    ),
    LayerType.SATELLITE: LayerConfig(
        layer_type=LayerType.SATELLITE,
        display_name="Satellite",
        description="Visible-band satellite imagery",
        static_layer="goes-east-vis-1km-900913",
        static_source="Iowa State Mesonet / NOAA GOES",
        animated_source="RainViewer Satellite",
        animated_suffix=SATELLITE_VISIBLE_SUFFIX,
    ),
    LayerType.CLOUDS: LayerConfig(
        layer_type=LayerType.CLOUDS,
        display_name="Clouds",
        description="Infrared cloud cover",
        static_layer="goes-east-ir-4km-900913",
        static_source="Iowa State Mesonet / NOAA GOES IR",
        animated_source="RainViewer Infrared",
        animated_suffix=SATELLITE_INFRARED_SUFFIX,
    ),
    LayerType.TEMPERATURE: LayerConfig(
        layer_type=LayerType.TEMPERATURE,
        display_name="Temperature",
        description="Cloud-top temperature proxy from infrared imagery",
        static_layer="goes-east-ir-4km-900913",
        static_source="Iowa State Mesonet / NOAA GOES IR",
        animated_source="RainViewer Infrared",
        animated_suffix=SATELLITE_INFRARED_SUFFIX,
    ),
}

# Feed endpoints
WEATHER_MAPS_URL = "https://api.rainviewer.com/public/weather-maps.json"
SATELLITE_FEED_URL = "https://api.rainviewer.com/public/satellite-maps.json"

# Feed download settings
FEED_TIMEOUT = 15  # seconds
MAX_RETRIES = 3
RETRY_DELAY = 1  # seconds

# Recursive satellite payload walk limit
MAX_WALK_DEPTH = 8

# Tile settings
TILE_SIZES = (256, 512)
DEFAULT_TILE_SIZE = 256
FRAME_INTERVAL_BY_TILE_SIZE = {256: 450, 512: 650}  # ms

# Playback and overlay limits
MIN_OPACITY = 0.20
MAX_OPACITY = 1.00
DEFAULT_OPACITY = 0.6
MIN_FRAME_INTERVAL = 120  # ms
MAX_FRAME_INTERVAL = 800  # ms
MIN_MAX_FRAMES = 6
MAX_MAX_FRAMES = 60

# Refresh
DEFAULT_REFRESH_MINUTES = 10

# UI settings
DEFAULT_MAP_CENTER = [35.551, -80.407]  # Rockwell, NC
DEFAULT_MAP_ZOOM = 9
