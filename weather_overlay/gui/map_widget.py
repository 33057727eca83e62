"""Map widget rendering weather overlays on a Leaflet map."""

import logging
import tempfile
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QUrl, pyqtSignal
from PyQt6.QtWebChannel import QWebChannel
from PyQt6.QtWebEngineCore import QWebEngineSettings
from PyQt6.QtWebEngineWidgets import QWebEngineView
from PyQt6.QtWidgets import QVBoxLayout, QWidget

from weather_overlay.core.config import DEFAULT_MAP_CENTER, DEFAULT_MAP_ZOOM
from weather_overlay.gui.map_bridge import MapBridge
from weather_overlay.utils.js_calls import PendingScripts, format_js_call

logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).parent.parent.parent / "resources" / "map_template.html"


class MapWidget(QWidget):
    """Widget displaying the map; implements the overlay binding.

    Overlay commands are forwarded to the page as JavaScript calls. Commands
    issued before the page is ready are queued and replayed on load, keeping
    only the latest frame URL, opacity and view. The widget mirrors what is
    attached so the engine can query it synchronously.
    """

    map_ready = pyqtSignal()

    def __init__(self, center: Optional[list[float]] = None, zoom: Optional[int] = None):
        """
        Initialize map widget.

        Args:
            center: [lat, lon] map centre (default: DEFAULT_MAP_CENTER)
            zoom: Initial zoom level (default: DEFAULT_MAP_ZOOM)
        """
        super().__init__()
        self.center = center or DEFAULT_MAP_CENTER
        self.current_zoom = zoom or DEFAULT_MAP_ZOOM

        self._ready = False
        self._pending_js = PendingScripts()
        self._static_attached = False
        self._animated_exists = False
        self._animated_attached = False

        self.bridge = MapBridge()
        self.bridge.map_ready.connect(self._on_map_ready)
        self.bridge.view_changed.connect(self._on_view_changed)

        self.init_ui()

    def init_ui(self):
        """Initialize the UI."""
        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)

        self.web_view = QWebEngineView()

        settings = self.web_view.page().settings()
        settings.setAttribute(QWebEngineSettings.WebAttribute.JavascriptEnabled, True)
        settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessFileUrls, True)
        # Allow local HTML to fetch remote tiles
        settings.setAttribute(QWebEngineSettings.WebAttribute.LocalContentCanAccessRemoteUrls, True)

        self.channel = QWebChannel()
        self.channel.registerObject('bridge', self.bridge)
        self.web_view.page().setWebChannel(self.channel)

        layout.addWidget(self.web_view)
        self.setLayout(layout)

        self.create_map()

    def create_map(self):
        """Render the map template and load it in the web view."""
        with open(TEMPLATE_PATH, 'r', encoding='utf-8') as f:
            template = f.read()

        html = template.replace('MAP_LAT', str(self.center[0]))
        html = html.replace('MAP_LON', str(self.center[1]))
        html = html.replace('MAP_ZOOM', str(self.current_zoom))

        with tempfile.NamedTemporaryFile(mode='w', suffix='.html', delete=False, encoding='utf-8') as f:
            f.write(html)
            temp_path = f.name

        self._ready = False
        self.web_view.setUrl(QUrl.fromLocalFile(temp_path))

    # ============================================================
    # Overlay binding
    # ============================================================

    @property
    def static_attached(self) -> bool:
        return self._static_attached

    @property
    def animated_attached(self) -> bool:
        return self._animated_attached

    @property
    def has_animated(self) -> bool:
        return self._animated_exists

    def show_static(self, url_template: str, attribution: str, opacity: float) -> None:
        self._run_js("showStatic", url_template, attribution, opacity)
        self._static_attached = True

    def hide_static(self) -> None:
        if self._static_attached:
            self._run_js("hideStatic")
            self._static_attached = False

    def create_animated(self, url_template: str, tile_size: int, opacity: float, attribution: str) -> None:
        # 512px tiles cover a 256px tile area one zoom level up
        zoom_offset = -1 if tile_size == 512 else 0
        self._run_js("createAnimated", url_template, tile_size, zoom_offset, opacity, attribution)
        self._animated_exists = True
        self._animated_attached = False

    def set_animated_url(self, url_template: str) -> None:
        if self._animated_exists:
            self._run_js("setAnimatedUrl", url_template)

    def show_animated(self) -> None:
        if self._animated_exists and not self._animated_attached:
            self._run_js("showAnimated")
            self._animated_attached = True

    def hide_animated(self) -> None:
        if self._animated_attached:
            self._run_js("hideAnimated")
            self._animated_attached = False

    def discard_animated(self) -> None:
        if self._animated_exists:
            self._run_js("discardAnimated")
        self._animated_exists = False
        self._animated_attached = False

    def set_opacity(self, opacity: float) -> None:
        self._run_js("setOverlayOpacity", opacity)

    def set_view(self, center: list[float], zoom: int) -> None:
        """Recentre the map."""
        self.center = list(center)
        self.current_zoom = zoom
        self._run_js("setView", center[0], center[1], zoom)

    # ============================================================
    # Internals
    # ============================================================

    def _run_js(self, function: str, *args) -> None:
        """Call a template function, queueing until the page is ready."""
        js_code = format_js_call(function, *args)

        if not self._ready:
            self._pending_js.add(function, js_code)
            return
        self.web_view.page().runJavaScript(js_code)

    def _on_map_ready(self):
        """Replay queued overlay commands once Leaflet is up."""
        self._ready = True
        pending = self._pending_js.drain()
        for js_code in pending:
            self.web_view.page().runJavaScript(js_code)
        logger.debug(f"Map ready, replayed {len(pending)} overlay commands")
        self.map_ready.emit()

    def _on_view_changed(self, lat: float, lon: float, zoom: int):
        self.center = [lat, lon]
        self.current_zoom = zoom
