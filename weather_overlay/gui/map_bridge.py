"""Bridge object exposed to the map page over QWebChannel."""

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot


class MapBridge(QObject):
    """Bridge for JavaScript to Python communication."""

    map_ready = pyqtSignal()  # Emitted once Leaflet has initialized
    view_changed = pyqtSignal(float, float, int)  # lat, lon, zoom

    @pyqtSlot()
    def on_ready(self):
        """Receive notification that the map page finished loading."""
        self.map_ready.emit()

    @pyqtSlot(float, float, int)
    def on_view_changed(self, lat: float, lon: float, zoom: int):
        """
        Receive the map view after a pan or zoom.

        Args:
            lat: Latitude of the map centre
            lon: Longitude of the map centre
            zoom: Current zoom level
        """
        self.view_changed.emit(lat, lon, zoom)
