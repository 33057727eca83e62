"""Main application window."""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QThread, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import QHBoxLayout, QMainWindow, QStatusBar, QWidget

from weather_overlay.core.animation_engine import AnimationEngine
from weather_overlay.core.errors import FeedUnavailable
from weather_overlay.core.feed_client import FeedRefreshResult, refresh_frame_sets
from weather_overlay.core.resource_budget import DeviceProfile, recommended_max_frames
from weather_overlay.gui.controls_panel import ControlsPanel
from weather_overlay.gui.file_operations import FileOperations
from weather_overlay.gui.map_widget import MapWidget
from weather_overlay.gui.playback_timer import QtPlaybackTimer
from weather_overlay.models.engine_settings import EngineSettings
from weather_overlay.models.enums import RenderState

logger = logging.getLogger(__name__)


class RefreshWorker(QThread):
    """Worker thread fetching and normalizing every layer's frames."""

    refreshed = pyqtSignal(object)  # FeedRefreshResult
    error = pyqtSignal(str)

    def __init__(self, settings: EngineSettings, max_frames: int):
        """
        Initialize refresh worker.

        Args:
            settings: Source of the feed endpoints
            max_frames: Frame cap for every layer
        """
        super().__init__()
        self.weather_maps_url = settings.weather_maps_url
        self.satellite_url = settings.satellite_url
        self.max_frames = max_frames

    def run(self):
        """Run the refresh."""
        try:
            result = refresh_frame_sets(self.max_frames, self.weather_maps_url, self.satellite_url)
            self.refreshed.emit(result)
        except Exception as e:
            logger.exception("Error during frame refresh")
            self.error.emit(str(e))


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize main window.

        Args:
            config_file: Optional settings file to load on startup
        """
        super().__init__()
        self.settings = EngineSettings()
        self.refresh_worker: Optional[RefreshWorker] = None
        self.pending_refresh_needed = False
        self._autoplay_pending = False

        self.file_ops = FileOperations(self)

        self.refresh_timer = QTimer(self)
        self.refresh_timer.timeout.connect(self.start_refresh)

        self.init_ui()

        if config_file and self.file_ops.load_file(Path(config_file), self.apply_settings):
            self._update_window_title()
        else:
            self.apply_settings(self.settings)

    def init_ui(self):
        """Initialize the UI."""
        self._create_menu_bar()
        self.setWindowTitle(self.file_ops.get_display_title())
        self.setGeometry(100, 100, 1200, 800)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout()

        # Left side: map (70% width)
        self.map_widget = MapWidget(self.settings.map_center, self.settings.map_zoom)
        self.map_widget.setMinimumWidth(700)
        main_layout.addWidget(self.map_widget, 7)

        self.device_profile = DeviceProfile.detect()
        self.playback_timer = QtPlaybackTimer(self)
        self.engine = AnimationEngine(
            self.map_widget,
            self.playback_timer,
            self.settings.to_animation_state(recommended_max_frames(self.device_profile)),
            self.device_profile,
        )

        # Right side: controls (30% width)
        self.controls_panel = ControlsPanel(self.engine)
        self.controls_panel.setMaximumWidth(400)
        main_layout.addWidget(self.controls_panel, 3)

        central_widget.setLayout(main_layout)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)
        self.status_bar.showMessage("Loading frames...")

        self.engine.add_listener(self._on_engine_changed)
        self.controls_panel.max_frames_changed.connect(lambda _value: self.start_refresh())
        self.controls_panel.refresh_requested.connect(self.start_refresh)

    def apply_settings(self, settings: EngineSettings):
        """
        Push loaded settings into the map and engine, then refetch.

        Args:
            settings: Settings to apply
        """
        self.settings = settings
        state = settings.to_animation_state(self.engine.recommended_max_frames)

        self.engine.pause()
        self.engine.select_layer_type(state.layer_type)
        self.engine.select_mode(state.display_mode)
        if state.tile_size != self.engine.state.tile_size:
            self.engine.set_resolution(state.tile_size)
        self.engine.set_opacity(state.opacity)
        self.engine.set_frame_interval(state.frame_interval_ms)
        self.engine.set_max_frames(state.max_frames)

        self.map_widget.set_view(settings.map_center, settings.map_zoom)

        self.refresh_timer.start(max(1, settings.refresh_minutes) * 60 * 1000)
        self._autoplay_pending = settings.autoplay
        self.start_refresh()

    def current_settings(self) -> EngineSettings:
        """Snapshot the engine state into an EngineSettings for saving."""
        state = self.engine.state
        return replace(
            self.settings,
            layer_type=state.layer_type,
            display_mode=state.display_mode,
            tile_size=state.tile_size,
            opacity=state.opacity,
            frame_interval_ms=state.frame_interval_ms,
            max_frames=state.max_frames,
            map_center=list(self.map_widget.center),
            map_zoom=self.map_widget.current_zoom,
        )

    def start_refresh(self):
        """Start a background refresh, or queue one if already running."""
        if self.refresh_worker is not None and self.refresh_worker.isRunning():
            self.pending_refresh_needed = True
            return

        logger.info(f"Refreshing frames (max {self.engine.max_frames})")
        self.refresh_worker = RefreshWorker(self.settings, self.engine.max_frames)
        self.refresh_worker.refreshed.connect(self.on_refresh_finished)
        self.refresh_worker.finished.connect(self._run_pending_refresh)
        self.refresh_worker.error.connect(self.on_refresh_error)
        self.refresh_worker.start()

    def on_refresh_finished(self, result: FeedRefreshResult):
        """
        Deliver refreshed frames to the engine.

        Args:
            result: Normalized frames and per-layer errors
        """
        self.engine.on_frame_data_refreshed(result.frame_sets, result.errors)

        if self._autoplay_pending and self.engine.render_state() is RenderState.ANIMATED:
            self._autoplay_pending = False
            self.engine.play()

    def on_refresh_error(self, error_message: str):
        """
        Handle an unexpected refresh failure.

        Args:
            error_message: Error message
        """
        logger.error(f"Refresh failed: {error_message}")
        self.engine.on_refresh_failed(FeedUnavailable(error_message))

    def _run_pending_refresh(self):
        if self.pending_refresh_needed:
            self.pending_refresh_needed = False
            self.start_refresh()

    def _on_engine_changed(self, engine: AnimationEngine):
        self.status_bar.showMessage(engine.diagnostic_summary())

    def _create_menu_bar(self):
        """Create the menu bar with File menu."""
        menubar = self.menuBar()
        self.file_menu = menubar.addMenu("&File")

        open_action = QAction("&Open...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.setStatusTip("Open settings file")
        open_action.triggered.connect(self._on_open)
        self.file_menu.addAction(open_action)

        save_action = QAction("&Save", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.setStatusTip("Save settings")
        save_action.triggered.connect(self._on_save)
        self.file_menu.addAction(save_action)

        save_as_action = QAction("Save &As...", self)
        save_as_action.setShortcut(QKeySequence("Ctrl+Shift+S"))
        save_as_action.setStatusTip("Save settings as new file")
        save_as_action.triggered.connect(self._on_save_as)
        self.file_menu.addAction(save_as_action)

        self.file_menu.addSeparator()

        quit_action = QAction("&Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        self.file_menu.addAction(quit_action)

    def _on_open(self):
        if self.file_ops.open(self.apply_settings):
            self._update_window_title()

    def _on_save(self):
        if self.file_ops.save(self.current_settings):
            self._update_window_title()

    def _on_save_as(self):
        if self.file_ops.save_as(self.current_settings):
            self._update_window_title()

    def _update_window_title(self):
        self.setWindowTitle(self.file_ops.get_display_title())

    def closeEvent(self, a0):
        """Stop playback and background refreshes before closing."""
        self.refresh_timer.stop()
        self.engine.pause()
        if self.refresh_worker is not None:
            self.refresh_worker.wait()
        super().closeEvent(a0)
