"""Overlay controls: layer, mode, resolution, opacity, speed, frames, playback."""

import logging

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QComboBox,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from weather_overlay.core.animation_engine import AnimationEngine
from weather_overlay.core.config import (
    LAYERS,
    MAX_FRAME_INTERVAL,
    MAX_MAX_FRAMES,
    MIN_FRAME_INTERVAL,
    MIN_MAX_FRAMES,
    TILE_SIZES,
)
from weather_overlay.models.enums import DisplayMode, LayerType

logger = logging.getLogger(__name__)


class ControlsPanel(QWidget):
    """Widget forwarding user input to the AnimationEngine.

    Widgets are refreshed from engine state after every transition with
    their signals blocked, so syncing never re-issues a command.
    """

    max_frames_changed = pyqtSignal(int)  # Applied cap; a refetch is needed
    refresh_requested = pyqtSignal()

    def __init__(self, engine: AnimationEngine):
        """
        Initialize controls panel.

        Args:
            engine: Engine receiving every command
        """
        super().__init__()
        self.engine = engine
        self.init_ui()
        self.engine.add_listener(lambda _engine: self.sync_from_engine())
        self.sync_from_engine()

    def init_ui(self):
        """Initialize the UI."""
        layout = QVBoxLayout()

        # Overlay group
        overlay_group = QGroupBox("Overlay")
        overlay_form = QFormLayout()

        self.layer_combo = QComboBox()
        for layer_type, layer in LAYERS.items():
            self.layer_combo.addItem(layer.display_name, layer_type)
        self.layer_combo.currentIndexChanged.connect(self._on_layer_changed)
        overlay_form.addRow("Layer:", self.layer_combo)

        self.mode_combo = QComboBox()
        for mode in DisplayMode:
            self.mode_combo.addItem(mode.value.capitalize(), mode)
        self.mode_combo.currentIndexChanged.connect(self._on_mode_changed)
        overlay_form.addRow("Mode:", self.mode_combo)

        self.resolution_combo = QComboBox()
        for tile_size in TILE_SIZES:
            self.resolution_combo.addItem(f"{tile_size} px", tile_size)
        self.resolution_combo.currentIndexChanged.connect(self._on_resolution_changed)
        overlay_form.addRow("Tiles:", self.resolution_combo)

        self.opacity_slider = QSlider(Qt.Orientation.Horizontal)
        self.opacity_slider.setRange(20, 100)
        self.opacity_slider.valueChanged.connect(self._on_opacity_changed)
        self.opacity_label = QLabel()
        opacity_row = QHBoxLayout()
        opacity_row.addWidget(self.opacity_slider)
        opacity_row.addWidget(self.opacity_label)
        overlay_form.addRow("Opacity:", opacity_row)

        overlay_group.setLayout(overlay_form)
        layout.addWidget(overlay_group)

        # Animation group
        animation_group = QGroupBox("Animation")
        animation_form = QFormLayout()

        self.speed_slider = QSlider(Qt.Orientation.Horizontal)
        self.speed_slider.setRange(MIN_FRAME_INTERVAL, MAX_FRAME_INTERVAL)
        self.speed_slider.valueChanged.connect(self.engine.set_frame_interval)
        self.speed_label = QLabel()
        speed_row = QHBoxLayout()
        speed_row.addWidget(self.speed_slider)
        speed_row.addWidget(self.speed_label)
        animation_form.addRow("Interval:", speed_row)

        self.max_frames_spin = QSpinBox()
        self.max_frames_spin.setRange(MIN_MAX_FRAMES, MAX_MAX_FRAMES)
        self.max_frames_spin.editingFinished.connect(self._on_max_frames_changed)
        animation_form.addRow("Max frames:", self.max_frames_spin)

        self.frame_slider = QSlider(Qt.Orientation.Horizontal)
        self.frame_slider.valueChanged.connect(self.engine.scrub_to)
        animation_form.addRow("Frame:", self.frame_slider)

        self.frame_time_label = QLabel("--")
        animation_form.addRow("Time:", self.frame_time_label)

        buttons = QHBoxLayout()
        self.prev_button = QPushButton("◀")
        self.prev_button.clicked.connect(self._on_previous)
        buttons.addWidget(self.prev_button)

        self.play_button = QPushButton("Play")
        self.play_button.clicked.connect(self.engine.toggle_playback)
        buttons.addWidget(self.play_button)

        self.next_button = QPushButton("▶")
        self.next_button.clicked.connect(self._on_next)
        buttons.addWidget(self.next_button)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.clicked.connect(self.refresh_requested.emit)
        buttons.addWidget(self.refresh_button)
        animation_form.addRow(buttons)

        animation_group.setLayout(animation_form)
        layout.addWidget(animation_group)

        self.diagnostic_label = QLabel()
        self.diagnostic_label.setWordWrap(True)
        layout.addWidget(self.diagnostic_label)

        layout.addStretch()
        self.setLayout(layout)

    def sync_from_engine(self):
        """Update every widget from the engine's current state."""
        state = self.engine.state
        frame_count = self.engine.frame_count()

        widgets = [
            self.layer_combo,
            self.mode_combo,
            self.resolution_combo,
            self.opacity_slider,
            self.speed_slider,
            self.max_frames_spin,
            self.frame_slider,
        ]
        for widget in widgets:
            widget.blockSignals(True)
        try:
            self.layer_combo.setCurrentIndex(self.layer_combo.findData(state.layer_type))
            self.mode_combo.setCurrentIndex(self.mode_combo.findData(state.display_mode))
            self.resolution_combo.setCurrentIndex(self.resolution_combo.findData(state.tile_size))
            self.opacity_slider.setValue(round(state.opacity * 100))
            self.speed_slider.setValue(state.frame_interval_ms)
            self.max_frames_spin.setValue(state.max_frames)
            self.frame_slider.setRange(0, max(frame_count - 1, 0))
            self.frame_slider.setValue(state.frame_index or 0)
        finally:
            for widget in widgets:
                widget.blockSignals(False)

        self.opacity_label.setText(f"{round(state.opacity * 100)}%")
        self.speed_label.setText(f"{state.frame_interval_ms} ms")

        frame_time = self.engine.current_frame_time()
        self.frame_time_label.setText(frame_time.strftime("%Y-%m-%d %H:%M UTC") if frame_time else "--")

        has_frames = frame_count > 0
        for control in (self.frame_slider, self.prev_button, self.next_button, self.play_button):
            control.setEnabled(has_frames)
        self.play_button.setText("Pause" if self.engine.is_playing() else "Play")

        self.diagnostic_label.setText(self.engine.diagnostic_summary())

    def _on_layer_changed(self, index: int):
        layer_type: LayerType = self.layer_combo.itemData(index)
        self.engine.select_layer_type(layer_type)

    def _on_mode_changed(self, index: int):
        self.engine.select_mode(self.mode_combo.itemData(index))

    def _on_resolution_changed(self, index: int):
        self.engine.set_resolution(self.resolution_combo.itemData(index))

    def _on_opacity_changed(self, value: int):
        self.engine.set_opacity(value / 100)

    def _on_max_frames_changed(self):
        value = self.max_frames_spin.value()
        if value == self.engine.max_frames:
            return
        # Pause first; the refetch replaces the frames under playback
        self.engine.pause()
        applied = self.engine.set_max_frames(value)
        self.max_frames_changed.emit(applied)

    def _on_previous(self):
        self.engine.pause()
        self.engine.advance_frame(-1)

    def _on_next(self):
        self.engine.pause()
        self.engine.advance_frame(1)
