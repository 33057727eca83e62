"""File operations for saving and loading overlay settings."""

import logging
from pathlib import Path
from typing import Callable, Optional

import yaml
from PyQt6.QtWidgets import QFileDialog, QMessageBox, QWidget

from weather_overlay.models.engine_settings import EngineSettings, load_settings, save_settings

logger = logging.getLogger(__name__)

FILE_FILTER = "YAML Files (*.yaml *.yml);;All Files (*)"


class FileOperations:
    """Handles settings file save/load with user prompts."""

    def __init__(self, parent: QWidget):
        """
        Initialize file operations handler.

        Args:
            parent: Parent widget for dialogs
        """
        self.parent = parent
        self.current_file: Optional[Path] = None

    def open(self, apply_settings: Callable[[EngineSettings], None]) -> bool:
        """
        Prompt for a settings file and apply it.

        Args:
            apply_settings: Receives the loaded settings

        Returns:
            True if a file was loaded
        """
        start_dir = str(self.current_file.parent) if self.current_file else str(Path.home())
        file_path, _ = QFileDialog.getOpenFileName(self.parent, "Open Settings", start_dir, FILE_FILTER)
        if not file_path:
            return False
        return self.load_file(Path(file_path), apply_settings)

    def load_file(self, file_path: Path, apply_settings: Callable[[EngineSettings], None]) -> bool:
        """
        Load a settings file and apply it, reporting errors in a dialog.

        Args:
            file_path: Settings file
            apply_settings: Receives the loaded settings

        Returns:
            True if loaded successfully
        """
        try:
            settings = load_settings(file_path)
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.error(f"Error loading {file_path}: {e}")
            QMessageBox.critical(self.parent, "Open Error", f"Failed to load settings:\n{e}")
            return False

        apply_settings(settings)
        self.current_file = file_path
        logger.info(f"Loaded settings from: {file_path}")
        return True

    def save(self, get_settings: Callable[[], EngineSettings]) -> bool:
        """
        Save to the current file or prompt for a filename if new.

        Args:
            get_settings: Returns the settings to persist

        Returns:
            True if saved successfully
        """
        if self.current_file is None:
            return self.save_as(get_settings)
        return self._do_save(self.current_file, get_settings())

    def save_as(self, get_settings: Callable[[], EngineSettings]) -> bool:
        """Prompt for a filename and save."""
        file_path, _ = QFileDialog.getSaveFileName(
            self.parent,
            "Save Settings",
            str(Path.home() / "weather-overlay.yaml"),
            FILE_FILTER,
        )
        if not file_path:
            return False

        file_path = Path(file_path)
        if not file_path.suffix:
            file_path = file_path.with_suffix('.yaml')

        return self._do_save(file_path, get_settings())

    def _do_save(self, file_path: Path, settings: EngineSettings) -> bool:
        try:
            save_settings(settings, file_path)
        except OSError as e:
            logger.exception("Error saving file")
            QMessageBox.critical(self.parent, "Save Error", f"Failed to save file:\n{e}")
            return False

        self.current_file = file_path
        logger.info(f"Saved settings to: {file_path}")
        return True

    def get_display_title(self) -> str:
        """Window title for the current file."""
        name = self.current_file.name if self.current_file else "Untitled"
        return f"{name} - Weather Overlay"
