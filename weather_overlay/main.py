"""Main application entry point."""

import argparse
import logging
import sys


def setup_logging(verbose: bool = False):
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
        ],
    )


def cmd_frames(args):
    """Handle frames subcommand - fetch and print frames without a GUI."""
    setup_logging(args.verbose)
    from weather_overlay.cli import run_frames

    try:
        return run_frames(args.config, args.layer)
    except KeyboardInterrupt:
        logging.warning("Interrupted")
        return 1


def launch_gui(config_file: str | None = None):
    """
    Launch the GUI application.

    Args:
        config_file: Optional path to settings file to load on startup
    """
    import signal

    from PyQt6.QtCore import QTimer
    from PyQt6.QtWidgets import QApplication

    from weather_overlay.gui.main_window import MainWindow

    setup_logging()

    app = QApplication(sys.argv)
    _set_app_metadata(app)

    # Set up Ctrl+C handling
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    # Let Python process signals while Qt runs its loop
    timer = QTimer()
    timer.timeout.connect(lambda: None)
    timer.start(500)

    window = MainWindow(config_file=config_file)
    window.show()

    sys.exit(app.exec())


def cmd_open(args):
    """Handle open subcommand - launch GUI with settings file loaded."""
    launch_gui(config_file=args.config)


def cmd_list_layers(args):
    """Handle list-layers subcommand."""
    from weather_overlay.core.config import LAYERS, TILE_SIZES

    print("Available overlay layers:")
    print()

    for layer_type, layer in LAYERS.items():
        print(f"  {layer_type.value:12} - {layer.display_name}")
        print(f"                 {layer.description}")
        print(f"                 Animated: {layer.animated_source}, tiles: {', '.join(map(str, TILE_SIZES))} px")
        print(f"                 Static:   {layer.static_url_template}")
        print(f"                 Attribution: {layer.attribution}")
        print()

    return 0


def _set_app_metadata(app):
    """
    Set organization and application metadata.

    Args:
        app: QApplication instance
    """
    app.setOrganizationName("weather-overlay")
    app.setApplicationName("weather-overlay")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Weather Overlay - animated radar and satellite layers on a map",
        epilog="Run without arguments to launch GUI mode.",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Open subcommand (launch GUI with file)
    open_parser = subparsers.add_parser("open", help="Open settings file in GUI")
    open_parser.add_argument("config", help="YAML settings file to open")
    open_parser.set_defaults(func=cmd_open)

    # Frames subcommand
    frames_parser = subparsers.add_parser("frames", help="Fetch and print available frames")
    frames_parser.add_argument("config", nargs="?", help="Optional YAML settings file")
    frames_parser.add_argument(
        "--layer",
        choices=["radar", "satellite", "clouds", "temperature"],
        help="Only show one layer",
    )
    frames_parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    frames_parser.set_defaults(func=cmd_frames)

    # List layers subcommand
    list_parser = subparsers.add_parser("list-layers", help="List available overlay layers")
    list_parser.set_defaults(func=cmd_list_layers)

    return parser


def main():
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args()

    # If no subcommand provided, launch GUI
    if args.command is None:
        launch_gui()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
