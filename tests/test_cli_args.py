"""Tests for CLI argument parsing and the frames command."""

from unittest.mock import patch

import pytest

RADAR_PAYLOAD = {"radar": {"past": [{"time": 200}, {"time": 300}], "nowcast": [{"time": 400}]}}


def test_open_subcommand():
    """Test that 'open' subcommand launches GUI with config file."""
    test_args = ["weather-overlay", "open", "settings.yaml"]

    with patch("sys.argv", test_args), patch("weather_overlay.main.launch_gui") as mock_launch_gui:
        from weather_overlay.main import main

        main()

        assert mock_launch_gui.called
        assert mock_launch_gui.call_args[1]["config_file"] == "settings.yaml"


def test_no_args_launches_gui():
    """Test that no arguments launches GUI without config file."""
    test_args = ["weather-overlay"]

    with patch("sys.argv", test_args), patch("weather_overlay.main.launch_gui") as mock_launch_gui:
        from weather_overlay.main import main

        main()

        mock_launch_gui.assert_called_once_with()


def test_frames_subcommand_arguments():
    """Test that 'frames' passes the optional config and layer through."""
    test_args = ["weather-overlay", "frames", "settings.yaml", "--layer", "clouds"]

    with patch("sys.argv", test_args), patch("weather_overlay.main.cmd_frames") as mock_frames:
        from weather_overlay.main import main

        mock_frames.return_value = 0
        result = main()

        assert result == 0
        args = mock_frames.call_args[0][0]
        assert args.config == "settings.yaml"
        assert args.layer == "clouds"
        assert args.verbose is False


def test_frames_rejects_unknown_layer():
    """Test argparse rejects layers that do not exist."""
    from weather_overlay.main import build_parser

    with pytest.raises(SystemExit):
        build_parser().parse_args(["frames", "--layer", "lightning"])


def test_list_layers_subcommand(capsys):
    """Test that list-layers prints every layer."""
    with patch("sys.argv", ["weather-overlay", "list-layers"]):
        from weather_overlay.main import main

        result = main()

    output = capsys.readouterr().out
    assert result == 0
    for name in ("radar", "satellite", "clouds", "temperature"):
        assert name in output
    assert "ridge::USCOMP-N0Q-0" in output


def test_run_frames_against_local_feed(feed_server, tmp_path, capsys):
    """Test the frames command prints radar frames from a configured feed."""
    from weather_overlay.cli import run_frames

    maps_url = feed_server.add_json("weather-maps.json", RADAR_PAYLOAD)
    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        "max_frames: 6\n"
        "feeds:\n"
        f"  weather_maps_url: {maps_url}\n"
        f"  satellite_url: {feed_server.url('status/404')}\n"
    )

    result = run_frames(str(config_path), "radar")

    output = capsys.readouterr().out
    assert result == 0
    assert "Radar: 3 frames" in output
    assert "/v2/radar/400/256/{z}/{x}/{y}/2/1_1.png" in output


def test_run_frames_reports_unavailable_feed(feed_server, tmp_path, capsys):
    """Test the frames command exits non-zero when nothing could be fetched."""
    from weather_overlay.cli import run_frames

    config_path = tmp_path / "settings.yaml"
    config_path.write_text(
        "feeds:\n"
        f"  weather_maps_url: {feed_server.url('status/404')}\n"
        f"  satellite_url: {feed_server.url('status/404')}\n"
    )

    result = run_frames(str(config_path))

    output = capsys.readouterr().out
    assert result == 1
    assert "unavailable" in output
    assert "static: https://mesonet.agron.iastate.edu" in output


def test_run_frames_invalid_settings(tmp_path):
    """Test structurally invalid settings give exit code 1."""
    from weather_overlay.cli import run_frames

    config_path = tmp_path / "settings.yaml"
    config_path.write_text("layer: lightning\n")

    assert run_frames(str(config_path)) == 1
