"""Pytest configuration and fixtures."""

import http.server
import json
import socketserver
import threading

import pytest

from weather_overlay.core.errors import ScheduleAlreadyRunning


class RecordingBinding:
    """In-memory overlay binding that records every call."""

    def __init__(self):
        self.calls = []
        self.static_attached = False
        self.animated_attached = False
        self.has_animated = False
        self.static_url = None
        self.animated_url = None
        self.animated_tile_size = None
        self.opacity = None
        # Set if both overlays were ever attached at once
        self.overlap_seen = False

    def call_names(self):
        return [name for name, _ in self.calls]

    def show_static(self, url_template, attribution, opacity):
        self.calls.append(("show_static", url_template))
        self.static_attached = True
        self.static_url = url_template
        self._check_overlap()

    def hide_static(self):
        self.calls.append(("hide_static", None))
        self.static_attached = False

    def create_animated(self, url_template, tile_size, opacity, attribution):
        self.calls.append(("create_animated", url_template))
        self.has_animated = True
        self.animated_attached = False
        self.animated_url = url_template
        self.animated_tile_size = tile_size

    def set_animated_url(self, url_template):
        self.calls.append(("set_animated_url", url_template))
        self.animated_url = url_template

    def show_animated(self):
        self.calls.append(("show_animated", None))
        if self.has_animated:
            self.animated_attached = True
        self._check_overlap()

    def hide_animated(self):
        self.calls.append(("hide_animated", None))
        self.animated_attached = False

    def discard_animated(self):
        self.calls.append(("discard_animated", None))
        self.has_animated = False
        self.animated_attached = False
        self.animated_url = None

    def set_opacity(self, opacity):
        self.calls.append(("set_opacity", opacity))
        self.opacity = opacity

    def _check_overlap(self):
        if self.static_attached and self.animated_attached:
            self.overlap_seen = True


class ManualScheduler:
    """Playback scheduler ticked by hand."""

    def __init__(self):
        self.interval_ms = None
        self._callback = None
        self.start_count = 0

    @property
    def is_active(self):
        return self._callback is not None

    def start(self, interval_ms, callback):
        if self._callback is not None:
            raise ScheduleAlreadyRunning("already running")
        self.interval_ms = interval_ms
        self._callback = callback
        self.start_count += 1

    def stop(self):
        self._callback = None

    def tick(self, count=1):
        for _ in range(count):
            self._callback()


@pytest.fixture
def binding():
    """Recording overlay binding."""
    return RecordingBinding()


@pytest.fixture
def scheduler():
    """Manually ticked playback scheduler."""
    return ManualScheduler()


@pytest.fixture
def feed_server(tmp_path):
    """
    Fixture for a local JSON feed server.

    Serves files from a temporary directory. Paths under ``/status/<code>``
    answer with that HTTP status, for exercising error handling.

    Usage:
        def test_feed(feed_server):
            url = feed_server.add_json("weather-maps.json", {"radar": {"past": []}})
            ...

    Attributes:
        port (int): The port the server is listening on
        fixtures_dir (Path): Directory served by the server
        requests (list): Request paths received, in order
    """

    fixtures_dir = tmp_path / "feed_fixtures"
    fixtures_dir.mkdir()
    requests = []

    class FeedServer:
        def __init__(self, port):
            self.port = port
            self.fixtures_dir = fixtures_dir
            self.requests = requests

        def url(self, name):
            return f"http://127.0.0.1:{self.port}/{name}"

        def add_json(self, name, payload):
            """Write a JSON fixture and return its URL."""
            (fixtures_dir / name).write_text(json.dumps(payload))
            return self.url(name)

        def add_raw(self, name, body):
            """Write a raw fixture and return its URL."""
            (fixtures_dir / name).write_text(body)
            return self.url(name)

    class FeedHTTPRequestHandler(http.server.SimpleHTTPRequestHandler):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, directory=str(fixtures_dir), **kwargs)

        def do_GET(self):
            requests.append(self.path)
            if self.path.startswith("/status/"):
                self.send_error(int(self.path.split("/")[2]))
                return
            super().do_GET()

        def log_message(self, format, *args):
            pass  # Suppress logging during tests

    server = socketserver.TCPServer(("127.0.0.1", 0), FeedHTTPRequestHandler)
    port = server.server_address[1]

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    yield FeedServer(port)

    server.shutdown()
    server.server_close()
    thread.join(timeout=1.0)
