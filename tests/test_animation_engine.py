"""Tests for the layer animation engine."""

from datetime import datetime, timezone

import pytest

from weather_overlay.core.animation_engine import AnimationEngine
from weather_overlay.core.errors import FeedUnavailable, NoFramesForLayer
from weather_overlay.core.resource_budget import DeviceProfile
from weather_overlay.models.enums import DisplayMode, LayerType, RenderState
from weather_overlay.models.frame import Frame, FrameSet


def radar_frames(*timestamps):
    return FrameSet(LayerType.RADAR, tuple(Frame(token=t, timestamp=t) for t in timestamps))


def satellite_frames(layer_type, *paths):
    return FrameSet(layer_type, tuple(Frame(token=p, timestamp=i) for i, p in enumerate(paths)))


@pytest.fixture
def engine(binding, scheduler):
    """Engine on a mid-tier desktop with recording adapters."""
    return AnimationEngine(binding, scheduler, device_profile=DeviceProfile(memory_gb=4))


def test_initial_state(engine):
    """Test a fresh engine is stopped with nothing to show."""
    assert engine.max_frames == 36
    assert engine.recommended_max_frames == 36
    assert engine.frame_count() == 0
    assert not engine.is_playing()
    assert engine.state.frame_index is None
    assert engine.current_frame_timestamp() is None
    assert engine.render_state() is RenderState.STATIC


def test_refresh_shows_latest_frame(engine, binding):
    """Test the first delivery attaches the animated overlay at the newest frame."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})

    assert engine.state.frame_index == 2
    assert engine.current_frame_timestamp() == 400
    assert engine.current_frame_time() == datetime.fromtimestamp(400, tz=timezone.utc)
    assert "/v2/radar/400/256/" in binding.animated_url
    assert binding.animated_attached
    assert not binding.static_attached


def test_playback_wraps_around(engine, scheduler):
    """Test ticks advance through the frames and wrap to the first."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.play()

    assert engine.is_playing()
    assert scheduler.interval_ms == 450

    seen = []
    for _ in range(4):
        scheduler.tick()
        seen.append(engine.current_frame_timestamp())

    assert seen == [200, 300, 400, 200]


def test_advance_backwards_wraps(engine):
    """Test stepping back from the first frame lands on the last."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.scrub_to(0)
    engine.advance_frame(-1)

    assert engine.state.frame_index == 2


def test_play_without_frames_is_noop(engine, scheduler):
    """Test play does nothing when there is nothing to animate."""
    engine.play()

    assert not engine.is_playing()
    assert not scheduler.is_active


def test_play_twice_does_not_restart(engine, scheduler):
    """Test a second play leaves the running timer alone."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()
    engine.play()

    assert scheduler.start_count == 1


def test_toggle_playback(engine):
    """Test toggling flips between play and pause."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})

    engine.toggle_playback()
    assert engine.is_playing()
    engine.toggle_playback()
    assert not engine.is_playing()


def test_scrub_pauses_and_wraps_index(engine, scheduler):
    """Test scrubbing stops playback and takes the index modulo the count."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.play()

    engine.scrub_to(-1)

    assert not engine.is_playing()
    assert not scheduler.is_active
    assert engine.state.frame_index == 2


def test_scrub_invalid_index_keeps_frame(engine, scheduler):
    """Test non-numeric scrub targets pause without moving."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.scrub_to(1)
    engine.play()

    engine.scrub_to(float("nan"))
    assert not engine.is_playing()
    assert engine.state.frame_index == 1

    engine.scrub_to("x")
    engine.scrub_to(None)
    engine.scrub_to(float("inf"))
    assert engine.state.frame_index == 1



def test_layer_switch_resumes_playback_at_last_frame(engine, binding, scheduler):
    """Test switching layers while playing restarts on the new layer's newest frame."""
    engine.on_frame_data_refreshed(
        {
            LayerType.RADAR: radar_frames(200, 300, 400),
            LayerType.SATELLITE: satellite_frames(LayerType.SATELLITE, "sat/a", "sat/b"),
        }
    )
    engine.play()
    scheduler.tick()

    engine.select_layer_type(LayerType.SATELLITE)

    assert engine.is_playing()
    assert scheduler.start_count == 2
    assert engine.state.frame_index == 1
    assert "/sat/b/256/" in binding.animated_url
    assert "discard_animated" in binding.call_names()
    assert binding.animated_attached


def test_layer_switch_to_empty_layer_falls_back_to_static(engine, binding):
    """Test a layer without frames shows its static overlay and stays paused."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()

    engine.select_layer_type(LayerType.CLOUDS)

    assert not engine.is_playing()
    assert engine.state.frame_index is None
    assert engine.render_state() is RenderState.STATIC
    assert binding.static_attached
    assert not binding.animated_attached
    assert "goes-east-ir-4km-900913" in binding.static_url


def test_layer_switch_from_empty_layer_never_overlaps(engine, binding):
    """Test leaving a static-only layer detaches static before animating."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.select_layer_type(LayerType.CLOUDS)
    assert binding.static_attached

    engine.select_layer_type(LayerType.RADAR)

    assert binding.animated_attached
    assert not binding.static_attached
    assert not binding.overlap_seen



def test_auto_mode_follows_frame_availability(engine, binding):
    """Test Auto swaps between static and animated as frames come and go."""
    engine.select_mode(DisplayMode.AUTO)
    assert binding.static_attached

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    assert binding.animated_attached
    assert not binding.static_attached

    engine.play()
    engine.on_frame_data_refreshed({LayerType.RADAR: FrameSet.empty(LayerType.RADAR)})

    assert not engine.is_playing()
    assert engine.state.frame_index is None
    assert binding.static_attached
    assert not binding.animated_attached
    assert not binding.has_animated


def test_first_frames_never_overlap_static(engine, binding):
    """Test frames arriving while static is shown swap overlays cleanly."""
    engine.select_mode(DisplayMode.AUTO)
    assert binding.static_attached

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.on_frame_data_refreshed({LayerType.RADAR: FrameSet.empty(LayerType.RADAR)})
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(400)})

    assert binding.animated_attached
    assert not binding.static_attached
    assert not binding.overlap_seen



def test_animated_mode_without_frames_shows_static(engine, binding):
    """Test explicit Animated mode never leaves the map blank."""
    engine.select_mode(DisplayMode.ANIMATED)

    assert engine.render_state() is RenderState.STATIC
    assert binding.static_attached


def test_off_then_static(engine, binding):
    """Test Off detaches both overlays and Static attaches only the static one."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})

    engine.select_mode(DisplayMode.OFF)
    assert not binding.static_attached
    assert not binding.animated_attached

    engine.select_mode(DisplayMode.STATIC)
    assert binding.static_attached
    assert not binding.animated_attached


def test_static_mode_refresh_keeps_animated_detached(engine, binding):
    """Test frames arriving in Static mode do not attach the animated overlay."""
    engine.select_mode(DisplayMode.STATIC)
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})

    assert binding.static_attached
    assert not binding.animated_attached
    assert engine.state.frame_index == 1


def test_resolution_round_trip_keeps_frame(engine, binding):
    """Test 256 -> 512 -> 256 keeps the frame and restores the interval."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.scrub_to(1)

    engine.set_resolution(512)
    assert engine.state.frame_interval_ms == 650
    assert binding.animated_tile_size == 512
    assert "/300/512/" in binding.animated_url

    engine.set_resolution(256)
    assert engine.state.frame_interval_ms == 450
    assert engine.state.frame_index == 1
    assert "/300/256/" in binding.animated_url
    assert binding.animated_attached


def test_resolution_resumes_playback(engine, scheduler):
    """Test playback continues at the size-dependent interval."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()

    engine.set_resolution(512)

    assert engine.is_playing()
    assert scheduler.interval_ms == 650


def test_invalid_resolution(engine):
    """Test unsupported tile sizes are rejected."""
    with pytest.raises(ValueError):
        engine.set_resolution(300)


def test_set_opacity_clamps(engine, binding):
    """Test opacity is clamped and bad input falls back to the default."""
    assert engine.set_opacity(0.05) == 0.2
    assert engine.set_opacity(5) == 1.0
    assert engine.set_opacity("x") == 0.6
    assert engine.set_opacity(float("nan")) == 0.6
    assert engine.set_opacity(0.75) == 0.75
    assert binding.opacity == 0.75


def test_set_frame_interval_clamps_and_restarts(engine, scheduler):
    """Test the interval is clamped and a running timer picks it up."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()

    assert engine.set_frame_interval(50) == 120
    assert scheduler.interval_ms == 120
    assert engine.set_frame_interval(5000) == 800
    assert engine.set_frame_interval("fast") == 450
    assert engine.is_playing()


def test_set_frame_interval_infinite_values_clamp(engine):
    """Test infinities clamp to the interval bounds."""
    assert engine.set_frame_interval(float("inf")) == 800
    assert engine.set_frame_interval(float("-inf")) == 120
    assert engine.set_frame_interval("300.7") == 300



def test_set_max_frames_clamps_without_touching_frames(engine):
    """Test the cap only applies to the next refresh."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(*range(1, 11))})

    assert engine.set_max_frames(3) == 6
    assert engine.set_max_frames(999) == 60
    assert engine.set_max_frames("many") == 36
    assert engine.frame_count() == 10


def test_set_max_frames_infinite_and_fractional(engine):
    """Test infinities clamp to the bounds and fractions truncate."""
    assert engine.set_max_frames(float("inf")) == 60
    assert engine.set_max_frames(float("-inf")) == 6
    assert engine.set_max_frames("12.5") == 12
    assert engine.set_max_frames(float("nan")) == 36



def test_refresh_keeps_position_clamped(engine):
    """Test a refresh keeps the index, clamped to the new length."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    engine.scrub_to(1)

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(300, 400, 500, 600)})
    assert engine.state.frame_index == 1

    engine.scrub_to(3)
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(700)})
    assert engine.state.frame_index == 0


def test_refresh_while_playing_keeps_playing(engine, scheduler):
    """Test a non-empty refresh does not interrupt playback."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(300, 400, 500)})

    assert engine.is_playing()
    assert scheduler.start_count == 1


def test_refresh_for_inactive_layer_is_cached_only(engine, binding):
    """Test a late delivery for another layer does not touch the overlays."""
    engine.select_layer_type(LayerType.SATELLITE)
    calls_before = len(binding.calls)

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})

    assert len(binding.calls) == calls_before
    assert len(engine.frame_set(LayerType.RADAR)) == 2
    assert engine.state.layer_type is LayerType.SATELLITE

    engine.select_layer_type(LayerType.RADAR)
    assert engine.current_frame_timestamp() == 300


def test_refresh_failure_degrades_to_static(engine, binding):
    """Test a failed refresh empties every layer and reports the failure."""
    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300)})
    engine.play()

    engine.on_refresh_failed(FeedUnavailable("HTTP 503"))

    assert not engine.is_playing()
    assert all(not engine.frame_set(layer_type) for layer_type in LayerType)
    assert binding.static_attached
    assert engine.diagnostic_summary().startswith(
        "Animated radar failed; showing static Iowa State Mesonet / NWS NEXRAD."
    )


def test_diagnostic_summary_variants(engine):
    """Test the status line for each render state."""
    suffix = " • Recommended max frames: 36 • Using: 36"

    engine.on_frame_data_refreshed(
        {LayerType.RADAR: FrameSet.empty(LayerType.RADAR)},
        {LayerType.RADAR: NoFramesForLayer(LayerType.RADAR)},
    )
    assert engine.diagnostic_summary() == (
        "Radar frames unavailable; showing static Iowa State Mesonet / NWS NEXRAD." + suffix
    )

    engine.on_frame_data_refreshed({LayerType.RADAR: radar_frames(200, 300, 400)})
    assert engine.diagnostic_summary() == "Animated RainViewer • 3 frames @ 450ms" + suffix

    engine.select_mode(DisplayMode.STATIC)
    assert engine.diagnostic_summary() == "Static Iowa State Mesonet / NWS NEXRAD tiles" + suffix

    engine.select_mode(DisplayMode.OFF)
    assert engine.diagnostic_summary() == "Overlay off" + suffix


def test_listeners_notified(engine):
    """Test listeners run after transitions."""
    seen = []
    engine.add_listener(lambda e: seen.append(e.state.display_mode))

    engine.select_mode(DisplayMode.OFF)
    engine.select_mode(DisplayMode.AUTO)

    assert seen == [DisplayMode.OFF, DisplayMode.AUTO]
