"""Tests for the QTimer-driven TransitionTicker."""
import pytest

from tweenchain.animation import TransitionRegistry, TransitionTicker


@pytest.fixture
def ticker(registry):
    t = TransitionTicker(registry, fps=60)
    yield t
    t.cleanup()


def test_ticker_initialization(ticker):
    """Test ticker initialization."""
    assert ticker.fps == 60
    assert ticker._timer.interval() in (16, 17)
    assert ticker.is_running() is False


@pytest.mark.timeout(3)
def test_set_target_fps_updates_timer_interval(ticker):
    """Test set_target_fps() updates the timer interval."""
    ticker.set_target_fps(120)
    assert ticker.fps == 120
    assert ticker._timer.interval() in (8, 9)

    ticker.set_target_fps(1000)
    assert ticker.fps == 240

    ticker.set_target_fps("fast")
    assert ticker.fps == 60


def test_fps_is_clamped_on_construction(registry):
    """Test fps is clamped on construction."""
    t = TransitionTicker(registry, fps=5)
    try:
        assert t.fps == 10
    finally:
        t.cleanup()


@pytest.mark.timeout(5)
def test_ticker_drives_frame_registry_to_completion(qtbot, registry, ticker):
    """Test the ticker drives a frame registry to completion."""
    ended = []
    registry.transition("x").from_(0).to(1).duration(3).on_complete(lambda: ended.append(True))
    assert ticker.is_running() is True

    qtbot.waitUntil(lambda: not registry.is_active("x"), timeout=2000)
    assert ended == [True]

    # Next tick finds nothing active and stops the timer
    qtbot.waitUntil(lambda: not ticker.is_running(), timeout=2000)


@pytest.mark.timeout(5)
def test_ticker_drives_elapsed_registry(qtbot, qt_app):
    """Test the ticker drives an elapsed-time registry."""
    registry = TransitionRegistry(use_elapsed_time=True)
    ticker = TransitionTicker(registry, fps=120)
    try:
        values = []
        registry.transition("fade").from_(0.0).to(1.0).duration(0.1).on_update(values.append)
        qtbot.waitUntil(lambda: not registry.is_active("fade"), timeout=2000)
        assert values[-1] == pytest.approx(1.0)
        assert all(b >= a for a, b in zip(values, values[1:]))
    finally:
        ticker.cleanup()
        registry.clear()


@pytest.mark.timeout(5)
def test_ticker_keeps_running_for_scheduled_actions(qtbot, registry, ticker):
    """Test the ticker runs while actions are scheduled."""
    fired = []
    registry.delay(3, lambda: fired.append(True))
    ticker.start()
    qtbot.waitUntil(lambda: fired == [True], timeout=2000)
    qtbot.waitUntil(lambda: not ticker.is_running(), timeout=2000)


@pytest.mark.timeout(5)
def test_ticker_idles_while_every_transition_is_paused(qtbot, registry, ticker):
    """Test the timer stops while all transitions are paused and wakes on play."""
    registry.transition("x").from_(0).to(1).duration(100000)
    assert ticker.is_running() is True
    registry.pause()
    qtbot.waitUntil(lambda: not ticker.is_running(), timeout=2000)
    assert registry.is_active("x")

    registry.play("x")
    assert ticker.is_running() is True


@pytest.mark.timeout(5)
def test_ticker_idles_after_seek_parks_transition(qtbot, registry, ticker):
    """Test the timer stops once a seek parks the only transition."""
    registry.transition("x").from_(0).to(1).duration(100000)
    registry.seek(200000)
    assert registry.is_paused("x")
    qtbot.waitUntil(lambda: not ticker.is_running(), timeout=2000)
    assert registry.get_value("x") == pytest.approx(1.0)


def test_manual_start_stop(ticker):
    """Test manual start and stop."""
    ticker.start()
    assert ticker.is_running() is True
    ticker.stop()
    assert ticker.is_running() is False


def test_auto_start_disabled(registry):
    """Test auto start can be disabled."""
    t = TransitionTicker(registry, auto_start=False)
    try:
        registry.transition("x")
        assert t.is_running() is False
    finally:
        t.cleanup()


def test_cleanup_detaches_from_registry(registry):
    """Test cleanup() detaches from the registry."""
    t = TransitionTicker(registry)
    t.cleanup()
    assert t.is_running() is False
    # No longer wakes on new transitions
    registry.transition("x")


def test_from_settings(registry, settings_manager):
    """Test building a ticker from settings."""
    settings_manager.set("ticker.fps", 30)
    t = TransitionTicker.from_settings(registry, settings_manager)
    try:
        assert t.fps == 30
    finally:
        t.cleanup()
