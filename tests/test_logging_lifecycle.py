"""
Tests for logging setup and teardown.

setup_logging() may be called several times in one process (app restart,
tests); it must never stack handlers or leave files open.
"""
import logging

import pytest

from tweenchain.logging import logger as log_module
from tweenchain.logging.logger import (
    ColoredFormatter, get_log_dir, get_logger, is_perf_metrics_enabled,
    is_verbose_logging, set_perf_metrics_enabled, setup_logging,
)


@pytest.fixture
def clean_logging():
    root = logging.getLogger()
    level = root.level
    log_dir = log_module._LOG_DIR
    perf = is_perf_metrics_enabled()
    yield
    log_module._teardown_handlers()
    root.setLevel(level)
    log_module._LOG_DIR = log_dir
    log_module._VERBOSE = False
    set_perf_metrics_enabled(perf)


def _installed():
    root = logging.getLogger()
    return [h for h in root.handlers if h in log_module._INSTALLED_HANDLERS]


def test_setup_creates_rotating_log_file(tmp_path, clean_logging):
    """Test setup_logging writes a rotating log file."""
    setup_logging(log_dir=tmp_path)
    assert get_log_dir() == tmp_path
    get_logger("tweenchain.test").info("hello log file")
    for handler in _installed():
        handler.flush()
    log_file = tmp_path / "tweenchain.log"
    assert log_file.exists()
    assert "hello log file" in log_file.read_text(encoding="utf-8")


def test_repeated_setup_does_not_stack_handlers(tmp_path, clean_logging):
    """Test repeated setup does not stack handlers."""
    setup_logging(log_dir=tmp_path)
    setup_logging(log_dir=tmp_path)
    assert len(_installed()) == 1

    setup_logging(debug=True, log_dir=tmp_path)
    assert len(_installed()) == 2
    assert logging.getLogger().level == logging.DEBUG


def test_teardown_is_idempotent(tmp_path, clean_logging):
    """Test handler teardown is idempotent."""
    setup_logging(log_dir=tmp_path)
    log_module._teardown_handlers()
    log_module._teardown_handlers()
    assert _installed() == []
    assert log_module._INSTALLED_HANDLERS == []


def test_verbose_implies_debug(tmp_path, clean_logging):
    """Test verbose logging implies debug level."""
    setup_logging(verbose=True, log_dir=tmp_path)
    assert is_verbose_logging() is True
    assert logging.getLogger().level == logging.DEBUG


def test_short_logger_names():
    """Test short logger names."""
    assert get_logger("tweenchain.animation.registry").name == "tween.registry"
    assert get_logger("tweenchain.animation.manager").name == "tween.manager"
    assert get_logger("tweenchain.animation.easing").name == "tweenchain.animation.easing"


def test_perf_metrics_toggle(clean_logging):
    """Test the perf metrics toggle."""
    set_perf_metrics_enabled(False)
    assert is_perf_metrics_enabled() is False
    set_perf_metrics_enabled(True)
    assert is_perf_metrics_enabled() is True


def test_colored_formatter_marks_perf_lines():
    """Test PERF lines get the perf colour."""
    formatter = ColoredFormatter("%(levelname)s %(message)s")
    record = logging.LogRecord("tween.ticker", logging.INFO, __file__, 1, "[PERF] [ANIM] metrics", None, None)
    output = formatter.format(record)
    assert output.startswith(ColoredFormatter.PERF_COLOR)
    assert record.levelname == "INFO"


def test_transition_lifecycle_is_logged(registry, caplog):
    """Test transition creation and completion are logged."""
    with caplog.at_level(logging.DEBUG, logger="tween.registry"):
        registry.transition("fade").from_(0).to(1).duration(1)
        registry.update(1)
    messages = [r.getMessage() for r in caplog.records]
    assert "Transition created: fade" in messages
    assert "Transition completed: fade" in messages
