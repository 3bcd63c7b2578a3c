"""
Centralized logging configuration for tweenchain.

Uses rotating file handler with logs stored in a logs/ directory.
Includes colored console output for debug mode.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional


_VERBOSE: bool = False
_PERF_METRICS_ENABLED: bool = True
# Default log location; setup_logging(log_dir=...) overrides it so
# get_log_dir() always points at the active handler's directory.
_LOG_DIR: Path = Path.cwd() / "logs"
_INSTALLED_HANDLERS: List[logging.Handler] = []

_env_perf = os.getenv("TWEENCHAIN_PERF_METRICS")
if _env_perf is not None:
    if _env_perf.strip().lower() in ("0", "false", "off", "no"):
        _PERF_METRICS_ENABLED = False
    elif _env_perf.strip().lower() in ("1", "true", "on", "yes"):
        _PERF_METRICS_ENABLED = True

_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    PERF_COLOR = '\033[38;5;135m'  # Purple for [PERF] telemetry
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        original_levelname = record.levelname

        if '[PERF]' in str(record.msg):
            color = self.PERF_COLOR
        else:
            color = self.COLORS.get(record.levelname)

        if color is None:
            return super().format(record)

        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            return f"{color}{super().format(record)}{self.RESET}"
        finally:
            record.levelname = original_levelname


def get_log_dir() -> Path:
    """Return the directory used for log files."""
    return _LOG_DIR


def _teardown_handlers() -> None:
    """Remove and close every handler installed by setup_logging(). Idempotent."""
    root_logger = logging.getLogger()
    while _INSTALLED_HANDLERS:
        handler = _INSTALLED_HANDLERS.pop()
        root_logger.removeHandler(handler)
        try:
            handler.close()
        except Exception:
            pass


def setup_logging(debug: bool = False, verbose: bool = False,
                  log_dir: Optional[Path] = None) -> None:
    """
    Configure application logging with file rotation.

    Safe to call repeatedly; handlers from a previous call are torn down first.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: When True, enables per-tick debug logs (cursor dumps on every
            update). Verbose mode also implies debug-level logging.
        log_dir: Directory for tweenchain.log (defaults to ./logs)
    """
    global _VERBOSE, _LOG_DIR

    _teardown_handlers()

    debug_enabled = debug or verbose
    if log_dir is not None:
        _LOG_DIR = Path(log_dir)

    log_dir_path = get_log_dir()
    log_dir_path.mkdir(parents=True, exist_ok=True)
    log_file = log_dir_path / "tweenchain.log"

    level = logging.DEBUG if debug_enabled else logging.INFO

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    _INSTALLED_HANDLERS.append(file_handler)

    if debug_enabled:
        console_handler = logging.StreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)
        _INSTALLED_HANDLERS.append(console_handler)

    _VERBOSE = bool(verbose)

    root_logger.info("=" * 60)
    root_logger.info(
        "tweenchain logging initialized (debug=%s, verbose=%s)",
        debug_enabled,
        _VERBOSE,
    )
    root_logger.info("=" * 60)


_SHORT_NAME_OVERRIDES = {
    "tweenchain.animation.manager": "tween.manager",
    "tweenchain.animation.registry": "tween.registry",
    "tweenchain.animation.ticker": "tween.ticker",
}


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with optional short-name overrides for noisy modules."""
    actual = _SHORT_NAME_OVERRIDES.get(name, name)
    return logging.getLogger(actual)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""
    return _VERBOSE


def is_perf_metrics_enabled() -> bool:
    """Return True when PERF metrics/telemetry are enabled globally."""
    return _PERF_METRICS_ENABLED


def set_perf_metrics_enabled(enabled: bool) -> None:
    global _PERF_METRICS_ENABLED
    _PERF_METRICS_ENABLED = bool(enabled)
