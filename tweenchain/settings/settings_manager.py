"""
Settings manager implementation for tweenchain.

Uses QSettings for persistent storage of registry and ticker defaults.
"""
from typing import Any, Callable, Dict, List
import threading
from PySide6.QtCore import QSettings, QObject, Signal
from tweenchain.logging.logger import get_logger, is_verbose_logging

logger = get_logger('SettingsManager')


DEFAULT_SETTINGS: Dict[str, Any] = {
    # Registry
    'tween.use_elapsed_time': False,
    'tween.auto_start': True,
    'tween.max_time_step': 0.5,

    # Ticker
    'ticker.fps': 60,
}


class SettingsManager(QObject):
    """
    Centralized settings management for tweenchain hosts.

    Uses QSettings for persistent storage with organization/application name.
    Thread-safe with change notifications.
    """

    # Signal emitted when settings change
    settings_changed = Signal(str, object)  # key, new_value

    def __init__(self, organization: str = "tweenchain",
                 application: str = "tweenchain"):
        """
        Initialize the settings manager.

        Args:
            organization: Organization name for QSettings
            application: Application name for QSettings
        """
        super().__init__()

        self._settings = QSettings(organization, application)
        self._organization = organization
        self._application = application
        self._lock = threading.RLock()
        self._change_handlers: Dict[str, List[Callable]] = {}

        self._set_defaults()

        logger.info("SettingsManager initialized")

    def _set_defaults(self) -> None:
        """Set default values if not already present."""
        with self._lock:
            for key, value in DEFAULT_SETTINGS.items():
                if not self._settings.contains(key):
                    self._settings.setValue(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Setting key in dot notation (e.g., 'tween.auto_start')
            default: Default value if key not found

        Returns:
            Setting value or default
        """
        with self._lock:
            return self._settings.value(key, default)

    @staticmethod
    def to_bool(value: Any, default: bool = False) -> bool:
        """Normalize a stored setting value to bool.

        QSettings INI backends hand back strings, so "true"/"1"/"yes"/"on" and
        "false"/"0"/"no"/"off" are recognised.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            v = value.strip().lower()
            if v in ("true", "1", "yes", "on"):
                return True
            if v in ("false", "0", "no", "off"):
                return False
            return default
        if value is None:
            return default
        return bool(value)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Convenience wrapper around get() that normalizes to bool."""
        return self.to_bool(self.get(key, default), default)

    def get_float(self, key: str, default: float = 0.0) -> float:
        raw = self.get(key, default)
        try:
            return float(raw)
        except (TypeError, ValueError):
            logger.debug("Setting %s=%r is not a number; using %r", key, raw, default)
            return default

    def get_int(self, key: str, default: int = 0) -> int:
        return int(self.get_float(key, default))

    def set(self, key: str, value: Any) -> None:
        """
        Set a setting value.

        Args:
            key: Setting key in dot notation
            value: Value to set
        """
        with self._lock:
            old_value = self._settings.value(key)
            self._settings.setValue(key, value)

            self.settings_changed.emit(key, value)

            for handler in self._change_handlers.get(key, []):
                try:
                    handler(value, old_value)
                except Exception as e:
                    logger.error(f"Error in change handler for {key}: {e}")

        if is_verbose_logging():
            logger.debug("Setting changed: %s: %r -> %r", key, old_value, value)
        else:
            logger.debug("Setting changed: %s", key)

    def save(self) -> None:
        """Force save settings to persistent storage."""
        with self._lock:
            self._settings.sync()
        logger.debug("Settings saved")

    def on_changed(self, key: str, handler: Callable[[Any, Any], None]) -> None:
        """
        Register a handler for when a specific setting changes.

        Args:
            key: Setting key to watch
            handler: Callback function(new_value, old_value)
        """
        with self._lock:
            self._change_handlers.setdefault(key, []).append(handler)

        logger.debug(f"Registered change handler for {key}")

    def reset_to_defaults(self) -> None:
        """Clear everything and re-apply DEFAULT_SETTINGS."""
        with self._lock:
            self._settings.clear()
            for key, value in DEFAULT_SETTINGS.items():
                self._settings.setValue(key, value)
            self._settings.sync()
        logger.info("Settings reset to defaults")

    def contains(self, key: str) -> bool:
        with self._lock:
            return self._settings.contains(key)

    def remove(self, key: str) -> None:
        with self._lock:
            self._settings.remove(key)

    def get_all_keys(self) -> List[str]:
        with self._lock:
            return list(self._settings.allKeys())

    def clear(self) -> None:
        """Remove every stored value (defaults included)."""
        with self._lock:
            self._settings.clear()
            self._settings.sync()
        logger.debug("Settings cleared")
