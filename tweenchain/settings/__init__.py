"""Registry configuration and persisted settings."""

from .config import RegistryConfig
from .settings_manager import DEFAULT_SETTINGS, SettingsManager

__all__ = ['RegistryConfig', 'SettingsManager', 'DEFAULT_SETTINGS']
