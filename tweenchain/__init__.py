"""tweenchain: keyed, chainable value transitions for Qt applications."""

from tweenchain.animation import (
    ChainBuilder,
    CurveAdapter,
    EasingCurve,
    RepeatMode,
    TransitionConfigError,
    TransitionManager,
    TransitionRegistry,
    TransitionTicker,
)
from tweenchain.settings import RegistryConfig, SettingsManager

__version__ = "1.0.0"

__all__ = [
    'ChainBuilder',
    'CurveAdapter',
    'EasingCurve',
    'RepeatMode',
    'TransitionConfigError',
    'TransitionManager',
    'TransitionRegistry',
    'TransitionTicker',
    'RegistryConfig',
    'SettingsManager',
]
