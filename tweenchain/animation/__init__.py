"""Keyed transition engine."""

from .types import (
    RepeatMode,
    CompletionState,
    EasingCurve,
    TransitionConfigError,
    Value,
)
from .easing import ease, get_easing_function, resolve_easing, EASING_FUNCTIONS
from .curves import CurveAdapter, make_curve_adapter
from .interpolation import lerp, interpolate
from .track import TrackDefinition
from .manager import TransitionManager
from .builder import ChainBuilder
from .scheduler import Scheduler
from .registry import TransitionRegistry
from .ticker import TransitionTicker

__all__ = [
    # Types
    'RepeatMode',
    'CompletionState',
    'EasingCurve',
    'TransitionConfigError',
    'Value',

    # Easing and interpolation
    'ease',
    'get_easing_function',
    'resolve_easing',
    'EASING_FUNCTIONS',
    'CurveAdapter',
    'make_curve_adapter',
    'lerp',
    'interpolate',

    # Engine
    'TrackDefinition',
    'TransitionManager',
    'ChainBuilder',
    'Scheduler',
    'TransitionRegistry',
    'TransitionTicker',
]
