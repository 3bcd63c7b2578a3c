"""
Tween types, enums, and errors.

Defines the core types used by the transition engine.
"""
from enum import Enum
from typing import Any, Callable, Mapping, Union


class RepeatMode(Enum):
    """How a track behaves when its timer reaches an edge."""
    ONCE = "once"              # Continue to the neighbouring track
    LOOP = "loop"              # Wrap back to the start
    PINGPONG = "pingpong"      # Reverse direction inside the track
    HOLD = "hold"              # Clamp at the edge indefinitely


class CompletionState(Enum):
    """Completion state of a manager during an update pass."""
    RUNNING = "running"
    JUST_FINISHED = "just_finished"  # Reached the end, removal pending
    RESCUED = "rescued"              # Restarted by a callback before removal


class EasingCurve(Enum):
    """
    Easing curve types for tracks.

    Easing functions control the rate of change of the animated value over time.
    """
    # Basic
    LINEAR = "linear"

    # Quadratic
    QUAD_IN = "quad_in"
    QUAD_OUT = "quad_out"
    QUAD_IN_OUT = "quad_in_out"

    # Cubic
    CUBIC_IN = "cubic_in"
    CUBIC_OUT = "cubic_out"
    CUBIC_IN_OUT = "cubic_in_out"

    # Quartic
    QUART_IN = "quart_in"
    QUART_OUT = "quart_out"
    QUART_IN_OUT = "quart_in_out"

    # Quintic
    QUINT_IN = "quint_in"
    QUINT_OUT = "quint_out"
    QUINT_IN_OUT = "quint_in_out"

    # Sine
    SINE_IN = "sine_in"
    SINE_OUT = "sine_out"
    SINE_IN_OUT = "sine_in_out"

    # Exponential
    EXPO_IN = "expo_in"
    EXPO_OUT = "expo_out"
    EXPO_IN_OUT = "expo_in_out"

    # Circular
    CIRC_IN = "circ_in"
    CIRC_OUT = "circ_out"
    CIRC_IN_OUT = "circ_in_out"

    # Elastic
    ELASTIC_IN = "elastic_in"
    ELASTIC_OUT = "elastic_out"
    ELASTIC_IN_OUT = "elastic_in_out"

    # Back
    BACK_IN = "back_in"
    BACK_OUT = "back_out"
    BACK_IN_OUT = "back_in_out"

    # Bounce
    BOUNCE_IN = "bounce_in"
    BOUNCE_OUT = "bounce_out"
    BOUNCE_IN_OUT = "bounce_in_out"


class TransitionConfigError(ValueError):
    """Raised when a transition chain is configured incorrectly."""


# Endpoint values: a scalar, or one level of named numeric fields
Value = Union[float, Mapping[str, float]]

# Type aliases for callbacks
EasingFunction = Callable[[float], float]
LerpFunction = Callable[[float, float, float], float]
TrackEndCallback = Callable[[], None]
TrackUpdateCallback = Callable[[Any], None]  # receives the current value
SequenceEndCallback = Callable[[], None]
ScheduledAction = Callable[[], None]
