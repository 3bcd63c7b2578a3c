"""
Interpolation strategies.

A track endpoint is either a scalar or a composite: one level of named
numeric fields (e.g. ``{"x": 0.0, "y": 0.0}``). Composites are interpolated
field by field with the transition's scalar lerp function.
"""
from numbers import Real
from typing import Any, Callable, Dict, Mapping

from tweenchain.animation.types import TransitionConfigError, Value


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation, exact at both ends (t=0 gives a, t=1 gives b)."""
    return a * (1.0 - t) + b * t


def is_composite(value: Any) -> bool:
    return isinstance(value, Mapping)


def interpolate(
    from_value: Value,
    to_value: Value,
    t: float,
    lerp_fn: Callable[[float, float, float], float] = lerp,
) -> Value:
    """
    Combine an eased weight with a from/to endpoint pair.

    For composites the result has the fields of ``to_value``. A field missing
    from ``from_value`` takes the ``to_value`` field for both ends, so that
    field sits at its target from the start.
    """
    if is_composite(to_value):
        source = from_value if is_composite(from_value) else {}
        result: Dict[str, float] = {}
        for name, target in to_value.items():
            result[name] = lerp_fn(source.get(name, target), target, t)
        return result
    return lerp_fn(from_value, to_value, t)


def validate_value(value: Any, what: str = "value") -> Value:
    """
    Check an endpoint at configuration time.

    Raises:
        TransitionConfigError: for non-numeric scalars, nested composites,
            or non-numeric fields
    """
    if is_composite(value):
        for name, field in value.items():
            if not isinstance(name, str):
                raise TransitionConfigError(f"{what} field names must be strings, got {name!r}")
            if is_composite(field):
                raise TransitionConfigError(f"{what} field {name!r} is nested; composites are one level deep")
            if isinstance(field, bool) or not isinstance(field, Real):
                raise TransitionConfigError(f"{what} field {name!r} must be a number, got {field!r}")
        return dict(value)

    if isinstance(value, bool) or not isinstance(value, Real):
        raise TransitionConfigError(f"{what} must be a number or a mapping of numbers, got {value!r}")
    return value


def validate_endpoints(from_value: Value, to_value: Value) -> None:
    """Both endpoints of a track must have the same shape (scalar vs composite)."""
    if is_composite(from_value) != is_composite(to_value):
        raise TransitionConfigError(
            f"from/to shape mismatch: {type(from_value).__name__} vs {type(to_value).__name__}"
        )
