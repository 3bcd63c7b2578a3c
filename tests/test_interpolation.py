"""Tests for scalar and composite interpolation."""
import pytest

from tweenchain.animation.interpolation import (
    interpolate, is_composite, lerp, validate_endpoints, validate_value,
)
from tweenchain.animation.types import TransitionConfigError


def test_lerp_is_exact_at_endpoints():
    """Test lerp is exact at both endpoints."""
    assert lerp(0.1, 0.7, 0.0) == 0.1
    assert lerp(0.1, 0.7, 1.0) == 0.7
    assert lerp(0.0, 100.0, 0.25) == 25.0


def test_scalar_interpolation():
    """Test scalar interpolation."""
    assert interpolate(0.0, 100.0, 0.5) == 50.0


def test_composite_interpolation_is_fieldwise():
    """Test composites interpolate field by field."""
    result = interpolate({"x": 0.0, "y": 0.0}, {"x": 10.0, "y": 20.0}, 0.5)
    assert result == {"x": 5.0, "y": 10.0}


def test_missing_from_field_uses_target():
    """Test a missing from field takes the target value."""
    result = interpolate({"x": 0.0}, {"x": 10.0, "y": 20.0}, 0.25)
    assert result == {"x": 2.5, "y": 20.0}


def test_custom_lerp_function_applies_to_fields():
    """Test a custom lerp applies to composite fields."""
    def stepped(a, b, t):
        return b if t >= 0.5 else a

    assert interpolate({"x": 1.0}, {"x": 9.0}, 0.4, stepped) == {"x": 1.0}
    assert interpolate(1.0, 9.0, 0.6, stepped) == 9.0


def test_validate_value_accepts_numbers_and_flat_mappings():
    """Test numbers and flat mappings are valid values."""
    assert validate_value(3) == 3
    copied = validate_value({"x": 1, "y": 2.5})
    assert copied == {"x": 1, "y": 2.5}
    assert is_composite(copied)


@pytest.mark.parametrize("bad", [
    "1.0",
    None,
    True,
    {"x": "a"},
    {"x": {"y": 1.0}},
    {1: 2.0},
    {"flag": False},
])
def test_validate_value_rejects_bad_shapes(bad):
    """Test bad value shapes are rejected."""
    with pytest.raises(TransitionConfigError):
        validate_value(bad)


def test_validate_endpoints_rejects_shape_mismatch():
    """Test mismatched endpoint shapes are rejected."""
    validate_endpoints(0.0, 1.0)
    validate_endpoints({"x": 0.0}, {"x": 1.0})
    with pytest.raises(TransitionConfigError):
        validate_endpoints(0.0, {"x": 1.0})


def test_config_error_is_value_error():
    """Test TransitionConfigError is a ValueError."""
    assert issubclass(TransitionConfigError, ValueError)
