"""
Registry construction options.

Recognised keys (snake_case, with camelCase aliases):
    use_elapsed_time / useElapsedTime          measure wall time when update() has no step
    auto_start / autoStart                     new transitions start unpaused
    default_interpolator / defaultInterpolator scalar lerp used by new transitions
    max_time_step / maxTimeStep                clamp for measured elapsed deltas (seconds)

Unknown keys are ignored.
"""
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from tweenchain.logging.logger import get_logger

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from tweenchain.settings.settings_manager import SettingsManager

logger = get_logger(__name__)

_ALIASES = {
    "useElapsedTime": "use_elapsed_time",
    "autoStart": "auto_start",
    "defaultInterpolator": "default_interpolator",
    "maxTimeStep": "max_time_step",
}


@dataclass
class RegistryConfig:
    """Options fixed at TransitionRegistry construction."""
    use_elapsed_time: bool = False                     # False: update() steps one frame
    auto_start: bool = True                            # New transitions start unpaused
    default_interpolator: Optional[Callable[[float, float, float], float]] = None  # None: linear lerp
    max_time_step: float = 0.5                         # Clamp for measured deltas (seconds)

    def __post_init__(self):
        """Validate registry config."""
        if self.default_interpolator is not None and not callable(self.default_interpolator):
            raise ValueError("RegistryConfig requires a callable default_interpolator")
        if self.max_time_step <= 0:
            raise ValueError("RegistryConfig requires max_time_step > 0")

    @classmethod
    def from_mapping(cls, options: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "RegistryConfig":
        """Build a config from a mapping and/or keywords, ignoring unknown keys."""
        merged = dict(options or {})
        merged.update(kwargs)

        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in merged.items():
            name = _ALIASES.get(key, key)
            if name in known:
                values[name] = value
            else:
                logger.debug("Ignoring unknown registry option: %s", key)
        return cls(**values)

    @classmethod
    def from_settings(cls, settings: "SettingsManager") -> "RegistryConfig":
        """Build a config from persisted settings."""
        return cls(
            use_elapsed_time=settings.get_bool("tween.use_elapsed_time", False),
            auto_start=settings.get_bool("tween.auto_start", True),
            max_time_step=settings.get_float("tween.max_time_step", 0.5),
        )
