"""
Transition registry.

Owns every active TransitionManager by key, advances them once per host tick,
and exposes the playback-control surface. Every control method accepts no
key (all active transitions), a single key, or a list of keys; keys that are
not active are skipped silently.

Create one registry per independent animation domain (a screen, an entity),
or one app-wide registry shared by whoever drives the update loop.
"""
import time
from typing import Any, Iterable, List, Mapping, Optional, Union

from PySide6.QtCore import QObject, Signal

from tweenchain.animation.builder import ChainBuilder
from tweenchain.animation.curves import CurveAdapter, make_curve_adapter
from tweenchain.animation.interpolation import lerp
from tweenchain.animation.manager import TransitionManager
from tweenchain.animation.scheduler import Scheduler
from tweenchain.animation.types import CompletionState, LerpFunction, ScheduledAction, Value
from tweenchain.logging.logger import get_logger, is_perf_metrics_enabled, is_verbose_logging
from tweenchain.settings.config import RegistryConfig

logger = get_logger(__name__)

KeySelector = Optional[Union[str, Iterable[str]]]


class TransitionRegistry(QObject):
    """
    Keyed collection of active transitions.

    Managers are removed when their chain completes during update(), when
    stopped, or when fast-forwarded. A completion callback that restarts its
    own manager (rewind/seek) keeps it registered.
    """

    # Signals for transition lifecycle events
    transition_started = Signal(str)    # key
    transition_completed = Signal(str)  # key, natural or fast-forwarded completion
    transition_stopped = Signal(str)    # key
    transition_resumed = Signal(str)    # key, a paused transition was set playing again

    def __init__(self, config: Optional[Union[RegistryConfig, Mapping[str, Any]]] = None,
                 **options: Any):
        """
        Initialize registry.

        Args:
            config: RegistryConfig or a mapping of options
            **options: Options merged over ``config`` (unknown keys ignored)
        """
        super().__init__()

        if isinstance(config, RegistryConfig):
            if options:
                merged = {k: getattr(config, k) for k in config.__dataclass_fields__}
                merged.update(options)
                config = RegistryConfig.from_mapping(merged)
        else:
            config = RegistryConfig.from_mapping(config, **options)
        self.config = config

        self._managers: dict[str, TransitionManager] = {}
        self._scheduler = Scheduler()
        self._last_update_time: Optional[float] = None

        logger.info(
            "TransitionRegistry initialized (elapsed_time=%s, auto_start=%s)",
            config.use_elapsed_time, config.auto_start,
        )

    # ------------------------------------------------------------------
    # Creation and lookup
    # ------------------------------------------------------------------

    def transition(self, key: str,
                   lerp_fn: Optional[LerpFunction] = None) -> ChainBuilder:
        """
        Create (or replace) the transition under ``key``.

        Args:
            key: Transition key
            lerp_fn: Scalar interpolation for this transition (defaults to the
                registry's default interpolator)

        Returns:
            ChainBuilder for configuring the tracks
        """
        if not isinstance(key, str) or not key:
            raise ValueError("Transition key must be a non-empty string")

        if key in self._managers:
            logger.debug("Replacing transition: %s", key)

        manager = TransitionManager(
            key,
            lerp_fn=lerp_fn or self.config.default_interpolator or lerp,
            auto_start=self.config.auto_start,
        )
        self._managers[key] = manager
        self.transition_started.emit(key)
        logger.debug("Transition created: %s", key)
        return ChainBuilder(manager)

    def get_manager(self, key: str) -> Optional[TransitionManager]:
        return self._managers.get(key)

    def get_value(self, key: str, fallback: Any = None) -> Optional[Value]:
        """Return the current value of ``key``, or ``fallback`` if it is not active."""
        manager = self._managers.get(key)
        if manager is None or manager.current_value is None:
            return fallback
        return manager.current_value

    def get_speed(self, key: str) -> Optional[float]:
        manager = self._managers.get(key)
        return manager.speed if manager is not None else None

    def is_active(self, key: Optional[str] = None) -> bool:
        """True if ``key`` is active, or with no key, if any transition is active."""
        if key is None:
            return bool(self._managers)
        return key in self._managers

    def is_paused(self, key: Optional[str] = None) -> bool:
        """True if ``key`` is paused, or with no key, if every active transition is paused."""
        if key is None:
            return bool(self._managers) and all(m.is_paused for m in self._managers.values())
        manager = self._managers.get(key)
        return manager.is_paused if manager is not None else False

    def get_active_keys(self) -> List[str]:
        return list(self._managers)

    def get_active_count(self) -> int:
        return len(self._managers)

    def custom(self, curve_asset: Any, channel_index: int = 0) -> Optional[CurveAdapter]:
        """Wrap one channel of a keyframe curve asset as an easing source (None if invalid)."""
        return make_curve_adapter(curve_asset, channel_index)

    # ------------------------------------------------------------------
    # Update tick
    # ------------------------------------------------------------------

    def update(self, time_step: Optional[float] = None) -> None:
        """
        Advance every unpaused transition by one step.

        Args:
            time_step: Step in ticks. When omitted: one frame in frame mode,
                or the measured wall time since the previous update in
                elapsed-time mode
        """
        step = self._resolve_time_step(time_step)

        self._scheduler.tick(step)

        finished: List[TransitionManager] = []
        failed: List[TransitionManager] = []

        for key in list(self._managers):
            manager = self._managers.get(key)
            if manager is None or manager.is_paused:
                continue

            _start = time.time()
            try:
                manager.advance(step)
            except Exception as e:
                logger.error(f"Transition {key} failed during update; removing it: {e}", exc_info=True)
                failed.append(manager)
                continue
            _elapsed = (time.time() - _start) * 1000.0
            if _elapsed > 50.0 and is_perf_metrics_enabled():
                logger.warning("[PERF] [ANIM] Slow transition update (%s): %.2fms", key, _elapsed)

            if manager.completion is CompletionState.JUST_FINISHED:
                finished.append(manager)
            elif manager.completion is CompletionState.RESCUED:
                manager.completion = CompletionState.RUNNING

            if is_verbose_logging():
                logger.debug("Tick %s: %r", key, manager)

        # Removal waits until the pass is over so late callbacks can still reach the managers
        for manager in failed:
            self._discard(manager)
        for manager in finished:
            if manager.completion is CompletionState.JUST_FINISHED and self._discard(manager):
                self.transition_completed.emit(manager.key)
                logger.debug("Transition completed: %s", manager.key)
            elif manager.completion is CompletionState.RESCUED:
                manager.completion = CompletionState.RUNNING

    def _resolve_time_step(self, time_step: Optional[float]) -> float:
        now = time.time()
        last = self._last_update_time
        self._last_update_time = now

        if time_step is not None:
            return float(time_step)
        if not self.config.use_elapsed_time:
            return 1.0
        if last is None:
            return 0.0

        delta = now - last
        if delta > self.config.max_time_step:
            if is_perf_metrics_enabled():
                logger.info(
                    "[PERF] [ANIM] Large frame dt=%.2fms clamped to %.0fms (active=%d)",
                    delta * 1000.0, self.config.max_time_step * 1000.0, len(self._managers),
                )
            delta = self.config.max_time_step
        return max(0.0, delta)

    def _discard(self, manager: TransitionManager) -> bool:
        """Remove ``manager`` if it is still the one registered under its key."""
        if self._managers.get(manager.key) is manager:
            del self._managers[manager.key]
            return True
        return False

    # ------------------------------------------------------------------
    # Playback control
    # ------------------------------------------------------------------

    def play(self, keys: KeySelector = None) -> None:
        for manager in self._select(keys):
            if manager.is_paused:
                manager.is_paused = False
                self.transition_resumed.emit(manager.key)

    def pause(self, keys: KeySelector = None) -> None:
        for manager in self._select(keys):
            manager.is_paused = True

    def stop(self, keys: KeySelector = None, trigger_callback: bool = True) -> None:
        """Remove transitions immediately, firing their completion callback unless told not to."""
        for manager in self._select(keys):
            if trigger_callback:
                manager._fire_sequence_end()
            if self._discard(manager):
                self.transition_stopped.emit(manager.key)
                logger.debug("Transition stopped: %s", manager.key)

    def ffwd(self, keys: KeySelector = None) -> None:
        """Jump to the final value, fire the completion callback and remove."""
        for manager in self._select(keys):
            self._fast_forward(manager)

    def rewind(self, keys: KeySelector = None) -> None:
        for manager in self._select(keys):
            was_paused = manager.is_paused
            manager.rewind()
            if was_paused and not manager.is_paused:
                self.transition_resumed.emit(manager.key)

    def skip(self, keys: KeySelector = None) -> None:
        """Move one track forward; on the last track, behave like ffwd."""
        for manager in self._select(keys):
            if manager.skip():
                self._fast_forward(manager)

    def back(self, keys: KeySelector = None) -> None:
        for manager in self._select(keys):
            manager.back()

    def seek(self, amount: float, keys: KeySelector = None) -> None:
        """Scrub by ``amount`` ticks; running off the end pauses instead of removing."""
        for manager in self._select(keys):
            manager.seek(amount)
            if manager.completion is CompletionState.RESCUED:
                manager.completion = CompletionState.RUNNING

    def set_speed(self, value: float, keys: KeySelector = None) -> None:
        for manager in self._select(keys):
            manager.set_speed(value)

    def react(self, impulse: float, keys: KeySelector = None, recovery: float = 0.1) -> None:
        """
        Kick playback speed by ``impulse``; it eases back to the resting speed.

        Args:
            impulse: Added to the current speed
            keys: Key selector
            recovery: Fraction of the gap closed per tick of elapsed time
        """
        for manager in self._select(keys):
            manager.react(impulse, recovery)

    def clear(self) -> None:
        """Remove every transition and pending scheduled action without callbacks."""
        self._managers.clear()
        self._scheduler.clear()
        logger.info("All transitions cleared")

    def _fast_forward(self, manager: TransitionManager) -> None:
        manager.fast_forward()
        if self._discard(manager):
            self.transition_completed.emit(manager.key)
            logger.debug("Transition fast-forwarded: %s", manager.key)

    def _select(self, keys: KeySelector) -> Iterable[TransitionManager]:
        """Yield the managers for a key selector, re-checking each key as it is reached."""
        if keys is None:
            selected = list(self._managers)
        elif isinstance(keys, str):
            selected = [keys]
        else:
            selected = list(keys)

        for key in selected:
            manager = self._managers.get(key)
            if manager is not None:
                yield manager

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def delay(self, delay: float, action: ScheduledAction) -> None:
        """Run ``action`` once ``delay`` ticks of update() have passed."""
        self._scheduler.add(delay, action)

    def stagger(self, interval: float, keys: KeySelector = None) -> None:
        """Pause the selected transitions, then start them ``interval`` ticks apart."""
        for index, manager in enumerate(list(self._select(keys))):
            manager.is_paused = True
            self._scheduler.add(index * interval, lambda key=manager.key: self.play(key))

    @property
    def pending_actions(self) -> int:
        return len(self._scheduler)
