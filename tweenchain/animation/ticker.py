"""
Qt host loop for a TransitionRegistry.

Drives registry.update() from a precise QTimer so widget code never has to
own a frame loop. The timer runs only while something can move: it starts
when a transition is created or resumed and stops on the first tick that
finds every transition gone or paused with nothing scheduled.
"""
import time
from typing import TYPE_CHECKING, Optional

from PySide6.QtCore import QObject, QTimer, Qt

from tweenchain.animation.registry import TransitionRegistry
from tweenchain.logging.logger import get_logger, is_perf_metrics_enabled

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from tweenchain.settings.settings_manager import SettingsManager

logger = get_logger(__name__)


class TransitionTicker(QObject):
    """
    Timer-driven update loop.

    In elapsed-time registries each tick passes the measured wall time in
    seconds (clamped to the registry's max_time_step); in frame registries
    each tick advances one frame.
    """

    def __init__(self, registry: TransitionRegistry, fps: int = 60, auto_start: bool = True):
        """
        Initialize ticker.

        Args:
            registry: Registry to drive
            fps: Target frames per second for updates
            auto_start: Start the timer whenever a transition is created or resumed
        """
        super().__init__()

        self.registry = registry
        self.fps = max(10, min(240, int(fps)))
        self.frame_time = 1.0 / self.fps
        self._last_update_time: Optional[float] = None

        # `[PERF] [ANIM]` profiling for one continuous active period
        self._profile_start_ts: Optional[float] = None
        self._profile_last_ts: Optional[float] = None
        self._profile_frame_count: int = 0
        self._profile_min_dt: float = 0.0
        self._profile_max_dt: float = 0.0

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(int(self.frame_time * 1000))
        self._timer.timeout.connect(self._update_all)

        self._auto_start = auto_start
        if auto_start:
            registry.transition_started.connect(self._on_transition_started)
            registry.transition_resumed.connect(self._on_transition_started)

        logger.info(f"TransitionTicker initialized (fps={self.fps})")

    @classmethod
    def from_settings(cls, registry: TransitionRegistry, settings: "SettingsManager") -> "TransitionTicker":
        return cls(registry, fps=settings.get_int("ticker.fps", 60))

    def is_running(self) -> bool:
        return self._timer.isActive()

    def set_target_fps(self, fps: int) -> None:
        """Update target FPS and reconfigure the timer interval."""
        try:
            new_fps = max(10, min(240, int(fps)))
        except (TypeError, ValueError):
            new_fps = 60
        if new_fps == self.fps:
            return
        self.fps = new_fps
        self.frame_time = 1.0 / self.fps
        was_active = self._timer.isActive()
        if was_active:
            self._timer.stop()
        self._timer.setInterval(int(self.frame_time * 1000))
        if was_active:
            self._last_update_time = time.time()
            self._timer.start()
        logger.info(f"TransitionTicker target FPS set to {self.fps}")

    def start(self) -> None:
        """Start the update loop."""
        if self._timer.isActive():
            return
        now = time.time()
        self._last_update_time = now
        self._profile_start_ts = now
        self._profile_last_ts = None
        self._profile_frame_count = 0
        self._profile_min_dt = 0.0
        self._profile_max_dt = 0.0

        self._timer.start()
        logger.debug("TransitionTicker started")

    def stop(self) -> None:
        """Stop the update loop."""
        if self._timer.isActive():
            self._timer.stop()
            self._log_profile_summary()
            logger.debug("TransitionTicker stopped")

    def cleanup(self) -> None:
        """Stop the timer and detach from the registry."""
        logger.debug("Cleaning up TransitionTicker")
        self.stop()
        if self._auto_start:
            self._auto_start = False
            try:
                self.registry.transition_started.disconnect(self._on_transition_started)
                self.registry.transition_resumed.disconnect(self._on_transition_started)
            except (RuntimeError, TypeError):
                pass
        try:
            self._timer.deleteLater()
        except RuntimeError:
            pass
        logger.info("TransitionTicker cleanup complete")

    def _on_transition_started(self, key: str) -> None:
        if not self._timer.isActive():
            logger.debug("Ticker woken by transition: %s", key)
            self.start()

    def _update_all(self) -> None:
        """Advance the registry by the time since the previous tick (called by timer)."""
        current_time = time.time()

        if self._last_update_time is None:
            self._last_update_time = current_time
            return

        delta_time = current_time - self._last_update_time
        self._last_update_time = current_time

        max_step = self.registry.config.max_time_step
        if delta_time > max_step:
            if is_perf_metrics_enabled():
                logger.info(
                    "[PERF] [ANIM] Large frame dt=%.2fms clamped to %.0fms (target=%.2fms, active=%d)",
                    delta_time * 1000.0,
                    max_step * 1000.0,
                    self.frame_time * 1000.0,
                    self.registry.get_active_count(),
                )
            delta_time = max_step

        if delta_time > 0.0:
            if self._profile_min_dt == 0.0 or delta_time < self._profile_min_dt:
                self._profile_min_dt = delta_time
            if delta_time > self._profile_max_dt:
                self._profile_max_dt = delta_time
        self._profile_last_ts = current_time
        self._profile_frame_count += 1

        _start = time.time()
        self.registry.update(delta_time if self.registry.config.use_elapsed_time else 1.0)
        _elapsed = (time.time() - _start) * 1000.0
        if _elapsed > 50.0 and is_perf_metrics_enabled():
            logger.warning("[PERF] [ANIM] Slow registry update: %.2fms", _elapsed)

        idle = not self.registry.is_active() or self.registry.is_paused()
        if idle and not self.registry.pending_actions:
            self.stop()

    def _log_profile_summary(self) -> None:
        """Emit a concise `[PERF] [ANIM]` summary for the last active run."""
        try:
            if (
                is_perf_metrics_enabled()
                and self._profile_start_ts is not None
                and self._profile_last_ts is not None
                and self._profile_frame_count > 0
            ):
                elapsed = max(0.0, self._profile_last_ts - self._profile_start_ts)
                if elapsed > 0.0:
                    logger.info(
                        "[PERF] [ANIM] TransitionTicker metrics: duration=%.1fms, "
                        "frames=%d, avg_fps=%.1f, dt_min=%.2fms, dt_max=%.2fms, "
                        "active_count=%d, fps_target=%d",
                        elapsed * 1000.0,
                        self._profile_frame_count,
                        self._profile_frame_count / elapsed,
                        self._profile_min_dt * 1000.0,
                        self._profile_max_dt * 1000.0,
                        self.registry.get_active_count(),
                        self.fps,
                    )
        finally:
            self._profile_start_ts = None
            self._profile_last_ts = None
            self._profile_frame_count = 0
            self._profile_min_dt = 0.0
            self._profile_max_dt = 0.0
