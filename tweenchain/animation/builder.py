"""
Fluent chain configuration.

    registry.transition("fade").from_(0).to(1).duration(30).ease("quad_out") \\
        .next().to(0.5).pingpong(2) \\
        .wait(10) \\
        .next().to(0).on_complete(cleanup)
"""
from typing import Optional

from tweenchain.animation.easing import EasingSource, linear, resolve_easing
from tweenchain.animation.interpolation import (
    is_composite, validate_endpoints, validate_value,
)
from tweenchain.animation.manager import TransitionManager
from tweenchain.animation.track import TrackDefinition
from tweenchain.animation.types import (
    LerpFunction, RepeatMode, SequenceEndCallback, TrackEndCallback, TrackUpdateCallback,
    TransitionConfigError, Value,
)


class ChainBuilder:
    """Configures the track queue of one TransitionManager before playback."""

    def __init__(self, manager: TransitionManager):
        self._manager = manager
        self._track = manager.queue[-1]
        self._explicit: set[str] = set()

    @property
    def manager(self) -> TransitionManager:
        return self._manager

    @property
    def key(self) -> str:
        return self._manager.key

    # ------------------------------------------------------------------
    # Track values
    # ------------------------------------------------------------------

    def from_(self, value: Value) -> "ChainBuilder":
        """Set the start value of the current track."""
        self._check_value_track("from")
        self._set_endpoint("from_value", validate_value(value, "from"))
        return self

    def to(self, value: Value) -> "ChainBuilder":
        """Set the end value of the current track."""
        self._check_value_track("to")
        self._set_endpoint("to_value", validate_value(value, "to"))
        return self

    def duration(self, duration: float) -> "ChainBuilder":
        """Set the track duration in ticks; 0 makes the track instant."""
        self._check_mutable()
        if duration < 0:
            raise TransitionConfigError(f"duration must be >= 0, got {duration}")
        self._track.duration = float(duration)
        return self._refresh()

    def ease(self, easing: EasingSource) -> "ChainBuilder":
        """Set the easing: EasingCurve, curve name, callable, or curve adapter."""
        self._check_value_track("ease")
        self._track.easing = resolve_easing(easing)
        return self._refresh()

    def label(self, name: str) -> "ChainBuilder":
        self._check_mutable()
        self._track.label = name
        return self

    # ------------------------------------------------------------------
    # Repeat modes
    # ------------------------------------------------------------------

    def once(self) -> "ChainBuilder":
        return self._set_repeat(RepeatMode.ONCE, 1)

    def loop(self, times: int = -1) -> "ChainBuilder":
        """Repeat the track ``times`` more times after the first play (-1 = forever)."""
        self._check_count(times)
        return self._set_repeat(RepeatMode.LOOP, -1 if times < 0 else times + 1)

    def pingpong(self, times: int = -1) -> "ChainBuilder":
        """Play forward then back, ``times`` round trips (-1 = forever)."""
        self._check_count(times)
        return self._set_repeat(RepeatMode.PINGPONG, times)

    def hold(self) -> "ChainBuilder":
        """Clamp at the track edges indefinitely."""
        return self._set_repeat(RepeatMode.HOLD, 1)

    # ------------------------------------------------------------------
    # Chaining
    # ------------------------------------------------------------------

    def next(self) -> "ChainBuilder":
        """Append a track continuing from the previous track's end value."""
        previous = self._last_value_track()
        track = TrackDefinition()
        if previous is not None:
            end = previous.to_value
            track.from_value = dict(end) if is_composite(end) else end
            track.to_value = dict(end) if is_composite(end) else end
            track.duration = previous.duration
            track.easing = previous.easing
        return self._append(track, explicit={"from_value", "to_value"} if previous is not None else set())

    def add(self) -> "ChainBuilder":
        """Append a fresh default track (0 -> 1, duration 1, linear)."""
        return self._append(TrackDefinition(easing=linear))

    def wait(self, duration: float) -> "ChainBuilder":
        """
        Append a pure delay segment; the observed value holds during it.

        Called before anything else is configured, the wait replaces the
        default first track so the chain starts with the delay.
        """
        if duration < 0:
            raise TransitionConfigError(f"wait duration must be >= 0, got {duration}")
        track = TrackDefinition(label="wait", duration=float(duration), is_wait=True)
        return self._append(track, replace_default=True)

    # ------------------------------------------------------------------
    # Callbacks and playback options
    # ------------------------------------------------------------------

    def on_end(self, callback: Optional[TrackEndCallback]) -> "ChainBuilder":
        """Called when the current track completes going forward."""
        self._check_mutable()
        self._track.on_track_end = callback
        return self

    def on_update(self, callback: Optional[TrackUpdateCallback]) -> "ChainBuilder":
        """Called with the new value whenever the current track recomputes it."""
        self._check_value_track("on_update")
        self._track.on_update = callback
        return self

    def on_complete(self, callback: Optional[SequenceEndCallback]) -> "ChainBuilder":
        """Called once when the whole chain completes."""
        self._manager.on_sequence_end = callback
        return self

    def lerp(self, lerp_fn: LerpFunction) -> "ChainBuilder":
        self._check_mutable()
        self._manager.lerp_fn = lerp_fn
        return self._refresh()

    def speed(self, value: float) -> "ChainBuilder":
        self._manager.set_speed(value)
        return self

    def paused(self, paused: bool = True) -> "ChainBuilder":
        self._manager.is_paused = paused
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _append(self, track: TrackDefinition, explicit: Optional[set] = None,
                replace_default: bool = False) -> "ChainBuilder":
        self._check_mutable()
        if replace_default and self._is_default_chain():
            self._manager.queue[0] = track
        else:
            self._manager.queue.append(track)
        self._track = track
        self._explicit = set(explicit or ())
        return self._refresh()

    def _set_endpoint(self, name: str, value: Value) -> None:
        other = "to_value" if name == "from_value" else "from_value"
        other_value = getattr(self._track, other)
        if other in self._explicit:
            pair = (value, other_value) if name == "from_value" else (other_value, value)
            validate_endpoints(*pair)
        elif is_composite(value) != is_composite(other_value):
            # Unset endpoint follows the shape of the one given
            setattr(self._track, other, dict(value) if is_composite(value) else value)
        setattr(self._track, name, value)
        self._explicit.add(name)
        self._refresh()

    def _set_repeat(self, mode: RepeatMode, budget: int) -> "ChainBuilder":
        self._check_value_track(mode.value)
        self._track.repeat = mode
        self._track.loop_budget = budget
        return self._refresh()

    def _is_default_chain(self) -> bool:
        """True while the queue is still the untouched track the manager was created with."""
        return (
            len(self._manager.queue) == 1
            and not self._explicit
            and self._track == TrackDefinition()
        )

    def _last_value_track(self) -> Optional[TrackDefinition]:
        for track in reversed(self._manager.queue):
            if not track.is_wait:
                return track
        return None

    def _refresh(self) -> "ChainBuilder":
        self._manager.reset()
        return self

    def _check_mutable(self) -> None:
        if self._manager.has_started:
            raise TransitionConfigError(
                f"Transition {self.key!r} is already playing; its tracks can no longer be changed"
            )

    def _check_value_track(self, what: str) -> None:
        self._check_mutable()
        if self._track.is_wait:
            raise TransitionConfigError(f"Cannot set {what} on a wait segment of {self.key!r}")

    @staticmethod
    def _check_count(times: int) -> None:
        if isinstance(times, bool) or not isinstance(times, int) or times < -1:
            raise TransitionConfigError(f"repeat count must be an int >= -1, got {times!r}")
