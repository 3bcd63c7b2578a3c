"""
Transition manager: the playback cursor for one keyed chain of tracks.

The cursor is (track index, timer, direction, loop counter). ``advance`` moves
it by one host tick, ``seek`` scrubs it by an arbitrary amount. Both add time
to ``timer`` and then resolve every boundary crossing before returning, so a
settled cursor always satisfies ``0 <= timer <= duration``.

Direction conventions:
    speed sign      which way chain time flows (negative plays the chain backward)
    direction       which half of a ping-pong round the cursor is in; the timer
                    moves by ``step * speed * direction``

The value is always ``interpolate(from, to, ease(timer / duration))``; the
timer position alone encodes where a ping-pong is.
"""
import math
from typing import Any, Callable, List, Optional

from tweenchain.animation.easing import evaluate_easing
from tweenchain.animation.interpolation import interpolate, is_composite, lerp
from tweenchain.animation.track import TrackDefinition
from tweenchain.animation.types import (
    CompletionState, LerpFunction, RepeatMode, SequenceEndCallback, Value,
)
from tweenchain.logging.logger import get_logger

logger = get_logger(__name__)


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


class TransitionManager:
    """
    Mutable playback state for one keyed transition.

    Created by TransitionRegistry.transition() with a single default track;
    ChainBuilder fills in the queue before playback starts.
    """

    def __init__(self, key: str, lerp_fn: LerpFunction = lerp,
                 auto_start: bool = True):
        """
        Initialize manager.

        Args:
            key: Registry key this manager is stored under
            lerp_fn: Scalar interpolation applied to scalars and composite fields
            auto_start: Start unpaused (also re-applied by rewind())
        """
        self.key = key
        self.queue: List[TrackDefinition] = [TrackDefinition()]
        self.lerp_fn = lerp_fn
        self.auto_start = auto_start

        self.current_index = 0
        self.timer = 0.0
        self.direction = 1
        self.loops_remaining = 1
        self.speed = 1.0
        self.resting_speed = 1.0
        self.react_recovery = 0.0
        self.is_paused = not auto_start
        self.current_value: Optional[Value] = None

        self.on_sequence_end: Optional[SequenceEndCallback] = None

        self.completion = CompletionState.RUNNING
        self.is_finished = False  # parked at the end of the chain
        self.has_started = False
        self._generation = 0      # bumped whenever the cursor is taken over externally
        self._end_fired = False

        self.reset()

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    @property
    def current_track(self) -> TrackDefinition:
        return self.queue[self.current_index]

    @property
    def progress(self) -> float:
        """Normalised position inside the current track (0.0 to 1.0)."""
        track = self.current_track
        if track.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, self.timer / track.duration))

    @property
    def is_last_track(self) -> bool:
        return self.current_index == len(self.queue) - 1

    def __repr__(self) -> str:
        return (
            f"TransitionManager(key={self.key!r}, track={self.current_index}/{len(self.queue)}, "
            f"timer={self.timer:.4g}, direction={self.direction}, loops={self.loops_remaining}, "
            f"speed={self.speed:.4g}, paused={self.is_paused})"
        )

    # ------------------------------------------------------------------
    # Cursor control
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Put the cursor at the start of track 0 without side effects (builder use)."""
        self.current_value = None
        self.is_finished = False
        self._enter_track(0, 0.0, 1, notify=False)

    def init_track(self, index: int, timer: float = 0.0, start_direction: int = 1) -> None:
        """
        Move the cursor onto a track.

        Args:
            index: Track index
            timer: Carried time; overflow (>= 0) when entering forward,
                underflow (<= 0) when entering backward
            start_direction: +1 to enter at the start, -1 to enter at the end
        """
        if not 0 <= index < len(self.queue):
            raise IndexError(f"Track index {index} out of range for {self.key!r}")
        self._take_control()
        self._enter_track(index, timer, start_direction)

    def rewind(self) -> None:
        """Return to track 0 and re-apply the auto-start pause state."""
        self._take_control()
        self._end_fired = False
        self._enter_track(0, 0.0, 1)
        self.is_paused = not self.auto_start
        logger.debug("Transition rewound: %s", self.key)

    def skip(self) -> bool:
        """
        Move one track forward.

        Returns:
            False if the cursor moved, True if already on the last track
            (the caller fast-forwards instead)
        """
        if self.is_last_track:
            return True
        self._take_control()
        self._enter_track(self.current_index + 1, 0.0, 1)
        return False

    def back(self) -> None:
        """Move one track backward; on track 0, restart it."""
        self._take_control()
        self._enter_track(max(0, self.current_index - 1), 0.0, 1)

    def fast_forward(self) -> None:
        """Jump to the end of the final track and fire the sequence-end callback."""
        self.current_index = len(self.queue) - 1
        track = self.current_track
        self.timer = track.duration
        self.direction = 1
        self.loops_remaining = 0
        self.is_finished = True

        target = self._last_target_value()
        if target is not None:
            self.current_value = dict(target) if is_composite(target) else target
        self._fire_sequence_end()

    def set_speed(self, value: float) -> None:
        self.speed = float(value)
        self.resting_speed = self.speed

    def react(self, impulse: float, recovery: float) -> None:
        """Kick the playback speed by ``impulse``; it relaxes back to the resting speed."""
        self.speed += impulse
        self.react_recovery = max(0.0, float(recovery))

    # ------------------------------------------------------------------
    # Update tick
    # ------------------------------------------------------------------

    def advance(self, time_step: float) -> None:
        """
        Advance the cursor by one host tick.

        Args:
            time_step: Elapsed ticks (frames or seconds) since the previous update
        """
        if self.is_paused:
            return

        self.has_started = True
        flow = _sign(time_step * self.speed)
        generation = self._generation

        if flow != 0:
            self.is_finished = False
            self.timer += time_step * self.speed * self.direction
            self._resolve(flow, scrub=False)

        self._relax_speed(time_step)

        # A callback that took over the cursor already refreshed the value
        if self._generation == generation and self.completion is CompletionState.RUNNING:
            self._refresh_value()

    def seek(self, amount: float) -> None:
        """
        Scrub the cursor by ``amount`` ticks, resolving every boundary crossed.

        Loops and ping-pongs with budget left absorb any amount by modulo.
        Running off the end parks the manager finished and paused.
        """
        self._take_control()
        self.has_started = True

        track = self.current_track
        if track.repeat is RepeatMode.PINGPONG and self.direction < 0:
            # Unfold the return half so scrub time is monotonic
            self.timer = 2 * track.duration - self.timer
            self.direction = 1

        self.timer += amount
        self._resolve(_sign(amount), scrub=True)
        self._refresh_value()

        if self.is_finished:
            self.is_paused = True
            logger.debug("Seek ran off the end of %s; parked and paused", self.key)

    # ------------------------------------------------------------------
    # Boundary resolution
    # ------------------------------------------------------------------

    def _resolve(self, flow: int, scrub: bool) -> None:
        """Resolve boundary crossings until the timer is inside the current track."""
        while True:
            track = self.current_track
            duration = track.duration
            motion = flow * self.direction
            past_end = self.timer > duration or (self.timer == duration and motion > 0)
            past_start = self.timer < 0 or (self.timer == 0 and motion < 0)
            if not (past_end or past_start):
                return

            if track.repeat is RepeatMode.HOLD:
                self.timer = duration if past_end else 0.0
                return

            if track.repeats and (track.is_infinite or (scrub and self.loops_remaining != 0)):
                self._wrap_by_modulo(track)
                return

            if past_end:
                if not self._cross_end(track, scrub):
                    return
            elif not self._cross_start(track, scrub):
                return

    def _cross_end(self, track: TrackDefinition, scrub: bool) -> bool:
        """Handle ``timer`` past the track's end. Returns True to keep resolving."""
        duration = track.duration

        if self.direction < 0:
            # Playing backward through a ping-pong turnaround
            self.timer = 2 * duration - self.timer
            self.direction = 1
            return True

        if track.repeats and self.loops_remaining != 0:
            if track.repeat is RepeatMode.LOOP:
                self.loops_remaining -= 1
                if self.loops_remaining != 0:
                    self.timer -= duration
                    return True
            else:
                self.timer = 2 * duration - self.timer
                self.direction = -1
                return True

        return self._leave_forward(self.timer - duration, scrub)

    def _cross_start(self, track: TrackDefinition, scrub: bool) -> bool:
        """Handle ``timer`` before the track's start. Returns True to keep resolving."""
        duration = track.duration

        if self.direction < 0:
            # End of a ping-pong return half: one round trip done
            if self.loops_remaining > 0:
                self.loops_remaining -= 1
            if self.loops_remaining != 0:
                self.timer = -self.timer
                self.direction = 1
                return True
            return self._leave_forward(-self.timer, scrub)

        if track.repeats and self.loops_remaining < track.loop_budget:
            # Playing backward into an earlier pass of the same track
            self.loops_remaining += 1
            if track.repeat is RepeatMode.LOOP:
                self.timer += duration
            else:
                self.timer = -self.timer
                self.direction = -1
            return True

        return self._leave_backward(self.timer)

    def _wrap_by_modulo(self, track: TrackDefinition) -> None:
        duration = track.duration
        if track.repeat is RepeatMode.LOOP:
            self.timer = math.fmod(self.timer, duration)
            if self.timer < 0:
                self.timer += duration
            self.direction = 1
            return

        span = 2 * duration
        unfolded = self.timer if self.direction > 0 else span - self.timer
        wrapped = math.fmod(unfolded, span)
        if wrapped < 0:
            wrapped += span
        if wrapped > duration:
            self.timer = span - wrapped
            self.direction = -1
        else:
            self.timer = wrapped
            self.direction = 1

    def _leave_forward(self, overflow: float, scrub: bool) -> bool:
        track = self.current_track
        if not scrub:
            generation = self._generation
            self._fire(track.on_track_end)
            if self._generation != generation:
                # The callback moved the cursor itself
                return False

        if not self.is_last_track:
            self._enter_track(self.current_index + 1, overflow, 1, notify=False)
            return True

        self.timer = track.duration
        self.direction = 1
        self.is_finished = True
        if not scrub:
            self._finish()
        return False

    def _leave_backward(self, underflow: float) -> bool:
        if self.current_index > 0:
            self._enter_track(self.current_index - 1, underflow, -1, notify=False)
            return True
        # Hit the wall: backward exhaustion never completes the chain
        self.timer = 0.0
        self.direction = 1
        return False

    def _enter_track(self, index: int, timer: float, start_direction: int, notify: bool = True) -> None:
        self.current_index = index
        track = self.current_track

        if start_direction < 0:
            if track.repeat is RepeatMode.PINGPONG and track.repeats and track.loop_budget != 0:
                # Finished ping-pongs end on their return half at timer 0
                self.direction = -1
                self.timer = -timer
                self.loops_remaining = 1 if not track.is_infinite else -1
            else:
                self.direction = 1
                self.timer = track.duration + timer
                if track.repeat is RepeatMode.LOOP and track.repeats and not track.is_infinite:
                    self.loops_remaining = 1
                else:
                    self.loops_remaining = track.initial_loops()
        else:
            self.direction = 1
            self.timer = timer
            self.loops_remaining = track.initial_loops()

        self._refresh_value(notify)

    def _finish(self) -> None:
        self.completion = CompletionState.JUST_FINISHED
        self._refresh_value()
        logger.debug("Transition finished: %s", self.key)
        self._fire_sequence_end()
        if self.completion is CompletionState.RESCUED:
            logger.debug("Transition rescued by its end callback: %s", self.key)

    def _take_control(self) -> None:
        """Note an external cursor move; rescues a manager that just finished."""
        self._generation += 1
        self.is_finished = False
        if self.completion is CompletionState.JUST_FINISHED:
            self.completion = CompletionState.RESCUED
            self._end_fired = False

    # ------------------------------------------------------------------
    # Value evaluation
    # ------------------------------------------------------------------

    def _refresh_value(self, notify: bool = True) -> None:
        track = self.current_track
        if track.is_wait:
            self.current_value = self._wait_value()
            return

        eased = evaluate_easing(track.easing, self.progress)
        self.current_value = interpolate(track.from_value, track.to_value, eased, self.lerp_fn)
        if notify:
            self._fire(track.on_update, self.current_value)

    def _wait_value(self) -> Optional[Value]:
        """Value held by a wait segment: where the preceding track settles, else where the next one starts."""
        for track in reversed(self.queue[:self.current_index]):
            if not track.is_wait:
                ends_on_return = (
                    track.repeat is RepeatMode.PINGPONG and track.repeats and track.loop_budget != 0
                )
                return self._value_at(track, 0.0 if ends_on_return else 1.0)
        for track in self.queue[self.current_index + 1:]:
            if not track.is_wait:
                return self._value_at(track, 0.0)
        return None

    def _value_at(self, track: TrackDefinition, progress: float) -> Value:
        eased = evaluate_easing(track.easing, progress)
        return interpolate(track.from_value, track.to_value, eased, self.lerp_fn)

    def _last_target_value(self) -> Optional[Value]:
        for track in reversed(self.queue):
            if not track.is_wait:
                return track.to_value
        return None

    def _relax_speed(self, time_step: float) -> None:
        if self.react_recovery <= 0 or self.speed == self.resting_speed:
            return
        blend = min(1.0, self.react_recovery * abs(time_step))
        self.speed += (self.resting_speed - self.speed) * blend
        if abs(self.speed - self.resting_speed) < 1e-9:
            self.speed = self.resting_speed

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def _fire_sequence_end(self) -> None:
        if self.on_sequence_end is None or self._end_fired:
            return
        self._end_fired = True
        self._fire(self.on_sequence_end)

    def _fire(self, callback: Optional[Callable[..., Any]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Error in transition callback for {self.key}: {e}", exc_info=True)
