"""Track definitions: one segment of a transition chain."""
from dataclasses import dataclass
from typing import Optional, Union

from tweenchain.animation.curves import CurveAdapter
from tweenchain.animation.easing import linear
from tweenchain.animation.types import (
    EasingFunction, RepeatMode, TrackEndCallback, TrackUpdateCallback, Value,
)


@dataclass
class TrackDefinition:
    """
    One segment of a transition chain.

    Configured through ChainBuilder before playback and treated as read-only
    once the owning manager starts advancing.
    """
    label: Optional[str] = None
    from_value: Value = 0.0
    to_value: Value = 1.0
    duration: float = 1.0                                   # In ticks (frames or seconds)
    easing: Union[EasingFunction, CurveAdapter] = linear
    repeat: RepeatMode = RepeatMode.ONCE
    loop_budget: int = 1                                    # Total plays / round trips, -1 = infinite
    is_wait: bool = False                                   # Pure delay, no value computation
    on_track_end: Optional[TrackEndCallback] = None
    on_update: Optional[TrackUpdateCallback] = None

    @property
    def is_infinite(self) -> bool:
        return self.loop_budget < 0

    @property
    def repeats(self) -> bool:
        """True if the track loops or ping-pongs at its edges.

        Zero-length tracks never repeat, so they cannot spin forever.
        """
        return self.repeat in (RepeatMode.LOOP, RepeatMode.PINGPONG) and self.duration > 0

    def initial_loops(self) -> int:
        """Loop counter value when the track is entered from its start."""
        if self.repeat in (RepeatMode.LOOP, RepeatMode.PINGPONG):
            return self.loop_budget
        return 1

