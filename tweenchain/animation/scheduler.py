"""Delayed actions ticked alongside the registry update."""
from dataclasses import dataclass
from typing import List

from tweenchain.animation.types import ScheduledAction
from tweenchain.logging.logger import get_logger
from tweenchain.utils.decorators import log_errors

logger = get_logger(__name__)


@dataclass
class _Pending:
    remaining: float
    action: ScheduledAction


class Scheduler:
    """
    Flat list of (remaining delay, action) pairs.

    Every tick decrements each delay; actions whose delay reaches zero run in
    the order they were added. Actions added while a tick is running wait for
    the next tick.
    """

    def __init__(self):
        self._pending: List[_Pending] = []

    def __len__(self) -> int:
        return len(self._pending)

    def add(self, delay: float, action: ScheduledAction) -> None:
        if not callable(action):
            raise ValueError("Scheduled action must be callable")
        self._pending.append(_Pending(max(0.0, float(delay)), action))

    def tick(self, time_step: float) -> int:
        """
        Decrement all delays and run the due actions.

        Returns:
            Number of actions run
        """
        if not self._pending:
            return 0

        batch, self._pending = self._pending, []
        due: List[_Pending] = []
        for entry in batch:
            entry.remaining -= time_step
            if entry.remaining <= 0:
                due.append(entry)
            else:
                self._pending.append(entry)

        for entry in due:
            self._run(entry.action)
        return len(due)

    def clear(self) -> None:
        self._pending.clear()

    @log_errors(logger, "Scheduled action failed", reraise=False)
    def _run(self, action: ScheduledAction) -> None:
        action()
