"""Exclusive per-collection task execution.

Every read-modify-write of a stored collection runs through
``CollectionTaskQueue.run``. Tasks for the same collection key run one at a
time in submission order; tasks for different keys do not wait on each other.
"""

import logging
from threading import Condition, Lock
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Lane:
    """FIFO ticket line for one collection."""

    def __init__(self) -> None:
        self.condition = Condition(Lock())
        self.next_ticket = 0
        self.serving = 0


class CollectionTaskQueue:
    """Serialize tasks per collection key, first come first served."""

    def __init__(self) -> None:
        self.lock = Lock()
        self._lanes: dict[str, _Lane] = {}

    def _lane(self, key: str) -> _Lane:
        with self.lock:
            lane = self._lanes.get(key)
            if lane is None:
                lane = self._lanes[key] = _Lane()
            return lane

    def run(self, key: str, task: Callable[[], T]) -> T:
        """Run ``task`` once every earlier task for ``key`` has finished.

        The task's return value is returned and its exception re-raised; in
        both cases the next queued task is released.
        """
        lane = self._lane(key)
        with lane.condition:
            ticket = lane.next_ticket
            lane.next_ticket += 1
            while lane.serving != ticket:
                lane.condition.wait()

        try:
            logger.debug("Running task %d on %s", ticket, key)
            return task()
        finally:
            with lane.condition:
                lane.serving += 1
                lane.condition.notify_all()
