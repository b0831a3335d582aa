"""Single tick source driving periodic simulation tasks."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduledTask:
    """A callback that runs every ``interval`` ticks."""

    name: str
    interval: int
    callback: Callable[[], object]
    next_due: int


class TickScheduler:
    """Runs registered tasks from explicit ticks instead of wall-clock timers.

    Each tick is handled in full before the next one starts and due tasks run
    in registration order, so a task is never interleaved with another.
    """

    def __init__(self) -> None:
        self._tasks: List[ScheduledTask] = []
        self._current_tick = 0

    @property
    def current_tick(self) -> int:
        return self._current_tick

    def register(self, name: str, interval: int, callback: Callable[[], object]) -> ScheduledTask:
        if interval <= 0:
            raise ValueError(f"Task '{name}' interval must be positive.")
        if any(task.name == name for task in self._tasks):
            raise ValueError(f"Task '{name}' is already registered.")
        task = ScheduledTask(
            name=name,
            interval=interval,
            callback=callback,
            next_due=self._current_tick + interval,
        )
        self._tasks.append(task)
        logger.debug("Registered task %s every %d ticks", name, interval)
        return task

    def cancel(self, name: str) -> bool:
        for index, task in enumerate(self._tasks):
            if task.name == name:
                del self._tasks[index]
                return True
        return False

    def tasks(self) -> List[ScheduledTask]:
        return list(self._tasks)

    def tick(self, count: int = 1) -> List[str]:
        """Advance ``count`` ticks and return the names of tasks that ran, in order."""
        if count < 0:
            raise ValueError("Tick count must not be negative.")
        ran: List[str] = []
        for _ in range(count):
            self._current_tick += 1
            for task in list(self._tasks):
                if task.next_due <= self._current_tick:
                    task.next_due = self._current_tick + task.interval
                    task.callback()
                    ran.append(task.name)
        return ran
