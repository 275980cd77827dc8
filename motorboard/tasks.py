"""Cooperative periodic task runner driven by a millisecond tick."""

from dataclasses import dataclass
from typing import Callable, List

_TICK_MASK = 0xFFFFFFFF


@dataclass
class Task:
    """A function run every `period` ticks."""

    func: Callable[[], None]
    period: int
    last_run: int = 0


class TaskScheduler:
    """Runs every task whose period has elapsed."""

    def __init__(self) -> None:
        self.tasks: List[Task] = []

    def add(self, func: Callable[[], None], period: int) -> Task:
        """Register a task and return it."""
        if not 0 <= period <= 0xFFFF:
            raise ValueError(f"period out of range: {period}")
        task = Task(func, period)
        self.tasks.append(task)
        return task

    def run(self, now: int) -> int:
        """Run due tasks at tick `now` and return how many ran."""
        ran = 0
        for task in self.tasks:
            if ((now - task.last_run) & _TICK_MASK) >= task.period:
                task.last_run = now & _TICK_MASK
                task.func()
                ran += 1
        return ran