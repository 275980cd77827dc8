"""Periodic timer interrupts dispatched to registered handlers."""

from typing import Callable, Dict, Hashable, List, Optional


class TimerInterrupts:
    """Starts timer interrupts and routes their period-elapsed events."""

    def __init__(self, start_it: Optional[Callable[[Hashable], None]] = None) -> None:
        self.start_it = start_it
        self.handlers: Dict[Hashable, Callable[[], None]] = {}

    def add(self, timer: Hashable, handler: Callable[[], None]) -> None:
        """Register the handler for a timer."""
        self.handlers[timer] = handler

    def start(self) -> List[Hashable]:
        """Start every registered timer and return them in registration order."""
        timers = list(self.handlers)
        if self.start_it is not None:
            for timer in timers:
                self.start_it(timer)
        return timers

    def elapsed(self, timer: Hashable) -> bool:
        """Dispatch a period-elapsed event; return whether a handler ran."""
        handler = self.handlers.get(timer)
        if handler is None:
            return False
        handler()
        return True