"""Status LEDs that are lit by driving their pin low."""

from typing import Callable, Optional, Sequence

HIGH = True
LOW = False


class LedBank:
    """A row of active-low LEDs, rewritten only when the pattern changes."""

    def __init__(self, write: Optional[Callable[[int, bool], None]] = None, count: int = 3) -> None:
        if not 1 <= count <= 8:
            raise ValueError("LED count must be between 1 and 8")
        self.write = write
        self.count = count
        self.states = [LOW, HIGH, HIGH][:count] + [HIGH] * max(0, count - 3)
        self._last = 0xFF

    def display(self, status: Sequence[int]) -> bool:
        """Show a status pattern; return True if the pins were rewritten."""
        if len(status) != self.count:
            raise ValueError(f"expected {self.count} LED states, got {len(status)}")
        current = 0
        for bit, on in enumerate(status):
            current |= int(on) << bit
        current &= 0xFF
        if current == self._last:
            return False
        self._last = current
        for index in range(self.count):
            self.states[index] = LOW if current & (1 << index) else HIGH
            if self.write is not None:
                self.write(index, self.states[index])
        return True