"""Active-low push button scanning with edge detection."""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class KeyEvent:
    """Result of one scan: pressed mask and press/release edges."""

    value: int
    down: int
    up: int

    @property
    def key1_only(self) -> bool:
        return bool(self.down & 0x01) and not self.down & 0x02

    @property
    def key2_only(self) -> bool:
        return bool(self.down & 0x02) and not self.down & 0x01

    @property
    def both_down(self) -> bool:
        return (self.down & 0x03) == 0x03


class KeyScanner:
    """Tracks key levels between scans; a low level means pressed."""

    def __init__(self, key_count: int = 2) -> None:
        if not 1 <= key_count <= 8:
            raise ValueError("key count must be between 1 and 8")
        self.key_count = key_count
        self.last = 0

    def update(self, levels: Sequence[bool]) -> KeyEvent:
        """Scan pin levels (True is high) and return the edges since the last scan."""
        if len(levels) != self.key_count:
            raise ValueError(f"expected {self.key_count} key levels, got {len(levels)}")
        value = 0
        for bit, level in enumerate(levels):
            if not level:
                value |= 1 << bit
        changed = value ^ self.last
        down = value & changed
        up = ~value & changed & 0xFF
        self.last = value
        return KeyEvent(value, down, up)