"""Two-channel PWM output driving a DC motor bridge."""

from dataclasses import dataclass, field
from typing import Callable, Optional

PWM_ARR = 59999
CHANNEL_3 = 3
CHANNEL_4 = 4


@dataclass
class PwmChannel:
    """One timer compare channel."""

    channel: int
    ccr: int = 0


def _default_channels() -> list:
    return [PwmChannel(CHANNEL_3), PwmChannel(CHANNEL_4)]


@dataclass
class PwmOutput:
    """Maps a signed controller output onto reverse and forward channels.

    channels[0] drives reverse, channels[1] drives forward.
    """

    write: Optional[Callable[[int, int], None]] = None
    enabled: bool = False
    arr: int = PWM_ARR
    channels: list = field(default_factory=_default_channels)

    def set_output(self, value: float) -> tuple:
        """Apply a signed duty value and return the compare values written."""
        value = max(-self.arr, min(self.arr, value))
        reverse, forward = self.channels[0], self.channels[1]
        if self.enabled and value > 0:
            forward.ccr = int(abs(value))
            reverse.ccr = 0
        elif self.enabled and value < 0:
            reverse.ccr = int(abs(value))
            forward.ccr = 0
        else:
            forward.ccr = 0
            reverse.ccr = 0
        if self.write is not None:
            for ch in self.channels:
                self.write(ch.channel, ch.ccr)
        return tuple(ch.ccr for ch in self.channels)