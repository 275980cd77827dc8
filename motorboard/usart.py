"""Serial port echo: collect bytes until the line goes quiet, then report them."""

from typing import Callable, Optional

BUFFER_SIZE = 128
IDLE_TIMEOUT = 100
_TICK_MASK = 0xFFFFFFFF


def format_message(fmt: str, *args) -> bytes:
    """Format a message the way the port's print helper does, limited to its buffer."""
    text = fmt % args if args else fmt
    return text.encode("latin-1", errors="replace")[: BUFFER_SIZE - 1]


class SerialReceiver:
    """Receives single bytes by interrupt and echoes a burst once it is idle."""

    def __init__(
        self,
        transmit: Optional[Callable[[bytes], None]] = None,
        size: int = BUFFER_SIZE,
        timeout: int = IDLE_TIMEOUT,
    ) -> None:
        self.transmit = transmit
        self.buffer = bytearray(size)
        self.timeout = timeout
        self.index = 0
        self.rx_tick = 0

    def on_byte(self, byte: int, now: int) -> None:
        """Store a received byte at tick `now`; the index wraps when the buffer fills."""
        self.buffer[self.index] = byte
        self.rx_tick = now
        self.index += 1
        if self.index >= len(self.buffer):
            self.index = 0

    def poll(self, now: int) -> Optional[bytes]:
        """Echo and return the received text once the line has been idle long enough."""
        if self.index == 0:
            return None
        if ((now - self.rx_tick) & _TICK_MASK) <= self.timeout:
            return None
        data = bytes(self.buffer[: self.index]).split(b"\0", 1)[0]
        message = format_message("recive : %s\n", data.decode("latin-1"))
        if self.transmit is not None:
            self.transmit(message)
        self.buffer[:] = bytes(len(self.buffer))
        self.index = 0
        return data