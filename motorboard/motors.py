"""A pair of Emm V5 stepper motors moved together over CAN."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from motorboard import emm_v5
from motorboard.emm_v5 import SysParam

COMMAND_GAP = 0.01
BROADCAST = 0


@dataclass
class Motor:
    """Set-points and last reading of one driver."""

    addr: int
    sync: bool = True
    vel_set: int = 0
    clk_set: int = 0
    direction: int = 0
    acceleration: int = 0
    absolute: bool = False
    position: float = 0.0


def _default_motors() -> List[Motor]:
    return [
        Motor(addr=1, sync=True, vel_set=1100, clk_set=2000),
        Motor(addr=2, sync=True, vel_set=1100, clk_set=1000),
    ]


def decode_position(dlc: int, data: Sequence[int]) -> Optional[float]:
    """Decode a current-position reply into degrees, or None if it is not one."""
    if dlc != 7 or len(data) < 6 or data[0] != 0x36:
        return None
    pos = int.from_bytes(bytes(data[2:6]), "big")
    angle = pos * 360.0 / 65536.0
    return -angle if data[1] else angle


class MotorGroup:
    """Sends synchronised set-points to a group of motors."""

    def __init__(
        self,
        bus,
        motors: Optional[List[Motor]] = None,
        delay: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.bus = bus
        self.motors = motors if motors is not None else _default_motors()
        self.delay = delay
        self._last = [(0, 0) for _ in self.motors]

    def _pause(self) -> None:
        if self.delay is not None:
            self.delay(COMMAND_GAP)

    def request_speed(self) -> None:
        """Ask the first motor for its real-time speed."""
        self.bus.send(emm_v5.read_sys_params(self.motors[0].addr, SysParam.VEL))

    def read_position(self, dlc: int, data: Sequence[int]) -> Optional[float]:
        """Request the first motor's position and apply a reply frame to it."""
        self.bus.send(emm_v5.read_sys_params(self.motors[0].addr, SysParam.CPOS))
        angle = decode_position(dlc, data)
        if angle is not None:
            self.motors[0].position = angle
        return angle

    def _trigger(self) -> None:
        self.bus.send(emm_v5.synchronous_motion(BROADCAST))
        self._pause()

    def set_speeds(self) -> None:
        """Queue every motor's velocity and start them together."""
        for m in self.motors:
            self.bus.send(emm_v5.velocity_control(m.addr, m.direction, m.vel_set, m.acceleration, m.sync))
            self._pause()
        self._trigger()

    def set_positions(self) -> None:
        """Queue every motor's move and start them together."""
        for m in self.motors:
            self.bus.send(
                emm_v5.position_control(
                    m.addr, m.direction, m.vel_set, m.acceleration, m.clk_set, m.absolute, m.sync
                )
            )
            self._pause()
        self._trigger()

    def task(self) -> bool:
        """Send new positions if any set-point changed; return whether it did."""
        current = [(m.vel_set, m.clk_set) for m in self.motors]
        if current == self._last:
            return False
        self.set_positions()
        self._last = current
        return True