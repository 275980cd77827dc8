"""Command encoding for Emm V5 closed-loop stepper drivers over extended-ID CAN."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, List, Optional, Tuple

CHECKSUM = 0x6B
FRAME_PAYLOAD = 7
MAX_DLC = 8
FRAME_GAP = 0.001


class SysParam(IntEnum):
    """System parameters that can be read back from a driver."""

    VER = 0
    RL = 1
    PID = 2
    VBUS = 3
    CPHA = 5
    ENCL = 7
    TPOS = 8
    VEL = 9
    CPOS = 10
    PERR = 11
    FLAG = 13
    CONF = 14
    STATE = 15
    ORG = 16


_READ_CODES = {
    SysParam.VER: b"\x1f",
    SysParam.RL: b"\x20",
    SysParam.PID: b"\x21",
    SysParam.VBUS: b"\x24",
    SysParam.CPHA: b"\x27",
    SysParam.ENCL: b"\x31",
    SysParam.TPOS: b"\x33",
    SysParam.VEL: b"\x35",
    SysParam.CPOS: b"\x36",
    SysParam.PERR: b"\x37",
    SysParam.FLAG: b"\x3a",
    SysParam.ORG: b"\x3b",
    SysParam.CONF: b"\x42\x6c",
    SysParam.STATE: b"\x43\x7a",
}


@dataclass(frozen=True)
class CanFrame:
    """One extended-ID data frame as put on the bus."""

    ext_id: int
    data: bytes
    extended: bool = True
    remote: bool = False

    @property
    def dlc(self) -> int:
        return len(self.data)


class RxMailbox:
    """Holds the most recently received frame until it is taken."""

    def __init__(self) -> None:
        self.data = bytes(MAX_DLC)
        self.dlc = 0
        self.pending = False

    def deliver(self, dlc: int, data: bytes) -> None:
        """Store a received frame; bytes past the DLC are cleared."""
        if not 0 <= dlc <= MAX_DLC:
            raise ValueError(f"DLC out of range: {dlc}")
        if len(data) > MAX_DLC:
            raise ValueError(f"frame data longer than {MAX_DLC} bytes")
        raw = bytes(data[:dlc])
        self.data = raw + bytes(MAX_DLC - len(raw))
        self.dlc = dlc
        self.pending = True

    def take(self) -> Optional[Tuple[int, bytes]]:
        """Return (dlc, data) of the pending frame and clear it, or None."""
        if not self.pending:
            return None
        self.pending = False
        return self.dlc, self.data


def _u8(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} out of range 0..255: {value}")
    return bytes([value])


def _u16(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} out of range 0..65535: {value}")
    return value.to_bytes(2, "big")


def _u32(name: str, value: int) -> bytes:
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"{name} out of range 0..4294967295: {value}")
    return value.to_bytes(4, "big")


def _flag(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def _command(addr: int, *parts: bytes) -> bytes:
    return _u8("addr", addr) + b"".join(parts) + bytes([CHECKSUM])


def split_frames(command: bytes) -> List[CanFrame]:
    """Split a command into frames carrying the function code and up to 7 data bytes."""
    if len(command) < 2:
        raise ValueError("command needs at least an address and a function code")
    addr, code = command[0], command[1]
    payload = bytes(command[2:])
    return [
        CanFrame((addr << 8) | number, bytes([code]) + payload[start:start + FRAME_PAYLOAD])
        for number, start in enumerate(range(0, len(payload), FRAME_PAYLOAD))
    ]


def reset_position(addr: int) -> bytes:
    """Zero the current position counter."""
    return _command(addr, b"\x0a\x6d")


def reset_clog_protection(addr: int) -> bytes:
    """Release stall protection."""
    return _command(addr, b"\x0e\x52")


def read_sys_params(addr: int, param: int) -> bytes:
    """Request one system parameter."""
    return _command(addr, _READ_CODES[SysParam(param)])


def modify_ctrl_mode(addr: int, store: bool, mode: int) -> bytes:
    """Switch between open-loop and closed-loop control modes."""
    return _command(addr, b"\x46\x69", _flag(store), _u8("mode", mode))


def enable_control(addr: int, state: bool, sync: bool) -> bytes:
    """Enable or disable the motor."""
    return _command(addr, b"\xf3\xab", _flag(state), _flag(sync))


def velocity_control(addr: int, direction: int, velocity: int, acceleration: int, sync: bool) -> bytes:
    """Run at a velocity in RPM; direction 0 is clockwise."""
    return _command(
        addr,
        b"\xf6",
        _u8("direction", direction),
        _u16("velocity", velocity),
        _u8("acceleration", acceleration),
        _flag(sync),
    )


def position_control(
    addr: int,
    direction: int,
    velocity: int,
    acceleration: int,
    pulses: int,
    absolute: bool,
    sync: bool,
) -> bytes:
    """Move by (or to, when absolute) a number of pulses."""
    return _command(
        addr,
        b"\xfd",
        _u8("direction", direction),
        _u16("velocity", velocity),
        _u8("acceleration", acceleration),
        _u32("pulses", pulses),
        _flag(absolute),
        _flag(sync),
    )


def stop_now(addr: int, sync: bool) -> bytes:
    """Stop immediately in any control mode."""
    return _command(addr, b"\xfe\x98", _flag(sync))


def synchronous_motion(addr: int) -> bytes:
    """Start all motions queued with the sync flag."""
    return _command(addr, b"\xff\x66")


def origin_set_zero(addr: int, store: bool) -> bytes:
    """Set the single-turn homing zero point."""
    return _command(addr, b"\x93\x88", _flag(store))


def origin_modify_params(
    addr: int,
    store: bool,
    mode: int,
    direction: int,
    velocity: int,
    timeout: int,
    collision_velocity: int,
    collision_current: int,
    collision_time: int,
    power_on_trigger: bool,
) -> bytes:
    """Change the homing parameters."""
    return _command(
        addr,
        b"\x4c\xae",
        _flag(store),
        _u8("mode", mode),
        _u8("direction", direction),
        _u16("velocity", velocity),
        _u32("timeout", timeout),
        _u16("collision_velocity", collision_velocity),
        _u16("collision_current", collision_current),
        _u16("collision_time", collision_time),
        _flag(power_on_trigger),
    )


def origin_trigger_return(addr: int, mode: int, sync: bool) -> bytes:
    """Start homing in the given mode."""
    return _command(addr, b"\x9a", _u8("mode", mode), _flag(sync))


def origin_interrupt(addr: int) -> bytes:
    """Abort homing."""
    return _command(addr, b"\x9c\x48")


class EmmV5Bus:
    """Sends commands as CAN frames and keeps the receive mailbox."""

    def __init__(
        self,
        transmit: Optional[Callable[[CanFrame], None]] = None,
        delay: Optional[Callable[[float], None]] = None,
        frame_gap: float = FRAME_GAP,
    ) -> None:
        self.transmit = transmit
        self.delay = delay
        self.frame_gap = frame_gap
        self.mailbox = RxMailbox()

    def send(self, command: bytes) -> List[CanFrame]:
        """Transmit a command frame by frame and return the frames sent."""
        frames = split_frames(command)
        for frame in frames:
            if self.transmit is not None:
                self.transmit(frame)
            if self.delay is not None:
                self.delay(self.frame_gap)
        return frames