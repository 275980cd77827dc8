"""Named devices with reference-counted open/close and pluggable driver operations."""

from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any, Callable, Dict, Optional

ERROR = "error"
BUSY = "busy"
NOSYS = "nosys"

OPEN_MASK = 0xF0F


class DeviceError(Exception):
    """A device operation failed; `reason` is one of ERROR, BUSY or NOSYS."""

    def __init__(self, message: str, reason: str = ERROR) -> None:
        super().__init__(message)
        self.reason = reason


class DeviceFlag(IntFlag):
    """Capabilities and state of a device."""

    DEACTIVATE = 0x000
    RDONLY = 0x001
    WRONLY = 0x002
    RDWR = 0x003
    REMOVABLE = 0x004
    STANDALONE = 0x008
    ACTIVATED = 0x010
    SUSPENDED = 0x020
    STREAM = 0x040


class OpenFlag(IntFlag):
    """How a device is opened."""

    CLOSE = 0x000
    RDONLY = 0x001
    WRONLY = 0x002
    RDWR = 0x003
    OPEN = 0x008


@dataclass(eq=False)
class Device:
    """A device object; the *_op callables are the driver's operations.

    Driver operations raise DeviceError to report failure.
    """

    name: str = ""
    type: int = 0
    flag: int = 0
    ref_count: int = 0
    open_flag: int = 0
    init_op: Optional[Callable[["Device"], None]] = None
    open_op: Optional[Callable[["Device", int], None]] = None
    close_op: Optional[Callable[["Device"], None]] = None
    read_op: Optional[Callable[["Device", int, int], bytes]] = None
    write_op: Optional[Callable[["Device", int, bytes], int]] = None
    control_op: Optional[Callable[["Device", int, Any], Any]] = None
    rx_indicate: Optional[Callable[["Device", int], None]] = field(default=None, repr=False)
    tx_complete: Optional[Callable[["Device", Any], None]] = field(default=None, repr=False)

    def init(self) -> None:
        """Run the driver's init once; the device is marked activated on success."""
        if self.init_op is None:
            return
        if not self.flag & DeviceFlag.ACTIVATED:
            self.init_op(self)
            self.flag = int(self.flag) | DeviceFlag.ACTIVATED

    def open(self, oflag: int) -> None:
        """Open the device, initialising it first if needed.

        A driver that answers NOSYS still leaves the device opened, and the
        error is raised afterwards.
        """
        if not self.flag & DeviceFlag.ACTIVATED:
            if self.init_op is not None:
                self.init_op(self)
            self.flag = int(self.flag) | DeviceFlag.ACTIVATED

        if self.flag & DeviceFlag.STANDALONE and self.open_flag & OpenFlag.OPEN:
            raise DeviceError(f"device {self.name!r} is already open", BUSY)

        pending: Optional[DeviceError] = None
        if self.open_op is not None:
            try:
                self.open_op(self, oflag)
            except DeviceError as exc:
                if exc.reason != NOSYS:
                    raise
                pending = exc
        else:
            self.open_flag = int(oflag) & OPEN_MASK

        self.open_flag = int(self.open_flag) | OpenFlag.OPEN
        self.ref_count += 1
        if pending is not None:
            raise pending

    def close(self) -> None:
        """Drop one reference; the driver's close runs when the last one goes."""
        if self.ref_count == 0:
            raise DeviceError(f"device {self.name!r} is not open", ERROR)
        self.ref_count -= 1
        if self.ref_count != 0:
            return

        pending: Optional[DeviceError] = None
        if self.close_op is not None:
            try:
                self.close_op(self)
            except DeviceError as exc:
                if exc.reason != NOSYS:
                    raise
                pending = exc
        self.open_flag = int(OpenFlag.CLOSE)
        if pending is not None:
            raise pending

    def _check_open(self) -> None:
        if self.ref_count == 0:
            raise DeviceError(f"device {self.name!r} is not open", ERROR)

    def read(self, pos: int, size: int) -> bytes:
        """Read up to `size` units at `pos` through the driver."""
        self._check_open()
        if self.read_op is None:
            raise DeviceError(f"device {self.name!r} cannot be read", NOSYS)
        return self.read_op(self, pos, size)

    def write(self, pos: int, data: bytes) -> int:
        """Write `data` at `pos` through the driver and return the amount written."""
        self._check_open()
        if self.write_op is None:
            raise DeviceError(f"device {self.name!r} cannot be written", NOSYS)
        return self.write_op(self, pos, data)

    def control(self, cmd: int, arg: Any = None) -> Any:
        """Pass a control command to the driver."""
        if self.control_op is None:
            raise DeviceError(f"device {self.name!r} has no control operation", NOSYS)
        return self.control_op(self, cmd, arg)

    def set_rx_indicate(self, callback: Optional[Callable[["Device", int], None]]) -> None:
        """Set the function called when data arrives."""
        self.rx_indicate = callback

    def set_tx_complete(self, callback: Optional[Callable[["Device", Any], None]]) -> None:
        """Set the function called when a write has reached the hardware."""
        self.tx_complete = callback


class DeviceRegistry:
    """Devices looked up by name."""

    def __init__(self) -> None:
        self._devices: Dict[str, Device] = {}

    def __len__(self) -> int:
        return len(self._devices)

    def register(self, device: Optional[Device], name: str, flags: int) -> Device:
        """Register a device under a unique name and reset its open state."""
        if device is None:
            raise DeviceError("no device given", ERROR)
        if self.find(name) is not None:
            raise DeviceError(f"device name {name!r} is already registered", ERROR)
        device.name = name
        device.flag = int(flags)
        device.ref_count = 0
        device.open_flag = 0
        self._devices[name] = device
        return device

    def unregister(self, device: Device) -> None:
        """Remove a registered device."""
        if self._devices.get(device.name) is not device:
            raise DeviceError(f"device {device.name!r} is not registered", ERROR)
        del self._devices[device.name]

    def find(self, name: str) -> Optional[Device]:
        """Return the device registered under `name`, or None."""
        return self._devices.get(name)