"""Cortex-M thread stack set-up, fault decoding and the hard-fault handler."""

from dataclasses import dataclass, field, fields
from enum import IntEnum
from typing import Callable, Optional

USE_FPU = True
STACK_FILL = 0xDEADBEEF
INITIAL_PSR = 0x01000000
SCB_RESET_VALUE = 0x05FA0004
CPU_CACHE_LINE_SIZE = 32
_WORD = 4
_MASK32 = 0xFFFFFFFF


class CacheOp(IntEnum):
    """Cache maintenance operations."""

    FLUSH = 0x01
    INVALIDATE = 0x02


@dataclass
class StackFrame:
    """Registers saved on a thread stack: software-saved r4-r11, then the exception frame."""

    flag: int = STACK_FILL
    r4: int = STACK_FILL
    r5: int = STACK_FILL
    r6: int = STACK_FILL
    r7: int = STACK_FILL
    r8: int = STACK_FILL
    r9: int = STACK_FILL
    r10: int = STACK_FILL
    r11: int = STACK_FILL
    r0: int = STACK_FILL
    r1: int = STACK_FILL
    r2: int = STACK_FILL
    r3: int = STACK_FILL
    r12: int = STACK_FILL
    lr: int = STACK_FILL
    pc: int = STACK_FILL
    psr: int = STACK_FILL


# The FPU build stores an extra flag word in front of r4.
STACK_FRAME_SIZE = (len(fields(StackFrame)) - (0 if USE_FPU else 1)) * _WORD


@dataclass
class ExceptionInfo:
    """What the fault entry code pushes: the EXC_RETURN value and the saved registers."""

    exc_return: int
    stack_frame: StackFrame = field(default_factory=StackFrame)


def stack_init(entry: int, parameter: int, stack_addr: int, exit: int) -> tuple:
    """Lay out the first frame of a new thread.

    Returns (stack pointer, frame): the frame is placed below the 8-byte
    aligned top of the stack, every register filled with the guard value.
    """
    if stack_addr < 0:
        raise ValueError(f"stack address must not be negative: {stack_addr}")
    top = (stack_addr + _WORD) & ~7
    sp = top - STACK_FRAME_SIZE
    if sp < 0:
        raise ValueError(f"stack address too low for a frame: {stack_addr}")
    frame = StackFrame(
        r0=parameter & _MASK32,
        r1=0,
        r2=0,
        r3=0,
        r12=0,
        lr=exit & _MASK32,
        pc=entry & _MASK32,
        psr=INITIAL_PSR,
    )
    if USE_FPU:
        frame.flag = 0
    return sp, frame


def ffs(value: int) -> int:
    """One-based index of the lowest set bit of a 32-bit value, 0 when none is set."""
    value &= _MASK32
    if value == 0:
        return 0
    return (value & -value).bit_length()


_USAGE_BITS = ((0, "UNDEFINSTR"), (1, "INVSTATE"), (2, "INVPC"), (3, "NOCP"), (8, "UNALIGNED"), (9, "DIVBYZERO"))
_BUS_BITS = ((0, "IBUSERR"), (1, "PRECISERR"), (2, "IMPRECISERR"), (3, "UNSTKERR"), (4, "STKERR"))
_MEM_BITS = ((0, "IACCVIOL"), (1, "DACCVIOL"), (3, "MUNSTKERR"), (4, "MSTKERR"))


def _names(status: int, bits) -> str:
    return "".join(f"{name} " for bit, name in bits if status & (1 << bit))


def usage_fault_report(ufsr: int) -> str:
    """Describe a usage fault status register."""
    return f"usage fault:\nSCB_CFSR_UFSR:0x{ufsr:02X} " + _names(ufsr, _USAGE_BITS) + "\n"


def bus_fault_report(bfsr: int, bfar: int) -> str:
    """Describe a bus fault status register, with the fault address when it is valid."""
    text = f"bus fault:\nSCB_CFSR_BFSR:0x{bfsr:02X} " + _names(bfsr, _BUS_BITS)
    if bfsr & (1 << 7):
        return text + f"SCB->BFAR:{bfar:08X}\n"
    return text + "\n"


def mem_manage_fault_report(mfsr: int, mmar: int) -> str:
    """Describe a memory-management fault status register, with the address when valid."""
    text = f"mem manage fault:\nSCB_CFSR_MFSR:0x{mfsr:02X} " + _names(mfsr, _MEM_BITS)
    if mfsr & (1 << 7):
        return text + f"SCB->MMAR:{mmar:08X}\n"
    return text + "\n"


def hard_fault_report(hfsr: int, cfsr: int, bfar: int, mmar: int) -> str:
    """Describe a hard fault from the HardFault and configurable fault status registers."""
    mfsr = cfsr & 0xFF
    bfsr = (cfsr >> 8) & 0xFF
    ufsr = (cfsr >> 16) & 0xFFFF
    parts = []
    if hfsr & (1 << 1):
        parts.append("failed vector fetch\n")
    if hfsr & (1 << 30):
        if bfsr:
            parts.append(bus_fault_report(bfsr, bfar))
        if mfsr:
            parts.append(mem_manage_fault_report(mfsr, mmar))
        if ufsr:
            parts.append(usage_fault_report(ufsr))
    if hfsr & (1 << 31):
        parts.append("debug event\n")
    return "".join(parts)


def format_exception(info: ExceptionInfo, thread_name: Optional[str]) -> str:
    """Register dump and fault context for a hard fault."""
    frame = info.stack_frame
    lines = [f"psr: 0x{frame.psr:08x}\n"]
    registers = [
        ("r00", frame.r0), ("r01", frame.r1), ("r02", frame.r2), ("r03", frame.r3),
        ("r04", frame.r4), ("r05", frame.r5), ("r06", frame.r6), ("r07", frame.r7),
        ("r08", frame.r8), ("r09", frame.r9), ("r10", frame.r10), ("r11", frame.r11),
        ("r12", frame.r12), (" lr", frame.lr), (" pc", frame.pc),
    ]
    lines.extend(f"{name}: 0x{value:08x}\n" for name, value in registers)
    if info.exc_return & (1 << 2):
        lines.append(f"hard fault on thread: {thread_name}\r\n\r\n")
    else:
        lines.append("hard fault on handler\r\n\r\n")
    if info.exc_return & 0x10 == 0:
        lines.append("FPU active!\r\n")
    return "".join(lines)


class FaultHandler:
    """Hard-fault handling with an optional hook that may claim the fault."""

    def __init__(self, write: Optional[Callable[[str], object]] = None) -> None:
        self.write = write
        self.hook: Optional[Callable[[StackFrame], bool]] = None

    def install(self, hook: Optional[Callable[[StackFrame], bool]]) -> None:
        """Set the hook; it gets the saved frame and returns True when it handled the fault."""
        self.hook = hook

    def handle(self, info: ExceptionInfo, thread_name: Optional[str] = None) -> None:
        """Let the hook handle the fault, or report it and raise RuntimeError."""
        if self.hook is not None and self.hook(info.stack_frame):
            return
        report = format_exception(info, thread_name)
        if self.write is not None:
            self.write(report)
        raise RuntimeError(report)