"""Tagged, levelled debug output with optional terminal colours."""

import sys
from enum import IntEnum
from typing import Callable, Optional


class Level(IntEnum):
    """Debug levels; a lower value is more severe."""

    ERROR = 0
    WARNING = 1
    INFO = 2
    LOG = 3


_HEADERS = {
    Level.ERROR: ("E", 31),
    Level.WARNING: ("W", 33),
    Level.INFO: ("I", 32),
    Level.LOG: ("D", 0),
}


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


class DebugLogger:
    """Writes lines such as "[E/TAG] message" for messages at or above a level."""

    def __init__(
        self,
        tag: str = "DBG",
        level: Level = Level.WARNING,
        enabled: bool = True,
        color: bool = False,
        write: Optional[Callable[[str], object]] = None,
    ) -> None:
        self.tag = tag
        self.level = Level(level)
        self.enabled = enabled
        self.color = color
        self.write = write if write is not None else sys.stdout.write

    def _emit(self, text: str) -> str:
        self.write(text)
        return text

    def _header(self, level: Level) -> str:
        name, color = _HEADERS[Level(level)]
        if self.color:
            return f"\033[{color}m[{name}/{self.tag}] "
        return f"[{name}/{self.tag}] "

    def log(self, level: Level, fmt: str, *args) -> str:
        """Write a message without a line end if the level passes; return what was written."""
        if not self.enabled or level > self.level:
            return ""
        text = self._header(level) + _format(fmt, args)
        if self.color:
            text += "\033[0m"
        return self._emit(text)

    def log_line(self, level: Level, fmt: str, *args) -> str:
        """Write one full line at a level regardless of the threshold."""
        if not self.enabled:
            return ""
        end = "\033[0m\n" if self.color else "\n"
        return self._emit(self._header(level) + _format(fmt, args) + end)

    def _at(self, level: Level, fmt: str, args: tuple) -> str:
        if self.level < level:
            return ""
        return self.log_line(level, fmt, *args)

    def debug(self, fmt: str, *args) -> str:
        return self._at(Level.LOG, fmt, args)

    def info(self, fmt: str, *args) -> str:
        return self._at(Level.INFO, fmt, args)

    def warning(self, fmt: str, *args) -> str:
        return self._at(Level.WARNING, fmt, args)

    def error(self, fmt: str, *args) -> str:
        return self._at(Level.ERROR, fmt, args)

    def raw(self, fmt: str, *args) -> str:
        """Write formatted text with no header."""
        if not self.enabled:
            return ""
        return self._emit(_format(fmt, args))