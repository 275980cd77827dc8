"""Idle-loop hooks and reclamation of exited threads."""

from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional

HOOK_LIST_SIZE = 4


class HookListFull(Exception):
    """Raised when every idle hook slot is taken."""


class IdleHooks:
    """A fixed number of slots for functions run on every idle pass."""

    def __init__(self, size: int = HOOK_LIST_SIZE) -> None:
        if size <= 0:
            raise ValueError(f"hook list size must be positive: {size}")
        self.slots: List[Optional[Callable[[], None]]] = [None] * size

    def set_hook(self, hook: Callable[[], None]) -> None:
        """Put a hook in the first free slot."""
        for index, slot in enumerate(self.slots):
            if slot is None:
                self.slots[index] = hook
                return
        raise HookListFull("idle hook list is full")

    def del_hook(self, hook: Callable[[], None]) -> None:
        """Remove the first slot holding this hook."""
        for index, slot in enumerate(self.slots):
            if slot is hook or slot == hook:
                self.slots[index] = None
                return
        raise ValueError("hook is not installed")

    def run(self) -> int:
        """Call every installed hook in slot order and return how many ran."""
        hooks = [hook for hook in self.slots if hook is not None]
        for hook in hooks:
            hook()
        return len(hooks)


@dataclass(eq=False)
class DefunctThread:
    """An exited thread waiting to be reclaimed."""

    name: str
    system_object: bool = True
    cleanup: Optional[Callable[["DefunctThread"], None]] = None


class DefunctQueue:
    """Exited threads; the most recently queued one is reclaimed first."""

    def __init__(self) -> None:
        self._threads: Deque[DefunctThread] = deque()

    def __len__(self) -> int:
        return len(self._threads)

    def enqueue(self, thread: DefunctThread) -> None:
        """Queue an exited thread."""
        self._threads.appendleft(thread)

    def dequeue(self) -> Optional[DefunctThread]:
        """Take the next thread to reclaim, or None."""
        return self._threads.popleft() if self._threads else None

    def execute(
        self,
        detach: Optional[Callable[[DefunctThread], None]] = None,
        release: Optional[Callable[[DefunctThread], None]] = None,
    ) -> List[DefunctThread]:
        """Reclaim every queued thread and return them in the order handled.

        Static threads are detached before their cleanup runs; heap threads
        are released after it.
        """
        handled = []
        while (thread := self.dequeue()) is not None:
            cleanup = thread.cleanup
            if thread.system_object and detach is not None:
                detach(thread)
            if cleanup is not None:
                cleanup(thread)
            if not thread.system_object and release is not None:
                release(thread)
            handled.append(thread)
        return handled