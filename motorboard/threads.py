"""Priority-bitmap thread scheduler with time slices, sleep and priority boosting."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Optional

from motorboard.lists import ListNode

MAX_PRIORITY = 32
STACK_GUARD = 0xDEADBEEF
TIME_SLICE_TICKS = 10
_TICK_MASK = 0xFFFFFFFF


class ThreadState(IntEnum):
    """Lifecycle state of a thread."""

    READY = 0
    SLEEPING = 1
    EXITED = 2


@dataclass(eq=False)
class Thread:
    """Thread control block; priority 0 is the highest."""

    func: Callable[[], None]
    priority: int
    time_slice: int = TIME_SLICE_TICKS
    priority_boost: int = 0
    sleep_ticks: int = 0
    state: ThreadState = ThreadState.READY
    original_priority: int = field(init=False)
    time_slice_max: int = field(init=False)
    ready_node: ListNode = field(init=False, repr=False)
    sleep_node: ListNode = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.original_priority = self.priority
        self.time_slice_max = self.time_slice
        self.ready_node = ListNode(self)
        self.sleep_node = ListNode(self)


def _lowest_bit(bitmap: int) -> int:
    return (bitmap & -bitmap).bit_length() - 1


def _linked(node: ListNode) -> bool:
    return not node.is_empty()


class ThreadScheduler:
    """Keeps ready and sleep lists per priority and picks the thread to run."""

    def __init__(self) -> None:
        self.priority_lists: List[ListNode] = [ListNode() for _ in range(MAX_PRIORITY)]
        self.sleep_lists: List[ListNode] = [ListNode() for _ in range(MAX_PRIORITY)]
        self.timeout_list = ListNode()
        self.defunct_list = ListNode()
        self.ready_bitmap = 0
        self.sleep_bitmap = 0
        self.current: Optional[Thread] = None
        self.previous: Optional[Thread] = None
        self.sys_tick = 0
        self.interrupt_nest = 0

    def _make_ready(self, thread: Thread) -> None:
        self.priority_lists[thread.priority].insert_before(thread.ready_node)
        self.ready_bitmap |= 1 << thread.priority

    def _clear_ready_if_empty(self, priority: int) -> None:
        if self.priority_lists[priority].is_empty():
            self.ready_bitmap &= ~(1 << priority)

    def _clear_sleep_if_empty(self, priority: int) -> None:
        if self.sleep_lists[priority].is_empty():
            self.sleep_bitmap &= ~(1 << priority)

    def _running(self) -> Thread:
        if self.current is None:
            raise RuntimeError("no thread is running")
        return self.current

    def create(
        self,
        entry: Callable[[], None],
        priority: int,
        time_slice: int = 0,
        priority_boost: int = 0,
    ) -> Thread:
        """Create a ready thread; a zero time slice takes the default."""
        if not 0 <= priority < MAX_PRIORITY:
            raise ValueError(f"priority out of range 0..{MAX_PRIORITY - 1}: {priority}")
        if not 0 <= priority_boost <= priority:
            raise ValueError(f"priority boost must be between 0 and the priority: {priority_boost}")
        if time_slice < 0:
            raise ValueError(f"time slice must not be negative: {time_slice}")
        thread = Thread(entry, priority, time_slice or TIME_SLICE_TICKS, priority_boost)
        self._make_ready(thread)
        return thread

    def start(self) -> Thread:
        """Run the highest-priority ready thread and return it."""
        if self.ready_bitmap == 0:
            raise RuntimeError("no thread is ready")
        head = self.priority_lists[_lowest_bit(self.ready_bitmap)]
        if head.is_empty():
            raise RuntimeError("ready bitmap points at an empty list")
        self.previous = None
        self.current = head.next.owner
        self.current.func()
        return self.current

    def sleep(self, ticks: int) -> None:
        """Put the running thread to sleep for a number of ticks."""
        thread = self._running()
        if thread.state == ThreadState.SLEEPING:
            return
        if ticks < 0:
            raise ValueError(f"sleep ticks must not be negative: {ticks}")
        thread.sleep_ticks = ticks
        thread.state = ThreadState.SLEEPING
        old_priority = thread.priority
        thread.priority = thread.original_priority
        if _linked(thread.ready_node):
            thread.ready_node.remove()
            self._clear_ready_if_empty(old_priority)
        self.sleep_lists[thread.priority].insert_before(thread.sleep_node)
        self.sleep_bitmap |= 1 << thread.priority
        thread.func()

    def exit(self) -> None:
        """Retire the running thread onto the defunct list."""
        thread = self._running()
        if thread.state == ThreadState.EXITED:
            return
        thread.state = ThreadState.EXITED
        if _linked(thread.ready_node):
            thread.ready_node.remove()
            self._clear_ready_if_empty(thread.priority)
        if _linked(thread.sleep_node):
            thread.sleep_node.remove()
            self._clear_sleep_if_empty(thread.original_priority)
        self.defunct_list.insert_before(thread.sleep_node)
        thread.func()

    def _restore_current_priority(self) -> None:
        thread = self.current
        if thread is None or thread.priority == thread.original_priority:
            return
        old_priority = thread.priority
        thread.priority = thread.original_priority
        if _linked(thread.ready_node):
            thread.ready_node.remove()
            self._clear_ready_if_empty(old_priority)
            self._make_ready(thread)

    def _wake_timed_out(self) -> None:
        for node in self.timeout_list:
            thread: Thread = node.owner
            node.remove()
            thread.time_slice = thread.time_slice_max
            old_priority = thread.priority
            thread.priority = max(thread.original_priority - thread.priority_boost, 0)
            self._make_ready(thread)
            if old_priority != thread.priority:
                self._clear_ready_if_empty(old_priority)

    def schedule(self) -> Optional[Thread]:
        """Pick the next thread to run, run it and return it; None if nothing is ready."""
        self._restore_current_priority()
        self._wake_timed_out()

        if self.ready_bitmap == 0:
            return None
        head = self.priority_lists[_lowest_bit(self.ready_bitmap)]
        if head.is_empty():
            return None
        best_node = head.next
        best: Thread = best_node.owner
        current = self.current
        if best is current and current.time_slice == 0:
            current.time_slice = current.time_slice_max
            if best_node.next is not head:
                current.ready_node.remove()
                head.insert_before(current.ready_node)
                best_node = head.next
                best = best_node.owner

        self.previous = self.current
        self.current = best
        if best_node.next is not head:
            best.ready_node.remove()
            head.insert_before(best.ready_node)
        best.func()
        return best

    def tick(self) -> None:
        """Advance one system tick: count down sleepers, charge the time slice, reschedule."""
        self.interrupt_nest += 1
        try:
            self.sys_tick = (self.sys_tick + 1) & _TICK_MASK
            bitmap = self.sleep_bitmap
            while bitmap:
                priority = _lowest_bit(bitmap)
                for node in self.sleep_lists[priority]:
                    thread: Thread = node.owner
                    if thread.sleep_ticks > 0:
                        thread.sleep_ticks -= 1
                        if thread.sleep_ticks == 0:
                            thread.state = ThreadState.READY
                            node.remove()
                            self._clear_sleep_if_empty(priority)
                            self.timeout_list.insert_before(node)
                bitmap &= ~(1 << priority)
            if self.current is not None and self.current.time_slice > 0:
                self.current.time_slice -= 1
            self.schedule()
        finally:
            self.interrupt_nest -= 1