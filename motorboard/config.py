"""Build-time configuration of the real-time kernel."""

from dataclasses import dataclass


@dataclass(frozen=True)
class KernelConfig:
    """Kernel settings the board is built with."""

    thread_priority_max: int = 32
    tick_per_second: int = 1000
    align_size: int = 4
    name_max: int = 8
    using_components_init: bool = True
    using_user_main: bool = True
    main_thread_stack_size: int = 256
    debug: bool = False
    debug_init: bool = False
    using_overflow_check: bool = False
    using_hook: bool = False
    using_idle_hook: bool = False
    using_timer_soft: bool = False
    timer_thread_priority: int = 4
    timer_thread_stack_size: int = 512
    using_semaphore: bool = True
    using_mutex: bool = False
    using_event: bool = False
    using_signals: bool = False
    using_mailbox: bool = True
    using_message_queue: bool = False
    using_mempool: bool = False
    using_heap: bool = True
    using_small_mem: bool = True
    using_tiny_size: bool = False
    using_console: bool = False
    console_buffer_size: int = 256
    using_device: bool = False
    using_small_mem_as_heap: bool = True