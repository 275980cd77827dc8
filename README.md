# motorboard

The pieces of a small motor controller board — speed loop, encoder, PWM
bridge, buttons, LEDs, serial echo, CAN stepper drivers and a little
real-time kernel — as plain Python objects. Every place where the board
would touch hardware (writing a pin, sending a CAN frame, transmitting on a
serial port, waiting) is a callable you pass in, so the logic can be driven
from simulations and tests.

## Modules

Control loop

- `motorboard.pid` – `Pid` with `update(current_value)` and `reset()`. The
  integral sum and the output are both clamped to `output_min`/`output_max`
  (±59999 by default); the derivative uses a 0.02 s period.
- `motorboard.encoder` – `Encoder.update(counter)` takes a raw 16-bit counter
  reading, negates it and unwraps readings past half the range; `speed()`
  gives revolutions per second (1320 pulses per revolution by default) and
  `location()` the accumulated pulse count. Out-of-range readings raise
  `ValueError`.
- `motorboard.pwm` – `PwmOutput.set_output(value)` clamps a signed value to
  ±`arr` and puts it on the forward channel (positive) or the reverse channel
  (negative) of a `PwmChannel` pair; while `enabled` is false both channels
  are held at zero. It returns the compare values and calls `write(channel,
  ccr)` for each channel if given.

Board I/O

- `motorboard.keys` – `KeyScanner.update(levels)` reads active-low key levels
  and returns a `KeyEvent` with the pressed mask, `down` and `up` edges and
  the helpers `key1_only`, `key2_only` and `both_down`.
- `motorboard.leds` – `LedBank.display(status)` drives active-low LEDs and
  only rewrites the pins when the pattern changed (returns whether it did).
- `motorboard.tasks` – `TaskScheduler.add(func, period)` and `run(now)`: a
  cooperative runner that calls each `Task` whose period has elapsed on a
  32-bit wrapping tick.
- `motorboard.usart` – `SerialReceiver.on_byte(byte, now)` collects bytes;
  `poll(now)` returns and echoes (`"recive : ...\n"` through `transmit`) the
  collected text once the line has been idle for more than 100 ticks.
  `format_message(fmt, *args)` formats and truncates to the 128-byte buffer.
- `motorboard.timers` – `TimerInterrupts` registers handlers per timer,
  `start()` starts them in registration order and `elapsed(timer)`
  dispatches a period-elapsed event.

Stepper drivers over CAN

- `motorboard.emm_v5` – command builders for Emm V5 closed-loop stepper
  drivers: `reset_position`, `reset_clog_protection`, `read_sys_params`
  (with `SysParam`), `modify_ctrl_mode`, `enable_control`,
  `velocity_control`, `position_control`, `stop_now`, `synchronous_motion`,
  `origin_set_zero`, `origin_modify_params`, `origin_trigger_return` and
  `origin_interrupt`. Each returns the command bytes ending in the `0x6B`
  check byte and raises `ValueError` for out-of-range fields.
  `split_frames(command)` cuts a command into extended-ID `CanFrame`s (ID is
  address << 8 | packet number, each frame the function code plus up to 7
  bytes). `EmmV5Bus.send(command)` transmits those frames with a gap between
  them; its `RxMailbox` holds the last received frame (`deliver`, `take`).
- `motorboard.motors` – `Motor` set-points and `MotorGroup`, which queues
  velocity (`set_speeds`) or position (`set_positions`) commands for every
  motor and starts them together with a broadcast sync command; `task()`
  resends positions only when a set-point changed. `decode_position(dlc,
  data)` turns a current-position reply into signed degrees.

Kernel building blocks

- `motorboard.config` – `KernelConfig`, the kernel settings the board uses
  (32 priorities, 1000 ticks per second, …).
- `motorboard.lists` – intrusive circular `ListNode` and singly linked
  `SListNode` lists.
- `motorboard.threads` – `ThreadScheduler` with `create`, `start`, `sleep`,
  `exit`, `schedule` and `tick`: ready lists per priority (0 is highest),
  round-robin time slices, sleeping threads woken by `tick()` with an
  optional priority boost. `Thread` and `ThreadState` describe the threads.
- `motorboard.idle` – `IdleHooks` (four slots; `HookListFull` when none is
  free) and `DefunctQueue`, which reclaims exited `DefunctThread`s, newest
  first, calling your `detach`/`release` callables around their cleanup.
- `motorboard.dbg` – `DebugLogger` writing `[E/TAG] message` lines at a
  `Level` threshold, optionally coloured.
- `motorboard.device` – `Device` with reference-counted `open`/`close`,
  `read`, `write`, `control` and driver operations supplied as callables;
  `DeviceRegistry` for lookup by name. Failures raise `DeviceError` with a
  `reason` of `"error"`, `"busy"` or `"nosys"`.
- `motorboard.cpuport` – `stack_init` lays out a thread's first
  `StackFrame`; `ffs`; text reports for usage, bus, memory-management and
  hard faults; `format_exception` and `FaultHandler`, whose installed hook
  may claim a fault before it is reported and raised as `RuntimeError`.

## Install

```
pip install .
```

With the test extra:

```
pip install ".[test]"
pytest
```

## Examples

Speed loop:

```python
from motorboard.pid import Pid
from motorboard.encoder import Encoder
from motorboard.pwm import PwmOutput

pid = Pid()
encoder = Encoder()
pwm = PwmOutput(enabled=True)

encoder.update(65500)                 # raw hardware counter value
output = pid.update(encoder.speed())
print(pwm.set_output(output))         # (reverse ccr, forward ccr)
```

A stepper command on the bus:

```python
from motorboard.emm_v5 import EmmV5Bus, position_control

bus = EmmV5Bus(transmit=print)
bus.send(position_control(1, 0, 1000, 0, 3200, False, False))
```

Threads:

```python
from motorboard.threads import ThreadScheduler

sched = ThreadScheduler()
sched.create(lambda: print("worker"), priority=5)
sched.start()
for _ in range(20):
    sched.tick()
```

## What it does not do

- It drives no hardware and opens no ports: GPIO, timers, CAN and serial
  access all go through the callables you supply.
- The thread scheduler only models scheduling decisions; it switches no real
  contexts and keeps no system-wide tick service of its own beyond
  `ThreadScheduler.sys_tick`.
- There is no board start-up sequence, no multi-core locking and no
  command-line program.