"""Quadrature encoder bookkeeping on a 16-bit hardware counter."""

from dataclasses import dataclass

COUNTER_MAX = 65536
COUNTER_HALF = 32768
PERIOD = 0.02
PER_REVOLUTION = 1320


@dataclass
class Encoder:
    """Accumulates encoder pulses sampled once per control period."""

    period: float = PERIOD
    per_revolution: int = PER_REVOLUTION
    counter_max: int = COUNTER_MAX
    per_period: int = 0
    total: int = 0

    def update(self, counter: int) -> int:
        """Take the counter value read since the last reset and return the pulse count.

        The counter counts the opposite way to forward motion, so its value is
        negated; readings past half the range are unwrapped.
        """
        if not 0 <= counter < self.counter_max:
            raise ValueError(f"counter value out of range: {counter}")
        processed = -counter
        if processed <= -(self.counter_max // 2):
            processed += self.counter_max
        self.per_period = processed
        self.total += processed
        return processed

    def speed(self) -> float:
        """Revolutions per second over the last period."""
        return self.per_period / (self.period * self.per_revolution)

    def location(self) -> float:
        """Total pulse count since start."""
        return float(self.total)