"""Discrete PID controller used for the speed loop."""

from dataclasses import dataclass

KP1 = 40000.0
KI1 = 8000.0
KD1 = 0.0
TARGET1 = 3.2
OUTPUT_MIN = -59999.0
OUTPUT_MAX = 59999.0
PERIOD = 0.02


def _clamp(value: float, low: float, high: float) -> float:
    if value > high:
        return high
    if value < low:
        return low
    return value


@dataclass
class Pid:
    """PID controller with integral anti-windup and output limits."""

    kp: float = KP1
    ki: float = KI1
    kd: float = KD1
    target: float = TARGET1
    output_min: float = OUTPUT_MIN
    output_max: float = OUTPUT_MAX
    period: float = PERIOD
    error_last: float = 0.0
    error_sum: float = 0.0
    output: float = 0.0

    def update(self, current_value: float) -> float:
        """Feed one measurement and return the limited controller output."""
        error = self.target - current_value
        p_term = self.kp * error

        self.error_sum = _clamp(self.error_sum + error, self.output_min, self.output_max)
        i_term = self.ki * self.error_sum

        derivative = (error - self.error_last) / self.period
        d_term = self.kd * derivative

        output = _clamp(p_term + i_term + d_term, self.output_min, self.output_max)
        self.error_last = error
        self.output = output
        return output

    def reset(self) -> None:
        """Forget accumulated error history."""
        self.error_last = 0.0
        self.error_sum = 0.0
        self.output = 0.0