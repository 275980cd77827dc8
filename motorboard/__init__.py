"""Speed-loop, board I/O, CAN stepper-driver and small-kernel components of a motor controller board."""

__version__ = "0.1.0"