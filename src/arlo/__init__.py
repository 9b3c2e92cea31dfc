"""
Arlo robot driver.

Serial command interface to the Arlo robot's Arduino controller:
- Robot: motion, ping sensors, wheel encoders, shutdown
- Parameters: port and timing configuration with JSON persistence
- Errors: typed failures for open, I/O, unset settings, bad arguments and responses
"""

from .errors import (
    ArloError,
    OpenError,
    WriteError,
    ReadTimeoutError,
    PreconditionError,
    ValidationError,
    ParseError,
    SensorError,
)
from .params import Parameters
from .robot import PingSensor, Robot, ticks_to_revolutions

__all__ = [
    "Robot",
    "PingSensor",
    "Parameters",
    "ticks_to_revolutions",
    "ArloError",
    "OpenError",
    "WriteError",
    "ReadTimeoutError",
    "PreconditionError",
    "ValidationError",
    "ParseError",
    "SensorError",
]
