"""
Arlo robot handle.

Wraps the serial link to the Arduino controller and exposes
motion, sensor and encoder commands.

Handles:
- Direct differential drive (no encoders)
- Encoder based continuous and timed motion
- Sonar ping sensor reads
- Wheel encoder counts
- Stop + kill on shutdown
"""

from __future__ import annotations

import logging
import time
from enum import IntEnum

from arlo.comm import SerialLink
from arlo.config import (
    ARLO_PORT,
    MAX_DIFF_POWER,
    MAX_SPEED,
    ENCODER_TICKS_PER_REV,
)
from arlo.errors import ParseError, PreconditionError, SensorError, ValidationError
from arlo.params import Parameters

logger = logging.getLogger(__name__)


class PingSensor(IntEnum):
    """Sonar ping sensors and their command identifiers."""

    FRONT = 0
    BACK = 1
    LEFT = 2
    RIGHT = 3


def ticks_to_revolutions(ticks: int) -> float:
    """Convert encoder ticks to wheel revolutions."""
    return ticks / ENCODER_TICKS_PER_REV


def _parse_count(line: str) -> int:
    # Unsigned decimal only, as the controller prints it
    if not line.isascii() or not line.isdigit():
        raise ParseError(f"Expected unsigned integer, got {line!r}")
    return int(line)


def _check_range(name: str, value: int, low: int, high: int | None = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        upper = "" if high is None else f"..{high}"
        raise ValidationError(f"{name}={value} outside {low}{upper}")


class Robot:
    """
    Arlo robot on a serial port.

    Protocol:
        Commands (Pi -> Arduino), one per line:
            d<pl>,<pr>,<dl>,<dr>  - differential drive
            s                     - stop
            g / v / n / m         - go / backward / left / right
            f / b / l / r         - step forward / back / rotate left / right
            0..3                  - read ping sensor
            z / x / t / y <n>     - speed / turn speed / step time / turn time
            e0 / e1               - read left / right encoder
            c                     - reset encoders
            k                     - kill

        Response (Arduino -> Pi): one status or integer line per command.

    Usage:
        with Robot() as robot:
            robot.set_speed(64)
            robot.go()
            robot.stop()
    """

    def __init__(self, port: str | None = None, params: Parameters | None = None):
        self.params = params if params is not None else Parameters()
        self.port = port or self.params.port or ARLO_PORT

        self._speed: int | None = None
        self._turn_speed: int | None = None
        self._step_time: int | None = None
        self._turn_time: int | None = None
        self._closed = False
        self._link: SerialLink | None = None

        link = SerialLink(
            port=self.port,
            baudrate=self.params.baudrate,
            timeout=self.params.read_timeout_s,
        )
        link.open()
        self._link = link
        time.sleep(self.params.settle_delay_s)

    @property
    def speed(self) -> int | None:
        return self._speed

    @property
    def turn_speed(self) -> int | None:
        return self._turn_speed

    @property
    def step_time(self) -> int | None:
        return self._step_time

    @property
    def turn_time(self) -> int | None:
        return self._turn_time

    @property
    def is_closed(self) -> bool:
        return self._closed

    # -------------------------------------------------------------------------
    # Direct motor control
    # -------------------------------------------------------------------------

    def go_diff(self, power_left: int, power_right: int, dir_left: int, dir_right: int) -> str:
        """
        Drive each wheel with its own power and direction.

        Does NOT use the wheel encoders.

        Args:
            power_left: Left motor power (0 to 127)
            power_right: Right motor power (0 to 127)
            dir_left: Left direction (0 = reverse, 1 = forward)
            dir_right: Right direction (0 = reverse, 1 = forward)
        """
        _check_range("power_left", power_left, 0, MAX_DIFF_POWER)
        _check_range("power_right", power_right, 0, MAX_DIFF_POWER)
        _check_range("dir_left", dir_left, 0, 1)
        _check_range("dir_right", dir_right, 0, 1)
        return self._link.send_command(f"d{power_left},{power_right},{dir_left},{dir_right}\n")

    def stop(self) -> str:
        """Set motor power on both wheels to zero."""
        return self._link.send_command("s\n")

    # -------------------------------------------------------------------------
    # Encoder based motion
    # -------------------------------------------------------------------------

    def _require(self, value, name: str) -> None:
        if value is None:
            raise PreconditionError(f"{name} not set")

    def go(self) -> str:
        """Drive forward continuously."""
        self._require(self._speed, "speed")
        return self._link.send_command("g\n")

    def backward(self) -> str:
        """Drive backward continuously."""
        self._require(self._speed, "speed")
        return self._link.send_command("v\n")

    def left(self) -> str:
        """Rotate left continuously."""
        self._require(self._speed, "speed")
        return self._link.send_command("n\n")

    def right(self) -> str:
        """Rotate right continuously."""
        self._require(self._speed, "speed")
        return self._link.send_command("m\n")

    def step_forward(self) -> str:
        """Drive forward for the configured step time."""
        self._require(self._step_time, "step_time")
        return self._link.send_command("f\n")

    def step_backward(self) -> str:
        """Drive backward for the configured step time."""
        self._require(self._step_time, "step_time")
        return self._link.send_command("b\n")

    def step_rotate_left(self) -> str:
        """Rotate left for the configured turn time."""
        self._require(self._turn_time, "turn_time")
        return self._link.send_command("l\n")

    def step_rotate_right(self) -> str:
        """Rotate right for the configured turn time."""
        self._require(self._turn_time, "turn_time")
        return self._link.send_command("r\n")

    # -------------------------------------------------------------------------
    # Ping sensors
    # -------------------------------------------------------------------------

    def _read_sensor(self, sensor: PingSensor) -> int:
        """
        Read a ping sensor.

        Returns:
            Range in mm

        Raises:
            ParseError: Response is not an integer
            SensorError: Sensor reported zero
        """
        sensor = PingSensor(sensor)
        value = _parse_count(self._link.send_command(f"{sensor.value}\n"))
        if value <= 0:
            raise SensorError(f"{sensor.name.lower()} ping sensor returned {value}")
        return value

    def read_front_ping_sensor(self) -> int:
        """Front sonar range in mm."""
        return self._read_sensor(PingSensor.FRONT)

    def read_back_ping_sensor(self) -> int:
        """Back sonar range in mm."""
        return self._read_sensor(PingSensor.BACK)

    def read_left_ping_sensor(self) -> int:
        """Left sonar range in mm."""
        return self._read_sensor(PingSensor.LEFT)

    def read_right_ping_sensor(self) -> int:
        """Right sonar range in mm."""
        return self._read_sensor(PingSensor.RIGHT)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def set_speed(self, speed: int) -> str:
        """Speed (0 to 255) for the encoder based commands."""
        _check_range("speed", speed, 0, MAX_SPEED)
        self._speed = speed
        return self._link.send_command(f"z{speed}\n")

    def set_turnspeed(self, turn_speed: int) -> str:
        """Turn speed (0 to 255) for the encoder based commands."""
        _check_range("turn_speed", turn_speed, 0, MAX_SPEED)
        self._turn_speed = turn_speed
        return self._link.send_command(f"x{turn_speed}\n")

    def set_step_time(self, step_time: int) -> str:
        """Duration in ms of step_forward and step_backward."""
        _check_range("step_time", step_time, 0)
        self._step_time = step_time
        return self._link.send_command(f"t{step_time}\n")

    def set_turn_time(self, turn_time: int) -> str:
        """Duration in ms of step_rotate_left and step_rotate_right."""
        _check_range("turn_time", turn_time, 0)
        self._turn_time = turn_time
        return self._link.send_command(f"y{turn_time}\n")

    # -------------------------------------------------------------------------
    # Wheel encoders
    # -------------------------------------------------------------------------

    def _read_encoder(self, wheel: int) -> int:
        line = self._link.send_command(f"e{wheel}\n", sleep_ms=self.params.encoder_read_delay_ms)
        return _parse_count(line)

    def read_left_wheel_encoder(self) -> int:
        """Left encoder ticks since the last reset (144 per revolution)."""
        return self._read_encoder(0)

    def read_right_wheel_encoder(self) -> int:
        """Right encoder ticks since the last reset (144 per revolution)."""
        return self._read_encoder(1)

    def reset_encoder_counts(self) -> str:
        """Zero both wheel encoder counts."""
        return self._link.send_command("c\n")

    # -------------------------------------------------------------------------
    # Shutdown
    # -------------------------------------------------------------------------

    def close(self):
        """
        Stop the motors, send kill, and close the port.

        Runs once; later calls do nothing. Never raises.
        """
        if self._closed:
            return
        self._closed = True

        try:
            logger.info("Shutting down the robot ...")

            time.sleep(self.params.shutdown_stop_delay_ms / 1000.0)
            try:
                self.stop()
            except Exception as e:
                logger.warning(f"Stop during shutdown failed: {e}")

            time.sleep(self.params.shutdown_kill_delay_ms / 1000.0)
            try:
                self._link.write_command("k\n")
            except Exception as e:
                logger.warning(f"Kill during shutdown failed: {e}")
        finally:
            # Port is released even if a delay is interrupted
            try:
                self._link.close()
            except Exception as e:
                logger.warning(f"Closing {self.port} failed: {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __del__(self):
        # Construction may have failed before the link existed
        if getattr(self, "_link", None) is not None and not getattr(self, "_closed", True):
            self.close()
