"""
Serial communication with the Arlo Arduino controller.

One request line out, one response line back.
"""

from __future__ import annotations

import logging
import time
import serial

from arlo.config import ARLO_PORT, ARLO_BAUDRATE, READ_TIMEOUT_S
from arlo.errors import OpenError, WriteError, ReadTimeoutError

logger = logging.getLogger(__name__)


class SerialLink:
    """
    Line-framed serial link.

    Protocol:
        Request:  ASCII command terminated by \\n
        Response: ASCII line terminated by \\n
    """

    def __init__(self, port: str = ARLO_PORT, baudrate: int = ARLO_BAUDRATE,
                 timeout: float = READ_TIMEOUT_S):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout

        self._serial: serial.Serial | None = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None

    def open(self):
        """Open the serial device. Raises OpenError on failure."""
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
            )
        except (serial.SerialException, OSError) as e:
            raise OpenError(f"Cannot open {self.port}: {e}") from e
        logger.info(f"Connected to Arlo controller on {self.port}")

    def close(self):
        """Close the serial device. Safe to call more than once."""
        if self._serial is None:
            return
        conn = self._serial
        self._serial = None
        conn.close()
        logger.info(f"Disconnected from {self.port}")

    def write_command(self, cmd: str):
        """Write a command without waiting for a response."""
        if self._serial is None:
            raise WriteError(f"Link to {self.port} is closed")
        try:
            self._serial.write(cmd.encode("ascii"))
        except (serial.SerialException, OSError) as e:
            raise WriteError(f"Write of {cmd.strip()!r} failed: {e}") from e
        logger.debug(f"Sent: {cmd.strip()}")

    def send_command(self, cmd: str, sleep_ms: int = 0) -> str:
        """
        Send a command and return the controller's response.

        Args:
            cmd: Command line including the trailing newline
            sleep_ms: Delay between write and read

        Returns:
            Response line with surrounding whitespace removed
        """
        self.write_command(cmd)
        if sleep_ms:
            time.sleep(sleep_ms / 1000.0)

        try:
            raw = self._serial.readline()
        except (serial.SerialException, OSError) as e:
            raise ReadTimeoutError(f"Read after {cmd.strip()!r} failed: {e}") from e

        if not raw.endswith(b"\n"):
            # readline() returns whatever arrived when the timeout expires
            raise ReadTimeoutError(
                f"No response to {cmd.strip()!r} within {self.timeout}s (got {raw!r})"
            )

        line = raw.decode(errors="ignore").strip()
        logger.debug(f"Received: {line}")
        return line

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
