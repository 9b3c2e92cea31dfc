"""
Runtime connection parameters with JSON persistence.

Defaults come from config.py. A saved arlo_params.json overrides them,
so a robot with a different port or slower controller can be
configured without touching code.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from arlo.config import (
    ARLO_PORT,
    ARLO_BAUDRATE,
    READ_TIMEOUT_S,
    SETTLE_DELAY_S,
    ENCODER_READ_DELAY_MS,
    SHUTDOWN_STOP_DELAY_MS,
    SHUTDOWN_KILL_DELAY_MS,
)

logger = logging.getLogger(__name__)

PARAMS_FILE = Path("arlo_params.json")


@dataclass
class Parameters:
    """Connection and timing parameters for one robot."""

    # Serial link
    port: str = ARLO_PORT
    baudrate: int = ARLO_BAUDRATE
    read_timeout_s: float = READ_TIMEOUT_S
    settle_delay_s: float = SETTLE_DELAY_S

    # Command timing (ms)
    encoder_read_delay_ms: int = ENCODER_READ_DELAY_MS
    shutdown_stop_delay_ms: int = SHUTDOWN_STOP_DELAY_MS
    shutdown_kill_delay_ms: int = SHUTDOWN_KILL_DELAY_MS

    def update(self, **kwargs):
        """Update parameters from dict (e.g., loaded JSON)."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                expected_type = type(getattr(self, key))
                try:
                    setattr(self, key, expected_type(value))
                except (TypeError, ValueError):
                    logger.warning(f"Invalid value for {key}: {value}")

    def save(self, path: Path = PARAMS_FILE):
        """Persist to JSON file."""
        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)
        logger.info(f"Parameters saved to {path}")

    @classmethod
    def load(cls, path: Path = PARAMS_FILE) -> Parameters:
        """Load from JSON file, or return defaults."""
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {path}: {e}, using defaults")
            return cls()

        if not isinstance(data, dict):
            logger.warning(f"{path} holds {type(data).__name__}, not an object, using defaults")
            return cls()

        params = cls()
        params.update(**data)
        logger.info(f"Parameters loaded from {path}")
        return params

    def to_dict(self) -> dict:
        return asdict(self)
