"""
Configuration constants for the Arlo robot driver.

Hardware defaults in one place. Per-handle overrides live in params.py.
"""

# =============================================================================
# SERIAL PORT
# =============================================================================

# Arduino controller board
ARLO_PORT = "/dev/ttyACM0"
ARLO_BAUDRATE = 9600

READ_TIMEOUT_S = 60.0  # Blocking read timeout for every exchange
SETTLE_DELAY_S = 2.0  # Arduino resets when the port opens

# =============================================================================
# TIMING (ms)
# =============================================================================

ENCODER_READ_DELAY_MS = 45  # Controller needs time before the count is ready
SHUTDOWN_STOP_DELAY_MS = 5  # Before stop
SHUTDOWN_KILL_DELAY_MS = 10  # Between stop and kill

# =============================================================================
# LIMITS
# =============================================================================

MAX_DIFF_POWER = 127  # go_diff motor power
MAX_SPEED = 255  # set_speed / set_turnspeed

# =============================================================================
# ENCODERS
# =============================================================================

ENCODER_TICKS_PER_REV = 144  # One full wheel revolution
