"""Errors raised by the Arlo driver."""


class ArloError(Exception):
    """Base class for all driver errors."""


class OpenError(ArloError):
    """Serial device could not be opened."""


class WriteError(ArloError):
    """Command could not be written to the controller."""


class ReadTimeoutError(ArloError):
    """No complete response line arrived before the read timeout."""


class PreconditionError(ArloError):
    """A setting the command depends on was never configured."""


class ValidationError(ArloError, ValueError):
    """Argument outside its allowed range."""


class ParseError(ArloError):
    """Response expected to be an unsigned integer was not."""


class SensorError(ArloError):
    """Ping sensor returned a zero reading."""
