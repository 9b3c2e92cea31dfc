"""
Communication layer - serial protocol with the Arlo Arduino controller.
"""

from .serial_link import SerialLink

__all__ = ["SerialLink"]
