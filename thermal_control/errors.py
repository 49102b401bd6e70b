from __future__ import annotations


class ThermalControlError(Exception):
    """Base class for every error raised by the controller."""


class ConfigError(ThermalControlError, ValueError):
    """Raised when the configured tunables cannot describe a safe controller."""


class SensorError(ThermalControlError):
    """Raised when a temperature sample cannot be obtained."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message} ({path})")
        self.path = path


class SensorUnreadable(SensorError):
    """The sensor source could not be opened or read."""


class SensorMalformed(SensorError):
    """The sensor source was readable but did not contain a number."""


class HardwareError(ThermalControlError):
    """Raised when the PWM hardware is missing or used out of order."""
