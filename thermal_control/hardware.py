"""PWM hardware backends.

A backend is the single owned hardware handle of the process: it is built
once at startup and handed to :class:`~thermal_control.actuator.PwmActuator`.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple

from .errors import HardwareError

logger = logging.getLogger(__name__)

OUTPUT = "output"


class PwmBackend(ABC):
    """Interface to a GPIO library capable of driving a PWM output."""

    @abstractmethod
    def setup(self) -> None:
        """Initialise the GPIO library."""

    @abstractmethod
    def set_pin_mode(self, pin: int, mode: str) -> None:
        """Configure ``pin``; only :data:`OUTPUT` is used."""

    @abstractmethod
    def create_pwm_channel(self, pin: int, initial_value: int, value_range: int) -> None:
        """Start PWM on ``pin`` at ``initial_value`` out of ``value_range``."""

    @abstractmethod
    def write_pwm(self, pin: int, value: int) -> None:
        """Change the duty-cycle of an existing channel."""

    def cleanup(self) -> None:
        """Release the channels created by this backend."""


class RPiGpioBackend(PwmBackend):
    """Software PWM through ``RPi.GPIO`` using BCM pin numbering."""

    def __init__(self, frequency: float = 100.0):
        self.frequency = frequency
        self.GPIO = None
        self._channels: Dict[int, Tuple[object, int]] = {}

    def _import_gpio(self):
        try:
            import RPi.GPIO as GPIO  # type: ignore
        except (ImportError, RuntimeError) as exc:
            raise HardwareError(f"RPi.GPIO is not available: {exc}") from exc
        return GPIO

    def setup(self) -> None:
        self.GPIO = self._import_gpio()
        self.GPIO.setwarnings(False)
        self.GPIO.setmode(self.GPIO.BCM)

    def _require_gpio(self):
        if self.GPIO is None:
            raise HardwareError("GPIO used before setup()")
        return self.GPIO

    def set_pin_mode(self, pin: int, mode: str) -> None:
        GPIO = self._require_gpio()
        if mode != OUTPUT:
            raise HardwareError(f"Unsupported pin mode {mode!r}")
        GPIO.setup(pin, GPIO.OUT)
        logger.info("GPIO pin %s set as OUTPUT", pin)

    def create_pwm_channel(self, pin: int, initial_value: int, value_range: int) -> None:
        GPIO = self._require_gpio()
        channel = GPIO.PWM(pin, self.frequency)
        channel.start(self._duty_cycle(initial_value, value_range))
        self._channels[pin] = (channel, value_range)
        logger.info(
            "PWM channel on pin %s started at %s/%s (%s Hz)", pin, initial_value, value_range, self.frequency
        )

    def write_pwm(self, pin: int, value: int) -> None:
        try:
            channel, value_range = self._channels[pin]
        except KeyError as exc:
            raise HardwareError(f"No PWM channel created on pin {pin}") from exc
        channel.ChangeDutyCycle(self._duty_cycle(value, value_range))

    def cleanup(self) -> None:
        if self.GPIO is None:
            return
        for pin, (channel, _) in self._channels.items():
            channel.stop()
            self.GPIO.cleanup(pin)
            logger.info("Cleaned up GPIO pin %s", pin)
        self._channels.clear()

    @staticmethod
    def _duty_cycle(value: int, value_range: int) -> float:
        return max(0.0, min(100.0, value * 100.0 / value_range))


class DryRunBackend(PwmBackend):
    """Backend that only records and logs what would be written."""

    def __init__(self):
        self.ranges: Dict[int, int] = {}
        self.writes: List[Tuple[int, int]] = []
        self.is_setup = False

    def setup(self) -> None:
        self.is_setup = True
        logger.info("Dry run: PWM output is not connected to hardware")

    def set_pin_mode(self, pin: int, mode: str) -> None:
        logger.debug("Dry run: pin %s set to %s", pin, mode)

    def create_pwm_channel(self, pin: int, initial_value: int, value_range: int) -> None:
        self.ranges[pin] = value_range
        logger.debug("Dry run: PWM channel on pin %s at %s/%s", pin, initial_value, value_range)

    def write_pwm(self, pin: int, value: int) -> None:
        if pin not in self.ranges:
            raise HardwareError(f"No PWM channel created on pin {pin}")
        self.writes.append((pin, value))
        logger.debug("Dry run: pin %s <- %s", pin, value)

    def cleanup(self) -> None:
        self.ranges.clear()
