from __future__ import annotations

import logging

from .errors import HardwareError
from .hardware import OUTPUT, PwmBackend
from .models import PwmState

logger = logging.getLogger(__name__)


class PwmActuator:
    """Owns the fan's PwmState and is the only writer of the PWM output."""

    def __init__(self, state: PwmState, backend: PwmBackend):
        self.state = state
        self.backend = backend
        self.initialized = False

    @property
    def current(self) -> int:
        return self.state.current

    @property
    def previous(self) -> int:
        return self.state.previous

    def clamp(self, requested: int) -> int:
        if requested > self.state.max:
            return self.state.max
        if requested < self.state.min:
            return self.state.min
        return requested

    def initialize(self) -> None:
        """Set up the pin and start the channel at full speed."""
        if self.initialized:
            raise HardwareError(f"PWM on pin {self.state.pin} is already initialized")
        self.backend.setup()
        self.backend.set_pin_mode(self.state.pin, OUTPUT)
        self.backend.create_pwm_channel(self.state.pin, self.state.max, self.state.max)
        self.initialized = True

    def write(self, requested: int) -> int:
        if not self.initialized:
            raise HardwareError(f"PWM on pin {self.state.pin} written before initialize()")
        self.state.previous = self.state.current
        self.state.current = self.clamp(requested)
        self.backend.write_pwm(self.state.pin, self.state.current)
        return self.state.current

    def force_max(self) -> int:
        logger.warning("Forcing fan on pin %s to maximum speed %s", self.state.pin, self.state.max)
        return self.write(self.state.max)

    def release(self) -> None:
        if self.initialized:
            self.backend.cleanup()
            self.initialized = False
