from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from .config import ControlConfig

RISING = "rising"
LOWERING = "lowering"


@dataclass
class TemperatureState:
    """Latest sample plus one sample of lookback."""

    target: float
    max: float
    current: float = 0.0
    previous: float = 0.0

    @classmethod
    def from_config(cls, config: ControlConfig) -> "TemperatureState":
        return cls(target=config.temperature_target_value, max=config.temperature_max_value)

    def record(self, value: float) -> None:
        self.previous = self.current
        self.current = value

    def snapshot(self) -> "TemperatureState":
        return replace(self)


@dataclass
class PwmState:
    """Duty-cycle driving the fan together with its bounds and step sizes."""

    pin: int
    min: int
    max: int
    increment: int
    decrement: int
    current: int = 0
    previous: int = 0

    @classmethod
    def from_config(cls, config: ControlConfig) -> "PwmState":
        # Boot at full speed until the first decision says otherwise.
        return cls(
            pin=config.gpio_pwm,
            min=config.pwm_min,
            max=config.pwm_max,
            increment=config.pwm_increment,
            decrement=config.pwm_decrement,
            current=config.pwm_max,
            previous=config.pwm_max,
        )

    def snapshot(self) -> "PwmState":
        return replace(self)


@dataclass(frozen=True)
class ControlContext:
    """Context passed to a strategy for a single decision point."""

    temperature: TemperatureState
    pwm: PwmState


@dataclass
class PwmChange:
    """Represents a single duty-cycle change applied to the fan."""

    time: datetime
    direction: str
    temperature: float
    target: float
    previous: int
    current: int
    reason: str = ""

    @property
    def delta(self) -> int:
        return self.current - self.previous
