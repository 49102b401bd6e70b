from __future__ import annotations

import argparse
from dataclasses import dataclass, fields
from typing import Optional

from .errors import ConfigError

DEFAULT_TEMPERATURE_FILE = "/sys/class/thermal/thermal_zone0/temp"
MAX_TEMPERATURE_PRECISION = 6


@dataclass(frozen=True)
class ControlConfig:
    """Tunable control parameters, fixed for the lifetime of the process."""

    pwm_min: int = 30
    pwm_max: int = 100  # also the boot duty-cycle and the hardware PWM range
    pwm_increment: int = 2
    pwm_decrement: int = 1
    temperature_target_value: float = 40.0
    temperature_max_value: float = 70.0
    temperature_file_path: str = DEFAULT_TEMPERATURE_FILE
    pollrate: int = 5
    gpio_pwm: Optional[int] = None
    temperature_precision: int = 1  # decimal places kept after scaling
    deadband_rounding: bool = False  # compare round(current) with the target
    pwm_frequency: float = 100.0

    def validate(self, require_pin: bool = True) -> "ControlConfig":
        if self.gpio_pwm is None:
            if require_pin:
                raise ConfigError("gpio_pwm is required")
        elif self.gpio_pwm < 0:
            raise ConfigError("gpio_pwm must be a non-negative pin number")
        if self.pwm_min < 0:
            raise ConfigError("pwm_min must not be negative")
        if self.pwm_min >= self.pwm_max:
            raise ConfigError("pwm_min must be less than pwm_max")
        if self.pwm_increment < 1:
            raise ConfigError("pwm_increment must be at least 1")
        if self.pwm_decrement < 1:
            raise ConfigError("pwm_decrement must be at least 1")
        if self.temperature_max_value <= self.temperature_target_value:
            raise ConfigError("temperature_max_value must be greater than temperature_target_value")
        if self.pollrate < 0:
            raise ConfigError("pollrate must not be negative")
        if not 0 <= self.temperature_precision <= MAX_TEMPERATURE_PRECISION:
            raise ConfigError(
                f"temperature_precision must be between 0 and {MAX_TEMPERATURE_PRECISION}"
            )
        if self.pwm_frequency <= 0:
            raise ConfigError("pwm_frequency must be positive")
        return self

    @classmethod
    def from_args(cls, args: argparse.Namespace, require_pin: bool = True) -> "ControlConfig":
        """Build and validate a config from parsed command line options.

        Attributes missing from ``args`` keep their dataclass default. Offline
        replay never drives GPIO and passes ``require_pin=False``.
        """
        values = {
            f.name: getattr(args, f.name)
            for f in fields(cls)
            if getattr(args, f.name, None) is not None
        }
        return cls(**values).validate(require_pin=require_pin)
