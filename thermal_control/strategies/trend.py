from __future__ import annotations

from ..models import ControlContext, TemperatureState
from ..sensor import round_half_away
from .base import ControlStrategy, register_strategy


class TrendFollowingStrategy(ControlStrategy):
    """Step the fan up while hot and heating, down otherwise.

    The sign of ``current - previous`` stands in for a derivative term.
    Steps are asymmetric so the fan speeds up faster than it slows down.
    The hard ceiling is checked before the deadband.
    """

    name = "trend"
    description = "Trend-following steps with a hard temperature ceiling"

    def _normalize(self, value: float) -> float:
        if self.config.deadband_rounding:
            return round_half_away(value, 0)
        return value

    def is_critical(self, temperature: TemperatureState) -> bool:
        return temperature.current >= temperature.max

    def in_deadband(self, temperature: TemperatureState) -> bool:
        if self.is_critical(temperature):
            return False
        return self._normalize(temperature.current) == temperature.target

    def decide(self, context: ControlContext) -> int:
        t = context.temperature
        pwm = context.pwm

        if self.is_critical(t):
            return pwm.max

        if self.in_deadband(t):
            return pwm.current

        if t.current > t.target and t.previous <= t.current:
            return pwm.current + pwm.increment

        if t.current > t.target and t.previous > t.current:
            return pwm.current - pwm.decrement

        if t.current < t.target:
            return pwm.current - pwm.decrement

        return pwm.current

    def reason(self, context: ControlContext) -> str:
        t = context.temperature
        if self.is_critical(t):
            return "Temperature at or above maximum"
        if self.in_deadband(t):
            return "Temperature at target"
        if t.current > t.target:
            if t.previous <= t.current:
                return "Above target and rising"
            return "Above target and falling"
        if t.current < t.target:
            return "Below target"
        return "Holding"


register_strategy(TrendFollowingStrategy)
