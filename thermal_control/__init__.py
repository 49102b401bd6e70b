from .actuator import PwmActuator
from .config import ControlConfig
from .data import changes_to_frame, format_change, format_changes, load_trace
from .engine import ControlEngine, EngineState
from .errors import (
    ConfigError,
    HardwareError,
    SensorError,
    SensorMalformed,
    SensorUnreadable,
    ThermalControlError,
)
from .hardware import DryRunBackend, PwmBackend, RPiGpioBackend
from .models import ControlContext, PwmChange, PwmState, TemperatureState
from .sensor import SensorReader, read_temperature
from .strategies import (
    DEFAULT_STRATEGY,
    TrendFollowingStrategy,
    available_strategies,
    build_strategy,
    register_strategy,
)

__all__ = [
    "ConfigError",
    "ControlConfig",
    "ControlContext",
    "ControlEngine",
    "DEFAULT_STRATEGY",
    "DryRunBackend",
    "EngineState",
    "HardwareError",
    "PwmActuator",
    "PwmBackend",
    "PwmChange",
    "PwmState",
    "RPiGpioBackend",
    "SensorError",
    "SensorMalformed",
    "SensorReader",
    "SensorUnreadable",
    "TemperatureState",
    "ThermalControlError",
    "TrendFollowingStrategy",
    "available_strategies",
    "build_strategy",
    "changes_to_frame",
    "format_change",
    "format_changes",
    "load_trace",
    "read_temperature",
    "register_strategy",
]
