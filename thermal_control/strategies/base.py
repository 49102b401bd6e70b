from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, List, Type

from ..config import ControlConfig
from ..models import ControlContext, TemperatureState


class ControlStrategy(ABC):
    """Interface for pluggable fan speed policies."""

    name: str = "base"
    description: str = ""

    def __init__(self, config: ControlConfig):
        self.config = config

    @abstractmethod
    def decide(self, context: ControlContext) -> int:
        """Return the requested duty-cycle; clamping is left to the actuator."""

    @abstractmethod
    def in_deadband(self, temperature: TemperatureState) -> bool:
        """Return True when no actuation should happen for this sample."""

    def reason(self, context: ControlContext) -> str:
        """Short human readable explanation of the last decision."""
        return ""


STRATEGY_REGISTRY: Dict[str, Type[ControlStrategy]] = {}


def register_strategy(strategy_cls: Type[ControlStrategy]) -> None:
    STRATEGY_REGISTRY[strategy_cls.name] = strategy_cls


def available_strategies() -> List[str]:
    return sorted(STRATEGY_REGISTRY)


def build_strategy(name: str, config: ControlConfig) -> ControlStrategy:
    try:
        strategy_cls = STRATEGY_REGISTRY[name]
    except KeyError as exc:
        raise ValueError(
            f"Unknown strategy '{name}'. Available: {available_strategies()}"
        ) from exc
    return strategy_cls(config)
