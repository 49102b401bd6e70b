from .base import ControlStrategy, available_strategies, build_strategy, register_strategy
from .trend import TrendFollowingStrategy

DEFAULT_STRATEGY = TrendFollowingStrategy.name

__all__ = [
    "ControlStrategy",
    "available_strategies",
    "build_strategy",
    "register_strategy",
    "TrendFollowingStrategy",
    "DEFAULT_STRATEGY",
]
