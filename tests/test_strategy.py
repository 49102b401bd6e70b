"""
Trend Following Strategy Tests
==============================
The decision function with literal fixed states.
"""

import pytest

from thermal_control.config import ControlConfig
from thermal_control.models import ControlContext, PwmState, TemperatureState
from thermal_control.strategies import (
    DEFAULT_STRATEGY,
    TrendFollowingStrategy,
    available_strategies,
    build_strategy,
)


def make_context(current, previous=0.0, target=40.0, max_temp=70.0, pwm=50, increment=2, decrement=1):
    return ControlContext(
        temperature=TemperatureState(target=target, max=max_temp, current=current, previous=previous),
        pwm=PwmState(pin=0, min=0, max=100, increment=increment, decrement=decrement, current=pwm),
    )


@pytest.fixture
def strategy():
    return TrendFollowingStrategy(ControlConfig(gpio_pwm=0))


@pytest.fixture
def rounding_strategy():
    return TrendFollowingStrategy(ControlConfig(gpio_pwm=0, deadband_rounding=True))


class TestDecide:
    def test_over_max_forces_full_speed(self, strategy):
        assert strategy.decide(make_context(current=80.0, pwm=0)) == 100

    @pytest.mark.parametrize("previous", [0.0, 70.0, 71.0, 90.0])
    def test_ceiling_ignores_trend(self, strategy, previous):
        assert strategy.decide(make_context(current=71.0, previous=previous)) == 100

    def test_exactly_at_max_is_critical(self, strategy):
        assert strategy.decide(make_context(current=70.0, previous=75.0)) == 100

    def test_same_as_target_holds(self, strategy):
        assert strategy.decide(make_context(current=40.0)) == 50

    def test_over_target_and_rising(self, strategy):
        assert strategy.decide(make_context(current=55.0, previous=50.0)) == 52

    def test_over_target_and_steady_counts_as_rising(self, strategy):
        assert strategy.decide(make_context(current=55.0, previous=55.0)) == 52

    def test_over_target_and_lowering(self, strategy):
        assert strategy.decide(make_context(current=50.0, previous=55.0)) == 49

    def test_below_target(self, strategy):
        assert strategy.decide(make_context(current=30.0)) == 49

    def test_does_not_clamp(self, strategy):
        assert strategy.decide(make_context(current=55.0, previous=50.0, pwm=100)) == 102
        assert strategy.decide(make_context(current=30.0, pwm=0)) == -1

    def test_exact_comparison_without_rounding(self, strategy):
        assert strategy.decide(make_context(current=40.2, previous=40.0)) == 52

    def test_rounded_comparison_holds(self, rounding_strategy):
        assert rounding_strategy.decide(make_context(current=40.2, previous=40.0)) == 50
        assert rounding_strategy.decide(make_context(current=39.6, previous=40.0)) == 50
        assert rounding_strategy.decide(make_context(current=40.5, previous=40.0)) == 52


class TestPrecedence:
    def test_ceiling_wins_over_rounded_deadband(self):
        strategy = TrendFollowingStrategy(ControlConfig(gpio_pwm=0, deadband_rounding=True))
        context = make_context(current=40.4, target=40.0, max_temp=40.3)
        assert not strategy.in_deadband(context.temperature)
        assert strategy.decide(context) == 100

    def test_target_never_critical_under_valid_config(self, strategy):
        context = make_context(current=40.0, target=40.0, max_temp=40.1)
        assert strategy.in_deadband(context.temperature)
        assert strategy.decide(context) == 50


class TestReason:
    @pytest.mark.parametrize(
        "current, previous, expected",
        [
            (75.0, 0.0, "Temperature at or above maximum"),
            (40.0, 0.0, "Temperature at target"),
            (55.0, 50.0, "Above target and rising"),
            (50.0, 55.0, "Above target and falling"),
            (30.0, 0.0, "Below target"),
        ],
    )
    def test_reason(self, strategy, current, previous, expected):
        assert strategy.reason(make_context(current=current, previous=previous)) == expected


class TestRegistry:
    def test_default_registered(self):
        assert DEFAULT_STRATEGY in available_strategies()

    def test_build_default(self):
        assert isinstance(build_strategy(DEFAULT_STRATEGY, ControlConfig(gpio_pwm=0)), TrendFollowingStrategy)

    def test_unknown_strategy(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            build_strategy("pid", ControlConfig(gpio_pwm=0))
