"""
Shared fixtures for the thermal_control test suite.

Provides:
- A validated default configuration bound to pin 18
- A dry-run PWM backend that records every write
- A scripted sensor returning queued readings or raising queued errors
"""

from __future__ import annotations

import logging

import pytest

from thermal_control.actuator import PwmActuator
from thermal_control.config import ControlConfig
from thermal_control.hardware import DryRunBackend
from thermal_control.models import PwmState

logging.getLogger("thermal_control").setLevel(logging.DEBUG)


class ScriptedSensor:
    """Sensor stand-in that replays a list of readings or exceptions."""

    def __init__(self, readings, on_exhausted=None):
        self.readings = list(readings)
        self.on_exhausted = on_exhausted
        self.calls = 0

    def read(self):
        self.calls += 1
        if not self.readings:
            if self.on_exhausted is not None:
                self.on_exhausted()
            return self.last
        item = self.readings.pop(0)
        if isinstance(item, Exception):
            raise item
        self.last = item
        return item


@pytest.fixture()
def config():
    return ControlConfig(gpio_pwm=18, pollrate=0).validate()


@pytest.fixture()
def backend():
    return DryRunBackend()


@pytest.fixture()
def actuator(config, backend):
    actuator = PwmActuator(PwmState.from_config(config), backend)
    actuator.initialize()
    return actuator


@pytest.fixture()
def sensor_file(tmp_path):
    """Write raw milli-degree content to a fake thermal zone file."""

    path = tmp_path / "temp"

    def write(content: str):
        path.write_text(content, encoding="utf-8")
        return str(path)

    return write


@pytest.fixture()
def scripted_sensor():
    return ScriptedSensor


@pytest.fixture()
def idle_actuator(config, backend):
    """Actuator that has not been initialized yet, for full engine runs."""
    return PwmActuator(PwmState.from_config(config), backend)
