from __future__ import annotations

import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

import pandas as pd

from .actuator import PwmActuator
from .config import ControlConfig
from .data import format_change
from .errors import SensorError, SensorMalformed
from .hardware import PwmBackend
from .models import LOWERING, RISING, ControlContext, PwmChange, PwmState, TemperatureState
from .sensor import SensorReader, scale_raw_temperature
from .strategies import DEFAULT_STRATEGY, ControlStrategy, build_strategy

logger = logging.getLogger(__name__)


class EngineState(Enum):
    INITIALIZING = "initializing"
    POLLING = "polling"
    STOPPED = "stopped"
    FAULTED = "faulted"


class ControlEngine:
    """Core runtime: sample, decide, actuate, once per poll interval."""

    def __init__(
        self,
        config: ControlConfig,
        strategy: ControlStrategy,
        actuator: PwmActuator,
        sensor: Optional[SensorReader] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.strategy = strategy
        self.actuator = actuator
        self.sensor = sensor
        self.clock = clock
        self.temperature = TemperatureState.from_config(config)
        self.changes: List[PwmChange] = []
        self.state = EngineState.INITIALIZING
        self.notify_level = logging.INFO
        self._stop_event = threading.Event()

    @classmethod
    def from_config(
        cls,
        config: ControlConfig,
        backend: PwmBackend,
        strategy_name: str = DEFAULT_STRATEGY,
    ) -> "ControlEngine":
        actuator = PwmActuator(PwmState.from_config(config), backend)
        sensor = SensorReader(config.temperature_file_path, config.temperature_precision)
        return cls(config, build_strategy(strategy_name, config), actuator, sensor)

    def _build_context(self) -> ControlContext:
        return ControlContext(temperature=self.temperature.snapshot(), pwm=self.actuator.state.snapshot())

    def start(self) -> None:
        if self.state is not EngineState.INITIALIZING:
            return
        self.actuator.initialize()
        self.state = EngineState.POLLING
        logger.info(
            "Controlling fan on pin %s: target %s°C, max %s°C, PWM %s-%s",
            self.actuator.state.pin,
            self.temperature.target,
            self.temperature.max,
            self.actuator.state.min,
            self.actuator.state.max,
        )

    def tick(self, value: float, now: Optional[datetime] = None) -> PwmChange | None:
        """Apply one fresh sample; return the change made, if any."""
        self.temperature.record(value)

        if self.strategy.in_deadband(self.temperature):
            logger.debug("Temperature %s°C within deadband of target", value)
            return None

        context = self._build_context()
        requested = self.strategy.decide(context)
        if self.actuator.clamp(requested) == self.actuator.current:
            logger.debug("Temperature %s°C, fan speed stays at %s", value, self.actuator.current)
            return None

        self.actuator.write(requested)
        change = PwmChange(
            time=now if now is not None else self.clock(),
            direction=RISING if self.actuator.current > self.actuator.previous else LOWERING,
            temperature=self.temperature.current,
            target=self.temperature.target,
            previous=self.actuator.previous,
            current=self.actuator.current,
            reason=self.strategy.reason(context),
        )
        self.changes.append(change)
        logger.log(self.notify_level, format_change(change))
        return change

    def _escalate(self, exc: SensorError) -> None:
        self.state = EngineState.FAULTED
        logger.critical("Temperature sensor failure: %s", exc)
        self.actuator.force_max()

    def poll_once(self) -> PwmChange | None:
        try:
            value = self.sensor.read()
        except SensorError as exc:
            self._escalate(exc)
            raise
        return self.tick(value)

    def run(self) -> None:
        """Poll until stopped; a sensor failure forces full speed and is re-raised."""
        if self.sensor is None:
            raise ValueError("ControlEngine.run() needs a sensor")
        self.start()
        while not self._stop_event.wait(self.config.pollrate):
            self.poll_once()
        self.state = EngineState.STOPPED
        logger.info("Fan controller stopped")
        self.actuator.release()

    def stop(self) -> None:
        self._stop_event.set()

    def _prepare(self, data: pd.DataFrame) -> pd.DataFrame:
        if "raw" not in data.columns:
            raise SensorMalformed("<trace>", "Trace has no 'raw' column")
        df = data.copy()
        if "time" in df.columns:
            try:
                df["time"] = pd.to_datetime(df["time"])
            except (ValueError, TypeError) as exc:
                raise SensorMalformed("<trace>", f"Trace has an unparsable time: {exc}") from exc
            df = df.sort_values("time").set_index("time")
        else:
            step = max(self.config.pollrate, 1)
            df.index = pd.date_range(pd.Timestamp(0), periods=len(df), freq=f"{step}s")
        df["raw"] = pd.to_numeric(df["raw"], errors="coerce").ffill().bfill()
        if not df.empty and df["raw"].isna().all():
            raise SensorMalformed("<trace>", "Trace contains no numeric samples")
        return df

    def replay(self, data: pd.DataFrame) -> List[PwmChange]:
        """Run the control logic over a recorded trace instead of a live sensor."""
        self.notify_level = logging.DEBUG
        df = self._prepare(data)
        if df.empty:
            return []

        self.start()
        for current_time, raw in df["raw"].items():
            value = scale_raw_temperature(float(raw), self.config.temperature_precision)
            self.tick(value, now=current_time)

        return self.changes
