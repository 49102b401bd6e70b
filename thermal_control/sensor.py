"""Temperature sampling from sysfs style sensor files.

Thermal zones report milli-degrees Celsius as a plain integer followed by a
newline, e.g. ``55123``. Samples are scaled to degrees and rounded half away
from zero to a fixed number of decimal places.
"""
from __future__ import annotations

import logging
import math

from .errors import SensorMalformed, SensorUnreadable

logger = logging.getLogger(__name__)

MILLIDEGREES_PER_DEGREE = 1000.0


def read_raw_temperature(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.read()
    except UnicodeDecodeError as exc:
        raise SensorMalformed(path, f"Temperature file is not valid text: {exc.reason}") from exc
    except OSError as exc:
        raise SensorUnreadable(path, f"Failed to read temperature: {exc.strerror or exc}") from exc


def parse_raw_temperature(content: str, path: str = "<memory>") -> float:
    text = content.strip()
    try:
        value = float(text)
    except ValueError as exc:
        raise SensorMalformed(path, f"Failed to parse temperature value {text!r}") from exc
    if not math.isfinite(value):
        raise SensorMalformed(path, f"Temperature value {text!r} is not finite")
    return value


def round_half_away(value: float, precision: int = 1) -> float:
    scale = 10 ** precision
    return math.copysign(math.floor(abs(value) * scale + 0.5), value) / scale


def scale_raw_temperature(raw: float, precision: int = 1) -> float:
    return round_half_away(raw / MILLIDEGREES_PER_DEGREE, precision)


def read_temperature(path: str, precision: int = 1) -> float:
    """Read one sample from ``path`` and return it in degrees.

    Raises:
        SensorUnreadable: the file could not be opened or read.
        SensorMalformed: the trimmed content is not a finite number.
    """
    raw = parse_raw_temperature(read_raw_temperature(path), path)
    return scale_raw_temperature(raw, precision)


class SensorReader:
    """Reads a single sensor file with a fixed precision."""

    def __init__(self, path: str, precision: int = 1):
        self.path = path
        self.precision = precision

    def read(self) -> float:
        value = read_temperature(self.path, self.precision)
        logger.debug("Read %s°C from %s", value, self.path)
        return value

    def __repr__(self) -> str:
        return f"SensorReader(path={self.path!r}, precision={self.precision})"
