from __future__ import annotations

from typing import Iterable, List

import pandas as pd

from .errors import SensorMalformed
from .models import PwmChange


def load_trace(path: str) -> pd.DataFrame:
    try:
        return pd.read_csv(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise SensorMalformed(path, f"Trace is not a readable CSV: {exc}") from exc


def changes_to_frame(changes: Iterable[PwmChange]) -> pd.DataFrame:
    changes = list(changes)
    return pd.DataFrame(
        {
            "time": [c.time for c in changes],
            "direction": [c.direction for c in changes],
            "temperature": [c.temperature for c in changes],
            "target": [c.target for c in changes],
            "previous_pwm": [c.previous for c in changes],
            "pwm": [c.current for c in changes],
            "reason": [c.reason for c in changes],
        }
    )


def format_change(change: PwmChange) -> str:
    return (
        f"Current temperature {change.temperature}°C (target {change.target}°C), "
        f"{change.direction} fan speed {change.previous} -> {change.current}"
    )


def format_changes(changes: List[PwmChange]) -> str:
    return "\n".join(format_change(change) for change in changes)
