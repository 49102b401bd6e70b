from __future__ import annotations

import argparse
import logging
import signal
from typing import Iterable, List, Optional

from .config import DEFAULT_TEMPERATURE_FILE, ControlConfig
from .data import changes_to_frame, format_change, load_trace
from .engine import ControlEngine
from .errors import ConfigError, HardwareError, SensorError
from .hardware import DryRunBackend, PwmBackend, RPiGpioBackend
from .models import PwmChange
from .strategies import DEFAULT_STRATEGY, available_strategies

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def run_replay(
    path: str,
    output: str | None,
    config: ControlConfig,
    strategy_name: str = DEFAULT_STRATEGY,
) -> List[PwmChange]:
    data = load_trace(path)
    engine = ControlEngine.from_config(config, DryRunBackend(), strategy_name)
    changes = engine.replay(data)

    if output:
        changes_to_frame(changes).to_csv(output, index=False)

    return changes


def run_controller(config: ControlConfig, backend: PwmBackend, strategy_name: str = DEFAULT_STRATEGY) -> None:
    engine = ControlEngine.from_config(config, backend, strategy_name)

    def handle_signal(signum, frame):
        logger.info("Received signal %s, stopping fan controller", signum)
        engine.stop()

    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)
    engine.run()


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Temperature driven PWM fan controller.")
    parser.add_argument("--pwm-min", type=int, default=30, help="Minimum allowed fan speed")
    parser.add_argument("--pwm-max", type=int, default=100, help="Maximum allowed fan speed and PWM range")
    parser.add_argument("--pwm-increment", type=int, default=2, help="Speed step while above target and rising")
    parser.add_argument("--pwm-decrement", type=int, default=1, help="Speed step while cooling down")
    parser.add_argument(
        "-t",
        "--temperature-target-value",
        type=float,
        default=40.0,
        help="Target temperature to maintain",
    )
    parser.add_argument(
        "--temperature-max-value",
        type=float,
        default=70.0,
        help="Temperature at which the fan is forced to full speed",
    )
    parser.add_argument("--temperature-file-path", default=DEFAULT_TEMPERATURE_FILE)
    parser.add_argument("-p", "--pollrate", type=int, default=5, help="Temperature polling rate in seconds")
    parser.add_argument(
        "-g",
        "--gpio-pwm",
        type=int,
        help="GPIO pin (BCM) controlling the fan; optional with --replay",
    )
    parser.add_argument(
        "--temperature-precision",
        type=int,
        default=1,
        help="Decimal places kept when scaling sensor readings",
    )
    parser.add_argument(
        "--deadband-rounding",
        action="store_true",
        help="Hold the fan while the rounded temperature equals the target",
    )
    parser.add_argument("--pwm-frequency", type=float, default=100.0, help="PWM frequency in Hz")
    parser.add_argument(
        "--strategy",
        default=DEFAULT_STRATEGY,
        choices=available_strategies(),
        help="Control strategy to execute",
    )
    parser.add_argument(
        "--list-strategies",
        action="store_true",
        help="List available strategies and exit",
    )
    parser.add_argument("--dry-run", action="store_true", help="Log PWM writes instead of driving GPIO")
    parser.add_argument("--replay", metavar="TRACE", help="Replay a CSV trace of raw sensor samples")
    parser.add_argument("--output", help="With --replay, save the resulting fan speed changes as CSV")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.list_strategies:
        print("Available strategies:")
        for name in available_strategies():
            from .strategies import base

            print(f"- {name}: {base.STRATEGY_REGISTRY[name].description}")
        return 0

    try:
        config = ControlConfig.from_args(args, require_pin=not args.replay)
    except ConfigError as exc:
        parser.error(str(exc))

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    if args.replay:
        try:
            changes = run_replay(args.replay, args.output, config, args.strategy)
        except (OSError, SensorError) as exc:
            logger.error("Cannot replay %s: %s", args.replay, exc)
            return 1
        if not changes:
            print("No fan speed changes for provided trace.")
        for change in changes:
            print(f"{change.time} | {format_change(change)}")
        return 0

    backend = DryRunBackend() if args.dry_run else RPiGpioBackend(config.pwm_frequency)
    try:
        run_controller(config, backend, args.strategy)
    except SensorError as exc:
        logger.critical("Fan forced to maximum speed, exiting: %s", exc)
        return 1
    except HardwareError as exc:
        logger.error("PWM hardware error: %s", exc)
        return 1
    return 0


__all__ = ["main", "run_controller", "run_replay", "build_arg_parser"]
