"""Command line entry point for the debug console."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from .config import DEFAULT_CONFIG_PATH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Live debug console with sampled graphs")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Path to configuration file")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Sample and draw the configured graphs without opening a window",
    )
    parser.add_argument(
        "--frames",
        type=int,
        help="Number of display refreshes to simulate (headless) or to run before exiting",
    )
    parser.add_argument("--fps", type=int, help="Override the configured refresh rate")
    parser.add_argument(
        "--log-faults",
        dest="log_faults",
        action="store_true",
        help="Append recovered sampling/serialisation faults to logs/console_faults.log",
    )
    parser.add_argument(
        "--echo",
        dest="echo",
        action="store_true",
        help="Mirror console messages to stdout (rate limited)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    parser.set_defaults(log_faults=None, echo=None)

    args = parser.parse_args(argv)
    if args.frames is not None and args.frames < 0:
        parser.error("--frames must not be negative")
    if args.fps is not None and args.fps <= 0:
        parser.error("--fps must be positive")

    from .app import run as run_app

    return run_app(
        headless=args.headless,
        config_path=str(args.config),
        frames=args.frames,
        fps=args.fps,
        log_faults=args.log_faults,
        echo=args.echo,
    )


__all__ = ["main", "build_parser"]
