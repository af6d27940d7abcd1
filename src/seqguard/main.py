"""Command-line driver for running a guarded step sequence."""

from __future__ import annotations

import argparse
import asyncio
import json
from typing import Any

from seqguard import __version__
from seqguard.config.env import load_environment
from seqguard.config.loader import load_settings
from seqguard.enums import RunMode
from seqguard.runner import StepSequenceRunner, detach, race
from seqguard.utilities.logger_manager import get_default_logger_manager


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Run an all-or-nothing step sequence.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=__version__,
        help="Show the version and exit.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    run_parser = subparsers.add_parser(
        "run",
        help="Run the sequence once and print a JSON summary.",
    )
    run_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Optional YAML file with a 'sequence' section.",
    )
    run_parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Optional .env file with SEQGUARD_* overrides.",
    )
    run_parser.add_argument(
        "--step-delay",
        type=float,
        default=None,
        help="Seconds each step suspends for (overrides config).",
    )
    run_parser.add_argument(
        "--race-timeout",
        type=float,
        default=None,
        metavar="SECONDS",
        help="Race the sequence against a timer of this length.",
    )
    run_parser.add_argument(
        "--detached",
        action="store_true",
        help="Run the sequence as a detached task; only its handle joins the race.",
    )
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> dict[str, Any]:
    """Run the sequence as requested and return the printed summary.

    In inline mode a race lost to the timer cancels the sequence, and the
    guard's ``IncompleteSequenceError`` propagates out of this coroutine.
    """
    args = parse_args(argv)
    load_environment(args.env_file)
    settings = load_settings(args.config, step_delay=args.step_delay)
    logger_manager = get_default_logger_manager(settings.log_level)
    logger_manager.set_level(settings.log_level)
    runner = StepSequenceRunner.from_settings(settings, logger_manager=logger_manager)
    mode = RunMode.DETACHED if args.detached else RunMode.INLINE
    handle_dropped = False

    if mode is RunMode.DETACHED:
        handle = detach(
            runner.run(), name="seqguard-cli", logger_manager=logger_manager
        )
        if args.race_timeout is not None:
            outcome = await race(handle, asyncio.sleep(args.race_timeout))
            handle_dropped = outcome.index == 1
        count = await handle.join()
    elif args.race_timeout is not None:
        outcome = await race(runner.run(), asyncio.sleep(args.race_timeout))
        count = outcome.value
    else:
        count = await runner.run()

    summary = {
        "status": "completed",
        "count": count,
        "mode": mode.value,
        "race_timeout": args.race_timeout,
        "handle_dropped": handle_dropped,
    }
    print(json.dumps(summary))
    return summary


def cli() -> None:
    """Console-script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
