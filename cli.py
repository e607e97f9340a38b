"""Command-line entry point for the todo TUI."""

import argparse
import sys
from typing import List, Optional

from common import __version__
from common.config import Config
from common.logging_setup import setup_logging, get_logger

logger = get_logger(__name__)

PROG = "todo-tui"


def build_parser(defaults: Optional[Config] = None) -> argparse.ArgumentParser:
    """Build the argument parser, taking defaults from ``defaults``."""
    defaults = defaults or Config.from_env()
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Keyboard-driven todo list for the terminal",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--data-path",
        default=defaults.data_path,
        help="JSON file the todo list is loaded from and saved to",
    )

    parser.add_argument(
        "-t",
        "--tick-rate",
        type=float,
        default=defaults.tick_rate,
        help="Tick rate, i.e. number of ticks per second",
    )

    parser.add_argument(
        "-f",
        "--frame-rate",
        type=float,
        default=defaults.frame_rate,
        help="Frame rate, i.e. number of frames per second",
    )

    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )

    parser.add_argument(
        "--log-file",
        default=defaults.log_file,
        help="Log file path (empty to log to stderr)",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def parse_args(argv: Optional[List[str]] = None) -> Config:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.tick_rate <= 0 or args.frame_rate <= 0:
        parser.error("tick and frame rates must be positive")
    return Config(
        data_path=args.data_path,
        tick_rate=args.tick_rate,
        frame_rate=args.frame_rate,
        log_level=args.log_level,
        log_file=args.log_file or None,
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for todo-tui."""
    config = parse_args(argv)
    setup_logging(level=config.log_level, log_file=config.log_file)
    logger.debug(f"Starting {PROG} {__version__} with {config}")

    from terminal.app import App

    try:
        App(config).run()
    except Exception as e:
        logger.exception(f"{PROG} error: {e}")
        print(f"{PROG} error: Something went wrong: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
