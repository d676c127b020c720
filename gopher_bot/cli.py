"""Command-line entry point for the Gopher Slack bot.

WHY: The bot runs as a long-lived process (container, systemd, a
terminal during development). A small CLI makes dev mode and log
verbosity switchable without editing the environment.

HOW: argparse parses the flags, logging is configured once, then
``gopher_bot.slack.bot.run`` blocks in the Socket Mode loop.

RULES:
- --dev overrides DEV_MODE from the environment
- Missing tokens or an unknown bot identity exit with status 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from gopher_bot import __version__
from gopher_bot.config import DEV_MODE, LOG_FORMAT
from gopher_bot.core.errors import BotInitError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gopher-bot",
        description="Community Slack bot for the Gophers workspace.",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        default=DEV_MODE,
        help="Log incoming messages instead of answering them",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    # Imported late so --help and --version work without Slack installed
    from gopher_bot.slack.bot import run

    try:
        run(dev_mode=args.dev)
    except (ValueError, BotInitError) as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
