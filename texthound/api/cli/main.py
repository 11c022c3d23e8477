"""TextHound CLI entry point."""

import argparse
import asyncio
import sys

from loguru import logger

from texthound import __version__
from texthound.core.config.config import Config, ConfigError
from texthound.core.logging_setup import configure_logging

from .parsers.monitor_parser import add_monitor_subparser


def create_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="texthound",
        description="Republish a text file's content and metadata as display values",
    )
    parser.add_argument(
        "--version", action="version", version=f"texthound {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    add_monitor_subparser(subparsers)
    return parser


async def async_main(args: argparse.Namespace) -> int:
    try:
        config = Config.load(args)
    except ConfigError as e:
        configure_logging(Config().logging)
        logger.error(str(e))
        return 2

    configure_logging(config.logging)

    if args.command == "monitor":
        from .commands.monitor import monitor_command

        return await monitor_command(args, config)

    return 1


def main(argv: list[str] | None = None) -> None:
    parser = create_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = asyncio.run(async_main(args))
    except KeyboardInterrupt:
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
