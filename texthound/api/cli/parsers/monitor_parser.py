"""Monitor command argument parser for TextHound CLI."""

import argparse
from pathlib import Path
from typing import Any

from .common_arguments import add_common_arguments, add_config_arguments


def add_monitor_subparser(subparsers: Any) -> argparse.ArgumentParser:
    """Add monitor command subparser to the main parser.

    Args:
        subparsers: Subparsers object from the main argument parser

    Returns:
        The configured monitor subparser
    """
    monitor_parser = subparsers.add_parser(
        "monitor",
        help="Watch a text file and print its display values on every change",
        description=(
            "Monitor a single text file using periodic polling plus OS change "
            "notifications, printing size, line count, status and a content "
            "preview each time the file changes."
        ),
    )

    monitor_parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Text file to monitor (default: monitor.text_file_path from config)",
    )

    add_common_arguments(monitor_parser)
    add_config_arguments(monitor_parser, ["monitor", "display"])

    return monitor_parser
