"""Monitor command module - runs the file monitor in the foreground."""

import argparse
import asyncio
import signal
import sys
from typing import TextIO

from loguru import logger

from texthound.core.config.config import Config
from texthound.plugin import TextFilePlugin
from texthound.services.sensor_service import SensorValues


def format_values_line(values: SensorValues) -> str:
    """One-line rendering of the sensor values for terminal output."""
    preview = values.content.replace("\r", "").replace("\n", "\\n")
    return (
        f"{values.file_size} bytes | {values.line_count} lines | "
        f"{values.status} | {preview}"
    )


async def monitor_command(
    args: argparse.Namespace, config: Config, stream: TextIO | None = None
) -> int:
    """Execute the monitor command.

    Args:
        args: Parsed command-line arguments
        config: Pre-validated configuration instance
        stream: Output stream for updates (defaults to stdout)

    Returns:
        Process exit code
    """
    out = stream or sys.stdout
    if not config.monitor.is_path_configured():
        print(
            "Error: no file to monitor. Pass a path or set "
            "TEXTHOUND_MONITOR_TEXT_FILE_PATH.",
            file=sys.stderr,
        )
        return 2

    def _print_values(values: SensorValues) -> None:
        print(format_values_line(values), file=out)
        out.flush()

    plugin = TextFilePlugin(config=config, on_values=_print_values)
    plugin.initialize()

    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel.set)
        except (NotImplementedError, RuntimeError):
            # No signal handler support on this event loop (e.g. Windows)
            pass

    logger.info(f"Monitoring {config.monitor.text_file_path} (Ctrl-C to stop)")
    try:
        await plugin.start(cancel)
    finally:
        await plugin.close()
    return 0
