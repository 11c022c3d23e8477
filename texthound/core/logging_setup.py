"""loguru sink setup for the CLI and plugin entry points.

Library modules only emit through ``loguru.logger``; installing sinks is left
to whoever owns the process.
"""

import sys
from typing import TextIO

from loguru import logger

from texthound.core.config.logging_config import LoggingConfig

_LOG_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> - <level>{message}</level>"
)


def configure_logging(config: LoggingConfig, sink: TextIO | None = None) -> int:
    """Replace existing loguru sinks with a single stream sink.

    Args:
        config: Logging settings deciding the effective level
        sink: Stream to write to (defaults to stderr)

    Returns:
        The loguru handler id of the installed sink
    """
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level=config.effective_level,
        format=_LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )
