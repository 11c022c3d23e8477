"""CLI command implementations."""

from .monitor import monitor_command

__all__ = ["monitor_command"]
