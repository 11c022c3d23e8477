"""Argument parsers for TextHound CLI commands."""

from .common_arguments import add_common_arguments, add_config_arguments
from .monitor_parser import add_monitor_subparser

__all__ = ["add_common_arguments", "add_config_arguments", "add_monitor_subparser"]
