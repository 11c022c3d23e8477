"""Core utilities package."""

from .format_utils import format_file_size, format_time_of_day

__all__ = ["format_file_size", "format_time_of_day"]
