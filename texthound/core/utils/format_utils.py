"""Human-readable formatting helpers for display values."""

from datetime import datetime

_SIZE_UNITS = ("B", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """Format a byte count as a short human-readable string.

    Values are scaled by 1024 up to GB and rendered with at most two
    decimals, e.g. ``0 B``, ``17 B``, ``1.5 KB``, ``2 MB``.
    """
    if size_bytes <= 0:
        return "0 B"

    value = float(size_bytes)
    order = 0
    while value >= 1024 and order < len(_SIZE_UNITS) - 1:
        order += 1
        value /= 1024

    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[order]}"


def format_time_of_day(value: datetime | None) -> str:
    """Format a timestamp as HH:MM:SS, or ``N/A`` when absent."""
    if value is None:
        return "N/A"
    return value.strftime("%H:%M:%S")
