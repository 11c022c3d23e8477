"""Configuration sections for TextHound."""

from .config import Config, ConfigError
from .display_config import DisplayConfig
from .logging_config import LoggingConfig
from .monitor_config import MonitorConfig

__all__ = [
    "Config",
    "ConfigError",
    "DisplayConfig",
    "LoggingConfig",
    "MonitorConfig",
]
