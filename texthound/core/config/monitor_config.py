"""
Monitoring configuration for the TextHound file monitor.

Controls which file is watched, how often it is polled, whether OS change
notifications are used, and how much of the file is read per cycle.
"""

import argparse
import os
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MIN_POLL_INTERVAL_SECONDS = 1
_MIN_CONTENT_LENGTH = 100


class MonitorConfig(BaseSettings):
    """
    File monitoring configuration.

    Configuration Sources (in order of precedence):
    1. CLI arguments
    2. Environment variables (TEXTHOUND_MONITOR_*)
    3. Config file
    4. Default values

    Environment Variables:
        TEXTHOUND_MONITOR_TEXT_FILE_PATH=/var/log/status.txt
        TEXTHOUND_MONITOR_POLL_INTERVAL_SECONDS=5
        TEXTHOUND_MONITOR_ENABLE_CONTINUOUS_MONITORING=true
        TEXTHOUND_MONITOR_MAX_CONTENT_LENGTH=10000
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXTHOUND_MONITOR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    text_file_path: str = Field(
        default="",
        description="Path of the text file to monitor (empty disables reads)",
    )

    poll_interval_seconds: int = Field(
        default=5,
        description="Seconds between periodic reads (minimum 1)",
    )

    enable_continuous_monitoring: bool = Field(
        default=True,
        description="Subscribe to OS change notifications in addition to polling",
    )

    max_content_length: int = Field(
        default=10_000,
        description="Maximum characters read from the file per cycle (minimum 100)",
    )

    @field_validator("text_file_path")
    def normalize_text_file_path(cls, value: str) -> str:  # noqa: N805
        return value.strip()

    @field_validator("poll_interval_seconds")
    def clamp_poll_interval(cls, value: int) -> int:  # noqa: N805
        return max(_MIN_POLL_INTERVAL_SECONDS, value)

    @field_validator("max_content_length")
    def clamp_max_content_length(cls, value: int) -> int:  # noqa: N805
        return max(_MIN_CONTENT_LENGTH, value)

    def is_path_configured(self) -> bool:
        """Return True when a file path has been provided."""
        return bool(self.text_file_path)

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add monitoring-related CLI arguments."""
        parser.add_argument(
            "--interval",
            type=int,
            dest="poll_interval_seconds",
            help="Seconds between periodic reads (default: 5, minimum: 1)",
        )
        parser.add_argument(
            "--max-content-length",
            type=int,
            help="Maximum characters read per cycle (default: 10000, minimum: 100)",
        )
        parser.add_argument(
            "--no-watch",
            action="store_true",
            default=None,
            help="Disable OS change notifications and rely on polling only",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load monitoring config from environment variables."""
        config: dict[str, Any] = {}

        if path := os.getenv("TEXTHOUND_MONITOR_TEXT_FILE_PATH"):
            config["text_file_path"] = path

        if interval := os.getenv("TEXTHOUND_MONITOR_POLL_INTERVAL_SECONDS"):
            config["poll_interval_seconds"] = int(interval)

        if continuous := os.getenv("TEXTHOUND_MONITOR_ENABLE_CONTINUOUS_MONITORING"):
            config["enable_continuous_monitoring"] = continuous.lower() in (
                "true",
                "1",
                "yes",
            )

        if max_length := os.getenv("TEXTHOUND_MONITOR_MAX_CONTENT_LENGTH"):
            config["max_content_length"] = int(max_length)

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract monitoring config from CLI arguments."""
        overrides: dict[str, Any] = {}

        if getattr(args, "path", None):
            overrides["text_file_path"] = str(args.path)

        if getattr(args, "poll_interval_seconds", None) is not None:
            overrides["poll_interval_seconds"] = args.poll_interval_seconds

        if getattr(args, "max_content_length", None) is not None:
            overrides["max_content_length"] = args.max_content_length

        if getattr(args, "no_watch", None):
            overrides["enable_continuous_monitoring"] = False

        return overrides

    def __repr__(self) -> str:
        """String representation of monitoring configuration."""
        return (
            f"MonitorConfig("
            f"text_file_path={self.text_file_path!r}, "
            f"poll_interval_seconds={self.poll_interval_seconds}, "
            f"enable_continuous_monitoring={self.enable_continuous_monitoring}, "
            f"max_content_length={self.max_content_length})"
        )
