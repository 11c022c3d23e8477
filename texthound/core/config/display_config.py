"""Display configuration for the values exposed to the sensor host."""

import argparse
import os
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_MIN_TRUNCATE_LENGTH = 10


class DisplayConfig(BaseSettings):
    """Controls how snapshots are rendered into sensor values.

    Environment Variables:
        TEXTHOUND_DISPLAY_TRUNCATE_LENGTH=100
        TEXTHOUND_DISPLAY_SHOW_FILE_INFO=true
        TEXTHOUND_DISPLAY_SHOW_TIMESTAMP=true
    """

    model_config = SettingsConfigDict(
        env_prefix="TEXTHOUND_DISPLAY_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    truncate_length: int = Field(
        default=100,
        description="Characters of content shown in the preview (minimum 10)",
    )
    show_file_info: bool = Field(
        default=True,
        description="Append the human-readable file size to the status value",
    )
    show_timestamp: bool = Field(
        default=True,
        description="Append the last modification time to the status value",
    )

    @field_validator("truncate_length")
    def clamp_truncate_length(cls, value: int) -> int:  # noqa: N805
        return max(_MIN_TRUNCATE_LENGTH, value)

    @classmethod
    def add_cli_arguments(cls, parser: argparse.ArgumentParser) -> None:
        """Add display-related CLI arguments."""
        parser.add_argument(
            "--truncate-length",
            type=int,
            help="Characters of content shown in the preview (default: 100)",
        )
        parser.add_argument(
            "--hide-timestamp",
            action="store_true",
            default=None,
            help="Do not show the modification time in the status value",
        )
        parser.add_argument(
            "--hide-file-info",
            action="store_true",
            default=None,
            help="Do not show the file size in the status value",
        )

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load display config from environment variables."""
        config: dict[str, Any] = {}

        if truncate := os.getenv("TEXTHOUND_DISPLAY_TRUNCATE_LENGTH"):
            config["truncate_length"] = int(truncate)

        if show_info := os.getenv("TEXTHOUND_DISPLAY_SHOW_FILE_INFO"):
            config["show_file_info"] = show_info.lower() in ("true", "1", "yes")

        if show_ts := os.getenv("TEXTHOUND_DISPLAY_SHOW_TIMESTAMP"):
            config["show_timestamp"] = show_ts.lower() in ("true", "1", "yes")

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Extract display config from CLI arguments."""
        overrides: dict[str, Any] = {}

        if getattr(args, "truncate_length", None) is not None:
            overrides["truncate_length"] = args.truncate_length

        if getattr(args, "hide_timestamp", None):
            overrides["show_timestamp"] = False

        if getattr(args, "hide_file_info", None):
            overrides["show_file_info"] = False

        return overrides
