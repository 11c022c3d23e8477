"""Debug logging settings for TextHound."""

import os
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LEVEL_ALIASES = {
    "warn": "WARNING",
    "fatal": "CRITICAL",
}
_KNOWN_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class LoggingConfig(BaseSettings):
    """Controls the loguru sink installed by the CLI and plugin entry points."""

    model_config = SettingsConfigDict(
        env_prefix="TEXTHOUND_LOGGING_",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    enable_debug_logging: bool = Field(
        default=False,
        description="Emit log output at the configured level instead of warnings only",
    )
    debug_log_level: str = Field(
        default="INFO",
        description="loguru level used when debug logging is enabled",
    )

    @field_validator("debug_log_level")
    def validate_level(cls, value: str) -> str:  # noqa: N805
        normalized = value.strip()
        normalized = _LEVEL_ALIASES.get(normalized.lower(), normalized.upper())
        if normalized not in _KNOWN_LEVELS:
            raise ValueError(
                f"debug_log_level must be one of {sorted(_KNOWN_LEVELS)}; "
                f"received {value!r}"
            )
        return normalized

    @property
    def effective_level(self) -> str:
        return self.debug_log_level if self.enable_debug_logging else "WARNING"

    @classmethod
    def load_from_env(cls) -> dict[str, Any]:
        """Load logging config from environment variables."""
        config: dict[str, Any] = {}

        if enabled := os.getenv("TEXTHOUND_LOGGING_ENABLE_DEBUG_LOGGING"):
            config["enable_debug_logging"] = enabled.lower() in ("true", "1", "yes")

        if level := os.getenv("TEXTHOUND_LOGGING_DEBUG_LOG_LEVEL"):
            config["debug_log_level"] = level

        return config

    @classmethod
    def extract_cli_overrides(cls, args: Any) -> dict[str, Any]:
        """Map --verbose/--debug onto logging settings."""
        overrides: dict[str, Any] = {}

        if getattr(args, "debug", False):
            overrides["enable_debug_logging"] = True
            overrides["debug_log_level"] = "DEBUG"
        elif getattr(args, "verbose", False):
            overrides["enable_debug_logging"] = True
            overrides["debug_log_level"] = "INFO"

        return overrides
