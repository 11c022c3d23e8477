"""
Top-level configuration for TextHound.

Sections are merged from several sources, later sources winning:
1. Default values
2. JSON config file (``--config``, TEXTHOUND_CONFIG_FILE, or ./.texthound.json)
3. Environment variables (TEXTHOUND_<SECTION>_*)
4. CLI arguments
"""

import argparse
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from .display_config import DisplayConfig
from .logging_config import LoggingConfig
from .monitor_config import MonitorConfig

DEFAULT_CONFIG_FILENAME = ".texthound.json"


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


class Config(BaseModel):
    """Aggregated configuration for the monitor, display and logging."""

    monitor: MonitorConfig = Field(default_factory=MonitorConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(
        cls,
        args: argparse.Namespace | None = None,
        config_file: Path | None = None,
    ) -> "Config":
        """Build a validated Config from file, environment and CLI sources.

        Raises:
            ConfigError: If the config file cannot be parsed or a value is invalid
        """
        if config_file is None and args is not None:
            config_file = getattr(args, "config", None)
        file_data = _read_config_file(_resolve_config_file(config_file))

        sections: dict[str, tuple[type[Any], dict[str, Any]]] = {
            "monitor": (MonitorConfig, {}),
            "display": (DisplayConfig, {}),
            "logging": (LoggingConfig, {}),
        }
        built: dict[str, Any] = {}
        for name, (section_cls, values) in sections.items():
            raw = file_data.get(name, {})
            if not isinstance(raw, dict):
                raise ConfigError(f"'{name}' section must be a mapping")
            values.update(raw)
            try:
                values.update(section_cls.load_from_env())
                if args is not None:
                    values.update(section_cls.extract_cli_overrides(args))
                built[name] = section_cls(**values)
            except ValidationError as exc:
                raise ConfigError(f"Invalid {name} configuration: {exc}") from exc
            except ValueError as exc:
                raise ConfigError(f"Invalid {name} environment value: {exc}") from exc

        return cls(**built)

    def __repr__(self) -> str:
        return (
            f"Config(monitor={self.monitor!r}, "
            f"display={self.display!r}, logging={self.logging!r})"
        )


def _resolve_config_file(config_file: Path | None) -> Path | None:
    if config_file is not None:
        path = Path(config_file).expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        return path

    if env_path := os.getenv("TEXTHOUND_CONFIG_FILE"):
        path = Path(env_path).expanduser()
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")
        return path

    default_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    if default_path.exists():
        return default_path
    return None


def _read_config_file(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to read configuration file {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    logger.debug(f"Loaded configuration file {path}")
    return data
