from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

DEFAULT_CONFIG_FILE = "gostackparse.toml"


class OutputConfig(BaseModel):
    """JSON output configuration for the command line tool."""

    indent: int = 2


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value!r}")
        return level


class StackParseConfig(BaseModel):
    """Top-level gostackparse configuration."""

    output: OutputConfig = OutputConfig()
    logging: LoggingConfig = LoggingConfig()
    verbose: bool = False

    @model_validator(mode="after")
    def _verbose_implies_debug(self) -> "StackParseConfig":
        """verbose=True lowers the log level to DEBUG."""
        if self.verbose:
            self.logging = LoggingConfig(level="DEBUG")
        return self


def load_config(path: Optional[str] = None) -> StackParseConfig:
    """Load configuration from a gostackparse.toml file, falling back to defaults.

    Uses ``tomllib`` on Python 3.11+ and ``tomli`` on older versions.
    """

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        import tomli as tomllib  # type: ignore[no-redef]

    config_path = Path(path) if path else Path(DEFAULT_CONFIG_FILE)

    if not config_path.exists():
        return StackParseConfig()

    with open(config_path, "rb") as f:
        raw = tomllib.load(f)

    return StackParseConfig(**raw)
