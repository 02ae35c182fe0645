"""Configuration for piecewise.

Read from `piecewise.yaml`:

    root: templates        # template directory, relative to this file
    extension: .pwp        # template file suffix
    default_filter: html   # filter for {{ @x }}; null to disable
    data_variable: data    # name of the data parameter in generated code
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from piecewise.compiler.compiler import is_data_variable
from piecewise.exceptions import ConfigError

CONFIG_FILENAME = "piecewise.yaml"


class PiecewiseConfig(BaseModel):
    """Loader and compiler settings."""

    model_config = {"extra": "forbid"}

    root: Path = Field(default=Path("templates"), description="Template directory")
    extension: str = Field(default=".pwp", description="Template file suffix")
    default_filter: Optional[str] = Field(
        default="html", description="Filter applied when a variable has none"
    )
    data_variable: str = Field(
        default="data", description="Data parameter name in generated code"
    )

    @field_validator("extension")
    @classmethod
    def normalize_extension(cls, value: str) -> str:
        if value and not value.startswith("."):
            return "." + value
        return value

    @field_validator("default_filter")
    @classmethod
    def empty_filter_means_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("data_variable")
    @classmethod
    def check_data_variable(cls, value: str) -> str:
        if not is_data_variable(value):
            raise ValueError(f"not a usable Python identifier: {value!r}")
        return value

    @property
    def default_filters(self) -> tuple[str, ...]:
        return (self.default_filter,) if self.default_filter else ()

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "PiecewiseConfig":
        """Load config from `path`, or return defaults when no path is given."""
        if path is None:
            return cls()
        return load_config(path)


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find piecewise.yaml in `start` (default: cwd) or its parents."""
    cwd = (start or Path.cwd()).resolve()
    for parent in [cwd] + list(cwd.parents):
        candidate = parent / CONFIG_FILENAME
        if candidate.exists():
            return candidate
    return None


def load_config(path: Path) -> PiecewiseConfig:
    """Load and validate a config file.

    A relative `root` is resolved against the directory of the file.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")

    try:
        config = PiecewiseConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}:\n{e}") from e

    if not config.root.is_absolute():
        config = config.model_copy(update={"root": path.parent / config.root})
    return config
