"""Configuration for nmclean."""

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from nmclean.errors import ConfigError

CONFIG_DIR = Path(os.path.expanduser("~/.nmclean"))
CONFIG_FILE = CONFIG_DIR / "config.json"


class CleanerConfig(BaseModel):
    """Settings for a single run."""

    target_name: str = Field("node_modules", description="Directory name to search for")
    root: Path = Field(default_factory=Path.cwd, description="Directory to scan")
    max_workers: int = Field(8, ge=1, description="Threads used for sizing and deleting")
    dry_run: bool = Field(False, description="Report what would be freed without deleting")
    confirm_delete: bool = Field(True, description="Ask before deleting the selection")
    exclude: list[str] = Field(default_factory=lambda: [".git"], description="Directory names never walked into")

    @field_validator("target_name")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        if not value or "/" in value or os.sep in value or value in (".", ".."):
            raise ValueError(f"target name must be a single directory name, got {value!r}")
        return value

    @field_validator("root")
    @classmethod
    def _absolute_root(cls, value: Path) -> Path:
        return Path(os.path.abspath(os.path.expanduser(str(value))))


def _load_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    except OSError:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def load_config(path: Path | None = None, **overrides: Any) -> CleanerConfig:
    """
    Build the run configuration.

    Values come from the JSON config file (if present) and are then
    overridden by any non-None keyword arguments, typically CLI options.

    Args:
        path: Config file to read (defaults to ~/.nmclean/config.json)
        **overrides: Explicit values that win over the file

    Returns:
        Validated CleanerConfig

    Raises:
        ConfigError: If the file or a value is invalid
    """
    data = _load_file(path or CONFIG_FILE)
    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CleanerConfig(**data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
