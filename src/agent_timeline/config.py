"""Settings for timeline derivation, optionally loaded from TOML."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

LOCAL_CONFIG_NAME = Path("agent-timeline.toml")
CONFIG_TABLE = "timeline"


class ConfigError(RuntimeError):
    pass


class TimelineSettings(BaseModel):
    """Knobs for classification, correlation and previews."""

    base_timestamp: int = 0
    prompt_offset: int = Field(default=1, gt=0)
    max_preview_lines: int = Field(default=5, ge=1)
    bash_summary_width: int = Field(default=50, ge=1)
    correlation: Literal["positional", "tool_use_id"] = "positional"


DEFAULT_SETTINGS = TimelineSettings()


def _read_config(cfg_path: Path) -> dict:
    try:
        raw = cfg_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Missing config file {cfg_path}.") from None
    except OSError as e:
        raise ConfigError(f"Failed to read config file {cfg_path}: {e}") from e
    try:
        return tomllib.loads(raw)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed TOML in {cfg_path}: {e}") from e


def load_settings(path: Path | None = None) -> TimelineSettings:
    """Load settings from ``path``, the working directory, or defaults.

    Only the ``[timeline]`` table is read; an explicit path must exist.
    """
    if path is None:
        candidate = Path.cwd() / LOCAL_CONFIG_NAME
        if not candidate.is_file():
            return TimelineSettings()
        path = candidate

    data = _read_config(path)
    table = data.get(CONFIG_TABLE, {})
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid [{CONFIG_TABLE}] in {path}; expected a table.")
    try:
        return TimelineSettings.model_validate(table)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e
