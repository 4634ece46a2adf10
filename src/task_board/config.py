"""Runtime configuration loaded from config.json."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError
from .filters import ViewFilter, parse_view_filter

DEFAULT_CONFIG_PATH = Path("~/.config/task-board/config.json")
DEFAULT_DATA_DIR = "~/.local/share/task-board"


def _expand(value: str | os.PathLike) -> Path:
    return Path(os.path.expanduser(value)).resolve()


def _path_setting(payload: dict, key: str, default: str | None) -> Path | None:
    value = payload.get(key)
    if value is None or value == "":
        value = default
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a path string, got {value!r}")
    return _expand(value)


@dataclass(frozen=True)
class Config:
    """Runtime configuration for the board CLI."""

    data_dir: Path
    log_dir: Path
    export_dir: Path
    default_view: ViewFilter = ViewFilter.ALL
    show_descriptions: bool = True

    @property
    def log_file(self) -> Path:
        return self.log_dir / "task-board.log"

    @classmethod
    def from_dict(cls, payload: dict) -> Config:
        """Create a Config object from a raw dictionary.

        Raises:
            ConfigError: If a value has the wrong type or is not allowed
        """
        if not isinstance(payload, dict):
            raise ConfigError("config must be a JSON object")

        data_dir = _path_setting(payload, "data_dir", DEFAULT_DATA_DIR)
        log_dir = _path_setting(payload, "log_dir", None) or data_dir / "logs"
        export_dir = _path_setting(payload, "export_dir", ".")

        try:
            default_view = parse_view_filter(payload.get("default_view", "all"))
        except ValueError as err:
            raise ConfigError(f"default_view: {err}") from err

        show_descriptions = payload.get("show_descriptions", True)
        if not isinstance(show_descriptions, bool):
            raise ConfigError(
                f"show_descriptions must be true or false, got {show_descriptions!r}"
            )

        return cls(
            data_dir=data_dir,
            log_dir=log_dir,
            export_dir=export_dir,
            default_view=default_view,
            show_descriptions=show_descriptions,
        )


def load_config(path: Path | None = None) -> Config:
    """Load configuration from the provided path; a missing file means defaults."""
    path = _expand(path or DEFAULT_CONFIG_PATH)
    if not path.exists():
        return Config.from_dict({})
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
        raise ConfigError(f"Cannot read config {path}: {err}") from err
    return Config.from_dict(data)
