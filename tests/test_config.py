"""Unit tests for configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from task_board.config import Config, load_config
from task_board.exceptions import ConfigError
from task_board.filters import ViewFilter


def write_config(tmp_path: Path, payload) -> Path:
    path = tmp_path / "config.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestConfigFromDict:
    def test_defaults(self):
        config = Config.from_dict({})
        assert config.data_dir == Path("~/.local/share/task-board").expanduser().resolve()
        assert config.log_dir == config.data_dir / "logs"
        assert config.log_file == config.log_dir / "task-board.log"
        assert config.default_view is ViewFilter.ALL
        assert config.show_descriptions is True

    def test_explicit_values(self, tmp_path):
        config = Config.from_dict(
            {
                "data_dir": str(tmp_path / "data"),
                "log_dir": str(tmp_path / "logs"),
                "export_dir": str(tmp_path / "exports"),
                "default_view": "overdue",
                "show_descriptions": False,
            }
        )
        assert config.data_dir == (tmp_path / "data").resolve()
        assert config.log_dir == (tmp_path / "logs").resolve()
        assert config.export_dir == (tmp_path / "exports").resolve()
        assert config.default_view is ViewFilter.OVERDUE
        assert config.show_descriptions is False

    def test_invalid_view(self):
        with pytest.raises(ConfigError, match="default_view"):
            Config.from_dict({"default_view": "someday"})

    def test_invalid_show_descriptions(self):
        with pytest.raises(ConfigError, match="show_descriptions"):
            Config.from_dict({"show_descriptions": "yes"})

    @pytest.mark.parametrize("key", ["data_dir", "log_dir", "export_dir"])
    def test_non_string_path(self, key):
        with pytest.raises(ConfigError, match=key):
            Config.from_dict({key: 5})

    def test_not_an_object(self):
        with pytest.raises(ConfigError):
            Config.from_dict(["data_dir"])


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.json") == Config.from_dict({})

    def test_reads_file(self, tmp_path):
        path = write_config(tmp_path, {"data_dir": str(tmp_path), "default_view": "today"})
        config = load_config(path)
        assert config.data_dir == tmp_path.resolve()
        assert config.default_view is ViewFilter.TODAY

    def test_unparsable_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(ConfigError, match="Cannot read config"):
            load_config(path)

    def test_non_utf8_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_bytes(b"\xff\xfe{}")
        with pytest.raises(ConfigError, match="Cannot read config"):
            load_config(path)
