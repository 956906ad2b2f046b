"""Tests for stylegate.config: defaults, env vars, and stylegate.json loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from stylegate.config import (
    DEFAULT_SYNC_MATCH,
    DEFAULT_SYNC_URL,
    Config,
    find_config_file,
    load_config,
)
from stylegate.errors import ConfigError
from stylegate.io_utils import write_text


def _write_config(directory: Path, data: object) -> Path:
    path = directory / "stylegate.json"
    write_text(path, json.dumps(data))
    return path


class TestConfigDefaults:
    def test_defaults(self):
        cfg = Config(cwd="/proj")
        assert cfg.sourcemaps is True
        assert cfg.sync_url == DEFAULT_SYNC_URL
        assert cfg.sync_match == DEFAULT_SYNC_MATCH
        assert cfg.tasks == {}

    def test_mutable_defaults_are_per_instance(self):
        a, b = Config(cwd="/a"), Config(cwd="/b")
        a.tasks["app"] = {"src": "a.scss"}
        assert b.tasks == {}

    def test_cwd_defaults_to_env_then_process_cwd(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STYLEGATE_CWD", str(tmp_path))
        assert Config().cwd == str(tmp_path)

        monkeypatch.delenv("STYLEGATE_CWD")
        monkeypatch.chdir(tmp_path)
        assert Path(Config().cwd) == Path.cwd()

    @pytest.mark.parametrize(("raw", "expected"), [("0", False), ("false", False), ("1", True), ("yes", True)])
    def test_sourcemaps_env_flag(self, monkeypatch, raw, expected):
        monkeypatch.setenv("STYLEGATE_SOURCEMAPS", raw)
        assert Config(cwd="/p").sourcemaps is expected

    def test_sync_url_env(self, monkeypatch):
        monkeypatch.setenv("STYLEGATE_SYNC_URL", "http://127.0.0.1:4000")
        assert Config(cwd="/p").sync_url == "http://127.0.0.1:4000"


class TestLoadConfig:
    def test_reads_file_and_resolves_cwd(self, tmp_path: Path):
        path = _write_config(
            tmp_path,
            {
                "cwd": "site",
                "sourcemaps": False,
                "sass": {"settings": {"sass": {"precision": 10}}},
                "tasks": {"app": {"src": "scss/*.scss", "dst": "css"}},
            },
        )
        cfg = load_config(path)

        assert cfg.cwd == str((tmp_path / "site").resolve())
        assert cfg.sourcemaps is False
        assert cfg.sass_settings == {"sass": {"precision": 10}}
        assert cfg.tasks == {"app": {"src": "scss/*.scss", "dst": "css"}}
        assert cfg.config_file == str(path)

    def test_cwd_defaults_to_file_directory(self, tmp_path: Path):
        cfg = load_config(_write_config(tmp_path, {}))
        assert cfg.cwd == str(tmp_path.resolve())

    def test_overrides_win(self, tmp_path: Path):
        cfg = load_config(_write_config(tmp_path, {"sync_url": "http://a"}), sync_url="http://b", poll_interval=None)
        assert cfg.sync_url == "http://b"
        assert cfg.poll_interval == 0.5

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "stylegate.json"
        write_text(path, "{not json")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_config(path)

    @pytest.mark.parametrize("data", [[], {"tasks": []}, {"tasks": {"app": "scss"}}, {"sass": 3}])
    def test_invalid_shapes(self, tmp_path: Path, data):
        with pytest.raises(ConfigError):
            load_config(_write_config(tmp_path, data))

    def test_search_upwards(self, tmp_path: Path, monkeypatch):
        path = _write_config(tmp_path, {"tasks": {}})
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == path.resolve()

        monkeypatch.chdir(nested)
        assert load_config().config_file == str(path.resolve())

    def test_no_file_gives_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("stylegate.config.find_config_file", lambda start=None: None)
        cfg = load_config()
        assert cfg.tasks == {}
        assert cfg.config_file == ""
