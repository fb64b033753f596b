"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence: kwargs > env > project yaml > global yaml > defaults
"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from rpclens.config.loader import GLOBAL_CONFIG_PATH, _deep_merge, _load_yaml, load_config
from rpclens.core.errors import ConfigError, ErrorCode


def _write_project_config(project: Path, body: str) -> None:
    config_dir = project / ".rpclens"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.yaml").write_text(body)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("cache:\n  capacity: 5\n")
        assert _load_yaml(yaml_file) == {"cache": {"capacity": 5}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_on_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("cache: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_raises_config_error_on_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_nested_override(self) -> None:
        base = {"cache": {"capacity": 1}, "scanner": {"client_name": "a"}}
        override = {"cache": {"capacity": 2}}
        assert _deep_merge(base, override) == {"cache": {"capacity": 2}, "scanner": {"client_name": "a"}}

    def test_does_not_mutate_base(self) -> None:
        base = {"cache": {"capacity": 1}}
        _deep_merge(base, {"cache": {"capacity": 2}})
        assert base == {"cache": {"capacity": 1}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults_without_files(self, tmp_path: Path) -> None:
        with patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)
        assert config.cache.capacity == 100
        assert config.scanner.client_name == "trpc"

    def test_project_yaml_overrides_global(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("cache:\n  capacity: 10\nscanner:\n  client_name: api\n")
        _write_project_config(tmp_path, "cache:\n  capacity: 20\n")

        with patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.cache.capacity == 20
        assert config.scanner.client_name == "api"

    def test_env_overrides_yaml(self, tmp_path: Path) -> None:
        _write_project_config(tmp_path, "cache:\n  capacity: 20\n")
        with (
            patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"RPCLENS__CACHE__CAPACITY": "30"}),
        ):
            config = load_config(tmp_path)
        assert config.cache.capacity == 30

    def test_kwargs_override_env(self, tmp_path: Path) -> None:
        with (
            patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"RPCLENS__DIAGNOSTICS__SOURCE": "env"}),
        ):
            config = load_config(tmp_path, diagnostics={"source": "kwarg"})
        assert config.diagnostics.source == "kwarg"

    def test_explicit_config_file_replaces_project_yaml(self, tmp_path: Path) -> None:
        _write_project_config(tmp_path, "cache:\n  capacity: 20\n")
        explicit = tmp_path / "alt.yaml"
        explicit.write_text("cache:\n  capacity: 7\n")
        with patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, config_file=explicit)
        assert config.cache.capacity == 7

    def test_missing_explicit_config_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path, config_file=tmp_path / "missing.yaml")
        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value_raises_config_error(self, tmp_path: Path) -> None:
        _write_project_config(tmp_path, "cache:\n  capacity: 0\n")
        with (
            patch("rpclens.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert "cache.capacity" in exc_info.value.message


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_under_user_config(self) -> None:
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert GLOBAL_CONFIG_PATH.parts[-2:] == ("rpclens", "config.yaml")
