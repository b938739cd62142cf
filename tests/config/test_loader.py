"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and validation
- get_result_path() function
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from clue.config.loader import (
    GLOBAL_CONFIG_PATH,
    _deep_merge,
    _load_yaml,
    get_result_path,
    load_config,
)
from clue.config.models import LoggingConfig
from clue.core.errors import ConfigError, ErrorCode


def _write_repo_config(root: Path, text: str) -> None:
    clue_dir = root / ".clue"
    clue_dir.mkdir(exist_ok=True)
    (clue_dir / "config.yaml").write_text(text)


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        """Returns empty dict when file doesn't exist."""
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        """Loads valid YAML content."""
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("extractor:\n  backend: typeorm\n")

        assert _load_yaml(yaml_file) == {"extractor": {"backend": "typeorm"}}

    def test_returns_empty_for_yaml_null(self, tmp_path: Path) -> None:
        """Returns empty dict for YAML containing null."""
        yaml_file = tmp_path / "null.yaml"
        yaml_file.write_text("null\n")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid YAML syntax."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("extractor:\n  exclude:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError) as exc_info:
            _load_yaml(yaml_file)
        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        """Override values replace base values."""
        assert _deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_merge(self) -> None:
        """Nested dicts are merged recursively."""
        base = {"extractor": {"backend": "django", "batch_size": 10}}
        override = {"extractor": {"backend": "typeorm"}}

        assert _deep_merge(base, override) == {
            "extractor": {"backend": "typeorm", "batch_size": 10}
        }

    def test_override_replaces_non_dict(self) -> None:
        """Non-dict override replaces dict base."""
        base: dict[str, Any] = {"a": {"nested": 1}}
        override: dict[str, Any] = {"a": "simple"}

        assert _deep_merge(base, override) == {"a": "simple"}

    def test_does_not_mutate_base(self) -> None:
        """Base dict is not mutated."""
        base = {"a": 1}
        _deep_merge(base, {"b": 2})

        assert base == {"a": 1}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_returns_default_config_when_no_files(self, tmp_path: Path) -> None:
        """Returns default config when no config files exist."""
        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)

        assert config.logging.level == "INFO"
        assert config.extractor.backend == "django"
        assert config.extractor.batch_size == 50
        assert config.annotate.double_check is True

    def test_loads_repo_config(self, tmp_path: Path) -> None:
        """Loads config from repo .clue directory."""
        _write_repo_config(tmp_path, "extractor:\n  backend: typeorm\n  batch_size: 20\n")

        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)

        assert config.extractor.backend == "typeorm"
        assert config.extractor.batch_size == 20

    def test_repo_config_overrides_global(self, tmp_path: Path) -> None:
        """Repo YAML wins over global YAML, key by key."""
        global_file = tmp_path / "global.yaml"
        global_file.write_text("extractor:\n  python: /opt/py/bin/python\n  batch_size: 5\n")
        _write_repo_config(tmp_path, "extractor:\n  batch_size: 7\n")

        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config(tmp_path)

        assert config.extractor.python == "/opt/py/bin/python"
        assert config.extractor.batch_size == 7

    def test_env_vars_override_yaml(self, tmp_path: Path) -> None:
        """Environment variables override YAML config."""
        _write_repo_config(tmp_path, "logging:\n  level: INFO\n")

        with (
            patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            patch.dict(os.environ, {"CLUE__LOGGING__LEVEL": "WARNING"}),
        ):
            config = load_config(tmp_path)

        assert config.logging.level == "WARNING"

    def test_kwargs_override_all(self, tmp_path: Path) -> None:
        """Keyword arguments override everything."""
        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, logging=LoggingConfig(level="ERROR"))

        assert config.logging.level == "ERROR"

    def test_raises_config_error_for_invalid_value(self, tmp_path: Path) -> None:
        """Raises ConfigError for invalid config values."""
        _write_repo_config(tmp_path, "extractor:\n  batch_size: 0\n")

        with (
            patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE

    def test_custom_backend_requires_command(self, tmp_path: Path) -> None:
        """The custom backend cannot run without a command template."""
        _write_repo_config(tmp_path, "extractor:\n  backend: custom\n")

        with (
            patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"),
            pytest.raises(ConfigError) as exc_info,
        ):
            load_config(tmp_path)
        assert exc_info.value.details == {"field": "extractor.command"}


class TestGetResultPath:
    """Tests for get_result_path function."""

    def test_default_path_uses_backend_name(self, tmp_path: Path) -> None:
        """Results live in .clue/{backend}.json by default."""
        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path, extractor={"backend": "typeorm"})

        assert get_result_path(tmp_path, config) == tmp_path / ".clue" / "typeorm.json"

    def test_respects_custom_result_dir(self, tmp_path: Path) -> None:
        """Respects storage settings in config."""
        _write_repo_config(tmp_path, "storage:\n  result_dir: out\n  result_file: model.json\n")

        with patch("clue.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
            config = load_config(tmp_path)

        assert get_result_path(tmp_path, config) == tmp_path / "out" / "model.json"


class TestGlobalConfigPath:
    """Tests for GLOBAL_CONFIG_PATH constant."""

    def test_is_in_user_config(self) -> None:
        """Path is in user config directory."""
        assert isinstance(GLOBAL_CONFIG_PATH, Path)
        assert "clue" in str(GLOBAL_CONFIG_PATH)
