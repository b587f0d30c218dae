"""Tests for config/loader.py module.

Covers:
- _load_yaml() function
- _deep_merge() function
- load_config() precedence and error handling
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from incrcov.config.loader import _deep_merge, _load_yaml, load_config
from incrcov.core.errors import ConfigError, ErrorCode


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Iterator[None]:
    """Keep the user's global config out of the tests."""
    with patch("incrcov.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "global-missing.yaml"):
        yield


class TestLoadYaml:
    """Tests for _load_yaml function."""

    def test_returns_empty_dict_for_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("reporting:\n  dir: out\n")

        assert _load_yaml(yaml_file) == {"reporting": {"dir": "out"}}

    def test_returns_empty_for_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert _load_yaml(yaml_file) == {}

    def test_raises_config_error_for_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("reporting:\n  dir:\n    - invalid: [unclosed")

        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_raises_config_error_for_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    """Tests for _deep_merge function."""

    def test_override_wins(self) -> None:
        assert _deep_merge({"a": 1}, {"a": 2}) == {"a": 2}

    def test_nested_merge(self) -> None:
        base = {"reporting": {"dir": "a", "reports": ["lcov"]}}
        override = {"reporting": {"dir": "b"}}

        assert _deep_merge(base, override) == {"reporting": {"dir": "b", "reports": ["lcov"]}}

    def test_base_not_mutated(self) -> None:
        base = {"reporting": {"dir": "a"}}
        _deep_merge(base, {"reporting": {"dir": "b"}})

        assert base == {"reporting": {"dir": "a"}}


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)

        assert config.reporting.dir == "coverage"
        assert config.reporting.reports == ["lcov"]
        assert config.logging.level == "INFO"
        assert config.verbose is False

    def test_project_yaml(self, tmp_path: Path) -> None:
        (tmp_path / ".incrcov.yaml").write_text(
            "reporting:\n  dir: build/cov\n  reports: [html, json]\n  watermarks:\n    lines: [60, 90]\n"
        )

        config = load_config(tmp_path)

        assert config.reporting.dir == "build/cov"
        assert config.reporting.reports == ["html", "json"]
        assert config.reporting.watermarks.lines == (60.0, 90.0)

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / ".incrcov.yaml").write_text("reporting:\n  dir: from-yaml\n")
        monkeypatch.setenv("INCRCOV__REPORTING__DIR", "from-env")

        assert load_config(tmp_path).reporting.dir == "from-env"

    def test_kwargs_override_everything(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INCRCOV__VERBOSE", "false")

        assert load_config(tmp_path, verbose=True).verbose is True

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.yaml"
        path.write_text("verbose: true\n")

        assert load_config(config_path=path).verbose is True

    def test_missing_explicit_config_path(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(config_path=tmp_path / "missing.yaml")

        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / ".incrcov.yaml").write_text("reporting:\n  watermarks:\n    statements: [90, 10]\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
