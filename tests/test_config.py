"""Tests for configuration loading and saving."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml

from cache_cleanup.config import CleanupConfig, parse_bool, query_darwin_cache_dir


class TestParseBool:
    """Tests for boolean parsing helper."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, True),
            (False, False),
            ("true", True),
            ("TRUE", True),
            ("yes", True),
            ("on", True),
            ("1", True),
            ("false", False),
            ("no", False),
            ("off", False),
            ("0", False),
            ("random", False),
            ("", False),
        ],
    )
    def test_parse_bool_values(self, value: bool | str, expected: bool) -> None:
        """Test parsing various boolean representations."""
        assert parse_bool(value, False) == expected

    def test_parse_bool_none_uses_default(self) -> None:
        """Test that None returns the default value."""
        assert parse_bool(None, True) is True
        assert parse_bool(None, False) is False

    def test_parse_bool_integer(self) -> None:
        """Test parsing integer values."""
        assert parse_bool(1, False) is True
        assert parse_bool(0, True) is False


class TestCleanupConfigDefaults:
    """Tests for default configuration values."""

    def test_default_values(self) -> None:
        """Test that defaults are sensible."""
        config = CleanupConfig()

        assert config.home == Path.home()
        assert config.allow_unsafe_paths is False
        assert config.modules_disabled == []
        assert config.extra_allowed_roots == []
        assert config.log_file is None
        assert config.log_level == "INFO"

    def test_user_cache_dir_defaults_under_home(self, tmp_path: Path) -> None:
        """Test that the user cache dir follows the configured home."""
        config = CleanupConfig(home=tmp_path)
        assert config.user_cache_dir == tmp_path / "Library/Caches"

    def test_user_cache_dir_override(self, tmp_path: Path) -> None:
        """Test that an explicit cache dir wins over the home default."""
        config = CleanupConfig(home=tmp_path, cache_dir=tmp_path / "caches")
        assert config.user_cache_dir == tmp_path / "caches"


class TestDarwinCacheDir:
    """Tests for the lazily queried Darwin cache root."""

    def test_query_parses_getconf_output(self) -> None:
        """Test that getconf output is returned without the trailing slash."""
        completed = MagicMock(returncode=0, stdout="/var/folders/ab/xyz/C/\n")
        with patch("cache_cleanup.config.subprocess.run", return_value=completed):
            assert query_darwin_cache_dir() == Path("/var/folders/ab/xyz/C")

    def test_query_failure_returns_none(self) -> None:
        """Test that a failing getconf yields None."""
        completed = MagicMock(returncode=1, stdout="")
        with patch("cache_cleanup.config.subprocess.run", return_value=completed):
            assert query_darwin_cache_dir() is None

    def test_query_missing_getconf_returns_none(self) -> None:
        """Test that a missing getconf binary yields None."""
        with patch("cache_cleanup.config.subprocess.run", side_effect=FileNotFoundError):
            assert query_darwin_cache_dir() is None

    def test_query_subprocess_error_returns_none(self) -> None:
        with patch("cache_cleanup.config.subprocess.run", side_effect=subprocess.SubprocessError):
            assert query_darwin_cache_dir() is None

    def test_queried_once(self) -> None:
        """Test that getconf is queried only on first use."""
        config = CleanupConfig()
        with patch("cache_cleanup.config.query_darwin_cache_dir", return_value=None) as query:
            assert config.get_darwin_cache_dir() is None
            assert config.get_darwin_cache_dir() is None
        query.assert_called_once()

    def test_explicit_value_not_queried(self, tmp_path: Path) -> None:
        """Test that a configured root skips getconf."""
        config = CleanupConfig(darwin_cache_dir=tmp_path)
        with patch("cache_cleanup.config.query_darwin_cache_dir") as query:
            assert config.get_darwin_cache_dir() == tmp_path
        query.assert_not_called()


class TestConfigLoad:
    """Tests for loading configuration from file."""

    def test_load_nonexistent_file(self, tmp_path: Path) -> None:
        """Test loading returns defaults when file doesn't exist."""
        config = CleanupConfig.load(tmp_path / "nonexistent.yaml")

        assert config.allow_unsafe_paths is False
        assert config.log_level == "INFO"

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test loading empty file returns defaults."""
        config_path = tmp_path / "empty.yaml"
        config_path.touch()

        config = CleanupConfig.load(config_path)

        assert config.modules_disabled == []

    def test_load_full_config(self, tmp_path: Path) -> None:
        """Test loading full configuration."""
        config_path = tmp_path / "full.yaml"
        data = {
            "cache_dir": "/tmp/caches",
            "darwin_cache_dir": "/var/folders/xy/abc/C",
            "extra_allowed_roots": ["/opt/cache", "~/scratch"],
            "allow_unsafe_paths": "yes",
            "modules_disabled": ["docker", "system"],
            "logging": {
                "file": "~/logs/cleanup.log",
                "level": "debug",
            },
        }
        with config_path.open("w") as f:
            yaml.dump(data, f)

        config = CleanupConfig.load(config_path)

        assert config.cache_dir == Path("/tmp/caches")
        assert config.darwin_cache_dir == Path("/var/folders/xy/abc/C")
        assert config.extra_allowed_roots == [Path("/opt/cache"), Path.home() / "scratch"]
        assert config.allow_unsafe_paths is True
        assert config.modules_disabled == ["docker", "system"]
        assert config.log_file == Path.home() / "logs/cleanup.log"
        assert config.log_level == "DEBUG"

    def test_load_invalid_yaml_raises(self, tmp_path: Path) -> None:
        """Test that malformed YAML raises ValueError with context."""
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("modules_disabled: [\n  unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            CleanupConfig.load(config_path)

    def test_load_non_mapping_raises(self, tmp_path: Path) -> None:
        """Test that a top-level list is rejected."""
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- docker\n- brew\n")

        with pytest.raises(ValueError, match="expected a mapping"):
            CleanupConfig.load(config_path)

    def test_load_invalid_log_level_raises(self, tmp_path: Path) -> None:
        """Test that an unknown log level is rejected."""
        config_path = tmp_path / "level.yaml"
        config_path.write_text("logging:\n  level: LOUD\n")

        with pytest.raises(ValueError, match="Invalid log_level"):
            CleanupConfig.load(config_path)

    def test_load_scalar_logging_section_raises(self, tmp_path: Path) -> None:
        """Test that a logging section which is not a mapping is rejected."""
        config_path = tmp_path / "logging.yaml"
        config_path.write_text("logging: yes\n")

        with pytest.raises(ValueError, match="Invalid logging section"):
            CleanupConfig.load(config_path)

    @pytest.mark.parametrize(
        "text,key",
        [
            ("extra_allowed_roots: /tmp\n", "extra_allowed_roots"),
            ("modules_disabled: docker\n", "modules_disabled"),
            ("modules_disabled:\n  name: docker\n", "modules_disabled"),
        ],
    )
    def test_load_scalar_list_raises(self, tmp_path: Path, text: str, key: str) -> None:
        """Test that list settings given as a single value are rejected."""
        config_path = tmp_path / "lists.yaml"
        config_path.write_text(text)

        with pytest.raises(ValueError, match=f"Invalid {key}"):
            CleanupConfig.load(config_path)

    def test_load_empty_list_values(self, tmp_path: Path) -> None:
        """Test that keys present with no value fall back to empty lists."""
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("extra_allowed_roots:\nmodules_disabled:\nlogging:\n")

        config = CleanupConfig.load(config_path)

        assert config.extra_allowed_roots == []
        assert config.modules_disabled == []
        assert config.log_level == "INFO"

    def test_load_uses_default_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Test that load() uses the default path when no path is specified."""
        custom_default = tmp_path / "default_config.yaml"
        monkeypatch.setattr(CleanupConfig, "get_config_path", classmethod(lambda cls: custom_default))
        custom_default.write_text("modules_disabled:\n  - go\n")

        config = CleanupConfig.load()

        assert config.modules_disabled == ["go"]


class TestConfigSave:
    """Tests for saving configuration to file."""

    def test_save_creates_directory(self, tmp_path: Path) -> None:
        """Test that save creates parent directories."""
        config_path = tmp_path / "subdir" / "config.yaml"
        CleanupConfig(home=tmp_path).save(config_path)

        assert config_path.exists()

    def test_save_and_load_roundtrip(self, tmp_path: Path) -> None:
        """Test that saved config can be loaded identically."""
        config_path = tmp_path / "roundtrip.yaml"

        original = CleanupConfig(home=tmp_path)
        original.allow_unsafe_paths = True
        original.modules_disabled = ["docker"]
        original.extra_allowed_roots = [tmp_path / "scratch"]
        original.log_file = tmp_path / "run.log"
        original.log_level = "DEBUG"

        original.save(config_path)
        loaded = CleanupConfig.load(config_path)

        assert loaded.cache_dir == tmp_path / "Library/Caches"
        assert loaded.allow_unsafe_paths is True
        assert loaded.modules_disabled == ["docker"]
        assert loaded.extra_allowed_roots == [tmp_path / "scratch"]
        assert loaded.log_file == tmp_path / "run.log"
        assert loaded.log_level == "DEBUG"

    def test_get_config_path(self) -> None:
        """Test default config path location."""
        expected = Path.home() / "Library/Application Support/cache-cleanup/config.yaml"
        assert CleanupConfig.get_config_path() == expected
