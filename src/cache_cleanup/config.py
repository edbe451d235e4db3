"""Configuration management for the cache cleanup tools."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

_TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})


def parse_bool(value: Any, default: bool) -> bool:
    """Parse a loosely typed boolean from YAML.

    Args:
        value: Raw value (bool, int, str or None).
        default: Value returned when ``value`` is None.

    Returns:
        Parsed boolean.

    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    return str(value).strip().lower() in _TRUE_STRINGS


def _expand(path: str | Path) -> Path:
    return Path(os.path.expanduser(str(path)))


def _as_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data[key] or []
    if not isinstance(value, list):
        raise ValueError(f"Invalid {key} {value!r}, expected a list")
    return value


def query_darwin_cache_dir() -> Path | None:
    """Ask the OS for the per-user Darwin cache root.

    Returns:
        The ``DARWIN_USER_CACHE_DIR`` path, or None when unavailable.

    """
    try:
        result = subprocess.run(
            ["getconf", "DARWIN_USER_CACHE_DIR"],
            capture_output=True,
            text=True,
            check=False,
        )
    except (subprocess.SubprocessError, OSError):
        return None

    value = result.stdout.strip()
    if result.returncode != 0 or not value:
        return None
    return Path(value.rstrip("/"))


@dataclass
class CleanupConfig:
    """Configuration shared by the browser and developer cleaners."""

    # Home directory that ``~`` patterns expand against
    home: Path = field(default_factory=Path.home)

    # Standard user cache directory; relative tokens resolve here
    cache_dir: Path | None = None

    # Per-user Darwin cache root; bundle-identifier tokens resolve here
    darwin_cache_dir: Path | None = None

    # Additional roots the safety validator accepts
    extra_allowed_roots: list[Path] = field(default_factory=list)

    # Bypass the allow-list (the always-deny set still applies)
    allow_unsafe_paths: bool = False

    # Registry entry ids removed from both pipelines
    modules_disabled: list[str] = field(default_factory=list)

    # Logging
    log_file: Path | None = None
    log_level: str = "INFO"

    _darwin_cache_probed: bool = field(default=False, init=False, repr=False, compare=False)

    @property
    def user_cache_dir(self) -> Path:
        """Get the standard user cache directory."""
        return self.cache_dir if self.cache_dir is not None else self.home / "Library/Caches"

    def get_darwin_cache_dir(self) -> Path | None:
        """Get the Darwin cache root, querying ``getconf`` on first use."""
        if self.darwin_cache_dir is None and not self._darwin_cache_probed:
            self._darwin_cache_probed = True
            self.darwin_cache_dir = query_darwin_cache_dir()
            logger.debug("Darwin cache root: %s", self.darwin_cache_dir)
        return self.darwin_cache_dir

    @classmethod
    def get_config_path(cls) -> Path:
        """Get the default configuration file path."""
        return Path.home() / "Library/Application Support/cache-cleanup/config.yaml"

    @classmethod
    def load(cls, config_path: Path | None = None) -> CleanupConfig:
        """Load configuration from YAML file.

        Args:
            config_path: Path to config file. Uses default if None.

        Returns:
            Loaded configuration.

        Raises:
            ValueError: If the file is not valid YAML or holds invalid values.

        """
        if config_path is None:
            config_path = cls.get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration in {config_path}: expected a mapping")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> CleanupConfig:
        """Create config from dictionary."""
        config = cls()

        if data.get("cache_dir"):
            config.cache_dir = _expand(data["cache_dir"])
        if data.get("darwin_cache_dir"):
            config.darwin_cache_dir = _expand(data["darwin_cache_dir"])
        if "extra_allowed_roots" in data:
            config.extra_allowed_roots = [_expand(p) for p in _as_list(data, "extra_allowed_roots")]
        config.allow_unsafe_paths = parse_bool(data.get("allow_unsafe_paths"), False)
        if "modules_disabled" in data:
            config.modules_disabled = [str(m) for m in _as_list(data, "modules_disabled")]

        # Logging
        logging_cfg = data.get("logging") or {}
        if not isinstance(logging_cfg, dict):
            raise ValueError(f"Invalid logging section {logging_cfg!r}, expected a mapping")
        if logging_cfg.get("file"):
            config.log_file = _expand(logging_cfg["file"])
        if "level" in logging_cfg:
            config.log_level = str(logging_cfg["level"]).upper()

        config.validate()
        return config

    def validate(self) -> None:
        """Check value constraints.

        Raises:
            ValueError: If a value is out of range.

        """
        if self.log_level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log_level {self.log_level!r}, expected one of {', '.join(VALID_LOG_LEVELS)}")

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            config_path: Path to save config. Uses default if None.

        """
        if config_path is None:
            config_path = self.get_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict[str, Any] = {
            "cache_dir": str(self.user_cache_dir),
            "extra_allowed_roots": [str(p) for p in self.extra_allowed_roots],
            "allow_unsafe_paths": self.allow_unsafe_paths,
            "modules_disabled": list(self.modules_disabled),
            "logging": {
                "level": self.log_level,
            },
        }
        if self.darwin_cache_dir is not None:
            data["darwin_cache_dir"] = str(self.darwin_cache_dir)
        if self.log_file is not None:
            data["logging"]["file"] = str(self.log_file)

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
