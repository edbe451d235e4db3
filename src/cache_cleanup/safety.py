"""Lexical allow-list check run before every deletion."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import CleanupConfig

# Relative to the home directory
HOME_ALLOWED_ROOTS: tuple[str, ...] = (
    "Library/Caches",
    "Library/Developer",
    "Library/Logs",
    "Library/Application Support/Code",
    ".npm",
    ".gradle",
    ".android",
    ".bun",
    ".Trash",
)

SYSTEM_ALLOWED_ROOTS: tuple[Path, ...] = (
    Path("/var/folders"),
    Path("/private/var/folders"),
)

HOME_DENIED: tuple[str, ...] = ("Documents", "Desktop")


def _normalize(path: str | Path) -> Path | None:
    text = str(path)
    if not text:
        return None
    return Path(os.path.normpath(text))


class PathValidator:
    """Decides whether a resolved path may be deleted.

    The check is purely lexical: nothing is read from disk and symlinks are
    not resolved.
    """

    def __init__(self, config: CleanupConfig) -> None:
        """Initialize the validator.

        Args:
            config: Configuration providing home and cache roots.

        """
        self.config = config
        self.home = Path(os.path.normpath(config.home))
        self.denied = frozenset({Path("/"), self.home} | {self.home / name for name in HOME_DENIED})
        self.allowed_roots = self._build_allowed_roots()

    def _build_allowed_roots(self) -> tuple[Path, ...]:
        roots = [self.home / rel for rel in HOME_ALLOWED_ROOTS]
        roots.append(self.config.user_cache_dir)
        darwin_cache = self.config.get_darwin_cache_dir()
        if darwin_cache is not None:
            roots.append(darwin_cache)
        roots.extend(SYSTEM_ALLOWED_ROOTS)
        roots.extend(self.config.extra_allowed_roots)

        unique: list[Path] = []
        for root in roots:
            normalized = _normalize(root)
            if normalized is not None and normalized not in unique and normalized not in self.denied:
                unique.append(normalized)
        return tuple(unique)

    def is_denied(self, path: str | Path) -> bool:
        """Check the unconditional deny set.

        Empty and relative paths, the filesystem root, the home directory and
        its ancestors, and ``~/Documents`` / ``~/Desktop`` are always denied.
        """
        normalized = _normalize(path)
        if normalized is None or not normalized.is_absolute():
            return True
        return normalized in self.denied or self.home.is_relative_to(normalized)

    def is_under_allowed_root(self, path: str | Path) -> bool:
        """Check if a path lies strictly below an allow-listed root."""
        normalized = _normalize(path)
        if normalized is None:
            return False
        return any(normalized != root and normalized.is_relative_to(root) for root in self.allowed_roots)

    def is_allowed(self, path: str | Path) -> bool:
        """Check if a path may be deleted.

        Args:
            path: Concrete resolved path.

        Returns:
            True if the path passes the deny set and the allow-list (or the
            allow-list is overridden by configuration).

        """
        if self.is_denied(path):
            return False
        if self.config.allow_unsafe_paths:
            return True
        return self.is_under_allowed_root(path)
