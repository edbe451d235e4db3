"""Resolve registry path patterns into concrete filesystem paths."""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config import CleanupConfig

logger = logging.getLogger(__name__)

BUNDLE_PREFIXES: tuple[str, ...] = ("com.", "org.", "company.", "ext.")


def has_magic(pattern: str) -> bool:
    """Check whether a pattern contains glob wildcards."""
    return glob.has_magic(pattern)


def is_bundle_identifier(token: str) -> bool:
    """Check if a token looks like ``com.vendor.App``."""
    return "/" not in token and token.startswith(BUNDLE_PREFIXES)


def expand_glob(pattern: str) -> list[Path]:
    """Expand an absolute pattern into the existing paths it names.

    Plain paths yield themselves when they exist. Wildcard patterns support
    ``**``. Like the shell, wildcards skip names starting with a dot and
    ``**`` does not descend into hidden directories, while literal dotted
    segments still match. No match is an empty list.

    Args:
        pattern: Absolute path or glob pattern.

    Returns:
        Sorted list of existing paths.

    """
    if not has_magic(pattern):
        return [Path(pattern)] if os.path.lexists(pattern) else []

    matches = glob.glob(pattern, recursive=True)
    return sorted(Path(match) for match in matches)


def absolute_pattern(pattern: str, config: CleanupConfig) -> str | None:
    """Anchor a registry pattern to its root.

    ``~`` expands to the configured home, absolute patterns pass through,
    bundle identifiers anchor to the Darwin cache root and every other
    relative token anchors to the user cache directory. Roots are escaped
    under wildcard patterns so only the registry's own wildcards apply.

    Returns:
        The absolute pattern, or None when the root is unavailable.

    """
    if not pattern:
        return None

    if pattern == "~" or pattern.startswith("~/"):
        base: Path | None = config.home
        relative = pattern[2:]
    elif os.path.isabs(pattern):
        return pattern
    elif is_bundle_identifier(pattern):
        base = config.get_darwin_cache_dir()
        relative = pattern
    else:
        base = config.user_cache_dir
        relative = pattern

    if base is None:
        logger.debug("No root available for pattern: %s", pattern)
        return None

    root = glob.escape(str(base)) if has_magic(relative) else str(base)
    return os.path.join(root, relative) if relative else root


def resolve_pattern(pattern: str, config: CleanupConfig) -> list[Path]:
    """Resolve a registry pattern into existing concrete paths.

    Args:
        pattern: Registry path pattern.
        config: Configuration providing the home and cache roots.

    Returns:
        Sorted list of existing paths; empty when nothing matches.

    """
    anchored = absolute_pattern(pattern, config)
    if anchored is None:
        return []

    paths = expand_glob(anchored)
    logger.debug("Pattern %s matched %d path(s)", pattern, len(paths))
    return paths
