"""On-disk size measurement and human-readable formatting."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

KB = 1024
_BLOCK_SIZE = 512


def _allocated_bytes(st: os.stat_result) -> int:
    blocks = getattr(st, "st_blocks", None)
    if blocks is None:
        return st.st_size
    return blocks * _BLOCK_SIZE


def size_of_kb(path: Path) -> int:
    """Measure the recursive on-disk size of a path in kilobytes.

    Counts allocated blocks the way ``du -sk`` does: symlinks are not
    followed and hard links are counted once. Unreadable entries are
    skipped rather than failing the measurement.

    Args:
        path: File or directory to measure.

    Returns:
        Size in KB, or 0 if the path does not exist or cannot be read.

    """
    try:
        root_stat = path.lstat()
    except OSError:
        return 0

    seen: set[tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}
    total = _allocated_bytes(root_stat)

    if path.is_dir() and not path.is_symlink():
        total += _walk_bytes(path, seen)

    return (total + KB - 1) // KB


def _walk_bytes(directory: Path, seen: set[tuple[int, int]]) -> int:
    total = 0

    def _on_error(error: OSError) -> None:
        logger.debug("Cannot read %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(directory, onerror=_on_error):
        for name in dirnames + filenames:
            try:
                st = os.lstat(os.path.join(dirpath, name))
            except OSError:
                continue
            key = (st.st_dev, st.st_ino)
            if st.st_nlink > 1 and key in seen:
                continue
            seen.add(key)
            total += _allocated_bytes(st)

    return total


def format_size(kbytes: int) -> str:
    """Format a size in KB as a human-readable string.

    Two decimals are truncated rather than rounded.

    Args:
        kbytes: Size in kilobytes.

    Returns:
        String such as ``"512 KB"``, ``"2.00 MB"`` or ``"1.50 GB"``.

    """
    if kbytes >= KB * KB:
        return f"{kbytes * 100 // (KB * KB) / 100:.2f} GB"
    if kbytes >= KB:
        return f"{kbytes * 100 // KB / 100:.2f} MB"
    return f"{kbytes} KB"
