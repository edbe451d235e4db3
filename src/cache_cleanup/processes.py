"""Check whether applications tied to a registry entry are running."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Iterable

from .modules.base import RegistryEntry


def is_process_running(name: str) -> bool:
    """Check if a process with exactly this name is running.

    Uses ``pgrep -x``; a missing ``pgrep`` counts as not running.

    Args:
        name: Process name to look for.

    Returns:
        True if at least one matching process exists.

    """
    try:
        result = subprocess.run(
            ["pgrep", "-x", name],
            capture_output=True,
            text=True,
            check=False,
        )
    except (subprocess.SubprocessError, OSError):
        return False
    return result.returncode == 0


class ProcessChecker:
    """Finds running processes for a set of registry entries."""

    def __init__(self, probe: Callable[[str], bool] = is_process_running) -> None:
        """Initialize the checker.

        Args:
            probe: Function answering whether one process name is running.

        """
        self.probe = probe

    def any_running(self, names: Iterable[str]) -> bool:
        """Check if any of the named processes is running."""
        return any(self.probe(name) for name in names)

    def running_entries(self, entries: Iterable[RegistryEntry]) -> list[RegistryEntry]:
        """Get the entries with at least one running process.

        Args:
            entries: Entries to check.

        Returns:
            Entries in the given order whose processes are running.

        """
        return [entry for entry in entries if entry.processes and self.any_running(entry.processes)]
