"""Registry records and detection results shared by both cleaners."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


@dataclass(frozen=True)
class RegistryEntry:
    """Immutable description of one named unit of cleanup."""

    id: str
    name: str
    patterns: tuple[str, ...] = ()
    processes: tuple[str, ...] = ()
    check: str | None = None  # executable that must be on PATH
    commands: tuple[str, ...] = ()  # run before the paths are removed

    @property
    def flag(self) -> str:
        """Get the command-line flag that selects this entry."""
        return f"--{self.id}"


class ItemKind(Enum):
    """What a detected item points at."""

    PATH = "path"
    COMMAND = "command"


@dataclass(frozen=True)
class DetectedItem:
    """A concrete path or command found for a registry entry."""

    entry_id: str
    entry_name: str
    kind: ItemKind
    target: Path | str
    size_kb: int = 0
    pattern: str | None = None

    @property
    def is_command(self) -> bool:
        return self.kind is ItemKind.COMMAND
