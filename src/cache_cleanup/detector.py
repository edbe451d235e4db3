"""Detect reclaimable cache paths and cleanup commands."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .modules.base import DetectedItem, ItemKind, RegistryEntry
from .resolver import resolve_pattern
from .sizing import size_of_kb

if TYPE_CHECKING:
    from .config import CleanupConfig

logger = logging.getLogger(__name__)


@dataclass
class DetectionReport:
    """Items found for a selection and the estimated reclaimable size."""

    items: list[DetectedItem] = field(default_factory=list)
    estimated_kb: int = 0

    @property
    def path_items(self) -> list[DetectedItem]:
        return [item for item in self.items if item.kind is ItemKind.PATH]

    @property
    def command_items(self) -> list[DetectedItem]:
        return [item for item in self.items if item.kind is ItemKind.COMMAND]

    @property
    def entry_ids(self) -> list[str]:
        """Get the ids of entries with at least one item, in order."""
        return list(dict.fromkeys(item.entry_id for item in self.items))

    def __bool__(self) -> bool:
        return bool(self.items)


class CacheDetector:
    """Resolves registry entries into sized cleanup items."""

    def __init__(
        self,
        config: CleanupConfig,
        which: Callable[[str], str | None] = shutil.which,
        measure: Callable[[Path], int] = size_of_kb,
    ) -> None:
        """Initialize the detector.

        Args:
            config: Cleanup configuration.
            which: Lookup for executables on PATH.
            measure: Size measurement in KB for one concrete path.

        """
        self.config = config
        self.which = which
        self.measure = measure

    def is_available(self, entry: RegistryEntry) -> bool:
        """Check if the entry's tool is installed (entries without a check always are)."""
        return entry.check is None or self.which(entry.check) is not None

    def detect(self, entries: Iterable[RegistryEntry]) -> DetectionReport:
        """Detect cleanup items for entries, in the order given.

        Entries whose tool is missing are dropped without a warning. Paths
        measuring 0 KB are left out, and a path equal to or inside one
        already recorded is not recorded again. A path containing recorded
        paths is recorded with only the size not already attributed to them,
        and dropped when nothing remains.

        Args:
            entries: Selected registry entries.

        Returns:
            DetectionReport with items and the estimated total.

        """
        report = DetectionReport()
        # Recorded path -> KB attributed to it
        claimed: dict[Path, int] = {}

        for entry in entries:
            if not self.is_available(entry):
                logger.debug("Skipping %s: %s not installed", entry.id, entry.check)
                continue

            report.items.extend(
                DetectedItem(
                    entry_id=entry.id,
                    entry_name=entry.name,
                    kind=ItemKind.COMMAND,
                    target=command,
                )
                for command in entry.commands
            )

            for pattern in entry.patterns:
                for path in resolve_pattern(pattern, self.config):
                    if any(path == prior or path.is_relative_to(prior) for prior in claimed):
                        logger.debug("Already covered: %s", path)
                        continue

                    size_kb = self.measure(path) - self._claimed_below(path, claimed)
                    if size_kb <= 0:
                        continue

                    claimed[path] = size_kb
                    report.items.append(
                        DetectedItem(
                            entry_id=entry.id,
                            entry_name=entry.name,
                            kind=ItemKind.PATH,
                            target=path,
                            size_kb=size_kb,
                            pattern=pattern,
                        )
                    )
                    report.estimated_kb += size_kb

        return report

    @staticmethod
    def _claimed_below(path: Path, claimed: dict[Path, int]) -> int:
        """Sum the KB already attributed to recorded paths inside ``path``."""
        return sum(size for prior, size in claimed.items() if prior.is_relative_to(path))
