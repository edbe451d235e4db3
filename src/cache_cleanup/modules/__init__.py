"""Registry of cleanup entries with auto-discovery."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import types
from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from .base import RegistryEntry

if TYPE_CHECKING:
    from ..config import CleanupConfig

logger = logging.getLogger(__name__)


class UnknownEntryError(KeyError):
    """Raised when a selection names an identifier the registry lacks."""

    def __init__(self, entry_id: str) -> None:
        super().__init__(entry_id)
        self.entry_id = entry_id

    def __str__(self) -> str:
        return f"Unknown module: {self.entry_id}"


class Registry:
    """Ordered, read-only mapping from identifier to registry entry."""

    def __init__(self, pipeline: str, entries: Iterable[RegistryEntry]) -> None:
        self.pipeline = pipeline
        self._entries: dict[str, RegistryEntry] = {}
        for entry in entries:
            if entry.id in self._entries:
                raise ValueError(f"Duplicate registry entry: {entry.id}")
            self._entries[entry.id] = entry

    def __iter__(self) -> Iterator[RegistryEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def get(self, entry_id: str) -> RegistryEntry:
        """Look up one entry.

        Raises:
            UnknownEntryError: If the identifier is not registered.

        """
        try:
            return self._entries[entry_id]
        except KeyError:
            raise UnknownEntryError(entry_id) from None

    def ids(self) -> list[str]:
        """Get all identifiers in declaration order."""
        return list(self._entries)

    def select(self, entry_ids: Iterable[str] | None = None) -> list[RegistryEntry]:
        """Resolve a selection into entries, keeping declaration order.

        Args:
            entry_ids: Identifiers to keep. None or empty selects everything.

        Returns:
            Selected entries.

        Raises:
            UnknownEntryError: If any identifier is not registered.

        """
        if not entry_ids:
            return list(self)

        wanted = set()
        for entry_id in entry_ids:
            if entry_id not in self:
                raise UnknownEntryError(entry_id)
            wanted.add(entry_id)
        return [entry for entry in self if entry.id in wanted]


def discover_entries(pipeline: str) -> list[RegistryEntry]:
    """Collect the entries declared for a pipeline across the package.

    Scans the modules package for submodules whose ``PIPELINE`` matches and
    concatenates their ``ENTRIES`` in module order.
    """
    entries: list[RegistryEntry] = []
    package = importlib.import_module(__package__ or "cache_cleanup.modules")

    for _finder, module_name, _is_pkg in sorted(pkgutil.iter_modules(package.__path__), key=lambda m: m.name):
        if module_name == "base":
            continue
        try:
            mod = importlib.import_module(f"{package.__name__}.{module_name}")
        except ImportError:
            logger.warning("Failed to import registry module: %s", module_name)
            continue

        entries.extend(_pipeline_entries(mod, pipeline))
    return entries


def _pipeline_entries(mod: types.ModuleType, pipeline: str) -> list[RegistryEntry]:
    """Return a module's entries if it belongs to the given pipeline."""
    if getattr(mod, "PIPELINE", None) != pipeline:
        return []
    found = [entry for entry in getattr(mod, "ENTRIES", ()) if isinstance(entry, RegistryEntry)]
    logger.debug("Loaded %d entries from %s", len(found), mod.__name__)
    return found


def load_registry(pipeline: str, config: CleanupConfig | None = None) -> Registry:
    """Build the registry for a pipeline, minus entries disabled by config."""
    disabled = set(config.modules_disabled) if config is not None else set()
    entries = []
    for entry in discover_entries(pipeline):
        if entry.id in disabled:
            logger.info("Module disabled by config: %s", entry.id)
            continue
        entries.append(entry)
    registry = Registry(pipeline, entries)
    logger.debug("Registry %s: %d entries", pipeline, len(registry))
    return registry
