"""Delete detected cache paths and run cleanup commands."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .logs import SUCCESS
from .modules.base import DetectedItem
from .safety import PathValidator
from .sizing import format_size

if TYPE_CHECKING:
    from .config import CleanupConfig


@dataclass
class CommandOutcome:
    """Exit status of an external cleanup command."""

    returncode: int
    stderr: str = ""


def run_command(command: str) -> CommandOutcome:
    """Run a cleanup command without a shell and without a timeout.

    Args:
        command: Command line, split with shell quoting rules.

    Returns:
        CommandOutcome; a missing executable reports return code 127.

    """
    try:
        result = subprocess.run(
            shlex.split(command),
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as e:
        return CommandOutcome(returncode=127, stderr=str(e))
    except (subprocess.SubprocessError, OSError, ValueError) as e:
        return CommandOutcome(returncode=1, stderr=str(e))
    return CommandOutcome(returncode=result.returncode, stderr=result.stderr)


@dataclass
class CleanupResult:
    """Result of processing one detected item."""

    item: DetectedItem
    success: bool
    action: str  # "deleted", "would_delete", "ran", "would_run", "skipped", "error"
    error: str | None = None

    @property
    def reclaimed_kb(self) -> int:
        if self.success and self.action in ("deleted", "would_delete"):
            return self.item.size_kb
        return 0


@dataclass
class CleanupSummary:
    """Outcome of an executor pass."""

    dry_run: bool
    estimated_kb: int = 0
    results: list[CleanupResult] = field(default_factory=list)

    @property
    def reclaimed_kb(self) -> int:
        return sum(result.reclaimed_kb for result in self.results)

    @property
    def failures(self) -> int:
        return sum(1 for result in self.results if result.action == "error")

    @property
    def skipped(self) -> int:
        return sum(1 for result in self.results if result.action == "skipped")


def remove_path(path: Path) -> None:
    """Remove a file, symlink or directory tree.

    Raises:
        OSError: If removal fails.

    """
    if path.is_symlink() or not path.is_dir():
        path.unlink()
    else:
        shutil.rmtree(path)


class Cleaner:
    """Executes detected items, never stopping on a single failure."""

    def __init__(
        self,
        config: CleanupConfig,
        logger: logging.Logger,
        *,
        validator: PathValidator | None = None,
        command_runner: Callable[[str], CommandOutcome] = run_command,
    ) -> None:
        """Initialize the cleaner.

        Args:
            config: Cleanup configuration.
            logger: Logger instance.
            validator: Path safety validator. Built from config if None.
            command_runner: Runs one external cleanup command.

        """
        self.config = config
        self.logger = logger
        self.validator = validator or PathValidator(config)
        self.command_runner = command_runner

    def clean(self, items: Iterable[DetectedItem], *, dry_run: bool, estimated_kb: int = 0) -> CleanupSummary:
        """Process every item in order.

        Args:
            items: Detected items.
            dry_run: If True, only log what would happen.
            estimated_kb: Estimate carried into the summary.

        Returns:
            CleanupSummary with a result per item.

        """
        summary = CleanupSummary(dry_run=dry_run, estimated_kb=estimated_kb)
        for item in items:
            if item.is_command:
                result = self.run_item_command(item, dry_run=dry_run)
            else:
                result = self.delete_item(item, dry_run=dry_run)
            summary.results.append(result)
        return summary

    def delete_item(self, item: DetectedItem, *, dry_run: bool) -> CleanupResult:
        """Delete one path item after the safety check.

        Args:
            item: Path item.
            dry_run: If True, only log the removal.

        Returns:
            CleanupResult with operation details.

        """
        path = Path(item.target)
        size = format_size(item.size_kb)

        if not self.validator.is_allowed(path):
            self.logger.warning("Skipping potentially unsafe path: %s", path)
            return CleanupResult(item=item, success=False, action="skipped", error="Path not in allow-list")

        if dry_run:
            self.logger.info("[Dry-Run] Would remove path: %s (%s)", path, size)
            return CleanupResult(item=item, success=True, action="would_delete")

        if not os.path.lexists(path):
            self.logger.warning("Path no longer exists: %s", path)
            return CleanupResult(item=item, success=False, action="skipped", error="Path no longer exists")

        self.logger.info("Cleaning %s: %s (%s)...", item.entry_name, path, size)
        try:
            remove_path(path)
        except PermissionError as e:
            self.logger.warning("Failed to clean: %s (permission denied)", path)
            return CleanupResult(item=item, success=False, action="error", error=f"Permission denied: {e}")
        except OSError as e:
            self.logger.warning("Failed to clean: %s (%s)", path, e)
            return CleanupResult(item=item, success=False, action="error", error=str(e))

        return CleanupResult(item=item, success=True, action="deleted")

    def run_item_command(self, item: DetectedItem, *, dry_run: bool) -> CleanupResult:
        """Run one command item.

        Args:
            item: Command item.
            dry_run: If True, only log the command.

        Returns:
            CleanupResult with operation details.

        """
        command = str(item.target)

        if dry_run:
            self.logger.info("[Dry-Run] Would run: %s", command)
            return CleanupResult(item=item, success=True, action="would_run")

        self.logger.info("Running %s cleanup command: %s", item.entry_name, command)
        outcome = self.command_runner(command)
        if outcome.returncode != 0:
            self.logger.warning("Command failed: %s (exit %d)", command, outcome.returncode)
            if outcome.stderr.strip():
                self.logger.debug("%s", outcome.stderr.strip())
            return CleanupResult(
                item=item,
                success=False,
                action="error",
                error=outcome.stderr.strip() or f"exit {outcome.returncode}",
            )

        self.logger.log(SUCCESS, "%s cleanup command finished", item.entry_name)
        return CleanupResult(item=item, success=True, action="ran")
