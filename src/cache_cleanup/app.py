"""Cleanup pipeline shared by the browser and developer cleaners."""

from __future__ import annotations

import logging
import os
import platform
import shutil
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from .cleaner import Cleaner, CommandOutcome, run_command
from .confirm import ConfirmationGate, Decision, console_input
from .detector import CacheDetector
from .logs import LOGGER_NAME, SUCCESS, setup_logging
from .modules import Registry, UnknownEntryError, load_registry
from .processes import ProcessChecker
from .report import Reporter
from .sizing import KB, format_size

if TYPE_CHECKING:
    from .config import CleanupConfig


class ExitCode(IntEnum):
    """Process exit codes."""

    OK = 0
    FAILURE = 1
    PRIVILEGED = 2
    PROCESSES_RUNNING = 3


class PreflightError(Exception):
    """Raised when a run must stop before detection starts."""

    def __init__(self, message: str, exit_code: ExitCode = ExitCode.FAILURE) -> None:
        super().__init__(message)
        self.exit_code = exit_code


@dataclass(frozen=True)
class Pipeline:
    """Static description of one cleaner variant."""

    key: str
    title: str
    version: str
    list_title: str
    notices: tuple[str, ...] = ()
    block_on_running: bool = False


BROWSER = Pipeline(
    key="browser",
    title="Browser Cleaner",
    version="2.0.0",
    list_title="Detected Browser Caches",
    notices=(
        "This tool clears CACHE data only. Bookmarks, Passwords, and History are safe.",
        "Please close all browsers before continuing for a thorough cleanup.",
    ),
    block_on_running=True,
)

DEVELOPER = Pipeline(
    key="developer",
    title="Dev Cleaner",
    version="3.0.0",
    list_title="Detected Developer Caches",
)


@dataclass
class RunOptions:
    """Options resolved from the command line."""

    selected: list[str] = field(default_factory=list)
    list_mode: bool = False
    dry_run: bool = False
    force: bool = False
    log_file: Path | None = None
    verbose: bool = False

    @property
    def clean_all(self) -> bool:
        return not self.selected


def is_supported_platform() -> bool:
    """Check if running on macOS."""
    return platform.system() == "Darwin"


def is_privileged_user() -> bool:
    """Check if running as root."""
    return hasattr(os, "geteuid") and os.geteuid() == 0


def free_space_kb(path: Path) -> int | None:
    try:
        return shutil.disk_usage(path).free // KB
    except OSError:
        return None


def preflight() -> None:
    """Refuse to run as root or outside macOS.

    Raises:
        PreflightError: With the exit code for the failed check.

    """
    if is_privileged_user():
        raise PreflightError("This tool should not be run as root.", ExitCode.PRIVILEGED)
    if not is_supported_platform():
        raise PreflightError("This tool is only compatible with macOS.")


class CleanupRun:
    """One invocation: select, detect, then list or confirm and clean."""

    def __init__(
        self,
        pipeline: Pipeline,
        config: CleanupConfig,
        options: RunOptions,
        *,
        console: Console | None = None,
        gate: ConfirmationGate | None = None,
        detector: CacheDetector | None = None,
        process_checker: ProcessChecker | None = None,
        command_runner: Callable[[str], CommandOutcome] = run_command,
    ) -> None:
        """Initialize the run.

        Args:
            pipeline: Cleaner variant.
            config: Cleanup configuration.
            options: Command-line options.
            console: Rich console for terminal output.
            gate: Confirmation gate. Prompts on the console if None.
            detector: Cache detector. Built from config if None.
            process_checker: Running-process check.
            command_runner: Runs external cleanup commands.

        """
        self.pipeline = pipeline
        self.config = config
        self.options = options
        self.console = console or Console()
        self.gate = gate
        self.detector = detector or CacheDetector(config)
        self.process_checker = process_checker or ProcessChecker()
        self.command_runner = command_runner
        self.logger = logging.getLogger(LOGGER_NAME)

    def _setup_logging(self) -> None:
        log_file = self.options.log_file or self.config.log_file
        level = "DEBUG" if self.options.verbose else self.config.log_level
        try:
            self.logger = setup_logging(log_file, level, self.console)
        except OSError as e:
            raise PreflightError(f"Cannot write to log file: {log_file} ({e.strerror or e})") from e
        if log_file is not None:
            self.logger.info("Logging to %s", log_file)

    def _gate(self) -> ConfirmationGate:
        if self.gate is None:
            self.gate = ConfirmationGate(console_input(self.console))
        return self.gate

    def execute(self) -> ExitCode:
        """Run the pipeline to completion.

        Returns:
            Exit code for the process.

        Raises:
            PreflightError: Before any detection when the run cannot start.

        """
        preflight()
        self._setup_logging()

        reporter = Reporter(self.console, self.logger)
        reporter.header(f"{self.pipeline.title} v{self.pipeline.version}")

        registry = load_registry(self.pipeline.key, self.config)
        try:
            entries = registry.select(self.options.selected)
        except UnknownEntryError as e:
            self.logger.error("%s (available: %s)", e, ", ".join(registry.ids()))
            return ExitCode.FAILURE

        if self.options.dry_run and not self.options.list_mode:
            self.logger.warning("DRY-RUN MODE ENABLED - No files will be deleted")
        for notice in self.pipeline.notices:
            self.logger.warning("%s", notice)
        reporter.selection(entries, all_selected=self.options.clean_all)

        report = self.detector.detect(entries)

        if self.options.list_mode:
            reporter.header(self.pipeline.list_title)
            reporter.detected(report, self.pipeline.list_title)
            return ExitCode.OK

        if not report:
            self.logger.log(SUCCESS, "Nothing found to clean.")
            return ExitCode.OK

        reporter.header("Cleanup Summary")
        self.logger.info("Estimated space to reclaim: %s", format_size(report.estimated_kb))
        if report.command_items:
            self.logger.warning("Note: Command-based cleanups (e.g. brew, docker) are not included in the estimate.")

        running_code = self._check_running(registry, report.entry_ids)
        if running_code is not None:
            return running_code

        decision = self._gate().confirm(
            "Proceed with cleanup? (y/N):",
            force=self.options.force,
            dry_run=self.options.dry_run,
        )
        if decision is Decision.ABORTED:
            self.logger.error("Aborted.")
            return ExitCode.FAILURE

        free_before = None if self.options.dry_run else free_space_kb(self.config.home)
        cleaner = Cleaner(self.config, self.logger, command_runner=self.command_runner)
        summary = cleaner.clean(report.items, dry_run=self.options.dry_run, estimated_kb=report.estimated_kb)

        freed_kb = None
        if free_before is not None:
            free_after = free_space_kb(self.config.home)
            if free_after is not None:
                freed_kb = free_after - free_before
        reporter.final_summary(summary, freed_kb)
        return ExitCode.OK

    def _check_running(self, registry: Registry, entry_ids: list[str]) -> ExitCode | None:
        """Warn about running applications; browsers may abort the run.

        Returns:
            An exit code if the user declined to continue, else None.

        """
        running = self.process_checker.running_entries(registry.get(entry_id) for entry_id in entry_ids)
        if not running:
            return None

        names = ", ".join(entry.name for entry in running)
        self.logger.warning("Currently running: %s. Close them for a thorough cleanup.", names)

        if not self.pipeline.block_on_running or self.options.force or self.options.dry_run:
            return None

        if self._gate().ask("Continue while they are running? (y/N):") is Decision.ABORTED:
            self.logger.error("Aborted: close %s and try again.", names)
            return ExitCode.PROCESSES_RUNNING
        return None
