"""Terminal reports for detection results and run summaries."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.table import Table

from .cleaner import CleanupSummary
from .detector import DetectionReport
from .logs import FILE_ONLY, SUCCESS
from .modules.base import RegistryEntry
from .sizing import format_size


class Reporter:
    """Renders sections through Rich and mirrors them into the log file."""

    def __init__(self, console: Console, logger: logging.Logger) -> None:
        self.console = console
        self.logger = logger

    def header(self, title: str) -> None:
        self.console.print()
        self.console.rule(f"[bold blue]{title}")
        self.logger.info("=== %s ===", title, extra=FILE_ONLY)

    def selection(self, entries: list[RegistryEntry], *, all_selected: bool) -> None:
        """Show which entries the run covers."""
        self.console.print("Categories selected for cleaning:")
        self.logger.info("Categories selected for cleaning:", extra=FILE_ONLY)
        names = ["ALL detected"] if all_selected else [entry.name for entry in entries]
        for name in names:
            self.console.print(f"  - {name}")
            self.logger.info("  - %s", name, extra=FILE_ONLY)

    def detected_table(self, report: DetectionReport, title: str) -> Table:
        """Build the list-mode table.

        Args:
            report: Detection results.
            title: Table title.

        Returns:
            Table with one row per detected item.

        """
        table = Table(title=title)
        table.add_column("Module", style="cyan")
        table.add_column("Size", justify="right", style="green")
        table.add_column("Detail", style="dim")

        for item in report.items:
            size = "[Command]" if item.is_command else format_size(item.size_kb)
            table.add_row(item.entry_name, size, str(item.target))
        return table

    def detected(self, report: DetectionReport, title: str) -> None:
        """Print detected items without touching anything."""
        if not report:
            self.logger.info("No caches detected.")
            return

        self.console.print(self.detected_table(report, title))
        for item in report.items:
            size = "[Command]" if item.is_command else format_size(item.size_kb)
            self.logger.info("%-20s %-15s %s", item.entry_name, size, item.target, extra=FILE_ONLY)
        self.logger.info("Total reclaimable space (paths): %s", format_size(report.estimated_kb))

    def final_summary(self, summary: CleanupSummary, freed_kb: int | None = None) -> None:
        """Print the closing totals of a run.

        Args:
            summary: Executor summary.
            freed_kb: Measured change in free disk space, if known.

        """
        self.header("Final Summary")

        if summary.failures:
            self.logger.warning("%d item(s) failed; see warnings above", summary.failures)
        if summary.skipped:
            self.logger.warning("%d item(s) skipped", summary.skipped)

        if summary.dry_run:
            self.logger.log(
                SUCCESS,
                "Dry run complete. Potential space to reclaim: %s",
                format_size(summary.reclaimed_kb),
            )
            return

        self.logger.log(
            SUCCESS,
            "Cleanup complete! Total disk space reclaimed: ~%s (estimated %s)",
            format_size(summary.reclaimed_kb),
            format_size(summary.estimated_kb),
        )
        if freed_kb is not None:
            self.logger.info("Free disk space change: %s", format_size(max(freed_kb, 0)))
