"""Command-line entry points for the browser and developer cleaners."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from .app import BROWSER, DEVELOPER, CleanupRun, ExitCode, Pipeline, PreflightError, RunOptions
from .config import CleanupConfig
from .modules import Registry, load_registry


class CleanerArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports malformed options with exit code 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(ExitCode.FAILURE, f"{self.prog}: error: {message}\n")


def build_parser(pipeline: Pipeline, registry: Registry, prog: str) -> argparse.ArgumentParser:
    """Build the argument parser for a cleaner.

    One ``--<id>`` flag is generated per registry entry.

    Args:
        pipeline: Cleaner variant.
        registry: Entries offered as flags.
        prog: Program name shown in usage.

    Returns:
        Configured parser.

    """
    parser = CleanerArgumentParser(
        prog=prog,
        description=f"{pipeline.title} v{pipeline.version} - reclaim disk space by clearing caches",
        epilog=f"Examples:\n  {prog} --dry-run\n  {prog} --list\n  {prog} {' '.join(e.flag for e in list(registry)[:2])}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument("--version", action="version", version=f"{pipeline.title} {pipeline.version}")
    parser.add_argument("--all", action="store_true", help="Clean all detected modules (default)")
    parser.add_argument("--list", action="store_true", dest="list_mode", help="List detected caches and their sizes")
    parser.add_argument(
        "-n", "--dry-run", action="store_true", help="Show what would be cleaned without deleting"
    )
    parser.add_argument("-y", "--force", action="store_true", help="Skip confirmation prompt")
    parser.add_argument("--log", type=Path, default=None, metavar="FILE", help="Log output to specified file")
    parser.add_argument("--config", "-c", type=Path, default=None, help="Path to configuration file")
    parser.add_argument(
        "--init-config", action="store_true", help="Create a default configuration file and exit"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    modules = parser.add_argument_group("modules")
    for entry in registry:
        modules.add_argument(
            entry.flag,
            action="append_const",
            const=entry.id,
            dest="selected",
            help=f"Clean {entry.name}",
        )

    return parser


def init_config(config_path: Path | None, console: Console) -> int:
    """Write a default configuration file unless one already exists.

    Args:
        config_path: Target file. Uses the default location if None.
        console: Console for status messages.

    Returns:
        Exit code.

    """
    config_path = config_path or CleanupConfig.get_config_path()
    if config_path.exists():
        console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
        return ExitCode.FAILURE

    try:
        CleanupConfig().save(config_path)
    except OSError as e:
        console.print(f"[red]Cannot write config: {config_path} ({e.strerror or e})[/red]")
        return ExitCode.FAILURE

    console.print(f"[green]Created config: {config_path}[/green]")
    return ExitCode.OK


def options_from_args(args: argparse.Namespace) -> RunOptions:
    """Convert parsed arguments into run options."""
    selected = [] if args.all else list(dict.fromkeys(args.selected or []))
    return RunOptions(
        selected=selected,
        list_mode=args.list_mode,
        dry_run=args.dry_run,
        force=args.force,
        log_file=args.log,
        verbose=args.verbose,
    )


def run_cli(pipeline: Pipeline, argv: list[str] | None = None, prog: str | None = None) -> int:
    """Parse arguments and run one cleaner.

    Args:
        pipeline: Cleaner variant.
        argv: Arguments without the program name. Uses sys.argv if None.
        prog: Program name for usage text.

    Returns:
        Exit code.

    """
    err_console = Console(stderr=True)
    argv = sys.argv[1:] if argv is None else argv

    # Flags come from the full registry so disabled entries stay recognizable
    parser = build_parser(pipeline, load_registry(pipeline.key), prog or pipeline.title.lower().replace(" ", "-"))
    args, unknown = parser.parse_known_args(argv)
    if unknown:
        err_console.print(f"[yellow]Unknown option: {unknown[0]}[/yellow]")
        parser.print_help()
        return ExitCode.OK

    if args.init_config:
        return init_config(args.config, Console())

    try:
        config = CleanupConfig.load(args.config)
    except ValueError as e:
        err_console.print(f"[red]{e}[/red]")
        return ExitCode.FAILURE

    run = CleanupRun(pipeline, config, options_from_args(args))
    try:
        return run.execute()
    except PreflightError as e:
        err_console.print(f"[red]{e}[/red]")
        return e.exit_code


def browser_main(argv: list[str] | None = None) -> int:
    """Entry point for ``browser-cleaner``."""
    return run_cli(BROWSER, argv, prog="browser-cleaner")


def dev_main(argv: list[str] | None = None) -> int:
    """Entry point for ``dev-cleanup``."""
    return run_cli(DEVELOPER, argv, prog="dev-cleanup")


if __name__ == "__main__":
    sys.exit(dev_main())
