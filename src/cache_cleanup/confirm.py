"""Interactive yes/no gate in front of destructive actions."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum

from rich.console import Console

AFFIRMATIVE = frozenset({"y", "yes"})

# Reads one line for a prompt; raises EOFError at end of input
InputProvider = Callable[[str], str]


class Decision(Enum):
    """Outcome of the confirmation gate."""

    PROCEED = "proceed"
    ABORTED = "aborted"


def is_affirmative(answer: str | None) -> bool:
    """Check if an answer is ``y`` or ``yes`` (case-insensitive)."""
    return answer is not None and answer.strip().lower() in AFFIRMATIVE


def console_input(console: Console | None = None) -> InputProvider:
    """Build an input provider that prompts on a Rich console."""
    console = console or Console()

    def _read(prompt: str) -> str:
        return console.input(f"[bold yellow]{prompt}[/bold yellow] ")

    return _read


class ConfirmationGate:
    """Asks the user before a run touches the filesystem."""

    def __init__(self, provider: InputProvider | None = None) -> None:
        """Initialize the gate.

        Args:
            provider: Source of answers. Prompts on the terminal if None.

        """
        self.provider = provider or console_input()

    def ask(self, prompt: str) -> Decision:
        """Read one answer; only ``y``/``yes`` proceeds.

        Args:
            prompt: Question shown to the user.

        Returns:
            PROCEED on an affirmative answer, ABORTED otherwise (including
            empty input and end of input).

        """
        try:
            answer = self.provider(prompt)
        except (EOFError, KeyboardInterrupt):
            return Decision.ABORTED
        return Decision.PROCEED if is_affirmative(answer) else Decision.ABORTED

    def confirm(self, prompt: str, *, force: bool = False, list_mode: bool = False, dry_run: bool = False) -> Decision:
        """Pass automatically for force, list and dry-run modes, otherwise ask.

        Args:
            prompt: Question shown to the user.
            force: Skip the prompt.
            list_mode: Nothing will be modified.
            dry_run: Nothing will be modified.

        Returns:
            The gate decision.

        """
        if force or list_mode or dry_run:
            return Decision.PROCEED
        return self.ask(prompt)
