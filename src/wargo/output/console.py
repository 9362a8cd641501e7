"""Rich Console factory and theme for wargo output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WARGO_THEME = Theme(
    {
        "wargo.ok": "bold green",
        "wargo.error": "bold red",
        "wargo.warning": "bold yellow",
        "wargo.op": "bold cyan",
        "wargo.key": "dim",
        "wargo.path": "dim",
        "wargo.name": "bold",
        "wargo.outcome.ok": "green",
        "wargo.outcome.failed": "bold red",
        "wargo.outcome.skipped": "dim",
        "wargo.outcome.pending": "yellow",
    }
)

_OUTCOME_STYLES: dict[str, str] = {
    "ok": "wargo.outcome.ok",
    "failed": "wargo.outcome.failed",
    "skipped": "wargo.outcome.skipped",
    "pending": "wargo.outcome.pending",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=WARGO_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_outcome(outcome: str) -> str:
    """Return the Rich style name for a build step outcome."""
    return _OUTCOME_STYLES.get(outcome, "")
