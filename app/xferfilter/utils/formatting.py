"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.table import Table

from xferfilter.core.theme import get_theme
from xferfilter.models.verdict import DecisionRecord, MatchReason


def _detect_color_system() -> str | None:
    """Return "truecolor" for interactive terminals, None to let Rich auto-detect."""
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_decisions_table(title: str = "Filter Decisions") -> Table:
    """Create a pre-configured table for displaying decision records."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Path", no_wrap=True)
    table.add_column("Type", width=6)
    table.add_column("Reason", style="muted")
    return table


def format_decision_row(record: DecisionRecord) -> tuple[str, str, str, str]:
    """Format a decision record as a table row with Rich markup.

    Args:
        record: Record to format.

    Returns:
        Tuple of (icon, path, type, reason).
    """
    if not record.accepted:
        icon = "[rejected]-[/]"
        style = "rejected"
    elif record.reason == MatchReason.ANCESTOR_OF_MATCH:
        icon = "[synthesized]~[/]"
        style = "synthesized"
    else:
        icon = "[accepted]+[/]"
        style = "folder" if record.is_folder else "accepted"

    display = record.path or "."
    if record.is_folder:
        display += "/"
    kind = "folder" if record.is_folder else "file"
    return (icon, f"[{style}]{display}[/]", kind, record.reason.value)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
