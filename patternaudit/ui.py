"""Central UI handler for patternaudit.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from patternaudit.ui import console, print_error

    console.print("[success]No issues found[/success]")
    print_error("Target not found")
"""

import sys

from rich.console import Console
from rich.theme import Theme

AUDIT_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "high": "bold red",
    "medium": "bold yellow",
    "low": "cyan",
    "cmd": "bold magenta",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=AUDIT_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[error]ERROR:[/error] {msg}", highlight=False)
