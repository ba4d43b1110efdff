"""Console output helpers.

Informational output goes through ``console`` and is silenced by quiet mode;
errors always reach stderr.
"""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

# ---------------------------------------------------------------------------
# Console singletons
# ---------------------------------------------------------------------------

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

_quiet = False


def set_quiet(quiet: bool) -> None:
    global _quiet
    _quiet = quiet


def is_quiet() -> bool:
    return _quiet


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def print_command_preview(cmd: list[str]) -> None:
    """Show the command that is about to be executed in dim style."""
    if _quiet:
        return
    cmd_str = escape(" ".join(cmd))
    console.print(f"  [dim]$ {cmd_str}[/dim]", highlight=False)


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[bold red]Error:[/bold red] {escape(msg)}", highlight=False)


def print_hint(msg: str) -> None:
    """Follow-up line for an error, also on stderr."""
    err_console.print(f"  [yellow]{escape(msg)}[/yellow]", highlight=False)


def print_warning(msg: str) -> None:
    if _quiet:
        return
    console.print(f"[bold yellow]![/bold yellow] {escape(msg)}", highlight=False)


def print_success(msg: str) -> None:
    if _quiet:
        return
    console.print(f"[bold green]✓[/bold green] {escape(msg)}", highlight=False)


def print_info(msg: str) -> None:
    if _quiet:
        return
    console.print(f"[bold blue]ℹ[/bold blue] {escape(msg)}", highlight=False)


def print_dry_run(msg: str) -> None:
    """Dry-run report lines; printed even in quiet mode."""
    console.print(f"[bold magenta]\\[DRY RUN][/bold magenta] {escape(msg)}", highlight=False)
