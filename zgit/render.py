"""
Rendering functions for zgit output.

This module handles all pretty-printing and table formatting.
Core functions return data, this module makes it human-readable.
"""

from rich.table import Table
from rich.console import Console
from rich.markup import escape
from rich import box
from typing import List, Optional, Sequence, Tuple

from .domain.repository import RepositoryDescriptor
from .domain.status import ErrorEntry, InspectionResult, StatusRow

console = Console()


def render_status_report(
    rows: Sequence[StatusRow],
    errors: Sequence[ErrorEntry],
    out: Optional[Console] = None,
    cancelled: bool = False,
) -> None:
    """
    Render the status table and, if any, the error table.

    Rows and errors are printed in the order given. The index shown in the
    error table is the one referenced by ``See Error: N`` in the status table.

    Args:
        rows: Status rows, in aggregation order
        errors: Error entries, in allocation order
        out: Console to print to (module console if None)
        cancelled: Print a notice that the report is partial
    """
    out = out or console

    if cancelled:
        out.print("[yellow]Status run was cancelled; showing partial report.[/yellow]")

    table = Table(
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )

    table.add_column("Name", style="cyan")
    table.add_column("Branch")
    table.add_column("Tag/Ref")
    table.add_column("Staged", style="bright_green", justify="center")
    table.add_column("Unstaged", style="bright_red", justify="center")
    table.add_column("Location", style="dim")

    for row in rows:
        table.add_row(
            escape(row.name),
            escape(row.branch),
            escape(row.ref_label),
            escape(row.staged),
            escape(row.unstaged),
            escape(row.location),
        )

    out.print(table)

    if errors:
        render_error_table(errors, out=out)


def render_error_table(errors: Sequence[ErrorEntry], out: Optional[Console] = None) -> None:
    """Render error entries keyed by their index."""
    out = out or console

    table = Table(
        title="Errors",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold red"
    )

    table.add_column("Error Index", justify="right")
    table.add_column("Message", style="red")
    table.add_column("Detail", style="dim")

    for error in errors:
        table.add_row(str(error.index), escape(error.message), escape(error.detail))

    out.print(table)


def render_repo_list(repos: List[RepositoryDescriptor], out: Optional[Console] = None) -> None:
    """Print registered repositories, one block per repository."""
    out = out or console

    for repo in repos:
        out.print(f"Name: [cyan]{escape(repo.name)}[/cyan]")
        out.print(f"Location: {escape(repo.location)}")
        out.print(f"Tag: {escape(repo.tag)}")
        out.print("")


def render_branches(
    results: List[Tuple[RepositoryDescriptor, InspectionResult]],
    out: Optional[Console] = None,
) -> None:
    """Print each repository's name followed by its branch, or its git error."""
    out = out or console

    for repo, result in results:
        out.print(f"[cyan]{escape(repo.name)}[/cyan]")
        if result.failed:
            out.print(f"[red]{escape(result.error_text or result.message)}[/red]")
        else:
            out.print(escape(result.text))
        out.print("")


def render_no_repos_hint(out: Optional[Console] = None) -> None:
    out = out or console
    out.print("No repositories registered. Nothing to do.")
    out.print("Please register a repository with the command:")
    out.print(escape("zgit register [path]"))
