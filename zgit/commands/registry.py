"""
Repository registry commands.

Commands for adding, removing and listing the working copies zgit
operates on. The tag for ``register`` comes from the leading ``@tag``.
"""

import click
from rich.console import Console
from rich.markup import escape

from ..cli_utils import pass_app, standard_command
from ..render import render_repo_list, render_no_repos_hint

console = Console()


@click.command(name='register')
@click.argument('path', type=click.Path())
@pass_app
@standard_command
def register_handler(app, path):
    """Add the repository at PATH, with the optional @tag.

    Examples:

    \b
        zgit register .
        zgit @api register ~/src/api-server
    """
    repo = app.store.register(path, tag=app.tag.name)
    tag_note = f" with tag [cyan]{repo.tag}[/cyan]" if repo.tag else ""
    console.print(f"[green]✓[/green] Registered [cyan]{repo.name}[/cyan] at {escape(repo.location)}{tag_note}")


@click.command(name='unregister')
@click.argument('path', type=click.Path())
@pass_app
@standard_command
def unregister_handler(app, path):
    """Remove the repository at PATH from the list."""
    repo = app.store.unregister(path)
    if repo is None:
        console.print(f"[yellow]Not registered:[/yellow] {escape(path)}")
        return None
    console.print(f"[green]✓[/green] Unregistered [cyan]{repo.name}[/cyan]")
    return None


@click.command(name='list')
@pass_app
@standard_command
def list_handler(app):
    """Print all registered repositories (filtered by @tag)."""
    repos = app.repos()
    if not repos:
        render_no_repos_hint()
        return None
    render_repo_list(app.selected(repos))
    return None
