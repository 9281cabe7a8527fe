"""
Handles the 'branch' command (shorthand 'b').
"""

import click

from ..cli_utils import pass_app, standard_command
from ..render import render_branches, render_no_repos_hint
from ..services.status_service import StatusService


@click.command(name='branch')
@pass_app
@standard_command
def branch_handler(app):
    """Print the current branch of each repository."""
    repos = app.repos()
    if not repos:
        render_no_repos_hint()
        return None

    service = StatusService(config=app.config)
    render_branches(service.branches(app.selected(repos)))
    return None
