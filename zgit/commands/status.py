"""
Handles the 'status' command for displaying repository status.

Queries branch, tag/ref and staged/unstaged change counts of every
registered repository (optionally filtered by ``@tag``) and prints them
as one table, followed by an error table if any query failed.
"""

import click

from ..cli_utils import pass_app, standard_command
from ..exit_codes import INTERRUPTED, PartialSuccessError
from ..format_utils import OUTPUT_FORMATS, format_output, report_records
from ..render import render_status_report, render_no_repos_hint
from ..services.status_service import StatusService


@click.command(name='status')
@click.option('-w', '--workers', type=click.IntRange(min=1), default=None,
              help='Maximum concurrent git processes (default: general.max_workers)')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Seconds before a git command is abandoned (default: general.timeout_seconds)')
@click.option('-f', '--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), default='table',
              show_default=True, help='Output format')
@click.option('--strict', is_flag=True, help='Exit with code 71 if any repository reported an error')
@pass_app
@standard_command
def status_handler(app, workers, timeout, output_format, strict):
    """Show branch, tag and change counts for each repository.

    \b
    Staged and Unstaged read "+new ~modified -deleted".
    Cells reading "See Error: N" refer to row N of the error table.

    Examples:

    \b
        zgit status                 # All registered repos
        zgit @api status            # Repos tagged "api"
        zgit status -w 16           # More parallel git processes
        zgit status -f jsonl        # One JSON object per row and error
    """
    repos = app.repos()
    if not repos:
        render_no_repos_hint()
        return None

    config = app.config
    general = config.setdefault('general', {})
    if workers is not None:
        general['max_workers'] = workers
    if timeout is not None:
        general['timeout_seconds'] = timeout

    service = StatusService(config=config)
    report = service.aggregate(app.selected(repos))

    if output_format == 'table':
        render_status_report(report.rows, report.errors, cancelled=report.cancelled)
    else:
        for line in format_output(report_records(report.rows, report.errors), output_format):
            click.echo(line)

    if report.cancelled:
        return INTERRUPTED
    if strict and report.errors:
        raise PartialSuccessError(
            f"{len(report.errors)} error(s) across {len(report.rows)} repositories",
            succeeded=len(report.rows),
            failed=len(report.errors),
        )
    return None
