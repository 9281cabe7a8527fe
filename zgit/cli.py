#!/usr/bin/env python3

import click
from pathlib import Path

from zgit import __version__
from zgit.cli_utils import AppContext
from zgit.config import setup_logging
from zgit.domain.tag import NoTag, parse_tag_prefix, is_tag_token
from zgit.commands.status import status_handler
from zgit.commands.branch import branch_handler
from zgit.commands.registry import register_handler, unregister_handler, list_handler

# Short command names
COMMAND_ALIASES = {
    'ts': 'status',
    'table-status': 'status',
    'b': 'branch',
}


class TagAwareGroup(click.Group):
    """
    Click group that accepts an ``@tag`` token before the subcommand.

        zgit @api status     ->  status, filtered to tag "api"
        zgit @api            ->  default command, filtered to tag "api"
    """

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, COMMAND_ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args

    def parse_args(self, ctx, args):
        selector = NoTag()
        remaining = []
        for i, arg in enumerate(args):
            if self.get_command(ctx, arg) is not None:
                remaining.extend(args[i:])
                break
            if is_tag_token(arg):
                selector = parse_tag_prefix(arg)
                continue
            remaining.append(arg)
        ctx.meta['zgit.tag'] = selector
        return super().parse_args(ctx, remaining)


@click.group(cls=TagAwareGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='zgit')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              envvar='ZGIT_CONFIG', help='Config file (default: ~/.config/zgit/config.json)')
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr')
@click.pass_context
def cli(ctx, config_path, verbose):
    """zgit - run read-only git inspections across registered repositories.

    \b
    Usage: zgit [@tag] <command> [<args>]

    Prefix a command with @tag to target only repositories registered with
    that tag, e.g. `zgit @api status`. With no command, zgit shows status.
    """
    app = ctx.ensure_object(AppContext)
    app.config_path = config_path
    app.tag = ctx.meta.get('zgit.tag', NoTag())
    app.verbose = verbose

    setup_logging("DEBUG" if verbose else "WARNING")

    if ctx.invoked_subcommand is None:
        ctx.invoke(status_handler)


cli.add_command(status_handler)
cli.add_command(branch_handler)
cli.add_command(register_handler)
cli.add_command(unregister_handler)
cli.add_command(list_handler)


def main():
    cli()

if __name__ == "__main__":
    main()
