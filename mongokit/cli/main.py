"""
Main CLI entry point for MongoKit.

The command tree is generated from ``mongokit.commands.COMMANDS``.

This module is part of MongoKit - MongoDB command line toolkit.
"""

import asyncio
import logging
from typing import Dict, Optional

import click
from dotenv import load_dotenv

from .. import __version__
from ..commands import (
    VERBS,
    CommandSpec,
    VerbSpec,
    commands_for,
    dispatch,
)
from ..config import (
    DEFAULT_TIMEOUT_MS,
    TIMEOUT_ENVVAR,
    URI_ENVVAR,
    Settings,
    configure_logging,
)
logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A click group that also accepts exact command aliases."""

    def __init__(self, *args, aliases: Optional[Dict[str, str]] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.aliases = dict(aliases or {})

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        # Report the full name, not the alias, in help and errors
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


def run_command(command: CommandSpec, settings: Settings, params: dict) -> None:
    """Run a command to completion and report failures as click errors."""
    try:
        asyncio.run(dispatch(command, settings, params))
    except Exception as e:
        logger.debug(f"'{command.path}' failed", exc_info=True)
        raise click.ClickException(f"An error occurred: {e}") from e


def build_command(command: CommandSpec) -> click.Command:
    params = [
        click.Option([f"--{flag.name}"], is_flag=True, default=False, help=flag.help)
        for flag in command.flags
    ]
    params += [
        click.Argument(
            [argument.name],
            required=argument.required,
            default=argument.default,
            metavar=argument.metavar,
        )
        for argument in command.arguments
    ]

    @click.pass_obj
    def callback(settings: Settings, **kwargs) -> None:
        run_command(command, settings, kwargs)

    aliases = ", ".join(command.aliases)
    return click.Command(
        command.noun,
        callback=callback,
        params=params,
        help=f"{command.help}\n\nAliases: {aliases}",
        short_help=command.help,
    )


def build_verb(verb: VerbSpec) -> click.Group:
    commands = commands_for(verb.name)
    group = AliasedGroup(
        verb.name,
        help=verb.help,
        aliases={alias: command.noun for command in commands for alias in command.aliases},
    )
    for command in commands:
        group.add_command(build_command(command))
    return group


@click.group(
    cls=AliasedGroup,
    aliases={alias: verb.name for verb in VERBS for alias in verb.aliases},
)
@click.version_option(version=__version__, prog_name="mongokit")
@click.option(
    "--uri",
    envvar=URI_ENVVAR,
    show_envvar=True,
    help=f"Connection string for your MongoDB database. You can also set the environment variable {URI_ENVVAR}",
)
@click.option(
    "--timeout-ms",
    envvar=TIMEOUT_ENVVAR,
    show_envvar=True,
    type=click.IntRange(min=1),
    default=DEFAULT_TIMEOUT_MS,
    show_default=True,
    help="How long to wait for the server before giving up, in milliseconds",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress to stderr")
@click.pass_context
def cli(ctx: click.Context, uri: Optional[str], timeout_ms: int, verbose: bool) -> None:
    """
    MongoKit - A command line toolkit for interacting with MongoDB.

    Reads and writes JSON on standard input/output, or JSON, YAML and CSV
    files picked by extension.

    Examples:
        mongokit get dbs
        mongokit get col mydb users users.yaml
        mongokit set col --drop mydb users users.csv
        mongokit update doc --upsert mydb users 5f1d7c... patch.json
    """
    ctx.obj = Settings(uri=uri, server_selection_timeout_ms=timeout_ms, verbose=verbose)
    configure_logging(ctx.obj)


# Register commands
for _verb in VERBS:
    cli.add_command(build_verb(_verb))


def main() -> None:
    """Entry point for the CLI."""
    load_dotenv()
    cli()


if __name__ == "__main__":
    main()
