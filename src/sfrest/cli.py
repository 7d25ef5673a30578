from __future__ import annotations

import logging
from typing import Optional, cast

import click
from click import Command

from . import __version__
from .command_objects import describe_cmd, objects_cmd
from .command_query import deleted_cmd, query_cmd, updated_cmd
from .command_records import create_cmd, delete_cmd, get_cmd, update_cmd
from .env_loader import load_env_files
from .logging_config import configure_logging

_logger = logging.getLogger(__name__)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=True,
)
@click.version_option(__version__, "--version", prog_name="sfrest")
@click.option(
    "-v",
    "--verbose",
    "loglevel",
    flag_value=logging.INFO,
    default=None,
    help="Enable INFO logs.",
)
@click.option(
    "-vv",
    "--very-verbose",
    "loglevel",
    flag_value=logging.DEBUG,
    help="Enable DEBUG logs.",
)
@click.pass_context
def cli(ctx: click.Context, loglevel: Optional[int]) -> None:
    """Salesforce REST CLI. Use subcommands like 'objects', 'get' or 'query'."""
    configure_logging(loglevel)
    # Load .env before any command reads SF_* variables
    load_env_files()
    _logger.debug("CLI start, version=%s", __version__)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Cast ensures IDE knows of the Command type
for _cmd in (
    objects_cmd,
    describe_cmd,
    get_cmd,
    create_cmd,
    update_cmd,
    delete_cmd,
    query_cmd,
    updated_cmd,
    deleted_cmd,
):
    cli.add_command(cast(Command, _cmd))
