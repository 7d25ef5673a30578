from __future__ import annotations

import click

from .client import SFRestClient
from .command_utils import connect_or_fail, echo_json, run_or_fail
from .config import SFConfig


@click.command("objects")
@click.option(
    "--all",
    "show_all",
    is_flag=True,
    help="Show all sObjects (default: only queryable).",
)
def objects_cmd(show_all: bool) -> None:
    """List sObjects from the global describe (queryable by default)."""
    api = connect_or_fail(lambda: SFRestClient(config=SFConfig.from_env()))
    with api:
        for name in api.object_names(queryable_only=not show_all):
            click.echo(name)


@click.command("describe")
@click.argument("object_name")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def describe_cmd(object_name: str, pretty: bool) -> None:
    """Show the catalog entry (urls and flags) for one sObject."""
    api = connect_or_fail(lambda: SFRestClient(config=SFConfig.from_env()))
    with api:
        meta = run_or_fail(api, lambda: api.describe(object_name))
    echo_json(meta.raw, pretty)
