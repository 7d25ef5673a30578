"""CLI commands for SOQL queries and the updated/deleted change feeds."""

from __future__ import annotations

import click

from .client import SFRestClient
from .command_utils import connect_or_fail, echo_json, parse_when, run_or_fail
from .config import SFConfig


def _connect() -> SFRestClient:
    return connect_or_fail(lambda: SFRestClient(config=SFConfig.from_env()))


@click.command("query")
@click.argument("soql")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def query_cmd(soql: str, pretty: bool) -> None:
    """Run a SOQL query, following every nextRecordsUrl."""
    with _connect() as api:
        records = run_or_fail(api, lambda: api.query(soql))
    echo_json(records, pretty)


_window_options = [
    click.argument("object_name"),
    click.option("--start", required=True, help="Window start, ISO-8601 (UTC if no offset)."),
    click.option("--end", required=True, help="Window end, ISO-8601 (UTC if no offset)."),
    click.option("--pretty", is_flag=True, help="Pretty-print JSON."),
]


def _with_window_options(f):
    for opt in reversed(_window_options):
        f = opt(f)
    return f


@click.command("updated")
@_with_window_options
def updated_cmd(object_name: str, start: str, end: str, pretty: bool) -> None:
    """List Ids of OBJECT_NAME records updated in a time window."""
    t0, t1 = parse_when(start), parse_when(end)
    with _connect() as api:
        ids = run_or_fail(api, lambda: api.get_updated(object_name, t0, t1))
    echo_json(ids, pretty)


@click.command("deleted")
@_with_window_options
def deleted_cmd(object_name: str, start: str, end: str, pretty: bool) -> None:
    """List OBJECT_NAME records deleted in a time window."""
    t0, t1 = parse_when(start), parse_when(end)
    with _connect() as api:
        rows = run_or_fail(api, lambda: api.get_deleted(object_name, t0, t1))
    echo_json(rows, pretty)
