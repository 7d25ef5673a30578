"""CLI commands for single-record operations (get/create/update/delete)."""

from __future__ import annotations

import click

from .client import SFRestClient
from .command_utils import connect_or_fail, echo_json, parse_json_object, run_or_fail
from .config import SFConfig


def _connect() -> SFRestClient:
    return connect_or_fail(lambda: SFRestClient(config=SFConfig.from_env()))


@click.command("get")
@click.argument("object_name")
@click.argument("record_id")
@click.option("--pretty", is_flag=True, help="Pretty-print JSON.")
def get_cmd(object_name: str, record_id: str, pretty: bool) -> None:
    """Fetch one record by Id."""
    with _connect() as api:
        record = run_or_fail(api, lambda: api.get(object_name, record_id))
    echo_json(record, pretty)


@click.command("create")
@click.argument("object_name")
@click.argument("fields")
def create_cmd(object_name: str, fields: str) -> None:
    """Create a record from a JSON object of FIELDS; prints the new Id."""
    data = parse_json_object(fields)
    with _connect() as api:
        new_id = run_or_fail(api, lambda: api.create(object_name, data))
    click.echo(new_id)


@click.command("update")
@click.argument("object_name")
@click.argument("record_id")
@click.argument("fields")
def update_cmd(object_name: str, record_id: str, fields: str) -> None:
    """Update a record with a JSON object of FIELDS."""
    data = parse_json_object(fields)
    with _connect() as api:
        run_or_fail(api, lambda: api.update(object_name, record_id, data))
    click.echo(f"Updated {object_name} {record_id}")


@click.command("delete")
@click.argument("object_name")
@click.argument("record_id")
@click.confirmation_option(prompt="Delete this record?")
def delete_cmd(object_name: str, record_id: str) -> None:
    """Delete a record by Id."""
    with _connect() as api:
        run_or_fail(api, lambda: api.delete(object_name, record_id))
    click.echo(f"Deleted {object_name} {record_id}")
