"""Shared helpers for the click commands."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, TypeVar

import click

from .exceptions import MissingCredentialsError, SFRestError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING_HELP = (
    "Set these environment variables (or create a .env file), e.g.:\n"
    "  SF_USERNAME=...              # integration user\n"
    "  SF_PASSWORD=...              # password + security token if required\n"
    "  SF_CLIENT_ID=...             # Connected App Consumer Key\n"
    "  SF_CLIENT_SECRET=...         # Connected App Consumer Secret\n"
    "  SF_LOGIN_URL=https://login.salesforce.com  # optional; test.salesforce.com for sandboxes\n"
    "  SF_API_VERSION=v37.0         # optional"
)


def connect_or_fail(factory: Callable[[], T]) -> T:
    """Build a client, turning configuration and login failures into ClickExceptions."""
    try:
        return factory()
    except MissingCredentialsError as e:
        needed = ", ".join(e.missing)
        raise click.ClickException(
            f"Missing Salesforce credentials: {needed}\n\n{_MISSING_HELP}"
        ) from e
    except SFRestError as e:
        raise click.ClickException(f"Could not connect to Salesforce: {e}") from e


def run_or_fail(api: Any, action: Callable[[], T]) -> T:
    """Run one API action; report usage afterwards whether or not it failed."""
    try:
        return action()
    except SFRestError as e:
        raise click.ClickException(str(e)) from e
    finally:
        usage = api.usage_info()
        if usage:
            _logger.info("API usage: %s", usage)


def echo_json(data: Any, pretty: bool) -> None:
    click.echo(json.dumps(data, indent=2 if pretty else None, ensure_ascii=False))


def parse_json_object(value: str) -> dict:
    try:
        data = json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object")
    return data


def parse_when(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; a missing offset means UTC."""
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise click.BadParameter(f"not an ISO-8601 timestamp: {value!r}") from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
