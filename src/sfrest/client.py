from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import quote

from .catalog import Catalog, ObjectMetadata
from .config import SFConfig
from .exceptions import ApiError
from .executor import JSON_CONTENT_TYPE, ApiUsage, RequestExecutor, json_body
from .paginator import QueryPaginator, Timestamp
from .session import SessionManager
from .transport import Transport

_logger = logging.getLogger(__name__)


def _encode(fields: Dict[str, Any]) -> bytes:
    return json.dumps(fields, separators=(",", ":")).encode("utf-8")


# ----------------------------------------------------------------------
# Main API client
# ----------------------------------------------------------------------
class SFRestClient:
    """
    Salesforce REST client using the OAuth username/password flow.

    Construction logs in and loads the sObject catalog; every later call
    resolves its URL from that catalog and re-authenticates once if the
    session has expired.

    Examples
    --------
    >>> with SFRestClient("me@example.com", "pw+token", "cid", "secret") as sf:
    ...     acct_id = sf.create("Account", {"Name": "Acme"})
    ...     rows = sf.query("SELECT Id, Name FROM Account")
    """

    def __init__(
        self,
        username: Optional[str] = None,
        password: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        *,
        config: Optional[SFConfig] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        overrides = {
            k: v
            for k, v in {
                "username": username,
                "password": password,
                "client_id": client_id,
                "client_secret": client_secret,
            }.items()
            if v is not None
        }
        cfg = replace(config or SFConfig(), **overrides)
        self.cfg = cfg

        credentials = cfg.credentials()

        owns_transport = transport is None
        self.transport = transport or Transport(timeout=cfg.timeout)
        self.sessions = SessionManager(credentials, self.transport, cfg.token_url)
        self.executor = RequestExecutor(
            self.sessions, self.transport, max_reauth_attempts=cfg.max_reauth_attempts
        )

        try:
            self.sessions.authenticate()
            self.catalog = Catalog.describe(self.executor, cfg.data_path)
        except Exception:
            # a caller-supplied transport stays open for the caller to close
            if owns_transport:
                self.transport.close()
            raise

        self.paginator = QueryPaginator(
            self.executor, self.catalog, cfg.data_path, max_pages=cfg.max_pages
        )
        _logger.info(
            "Connected to Salesforce instance=%s api=%s",
            self.sessions.session.instance_url,
            cfg.api_version,
        )

    @classmethod
    def from_config(cls, cfg: SFConfig, transport: Optional[Transport] = None) -> SFRestClient:
        return cls(config=cfg, transport=transport)

    @classmethod
    def from_env(cls) -> SFRestClient:
        return cls(config=SFConfig.from_env())

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> SFRestClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------------------- Usage ---------------------------------

    def usage_info(self) -> Optional[str]:
        """``Sforce-Limit-Info`` of the latest response; None if it had none."""
        return self.executor.usage_info

    def api_usage(self) -> Optional[ApiUsage]:
        return ApiUsage.parse(self.executor.usage_info)

    # --------------------------- Catalog -------------------------------

    def object_names(self, *, queryable_only: bool = False) -> List[str]:
        return self.catalog.queryable_names() if queryable_only else self.catalog.names()

    def describe(self, type_name: str) -> ObjectMetadata:
        return self.catalog.metadata(type_name)

    def _record_path(self, type_name: str, record_id: str) -> str:
        return f"{self.catalog.resolve_url(type_name)}/{quote(record_id, safe='')}"

    # --------------------------- Records -------------------------------

    def get(self, type_name: str, record_id: str) -> Dict[str, Any]:
        """Return the record ``record_id`` of ``type_name``."""
        path = self._record_path(type_name, record_id)
        return json_body(self.executor.execute("GET", path, expected=200))

    def create(self, type_name: str, fields: Dict[str, Any]) -> str:
        """Create a record and return its new Id."""
        path = self.catalog.resolve_url(type_name)
        result = self.executor.execute(
            "POST", path, expected=201, body=_encode(fields), content_type=JSON_CONTENT_TYPE
        )
        payload = json_body(result)
        if (
            not isinstance(payload, dict)
            or payload.get("success") is not True
            or not payload.get("id")
        ):
            raise ApiError(result.status_code, result.text, path)
        _logger.debug("Created %s %s", type_name, payload.get("id"))
        return payload["id"]

    def update(self, type_name: str, record_id: str, fields: Dict[str, Any]) -> None:
        """Update ``fields`` on a record (POST with a PATCH method override)."""
        path = self._record_path(type_name, record_id) + "?_HttpMethod=PATCH"
        self.executor.execute(
            "POST", path, expected=204, body=_encode(fields), content_type=JSON_CONTENT_TYPE
        )

    def delete(self, type_name: str, record_id: str) -> None:
        self.executor.execute("DELETE", self._record_path(type_name, record_id), expected=204)

    # --------------------------- Queries -------------------------------

    def query(self, soql: str) -> List[Dict[str, Any]]:
        """Run a SOQL query and return all rows across every page."""
        return self.paginator.query(soql)

    def iter_query(self, soql: str) -> Iterator[Dict[str, Any]]:
        """Yield rows of a SOQL query, fetching pages as they are consumed."""
        return self.paginator.iter_records(soql)

    def get_updated(self, type_name: str, start: Timestamp, end: Timestamp) -> List[str]:
        return self.paginator.get_updated(type_name, start, end)

    def get_deleted(
        self, type_name: str, start: Timestamp, end: Timestamp
    ) -> List[Dict[str, str]]:
        return self.paginator.get_deleted(type_name, start, end)
