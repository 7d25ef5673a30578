"""
sfrest.executor - authenticated request execution
=================================================

Every call against the instance goes through :meth:`RequestExecutor.execute`:

1. build ``instance_url + path`` and the Authorization header from the
   current session,
2. perform the request,
3. record the ``Sforce-Limit-Info`` usage header (None when the response
   has none),
4. return on the expected status, re-authenticate and retry on 401 (bounded
   by ``max_reauth_attempts``), raise :class:`ApiError` otherwise.

Transport failures propagate as :class:`TransportError` and are not retried.
A client instance is meant for one thread at a time; two threads hitting a 401
together will both re-authenticate.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .exceptions import ApiError
from .session import SessionManager
from .transport import HttpResult, Transport

_logger = logging.getLogger(__name__)

LIMIT_INFO_HEADER = "Sforce-Limit-Info"
JSON_CONTENT_TYPE = "application/json"

_API_USAGE_RE = re.compile(r"(?<![\w-])api-usage=(\d+)/(\d+)")


@dataclass(frozen=True)
class ApiUsage:
    """Parsed ``api-usage=used/limit`` part of the usage header."""

    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return self.limit - self.used

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional[ApiUsage]:
        if not value:
            return None
        m = _API_USAGE_RE.search(value)
        if not m:
            return None
        return cls(used=int(m.group(1)), limit=int(m.group(2)))


def json_body(result: HttpResult) -> Any:
    """Decode a successful response; an undecodable body is an ApiError."""
    try:
        return result.json()
    except ValueError as e:
        raise ApiError(result.status_code, result.text) from e


class RequestExecutor:
    """Runs one logical request with the authenticated-retry protocol."""

    def __init__(
        self,
        sessions: SessionManager,
        transport: Transport,
        *,
        max_reauth_attempts: int = 1,
    ) -> None:
        self.sessions = sessions
        self.transport = transport
        self.max_reauth_attempts = max(0, int(max_reauth_attempts))
        self.usage_info: Optional[str] = None

    def _record_usage(self, result: HttpResult) -> None:
        # last response wins, including one without the header
        self.usage_info = result.header(LIMIT_INFO_HEADER)

    def execute(
        self,
        method: str,
        path: str,
        *,
        expected: int,
        body: Optional[bytes] = None,
        content_type: Optional[str] = None,
    ) -> HttpResult:
        """
        Perform ``method`` on the instance-relative ``path``.

        Parameters
        ----------
        method : str
            GET, POST or DELETE
        path : str
            Path (with query string) relative to the session's instance URL
        expected : int
            The single status code that counts as success
        body : bytes, optional
            Request payload
        content_type : str, optional
            Content-Type header for ``body``

        Returns
        -------
        HttpResult
            The successful response
        """
        reauths = 0
        while True:
            url = self.sessions.session.instance_url + path
            headers: Dict[str, str] = {
                "Authorization": self.sessions.authorization_header(),
                "Accept": JSON_CONTENT_TYPE,
            }
            if content_type:
                headers["Content-Type"] = content_type

            result = self.transport.perform(method, url, headers, body)
            self._record_usage(result)

            if result.status_code == expected:
                return result

            if result.status_code == 401 and reauths < self.max_reauth_attempts:
                reauths += 1
                _logger.warning(
                    "HTTP 401 for %s %s -> re-authenticating (%d/%d)",
                    method,
                    path,
                    reauths,
                    self.max_reauth_attempts,
                )
                self.sessions.authenticate()
                continue

            _logger.debug("HTTP %s error for %s: %s", result.status_code, url, result.text[:500])
            raise ApiError(result.status_code, result.text, url)
