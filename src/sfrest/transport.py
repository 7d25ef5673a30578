"""
sfrest.transport - single HTTP request execution
================================================

Thin wrapper around :class:`requests.Session`. It performs exactly one request
per call and never retries; re-authentication and status handling live in
:mod:`sfrest.executor`.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict

from .exceptions import TransportError

_logger = logging.getLogger(__name__)

USER_AGENT = "sfrest/1.0"


@dataclass
class HttpResult:
    """Status, headers and raw body of one HTTP response."""

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: bytes = b""

    def header(self, name: str) -> Optional[str]:
        """First value of header ``name`` (case-insensitive), or None."""
        return self.headers.get(name)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.body)


class Transport:
    """
    Performs one HTTP request and returns an :class:`HttpResult`.

    Parameters
    ----------
    timeout : float
        Per-request timeout in seconds
    session : requests.Session, optional
        Pre-built session; one is created when omitted
    """

    def __init__(self, timeout: float = 30.0, session: Optional[requests.Session] = None) -> None:
        self.timeout = float(timeout)
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT})

    def close(self) -> None:
        self.session.close()

    def perform(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None,
    ) -> HttpResult:
        t0 = time.perf_counter()
        try:
            r = self.session.request(
                method=method,
                url=url,
                headers=dict(headers or {}),
                data=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            _logger.debug("%s %s failed: %s", method.upper(), url, e)
            raise TransportError(str(e)) from e

        dt = (time.perf_counter() - t0) * 1000.0
        _logger.debug("%s %s -> %s %sms", method.upper(), url, r.status_code, round(dt, 1))
        return HttpResult(
            status_code=r.status_code,
            headers=CaseInsensitiveDict(r.headers),
            body=r.content or b"",
        )
