from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode

from .config import Credentials
from .exceptions import AuthError, TransportError
from .transport import Transport

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Live authentication context returned by the token endpoint."""

    token_type: str
    access_token: str
    instance_url: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_response(cls, data: Any) -> Session:
        if not isinstance(data, dict):
            raise AuthError("Token response is not a JSON object.")
        missing = [k for k in ("token_type", "access_token", "instance_url") if not data.get(k)]
        if missing:
            raise AuthError("Token response missing: " + ", ".join(missing))
        return cls(
            token_type=data["token_type"],
            access_token=data["access_token"],
            instance_url=data["instance_url"].rstrip("/"),
            raw=dict(data),
        )

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"Session(token_type={self.token_type!r}, instance_url={self.instance_url!r})"


class SessionManager:
    """Owns the credentials and the single live :class:`Session`."""

    def __init__(self, credentials: Credentials, transport: Transport, token_url: str) -> None:
        self.credentials = credentials
        self.transport = transport
        self.token_url = token_url
        self._session: Optional[Session] = None
        self.auth_count = 0

    @property
    def session(self) -> Session:
        if self._session is None:
            raise AuthError("Not authenticated. Call authenticate() first.")
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def authorization_header(self) -> str:
        return self.session.authorization

    def authenticate(self) -> Session:
        """Run the OAuth password grant and replace the current session."""
        params = {
            "grant_type": "password",
            "username": self.credentials.username,
            "password": self.credentials.password,
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
        }
        headers = {
            "Content-Type": "application/x-www-form-urlencoded",
            "Accept": "application/json",
        }

        _logger.debug("Requesting access token from %s", self.token_url)
        try:
            result = self.transport.perform(
                "POST", self.token_url, headers, urlencode(params).encode("utf-8")
            )
        except TransportError as e:
            raise AuthError(str(e)) from e

        if result.status_code != 200:
            raise AuthError.from_response(result.status_code, result.text)

        try:
            payload = result.json()
        except ValueError as e:
            raise AuthError(f"Token response is not JSON: {result.text[:200]}") from e

        session = Session.from_response(payload)
        self._session = session
        self.auth_count += 1
        _logger.info(
            "Authenticated %s against instance=%s",
            self.credentials.username,
            session.instance_url,
        )
        return session
