from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .env_loader import load_env_files
from .exceptions import MissingCredentialsError

DEFAULT_LOGIN_URL = "https://login.salesforce.com"
DEFAULT_API_VERSION = "v37.0"


@dataclass(frozen=True)
class Credentials:
    """The OAuth password-grant credential set; fixed for the life of a client."""

    username: str
    password: str
    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, client_id={self.client_id!r})"


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Configuration for the Salesforce REST client."""

    username: Optional[str] = None
    password: Optional[str] = None
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    # Base login URL (not the instance URL)
    login_url: str = DEFAULT_LOGIN_URL

    # Version segment used for /sobjects/ and /query/
    api_version: str = DEFAULT_API_VERSION

    timeout: float = 30.0

    # Re-authentications allowed per operation before a 401 is surfaced
    max_reauth_attempts: int = 1

    # Upper bound on pages followed by a single query
    max_pages: int = 10000

    @classmethod
    def from_env(cls, *, load_dotenv_files: bool = True) -> SFConfig:
        """Load configuration from environment variables (and .env if present)."""
        if load_dotenv_files:
            load_env_files(quiet=True)
        return cls(
            username=os.getenv("SF_USERNAME"),
            password=os.getenv("SF_PASSWORD"),
            client_id=os.getenv("SF_CLIENT_ID"),
            client_secret=os.getenv("SF_CLIENT_SECRET"),
            login_url=os.getenv("SF_LOGIN_URL", DEFAULT_LOGIN_URL),
            api_version=os.getenv("SF_API_VERSION", DEFAULT_API_VERSION),
            timeout=float(os.getenv("SF_TIMEOUT", "30")),
            max_reauth_attempts=int(os.getenv("SF_MAX_REAUTH", "1")),
            max_pages=int(os.getenv("SF_MAX_PAGES", "10000")),
        )

    @property
    def token_url(self) -> str:
        return f"{self.login_url.rstrip('/')}/services/oauth2/token"

    @property
    def data_path(self) -> str:
        """Instance-relative root of the versioned REST API."""
        return f"/services/data/{self.api_version}"

    def credentials(self) -> Credentials:
        """Return the credential set, or raise listing the env vars that are missing."""
        missing = [
            k
            for k, v in {
                "SF_USERNAME": self.username,
                "SF_PASSWORD": self.password,
                "SF_CLIENT_ID": self.client_id,
                "SF_CLIENT_SECRET": self.client_secret,
            }.items()
            if not v
        ]
        if missing:
            raise MissingCredentialsError(missing)

        return Credentials(
            username=self.username,  # type: ignore[arg-type]
            password=self.password,  # type: ignore[arg-type]
            client_id=self.client_id,  # type: ignore[arg-type]
            client_secret=self.client_secret,  # type: ignore[arg-type]
        )
