from __future__ import annotations

import logging

try:  # prefer importlib.metadata, fall back on dev installs
    from importlib.metadata import PackageNotFoundError, version
except Exception:  # pragma: no cover
    version = None
    PackageNotFoundError = Exception  # type: ignore[misc]

try:
    __version__ = version("sfrest") if version else "0.0.0"
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

from .catalog import Catalog, ObjectMetadata
from .client import SFRestClient
from .config import Credentials, SFConfig
from .exceptions import (
    ApiError,
    AuthError,
    MissingCredentialsError,
    PaginationError,
    SFRestError,
    TimestampError,
    TransportError,
    UnknownTypeError,
)
from .executor import ApiUsage
from .paginator import QueryPage, format_timestamp
from .session import Session
from .transport import HttpResult, Transport

# Keep library modules quiet unless the app configures logging:
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "SFRestClient",
    "SFConfig",
    "Credentials",
    "Session",
    "Catalog",
    "ObjectMetadata",
    "QueryPage",
    "ApiUsage",
    "HttpResult",
    "Transport",
    "format_timestamp",
    "SFRestError",
    "AuthError",
    "ApiError",
    "PaginationError",
    "TimestampError",
    "TransportError",
    "UnknownTypeError",
    "MissingCredentialsError",
]
