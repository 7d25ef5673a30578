from __future__ import annotations

from typing import List, Optional


class SFRestError(RuntimeError):
    """Base class for every error raised by sfrest."""


class MissingCredentialsError(SFRestError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class AuthError(SFRestError):
    """The token endpoint rejected the credentials or could not be reached."""

    def __init__(self, message: str, *, status_code: int = -1, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

    @classmethod
    def from_response(cls, status_code: int, body: str) -> AuthError:
        return cls(f"{status_code} {body}", status_code=status_code, body=body)


class UnknownTypeError(SFRestError):
    """The object type is not in the catalog; raised before any request is sent."""

    def __init__(self, type_name: str, relation: Optional[str] = None):
        self.type_name = type_name
        self.relation = relation
        if relation is None:
            msg = f"object type unknown: {type_name}"
        else:
            msg = f"object type {type_name} has no {relation!r} url"
        super().__init__(msg)


class ApiError(SFRestError):
    """
    A non-success response from the REST API.

    Attributes
    ----------
    status_code : int
        HTTP status code, or -1 when the failure was not an HTTP status
    body : str
        Response body (full; the message carries a truncated snippet)
    url : str
        The URL that was called, when known
    """

    def __init__(self, status_code: int, body: str, url: str = ""):
        snippet = (body or "")[:1200]
        super().__init__(f"{status_code} {snippet}")
        self.status_code = status_code
        self.body = body or ""
        self.url = url


class PaginationError(ApiError):
    """A query kept returning continuation links past the configured bound."""


class TransportError(SFRestError):
    """The HTTP request could not be completed (connection, TLS, timeout)."""


class TimestampError(SFRestError, ValueError):
    """A change-feed window bound cannot be turned into a UTC timestamp."""

    def __init__(self, value: object, reason: str):
        self.value = value
        super().__init__(f"invalid timestamp {value!r}: {reason}")
