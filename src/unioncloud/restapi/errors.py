"""Error taxonomy for the UnionCloud pipeline.

Every failure a call can end in is one of four kinds. Each kind is an
exception class carrying the service message and code, so callers can
either catch by class or branch on ``kind``.
"""

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Pagination, RateLimit, RequestTrace

UNAUTHORIZED = 401


class ErrorKind(StrEnum):
    """Classification of a failed call."""

    AUTH_EXPIRED = "auth_expired"
    SERVICE = "service"
    DECODE = "decode"
    TRANSPORT = "transport"


class UnionCloudError(Exception):
    """Base exception for all UnionCloud client failures."""

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        code: int | str | None = None,
        *,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code

    def __str__(self) -> str:
        if self.code is None:
            return self.message
        return f"{self.message} (code={self.code})"


class AuthExpiredError(UnionCloudError):
    """Raised before any network call when the cached token is missing or expired."""

    kind = ErrorKind.AUTH_EXPIRED

    def __init__(self, message: str = "Auth Token has expired"):
        super().__init__(message, UNAUTHORIZED)


class ServiceError(UnionCloudError):
    """Raised when the service answers with one of its error envelopes.

    The response metadata (rate limit, pagination and, in debug mode, the
    request trace) is attached so failures can be diagnosed the same way as
    successful calls.
    """

    kind = ErrorKind.SERVICE

    def __init__(
        self,
        message: str,
        code: int | str | None = None,
        *,
        status_code: int | None = None,
        rate_limit: "RateLimit | None" = None,
        pagination: "Pagination | None" = None,
        trace: "RequestTrace | None" = None,
    ):
        super().__init__(message, code, status_code=status_code)
        self.rate_limit = rate_limit
        self.pagination = pagination
        self.trace = trace


class DecodeError(UnionCloudError):
    """Raised when a response body (or a referenced payload) is not valid JSON."""

    kind = ErrorKind.DECODE


class TransportError(UnionCloudError):
    """Raised for connection, TLS, DNS and timeout failures."""

    kind = ErrorKind.TRANSPORT
