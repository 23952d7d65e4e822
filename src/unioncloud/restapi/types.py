"""Response metadata and option types for the UnionCloud API.

Pydantic models for the structured parts of a response that do not live in
the JSON body: rate-limit and pagination headers and the debug trace block.
Payloads themselves stay as decoded JSON.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class RateLimit(BaseModel):
    """Rate-limit snapshot from the ``X-RateLimit-*`` headers."""

    remaining: int
    limit: int
    reset: int


class PageCount(BaseModel):
    current: int = 1
    total: int = 0


class RecordCount(BaseModel):
    per_page: int = 0
    total: int = 0


class Pagination(BaseModel):
    """Pagination snapshot.

    Totals come from the response headers; the current page is echoed from
    the request's ``page`` query parameter.
    """

    pages: PageCount
    records: RecordCount


class RequestTrace(BaseModel):
    """Debug block describing the request that produced a response."""

    id: str | None = None
    uri: str
    parameters: dict[str, Any] = {}
    body: str = ""
    token: str | None = None
    token_expires: float | None = None
    status: str | None = None
    runtime: float | None = None

    # Present only when the matching headers are
    ratelimit: RateLimit | None = None
    pages: PageCount | None = None
    records: RecordCount | None = None


class TokenGrant(BaseModel):
    auth_token: str
    expires: int


class AuthenticateResponse(BaseModel):
    """Body returned by ``POST /authenticate``."""

    result: str = ""
    response: TokenGrant | None = None


class ClientOptions(BaseModel):
    """Client options.

    Only ``include_debug_info`` is interpreted by the client; any other key
    is kept and handed back by ``get_options``.
    """

    model_config = ConfigDict(extra="allow")

    include_debug_info: bool = False
