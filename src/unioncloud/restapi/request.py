"""Request construction for the UnionCloud API.

Turns a method, endpoint path, query parameters and body into an immutable
:class:`RequestSpec`. This is also where the auth token is injected, so an
expired token stops a call before anything touches the network.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import urlencode

from .. import __version__
from .auth import AuthState
from .errors import AuthExpiredError

AUTHENTICATE_PATH = "/authenticate"
AUTH_HEADER = "auth-token"
DEFAULT_API_VERSION = "v1"
USER_AGENT = f"UnionCloud API Wrapper (Python) v{__version__}"

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class RequestSpec:
    """A fully built request, executed exactly once by the transport."""

    method: str
    path: str
    uri: str
    params: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    files: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)


def _query_value(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


def build_query(params: Mapping[str, Any]) -> str:
    """URL-encode query parameters in insertion order.

    ``None`` values are left out and booleans are sent as ``1``/``0``.
    """
    return urlencode(
        [
            (key, _query_value(value))
            for key, value in params.items()
            if value is not None
        ],
    )


def encode_body(content: Any) -> str:
    """Serialize a request body as compact JSON.

    Empty content produces an empty body. Forward slashes are never escaped.
    """
    if not content:
        return ""
    return json.dumps(content, separators=(",", ":"))


class RequestBuilder:
    """Builds :class:`RequestSpec` objects for one host."""

    def __init__(
        self,
        auth: AuthState,
        host: str | None = None,
        api_version: str = DEFAULT_API_VERSION,
    ):
        self.auth = auth
        self.host = host
        self.api_version = api_version

    def base_headers(self) -> dict[str, str]:
        return {
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
            "accept-version": self.api_version,
        }

    def build(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> RequestSpec:
        """Assemble a request.

        Args:
            method: HTTP method.
            path: Endpoint path below ``/api`` (e.g. "/users/42").
            params: Query parameters, appended to the URI even when empty.
            body: JSON-serializable body, or None.
            files: Multipart attachments; cannot be combined with a body.

        Returns:
            Immutable request spec.

        Raises:
            ValueError: If no host is set, or both body and files are given.
            AuthExpiredError: If the path needs a token and the current one
                is missing or expired.
        """
        if not self.host:
            msg = "host is not set"
            raise ValueError(msg)
        if body and files:
            msg = "a request cannot carry both a JSON body and file attachments"
            raise ValueError(msg)

        params = dict(params or {})
        uri = f"https://{self.host}/api{path}?{build_query(params)}"

        headers = self.base_headers()
        if path != AUTHENTICATE_PATH:
            if not self.auth.is_valid():
                raise AuthExpiredError
            headers[AUTH_HEADER] = self.auth.get().token

        return RequestSpec(
            method=method.upper(),
            path=path,
            uri=uri,
            params=MappingProxyType(params),
            body=encode_body(body),
            headers=MappingProxyType(headers),
            files=MappingProxyType(dict(files or {})),
        )
