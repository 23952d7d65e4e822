"""HTTPS transport for the UnionCloud API.

Executes a single :class:`~.request.RequestSpec` and hands back the raw
status, headers and body. Certificate verification is always enabled,
either against the system trust store or a pinned CA bundle. Nothing is
retried.
"""

import ssl
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import structlog

from .errors import DecodeError, TransportError
from .request import RequestSpec

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class ResponseEnvelope:
    """Raw result of one HTTP exchange."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


def verify_context(ca_bundle: str | Path | None = None) -> ssl.SSLContext:
    """Build the TLS context used for every connection.

    Args:
        ca_bundle: Optional path to a PEM bundle pinning the service's CAs.

    Raises:
        FileNotFoundError: If ``ca_bundle`` does not exist.
    """
    if ca_bundle is None:
        return ssl.create_default_context()
    bundle = Path(ca_bundle)
    if not bundle.exists():
        msg = f"CA bundle not found: {ca_bundle}"
        raise FileNotFoundError(msg)
    return ssl.create_default_context(cafile=str(bundle))


class Transport:
    """Thin wrapper around an ``httpx.Client``.

    Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        ca_bundle: str | Path | None = None,
        http_client: httpx.Client | None = None,
    ):
        """Initialize the transport.

        Args:
            timeout: Connection-level timeout in seconds.
            ca_bundle: Optional pinned CA bundle.
            http_client: Pre-built client, mainly for tests. When given,
                ``timeout`` and ``ca_bundle`` are ignored.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._client = http_client or httpx.Client(
            timeout=timeout,
            verify=verify_context(ca_bundle),
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        if not self._client.is_closed:
            self._client.close()

    def send(self, spec: RequestSpec) -> ResponseEnvelope:
        """Execute one request.

        Raises:
            TransportError: On connection, TLS, DNS, timeout or redirect failure.
            DecodeError: If the body cannot be decoded per its Content-Encoding.
        """
        start_time = time.time()
        headers = dict(spec.headers)
        kwargs = {}
        if spec.files:
            # httpx sets the multipart boundary itself
            headers.pop("Content-Type", None)
            kwargs["files"] = dict(spec.files)
        elif spec.body:
            kwargs["content"] = spec.body.encode("utf-8")

        logger.debug("Making API request", method=spec.method, path=spec.path)
        try:
            response = self._client.request(
                spec.method,
                spec.uri,
                headers=headers,
                **kwargs,
            )
        except httpx.DecodingError as e:
            logger.exception(
                "API response could not be decoded",
                method=spec.method,
                path=spec.path,
            )
            msg = f"Response body could not be decoded: {e}"
            raise DecodeError(msg) from e
        except httpx.RequestError as e:
            logger.exception(
                "API request failed",
                method=spec.method,
                path=spec.path,
                duration_seconds=round(time.time() - start_time, 3),
            )
            raise TransportError(str(e) or type(e).__name__) from e

        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )
        return ResponseEnvelope(
            status_code=response.status_code,
            headers=httpx.Headers(response.headers),
            body=response.content,
        )

    def fetch(self, url: str) -> bytes:
        """GET a raw resource, used for large-payload references.

        Raises:
            TransportError: On network failure or a non-2xx status.
        """
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.exception("Payload download failed", url=url)
            raise TransportError(str(e) or type(e).__name__) from e
        return response.content
