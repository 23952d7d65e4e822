"""Response normalization for the UnionCloud API.

The service is inconsistent across endpoints: errors come in two different
envelopes, pagination and rate limits travel in headers, and very large
result sets are replaced by a pointer to a side file. The normalizer folds
all of that into a single :class:`ApiResponse` or a classified exception.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import structlog

from .auth import TokenSnapshot
from .errors import DecodeError, ServiceError, TransportError
from .request import RequestSpec
from .transport import ResponseEnvelope
from .types import PageCount, Pagination, RateLimit, RecordCount, RequestTrace

logger = structlog.get_logger(__name__)

PayloadLoader = Callable[[str], bytes]

TRACE_KEY = "request"
FILE_PATH_KEY = "file_path"


@dataclass
class ApiResponse:
    """Normalized successful response.

    ``data`` is the decoded JSON payload, with large-payload references
    already resolved and, in debug mode, the trace block merged in under
    ``"request"``.
    """

    data: Any
    status_code: int
    rate_limit: RateLimit | None = None
    pagination: Pagination | None = None
    trace: RequestTrace | None = None


def read_local_payload(path: str) -> bytes:
    """Read a large-payload reference from the local filesystem.

    Raises:
        TransportError: If the file cannot be read.
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        msg = f"Cannot read referenced payload: {path}"
        raise TransportError(msg) from e


def _intval(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _floatval(value: str | None) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return 0.0


def _field(obj: Any, key: str) -> Any:
    return obj.get(key) if isinstance(obj, dict) else None


def extract_rate_limit(headers: httpx.Headers) -> RateLimit | None:
    if "X-RateLimit-Remaining" not in headers:
        return None
    return RateLimit(
        remaining=_intval(headers.get("X-RateLimit-Remaining")),
        limit=_intval(headers.get("X-RateLimit-Limit")),
        reset=_intval(headers.get("X-RateLimit-Reset")),
    )


def extract_pagination(
    headers: httpx.Headers,
    params: dict[str, Any],
) -> Pagination | None:
    """Build the pagination snapshot.

    The current page is taken from the request's ``page`` parameter since
    the service does not echo it; it defaults to 1.
    """
    if "total_pages" not in headers:
        return None
    current = _intval(params["page"]) if "page" in params else 1
    return Pagination(
        pages=PageCount(current=current, total=_intval(headers.get("total_pages"))),
        records=RecordCount(
            per_page=_intval(headers.get("records_per_page")),
            total=_intval(headers.get("total_records")),
        ),
    )


class ResponseNormalizer:
    """Decodes and classifies raw responses."""

    def __init__(self, loader: PayloadLoader = read_local_payload):
        """Initialize the normalizer.

        Args:
            loader: Reads the resource named by a ``file_path`` reference.
        """
        self._loader = loader

    def normalize(
        self,
        spec: RequestSpec,
        envelope: ResponseEnvelope,
        token: TokenSnapshot | None = None,
        *,
        debug: bool = False,
    ) -> ApiResponse:
        """Turn a raw response into an :class:`ApiResponse`.

        Args:
            spec: The request that produced the response.
            envelope: Raw status, headers and body.
            token: Token snapshot recorded in the debug trace.
            debug: Merge a request trace block into the payload.

        Raises:
            DecodeError: If the body or a referenced payload is not JSON.
            ServiceError: If the body is one of the service error envelopes.
            TransportError: If a referenced payload cannot be read.
        """
        payload = self._decode(envelope.body, envelope.status_code)

        headers = httpx.Headers(envelope.headers)
        params = dict(spec.params)
        rate_limit = extract_rate_limit(headers)
        pagination = extract_pagination(headers, params)
        trace = None
        if debug:
            trace = self._trace(spec, headers, token, rate_limit, pagination)

        self._raise_for_service_error(
            payload,
            status_code=envelope.status_code,
            rate_limit=rate_limit,
            pagination=pagination,
            trace=trace,
        )

        if isinstance(payload, dict) and FILE_PATH_KEY in payload:
            payload = self._dereference(payload[FILE_PATH_KEY], envelope.status_code)

        if trace is not None and isinstance(payload, dict):
            payload = {TRACE_KEY: trace.model_dump(exclude_none=True)} | payload

        return ApiResponse(
            data=payload,
            status_code=envelope.status_code,
            rate_limit=rate_limit,
            pagination=pagination,
            trace=trace,
        )

    @staticmethod
    def _decode(body: bytes | str, status_code: int) -> Any:
        try:
            return json.loads(body)
        except ValueError as e:
            msg = f"Response body is not valid JSON: {e}"
            raise DecodeError(msg, status_code=status_code) from e

    @staticmethod
    def _raise_for_service_error(payload: Any, **context) -> None:
        if not isinstance(payload, dict):
            return
        if "errors" in payload:
            errors = payload["errors"]
            message = _field(errors, "error_message")
            code = _field(errors, "error_code")
        elif "error" in payload:
            error = payload["error"]
            message = _field(error, "message")
            code = _field(error, "code")
        else:
            return

        message = str(message) if message is not None else "Unknown service error"
        logger.error(
            "API error response",
            error_message=message,
            error_code=code,
            status_code=context["status_code"],
        )
        raise ServiceError(message, code, **context)

    def _dereference(self, location: Any, status_code: int) -> Any:
        if not isinstance(location, str) or not location:
            msg = f"Invalid file_path reference: {location!r}"
            raise DecodeError(msg, status_code=status_code)
        logger.debug("Resolving large-payload reference", file_path=location)
        raw = self._loader(location)
        try:
            return json.loads(raw)
        except ValueError as e:
            msg = f"Referenced payload is not valid JSON: {location}"
            raise DecodeError(msg, status_code=status_code) from e

    @staticmethod
    def _trace(
        spec: RequestSpec,
        headers: httpx.Headers,
        token: TokenSnapshot | None,
        rate_limit: RateLimit | None,
        pagination: Pagination | None,
    ) -> RequestTrace:
        return RequestTrace(
            id=headers.get("X-Request-Id"),
            uri=spec.uri,
            parameters=dict(spec.params),
            body=spec.body,
            token=token.token if token else None,
            token_expires=token.expires_at if token else None,
            status=headers.get("Status"),
            runtime=_floatval(headers.get("X-Runtime")),
            ratelimit=rate_limit,
            pages=pagination.pages if pagination else None,
            records=pagination.records if pagination else None,
        )
