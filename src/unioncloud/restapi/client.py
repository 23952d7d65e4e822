"""UnionCloud REST API client.

Wires the request pipeline together: the builder checks the token and
assembles the request, the transport executes it and the normalizer turns
the response into an :class:`~.response.ApiResponse` or a classified error.
"""

import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pydantic
import structlog

from .auth import AuthState, Clock, Credentials, TokenSnapshot
from .catalog import ENDPOINTS
from .errors import DecodeError, UnionCloudError
from .request import AUTHENTICATE_PATH, DEFAULT_API_VERSION, RequestBuilder
from .resources import ResourceMethods
from .response import ApiResponse, ResponseNormalizer, read_local_payload
from .result import ApiResult, Failure, Success
from .transport import DEFAULT_TIMEOUT, Transport
from .types import AuthenticateResponse, ClientOptions

logger = structlog.get_logger(__name__)

AUTH_SUCCESS = "SUCCESS"


class UnionCloudClient(ResourceMethods):
    """Client for one UnionCloud host.

    Owns its token state; separate instances never share a token. Calls are
    synchronous and one at a time. Can be used as a context manager for
    automatic cleanup.
    """

    def __init__(
        self,
        host: str | None = None,
        options: Mapping[str, Any] | None = None,
        *,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        ca_bundle: str | Path | None = None,
        clock: Clock = time.time,
        transport: Transport | None = None,
    ):
        """Initialize the client.

        Args:
            host: Service host name (e.g. "union.unioncloud.org").
            options: Client options; ``include_debug_info`` enables request
                traces, any other key is passed through untouched.
            api_version: Value of the ``accept-version`` header.
            timeout: Connection-level timeout in seconds.
            ca_bundle: Optional pinned CA bundle for TLS verification.
            clock: Source of the current Unix time.
            transport: Pre-built transport, mainly for tests.
        """
        self.auth = AuthState(clock)
        self._builder = RequestBuilder(self.auth, host, api_version)
        self._transport = transport or Transport(timeout=timeout, ca_bundle=ca_bundle)
        self._normalizer = ResponseNormalizer(loader=self._load_payload)
        self._options = ClientOptions.model_validate(dict(options or {}))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self._transport.close()

    # Host and options

    def set_host(self, host: str) -> None:
        self._builder.host = host

    def get_host(self) -> str | None:
        return self._builder.host

    def set_options(self, options: Mapping[str, Any]) -> None:
        """Merge ``options`` into the current options."""
        self._options = ClientOptions.model_validate(
            self._options.model_dump() | dict(options)
        )

    def get_options(self) -> dict[str, Any]:
        return self._options.model_dump()

    # Token handling

    def set_auth_token(self, token: str, expires_at: float) -> float:
        return self.auth.set(token, expires_at)

    def get_auth_token(self) -> TokenSnapshot:
        return self.auth.get()

    def is_authenticated(self) -> bool:
        return self.auth.is_valid()

    def authenticate(
        self,
        user_email: str,
        user_password: str,
        app_id: str,
        app_password: str,
    ) -> float | None:
        """Obtain a new auth token.

        The request carries a SHA-256 signature over the credentials and the
        current timestamp. On success the token is stored with an absolute
        expiry.

        Returns:
            The expiry instant, or None when the service did not answer
            with ``result == "SUCCESS"`` (the stored token is left as is).

        Raises:
            ServiceError: If the service rejects the credentials.
            DecodeError: If a SUCCESS body carries no usable token.
            TransportError: On network failure.
        """
        credentials = Credentials(user_email, user_password, app_id, app_password)
        date_stamp = str(int(self.auth.now()))
        response = self.request(
            "POST",
            AUTHENTICATE_PATH,
            body=credentials.signed_payload(date_stamp),
        )

        data = response.data
        if not isinstance(data, dict) or data.get("result") != AUTH_SUCCESS:
            logger.warning("Authenticate did not succeed", result=_result_of(data))
            return None

        try:
            grant = AuthenticateResponse.model_validate(data).response
        except pydantic.ValidationError as e:
            msg = "Authenticate response carries no usable token"
            raise DecodeError(msg, status_code=response.status_code) from e
        if grant is None:
            msg = "Authenticate response carries no usable token"
            raise DecodeError(msg, status_code=response.status_code)

        expires_at = int(self.auth.now()) + grant.expires
        return self.auth.set(grant.auth_token, expires_at)

    # Pipeline

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        files: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        """Run one request through the pipeline.

        Raises:
            AuthExpiredError: Before any network call, if the token is
                missing or expired (except for ``/authenticate``).
            TransportError: On connection, TLS or timeout failure.
            DecodeError: If the response is not valid JSON.
            ServiceError: If the service returns an error envelope.
        """
        spec = self._builder.build(method, path, params, body, files)
        envelope = self._transport.send(spec)
        return self._normalizer.normalize(
            spec,
            envelope,
            self.auth.get(),
            debug=self._options.include_debug_info,
        )

    def call(self, operation: str, **arguments: Any) -> ApiResponse:
        """Call a catalog operation by name.

        Raises:
            ValueError: If the operation is unknown.
            TypeError: On missing or unexpected arguments.
        """
        try:
            endpoint = ENDPOINTS[operation]
        except KeyError as e:
            msg = f"Unknown operation: {operation}"
            raise ValueError(msg) from e
        bound = endpoint.bind(**arguments)
        return self.request(bound.method, bound.path, bound.params, bound.body)

    def try_call(self, operation: str, **arguments: Any) -> ApiResult:
        """Like :meth:`call`, but returns a :class:`Success` or :class:`Failure`."""
        try:
            return Success(self.call(operation, **arguments))
        except UnionCloudError as e:
            return Failure(e)

    def _load_payload(self, location: str) -> bytes:
        if location.startswith(("http://", "https://")):
            return self._transport.fetch(location)
        return read_local_payload(location)


def _result_of(data: Any) -> Any:
    return data.get("result") if isinstance(data, dict) else None
