"""UnionCloud REST API client package.

Provides the request/response pipeline for the UnionCloud service: token
state, request building, HTTPS transport and response normalization, plus a
declarative catalog of the resource endpoints.

Exports:
    UnionCloudClient: Client with authentication and resource methods.
    ApiResponse: Normalized successful response.
    Success, Failure, ApiResult: Tagged result returned by ``try_call``.
    ErrorKind and the exception classes of the error taxonomy.
    types: Module containing Pydantic models for response metadata.
"""

from . import types
from .auth import AuthState, Credentials, TokenSnapshot
from .catalog import ENDPOINTS, Endpoint
from .client import UnionCloudClient
from .errors import (
    AuthExpiredError,
    DecodeError,
    ErrorKind,
    ServiceError,
    TransportError,
    UnionCloudError,
)
from .request import DEFAULT_API_VERSION, RequestBuilder, RequestSpec
from .response import ApiResponse, ResponseNormalizer
from .result import ApiResult, Failure, Success
from .transport import DEFAULT_TIMEOUT, ResponseEnvelope, Transport

__all__ = [
    "DEFAULT_API_VERSION",
    "DEFAULT_TIMEOUT",
    "ENDPOINTS",
    "ApiResponse",
    "ApiResult",
    "AuthExpiredError",
    "AuthState",
    "Credentials",
    "DecodeError",
    "Endpoint",
    "ErrorKind",
    "Failure",
    "RequestBuilder",
    "RequestSpec",
    "ResponseEnvelope",
    "ResponseNormalizer",
    "ServiceError",
    "Success",
    "TokenSnapshot",
    "Transport",
    "TransportError",
    "UnionCloudClient",
    "UnionCloudError",
    "types",
]
