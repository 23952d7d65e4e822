"""Tagged result type for calls that should not raise.

``try_call`` wraps the raising pipeline and returns either :class:`Success`
or :class:`Failure`, so callers can use ``match`` instead of ``except``::

    match client.try_call("user_get", uid=42):
        case Success(response):
            ...
        case Failure(error) if error.kind is ErrorKind.AUTH_EXPIRED:
            ...
"""

from dataclasses import dataclass
from typing import TypeAlias

from .errors import ErrorKind, UnionCloudError
from .response import ApiResponse


@dataclass(frozen=True)
class Success:
    response: ApiResponse

    def unwrap(self) -> ApiResponse:
        return self.response


@dataclass(frozen=True)
class Failure:
    error: UnionCloudError

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def code(self) -> int | str | None:
        return self.error.code

    def unwrap(self) -> ApiResponse:
        """Re-raise the wrapped error."""
        raise self.error


ApiResult: TypeAlias = Success | Failure
