"""Authentication state and request signing.

The service issues an opaque token with a lifetime in seconds. The client
keeps the token and its absolute expiry in an :class:`AuthState` and checks
freshness before every call. Refresh is never automatic: once the token has
expired, calls fail with :class:`~.errors.AuthExpiredError` until the caller
authenticates again.
"""

import hashlib
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Credentials:
    """User and application secrets for one authenticate call.

    Never stored by the client.
    """

    user_email: str
    user_password: str
    app_id: str
    app_password: str

    def signature(self, date_stamp: str) -> str:
        """SHA-256 hex digest binding the credentials to ``date_stamp``."""
        message = (
            self.user_email
            + self.user_password
            + self.app_id
            + date_stamp
            + self.app_password
        )
        return hashlib.sha256(message.encode("utf-8")).hexdigest()

    def signed_payload(self, date_stamp: str) -> dict[str, Any]:
        """Build the ``/authenticate`` request body.

        The application password is only ever sent folded into ``hash``.
        """
        return {
            "email": self.user_email,
            "password": self.user_password,
            "app_id": self.app_id,
            "date_stamp": date_stamp,
            "hash": self.signature(date_stamp),
        }

    def __repr__(self) -> str:
        return f"Credentials(user_email={self.user_email!r}, app_id={self.app_id!r})"


@dataclass(frozen=True)
class AuthToken:
    token: str
    expires_at: float


@dataclass(frozen=True)
class TokenSnapshot:
    """Read-only view of the current token.

    ``time_left`` is negative once the token has expired. All fields are
    ``None`` when no token has been set.
    """

    token: str | None
    expires_at: float | None
    time_left: float | None


class AuthState:
    """Holds the single live token of one client.

    Not synchronized; a client instance is meant to be driven by one caller
    at a time.
    """

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._token: AuthToken | None = None

    def now(self) -> float:
        return self._clock()

    def is_valid(self) -> bool:
        """Return True iff a token is set and ``now < expires_at``."""
        if self._token is None:
            return False
        return self._clock() < self._token.expires_at

    def set(self, token: str, expires_at: float) -> float:
        """Replace the current token unconditionally.

        Returns:
            The stored expiry instant.
        """
        self._token = AuthToken(token=token, expires_at=expires_at)
        logger.info("Auth token updated", expires_at=expires_at)
        return expires_at

    def get(self) -> TokenSnapshot:
        if self._token is None:
            return TokenSnapshot(token=None, expires_at=None, time_left=None)
        return TokenSnapshot(
            token=self._token.token,
            expires_at=self._token.expires_at,
            time_left=self._token.expires_at - self._clock(),
        )
