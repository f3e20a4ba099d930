"""Session state management for authenticated API calls."""

from __future__ import annotations

import time

from pydantic import BaseModel, ConfigDict, Field

#: Fallback token time-to-live in seconds when the token response
#: carries no ``expires_in`` (45 days, the owner API's usual lifetime).
DEFAULT_SESSION_TTL: float = 45 * 24 * 3600


class Session(BaseModel):
    """Bearer token state after successful login.

    Parameters
    ----------
    access_token : str
        OAuth bearer token sent with every request.
    token_type : str
        Token type reported by the auth server (normally ``"bearer"``).
    created_at : float
        Monotonic timestamp (``time.monotonic()``) when the session
        was created.  Defaults to *now* if not provided.
    ttl : float
        Time-to-live in seconds.  After this period the session is
        considered expired and should be refreshed via a new login.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    access_token: str
    token_type: str = "bearer"
    created_at: float = Field(default_factory=time.monotonic)
    ttl: float = DEFAULT_SESSION_TTL

    @property
    def authorization(self) -> str:
        """Value of the ``Authorization`` header."""
        return f"Bearer {self.access_token}"

    @property
    def is_expired(self) -> bool:
        """Whether the session has exceeded its TTL."""
        return (time.monotonic() - self.created_at) >= self.ttl

    @property
    def age(self) -> float:
        """Seconds since the session was created."""
        return time.monotonic() - self.created_at
