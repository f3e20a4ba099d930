"""Authentication token model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class AuthToken(BaseModel):
    """Token returned by the OAuth token endpoint.

    Parameters
    ----------
    access_token : str
        Bearer token for API requests.
    token_type : str
        Token type (normally ``"bearer"``).
    expires_in : int or None
        Lifetime in seconds, when reported.
    created_at : int or None
        Issue time (epoch seconds), when reported.
    refresh_token : str or None
        Refresh token, when reported.
    raw : dict
        Full decoded token dict for access to additional fields.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    created_at: int | None = None
    refresh_token: str | None = None
    raw: dict[str, Any]
