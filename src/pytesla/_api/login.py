"""OAuth token endpoint (password grant)."""

from __future__ import annotations

import logging
from typing import Any

from pytesla._api._common import decode_json
from pytesla._redact import redact_for_log
from pytesla._transport import Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaAuthenticationError, TeslaConfigError
from pytesla.models.token import AuthToken

_logger = logging.getLogger(__name__)


def build_login_request(config: TeslaConfig) -> dict[str, Any]:
    """Build the JSON body of the password-grant token request.

    Raises
    ------
    TeslaConfigError
        If any credential needed for the grant is missing.
    """
    missing = [
        name
        for name in ("username", "password", "client_id", "client_secret")
        if not getattr(config, name)
    ]
    if missing:
        raise TeslaConfigError(f"Missing credentials for login: {', '.join(missing)}")
    return {
        "grant_type": "password",
        "client_id": config.client_id,
        "client_secret": config.client_secret,
        "email": config.username,
        "password": config.password,
    }


def parse_login_response(response: Any, *, endpoint: str = "") -> AuthToken:
    """Parse the token endpoint response.

    Raises
    ------
    TeslaAuthenticationError
        If the response carries no ``access_token``.
    """
    if not isinstance(response, dict) or not response.get("access_token"):
        raise TeslaAuthenticationError(
            "Login response missing access_token",
            endpoint=endpoint,
        )

    expires_in = response.get("expires_in")
    created_at = response.get("created_at")
    refresh_token = response.get("refresh_token")
    return AuthToken(
        access_token=str(response["access_token"]),
        token_type=str(response.get("token_type") or "bearer"),
        expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
        created_at=int(created_at) if isinstance(created_at, (int, float)) else None,
        refresh_token=str(refresh_token) if refresh_token else None,
        raw=response,
    )


async def login(config: TeslaConfig, transport: Transport) -> AuthToken:
    """Exchange the configured credentials for a bearer token."""
    body = build_login_request(config)
    raw = await transport.request("POST", config.auth_url, json_body=body)
    decoded = decode_json(endpoint=config.auth_url, body=raw)
    if config.api_trace_enabled:
        _logger.debug("Login response decoded parsed=%s", redact_for_log(decoded))
    return parse_login_response(decoded, endpoint=config.auth_url)
