"""Client configuration for pytesla."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pytesla._constants import (
    AUTH_URL,
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_STREAM_QUEUE_SIZE,
    STREAM_COLUMNS,
    STREAMING_URL,
)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class TeslaConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        Account email. Also the basic-auth username of the telemetry stream.
    password : str
        Account password, used for the OAuth password grant.
    client_id : str
        OAuth client ID.
    client_secret : str
        OAuth client secret.
    access_token : str or None
        Pre-issued bearer token. When set, :meth:`TeslaClient.login`
        skips the password grant and uses this token directly.
    base_url : str
        Owner API base URL (commands and reads).
    auth_url : str
        OAuth token endpoint.
    streaming_url : str
        Telemetry streaming host.
    stream_columns : tuple[str, ...]
        Columns requested from the streaming endpoint, in record order.
    stream_queue_size : int
        Capacity of each stream's event queue. ``0`` means unbounded.
    request_timeout : float
        Total timeout in seconds for command and read requests.
    api_trace_enabled : bool
        Log redacted request/response bodies at DEBUG level.
    """

    username: str = ""
    password: str = ""
    client_id: str = ""
    client_secret: str = ""
    access_token: str | None = None
    base_url: str = BASE_URL
    auth_url: str = AUTH_URL
    streaming_url: str = STREAMING_URL
    stream_columns: tuple[str, ...] = STREAM_COLUMNS
    stream_queue_size: int = DEFAULT_STREAM_QUEUE_SIZE
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    api_trace_enabled: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> TeslaConfig:
        """Create configuration from environment variables.

        Reads ``TESLA_USERNAME``, ``TESLA_PASSWORD``, ``TESLA_CLIENT_ID``,
        ``TESLA_CLIENT_SECRET`` and the optional ``TESLA_*`` variables
        below. Explicit keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        TeslaConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "TESLA_USERNAME": "username",
            "TESLA_PASSWORD": "password",
            "TESLA_CLIENT_ID": "client_id",
            "TESLA_CLIENT_SECRET": "client_secret",
            "TESLA_ACCESS_TOKEN": "access_token",
            "TESLA_BASE_URL": "base_url",
            "TESLA_AUTH_URL": "auth_url",
            "TESLA_STREAMING_URL": "streaming_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("TESLA_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        queue_env = env.get("TESLA_STREAM_QUEUE_SIZE")
        if queue_env is not None and "stream_queue_size" not in overrides:
            config_kwargs["stream_queue_size"] = int(queue_env)

        if "api_trace_enabled" not in overrides:
            config_kwargs["api_trace_enabled"] = _env_bool(
                env.get("TESLA_API_TRACE_ENABLED"),
                False,
            )

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
