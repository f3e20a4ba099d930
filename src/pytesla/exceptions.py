"""Custom exception hierarchy for pytesla."""

from __future__ import annotations

from pytesla._constants import STREAM_CLOSED_MESSAGE


class TeslaError(Exception):
    """Base exception for all pytesla errors."""


class TeslaConfigError(TeslaError):
    """Invalid or missing configuration."""


class TeslaTransportError(TeslaError):
    """HTTP-level failure (network, non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class TeslaDecodeError(TeslaTransportError):
    """Response body or stream record could not be decoded."""


class TeslaApiError(TeslaError):
    """The API answered, but reported a failure."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class TeslaAuthenticationError(TeslaApiError):
    """Login failed or the access token was rejected."""


class TeslaCommandError(TeslaApiError):
    """A command was refused by the vehicle or the API.

    The exception message is exactly the ``reason`` string from the
    response envelope (e.g. ``"could_not_wake_buses"``), which is also
    available as :attr:`reason`.
    """

    def __init__(self, reason: str, *, endpoint: str = "") -> None:
        self.reason = reason
        super().__init__(reason, endpoint=endpoint)


class TeslaStreamError(TeslaError):
    """Telemetry stream failure."""


class TeslaStreamClosedError(TeslaStreamError):
    """The remote peer ended the telemetry stream.

    This is the recoverable case: callers typically reopen the stream
    when they receive it.
    """

    def __init__(self, message: str = STREAM_CLOSED_MESSAGE) -> None:
        super().__init__(message)
