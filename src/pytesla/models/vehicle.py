"""Vehicle model."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pytesla._normalize import safe_int
from pytesla.models._base import TeslaBaseModel


class Vehicle(TeslaBaseModel):
    """A vehicle associated with the user's account.

    Fields are mapped from the ``/vehicles`` list response. ``id`` is the
    identifier used in command and read URLs; ``vehicle_id`` is a second
    identifier used only by autopark requests and the telemetry stream.
    """

    id: int
    """Command/read identifier."""
    vehicle_id: int = 0
    """Legacy identifier for autopark and streaming."""
    vin: str = ""
    """Vehicle Identification Number."""
    display_name: str = ""
    """User-defined vehicle name."""
    option_codes: str = ""
    """Comma-separated factory option codes."""
    color: str | None = None
    tokens: list[str] = Field(default_factory=list)
    """Streaming tokens; ``tokens[0]`` is the stream password."""
    state: str = ""
    """Connectivity state (``"online"``, ``"asleep"``, ``"offline"``)."""
    id_s: str = ""
    """String form of :attr:`id`."""
    remote_start_enabled: bool = False
    calendar_enabled: bool = False
    notifications_enabled: bool = False
    backseat_token: str | None = None
    backseat_token_updated_at: int | None = None

    @property
    def is_online(self) -> bool:
        """Whether the last reported state is ``"online"``."""
        return self.state == "online"

    @field_validator("id", "vehicle_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> int:
        parsed = safe_int(value)
        return parsed if parsed is not None else 0

    @field_validator("tokens", mode="before")
    @classmethod
    def _coerce_tokens(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(item) for item in value if item]
