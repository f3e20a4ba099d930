"""Command request payloads and the response envelope.

Every command endpoint answers with ``{"response": {"result": bool,
"reason": str}}`` or with an empty body. A command either succeeds,
returning a :class:`CommandAck` (or a typed payload such as the
refreshed :class:`~pytesla.models.vehicle.Vehicle` for wake-up), or
raises :class:`~pytesla.exceptions.TeslaCommandError` carrying the reason.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class AutoParkAction(enum.StrEnum):
    """``action`` values of an autopark request."""

    ABORT = "abort"
    FORWARD = "start_forward"
    REVERSE = "start_reverse"


class CommandResponse(BaseModel):
    """The ``response`` object of a command reply.

    ``result`` is ``None`` when the reply carried no ``result`` key, as
    happens for endpoints that return a record instead of an envelope.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    result: bool | None = None
    reason: str = ""

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return {}
        inner = values.get("response")
        if not isinstance(inner, dict):
            return {}
        merged: dict[str, Any] = {}
        if isinstance(inner.get("result"), bool):
            merged["result"] = inner["result"]
        if inner.get("reason"):
            merged["reason"] = str(inner["reason"])
        return merged

    @property
    def is_failure(self) -> bool:
        """A reply fails only when ``result`` is not true *and* a reason is given."""
        return self.result is not True and bool(self.reason)


class CommandAck(BaseModel):
    """Successful command acknowledgement.

    ``result`` is ``None`` when the endpoint answered with an empty body;
    use :attr:`has_body` to tell that apart from an explicit envelope.
    """

    model_config = ConfigDict(frozen=True)

    vehicle_id: int
    command: str
    result: bool | None = None
    reason: str = ""
    raw: dict[str, Any] | None = None

    @property
    def has_body(self) -> bool:
        return self.raw is not None


class AutoParkRequest(BaseModel):
    """Body of autopark (summon) and Homelink requests.

    A Homelink trigger is an autopark request with no ``vehicle_id`` and
    no ``action``; both keys are then left out of the body.
    """

    model_config = ConfigDict(frozen=True)

    vehicle_id: int = 0
    lat: float
    lon: float
    action: str = ""

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.vehicle_id:
            body["vehicle_id"] = self.vehicle_id
        body["lat"] = self.lat
        body["lon"] = self.lon
        if self.action:
            body["action"] = self.action
        return body
