"""Telemetry stream event model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from pytesla._normalize import safe_float, safe_int, safe_str
from pytesla.models._base import EpochTimestamp


class StreamEvent(BaseModel):
    """One telemetry record from the vehicle stream.

    Numeric fields are ``None`` when the record left the column empty
    (the stream does this for values the vehicle did not report).

    Parameters
    ----------
    timestamp : datetime
        Record time (UTC), from the leading epoch-milliseconds column.
    speed : int or None
        Speed in mph; empty while parked.
    odometer : float or None
        Odometer in miles.
    soc : int or None
        State of charge in percent.
    elevation : int or None
        Elevation in metres.
    est_heading, heading : int or None
        Estimated and reported heading in degrees.
    est_lat, est_lng : float or None
        Estimated position.
    power : int or None
        Instantaneous power in kW (negative while regenerating).
    shift_state : str or None
        ``"P"``, ``"R"``, ``"N"``, ``"D"``.
    range, est_range : int or None
        Rated and estimated range in miles.
    raw : str
        The record line as received.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: EpochTimestamp
    speed: int | None = None
    odometer: float | None = None
    soc: int | None = None
    elevation: int | None = None
    est_heading: int | None = None
    est_lat: float | None = None
    est_lng: float | None = None
    power: int | None = None
    shift_state: str | None = None
    range: int | None = None
    est_range: int | None = None
    heading: int | None = None
    raw: str = ""

    @field_validator("speed", "soc", "elevation", "est_heading", "power", "range", "est_range", "heading", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("odometer", "est_lat", "est_lng", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("shift_state", mode="before")
    @classmethod
    def _coerce_shift_state(cls, value: Any) -> str | None:
        return safe_str(value)
