"""Data models for owner API requests and responses."""

from pytesla.models._base import EpochTimestamp, TeslaBaseModel, parse_epoch_timestamp
from pytesla.models.command import AutoParkAction, AutoParkRequest, CommandAck, CommandResponse
from pytesla.models.state import ChargeState, ClimateState, DriveState, GuiSettings, VehicleStateData
from pytesla.models.stream import StreamEvent
from pytesla.models.token import AuthToken
from pytesla.models.vehicle import Vehicle

__all__ = [
    "AuthToken",
    "AutoParkAction",
    "AutoParkRequest",
    "ChargeState",
    "ClimateState",
    "CommandAck",
    "CommandResponse",
    "DriveState",
    "EpochTimestamp",
    "GuiSettings",
    "StreamEvent",
    "TeslaBaseModel",
    "Vehicle",
    "VehicleStateData",
    "parse_epoch_timestamp",
]
