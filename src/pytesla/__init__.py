"""pytesla - Async Python client for the owner remote-control vehicle API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pytesla")
except PackageNotFoundError:
    __version__ = "0+local"
from pytesla._stream import ReconnectPolicy, VehicleStream
from pytesla.client import TeslaClient
from pytesla.config import TeslaConfig
from pytesla.exceptions import (
    TeslaApiError,
    TeslaAuthenticationError,
    TeslaCommandError,
    TeslaConfigError,
    TeslaDecodeError,
    TeslaError,
    TeslaStreamClosedError,
    TeslaStreamError,
    TeslaTransportError,
)
from pytesla.models import (
    AuthToken,
    AutoParkAction,
    AutoParkRequest,
    ChargeState,
    ClimateState,
    CommandAck,
    CommandResponse,
    DriveState,
    GuiSettings,
    StreamEvent,
    Vehicle,
    VehicleStateData,
)

__all__ = [
    "__version__",
    "AuthToken",
    "AutoParkAction",
    "AutoParkRequest",
    "ChargeState",
    "ClimateState",
    "CommandAck",
    "CommandResponse",
    "DriveState",
    "GuiSettings",
    "ReconnectPolicy",
    "StreamEvent",
    "TeslaApiError",
    "TeslaAuthenticationError",
    "TeslaClient",
    "TeslaCommandError",
    "TeslaConfig",
    "TeslaConfigError",
    "TeslaDecodeError",
    "TeslaError",
    "TeslaStreamClosedError",
    "TeslaStreamError",
    "TeslaTransportError",
    "Vehicle",
    "VehicleStateData",
    "VehicleStream",
]
