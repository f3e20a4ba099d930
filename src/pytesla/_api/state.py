"""Vehicle state endpoints.

Endpoints:
  - GET /vehicles/{id}/data_request/charge_state
  - GET /vehicles/{id}/data_request/climate_state
  - GET /vehicles/{id}/data_request/drive_state
  - GET /vehicles/{id}/data_request/gui_settings
  - GET /vehicles/{id}/data_request/vehicle_state
"""

from __future__ import annotations

import logging
from typing import TypeVar

from pytesla._api._common import get_response, vehicle_url
from pytesla._transport import Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaDecodeError
from pytesla.models._base import TeslaBaseModel
from pytesla.models.state import ChargeState, ClimateState, DriveState, GuiSettings, VehicleStateData
from pytesla.models.vehicle import Vehicle
from pytesla.session import Session

_logger = logging.getLogger(__name__)

TState = TypeVar("TState", bound=TeslaBaseModel)


async def fetch_state(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    resource: str,
    model: type[TState],
) -> TState:
    """Fetch ``data_request/<resource>`` and parse it as *model*."""
    url = vehicle_url(config, vehicle.id, f"data_request/{resource}")
    decoded = await get_response(url=url, session=session, transport=transport)
    if not isinstance(decoded, dict):
        raise TeslaDecodeError(f"{resource} missing from {url}", endpoint=url)
    _logger.debug("State %s decoded vehicle=%s keys=%d", resource, vehicle.id, len(decoded))
    return model.model_validate(decoded)


async def fetch_charge_state(
    config: TeslaConfig, session: Session, transport: Transport, vehicle: Vehicle
) -> ChargeState:
    return await fetch_state(config, session, transport, vehicle, "charge_state", ChargeState)


async def fetch_climate_state(
    config: TeslaConfig, session: Session, transport: Transport, vehicle: Vehicle
) -> ClimateState:
    return await fetch_state(config, session, transport, vehicle, "climate_state", ClimateState)


async def fetch_drive_state(
    config: TeslaConfig, session: Session, transport: Transport, vehicle: Vehicle
) -> DriveState:
    return await fetch_state(config, session, transport, vehicle, "drive_state", DriveState)


async def fetch_gui_settings(
    config: TeslaConfig, session: Session, transport: Transport, vehicle: Vehicle
) -> GuiSettings:
    return await fetch_state(config, session, transport, vehicle, "gui_settings", GuiSettings)


async def fetch_vehicle_state(
    config: TeslaConfig, session: Session, transport: Transport, vehicle: Vehicle
) -> VehicleStateData:
    return await fetch_state(config, session, transport, vehicle, "vehicle_state", VehicleStateData)
