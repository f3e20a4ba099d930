"""Vehicle list and vehicle record endpoints.

Endpoints:
  - GET /vehicles
  - GET /vehicles/{id}
  - GET /vehicles/{id}/mobile_enabled
"""

from __future__ import annotations

import logging

from pytesla._api._common import get_response, vehicle_url
from pytesla._transport import Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaDecodeError
from pytesla.models.vehicle import Vehicle
from pytesla.session import Session

_logger = logging.getLogger(__name__)


async def fetch_vehicle_list(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
) -> list[Vehicle]:
    """Fetch all vehicles associated with the authenticated user."""
    decoded = await get_response(url=f"{config.base_url}/vehicles", session=session, transport=transport)
    _logger.debug(
        "Vehicle list response decoded count=%d",
        len(decoded) if isinstance(decoded, list) else 0,
    )
    items = decoded if isinstance(decoded, list) else []
    return [Vehicle.model_validate(item) for item in items if isinstance(item, dict)]


async def fetch_vehicle(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle_id: int,
) -> Vehicle:
    """Fetch a single vehicle record by its command identifier."""
    url = vehicle_url(config, vehicle_id)
    decoded = await get_response(url=url, session=session, transport=transport)
    if not isinstance(decoded, dict):
        raise TeslaDecodeError(f"Vehicle record missing from {url}", endpoint=url)
    return Vehicle.model_validate(decoded)


async def fetch_mobile_enabled(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
) -> bool:
    """Whether mobile access is enabled in the vehicle's settings."""
    url = vehicle_url(config, vehicle.id, "mobile_enabled")
    decoded = await get_response(url=url, session=session, transport=transport)
    return decoded is True
