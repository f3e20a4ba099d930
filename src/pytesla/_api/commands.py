"""Vehicle command endpoints.

Endpoints:
  - POST /vehicles/{id}/wake_up
  - POST /vehicles/{id}/command/{action}

Each command is one POST. Parameters travel either in a JSON body or,
for ``set_temps`` and ``remote_start_drive``, in the query string with
no body. Values are not range-checked here; the API rejects invalid
ones and the rejection surfaces as :class:`TeslaCommandError`.
"""

from __future__ import annotations

import enum
import logging

from pytesla._api._common import post_command, vehicle_url
from pytesla._api.state import fetch_drive_state
from pytesla._normalize import format_decimal
from pytesla._transport import Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaApiError, TeslaDecodeError
from pytesla.models.command import AutoParkAction, AutoParkRequest, CommandAck
from pytesla.models.vehicle import Vehicle
from pytesla.session import Session

_logger = logging.getLogger(__name__)


class VehicleCommand(enum.StrEnum):
    """Command paths relative to ``/vehicles/{id}/``."""

    WAKE_UP = "wake_up"
    CHARGE_PORT_OPEN = "command/charge_port_door_open"
    CHARGE_PORT_CLOSE = "command/charge_port_door_close"
    RESET_VALET_PIN = "command/reset_valet_pin"
    CHARGE_STANDARD = "command/charge_standard"
    CHARGE_MAX_RANGE = "command/charge_max_range"
    SET_CHARGE_LIMIT = "command/set_charge_limit"
    CHARGE_START = "command/charge_start"
    CHARGE_STOP = "command/charge_stop"
    SCHEDULE_SOFTWARE_UPDATE = "command/schedule_software_update"
    CANCEL_SOFTWARE_UPDATE = "command/cancel_software_update"
    FLASH_LIGHTS = "command/flash_lights"
    HONK_HORN = "command/honk_horn"
    DOOR_UNLOCK = "command/door_unlock"
    DOOR_LOCK = "command/door_lock"
    SET_TEMPS = "command/set_temps"
    CLIMATE_START = "command/auto_conditioning_start"
    CLIMATE_STOP = "command/auto_conditioning_stop"
    SUN_ROOF_CONTROL = "command/sun_roof_control"
    REMOTE_START = "command/remote_start_drive"
    TRUNK_OPEN = "command/trunk_open"
    SET_SENTRY_MODE = "command/set_sentry_mode"
    AUTOPARK = "command/autopark_request"
    TRIGGER_HOMELINK = "command/trigger_homelink"


async def send_command(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    command: VehicleCommand,
) -> CommandAck:
    """Send a command that takes no parameters."""
    return await post_command(config, session, transport, vehicle, command.value)


async def wake_up(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
) -> Vehicle:
    """Wake the vehicle and return its refreshed record."""
    ack = await post_command(config, session, transport, vehicle, VehicleCommand.WAKE_UP.value)
    url = vehicle_url(config, vehicle.id, VehicleCommand.WAKE_UP.value)
    record = (ack.raw or {}).get("response")
    if not isinstance(record, dict):
        raise TeslaDecodeError(f"Vehicle record missing from {url}", endpoint=url)
    return Vehicle.model_validate(record)


async def set_charge_limit(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    percent: int,
) -> CommandAck:
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.SET_CHARGE_LIMIT.value, body={"percent": percent}
    )


async def schedule_software_update(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    offset_sec: int,
) -> CommandAck:
    return await post_command(
        config,
        session,
        transport,
        vehicle,
        VehicleCommand.SCHEDULE_SOFTWARE_UPDATE.value,
        body={"offset_sec": offset_sec},
    )


async def set_temperature(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    driver: float,
    passenger: float,
) -> CommandAck:
    """Set the driver and passenger zone temperatures (query-string shape)."""
    return await post_command(
        config,
        session,
        transport,
        vehicle,
        VehicleCommand.SET_TEMPS.value,
        params={"driver_temp": format_decimal(driver), "passenger_temp": format_decimal(passenger)},
    )


async def move_pano_roof(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    state: str,
    percent: int,
) -> CommandAck:
    return await post_command(
        config,
        session,
        transport,
        vehicle,
        VehicleCommand.SUN_ROOF_CONTROL.value,
        body={"state": state, "percent": percent},
    )


async def remote_start(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    password: str,
) -> CommandAck:
    """Enable keyless driving; the account password goes in the query string."""
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.REMOTE_START.value, params={"password": password}
    )


async def open_trunk(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    which_trunk: str,
) -> CommandAck:
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.TRUNK_OPEN.value, body={"which_trunk": which_trunk}
    )


async def set_sentry_mode(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    on: bool,
) -> CommandAck:
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.SET_SENTRY_MODE.value, body={"on": on}
    )


async def _resolve_coordinates(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    lat: float | None,
    lon: float | None,
) -> tuple[float, float]:
    """Return the caller's coordinates, or the vehicle's current location.

    A failed drive-state read propagates; the write is never sent with
    placeholder coordinates.
    """
    if lat is not None and lon is not None:
        return lat, lon
    if lat is not None or lon is not None:
        raise ValueError("lat and lon must be given together")

    drive_state = await fetch_drive_state(config, session, transport, vehicle)
    if drive_state.latitude is None or drive_state.longitude is None:
        raise TeslaApiError(
            f"Drive state of vehicle {vehicle.id} has no location",
            endpoint=vehicle_url(config, vehicle.id, "data_request/drive_state"),
        )
    return drive_state.latitude, drive_state.longitude


async def autopark(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    action: AutoParkAction,
    *,
    lat: float | None = None,
    lon: float | None = None,
) -> CommandAck:
    """Send an autopark (summon) request."""
    lat, lon = await _resolve_coordinates(config, session, transport, vehicle, lat, lon)
    request = AutoParkRequest(vehicle_id=vehicle.vehicle_id, lat=lat, lon=lon, action=action.value)
    _logger.debug("Autopark vehicle=%s action=%s", vehicle.id, action.value)
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.AUTOPARK.value, body=request.to_body()
    )


async def trigger_homelink(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    *,
    lat: float | None = None,
    lon: float | None = None,
) -> CommandAck:
    """Toggle the configured Homelink device (the door state is unknown to the API)."""
    lat, lon = await _resolve_coordinates(config, session, transport, vehicle, lat, lon)
    request = AutoParkRequest(lat=lat, lon=lon)
    return await post_command(
        config, session, transport, vehicle, VehicleCommand.TRIGGER_HOMELINK.value, body=request.to_body()
    )
