"""High-level async client for the owner remote-control API."""

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import aiohttp

from pytesla._api import commands as _commands_api
from pytesla._api import login as _login_api
from pytesla._api import state as _state_api
from pytesla._api import stream as _stream_api
from pytesla._api import vehicles as _vehicles_api
from pytesla._api.commands import VehicleCommand
from pytesla._stream import ReconnectPolicy, VehicleStream, iter_stream_events
from pytesla._transport import HttpTransport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaError
from pytesla.models.command import AutoParkAction, CommandAck
from pytesla.models.state import ChargeState, ClimateState, DriveState, GuiSettings, VehicleStateData
from pytesla.models.stream import StreamEvent
from pytesla.models.vehicle import Vehicle
from pytesla.session import DEFAULT_SESSION_TTL, Session

_logger = logging.getLogger(__name__)


class TeslaClient:
    """Async client for the owner remote-control API.

    Usage::

        async with TeslaClient(config) as client:
            await client.login()
            vehicles = await client.get_vehicles()
            await client.lock_doors(vehicles[0])

    Every command is a single request (autopark and Homelink may read the
    drive state first). Nothing is retried: transport failures, decode
    failures and refused commands all raise to the caller.
    """

    def __init__(
        self,
        config: TeslaConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._session: Session | None = None
        self._streams: set[VehicleStream] = set()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> TeslaClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        for stream in list(self._streams):
            await stream.close()
        self._streams.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> None:
        """Obtain a bearer token (or adopt ``config.access_token``)."""
        if self._config.access_token:
            self._session = Session(access_token=self._config.access_token)
            return
        transport = self._require_transport()
        token = await _login_api.login(self._config, transport)
        ttl = float(token.expires_in) if token.expires_in else DEFAULT_SESSION_TTL
        self._session = Session(access_token=token.access_token, token_type=token.token_type, ttl=ttl)
        _logger.debug("Logged in token_type=%s ttl=%.0fs", token.token_type, ttl)

    async def ensure_session(self) -> Session:
        """Return an active session, logging in again if it expired."""
        if self._session is not None and not self._session.is_expired:
            return self._session
        await self.login()
        assert self._session is not None  # noqa: S101
        return self._session

    def invalidate_session(self) -> None:
        """Force session invalidation (next call will log in again)."""
        self._session = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise TeslaError("Client not initialized. Use 'async with TeslaClient(...) as client:'")
        return self._transport

    async def _command(self, vehicle: Vehicle, command: VehicleCommand) -> CommandAck:
        session = await self.ensure_session()
        return await _commands_api.send_command(self._config, session, self._require_transport(), vehicle, command)

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_vehicles(self) -> list[Vehicle]:
        """Fetch all vehicles associated with the account."""
        session = await self.ensure_session()
        return await _vehicles_api.fetch_vehicle_list(self._config, session, self._require_transport())

    async def get_vehicle(self, vehicle_id: int) -> Vehicle:
        """Fetch one vehicle record by its command identifier."""
        session = await self.ensure_session()
        return await _vehicles_api.fetch_vehicle(self._config, session, self._require_transport(), vehicle_id)

    async def mobile_enabled(self, vehicle: Vehicle) -> bool:
        """Whether mobile access is enabled for the vehicle."""
        session = await self.ensure_session()
        return await _vehicles_api.fetch_mobile_enabled(self._config, session, self._require_transport(), vehicle)

    async def charge_state(self, vehicle: Vehicle) -> ChargeState:
        session = await self.ensure_session()
        return await _state_api.fetch_charge_state(self._config, session, self._require_transport(), vehicle)

    async def climate_state(self, vehicle: Vehicle) -> ClimateState:
        session = await self.ensure_session()
        return await _state_api.fetch_climate_state(self._config, session, self._require_transport(), vehicle)

    async def drive_state(self, vehicle: Vehicle) -> DriveState:
        session = await self.ensure_session()
        return await _state_api.fetch_drive_state(self._config, session, self._require_transport(), vehicle)

    async def gui_settings(self, vehicle: Vehicle) -> GuiSettings:
        session = await self.ensure_session()
        return await _state_api.fetch_gui_settings(self._config, session, self._require_transport(), vehicle)

    async def vehicle_state(self, vehicle: Vehicle) -> VehicleStateData:
        session = await self.ensure_session()
        return await _state_api.fetch_vehicle_state(self._config, session, self._require_transport(), vehicle)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def wake_up(self, vehicle: Vehicle) -> Vehicle:
        """Wake the vehicle; returns the refreshed vehicle record."""
        session = await self.ensure_session()
        return await _commands_api.wake_up(self._config, session, self._require_transport(), vehicle)

    async def open_charge_port(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_PORT_OPEN)

    async def close_charge_port(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_PORT_CLOSE)

    async def reset_valet_pin(self, vehicle: Vehicle) -> CommandAck:
        """Clear the valet mode PIN, if one is set."""
        return await self._command(vehicle, VehicleCommand.RESET_VALET_PIN)

    async def set_charge_limit_standard(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_STANDARD)

    async def set_charge_limit_max(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_MAX_RANGE)

    async def set_charge_limit(self, vehicle: Vehicle, percent: int) -> CommandAck:
        """Set a custom charge limit in percent."""
        session = await self.ensure_session()
        return await _commands_api.set_charge_limit(
            self._config, session, self._require_transport(), vehicle, percent
        )

    async def start_charging(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_START)

    async def stop_charging(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CHARGE_STOP)

    async def schedule_software_update(self, vehicle: Vehicle, offset_sec: int) -> CommandAck:
        """Schedule an already-downloaded software update *offset_sec* seconds from now."""
        session = await self.ensure_session()
        return await _commands_api.schedule_software_update(
            self._config, session, self._require_transport(), vehicle, offset_sec
        )

    async def cancel_software_update(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CANCEL_SOFTWARE_UPDATE)

    async def flash_lights(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.FLASH_LIGHTS)

    async def honk_horn(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.HONK_HORN)

    async def unlock_doors(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.DOOR_UNLOCK)

    async def lock_doors(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.DOOR_LOCK)

    async def set_temperature(self, vehicle: Vehicle, driver: float, passenger: float) -> CommandAck:
        """Set driver and passenger zone temperatures, in the vehicle's configured unit."""
        session = await self.ensure_session()
        return await _commands_api.set_temperature(
            self._config, session, self._require_transport(), vehicle, driver, passenger
        )

    async def start_air_conditioning(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CLIMATE_START)

    async def stop_air_conditioning(self, vehicle: Vehicle) -> CommandAck:
        return await self._command(vehicle, VehicleCommand.CLIMATE_STOP)

    async def move_pano_roof(self, vehicle: Vehicle, state: str, percent: int = 0) -> CommandAck:
        """Move the panoramic roof.

        Approximate opening per *state*: ``open`` 100%, ``close`` 0%,
        ``comfort`` 80%, ``vent`` 15%, ``move`` uses *percent*.
        """
        session = await self.ensure_session()
        return await _commands_api.move_pano_roof(
            self._config, session, self._require_transport(), vehicle, state, percent
        )

    async def remote_start(self, vehicle: Vehicle, password: str) -> CommandAck:
        """Enable keyless driving; requires the account password."""
        session = await self.ensure_session()
        return await _commands_api.remote_start(self._config, session, self._require_transport(), vehicle, password)

    async def open_trunk(self, vehicle: Vehicle, which_trunk: str) -> CommandAck:
        """Open the ``"front"`` or ``"rear"`` trunk."""
        session = await self.ensure_session()
        return await _commands_api.open_trunk(self._config, session, self._require_transport(), vehicle, which_trunk)

    async def set_sentry_mode(self, vehicle: Vehicle, on: bool) -> CommandAck:
        session = await self.ensure_session()
        return await _commands_api.set_sentry_mode(self._config, session, self._require_transport(), vehicle, on)

    async def sentry_mode_enable(self, vehicle: Vehicle) -> CommandAck:
        return await self.set_sentry_mode(vehicle, True)

    async def sentry_mode_disable(self, vehicle: Vehicle) -> CommandAck:
        return await self.set_sentry_mode(vehicle, False)

    async def _autopark(
        self,
        vehicle: Vehicle,
        action: AutoParkAction,
        lat: float | None,
        lon: float | None,
    ) -> CommandAck:
        session = await self.ensure_session()
        return await _commands_api.autopark(
            self._config, session, self._require_transport(), vehicle, action, lat=lat, lon=lon
        )

    async def autopark_abort(
        self, vehicle: Vehicle, *, lat: float | None = None, lon: float | None = None
    ) -> CommandAck:
        """Abort a running autopark/summon manoeuvre."""
        return await self._autopark(vehicle, AutoParkAction.ABORT, lat, lon)

    async def autopark_forward(
        self, vehicle: Vehicle, *, lat: float | None = None, lon: float | None = None
    ) -> CommandAck:
        """Pull the vehicle forward. The vehicle will move."""
        return await self._autopark(vehicle, AutoParkAction.FORWARD, lat, lon)

    async def autopark_reverse(
        self, vehicle: Vehicle, *, lat: float | None = None, lon: float | None = None
    ) -> CommandAck:
        """Back the vehicle up. The vehicle will move."""
        return await self._autopark(vehicle, AutoParkAction.REVERSE, lat, lon)

    async def trigger_homelink(
        self, vehicle: Vehicle, *, lat: float | None = None, lon: float | None = None
    ) -> CommandAck:
        """Toggle the configured Homelink device (e.g. garage door)."""
        session = await self.ensure_session()
        return await _commands_api.trigger_homelink(
            self._config, session, self._require_transport(), vehicle, lat=lat, lon=lon
        )

    # ------------------------------------------------------------------
    # Telemetry stream
    # ------------------------------------------------------------------

    async def stream(self, vehicle: Vehicle) -> VehicleStream:
        """Open the vehicle's telemetry stream and start its reader.

        The returned stream does not reconnect; see :meth:`iter_stream`.
        """
        transport = self._require_transport()
        connection = await _stream_api.open_stream(self._config, transport, vehicle)
        stream = VehicleStream(
            connection,
            columns=self._config.stream_columns,
            queue_size=self._config.stream_queue_size,
            endpoint=_stream_api.build_stream_url(self._config, vehicle),
            logger=_logger,
        )
        stream.start()
        # Readers that already ended have closed their own connection.
        self._streams = {s for s in self._streams if s.is_running}
        self._streams.add(stream)
        return stream

    async def iter_stream(
        self,
        vehicle: Vehicle,
        policy: ReconnectPolicy | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Iterate telemetry events, reconnecting on server closure per *policy*."""

        async def _open() -> VehicleStream:
            return await self.stream(vehicle)

        async with contextlib.aclosing(iter_stream_events(_open, policy)) as events:
            async for event in events:
                yield event
