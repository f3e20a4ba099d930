"""Vehicle state snapshots returned by ``/vehicles/{id}/data_request/*``.

These are plain data carriers: the fields most callers need are typed,
everything else stays reachable through ``raw``. All fields are optional
because the API omits values while a vehicle is asleep or a feature is
unsupported.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pytesla.models._base import EpochTimestamp, TeslaBaseModel


class ChargeState(TeslaBaseModel):
    """Battery and charging state (``data_request/charge_state``)."""

    charging_state: str | None = None
    """``"Disconnected"``, ``"Charging"``, ``"Complete"``, ``"Stopped"``..."""
    charge_limit_soc: int | None = None
    charge_limit_soc_std: int | None = None
    charge_limit_soc_min: int | None = None
    charge_limit_soc_max: int | None = None
    battery_level: int | None = None
    usable_battery_level: int | None = None
    battery_range: float | None = None
    est_battery_range: float | None = None
    ideal_battery_range: float | None = None
    battery_heater_on: bool | None = None
    charge_energy_added: float | None = None
    charge_miles_added_rated: float | None = None
    charge_miles_added_ideal: float | None = None
    charger_voltage: int | None = None
    charger_actual_current: int | None = None
    charger_pilot_current: int | None = None
    charger_power: int | None = None
    charger_phases: int | None = None
    charge_rate: float | None = None
    time_to_full_charge: float | None = None
    charge_port_door_open: bool | None = None
    charge_port_latch: str | None = None
    fast_charger_present: bool | None = None
    fast_charger_type: str | None = None
    scheduled_charging_pending: bool | None = None
    scheduled_charging_start_time: EpochTimestamp = None
    managed_charging_active: bool | None = None
    timestamp: EpochTimestamp = None

    @property
    def is_charging(self) -> bool:
        return self.charging_state == "Charging"


class ClimateState(TeslaBaseModel):
    """HVAC state (``data_request/climate_state``)."""

    inside_temp: float | None = None
    outside_temp: float | None = None
    driver_temp_setting: float | None = None
    passenger_temp_setting: float | None = None
    min_avail_temp: float | None = None
    max_avail_temp: float | None = None
    left_temp_direction: int | None = None
    right_temp_direction: int | None = None
    fan_status: int | None = None
    is_climate_on: bool | None = None
    is_auto_conditioning_on: bool | None = None
    is_front_defroster_on: bool | None = None
    is_rear_defroster_on: bool | None = None
    is_preconditioning: bool | None = None
    smart_preconditioning: bool | None = None
    seat_heater_left: int | None = None
    seat_heater_right: int | None = None
    seat_heater_rear_left: int | None = None
    seat_heater_rear_center: int | None = None
    seat_heater_rear_right: int | None = None
    timestamp: EpochTimestamp = None


class DriveState(TeslaBaseModel):
    """Location and motion (``data_request/drive_state``).

    ``latitude``/``longitude`` are the coordinates autopark and Homelink
    requests are sent with when the caller does not supply them.
    """

    shift_state: str | None = None
    """``"P"``, ``"R"``, ``"N"``, ``"D"`` or ``None`` when parked/asleep."""
    speed: float | None = None
    latitude: float | None = None
    longitude: float | None = None
    heading: int | None = None
    gps_as_of: EpochTimestamp = None
    native_location_supported: int | None = None
    native_latitude: float | None = None
    native_longitude: float | None = None
    native_type: str | None = None
    power: int | None = None
    timestamp: EpochTimestamp = None


class GuiSettings(TeslaBaseModel):
    """Display units and preferences (``data_request/gui_settings``)."""

    gui_distance_units: str | None = None
    gui_temperature_units: str | None = None
    gui_charge_rate_units: str | None = None
    gui_24_hour_time: bool | None = None
    gui_range_display: str | None = None
    timestamp: EpochTimestamp = None


class VehicleStateData(TeslaBaseModel):
    """Body, lock and software state (``data_request/vehicle_state``).

    Door/trunk fields (``df``, ``dr``, ``pf``, ``pr``, ``ft``, ``rt``) are
    ``0`` when closed and non-zero when open.
    """

    api_version: int | None = None
    car_version: str | None = None
    vehicle_name: str | None = None
    odometer: float | None = None
    locked: bool | None = None
    valet_mode: bool | None = None
    valet_pin_needed: bool | None = None
    sentry_mode: bool | None = None
    sentry_mode_available: bool | None = None
    remote_start: bool | None = None
    remote_start_supported: bool | None = None
    center_display_state: int | None = None
    autopark_state: str | None = None
    autopark_state_v2: str | None = None
    homelink_nearby: bool | None = None
    sun_roof_state: str | None = None
    sun_roof_percent_open: int | None = None
    df: int | None = None
    dr: int | None = None
    pf: int | None = None
    pr: int | None = None
    ft: int | None = None
    rt: int | None = None
    software_update: dict[str, Any] = Field(default_factory=dict)
    timestamp: EpochTimestamp = None

    @property
    def any_door_open(self) -> bool:
        return any(bool(value) for value in (self.df, self.dr, self.pf, self.pr))
