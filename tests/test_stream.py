from __future__ import annotations

import asyncio
from datetime import UTC, datetime

import pytest

from pytesla._api.stream import build_stream_url, parse_stream_line
from pytesla._constants import STREAM_COLUMNS
from pytesla._stream import ReconnectPolicy, VehicleStream, iter_stream_events
from pytesla.config import TeslaConfig
from pytesla.exceptions import (
    TeslaDecodeError,
    TeslaStreamClosedError,
    TeslaStreamError,
    TeslaTransportError,
)
from pytesla.models.vehicle import Vehicle

DRIVING = b"1700000000000,55,12345.6,80,30,181,37.49,-121.94,12,D,250,240,180\n"
PARKED = b"1700000001000,,12345.6,80,30,181,37.49,-121.94,0,,250,240,180\n"
OUT_OF_RANGE = b"9" * 40 + b"," * 12 + b"\n"


class _FakeConnection:
    """Replays lines, then raises *error* or signals EOF (or blocks forever)."""

    def __init__(self, lines: list[bytes], *, error: Exception | None = None, hold_open: bool = False) -> None:
        self._lines = list(lines)
        self._error = error
        self._hold_open = hold_open
        self.closed = False

    async def readline(self) -> bytes:
        if self._lines:
            return self._lines.pop(0)
        if self._error is not None:
            raise self._error
        if self._hold_open:
            await asyncio.Event().wait()
        return b""

    def close(self) -> None:
        self.closed = True


def _started(connection: _FakeConnection) -> VehicleStream:
    stream = VehicleStream(connection, columns=STREAM_COLUMNS)
    stream.start()
    return stream


# ------------------------------------------------------------------
# Record parsing
# ------------------------------------------------------------------


class TestParseStreamLine:
    def test_driving_record(self) -> None:
        event = parse_stream_line(DRIVING, STREAM_COLUMNS)

        assert event.timestamp == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)
        assert event.speed == 55
        assert event.odometer == pytest.approx(12345.6)
        assert event.soc == 80
        assert event.est_lat == pytest.approx(37.49)
        assert event.est_lng == pytest.approx(-121.94)
        assert event.shift_state == "D"
        assert event.heading == 180
        assert event.raw == DRIVING.decode().strip()

    def test_empty_columns_become_none(self) -> None:
        event = parse_stream_line(PARKED, STREAM_COLUMNS)

        assert event.speed is None
        assert event.shift_state is None
        assert event.power == 0

    def test_wrong_column_count_is_decode_error(self) -> None:
        with pytest.raises(TeslaDecodeError, match="columns"):
            parse_stream_line(b"1700000000000,55,1\n", STREAM_COLUMNS)

    def test_non_numeric_timestamp_is_decode_error(self) -> None:
        line = DRIVING.replace(b"1700000000000", b"yesterday")
        with pytest.raises(TeslaDecodeError, match="timestamp"):
            parse_stream_line(line, STREAM_COLUMNS)

    def test_unicode_digit_timestamp_is_decode_error(self) -> None:
        line = DRIVING.decode().replace("1700000000000", "²")
        with pytest.raises(TeslaDecodeError, match="timestamp"):
            parse_stream_line(line, STREAM_COLUMNS)

    def test_out_of_range_timestamp_is_decode_error(self) -> None:
        with pytest.raises(TeslaDecodeError, match="could not be parsed"):
            parse_stream_line(OUT_OF_RANGE, STREAM_COLUMNS)

    def test_custom_columns(self) -> None:
        event = parse_stream_line("1700000000000,42,77", ("speed", "soc"))

        assert event.speed == 42
        assert event.soc == 77
        assert event.odometer is None


def test_build_stream_url() -> None:
    vehicle = Vehicle.model_validate({"id": 1, "vehicle_id": 5678, "tokens": ["t"]})
    config = TeslaConfig(streaming_url="https://stream.example")

    assert build_stream_url(config, vehicle) == (
        "https://stream.example/stream/5678/"
        "?values=speed,odometer,soc,elevation,est_heading,est_lat,est_lng,power,shift_state,range,est_range,heading"
    )


# ------------------------------------------------------------------
# VehicleStream
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_events_arrive_in_order_then_single_closure() -> None:
    connection = _FakeConnection([DRIVING, PARKED])
    stream = _started(connection)

    first = await asyncio.wait_for(stream.get(), 1)
    second = await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaStreamClosedError, match="HTTP stream closed"):
        await asyncio.wait_for(stream.get(), 1)

    assert first.speed == 55
    assert second.speed is None
    assert stream.events.empty()
    assert stream.errors.empty()
    assert connection.closed
    assert not stream.is_running
    with pytest.raises(TeslaStreamError) as exc_info:
        await stream.get()
    assert not isinstance(exc_info.value, TeslaStreamClosedError)


@pytest.mark.asyncio
async def test_blank_lines_are_skipped() -> None:
    stream = _started(_FakeConnection([b"\n", DRIVING, b"\r\n"]))

    event = await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaStreamClosedError):
        await asyncio.wait_for(stream.get(), 1)

    assert event.speed == 55


@pytest.mark.asyncio
async def test_malformed_record_ends_the_stream() -> None:
    connection = _FakeConnection([DRIVING, b"garbage\n", PARKED])
    stream = _started(connection)

    await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaDecodeError):
        await asyncio.wait_for(stream.get(), 1)

    assert stream.events.empty()
    assert stream.errors.empty()
    assert connection.closed


@pytest.mark.asyncio
async def test_transport_failure_is_queued_as_error() -> None:
    stream = _started(_FakeConnection([DRIVING], error=TeslaTransportError("reset by peer")))

    await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaTransportError, match="reset by peer"):
        await asyncio.wait_for(stream.get(), 1)


@pytest.mark.asyncio
async def test_os_error_is_wrapped_as_transport_error() -> None:
    stream = _started(_FakeConnection([], error=ConnectionResetError("gone")))

    with pytest.raises(TeslaTransportError, match="gone"):
        await asyncio.wait_for(stream.get(), 1)


@pytest.mark.asyncio
@pytest.mark.parametrize("bad_line", [OUT_OF_RANGE, DRIVING.decode().replace("1700000000000", "²").encode()])
async def test_unparsable_timestamp_is_queued_as_decode_error(bad_line: bytes) -> None:
    connection = _FakeConnection([DRIVING, bad_line])
    stream = _started(connection)

    await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaDecodeError):
        await asyncio.wait_for(stream.get(), 1)

    assert stream.errors.empty()
    assert connection.closed


@pytest.mark.asyncio
async def test_unexpected_reader_failure_is_queued_as_stream_error() -> None:
    connection = _FakeConnection([DRIVING], error=RuntimeError("decoder exploded"))
    stream = _started(connection)

    await asyncio.wait_for(stream.get(), 1)
    with pytest.raises(TeslaStreamError, match="decoder exploded") as exc_info:
        await asyncio.wait_for(stream.get(), 1)

    assert not isinstance(exc_info.value, TeslaStreamClosedError)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert connection.closed


@pytest.mark.asyncio
async def test_queues_can_be_consumed_directly() -> None:
    stream = _started(_FakeConnection([DRIVING]))

    event = await asyncio.wait_for(stream.events.get(), 1)
    error = await asyncio.wait_for(stream.errors.get(), 1)

    assert event.speed == 55
    assert isinstance(error, TeslaStreamClosedError)


@pytest.mark.asyncio
async def test_close_stops_reader_and_connection() -> None:
    connection = _FakeConnection([DRIVING], hold_open=True)
    stream = _started(connection)
    await asyncio.wait_for(stream.get(), 1)
    assert stream.is_running

    await stream.close()

    assert not stream.is_running
    assert connection.closed
    assert stream.errors.empty()
    with pytest.raises(TeslaStreamError, match="not running"):
        await stream.get()


@pytest.mark.asyncio
async def test_close_wakes_pending_get() -> None:
    stream = _started(_FakeConnection([], hold_open=True))
    pending = asyncio.ensure_future(stream.get())
    await asyncio.sleep(0)

    await stream.close()

    with pytest.raises(TeslaStreamError, match="not running"):
        await asyncio.wait_for(pending, 1)


@pytest.mark.asyncio
async def test_context_manager_closes_unstarted_stream() -> None:
    connection = _FakeConnection([DRIVING])

    async with VehicleStream(connection, columns=STREAM_COLUMNS):
        pass

    assert connection.closed


# ------------------------------------------------------------------
# Reconnect
# ------------------------------------------------------------------


def test_reconnect_backoff_is_capped() -> None:
    policy = ReconnectPolicy(initial_delay=1.0, multiplier=2.0, max_delay=5.0)

    assert [policy.delay_for(n) for n in range(1, 5)] == [1.0, 2.0, 4.0, 5.0]


class _Opener:
    def __init__(self, *connections: _FakeConnection) -> None:
        self.connections = list(connections)
        self.opened = 0

    async def __call__(self) -> VehicleStream:
        connection = self.connections[self.opened]
        self.opened += 1
        return _started(connection)


@pytest.mark.asyncio
async def test_iter_stream_without_policy_raises_first_closure() -> None:
    opener = _Opener(_FakeConnection([DRIVING, PARKED]))
    received = []

    with pytest.raises(TeslaStreamClosedError):
        async for event in iter_stream_events(opener):
            received.append(event.speed)

    assert received == [55, None]
    assert opener.opened == 1


@pytest.mark.asyncio
async def test_iter_stream_reconnects_until_attempts_exhausted() -> None:
    connections = [_FakeConnection([DRIVING]), _FakeConnection([]), _FakeConnection([])]
    opener = _Opener(*connections)
    policy = ReconnectPolicy(max_attempts=2, initial_delay=0.0)
    received = []

    with pytest.raises(TeslaStreamClosedError):
        async for event in iter_stream_events(opener, policy):
            received.append(event.speed)

    assert received == [55]
    assert opener.opened == 3
    assert all(connection.closed for connection in connections)


@pytest.mark.asyncio
async def test_iter_stream_attempts_reset_after_an_event() -> None:
    opener = _Opener(
        _FakeConnection([DRIVING]),
        _FakeConnection([PARKED]),
        _FakeConnection([DRIVING]),
        _FakeConnection([]),
    )
    policy = ReconnectPolicy(max_attempts=1, initial_delay=0.0)
    received = []

    with pytest.raises(TeslaStreamClosedError):
        async for event in iter_stream_events(opener, policy):
            received.append(event.speed)

    assert received == [55, None, 55]
    assert opener.opened == 4


@pytest.mark.asyncio
async def test_iter_stream_does_not_reconnect_after_decode_error() -> None:
    opener = _Opener(_FakeConnection([b"garbage\n"]), _FakeConnection([DRIVING]))

    with pytest.raises(TeslaDecodeError):
        async for _ in iter_stream_events(opener, ReconnectPolicy(initial_delay=0.0)):
            pass

    assert opener.opened == 1
