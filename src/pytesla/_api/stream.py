"""Telemetry streaming endpoint.

Endpoint:
  - GET {streaming_url}/stream/{vehicle_id}/?values={columns}

Authenticated with HTTP basic auth: the account email and the vehicle's
first streaming token. The server answers with one comma-separated
record per line: an epoch-milliseconds timestamp followed by the
requested columns in order.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from pydantic import ValidationError

from pytesla._transport import StreamConnection, Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaDecodeError, TeslaStreamError
from pytesla.models.stream import StreamEvent
from pytesla.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)


def build_stream_url(config: TeslaConfig, vehicle: Vehicle) -> str:
    return f"{config.streaming_url}/stream/{vehicle.vehicle_id}/?values={','.join(config.stream_columns)}"


def parse_stream_line(line: bytes | str, columns: Sequence[str], *, endpoint: str = "") -> StreamEvent:
    """Decode one stream record into a :class:`StreamEvent`.

    Raises
    ------
    TeslaDecodeError
        If the record has the wrong number of columns or an unparsable
        timestamp.
    """
    text = line.decode("utf-8", errors="replace") if isinstance(line, bytes) else line
    text = text.strip()
    fields = text.split(",")
    if len(fields) != len(columns) + 1:
        raise TeslaDecodeError(
            f"Stream record has {len(fields)} columns, expected {len(columns) + 1}: {text[:200]}",
            endpoint=endpoint,
        )
    timestamp, *values = fields
    if not (timestamp.isascii() and timestamp.isdigit()):
        raise TeslaDecodeError(f"Stream record timestamp is not numeric: {timestamp[:64]}", endpoint=endpoint)

    record: dict[str, object] = {"timestamp": int(timestamp), "raw": text}
    record.update(zip(columns, values, strict=True))
    try:
        return StreamEvent.model_validate(record)
    except (ValidationError, ValueError, OverflowError, OSError) as exc:
        raise TeslaDecodeError(f"Stream record could not be parsed: {text[:200]}", endpoint=endpoint) from exc


async def open_stream(
    config: TeslaConfig,
    transport: Transport,
    vehicle: Vehicle,
) -> StreamConnection:
    """Open the telemetry stream of *vehicle*.

    Raises
    ------
    TeslaStreamError
        If the vehicle has no streaming token.
    TeslaTransportError
        If the connection fails or the server answers non-2xx.
    """
    if not vehicle.tokens:
        raise TeslaStreamError(f"Vehicle {vehicle.id} has no streaming token")
    url = build_stream_url(config, vehicle)
    connection = await transport.open_stream(url, login=config.username, password=vehicle.tokens[0])
    _logger.debug("Stream opened vehicle_id=%s", vehicle.vehicle_id)
    return connection
