"""Shared helpers for owner API endpoint modules.

This module centralizes the most repeated patterns:
- building vehicle URLs
- JSON-decoding response bodies
- unwrapping the ``{"response": ...}`` wrapper of read endpoints
- posting a command and checking its result envelope

It is internal to pytesla and may change at any time.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from pytesla._transport import Transport
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaCommandError, TeslaDecodeError
from pytesla.models.command import CommandAck, CommandResponse
from pytesla.models.vehicle import Vehicle
from pytesla.session import Session

_logger = logging.getLogger(__name__)


def vehicle_url(config: TeslaConfig, vehicle_id: int, path: str = "") -> str:
    """Build ``{base_url}/vehicles/{id}[/{path}]``."""
    url = f"{config.base_url}/vehicles/{vehicle_id}"
    if path:
        url = f"{url}/{path}"
    return url


def decode_json(*, endpoint: str, body: bytes) -> Any:
    """JSON-decode a response body, raising :class:`TeslaDecodeError` on failure."""
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise TeslaDecodeError(
            f"Invalid JSON from {endpoint}: {body[:200].decode('utf-8', errors='replace')}",
            endpoint=endpoint,
        ) from exc


async def get_response(
    *,
    url: str,
    session: Session,
    transport: Transport,
) -> Any:
    """GET a read endpoint and return the value of its ``response`` key."""
    body = await transport.request("GET", url, session=session)
    decoded = decode_json(endpoint=url, body=body)
    if not isinstance(decoded, dict):
        raise TeslaDecodeError(f"Unexpected payload from {url}: not an object", endpoint=url)
    return decoded.get("response")


def _check_envelope_shape(decoded: Any, *, endpoint: str) -> None:
    """Raise :class:`TeslaDecodeError` unless *decoded* has the envelope shape.

    ``response`` may be absent or null. When it is an object, ``result``
    must be a bool and ``reason`` a string wherever they are present.
    """
    if not isinstance(decoded, dict):
        raise TeslaDecodeError(f"Unexpected payload from {endpoint}: not an object", endpoint=endpoint)
    inner = decoded.get("response")
    if inner is None:
        return
    if not isinstance(inner, dict):
        raise TeslaDecodeError(f"Unexpected payload from {endpoint}: response is not an object", endpoint=endpoint)
    result = inner.get("result")
    if result is not None and not isinstance(result, bool):
        raise TeslaDecodeError(f"Unexpected result {result!r} from {endpoint}", endpoint=endpoint)
    reason = inner.get("reason")
    if reason is not None and not isinstance(reason, str):
        raise TeslaDecodeError(f"Unexpected reason {reason!r} from {endpoint}", endpoint=endpoint)


async def post_command(
    config: TeslaConfig,
    session: Session,
    transport: Transport,
    vehicle: Vehicle,
    path: str,
    *,
    body: Mapping[str, Any] | None = None,
    params: Mapping[str, str] | None = None,
) -> CommandAck:
    """POST one command and interpret the result envelope.

    - empty body: success, ``result`` is ``None``
    - malformed JSON, or JSON that is not an envelope: :class:`TeslaDecodeError`
    - ``result`` not true with a non-empty ``reason``: :class:`TeslaCommandError`
    - anything else: success
    """
    url = vehicle_url(config, vehicle.id, path)
    raw_body = await transport.request("POST", url, session=session, json_body=body, params=params)

    if len(raw_body) == 0:
        _logger.debug("Command %s vehicle=%s answered with empty body", path, vehicle.id)
        return CommandAck(vehicle_id=vehicle.id, command=path)

    decoded = decode_json(endpoint=url, body=raw_body)
    _check_envelope_shape(decoded, endpoint=url)
    envelope = CommandResponse.model_validate(decoded)
    if envelope.is_failure:
        _logger.debug("Command %s vehicle=%s failed reason=%s", path, vehicle.id, envelope.reason)
        raise TeslaCommandError(envelope.reason, endpoint=url)

    return CommandAck(
        vehicle_id=vehicle.id,
        command=path,
        result=envelope.result,
        reason=envelope.reason,
        raw=decoded,
    )
