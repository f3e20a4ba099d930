"""HTTP transport: bearer-authenticated requests and streaming connections."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pytesla._constants import USER_AGENT
from pytesla._redact import redact_for_log
from pytesla.config import TeslaConfig
from pytesla.exceptions import TeslaAuthenticationError, TeslaDecodeError, TeslaTransportError
from pytesla.session import Session

_logger = logging.getLogger(__name__)


class StreamConnection(Protocol):
    """An open, line-oriented streaming response."""

    async def readline(self) -> bytes:
        """Return the next line including its newline, or ``b""`` at EOF."""
        ...

    def close(self) -> None:
        ...


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles/mocks while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        session: Session | None = None,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> bytes:
        ...

    async def open_stream(self, url: str, *, login: str, password: str) -> StreamConnection:
        ...


class _AiohttpStreamConnection:
    """Adapts a streaming ``aiohttp.ClientResponse`` to :class:`StreamConnection`."""

    def __init__(self, response: aiohttp.ClientResponse) -> None:
        self._response = response

    async def readline(self) -> bytes:
        try:
            return await self._response.content.readline()
        except aiohttp.ClientError as exc:
            raise TeslaTransportError(
                f"Stream read from {self._response.url} failed: {exc}",
                endpoint=str(self._response.url),
            ) from exc
        except ValueError as exc:
            # aiohttp refuses lines longer than its read buffer.
            raise TeslaDecodeError(
                f"Stream line from {self._response.url} could not be read: {exc}",
                endpoint=str(self._response.url),
            ) from exc

    def close(self) -> None:
        self._response.close()


class HttpTransport:
    """aiohttp-backed transport shared by commands, reads and streams.

    A single ``aiohttp.ClientSession`` may serve concurrent commands and
    stream readers at the same time.
    """

    def __init__(self, config: TeslaConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session

    def _headers(self, session: Session | None) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if session is not None:
            headers["authorization"] = session.authorization
        return headers

    async def request(
        self,
        method: str,
        url: str,
        *,
        session: Session | None = None,
        json_body: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> bytes:
        """Send one request and return the raw response body.

        The body is returned undecoded because some endpoints answer
        with an empty body, which callers treat differently from JSON.
        """
        headers = self._headers(session)
        data: str | None = None
        if json_body is not None:
            headers["content-type"] = "application/json; charset=UTF-8"
            data = json.dumps(dict(json_body))

        _logger.debug("%s %s", method, url)
        if self._config.api_trace_enabled:
            _logger.debug(
                "%s %s params=%s body=%s",
                method,
                url,
                redact_for_log(dict(params or {})),
                redact_for_log(dict(json_body) if json_body is not None else None),
            )

        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        try:
            async with self._http.request(
                method,
                url,
                data=data,
                params=dict(params) if params else None,
                headers=headers,
                timeout=timeout,
            ) as resp:
                body = await resp.read()
                if resp.status == 401:
                    raise TeslaAuthenticationError(
                        f"HTTP 401 from {url}: access token rejected",
                        endpoint=url,
                    )
                if not 200 <= resp.status < 300:
                    raise TeslaTransportError(
                        f"HTTP {resp.status} from {url}: {body[:200].decode('utf-8', errors='replace')}",
                        status_code=resp.status,
                        endpoint=url,
                    )
        except (TeslaTransportError, TeslaAuthenticationError):
            raise
        except asyncio.TimeoutError as exc:
            raise TeslaTransportError(
                f"Request to {url} timed out after {self._config.request_timeout}s",
                endpoint=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TeslaTransportError(
                f"Request to {url} failed: {exc}",
                endpoint=url,
            ) from exc

        if self._config.api_trace_enabled:
            _logger.debug("%s %s -> %d bytes", method, url, len(body))
        return body

    async def open_stream(self, url: str, *, login: str, password: str) -> StreamConnection:
        """Open a long-lived GET with HTTP basic auth.

        The connection has no total or read timeout; it stays open until
        the server closes it or the caller closes the returned connection.
        """
        _logger.debug("GET (stream) %s", url)
        timeout = aiohttp.ClientTimeout(total=None, sock_connect=self._config.request_timeout)
        try:
            resp = await self._http.get(
                url,
                auth=aiohttp.BasicAuth(login, password),
                headers={"user-agent": USER_AGENT},
                timeout=timeout,
            )
        except asyncio.TimeoutError as exc:
            raise TeslaTransportError(
                f"Stream connection to {url} timed out",
                endpoint=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise TeslaTransportError(
                f"Stream connection to {url} failed: {exc}",
                endpoint=url,
            ) from exc

        if not 200 <= resp.status < 300:
            text = await resp.text()
            resp.release()
            raise TeslaTransportError(
                f"HTTP {resp.status} from {url}: {text[:200]}",
                status_code=resp.status,
                endpoint=url,
            )
        return _AiohttpStreamConnection(resp)
