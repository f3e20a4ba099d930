"""Background telemetry stream reader and reconnect helper."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pytesla._api.stream import parse_stream_line
from pytesla._transport import StreamConnection
from pytesla.exceptions import TeslaError, TeslaStreamClosedError, TeslaStreamError, TeslaTransportError
from pytesla.models.stream import StreamEvent

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconnectPolicy:
    """How :func:`iter_stream_events` reacts to a server-side stream closure.

    Parameters
    ----------
    max_attempts : int
        Consecutive reconnects allowed without receiving an event. The
        counter resets whenever an event arrives.
    initial_delay : float
        Seconds to wait before the first reconnect.
    max_delay : float
        Upper bound for the backoff delay.
    multiplier : float
        Backoff growth factor between consecutive attempts.
    """

    max_attempts: int = 5
    initial_delay: float = 1.0
    max_delay: float = 60.0
    multiplier: float = 2.0

    def delay_for(self, attempt: int) -> float:
        """Backoff delay before reconnect number *attempt* (1-based)."""
        return min(self.max_delay, self.initial_delay * self.multiplier ** max(attempt - 1, 0))


class VehicleStream:
    """One open telemetry stream with a background reader task.

    Records are decoded and put on :attr:`events` in arrival order. The
    first fault is put on :attr:`errors` and the reader exits; nothing is
    queued after it. A server-side close yields exactly one
    :class:`TeslaStreamClosedError`. The reader never reconnects.

    Callers either consume the two queues directly or use :meth:`get`.
    """

    def __init__(
        self,
        connection: StreamConnection,
        *,
        columns: Sequence[str],
        queue_size: int = 0,
        endpoint: str = "",
        logger: logging.Logger | None = None,
    ) -> None:
        self._connection = connection
        self._columns = tuple(columns)
        self._endpoint = endpoint
        self._logger = logger or _logger
        self.events: asyncio.Queue[StreamEvent] = asyncio.Queue(maxsize=queue_size)
        self.errors: asyncio.Queue[TeslaError] = asyncio.Queue()
        self._changed = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self._closed = False

    @property
    def is_running(self) -> bool:
        """Whether the reader task is still consuming the connection."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Spawn the reader task on the running loop."""
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(self._read_loop())

    async def _read_loop(self) -> None:
        try:
            while True:
                line = await self._connection.readline()
                if not line:
                    self._logger.debug("Stream closed by server endpoint=%s", self._endpoint)
                    self._emit_error(TeslaStreamClosedError())
                    return
                if not line.strip():
                    continue
                event = parse_stream_line(line, self._columns, endpoint=self._endpoint)
                await self.events.put(event)
                self._changed.set()
        except TeslaError as exc:
            self._logger.debug("Stream reader stopped: %s", exc)
            self._emit_error(exc)
        except OSError as exc:
            self._emit_error(TeslaTransportError(f"Stream read failed: {exc}", endpoint=self._endpoint))
        except Exception as exc:
            self._logger.warning("Stream reader failed unexpectedly endpoint=%s", self._endpoint, exc_info=True)
            error = TeslaStreamError(f"Stream reader failed: {exc!r}")
            error.__cause__ = exc
            self._emit_error(error)
        finally:
            self._connection.close()

    def _emit_error(self, error: TeslaError) -> None:
        self.errors.put_nowait(error)
        self._changed.set()

    async def get(self) -> StreamEvent:
        """Return the next event, or raise the next queued error.

        Queued events are always returned before a queued error.

        Raises
        ------
        TeslaStreamClosedError
            The server ended the stream.
        TeslaStreamError
            The stream was closed by the caller.
        """
        while True:
            if not self.events.empty():
                return self.events.get_nowait()
            if not self.errors.empty():
                raise self.errors.get_nowait()
            if self._closed or self._task is None or self._task.done():
                raise TeslaStreamError("Stream is not running")
            self._changed.clear()
            await self._changed.wait()

    async def close(self) -> None:
        """Stop the reader and close the connection."""
        self._closed = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        elif task is None:
            self._connection.close()
        self._changed.set()

    async def __aenter__(self) -> VehicleStream:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


async def iter_stream_events(
    open_stream: Callable[[], Awaitable[VehicleStream]],
    policy: ReconnectPolicy | None = None,
) -> AsyncIterator[StreamEvent]:
    """Yield events, reopening the stream after server-side closures.

    With ``policy=None`` the first closure is re-raised. Otherwise up to
    ``policy.max_attempts`` consecutive reconnects are made, with
    exponential backoff, before the closure is re-raised. Any other
    error propagates immediately.
    """
    attempts = 0
    while True:
        stream = await open_stream()
        delay = 0.0
        try:
            while True:
                try:
                    event = await stream.get()
                except TeslaStreamClosedError:
                    if policy is None or attempts >= policy.max_attempts:
                        raise
                    attempts += 1
                    delay = policy.delay_for(attempts)
                    _logger.debug("Reconnecting stream attempt=%d delay=%.2fs", attempts, delay)
                    break
                attempts = 0
                yield event
        finally:
            await stream.close()
        await asyncio.sleep(delay)
