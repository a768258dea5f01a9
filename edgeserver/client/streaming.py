# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""SSE streaming client for bot-provider runs.

One stream owns one SSE connection for one outbound message. A producer
task reads the response body, decodes each frame into a ``BotEvent`` and
hands it over through a bounded queue; the caller pulls events with
``advance()`` / ``current()`` and inspects ``last_error()`` once
``advance()`` returns False.

Example:
    >>> stream = await open_stream(config, message)
    >>> while await stream.advance():
    ...     print(stream.current().event_type)
    >>> if stream.last_error():
    ...     raise stream.last_error()
"""
import asyncio
import contextlib
import json
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import Self

import httpx
from loguru import logger
from pydantic import ValidationError

from edgeserver.client.sse import ServerSentEvent, SSEDecoder, aiter_sse
from edgeserver.config import BotProviderConfig
from edgeserver.exceptions import (
    ConfigurationError,
    RunFailedError,
    StreamCancelledError,
    StreamConnectionError,
    StreamDecodeError,
    StreamError,
)
from edgeserver.models import BotEvent, BotMessage, SseEventType


SSE_PATH = "message/sse"

# Capacity of the producer -> consumer handoff queue
STREAM_BUFFER_SIZE = 100


class StreamState(StrEnum):
    """Lifecycle of a stream as seen by its consumer."""

    OPEN = "open"
    ENDED = "ended"
    ERRORED = "errored"
    CLOSED = "closed"


_TRANSITIONS: dict[StreamState, frozenset[StreamState]] = {
    StreamState.OPEN: frozenset({StreamState.ENDED, StreamState.ERRORED, StreamState.CLOSED}),
    StreamState.ENDED: frozenset({StreamState.CLOSED}),
    StreamState.ERRORED: frozenset({StreamState.CLOSED}),
    StreamState.CLOSED: frozenset(),
}


@dataclass(frozen=True)
class _StreamItem:
    """One handoff from producer to consumer: an event or an error."""

    event: BotEvent | None = None
    error: StreamError | None = None


class _Wake(StrEnum):
    CANCELLED = "cancelled"
    CLOSED = "closed"


class BotProviderStream:
    """Pull-based iterator over the events of one bot-provider run.

    Use ``open_stream`` to create one. ``advance``, ``current``,
    ``last_error`` and ``close`` may be mixed freely; once ``advance``
    returns False it keeps returning False.

    Attributes:
        config: Connection configuration the stream was opened with.
        message: The outbound message that started the run.
    """

    def __init__(
        self,
        config: BotProviderConfig,
        message: BotMessage,
        cancel_event: asyncio.Event | None = None,
    ):
        self.config = config
        self.message = message
        self._cancel_event = cancel_event
        self._url = config.endpoint(SSE_PATH)
        try:
            self._body = json.dumps(message.to_wire()).encode()
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"failed to serialize bot message: {e}") from e

        self._queue: asyncio.Queue[_StreamItem | None] = asyncio.Queue(maxsize=STREAM_BUFFER_SIZE)
        self._closed_signal = asyncio.Event()
        self._producer: asyncio.Task[None] | None = None
        self._attempt = 0

        # Guards the consumer-side state below; never held across an await
        self._lock = threading.Lock()
        self._state = StreamState.OPEN
        self._current: BotEvent | None = None
        self._error: StreamError | None = None

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    @property
    def state(self) -> StreamState:
        with self._lock:
            return self._state

    async def advance(self) -> bool:
        """Wait for the next event.

        Returns:
            True when a new event is available from ``current()``. False when
            the stream ended cleanly, failed (see ``last_error()``), was
            cancelled, or was closed.
        """
        if self.state is not StreamState.OPEN:
            return False

        item = await self._next_item()

        if item is _Wake.CANCELLED:
            self._fail(StreamCancelledError("stream cancelled"))
            return False
        if item is _Wake.CLOSED:
            return False
        if item is None:
            with self._lock:
                self._transition(StreamState.ENDED)
            return False
        if item.error is not None:
            self._fail(item.error)
            return False

        event = item.event
        assert event is not None
        if event.event_type is SseEventType.RUN_ERROR:
            assert event.error is not None
            self._fail(RunFailedError(event.error, event))
            return False

        with self._lock:
            if self._state is not StreamState.OPEN:
                return False
            self._current = event
        return True

    def current(self) -> BotEvent | None:
        """The event made available by the last successful ``advance()``."""
        with self._lock:
            return self._current

    def last_error(self) -> StreamError | None:
        """The terminal error, or None while streaming or after a clean end."""
        with self._lock:
            return self._error

    def close(self) -> None:
        """Mark the stream closed and drop the current event.

        Idempotent. Does not stop the producer task; use ``aclose()`` (or
        ``async with``) to also tear the connection down.
        """
        with self._lock:
            if not self._transition(StreamState.CLOSED):
                return
            self._current = None
        self._closed_signal.set()

    async def aclose(self) -> None:
        """Close the stream and wait for the producer task to finish."""
        self.close()
        if self._producer is not None and not self._producer.done():
            self._producer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._producer

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> BotEvent:
        if await self.advance():
            event = self.current()
            assert event is not None
            return event
        error = self.last_error()
        if error is not None:
            raise error
        raise StopAsyncIteration

    def _transition(self, target: StreamState) -> bool:
        """Move to ``target`` if the transition table allows it. Caller holds the lock."""
        if target not in _TRANSITIONS[self._state]:
            return False
        self._state = target
        return True

    def _fail(self, error: StreamError) -> None:
        with self._lock:
            if self._transition(StreamState.ERRORED):
                self._error = error
        # Nothing will consume further items; release the connection
        if self._producer is not None and not self._producer.done():
            self._producer.cancel()

    async def _next_item(self) -> _StreamItem | None | _Wake:
        """Block until the queue yields, the cancel signal fires, or close() is called."""
        if self._cancel_event is not None and self._cancel_event.is_set():
            return _Wake.CANCELLED
        if self._closed_signal.is_set():
            return _Wake.CLOSED
        with contextlib.suppress(asyncio.QueueEmpty):
            return self._queue.get_nowait()

        getter = asyncio.ensure_future(self._queue.get())
        closed = asyncio.ensure_future(self._closed_signal.wait())
        waiters: set[asyncio.Future[object]] = {getter, closed}
        cancelled: asyncio.Future[object] | None = None
        if self._cancel_event is not None:
            cancelled = asyncio.ensure_future(self._cancel_event.wait())
            waiters.add(cancelled)

        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        if cancelled is not None and cancelled.done():
            return _Wake.CANCELLED
        if getter.done() and not getter.cancelled():
            return getter.result()
        return _Wake.CLOSED

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def _start(self) -> None:
        self._producer = asyncio.create_task(
            self._produce(),
            name=f"sse-producer-{self.message.custom_message_id}",
        )

    async def _produce(self) -> None:
        """Run the connection and report how it ended, then signal end-of-stream."""
        try:
            await self._run_connection()
            logger.debug("SSE connection closed normally", url=self._url)
        except StreamError as e:
            logger.error("SSE connection failed", url=self._url, error=str(e))
            await self._queue.put(_StreamItem(error=e))
        except Exception as e:
            logger.exception("SSE producer failed", url=self._url)
            await self._queue.put(
                _StreamItem(error=StreamConnectionError(f"SSE connection failed: {e}"))
            )
        await self._queue.put(None)

    async def _run_connection(self) -> None:
        """Consume the stream, reconnecting after transient transport failures.

        Raises:
            StreamConnectionError: On a non-retryable failure or once the
                reconnect budget is exhausted.
        """
        client = self.config.http_client
        owns_client = client is None
        if client is None:
            client = self.config.create_http_client()
        decoder = SSEDecoder()

        try:
            while True:
                try:
                    await self._consume(client, decoder)
                    return
                except StreamConnectionError as e:
                    if not e.retryable or self._should_stop():
                        raise
                    self._attempt += 1
                    max_reconnects = self.config.max_reconnects
                    if max_reconnects is not None and self._attempt > max_reconnects:
                        raise

                    delay = self._reconnect_delay(decoder.retry)
                    budget = "unlimited" if max_reconnects is None else str(max_reconnects)
                    logger.warning(
                        f"SSE connection lost (attempt {self._attempt}/{budget}), "
                        f"retrying in {delay}s",
                        url=self._url,
                        error=str(e),
                    )
                    await asyncio.sleep(delay)
                    if self._should_stop():
                        raise
        finally:
            if owns_client:
                await client.aclose()

    async def _consume(self, client: httpx.AsyncClient, decoder: SSEDecoder) -> None:
        """Issue the request once and push every frame onto the queue.

        Returns normally when the server closes the body cleanly.
        """
        headers = {
            "Content-Type": "application/json",
            "Accept": "text/event-stream",
            "Cache-Control": "no-cache",
            **self.config.auth_headers(),
        }
        if decoder.last_event_id:
            headers["Last-Event-ID"] = decoder.last_event_id

        decoder.reset()
        logger.info("Sending SSE request", url=self._url)
        logger.debug("SSE request body", body=self._body.decode())

        try:
            async with asyncio.timeout(self.config.timeout):
                async with client.stream(
                    "POST", self._url, content=self._body, headers=headers
                ) as response:
                    await self._check_response(response)
                    self._attempt = 0
                    async for sse in aiter_sse(response.aiter_lines(), decoder):
                        await self._queue.put(self._decode(sse))
        except TimeoutError as e:
            raise StreamConnectionError(
                f"SSE connection failed: request timed out after {self.config.timeout}s",
                retryable=True,
            ) from e
        except httpx.TransportError as e:
            raise StreamConnectionError(
                f"SSE connection failed: {type(e).__name__}: {e}",
                retryable=True,
            ) from e
        except httpx.HTTPError as e:
            raise StreamConnectionError(f"SSE connection failed: {type(e).__name__}: {e}") from e

    async def _check_response(self, response: httpx.Response) -> None:
        """Reject responses that are not an event stream.

        Raises:
            StreamConnectionError: For a non-200 status or wrong content type.
        """
        if response.status_code != 200:
            body = (await response.aread()).decode(errors="replace").strip()
            message = f"SSE connection failed: server responded {response.status_code}"
            if response.reason_phrase:
                message += f" {response.reason_phrase}"
            if body:
                message += f": {body[:500]}"
            raise StreamConnectionError(message, status_code=response.status_code)

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("text/event-stream"):
            raise StreamConnectionError(
                f"SSE connection failed: unexpected content type '{content_type}'",
                status_code=response.status_code,
            )

    def _decode(self, sse: ServerSentEvent) -> _StreamItem:
        logger.debug("Received SSE event", event_type=sse.event, event_data=sse.data)
        try:
            event = BotEvent.model_validate_json(sse.data)
        except ValidationError as e:
            logger.error("Failed to decode SSE event", raw_data=sse.data, error=str(e))
            return _StreamItem(
                error=StreamDecodeError(f"failed to decode event: {e}", raw_data=sse.data)
            )

        logger.debug(
            "Parsed SSE event",
            event_type=str(event.event_type),
            request_id=event.request_id,
            event_id=event.event_id,
        )
        return _StreamItem(event=event)

    def _reconnect_delay(self, server_retry_ms: int | None) -> float:
        base = (
            server_retry_ms / 1000
            if server_retry_ms is not None
            else self.config.reconnect_base_delay
        )
        return min(base * (2 ** (self._attempt - 1)), self.config.reconnect_max_delay)

    def _should_stop(self) -> bool:
        cancelled = self._cancel_event is not None and self._cancel_event.is_set()
        return cancelled or self._closed_signal.is_set()


async def open_stream(
    config: BotProviderConfig,
    message: BotMessage,
    *,
    cancel_event: asyncio.Event | None = None,
) -> BotProviderStream:
    """Open an SSE stream for one outbound message.

    The request is issued by a background task; connection failures are
    reported through the stream (``advance()`` returns False and
    ``last_error()`` is set), not raised here.

    Args:
        config: Connection configuration.
        message: The message that starts the run.
        cancel_event: Setting this event cancels the stream.

    Returns:
        The stream handle, already connecting.

    Raises:
        ConfigurationError: If config or message is missing or invalid.
    """
    if config is None:
        raise ConfigurationError("config cannot be None")
    if not isinstance(config, BotProviderConfig):
        raise ConfigurationError(
            f"config must be a BotProviderConfig, got {type(config).__name__}"
        )
    if message is None:
        raise ConfigurationError("message cannot be None")
    if not isinstance(message, BotMessage):
        raise ConfigurationError(f"message must be a BotMessage, got {type(message).__name__}")

    stream = BotProviderStream(config, message, cancel_event=cancel_event)
    stream._start()
    # Let the producer start issuing the request before handing the stream out
    await asyncio.sleep(0)
    return stream
