# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Server-Sent Events wire-format decoding.

Implements the event-stream parsing rules from the HTML living standard:
``field: value`` lines, ``:`` comments, multi-line ``data`` joined with
newlines, and a blank line dispatching the accumulated frame.
"""
from collections.abc import AsyncIterator
from dataclasses import dataclass


@dataclass(frozen=True)
class ServerSentEvent:
    """One dispatched SSE frame.

    Attributes:
        data: The frame's data lines joined with newlines.
        event: Event name (``message`` when the frame has no event field).
        id: Last event id in effect when the frame was dispatched.
        retry: Reconnection delay in milliseconds, if the frame set one.
    """

    data: str
    event: str = "message"
    id: str | None = None
    retry: int | None = None


class SSEDecoder:
    """Incremental line-based SSE frame decoder.

    Feed lines (without their line terminator) to ``decode``; it returns a
    frame whenever a blank line completes one that carries data.
    """

    def __init__(self) -> None:
        self._event = ""
        self._data: list[str] = []
        self._retry: int | None = None
        self._last_event_id = ""

    @property
    def last_event_id(self) -> str:
        """Id to send as Last-Event-ID when reconnecting."""
        return self._last_event_id

    @property
    def retry(self) -> int | None:
        """Most recent reconnection delay the server asked for, in ms."""
        return self._retry

    def reset(self) -> None:
        """Drop any partially received frame.

        Call before reading a new connection's body. The last event id and
        retry value are kept so they carry over to the reconnect.
        """
        self._event = ""
        self._data = []

    def decode(self, line: str) -> ServerSentEvent | None:
        """Consume one line.

        Args:
            line: A single line of the stream, line terminator removed.

        Returns:
            The completed frame if ``line`` dispatched one, else None.
        """
        if not line:
            return self._dispatch()

        if line.startswith(":"):
            return None

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "event":
            self._event = value
        elif name == "data":
            self._data.append(value)
        elif name == "id":
            if "\0" not in value:
                self._last_event_id = value
        elif name == "retry":
            if value.isdigit():
                self._retry = int(value)
        # Unknown fields are ignored

        return None

    def _dispatch(self) -> ServerSentEvent | None:
        if not self._data:
            self._event = ""
            return None

        sse = ServerSentEvent(
            data="\n".join(self._data),
            event=self._event or "message",
            id=self._last_event_id or None,
            retry=self._retry,
        )
        self._event = ""
        self._data = []
        return sse


async def aiter_sse(
    lines: AsyncIterator[str],
    decoder: SSEDecoder | None = None,
) -> AsyncIterator[ServerSentEvent]:
    """Decode an async stream of text lines into SSE frames.

    A trailing frame that is not terminated by a blank line is discarded.

    Args:
        lines: Lines of the response body, e.g. ``response.aiter_lines()``.
        decoder: Decoder to use; pass one in to keep its last event id and
            retry value across reconnects.

    Yields:
        Each completed frame in stream order.
    """
    decoder = decoder or SSEDecoder()
    async for line in lines:
        sse = decoder.decode(line.rstrip("\r\n"))
        if sse is not None:
            yield sse
