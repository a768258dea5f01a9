# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""REST client for the EdgeServer bot-provider endpoints."""
import asyncio
import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from edgeserver.client.multipart import FilePart, FileSource, multipart_form
from edgeserver.client.streaming import BotProviderStream, open_stream
from edgeserver.config import BotProviderConfig
from edgeserver.exceptions import (
    ApiResponseError,
    ConfigurationError,
    EmptyBlobResponseError,
    MultipartWriteError,
    ResponseDecodeError,
    ServerUnreachableError,
)
from edgeserver.models import ApiEnvelope, Blob, BotMessage, BotReply


class BotProviderClient:
    """HTTP client for one EdgeServer bot provider.

    Wraps the synchronous endpoints (``/message``, ``/json``, ``/form``,
    ``/blob``) and opens SSE streams. Every synchronous response is an
    envelope ``{isSuccess, data, error, errorCode}``; a non-200 status or
    ``isSuccess=false`` is raised as ``ApiResponseError``.

    Example:
        >>> client = BotProviderClient(config)
        >>> reply = await client.send_message(message)
        >>> result = await client.trigger_json({"orderId": 42})
    """

    def __init__(self, config: BotProviderConfig):
        """Initialize the client.

        Args:
            config: Connection configuration for the bot provider.

        Raises:
            ConfigurationError: If config is missing.
        """
        if config is None:
            raise ConfigurationError("config cannot be None")
        self.config = config

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the injected client, or a per-call client that is closed afterwards."""
        if self.config.http_client is not None:
            yield self.config.http_client
            return
        async with self.config.create_http_client() as client:
            yield client

    async def _post(self, operation: str, path: str, **kwargs: Any) -> httpx.Response:
        """POST to a bot-provider endpoint with the API key attached.

        Args:
            operation: Name used in error messages (e.g. "trigger json").
            path: Endpoint path below the provider.
            **kwargs: Passed through to ``httpx.AsyncClient.post``.

        Returns:
            The response, body fully read.

        Raises:
            ServerUnreachableError: If the request fails at the transport level.
            MultipartWriteError: If reading an upload file fails while sending.
        """
        url = self.config.endpoint(path)
        headers = {**kwargs.pop("headers", {}), **self.config.auth_headers()}
        try:
            async with self._http_client() as client:
                response = await client.post(url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            raise ServerUnreachableError(
                f"failed to {operation}: cannot reach EdgeServer at {self.config.host}: {e}"
            ) from e
        except OSError as e:
            # Read errors of upload files surface from httpx unwrapped
            if "files" not in kwargs:
                raise
            raise MultipartWriteError(f"failed to copy file data: {e}") from e

        logger.debug(
            "EdgeServer response",
            operation=operation,
            url=url,
            status=response.status_code,
        )
        return response

    def _unwrap[T](
        self,
        operation: str,
        response: httpx.Response,
        envelope_type: type[ApiEnvelope[T]],
    ) -> T | None:
        """Decode the envelope and return its data.

        Raises:
            ApiResponseError: On a non-200 status or ``isSuccess=false``.
            ResponseDecodeError: If a 200 response body is not an envelope.
        """
        try:
            envelope = envelope_type.model_validate_json(response.content)
        except ValidationError as e:
            if response.status_code != 200:
                raise ApiResponseError(
                    operation,
                    response.status_code,
                    response.text.strip() or response.reason_phrase or None,
                ) from e
            raise ResponseDecodeError(f"failed to decode {operation} response: {e}") from e

        if response.status_code != 200 or not envelope.is_success:
            raise ApiResponseError(
                operation,
                response.status_code,
                envelope.error,
                envelope.error_code,
            )
        return envelope.data

    async def send_message(self, message: BotMessage, is_debug: bool = False) -> BotReply:
        """Send a message and wait for the complete reply.

        Args:
            message: The outbound message.
            is_debug: Ask the server to include debug messages.

        Returns:
            The bot reply with all messages produced by the run.

        Raises:
            ConfigurationError: If message is missing.
            ServerUnreachableError: If the server cannot be reached.
            ApiResponseError: If the server reports failure.
            ResponseDecodeError: If the response is malformed.
        """
        if message is None:
            raise ConfigurationError("message cannot be None")

        response = await self._post(
            "send message",
            "message",
            json=message.to_wire(),
            params={"is_debug": "true"} if is_debug else None,
        )
        reply = self._unwrap("send message", response, ApiEnvelope[BotReply])
        if reply is None:
            raise ResponseDecodeError("send message response carried no reply")
        return reply

    async def trigger_json(self, payload: dict[str, Any]) -> Any:
        """Trigger the bot provider with a JSON payload.

        Args:
            payload: JSON object sent as the request body.

        Returns:
            The decoded ``data`` of the envelope, or None when empty.

        Raises:
            ServerUnreachableError: If the server cannot be reached.
            ApiResponseError: If the server reports failure.
            ResponseDecodeError: If the response is malformed.
        """
        response = await self._post("trigger json", "json", json=payload)
        return self._unwrap("trigger json", response, ApiEnvelope[Any])

    async def trigger_form(
        self,
        payload: dict[str, Any],
        file: FileSource | None = None,
        filename: str = "",
        mime: str | None = None,
    ) -> Any:
        """Trigger the bot provider with a multipart form.

        The payload goes into the ``json`` field; the optional file is
        streamed as the ``file`` part.

        Args:
            payload: JSON object for the ``json`` form field.
            file: Optional binary file object.
            filename: File name reported for the file part.
            mime: MIME type of the file; octet-stream when omitted.

        Returns:
            The decoded ``data`` of the envelope, or None when empty.

        Raises:
            ServerUnreachableError: If the server cannot be reached.
            MultipartWriteError: If reading the file fails mid-upload.
            ApiResponseError: If the server reports failure.
            ResponseDecodeError: If the response is malformed.
        """
        try:
            json_payload = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"failed to marshal form json payload: {e}") from e

        form = multipart_form(
            {"json": json_payload},
            FilePart("file", filename, file, mime) if file is not None else None,
        )
        response = await self._post("trigger form", "form", **form)
        return self._unwrap("trigger form", response, ApiEnvelope[Any])

    async def upload_blob(
        self,
        custom_channel_id: str,
        file: FileSource,
        filename: str,
        mime: str | None = None,
    ) -> Blob:
        """Upload a file so later messages can reference it by blob id.

        Args:
            custom_channel_id: Channel the blob belongs to.
            file: Binary file object.
            filename: File name reported to the server.
            mime: MIME type of the file; octet-stream when omitted.

        Returns:
            Metadata of the uploaded blob.

        Raises:
            ServerUnreachableError: If the server cannot be reached.
            MultipartWriteError: If reading the file fails mid-upload.
            ApiResponseError: If the server reports failure.
            EmptyBlobResponseError: If no blob metadata was returned.
            ResponseDecodeError: If the response is malformed.
        """
        form = multipart_form(
            {"customChannelId": custom_channel_id},
            FilePart("file", filename, file, mime),
        )
        response = await self._post("upload blob", "blob", **form)
        blobs = self._unwrap("upload blob", response, ApiEnvelope[list[Blob]])
        if not blobs:
            raise EmptyBlobResponseError(response.status_code)
        return blobs[0]

    async def new_streamer(
        self,
        message: BotMessage,
        cancel_event: asyncio.Event | None = None,
    ) -> BotProviderStream:
        """Open an SSE stream for a message.

        Args:
            message: The outbound message.
            cancel_event: Setting this event cancels the stream.

        Returns:
            The connecting stream.

        Raises:
            ConfigurationError: If message is missing or invalid.
        """
        return await open_stream(self.config, message, cancel_event=cancel_event)
