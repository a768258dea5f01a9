# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Product-level facades over the bot-provider client.

``BotAgent`` covers the conversational APIs (SSE stream, message, blob);
``FunctionAgent`` covers the one-shot trigger APIs (json, form). Both only
delegate to ``BotProviderClient``.
"""

import asyncio
from typing import Any, Protocol, runtime_checkable

from edgeserver.client.api import BotProviderClient
from edgeserver.client.multipart import FileSource
from edgeserver.client.streaming import BotProviderStream
from edgeserver.config import BotProviderConfig
from edgeserver.models import Blob, BotMessage, BotReply


@runtime_checkable
class BotAgent(Protocol):
    """Conversational capability: stream, send and attach blobs."""

    async def new_streamer(
        self,
        message: BotMessage,
        cancel_event: asyncio.Event | None = None,
    ) -> BotProviderStream: ...

    async def send_message(self, message: BotMessage, is_debug: bool = False) -> BotReply: ...

    async def upload_blob(
        self,
        custom_channel_id: str,
        file: FileSource,
        filename: str,
        mime: str | None = None,
    ) -> Blob: ...


@runtime_checkable
class FunctionAgent(Protocol):
    """Trigger capability: one-shot JSON or form invocations."""

    async def trigger_json(self, payload: dict[str, Any]) -> Any: ...

    async def trigger_form(
        self,
        payload: dict[str, Any],
        file: FileSource | None = None,
        filename: str = "",
        mime: str | None = None,
    ) -> Any: ...


class _BotAgent:
    def __init__(self, client: BotProviderClient):
        self._client = client

    async def new_streamer(
        self,
        message: BotMessage,
        cancel_event: asyncio.Event | None = None,
    ) -> BotProviderStream:
        return await self._client.new_streamer(message, cancel_event=cancel_event)

    async def send_message(self, message: BotMessage, is_debug: bool = False) -> BotReply:
        return await self._client.send_message(message, is_debug=is_debug)

    async def upload_blob(
        self,
        custom_channel_id: str,
        file: FileSource,
        filename: str,
        mime: str | None = None,
    ) -> Blob:
        return await self._client.upload_blob(custom_channel_id, file, filename, mime)


class _FunctionAgent:
    def __init__(self, client: BotProviderClient):
        self._client = client

    async def trigger_json(self, payload: dict[str, Any]) -> Any:
        return await self._client.trigger_json(payload)

    async def trigger_form(
        self,
        payload: dict[str, Any],
        file: FileSource | None = None,
        filename: str = "",
        mime: str | None = None,
    ) -> Any:
        return await self._client.trigger_form(payload, file, filename, mime)


def new_bot_agent_with_config(config: BotProviderConfig) -> BotAgent:
    """Create a BotAgent from an existing configuration."""
    return _BotAgent(BotProviderClient(config))


def new_bot_agent(host: str, namespace: str, bot_provider_name: str, api_key: str) -> BotAgent:
    """Create a BotAgent for a bot provider.

    Args:
        host: EdgeServer base URL.
        namespace: Namespace of the bot provider.
        bot_provider_name: Name of the bot provider.
        api_key: Bot provider API key.

    Returns:
        A BotAgent backed by a new BotProviderClient.
    """
    return new_bot_agent_with_config(
        BotProviderConfig(
            host=host,
            namespace=namespace,
            bot_provider_name=bot_provider_name,
            api_key=api_key,
        )
    )


def new_function_agent_with_config(config: BotProviderConfig) -> FunctionAgent:
    """Create a FunctionAgent from an existing configuration."""
    return _FunctionAgent(BotProviderClient(config))


def new_function_agent(
    host: str, namespace: str, bot_provider_name: str, api_key: str
) -> FunctionAgent:
    """Create a FunctionAgent for a bot provider.

    Args:
        host: EdgeServer base URL.
        namespace: Namespace of the bot provider.
        bot_provider_name: Name of the bot provider.
        api_key: Bot provider API key.

    Returns:
        A FunctionAgent backed by a new BotProviderClient.
    """
    return new_function_agent_with_config(
        BotProviderConfig(
            host=host,
            namespace=namespace,
            bot_provider_name=bot_provider_name,
            api_key=api_key,
        )
    )
