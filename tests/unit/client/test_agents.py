# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Tests for the BotAgent / FunctionAgent facades."""
import io
from unittest.mock import AsyncMock, patch

from edgeserver.client.agents import (
    BotAgent,
    FunctionAgent,
    new_bot_agent,
    new_bot_agent_with_config,
    new_function_agent,
    new_function_agent_with_config,
)
from edgeserver.client.api import BotProviderClient
from edgeserver.models import Blob, BotReply


class TestFactories:
    def test_new_bot_agent_satisfies_protocol(self):
        agent = new_bot_agent("http://edge.test", "ns1", "bot1", "key")

        assert isinstance(agent, BotAgent)
        assert agent._client.config.api_key == "key"

    def test_new_function_agent_satisfies_protocol(self):
        agent = new_function_agent("http://edge.test", "ns1", "bot1", "key")

        assert isinstance(agent, FunctionAgent)
        assert agent._client.config.base_url == "http://edge.test/ns/ns1/bot-provider/bot1"

    def test_with_config_reuses_config(self, config_factory):
        config = config_factory()

        assert new_bot_agent_with_config(config)._client.config is config
        assert new_function_agent_with_config(config)._client.config is config


class TestDelegation:
    """Facades call straight through to the client."""

    @patch.object(BotProviderClient, "send_message", new_callable=AsyncMock)
    async def test_send_message(self, mock_send, config_factory, bot_message):
        mock_send.return_value = BotReply(request_id="r1")
        agent = new_bot_agent_with_config(config_factory())

        reply = await agent.send_message(bot_message, is_debug=True)

        assert reply.request_id == "r1"
        mock_send.assert_awaited_once_with(bot_message, is_debug=True)

    @patch.object(BotProviderClient, "upload_blob", new_callable=AsyncMock)
    async def test_upload_blob(self, mock_upload, config_factory):
        mock_upload.return_value = Blob(blob_id="b1")
        agent = new_bot_agent_with_config(config_factory())
        source = io.BytesIO(b"x")

        blob = await agent.upload_blob("c1", source, "x.txt", "text/plain")

        assert blob.blob_id == "b1"
        mock_upload.assert_awaited_once_with("c1", source, "x.txt", "text/plain")

    @patch.object(BotProviderClient, "new_streamer", new_callable=AsyncMock)
    async def test_new_streamer(self, mock_new_streamer, config_factory, bot_message):
        agent = new_bot_agent_with_config(config_factory())

        await agent.new_streamer(bot_message)

        mock_new_streamer.assert_awaited_once_with(bot_message, cancel_event=None)

    @patch.object(BotProviderClient, "trigger_json", new_callable=AsyncMock)
    async def test_trigger_json(self, mock_trigger, config_factory):
        mock_trigger.return_value = {"ok": True}
        agent = new_function_agent_with_config(config_factory())

        assert await agent.trigger_json({"a": 1}) == {"ok": True}
        mock_trigger.assert_awaited_once_with({"a": 1})

    @patch.object(BotProviderClient, "trigger_form", new_callable=AsyncMock)
    async def test_trigger_form(self, mock_trigger, config_factory):
        agent = new_function_agent_with_config(config_factory())

        await agent.trigger_form({"a": 1})

        mock_trigger.assert_awaited_once_with({"a": 1}, None, "", None)
