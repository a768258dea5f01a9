# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Tests for outbound and buffered messages."""
import pytest
from pydantic import ValidationError

from edgeserver.models import (
    BotMessage,
    BotReply,
    BufferedMessage,
    MessageTemplateType,
    PostBackAction,
)


class TestBotMessage:
    """Tests for BotMessage."""

    def test_wire_names_are_camel_case(self):
        message = BotMessage(custom_channel_id="c1", custom_message_id="m1", text="hi")

        assert message.to_wire() == {
            "customChannelId": "c1",
            "customMessageId": "m1",
            "text": "hi",
            "action": "NONE",
        }

    def test_empty_optional_fields_are_omitted(self):
        message = BotMessage(
            custom_channel_id="c1",
            custom_message_id="m1",
            text="",
            blob_ids=[],
            payload={},
        )

        wire = message.to_wire()

        assert "text" not in wire
        assert "blobIds" not in wire
        assert "payload" not in wire

    def test_blob_ids_and_payload_are_sent_when_set(self):
        message = BotMessage(
            custom_channel_id="c1",
            custom_message_id="m1",
            action=PostBackAction.RESET_CHANNEL,
            blob_ids=["b1", "b2"],
            payload={"k": "v"},
        )

        wire = message.to_wire()

        assert wire["action"] == "RESET_CHANNEL"
        assert wire["blobIds"] == ["b1", "b2"]
        assert wire["payload"] == {"k": "v"}

    @pytest.mark.parametrize("field", ["custom_channel_id", "custom_message_id"])
    def test_ids_are_required(self, field):
        values = {"custom_channel_id": "c1", "custom_message_id": "m1"}
        values[field] = ""

        with pytest.raises(ValidationError):
            BotMessage(**values)

    def test_message_is_immutable(self):
        message = BotMessage(custom_channel_id="c1", custom_message_id="m1")

        with pytest.raises(ValidationError):
            message.text = "changed"

    def test_round_trip_into_buffered_message(self):
        """Populated fields survive serialize -> parse."""
        message = BotMessage(
            custom_channel_id="c1", custom_message_id="m1", text="hi", payload={"n": 1}
        )

        buffered = BufferedMessage.model_validate(message.to_wire())

        assert buffered.text == "hi"
        assert buffered.payload == {"n": 1}


class TestBotReply:
    """Tests for BotReply decoding."""

    def test_reply_with_template_and_error_detail(self):
        reply = BotReply.model_validate(
            {
                "requestId": "r1",
                "customChannelId": "c1",
                "messages": [
                    {
                        "messageId": "s1",
                        "replyToCustomMessageId": "m1",
                        "text": "Pick one",
                        "idx": 0,
                        "template": {"type": "BUTTON", "text": "Pick one"},
                    }
                ],
                "errorDetail": {"message": "partial", "code": "W1"},
            }
        )

        assert reply.request_id == "r1"
        assert reply.messages[0].reply_to_custom_message_id == "m1"
        assert reply.messages[0].template is not None
        assert reply.messages[0].template.type is MessageTemplateType.BUTTON
        assert reply.error_detail is not None
        assert reply.error_detail.code == "W1"

    def test_messages_default_to_empty(self):
        assert BotReply.model_validate({}).messages == []
