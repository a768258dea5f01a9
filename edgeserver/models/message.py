# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Outbound bot messages and the buffered messages EdgeServer replies with."""
from typing import Any

from pydantic import ConfigDict, Field

from edgeserver.models.base import EdgeModel, JsonValue
from edgeserver.models.constants import PostBackAction
from edgeserver.models.template import MessageTemplate


class BotMessage(EdgeModel):
    """One user-originated conversational turn.

    Immutable once built. Empty ``text``, ``blob_ids`` and ``payload`` are
    left out of the JSON body.

    Attributes:
        custom_channel_id: Client-chosen conversation channel identifier.
        custom_message_id: Client-generated identifier for this message.
        text: Message text.
        action: Post-back action (NONE or RESET_CHANNEL).
        blob_ids: Ids of previously uploaded blobs to attach.
        payload: Free-form structured payload.
    """

    model_config = ConfigDict(frozen=True)

    custom_channel_id: str = Field(..., min_length=1)
    custom_message_id: str = Field(..., min_length=1)
    text: str = ""
    action: PostBackAction = PostBackAction.NONE
    blob_ids: list[str] | None = None
    payload: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        data = super().to_wire()
        for key in ("text", "blobIds", "payload"):
            if not data.get(key):
                data.pop(key, None)
        return data


class BufferedMessage(EdgeModel):
    """A message produced by the remote workflow.

    Attributes:
        message_id: Server-assigned message identifier.
        reply_to_custom_message_id: Id of the outbound message this answers.
        text: Message text (a fragment for delta events).
        payload: Opaque structured payload.
        is_debug: Whether the message is debug output.
        idx: Optional ordinal of the message within the reply.
        template: Optional rich rendering template.
    """

    message_id: str = ""
    reply_to_custom_message_id: str = ""
    text: str = ""
    payload: JsonValue = None
    is_debug: bool = False
    idx: int | None = None
    template: MessageTemplate | None = None
