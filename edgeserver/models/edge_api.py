# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Payloads of the synchronous bot-provider endpoints."""
from pydantic import Field

from edgeserver.models.base import EdgeModel
from edgeserver.models.constants import FileType
from edgeserver.models.errors import ErrorDetail
from edgeserver.models.message import BufferedMessage


class ApiEnvelope[T](EdgeModel):
    """Uniform wrapper around every synchronous endpoint response.

    Attributes:
        is_success: Whether the server handled the request successfully.
        data: Endpoint-specific result.
        error: Error message when the call failed.
        error_code: Error code when the call failed.
    """

    is_success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None


class Blob(EdgeModel):
    """Metadata of an uploaded blob.

    Attributes:
        channel_id: Channel the blob was uploaded to.
        blob_id: Id to reference the blob from a BotMessage.
        file_type: Server-side classification of the file.
        file_name: Original file name, if known.
        size: Size in bytes.
        mime: MIME type recorded by the server.
    """

    channel_id: str = ""
    blob_id: str
    file_type: FileType = FileType.BINARY
    file_name: str | None = None
    size: int = 0
    mime: str = ""


class BotReply(EdgeModel):
    """Reply of the synchronous ``/message`` endpoint.

    Attributes:
        request_id: Id of the request that produced the reply.
        namespace: Namespace of the bot provider.
        bot_provider_name: Bot provider that answered.
        custom_channel_id: Conversation channel.
        messages: Messages produced by the run, in order.
        error_detail: Set when the run failed.
    """

    request_id: str = ""
    namespace: str = ""
    bot_provider_name: str = ""
    custom_channel_id: str = ""
    messages: list[BufferedMessage] = Field(default_factory=list)
    error_detail: ErrorDetail | None = None
