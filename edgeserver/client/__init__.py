# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""EdgeServer bot-provider client package."""
from edgeserver.client.agents import (
    BotAgent,
    FunctionAgent,
    new_bot_agent,
    new_bot_agent_with_config,
    new_function_agent,
    new_function_agent_with_config,
)
from edgeserver.client.api import BotProviderClient
from edgeserver.client.multipart import FilePart, multipart_form
from edgeserver.client.sse import ServerSentEvent, SSEDecoder, aiter_sse
from edgeserver.client.streaming import (
    STREAM_BUFFER_SIZE,
    BotProviderStream,
    StreamState,
    open_stream,
)


__all__ = [
    "BotAgent",
    "BotProviderClient",
    "BotProviderStream",
    "FilePart",
    "FunctionAgent",
    "SSEDecoder",
    "STREAM_BUFFER_SIZE",
    "ServerSentEvent",
    "StreamState",
    "aiter_sse",
    "multipart_form",
    "new_bot_agent",
    "new_bot_agent_with_config",
    "new_function_agent",
    "new_function_agent_with_config",
    "open_stream",
]
