# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""EdgeServer: client library for EdgeServer bot providers."""

from loguru import logger

from edgeserver.client import (
    BotAgent,
    BotProviderClient,
    BotProviderStream,
    FunctionAgent,
    StreamState,
    new_bot_agent,
    new_bot_agent_with_config,
    new_function_agent,
    new_function_agent_with_config,
    open_stream,
)
from edgeserver.config import BotProviderConfig, EdgeServerSettings
from edgeserver.exceptions import (
    ApiResponseError,
    ConfigurationError,
    EdgeServerError,
    EmptyBlobResponseError,
    MultipartWriteError,
    ResponseDecodeError,
    RunFailedError,
    ServerUnreachableError,
    StreamCancelledError,
    StreamConnectionError,
    StreamDecodeError,
    StreamError,
)
from edgeserver.models import (
    BotEvent,
    BotMessage,
    BotReply,
    ErrorDetail,
    PostBackAction,
    SseEventType,
)


__version__ = "0.1.0"

# Library records stay silent until configure_logging() enables them
logger.disable("edgeserver")

__all__ = [
    "ApiResponseError",
    "BotAgent",
    "BotEvent",
    "BotMessage",
    "BotProviderClient",
    "BotProviderConfig",
    "BotProviderStream",
    "BotReply",
    "ConfigurationError",
    "EdgeServerError",
    "EdgeServerSettings",
    "EmptyBlobResponseError",
    "ErrorDetail",
    "FunctionAgent",
    "MultipartWriteError",
    "PostBackAction",
    "ResponseDecodeError",
    "RunFailedError",
    "ServerUnreachableError",
    "SseEventType",
    "StreamCancelledError",
    "StreamConnectionError",
    "StreamDecodeError",
    "StreamError",
    "StreamState",
    "new_bot_agent",
    "new_bot_agent_with_config",
    "new_function_agent",
    "new_function_agent_with_config",
    "open_stream",
    "__version__",
]
