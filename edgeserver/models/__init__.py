# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""EdgeServer wire models."""
from edgeserver.models.base import EdgeModel, JsonValue
from edgeserver.models.constants import (
    FileType,
    ImageAspectRatio,
    ImageSize,
    MessageTemplateActionType,
    MessageTemplateRowType,
    MessageTemplateTableColumnFormat,
    MessageTemplateType,
    PostBackAction,
    SseEventType,
)
from edgeserver.models.edge_api import ApiEnvelope, Blob, BotReply
from edgeserver.models.errors import ErrorDetail, ErrorLocation
from edgeserver.models.events import (
    FACT_VARIANTS,
    BotEvent,
    EventFact,
    MessageFact,
    ProcessCompleteFact,
    ProcessStartFact,
    RunDoneFact,
    RunErrorFact,
    RunInitFact,
    ToolCall,
    ToolCallCompleteFact,
    ToolCallStartFact,
)
from edgeserver.models.message import BotMessage, BufferedMessage
from edgeserver.models.template import (
    MessageTemplate,
    MessageTemplateAction,
    MessageTemplateButton,
    MessageTemplateChartOption,
    MessageTemplateColumn,
    MessageTemplateReference,
    MessageTemplateTable,
    MessageTemplateTableColumn,
    MessageTemplateTablePagination,
    QuickReply,
)


__all__ = [
    "ApiEnvelope",
    "Blob",
    "BotEvent",
    "BotMessage",
    "BotReply",
    "BufferedMessage",
    "EdgeModel",
    "ErrorDetail",
    "ErrorLocation",
    "EventFact",
    "FACT_VARIANTS",
    "FileType",
    "ImageAspectRatio",
    "ImageSize",
    "JsonValue",
    "MessageFact",
    "MessageTemplate",
    "MessageTemplateAction",
    "MessageTemplateActionType",
    "MessageTemplateButton",
    "MessageTemplateChartOption",
    "MessageTemplateColumn",
    "MessageTemplateReference",
    "MessageTemplateRowType",
    "MessageTemplateTable",
    "MessageTemplateTableColumn",
    "MessageTemplateTableColumnFormat",
    "MessageTemplateTablePagination",
    "MessageTemplateType",
    "PostBackAction",
    "ProcessCompleteFact",
    "ProcessStartFact",
    "QuickReply",
    "RunDoneFact",
    "RunErrorFact",
    "RunInitFact",
    "SseEventType",
    "ToolCall",
    "ToolCallCompleteFact",
    "ToolCallStartFact",
]
