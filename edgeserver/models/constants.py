# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Wire-level enumerations shared by the EdgeServer models."""

from enum import StrEnum


class SseEventType(StrEnum):
    """Event types emitted on the bot-provider SSE stream.

    The literal values are part of the wire protocol and must not change.
    """

    RUN_INIT = "asgard.run.init"
    RUN_DONE = "asgard.run.done"
    RUN_ERROR = "asgard.run.error"
    PROCESS_START = "asgard.process.start"
    PROCESS_COMPLETE = "asgard.process.complete"
    MESSAGE_START = "asgard.message.start"
    MESSAGE_DELTA = "asgard.message.delta"
    MESSAGE_COMPLETE = "asgard.message.complete"
    TOOL_CALL_START = "asgard.tool_call.start"
    TOOL_CALL_COMPLETE = "asgard.tool_call.complete"


class PostBackAction(StrEnum):
    """Action attached to an outbound bot message."""

    NONE = "NONE"
    RESET_CHANNEL = "RESET_CHANNEL"


class FileType(StrEnum):
    """Blob file classification returned by EdgeServer."""

    BINARY = "BINARY"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    DOCUMENT = "DOCUMENT"


class MessageTemplateType(StrEnum):
    """Rich template kinds a buffered message may carry."""

    TEXT = "TEXT"
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    LOCATION = "LOCATION"
    BUTTON = "BUTTON"
    CAROUSEL = "CAROUSEL"
    CHART = "CHART"
    TABLE = "TABLE"


class MessageTemplateActionType(StrEnum):
    """What a template button or default action does when triggered."""

    MESSAGE = "MESSAGE"
    URI = "URI"
    EMIT = "EMIT"


class ImageAspectRatio(StrEnum):
    RECTANGLE = "rectangle"
    SQUARE = "square"


class ImageSize(StrEnum):
    COVER = "cover"
    CONTAIN = "contain"


class MessageTemplateRowType(StrEnum):
    """Row shape of table template data."""

    OBJECT = "OBJECT"
    ARRAY = "ARRAY"


class MessageTemplateTableColumnFormat(StrEnum):
    DATE = "DATE"
    DATE_TIME = "DATE_TIME"
    CURRENCY = "CURRENCY"
