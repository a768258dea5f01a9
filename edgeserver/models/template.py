# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Declarative rich message templates (buttons, carousels, charts, tables).

These models carry shape only; the client never interprets them beyond
decoding. Optional attributes are omitted from the JSON output when unset.
"""

from typing import Any

from pydantic import Field

from edgeserver.models.base import EdgeModel, JsonValue
from edgeserver.models.constants import (
    ImageAspectRatio,
    ImageSize,
    MessageTemplateActionType,
    MessageTemplateRowType,
    MessageTemplateTableColumnFormat,
    MessageTemplateType,
)


class QuickReply(EdgeModel):
    text: str


class MessageTemplateAction(EdgeModel):
    """Action bound to a button or a default tap target.

    Attributes:
        type: MESSAGE sends text back, URI opens a link, EMIT raises an event.
        text: Text to send for MESSAGE actions.
        uri: Target for URI actions.
        event_name: Event emitted for EMIT actions.
        payload: Opaque payload forwarded with the action.
    """

    type: MessageTemplateActionType
    text: str | None = None
    uri: str | None = None
    event_name: str | None = None
    payload: JsonValue = None


class MessageTemplateButton(EdgeModel):
    label: str
    action: MessageTemplateAction


class MessageTemplateColumn(EdgeModel):
    """One card of a carousel template."""

    title: str = ""
    text: str = ""
    thumbnail_image_url: str | None = None
    image_aspect_ratio: ImageAspectRatio | None = None
    image_size: ImageSize | None = None
    image_background_color: str | None = None
    buttons: list[MessageTemplateButton] = Field(default_factory=list)
    default_action: MessageTemplateAction | None = None


class MessageTemplateChartOption(EdgeModel):
    type: str
    title: str = ""
    spec: dict[str, Any] = Field(default_factory=dict)


class MessageTemplateTableColumn(EdgeModel):
    header: str
    key: str
    format: MessageTemplateTableColumnFormat | None = None


class MessageTemplateTablePagination(EdgeModel):
    size: int


class MessageTemplateTable(EdgeModel):
    """Tabular data with typed columns and optional pagination."""

    row_type: MessageTemplateRowType
    columns: list[MessageTemplateTableColumn] = Field(default_factory=list)
    pagination: MessageTemplateTablePagination | None = None
    data: list[JsonValue] = Field(default_factory=list)


class MessageTemplateReference(EdgeModel):
    title: str = ""
    uri: str = ""


class MessageTemplate(EdgeModel):
    """Rich rendering hint attached to a buffered message.

    Which attributes are meaningful depends on ``type``: media templates use
    the URL fields, LOCATION uses latitude/longitude, BUTTON and CAROUSEL use
    buttons/columns, CHART uses data and chart options, TABLE uses table.
    """

    type: MessageTemplateType
    text: str | None = None
    quick_replies: list[QuickReply] | None = None
    original_content_url: str | None = None
    preview_image_url: str | None = None
    duration: int | None = None
    title: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    thumbnail_image_url: str | None = None
    image_aspect_ratio: ImageAspectRatio | None = None
    image_size: ImageSize | None = None
    image_background_color: str | None = None
    buttons: list[MessageTemplateButton] | None = None
    default_action: MessageTemplateAction | None = None
    columns: list[MessageTemplateColumn] | None = None
    data: JsonValue = None
    chart_options: list[MessageTemplateChartOption] | None = None
    default_chart: str | None = None
    table: MessageTemplateTable | None = None
    references: list[MessageTemplateReference] | None = None
    # Deprecated by the server, still decoded for older deployments.
    description: str | None = None
