# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Typed events decoded from the bot-provider SSE stream.

On the wire every event carries a ``fact`` object with one key per event
kind (``runInit``, ``messageDelta``, ...). Only the key matching
``eventType`` is meaningful; servers may send the others as ``null``.
``BotEvent.fact`` holds exactly that one variant, so an event can never
carry zero or several populated facts.
"""

from typing import Any

from pydantic import Field, SerializerFunctionWrapHandler, model_serializer, model_validator

from edgeserver.models.base import EdgeModel, JsonValue
from edgeserver.models.constants import SseEventType
from edgeserver.models.errors import ErrorDetail
from edgeserver.models.message import BufferedMessage


class RunInitFact(EdgeModel):
    """A run has been initialised."""


class RunDoneFact(EdgeModel):
    """A run finished successfully."""


class RunErrorFact(EdgeModel):
    error: ErrorDetail


class ProcessStartFact(EdgeModel):
    """A process step started.

    Attributes:
        process_id: Id of the process step.
        task: Opaque task description.
    """

    process_id: str = ""
    task: JsonValue = None


class ProcessCompleteFact(EdgeModel):
    """A process step completed.

    Attributes:
        process_id: Id of the process step.
        task_result: Opaque task result.
    """

    process_id: str = ""
    task_result: JsonValue = None


class MessageFact(EdgeModel):
    """Wraps the message of a message start, delta or complete event."""

    message: BufferedMessage


class ToolCall(EdgeModel):
    """Invocation of an external capability by the remote workflow."""

    toolset_name: str = ""
    tool_name: str = ""
    parameter: JsonValue = None


class ToolCallStartFact(EdgeModel):
    """A tool call started.

    Attributes:
        process_id: Process step making the call.
        call_seq: Per-process sequence number of the call.
        tool_call: Descriptor of the invoked tool.
    """

    process_id: str = ""
    call_seq: int = 0
    tool_call: ToolCall = Field(default_factory=ToolCall)


class ToolCallCompleteFact(EdgeModel):
    """A tool call completed.

    Attributes:
        process_id: Process step that made the call.
        call_seq: Per-process sequence number of the call.
        tool_call: Descriptor of the invoked tool.
        tool_call_result: Opaque tool result.
    """

    process_id: str = ""
    call_seq: int = 0
    tool_call: ToolCall = Field(default_factory=ToolCall)
    tool_call_result: JsonValue = None


type EventFact = (
    RunInitFact
    | RunDoneFact
    | RunErrorFact
    | ProcessStartFact
    | ProcessCompleteFact
    | MessageFact
    | ToolCallStartFact
    | ToolCallCompleteFact
)

# Event type -> (key inside the wire "fact" object, variant model)
FACT_VARIANTS: dict[SseEventType, tuple[str, type[EdgeModel]]] = {
    SseEventType.RUN_INIT: ("runInit", RunInitFact),
    SseEventType.RUN_DONE: ("runDone", RunDoneFact),
    SseEventType.RUN_ERROR: ("runError", RunErrorFact),
    SseEventType.PROCESS_START: ("processStart", ProcessStartFact),
    SseEventType.PROCESS_COMPLETE: ("processComplete", ProcessCompleteFact),
    SseEventType.MESSAGE_START: ("messageStart", MessageFact),
    SseEventType.MESSAGE_DELTA: ("messageDelta", MessageFact),
    SseEventType.MESSAGE_COMPLETE: ("messageComplete", MessageFact),
    SseEventType.TOOL_CALL_START: ("toolCallStart", ToolCallStartFact),
    SseEventType.TOOL_CALL_COMPLETE: ("toolCallComplete", ToolCallCompleteFact),
}

# Variants without fields may be sent as null or left out entirely.
_EMPTY_FACTS: frozenset[type[EdgeModel]] = frozenset({RunInitFact, RunDoneFact})


class BotEvent(EdgeModel):
    """One event of a bot-provider run, in server-send order.

    Attributes:
        event_type: Kind of event; selects the fact variant.
        request_id: Id of the request that started the run.
        event_id: Id of this event.
        namespace: Namespace the bot provider lives in.
        bot_provider_name: Bot provider that produced the event.
        custom_channel_id: Conversation channel of the run.
        fact: Event-specific data, the variant matching ``event_type``.
    """

    event_type: SseEventType
    request_id: str = ""
    event_id: str = ""
    namespace: str = ""
    bot_provider_name: str = ""
    custom_channel_id: str = ""
    fact: EventFact

    @model_validator(mode="before")
    @classmethod
    def select_fact_variant(cls, data: Any) -> Any:
        """Pick the fact variant named by the event type out of the wire object."""
        if not isinstance(data, dict):
            return data
        fact = data.get("fact")
        if isinstance(fact, EdgeModel):
            return data

        raw_type = data.get("eventType", data.get("event_type"))
        try:
            event_type = SseEventType(raw_type)
        except ValueError:
            # Leave it to field validation to report the bad event type
            return data

        key, variant = FACT_VARIANTS[event_type]
        raw = fact.get(key) if isinstance(fact, dict) else None
        if raw is None:
            if variant not in _EMPTY_FACTS:
                raise ValueError(f"fact.{key} is required for {event_type} events")
            raw = {}

        data = dict(data)
        data["fact"] = variant.model_validate(raw)
        return data

    @model_validator(mode="after")
    def check_fact_matches_type(self) -> "BotEvent":
        _, variant = FACT_VARIANTS[self.event_type]
        if type(self.fact) is not variant:
            raise ValueError(
                f"{self.event_type} events carry {variant.__name__}, "
                f"got {type(self.fact).__name__}"
            )
        return self

    @model_serializer(mode="wrap")
    def serialize_fact_under_key(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        key, _ = FACT_VARIANTS[self.event_type]
        data["fact"] = {key: data["fact"]}
        return data

    @property
    def message(self) -> BufferedMessage | None:
        """The wrapped message for message start/delta/complete events."""
        if isinstance(self.fact, MessageFact):
            return self.fact.message
        return None

    @property
    def error(self) -> ErrorDetail | None:
        """The error detail for run error events."""
        if isinstance(self.fact, RunErrorFact):
            return self.fact.error
        return None
