# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Shared fixtures and helpers for all tests.

Provides factories for wire payloads, SSE response bodies and
``httpx.MockTransport`` backed configurations.
"""
import json
from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
import pytest
from typer.testing import CliRunner

from edgeserver.config import BotProviderConfig
from edgeserver.models import BotMessage


TEST_HOST = "http://edge.test"
TEST_NAMESPACE = "ns1"
TEST_BOT = "bot1"
TEST_API_KEY = "secret-key"

type Handler = Callable[[httpx.Request], httpx.Response]


def make_event(
    event_type: str,
    fact: dict[str, Any] | None = None,
    event_id: str = "",
    request_id: str = "req-1",
) -> dict[str, Any]:
    """Build a wire-format event dict.

    Args:
        event_type: Suffix or full event type, e.g. "message.delta".
        fact: Content of the wire fact object (keyed by variant).
        event_id: Event id.
        request_id: Request id.
    """
    if not event_type.startswith("asgard."):
        event_type = f"asgard.{event_type}"
    return {
        "eventType": event_type,
        "requestId": request_id,
        "eventId": event_id,
        "namespace": TEST_NAMESPACE,
        "botProviderName": TEST_BOT,
        "customChannelId": "c1",
        "fact": fact or {},
    }


def sse_frame(data: dict[str, Any] | str, event_id: str | None = None) -> bytes:
    """Encode one SSE frame, terminated by a blank line."""
    payload = data if isinstance(data, str) else json.dumps(data)
    lines = []
    if event_id is not None:
        lines.append(f"id: {event_id}")
    lines.append(f"data: {payload}")
    return ("\n".join(lines) + "\n\n").encode()


async def sse_body(frames: list[bytes]) -> AsyncIterator[bytes]:
    for frame in frames:
        yield frame


def sse_response(frames: list[bytes], status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        headers={"content-type": "text/event-stream"},
        content=sse_body(frames),
    )


@pytest.fixture
def hello_events() -> list[dict[str, Any]]:
    """message.start, two deltas, message.complete and run.done."""
    return [
        make_event("message.start", {"messageStart": {"message": {"messageId": "s1", "text": ""}}}, "e1"),
        make_event("message.delta", {"messageDelta": {"message": {"messageId": "s1", "text": "He"}}}, "e2"),
        make_event("message.delta", {"messageDelta": {"message": {"messageId": "s1", "text": "llo"}}}, "e3"),
        make_event(
            "message.complete", {"messageComplete": {"message": {"messageId": "s1", "text": "Hello"}}}, "e4"
        ),
        make_event("run.done", {"runDone": {}}, "e5"),
    ]


@pytest.fixture
def bot_message() -> BotMessage:
    return BotMessage(custom_channel_id="c1", custom_message_id="m1", text="hi")


@pytest.fixture
def config_factory() -> Callable[..., BotProviderConfig]:
    """Factory fixture for configurations talking to an in-memory transport."""

    def _create(handler: Handler | None = None, **kwargs: Any) -> BotProviderConfig:
        values: dict[str, Any] = {
            "host": TEST_HOST,
            "namespace": TEST_NAMESPACE,
            "bot_provider_name": TEST_BOT,
            "api_key": TEST_API_KEY,
            "reconnect_base_delay": 0,
        }
        if handler is not None:
            values["transport"] = httpx.MockTransport(handler)
        values.update(kwargs)
        return BotProviderConfig(**values)

    return _create


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI test runner for command testing."""
    return CliRunner()
