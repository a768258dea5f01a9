# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Tests for edgeserver.logging module."""

import importlib
import json
import re
from io import StringIO
from unittest import mock

import pytest
from loguru import logger

import edgeserver
from edgeserver.client.sse import ServerSentEvent
from edgeserver.client.streaming import BotProviderStream
from edgeserver.logging import configure_logging, normalize_level
from tests.conftest import make_event


def _strip_ansi(text: str) -> str:
    """Remove ANSI escape codes from text."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    logger.remove()


class TestNormalizeLevel:
    @pytest.mark.parametrize(
        "level,expected",
        [
            ("debug", "DEBUG"),
            ("INFO", "INFO"),
            ("warn", "WARNING"),
            (" error ", "ERROR"),
            ("fatal", "CRITICAL"),
            ("loud", None),
        ],
    )
    def test_aliases(self, level, expected):
        assert normalize_level(level) == expected


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_filters_below_level(self) -> None:
        with mock.patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            configure_logging("warn")
            logger.info("hidden message")
            logger.warning("shown message")

            output = _strip_ansi(mock_stderr.getvalue())

        assert "hidden message" not in output
        assert "shown message" in output

    def test_invalid_level_falls_back_to_info(self) -> None:
        with mock.patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            configure_logging("loud")
            logger.debug("debug message")
            logger.info("info message")

            output = _strip_ansi(mock_stderr.getvalue())

        assert "Invalid log level 'loud', using 'info'" in output
        assert "debug message" not in output
        assert "info message" in output

    def test_extra_fields_are_rendered_literally(self) -> None:
        """Braces and tags in field values do not break the format."""
        with mock.patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            configure_logging("debug")
            logger.debug("Received SSE event", event_data='{"a": "<b>"}')

            output = _strip_ansi(mock_stderr.getvalue())

        assert "Received SSE event" in output
        assert "event_data=" in output
        assert '"a"' in output
        assert "<b>" in output


class TestLibraryRecords:
    """Records logged by the edgeserver package itself."""

    async def test_silent_until_configured(self, config_factory, bot_message) -> None:
        stream = BotProviderStream(config_factory(), bot_message)
        frame = ServerSentEvent(data=json.dumps(make_event("run.done")))

        # Importing the package disables its records
        configure_logging("debug")
        importlib.reload(edgeserver)
        captured: list[str] = []
        logger.add(captured.append, level="DEBUG", format="{message}")

        stream._decode(frame)

        assert captured == []

        with mock.patch("sys.stderr", new_callable=StringIO) as mock_stderr:
            configure_logging("debug")
            stream._decode(frame)

            output = _strip_ansi(mock_stderr.getvalue())

        assert "Received SSE event" in output
