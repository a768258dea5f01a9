# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Tests for error details and the exception hierarchy."""
import pytest

from edgeserver.exceptions import (
    ApiResponseError,
    ConfigurationError,
    EdgeServerError,
    EmptyBlobResponseError,
    RunFailedError,
    StreamCancelledError,
    StreamConnectionError,
    StreamDecodeError,
    StreamError,
    describe_remote_error,
)
from edgeserver.models import BotEvent, ErrorDetail, ErrorLocation
from tests.conftest import make_event


class TestErrorDetail:
    """Tests for ErrorDetail rendering."""

    def test_renders_code_message_and_location(self):
        detail = ErrorDetail(
            message="model timeout",
            code="E_TIMEOUT",
            location=ErrorLocation(
                namespace="ns1",
                workflow_name="support",
                processor_name="llm-1",
                processor_type="LLM",
            ),
        )

        assert str(detail) == (
            "E_TIMEOUT: model timeout (at namespace=ns1, workflowName=support, "
            "processorName=llm-1, processorType=LLM)"
        )

    def test_appends_inner_cause(self):
        detail = ErrorDetail(message="failed", code="E1", inner="connection reset")

        assert str(detail).endswith(" - caused by: connection reset")


class TestDescribeRemoteError:
    @pytest.mark.parametrize(
        "error,error_code,expected",
        [
            ("bad payload", "E400", "bad payload (E400)"),
            ("bad payload", None, "bad payload"),
            (None, "E400", "E400"),
            (None, None, "unknown error"),
        ],
    )
    def test_describe(self, error, error_code, expected):
        assert describe_remote_error(error, error_code) == expected


class TestHierarchy:
    """All client errors share one root."""

    @pytest.mark.parametrize(
        "exc",
        [
            ConfigurationError("x"),
            StreamConnectionError("x"),
            StreamDecodeError("x", raw_data="{"),
            StreamCancelledError("x"),
            ApiResponseError("trigger json", 400),
        ],
    )
    def test_is_edge_server_error(self, exc):
        assert isinstance(exc, EdgeServerError)

    def test_stream_errors_share_base(self):
        assert issubclass(StreamConnectionError, StreamError)
        assert issubclass(RunFailedError, StreamError)

    def test_api_response_error_message(self):
        exc = ApiResponseError("trigger json", 200, "bad payload", "E400")

        assert str(exc) == "trigger json failed (200): bad payload (E400)"
        assert exc.status_code == 200
        assert exc.error_code == "E400"

    def test_empty_blob_response_error(self):
        exc = EmptyBlobResponseError(200)

        assert isinstance(exc, ApiResponseError)
        assert "no blob metadata returned" in str(exc)

    def test_run_failed_error_keeps_event(self):
        event = BotEvent.model_validate(
            make_event(
                "run.error",
                {"runError": {"error": {"message": "boom", "code": "E500"}}},
                event_id="e7",
            )
        )
        assert event.error is not None

        exc = RunFailedError(event.error, event)

        assert str(exc).startswith("SSE stream error: E500: boom")
        assert exc.event.event_id == "e7"
        assert exc.event.request_id == "req-1"
        assert exc.detail.code == "E500"
