# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Exceptions raised by the EdgeServer client."""
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from edgeserver.models import BotEvent, ErrorDetail


class EdgeServerError(Exception):
    """Base exception for all EdgeServer client errors."""

    pass


class ConfigurationError(EdgeServerError):
    """Raised when configuration or an outbound message is missing or invalid."""

    pass


class StreamError(EdgeServerError):
    """Base for errors surfaced through a stream's ``last_error()``."""

    pass


class StreamConnectionError(StreamError):
    """Raised when the SSE connection fails or ends abnormally.

    Attributes:
        status_code: HTTP status when the server rejected the request.
        retryable: Whether reconnecting could recover from the failure.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class StreamDecodeError(StreamError):
    """Raised when an SSE frame does not decode into an event.

    Attributes:
        raw_data: The frame's data field as received.
    """

    def __init__(self, message: str, raw_data: str):
        super().__init__(message)
        self.raw_data = raw_data


class RunFailedError(StreamError):
    """Raised when the server reports a run error on the stream.

    Attributes:
        detail: Structured error detail with the remote location.
        event: The complete run error event, envelope fields included.
    """

    def __init__(self, detail: "ErrorDetail", event: "BotEvent"):
        super().__init__(f"SSE stream error: {detail}")
        self.detail = detail
        self.event = event


class StreamCancelledError(StreamError):
    """Raised when the stream's cancellation signal fires."""

    pass


class ServerUnreachableError(EdgeServerError):
    """Raised when a synchronous request cannot reach the server."""

    pass


class ApiResponseError(EdgeServerError):
    """Raised when a synchronous endpoint reports failure.

    Attributes:
        operation: Human-readable name of the failed call.
        status_code: HTTP status of the response.
        error: Remote error message, if provided.
        error_code: Remote error code, if provided.
    """

    def __init__(
        self,
        operation: str,
        status_code: int,
        error: str | None = None,
        error_code: str | None = None,
    ):
        super().__init__(
            f"{operation} failed ({status_code}): {describe_remote_error(error, error_code)}"
        )
        self.operation = operation
        self.status_code = status_code
        self.error = error
        self.error_code = error_code


class EmptyBlobResponseError(ApiResponseError):
    """Raised when a blob upload succeeds without returning blob metadata."""

    def __init__(self, status_code: int):
        super().__init__("upload blob", status_code, "no blob metadata returned")


class ResponseDecodeError(EdgeServerError):
    """Raised when a response body is not a valid envelope."""

    pass


class MultipartWriteError(EdgeServerError):
    """Raised when the multipart body cannot be produced while uploading."""

    pass


def describe_remote_error(error: str | None, error_code: str | None) -> str:
    """Render a remote error message and code as one string.

    Args:
        error: Remote error message.
        error_code: Remote error code.

    Returns:
        ``"message (code)"``, whichever part is present, or ``"unknown error"``.
    """
    if error is None and error_code is None:
        return "unknown error"
    if error is not None and error_code is not None:
        return f"{error} ({error_code})"
    return error if error is not None else str(error_code)
