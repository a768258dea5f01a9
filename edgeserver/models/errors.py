# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Structured error details reported by EdgeServer workflows."""

from edgeserver.models.base import EdgeModel


class ErrorLocation(EdgeModel):
    """Where in the remote workflow an error occurred.

    Attributes:
        namespace: Namespace of the failing workflow.
        workflow_name: Name of the failing workflow.
        processor_name: Processor that raised the error.
        processor_type: Type of that processor.
        processor_config_name: Config entry the processor was built from.
        process_id: Id of the process step within the run.
    """

    namespace: str = ""
    workflow_name: str = ""
    processor_name: str = ""
    processor_type: str = ""
    processor_config_name: str = ""
    process_id: str = ""


class ErrorDetail(EdgeModel):
    """Error information attached to run errors and sync replies.

    Attributes:
        message: Human-readable error message.
        code: Machine-readable error code.
        inner: Optional description of the underlying cause.
        location: Pinpoints the failing processor in the workflow.
    """

    message: str = ""
    code: str = ""
    inner: str | None = None
    location: ErrorLocation = ErrorLocation()

    def __str__(self) -> str:
        loc = self.location
        text = (
            f"{self.code}: {self.message} "
            f"(at namespace={loc.namespace}, workflowName={loc.workflow_name}, "
            f"processorName={loc.processor_name}, processorType={loc.processor_type})"
        )
        if self.inner:
            text += f" - caused by: {self.inner}"
        return text
