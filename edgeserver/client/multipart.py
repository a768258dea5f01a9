# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Multipart/form-data arguments for the form and blob uploads.

httpx does the encoding and reads file parts in chunks while it sends the
request, so an upload is never buffered in memory as a whole.
"""
from dataclasses import dataclass
from typing import Any, BinaryIO


DEFAULT_FILE_CONTENT_TYPE = "application/octet-stream"

type FileSource = BinaryIO


@dataclass(frozen=True)
class FilePart:
    """A file to upload as one multipart part.

    Attributes:
        name: Form field name.
        filename: File name reported to the server.
        source: Binary file object, read by httpx while sending.
        content_type: MIME type; octet-stream when not given.
    """

    name: str
    filename: str
    source: FileSource
    content_type: str | None = None


def multipart_form(fields: dict[str, str], file: FilePart | None = None) -> dict[str, Any]:
    """Build the ``data``/``files`` keyword arguments of a multipart request.

    httpx only encodes multipart/form-data when ``files`` is non-empty, so a
    form without a file sends its text fields as parts without a filename.

    Example:
        >>> await client.post(url, **multipart_form({"json": "{}"}, FilePart("file", "a.txt", f)))
    """
    if file is None:
        return {"files": {name: (None, value) for name, value in fields.items()}}

    return {
        "data": fields,
        "files": {
            file.name: (
                file.filename,
                file.source,
                file.content_type or DEFAULT_FILE_CONTENT_TYPE,
            )
        },
    }
