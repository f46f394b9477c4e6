"""multipart/related bodies for Drive's ``uploadType=multipart`` endpoints.

The boundary is fixed and content is not scanned for it, so a payload that
itself contains ``--<boundary>`` produces a malformed body.
"""

import json


def content_type(boundary: str) -> str:
    return f"multipart/related; boundary={boundary}"


def build_body(metadata: dict, content: str, mime_type: str, boundary: str) -> bytes:
    """Encode a JSON metadata part followed by a text content part as UTF-8 bytes."""
    delimiter = f"\r\n--{boundary}\r\n"
    close_delimiter = f"\r\n--{boundary}--"
    body = (
        delimiter
        + "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        + json.dumps(metadata, separators=(",", ":"), ensure_ascii=False)
        + delimiter
        + f"Content-Type: {mime_type}\r\n\r\n"
        + content
        + close_delimiter
    )
    return body.encode("utf-8")
