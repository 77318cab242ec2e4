"""Decoding of multipart/mixed segment responses.

A broadcaster answers a segment push with one body part per rendition, in
the order the renditions were requested.
"""

from __future__ import annotations

from email import policy
from email.message import EmailMessage
from email.parser import BytesParser


def split_multipart(content_type: str, body: bytes) -> list[bytes]:
    """Split a multipart body into the raw bytes of each part.

    Args:
        content_type: Value of the response Content-Type header, including
            the boundary parameter.
        body: Raw response body.

    Returns:
        Part payloads in order.

    Raises:
        ValueError: If the content is not a multipart document.
    """
    header = f"Content-Type: {content_type}\r\nMIME-Version: 1.0\r\n\r\n"
    message = BytesParser(policy=policy.HTTP).parsebytes(
        header.encode("latin-1") + body
    )
    if not isinstance(message, EmailMessage) or not message.is_multipart():
        raise ValueError(f"Expected a multipart response, got {content_type!r}")

    parts: list[bytes] = []
    for part in message.iter_parts():
        payload = part.get_payload(decode=True)
        parts.append(payload if isinstance(payload, bytes) else b"")
    return parts
