"""Helpers for parsing full-format Gmail messages into flat records.

Only a handful of keys are read from the provider message (``id``,
``threadId``, ``payload.headers``, and ``mimeType``/``body.data``/``parts`` on
each part), so plain dicts work as fixtures. Nothing here raises: missing or
malformed input degrades to empty strings.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Iterator, Mapping
from typing import Any

import structlog

from gmail_tools.models import MessageHeaders, ParsedMessage

logger = structlog.get_logger()

# "Display Name <addr@example.com>" or "<addr@example.com>"
FROM_PATTERN = re.compile(r"([^<]+)?<([^>]+)>")

_WHITESPACE = re.compile(r"\s+")


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def extract_headers(headers: Any) -> MessageHeaders:
    """Pull sender name, sender email and subject from a header list.

    The first ``From`` and the first ``Subject`` with a non-empty value win.
    A ``From`` value that is not ``Name <addr>`` or ``<addr>`` leaves both
    sender fields empty.

    Args:
        headers: Gmail ``payload.headers`` list of ``{"name", "value"}``.

    Returns:
        MessageHeaders: Parsed values, empty strings where absent.
    """

    from_name = ""
    from_email = ""
    subject = ""
    seen: set[str] = set()

    for header in _list(headers):
        header = _mapping(header)
        name = header.get("name")
        value = header.get("value")
        if not isinstance(name, str) or not isinstance(value, str) or not value or name in seen:
            continue

        if name == "From":
            seen.add(name)
            match = FROM_PATTERN.fullmatch(value)
            if match:
                from_name = (match.group(1) or "").strip()
                from_email = match.group(2).strip()
        elif name == "Subject":
            seen.add(name)
            subject = value

    return MessageHeaders(from_name=from_name, from_email=from_email, subject=subject)


def _body_data(part: Mapping[str, Any], mime_type: str) -> str | None:
    if part.get("mimeType") != mime_type:
        return None
    data = _mapping(part.get("body")).get("data")
    return data if isinstance(data, str) and data else None


def find_body_part(part: Any, body_type: str) -> str | None:
    """Locate the encoded body of the first ``text/<body_type>`` part.

    Direct children are checked before any grandchild, then each child's
    subtree in order, and finally the part itself.

    Args:
        part: A Gmail message part (usually ``message["payload"]``).
        body_type: Subtype to look for, e.g. ``"plain"`` or ``"html"``.

    Returns:
        The raw base64url ``body.data`` string, or None if nothing matches.
    """

    mime_type = f"text/{body_type}"
    # Frames are (part, iterator over its children not yet walked). Parts on
    # the current path are tracked so a part that contains itself is skipped.
    stack: list[tuple[Mapping[str, Any], Iterator[Mapping[str, Any]]]] = []
    on_path: set[int] = set()

    def _enter(node: Mapping[str, Any]) -> str | None:
        children = [_mapping(child) for child in _list(node.get("parts"))]
        for child in children:
            data = _body_data(child, mime_type)
            if data:
                return data
        on_path.add(id(node))
        stack.append((node, iter(children)))
        return None

    data = _enter(_mapping(part))
    while data is None and stack:
        node, pending = stack[-1]
        child = next(pending, None)
        if child is None:
            stack.pop()
            on_path.discard(id(node))
            data = _body_data(node, mime_type)
        elif id(child) not in on_path:
            data = _enter(child)

    return data


def decode_body(data: str) -> str:
    """Decode a base64url body payload to text.

    Returns an empty string when the payload is not valid base64.
    """

    normalized = _WHITESPACE.sub("", data.replace("-", "+").replace("_", "/"))
    normalized += "=" * (-len(normalized) % 4)
    try:
        raw = base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as exc:
        logger.warning("gmail_body_decode_failed", error=str(exc), length=len(data))
        return ""
    return raw.decode("utf-8", errors="replace")


def find_body(part: Any, body_type: str) -> str:
    """Find and decode the ``text/<body_type>`` body of a part tree."""
    data = find_body_part(part, body_type)
    return decode_body(data) if data else ""


def parse_message(message: Any, body_type: str = "plain") -> ParsedMessage:
    """Convert a Gmail API message (format=full) to ParsedMessage.

    Args:
        message: Gmail API message dict.
        body_type: Body subtype to extract, ``"plain"`` or ``"html"``.

    Returns:
        ParsedMessage: Flat record; absent or malformed fields are empty.
    """

    message = _mapping(message)
    payload = message.get("payload")
    headers = extract_headers(_mapping(payload).get("headers"))

    body = ""
    if isinstance(payload, Mapping):
        body = find_body(payload, body_type)

    return ParsedMessage(
        id=str(message.get("id") or ""),
        thread_id=str(message.get("threadId") or ""),
        from_name=headers.from_name,
        from_email=headers.from_email,
        subject=headers.subject,
        body_decoded=body,
    )
