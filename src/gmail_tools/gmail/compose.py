"""Build raw RFC 2822 payloads for ``users.messages.send``."""

from __future__ import annotations

import base64
from email.header import Header
from email.mime.text import MIMEText

from gmail_tools.exceptions import ValidationError


def build_raw_message(from_email: str, to: str, subject: str, body: str) -> str:
    """Compose an HTML message and encode it for the Gmail API.

    The subject is written as an RFC 2047 UTF-8 encoded word so non-ASCII
    subjects survive transport.

    Args:
        from_email: Sender address, normally the authenticated account.
        to: Recipient address(es) as a header value.
        subject: Subject line.
        body: HTML body.

    Returns:
        The message as unpadded base64url text, ready for the ``raw`` field.

    Raises:
        ValidationError: If any of the fields is empty.
    """

    if not from_email or not to or not subject or not body:
        raise ValidationError("Missing required fields")

    message = MIMEText(body, "html", "utf-8")
    message["From"] = from_email
    message["To"] = to
    message["Subject"] = Header(subject, "utf-8")

    return base64.urlsafe_b64encode(message.as_bytes()).decode("ascii").rstrip("=")
