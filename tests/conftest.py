"""Pytest configuration and shared fixtures."""

import base64
from unittest.mock import MagicMock

import pytest


def encode_body(text: str) -> str:
    """Encode text the way Gmail encodes body data (base64url, no padding)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


@pytest.fixture
def mock_settings(tmp_path):
    """Provide mock settings for testing."""
    from gmail_tools.config import Settings

    return Settings(
        gmail_credentials_path=tmp_path / "credentials.json",
        gmail_token_path=tmp_path / "token.json",
        gmail_max_results=25,
        log_level="DEBUG",
        debug=True,
    )


@pytest.fixture
def sample_message() -> dict:
    """Provide a full-format Gmail message with plain and HTML alternatives."""
    return {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "UNREAD"],
        "snippet": "Weekly Newsletter - Python Tips",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": [
                {"name": "Subject", "value": "Weekly Newsletter - Python Tips"},
                {"name": "From", "value": "Python Weekly <newsletter@python.org>"},
                {"name": "To", "value": "user@example.com"},
            ],
            "body": {"size": 0},
            "parts": [
                {
                    "mimeType": "text/plain",
                    "body": {"size": 32, "data": encode_body("Welcome to this week's tips!")},
                },
                {
                    "mimeType": "text/html",
                    "body": {"size": 41, "data": encode_body("<p>Welcome to this week's tips!</p>")},
                },
            ],
        },
    }


@pytest.fixture
def fake_service(sample_message) -> MagicMock:
    """Provide a Gmail API service double with canned responses."""
    service = MagicMock()
    users = service.users.return_value
    messages = users.messages.return_value

    users.getProfile.return_value.execute.return_value = {"emailAddress": "me@example.com"}
    messages.list.return_value.execute.return_value = {
        "messages": [{"id": "msg123456", "threadId": "thread789"}],
        "nextPageToken": "page-2",
        "resultSizeEstimate": 1,
    }
    messages.get.return_value.execute.return_value = sample_message
    messages.modify.return_value.execute.return_value = {
        "id": "msg123456",
        "threadId": "thread789",
        "labelIds": ["INBOX", "Label_1"],
    }
    messages.send.return_value.execute.return_value = {
        "id": "sent001",
        "threadId": "sent001",
        "labelIds": ["SENT"],
    }
    return service


@pytest.fixture
def encode():
    """Provide the base64url body encoder."""
    return encode_body
