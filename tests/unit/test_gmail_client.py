"""Unit tests for Gmail client."""

import pytest

from gmail_tools.exceptions import AuthenticationError, ConfigurationError, GmailAPIError
from gmail_tools.gmail.client import GmailClient


class TestGmailClient:
    """Test suite for GmailClient class."""

    def test_gmail_client_initialization(self) -> None:
        """Test that Gmail client is properly initialized."""
        client = GmailClient()

        assert client.settings is not None
        assert client._service is None

    @pytest.mark.asyncio
    async def test_authenticate_missing_credentials_raises(self, mock_settings) -> None:
        """Test that authenticate fails fast when credentials.json is missing."""
        client = GmailClient(mock_settings)

        with pytest.raises(ConfigurationError):
            await client.authenticate()

    @pytest.mark.asyncio
    async def test_authenticate_is_noop_with_injected_service(
        self, mock_settings, fake_service
    ) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        await client.authenticate()

        assert client._service is fake_service

    @pytest.mark.asyncio
    async def test_authenticate_wraps_flow_errors(self, mock_settings, monkeypatch) -> None:
        mock_settings.gmail_credentials_path.write_text("{}", encoding="utf-8")
        client = GmailClient(mock_settings)

        def _fail(*args):
            raise RuntimeError("oauth exploded")

        monkeypatch.setattr(client, "_build_service", _fail)

        with pytest.raises(AuthenticationError, match="oauth exploded"):
            await client.authenticate()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.list_messages(),
            lambda c: c.get_message("msg123"),
            lambda c: c.get_email_address(),
            lambda c: c.modify_labels("msg123", add=["Label_1"]),
            lambda c: c.send_raw("cmF3"),
        ],
    )
    async def test_calls_require_authentication(self, mock_settings, call) -> None:
        client = GmailClient(mock_settings)

        with pytest.raises(AuthenticationError):
            await call(client)

    @pytest.mark.asyncio
    async def test_get_email_address(self, mock_settings, fake_service) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        assert await client.get_email_address() == "me@example.com"
        fake_service.users.return_value.getProfile.assert_called_once_with(userId="me")

    @pytest.mark.asyncio
    async def test_get_email_address_missing(self, mock_settings, fake_service) -> None:
        fake_service.users.return_value.getProfile.return_value.execute.return_value = {}
        client = GmailClient(mock_settings, service=fake_service)

        assert await client.get_email_address() == ""

    @pytest.mark.asyncio
    async def test_list_messages_defaults(self, mock_settings, fake_service) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        response = await client.list_messages()

        assert response["nextPageToken"] == "page-2"
        fake_service.users.return_value.messages.return_value.list.assert_called_once_with(
            userId="me", includeSpamTrash=False, q="", maxResults=25
        )

    @pytest.mark.asyncio
    async def test_list_messages_passes_page_token_through(
        self, mock_settings, fake_service
    ) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        await client.list_messages(
            query="from:a@x.com",
            label_ids=["INBOX"],
            page_token="page-2",
            max_results=5,
        )

        fake_service.users.return_value.messages.return_value.list.assert_called_once_with(
            userId="me",
            includeSpamTrash=False,
            q="from:a@x.com",
            maxResults=5,
            labelIds=["INBOX"],
            pageToken="page-2",
        )

    @pytest.mark.asyncio
    async def test_get_message_full_format(self, mock_settings, fake_service, sample_message) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        assert await client.get_message("msg123456") == sample_message
        fake_service.users.return_value.messages.return_value.get.assert_called_once_with(
            userId="me", id="msg123456", format="full"
        )

    @pytest.mark.asyncio
    async def test_modify_labels_body(self, mock_settings, fake_service) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        await client.modify_labels("msg123456", remove=["UNREAD"])

        fake_service.users.return_value.messages.return_value.modify.assert_called_once_with(
            userId="me", id="msg123456", body={"removeLabelIds": ["UNREAD"]}
        )

    @pytest.mark.asyncio
    async def test_send_raw(self, mock_settings, fake_service) -> None:
        client = GmailClient(mock_settings, service=fake_service)

        result = await client.send_raw("cmF3")

        assert result["labelIds"] == ["SENT"]
        fake_service.users.return_value.messages.return_value.send.assert_called_once_with(
            userId="me", body={"raw": "cmF3"}
        )

    @pytest.mark.asyncio
    async def test_api_failures_are_wrapped(self, mock_settings, fake_service) -> None:
        fake_service.users.return_value.messages.return_value.get.return_value.execute.side_effect = (
            RuntimeError("404 not found")
        )
        client = GmailClient(mock_settings, service=fake_service)

        with pytest.raises(GmailAPIError, match="404 not found"):
            await client.get_message("missing")
