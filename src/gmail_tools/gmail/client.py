"""Gmail API client implementation.

This module provides a client for the Gmail operations exposed as tools:
profile lookup, message listing and retrieval, label changes and sending.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog

from gmail_tools.config import Settings
from gmail_tools.exceptions import AuthenticationError, ConfigurationError, GmailAPIError

logger = structlog.get_logger()


class GmailClient:
    """Gmail API client for email operations.

    This client handles authentication and the raw Gmail API calls. Results
    are returned as the dictionaries produced by the Google client.
    """

    def __init__(self, settings: Settings | None = None, service: Any | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
            service: Prebuilt Gmail API service. Skips the OAuth flow when given.
        """
        from gmail_tools.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = service
        logger.info("gmail_client_initialized", preauthenticated=service is not None)

    @property
    def user_id(self) -> str:
        return self.settings.gmail_user_id

    async def authenticate(self) -> None:
        """Authenticate with Gmail API using OAuth2.

        Raises:
            ConfigurationError: If the client secrets file is missing.
            AuthenticationError: If authentication fails.
        """

        if self._service is not None:
            return

        credentials_path = Path(self.settings.gmail_credentials_path)
        token_path = Path(self.settings.gmail_token_path)
        scope = self.settings.gmail_scope

        if not credentials_path.exists():
            raise ConfigurationError(
                f"Gmail credentials file not found: {credentials_path}. "
                "Download an OAuth client secrets file from Google Cloud Console."
            )

        logger.info(
            "gmail_authentication_started",
            credentials_path=str(credentials_path),
            token_path=str(token_path),
            scope=scope,
        )

        try:
            self._service = await asyncio.to_thread(
                self._build_service,
                credentials_path,
                token_path,
                scope,
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def get_email_address(self) -> str:
        """Return the address of the authenticated account.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        logger.info("getting_profile")

        try:
            profile = await asyncio.to_thread(
                lambda: service.users().getProfile(userId=self.user_id).execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_profile_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

        return (profile or {}).get("emailAddress") or ""

    async def list_messages(
        self,
        query: str | None = None,
        label_ids: list[str] | None = None,
        page_token: str | None = None,
        max_results: int | None = None,
    ) -> dict[str, Any]:
        """List one page of messages from Gmail.

        Spam and trash are excluded. The returned ``nextPageToken`` is passed
        back untouched; callers decide whether to request the next page.

        Args:
            query: Gmail search query string.
            label_ids: Only return messages carrying all of these label IDs.
            page_token: Token of the page to fetch.
            max_results: Page size. Defaults to settings ``gmail_max_results``.

        Returns:
            The ``users.messages.list`` response: ``messages`` (id/threadId
            pairs), ``nextPageToken`` and ``resultSizeEstimate``.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        resolved_max = max_results or self.settings.gmail_max_results
        logger.info(
            "listing_messages",
            max_results=resolved_max,
            query=query,
            label_ids=label_ids,
            page_token=page_token,
        )

        kwargs: dict[str, Any] = {
            "userId": self.user_id,
            "includeSpamTrash": False,
            "q": query or "",
            "maxResults": resolved_max,
        }
        if label_ids:
            kwargs["labelIds"] = label_ids
        if page_token:
            kwargs["pageToken"] = page_token

        try:
            return await asyncio.to_thread(
                lambda: service.users().messages().list(**kwargs).execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_list_messages_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def get_message(self, message_id: str, *, format: str = "full") -> dict[str, Any]:
        """Get a specific message by ID.

        Args:
            message_id: The Gmail message ID.
            format: Gmail response format; ``full`` includes the part tree.

        Returns:
            Message data dictionary.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        logger.info("getting_message", message_id=message_id, format=format)

        try:
            return await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .get(userId=self.user_id, id=message_id, format=format)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_get_message_failed", message_id=message_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def modify_labels(
        self,
        message_id: str,
        *,
        add: list[str] | None = None,
        remove: list[str] | None = None,
    ) -> dict[str, Any]:
        """Add and/or remove label IDs on a message.

        Returns:
            The modified message: ``id``, ``threadId`` and ``labelIds``.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        body: dict[str, list[str]] = {}
        if add:
            body["addLabelIds"] = add
        if remove:
            body["removeLabelIds"] = remove

        logger.info("modifying_labels", message_id=message_id, add=add, remove=remove)

        try:
            return await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .modify(userId=self.user_id, id=message_id, body=body)
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_modify_labels_failed", message_id=message_id, error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    async def send_raw(self, raw: str) -> dict[str, Any]:
        """Send an already encoded message.

        Args:
            raw: base64url encoded RFC 2822 message.

        Returns:
            The sent message: ``id``, ``threadId`` and ``labelIds``.

        Raises:
            GmailAPIError: If the API request fails.
        """

        service = self._require_service()
        logger.info("sending_message", raw_length=len(raw))

        try:
            return await asyncio.to_thread(
                lambda: service.users()
                .messages()
                .send(userId=self.user_id, body={"raw": raw})
                .execute()
            )
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_send_failed", error=str(exc))
            raise GmailAPIError(str(exc)) from exc

    def _require_service(self) -> Any:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )
        return self._service

    def _build_service(self, credentials_path: Path, token_path: Path, scope: str) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from google.auth.transport.requests import Request
        from google.oauth2.credentials import Credentials
        from google_auth_oauthlib.flow import InstalledAppFlow
        from googleapiclient.discovery import build

        creds: Credentials | None = None
        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), scopes=[scope])

        if creds is not None and creds.expired and creds.refresh_token:
            creds.refresh(Request())

        if creds is None or not creds.valid:
            flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=[scope])
            creds = flow.run_local_server(port=0)
            token_path.parent.mkdir(parents=True, exist_ok=True)
            token_path.write_text(creds.to_json(), encoding="utf-8")

        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", credentials=creds, cache_discovery=False)
