"""Chat-tool operations over a Gmail account.

Each operation returns plain JSON-serializable data so any transport
(websocket, stdio, HTTP) can hand results straight back to the caller.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import structlog

from gmail_tools.config import Settings
from gmail_tools.exceptions import ToolError
from gmail_tools.gmail.client import GmailClient
from gmail_tools.gmail.compose import build_raw_message
from gmail_tools.gmail.parsing import parse_message
from gmail_tools.models import SearchParams
from gmail_tools.search import build_search_query

logger = structlog.get_logger()


def _message_ref(message: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": message.get("id") or "",
        "threadId": message.get("threadId") or "",
        "labelIds": list(message.get("labelIds") or []),
    }


class GmailToolbox:
    """Search, fetch, label and send operations exposed to chat clients.

    Tools can be called directly or dispatched by name with ``call``, which
    takes the camelCase arguments a chat client sends.
    """

    def __init__(
        self,
        gmail_client: GmailClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the toolbox.

        Args:
            gmail_client: Gmail API client. If None, creates a new one.
            settings: Application settings. If None, uses default settings.
        """
        from gmail_tools.config import get_settings

        self.settings = settings or get_settings()
        self.gmail_client = gmail_client or GmailClient(self.settings)
        self._tools: dict[str, Callable[[Mapping[str, Any]], Awaitable[Any]]] = {
            "search_messages": lambda args: self.search_messages(
                args.get("params"),
                label_ids=args.get("labelIds"),
                page_token=args.get("pageToken"),
                max_results=args.get("maxResults"),
            ),
            "get_message": lambda args: self.get_message(
                args["messageId"], body_type=args.get("bodyType")
            ),
            "add_label": lambda args: self.add_label(args["messageId"], args["labelId"]),
            "remove_label": lambda args: self.remove_label(args["messageId"], args["labelId"]),
            "send_message": lambda args: self.send_message(
                args["to"], args["subject"], args["body"]
            ),
            "get_email_address": lambda args: self.get_email_address(),
        }
        logger.info("gmail_toolbox_initialized", tools=sorted(self._tools))

    @property
    def tool_names(self) -> list[str]:
        return sorted(self._tools)

    async def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> Any:
        """Dispatch a tool call by name.

        Args:
            name: Tool name, e.g. ``"get_message"``.
            arguments: Tool arguments using camelCase keys.

        Returns:
            The tool result.

        Raises:
            ToolError: If the tool is unknown or a required argument is missing.
        """

        tool = self._tools.get(name)
        if tool is None:
            raise ToolError(f"Unknown tool: {name}")
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            raise ToolError(f"Arguments for {name} must be an object")

        logger.info("tool_called", tool=name)
        # Arguments are looked up when the tool coroutine is created, so only
        # that step maps KeyError to a missing argument.
        try:
            pending = tool(arguments)
        except KeyError as exc:
            raise ToolError(f"Missing argument for {name}: {exc.args[0]}") from exc
        return await pending

    async def search_messages(
        self,
        params: Mapping[str, Any] | SearchParams | None = None,
        *,
        label_ids: list[str] | None = None,
        page_token: str | None = None,
        max_results: int | None = None,
    ) -> dict[str, Any]:
        """List messages matching a filter description.

        Args:
            params: Filter description. None searches without constraints.
            label_ids: Restrict to messages carrying these label IDs.
            page_token: Page to fetch, from a previous ``nextPageToken``.
            max_results: Page size.

        Returns:
            ``query`` (the compiled search string), ``messages``,
            ``nextPageToken`` and ``resultSizeEstimate``.

        Raises:
            ValidationError: If the filter description is invalid.
        """

        query = build_search_query(params if params is not None else {})
        await self.gmail_client.authenticate()
        response = await self.gmail_client.list_messages(
            query=query,
            label_ids=label_ids,
            page_token=page_token,
            max_results=max_results,
        )
        return {
            "query": query,
            "messages": response.get("messages") or [],
            "nextPageToken": response.get("nextPageToken"),
            "resultSizeEstimate": response.get("resultSizeEstimate", 0),
        }

    async def get_message(self, message_id: str, body_type: str | None = None) -> dict[str, Any]:
        """Fetch a message and reduce it to sender, subject and one body."""
        await self.gmail_client.authenticate()
        raw = await self.gmail_client.get_message(message_id, format="full")
        parsed = parse_message(raw, body_type or self.settings.default_body_type)
        return parsed.model_dump(by_alias=True)

    async def add_label(self, message_id: str, label_id: str) -> dict[str, Any]:
        await self.gmail_client.authenticate()
        result = await self.gmail_client.modify_labels(message_id, add=[label_id])
        return _message_ref(result)

    async def remove_label(self, message_id: str, label_id: str) -> dict[str, Any]:
        await self.gmail_client.authenticate()
        result = await self.gmail_client.modify_labels(message_id, remove=[label_id])
        return _message_ref(result)

    async def send_message(self, to: str, subject: str, body: str) -> dict[str, Any]:
        """Send an HTML message from the authenticated account.

        Raises:
            ValidationError: If the recipient, subject, body or own address is empty.
        """
        await self.gmail_client.authenticate()
        from_email = await self.gmail_client.get_email_address()
        raw = build_raw_message(from_email, to, subject, body)
        result = await self.gmail_client.send_raw(raw)
        return _message_ref(result)

    async def get_email_address(self) -> dict[str, str]:
        await self.gmail_client.authenticate()
        return {"emailAddress": await self.gmail_client.get_email_address()}
