"""Gmail Tools - chat-tool access to a personal Gmail account.

This package provides search query construction, message parsing and a small
set of Gmail operations (search, fetch, label, send) for chat clients.
"""

__version__ = "0.1.0"

from gmail_tools.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
