"""Gmail search query construction.

Turns a structured filter description into the query syntax used by the
Gmail search box and the ``q`` parameter of ``users.messages.list``.
"""

from .query import build_search_query, validate_search_params

__all__ = ["build_search_query", "validate_search_params"]
