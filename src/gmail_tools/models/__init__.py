"""Data models for Gmail Tools.

This module contains Pydantic models for data validation and serialization.
"""

from gmail_tools.models.parsed_message import MessageHeaders, ParsedMessage
from gmail_tools.models.search_params import (
    Category,
    MessageProperties,
    MessageStatus,
    Participants,
    ProximitySearch,
    SearchParams,
    TimeRange,
)

__all__ = [
    "Category",
    "MessageHeaders",
    "MessageProperties",
    "MessageStatus",
    "ParsedMessage",
    "Participants",
    "ProximitySearch",
    "SearchParams",
    "TimeRange",
]
