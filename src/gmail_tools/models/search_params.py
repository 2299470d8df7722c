"""Typed filter description for Gmail searches.

These models describe the same structure the query builder accepts as a plain
mapping. They exist so callers (and tool schemas) get field names, enums and
descriptions; the query builder itself works on the dumped mapping, see
``SearchParams.to_query_dict``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Addresses = Union[str, list[str]]


class Category(str, Enum):
    """Gmail inbox category."""

    PRIMARY = "primary"
    SOCIAL = "social"
    PROMOTIONS = "promotions"
    UPDATES = "updates"
    FORUMS = "forums"
    RESERVATIONS = "reservations"
    PURCHASES = "purchases"


class MessageStatus(str, Enum):
    """Message status usable with the ``is:`` operator."""

    IMPORTANT = "important"
    STARRED = "starred"
    UNREAD = "unread"
    READ = "read"


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Participants(_CamelModel):
    """Sender and recipient constraints."""

    from_: Optional[Addresses] = Field(default=None, alias="from", description="Sender address(es)")
    to: Optional[Addresses] = Field(default=None, description="Recipient address(es)")
    cc: Optional[Addresses] = Field(default=None, description="Cc address(es)")
    bcc: Optional[Addresses] = Field(default=None, description="Bcc address(es)")


class TimeRange(_CamelModel):
    """Absolute (YYYY/MM/DD) and relative (e.g. 30d, 6m, 1y) date bounds."""

    after: Optional[str] = Field(default=None, description="Only messages after YYYY/MM/DD")
    before: Optional[str] = Field(default=None, description="Only messages before YYYY/MM/DD")
    older_than: Optional[str] = Field(
        default=None, alias="olderThan", description="Relative age, number + d/m/y"
    )
    newer_than: Optional[str] = Field(
        default=None, alias="newerThan", description="Relative age, number + d/m/y"
    )


class MessageProperties(_CamelModel):
    """Subject, labels, status flags and excluded terms."""

    subject: Optional[str] = Field(default=None, description="Subject contains")
    has_exact_phrase: Optional[str] = Field(
        default=None, alias="hasExactPhrase", description="Exact phrase anywhere in the message"
    )
    label: Optional[list[str]] = Field(default=None, description="Label names")
    category: Optional[Category] = Field(default=None, description="Inbox category")
    status: Optional[list[MessageStatus]] = Field(default=None, description="Status flags")
    has_labels: Optional[bool] = Field(
        default=None, alias="hasLabels", description="Whether the message carries user labels"
    )
    is_muted: Optional[bool] = Field(default=None, alias="isMuted", description="Muted threads only")
    is_snoozed: Optional[bool] = Field(
        default=None, alias="isSnoozed", description="Snoozed messages only"
    )
    exclude_terms: Optional[list[str]] = Field(
        default=None, alias="excludeTerms", description="Terms that must not appear"
    )


class ProximitySearch(_CamelModel):
    """Two terms appearing within ``distance`` words of each other."""

    term1: str
    term2: str
    distance: Union[int, float] = Field(description="Maximum number of words between the terms")
    maintain_order: Optional[bool] = Field(
        default=None, alias="maintainOrder", description="Require term1 before term2"
    )


class SearchParams(_CamelModel):
    """A complete filter description; ``or`` nests further descriptions."""

    participants: Optional[Participants] = None
    time_range: Optional[TimeRange] = Field(default=None, alias="timeRange")
    properties: Optional[MessageProperties] = None
    proximity_searches: Optional[list[ProximitySearch]] = Field(
        default=None, alias="proximitySearches"
    )
    or_: Optional[list[SearchParams]] = Field(default=None, alias="or")

    def to_query_dict(self) -> dict[str, Any]:
        """Dump to the camelCase mapping understood by the query builder."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
