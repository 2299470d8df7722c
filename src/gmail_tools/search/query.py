"""Build Gmail search strings from structured filter descriptions.

A filter description is a mapping shaped like ``SearchParams`` (camelCase
keys, as received in chat-tool arguments) or a ``SearchParams`` instance:

    build_search_query({
        "participants": {"from": "john@example.com", "to": ["alice@example.com"]},
        "timeRange": {"after": "2024/01/01", "olderThan": "30d"},
        "properties": {"subject": "meeting", "status": ["unread"]},
        "proximitySearches": [
            {"term1": "project", "term2": "deadline", "distance": 5, "maintainOrder": True}
        ],
    })
    # 'from:john@example.com to:alice@example.com after:2024/01/01 older_than:30d '
    # 'subject:meeting is:unread "project AROUND 5 deadline"'

Free text is not escaped; values are inserted into the query as given.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

import structlog

from gmail_tools.exceptions import ValidationError
from gmail_tools.models import Category, MessageStatus, SearchParams

logger = structlog.get_logger()

DATE_PATTERN = re.compile(r"\d{4}/\d{2}/\d{2}", re.ASCII)
RELATIVE_PATTERN = re.compile(r"\d+[dmy]", re.ASCII)

VALID_CATEGORIES: frozenset[str] = frozenset(c.value for c in Category)
VALID_STATUSES: frozenset[str] = frozenset(s.value for s in MessageStatus)

# Emitted in this order, one term per address.
PARTICIPANT_FIELDS: tuple[str, ...] = ("from", "to", "cc", "bcc")


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _section(params: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = params.get(key)
    return value if isinstance(value, Mapping) else {}


def _to_mapping(params: Any) -> Any:
    if isinstance(params, SearchParams):
        return params.to_query_dict()
    return params


def validate_search_params(params: Any) -> None:
    """Check a filter description, raising on the first invalid field.

    Checks run in a fixed order (time range, category, status, proximity,
    then each ``or`` entry depth-first) so the message always points at the
    same field for the same input.

    Args:
        params: Filter description mapping or ``SearchParams``.

    Raises:
        ValidationError: Describing the field and rule that failed.
    """

    params = _to_mapping(params)
    if not isinstance(params, Mapping):
        raise ValidationError("Search parameters must be an object")

    if params.get("timeRange"):
        time_range = _section(params, "timeRange")
        for key, label in (("after", "After"), ("before", "Before")):
            value = time_range.get(key)
            if value and not DATE_PATTERN.fullmatch(str(value)):
                raise ValidationError(f"{label} date must be in YYYY/MM/DD format")
        for key in ("olderThan", "newerThan"):
            value = time_range.get(key)
            if value and not RELATIVE_PATTERN.fullmatch(str(value)):
                raise ValidationError(f"{key} must be in format number+unit (d/m/y)")

    properties = _section(params, "properties")
    category = properties.get("category")
    if category and (not isinstance(category, str) or category not in VALID_CATEGORIES):
        raise ValidationError("Invalid category value")

    statuses = properties.get("status")
    if statuses:
        for status in _as_list(statuses):
            if not isinstance(status, str) or status not in VALID_STATUSES:
                raise ValidationError(f"Invalid status: {status}")

    searches = params.get("proximitySearches")
    if searches:
        for search in _as_list(searches):
            distance = search.get("distance") if isinstance(search, Mapping) else None
            if (
                isinstance(distance, bool)
                or not isinstance(distance, (int, float))
                or not math.isfinite(distance)
                or distance < 1
            ):
                raise ValidationError("Proximity search distance must be a positive number")

    or_params = params.get("or")
    if or_params:
        for nested in _as_list(or_params):
            validate_search_params(nested)


def _participant_terms(participants: Mapping[str, Any]) -> list[str]:
    terms: list[str] = []
    for field in PARTICIPANT_FIELDS:
        addresses = participants.get(field)
        if addresses:
            terms.extend(f"{field}:{address}" for address in _as_list(addresses))
    return terms


def _time_terms(time_range: Mapping[str, Any]) -> list[str]:
    terms: list[str] = []
    if time_range.get("after"):
        terms.append(f"after:{time_range['after']}")
    if time_range.get("before"):
        terms.append(f"before:{time_range['before']}")
    if time_range.get("olderThan"):
        terms.append(f"older_than:{time_range['olderThan']}")
    if time_range.get("newerThan"):
        terms.append(f"newer_than:{time_range['newerThan']}")
    return terms


def _property_terms(properties: Mapping[str, Any]) -> list[str]:
    terms: list[str] = []
    if properties.get("subject"):
        terms.append(f"subject:{properties['subject']}")
    if properties.get("hasExactPhrase"):
        terms.append(f'"{properties["hasExactPhrase"]}"')
    if properties.get("label"):
        terms.extend(f"label:{label}" for label in _as_list(properties["label"]))
    if properties.get("category"):
        terms.append(f"category:{properties['category']}")
    if properties.get("status"):
        terms.extend(f"is:{status}" for status in _as_list(properties["status"]))
    # False is meaningful here: it selects messages without user labels.
    if properties.get("hasLabels") is not None:
        terms.append("has:userlabels" if properties["hasLabels"] else "has:nouserlabels")
    if properties.get("isMuted"):
        terms.append("is:muted")
    if properties.get("isSnoozed"):
        terms.append("in:snoozed")
    if properties.get("excludeTerms"):
        terms.extend(f"-{term}" for term in _as_list(properties["excludeTerms"]))
    return terms


def _proximity_term(search: Mapping[str, Any]) -> str:
    term = f"{search.get('term1')} AROUND {search.get('distance')} {search.get('term2')}"
    return f'"{term}"' if search.get("maintainOrder") else term


def _build(params: Any) -> str:
    params = _to_mapping(params)
    validate_search_params(params)

    # An OR group becomes the whole query; sibling fields are not emitted.
    or_params = params.get("or")
    if or_params:
        return "{" + " ".join(_build(nested) for nested in _as_list(or_params)) + "}"

    terms: list[str] = []
    terms.extend(_participant_terms(_section(params, "participants")))
    terms.extend(_time_terms(_section(params, "timeRange")))
    terms.extend(_property_terms(_section(params, "properties")))
    if params.get("proximitySearches"):
        terms.extend(_proximity_term(search) for search in _as_list(params["proximitySearches"]))
    return " ".join(terms)


def build_search_query(params: Mapping[str, Any] | SearchParams | None) -> str:
    """Validate a filter description and compile it to a Gmail query string.

    Sections are emitted in order: participants, time range, properties,
    proximity searches. If ``or`` holds any entries, the result is instead
    ``{<entry> <entry> ...}`` built from those entries alone.

    Args:
        params: Filter description mapping or ``SearchParams``.

    Returns:
        The Gmail search string; empty when no constraints are given.

    Raises:
        ValidationError: If any field fails validation.
    """

    query = _build(params)
    logger.debug("search_query_built", query=query)
    return query
