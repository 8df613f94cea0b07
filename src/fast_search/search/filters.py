"""Metadata filters that restrict search results to matching records.

Field values are looked up on the record first, then in its ``metadata``
and ``data`` sub-mappings. A record missing the field (or holding ``None``
or an empty string) never matches a filter on it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from fast_search.documents import resolve_field

FilterType = Literal["category", "number", "boolean", "text", "date"]


class MetadataFilter(BaseModel):
    """A single field filter.

    ``value`` depends on ``type``: a value or list of values for
    ``category``, a ``{"min": ..., "max": ...}`` mapping for ``number`` and
    ``date``, a bool (or ``"true"``) for ``boolean`` and a substring for
    ``text``.
    """

    model_config = ConfigDict(frozen=True)

    type: FilterType
    value: Any = None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def _as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _range_bounds(value: Any) -> tuple[Any, Any]:
    if isinstance(value, Mapping):
        return value.get("min"), value.get("max")
    return None, None


def _matches_category(actual: Any, expected: Any) -> bool:
    if isinstance(expected, (list, tuple, set, frozenset)):
        return str(actual) in {str(item) for item in expected}
    return str(actual) == str(expected)


def _matches_number(actual: Any, expected: Any) -> bool:
    number = _as_number(actual)
    if number is None:
        return False
    low, high = _range_bounds(expected)
    if low is not None:
        bound = _as_number(low)
        if bound is None or number < bound:
            return False
    if high is not None:
        bound = _as_number(high)
        if bound is None or number > bound:
            return False
    return True


def _matches_boolean(actual: Any, expected: Any) -> bool:
    wanted = expected is True or (isinstance(expected, str) and expected.lower() == "true")
    return bool(actual) == wanted


def _matches_text(actual: Any, expected: Any) -> bool:
    return str(expected).lower() in str(actual).lower()


def _matches_date(actual: Any, expected: Any) -> bool:
    moment = _as_datetime(actual)
    if moment is None:
        return False
    low, high = _range_bounds(expected)
    if low:
        bound = _as_datetime(low)
        if bound is None or moment < bound:
            return False
    if high:
        bound = _as_datetime(high)
        if bound is None or moment > bound:
            return False
    return True


_MATCHERS = {
    "category": _matches_category,
    "number": _matches_number,
    "boolean": _matches_boolean,
    "text": _matches_text,
    "date": _matches_date,
}


def matches_metadata_filters(record: object, filters: Mapping[str, MetadataFilter] | None) -> bool:
    """Return True when ``record`` satisfies every filter."""

    if not filters:
        return True

    for field_name, metadata_filter in filters.items():
        actual = resolve_field(record, field_name)
        if actual is None or actual == "":
            return False
        if not _MATCHERS[metadata_filter.type](actual, metadata_filter.value):
            return False
    return True
