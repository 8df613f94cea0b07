"""Document capability and the mapping adapter used for plain records.

The engine never mutates or copies document text. It keeps a reference to
each document and asks it for its searchable text whenever it needs it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from fast_search.config import SearchSettings
from fast_search.errors import IndexBuildError


@runtime_checkable
class Document(Protocol):
    """Anything that can describe its own searchable text."""

    def searchable_text(self) -> str:  # pragma: no cover - interface definition
        ...


def extract_searchable_text(record: Mapping[str, Any], settings: SearchSettings) -> str:
    """Concatenate the prioritized string fields of ``record``.

    Order: the primary field, then the secondary fields in configured order,
    then every other short string field in insertion order.
    """

    parts: list[str] = []

    primary = record.get(settings.primary_field)
    if isinstance(primary, str):
        parts.append(primary)

    for name in settings.secondary_fields:
        value = record.get(name)
        if isinstance(value, str) and value:
            parts.append(value)

    known = settings.known_fields()
    for key, value in record.items():
        if key in known:
            continue
        if isinstance(value, str) and 0 < len(value) < settings.max_extra_field_length:
            parts.append(value)

    return " ".join(parts).strip()


class MappingDocument:
    """Adapter exposing a mapping (e.g. a JSON record) as a ``Document``."""

    __slots__ = ("record", "_settings")

    def __init__(self, record: Mapping[str, Any], settings: SearchSettings) -> None:
        self.record = record
        self._settings = settings

    def searchable_text(self) -> str:
        return extract_searchable_text(self.record, self._settings)

    def __repr__(self) -> str:
        return f"MappingDocument({dict(self.record)!r})"


def as_document(obj: object, settings: SearchSettings, *, document_id: int | None = None) -> Document:
    """Coerce ``obj`` into a ``Document`` or raise ``IndexBuildError``."""

    if isinstance(obj, Mapping):
        return MappingDocument(obj, settings)
    if isinstance(obj, Document):
        return obj
    raise IndexBuildError(
        f"unsupported document type {type(obj).__name__!r}",
        document_id=document_id,
    )


def resolve_field(record: object, field_name: str) -> Any:
    """Look a field up on a record, then in its ``metadata`` and ``data`` sub-mappings."""

    mapping = record.record if isinstance(record, MappingDocument) else record
    if not isinstance(mapping, Mapping):
        return getattr(mapping, field_name, None)
    if field_name in mapping:
        return mapping[field_name]
    for nested_key in ("metadata", "data"):
        nested = mapping.get(nested_key)
        if isinstance(nested, Mapping) and field_name in nested:
            return nested[field_name]
    return None
