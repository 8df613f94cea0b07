"""Exception taxonomy for the search engine.

Only build failures are raised as exceptions, and only internally: the
engine facade catches them so that nothing crosses the public API boundary.
Not-ready and empty-query conditions are reported through response fields.
"""

from __future__ import annotations


class FastSearchError(Exception):
    """Base class for search engine errors."""


class IndexBuildError(FastSearchError):
    """Raised when a document collection cannot be indexed."""

    def __init__(self, message: str, *, document_id: int | None = None) -> None:
        super().__init__(message)
        self.document_id = document_id

    def __str__(self) -> str:
        base = super().__str__()
        if self.document_id is None:
            return base
        return f"document {self.document_id}: {base}"


NOT_READY_MESSAGE = "Index not ready"
