"""Fields stamped on log records emitted while a span is open."""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from opentelemetry.trace import Span

log_context: ContextVar[dict[str, str] | None] = ContextVar("fast_search_log_context", default=None)


def get_log_context() -> dict[str, str]:
    """Return a copy of the fields bound in the current context."""
    return dict(log_context.get() or {})


def bind_log_context(**fields: str) -> Token:
    """Layer ``fields`` over the current ones; pass the token to ``log_context.reset``."""
    return log_context.set({**(log_context.get() or {}), **fields})


def span_ids(span: Span) -> tuple[str, str] | None:
    """Hex trace and span ids of ``span``, or None when it is not recording."""
    ctx = span.get_span_context()
    if not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")
