"""OpenTelemetry spans around index builds and searches.

Without ``init_tracing`` (or an SDK provider installed by the host
application) spans are non-recording and cost next to nothing.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import SpanKind, Status, StatusCode

from fast_search.observability.context import bind_log_context, log_context, span_ids


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = "fast-search",
    resource_attributes: dict[str, str] | None = None,
) -> TracerProvider:
    """Install an SDK tracer provider as the global provider."""
    provider = TracerProvider(resource=Resource.create({"service.name": service_name, **(resource_attributes or {})}))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = trace.get_tracer("fast_search")
    logger.info("Tracing initialized for service: %s", service_name)
    return provider


def get_tracer() -> Tracer:
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer("fast_search")
    return _tracer_holder["tracer"]  # type: ignore[return-value]


def reset_tracer() -> None:
    """Drop the cached tracer; the next span asks the global provider again."""
    _tracer_holder["tracer"] = None


@contextmanager
def create_span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
    log_fields: dict[str, str] | None = None,
    kind: SpanKind = SpanKind.INTERNAL,
) -> Generator[Span, None, None]:
    """Open a span and bind its ids plus ``log_fields`` to log records inside it.

    An exception escaping the block marks the span as failed, is recorded on
    it and propagates unchanged.
    """
    with get_tracer().start_as_current_span(
        name, kind=kind, record_exception=False, set_status_on_exception=False
    ) as span:
        for key, value in (attributes or {}).items():
            span.set_attribute(key, value)

        fields = dict(log_fields or {})
        ids = span_ids(span)
        if ids is not None:
            fields["trace_id"], fields["span_id"] = ids
        token = bind_log_context(**fields)

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        finally:
            log_context.reset(token)
