"""Logging, tracing and metrics for the search engine."""

from fast_search.observability.context import bind_log_context, get_log_context, log_context
from fast_search.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from fast_search.observability.metrics import (
    TELEMETRY,
    SearchTelemetry,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
)
from fast_search.observability.tracing import create_span, get_tracer, init_tracing, reset_tracer


__all__ = [
    "TELEMETRY",
    "JsonFormatter",
    "SearchTelemetry",
    "bind_log_context",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_log_context",
    "get_metrics",
    "get_metrics_content_type",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "log_context",
    "reset_tracer",
]
