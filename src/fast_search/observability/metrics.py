"""Golden-signal metrics for searches and index builds.

Every measurement is written twice: to a Prometheus collector, exposed by
``get_metrics`` for scraping, and to the matching OpenTelemetry instrument
of the global meter provider, a no-op until ``init_metrics`` (or the host
application) installs an SDK provider.
"""

from __future__ import annotations

import threading
from typing import Any

from opentelemetry import metrics as otel_metrics
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


SEARCH_LATENCY_BUCKETS = (0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25)
BUILD_LATENCY_BUCKETS = (0.001, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5)

_provider_holder: dict[str, MeterProvider | None] = {"provider": None}


def init_metrics(
    service_name: str = "fast-search",
    resource_attributes: dict[str, str] | None = None,
) -> MeterProvider:
    """Install an SDK meter provider as the global provider (once per process)."""
    provider = _provider_holder["provider"]
    if provider is None:
        provider = MeterProvider(resource=Resource.create({"service.name": service_name, **(resource_attributes or {})}))
        otel_metrics.set_meter_provider(provider)
        _provider_holder["provider"] = provider
    return provider


class SearchTelemetry:
    """Search and indexing metrics, labelled by engine name.

    One instance (``TELEMETRY``) registers with the default Prometheus
    registry and is shared by every engine in the process; pass a private
    ``CollectorRegistry`` to keep an instance isolated.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY, *, prefix: str = "fast_search") -> None:
        self.prefix = prefix
        self.search_latency = Histogram(
            f"{prefix}_latency_seconds",
            "Search query latency",
            ["engine", "search_type"],
            buckets=SEARCH_LATENCY_BUCKETS,
            registry=registry,
        )
        self.search_count = Counter(
            f"{prefix}_queries_total",
            "Search queries served, by cache outcome",
            ["engine", "search_type", "cached"],
            registry=registry,
        )
        self.build_latency = Histogram(
            f"{prefix}_index_build_seconds",
            "Index build latency",
            ["engine", "status"],
            buckets=BUILD_LATENCY_BUCKETS,
            registry=registry,
        )
        self.document_count = Gauge(
            f"{prefix}_index_document_count",
            "Documents in the active index",
            ["engine"],
            registry=registry,
        )
        self._instruments: dict[str, Any] = {}
        self._reported_documents: dict[str, int] = {}
        self._lock = threading.Lock()

    def _instrument(self, kind: str, name: str, description: str) -> Any:
        # Instruments from a proxy meter start forwarding once a provider is set
        with self._lock:
            instrument = self._instruments.get(name)
            if instrument is None:
                meter = otel_metrics.get_meter("fast_search")
                if kind == "counter":
                    instrument = meter.create_counter(name, description=description)
                elif kind == "histogram":
                    instrument = meter.create_histogram(name, unit="s", description=description)
                else:
                    instrument = meter.create_up_down_counter(name, description=description)
                self._instruments[name] = instrument
            return instrument

    def record_search(self, engine: str, search_type: str, cached: bool, seconds: float) -> None:
        labels = {"engine": engine, "search_type": search_type}
        self.search_latency.labels(**labels).observe(seconds)
        self._instrument("histogram", f"{self.prefix}.search.duration", "Search query latency").record(
            seconds, labels
        )

        labels = {**labels, "cached": "true" if cached else "false"}
        self.search_count.labels(**labels).inc()
        self._instrument("counter", f"{self.prefix}.search.count", "Search queries served").add(1, labels)

    def record_build(self, engine: str, succeeded: bool, seconds: float, documents: int | None = None) -> None:
        """Record one rebuild; ``documents`` is the size of the newly active index."""
        labels = {"engine": engine, "status": "success" if succeeded else "failure"}
        self.build_latency.labels(**labels).observe(seconds)
        self._instrument("histogram", f"{self.prefix}.index.build.duration", "Index build latency").record(
            seconds, labels
        )
        if documents is None:
            return

        self.document_count.labels(engine=engine).set(documents)
        with self._lock:
            delta = documents - self._reported_documents.get(engine, 0)
            self._reported_documents[engine] = documents
        if delta:
            self._instrument(
                "updown", f"{self.prefix}.index.documents", "Documents in the active index"
            ).add(delta, {"engine": engine})


TELEMETRY = SearchTelemetry()


def get_metrics(registry: CollectorRegistry = REGISTRY) -> bytes:
    """Prometheus text exposition of ``registry``."""
    return generate_latest(registry)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
