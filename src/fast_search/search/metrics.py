"""In-process metrics for recent search operations."""

from collections import defaultdict, deque
from dataclasses import dataclass
import threading


@dataclass(frozen=True)
class SearchSample:
    """Metrics of a single search call."""

    latency_ms: float
    result_count: int
    cached: bool
    search_type: str


class MetricsCollector:
    """Rolling-window collector summarised by ``FastSearchEngine.get_stats``."""

    def __init__(self, window_size: int = 1000, slow_threshold_ms: float = 10.0):
        self.window_size = window_size
        self.slow_threshold_ms = slow_threshold_ms
        self._samples: deque[SearchSample] = deque(maxlen=window_size)
        self._counters: defaultdict[str, int] = defaultdict(int)
        self._lock = threading.Lock()

    def record_search(self, sample: SearchSample) -> None:
        with self._lock:
            self._samples.append(sample)
            self._counters["total_searches"] += 1
            self._counters[f"{sample.search_type}_searches"] += 1
            if sample.cached:
                self._counters["cache_hits"] += 1
            if sample.latency_ms > self.slow_threshold_ms:
                self._counters["slow_searches"] += 1
            if sample.result_count == 0:
                self._counters["empty_results"] += 1

    def get_stats(self) -> dict:
        """Get current performance statistics, or ``{}`` before any search."""
        with self._lock:
            if not self._samples:
                return {}
            samples = list(self._samples)
            counters = dict(self._counters)

        latencies = sorted(s.latency_ms for s in samples)
        result_counts = [s.result_count for s in samples]
        total = counters["total_searches"]

        return {
            "count": len(samples),
            "latency_ms": {
                "mean": sum(latencies) / len(latencies),
                "p95": latencies[int(len(latencies) * 0.95)],
                "max": latencies[-1],
            },
            "results": {
                "mean": sum(result_counts) / len(result_counts),
                "empty_rate": counters.get("empty_results", 0) / total,
            },
            "cache_hit_rate": counters.get("cache_hits", 0) / total,
            "slow_rate": counters.get("slow_searches", 0) / total,
            "total_searches": total,
            "boolean_searches": counters.get("boolean_searches", 0),
            "fast_searches": counters.get("fast_searches", 0),
        }

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._counters.clear()
