from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest

_trace_id_ctx: ContextVar[str] = ContextVar("trace_id", default="")


def set_trace_id(trace_id: str) -> None:
    _trace_id_ctx.set(trace_id)


def get_trace_id() -> str:
    return _trace_id_ctx.get()


@dataclass(frozen=True)
class ApiRequestMetric:
    method: str
    route: str
    status_code: int
    duration_ms: float
    trace_id: str


class HospitalApiMetrics:
    """Prometheus registry for the HTTP layer and the places search."""

    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._request_counter = Counter(
            "hospital_api_http_requests_total",
            "Total HTTP requests",
            labelnames=("method", "route", "status_code"),
            registry=self._registry,
        )
        self._latency_histogram = Histogram(
            "hospital_api_http_request_duration_ms",
            "HTTP request latency in milliseconds",
            labelnames=("method", "route"),
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 3000, 10000, 30000),
            registry=self._registry,
        )
        self._search_counter = Counter(
            "hospital_api_places_searches_total",
            "Places searches by outcome",
            labelnames=("provider", "outcome"),
            registry=self._registry,
        )
        self._search_results = Histogram(
            "hospital_api_places_search_results",
            "Facilities returned per places search",
            labelnames=("provider",),
            buckets=(0, 1, 5, 10, 25, 50, 100, 250),
            registry=self._registry,
        )

    def observe(self, metric: ApiRequestMetric) -> None:
        self._request_counter.labels(metric.method, metric.route, str(metric.status_code)).inc()
        self._latency_histogram.labels(metric.method, metric.route).observe(metric.duration_ms)

    def observe_search(self, provider: str, outcome: str, result_count: int = 0) -> None:
        self._search_counter.labels(provider, outcome).inc()
        if outcome != "failed":
            self._search_results.labels(provider).observe(result_count)

    def render(self) -> str:
        return generate_latest(self._registry).decode("utf-8")
