from __future__ import annotations

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from facility_search.core.metrics import InMemorySearchMetricsCollector


class SearchPrometheusExporter:
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._stage_duration = Gauge(
            "facility_search_stage_duration_ms",
            "Latest search stage duration in milliseconds",
            labelnames=("stage",),
            registry=self._registry,
        )
        self._stage_observations = Gauge(
            "facility_search_stage_observations_total",
            "Timed search stages",
            labelnames=("stage",),
            registry=self._registry,
        )
        self._external_errors = Gauge(
            "facility_search_external_api_errors_total",
            "Provider calls that failed with a retryable error",
            registry=self._registry,
        )
        self._pages_fetched = Gauge(
            "facility_search_pages_fetched_total",
            "Provider result pages fetched",
            registry=self._registry,
        )
        self._search_total = Gauge(
            "facility_search_searches_total",
            "Searches grouped by status",
            labelnames=("status",),
            registry=self._registry,
        )
        self._http_errors_total = Gauge(
            "facility_search_provider_http_errors_total",
            "Provider HTTP errors grouped by provider and code",
            labelnames=("provider", "code"),
            registry=self._registry,
        )
        self._results_total = Gauge(
            "facility_search_results_total",
            "Places collected and facilities returned",
            labelnames=("stage",),
            registry=self._registry,
        )

    def render(self, metrics: InMemorySearchMetricsCollector) -> str:
        for stage, duration in metrics.last_stage_duration_ms.items():
            self._stage_duration.labels(stage=stage).set(duration)
        for stage, count in metrics.stage_observations.items():
            self._stage_observations.labels(stage=stage).set(count)
        self._external_errors.set(metrics.external_api_error_count)
        self._pages_fetched.set(metrics.pages_fetched)
        for status, count in metrics.search_total.items():
            self._search_total.labels(status=status).set(count)
        for (provider, code), count in metrics.provider_http_errors_total.items():
            self._http_errors_total.labels(provider=provider, code=code).set(count)
        for stage, count in metrics.results_total.items():
            self._results_total.labels(stage=stage).set(count)
        return generate_latest(self._registry).decode("utf-8")
