from __future__ import annotations

from collections import defaultdict


class InMemorySearchMetricsCollector:
    """Running totals for searches; sized by label values, not by traffic."""

    def __init__(self) -> None:
        self.last_stage_duration_ms: dict[str, float] = {}
        self.stage_observations: dict[str, int] = defaultdict(int)
        self.external_api_error_count = 0
        self.pages_fetched = 0
        self.search_total: dict[str, int] = defaultdict(int)
        self.provider_http_errors_total: dict[tuple[str, str], int] = defaultdict(int)
        self.results_total: dict[str, int] = defaultdict(int)

    def observe_stage_duration(self, stage: str, duration_ms: float) -> None:
        self.last_stage_duration_ms[stage] = duration_ms
        self.stage_observations[stage] += 1

    def increment_external_api_error(self) -> None:
        self.external_api_error_count += 1

    def increment_pages_fetched(self) -> None:
        self.pages_fetched += 1

    def increment_search(self, status: str) -> None:
        self.search_total[status] += 1

    def increment_provider_http_error(self, code: int | str, provider: str) -> None:
        self.provider_http_errors_total[(provider, str(code))] += 1

    def add_results(self, stage: str, count: int) -> None:
        if count <= 0:
            return
        self.results_total[stage] += count
