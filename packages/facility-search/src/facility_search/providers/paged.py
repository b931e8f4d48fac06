"""Per-token page walker with retry and backoff.

One `PagedFetcher.fetch_all` call walks every page of one provider type token:

    IDLE -> FETCHING_PAGE -> (FETCHING_PAGE ...) -> DONE
                  |  ^
                  v  |
                BACKOFF -> ... -> FAILED

A temporary error (5xx, 429, timeout) backs off exponentially and retries the
same page until `max_retries` attempts were spent. Client and normalization
errors fail immediately. Pages collected before a failure are kept.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from facility_search.core.exceptions import ProviderRequestError, ProviderTemporaryError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import ProviderPlace
from facility_search.core.retry import backoff_delay
from facility_search.providers.base import BaseProviderAdapter
from geo_engine.models import GeoPoint

logger = logging.getLogger(__name__)


class FetchState(str, Enum):
    IDLE = "idle"
    FETCHING_PAGE = "fetching_page"
    BACKOFF = "backoff"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchTransition:
    state: FetchState
    page: int
    attempt: int = 0
    delay_seconds: float = 0.0


@dataclass
class FetchOutcome:
    type_token: str
    places: list[ProviderPlace] = field(default_factory=list)
    pages_fetched: int = 0
    error: ProviderRequestError | None = None
    transitions: list[FetchTransition] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def final_state(self) -> FetchState:
        return self.transitions[-1].state if self.transitions else FetchState.IDLE


class PagedFetcher:
    def __init__(
        self,
        adapter: BaseProviderAdapter,
        max_retries: int = 3,
        base_delay_seconds: float = 1.0,
        request_timeout_seconds: float = 30.0,
        max_pages: int | None = None,
        sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
        metrics: InMemorySearchMetricsCollector | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._adapter = adapter
        self._max_retries = max_retries
        self._base_delay_seconds = base_delay_seconds
        self._request_timeout_seconds = request_timeout_seconds
        self._max_pages = min(max_pages, adapter.max_pages) if max_pages else adapter.max_pages
        self._sleep = sleep_fn
        self._metrics = metrics

    async def fetch_all(self, center: GeoPoint, radius_meters: float, type_token: str) -> FetchOutcome:
        outcome = FetchOutcome(type_token=type_token)
        outcome.transitions.append(FetchTransition(FetchState.IDLE, page=0))
        page_token: str | None = None
        attempt = 0

        while True:
            page_number = outcome.pages_fetched + 1
            outcome.transitions.append(FetchTransition(FetchState.FETCHING_PAGE, page=page_number, attempt=attempt))
            try:
                page = await asyncio.wait_for(
                    self._adapter.fetch_page(center, radius_meters, type_token, page_token),
                    timeout=self._request_timeout_seconds,
                )
            except asyncio.TimeoutError as exc:
                error: ProviderRequestError = ProviderTemporaryError(
                    f"{self._adapter.provider_name} timed out after {self._request_timeout_seconds}s: type={type_token}"
                )
                error.__cause__ = exc
            except ProviderTemporaryError as exc:
                error = exc
            except ProviderRequestError as exc:
                return self._fail(outcome, exc, page_number, attempt)
            else:
                outcome.pages_fetched += 1
                outcome.places.extend(page.places)
                attempt = 0
                if self._metrics:
                    self._metrics.increment_pages_fetched()
                if page.next_page_token and outcome.pages_fetched < self._max_pages:
                    page_token = page.next_page_token
                    await self._sleep(self._adapter.page_token_delay_seconds)
                    continue
                outcome.transitions.append(FetchTransition(FetchState.DONE, page=outcome.pages_fetched))
                return outcome

            attempt += 1
            if self._metrics:
                self._metrics.increment_external_api_error()
            if attempt >= self._max_retries:
                return self._fail(outcome, error, page_number, attempt)
            delay = backoff_delay(self._base_delay_seconds, attempt)
            outcome.transitions.append(
                FetchTransition(FetchState.BACKOFF, page=page_number, attempt=attempt, delay_seconds=delay)
            )
            logger.warning(
                "provider_page_retry",
                extra={
                    "provider": self._adapter.provider_name,
                    "type_token": type_token,
                    "page": page_number,
                    "attempt": attempt,
                    "delay_seconds": delay,
                    "error": str(error),
                },
            )
            await self._sleep(delay)

    def _fail(self, outcome: FetchOutcome, error: ProviderRequestError, page: int, attempt: int) -> FetchOutcome:
        outcome.error = error
        outcome.transitions.append(FetchTransition(FetchState.FAILED, page=page, attempt=attempt))
        logger.warning(
            "provider_fetch_failed",
            extra={
                "provider": self._adapter.provider_name,
                "type_token": outcome.type_token,
                "page": page,
                "pages_fetched": outcome.pages_fetched,
                "error": str(error),
            },
        )
        return outcome
