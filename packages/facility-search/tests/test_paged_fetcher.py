from __future__ import annotations

import asyncio

import pytest

from facility_search.core.exceptions import ProviderClientError, ProviderTemporaryError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import ProviderPage, ProviderPlace
from facility_search.providers.base import BaseProviderAdapter
from facility_search.providers.paged import FetchState, PagedFetcher
from geo_engine.models import GeoPoint

CENTER = GeoPoint(lat=33.5731, lng=-7.5898)


class ScriptedAdapter(BaseProviderAdapter):
    provider_name = "scripted"
    page_token_delay_seconds = 2.0

    def __init__(self, script: list, max_pages: int = 3) -> None:
        super().__init__()
        self.max_pages = max_pages
        self._script = list(script)
        self.page_tokens: list[str | None] = []

    async def fetch_page(self, center, radius_meters, type_token, page_token=None) -> ProviderPage:
        self.page_tokens.append(page_token)
        step = self._script.pop(0)
        if isinstance(step, Exception):
            raise step
        if step == "hang":
            await asyncio.sleep(10)
        return step


def _place(place_id: str) -> ProviderPlace:
    return ProviderPlace(place_id=place_id, name=f"Place {place_id}", lat=33.57, lng=-7.59)


def _recording_sleep(delays: list[float]):
    async def _sleep(delay: float) -> None:
        delays.append(delay)

    return _sleep


def _states(outcome) -> list[FetchState]:
    return [transition.state for transition in outcome.transitions]


@pytest.mark.asyncio
async def test_follows_page_tokens_until_exhausted() -> None:
    delays: list[float] = []
    adapter = ScriptedAdapter(
        [
            ProviderPage([_place("a")], next_page_token="t2"),
            ProviderPage([_place("b")], next_page_token=None),
        ]
    )
    outcome = await PagedFetcher(adapter, sleep_fn=_recording_sleep(delays)).fetch_all(CENTER, 1000, "pharmacy")

    assert [place.place_id for place in outcome.places] == ["a", "b"]
    assert outcome.pages_fetched == 2
    assert adapter.page_tokens == [None, "t2"]
    assert delays == [2.0]
    assert _states(outcome) == [
        FetchState.IDLE,
        FetchState.FETCHING_PAGE,
        FetchState.FETCHING_PAGE,
        FetchState.DONE,
    ]
    assert outcome.error is None


@pytest.mark.asyncio
async def test_stops_at_page_cap_even_with_token() -> None:
    adapter = ScriptedAdapter(
        [ProviderPage([_place(str(index))], next_page_token=f"t{index}") for index in range(5)],
        max_pages=3,
    )
    outcome = await PagedFetcher(adapter, sleep_fn=_recording_sleep([])).fetch_all(CENTER, 1000, "pharmacy")

    assert outcome.pages_fetched == 3
    assert outcome.final_state is FetchState.DONE


@pytest.mark.asyncio
async def test_temporary_errors_back_off_exponentially() -> None:
    delays: list[float] = []
    metrics = InMemorySearchMetricsCollector()
    adapter = ScriptedAdapter(
        [
            ProviderTemporaryError("503"),
            ProviderTemporaryError("503"),
            ProviderPage([_place("a")]),
        ]
    )
    fetcher = PagedFetcher(
        adapter,
        max_retries=3,
        base_delay_seconds=1.0,
        sleep_fn=_recording_sleep(delays),
        metrics=metrics,
    )
    outcome = await fetcher.fetch_all(CENTER, 1000, "hospital")

    assert delays == [1.0, 2.0]
    assert [place.place_id for place in outcome.places] == ["a"]
    assert FetchState.BACKOFF in _states(outcome)
    assert outcome.final_state is FetchState.DONE
    assert metrics.external_api_error_count == 2
    assert metrics.pages_fetched == 1


@pytest.mark.asyncio
async def test_fails_after_retry_budget_is_spent() -> None:
    delays: list[float] = []
    adapter = ScriptedAdapter([ProviderTemporaryError("503")] * 3)
    outcome = await PagedFetcher(adapter, max_retries=3, sleep_fn=_recording_sleep(delays)).fetch_all(
        CENTER, 1000, "hospital"
    )

    assert outcome.final_state is FetchState.FAILED
    assert isinstance(outcome.error, ProviderTemporaryError)
    assert len(adapter.page_tokens) == 3
    assert delays == [1.0, 2.0]


@pytest.mark.asyncio
async def test_client_error_fails_without_retry() -> None:
    delays: list[float] = []
    adapter = ScriptedAdapter([ProviderClientError("403")])
    outcome = await PagedFetcher(adapter, sleep_fn=_recording_sleep(delays)).fetch_all(CENTER, 1000, "hospital")

    assert outcome.failed
    assert len(adapter.page_tokens) == 1
    assert delays == []


@pytest.mark.asyncio
async def test_pages_before_a_failure_are_kept() -> None:
    adapter = ScriptedAdapter(
        [
            ProviderPage([_place("a")], next_page_token="t2"),
            ProviderClientError("400"),
        ]
    )
    outcome = await PagedFetcher(adapter, sleep_fn=_recording_sleep([])).fetch_all(CENTER, 1000, "pharmacy")

    assert outcome.failed
    assert [place.place_id for place in outcome.places] == ["a"]
    assert outcome.pages_fetched == 1


@pytest.mark.asyncio
async def test_request_timeout_is_retried() -> None:
    adapter = ScriptedAdapter(["hang", ProviderPage([_place("a")])])
    fetcher = PagedFetcher(adapter, request_timeout_seconds=0.01, sleep_fn=_recording_sleep([]))
    outcome = await fetcher.fetch_all(CENTER, 1000, "hospital")

    assert [place.place_id for place in outcome.places] == ["a"]
    assert outcome.final_state is FetchState.DONE


def test_max_retries_must_be_positive() -> None:
    with pytest.raises(ValueError):
        PagedFetcher(ScriptedAdapter([]), max_retries=0)
