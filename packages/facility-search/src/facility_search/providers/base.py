from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Iterable, Mapping

import httpx
from pydantic import BaseModel, ValidationError

from facility_search.core.exceptions import (
    ProviderClientError,
    ProviderNormalizationError,
    ProviderTemporaryError,
)
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import FacilityCategory, ProviderPage
from geo_engine.models import GeoPoint

ClientFactory = Callable[[], httpx.AsyncClient]

UNNAMED_FACILITY = "Sans nom"


class BaseProviderAdapter(ABC):
    provider_name: str
    max_pages: int = 1
    page_token_delay_seconds: float = 0.0
    max_concurrent_requests: int | None = None
    category_tokens: Mapping[FacilityCategory, tuple[str, ...]] = {}

    def __init__(
        self,
        request_timeout_seconds: float = 30.0,
        metrics: InMemorySearchMetricsCollector | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._timeout = httpx.Timeout(request_timeout_seconds)
        self._metrics = metrics
        self._client_factory = client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout))

    def type_tokens_for(self, categories: Iterable[FacilityCategory] = ()) -> list[str]:
        """Provider tokens to query for the requested categories, all when empty."""
        wanted = list(categories) or list(self.category_tokens)
        tokens: list[str] = []
        for category in wanted:
            for token in self.category_tokens.get(category, ()):
                if token not in tokens:
                    tokens.append(token)
        return tokens

    @abstractmethod
    async def fetch_page(
        self,
        center: GeoPoint,
        radius_meters: float,
        type_token: str,
        page_token: str | None = None,
    ) -> ProviderPage:
        raise NotImplementedError

    async def _send(self, build_request: Callable[[httpx.AsyncClient], Awaitable[httpx.Response]], context: str) -> httpx.Response:
        try:
            async with self._client_factory() as client:
                response = await build_request(client)
        except httpx.TimeoutException as exc:
            self._record_http_error("timeout")
            raise ProviderTemporaryError(f"{self.provider_name} timeout: {context}") from exc
        except httpx.HTTPError as exc:
            self._record_http_error("transport")
            raise ProviderTemporaryError(f"{self.provider_name} request error: {context}") from exc

        if response.status_code == 429 or response.status_code >= 500:
            self._record_http_error(response.status_code)
            raise ProviderTemporaryError(
                f"{self.provider_name} temporary error: status={response.status_code}, {context}"
            )
        if response.status_code >= 400:
            self._record_http_error(response.status_code)
            raise ProviderClientError(
                f"{self.provider_name} request rejected: status={response.status_code}, {context}"
            )
        return response

    def _parse(self, response: httpx.Response, model: type[BaseModel]) -> BaseModel:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise ProviderNormalizationError(
                f"{self.provider_name} payload does not match {model.__name__}: {exc.error_count()} errors"
            ) from exc

    def _record_http_error(self, code: int | str) -> None:
        if self._metrics:
            self._metrics.increment_provider_http_error(code=code, provider=self.provider_name)
