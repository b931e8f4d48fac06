from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from devkit.config import ServiceSettings
from facility_search.search.factory import build_search_service
from hospital_api.app import create_app
from hospital_api.repositories import InMemoryHospitalRepository


class UnreachableRepository(InMemoryHospitalRepository):
    async def connect(self) -> None:
        raise RuntimeError("database unreachable")


def _app(repository=None):
    settings = ServiceSettings()
    return create_app(
        settings=settings,
        repository=repository or InMemoryHospitalRepository(),
        search_service=build_search_service(settings),
    )


def test_health_endpoint_response_shape() -> None:
    with TestClient(_app()) as client:
        response = client.get("/health")
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["data"] == {"status": "ok", "service": "hospital-api"}


def test_healthz_and_readyz_response_shape() -> None:
    with TestClient(_app()) as client:
        healthz = client.get("/healthz")
        readyz = client.get("/readyz")

    assert healthz.json()["data"]["status"] == "ok"
    assert readyz.json()["data"]["status"] == "ready"


def test_trace_id_is_echoed_or_generated() -> None:
    with TestClient(_app()) as client:
        echoed = client.get("/healthz", headers={"x-trace-id": "trace-123"})
        generated = client.get("/healthz")

    assert echoed.headers["x-trace-id"] == "trace-123"
    assert generated.headers["x-trace-id"]


def test_metrics_endpoint_exposes_request_counters() -> None:
    app = _app()
    with TestClient(app) as client:
        client.get("/api/hospitals")
        response = client.get("/metrics")

    assert response.status_code == 200
    assert "hospital_api_http_requests_total" in response.text
    assert 'route="/api/hospitals"' in response.text
    assert 'hospital_api_http_requests_total{method="GET",route="/api/hospitals",status_code="200"} 1.0' in response.text


def test_request_metrics_are_aggregated_not_retained() -> None:
    app = _app()
    with TestClient(app) as client:
        for _ in range(50):
            client.get("/health")
        response = client.get("/metrics")

    assert 'hospital_api_http_requests_total{method="GET",route="/health",status_code="200"} 50.0' in response.text
    assert not hasattr(app.state.api_metrics, "requests")


def test_default_app_exports_search_metrics() -> None:
    app = create_app(settings=ServiceSettings(), repository=InMemoryHospitalRepository())
    with TestClient(app) as client:
        response = client.get("/metrics")

    assert app.state.search_metrics is not None
    assert "facility_search_pages_fetched_total 0.0" in response.text
    assert "facility_search_external_api_errors_total 0.0" in response.text


def test_startup_fails_when_repository_cannot_connect() -> None:
    app = _app(repository=UnreachableRepository())

    with pytest.raises(RuntimeError, match="database unreachable"):
        with TestClient(app):
            pass
