from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError

from devkit.config import ServiceSettings, load_settings
from devkit.db import is_transient_db_error
from devkit.observability import configure_logging, configure_otel, configure_health_check_access_log_filter
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.prometheus_exporter import SearchPrometheusExporter
from facility_search.search.factory import build_search_service
from facility_search.search.service import FacilitySearchService

from hospital_api.errors import ApiError
from hospital_api.middleware import ObservabilityMiddleware
from hospital_api.observability import HospitalApiMetrics, get_trace_id
from hospital_api.repositories import HospitalRepository, build_hospital_repository
from hospital_api.response import error_response, success_response
from hospital_api.routers.hospitals import legacy_router as legacy_hospitals_router
from hospital_api.routers.hospitals import router as hospitals_router
from hospital_api.routers.places import router as places_router
from hospital_api.services.hospital_service import HospitalService
from hospital_api.services.places_service import PlacesService

SERVICE_NAME = "hospital-api"
logger = logging.getLogger(__name__)

_LOCATION_PREFIXES = {"body", "query", "path"}


def _validation_fields(exc: RequestValidationError) -> dict[str, str]:
    fields: dict[str, str] = {}
    for err in exc.errors():
        parts = [str(part) for part in err.get("loc", ()) if part not in _LOCATION_PREFIXES]
        key = ".".join(parts) or "body"
        fields.setdefault(key, err["msg"])
    return fields


def create_app(
    settings: ServiceSettings | None = None,
    repository: HospitalRepository | None = None,
    search_service: FacilitySearchService | None = None,
) -> FastAPI:
    settings = settings or load_settings(SERVICE_NAME)
    configure_logging(settings.LOG_LEVEL)
    configure_otel(service_name=SERVICE_NAME)
    configure_health_check_access_log_filter()

    repository = repository or build_hospital_repository(settings)
    search_service = search_service or build_search_service(settings, metrics=InMemorySearchMetricsCollector())

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        await repository.connect()
        logger.info("hospital_api_started", extra={"provider": search_service.provider_name})
        try:
            yield
        finally:
            await repository.close()

    app = FastAPI(title="Hospital Locator API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.api_metrics = HospitalApiMetrics()
    app.state.search_metrics = search_service.metrics
    app.state.search_exporter = SearchPrometheusExporter()
    app.state.hospital_service = HospitalService(repository)
    app.state.places_service = PlacesService(search_service, repository)

    app.add_middleware(ObservabilityMiddleware, metrics=app.state.api_metrics)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=["x-trace-id"],
    )
    app.include_router(hospitals_router)
    app.include_router(legacy_hospitals_router)
    app.include_router(places_router)

    @app.get("/health")
    async def health() -> dict:
        return success_response({"status": "ok", "service": SERVICE_NAME}, meta={})

    @app.get("/healthz")
    async def healthz() -> dict:
        return success_response({"status": "ok"}, meta={})

    @app.get("/readyz")
    async def readyz() -> dict:
        return success_response({"status": "ready"}, meta={})

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = app.state.api_metrics.render()
        if app.state.search_metrics is not None:
            payload += app.state.search_exporter.render(app.state.search_metrics)
        return Response(content=payload, media_type="text/plain; version=0.0.4")

    @app.exception_handler(ApiError)
    async def handle_api_error(_: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.code, exc.message, exc.fields),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        fields = _validation_fields(exc)
        message = "; ".join(f"{key}: {value}" for key, value in fields.items())
        return JSONResponse(
            status_code=400,
            content=error_response("VALIDATION_ERROR", message, fields),
        )

    @app.exception_handler(SQLAlchemyError)
    async def handle_persistence_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        code = "DATABASE_UNAVAILABLE" if is_transient_db_error(exc) else "PERSISTENCE_ERROR"
        logger.exception(
            "persistence_error",
            extra={"path": request.url.path, "code": code, "trace_id": get_trace_id()},
        )
        return JSONResponse(status_code=500, content=error_response(code, "Database operation failed"))

    return app


app = create_app()
