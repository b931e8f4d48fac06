from __future__ import annotations

from fastapi import Request

from hospital_api.observability import HospitalApiMetrics
from hospital_api.services.hospital_service import HospitalService
from hospital_api.services.places_service import PlacesService


def get_hospital_service(request: Request) -> HospitalService:
    return request.app.state.hospital_service


def get_places_service(request: Request) -> PlacesService:
    return request.app.state.places_service


def get_api_metrics(request: Request) -> HospitalApiMetrics:
    return request.app.state.api_metrics
