from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from devkit.timezone import configure_utc_timezone

DEFAULT_OVERPASS_ENDPOINTS = (
    "https://overpass-api.de/api/interpreter,"
    "https://overpass.kumi.systems/api/interpreter,"
    "https://maps.mail.ru/osm/tools/overpass/api/interpreter"
)


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str | None = None
    DB_POOL_MIN_SIZE: int = 2
    DB_POOL_MAX_SIZE: int = 10
    DB_AUTO_CREATE_TABLES: bool = False
    CORS_ALLOW_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    PLACES_PROVIDER: str = "overpass"
    GOOGLE_PLACES_API_KEY: str | None = None
    GOOGLE_PLACES_REGION: str = "ma"
    OVERPASS_ENDPOINTS: str = DEFAULT_OVERPASS_ENDPOINTS

    # Results north of this latitude are dropped. Deployments near a land or
    # sea border set it to keep the neighbouring country out of radius
    # searches (northern Morocco uses 35.92 to exclude southern Spain).
    SEARCH_MAX_LATITUDE: float | None = None
    SEARCH_DUPLICATE_DISTANCE_METERS: float = 30.0
    SEARCH_MAX_RETRIES: int = 3
    SEARCH_RETRY_BASE_DELAY_SECONDS: float = 1.0
    SEARCH_REQUEST_TIMEOUT_SECONDS: float = 30.0

    @property
    def cors_origins(self) -> list[str]:
        return _split_csv(self.CORS_ALLOW_ORIGINS)

    @property
    def overpass_endpoints(self) -> list[str]:
        return _split_csv(self.OVERPASS_ENDPOINTS)


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_settings(service_name: str) -> ServiceSettings:
    configure_utc_timezone()
    return ServiceSettings(SERVICE_NAME=service_name)
