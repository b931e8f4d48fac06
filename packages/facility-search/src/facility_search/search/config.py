from __future__ import annotations

from dataclasses import dataclass

DEFAULT_NAME_PREFIXES: tuple[str, ...] = (
    "pharmacie",
    "pharmacy",
    "clinique",
    "polyclinique",
    "cabinet",
    "dr",
    "docteur",
    "laboratoire",
    "labo",
)

# Northern edge of the service area used by the Tangier deployment; places
# above it are across the Strait of Gibraltar.
NORTHERN_MOROCCO_MAX_LATITUDE = 35.92


@dataclass(frozen=True)
class SearchConfig:
    max_latitude: float | None = None
    duplicate_distance_meters: float = 30.0
    max_retries: int = 3
    retry_base_delay_seconds: float = 1.0
    request_timeout_seconds: float = 30.0
    max_concurrency: int = 4
    name_prefixes: tuple[str, ...] = DEFAULT_NAME_PREFIXES

    def __post_init__(self) -> None:
        if self.duplicate_distance_meters < 0:
            raise ValueError("duplicate_distance_meters must be >= 0")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
