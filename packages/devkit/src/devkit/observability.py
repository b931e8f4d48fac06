from __future__ import annotations

import logging
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

_RESERVED_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_configured = False
_logging_configured = False
_health_check_filter_configured = False
HEALTH_CHECK_PATHS = ("/health", "/healthz", "/readyz")


class _HealthCheckAccessLogFilter(logging.Filter):
    def __init__(self, ignored_paths: tuple[str, ...]) -> None:
        super().__init__()
        self._ignored_paths = {self._normalize_path(path) for path in ignored_paths}

    @staticmethod
    def _normalize_path(path: str) -> str:
        base = path.split("?", 1)[0]
        if base != "/" and base.endswith("/"):
            return base[:-1]
        return base

    @classmethod
    def _extract_path_and_status(cls, record: logging.LogRecord) -> tuple[str | None, int | None]:
        args: Any = getattr(record, "args", ())
        if not isinstance(args, tuple) or len(args) < 5:
            return None, None
        path = args[2] if len(args) > 2 and isinstance(args[2], str) else None
        status_raw = args[4] if len(args) > 4 else None
        try:
            status = int(status_raw) if status_raw is not None else None
        except (TypeError, ValueError):
            status = None
        return path, status

    def filter(self, record: logging.LogRecord) -> bool:
        path, status = self._extract_path_and_status(record)
        if path is None or status is None:
            return True
        normalized_path = self._normalize_path(path)
        if status == 200 and normalized_path in self._ignored_paths:
            return False
        return True


class _EventFormatter(logging.Formatter):
    """Appends the `extra` fields of a record as sorted key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = {
            key: value for key, value in vars(record).items() if key not in _RESERVED_RECORD_FIELDS and not key.startswith("_")
        }
        if not fields:
            return line
        rendered = " ".join(f"{key}={fields[key]!r}" for key in sorted(fields))
        if record.exc_info and "\n" in line:
            head, _, tail = line.partition("\n")
            return f"{head} {rendered}\n{tail}"
        return f"{line} {rendered}"


def configure_otel(service_name: str) -> None:
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _configured = True


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    if _logging_configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(_EventFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), handlers=[handler])
    _logging_configured = True


def configure_health_check_access_log_filter(ignored_paths: tuple[str, ...] = HEALTH_CHECK_PATHS) -> None:
    global _health_check_filter_configured
    if _health_check_filter_configured:
        return
    logging.getLogger("uvicorn.access").addFilter(_HealthCheckAccessLogFilter(ignored_paths=ignored_paths))
    _health_check_filter_configured = True
