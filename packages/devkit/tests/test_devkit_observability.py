from __future__ import annotations

import logging

from devkit.observability import _EventFormatter, _HealthCheckAccessLogFilter


def _access_record(path: str, status: int) -> logging.LogRecord:
    return logging.LogRecord(
        name="uvicorn.access",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg='%s - "%s %s HTTP/%s" %d',
        args=("127.0.0.1:12345", "GET", path, "1.1", status),
        exc_info=None,
    )


def test_health_check_access_log_filter_ignores_health_check_200() -> None:
    health_filter = _HealthCheckAccessLogFilter(ignored_paths=("/health", "/healthz", "/readyz"))
    assert health_filter.filter(_access_record("/healthz", 200)) is False
    assert health_filter.filter(_access_record("/readyz", 200)) is False
    assert health_filter.filter(_access_record("/health", 200)) is False
    assert health_filter.filter(_access_record("/readyz?full=true", 200)) is False


def test_health_check_access_log_filter_keeps_other_paths_or_non_200() -> None:
    health_filter = _HealthCheckAccessLogFilter(ignored_paths=("/health", "/healthz", "/readyz"))
    assert health_filter.filter(_access_record("/healthz", 500)) is True
    assert health_filter.filter(_access_record("/api/hospitals", 200)) is True


def _event_record(msg: str, **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="hospital_api.services",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_event_formatter_appends_extra_fields_sorted() -> None:
    formatter = _EventFormatter("%(levelname)s %(message)s")
    line = formatter.format(_event_record("hospital_created", hospital_type="Générale", hospital_id=7))

    assert line == "INFO hospital_created hospital_id=7 hospital_type='Générale'"


def test_event_formatter_leaves_plain_records_untouched() -> None:
    formatter = _EventFormatter("%(levelname)s %(message)s")
    assert formatter.format(_event_record("search_started")) == "INFO search_started"
