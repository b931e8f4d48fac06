from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from devkit.config import load_settings
from devkit.observability import configure_logging

from facility_search.core.exceptions import SearchFailedError
from facility_search.core.metrics import InMemorySearchMetricsCollector
from facility_search.core.models import SEARCHABLE_CATEGORIES, ReferencePoint
from facility_search.providers.factory import SUPPORTED_PROVIDERS
from facility_search.search.factory import build_search_service


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="facility_search", description="Search medical facilities near a point.")
    parser.add_argument("--lat", type=float, required=True)
    parser.add_argument("--lng", type=float, required=True)
    parser.add_argument("--radius-km", type=float, default=5.0)
    parser.add_argument(
        "--category",
        action="append",
        default=[],
        choices=[category.value for category in SEARCHABLE_CATEGORIES],
        help="repeat to search several categories; omit for all",
    )
    parser.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=None)
    parser.add_argument("--name", default="Point sélectionné")
    return parser


async def run(args: argparse.Namespace) -> dict:
    settings = load_settings("facility-search")
    configure_logging(settings.LOG_LEVEL)
    metrics = InMemorySearchMetricsCollector()
    service = build_search_service(settings, provider_name=args.provider, metrics=metrics)
    reference = ReferencePoint(lat=args.lat, lng=args.lng, name=args.name)
    outcome = await service.search(reference, args.radius_km * 1000.0, args.category)
    return {
        "provider": service.provider_name,
        "reference": {"name": reference.name, "lat": reference.lat, "lng": reference.lng},
        "radius_km": args.radius_km,
        "failed_tokens": outcome.failed_tokens,
        "facilities": [facility.to_dict() for facility in outcome.facilities],
        "stats": {
            "pages_fetched": metrics.pages_fetched,
            "retried_errors": metrics.external_api_error_count,
            "provider_http_errors": sum(metrics.provider_http_errors_total.values()),
        },
    }


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.radius_km <= 0:
        print("--radius-km must be > 0", file=sys.stderr)
        return 2
    try:
        result = asyncio.run(run(args))
    except SearchFailedError as exc:
        print(json.dumps({"error": exc.reason, "failed_tokens": exc.failed_tokens}, ensure_ascii=False), file=sys.stderr)
        return 1
    print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
