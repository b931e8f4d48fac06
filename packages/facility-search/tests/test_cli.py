from __future__ import annotations

import json

import pytest

import facility_search.__main__ as cli
from facility_search.core.exceptions import SearchFailedError
from facility_search.core.models import FacilityCategory, ProviderPage, ProviderPlace
from facility_search.providers.base import BaseProviderAdapter
from facility_search.search import FacilitySearchService


def test_parser_collects_repeated_categories() -> None:
    args = cli.build_parser().parse_args(
        ["--lat", "35.76", "--lng", "-5.83", "--category", "pharmacy", "--category", "hospital"]
    )

    assert args.category == ["pharmacy", "hospital"]
    assert args.radius_km == 5.0
    assert args.provider is None


def test_parser_rejects_unknown_category() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--lat", "1", "--lng", "1", "--category", "other"])


def test_main_prints_json(monkeypatch, capsys) -> None:
    async def fake_run(args) -> dict:
        return {"provider": "overpass", "facilities": [{"id": "node/1", "name": "Pharmacie Nour"}]}

    monkeypatch.setattr(cli, "run", fake_run)

    assert cli.main(["--lat", "35.76", "--lng", "-5.83"]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed["facilities"][0]["name"] == "Pharmacie Nour"


def test_main_exits_with_one_when_search_fails(monkeypatch, capsys) -> None:
    async def fake_run(args) -> dict:
        raise SearchFailedError("all provider queries failed", failed_tokens=["hospital"])

    monkeypatch.setattr(cli, "run", fake_run)

    assert cli.main(["--lat", "35.76", "--lng", "-5.83"]) == 1
    assert "hospital" in capsys.readouterr().err


def test_main_rejects_non_positive_radius() -> None:
    assert cli.main(["--lat", "35.76", "--lng", "-5.83", "--radius-km", "0"]) == 2


@pytest.mark.asyncio
async def test_run_reports_fetch_stats(monkeypatch) -> None:
    class OnePageAdapter(BaseProviderAdapter):
        provider_name = "fake"
        category_tokens = {FacilityCategory.PHARMACY: ("pharmacy",)}

        async def fetch_page(self, center, radius_meters, type_token, page_token=None) -> ProviderPage:
            place = ProviderPlace(place_id="p1", name="Pharmacie Nour", lat=35.76, lng=-5.83, provider_types=("pharmacy",))
            return ProviderPage([place])

    def fake_build(settings, provider_name=None, metrics=None, client_factory=None) -> FacilitySearchService:
        return FacilitySearchService(OnePageAdapter(), metrics=metrics)

    monkeypatch.setattr(cli, "build_search_service", fake_build)
    args = cli.build_parser().parse_args(["--lat", "35.76", "--lng", "-5.83"])

    result = await cli.run(args)

    assert [facility["id"] for facility in result["facilities"]] == ["p1"]
    assert result["stats"] == {"pages_fetched": 1, "retried_errors": 0, "provider_http_errors": 0}
