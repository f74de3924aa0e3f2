"""Tests for the startup warmup and the application lifespan."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from country_directory.main import app
from country_directory.services.dataset import DatasetCache
from country_directory.services.facets import FacetIndex
from country_directory.services.provider import CountryLookupResult, ProviderResult
from country_directory.settings import get_settings
from country_directory.warmup import warmup_all, warmup_dataset


class StubProvider:
    def __init__(self, result: ProviderResult) -> None:
        self.result = result

    async def fetch_all(self) -> ProviderResult:
        return self.result

    async def fetch_country(self, code: str) -> CountryLookupResult:
        return CountryLookupResult(ok=True)

    async def fetch_exchange_rate(self, currency_code: str) -> float | None:
        return None


@pytest.mark.asyncio
async def test_warmup_all_loads_dataset_and_facets(
    sample_countries, favorites, caplog: pytest.LogCaptureFixture
) -> None:
    dataset = DatasetCache()
    facet_index = FacetIndex()

    with caplog.at_level(logging.INFO):
        await warmup_all(
            dataset=dataset,
            provider=StubProvider(ProviderResult(ok=True, countries=tuple(sample_countries))),
            facet_index=facet_index,
            favorites=favorites,
        )

    assert len(dataset) == 3
    assert facet_index.regions == ("Americas", "Asia")
    assert "Country dataset loaded: 3 countries" in caplog.text
    assert "Facets ready: 2 regions" in caplog.text
    assert "Warmup complete" in caplog.text


@pytest.mark.asyncio
async def test_warmup_dataset_failure_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    dataset = DatasetCache()

    with caplog.at_level(logging.WARNING):
        await warmup_dataset(dataset, StubProvider(ProviderResult(ok=False, error="offline")))

    assert dataset.failed is True
    assert "Country dataset failed to load" in caplog.text
    assert "offline" in caplog.text


@pytest.mark.asyncio
async def test_warmup_dataset_skips_already_loaded(
    loaded_dataset, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        await warmup_dataset(loaded_dataset, StubProvider(ProviderResult(ok=True)))

    assert len(loaded_dataset) == 3
    assert "Dataset warmup skipped" in caplog.text


def test_lifespan_builds_services_from_settings(
    tmp_path: Path, raw_usa, monkeypatch: pytest.MonkeyPatch
) -> None:
    data_file = tmp_path / "countries.json"
    data_file.write_text(json.dumps([raw_usa]), encoding="utf-8")
    monkeypatch.setenv("COUNTRIES_DATA_FILE", str(data_file))
    monkeypatch.setenv("FAVORITES_BACKEND", "memory")
    get_settings.cache_clear()

    try:
        with TestClient(app) as client:
            snapshot = client.get("/directory").json()
            toggled = client.post("/favorites/USA/toggle").json()
    finally:
        get_settings.cache_clear()

    assert [item["country"]["code"] for item in snapshot["items"]] == ["USA"]
    assert snapshot["dataset_loaded"] is True
    assert toggled["is_favorite"] is True
    assert app.state.directory_service is None
