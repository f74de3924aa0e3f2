"""Shared fixtures for the country directory test suite."""

from __future__ import annotations

from typing import Any

import pytest

from tests import _ensure_repo_on_path

_ensure_repo_on_path()

from country_directory.schemas.country import Country, CurrencyInfo  # noqa: E402
from country_directory.services.dataset import DatasetCache  # noqa: E402
from country_directory.services.favorites import FavoritesStore  # noqa: E402
from country_directory.services.provider import ProviderResult  # noqa: E402
from country_directory.storage import InMemoryKeyValueStore  # noqa: E402


def make_country(code: str, name: str | None = None, **fields: Any) -> Country:
    """Build a :class:`Country` with sensible defaults for tests."""

    return Country(code=code, common_name=name or code.title(), **fields)


def make_numbered_countries(count: int, **fields: Any) -> list[Country]:
    return [make_country(f"C{index:02d}", f"Country {index:02d}", **fields) for index in range(count)]


@pytest.fixture
def usa() -> Country:
    return Country(
        code="USA",
        common_name="United States",
        official_name="United States of America",
        capitals=("Washington, D.C.",),
        population=329_484_123,
        region="Americas",
        subregion="North America",
        languages={"eng": "English"},
        currencies={"USD": CurrencyInfo(name="United States dollar", symbol="$")},
        flag_image_url="https://flagcdn.com/w320/us.png",
        area=9_372_610.0,
        borders=("CAN", "MEX"),
    )


@pytest.fixture
def canada() -> Country:
    return Country(
        code="CAN",
        common_name="Canada",
        official_name="Canada",
        capitals=("Ottawa",),
        population=38_005_238,
        region="Americas",
        subregion="North America",
        languages={"eng": "English", "fra": "French"},
        currencies={"CAD": CurrencyInfo(name="Canadian dollar", symbol="$")},
        area=9_984_670.0,
        borders=("USA",),
    )


@pytest.fixture
def japan() -> Country:
    return Country(
        code="JPN",
        common_name="Japan",
        official_name="Japan",
        capitals=("Tokyo",),
        population=125_836_021,
        region="Asia",
        subregion="Eastern Asia",
        languages={"jpn": "Japanese"},
        currencies={"JPY": CurrencyInfo(name="Japanese yen", symbol="¥")},
        area=377_930.0,
    )


@pytest.fixture
def sample_countries(usa: Country, canada: Country, japan: Country) -> list[Country]:
    return [usa, canada, japan]


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def favorites(memory_store: InMemoryKeyValueStore) -> FavoritesStore:
    return FavoritesStore(memory_store)


@pytest.fixture
def loaded_dataset(sample_countries: list[Country]) -> DatasetCache:
    dataset = DatasetCache()
    dataset.load(ProviderResult(ok=True, countries=tuple(sample_countries)))
    return dataset


@pytest.fixture
def raw_usa() -> dict[str, Any]:
    """A trimmed REST Countries v3.1 record."""

    return {
        "cca3": "usa",
        "name": {"common": "United States", "official": "United States of America"},
        "capital": ["Washington, D.C."],
        "population": 329484123,
        "region": "Americas",
        "subregion": "North America",
        "languages": {"eng": "English"},
        "currencies": {"USD": {"name": "United States dollar", "symbol": "$"}},
        "flags": {"png": "https://flagcdn.com/w320/us.png", "svg": "https://flagcdn.com/us.svg"},
        "area": 9372610,
        "borders": ["can", "MEX"],
    }
