"""Single-country lookups for the detail view."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from country_directory.schemas.country import CountryDetail
from country_directory.services.dataset import DatasetCache
from country_directory.services.favorites import FavoritesStore
from country_directory.services.normalization import normalize_code
from country_directory.services.provider import CountryProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountryDetailResult:
    ok: bool
    detail: CountryDetail | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.detail is not None


class CountryDetailService:
    """Resolves a country, preferring the loaded dataset over a provider call."""

    def __init__(
        self,
        provider: CountryProvider,
        *,
        dataset: DatasetCache | None = None,
        favorites: FavoritesStore | None = None,
    ) -> None:
        self._provider = provider
        self._dataset = dataset
        self._favorites = favorites

    async def get_detail(self, code: str) -> CountryDetailResult:
        normalized = normalize_code(code)
        if not normalized:
            return CountryDetailResult(ok=True)

        country = self._dataset.get(normalized) if self._dataset is not None else None
        if country is None:
            lookup = await self._provider.fetch_country(normalized)
            if not lookup.ok:
                return CountryDetailResult(ok=False, error=lookup.error)
            country = lookup.country
        if country is None:
            return CountryDetailResult(ok=True)

        exchange_rate: float | None = None
        if country.currencies:
            currency_code = next(iter(country.currencies))
            exchange_rate = await self._provider.fetch_exchange_rate(currency_code)
            if exchange_rate is None:
                logger.info("No exchange rate available for %s", currency_code)

        is_favorite = self._favorites.is_favorite(country.code) if self._favorites else False
        detail = CountryDetail.from_country(
            country, exchange_rate=exchange_rate, is_favorite=is_favorite
        )
        return CountryDetailResult(ok=True, detail=detail)


__all__ = ["CountryDetailResult", "CountryDetailService"]
