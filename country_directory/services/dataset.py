"""One-shot cache holding the loaded country dataset."""

from __future__ import annotations

import logging

from country_directory.errors import DatasetAlreadyLoadedError
from country_directory.schemas.country import Country
from country_directory.services.normalization import normalize_code
from country_directory.services.provider import CountryProvider, ProviderResult

logger = logging.getLogger(__name__)


class DatasetCache:
    """Accepts exactly one provider result and serves it to the pipeline.

    A failed provider result leaves an empty dataset with ``failed`` set; the
    cache never retries.
    """

    def __init__(self) -> None:
        self._countries: tuple[Country, ...] = ()
        self._by_code: dict[str, Country] = {}
        self._loaded = False
        self._failed = False
        self._error: str | None = None

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def error(self) -> str | None:
        return self._error

    def load(self, result: ProviderResult) -> None:
        if self._loaded:
            raise DatasetAlreadyLoadedError("The country dataset has already been loaded")

        self._loaded = True
        if not result.ok:
            self._failed = True
            self._error = result.error or "Country provider failed"
            logger.warning("Country dataset unavailable: %s", self._error)
            return

        self._countries = tuple(result.countries)
        self._by_code = {country.code: country for country in self._countries}
        logger.info(
            "Loaded %d countries (%dms)", len(self._countries), result.elapsed_ms
        )

    async def load_from(self, provider: CountryProvider) -> None:
        if self._loaded:
            raise DatasetAlreadyLoadedError("The country dataset has already been loaded")
        result = await provider.fetch_all()
        self.load(result)

    def get_all(self) -> tuple[Country, ...]:
        return self._countries

    def get(self, code: str) -> Country | None:
        return self._by_code.get(normalize_code(code))

    def __len__(self) -> int:
        return len(self._countries)


__all__ = ["DatasetCache"]
